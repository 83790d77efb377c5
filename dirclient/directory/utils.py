from __future__ import annotations

import re
from typing import Any

_PLACEHOLDER_RE = re.compile(r"%[%s]")


def escape_ldap_filter_value(value: str, keep_wildcards: bool = False) -> str:
    """RFC 4515 escaping for LDAP filter values."""
    out: list[str] = []
    for ch in value:
        if ch == "\\":
            out.append("\\5c")
        elif ch == "*" and not keep_wildcards:
            out.append("\\2a")
        elif ch == "(":
            out.append("\\28")
        elif ch == ")":
            out.append("\\29")
        elif ch == "\x00":
            out.append("\\00")
        else:
            out.append(ch)
    return "".join(out)


def escape_ldap_filter_pattern(value: str) -> str:
    """Like escape_ldap_filter_value but leaves ``*`` wildcards intact."""
    return escape_ldap_filter_value(value, keep_wildcards=True)


def format_filter(template: str, value: str) -> str:
    """Substitute ``value`` for every ``%s`` placeholder; ``%%`` yields a literal ``%``."""
    return _PLACEHOLDER_RE.sub(lambda m: value if m.group() == "%s" else "%", template or "")


def first_value(attributes: Any, name: str) -> str:
    """Return the first value of attribute ``name`` as a string ("" if absent).

    ldap3 returns scalars for single-valued attributes (when the schema is
    known) and lists otherwise.
    """
    if not attributes:
        return ""
    try:
        v = attributes[name]
    except KeyError:
        return ""
    if isinstance(v, (list, tuple)):
        if not v:
            return ""
        v = v[0]
    if v is None:
        return ""
    if isinstance(v, bytes):
        return v.decode("utf-8", errors="replace")
    return str(v)


def split_attribute_names(text: str) -> list[str]:
    if not text:
        return []
    return [x.strip() for x in text.replace(";", ",").split(",") if x.strip()]
