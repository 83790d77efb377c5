from __future__ import annotations


class DirectoryError(Exception):
    """Base class for all directory client errors."""


class DirectoryConnectionError(DirectoryError, ConnectionError):
    """Dial or TLS upgrade failed."""


class BindError(DirectoryError):
    def __init__(self, message: str, dn: str = "") -> None:
        super().__init__(message)
        self.dn = dn


class SearchError(DirectoryError):
    def __init__(self, message: str, search_filter: str = "") -> None:
        super().__init__(message)
        self.search_filter = search_filter


class NotFoundError(DirectoryError):
    """No entry matched the filter."""


class AmbiguousResultError(DirectoryError):
    """More than one entry matched where exactly one was required."""


def describe_result(result: dict | None) -> str:
    """Human readable text for an ldap3 ``Connection.result`` dict."""
    res = dict(result or {})
    desc = str(res.get("description") or "").strip()
    msg = str(res.get("message") or "").strip()
    if desc and msg and msg != desc:
        return f"{desc}: {msg}"
    return desc or msg or "unknown error"
