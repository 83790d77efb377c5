from __future__ import annotations

import logging
import ssl
import time
from typing import Any, Optional

from ldap3 import (
    Server,
    Connection,
    ALL,
    SUBTREE,
    DEREF_NEVER,
    AUTO_BIND_NONE,
    Tls,
)
from ldap3.core.exceptions import LDAPException
from ldap3.core.results import RESULT_SUCCESS

from ..errors import (
    AmbiguousResultError,
    BindError,
    DirectoryConnectionError,
    NotFoundError,
    SearchError,
    describe_result,
)
from .models import AuthResult, DirectoryConfig
from .utils import escape_ldap_filter_pattern, escape_ldap_filter_value, first_value, format_filter

log = logging.getLogger(__name__)


class DirectoryClient:
    """LDAP client owning a single, lazily opened session.

    Not thread-safe: the bind identity of the session is whatever bind ran
    last, so one client instance must be driven by one caller at a time.
    """

    def __init__(self, cfg: DirectoryConfig) -> None:
        self.cfg = cfg
        self.conn: Optional[Connection] = None

    def __enter__(self) -> "DirectoryClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    @property
    def is_connected(self) -> bool:
        return self.conn is not None

    def _server(self) -> Server:
        cfg = self.cfg
        if cfg.use_ssl:
            name = cfg.expected_server_name
            tls_kwargs: dict[str, Any] = {
                "validate": ssl.CERT_REQUIRED,
                "valid_names": [name],
                "sni": name,
            }
            if cfg.ca_cert_file:
                tls_kwargs["ca_certs_file"] = cfg.ca_cert_file
        else:
            # StartTLS upgrade encrypts the channel but does not authenticate the server.
            tls_kwargs = {"validate": ssl.CERT_NONE}

        return Server(
            host=cfg.host,
            port=cfg.port,
            use_ssl=cfg.use_ssl,
            get_info=ALL,
            tls=Tls(**tls_kwargs),
            connect_timeout=cfg.connect_timeout,
        )

    @staticmethod
    def _release(conn: Connection) -> None:
        try:
            conn.unbind()
        except LDAPException as e:
            log.debug("Ignoring error while releasing LDAP session: %s", e)

    def connect(self) -> None:
        """Open the session unless one is already open."""
        if self.conn is not None:
            return

        cfg = self.cfg
        conn: Optional[Connection] = None
        try:
            conn = Connection(
                self._server(),
                auto_bind=AUTO_BIND_NONE,
                receive_timeout=cfg.receive_timeout,
            )
            conn.open()
            upgraded = cfg.use_ssl or bool(conn.start_tls())
        except LDAPException as e:
            if conn is not None:
                self._release(conn)
            raise DirectoryConnectionError(f"Cannot connect to {cfg.address}: {e}") from e

        if not upgraded:
            res = describe_result(conn.result)
            self._release(conn)
            raise DirectoryConnectionError(f"StartTLS failed on {cfg.address}: {res}")

        self.conn = conn
        log.debug("Connected to %s (ldaps=%s)", cfg.address, cfg.use_ssl)

        if cfg.bind_on_connect and cfg.has_service_account:
            try:
                self._bind(cfg.bind_dn, cfg.bind_password)
            except BindError:
                self.close()
                raise

    def close(self) -> None:
        if self.conn is None:
            return
        conn, self.conn = self.conn, None
        self._release(conn)
        log.debug("Closed session to %s", self.cfg.address)

    def _session(self) -> Connection:
        if self.conn is None:
            raise DirectoryConnectionError(f"Not connected to {self.cfg.address}")
        return self.conn

    def _bind(self, dn: str, password: str) -> None:
        conn = self._session()
        try:
            ok = conn.rebind(user=dn, password=password)
        except LDAPException as e:
            raise BindError(f"Bind as {dn} failed: {e}", dn=dn) from e
        if not ok:
            raise BindError(f"Bind as {dn} failed: {describe_result(conn.result)}", dn=dn)

    def _search(self, search_filter: str, attributes: list[str]) -> list[dict]:
        conn = self._session()
        base = self.cfg.base_dn
        try:
            conn.search(
                search_base=base,
                search_filter=search_filter,
                search_scope=SUBTREE,
                dereference_aliases=DEREF_NEVER,
                attributes=attributes,
                size_limit=0,
                time_limit=0,
                types_only=False,
            )
        except LDAPException as e:
            raise SearchError(f"Search {search_filter} under {base} failed: {e}", search_filter) from e

        res = dict(conn.result or {})
        if res.get("result", RESULT_SUCCESS) != RESULT_SUCCESS:
            raise SearchError(
                f"Search {search_filter} under {base} failed: {describe_result(res)}", search_filter
            )
        # Referrals and other non-entry responses are skipped.
        return [r for r in (conn.response or []) if r.get("type") == "searchResEntry"]

    def _search_with_retry(self, search_filter: str, attributes: list[str]) -> list[dict]:
        delays = self.cfg.retry_delays
        attempt = 0
        while True:
            try:
                return self._search(search_filter, attributes)
            except SearchError as e:
                if attempt >= len(delays):
                    raise
                delay = delays[attempt]
                attempt += 1
                log.warning(
                    "Retrying search %s under %s (%d/%d) in %ss: %s",
                    search_filter, self.cfg.base_dn, attempt, len(delays), delay, e,
                )
                time.sleep(delay)

    def _user_from_entry(self, entry: dict) -> dict[str, str]:
        attrs = entry.get("attributes") or {}
        return {name: first_value(attrs, name) for name in self.cfg.attributes}

    @staticmethod
    def _single(entries: list[dict], username: str) -> dict:
        if len(entries) < 1:
            raise NotFoundError(f"User {username} does not exist")
        if len(entries) > 1:
            raise AmbiguousResultError(f"Too many entries returned for {username} ({len(entries)})")
        return entries[0]

    def _user_filter(self, username: str) -> str:
        return format_filter(self.cfg.user_filter, escape_ldap_filter_value(username))

    def search_user(self, username: str) -> dict[str, str]:
        """Return the configured attributes of the single entry matching ``username``."""
        self.connect()
        entries = self._search_with_retry(self._user_filter(username), list(self.cfg.attributes))
        return self._user_from_entry(self._single(entries, username))

    def authenticate(self, username: str, password: str) -> AuthResult:
        """Check ``password`` for ``username`` by binding as the resolved DN.

        Connection, service-account bind and lookup failures raise. The outcome
        of the credential bind itself is reported through the returned
        :class:`AuthResult`.
        """
        cfg = self.cfg
        self.connect()

        if cfg.has_service_account:
            self._bind(cfg.bind_dn, cfg.bind_password)

        # Single attempt: this lookup is not retried.
        entries = self._search(self._user_filter(username), list(cfg.attributes))
        entry = self._single(entries, username)
        user_dn = str(entry.get("dn") or "")
        user = self._user_from_entry(entry)

        if not password:
            log.info("Rejected empty password for %s", user_dn)
            return AuthResult(False, user, user_dn, BindError("Empty password", dn=user_dn))

        try:
            self._bind(user_dn, password)
        except BindError as e:
            log.info("Credential check failed for %s", user_dn)
            return AuthResult(False, user, user_dn, e)

        if cfg.has_service_account:
            try:
                self._bind(cfg.bind_dn, cfg.bind_password)
            except BindError as e:
                log.warning("Authenticated %s but service account rebind failed: %s", user_dn, e)
                return AuthResult(True, user, user_dn, e)

        log.info("Authenticated %s", user_dn)
        return AuthResult(True, user, user_dn)

    def groups_of_user(self, username: str) -> list[str]:
        """Return the ``cn`` of every group matching the group filter, in response order."""
        self.connect()
        flt = format_filter(self.cfg.group_filter, escape_ldap_filter_value(username))
        entries = self._search_with_retry(flt, ["cn"])
        return [first_value(e.get("attributes"), "cn") for e in entries]

    def find_users(self, search_term: str) -> list[dict[str, str]]:
        self.connect()
        # The term is a filter pattern: only `*` wildcards pass through unescaped.
        flt = format_filter(self.cfg.user_filter, escape_ldap_filter_pattern(search_term))
        entries = self._search_with_retry(flt, list(self.cfg.attributes))
        if not entries:
            raise NotFoundError(f"No users match {search_term}")
        return [self._user_from_entry(e) for e in entries]
