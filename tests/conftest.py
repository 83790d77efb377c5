from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from ldap3.core.exceptions import LDAPSocketReceiveError

from dirclient.directory import DirectoryClient, DirectoryConfig
import dirclient.directory.client as client_module


BASE_DN = "dc=example,dc=com"
SERVICE_DN = "cn=reader,dc=example,dc=com"
SERVICE_PW = "reader-secret"
ALICE_DN = "uid=alice,ou=people,dc=example,dc=com"

_OK = {"result": 0, "description": "success", "message": ""}
_INVALID_CREDENTIALS = {"result": 49, "description": "invalidCredentials", "message": ""}


class FakeConnection:
    """Scripted stand-in for ldap3.Connection.

    ``directory`` maps a search filter to a list of (dn, attributes) entries;
    ``passwords`` maps a DN to the password its bind accepts.
    """

    def __init__(self) -> None:
        self.directory: dict[str, list[tuple[str, dict]]] = {}
        self.passwords: dict[str, str] = {}
        self.result: dict = dict(_OK)
        self.response: list[dict] = []

        self.open_error: Exception | None = None
        self.start_tls_ok = True
        self.search_failures: list[object] = []

        self.opened = 0
        self.tls_started = 0
        self.unbound = 0
        self.binds: list[tuple[str, str]] = []
        self.searches: list[dict] = []

    def open(self) -> None:
        if self.open_error is not None:
            raise self.open_error
        self.opened += 1

    def start_tls(self) -> bool:
        self.tls_started += 1
        return self.start_tls_ok

    def rebind(self, user=None, password=None, **kwargs) -> bool:
        self.binds.append((user, password))
        ok = user in self.passwords and self.passwords[user] == password
        self.result = dict(_OK) if ok else dict(_INVALID_CREDENTIALS)
        return ok

    def search(self, **kwargs) -> bool:
        self.searches.append(kwargs)
        if self.search_failures:
            failure = self.search_failures.pop(0)
            if isinstance(failure, Exception):
                raise failure
            # A result dict: the server answered with an error code.
            self.result = dict(failure)
            self.response = []
            return False
        entries = self.directory.get(kwargs["search_filter"], [])
        self.response = [{"type": "searchResEntry", "dn": dn, "attributes": attrs} for dn, attrs in entries]
        self.response.append({"type": "searchResRef", "uri": ["ldap://other.example.com/"]})
        self.result = dict(_OK)
        return bool(entries)

    def unbind(self) -> bool:
        self.unbound += 1
        return True


def transient_error() -> LDAPSocketReceiveError:
    return LDAPSocketReceiveError("connection timed out")


@pytest.fixture
def fake_conn(monkeypatch) -> FakeConnection:
    conn = FakeConnection()
    conn.directory = {
        "(uid=alice)": [(ALICE_DN, {"uid": ["alice"], "cn": ["Alice A"], "mail": ["alice@example.com"]})],
        "(uid=carol)": [
            ("uid=carol,ou=people,dc=example,dc=com", {"cn": ["Carol One"], "mail": ["carol1@example.com"]}),
            ("uid=carol,ou=contractors,dc=example,dc=com", {"cn": ["Carol Two"], "mail": ["carol2@example.com"]}),
        ],
        "(memberUid=bob)": [
            ("cn=admins,ou=groups,dc=example,dc=com", {"cn": ["admins"]}),
            ("cn=devs,ou=groups,dc=example,dc=com", {"cn": ["devs"]}),
        ],
    }
    conn.passwords = {SERVICE_DN: SERVICE_PW, ALICE_DN: "wonderland"}

    conn.factory = MagicMock(name="Connection", return_value=conn)
    monkeypatch.setattr(client_module, "Connection", conn.factory)
    monkeypatch.setattr(client_module, "Server", MagicMock(name="Server"))
    monkeypatch.setattr(client_module, "Tls", MagicMock(name="Tls"))
    return conn


@pytest.fixture
def sleeps(monkeypatch) -> list[float]:
    recorded: list[float] = []
    monkeypatch.setattr(client_module.time, "sleep", recorded.append)
    return recorded


def make_config(**overrides) -> DirectoryConfig:
    values = dict(
        host="ldap.example.com",
        port=389,
        use_ssl=False,
        base_dn=BASE_DN,
        user_filter="(uid=%s)",
        group_filter="(memberUid=%s)",
        attributes=("cn", "mail"),
    )
    values.update(overrides)
    return DirectoryConfig(**values)


@pytest.fixture
def config() -> DirectoryConfig:
    return make_config()


@pytest.fixture
def service_config() -> DirectoryConfig:
    return make_config(bind_dn=SERVICE_DN, bind_password=SERVICE_PW)


@pytest.fixture
def client(config, fake_conn) -> DirectoryClient:
    return DirectoryClient(config)
