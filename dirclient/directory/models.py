from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from ..errors import DirectoryError


@dataclass(frozen=True)
class DirectoryConfig:
    host: str
    port: int
    use_ssl: bool
    base_dn: str
    user_filter: str = "(uid=%s)"
    group_filter: str = "(memberUid=%s)"
    attributes: Tuple[str, ...] = ("uid", "cn", "mail")
    bind_dn: str = ""
    bind_password: str = field(default="", repr=False)
    server_name: str = ""
    ca_cert_file: str = ""
    connect_timeout: float = 10.0
    receive_timeout: float = 10.0
    search_retries: int = 3
    retry_backoff: float = 1.0
    bind_on_connect: bool = False

    def __post_init__(self) -> None:
        # Accept any iterable of names but keep the config hashable/immutable.
        object.__setattr__(self, "attributes", tuple(self.attributes or ()))

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    @property
    def has_service_account(self) -> bool:
        return bool(self.bind_dn and self.bind_password)

    @property
    def expected_server_name(self) -> str:
        return (self.server_name or "").strip() or self.host

    @property
    def retry_delays(self) -> Tuple[float, ...]:
        """Linear backoff: ``retry_backoff * n`` before retry ``n``."""
        retries = max(0, int(self.search_retries))
        return tuple(self.retry_backoff * n for n in range(1, retries + 1))


@dataclass
class AuthResult:
    """Outcome of a credential check.

    ``user`` is populated whenever the account was resolved, so a wrong
    password (``authenticated=False``) can be told apart from an unknown
    user. ``error`` is set on a failed credential bind and also when the
    credentials were valid but re-binding the service account failed.
    """
    authenticated: bool
    user: Dict[str, str] = field(default_factory=dict)
    dn: str = ""
    error: Optional[DirectoryError] = None
