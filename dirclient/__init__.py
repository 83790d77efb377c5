"""Directory (LDAP) client: authentication, attribute lookup and group membership."""

from .directory import AuthResult, DirectoryClient, DirectoryConfig
from .errors import (
    AmbiguousResultError,
    BindError,
    DirectoryConnectionError,
    DirectoryError,
    NotFoundError,
    SearchError,
)

__version__ = "0.1.0"

__all__ = [
    "AuthResult",
    "DirectoryClient",
    "DirectoryConfig",
    "DirectoryError",
    "DirectoryConnectionError",
    "BindError",
    "SearchError",
    "NotFoundError",
    "AmbiguousResultError",
]
