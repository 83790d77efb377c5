"""LDAP directory client package.

Public API:
    - DirectoryConfig
    - AuthResult
    - DirectoryClient
"""

from .models import AuthResult, DirectoryConfig
from .client import DirectoryClient

__all__ = ["AuthResult", "DirectoryConfig", "DirectoryClient"]
