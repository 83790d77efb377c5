from __future__ import annotations

from typing import Iterator

from fastapi import HTTPException, status

from .directory import DirectoryClient
from .services import directory_client_from_settings
from .settings import get_settings


def get_directory_client() -> Iterator[DirectoryClient]:
    """One client (and session) per request, closed when the request ends."""
    client = directory_client_from_settings(get_settings())
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Directory is not configured (set LDAP_HOST and LDAP_BASE_DN).",
        )
    try:
        yield client
    finally:
        client.close()
