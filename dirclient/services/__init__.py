"""Service layer: wiring settings to directory clients."""

from .directory import directory_cfg_from_settings, directory_client_from_settings

__all__ = [
    "directory_cfg_from_settings",
    "directory_client_from_settings",
]
