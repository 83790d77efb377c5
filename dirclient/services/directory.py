from __future__ import annotations

from ..directory import DirectoryClient, DirectoryConfig
from ..directory.utils import split_attribute_names
from ..settings import Settings


def directory_cfg_from_settings(st: Settings) -> DirectoryConfig | None:
    """Build DirectoryConfig from settings; None when the directory is not configured."""
    host = (st.ldap_host or "").strip()
    base_dn = (st.ldap_base_dn or "").strip()
    if not host or not base_dn:
        return None

    return DirectoryConfig(
        host=host,
        port=st.ldap_port,
        use_ssl=st.ldap_use_ssl,
        base_dn=base_dn,
        user_filter=st.ldap_user_filter,
        group_filter=st.ldap_group_filter,
        attributes=tuple(split_attribute_names(st.ldap_attributes)),
        bind_dn=(st.ldap_bind_dn or "").strip(),
        bind_password=st.ldap_bind_password or "",
        server_name=(st.ldap_server_name or "").strip(),
        ca_cert_file=(st.ldap_ca_cert_file or "").strip(),
        connect_timeout=st.ldap_connect_timeout,
        receive_timeout=st.ldap_receive_timeout,
        search_retries=st.ldap_search_retries,
        retry_backoff=st.ldap_retry_backoff,
        bind_on_connect=st.ldap_bind_on_connect,
    )


def directory_client_from_settings(st: Settings) -> DirectoryClient | None:
    cfg = directory_cfg_from_settings(st)
    if not cfg:
        return None
    return DirectoryClient(cfg)
