from functools import lru_cache

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # App
    app_name: str = "Directory Client"

    # LDAP
    ldap_host: str = Field("", alias="LDAP_HOST")
    ldap_port: int = Field(389, alias="LDAP_PORT")
    ldap_use_ssl: bool = Field(False, alias="LDAP_USE_SSL")
    ldap_server_name: str = Field("", alias="LDAP_SERVER_NAME")
    ldap_base_dn: str = Field("", alias="LDAP_BASE_DN")
    ldap_bind_dn: str = Field("", alias="LDAP_BIND_DN")
    ldap_bind_password: str = Field("", alias="LDAP_BIND_PASSWORD")
    ldap_user_filter: str = Field("(uid=%s)", alias="LDAP_USER_FILTER")
    ldap_group_filter: str = Field("(memberUid=%s)", alias="LDAP_GROUP_FILTER")
    ldap_attributes: str = Field("uid,cn,mail", alias="LDAP_ATTRIBUTES")  # ',' or ';' separated
    ldap_ca_cert_file: str = Field("", alias="LDAP_CA_CERT_FILE")
    ldap_bind_on_connect: bool = Field(False, alias="LDAP_BIND_ON_CONNECT")

    # Timeouts / retries
    ldap_connect_timeout: float = Field(10.0, alias="LDAP_CONNECT_TIMEOUT")
    ldap_receive_timeout: float = Field(10.0, alias="LDAP_RECEIVE_TIMEOUT")
    ldap_search_retries: int = Field(3, ge=0, alias="LDAP_SEARCH_RETRIES")
    ldap_retry_backoff: float = Field(1.0, ge=0, alias="LDAP_RETRY_BACKOFF")

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_dir: str = Field("", alias="LOG_DIR")
    log_retention_days: int = Field(30, alias="LOG_RETENTION_DAYS")

    class Config:
        populate_by_name = True


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
