"""Directory (LDAP) connection settings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

from .env import env_flag, optional_env_var, require_env_vars

DEFAULT_KEY_ATTRIBUTE: Final[str] = "sAMAccountName"
DIRECTORY_CONNECT_TIMEOUT_SECONDS: Final[int] = 10


@dataclass(frozen=True)
class DirectoryConfig:
    """Holds the values needed to bind to the directory."""

    url: str
    bind_user: str
    password: str = field(repr=False)
    search_base: str | None = None
    configuration_base: str | None = None
    key_attribute: str = DEFAULT_KEY_ATTRIBUTE
    verify_tls: bool = True
    connect_timeout: int = DIRECTORY_CONNECT_TIMEOUT_SECONDS


def get_directory_config() -> DirectoryConfig:
    values = require_env_vars(
        ("UPNSHIFT_LDAP_URL", "UPNSHIFT_BIND_USER", "UPNSHIFT_BIND_PASSWORD")
    )
    return DirectoryConfig(
        url=values["UPNSHIFT_LDAP_URL"].strip(),
        bind_user=values["UPNSHIFT_BIND_USER"].strip(),
        password=values["UPNSHIFT_BIND_PASSWORD"],
        search_base=optional_env_var("UPNSHIFT_SEARCH_BASE"),
        configuration_base=optional_env_var("UPNSHIFT_CONFIGURATION_BASE"),
        key_attribute=optional_env_var("UPNSHIFT_KEY_ATTRIBUTE", DEFAULT_KEY_ATTRIBUTE)
        or DEFAULT_KEY_ATTRIBUTE,
        verify_tls=not env_flag("UPNSHIFT_TLS_NO_VERIFY"),
    )
