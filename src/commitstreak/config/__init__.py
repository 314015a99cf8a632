"""Configuration management for commitstreak."""

from commitstreak.config.credentials import (
    TOKEN_ENV_VARS,
    find_token,
    resolve_credential,
)
from commitstreak.config.paths import (
    config_dir,
    config_file,
)
from commitstreak.config.settings import (
    CacheConfig,
    Config,
    DetectionConfig,
    FetchConfig,
    RetrySettings,
    get_config,
    load_config,
    reload_config,
    reset_config,
    save_config,
    set_config_value,
    settable_keys,
)

__all__ = [
    # paths
    "config_dir",
    "config_file",
    # settings
    "Config",
    "FetchConfig",
    "RetrySettings",
    "CacheConfig",
    "DetectionConfig",
    "get_config",
    "load_config",
    "reload_config",
    "reset_config",
    "save_config",
    "set_config_value",
    "settable_keys",
    # credentials
    "TOKEN_ENV_VARS",
    "find_token",
    "resolve_credential",
]
