"""Configuration structures and loading for commitstreak."""

import os
from pathlib import Path

import msgspec


# Default values
DEFAULT_TIMEOUT = 30.0
DEFAULT_CONNECT_TIMEOUT = 10.0
DEFAULT_BASE_URL = "https://api.github.com"
DEFAULT_USER_AGENT = "commitstreak/0.1.0"
DEFAULT_CHECK_INTERVAL_MINUTES = 15


# Fetch configuration
class FetchConfig(msgspec.Struct, omit_defaults=True):
    """HTTP gateway settings."""

    timeout: float = DEFAULT_TIMEOUT
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    base_url: str = DEFAULT_BASE_URL
    user_agent: str = DEFAULT_USER_AGENT


# Retry configuration
class RetrySettings(msgspec.Struct, omit_defaults=True):
    """Retry/backoff settings (delays in seconds)."""

    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    backoff_factor: float = 2.0


# Response cache configuration
class CacheConfig(msgspec.Struct, omit_defaults=True):
    """In-memory response cache settings.

    ``ttls`` maps a cache category (e.g. "user-events") to a TTL in seconds,
    overriding the built-in default for that category.
    """

    max_entries: int = 100
    default_ttl: float = 300.0
    ttls: dict[str, float] = msgspec.field(default_factory=dict)


# Detection configuration
class DetectionConfig(msgspec.Struct, omit_defaults=True):
    """Commit detection and streak settings."""

    methods: list[str] = msgspec.field(
        default_factory=lambda: ["events", "search", "repositories"]
    )
    events_per_page: int = 100
    streak_pages: int = 3
    max_repositories: int = 15
    repository_ceiling: int = 20
    recent_days: int = 7
    repository_concurrency: int = 3
    exclude_merge_commits: bool = False
    concurrent_methods: bool = True
    validate_token: bool = True


# Main configuration
class Config(msgspec.Struct, omit_defaults=True):
    """Main configuration structure."""

    username: str | None = None
    check_interval_minutes: int = DEFAULT_CHECK_INTERVAL_MINUTES
    fetch: FetchConfig = msgspec.field(default_factory=FetchConfig)
    retry: RetrySettings = msgspec.field(default_factory=RetrySettings)
    cache: CacheConfig = msgspec.field(default_factory=CacheConfig)
    detection: DetectionConfig = msgspec.field(default_factory=DetectionConfig)


def _load_from_toml(path: Path) -> dict:
    """Load configuration from TOML file."""
    import tomllib

    if not path.exists():
        return {}

    with path.open("rb") as f:
        return tomllib.load(f)


def _save_to_toml(data: dict, path: Path) -> None:
    """Save configuration to TOML file."""
    import tomli_w

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        tomli_w.dump(data, f)


def convert_config(data: dict) -> Config:
    """Convert raw dict to Config struct."""
    return msgspec.convert(data, type=Config)


def _apply_env_overrides(config: Config) -> Config:
    """Apply environment variable overrides to config.

    COMMITSTREAK_USERNAME: GitHub username to check
    COMMITSTREAK_CHECK_INTERVAL: Minutes between checks in watch mode
    """
    if username := os.environ.get("COMMITSTREAK_USERNAME", "").strip():
        config = msgspec.structs.replace(config, username=username)

    if interval := os.environ.get("COMMITSTREAK_CHECK_INTERVAL", "").strip():
        try:
            config = msgspec.structs.replace(
                config, check_interval_minutes=int(interval)
            )
        except ValueError:
            pass  # Ignore malformed override

    return config


# Config state storage
_config: Config | None = None


def get_config() -> Config:
    """Get the current configuration (singleton)."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> Config:
    """Reload configuration from disk."""
    global _config
    _config = load_config()
    return _config


def load_config(path: Path | None = None) -> Config:
    """Load configuration from file with defaults."""
    from .paths import config_file

    config_path = path or config_file()

    raw_data = _load_from_toml(config_path)
    if not raw_data:
        config = Config()
    else:
        config = convert_config(raw_data)

    return _apply_env_overrides(config)


def save_config(config: Config, path: Path | None = None) -> None:
    """Save configuration to file."""
    from .paths import config_file

    config_path = path or config_file()

    data = msgspec.to_builtins(config)

    # TOML has no null
    def clean_none(d: dict) -> dict:
        return {
            k: clean_none(v) if isinstance(v, dict) else v
            for k, v in d.items()
            if v is not None
        }

    _save_to_toml(clean_none(data), config_path)

    global _config
    _config = config


# Sections whose scalar and list fields can be set from the CLI
CONFIG_SECTIONS = ("fetch", "retry", "cache", "detection")

KNOWN_METHODS = frozenset({"events", "search", "repositories"})


def settable_keys() -> list[str]:
    """Keys accepted by set_config_value, as ``field`` or ``section.field``."""
    defaults = Config()
    keys = ["username", "check_interval_minutes"]
    for section in CONFIG_SECTIONS:
        values = getattr(defaults, section)
        keys.extend(
            f"{section}.{name}"
            for name in values.__struct_fields__
            if not isinstance(getattr(values, name), dict)
        )
    return keys


def get_config_value(config: Config, key: str) -> object:
    section, _, name = key.rpartition(".")
    target = getattr(config, section) if section else config
    return getattr(target, name)


def set_config_value(key: str, value: str, path: Path | None = None) -> Config:
    """Persist one setting given in its string form.

    Only the file's own contents are rewritten; environment overrides are
    never saved. List settings take a comma-separated value.

    Raises:
        ValueError: Unknown key, or a value that does not fit the setting
    """
    from .paths import config_file

    if key not in settable_keys():
        raise ValueError(f"Unknown setting: {key}")

    config_path = path or config_file()
    raw = _load_from_toml(config_path)

    section, _, name = key.rpartition(".")
    target = raw.setdefault(section, {}) if section else raw
    if isinstance(get_config_value(Config(), key), list):
        items = [item.strip() for item in value.split(",") if item.strip()]
        if key == "detection.methods" and not set(items) <= KNOWN_METHODS:
            unknown = ", ".join(sorted(set(items) - KNOWN_METHODS))
            raise ValueError(f"Unknown detection method(s): {unknown}")
        target[name] = items
    else:
        target[name] = value

    try:
        config = msgspec.convert(raw, type=Config, strict=False)
    except msgspec.ValidationError as e:
        raise ValueError(f"Invalid value for {key}: {e}") from None

    save_config(config, config_path)
    return config


def reset_config(path: Path | None = None) -> bool:
    """Delete the config file. Returns False when there was none."""
    from .paths import config_file

    global _config
    _config = None

    config_path = path or config_file()
    if not config_path.exists():
        return False
    config_path.unlink()
    return True
