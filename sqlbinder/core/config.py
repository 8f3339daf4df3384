"""Configuration for the sqlbinder core.

Settings are grouped into frozen dataclasses and aggregated by
``BinderConfig``. A process-wide instance is available through
``get_global_config`` and may be replaced with ``set_global_config``.

Environment Variables:
- SQLBINDER_STRICT_PLACEHOLDERS: Raise on ``:`` without an identifier (true/false)
- SQLBINDER_MAX_SQL_LENGTH: Maximum SQL template length in characters (integer)
- SQLBINDER_ENABLE_CACHING: Enable the parsed template cache (true/false)
- SQLBINDER_MAX_CACHE_SIZE: Maximum number of cached templates (integer)
- SQLBINDER_ENABLE_CACHE_STATS: Record cache hit/miss statistics (true/false)
"""

import os
import threading
from dataclasses import dataclass, field, replace
from typing import Any, Final, Optional

from sqlbinder.exceptions import ImproperConfigurationError
from sqlbinder.utils.logging import get_logger

__all__ = (
    "BinderConfig",
    "CacheConfiguration",
    "ParserConfiguration",
    "create_default_config",
    "get_global_config",
    "load_config_from_env",
    "set_global_config",
    "validate_config",
)

logger = get_logger("sqlbinder.core.config")

DEFAULT_MAX_SQL_LENGTH: Final = 1024 * 1024
DEFAULT_CACHE_SIZE: Final = 5000


@dataclass(frozen=True)
class ParserConfiguration:
    """Placeholder parser settings."""

    strict_placeholders: bool = False
    max_sql_length: int = DEFAULT_MAX_SQL_LENGTH


@dataclass(frozen=True)
class CacheConfiguration:
    """Parsed template cache settings."""

    enable_caching: bool = True
    max_cache_size: int = DEFAULT_CACHE_SIZE
    enable_cache_stats: bool = True


@dataclass(frozen=True)
class BinderConfig:
    """Aggregate configuration for parsing, caching and binding."""

    parser_config: ParserConfiguration = field(default_factory=ParserConfiguration)
    cache_config: CacheConfiguration = field(default_factory=CacheConfiguration)

    def validate(self) -> "list[str]":
        """Check the configuration for out-of-range values.

        Returns:
            List of validation errors (empty if valid)
        """
        errors: list[str] = []
        if self.parser_config.max_sql_length <= 0:
            errors.append("max_sql_length must be positive")
        if self.cache_config.max_cache_size <= 0:
            errors.append("max_cache_size must be positive")
        return errors

    def replace(self, **changes: Any) -> "BinderConfig":
        """Return a copy with the given top-level sections replaced."""
        return replace(self, **changes)


_global_config: Optional[BinderConfig] = None
_config_lock = threading.Lock()


def create_default_config() -> BinderConfig:
    """Create default configuration.

    Returns:
        BinderConfig with default values for all settings
    """
    return BinderConfig(parser_config=ParserConfiguration(), cache_config=CacheConfiguration())


def validate_config(config: BinderConfig) -> "list[str]":
    """Validate configuration completeness and consistency.

    Args:
        config: Configuration to validate

    Returns:
        List of validation errors (empty if valid)
    """
    return config.validate()


def get_global_config() -> BinderConfig:
    """Get the process-wide configuration, creating the default on first use."""
    global _global_config
    if _global_config is None:
        with _config_lock:
            if _global_config is None:
                _global_config = create_default_config()
    return _global_config


def set_global_config(config: BinderConfig) -> None:
    """Replace the process-wide configuration.

    Args:
        config: New configuration

    Raises:
        ImproperConfigurationError: If the configuration does not validate.
    """
    errors = config.validate()
    if errors:
        msg = f"Invalid configuration: {'; '.join(errors)}"
        raise ImproperConfigurationError(msg)

    global _global_config
    with _config_lock:
        _global_config = config
    logger.info(
        "Global configuration updated",
        extra={
            "extra_fields": {
                "strict_placeholders": config.parser_config.strict_placeholders,
                "enable_caching": config.cache_config.enable_caching,
                "max_cache_size": config.cache_config.max_cache_size,
            }
        },
    )


def load_config_from_env() -> BinderConfig:
    """Load configuration from ``SQLBINDER_*`` environment variables.

    Returns:
        BinderConfig loaded from environment variables
    """
    parser_config = ParserConfiguration(
        strict_placeholders=_env_bool("SQLBINDER_STRICT_PLACEHOLDERS", False),
        max_sql_length=_env_int("SQLBINDER_MAX_SQL_LENGTH", DEFAULT_MAX_SQL_LENGTH),
    )
    cache_config = CacheConfiguration(
        enable_caching=_env_bool("SQLBINDER_ENABLE_CACHING", True),
        max_cache_size=_env_int("SQLBINDER_MAX_CACHE_SIZE", DEFAULT_CACHE_SIZE),
        enable_cache_stats=_env_bool("SQLBINDER_ENABLE_CACHE_STATS", True),
    )
    return BinderConfig(parser_config=parser_config, cache_config=cache_config)


def _env_bool(key: str, default: bool) -> bool:
    """Get boolean value from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on", "enabled")


def _env_int(key: str, default: int) -> int:
    """Get integer value from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Invalid integer value for %s: %s, using default %d", key, value, default)
        return default
