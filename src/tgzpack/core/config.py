"""Configuration resolver with layered priority.

Priority (highest to lowest):
1. CLI arguments
2. Environment variables (TGZPACK_*)
3. Config files (user > system)
4. Defaults

The archive functions themselves take explicit arguments and never consult
configuration; only the service facade and the command line resolve defaults
through this module.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from tgzpack.core.errors import ConfigError

ALLOWED_LOGGING_LEVELS = frozenset({"quiet", "normal", "verbose", "debug"})
DEFAULT_LOGGING_LEVEL = "normal"

MIN_COMPRESSION_LEVEL = -1
MAX_COMPRESSION_LEVEL = 9

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})
_FALSE_STRINGS = frozenset({"0", "false", "no", "off"})


@dataclass
class ConfigSource:
    """Represents where a config value came from."""

    value: Any
    source: str  # 'cli' | 'env' | 'user_config' | 'system_config' | 'default'


@dataclass(frozen=True)
class LoggingPolicy:
    """Resolved, immutable logging policy."""

    level_name: str  # quiet | normal | verbose | debug
    emit_error: bool
    emit_warning: bool
    emit_info: bool
    emit_verbose: bool
    emit_debug: bool
    sources: dict[str, ConfigSource]


class ConfigResolver:
    """Resolve configuration with strict priority.

    Example:
        resolver = ConfigResolver(
            cli_args={'archive': {'compression_level': 9}},
            user_config_path=Path('~/.config/tgzpack/config.yaml'),
        )

        level, source = resolver.resolve('archive.compression_level')
        # level = 9, source = 'cli'
    """

    def __init__(
        self,
        cli_args: dict[str, Any] | None = None,
        user_config_path: Path | None = None,
        system_config_path: Path | None = None,
        defaults: dict[str, Any] | None = None,
    ) -> None:
        """Initialize config resolver.

        Args:
            cli_args: Arguments from CLI (highest priority); nested dicts or
                flat dot-notation keys
            user_config_path: Path to user config file
            system_config_path: Path to system config file
            defaults: Default values (lowest priority)
        """
        self.cli_args = cli_args or {}
        self.user_config_path = user_config_path or Path.home() / ".config/tgzpack/config.yaml"
        self.system_config_path = system_config_path or Path("/etc/tgzpack/config.yaml")
        self.defaults = self._default_config() if defaults is None else defaults

        self._user_config: dict[str, Any] | None = None
        self._system_config: dict[str, Any] | None = None

    def resolve(self, key: str) -> tuple[Any, str]:
        """Resolve config value with priority.

        Args:
            key: Config key (supports dot notation: 'archive.prefix')

        Returns:
            (value, source) tuple

        Raises:
            ConfigError: If key not found in any source
        """
        value = self._from_cli(key)
        if value is not None:
            return value, "cli"

        value = self._from_env(key)
        if value is not None:
            return value, "env"

        value = self._get_nested(self._get_user_config(), key)
        if value is not None:
            return value, "user_config"

        value = self._get_nested(self._get_system_config(), key)
        if value is not None:
            return value, "system_config"

        value = self._get_nested(self.defaults, key)
        if value is not None:
            return value, "default"

        raise ConfigError(f"Config key '{key}' not found in any source")

    def resolve_compression_level(self, key: str = "archive.compression_level") -> int:
        """Resolve and validate the gzip compression level.

        Accepts ints and numeric strings (environment values are strings).

        Raises:
            ConfigError: If the value is not an integer in -1..9.
        """
        value, _src = self.resolve(key)
        if isinstance(value, bool):
            raise ConfigError(f"Config key '{key}' must be an int, got bool")
        if isinstance(value, str):
            try:
                value = int(value.strip())
            except ValueError:
                raise ConfigError(f"Config key '{key}' must be an int, got {value!r}") from None
        if not isinstance(value, int):
            raise ConfigError(f"Config key '{key}' must be an int, got {type(value).__name__}")
        if not MIN_COMPRESSION_LEVEL <= value <= MAX_COMPRESSION_LEVEL:
            raise ConfigError(
                f"Invalid '{key}': {value}. "
                f"Allowed range: {MIN_COMPRESSION_LEVEL}..{MAX_COMPRESSION_LEVEL}"
            )
        return value

    def resolve_prefix(self, key: str = "archive.prefix") -> str:
        """Resolve the archive path prefix (empty string when unset)."""
        found = self._try_resolve_value(key)
        if found is None:
            return ""
        value, _src = found
        if not isinstance(value, str):
            raise ConfigError(f"Config key '{key}' must be a string, got {type(value).__name__}")
        return value

    def resolve_bool(self, key: str, default: bool = False) -> bool:
        """Resolve a boolean flag; missing keys fall back to ``default``."""
        found = self._try_resolve_value(key)
        if found is None:
            return default
        value, _src = found
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            norm = value.strip().lower()
            if norm in _TRUE_STRINGS:
                return True
            if norm in _FALSE_STRINGS:
                return False
        raise ConfigError(f"Config key '{key}' must be a bool, got {value!r}")

    def resolve_logging_level(self) -> str:
        """Resolve and validate logging.level.

        Allowed values (after normalization): quiet | normal | verbose | debug.
        Returns DEFAULT_LOGGING_LEVEL when no source provides the key.

        Raises:
            ConfigError: If the resolved value is invalid.
        """
        level, _src = self._resolve_logging_level_and_source()
        return level

    def resolve_logging_policy(self) -> LoggingPolicy:
        """Resolve the logging policy without touching runtime logging state."""
        level_name, src = self._resolve_logging_level_and_source()
        rank = ["quiet", "normal", "verbose", "debug"].index(level_name)

        return LoggingPolicy(
            level_name=level_name,
            emit_error=True,
            emit_warning=True,
            emit_info=rank >= 1,
            emit_verbose=rank >= 2,
            emit_debug=rank >= 3,
            sources={"level_name": src},
        )

    def _resolve_logging_level_and_source(self) -> tuple[str, ConfigSource]:
        key = "logging.level"
        found = self._try_resolve_value(key)
        if found is None:
            return DEFAULT_LOGGING_LEVEL, ConfigSource(value=DEFAULT_LOGGING_LEVEL, source="default")

        value, source = found
        if not isinstance(value, str):
            raise ConfigError(f"Config key '{key}' must be a string, got {type(value).__name__}")
        norm = value.strip().lower()
        if norm not in ALLOWED_LOGGING_LEVELS:
            allowed = ", ".join(sorted(ALLOWED_LOGGING_LEVELS))
            raise ConfigError(f"Invalid '{key}': {value!r}. Allowed values: {allowed}")
        return norm, ConfigSource(value=norm, source=source)

    def _try_resolve_value(self, key: str) -> tuple[Any, str] | None:
        try:
            return self.resolve(key)
        except ConfigError as e:
            if "not found in any source" in str(e):
                return None
            raise

    def _from_cli(self, key: str) -> Any | None:
        if key in self.cli_args:
            return self.cli_args[key]
        return self._get_nested(self.cli_args, key)

    def _from_env(self, key: str) -> Any | None:
        """Get value from environment variables.

        Example: archive.compression_level -> TGZPACK_ARCHIVE_COMPRESSION_LEVEL
        """
        env_key = f"TGZPACK_{key.upper().replace('.', '_')}"
        return os.environ.get(env_key)

    def _get_user_config(self) -> dict[str, Any]:
        if self._user_config is None:
            self._user_config = self._load_yaml(self.user_config_path)
        return self._user_config

    def _get_system_config(self) -> dict[str, Any]:
        if self._system_config is None:
            self._system_config = self._load_yaml(self.system_config_path)
        return self._system_config

    def _load_yaml(self, path: Path) -> dict[str, Any]:
        if not path.exists():
            return {}

        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load config from {path}: {e}") from e
        return data if isinstance(data, dict) else {}

    def _get_nested(self, data: dict[str, Any], key: str) -> Any | None:
        """Get nested value using dot notation.

        Example:
            data = {'archive': {'prefix': 'a/b'}}
            _get_nested(data, 'archive.prefix') -> 'a/b'
        """
        current: Any = data
        for part in key.split("."):
            if not isinstance(current, dict):
                return None
            current = current.get(part)
            if current is None:
                return None
        return current

    @staticmethod
    def _default_config() -> dict[str, Any]:
        return {
            "archive": {
                "compression_level": -1,
                "prefix": "",
                "debug": {
                    "include_trace": False,
                    "include_stack": False,
                },
            },
            "logging": {
                "level": DEFAULT_LOGGING_LEVEL,
                "color": True,
            },
        }
