"""Configuration system for alpinekit using pydantic-settings.

Supports layered configuration:
1. Built-in defaults (lowest priority)
2. pyproject.toml [tool.alpinekit] section (project-level)
3. ./alpinekit.toml (project-level, explicit)
4. ~/.config/alpinekit/config.toml (user-level, overrides project)
5. Environment variables (highest priority)

Environment variables use ALPINEKIT_ prefix with nested delimiter __.
Example: ALPINEKIT_TOAST__POSITION, ALPINEKIT_SELECT__SEARCH_PLACEHOLDER
"""

from __future__ import annotations

import os
import sys

from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


def _find_config_files() -> list[Path]:
    """Find all configuration files in order of precedence (lowest first)."""
    files = []

    # Project-level pyproject.toml [tool.alpinekit] (lowest file priority)
    pyproject = Path("pyproject.toml")
    if pyproject.exists():
        files.append(pyproject)

    project_toml = Path("alpinekit.toml")
    if project_toml.exists():
        files.append(project_toml)

    # User-level config (overrides project configs)
    if sys.platform == "win32":
        user_config = Path(os.environ.get("APPDATA", "~")) / "alpinekit" / "config.toml"
    else:
        user_config = Path("~/.config/alpinekit/config.toml")
    user_config = user_config.expanduser()
    if user_config.exists():
        files.append(user_config)

    # Environment variable override for config file (highest file priority)
    env_config = os.environ.get("ALPINEKIT_CONFIG_FILE")
    if env_config:
        env_path = Path(env_config)
        if env_path.exists():
            files.append(env_path)

    return files


def _load_toml_config() -> dict[str, Any]:
    """Load and merge all TOML configuration files."""
    merged: dict[str, Any] = {}

    for config_file in _find_config_files():
        try:
            data = tomllib.loads(config_file.read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError):
            continue  # Invalid config files are ignored

        if config_file.name == "pyproject.toml":
            data = data.get("tool", {}).get("alpinekit", {})

        merged = _deep_merge(merged, data)

    return merged


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class SelectSettings(BaseSettings):
    """Default texts and behaviour for select components.

    Environment prefix: ALPINEKIT_SELECT__
    Example: ALPINEKIT_SELECT__NO_RESULTS_TEXT="Nothing here"
    """

    model_config = SettingsConfigDict(
        env_prefix="ALPINEKIT_SELECT__",
        extra="ignore",
    )

    searchable: bool = Field(default=True, description="Show the search input by default")
    search_placeholder: str = "Search..."
    no_results_text: str = "No results found"
    select_all_text: str = "Select All"
    max_height_class: str = Field(
        default="max-h-60",
        description="Utility class bounding the dropdown panel height",
    )
    single_placeholder: str = "Select option"
    multiple_placeholder: str = "Select options"


class ToastSettings(BaseSettings):
    """Default toast container settings.

    Environment prefix: ALPINEKIT_TOAST__
    Example: ALPINEKIT_TOAST__POSITION=bottom-right
    """

    model_config = SettingsConfigDict(
        env_prefix="ALPINEKIT_TOAST__",
        extra="ignore",
    )

    position: str = "top-right"
    max_width_class: str = "max-w-sm"
    z_index_class: str = "z-50"
    enable_sound: bool = False
    default_duration: int = Field(default=3000, ge=0, description="Auto-dismiss delay in ms")
    default_sound: str | None = Field(
        default=None,
        description="Sound URL used when a toast does not name one (requires enable_sound)",
    )

    @field_validator("position", mode="before")
    @classmethod
    def normalize_position(cls, v: Any) -> str:
        """Positions are matched case-insensitively."""
        return str(v or "").strip().lower()


class AssetSettings(BaseSettings):
    """Client library settings.

    Environment prefix: ALPINEKIT_ASSET__
    Example: ALPINEKIT_ASSET__ALPINE_VERSION="3.14.1"
    """

    model_config = SettingsConfigDict(
        env_prefix="ALPINEKIT_ASSET__",
        extra="ignore",
    )

    alpine_version: str = "3.14.1"
    alpine_url: str = Field(
        default="https://cdn.jsdelivr.net/npm/alpinejs@{version}/dist/cdn.min.js",
        description="Alpine.js script URL; {version} is replaced by alpine_version",
    )
    tailwind: bool = Field(default=True, description="Load the Tailwind CSS play CDN")
    tailwind_url: str = "https://cdn.tailwindcss.com"

    def alpine_src(self) -> str:
        """Resolve the Alpine.js script URL."""
        return self.alpine_url.replace("{version}", self.alpine_version)


class LogSettings(BaseSettings):
    """Logging settings.

    Environment prefix: ALPINEKIT_LOG__
    Example: ALPINEKIT_LOG__LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="ALPINEKIT_LOG__",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: str = "%(name)s - %(levelname)s - %(message)s"


class ServerSettings(BaseSettings):
    """Demo server settings.

    Environment prefix: ALPINEKIT_SERVER__
    Example: ALPINEKIT_SERVER__PORT=8080
    """

    model_config = SettingsConfigDict(
        env_prefix="ALPINEKIT_SERVER__",
        extra="ignore",
    )

    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)
    log_level: Literal["critical", "error", "warning", "info", "debug"] = "info"


_SECTIONS: list[tuple[str, str, str]] = [
    ("Select", "select", "SELECT"),
    ("Toast", "toast", "TOAST"),
    ("Assets", "asset", "ASSET"),
    ("Logging", "log", "LOG"),
    ("Server (Demo)", "server", "SERVER"),
]

_SECTION_TYPES: dict[str, type[BaseSettings]] = {
    "select": SelectSettings,
    "toast": ToastSettings,
    "asset": AssetSettings,
    "log": LogSettings,
    "server": ServerSettings,
}


def _env_overrides(name: str) -> bool:
    """Whether an environment variable named ``name`` is set (case-insensitive)."""
    target = name.upper()
    return any(key.upper() == target for key in os.environ)


class AlpineKitSettings(BaseSettings):
    """Main settings aggregating all configuration sections.

    Configuration sources (in order of precedence):
    1. Built-in defaults
    2. pyproject.toml [tool.alpinekit] section
    3. ./alpinekit.toml (project-level)
    4. ~/.config/alpinekit/config.toml (user-level, overrides project)
    5. Environment variables (highest priority)
    """

    model_config = SettingsConfigDict(
        env_prefix="ALPINEKIT__",
        env_nested_delimiter="__",
        extra="ignore",
    )

    select: SelectSettings = Field(default_factory=SelectSettings)
    toast: ToastSettings = Field(default_factory=ToastSettings)
    asset: AssetSettings = Field(default_factory=AssetSettings)
    log: LogSettings = Field(default_factory=LogSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)

    def __init__(self, **data: Any) -> None:
        toml_data = _load_toml_config()
        for _, section_name, env_prefix in _SECTIONS:
            values = toml_data.get(section_name)
            if isinstance(values, dict):
                # Environment variables outrank config files
                toml_data[section_name] = {
                    key: value
                    for key, value in values.items()
                    if not _env_overrides(f"ALPINEKIT_{env_prefix}__{key}")
                }

        # TOML first, explicit data takes precedence
        merged = _deep_merge(toml_data, data)
        for section_name, section_cls in _SECTION_TYPES.items():
            values = merged.get(section_name)
            if isinstance(values, dict):
                # Built through the section class so its env vars fill the gaps
                merged[section_name] = section_cls(**values)
        super().__init__(**merged)

    def to_toml(self) -> str:
        """Export settings as TOML string."""
        lines = ["# alpinekit Configuration", "# Generated by: alpinekit config --toml", ""]

        all_data = self.model_dump()
        for _, section_name, _ in _SECTIONS:
            lines.append(f"[{section_name}]")
            for field_name, field_value in all_data[section_name].items():
                if field_value is None:
                    continue  # TOML has no null
                if isinstance(field_value, bool):
                    value_str = "true" if field_value else "false"
                elif isinstance(field_value, str):
                    value_str = '"' + field_value.replace("\\", "\\\\").replace('"', '\\"') + '"'
                else:
                    value_str = str(field_value)
                lines.append(f"{field_name} = {value_str}")
            lines.append("")

        return "\n".join(lines)

    def to_env(self) -> str:
        """Export settings as shell environment variables."""
        lines = [
            "# alpinekit Environment Variables",
            "# Generated by: alpinekit config --env",
            "",
        ]

        all_data = self.model_dump()
        for _, section_name, env_prefix in _SECTIONS:
            for field_name, field_value in all_data[section_name].items():
                if field_value is None:
                    continue
                env_name = f"ALPINEKIT_{env_prefix}__{field_name.upper()}"
                if isinstance(field_value, bool):
                    value_str = "true" if field_value else "false"
                else:
                    value_str = str(field_value)
                lines.append(f'export {env_name}="{value_str}"')

        return "\n".join(lines)

    def show(self) -> str:
        """Format settings as a readable table."""
        lines = ["alpinekit Configuration", "=" * 60, ""]

        all_data = self.model_dump()
        for display_name, section_name, _ in _SECTIONS:
            lines.append(f"\n{display_name}")
            lines.append("-" * 40)
            for field_name, field_value in all_data[section_name].items():
                value_str = str(field_value)
                if len(value_str) > 50:
                    value_str = value_str[:47] + "..."
                lines.append(f"  {field_name:20} = {value_str}")

        return "\n".join(lines)


@lru_cache(maxsize=1)
def get_settings() -> AlpineKitSettings:
    """Get the global settings instance (cached).

    Call clear_settings() to reload configuration.
    """
    return AlpineKitSettings()


def clear_settings() -> None:
    """Clear the cached settings to force reload."""
    get_settings.cache_clear()


def reload_settings() -> AlpineKitSettings:
    """Reload settings from all sources."""
    clear_settings()
    return get_settings()
