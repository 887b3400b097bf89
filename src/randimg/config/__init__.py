"""Configuration management for randimg."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import RandimgConfig
from .resolver import (
    ENV_PREFIX,
    build_config,
    env_names,
    env_overrides,
    get_dotted,
    set_dotted,
)

DEFAULT_CONFIG_PATH = Path("~/.randimg/config.yaml")
_HEADER = "# randimg configuration file (edit with `randimg config edit` or `randimg config set`)\n"


def parse_document(text: str) -> dict[str, Any]:
    """Parse YAML configuration text into a mapping of sections.

    Raises:
        ConfigError: If the text is not YAML or not a mapping.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse configuration file: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("Configuration file must contain a mapping at the top level.")
    return data


class ConfigManager:
    """Own the YAML file at `config_path` and layer it with env and CLI overrides."""

    def __init__(self, config_path: Path | None = None, *, env: Mapping[str, str] | None = None) -> None:
        self.config_path = Path(config_path or DEFAULT_CONFIG_PATH).expanduser()
        self.env = os.environ if env is None else env

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
    ) -> RandimgConfig:
        """Return the effective configuration, creating a default file first if needed.

        Raises:
            ConfigError: If any layer is malformed or fails validation.
        """
        self.ensure_exists()
        return build_config(
            file=self.read(),
            env=env_overrides(self.env) if include_env else None,
            cli=cli_overrides,
        )

    def read(self) -> dict[str, Any]:
        """Return the sections stored in the file, or an empty mapping when it is absent."""
        if not self.config_path.exists():
            return {}
        return parse_document(self.config_path.read_text(encoding="utf-8"))

    def read_text(self) -> str:
        if not self.config_path.exists():
            return ""
        return self.config_path.read_text(encoding="utf-8")

    def save(self, data: RandimgConfig | Mapping[str, Any]) -> None:
        """Validate `data` and write it to the file.

        Raises:
            ConfigError: If `data` does not describe a valid configuration.
        """
        if isinstance(data, RandimgConfig):
            sections = data.model_dump(mode="json")
        else:
            sections = dict(data)
            build_config(file=sections)

        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        body = yaml.safe_dump(sections, sort_keys=False)
        self.config_path.write_text(f"{_HEADER}# Last updated: {stamp}\n{body}", encoding="utf-8")

    def update(self, key: str, value: Any) -> tuple[Any, Any]:
        """Set the dotted `key` in the file to `value`.

        The file is rewritten only when the effective value changes.

        Returns:
            tuple[Any, Any]: Effective value before and after the update.

        Raises:
            ConfigError: If the key is malformed or the result is invalid.
        """
        sections = self.read()
        before = get_dotted(build_config(file=sections), key)
        set_dotted(sections, key, value)
        after = get_dotted(build_config(file=sections), key)
        if after != before:
            self.save(sections)
        return before, after

    def ensure_exists(self) -> Path:
        """Write the default configuration if the file does not exist yet."""
        if not self.config_path.exists():
            self.save(RandimgConfig())
        return self.config_path


__all__ = [
    "ConfigError",
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "ENV_PREFIX",
    "RandimgConfig",
    "build_config",
    "env_names",
    "env_overrides",
    "parse_document",
    "set_dotted",
]
