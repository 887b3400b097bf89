"""Layering of randimg configuration sources into one validated config."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Optional, Sequence

import yaml
from pydantic import ValidationError

from .exceptions import ConfigError
from .models import RandimgConfig

ENV_PREFIX = "RANDIMG__"


def set_dotted(target: dict[str, Any], key: str | Sequence[str], value: Any) -> None:
    """Store `value` under a dotted `key` such as ``cache.ttl_seconds``.

    Intermediate sections are created as needed.

    Raises:
        ConfigError: If the key is empty or passes through a non-mapping value.
    """
    parts = key.split(".") if isinstance(key, str) else list(key)
    parts = [part.strip() for part in parts if part.strip()]
    if not parts:
        raise ConfigError("Configuration keys look like 'section.field', e.g. 'cache.ttl_seconds'.")

    node = target
    for part in parts[:-1]:
        child = node.setdefault(part, {})
        if not isinstance(child, dict):
            raise ConfigError(f"Cannot set '{'.'.join(parts)}': '{part}' is not a section.")
        node = child
    node[parts[-1]] = value


def get_dotted(config: RandimgConfig, key: str) -> Any:
    """Return the value stored under a dotted `key`, or None when absent."""
    node: Any = config.model_dump(mode="json")
    for part in key.split("."):
        if not isinstance(node, dict):
            return None
        node = node.get(part.strip())
    return node


def env_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    """Collect ``RANDIMG__SECTION__FIELD`` variables as nested overrides.

    Values are read as YAML scalars so ``true`` and ``300`` arrive typed;
    anything YAML cannot parse is kept as the raw string.
    """
    overrides: dict[str, Any] = {}
    for name, raw in env.items():
        if not name.startswith(ENV_PREFIX):
            continue
        parts = [part.lower() for part in name[len(ENV_PREFIX) :].split("__") if part]
        if not parts:
            continue
        try:
            value = yaml.safe_load(raw)
        except yaml.YAMLError:
            value = raw
        set_dotted(overrides, parts, value)
    return overrides


def build_config(
    *,
    file: Optional[Mapping[str, Any]] = None,
    env: Optional[Mapping[str, Any]] = None,
    cli: Optional[Mapping[str, Any]] = None,
) -> RandimgConfig:
    """Apply file, environment and command-line overrides on top of the defaults.

    Later layers win field by field. Device entries under
    ``selection.preferences`` are merged per device rather than replaced, so a
    layer can retarget one device without restating the others. A string
    given for ``images.extensions`` is read as a comma-separated list.

    Raises:
        ConfigError: If a layer is malformed or the result fails validation.
    """
    merged = RandimgConfig().model_dump(mode="python")
    for origin, source in (("config file", file), ("environment", env), ("command line", cli)):
        if not source:
            continue
        for section, fields in _nest(source, origin).items():
            if section not in merged:
                raise ConfigError(f"Unknown configuration section '{section}' in {origin}.")
            if not isinstance(fields, dict):
                raise ConfigError(f"Section '{section}' in {origin} must be a mapping.")
            _apply_section(section, merged[section], fields)

    try:
        return RandimgConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def env_names(config: RandimgConfig) -> Dict[str, str]:
    """Return the environment variable name and value for every setting."""
    names: Dict[str, str] = {}
    for section, fields in config.model_dump(mode="json").items():
        for field, value in fields.items():
            base = f"{ENV_PREFIX}{section.upper()}__{field.upper()}"
            if isinstance(value, dict):
                for device, orientation in value.items():
                    names[f"{base}__{device.upper()}"] = str(orientation)
            elif isinstance(value, list):
                names[base] = ",".join(value)
            elif value is None or isinstance(value, bool):
                names[base] = yaml.safe_dump(value).splitlines()[0]
            else:
                names[base] = str(value)
    return names


def _nest(source: Mapping[str, Any], origin: str) -> dict[str, Any]:
    """Expand dotted keys at any depth into nested dictionaries."""
    nested: dict[str, Any] = {}

    def _walk(prefix: list[str], value: Any) -> None:
        if isinstance(value, Mapping) and value:
            for key, child in value.items():
                if not isinstance(key, str):
                    raise ConfigError(f"Keys in {origin} must be strings, got {key!r}.")
                _walk(prefix + key.split("."), child)
        elif not prefix:
            return
        else:
            set_dotted(nested, prefix, value)

    if not isinstance(source, Mapping):
        raise ConfigError(f"Overrides from {origin} must be a mapping.")
    _walk([], source)
    return nested


def _apply_section(section: str, target: dict[str, Any], fields: dict[str, Any]) -> None:
    for field, value in fields.items():
        if section == "selection" and field == "preferences" and isinstance(value, dict):
            current = target.get(field)
            table = dict(current) if isinstance(current, dict) else {}
            table.update({str(device).strip().lower(): choice for device, choice in value.items()})
            target[field] = table
        elif section == "images" and field == "extensions" and isinstance(value, str):
            target[field] = value.split(",")
        else:
            target[field] = value


__all__ = [
    "ENV_PREFIX",
    "build_config",
    "env_names",
    "env_overrides",
    "get_dotted",
    "set_dotted",
]
