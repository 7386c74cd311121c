"""Loading and writing the application configuration."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from .paths import expand_path

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".trancome.yaml"
_KEYS = ("database_dir", "shared_db", "user_db_dir")


@dataclass
class Config:
    """Settings that locate the databases."""

    database_dir: str = ""
    shared_db: str = ""
    user_db_dir: str = ""
    config_file: str = field(default="", compare=False)

    def to_dict(self) -> dict[str, str]:
        """Return the stored settings keyed by their configuration names."""
        return {key: getattr(self, key) for key in _KEYS}


def default_config_path() -> Path:
    """Return the location of the configuration file in the home directory."""
    return Path.home() / CONFIG_FILE_NAME


def default_values() -> dict[str, str]:
    """Return the settings used when nothing else provides them."""
    try:
        home = str(Path.home())
    except (RuntimeError, KeyError):
        home = "."
    return {
        "database_dir": os.path.join(home, ".trancome", "databases"),
        "shared_db": "shared.db",
        "user_db_dir": "users",
    }


def write_config(path: str | os.PathLike[str], values: Mapping[str, Any]) -> None:
    """Write ``values`` as YAML to ``path``, creating parent directories."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(
        yaml.safe_dump(dict(values), default_flow_style=False), encoding="utf-8"
    )


def _read_file(path: Path) -> dict[str, Any] | None:
    """Return the file's settings, or None if it cannot be read as a mapping."""
    try:
        text = path.read_text(encoding="utf-8")
        data = yaml.safe_load(text)
    except (OSError, yaml.YAMLError):
        return None
    if data is None:
        return {}
    if not isinstance(data, dict):
        return None
    return {str(key).lower(): value for key, value in data.items()}


def _as_str(value: Any) -> str:
    return "" if value is None else str(value)


def _env_overrides() -> dict[str, str]:
    overrides = {}
    for key in _KEYS:
        value = os.environ.get(key.upper())
        if value:
            overrides[key] = value
    return overrides


def load(cfg_file: str | os.PathLike[str] | None = None) -> Config:
    """Load the configuration.

    Values come, from lowest to highest priority, from the defaults, the
    configuration file and environment variables named after the keys in
    upper case. When no file can be read, a file holding the resulting
    settings is written to the home directory.
    """
    path = Path(cfg_file) if cfg_file else default_config_path()
    used = str(path) if cfg_file else ""

    values = default_values()
    file_values = _read_file(path)
    if file_values is not None:
        for key in _KEYS:
            if key in file_values:
                values[key] = _as_str(file_values[key])
        used = str(path)
        print(f"Using config file: {path}")

    values.update(_env_overrides())

    if file_values is None:
        try:
            target = default_config_path()
            used = str(target)
            write_config(target, values)
        except (OSError, RuntimeError, KeyError) as exc:
            logger.warning("Could not read config file: %s", exc)

    config = Config(config_file=used, **values)

    if config.database_dir:
        try:
            config.database_dir = expand_path(config.database_dir)
        except OSError:
            pass

    return config