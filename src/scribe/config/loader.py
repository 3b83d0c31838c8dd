"""Find, layer and validate scribe's TOML settings.

Each layer overrides the one before it, table by table:

    defaults -> ``$XDG_CONFIG_HOME/scribe/config.toml``
             -> ``./scribe.toml``
             -> ``$SCRIBE_CONFIG``
             -> ``--config PATH``

The first two layers are optional. A path named by ``$SCRIBE_CONFIG``
or ``--config`` must exist. After validation the tool root must be an
existing directory, and a missing ``provider.api_key`` is taken from
the environment variable named by ``provider.api_key_env``.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from scribe.core.errors import ConfigError

from .schema import ScribeConfig

CONFIG_ENV = "SCRIBE_CONFIG"
PROJECT_FILE = "scribe.toml"


def user_config_file() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME", "")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "scribe" / "config.toml"


def config_files(explicit: str | Path | None = None) -> list[Path]:
    """Config files to layer, lowest priority first.

    Raises:
        ConfigError: If ``$SCRIBE_CONFIG`` or ``explicit`` names a
            missing file.
    """
    files = [p for p in (user_config_file(), Path(PROJECT_FILE)) if p.is_file()]

    required: list[tuple[str, Path]] = []
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        required.append((f"${CONFIG_ENV}", Path(env_path)))
    if explicit is not None:
        required.append(("--config", Path(explicit)))

    for origin, path in required:
        if not path.is_file():
            msg = f"Config file not found: {path} (from {origin})"
            raise ConfigError(msg)
        files.append(path)
    return files


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {path}: {e}"
        raise ConfigError(msg) from e
    except OSError as e:
        msg = f"Cannot read config file {path}: {e}"
        raise ConfigError(msg) from e


def _layer(lower: dict[str, Any], upper: dict[str, Any]) -> dict[str, Any]:
    """Overlay ``upper`` on ``lower``; tables merge, other values replace."""
    result = dict(lower)
    for key, value in upper.items():
        below = result.get(key)
        if isinstance(below, dict) and isinstance(value, dict):
            result[key] = _layer(below, value)
        else:
            result[key] = value
    return result


def load_config(path: str | Path | None = None) -> ScribeConfig:
    """Load, validate and finish the configuration.

    Args:
        path: The ``--config`` file, layered above every discovered file.

    Raises:
        ConfigError: On a missing or unreadable file, invalid TOML,
            invalid values, or a tool root that is not a directory.
    """
    data: dict[str, Any] = {}
    for config_file in config_files(path):
        data = _layer(data, _read_toml(config_file))

    try:
        config = ScribeConfig.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid configuration: {e}"
        raise ConfigError(msg) from e

    root = Path(config.tools.root).expanduser()
    if not root.is_dir():
        msg = f"tools.root is not a directory: {root}"
        raise ConfigError(msg)
    config.tools.root = str(root)

    provider = config.provider
    if provider.api_key is None and provider.api_key_env:
        provider.api_key = os.environ.get(provider.api_key_env)

    return config
