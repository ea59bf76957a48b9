"""User configuration for mgit.

Settings live in ``config.toml`` under the XDG config directory and are
merged over DEFAULTS. The merged result is cached until the file changes.
"""

from __future__ import annotations

import copy
import tomllib
from pathlib import Path
from typing import Any

import tomlkit

from .core import CONFIG_DIR

CONFIG_FILE = CONFIG_DIR / "config.toml"

DEFAULTS: dict[str, Any] = {
    "parallel": {
        "jobs": 8,  # packages updated at the same time
    },
    "network": {
        "command_timeout": 0,  # seconds before a git command is killed, 0 waits forever
    },
    "update": {
        "fetch": "auto",  # auto | always | never
    },
    "display": {
        "verbose": False,
    },
}

_cached_config: dict[str, Any] | None = None
_cached_mtime: float | None = None


def _config_mtime() -> float | None:
    try:
        return CONFIG_FILE.stat().st_mtime
    except OSError:
        return None


def load_config() -> dict[str, Any]:
    """Return DEFAULTS overlaid with the user's sections.

    A missing or malformed file yields the defaults.
    """
    global _cached_config, _cached_mtime

    mtime = _config_mtime()
    if _cached_config is not None and _cached_mtime == mtime:
        return _cached_config

    config = copy.deepcopy(DEFAULTS)
    if mtime is not None:
        try:
            with open(CONFIG_FILE, "rb") as f:
                user_config = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError):
            user_config = {}
        for section, values in user_config.items():
            if isinstance(values, dict) and section in config:
                config[section].update(values)

    _cached_config = config
    _cached_mtime = mtime
    return config


def invalidate_config_cache() -> None:
    global _cached_config, _cached_mtime
    _cached_config = None
    _cached_mtime = None


def init_config() -> Path:
    """Write a config file holding the defaults, unless one exists.

    Returns path to config file.
    """
    if CONFIG_FILE.exists():
        return CONFIG_FILE

    doc = tomlkit.document()
    doc.add(tomlkit.comment("mgit configuration file"))
    doc.add(tomlkit.nl())
    for section, values in DEFAULTS.items():
        table = tomlkit.table()
        for key, value in values.items():
            table.add(key, value)
        doc.add(section, table)

    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(tomlkit.dumps(doc), encoding="utf-8")
    invalidate_config_cache()
    return CONFIG_FILE


def _get(section: str, key: str) -> Any:
    return load_config()[section].get(key, DEFAULTS[section][key])


def get_jobs() -> int:
    return int(_get("parallel", "jobs"))


def get_command_timeout() -> float | None:
    """Git command timeout in seconds, None when disabled."""
    timeout = _get("network", "command_timeout")
    return float(timeout) if timeout else None


def get_fetch_before_checkout() -> bool | None:
    """Map ``update.fetch`` to the workflow option (None means auto)."""
    mode = _get("update", "fetch")
    if mode == "always":
        return True
    if mode == "never":
        return False
    return None


def is_verbose() -> bool:
    return bool(_get("display", "verbose"))
