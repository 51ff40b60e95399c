# passforge/config.py
"""
Settings persistence for PassForge.
Settings saved as JSON in %APPDATA%/PassForge/config.json (Windows) or ~/.passforge/config.json (fallback).
PASSFORGE_CONFIG overrides the full path.
"""

import os
import json
import logging
from typing import Dict, Any

from .generator import GenerationRequest, SYMBOLS, check_symbols

logger = logging.getLogger(__name__)

DEFAULTS: Dict[str, Any] = {
    "length": 12,
    "include_uppercase": True,
    "include_lowercase": True,
    "include_numbers": True,
    "include_symbols": False,
    "symbols": SYMBOLS,
}

BOOL_KEYS = ("include_uppercase", "include_lowercase", "include_numbers", "include_symbols")


def _appdata_dir() -> str:
    appdata = os.getenv("APPDATA")
    if appdata:
        return os.path.join(appdata, "PassForge")
    return os.path.join(os.path.expanduser("~"), ".passforge")


def config_path() -> str:
    return os.getenv("PASSFORGE_CONFIG") or os.path.join(_appdata_dir(), "config.json")


def coerce_value(key: str, value: Any) -> Any:
    """
    Convert a raw value (from JSON or the command line) to the type a setting expects.
    Raises KeyError for unknown settings and ValueError for bad values.
    """
    if key not in DEFAULTS:
        raise KeyError(key)
    if key in BOOL_KEYS:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.lower() in ("1", "true", "yes", "on"):
            return True
        if isinstance(value, str) and value.lower() in ("0", "false", "no", "off"):
            return False
        raise ValueError(f"{key} must be a boolean, got {value!r}")
    if key == "length":
        if isinstance(value, bool):
            raise ValueError("length must be an integer")
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, str) and value.strip().isdigit():
            return int(value)
        raise ValueError(f"length must be an integer, got {value!r}")
    if not isinstance(value, str):
        raise ValueError(f"symbols must be a string, got {value!r}")
    return check_symbols(value)


def load_config() -> Dict[str, Any]:
    p = config_path()
    out = DEFAULTS.copy()
    if not os.path.exists(p):
        return out
    try:
        with open(p, "r", encoding="utf-8") as f:
            data = json.load(f) or {}
        if not isinstance(data, dict):
            raise ValueError("top-level JSON value is not an object")
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable config %s: %s", p, e)
        return out

    # merge defaults, skipping unknown or bad keys
    for key, value in data.items():
        try:
            out[key] = coerce_value(key, value)
        except KeyError:
            logger.debug("Ignoring unknown config key %r", key)
        except ValueError as e:
            logger.warning("Ignoring config key %r: %s", key, e)
    return out


def save_config(cfg: Dict[str, Any]) -> None:
    """Atomically write settings by writing to a temp file and renaming."""
    p = config_path()
    d = os.path.dirname(p)
    if d:
        os.makedirs(d, exist_ok=True)
    tmp = p + ".tmp"
    with open(tmp, "w", encoding="utf-8") as f:
        json.dump(cfg, f, ensure_ascii=False, indent=2)
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp, p)
    logger.debug("Saved config to %s", p)


def request_from_config(cfg: Dict[str, Any]) -> GenerationRequest:
    return GenerationRequest(
        length=cfg["length"],
        include_uppercase=cfg["include_uppercase"],
        include_lowercase=cfg["include_lowercase"],
        include_numbers=cfg["include_numbers"],
        include_symbols=cfg["include_symbols"],
    )
