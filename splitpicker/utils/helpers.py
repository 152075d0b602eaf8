"""
Helper utilities for SplitPicker.

Provides common functions used across services and the CLI:
- Settings loading
- Locale detection
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import toml
from loguru import logger

# Default settings
DEFAULT_SETTINGS: Dict[str, Any] = {
    "launcher": {
        "command": "mullvad-exclude",
        "own_name": "Mullvad VPN",
    },
    "icons": {
        "extensions": ["svg", "png"],
        "pixmaps_dir": "/usr/share/pixmaps",
        "fallback_theme": "hicolor",
        "theme_query_timeout": 5.0,
        "preferred_sizes": [
            "scalable",
            "256x256",
            "512x512",
            "256x256@2x",
            "128x128@2x",
            "128x128",
        ],
    },
    "enumeration": {
        "max_workers": 8,
    },
    "search": {
        "max_results": 30,
        "fuzzy_threshold": 50,
    },
}


def settings_path(env: Optional[Mapping[str, str]] = None) -> Path:
    """
    Get the settings file location.

    $SPLITPICKER_SETTINGS wins, otherwise
    $XDG_CONFIG_HOME/splitpicker/settings.toml (~/.config by default).
    """
    env = os.environ if env is None else env

    override = env.get("SPLITPICKER_SETTINGS")
    if override:
        return Path(override)

    config_home = env.get("XDG_CONFIG_HOME") or os.path.join(
        env.get("HOME", os.path.expanduser("~")), ".config"
    )
    return Path(config_home) / "splitpicker" / "settings.toml"


def load_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load settings from TOML file.

    Args:
        path: Settings file, defaults to settings_path()

    Returns:
        Dictionary containing settings with defaults applied

    Example settings file:
        [launcher]
        command = "mullvad-exclude"

        [icons]
        extensions = ["svg", "png"]
        theme_query_timeout = 2.5
    """
    if path is None:
        path = settings_path()

    defaults = copy.deepcopy(DEFAULT_SETTINGS)

    if not path.exists():
        logger.debug(f"Settings file not found at {path}, using defaults")
        return defaults

    try:
        loaded = toml.load(path)
    except (OSError, toml.TomlDecodeError) as e:
        logger.warning(f"Could not load settings from {path}: {e}. Using defaults")
        return defaults

    return _deep_merge(defaults, loaded)


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary with defaults
        override: Dictionary with overrides

    Returns:
        Merged dictionary (override takes precedence)
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def detect_locale(env: Optional[Mapping[str, str]] = None) -> str:
    """
    Get the UI locale tag from the environment.

    Reads LC_ALL, LC_MESSAGES, then LANG and drops the encoding and
    modifier ("de_DE.UTF-8" -> "de_DE").

    Returns:
        Locale tag, or "" when unset or "C"/"POSIX"
    """
    env = os.environ if env is None else env

    for variable in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = env.get(variable)
        if value:
            tag = value.split(".", 1)[0].split("@", 1)[0]
            return "" if tag in ("C", "POSIX") else tag

    return ""


def locale_fallbacks(tag: str) -> list[str]:
    """
    Get the tags to try for Name[xx]/Icon[xx], most specific first.

    "de_DE" -> ["de_DE", "de"], "de" -> ["de"]
    """
    tags = [tag]
    language = tag.split("_", 1)[0]
    if language and language != tag:
        tags.append(language)
    return tags
