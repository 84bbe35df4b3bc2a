"""Active docset preferences for docdash.

Stores the docsets a user has activated, in ~/.docdash/preferences.yaml:
the common set (active everywhere) and contextual sets keyed by file
extension.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import yaml

from docdash.config import get_config_dir


DEFAULT_PREFERENCES: dict[str, Any] = {
    "version": 1,
    "updated_at": None,  # Set on first change

    # Docsets searched by default
    "common": [],

    # File extension -> docsets searched for that file type
    "contextual": {},
}


PREFERENCES_HEADER = """\
# docdash Preferences
# Managed by `docdash docsets activate/deactivate` - safe to edit by hand
#
# common: Docsets searched by default
# contextual: File extension -> docsets searched for that file type

"""


def get_preferences_path(config_dir: Optional[Path] = None) -> Path:
    """Get the path to preferences.yaml.

    Args:
        config_dir: docdash config directory (default: ~/.docdash)

    Returns:
        Path to preferences.yaml
    """
    return (config_dir or get_config_dir()) / "preferences.yaml"


def load_preferences(config_dir: Optional[Path] = None) -> dict[str, Any]:
    """Load preferences from YAML file.

    If file doesn't exist, returns default preferences.

    Args:
        config_dir: docdash config directory

    Returns:
        Preferences dictionary
    """
    prefs_path = get_preferences_path(config_dir)

    merged = {
        **DEFAULT_PREFERENCES,
        "common": [],
        "contextual": {},
    }
    if not prefs_path.exists():
        return merged

    with open(prefs_path) as f:
        prefs = yaml.safe_load(f) or {}

    merged.update(prefs)
    merged["common"] = list(prefs.get("common") or [])
    merged["contextual"] = dict(prefs.get("contextual") or {})
    return merged


def save_preferences(preferences: dict[str, Any], config_dir: Optional[Path] = None) -> None:
    """Save preferences to YAML file.

    Args:
        preferences: Preferences dictionary to save
        config_dir: docdash config directory
    """
    prefs_path = get_preferences_path(config_dir)
    prefs_path.parent.mkdir(parents=True, exist_ok=True)

    with open(prefs_path, "w") as f:
        f.write(PREFERENCES_HEADER)
        yaml.dump(preferences, f, default_flow_style=False, sort_keys=False)


def _touch(prefs: dict[str, Any]) -> None:
    prefs["updated_at"] = datetime.now(timezone.utc).isoformat()


def activate_docset(name: str, config_dir: Optional[Path] = None) -> dict[str, Any]:
    """Add a docset to the common set.

    Args:
        name: Docset name
        config_dir: docdash config directory

    Returns:
        Updated preferences dictionary
    """
    prefs = load_preferences(config_dir)
    if name not in prefs["common"]:
        prefs["common"].append(name)
        _touch(prefs)
        save_preferences(prefs, config_dir)
    return prefs


def deactivate_docset(name: str, config_dir: Optional[Path] = None) -> dict[str, Any]:
    """Remove a docset from the common set and every contextual set.

    Returns:
        Updated preferences dictionary
    """
    prefs = load_preferences(config_dir)
    changed = name in prefs["common"]
    prefs["common"] = [n for n in prefs["common"] if n != name]
    for extension, names in list(prefs["contextual"].items()):
        if name in names:
            changed = True
            prefs["contextual"][extension] = [n for n in names if n != name]
    if changed:
        _touch(prefs)
        save_preferences(prefs, config_dir)
    return prefs


def set_contextual_docsets(
    extension: str,
    names: list[str],
    config_dir: Optional[Path] = None,
) -> dict[str, Any]:
    """Set the docsets searched for one file extension.

    An empty list removes the extension.

    Returns:
        Updated preferences dictionary
    """
    prefs = load_preferences(config_dir)
    extension = extension.lstrip(".")
    if names:
        prefs["contextual"][extension] = list(names)
    else:
        prefs["contextual"].pop(extension, None)
    _touch(prefs)
    save_preferences(prefs, config_dir)
    return prefs


def get_contextual_docsets(preferences: dict[str, Any], extension: Optional[str]) -> list[str]:
    """Docsets saved for a file extension ("py" or ".py")."""
    if not extension:
        return []
    return list(preferences.get("contextual", {}).get(extension.lstrip("."), []))
