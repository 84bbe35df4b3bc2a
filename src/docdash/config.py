"""docdash Configuration

Configuration loading with environment variable support and sensible defaults.

Environment Variables:
    DOCDASH_HOME: Directory for config and preferences (default: ~/.docdash)
    DOCDASH_CONFIG_PATH: Path to config file (default: $DOCDASH_HOME/config.yaml)
    DOCDASH_DOCSETS_PATH: Override docsets root directory from config
    DOCDASH_DEBUG: Enable query-engine diagnostics ("1", "true", "yes")

Configuration Schema:
    docsets:
        path: str - Docsets root directory (default: ~/.docsets)
        common: list - Docsets active by default
        contextual: dict - File extension -> docsets active for that file type
        ignored: list - Official docsets hidden from listings
    search:
        min_length: int - Shortest pattern that triggers a search (default: 3)
        candidate_format: str - Result display template (default: "%d %n (%t)")
        engine: str - "sqlite" (module binding) or "cli" (sqlite3 program)
        sqlite_binary: str - sqlite3 program for the cli engine
    network:
        timeout: float - Seconds before a feed or archive fetch fails
        official_index_url: str - Listing of official feed files
        official_feed_url: str - Feed URL template, {name} is substituted
        unofficial_url: str - Contributed docsets catalog
    logging:
        level: str - Logging level (default: "INFO")
        debug: bool - Capture query-engine stderr
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

TRUE_VALUES = ("1", "true", "yes", "on")


# Default configuration values
DEFAULT_CONFIG: Dict[str, Any] = {
    "docsets": {
        "path": "~/.docsets",
        "common": [],
        "contextual": {},
        "ignored": ["Man_Pages"],
    },
    "search": {
        "min_length": 3,
        "candidate_format": "%d %n (%t)",
        "engine": "sqlite",
        "sqlite_binary": "sqlite3",
    },
    "network": {
        "timeout": 5,
        "official_index_url": "https://api.github.com/repos/Kapeli/feeds/contents/",
        "official_feed_url": "https://raw.githubusercontent.com/Kapeli/feeds/master/{name}.xml",
        "unofficial_url": "https://dashes-to-dashes.herokuapp.com/docsets/contrib",
    },
    "logging": {
        "level": "INFO",
        "debug": False,
    },
}


def get_config_dir() -> Path:
    """User-level directory for config and preferences.

    DOCDASH_HOME overrides the default ~/.docdash.
    """
    override = os.environ.get("DOCDASH_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".docdash"


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge override dict into base dict.

    Args:
        base: Base dictionary (defaults)
        override: Override dictionary (user config)

    Returns:
        Merged dictionary with override values taking precedence
    """
    result = copy.deepcopy(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _resolve_path(path: Optional[str], base_dir: Path) -> Optional[Path]:
    """
    Resolve a path, expanding ~ and making relative paths absolute from base_dir.

    Args:
        path: Path string (absolute, ~-prefixed or relative) or None
        base_dir: Base directory for relative path resolution

    Returns:
        Resolved absolute Path or None if path was None
    """
    if path is None:
        return None

    path_obj = Path(path).expanduser()
    if path_obj.is_absolute():
        return path_obj
    return (base_dir / path_obj).resolve()


def _read_yaml(path: Path) -> Dict[str, Any]:
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise yaml.YAMLError(f"top level must be a mapping, got {type(data).__name__}")
    return data


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file with environment variable overrides.

    Configuration Loading Order (later overrides earlier):
    1. Default values (DEFAULT_CONFIG)
    2. Config file (from config_path parameter or DOCDASH_CONFIG_PATH,
       otherwise the optional ~/.docdash/config.yaml)
    3. Environment variable overrides (DOCDASH_DOCSETS_PATH, DOCDASH_DEBUG)

    Args:
        config_path: Explicit config file path (overrides DOCDASH_CONFIG_PATH)

    Returns:
        Merged configuration dictionary

    Raises:
        ConfigurationError: If an explicit config file exists but is invalid
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    base_dir = Path.cwd()

    file_path = config_path or os.environ.get("DOCDASH_CONFIG_PATH")

    if file_path:
        # Explicit config path - must be valid if it exists
        resolved_path = _resolve_path(file_path, base_dir)
        if resolved_path and resolved_path.exists():
            try:
                config = _deep_merge(config, _read_yaml(resolved_path))
                logger.info(f"Loaded configuration from: {resolved_path}")
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in config file: {e}")
            except IOError as e:
                raise ConfigurationError(f"Cannot read config file: {e}")
        else:
            logger.warning(f"Config file not found (using defaults): {file_path}")
    else:
        default_config_path = get_config_dir() / "config.yaml"
        if default_config_path.exists():
            base_dir = default_config_path.parent
            try:
                config = _deep_merge(config, _read_yaml(default_config_path))
                logger.info(f"Loaded configuration from: {default_config_path}")
            except yaml.YAMLError as e:
                logger.warning(f"Invalid YAML in default config (ignoring): {e}")
            except IOError as e:
                logger.warning(f"Cannot read default config (ignoring): {e}")
        else:
            logger.debug("No config file found, using defaults")

    # Apply environment variable overrides
    docsets_path_override = os.environ.get("DOCDASH_DOCSETS_PATH")
    if docsets_path_override:
        config["docsets"]["path"] = docsets_path_override
        logger.info(f"Docsets path override from env: {docsets_path_override}")

    debug_override = os.environ.get("DOCDASH_DEBUG")
    if debug_override:
        config["logging"]["debug"] = debug_override.strip().lower() in TRUE_VALUES

    # Resolve docsets path
    resolved = _resolve_path(config["docsets"].get("path"), base_dir)
    config["docsets"]["path"] = str(resolved) if resolved else None

    return config


def get_docsets_path(config: Dict[str, Any]) -> Path:
    """
    Get the docsets root directory from config or default.

    Args:
        config: Configuration dictionary from load_config()

    Returns:
        Path to the docsets root
    """
    path_str = config.get("docsets", {}).get("path")
    if path_str:
        return Path(path_str).expanduser()
    return Path(DEFAULT_CONFIG["docsets"]["path"]).expanduser()


def get_search_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Extract the search section, filled in with defaults."""
    return {**DEFAULT_CONFIG["search"], **config.get("search", {})}


def get_network_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Extract the network section, filled in with defaults."""
    return {**DEFAULT_CONFIG["network"], **config.get("network", {})}
