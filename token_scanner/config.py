"""
Configuration constants and settings for Token Scanner.
"""

import os
import json
from typing import Any, Dict, List, Optional

from .exceptions import ConfigurationError

# =============================================================================
# CONSTANTS AND CONFIGURATION
# =============================================================================

# ANSI escape sequences for colored output
RESET = "\033[0m"
GREY = "\033[90m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
BOLD = "\033[1m"

# Scanning defaults
DEFAULT_CONTEXT_LENGTH = 50
# Placeholder size of the design-system token catalog. Coverage is measured
# against this number, so it can exceed 100%.
TOKEN_CATALOG_SIZE = 250

# Git change detection defaults
DEFAULT_LOOKBACK_HOURS = 24
DEFAULT_DIFF_LOOKAHEAD = 4

# Category tiers, in display order
TOKEN_TIERS = ("raw", "foundation", "component")

# Global paths
PROJECT_ROOT = os.getcwd()
CONFIG_FILE = os.path.join(PROJECT_ROOT, ".token-scanner-config.json")
CONFIG_ENV_VAR = "TOKEN_SCANNER_CONFIG"
DESIGN_SYSTEM_ENV_VAR = "DESIGN_SYSTEM_PATH"

_verbose = True


def set_verbose(enabled: bool):
    """Toggle progress output for the scanner and change detector."""
    global _verbose
    _verbose = enabled


def is_verbose() -> bool:
    return _verbose


# =============================================================================
# DEFAULT CONFIGURATION
# =============================================================================

DEFAULT_CONFIG = {
    # Repositories to scan; each entry is turned into a RepositoryConfig
    "repositories": [],

    # Token format preset from token_formats.py
    "token_format_preset": "default",

    # FileDiscovery settings
    "include_patterns": [
        "**/*.{css,scss,sass,less}",
        "**/*.{js,jsx,ts,tsx}",
        "**/*.{html,vue,svelte}",
        "**/*.json",
    ],
    "exclude_patterns": [
        "**/node_modules/**",
        "**/dist/**",
        "**/build/**",
        "**/.git/**",
        "**/coverage/**",
        "**/*.test.*",
        "**/*.spec.*",
        "**/storybook-static/**",
    ],

    # Output and workspace locations
    "output_path": "./scan-reports",
    "repos_dir": "./temp/repos",

    # Matcher and coverage settings
    "context_length": DEFAULT_CONTEXT_LENGTH,
    "token_catalog_size": TOKEN_CATALOG_SIZE,

    # GitChangeDetector settings
    "design_system_path": None,
    "pointer_file": "./temp/last-scan-commit.txt",
    "change_lookback_hours": DEFAULT_LOOKBACK_HOURS,
    "diff_lookahead": DEFAULT_DIFF_LOOKAHEAD,

    # Extra TokenDictionary entries (additive only)
    "custom_token_definitions": [],
}


# =============================================================================
# CONFIGURATION MANAGEMENT
# =============================================================================

def get_config_path(path: Optional[str] = None) -> str:
    """Resolve the config file location: explicit path, env var, then default."""
    if path:
        return path
    return os.environ.get(CONFIG_ENV_VAR) or CONFIG_FILE


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from .token-scanner-config.json if it exists."""
    config_path = get_config_path(path)
    if not os.path.exists(config_path):
        return {}
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {config_path}: {e}") from e
    if not isinstance(config, dict):
        raise ConfigurationError(f"{config_path} must contain a JSON object")
    return config


def _configured_entries(config, key: str) -> List[Dict[str, Any]]:
    """Get a list-of-objects setting, rejecting anything else."""
    entries = config.get(key, DEFAULT_CONFIG[key])
    if not isinstance(entries, list):
        raise ConfigurationError(f"'{key}' must be a list, got {type(entries).__name__}")
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ConfigurationError(f"'{key}[{index}]' must be an object, got {entry!r}")
    return list(entries)


def get_configured_repositories(config) -> List[Dict[str, Any]]:
    """Get the raw repository entries."""
    return _configured_entries(config, "repositories")


def get_team_repositories(config, team: str) -> List[Dict[str, Any]]:
    """Get repository entries owned by a team (case-insensitive)."""
    wanted = team.lower()
    return [r for r in get_configured_repositories(config) if str(r.get("team", "")).lower() == wanted]


def get_configured_format_preset(config) -> str:
    """Get the configured token format preset name."""
    return config.get("token_format_preset", DEFAULT_CONFIG["token_format_preset"])


def get_configured_include_patterns(config) -> List[str]:
    """Get configured include glob patterns."""
    return list(config.get("include_patterns", DEFAULT_CONFIG["include_patterns"]))


def get_configured_exclude_patterns(config) -> List[str]:
    """Get configured exclude glob patterns."""
    return list(config.get("exclude_patterns", DEFAULT_CONFIG["exclude_patterns"]))


def get_configured_output_path(config) -> str:
    """Get the directory scan reports are written to."""
    return config.get("output_path", DEFAULT_CONFIG["output_path"])


def get_configured_repos_dir(config) -> str:
    """Get the directory remote repositories are cloned into."""
    return config.get("repos_dir", DEFAULT_CONFIG["repos_dir"])


def get_configured_context_length(config) -> int:
    """Get the context window (characters either side of a match)."""
    return int(config.get("context_length", DEFAULT_CONFIG["context_length"]))


def get_configured_catalog_size(config) -> int:
    """Get the token catalog size used as the coverage denominator."""
    return int(config.get("token_catalog_size", DEFAULT_CONFIG["token_catalog_size"]))


def get_configured_design_system_path(config) -> Optional[str]:
    """Get the design system repository watched for token changes."""
    return os.environ.get(DESIGN_SYSTEM_ENV_VAR) or config.get(
        "design_system_path", DEFAULT_CONFIG["design_system_path"])


def get_configured_pointer_file(config) -> str:
    """Get the file holding the last processed commit hash."""
    return config.get("pointer_file", DEFAULT_CONFIG["pointer_file"])


def get_configured_lookback_hours(config) -> int:
    """Get the first-scan lookback window in hours."""
    return int(config.get("change_lookback_hours", DEFAULT_CONFIG["change_lookback_hours"]))


def get_configured_diff_lookahead(config) -> int:
    """Get how many diff lines are searched when pairing a removed token."""
    return int(config.get("diff_lookahead", DEFAULT_CONFIG["diff_lookahead"]))


def get_configured_custom_definitions(config) -> List[Dict[str, Any]]:
    """Get extra token dictionary entries."""
    entries = _configured_entries(config, "custom_token_definitions")
    for index, entry in enumerate(entries):
        if not entry.get("name"):
            raise ConfigurationError(f"'custom_token_definitions[{index}]' has no name: {entry!r}")
    return entries
