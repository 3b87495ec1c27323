"""
Utility functions for file reading, glob handling and terminal output.
"""

import re
import sys
import fnmatch
from typing import List

from .config import is_verbose

# =============================================================================
# OUTPUT
# =============================================================================

def log(message: str):
    """Print a progress line unless output is silenced."""
    if is_verbose():
        print(message)


def warn(message: str):
    """Print a warning or caught error to stderr."""
    print(message, file=sys.stderr)


def remove_ansi_colors(text):
    """Remove ANSI color codes from text."""
    if not text:
        return ""
    return re.sub(r"\033\[[0-9;]*m", "", text)

# =============================================================================
# FILE READING
# =============================================================================

def read_file_content(file_path: str) -> str:
    """
    Reads a text file as UTF-8.

    Unlike a best-effort read, failures propagate so the caller can record
    them against the file.

    Args:
        file_path (str): The path to the file.

    Returns:
        str: The content of the file.
    """
    with open(file_path, 'r', encoding='utf-8') as f:
        return f.read()

# =============================================================================
# GLOB HANDLING
# =============================================================================

_BRACE_RE = re.compile(r"\{([^{}]*)\}")


def expand_braces(pattern: str) -> List[str]:
    """
    Expands brace alternatives in a glob pattern.

    Example: "src/**/*.{css,scss}" -> ["src/**/*.css", "src/**/*.scss"]
    """
    match = _BRACE_RE.search(pattern)
    if not match:
        return [pattern]
    expanded = []
    for option in match.group(1).split(","):
        candidate = pattern[:match.start()] + option + pattern[match.end():]
        expanded.extend(expand_braces(candidate))
    return expanded


def matches_any_glob(relative_path: str, patterns: List[str]) -> bool:
    """
    Checks a root-relative POSIX path against glob patterns.

    fnmatch's '*' also crosses '/', so '**/dist/**' covers nested paths; a
    leading '**/' is additionally tried without the prefix so the pattern
    matches at the repository root as well.
    """
    for pattern in patterns:
        for candidate in expand_braces(pattern):
            if fnmatch.fnmatch(relative_path, candidate):
                return True
            if candidate.startswith("**/") and fnmatch.fnmatch(relative_path, candidate[3:]):
                return True
    return False
