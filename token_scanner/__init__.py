"""
Token Scanner - Design Token Usage Analysis

Scans repositories for design token usage, categorizes the tokens found into
raw, foundation and component tiers, and detects token changes in a design
system's git history.
"""

__version__ = "1.0.0"
__author__ = "Token Scanner Team"

from .main import main
from .scanner import TokenScanner
from .file_discovery import FileDiscovery
from .pattern_analysis import PatternDetector
from .token_categorizer import TokenCategorizer
from .token_dictionary import TokenDictionary
from .git_analysis import GitChangeDetector, FileCommitPointerStore, MemoryCommitPointerStore
from .token_formats import get_token_formats
from .exceptions import TokenScannerError

__all__ = [
    'main',
    'TokenScanner',
    'FileDiscovery',
    'PatternDetector',
    'TokenCategorizer',
    'TokenDictionary',
    'GitChangeDetector',
    'FileCommitPointerStore',
    'MemoryCommitPointerStore',
    'get_token_formats',
    'TokenScannerError',
]
