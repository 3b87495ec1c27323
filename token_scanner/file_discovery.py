"""
file_discovery.py

This module provides the FileDiscovery class, which turns include/exclude glob
rules into the set of files a repository scan has to read. Only files that at
least one registered token format can match are returned.
"""

import os
from pathlib import Path
from typing import Iterable, List, Optional

from .exceptions import RepositoryNotFoundError
from .models import TokenFormat
from .token_formats import supported_extensions
from .config import RESET, YELLOW
from .utils import expand_braces, matches_any_glob, warn


class FileDiscovery:
    """
    Resolves include and exclude glob patterns into files to scan.

    Include patterns are unioned, exclude patterns filter the union, and the
    result is restricted to extensions known to the registered token formats.
    """

    def __init__(
        self,
        include_patterns: Iterable[str],
        exclude_patterns: Optional[Iterable[str]] = None,
        formats: Optional[Iterable[TokenFormat]] = None,
    ):
        """
        Initializes the discovery rules.

        Args:
            include_patterns (Iterable[str]): Globs relative to the repository root.
                                              '**' and '{a,b}' alternatives are supported.
            exclude_patterns (Optional[Iterable[str]]): Globs removing files from the result.
            formats (Optional[Iterable[TokenFormat]]): Registered formats; their
                                                       extensions limit the result.
                                                       None disables the filter.
        """
        self.include_patterns = list(include_patterns)
        self.exclude_patterns = list(exclude_patterns or [])
        self.extensions = supported_extensions(formats) if formats is not None else None

    def discover(self, root: str, errors: Optional[List[str]] = None) -> List[str]:
        """
        Finds the files to scan under a repository root.

        A pattern that cannot be globbed is skipped; the problem is appended to
        errors when a list is given and warned about otherwise. Hidden files and
        directories are left out unless the pattern itself names a dot segment.

        Args:
            root (str): The repository root directory.
            errors (Optional[List[str]]): Collects messages for unusable patterns.

        Returns:
            List[str]: Sorted, deduplicated absolute file paths.

        Raises:
            RepositoryNotFoundError: If the root does not exist or is not a directory.
        """
        root_path = Path(root).expanduser()
        if not root_path.exists():
            raise RepositoryNotFoundError(f"Repository path does not exist: {root}")
        if not root_path.is_dir():
            raise RepositoryNotFoundError(f"Repository path is not a directory: {root}")
        root_path = root_path.resolve()

        found = set()
        for pattern in self.include_patterns:
            for expanded in expand_braces(pattern):
                try:
                    found.update(self._glob(root_path, expanded))
                except (ValueError, NotImplementedError, OSError) as e:
                    message = f"Invalid include pattern {pattern!r}: {e}"
                    if errors is None:
                        warn(f"{YELLOW}⚠️  {message}{RESET}")
                    else:
                        errors.append(message)

        files = []
        for path in found:
            relative = path.relative_to(root_path).as_posix()
            if matches_any_glob(relative, self.exclude_patterns):
                continue
            if not self.is_supported(str(path)):
                continue
            files.append(str(path))
        return sorted(files)

    def _glob(self, root_path: Path, pattern: str) -> List[Path]:
        if not pattern:
            raise ValueError("empty pattern")
        if os.path.isabs(pattern):
            pattern = _relative_pattern(root_path, pattern)

        allow_hidden = any(_is_hidden(part) for part in pattern.split("/"))
        matches = []
        for path in root_path.glob(pattern):
            if not path.is_file():
                continue
            if not allow_hidden and any(_is_hidden(part) for part in path.relative_to(root_path).parts):
                continue
            matches.append(path)
        return matches

    def is_supported(self, file_path: str) -> bool:
        """Checks whether any registered format handles the file's extension."""
        if self.extensions is None:
            return True
        return os.path.splitext(file_path)[1].lower() in self.extensions


def _is_hidden(segment: str) -> bool:
    return segment.startswith(".") and segment not in (".", "..")


def _relative_pattern(root_path: Path, pattern: str) -> str:
    """Rewrites an absolute pattern under the repository root as a root-relative one."""
    try:
        return Path(pattern).relative_to(root_path).as_posix()
    except ValueError:
        raise ValueError(f"pattern is outside the repository {root_path}") from None
