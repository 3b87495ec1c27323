"""
scanner.py

This module provides the TokenScanner class, which orchestrates a token usage
scan: it prepares each repository (local path or GitPython clone), discovers
the files to scan, matches and categorizes tokens per file, detects structural
patterns and aggregates everything into one ScanResult per repository.
"""

import os
import time
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

import git
from git.exc import GitError

from .aggregation import aggregate_token_usages, calculate_coverage, summarize_tiers
from .config import (
    BOLD, GREEN, GREY, RED, RESET, DEFAULT_CONTEXT_LENGTH, TOKEN_CATALOG_SIZE,
    get_configured_catalog_size, get_configured_context_length, get_configured_custom_definitions,
    get_configured_exclude_patterns, get_configured_format_preset, get_configured_include_patterns,
    get_configured_repos_dir, DEFAULT_CONFIG,
)
from .exceptions import RepositoryNotFoundError, RepositoryPreparationError
from .file_discovery import FileDiscovery
from .models import RepositoryConfig, ScanResult, ScanSummary, TokenDefinition, TokenFormat
from .pattern_analysis import PatternDetector
from .token_categorizer import TokenCategorizer
from .token_dictionary import TokenDictionary
from .token_formats import get_token_formats
from .token_matcher import scan_file_content
from .utils import log, read_file_content, warn


class TokenScanner:
    """
    Scans repositories for design token usage.

    Repositories are processed one at a time and files one at a time. A file
    that cannot be read is recorded in the result's errors and the scan goes
    on; a repository that cannot be prepared yields a failed ScanResult.
    """

    def __init__(
        self,
        formats: List[TokenFormat],
        include_patterns: Iterable[str],
        exclude_patterns: Optional[Iterable[str]] = None,
        categorizer: Optional[TokenCategorizer] = None,
        pattern_detector: Optional[PatternDetector] = None,
        repos_dir: str = DEFAULT_CONFIG["repos_dir"],
        context_length: int = DEFAULT_CONTEXT_LENGTH,
        catalog_size: int = TOKEN_CATALOG_SIZE,
    ):
        """
        Initializes the TokenScanner.

        Args:
            formats: Registered token formats.
            include_patterns: File discovery include globs.
            exclude_patterns: File discovery exclude globs.
            categorizer: Assigns a tier and category to every token found.
            pattern_detector: Detects structural UI patterns in the same files.
            repos_dir: Where remote repositories are cloned.
            context_length: Characters of context kept either side of a match.
            catalog_size: Denominator of the coverage percentage.
        """
        self.formats = list(formats)
        self.discovery = FileDiscovery(include_patterns, exclude_patterns, self.formats)
        self.categorizer = categorizer if categorizer is not None else TokenCategorizer()
        self.pattern_detector = pattern_detector if pattern_detector is not None else PatternDetector()
        self.repos_dir = repos_dir
        self.context_length = context_length
        self.catalog_size = catalog_size

    @classmethod
    def from_config(cls, config: Dict[str, Any], preset: Optional[str] = None) -> "TokenScanner":
        """
        Builds a scanner from a loaded configuration dictionary.

        Args:
            config: Configuration as returned by load_config().
            preset: Token format preset overriding the configured one.

        Raises:
            ConfigurationError: If the preset is unknown or a custom definition is malformed.
        """
        definitions = [TokenDefinition.from_dict(d) for d in get_configured_custom_definitions(config)]
        return cls(
            formats=get_token_formats(preset or get_configured_format_preset(config)),
            include_patterns=get_configured_include_patterns(config),
            exclude_patterns=get_configured_exclude_patterns(config),
            categorizer=TokenCategorizer(TokenDictionary(definitions)),
            repos_dir=get_configured_repos_dir(config),
            context_length=get_configured_context_length(config),
            catalog_size=get_configured_catalog_size(config),
        )

    def scan_all_repositories(self, repositories: Iterable[RepositoryConfig]) -> List[ScanResult]:
        """
        Scans every repository in order.

        Returns:
            List[ScanResult]: One result per repository, failed ones included.
        """
        log(f"{BOLD}🔍 Starting token usage scan...{RESET}")
        results = []
        for repository in repositories:
            log(f"{GREY}📂 Scanning repository: {repository.name}{RESET}")
            try:
                result = self.scan_repository(repository)
            except (RepositoryNotFoundError, RepositoryPreparationError) as e:
                warn(f"{RED}❌ Failed to scan {repository.name}: {e}{RESET}")
                result = ScanResult.failed(repository, str(e))
            else:
                log(f"{GREEN}✅ Completed scan for {repository.name}: {len(result.tokens_found)} tokens found{RESET}")
            results.append(result)
        return results

    def scan_repository(self, repository: RepositoryConfig) -> ScanResult:
        """
        Scans one repository.

        Raises:
            RepositoryNotFoundError: If a local repository path does not exist.
            RepositoryPreparationError: If a remote repository cannot be cloned or updated.
        """
        start_time = time.monotonic()
        root = os.path.realpath(self.prepare_repository(repository))
        errors = []
        files = self.discovery.discover(root, errors)
        log(f"{GREY}📄 Found {len(files)} files to scan{RESET}")

        usages = []
        patterns = []
        scanned_files = 0
        for file_path in files:
            relative_path = os.path.relpath(file_path, root).replace(os.sep, "/")
            try:
                content = read_file_content(file_path)
            except (OSError, UnicodeDecodeError) as e:
                errors.append(f"Error scanning {file_path}: {e}")
                continue
            scanned_files += 1
            usages.extend(scan_file_content(
                content, relative_path, self.formats, self.categorizer, self.context_length))
            patterns.extend(self.pattern_detector.detect(content, relative_path))

        tokens = aggregate_token_usages(usages)
        total_usage = sum(token.total_count for token in tokens)
        coverage = calculate_coverage(tokens, self.catalog_size)
        summary = ScanSummary(
            total_files=len(files),
            scanned_files=scanned_files,
            tokens_found=total_usage,
            unique_tokens=len(tokens),
            most_used_token=tokens[0].token_name if tokens else "",
            coverage_percentage=coverage,
            tokens_by_tier=summarize_tiers(tokens),
        )

        duration_ms = int((time.monotonic() - start_time) * 1000)
        log(f"{GREY}⏱️  Scan completed in {duration_ms}ms{RESET}")

        return ScanResult(
            repository=repository,
            scan_date=datetime.now(),
            tokens_found=tokens,
            total_usage=total_usage,
            coverage=coverage,
            patterns=self.pattern_detector.aggregate(patterns),
            errors=errors,
            summary=summary,
            duration_ms=duration_ms,
        )

    def prepare_repository(self, repository: RepositoryConfig) -> str:
        """
        Makes a repository available on disk and returns its root.

        Local repositories are used in place. Remote ones are cloned into
        repos_dir/<name> (or their local_path), or fetched, checked out and
        pulled if a clone already exists.
        """
        if repository.is_local:
            path = os.path.expanduser(repository.location)
            if not os.path.isdir(path):
                raise RepositoryNotFoundError(f"Local repository path does not exist: {repository.location}")
            log(f"{GREY}📂 Using local repository: {repository.name} at {repository.location}{RESET}")
            return path

        local_path = repository.local_path or os.path.join(self.repos_dir, repository.name)
        try:
            if os.path.isdir(os.path.join(local_path, ".git")):
                log(f"{GREY}📥 Updating existing repository: {repository.name}{RESET}")
                repo = git.Repo(local_path)
                repo.remotes.origin.fetch()
                repo.git.checkout(repository.branch)
                repo.remotes.origin.pull()
            else:
                log(f"{GREY}📥 Cloning repository: {repository.name}{RESET}")
                os.makedirs(os.path.dirname(os.path.abspath(local_path)), exist_ok=True)
                git.Repo.clone_from(repository.location, local_path, branch=repository.branch)
        except (GitError, OSError, AttributeError) as e:
            raise RepositoryPreparationError(f"Could not prepare {repository.name}: {e}") from e
        return local_path


def repositories_from_config(entries: Iterable[Dict[str, Any]]) -> List[RepositoryConfig]:
    """Turns raw configuration entries into RepositoryConfig objects, skipping invalid ones."""
    repositories = []
    for entry in entries:
        try:
            repositories.append(RepositoryConfig.from_dict(entry))
        except (ValueError, AttributeError) as e:
            warn(f"{RED}✖ Skipping repository entry: {e}{RESET}")
    return repositories
