"""
git_analysis.py

Git-based detection of design token changes. GitChangeDetector walks the
commits of a design-system repository since the last processed commit and
reports which token files changed and which tokens were added, removed or
modified in them.
"""

import os
import re
from pathlib import Path
from typing import List, Optional

import git
from git.exc import GitError, InvalidGitRepositoryError, NoSuchPathError

from .config import DEFAULT_DIFF_LOOKAHEAD, DEFAULT_LOOKBACK_HOURS, GREEN, GREY, RED, RESET, YELLOW
from .diff_parsing import parse_token_changes
from .models import ChangeType, CommitInfo, GitChange, TokenChangeRecord
from .utils import log, warn

COMMIT_LOG_FORMAT = "format:%H|%an|%ad|%s"

TOKEN_FILE_PATTERNS = [
    re.compile(r"tokens?\.(scss|css|json|js|ts)$", re.IGNORECASE),
    re.compile(r"_tokens?\.(scss|css|json|js|ts)$", re.IGNORECASE),
    re.compile(r"design-tokens?\.(scss|css|json|js|ts)$", re.IGNORECASE),
    re.compile(r"variables?\.(scss|css|json|js|ts)$", re.IGNORECASE),
    re.compile(r"_variables?\.(scss|css|json|js|ts)$", re.IGNORECASE),
    re.compile(r"theme\.(scss|css|json|js|ts)$", re.IGNORECASE),
    re.compile(r"foundation.*\.(scss|css)$", re.IGNORECASE),
    re.compile(r"colors?\.(scss|css|json|js|ts)$", re.IGNORECASE),
    re.compile(r"typography\.(scss|css|json|js|ts)$", re.IGNORECASE),
    re.compile(r"spacing\.(scss|css|json|js|ts)$", re.IGNORECASE),
    re.compile(r"size.*\.(scss|css|json|js|ts)$", re.IGNORECASE),
]

STATUS_CHANGE_TYPES = {
    "A": ChangeType.ADDED,
    "M": ChangeType.MODIFIED,
    "D": ChangeType.DELETED,
}

# Checked in order against the lower-cased file path
PATH_CATEGORY_HINTS = [
    (("color",), "colors"),
    (("typography", "font"), "typography"),
    (("spacing", "space"), "spacing"),
    (("size", "sizing"), "sizing"),
    (("breakpoint", "media"), "breakpoints"),
    (("shadow", "elevation"), "shadows"),
    (("border", "radius"), "borders"),
    (("animation", "transition"), "animation"),
    (("foundation",), "foundation"),
    (("component",), "component"),
]


def is_token_file(file_path: str) -> bool:
    """Checks a changed file against the token file allowlist."""
    return any(pattern.search(file_path) for pattern in TOKEN_FILE_PATTERNS)


def get_change_type(status: str) -> ChangeType:
    """Maps a git name-status code to a change type; renames and the rest count as modified."""
    return STATUS_CHANGE_TYPES.get(status[:1], ChangeType.MODIFIED)


def infer_token_category(file_path: str) -> str:
    """Guesses a token category from the name of the file it is defined in."""
    lower_path = file_path.lower()
    for hints, category in PATH_CATEGORY_HINTS:
        if any(hint in lower_path for hint in hints):
            return category
    return "misc"

# =============================================================================
# LAST PROCESSED COMMIT STORAGE
# =============================================================================

class CommitPointerStore:
    """Where a detector keeps the hash of the last commit it processed."""

    def load(self) -> Optional[str]:
        raise NotImplementedError

    def save(self, commit_hash: str):
        raise NotImplementedError


class MemoryCommitPointerStore(CommitPointerStore):
    """Keeps the pointer in memory only."""

    def __init__(self, initial: Optional[str] = None):
        self.commit_hash = initial

    def load(self) -> Optional[str]:
        return self.commit_hash

    def save(self, commit_hash: str):
        self.commit_hash = commit_hash


class FileCommitPointerStore(CommitPointerStore):
    """Keeps the pointer as a single hash in a flat text file."""

    def __init__(self, path: str):
        self.path = Path(path)

    def load(self) -> Optional[str]:
        if not self.path.exists():
            return None
        try:
            return self.path.read_text(encoding="utf-8").strip() or None
        except OSError as e:
            warn(f"{RED}✖ Error loading last processed commit from {self.path}: {e}{RESET}")
            return None

    def save(self, commit_hash: str):
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(commit_hash, encoding="utf-8")
        except OSError as e:
            warn(f"{RED}✖ Error saving last processed commit to {self.path}: {e}{RESET}")

# =============================================================================
# CHANGE DETECTION
# =============================================================================

class GitChangeDetector:
    """
    Detects token changes in one repository's commit history.

    The detector starts without a pointer (first scan: look back a fixed
    number of hours) or with the pointer held by its store (scan the commits
    after it). After a pass that found commits, the pointer moves to HEAD.

    Failures of the underlying git commands are reported on stderr and turn
    into empty results; the public methods do not raise.
    """

    def __init__(
        self,
        repo_path: str,
        pointer_store: Optional[CommitPointerStore] = None,
        lookback_hours: int = DEFAULT_LOOKBACK_HOURS,
        lookahead: int = DEFAULT_DIFF_LOOKAHEAD,
    ):
        """
        Initializes the change detector.

        Args:
            repo_path: Working tree of the watched repository.
            pointer_store: Holds the last processed commit. Defaults to an in-memory store.
            lookback_hours: Window used when there is no pointer yet.
            lookahead: Diff lines searched when pairing a removed token with its replacement.
        """
        self.repo_path = repo_path
        self.pointer_store = pointer_store if pointer_store is not None else MemoryCommitPointerStore()
        self.lookback_hours = lookback_hours
        self.lookahead = lookahead
        self.last_processed_commit = self.pointer_store.load()
        if self.last_processed_commit:
            log(f"{GREY}📋 Last processed commit: {self.last_processed_commit}{RESET}")
        else:
            log(f"{GREY}📋 No previous scan found, will detect recent changes{RESET}")

    def _get_repo(self):
        """Opens the repository, returns None if the path is missing or not a repository."""
        if not os.path.exists(self.repo_path):
            warn(f"{YELLOW}⚠️  Design system path not found: {self.repo_path}{RESET}")
            return None
        try:
            return git.Repo(self.repo_path)
        except (InvalidGitRepositoryError, NoSuchPathError):
            warn(f"{YELLOW}⚠️  Not a valid Git repository: {self.repo_path}{RESET}")
            return None

    def get_changes_since_last_scan(self) -> List[CommitInfo]:
        """
        Returns the commits since the last processed commit with their token changes.

        Without a pointer the lookback window is used instead. When the pointer
        already equals HEAD nothing is returned and nothing changes.
        """
        try:
            repo = self._get_repo()
            if repo is None:
                return []

            latest_commit = self.get_latest_commit(repo)
            if not latest_commit:
                warn(f"{YELLOW}⚠️  No commits found in {self.repo_path}{RESET}")
                return []

            if not self.last_processed_commit:
                log(f"{GREY}🔍 Getting changes from last {self.lookback_hours} hours (first scan){RESET}")
                commits = self._get_commits(repo, since=f"{self.lookback_hours} hours ago")
            elif self.last_processed_commit == latest_commit:
                log(f"{GREEN}✅ No new commits since last scan{RESET}")
                return []
            else:
                log(f"{GREY}🔍 Getting changes between {self.last_processed_commit} and {latest_commit}{RESET}")
                commits = self._get_commits(repo, f"{self.last_processed_commit}..{latest_commit}")

            if commits:
                self._advance_pointer(latest_commit)
            return commits
        except (GitError, OSError) as e:
            warn(f"{RED}✖ Error getting changes since last scan: {e}{RESET}")
            return []

    def get_recent_changes(self, hours: int = DEFAULT_LOOKBACK_HOURS) -> List[CommitInfo]:
        """Returns the commits of the last `hours` hours without touching the pointer."""
        try:
            repo = self._get_repo()
            if repo is None:
                return []
            log(f"{GREY}🔍 Getting changes from last {hours} hours{RESET}")
            return self._get_commits(repo, since=f"{hours} hours ago")
        except (GitError, OSError) as e:
            warn(f"{RED}✖ Error getting recent changes: {e}{RESET}")
            return []

    def get_latest_commit(self, repo) -> Optional[str]:
        """Hash of HEAD, or None for an empty repository."""
        try:
            return repo.git.rev_parse("HEAD").strip() or None
        except GitError as e:
            warn(f"{RED}✖ Error getting latest commit: {e}{RESET}")
            return None

    def _advance_pointer(self, commit_hash: str):
        self.pointer_store.save(commit_hash)
        self.last_processed_commit = commit_hash
        log(f"{GREY}💾 Saved last processed commit: {commit_hash}{RESET}")

    def _get_commits(self, repo, *revision_args, **log_options) -> List[CommitInfo]:
        try:
            commit_list = repo.git.log(*revision_args, pretty=COMMIT_LOG_FORMAT, date="iso", **log_options)
        except GitError as e:
            warn(f"{RED}✖ Error getting commits: {e}{RESET}")
            return []

        commits = []
        for line in commit_list.strip().splitlines():
            parts = line.split("|", 3)
            if len(parts) < 4:
                continue
            commit_hash, author, date, message = parts
            commits.append(CommitInfo(
                hash=commit_hash,
                author=author,
                date=date,
                message=message,
                changes=self._get_changes_for_commit(repo, commit_hash),
            ))
        return commits

    def _get_changes_for_commit(self, repo, commit_hash: str) -> List[GitChange]:
        try:
            changed_files = repo.git.diff_tree("--no-commit-id", "--name-status", "--root", "-r", commit_hash)
        except GitError as e:
            warn(f"{RED}✖ Error getting changes for commit {commit_hash}: {e}{RESET}")
            return []

        changes = []
        for line in changed_files.strip().splitlines():
            fields = line.split("\t")
            if len(fields) < 2:
                continue
            status, file_path = fields[0], fields[-1]
            if not is_token_file(file_path):
                continue

            change = GitChange(type=get_change_type(status), file=file_path)
            if change.type == ChangeType.MODIFIED:
                change.diff = self._get_file_diff(repo, commit_hash, file_path)
                change.token_changes = parse_token_changes(change.diff, self.lookahead)
            changes.append(change)
        return changes

    def _get_file_diff(self, repo, commit_hash: str, file_path: str) -> str:
        try:
            return repo.git.show(commit_hash, "--", file_path)
        except GitError as e:
            warn(f"{RED}✖ Error getting diff for {file_path}: {e}{RESET}")
            return ""


def summarize_token_changes(commits: List[CommitInfo]) -> List[TokenChangeRecord]:
    """
    Flattens commits into one record per token change.

    A token file added without parsed token changes is reported as one new
    token named after the file.
    """
    records = []
    for commit in commits:
        for change in commit.changes:
            if change.token_changes:
                for token_change in change.token_changes:
                    records.append(TokenChangeRecord(
                        type=token_change.kind,
                        token_name=token_change.token_name,
                        category=infer_token_category(change.file),
                        file_path=change.file,
                        description=f"{commit.message} (by {commit.author})",
                        commit=commit.short_hash,
                        old_value=token_change.old_value,
                        new_value=token_change.new_value,
                    ))
            elif change.type == ChangeType.ADDED:
                records.append(TokenChangeRecord(
                    type="added",
                    token_name=Path(change.file).stem,
                    category=infer_token_category(change.file),
                    file_path=change.file,
                    description=f"New token file added (by {commit.author})",
                    commit=commit.short_hash,
                    new_value="New token file",
                ))
    return records
