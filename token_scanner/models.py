"""
Data models for Token Scanner.

This module defines the data structures passed between the scanner stages:
token formats and repositories (configuration), occurrences and usage
results (scan output), and commits with their token changes (git output).
"""

import os
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from re import Pattern
from typing import Any, Dict, FrozenSet, List, Optional


class ChangeType(str, Enum):
    """Type of change to a file in a commit."""
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"


class Complexity(str, Enum):
    """Static complexity tier of a structural pattern signature."""
    SIMPLE = "simple"
    MEDIUM = "medium"
    COMPLEX = "complex"


@dataclass(frozen=True)
class TokenFormat:
    """A named matching rule plus the file extensions it applies to."""
    name: str
    pattern: Pattern
    file_extensions: FrozenSet[str]
    description: str = ""

    def applies_to(self, file_path: str) -> bool:
        """Check whether the file's extension is handled by this format."""
        return os.path.splitext(file_path)[1].lower() in self.file_extensions


@dataclass(frozen=True)
class RepositoryConfig:
    """A repository to scan, as declared in the configuration."""
    location: str
    name: str
    team: str = ""
    branch: str = "main"
    type: str = "website"
    local_path: Optional[str] = None

    @property
    def is_local(self) -> bool:
        return self.location.startswith(("/", "./", "../", "~")) or os.path.isabs(self.location)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RepositoryConfig":
        location = data.get("location") or data.get("url")
        if not location:
            raise ValueError(f"Repository entry has no url/location: {data!r}")
        return cls(
            location=location,
            name=data.get("name") or os.path.basename(location.rstrip("/")),
            team=data.get("team", ""),
            branch=data.get("branch") or "main",
            type=data.get("type", "website"),
            local_path=data.get("local_path") or data.get("localPath"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class TokenOccurrence:
    """One place where a token format matched."""
    file_path: str
    line: int  # 1-based
    column: int  # 1-based
    context: str
    matched_text: str
    format_name: str


@dataclass
class TokenCategory:
    """Tier and label assigned to a token name."""
    tier: str  # 'raw', 'foundation' or 'component'
    category: str
    purpose: str
    subcategory: Optional[str] = None


@dataclass
class TokenUsageResult:
    """Usage of one token (name + format) within a file or a repository."""
    token_name: str
    token_type: str
    occurrences: List[TokenOccurrence] = field(default_factory=list)
    total_count: int = 0
    files: List[str] = field(default_factory=list)
    category: Optional[TokenCategory] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class PatternUsageResult:
    """Usage of a structural UI pattern (button, card...)."""
    pattern_name: str
    usage_count: int
    locations: List[str] = field(default_factory=list)
    complexity: Complexity = Complexity.SIMPLE
    token_dependencies: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["complexity"] = Complexity(self.complexity).value
        return data


@dataclass
class ScanSummary:
    total_files: int = 0
    scanned_files: int = 0
    tokens_found: int = 0
    unique_tokens: int = 0
    most_used_token: str = ""
    coverage_percentage: int = 0
    tokens_by_tier: Dict[str, int] = field(default_factory=dict)


@dataclass
class ScanResult:
    """Result of scanning one repository."""
    repository: RepositoryConfig
    scan_date: datetime
    tokens_found: List[TokenUsageResult] = field(default_factory=list)
    total_usage: int = 0
    coverage: int = 0
    patterns: List[PatternUsageResult] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    summary: ScanSummary = field(default_factory=ScanSummary)
    duration_ms: int = 0

    @classmethod
    def failed(cls, repository: RepositoryConfig, error: str) -> "ScanResult":
        """Empty result for a repository that could not be scanned."""
        return cls(repository=repository, scan_date=datetime.now(), errors=[error])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "repository": self.repository.to_dict(),
            "scan_date": self.scan_date.isoformat(),
            "tokens_found": [t.to_dict() for t in self.tokens_found],
            "total_usage": self.total_usage,
            "coverage": self.coverage,
            "patterns": [p.to_dict() for p in self.patterns],
            "errors": list(self.errors),
            "summary": asdict(self.summary),
            "duration_ms": self.duration_ms,
        }


@dataclass
class TokenDefinition:
    """A dictionary entry describing a known design token."""
    name: str
    tier: str
    type: str  # 'color', 'spacing', 'typography', 'size', 'border', ...
    subcategory: Optional[str] = None
    description: Optional[str] = None
    aliases: List[str] = field(default_factory=list)
    deprecated: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenDefinition":
        return cls(
            name=data["name"],
            tier=data.get("tier") or data.get("category", "raw"),
            type=data.get("type", "theme"),
            subcategory=data.get("subcategory"),
            description=data.get("description"),
            aliases=list(data.get("aliases", [])),
            deprecated=bool(data.get("deprecated", False)),
        )


@dataclass
class TokenChange:
    """A token added, removed or modified in a diff."""
    token_name: str
    line_number: int
    old_value: Optional[str] = None  # None for additions
    new_value: Optional[str] = None  # None for deletions

    @property
    def kind(self) -> str:
        if self.old_value is not None and self.new_value is not None:
            return "updated"
        if self.new_value is not None:
            return "added"
        return "removed"


@dataclass
class GitChange:
    """A token file touched by a commit."""
    type: ChangeType
    file: str
    diff: Optional[str] = None
    token_changes: Optional[List[TokenChange]] = None


@dataclass
class CommitInfo:
    hash: str
    author: str
    date: str
    message: str
    changes: List[GitChange] = field(default_factory=list)

    @property
    def short_hash(self) -> str:
        return self.hash[:8]

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for change in data["changes"]:
            change["type"] = ChangeType(change["type"]).value
        return data


@dataclass
class TokenChangeRecord:
    """Token change flattened out of its commit, for notification consumers."""
    type: str  # 'added', 'updated' or 'removed'
    token_name: str
    category: str
    file_path: str
    description: str
    commit: str
    old_value: Optional[str] = None
    new_value: Optional[str] = None

    @property
    def severity(self) -> str:
        return "warning" if self.type == "removed" else "info"

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["severity"] = self.severity
        return data

