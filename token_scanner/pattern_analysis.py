"""
pattern_analysis.py

This module provides the PatternDetector class, responsible for detecting
structural UI patterns (buttons, cards, modals, forms, navigation) in source
files by fixed signatures, and for aggregating their usage across a repository.
"""

import re
from collections import OrderedDict
from dataclasses import dataclass
from re import Pattern
from typing import Iterable, List, Optional

from .models import Complexity, PatternUsageResult


@dataclass(frozen=True)
class PatternSignature:
    """A named structural pattern and the static complexity tier it carries."""
    name: str
    pattern: Pattern
    complexity: Complexity


DEFAULT_PATTERN_SIGNATURES: List[PatternSignature] = [
    PatternSignature("Button", re.compile(r"class.*button|<Button|btn-", re.IGNORECASE), Complexity.SIMPLE),
    PatternSignature("Card", re.compile(r"class.*card|<Card|\.card", re.IGNORECASE), Complexity.MEDIUM),
    PatternSignature("Modal", re.compile(r"class.*modal|<Modal|\.modal", re.IGNORECASE), Complexity.COMPLEX),
    PatternSignature("Form", re.compile(r"class.*form|<Form|\.form", re.IGNORECASE), Complexity.MEDIUM),
    PatternSignature("Navigation", re.compile(r"class.*nav|<Nav|\.nav", re.IGNORECASE), Complexity.COMPLEX),
]


class PatternDetector:
    """
    Detects structural pattern usage with a fixed list of signatures.

    Complexity is a property of the signature, never derived from how often
    the pattern is used.
    """

    def __init__(self, signatures: Optional[Iterable[PatternSignature]] = None):
        """
        Initializes the PatternDetector.

        Args:
            signatures (Optional[Iterable[PatternSignature]]): Signatures to look for.
                                                               Defaults to DEFAULT_PATTERN_SIGNATURES.
        """
        self.signatures = list(signatures) if signatures is not None else list(DEFAULT_PATTERN_SIGNATURES)

    def detect(self, content: str, file_path: str) -> List[PatternUsageResult]:
        """
        Counts signature matches in one file.

        Args:
            content (str): Full file content.
            file_path (str): Path recorded as the pattern's location.

        Returns:
            List[PatternUsageResult]: One result per signature found at least once.
        """
        results = []
        for signature in self.signatures:
            count = len(signature.pattern.findall(content))
            if count > 0:
                results.append(PatternUsageResult(
                    pattern_name=signature.name,
                    usage_count=count,
                    locations=[file_path],
                    complexity=signature.complexity,
                ))
        return results

    def aggregate(self, results: Iterable[PatternUsageResult]) -> List[PatternUsageResult]:
        """
        Merges per-file pattern results by pattern name.

        Usage counts are summed and locations merged without duplicates.

        Returns:
            List[PatternUsageResult]: One result per pattern, most used first.
        """
        aggregated = OrderedDict()
        for result in results:
            existing = aggregated.get(result.pattern_name)
            if existing is None:
                aggregated[result.pattern_name] = PatternUsageResult(
                    pattern_name=result.pattern_name,
                    usage_count=result.usage_count,
                    locations=list(OrderedDict.fromkeys(result.locations)),
                    complexity=result.complexity,
                    token_dependencies=list(result.token_dependencies),
                )
                continue
            existing.usage_count += result.usage_count
            for location in result.locations:
                if location not in existing.locations:
                    existing.locations.append(location)

        return sorted(aggregated.values(), key=lambda p: p.usage_count, reverse=True)
