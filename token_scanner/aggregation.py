"""
Aggregation of per-file token usage into repository totals.
"""

from collections import OrderedDict
from typing import Dict, Iterable, List

from .config import TOKEN_CATALOG_SIZE, TOKEN_TIERS
from .models import TokenUsageResult


def aggregate_token_usages(usages: Iterable[TokenUsageResult]) -> List[TokenUsageResult]:
    """
    Merges usage results that share a (token_name, token_type) key.

    Counts are summed, occurrence lists concatenated as-is and file lists
    merged without duplicates. Input objects are left untouched.

    Args:
        usages (Iterable[TokenUsageResult]): Per-file usage results.

    Returns:
        List[TokenUsageResult]: One result per key, most used first. Ties keep
                                the order in which the keys were first seen.
    """
    aggregated = OrderedDict()

    for usage in usages:
        key = (usage.token_name, usage.token_type)
        existing = aggregated.get(key)
        if existing is None:
            aggregated[key] = TokenUsageResult(
                token_name=usage.token_name,
                token_type=usage.token_type,
                occurrences=list(usage.occurrences),
                total_count=usage.total_count,
                files=list(OrderedDict.fromkeys(usage.files)),
                category=usage.category,
            )
            continue

        existing.occurrences.extend(usage.occurrences)
        existing.total_count += usage.total_count
        for file_path in usage.files:
            if file_path not in existing.files:
                existing.files.append(file_path)

    return sorted(aggregated.values(), key=lambda t: t.total_count, reverse=True)


def calculate_coverage(tokens: List[TokenUsageResult], catalog_size: int = TOKEN_CATALOG_SIZE) -> int:
    """
    Percentage of the token catalog represented by the unique tokens found.

    The catalog size is a placeholder rather than the size of a real token
    catalog, so values above 100 are possible.
    """
    if not tokens or catalog_size <= 0:
        return 0
    return round(len(tokens) / catalog_size * 100)


def summarize_tiers(tokens: Iterable[TokenUsageResult]) -> Dict[str, int]:
    """Total usage per category tier; uncategorized tokens are counted separately."""
    totals = {tier: 0 for tier in TOKEN_TIERS}
    for token in tokens:
        tier = token.category.tier if token.category else "uncategorized"
        totals[tier] = totals.get(tier, 0) + token.total_count
    return totals
