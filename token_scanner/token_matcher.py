"""
token_matcher.py

Applies token formats to file content and turns the matches into positioned
occurrences and per-file usage results.
"""

from collections import OrderedDict
from typing import Iterable, List

from .config import DEFAULT_CONTEXT_LENGTH
from .models import TokenFormat, TokenOccurrence, TokenUsageResult


def get_context_around(line: str, char_index: int, context_length: int = DEFAULT_CONTEXT_LENGTH) -> str:
    """Slice of the line around a match start, clipped to the line bounds."""
    start = max(0, char_index - context_length)
    end = min(len(line), char_index + context_length)
    return line[start:end]


def extract_token_name(match) -> str:
    """First capture group when the format has one and it matched, else the whole match."""
    if match.re.groups and match.group(1):
        return match.group(1)
    return match.group(0)


def _iter_matches(content, token_format, file_path, context_length):
    """Yield (token name, occurrence) for every match, line by line."""
    for line_index, line in enumerate(content.split("\n")):
        for match in token_format.pattern.finditer(line):
            yield extract_token_name(match), TokenOccurrence(
                file_path=file_path,
                line=line_index + 1,
                column=match.start() + 1,
                context=get_context_around(line, match.start(), context_length),
                matched_text=match.group(0),
                format_name=token_format.name,
            )


def find_token_matches(
    content: str,
    token_format: TokenFormat,
    file_path: str,
    context_length: int = DEFAULT_CONTEXT_LENGTH,
) -> List[TokenOccurrence]:
    """
    Finds every occurrence of a format in the content.

    Each line gets its own finditer() pass, so all non-overlapping matches on
    a line are returned and nothing carries over from the previous line.

    Args:
        content (str): Full file content.
        token_format (TokenFormat): The format to apply.
        file_path (str): Path recorded on each occurrence.
        context_length (int): Characters of context kept either side of a match.

    Returns:
        List[TokenOccurrence]: Occurrences in line order, then column order.
    """
    return [occurrence for _, occurrence in _iter_matches(content, token_format, file_path, context_length)]


def scan_file_content(
    content: str,
    file_path: str,
    formats: Iterable[TokenFormat],
    categorizer=None,
    context_length: int = DEFAULT_CONTEXT_LENGTH,
) -> List[TokenUsageResult]:
    """
    Scans one file's content with every applicable format.

    Formats whose extensions do not cover the file are skipped. Matches are
    grouped by token name within each format, giving one TokenUsageResult per
    (token, format) with the file as its only location.

    Args:
        content (str): Full file content.
        file_path (str): Path of the file, relative to the repository root.
        formats (Iterable[TokenFormat]): Registered formats.
        categorizer (Optional[TokenCategorizer]): Assigns a category to each token.
        context_length (int): Characters of context kept either side of a match.

    Returns:
        List[TokenUsageResult]: Per-file usage results.
    """
    usages = []
    for token_format in formats:
        if not token_format.applies_to(file_path):
            continue

        groups = OrderedDict()
        for token_name, occurrence in _iter_matches(content, token_format, file_path, context_length):
            groups.setdefault(token_name, []).append(occurrence)

        for token_name, occurrences in groups.items():
            usages.append(TokenUsageResult(
                token_name=token_name,
                token_type=token_format.name,
                occurrences=occurrences,
                total_count=len(occurrences),
                files=[file_path],
                category=categorizer.categorize(token_name, file_path) if categorizer else None,
            ))
    return usages
