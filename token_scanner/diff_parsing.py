"""
Token change extraction from unified diffs.

Parsing is purely line and regex based. Lines that do not look like a token
definition are skipped, so malformed input yields fewer changes, never an
exception.
"""

import re
from typing import List, NamedTuple, Optional, Set

from .config import DEFAULT_DIFF_LOOKAHEAD
from .models import TokenChange

HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)")


class TokenDefinitionLine(NamedTuple):
    name: str
    value: str


# Tried in order; the first grammar that matches a line wins.
TOKEN_LINE_GRAMMARS = [
    (re.compile(r"\$([^:]+):\s*([^;]+);"), "$"),     # SCSS variable
    (re.compile(r"--([^:]+):\s*([^;]+);"), "--"),    # CSS custom property
    (re.compile(r"\"([^\"]+)\":\s*\"([^\"]+)\""), ""),  # JSON key/value
]


def extract_token_from_line(line: str) -> Optional[TokenDefinitionLine]:
    """
    Pulls a token name and value out of a source line.

    Examples:
        '$primary: #fff;'        -> ('$primary', '#fff')
        '  --gap-sm: 4px;'       -> ('--gap-sm', '4px')
        '"color.red": "#f00",'   -> ('color.red', '#f00')
    """
    for grammar, prefix in TOKEN_LINE_GRAMMARS:
        match = grammar.search(line)
        if match:
            return TokenDefinitionLine(prefix + match.group(1).strip(), match.group(2).strip())
    return None


def is_removed_line(line: str) -> bool:
    return line.startswith("-") and not line.startswith("---")


def is_added_line(line: str) -> bool:
    return line.startswith("+") and not line.startswith("+++")


def parse_token_changes(diff: Optional[str], lookahead: int = DEFAULT_DIFF_LOOKAHEAD) -> List[TokenChange]:
    """
    Derives token additions, removals and modifications from a unified diff.

    A removed token definition is paired with an added definition of the
    same name found within the next `lookahead` lines; the pair is reported
    as one modification. Unpaired removals are deletions. Added definitions
    that were not consumed by a pairing are additions.

    Line numbers start from the old-file start of the current hunk and
    advance on every line except removals.

    Args:
        diff (Optional[str]): Unified diff text, e.g. from `git show`.
        lookahead (int): How many following lines are searched for a pairing.

    Returns:
        List[TokenChange]: Changes in diff order.
    """
    changes: List[TokenChange] = []
    if not diff:
        return changes

    lines = diff.split("\n")
    consumed: Set[int] = set()
    line_number = 0

    for index, line in enumerate(lines):
        hunk = HUNK_HEADER_RE.match(line)
        if hunk:
            line_number = int(hunk.group(1))
            continue

        if is_removed_line(line):
            removed = extract_token_from_line(line[1:])
            if removed:
                paired = None
                for candidate in range(index + 1, min(len(lines), index + 1 + lookahead)):
                    next_line = lines[candidate]
                    if candidate in consumed or not is_added_line(next_line):
                        continue
                    added = extract_token_from_line(next_line[1:])
                    if added and added.name == removed.name:
                        paired = added
                        consumed.add(candidate)
                        break

                changes.append(TokenChange(
                    token_name=removed.name,
                    old_value=removed.value,
                    new_value=paired.value if paired else None,
                    line_number=line_number,
                ))

        elif is_added_line(line) and index not in consumed:
            added = extract_token_from_line(line[1:])
            if added:
                changes.append(TokenChange(
                    token_name=added.name,
                    new_value=added.value,
                    line_number=line_number,
                ))

        if not line.startswith("-"):
            line_number += 1

    return changes
