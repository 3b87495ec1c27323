"""
token_dictionary.py

Reference dictionary of known design-system tokens. Entries carry the tier,
type and description used to categorize a token without falling back to
name heuristics.
"""

from collections import Counter
from dataclasses import replace
from typing import Dict, Iterable, List, Optional

from .config import TOKEN_TIERS
from .models import TokenDefinition

# (name, tier, type, subcategory, description)
_BUILTIN_ENTRIES = [
    # Raw colors
    ("$cds-black", "raw", "color", "Base Colors", "Primary black color"),
    ("$cds-white", "raw", "color", "Base Colors", "Primary white color"),
    ("$cds-red", "raw", "color", "Brand Colors", "Canon brand red"),
    ("$cds-blue", "raw", "color", "Brand Colors", "Canon brand blue"),
    ("$cds-ochre", "raw", "color", "Brand Colors", "Canon ochre accent color"),
    ("$cds-blue-100", "raw", "color", "Blue Scale", "Light blue tint"),
    ("$cds-blue-200", "raw", "color", "Blue Scale", "Medium blue tint"),
    ("$cds-grey-100", "raw", "color", "Grey Scale", "Lightest grey"),
    ("$cds-grey-200", "raw", "color", "Grey Scale", "Light grey"),
    ("$cds-grey-300", "raw", "color", "Grey Scale", "Medium light grey"),
    ("$cds-grey-400", "raw", "color", "Grey Scale", "Medium grey"),
    ("$cds-grey-500", "raw", "color", "Grey Scale", "Medium dark grey"),
    ("$cds-grey-600", "raw", "color", "Grey Scale", "Dark grey"),
    ("$cds-grey-700", "raw", "color", "Grey Scale", "Darker grey"),

    # Semantic border and background colors
    ("$cds-border-color-blue", "foundation", "color", "Border Colors", "Blue border color"),
    ("$cds-border-color-blue-light", "foundation", "color", "Border Colors", "Light blue border color"),
    ("$cds-border-color-red", "foundation", "color", "Border Colors", "Red border color"),
    ("$cds-border-color-black", "foundation", "color", "Border Colors", "Black border color"),
    ("$cds-border-color-white", "foundation", "color", "Border Colors", "White border color"),
    ("$cds-border-color-grey-darkest", "foundation", "color", "Border Colors", "Darkest grey border color"),
    ("$cds-border-color-grey-darker", "foundation", "color", "Border Colors", "Darker grey border color"),
    ("$cds-border-color-grey-dark", "foundation", "color", "Border Colors", "Dark grey border color"),
    ("$cds-border-color-grey", "foundation", "color", "Border Colors", "Grey border color"),
    ("$cds-border-color-grey-light", "foundation", "color", "Border Colors", "Light grey border color"),
    ("$cds-border-color-grey-lighter", "foundation", "color", "Border Colors", "Lighter grey border color"),
    ("$cds-border-color-grey-lightest", "foundation", "color", "Border Colors", "Lightest grey border color"),
    ("$cds-border-color-ochre", "foundation", "color", "Border Colors", "Ochre border color"),
    ("$cds-bg-color-blue", "foundation", "color", "Background Colors", "Blue background color"),
    ("$cds-bg-color-blue-light", "foundation", "color", "Background Colors", "Light blue background color"),

    # Spacing scale
    ("space-4", "foundation", "spacing", "Base Spacing", "4px spacing unit"),
    ("space-8", "foundation", "spacing", "Base Spacing", "8px spacing unit"),
    ("space-12", "foundation", "spacing", "Base Spacing", "12px spacing unit"),
    ("space-16", "foundation", "spacing", "Base Spacing", "16px spacing unit"),
    ("space-20", "foundation", "spacing", "Base Spacing", "20px spacing unit"),
    ("space-24", "foundation", "spacing", "Base Spacing", "24px spacing unit"),
    ("space-32", "foundation", "spacing", "Base Spacing", "32px spacing unit"),

    # Foundation mixins
    ("@include theme", "foundation", "theme", "Theme Mixins", "Core theming mixin for applying theme tokens"),
    ("@include media-breakpoint-up", "foundation", "layout", "Responsive Mixins", "Bootstrap responsive breakpoint mixin"),
    ("@include media-breakpoint-down", "foundation", "layout", "Responsive Mixins", "Bootstrap responsive breakpoint mixin"),
    ("@include media-breakpoint-between", "foundation", "layout", "Responsive Mixins", "Bootstrap responsive breakpoint mixin"),
    ("@include make-container", "foundation", "layout", "Layout Mixins", "Bootstrap container mixin"),
]

BUILTIN_DEFINITIONS: List[TokenDefinition] = [
    TokenDefinition(name=name, tier=tier, type=token_type, subcategory=subcategory, description=description)
    for name, tier, token_type, subcategory, description in _BUILTIN_ENTRIES
]

HUMAN_READABLE_CATEGORIES = {
    "color": "Colors",
    "spacing": "Spacing",
    "typography": "Typography",
    "size": "Sizing",
    "border": "Borders",
    "shadow": "Shadows",
    "animation": "Animation",
    "layout": "Layout",
    "theme": "Theme System",
}

SCSS_SIGIL = "$"


class TokenDictionary:
    """
    Lookup table of known tokens.

    Built-in entries are merged with custom ones at construction; entries can
    be added at runtime but are never removed.
    """

    def __init__(self, custom_definitions: Optional[Iterable[TokenDefinition]] = None):
        self._definitions: Dict[str, TokenDefinition] = {
            d.name: replace(d, aliases=list(d.aliases)) for d in BUILTIN_DEFINITIONS
        }
        for definition in custom_definitions or []:
            self.add_definition(definition)

    def __len__(self):
        return len(self._definitions)

    def __contains__(self, token_name):
        return self.get_definition(token_name) is not None

    def get_definition(self, token_name: str) -> Optional[TokenDefinition]:
        """
        Finds the dictionary entry for a token name.

        Tries the exact name, then the name with and without the SCSS '$'
        sigil, then every entry's aliases.

        Returns:
            Optional[TokenDefinition]: The entry, or None if the token is unknown.
        """
        if token_name in self._definitions:
            return self._definitions[token_name]

        with_sigil = token_name if token_name.startswith(SCSS_SIGIL) else SCSS_SIGIL + token_name
        if with_sigil in self._definitions:
            return self._definitions[with_sigil]

        without_sigil = token_name[len(SCSS_SIGIL):] if token_name.startswith(SCSS_SIGIL) else token_name
        if without_sigil in self._definitions:
            return self._definitions[without_sigil]

        for definition in self._definitions.values():
            if token_name in definition.aliases:
                return definition
        return None

    def is_known(self, token_name: str) -> bool:
        return self.get_definition(token_name) is not None

    def definitions_by_tier(self, tier: str) -> List[TokenDefinition]:
        return [d for d in self._definitions.values() if d.tier == tier]

    def definitions_by_type(self, token_type: str) -> List[TokenDefinition]:
        return [d for d in self._definitions.values() if d.type == token_type]

    def add_definition(self, definition: TokenDefinition) -> bool:
        """
        Adds an entry, e.g. for tokens discovered while scanning.

        Existing entries are never replaced; use update_definition() for that.
        A name already known with or without the '$' sigil, or as an alias,
        counts as present.

        Returns:
            bool: True if the entry was added, False if the name was already known.
        """
        if self.get_definition(definition.name) is not None:
            return False
        self._definitions[definition.name] = definition
        return True

    def update_definition(self, token_name: str, **changes) -> bool:
        """Updates fields of an existing entry. Returns False if there is no such entry."""
        definition = self._definitions.get(token_name)
        if definition is None:
            return False
        for field_name, value in changes.items():
            if not hasattr(definition, field_name):
                raise AttributeError(f"TokenDefinition has no field '{field_name}'")
            setattr(definition, field_name, value)
        return True

    def statistics(self) -> Dict[str, object]:
        """Entry counts overall, per tier and per type."""
        stats = {"total": len(self._definitions)}
        tiers = Counter(d.tier for d in self._definitions.values())
        for tier in TOKEN_TIERS:
            stats[tier] = tiers.get(tier, 0)
        stats["by_type"] = dict(Counter(d.type for d in self._definitions.values()))
        return stats


def human_readable_category(token_type: str) -> str:
    """Display label for a dictionary token type."""
    return HUMAN_READABLE_CATEGORIES.get(token_type, "Other")
