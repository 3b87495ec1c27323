"""
token_categorizer.py

This module provides the TokenCategorizer class, which assigns a tier
(raw, foundation or component) and a category label to a token name.

Known tokens are resolved through the TokenDictionary. Everything else goes
through CATEGORY_RULES, an ordered list of (predicate, classifier) rules in
which the first matching rule wins.
"""

import re
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional

from .config import TOKEN_TIERS
from .models import TokenCategory, TokenUsageResult
from .token_dictionary import TokenDictionary, human_readable_category

Predicate = Callable[[str, Optional[str]], bool]
Classifier = Callable[[str, Optional[str]], TokenCategory]


@dataclass(frozen=True)
class CategoryRule:
    """One heuristic step: if predicate(name, path) holds, classify(name, path) decides."""
    name: str
    predicate: Predicate
    classify: Classifier


# Color literals need the SCSS '$' sigil, bare 'white' aside.
BASE_COLOR_RE = re.compile(r"^(?:\$(?:black|white|gray-\d+)|white)$")
THEME_COLOR_RE = re.compile(r"^\$(?:primary|secondary|success|danger|warning|info|light|dark)")
FONT_WEIGHT_RE = re.compile(r"^[1-9]00$")
RAW_SPACING_RE = re.compile(r"^(?:space-\d+|[0-9]+)$")
RAW_SIZE_RE = re.compile(r"^(?:xs|sm|md|lg|xl|xxl)$")

CDS_PREFIX_RE = re.compile(r"^\$?cds-")
FOUNDATION_PATH_RES = [
    re.compile(r"foundation/"),
    re.compile(r"theme/"),
    re.compile(r"core/"),
    re.compile(r"_tokens\.scss$"),
    re.compile(r"_themeMixins\.scss$"),
]
COMPONENT_FILE_RE = re.compile(r"components/_?([^/]+)\.scss$")
MIXIN_NAME_RE = re.compile(r"@include\s+([^\s(]+)")


def _normalize_path(file_path: Optional[str]) -> str:
    return file_path.replace("\\", "/") if file_path else ""


def _has_foundation_path(file_path: Optional[str]) -> bool:
    path = _normalize_path(file_path)
    return bool(path) and any(p.search(path) for p in FOUNDATION_PATH_RES)


def extract_component_name(file_path: Optional[str]) -> Optional[str]:
    """'styles/components/_button.scss' -> 'Button'."""
    match = COMPONENT_FILE_RE.search(_normalize_path(file_path))
    if match:
        return match.group(1)[:1].upper() + match.group(1)[1:]
    return None


# =============================================================================
# CLASSIFIERS
# =============================================================================

def _fixed(tier, category, purpose, subcategory=None) -> Classifier:
    return lambda name, path: TokenCategory(tier=tier, category=category, purpose=purpose, subcategory=subcategory)


def _classify_cds_token(token_name, file_path):
    if any(word in token_name for word in ("color", "white", "black", "red")):
        return TokenCategory("foundation", "Colors", "Canon Design System color tokens", "CDS Colors")
    if "space" in token_name:
        return TokenCategory("foundation", "Spacing", "Canon Design System spacing tokens", "CDS Spacing")
    return TokenCategory("foundation", "Design System", "Canon Design System foundation tokens", "CDS Tokens")


def _classify_foundation_path(token_name, file_path):
    path = _normalize_path(file_path)
    if "foundation/spacing" in path:
        return TokenCategory("foundation", "Spacing", "Foundation spacing scale", "Spacing System")
    if "core/typography" in path:
        return TokenCategory("foundation", "Typography", "Foundation typography scale and utilities", "Typography System")
    return TokenCategory("foundation", "Design System", "Foundation design system tokens")


def _classify_component_file(token_name, file_path):
    component = extract_component_name(file_path)
    return TokenCategory(
        tier="component",
        category="Components",
        subcategory=component or "Generic Component",
        purpose=f"Component-specific styling for {component or 'UI components'}",
    )


CATEGORY_RULES: List[CategoryRule] = [
    # Raw tier: literal values, judged by the name alone
    CategoryRule(
        "raw-base-color",
        lambda name, path: bool(BASE_COLOR_RE.match(name)),
        _fixed("raw", "Colors", "Basic color values for the design system", "Base Colors"),
    ),
    CategoryRule(
        "raw-theme-color",
        lambda name, path: bool(THEME_COLOR_RE.match(name)),
        _fixed("raw", "Colors", "Semantic color values for UI states", "Theme Colors"),
    ),
    CategoryRule(
        "raw-spacing",
        lambda name, path: bool(RAW_SPACING_RE.match(name)),
        _fixed("raw", "Spacing", "Raw spacing values in pixels or rem units"),
    ),
    CategoryRule(
        "raw-font-weight",
        lambda name, path: bool(FONT_WEIGHT_RE.match(name)),
        _fixed("raw", "Typography", "Font weight values", "Font Weight"),
    ),
    CategoryRule(
        "raw-size",
        lambda name, path: bool(RAW_SIZE_RE.match(name)),
        _fixed("raw", "General", "Raw design values"),
    ),

    # Foundation tier: design-system prefixes and mixins, or a foundation file path
    CategoryRule(
        "foundation-cds",
        lambda name, path: bool(CDS_PREFIX_RE.match(name)),
        _classify_cds_token,
    ),
    CategoryRule(
        "foundation-theme-mixin",
        lambda name, path: name.startswith("@include theme"),
        _fixed("foundation", "Theme", "Theme switching and theming functionality", "Theme Mixins"),
    ),
    CategoryRule(
        "foundation-typography-mixin",
        lambda name, path: name.startswith("@include font-size-line-height"),
        _fixed("foundation", "Typography", "Font sizing and line height utilities", "Typography Mixins"),
    ),
    CategoryRule(
        "foundation-breakpoint-mixin",
        lambda name, path: name.startswith("@include media-breakpoint-"),
        _fixed("foundation", "Layout", "Responsive breakpoint utilities", "Responsive Mixins"),
    ),
    CategoryRule(
        "foundation-path",
        lambda name, path: _has_foundation_path(path),
        _classify_foundation_path,
    ),

    # Component tier: everything else, refined by where the token is used
    CategoryRule(
        "component-file",
        lambda name, path: "components/" in _normalize_path(path),
        _classify_component_file,
    ),
    CategoryRule(
        "component-utilities",
        lambda name, path: "_utils" in _normalize_path(path),
        _fixed("component", "Utilities", "Utility classes and helper styles", "Utility Classes"),
    ),
    CategoryRule(
        "component-default",
        lambda name, path: True,
        _fixed("component", "Components", "Component-level styling tokens"),
    ),
]


@dataclass
class ComponentPatternUsage:
    """Which tiers of tokens a component, mixin or utility file pattern uses."""
    pattern_name: str
    type: str  # 'component', 'mixin' or 'utility'
    count: int = 0
    tokens_used: Dict[str, List[str]] = field(default_factory=lambda: {tier: [] for tier in TOKEN_TIERS})


class TokenCategorizer:
    """
    Categorizes tokens by dictionary lookup, falling back to ordered heuristics.

    Exactly one TokenCategory is returned per call, and the same inputs always
    give the same category.
    """

    def __init__(self, dictionary: Optional[TokenDictionary] = None, rules: Optional[Iterable[CategoryRule]] = None):
        """
        Initializes the TokenCategorizer.

        Args:
            dictionary (Optional[TokenDictionary]): Known tokens. A dictionary with
                                                    the built-in entries is used if None.
            rules (Optional[Iterable[CategoryRule]]): Heuristic rules in evaluation order.
                                                      Defaults to CATEGORY_RULES.
        """
        self.dictionary = dictionary if dictionary is not None else TokenDictionary()
        self.rules = list(rules) if rules is not None else list(CATEGORY_RULES)

    def categorize(self, token_name: str, file_path: Optional[str] = None) -> TokenCategory:
        """
        Assigns a tier and category to a token name.

        Args:
            token_name (str): The token as extracted by a format.
            file_path (Optional[str]): Where the token was found; used by path-based rules.

        Returns:
            TokenCategory: The category of the first dictionary hit or matching rule.
        """
        definition = self.dictionary.get_definition(token_name)
        if definition is not None:
            return TokenCategory(
                tier=definition.tier,
                category=human_readable_category(definition.type),
                subcategory=definition.subcategory,
                purpose=definition.description or f"{definition.type} token",
            )

        for rule in self.rules:
            if rule.predicate(token_name, file_path):
                return rule.classify(token_name, file_path)

        return TokenCategory(tier="component", category="Components", purpose="Component-level styling tokens")

    def matching_rule(self, token_name: str, file_path: Optional[str] = None) -> Optional[str]:
        """Name of the heuristic rule that decides a token, or None for dictionary hits."""
        if self.dictionary.is_known(token_name):
            return None
        for rule in self.rules:
            if rule.predicate(token_name, file_path):
                return rule.name
        return None

    def analyze_pattern_usage(self, tokens: Iterable[TokenUsageResult]) -> List[ComponentPatternUsage]:
        """
        Maps token occurrences to component, mixin and utility files.

        Each occurrence in a recognizable file counts once for that file's
        pattern, and the token is listed under its tier.

        Returns:
            List[ComponentPatternUsage]: Patterns sorted by occurrence count, highest first.
        """
        patterns = OrderedDict()
        for token in tokens:
            for occurrence in token.occurrences:
                pattern = _pattern_for(occurrence.file_path, occurrence.context)
                if pattern is None:
                    continue
                name, pattern_type = pattern
                usage = patterns.setdefault(name, ComponentPatternUsage(pattern_name=name, type=pattern_type))
                usage.count += 1
                tier = self.categorize(token.token_name, occurrence.file_path).tier
                if token.token_name not in usage.tokens_used[tier]:
                    usage.tokens_used[tier].append(token.token_name)
        return sorted(patterns.values(), key=lambda p: p.count, reverse=True)


def _pattern_for(file_path: str, context: Optional[str] = None):
    path = _normalize_path(file_path)
    component = extract_component_name(path)
    if component:
        return component, "component"
    if "_themeMixins.scss" in path or "mixins/" in path:
        match = MIXIN_NAME_RE.search(context or "")
        if match:
            return match.group(1), "mixin"
    if "_utils.scss" in path or "utilities/" in path:
        return "Utilities", "utility"
    return None
