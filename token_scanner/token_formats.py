"""
token_formats.py

Registry of token formats: how a design token is referenced in a given kind
of source file, and which file extensions each format applies to.
"""

import re
from typing import Dict, Iterable, List, Set

from .exceptions import ConfigurationError
from .models import TokenFormat


def _format(name, pattern, extensions, description):
    return TokenFormat(
        name=name,
        pattern=re.compile(pattern),
        file_extensions=frozenset(f".{ext}" for ext in extensions),
        description=description,
    )


DEFAULT_TOKEN_FORMATS: List[TokenFormat] = [
    _format(
        "css-variables",
        r"var\(--([^)]+)\)",
        ["css", "scss", "less", "styl"],
        "CSS Custom Properties (CSS Variables)",
    ),
    _format(
        "scss-variables",
        r"\$([a-zA-Z0-9_-]+)",
        ["scss", "sass"],
        "SCSS/Sass Variables",
    ),
    _format(
        "js-tokens",
        r"tokens\.([a-zA-Z0-9._-]+)",
        ["js", "jsx", "ts", "tsx", "vue"],
        "JavaScript Token Objects",
    ),
    _format(
        "tailwind-classes",
        r"(?:class(?:Name)?=[\"']|@apply\s+)([^\"']*(?:text-|bg-|border-|space-|p-|m-|w-|h-|rounded-)[^\"']*)",
        ["html", "jsx", "tsx", "vue", "svelte"],
        "Tailwind CSS Classes",
    ),
    _format(
        "styled-components",
        r"\$\{(?:props\s*=>\s*)?(?:props\.)?theme\.([^}]+)\}",
        ["js", "jsx", "ts", "tsx"],
        "Styled Components Theme References",
    ),
    _format(
        "design-tokens",
        r"\"([^\"]*\.token[^\"]*)\"",
        ["json", "js", "ts"],
        "Design Token Files",
    ),
]

# Formats tuned for the Canon design system ($cds- prefixed SCSS on top of Bootstrap)
CANON_TOKEN_FORMATS: List[TokenFormat] = [
    _format(
        "canon-cds-variables",
        r"\$cds-([a-zA-Z0-9_-]+(?:-\d+)?)",
        ["scss", "sass"],
        "Canon Design System Variables ($cds-*)",
    ),
    _format(
        "canon-bootstrap-variables",
        r"\$(?:gray|white|black|primary|secondary|success|info|warning|danger)-?(\d+)?",
        ["scss", "sass"],
        "Canon Bootstrap Variables",
    ),
    _format(
        "canon-color-variables",
        r"\$(?:cds-)?(?:red|blue|green|yellow|purple|orange|gray|black|white)-?(\d+)?",
        ["scss", "sass"],
        "Canon Color Variables",
    ),
    _format(
        "canon-scss-mixins",
        r"@(?:include|mixin)\s+(cds-|canon-)?([a-zA-Z0-9_-]+)",
        ["scss", "sass"],
        "Canon SCSS Mixins and Functions",
    ),
    _format(
        "canon-scss-maps",
        r"map-(?:get|merge)\(\$([^,)]+),?\s*['\"]?([^'\",)]*)['\"]?\)?",
        ["scss", "sass"],
        "Canon SCSS Map References",
    ),
    _format(
        "canon-js-tokens",
        r"(?:canonTokens|canonTheme|designTokens)\.([a-zA-Z0-9._-]+)",
        ["js", "jsx", "ts", "tsx", "vue"],
        "Canon JavaScript Token Objects",
    ),
    _format(
        "canon-styled-theme",
        r"\$\{(?:props\s*=>\s*)?(?:props\.)?theme\.canon\.([^}]+)\}",
        ["js", "jsx", "ts", "tsx"],
        "Canon Styled Components Theme References",
    ),
    _format(
        "canon-tailwind-classes",
        r"(?:class(?:Name)?=[\"']|@apply\s+)([^\"']*(?:canon-|cds-)[^\"']*)",
        ["html", "jsx", "tsx", "vue", "svelte"],
        "Canon Tailwind CSS Classes",
    ),
    _format(
        "canon-token-files",
        r"\"([^\"]*(?:canon|token)[^\"]*)\"",
        ["json"],
        "Canon Design Token JSON Files",
    ),
    _format(
        "canon-component-props",
        r"(?:color|theme|variant|size)=[\"']([^\"']*(?:canon-|primary-|secondary-)[^\"']*)[\"']",
        ["jsx", "tsx"],
        "Canon Component Theme Props",
    ),
]

TOKEN_FORMAT_PRESETS: Dict[str, List[TokenFormat]] = {
    "default": DEFAULT_TOKEN_FORMATS,
    "canon": CANON_TOKEN_FORMATS,
}


def get_token_formats(preset: str = "default") -> List[TokenFormat]:
    """Return the formats registered under a preset name."""
    try:
        return list(TOKEN_FORMAT_PRESETS[preset.lower()])
    except KeyError:
        known = ", ".join(sorted(TOKEN_FORMAT_PRESETS))
        raise ConfigurationError(f"Unknown token format preset '{preset}' (known: {known})") from None


def supported_extensions(formats: Iterable[TokenFormat]) -> Set[str]:
    """Union of the extensions of all given formats."""
    extensions = set()
    for token_format in formats:
        extensions.update(token_format.file_extensions)
    return extensions
