"""Static fallback tables: fonts, icon glyphs, and Tailwind utility classes.

All tables are read-only mappings.  Resolvers take the table as a parameter
(defaulting to the module constant) so callers can pass a config-extended
copy without mutating process-wide state.
"""

from collections.abc import Mapping
from types import MappingProxyType


# ---------------------------------------------------------------------------
# Fonts
# ---------------------------------------------------------------------------

# Web/display fonts that are rarely installed where decks are opened.
DEFAULT_FONT_FALLBACKS: Mapping[str, str] = MappingProxyType({
    "Bebas Neue": "Impact",
    "Montserrat": "Arial",
    "Abril Fatface": "Georgia",
    "Open Sans": "Calibri",
    "Inter": "Arial",
    "Noto Sans SC": "Microsoft YaHei",
    "sans-serif": "Arial",
})


def build_font_table(extra: Mapping[str, str] | None = None) -> Mapping[str, str]:
    """Return a read-only table of the defaults with *extra* entries merged over them."""
    if not extra:
        return DEFAULT_FONT_FALLBACKS
    return MappingProxyType({**DEFAULT_FONT_FALLBACKS, **extra})


def resolve_font(name: str, table: Mapping[str, str] = DEFAULT_FONT_FALLBACKS) -> str:
    """Map a source font family to an output-safe one.

    Exact, case-sensitive match only; unknown names pass through unchanged.
    """
    return table.get(name, name)


def primary_font_family(font_family: str | None, default: str = "Arial") -> str:
    """First family of a CSS font-family stack, quotes stripped."""
    if not font_family:
        return default
    first = font_family.split(",")[0].strip().strip("'\"").strip()
    return first or default


# ---------------------------------------------------------------------------
# Icon fonts
# ---------------------------------------------------------------------------

ICON_MARKER_CLASSES = frozenset({"fa", "fas", "far", "fab"})

# Substituted glyphs are drawn in a standard face, not the page's icon font.
ICON_FONT_FACE = "Segoe UI Emoji"

# Font Awesome private-use code points -> glyphs available in standard fonts.
ICON_FALLBACKS: Mapping[str, str] = MappingProxyType({
    "\uf013": "\u2699",        # fa-cog
    "\uf140": "\U0001F3AF",    # fa-bullseye
    "\uf0c0": "\U0001F465",    # fa-users
    "\uf0e7": "\u26A1",        # fa-bolt
    "\uf3ed": "\U0001F6E1",    # fa-shield-halved
    "\uf201": "\U0001F4C8",    # fa-chart-line
    "\uf0e0": "\u2709",        # fa-envelope
    "\uf095": "\U0001F4DE",    # fa-phone
    "\uf015": "\U0001F3E0",    # fa-home
    "\uf121": "code",          # fa-code
    "\uf5d0": "\U0001F3A8",    # fa-palette
    "\uf017": "\U0001F552",    # fa-clock
    "\uf02d": "\U0001F4D6",    # fa-book
    "\uf007": "\U0001F464",    # fa-user
    "\uf061": "\u2192",        # fa-arrow-right
    "\uf067": "+",             # fa-plus
    "\uf00d": "\u00D7",        # fa-times
    "\uf1b2": "\U0001F9CA",    # fa-cube
    "\uf1b3": "\U0001F9CA",    # fa-cubes
    "\uf12e": "\U0001F9E9",    # fa-puzzle-piece
    "\uf542": "\U0001F9EA",    # fa-flask
    "\uf544": "\u2696",        # fa-gavel
    "\uf233": "\U0001F5C4",    # fa-server
    "\uf132": "\U0001F6E1",    # fa-shield-alt
    "\uf085": "\u2699",        # fa-cogs
    "\uf5d1": "\u269B",        # fa-atom
})


def is_icon_node(classes: list[str] | None) -> bool:
    return bool(classes) and not ICON_MARKER_CLASSES.isdisjoint(classes)


def resolve_icon_glyph(
    content: str | None,
    table: Mapping[str, str] = ICON_FALLBACKS,
) -> str | None:
    """Turn ::before content into a legible glyph.

    Strips the CSS quotes, then substitutes a Unicode/emoji equivalent when
    the code point is known.  Unknown glyphs are returned as-is; "none" or
    empty content gives None.
    """
    if not content or content in ("none", "normal"):
        return None
    glyph = content.replace('"', "").replace("'", "")
    if not glyph:
        return None
    return table.get(glyph, glyph)


# ---------------------------------------------------------------------------
# Tailwind utility classes (static HTML path)
# ---------------------------------------------------------------------------

# Checked in order; a later match overrides an earlier one.
TAILWIND_BG_COLORS: Mapping[str, str] = MappingProxyType({
    "bg-blue-900": "1E3A8A",
    "bg-gradient-to-br": "1E3A8A",  # gradients collapse to one solid color
})

TAILWIND_TEXT_COLORS: Mapping[str, str] = MappingProxyType({
    "text-white": "FFFFFF",
    "text-blue-200": "BFDBFE",
    "text-gray-700": "374151",
    "text-gray-800": "1F2937",
    "text-red-600": "DC2626",
})

# First match wins.
TAILWIND_FONT_SIZES: tuple[tuple[str, int], ...] = (
    ("text-6xl", 60),
    ("text-4xl", 40),
    ("text-2xl", 24),
    ("text-xl", 20),
    ("text-lg", 18),
    ("text-sm", 14),
)

TAILWIND_BOLD_CLASSES = frozenset({"font-bold", "font-semibold"})
