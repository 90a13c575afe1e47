"""Color and geometry normalization.

Pure conversions shared by every ingestion path:

    px → inches:        px / dpi            (96 DPI unless configured)
    CSS px → points:    px * 0.75
    rgb()/rgba() → ColorSpec {hex, opacity_pct}

Every function here is total: malformed input never raises, it falls back to
a documented default (opaque black, 0 inches, 12pt, left alignment, ...).
"""

import math
import re

from src.schemas.deck_schema import ColorSpec

DEFAULT_DPI = 96
PX_TO_PT = 0.75
DEFAULT_FONT_SIZE_PT = 12.0

_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?|\.\d+")
_HEX_RE = re.compile(r"^\s*#([0-9A-Fa-f]{6}|[0-9A-Fa-f]{3})\s*$")
_LENGTH_RE = re.compile(r"^\s*(-?\d*\.?\d+)")
_TRANSPARENT_VALUES = {"", "transparent", "rgba(0, 0, 0, 0)", "rgba(0,0,0,0)"}


# ---------------------------------------------------------------------------
# Colors
# ---------------------------------------------------------------------------

def to_hex_and_opacity(color: str | None) -> ColorSpec:
    """Parse an rgb()/rgba() string into hex plus transparency percent.

    The first three numeric tokens are the channels; a fourth token is alpha
    in [0, 1].  Transparency is stored, not alpha: rgba(255,0,0,0.8) gives
    FF0000 at opacity_pct 20.  Fewer than three tokens yields opaque black.
    """
    if not color:
        return ColorSpec()

    hex_match = _HEX_RE.match(color)
    if hex_match:
        digits = hex_match.group(1)
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        return ColorSpec(hex=digits.upper(), opacity_pct=0)

    tokens = _NUMBER_RE.findall(color)
    if len(tokens) < 3:
        return ColorSpec()

    r, g, b = (_clamp_channel(t) for t in tokens[:3])
    opacity = 0.0
    if len(tokens) >= 4:
        alpha = min(1.0, max(0.0, float(tokens[3])))
        opacity = round((1 - alpha) * 100, 2)

    return ColorSpec(hex=f"{r:02X}{g:02X}{b:02X}", opacity_pct=opacity)


def is_transparent(color: str | None) -> bool:
    """True for computed-style colors that paint nothing."""
    if color is None or color.strip() in _TRANSPARENT_VALUES:
        return True
    return to_hex_and_opacity(color).is_invisible


def extract_gradient_colors(background_image: str | None) -> list[str]:
    """Return the rgb()/rgba() stops of a CSS gradient, in order."""
    if not background_image or "gradient" not in background_image:
        return []
    return re.findall(r"rgba?\(\s*\d+,\s*\d+,\s*\d+(?:,\s*[\d.]+)?\s*\)", background_image)


def _clamp_channel(token: str) -> int:
    value = float(token)
    if not math.isfinite(value):
        return 255
    return min(255, max(0, int(value)))


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

def px_to_inch(px, dpi: float = DEFAULT_DPI) -> float:
    """Convert pixels to inches.  Missing or non-numeric px counts as 0."""
    return parse_px(px) / dpi if dpi else 0.0


def parse_px(value, default: float = 0.0) -> float:
    """Read a CSS length or plain number ("12px", "12", 12.0) as a float."""
    if value is None:
        return default
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else default
    match = _LENGTH_RE.match(str(value))
    if not match:
        return default
    try:
        number = float(match.group(1))
    except ValueError:
        return default
    return number if math.isfinite(number) else default


def parse_float(value, default: float = 0.0) -> float:
    """float() that falls back to *default* instead of raising.

    NaN and infinities also fall back, so the result is always finite.
    """
    if value is None or value == "":
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


# ---------------------------------------------------------------------------
# Typography
# ---------------------------------------------------------------------------

def font_size_pt(css_font_size, default: float = DEFAULT_FONT_SIZE_PT) -> float:
    """Convert a computed CSS font size in px to points."""
    px = parse_px(css_font_size)
    if px <= 0:
        return default
    return round(px * PX_TO_PT, 2)


def is_bold_weight(font_weight) -> bool:
    """Numeric weight >= 600, or the bold/bolder keywords."""
    if font_weight is None:
        return False
    text = str(font_weight).strip().lower()
    if text in ("bold", "bolder"):
        return True
    try:
        return int(float(text)) >= 600
    except (ValueError, OverflowError):
        return False


def map_text_align(value: str | None) -> str:
    if value in ("center", "right"):
        return value
    return "left"


def map_vertical_align(value: str | None, default: str = "top") -> str:
    if value in ("top", "middle", "bottom"):
        return value
    return default
