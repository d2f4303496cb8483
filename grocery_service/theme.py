import re
from typing import NamedTuple, Optional

DEFAULT_THEME_COLOR = "#16a34a"

_SHORT_HEX = re.compile(r"^#([0-9a-fA-F]{3})$")
_LONG_HEX = re.compile(r"^#([0-9a-fA-F]{6})$")


class HslColor(NamedTuple):
    h: int
    s: int
    l: int


def sanitize_theme_color(color: Optional[str]) -> str:
    """Normalize to lowercase ``#rrggbb``; anything unparseable gives the default."""
    if not color:
        return DEFAULT_THEME_COLOR
    normalized = color.strip()
    if not normalized.startswith("#"):
        normalized = "#" + normalized
    if _SHORT_HEX.match(normalized):
        normalized = "#" + "".join(ch * 2 for ch in normalized[1:])
    if _LONG_HEX.match(normalized):
        return normalized.lower()
    return DEFAULT_THEME_COLOR


def hex_to_hsl(hex_color: str) -> Optional[HslColor]:
    value = hex_color.replace("#", "")
    if len(value) != 6:
        return None
    r, g, b = (int(value[i:i + 2], 16) / 255 for i in (0, 2, 4))
    high = max(r, g, b)
    low = min(r, g, b)
    delta = high - low
    lightness = (high + low) / 2
    hue = 0.0
    saturation = 0.0
    if delta:
        if high == r:
            hue = ((g - b) / delta + (6 if g < b else 0)) * 60
        elif high == g:
            hue = ((b - r) / delta + 2) * 60
        else:
            hue = ((r - g) / delta + 4) * 60
        saturation = delta / (1 - abs(2 * lightness - 1))
    return HslColor(round(hue), round(saturation * 100), round(lightness * 100))


def format_hsl(color: HslColor) -> str:
    return f"{color.h} {color.s}% {color.l}%"


def create_theme_css_variables(color: Optional[str] = None):
    hsl = hex_to_hsl(sanitize_theme_color(color))
    primary = format_hsl(hsl)
    accent = format_hsl(hsl._replace(l=min(max(hsl.l + 12, 5), 95)))
    foreground = "222 47% 11.2%" if hsl.l > 60 else "0 0% 100%"
    return {
        "primary": primary,
        "ring": primary,
        "accent": accent,
        "primaryForeground": foreground,
        "accentForeground": foreground,
    }
