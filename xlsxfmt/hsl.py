"""Conversion between RGB and hue/saturation/lightness colours."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class HSL:
    """A colour in hue, saturation, lightness form, each in the range 0 to 1."""

    h: float
    s: float
    l: float  # noqa: E741

    def rgba(self) -> tuple[int, int, int, int]:
        """Return 16-bit red, green, blue and alpha channels (fully opaque)."""
        r, g, b = hsl_to_rgb(self.h, self.s, self.l)
        return r * 0x101, g * 0x101, b * 0x101, 0xFFFF


def rgb_to_hsl(r: int, g: int, b: int) -> tuple[float, float, float]:
    """Convert 8-bit RGB channels to an (h, s, l) triple."""
    fr, fg, fb = r / 255, g / 255, b / 255
    hi = max(fr, fg, fb)
    lo = min(fr, fg, fb)
    lightness = (hi + lo) / 2
    if hi == lo:
        return 0.0, 0.0, lightness

    d = hi - lo
    saturation = d / (2.0 - hi - lo) if lightness > 0.5 else d / (hi + lo)
    if hi == fr:
        hue = (fg - fb) / d
        if fg < fb:
            hue += 6
    elif hi == fg:
        hue = (fb - fr) / d + 2
    else:
        hue = (fr - fg) / d + 4
    return hue / 6, saturation, lightness


def _hue_to_rgb(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1.0 / 6:
        return p + (q - p) * 6 * t
    if t < 0.5:
        return q
    if t < 2.0 / 3:
        return p + (q - p) * (2.0 / 3 - t) * 6
    return p


def hsl_to_rgb(h: float, s: float, l: float) -> tuple[int, int, int]:  # noqa: E741
    """Convert an HSL triple to 8-bit RGB channels."""
    if s == 0:
        fr = fg = fb = l
    else:
        q = l * (1 + s) if l < 0.5 else l + s - s * l
        p = 2 * l - q
        fr = _hue_to_rgb(p, q, h + 1.0 / 3)
        fg = _hue_to_rgb(p, q, h)
        fb = _hue_to_rgb(p, q, h - 1.0 / 3)
    return int(fr * 255 + 0.5), int(fg * 255 + 0.5), int(fb * 255 + 0.5)


def hsl_model(color: Any) -> HSL:
    """Convert a colour to HSL.

    Accepts an HSL (returned unchanged), an object with an ``rgba()``
    method returning 16-bit channels, or a sequence of 16-bit channels.
    """
    if isinstance(color, HSL):
        return color
    channels = color.rgba() if hasattr(color, "rgba") else tuple(color)
    if len(channels) < 3:
        raise ValueError("a colour needs at least red, green and blue channels")
    r, g, b = (int(c) >> 8 for c in channels[:3])
    return HSL(*rgb_to_hsl(r, g, b))