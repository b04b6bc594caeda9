"""Deterministic logger colors: a djb2 hash mapped onto bright HSL colors."""

import math

from src.styles import Output, Style

DJB2_SEED = 5381
_MASK32 = 0xFFFFFFFF


def djb2(data: bytes) -> int:
    """32-bit djb2: hash = hash * 33 + byte, wrapping modulo 2**32."""
    h = DJB2_SEED
    for byte in data:
        h = (h * 33 + byte) & _MASK32
    return h


def hsl_to_hex(hue: float, saturation: float, lightness: float) -> str:
    """Convert HSL (degrees, percent, percent) to ``#rrggbb``."""
    light = lightness / 100
    a = saturation * min(light, 1 - light) / 100

    def channel(n: int) -> str:
        k = (n + hue / 30) % 12
        value = light - a * max(min(k - 3, 9 - k, 1), -1)
        # round half away from zero; value is never negative
        return format(int(math.floor(255 * value + 0.5)), "02x")

    return f"#{channel(0)}{channel(8)}{channel(4)}"


def color_for(name: str) -> str:
    """Stable hex color for *name*; vivid and bright on dark terminals."""
    h = djb2(name.encode("utf-8"))
    hue = h % 360
    saturation = 70 + h % 30
    lightness = 60 + h % 10
    return hsl_to_hex(hue, saturation, lightness)


def style_logger(output: Output, name: str) -> str:
    """Color a dotted logger name, with a capitalized final segment in bold.

    ``com.example.OrderService`` renders ``com.example.`` plain and
    ``OrderService`` bold, both in the color of the whole name.
    """
    color = color_for(name)
    prefix, dot, last = name.rpartition(".")
    if last[:1].isupper():
        head = prefix + dot
        tail = last
    else:
        head = name
        tail = ""
    return (
        output.render(head, Style(color))
        + output.render(tail, Style(f"bold {color}"))
    )
