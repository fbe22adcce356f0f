"""Theme colors and color utilities for the UI."""

from typing import Tuple


class AppColors:
    """Light theme palette."""

    BG = "#f7f7fb"
    CARD_BG = "#ffffff"
    CARD_BORDER = "#e4e4ee"
    FIELD_BORDER = "#d6d6e4"
    CHIP_BORDER = "#d0d0dd"
    CHOSEN_BG = "#f3f4f8"

    PRIMARY = "#2b6cb0"
    PRIMARY_DARK = "#1a365d"

    CORRECT = "#2f855a"
    INCORRECT = "#c53030"

    TEXT_PRIMARY = "#1a1a2e"
    TEXT_SECONDARY = "#555555"
    TEXT_MUTED = "#777777"

    PROGRESS_TRACK = "#e6e8f0"


def _channels(color: str) -> Tuple[int, int, int]:
    color = color.strip()
    if len(color) != 7 or not color.startswith("#"):
        raise ValueError(f"not a #rrggbb color: {color!r}")
    return int(color[1:3], 16), int(color[3:5], 16), int(color[5:7], 16)


def blend_hex(a: str, b: str, t: float) -> str:
    """Mix ``a`` toward ``b`` by ``t`` (clamped to 0..1); ``a`` is returned unchanged if unparseable."""
    try:
        start, end = _channels(a), _channels(b)
        t = max(0.0, min(1.0, float(t)))
    except ValueError:
        return a
    mixed = (round(s + (e - s) * t) for s, e in zip(start, end))
    return "#" + "".join(f"{c:02x}" for c in mixed)


def success_color(rate: int) -> str:
    """Red at 0% through green at 100%."""
    return blend_hex(AppColors.INCORRECT, AppColors.CORRECT, rate / 100)
