"""Text fitting and placement for the badge printable area."""

from __future__ import annotations

import math
from typing import Protocol

from badge_types import BadgeLayout, PlacedLine, Rectangle, Size, TextInfo

__all__ = [
    "DEFAULT_MAX_FONT_SIZE",
    "LABEL_RECTANGLE",
    "PADDING",
    "TextMeasurer",
    "fit_line",
    "fits",
    "has_descender",
    "layout_badge",
    "secondary_font_ceiling",
    "union",
]

# printable area of the badge template, in template points
LABEL_RECTANGLE = Rectangle(x=30, y=25, width=540, height=184)
PADDING = 40

DEFAULT_MAX_FONT_SIZE = 80
HEIGHT_BUDGET_FACTOR = 0.8
LINE_GAP_FACTOR = 0.75
SECONDARY_NUDGE_FACTOR = 1 / 3
SECONDARY_HALVING_THRESHOLD = 75
SECONDARY_SIZE_STEP = 10

# ASCII-only and case-sensitive
DESCENDER_CHARS = frozenset("gjpqyf")

MAX_TEXT_WIDTH = LABEL_RECTANGLE.width - PADDING
MAX_TEXT_HEIGHT = (LABEL_RECTANGLE.height - PADDING) * HEIGHT_BUDGET_FACTOR


class TextMeasurer(Protocol):
    """Font metrics needed to size badge text."""

    def width_of_text(self, text: str, font_size: float) -> float: ...

    def line_height(self, font_size: float) -> float: ...

    def height_with_descender(self, font_size: float) -> float: ...

    def height_without_descender(self, font_size: float) -> float: ...


def has_descender(text: str) -> bool:
    return any(ch in DESCENDER_CHARS for ch in text)


def fit_line(
    measurer: TextMeasurer,
    text: str,
    max_font_size: float = DEFAULT_MAX_FONT_SIZE,
) -> TextInfo:
    """Return the largest integer font size <= ``max_font_size`` that fits.

    A size fits when the line height stays within the height budget and the
    text width within the width budget. When no size in ``[1, max_font_size]``
    fits, a 1x1 placeholder is returned instead of raising.
    """

    descender = has_descender(text)
    for font_size in range(int(math.floor(max_font_size)), 0, -1):
        width = measurer.width_of_text(text, font_size)
        font_height = measurer.line_height(font_size)
        if font_height > MAX_TEXT_HEIGHT:
            continue
        if width > MAX_TEXT_WIDTH:
            continue
        descender_height = (
            measurer.height_with_descender(font_size)
            - measurer.height_without_descender(font_size)
        )
        return TextInfo(
            text=text,
            font_size=font_size,
            font_height=font_height,
            has_descender=descender,
            descender_height=descender_height,
            size=Size(width=width, height=font_height),
        )

    return TextInfo(
        text=text,
        font_size=1,
        font_height=1,
        has_descender=False,
        descender_height=0,
        size=Size(width=1, height=1),
    )


def union(*lines: TextInfo) -> Rectangle:
    """Approximate the bounds of ``lines`` stacked bottom-up.

    The gap between two lines is three quarters of the descender height of
    the upper one. The origin is left at ``(0, 0)`` for the caller to place.
    """

    bounds = Rectangle(x=0, y=0, width=0, height=0)
    for line in reversed(lines):
        if bounds.height > 0:
            bounds.height += line.descender_height * LINE_GAP_FACTOR
        bounds.width = max(bounds.width, line.size.width)
        bounds.height += line.size.height
    return bounds


def secondary_font_ceiling(primary_font_size: float) -> float:
    """Keep the affiliation line visibly smaller than the name."""

    if primary_font_size > SECONDARY_HALVING_THRESHOLD:
        return primary_font_size / 2
    return primary_font_size - SECONDARY_SIZE_STEP


def center_x(surface_width: float, width: float) -> int:
    return math.floor((surface_width - width) / 2)


def layout_badge(
    measurer: TextMeasurer,
    name: str,
    company: str | None,
    surface_width: float,
) -> BadgeLayout:
    """Size and position the name and optional company lines."""

    name_info = fit_line(measurer, name)
    lines: list[TextInfo] = [name_info]
    if company:
        lines.append(
            fit_line(
                measurer,
                company,
                secondary_font_ceiling(name_info.font_size),
            )
        )

    bounds = union(*lines)
    bounds.x = center_x(surface_width, bounds.width)
    bounds.y = (
        (LABEL_RECTANGLE.height - bounds.height) / 2 + LABEL_RECTANGLE.y
    )
    if len(lines) == 2:
        # the smaller line's descender makes the block look low
        bounds.y += lines[1].descender_height * SECONDARY_NUDGE_FACTOR

    placed: list[PlacedLine] = []
    y = bounds.y
    for line in reversed(lines):
        placed.append(
            PlacedLine(
                text=line.text,
                font_size=line.font_size,
                x=center_x(surface_width, line.size.width),
                y=y,
            )
        )
        y += line.descender_height + line.size.height
    placed.reverse()

    return BadgeLayout(lines=placed, bounds=bounds, fitted=lines)


def fits(info: TextInfo) -> bool:
    """Return ``False`` for the placeholder produced when nothing fits."""

    return not (info.font_size == 1 and info.size == Size(1, 1))

