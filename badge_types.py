from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass
class Rectangle:
    """Axis-aligned box, origin bottom-left with ``y`` growing upward."""

    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class TextInfo:
    """Sizing decision for a single line of badge text."""

    text: str
    font_size: int
    font_height: float
    has_descender: bool
    descender_height: float
    size: Size


@dataclass(frozen=True)
class PlacedLine:
    """A line ready to hand to ``drawString``."""

    text: str
    font_size: int
    x: float
    y: float


@dataclass(frozen=True)
class BadgeLayout:
    """Placed lines in presentation order plus the union of their bounds."""

    lines: list[PlacedLine] = field(default_factory=list[PlacedLine])
    bounds: Rectangle = field(default_factory=lambda: Rectangle(0, 0, 0, 0))
    fitted: list[TextInfo] = field(default_factory=list[TextInfo])

    @property
    def width(self) -> float:
        return self.bounds.width

    @property
    def height(self) -> float:
        return self.bounds.height


@dataclass(frozen=True)
class BadgeRequest:
    """Decoded payload of a badge generation request."""

    name: str
    company: str = ""
