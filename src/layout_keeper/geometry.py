"""
Rectangles and screens in desktop coordinates
"""

from dataclasses import dataclass
from typing import Any

from PyQt6.QtCore import QRect

# Component-wise difference (pixels) under which two rects are "the same".
# Windows don't always land exactly where they were sent.
DEFAULT_TOLERANCE = 4


@dataclass(frozen=True)
class Rect:
    """An integer rectangle with a top-left origin, Y increasing downward"""

    x: int
    y: int
    w: int
    h: int

    def __post_init__(self):
        if self.w < 0 or self.h < 0:
            raise ValueError(f"Rect size must not be negative: {self.w}x{self.h}")

    @property
    def size(self) -> tuple[int, int]:
        return (self.w, self.h)

    def contains_origin(self, other: "Rect") -> bool:
        """True if the top-left corner of `other` lies inside this rect.

        Only the origin is tested, so a window straddling two screens belongs
        to the one holding its top-left corner.
        """
        return (
            self.x <= other.x < self.x + self.w
            and self.y <= other.y < self.y + self.h
        )

    def is_close(self, other: "Rect", tolerance: int = DEFAULT_TOLERANCE) -> bool:
        return (
            abs(self.x - other.x) < tolerance
            and abs(self.y - other.y) < tolerance
            and abs(self.w - other.w) < tolerance
            and abs(self.h - other.h) < tolerance
        )

    def offset(self, dx: int, dy: int) -> "Rect":
        return Rect(self.x + dx, self.y + dy, self.w, self.h)

    def __str__(self) -> str:
        return f"{self.x},{self.y},{self.w},{self.h}"

    @classmethod
    def parse(cls, text: str) -> "Rect":
        """Parse the persisted "x,y,w,h" form"""
        parts = [p.strip() for p in str(text).split(",")]
        if len(parts) != 4:
            raise ValueError(f"Expected 'x,y,w,h', got {text!r}")
        x, y, w, h = (int(p) for p in parts)
        return cls(x, y, w, h)

    @classmethod
    def from_bounds(cls, bounds: dict[str, Any]) -> "Rect":
        """Build from a Quartz kCGWindowBounds dictionary"""
        return cls(
            int(bounds.get("X", 0)),
            int(bounds.get("Y", 0)),
            int(bounds.get("Width", 0)),
            int(bounds.get("Height", 0)),
        )

    @classmethod
    def from_qrect(cls, rect: QRect) -> "Rect":
        return cls(rect.x(), rect.y(), rect.width(), rect.height())

    def to_qrect(self) -> QRect:
        return QRect(self.x, self.y, self.w, self.h)


@dataclass(frozen=True)
class Screen:
    """A display as reported by the window system"""

    id: int
    frame: Rect


def sort_screens(screens: list[Screen]) -> list[Screen]:
    """Order screens left to right"""
    return sorted(screens, key=lambda s: s.frame.x)
