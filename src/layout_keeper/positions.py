"""
Declarative window positions and their conversion to desktop coordinates
"""

import logging
from dataclasses import dataclass

from .geometry import Rect, Screen

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Maxed:
    """Fill the whole screen"""


@dataclass(frozen=True)
class Pos:
    """An explicit screen-relative rectangle.

    A negative x (or y) is measured from the right (or bottom) edge of the
    screen instead of the left (or top).
    """

    rect: Rect


@dataclass(frozen=True)
class Dock:
    """Occupy a fraction of the screen along one edge"""

    fraction: float

    def __post_init__(self):
        if not 0 < self.fraction <= 1:
            raise ValueError(
                f"{type(self).__name__} fraction must be in (0, 1], got {self.fraction}"
            )


class Left(Dock):
    pass


class Right(Dock):
    pass


class Top(Dock):
    pass


class Bottom(Dock):
    pass


Position = Maxed | Pos | Left | Right | Top | Bottom


def to_absolute(position: Position, screen: Screen) -> Rect:
    """Resolve `position` to a rectangle in desktop coordinates on `screen`"""
    frame = screen.frame

    if isinstance(position, Maxed):
        return frame

    if isinstance(position, Pos):
        rect = position.rect
        x = frame.w + rect.x if rect.x < 0 else rect.x
        y = frame.h + rect.y if rect.y < 0 else rect.y
        return Rect(frame.x + x, frame.y + y, rect.w, rect.h)

    if isinstance(position, Left):
        return Rect(frame.x, frame.y, int(frame.w * position.fraction), frame.h)

    if isinstance(position, Right):
        width = int(frame.w * position.fraction)
        return Rect(frame.x + frame.w - width, frame.y, width, frame.h)

    if isinstance(position, Top):
        return Rect(frame.x, frame.y, frame.w, int(frame.h * position.fraction))

    if isinstance(position, Bottom):
        height = int(frame.h * position.fraction)
        return Rect(frame.x, frame.y + frame.h - height, frame.w, height)

    raise TypeError(f"Unknown position type: {position!r}")


def to_relative(rect: Rect, screens: list[Screen]) -> tuple[int, Rect]:
    """Find the screen holding the origin of `rect`.

    Returns the 1-based index of that screen in `screens` and `rect` relative
    to the screen's frame. When no screen holds the origin the window is
    placed at the top-left of the first screen.
    """
    for index, screen in enumerate(screens, start=1):
        if screen.frame.contains_origin(rect):
            return index, rect.offset(-screen.frame.x, -screen.frame.y)

    logger.debug("No screen contains the origin of %s, using screen 1", rect)
    return 1, Rect(0, 0, rect.w, rect.h)
