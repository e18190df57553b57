"""
Window descriptors and layouts
"""

from dataclasses import dataclass, field

from .geometry import Rect, Screen
from .patterns import Exact, Pattern
from .positions import Maxed, Position


@dataclass
class MatchingWindowInstance:
    """A live window sharing its owner and name with others"""

    process_id: int
    window_id: int
    screen_num: int
    bounds: Rect


@dataclass
class WindowDescriptor:
    """A window described by owner and name.

    Desired descriptors are loaded from a layout file and usually hold
    patterns. Observed descriptors hold literal names plus one instance per
    live window with that owner and name (an app can have several "Find"
    windows, for example).
    """

    owner_name: Pattern = field(default_factory=lambda: Exact(""))
    name: Pattern = field(default_factory=lambda: Exact(""))
    screen_num: int = 1
    pos: Position = field(default_factory=Maxed)
    instances: list[MatchingWindowInstance] = field(default_factory=list)

    @property
    def key(self) -> tuple[str, str]:
        return (self.owner_name.literal, self.name.literal)

    def matches(self, other: "WindowDescriptor") -> bool:
        """Either side may hold the patterns; both owner and name must match"""
        return (
            self.owner_name.matches(other.owner_name.literal)
            and self.name.matches(other.name.literal)
        ) or (
            other.owner_name.matches(self.owner_name.literal)
            and other.name.matches(self.name.literal)
        )

    def __str__(self) -> str:
        return f"{self.owner_name.literal}/{self.name.literal}"


@dataclass
class Layout:
    screens: list[Screen] = field(default_factory=list)
    windows: list[WindowDescriptor] = field(default_factory=list)

    def find_match(self, window: WindowDescriptor) -> WindowDescriptor | None:
        """First descriptor in this layout matching `window`"""
        for candidate in self.windows:
            if candidate.matches(window):
                return candidate
        return None
