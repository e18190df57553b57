"""
Turning enumerated windows into a Layout
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from .geometry import Rect, Screen
from .layout_types import Layout, MatchingWindowInstance, WindowDescriptor
from .log import TRACE
from .patterns import Exact
from .positions import Pos, to_relative

logger = logging.getLogger(__name__)

DEFAULT_IGNORED_OWNERS = frozenset({"Control Center", "Dock", "Window Server"})
MIN_WIDTH = 64
MIN_HEIGHT = 64


@dataclass(frozen=True)
class RawWindow:
    """A window as reported by the window system, in desktop coordinates"""

    owner_name: str
    name: str
    process_id: int
    window_id: int
    bounds: Rect


def build_layout(
    raw_windows: Iterable[RawWindow],
    screens: list[Screen],
    ignored_owners: Iterable[str] = DEFAULT_IGNORED_OWNERS,
    min_width: int = MIN_WIDTH,
    min_height: int = MIN_HEIGHT,
) -> Layout:
    """Group live windows by owner and name, relative to their screens"""
    ignored = set(ignored_owners)
    grouped: dict[tuple[str, str], WindowDescriptor] = {}

    for raw in raw_windows:
        if not raw.owner_name or not raw.name or raw.owner_name in ignored:
            continue

        if raw.bounds.w <= min_width and raw.bounds.h <= min_height:
            logger.log(TRACE, "Skipping small window %s/%s", raw.owner_name, raw.name)
            continue

        screen_num, relative = to_relative(raw.bounds, screens)
        instance = MatchingWindowInstance(
            process_id=raw.process_id,
            window_id=raw.window_id,
            screen_num=screen_num,
            bounds=relative,
        )

        key = (raw.owner_name, raw.name)
        descriptor = grouped.get(key)
        if descriptor is None:
            descriptor = WindowDescriptor(
                owner_name=Exact(raw.owner_name), name=Exact(raw.name)
            )
            grouped[key] = descriptor

        # The last window seen decides where the group is saved
        descriptor.screen_num = screen_num
        descriptor.pos = Pos(relative)
        descriptor.instances.append(instance)

    windows = [grouped[key] for key in sorted(grouped)]
    return Layout(screens=list(screens), windows=windows)
