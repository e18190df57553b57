"""
Mapping saved screens onto the screens that exist now

A saved layout refers to screens by their position in its own screen list.
Those screens carry the id the display system gave them when the layout was
captured, which may no longer exist once monitors are added, removed or
rearranged. Ids are not guaranteed stable across reboots either, so the
fallbacks here are a best effort.
"""

import logging

from .errors import EnumerationError
from .geometry import Screen

logger = logging.getLogger(__name__)


def _distance(a: Screen, b: Screen) -> int:
    return abs(a.frame.x - b.frame.x) + abs(a.frame.y - b.frame.y)


def _nearest(saved: Screen, candidates: list[Screen]) -> Screen:
    # min() keeps the first of equally distant screens
    return min(candidates, key=lambda s: _distance(saved, s))


def find_substitute_screen(saved: Screen, live_screens: list[Screen]) -> Screen:
    """Pick the live screen standing in for `saved`.

    Exact id first, then the nearest screen of the same size, then the
    nearest screen of any size.
    """
    if not live_screens:
        raise EnumerationError("No screens available")

    for screen in live_screens:
        if screen.id == saved.id:
            return screen

    same_size = [s for s in live_screens if s.frame.size == saved.frame.size]
    if same_size:
        screen = _nearest(saved, same_size)
        logger.debug(
            "Screen %s not found, using same-size screen %s", saved.id, screen.id
        )
        return screen

    screen = _nearest(saved, live_screens)
    logger.debug("Screen %s not found, using nearest screen %s", saved.id, screen.id)
    return screen


def resolve_screen(
    screen_num: int, layout_screens: list[Screen], live_screens: list[Screen]
) -> Screen:
    """Resolve a 1-based screen reference of a layout against live screens"""
    if not live_screens:
        raise EnumerationError("No screens available")

    if 1 <= screen_num <= len(layout_screens):
        return find_substitute_screen(layout_screens[screen_num - 1], live_screens)

    # Unknown screen: take it by position, the right-most if there are fewer now
    index = max(0, min(screen_num - 1, len(live_screens) - 1))
    logger.debug(
        "Screen %d is not in the layout's screen list, using live screen %d",
        screen_num,
        index + 1,
    )
    return live_screens[index]
