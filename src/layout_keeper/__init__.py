"""
LayoutKeeper - restore your carefully-arranged window layout on macOS
"""

__version__ = "0.1.0"
__author__ = "LayoutKeeper Team"
__description__ = "Restore your carefully-arranged window layout on macOS"

from .config import Config
from .errors import ActuationError, EnumerationError, LayoutKeeperError, LayoutLoadError
from .geometry import Rect, Screen
from .layout_store import LayoutStore
from .layout_types import Layout, MatchingWindowInstance, WindowDescriptor
from .patterns import Exact, Wildcard, compile_pattern
from .positions import Bottom, Left, Maxed, Pos, Right, Top, to_absolute, to_relative
from .reconciler import MoveRequest, ReconcileReport, Reconciler
from .screens import find_substitute_screen, resolve_screen

__all__ = [
    "Config",
    "LayoutKeeperError",
    "EnumerationError",
    "LayoutLoadError",
    "ActuationError",
    "Rect",
    "Screen",
    "Exact",
    "Wildcard",
    "compile_pattern",
    "Maxed",
    "Pos",
    "Left",
    "Right",
    "Top",
    "Bottom",
    "to_absolute",
    "to_relative",
    "find_substitute_screen",
    "resolve_screen",
    "WindowDescriptor",
    "MatchingWindowInstance",
    "Layout",
    "LayoutStore",
    "Reconciler",
    "MoveRequest",
    "ReconcileReport",
]
