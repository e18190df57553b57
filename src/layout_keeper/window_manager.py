"""
macOS window enumeration and actuation

Windows are enumerated with the CGWindowList API but can only be moved
through the Accessibility API, so moving a window means finding the AX
element whose private window id matches the CGWindowList window number.
"""

import ctypes
import logging
from collections.abc import Iterable

import ApplicationServices
import Quartz
from PyQt6.QtCore import QObject, pyqtSignal

from .errors import ActuationError
from .geometry import Rect, Screen, sort_screens
from .layout_types import Layout
from .log import TRACE
from .observation import (
    DEFAULT_IGNORED_OWNERS,
    MIN_HEIGHT,
    MIN_WIDTH,
    RawWindow,
    build_layout,
)

logger = logging.getLogger(__name__)

MAX_DISPLAYS = 32
AX_ERROR_SUCCESS = 0

_APPLICATION_SERVICES_PATH = (
    "/System/Library/Frameworks/ApplicationServices.framework/ApplicationServices"
)


class MacWindowManager(QObject):
    """Enumerates screens and windows and moves windows on macOS"""

    window_captured = pyqtSignal(object)  # WindowDescriptor

    def __init__(
        self,
        ignored_owners: Iterable[str] = DEFAULT_IGNORED_OWNERS,
        min_width: int = MIN_WIDTH,
        min_height: int = MIN_HEIGHT,
    ):
        super().__init__()
        self.ignored_owners = set(ignored_owners)
        self.min_width = min_width
        self.min_height = min_height
        self._get_window = None
        self._init_ax_get_window()

    def _init_ax_get_window(self) -> None:
        try:
            lib = ctypes.CDLL(_APPLICATION_SERVICES_PATH)
            get_window = lib._AXUIElementGetWindow
            get_window.argtypes = [ctypes.c_void_p, ctypes.POINTER(ctypes.c_uint32)]
            get_window.restype = ctypes.c_int32
            self._get_window = get_window
        except (OSError, AttributeError) as e:
            logger.warning("_AXUIElementGetWindow is unavailable: %s", e)
            self._get_window = None

    # ------------------------------
    # Enumeration
    # ------------------------------
    def _get_main_display_fallback(self) -> list[Screen]:
        main_display_id = Quartz.CGMainDisplayID()
        if not main_display_id:
            return []
        bounds = Quartz.CGDisplayBounds(main_display_id)
        return [Screen(id=int(main_display_id), frame=self._cg_rect(bounds))]

    @staticmethod
    def _cg_rect(bounds) -> Rect:
        return Rect(
            int(bounds.origin.x),
            int(bounds.origin.y),
            int(bounds.size.width),
            int(bounds.size.height),
        )

    def get_screens(self) -> list[Screen]:
        """Active displays, left to right, in window (top-left origin) coordinates"""
        err, display_ids, count = Quartz.CGGetActiveDisplayList(
            MAX_DISPLAYS, None, None
        )
        if err != 0 or not count:
            logger.warning("CGGetActiveDisplayList failed (%s), using main display", err)
            return self._get_main_display_fallback()

        screens = [
            Screen(id=int(did), frame=self._cg_rect(Quartz.CGDisplayBounds(did)))
            for did in list(display_ids)[:count]
        ]
        return sort_screens(screens)

    def get_raw_windows(self) -> list[RawWindow]:
        """On-screen, normal-layer windows in desktop coordinates"""
        window_list = Quartz.CGWindowListCopyWindowInfo(
            Quartz.kCGWindowListOptionOnScreenOnly
            | Quartz.kCGWindowListExcludeDesktopElements,
            Quartz.kCGNullWindowID,
        )
        if window_list is None:
            logger.error("Failed to retrieve list of windows.")
            return []

        windows = []
        for window in window_list:
            # Menu bar items, overlays and the like live on other layers
            if window.get(Quartz.kCGWindowLayer, 0) != 0:
                continue

            bounds = window.get(Quartz.kCGWindowBounds)
            if not bounds:
                continue

            windows.append(
                RawWindow(
                    owner_name=str(window.get(Quartz.kCGWindowOwnerName) or ""),
                    name=str(window.get(Quartz.kCGWindowName) or ""),
                    process_id=int(window.get(Quartz.kCGWindowOwnerPID, 0)),
                    window_id=int(window.get(Quartz.kCGWindowNumber, 0)),
                    bounds=Rect.from_bounds(bounds),
                )
            )
        return windows

    def observe(self) -> Layout:
        """The current layout. Empty lists mean enumeration failed."""
        screens = self.get_screens()
        layout = build_layout(
            self.get_raw_windows(),
            screens,
            ignored_owners=self.ignored_owners,
            min_width=self.min_width,
            min_height=self.min_height,
        )
        for window in layout.windows:
            self.window_captured.emit(window)
        return layout

    # ------------------------------
    # Actuation
    # ------------------------------
    def _ax_window_id(self, ax_window) -> int | None:
        if self._get_window is None:
            return None
        window_id = ctypes.c_uint32(0)
        err = self._get_window(ax_window.__c_void_p__(), ctypes.byref(window_id))
        if err != AX_ERROR_SUCCESS:
            return None
        return int(window_id.value)

    def _find_ax_window(self, process_id: int, window_id: int):
        app = ApplicationServices.AXUIElementCreateApplication(process_id)
        if app is None:
            raise ActuationError(f"Failed to get application handle for pid {process_id}")

        err, ax_windows = ApplicationServices.AXUIElementCopyAttributeValue(
            app, ApplicationServices.kAXWindowsAttribute, None
        )
        if err != AX_ERROR_SUCCESS or ax_windows is None:
            raise ActuationError(
                f"Failed to get windows of pid {process_id} (AXError {err})"
            )

        for ax_window in ax_windows:
            if self._ax_window_id(ax_window) == window_id:
                return ax_window

        raise ActuationError(f"Window {window_id} of pid {process_id} not found")

    def _set_attribute(self, ax_window, attribute: str, value_type: int, value) -> None:
        ax_value = ApplicationServices.AXValueCreate(value_type, value)
        err = ApplicationServices.AXUIElementSetAttributeValue(
            ax_window, attribute, ax_value
        )
        if err != AX_ERROR_SUCCESS:
            raise ActuationError(
                f"AXUIElementSetAttributeValue({attribute}) failed: {err}"
            )

    def move_window(self, process_id: int, window_id: int, target: Rect) -> None:
        """Set the position, then the size, of a window in desktop coordinates"""
        ax_window = self._find_ax_window(process_id, window_id)
        logger.log(TRACE, "Found AX window for %s/%s", process_id, window_id)

        self._set_attribute(
            ax_window,
            ApplicationServices.kAXPositionAttribute,
            ApplicationServices.kAXValueCGPointType,
            Quartz.CGPoint(target.x, target.y),
        )
        self._set_attribute(
            ax_window,
            ApplicationServices.kAXSizeAttribute,
            ApplicationServices.kAXValueCGSizeType,
            Quartz.CGSize(target.w, target.h),
        )
