"""
Reconciling live windows with a desired layout
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from PyQt6.QtCore import QObject, pyqtSignal

from .errors import ActuationError
from .geometry import DEFAULT_TOLERANCE, Rect
from .layout_types import Layout
from .log import TRACE
from .positions import Pos, to_absolute
from .screens import resolve_screen

logger = logging.getLogger(__name__)

# Moving a window onto a much larger display sometimes applies the move but
# not the resize, so everything is checked again on a second pass.
DEFAULT_PASSES = 2
DEFAULT_SETTLE_INTERVAL = 0.5


class Actuator(Protocol):
    def move_window(self, process_id: int, window_id: int, target: Rect) -> None: ...


@dataclass(frozen=True)
class MoveRequest:
    owner_name: str
    name: str
    process_id: int
    window_id: int
    target: Rect


@dataclass
class ReconcileReport:
    started_at: datetime
    finished_at: datetime | None = None
    passes: int = 0
    moves: list[MoveRequest] = field(default_factory=list)
    failures: list[tuple[MoveRequest, str]] = field(default_factory=list)

    @property
    def moved_count(self) -> int:
        return len(self.moves)

    @property
    def failed_count(self) -> int:
        return len(self.failures)


class Reconciler(QObject):
    """Moves live windows to where a desired layout wants them"""

    window_matched = pyqtSignal(str, str)  # owner name, window name
    window_moved = pyqtSignal(str, str, object)  # owner name, window name, Rect
    window_move_failed = pyqtSignal(str, str, str)  # owner name, window name, reason
    pass_completed = pyqtSignal(int, int)  # pass number, moves requested

    def __init__(
        self,
        observe: Callable[[], Layout],
        actuator: Actuator,
        passes: int = DEFAULT_PASSES,
        settle_interval: float = DEFAULT_SETTLE_INTERVAL,
        tolerance: int = DEFAULT_TOLERANCE,
        sleep: Callable[[float], None] = time.sleep,
    ):
        super().__init__()
        self.observe = observe
        self.actuator = actuator
        self.passes = passes
        self.settle_interval = settle_interval
        self.tolerance = tolerance
        self._sleep = sleep

    def plan_moves(self, desired: Layout, observed: Layout) -> list[MoveRequest]:
        """Work out which observed windows are away from their desired spot.

        Both the observed and the desired screen references are resolved
        against the live screens in `observed`.
        """
        requests = []

        for window in observed.windows:
            # Linear scan; there are dozens of windows, not thousands
            wanted = desired.find_match(window)
            if wanted is None:
                logger.log(TRACE, "No match for %s", window)
                continue

            logger.debug("Found match for window %s: %s", window, wanted)
            self.window_matched.emit(window.owner_name.literal, window.name.literal)

            target_screen = resolve_screen(
                wanted.screen_num, desired.screens, observed.screens
            )
            target = to_absolute(wanted.pos, target_screen)

            for instance in window.instances:
                current_screen = resolve_screen(
                    instance.screen_num, observed.screens, observed.screens
                )
                current = to_absolute(Pos(instance.bounds), current_screen)

                if current.is_close(target, self.tolerance):
                    logger.log(TRACE, "No need to move %s", window)
                    continue

                logger.debug("Needs to be moved: %s: %s -> %s", window, current, target)
                requests.append(
                    MoveRequest(
                        owner_name=window.owner_name.literal,
                        name=window.name.literal,
                        process_id=instance.process_id,
                        window_id=instance.window_id,
                        target=target,
                    )
                )

        return requests

    def apply(self, requests: list[MoveRequest], report: ReconcileReport) -> None:
        for request in requests:
            try:
                self.actuator.move_window(
                    request.process_id, request.window_id, request.target
                )
            except ActuationError as e:
                logger.error(
                    "Failed to move %s/%s: %s", request.owner_name, request.name, e
                )
                report.failures.append((request, str(e)))
                self.window_move_failed.emit(request.owner_name, request.name, str(e))
                continue

            report.moves.append(request)
            self.window_moved.emit(request.owner_name, request.name, request.target)

    def reconcile(self, desired: Layout) -> ReconcileReport:
        """Observe, compare and move, `passes` times"""
        report = ReconcileReport(started_at=datetime.now())

        for pass_num in range(1, self.passes + 1):
            if pass_num > 1:
                self._sleep(self.settle_interval)

            observed = self.observe()
            requests = self.plan_moves(desired, observed)
            logger.debug("Pass %d: %d window(s) to move", pass_num, len(requests))
            self.apply(requests, report)

            report.passes = pass_num
            self.pass_completed.emit(pass_num, len(requests))

        report.finished_at = datetime.now()
        logger.info(
            "Restore finished: %d move(s), %d failure(s)",
            report.moved_count,
            report.failed_count,
        )
        return report
