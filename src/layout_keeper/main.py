"""
LayoutKeeper - restore your carefully-arranged window layout on macOS
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import TextIO

from . import __version__
from .config import Config
from .errors import EnumerationError, LayoutKeeperError
from .layout_store import LayoutStore
from .layout_types import Layout
from .log import LOG_LEVELS, initialize_logging
from .permissions import PermissionsHelper
from .reconciler import ReconcileReport, Reconciler

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="layout-keeper",
        description="A tool for restoring your carefully-arranged window layout.",
    )
    parser.add_argument(
        "-s",
        "--save",
        action="store_true",
        help="Save the current layout (prints to stdout). "
        "Without --save the layout in PATH is restored.",
    )
    parser.add_argument(
        "-l",
        "--log-level",
        type=str.lower,
        choices=list(LOG_LEVELS),
        default=None,
        help="Logging level (default: from config, normally info)",
    )
    parser.add_argument(
        "-c", "--config", default=None, help="Config file (default: ~/.layout_keeper/config.yaml)"
    )
    parser.add_argument(
        "path", nargs="?", default=None, help="Layout file to restore (default: ~/.layout.yaml)"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def create_window_manager(config: Config):
    """Build the macOS window manager; pyobjc only exists on macOS"""
    if not PermissionsHelper.is_macos():
        raise LayoutKeeperError("layout-keeper only runs on macOS")

    from .window_manager import MacWindowManager

    return MacWindowManager(
        ignored_owners=config.ignored_owners,
        min_width=config.get("observe.min_width", 64),
        min_height=config.get("observe.min_height", 64),
    )


def checked_observe(window_manager) -> Layout:
    """Observe the desktop, treating an empty result as fatal"""
    layout = window_manager.observe()
    if not layout.screens or not layout.windows:
        missing = PermissionsHelper.get_missing_permissions()
        if missing:
            logger.debug("Missing permissions: %s", ", ".join(missing))
        raise EnumerationError(PermissionsHelper.request_permissions_instructions())
    return layout


def save_layout(
    window_manager, store: LayoutStore, out: TextIO | None = None
) -> Layout:
    """Enumerate the current screens and windows, and dump them to `out` (stdout)"""
    layout = checked_observe(window_manager)
    out = out or sys.stdout
    out.write(store.save(layout))
    return layout


def restore_layout(
    path: str | Path, window_manager, store: LayoutStore, config: Config
) -> ReconcileReport:
    """Load the desired layout and move every matching window into place"""
    desired = store.load(path)

    reconciler = Reconciler(
        observe=lambda: checked_observe(window_manager),
        actuator=window_manager,
        passes=config.get("restore.passes", 2),
        settle_interval=config.get("restore.settle_interval", 0.5),
        tolerance=config.get("restore.tolerance", 4),
    )
    reconciler.window_moved.connect(
        lambda owner, name, rect: logger.info("Moved %s/%s to %s", owner, name, rect)
    )
    return reconciler.reconcile(desired)


def main(argv: list[str] | None = None) -> int:
    """Main application entry point"""
    args = build_parser().parse_args(argv)
    config = Config(args.config)

    try:
        initialize_logging(args.log_level or config.get("log_level", "info"))
    except ValueError as e:
        initialize_logging("info")
        logger.warning("%s", e)

    store = LayoutStore()
    try:
        window_manager = create_window_manager(config)
        if args.save:
            save_layout(window_manager, store)
        else:
            report = restore_layout(
                args.path or config.layout_path, window_manager, store, config
            )
            if report.failed_count:
                logger.warning("%d window(s) could not be moved", report.failed_count)
    except LayoutKeeperError as e:
        logger.error("%s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
