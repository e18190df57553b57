"""
Permissions helper for macOS accessibility and screen recording permissions
"""

import logging
import platform

logger = logging.getLogger(__name__)


class PermissionsHelper:
    """Helper for checking macOS permissions"""

    @staticmethod
    def check_accessibility_permissions() -> bool:
        """Moving other apps' windows needs Accessibility access"""
        try:
            import ApplicationServices

            return bool(ApplicationServices.AXIsProcessTrusted())
        except Exception as e:
            logger.debug("Accessibility check failed: %s", e)
            return False

    @staticmethod
    def check_screen_recording_permissions() -> bool:
        """Window titles are only visible with Screen Recording access"""
        try:
            import Quartz

            preflight = getattr(Quartz, "CGPreflightScreenCaptureAccess", None)
            if preflight is not None:
                return bool(preflight())

            return Quartz.CGMainDisplayID() != 0
        except Exception as e:
            logger.debug("Screen recording check failed: %s", e)
            return False

    @staticmethod
    def get_missing_permissions() -> list[str]:
        missing = []

        if not PermissionsHelper.check_accessibility_permissions():
            missing.append("Accessibility")

        if not PermissionsHelper.check_screen_recording_permissions():
            missing.append("Screen Recording")

        return missing

    @staticmethod
    def request_permissions_instructions() -> str:
        """Get instructions for granting permissions"""
        instructions = """
Unable to enumerate screens or windows.

Please add layout-keeper (or the terminal you run it from) to these lists in
System Settings -> Privacy & Security:

1. "Screen & System Audio Recording" (required to read window titles)
2. "Accessibility" (required to move and resize windows)

Then run it again.
"""
        return instructions.strip()

    @staticmethod
    def is_macos() -> bool:
        return platform.system() == "Darwin"
