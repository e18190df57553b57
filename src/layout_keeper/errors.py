"""
Exceptions raised by LayoutKeeper
"""


class LayoutKeeperError(Exception):
    """Base class for all LayoutKeeper errors"""


class EnumerationError(LayoutKeeperError):
    """No screens or no windows could be enumerated"""


class LayoutLoadError(LayoutKeeperError):
    """The desired layout document could not be read or parsed"""

    def __init__(self, path: str, cause: Exception | str):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to load layout file {path}: {cause}")


class ActuationError(LayoutKeeperError):
    """A single window could not be moved or resized"""
