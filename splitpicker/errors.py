"""
Exception types raised by SplitPicker.

Only failures the caller must act on are raised. Everything else
(missing directories, unreadable icons, a broken theme query) is logged
and degraded to a partial result.
"""


class SplitPickerError(Exception):
    """Base class for all SplitPicker errors."""


class DesktopEntryError(SplitPickerError):
    """A descriptor file could not be parsed into a RawEntry."""

    def __init__(self, path, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class LaunchError(SplitPickerError):
    """The exclusion launcher process could not be spawned."""

    def __init__(self, argv: list[str], reason: str):
        super().__init__(f"Failed to launch {argv!r}: {reason}")
        self.argv = argv
        self.reason = reason
