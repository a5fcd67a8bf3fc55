"""
Exception hierarchy for the pose formatter.

All errors are fatal for a run: the driver neither retries nor continues
after a failure.
"""


class PoseFormatterError(Exception):
    """Base class for all pose formatter errors."""


class ArgumentError(PoseFormatterError, ValueError):
    """Invalid run argument."""


class UnknownDeviceError(ArgumentError):
    """Device name does not match one of the intrinsics presets."""

    def __init__(self, device: str, known=()):
        self.device = device
        self.known = tuple(known)
        message = f"Unknown device name: {device!r}"
        if self.known:
            message += f" (expected one of: {', '.join(self.known)})"
        super().__init__(message)


class FileAccessError(PoseFormatterError, OSError):
    """Input file could not be opened or read."""


class DirectoryAccessError(FileAccessError):
    """Capture directory could not be listed."""


class PoseFileFormatError(PoseFormatterError, ValueError):
    """Pose file contains something other than whitespace-separated numbers."""


class NoCapturesAvailableError(PoseFormatterError):
    """No capture timestamps are left to associate with a pose."""


class RenameFailureError(PoseFormatterError, OSError):
    """A matched capture file is missing or could not be renamed."""
