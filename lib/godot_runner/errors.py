"""
Godot Runner - Error Types

Every failure raised while preparing or launching Godot derives from
GodotRunnerError, so callers can catch a single type.
"""

from typing import Optional


class GodotRunnerError(Exception):
    """Base class for all godot_runner failures."""


class PathResolutionError(GodotRunnerError):
    """A directory could not be canonicalized, or no relative path exists between two directories."""


class MissingFieldError(GodotRunnerError):
    """A required GDExtension builder field was not set at validation time."""


class InvalidRunConfigError(GodotRunnerError):
    """The Godot run configuration is incomplete."""


class CargoMetadataError(GodotRunnerError):
    """`cargo metadata` could not be run or its output could not be read."""


class BinaryNotFoundError(GodotRunnerError):
    """No Godot executable was found."""


class GodotIOError(GodotRunnerError):
    """A file write or process spawn failed."""


class ImportFailedError(GodotRunnerError):
    """The headless `godot --import` process exited with a nonzero status."""

    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message)
        self.exit_code = exit_code


class ExecFailedError(GodotRunnerError):
    """The interactive Godot process failed.

    exit_code is None when the process ended without a readable exit code
    (e.g. killed by a signal).
    """

    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message)
        self.exit_code = exit_code
