"""
Godot Runner

Generates the `.gdextension` manifest for a Rust GDExtension crate, imports
the Godot project once, and launches Godot.

Usage:
    from godot_runner import GodotRunner
    GodotRunner.create("my-crate", "../godot").execute()
"""

from .commands import run_godot, run_godot_import, run_godot_import_if_needed
from .errors import (
    BinaryNotFoundError,
    CargoMetadataError,
    ExecFailedError,
    GodotIOError,
    GodotRunnerError,
    ImportFailedError,
    InvalidRunConfigError,
    MissingFieldError,
    PathResolutionError,
)
from .gdextension import GdExtensionConfig, ValidGdExtensionConfig
from .metadata import cargo_target_directory
from .paths import find_godot_binary
from .runner import GodotRunner

__all__ = [
    "GodotRunner",
    "GdExtensionConfig",
    "ValidGdExtensionConfig",
    "find_godot_binary",
    "cargo_target_directory",
    "run_godot",
    "run_godot_import",
    "run_godot_import_if_needed",
    "GodotRunnerError",
    "PathResolutionError",
    "MissingFieldError",
    "InvalidRunConfigError",
    "CargoMetadataError",
    "BinaryNotFoundError",
    "GodotIOError",
    "ImportFailedError",
    "ExecFailedError",
]
