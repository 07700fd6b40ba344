#!/usr/bin/env python3
"""
Godot Runner - Path and Discovery Utilities

Canonicalizes project/output directories, computes the res:// relative path
between them, and locates the Godot executable.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Optional, Union

from .errors import BinaryNotFoundError, PathResolutionError

logger = logging.getLogger(__name__)

GODOT_EXECUTABLE = "godot"

# Checked in order: lowercase first, then uppercase.
GODOT_ENV_VARS = ("godot", "GODOT")

# Common install locations on Linux and macOS. Windows builds embed the
# version in the executable name (Godot_v4.x-stable_win64.exe), so there is
# no useful default there.
GODOT_SEARCH_PATHS = [
    "/usr/local/bin",
    "/usr/bin",
    "/bin",
    "/Applications/Godot.app/Contents/MacOS",
]


def canonicalize_path(path: Union[str, Path], description: str = "path") -> Path:
    """
    Resolve path to an absolute path with symlinks removed.

    Args:
        path: Path to resolve (must exist)
        description: Human-readable name used in the error message

    Returns:
        Absolute, canonical path

    Raises:
        PathResolutionError: If the path does not exist or cannot be resolved
    """
    try:
        return Path(path).resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise PathResolutionError(
            f"Failed to canonicalize {description}: {str(path)!r} ({e})"
        ) from e


def relative_res_path(target: Path, base: Path) -> str:
    """
    Compute the path of target relative to base, using forward slashes.

    Godot res:// paths always use '/', whatever the host separator is.

    Raises:
        PathResolutionError: If no relative path exists (e.g. different drives on Windows)
    """
    try:
        relative = os.path.relpath(target, base)
    except ValueError as e:
        raise PathResolutionError(
            f"Failed to calculate relative target path: target={str(target)!r} -> "
            f"godot_project={str(base)!r} ({e})"
        ) from e
    return relative.replace("\\", "/")


def _godot_from_environment() -> Optional[Path]:
    for name in GODOT_ENV_VARS:
        value = os.environ.get(name)
        if value:
            logger.debug(f"Using Godot binary from ${name}: {value}")
            return Path(value)
    return None


def _godot_from_path() -> Optional[Path]:
    found = shutil.which(GODOT_EXECUTABLE)
    if found:
        logger.debug(f"Found Godot binary on PATH: {found}")
        return Path(found)
    return None


def _godot_from_search_paths() -> Optional[Path]:
    found = shutil.which(GODOT_EXECUTABLE, path=os.pathsep.join(GODOT_SEARCH_PATHS))
    if found:
        logger.debug(f"Found Godot binary in default search paths: {found}")
        return Path(found)
    return None


def find_godot_binary() -> Path:
    """
    Find the Godot executable.

    Search order (first match wins):
    1. `godot` environment variable
    2. `GODOT` environment variable
    3. `godot` executable on PATH
    4. `godot` executable in GODOT_SEARCH_PATHS

    Returns:
        Path to the Godot executable

    Raises:
        BinaryNotFoundError: If none of the steps found an executable
    """
    for lookup in (_godot_from_environment, _godot_from_path, _godot_from_search_paths):
        godot = lookup()
        if godot is not None:
            return godot

    search_paths = os.pathsep.join(GODOT_SEARCH_PATHS)
    raise BinaryNotFoundError(
        "Couldn't find the godot binary. Searched in the following locations:\n"
        "    - `godot` or `GODOT` environment variables.\n"
        "    - `$PATH` locations.\n"
        f"    - Default search locations ({search_paths!r}).\n"
        "  Tip: Consider using `gdenv` to manage your godot installations"
        " (https://github.com/bytemeadow/gdenv)."
    )
