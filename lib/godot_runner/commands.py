#!/usr/bin/env python3
"""
Godot Runner - Godot Process Invocation

Builds Godot command lines and runs them as blocking child processes.

Child processes inherit stdin/stdout/stderr, so the operator sees Godot's
output live, interleaved with ours. Nothing is captured or parsed here; the
only thing read back is the exit status.
"""

import logging
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from .errors import BinaryNotFoundError, ExecFailedError, GodotIOError, ImportFailedError
from .paths import find_godot_binary

logger = logging.getLogger(__name__)

# Godot creates this directory the first time a project is imported.
IMPORT_MARKER_DIR = ".godot"

IMPORT_ARGUMENTS = ["--import", "--headless"]

GODOT_IMPORT_CRASH_ISSUE = "https://github.com/godotengine/godot/issues/111645"


def godot_command(godot_version: Optional[str] = None) -> List[str]:
    """
    Command prefix for running Godot.

    Args:
        godot_version: Run this version through `gdenv run <version>`;
            if None, use the binary found by find_godot_binary()

    Returns:
        Argument list to which Godot arguments are appended

    Raises:
        BinaryNotFoundError: If neither gdenv (when a version is given) nor godot is found
    """
    if godot_version:
        gdenv = shutil.which("gdenv")
        if not gdenv:
            raise BinaryNotFoundError(
                f"Godot version {godot_version!r} requested but `gdenv` was not found on PATH. "
                "See https://github.com/bytemeadow/gdenv"
            )
        return [gdenv, "run", godot_version]
    return [str(find_godot_binary())]


def run_blocking(command: Sequence[str], cwd: Path) -> int:
    """
    Run command in cwd with inherited stdio and wait for it to exit.

    Returns:
        The process return code (negative on POSIX if killed by a signal)

    Raises:
        GodotIOError: If the process cannot be spawned
    """
    logger.debug(f"Running {list(command)} in {cwd}")
    try:
        completed = subprocess.run(list(command), cwd=str(cwd))
    except OSError as e:
        raise GodotIOError(f"Failed to spawn Godot process {list(command)}: {e}") from e
    return completed.returncode


def is_imported(godot_project_path: Path) -> bool:
    """True if the project already has its `.godot` directory. Always checks the filesystem."""
    return (Path(godot_project_path) / IMPORT_MARKER_DIR).is_dir()


def run_godot_import_if_needed(
    godot_project_path: Path, godot_version: Optional[str] = None
) -> bool:
    """
    Run `godot --import --headless` unless the project has already been imported.

    Returns:
        True if an import was run, False if it was skipped

    Raises:
        BinaryNotFoundError, GodotIOError, ImportFailedError: see run_godot_import()
    """
    if is_imported(godot_project_path):
        logger.debug(f"Skipping import, {IMPORT_MARKER_DIR} exists in {godot_project_path}")
        return False
    run_godot_import(godot_project_path, godot_version)
    return True


def run_godot_import(godot_project_path: Path, godot_version: Optional[str] = None) -> None:
    """
    Import the Godot project headlessly. Runs once; failures are not retried.

    Raises:
        BinaryNotFoundError: If Godot cannot be found
        GodotIOError: If the process cannot be spawned
        ImportFailedError: If Godot exits with a nonzero status
    """
    command = godot_command(godot_version) + IMPORT_ARGUMENTS
    logger.info(f"Importing Godot project: {godot_project_path}")

    returncode = run_blocking(command, godot_project_path)
    if returncode == 0:
        return

    exit_code = returncode if returncode > 0 else None
    raise ImportFailedError(
        f"Godot import process failed with exit code `{exit_code if exit_code is not None else 'unknown'}`.\n"
        "Possible cause: Known bug in Godot 4.5.1: "
        "\"Headless import of project with GDExtensions crashes\"\n"
        f"See: {GODOT_IMPORT_CRASH_ISSUE}\n"
        f"Try re-running if `{IMPORT_MARKER_DIR}` folder was generated successfully.",
        exit_code=exit_code,
    )


def check_exit_status(returncode: int, command: Sequence[str]) -> None:
    """
    Raise ExecFailedError for a nonzero return code.

    A negative return code means the process was killed by a signal and has
    no exit code of its own.
    """
    if returncode == 0:
        return
    if returncode < 0:
        raise ExecFailedError(
            f"Godot process failed with unknown exit code (terminated by signal {-returncode})\n"
            f"Command: {list(command)}"
        )
    raise ExecFailedError(
        f"Godot process failed with exit code {returncode}\nCommand: {list(command)}",
        exit_code=returncode,
    )


def run_godot(
    godot_project_path: Path,
    godot_version: Optional[str] = None,
    args: Sequence[str] = (),
) -> None:
    """
    Launch Godot in the project directory and wait for it to exit.

    Raises:
        BinaryNotFoundError: If Godot cannot be found
        GodotIOError: If the process cannot be spawned
        ExecFailedError: If Godot exits unsuccessfully
    """
    command = godot_command(godot_version) + list(args)
    logger.info(f"Launching Godot: {' '.join(command)}")
    check_exit_status(run_blocking(command, godot_project_path), command)
