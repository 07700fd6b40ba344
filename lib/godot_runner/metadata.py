#!/usr/bin/env python3
"""
Godot Runner - Cargo Build Metadata

Finds the cargo target directory (where release/ and debug/ artifacts are
built) by asking `cargo metadata`.
"""

import json
import logging
import os
import subprocess
from pathlib import Path
from typing import List, Union

from .errors import CargoMetadataError

logger = logging.getLogger(__name__)

DEFAULT_CARGO_MANIFEST = Path("./Cargo.toml")


def cargo_metadata_command(manifest_path: Union[str, Path]) -> List[str]:
    """Build the `cargo metadata` command line. Honors $CARGO like cargo subcommands do."""
    cargo = os.environ.get("CARGO") or "cargo"
    return [
        cargo,
        "metadata",
        "--format-version",
        "1",
        "--no-deps",
        "--manifest-path",
        str(manifest_path),
    ]


def cargo_target_directory(manifest_path: Union[str, Path] = DEFAULT_CARGO_MANIFEST) -> Path:
    """
    Get the cargo target directory for a crate.

    Args:
        manifest_path: Path to Cargo.toml

    Returns:
        Absolute path of the target directory

    Raises:
        CargoMetadataError: If cargo cannot be run, fails, or prints unexpected output
    """
    cmd = cargo_metadata_command(manifest_path)
    logger.debug(f"Reading cargo metadata: {' '.join(cmd)}")

    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        raise CargoMetadataError(f"Unable to read cargo manifest {manifest_path}: {e}") from e

    if result.returncode != 0:
        raise CargoMetadataError(
            f"Unable to read cargo manifest {manifest_path} "
            f"(exit code {result.returncode}):\n{result.stderr.strip()}"
        )

    try:
        metadata = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise CargoMetadataError(f"Unable to parse cargo metadata output: {e}") from e

    target_directory = metadata.get("target_directory") if isinstance(metadata, dict) else None
    if not target_directory:
        raise CargoMetadataError("cargo metadata output has no `target_directory`")

    return Path(target_directory)
