#!/usr/bin/env python3
"""
Godot Runner - Run Orchestration

GodotRunner writes the `.gdextension` file, imports the project if it has
never been imported, then launches Godot and waits for it to exit.

Usage:
    GodotRunner.create("my-crate", Path(__file__).parent / "../godot").execute()
"""

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

from .commands import check_exit_status, godot_command, run_blocking, run_godot_import_if_needed
from .errors import InvalidRunConfigError
from .gdextension import GdExtensionConfig, ValidGdExtensionConfig
from .metadata import DEFAULT_CARGO_MANIFEST, cargo_target_directory
from .paths import canonicalize_path

logger = logging.getLogger(__name__)

# Launch Godot with the local stdout debugger.
DEFAULT_GODOT_CLI_ARGUMENTS = ("--debug",)


@dataclass(frozen=True)
class GodotRunner:
    """
    Configuration for one Godot launch.

    Attributes:
        crate_name: Cargo crate name of the GDExtension library
        godot_project_path: Directory containing project.godot
        cargo_manifest_path: Cargo.toml used to find the target directory
        gdextension_config: Explicit manifest builder; derived from cargo metadata if None
        write_gdextension: Write the `.gdextension` file before launching
        pre_import: Run `godot --import --headless` if `.godot` does not exist yet
        godot_cli_arguments: Extra arguments passed to the interactive Godot process
        godot_version: Run Godot through `gdenv run <version>` instead of the godot binary
    """

    crate_name: Optional[str] = None
    godot_project_path: Optional[Path] = None
    cargo_manifest_path: Path = DEFAULT_CARGO_MANIFEST
    gdextension_config: Optional[GdExtensionConfig] = None
    write_gdextension: bool = True
    pre_import: bool = True
    godot_cli_arguments: Tuple[str, ...] = DEFAULT_GODOT_CLI_ARGUMENTS
    godot_version: Optional[str] = None

    @classmethod
    def create(cls, crate_name: str, godot_project_path: Union[str, Path]) -> "GodotRunner":
        """Runner for a crate whose Cargo.toml is in the current directory."""
        return cls.create_with_manifest(crate_name, godot_project_path, DEFAULT_CARGO_MANIFEST)

    @classmethod
    def create_with_manifest(
        cls,
        crate_name: str,
        godot_project_path: Union[str, Path],
        cargo_manifest_path: Union[str, Path],
    ) -> "GodotRunner":
        """Like create(), with an explicit path to Cargo.toml."""
        return cls(
            crate_name=crate_name,
            godot_project_path=Path(godot_project_path),
            cargo_manifest_path=Path(cargo_manifest_path),
        )

    def with_gdextension_config(self, config: Optional[GdExtensionConfig]) -> "GodotRunner":
        """Use config instead of one derived from cargo metadata (None restores the default)."""
        return replace(self, gdextension_config=config)

    def with_write_gdextension(self, enabled: bool) -> "GodotRunner":
        return replace(self, write_gdextension=enabled)

    def with_pre_import(self, enabled: bool) -> "GodotRunner":
        return replace(self, pre_import=enabled)

    def with_godot_cli_arguments(self, args: Sequence[str]) -> "GodotRunner":
        """
        Replace the extra Godot arguments. Default: `--debug`.

        See https://docs.godotengine.org/en/stable/tutorials/editor/command_line_tutorial.html
        """
        return replace(self, godot_cli_arguments=tuple(args))

    def with_godot_version(self, version: Optional[str]) -> "GodotRunner":
        return replace(self, godot_version=version)

    def with_cargo_manifest_path(self, manifest_path: Union[str, Path]) -> "GodotRunner":
        return replace(self, cargo_manifest_path=Path(manifest_path))

    def resolve_gdextension_config(self, godot_project_path: Path) -> ValidGdExtensionConfig:
        """
        Validate the `.gdextension` configuration for this run.

        Always rebuilt from scratch since the target directory may only
        appear after the runner was configured.
        """
        config = self.gdextension_config
        if config is None:
            if not self.crate_name:
                raise InvalidRunConfigError("Crate name not set.")
            config = GdExtensionConfig.start(
                self.crate_name,
                godot_project_path,
                cargo_target_directory(self.cargo_manifest_path),
            )
        return config.build()

    def execute(self) -> None:
        """
        Run Godot with the current configuration.

        Steps, each aborting the run on failure:
        1. Canonicalize the project directory
        2. Find Godot (before anything is written)
        3. Write the `.gdextension` file (if write_gdextension)
        4. Import the project if needed (if pre_import)
        5. Launch Godot and wait for it to exit

        Raises:
            GodotRunnerError: The subclass describes which step failed
        """
        if self.godot_project_path is None:
            raise InvalidRunConfigError("Godot project path not set.")
        godot_project_path = canonicalize_path(self.godot_project_path, "godot project path")

        command = godot_command(self.godot_version)

        if self.write_gdextension:
            self.resolve_gdextension_config(godot_project_path).write()

        if self.pre_import:
            run_godot_import_if_needed(godot_project_path, self.godot_version)

        command = command + list(self.godot_cli_arguments)
        logger.info(f"Launching Godot: {' '.join(command)}")
        check_exit_status(run_blocking(command, godot_project_path), command)
