#!/usr/bin/env python3
"""
Godot Runner - GDExtension Manifest Generation

Builds and writes the `.gdextension` file that tells Godot where to load a
compiled Rust library from, per OS, architecture and build variant.

Usage:
    GdExtensionConfig.start(crate_name, godot_project_path, target_directory) \\
        .with_debug_target(None) \\
        .build() \\
        .write()
"""

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .errors import GodotIOError, MissingFieldError
from .paths import canonicalize_path, relative_res_path

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE_NAME = "rust.gdextension"
DEFAULT_COMPATIBILITY_VERSION = "4.1"
DEFAULT_ENTRY_SYMBOL = "gdext_rust_init"

# (library table key, artifact file name) per platform; {variant} and {name}
# are filled in at render time. Order is part of the file format.
LIBRARY_ENTRIES: List[Tuple[str, str]] = [
    ("linux.{variant}.x86_64", "lib{name}.so"),
    ("windows.{variant}.x86_64", "{name}.dll"),
    ("macos.{variant}", "lib{name}.dylib"),
    ("macos.{variant}.arm64", "lib{name}.dylib"),
]

# Width of `<key> =` so that all quoted paths start in the same column.
_KEY_COLUMN_WIDTH = 24


def normalize_library_name(crate_name: str) -> str:
    """Cargo names artifacts with underscores even when the crate name uses dashes."""
    return crate_name.replace("-", "_")


@dataclass(frozen=True)
class ValidGdExtensionConfig:
    """
    A validated GDExtension configuration, ready to be written.

    Construct me using GdExtensionConfig.build(); all fields are required and
    the instance cannot be changed afterwards.
    """

    config_file_name: str
    compatibility_version: str
    entry_symbol: str
    reloadable: bool
    release_target: Optional[str]
    debug_target: Optional[str]
    godot_project_path: Path
    relative_target_path: str
    library_name: str

    def _library_lines(self, variant: str, label: str) -> List[str]:
        lines = []
        for key_template, artifact_template in LIBRARY_ENTRIES:
            key = key_template.format(variant=variant)
            artifact = artifact_template.format(name=self.library_name)
            res_path = f"res://{self.relative_target_path}/{label}/{artifact}"
            lines.append(f"{key + ' =':<{_KEY_COLUMN_WIDTH}} \"{res_path}\"\n")
        return lines

    def render(self) -> str:
        """Generate the `.gdextension` file contents."""
        lines = [
            "[configuration]\n",
            f"entry_symbol = \"{self.entry_symbol}\"\n",
            f"compatibility_minimum = {self.compatibility_version}\n",
            f"reloadable = {'true' if self.reloadable else 'false'}\n",
            "\n",
            "[libraries]\n",
        ]
        if self.release_target is not None:
            lines.extend(self._library_lines("release", self.release_target))
        if self.debug_target is not None:
            lines.extend(self._library_lines("debug", self.debug_target))
        return "".join(lines)

    create = render

    def full_config_path(self) -> Path:
        """The full path to the generated `.gdextension` file including the file name."""
        return self.godot_project_path / self.config_file_name

    def write(self) -> Path:
        """
        Write the generated `.gdextension` file, replacing any existing one.

        Returns:
            Path of the written file

        Raises:
            GodotIOError: If the file cannot be written
        """
        config_path = self.full_config_path()
        try:
            with open(config_path, "w", encoding="utf-8", newline="\n") as f:
                f.write(self.render())
        except OSError as e:
            raise GodotIOError(f"Failed to write GDExtension config {config_path}: {e}") from e

        logger.info(f"Wrote GDExtension config: {config_path}")
        return config_path


@dataclass(frozen=True)
class GdExtensionConfig:
    """
    Builder for ValidGdExtensionConfig.

    Each with_* method returns a new builder; the original is left untouched.
    Paths are only checked by build(), so the directories may be created
    after the builder is configured.
    """

    config_file_name: str = DEFAULT_CONFIG_FILE_NAME
    compatibility_version: str = DEFAULT_COMPATIBILITY_VERSION
    entry_symbol: str = DEFAULT_ENTRY_SYMBOL
    reloadable: bool = True
    release_target: Optional[str] = "release"
    debug_target: Optional[str] = "debug"
    target_path: Optional[Path] = None
    godot_project_path: Optional[Path] = None
    library_name: Optional[str] = None

    @classmethod
    def start(
        cls,
        crate_name: str,
        godot_project_path: Union[str, Path],
        target_directory: Union[str, Path],
    ) -> "GdExtensionConfig":
        """
        Start building a ValidGdExtensionConfig.

        Args:
            crate_name: Cargo crate name; dashes are replaced with underscores
            godot_project_path: Directory containing project.godot
            target_directory: Cargo target directory (holds release/ and debug/)
        """
        return cls(
            library_name=normalize_library_name(crate_name),
            target_path=Path(target_directory),
            godot_project_path=Path(godot_project_path),
        )

    def build(self) -> ValidGdExtensionConfig:
        """
        Validate the builder and return a ValidGdExtensionConfig.

        Raises:
            MissingFieldError: If a path or the library name is not set
            PathResolutionError: If a directory does not exist or no relative
                path exists between them
        """
        if self.target_path is None:
            raise MissingFieldError("Missing target path")
        target_path = canonicalize_path(self.target_path, "target path")

        if self.godot_project_path is None:
            raise MissingFieldError("Missing godot project path")
        godot_project_path = canonicalize_path(self.godot_project_path, "godot project path")

        if not self.library_name:
            raise MissingFieldError("Missing library name")

        return ValidGdExtensionConfig(
            config_file_name=self.config_file_name,
            compatibility_version=self.compatibility_version,
            entry_symbol=self.entry_symbol,
            reloadable=self.reloadable,
            release_target=self.release_target,
            debug_target=self.debug_target,
            godot_project_path=godot_project_path,
            relative_target_path=relative_res_path(target_path, godot_project_path),
            library_name=self.library_name,
        )

    def with_release_target(self, name: Optional[str]) -> "GdExtensionConfig":
        """Release build directory name, or None to omit release entries. Default: `release`."""
        return replace(self, release_target=name)

    def with_debug_target(self, name: Optional[str]) -> "GdExtensionConfig":
        """Debug build directory name, or None to omit debug entries. Default: `debug`."""
        return replace(self, debug_target=name)

    def with_compatibility_version(self, version: str) -> "GdExtensionConfig":
        """Minimum Godot version. Default: `4.1`."""
        return replace(self, compatibility_version=version)

    def with_entry_symbol(self, symbol: str) -> "GdExtensionConfig":
        """Default: `gdext_rust_init`."""
        return replace(self, entry_symbol=symbol)

    def with_config_file_name(self, name: str) -> "GdExtensionConfig":
        """Default: `rust.gdextension`."""
        return replace(self, config_file_name=name)

    def with_reloadable(self, reloadable: bool) -> "GdExtensionConfig":
        """Whether Godot may hot reload the library. Default: True."""
        return replace(self, reloadable=reloadable)
