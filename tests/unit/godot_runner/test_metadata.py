"""
Unit tests for reading the cargo target directory.
"""

import json
import subprocess
import pytest
from pathlib import Path
from unittest.mock import patch

from godot_runner.errors import CargoMetadataError
from godot_runner.metadata import cargo_metadata_command, cargo_target_directory


def cargo_result(returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestCargoMetadataCommand:
    """Test command line construction."""

    def test_default_cargo(self, monkeypatch):
        monkeypatch.delenv("CARGO", raising=False)

        cmd = cargo_metadata_command(Path("crate/Cargo.toml"))

        assert cmd[0] == "cargo"
        assert cmd[1:5] == ["metadata", "--format-version", "1", "--no-deps"]
        assert cmd[-2:] == ["--manifest-path", str(Path("crate/Cargo.toml"))]

    def test_cargo_env_override(self, monkeypatch):
        monkeypatch.setenv("CARGO", "/opt/rust/bin/cargo")

        assert cargo_metadata_command("Cargo.toml")[0] == "/opt/rust/bin/cargo"


class TestCargoTargetDirectory:
    """Test parsing `cargo metadata` output."""

    def test_reads_target_directory(self):
        output = json.dumps({"packages": [], "target_directory": "/home/user/.cache/cargo/target"})

        with patch("godot_runner.metadata.subprocess.run", return_value=cargo_result(stdout=output)) as mock_run:
            result = cargo_target_directory("Cargo.toml")

        assert result == Path("/home/user/.cache/cargo/target")
        assert mock_run.call_args.kwargs["capture_output"] is True

    def test_cargo_missing(self):
        with patch("godot_runner.metadata.subprocess.run", side_effect=FileNotFoundError("cargo")):
            with pytest.raises(CargoMetadataError, match="Unable to read cargo manifest"):
                cargo_target_directory("Cargo.toml")

    def test_cargo_fails(self):
        result = cargo_result(returncode=101, stderr="error: manifest path `x` does not exist\n")

        with patch("godot_runner.metadata.subprocess.run", return_value=result):
            with pytest.raises(CargoMetadataError) as exc_info:
                cargo_target_directory("x")

        assert "101" in str(exc_info.value)
        assert "does not exist" in str(exc_info.value)

    def test_invalid_json(self):
        with patch("godot_runner.metadata.subprocess.run", return_value=cargo_result(stdout="not json")):
            with pytest.raises(CargoMetadataError, match="parse"):
                cargo_target_directory("Cargo.toml")

    def test_missing_field(self):
        with patch("godot_runner.metadata.subprocess.run", return_value=cargo_result(stdout="{}")):
            with pytest.raises(CargoMetadataError, match="target_directory"):
                cargo_target_directory("Cargo.toml")
