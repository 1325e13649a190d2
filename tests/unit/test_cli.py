"""Tests for CLI commands."""

import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from maestro.cli import app


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Run from an empty directory and drop the handlers the CLI installs."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)


def test_migrate_command_success(cli_runner: CliRunner, vehicle_bna: Path, output_dir: Path):
    """Test migrate command with a valid archive."""
    result = cli_runner.invoke(
        app, ["migrate", "--bnaPath", str(vehicle_bna), "--outputDirectory", str(output_dir)]
    )
    assert result.exit_code == 0, result.output
    assert result.output.strip().endswith("Done.")
    assert (output_dir / "lib" / "my-contract.js").exists()


def test_migrate_command_with_invalid_models(cli_runner: CliRunner, make_bna, output_dir: Path, acme_model: str):
    """Test migrate command when two models declare the same namespace."""
    path = make_bna(models={"models/a.cto": acme_model, "models/b.cto": acme_model})

    result = cli_runner.invoke(app, ["migrate", "--bnaPath", str(path), "--outputDirectory", str(output_dir)])

    assert result.exit_code == 1
    assert "ModelValidationError" in result.output
    assert "Duplicate namespace org.acme" in result.output
    assert "Done." not in result.output


def test_migrate_command_defaults(cli_runner: CliRunner):
    """The default --bnaPath is the current directory, which is not an archive."""
    result = cli_runner.invoke(app, ["migrate"])
    assert result.exit_code == 1
    assert "ArchiveReadError" in result.output


def test_generate_alias(cli_runner: CliRunner, vehicle_bna: Path, output_dir: Path):
    """The legacy command name still works."""
    result = cli_runner.invoke(
        app, ["generate", "--bnaPath", str(vehicle_bna), "--outputDirectory", str(output_dir)]
    )
    assert result.exit_code == 0, result.output
    assert "Done." in result.output


def test_verbose_progress(cli_runner: CliRunner, vehicle_bna: Path, output_dir: Path):
    """-v echoes the run and each node processed."""
    result = cli_runner.invoke(
        app,
        ["-v", "migrate", "--bnaPath", str(vehicle_bna), "--outputDirectory", str(output_dir)],
    )
    assert result.exit_code == 0, result.output
    assert f"migrate a business network archive {vehicle_bna} to directory {output_dir}" in result.output
    assert "Processing network vehicle-network@0.1.2" in result.output
    assert "Processing model org.acme" in result.output
    assert "Processing script lib/logic.js" in result.output


def test_verbose_after_subcommand(cli_runner: CliRunner, vehicle_bna: Path, output_dir: Path):
    """-v is also accepted among the migrate options."""
    result = cli_runner.invoke(
        app,
        ["migrate", "--bnaPath", str(vehicle_bna), "--outputDirectory", str(output_dir), "-v"],
    )
    assert result.exit_code == 0, result.output
    assert f"migrate a business network archive {vehicle_bna} to directory {output_dir}" in result.output
    assert "Processing model org.acme" in result.output
    assert "Processing script lib/logic.js" in result.output


def test_quiet_by_default(cli_runner: CliRunner, vehicle_bna: Path, output_dir: Path):
    result = cli_runner.invoke(
        app, ["migrate", "--bnaPath", str(vehicle_bna), "--outputDirectory", str(output_dir)]
    )
    assert "Processing" not in result.output


def test_config_file(cli_runner: CliRunner, vehicle_bna: Path, output_dir: Path, tmp_path: Path):
    """Settings are read from the --config file."""
    config = tmp_path / "custom.toml"
    config.write_text('[migrate]\ncontract_class_name = "VehicleContract"\n')

    result = cli_runner.invoke(
        app,
        [
            "migrate",
            "--bnaPath",
            str(vehicle_bna),
            "--outputDirectory",
            str(output_dir),
            "--config",
            str(config),
        ],
    )
    assert result.exit_code == 0, result.output
    assert "class VehicleContract" in (output_dir / "lib" / "my-contract.js").read_text()


def test_invalid_config_file(cli_runner: CliRunner, vehicle_bna: Path, tmp_path: Path):
    config = tmp_path / "maestro.toml"
    config.write_text('[migrate]\ncontract_class_name = "not valid"\n')

    result = cli_runner.invoke(app, ["migrate", "--bnaPath", str(vehicle_bna)])
    assert result.exit_code == 1
    assert "MaestroError" in result.output


def test_version(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.startswith("maestro ")
