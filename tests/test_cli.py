"""Tests for the droid-tuner CLI."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from droid_tuner.cli import create_parser, run_cli
from droid_tuner.config import TunerConfig
from droid_tuner.droids import parse_droid_file


def write_droid(directory: Path, name: str, header: str) -> Path:
    path = directory / f"{name}.md"
    path.write_text(f"---\n{header}---\nBody.\n")
    return path


@pytest.fixture
def config(tmp_path: Path) -> TunerConfig:
    droids_dir = tmp_path / "droids"
    droids_dir.mkdir()
    write_droid(droids_dir, "alpha", "model: inherit\n")
    write_droid(droids_dir, "beta", "model: claude-opus-4-5-20251101\nreasoningEffort: high\n")
    return TunerConfig(
        droids_dir=droids_dir,
        settings_path=tmp_path / "settings.json",
        legacy_config_path=tmp_path / "config.json",
        log_dir=tmp_path / "logs",
        discover_models=False,
    )


class TestParser:
    """Tests for argument parsing."""

    def test_no_command(self):
        args = create_parser().parse_args([])
        assert args.command is None

    def test_set_with_name(self):
        args = create_parser().parse_args(["set", "alpha", "gpt-5.1", "--reasoning", "low"])

        assert args.name == "alpha"
        assert args.model == "gpt-5.1"
        assert args.reasoning == "low"

    def test_set_all(self):
        args = create_parser().parse_args(["set", "--all", "inherit"])

        assert args.all is True
        assert args.name is None
        assert args.model == "inherit"

    def test_reasoning_flags_exclusive(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["set", "a", "m", "--reasoning", "low", "--no-reasoning"])


class TestListCommand:
    """Tests for 'list'."""

    def test_lists_droids(self, config: TunerConfig, capsys):
        assert run_cli(["list"], config=config) == 0

        out = capsys.readouterr().out
        assert "alpha" in out
        assert "claude-opus-4-5-20251101" in out
        assert "high" in out
        assert "Total: 2 droid(s)" in out

    def test_empty(self, config: TunerConfig, tmp_path: Path, capsys):
        config.droids_dir = tmp_path / "empty"

        assert run_cli(["list"], config=config) == 0
        assert "No droids found" in capsys.readouterr().out


class TestModelsCommand:
    """Tests for 'models'."""

    def test_shows_catalog(self, config: TunerConfig, capsys):
        assert config.settings_path is not None
        config.settings_path.write_text(json.dumps({"customModels": [{"model": "kimi-k2"}]}))

        assert run_cli(["models"], config=config) == 0

        out = capsys.readouterr().out
        assert "Factory Models" in out
        assert "inherit" in out
        assert "BYOK Custom" in out
        assert "kimi-k2" in out


class TestSetCommand:
    """Tests for 'set'."""

    def test_set_one(self, config: TunerConfig, capsys):
        assert run_cli(["set", "alpha", "gpt-5.1"], config=config) == 0

        assert config.droids_dir is not None
        assert parse_droid_file(config.droids_dir / "alpha.md") == ("gpt-5.1", None)
        assert parse_droid_file(config.droids_dir / "beta.md")[0] == "claude-opus-4-5-20251101"
        assert "Set alpha to 'gpt-5.1'" in capsys.readouterr().out

    def test_set_all_keeps_reasoning(self, config: TunerConfig):
        assert run_cli(["set", "--all", "inherit"], config=config) == 0

        assert config.droids_dir is not None
        assert parse_droid_file(config.droids_dir / "alpha.md") == ("inherit", None)
        assert parse_droid_file(config.droids_dir / "beta.md") == ("inherit", "high")

    def test_no_reasoning(self, config: TunerConfig):
        assert run_cli(["set", "beta", "gpt-5.1", "--no-reasoning"], config=config) == 0

        assert config.droids_dir is not None
        assert parse_droid_file(config.droids_dir / "beta.md") == ("gpt-5.1", None)

    def test_unknown_droid(self, config: TunerConfig, capsys):
        assert run_cli(["set", "nope", "gpt-5.1"], config=config) == 1
        assert "Droid 'nope' not found" in capsys.readouterr().out

    def test_name_or_all_required(self, config: TunerConfig, capsys):
        assert run_cli(["set", "gpt-5.1"], config=config) == 1
        assert "give a droid name or --all" in capsys.readouterr().out

    def test_save_failure(self, config: TunerConfig, capsys):
        with patch(
            "droid_tuner.droids.repository.DroidRepository.save",
            side_effect=PermissionError("denied"),
        ):
            assert run_cli(["set", "alpha", "gpt-5.1"], config=config) == 1

        assert "Failed to save alpha: denied" in capsys.readouterr().out


class TestTuiCommand:
    """Tests for the default command."""

    def test_default_runs_tui(self, config: TunerConfig):
        with patch("droid_tuner.tui.TunerApp.run") as run:
            assert run_cli([], config=config) == 0

        run.assert_called_once()
