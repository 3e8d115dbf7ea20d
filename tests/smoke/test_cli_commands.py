"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
Progress is written to a temporary directory through MUSCLESTUDY_STORAGE_DIR.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import json

import pytest
from typer.testing import CliRunner

from musclestudy.cli import app
from musclestudy.config import get_settings

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_storage(tmp_path, monkeypatch):
    """Point the CLI at a throwaway progress directory."""
    monkeypatch.setenv("MUSCLESTUDY_STORAGE_DIR", str(tmp_path))
    get_settings.cache_clear()
    yield tmp_path
    get_settings.cache_clear()


def saved_progress(directory):
    return json.loads((directory / "anatomy-study-progress.json").read_text(encoding="utf-8"))


class TestCLIHelp:
    """Test that help commands work."""

    def test_main_help(self):
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "review" in result.stdout
        assert "stats" in result.stdout

    @pytest.mark.parametrize("command", ["review", "record", "due", "mastery", "attention", "stats", "reset"])
    def test_command_help(self, command):
        result = runner.invoke(app, [command, "--help"])

        assert result.exit_code == 0, result.stdout


class TestCLIRecording:
    def test_record_correct(self, isolated_storage):
        result = runner.invoke(app, ["record", "Soleus", "--correct"])

        assert result.exit_code == 0, result.stdout
        assert "Soleus" in result.stdout
        data = saved_progress(isolated_storage)
        assert data["muscles"]["Soleus"]["correctCount"] == 1
        assert data["totalCorrect"] == 1

    def test_record_incorrect(self, isolated_storage):
        result = runner.invoke(app, ["record", "Soleus", "--incorrect"])

        assert result.exit_code == 0, result.stdout
        assert saved_progress(isolated_storage)["totalIncorrect"] == 1

    def test_review_session(self, isolated_storage):
        result = runner.invoke(app, ["review", "Soleus", "Trapezius"], input="y\nn\n")

        assert result.exit_code == 0, result.stdout
        assert "Session Complete" in result.stdout
        data = saved_progress(isolated_storage)
        assert data["sessions"][0]["musclesStudied"] == 2
        assert data["sessions"][0]["correctCount"] == 1
        assert data["streakDays"] == 1

    def test_review_nothing_due(self):
        runner.invoke(app, ["record", "Soleus", "--correct"])

        result = runner.invoke(app, ["review", "Soleus"])

        assert result.exit_code == 0
        assert "Nothing due" in result.stdout

    def test_review_requires_items(self):
        result = runner.invoke(app, ["review"])

        assert result.exit_code == 1


class TestCLIQueries:
    def test_due(self):
        runner.invoke(app, ["record", "Soleus", "--correct"])

        result = runner.invoke(app, ["due", "Soleus", "Trapezius"])

        assert result.exit_code == 0, result.stdout
        assert "Trapezius" in result.stdout
        assert "1/2" in result.stdout

    def test_mastery_from_catalog(self, tmp_path):
        catalog = tmp_path / "catalog.txt"
        catalog.write_text("Soleus\n\nTrapezius\n", encoding="utf-8")
        runner.invoke(app, ["record", "Soleus", "--correct"])

        result = runner.invoke(app, ["mastery", "--catalog", str(catalog)])

        assert result.exit_code == 0, result.stdout
        assert "80%" in result.stdout
        assert "Trapezius" in result.stdout

    def test_attention(self):
        result = runner.invoke(app, ["attention", "Soleus", "Trapezius", "--limit", "1"])

        assert result.exit_code == 0, result.stdout
        assert "Soleus" in result.stdout

    def test_attention_rejects_zero_limit(self):
        result = runner.invoke(app, ["attention", "Soleus", "--limit", "0"])

        assert result.exit_code == 2

    def test_stats_empty(self):
        result = runner.invoke(app, ["stats"])

        assert result.exit_code == 0, result.stdout
        assert "Learning Statistics" in result.stdout

    def test_stats_with_catalog(self, tmp_path):
        catalog = tmp_path / "catalog.txt"
        catalog.write_text("Soleus\nTrapezius\n", encoding="utf-8")
        runner.invoke(app, ["review", "Soleus"], input="y\n")

        result = runner.invoke(app, ["stats", "--catalog", str(catalog)])

        assert result.exit_code == 0, result.stdout
        assert "Mastery Distribution" in result.stdout
        assert "Recent Sessions" in result.stdout


class TestCLIReset:
    def test_reset_with_yes(self, isolated_storage):
        runner.invoke(app, ["record", "Soleus", "--correct"])

        result = runner.invoke(app, ["reset", "--yes"])

        assert result.exit_code == 0, result.stdout
        assert not (isolated_storage / "anatomy-study-progress.json").exists()

    def test_reset_declined(self, isolated_storage):
        runner.invoke(app, ["record", "Soleus", "--correct"])

        result = runner.invoke(app, ["reset"], input="n\n")

        assert result.exit_code == 0
        assert (isolated_storage / "anatomy-study-progress.json").exists()
