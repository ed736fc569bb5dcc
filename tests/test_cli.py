"""Tests for the Typer CLI."""
from typer.testing import CliRunner

from llmtui import __version__
from llmtui.cli import app

runner = CliRunner()


def test_version_command():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_chat_help_lists_options():
    result = runner.invoke(app, ["chat", "--help"])
    assert result.exit_code == 0
    for option in ("--provider", "--model", "--no-stream", "--log-level"):
        assert option in result.stdout
