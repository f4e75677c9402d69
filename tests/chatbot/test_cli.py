"""Tests for chatbot CLI."""

from pathlib import Path
from unittest.mock import patch

from typer.testing import CliRunner

from chatbot.cli import app
from chatbot_server.config import ServerConfig


def test_version() -> None:
    """Test --version flag."""
    runner = CliRunner()
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_help() -> None:
    """Test --help flag."""
    runner = CliRunner()
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "render" in result.output
    assert "serve" in result.output


class TestRenderCommand:
    """Tests for the render command."""

    def test_render_file(self, tmp_path: Path) -> None:
        source = tmp_path / "reply.md"
        source.write_text("# Hi\n\nSome **bold** text", encoding="utf-8")

        result = CliRunner().invoke(app, ["render", str(source)])

        assert result.exit_code == 0
        assert '<h1 class="ai-header h1">Hi</h1>' in result.output
        assert '<p class="ai-paragraph">Some <strong>bold</strong> text</p>' in result.output

    def test_render_stdin(self) -> None:
        result = CliRunner().invoke(app, ["render", "-"], input="- one\n- two\n")
        assert result.exit_code == 0
        assert '<ul class="ai-unordered-list">' in result.output

    def test_render_to_output_file(self, tmp_path: Path) -> None:
        target = tmp_path / "out.html"

        result = CliRunner().invoke(app, ["render", "-", "--output", str(target)], input="hello")

        assert result.exit_code == 0
        assert target.read_text(encoding="utf-8") == (
            '<div class="formatted-response"><p class="ai-paragraph">hello</p></div>\n'
        )

    def test_render_escapes_by_default(self) -> None:
        result = CliRunner().invoke(app, ["render", "-"], input="<b>x</b>")
        assert "&lt;b&gt;x&lt;/b&gt;" in result.output

    def test_render_no_escape(self) -> None:
        result = CliRunner().invoke(app, ["render", "-", "--no-escape"], input="<b>x</b>")
        assert result.exit_code == 0
        assert '<p class="ai-paragraph"><b>x</b></p>' in result.output

    def test_render_missing_file(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(app, ["render", str(tmp_path / "missing.md")])
        assert result.exit_code == 1


class TestServeCommand:
    """Tests for the serve command."""

    def test_serve_passes_overrides(self) -> None:
        with patch("chatbot.commands.serve.run_server") as mock_run:
            result = CliRunner().invoke(app, ["serve", "--host", "0.0.0.0", "--port", "8123"])

        assert result.exit_code == 0
        mock_run.assert_called_once()
        args, kwargs = mock_run.call_args
        assert isinstance(args[0], ServerConfig)
        assert kwargs == {"host": "0.0.0.0", "port": 8123}

    def test_serve_uses_config_defaults(self) -> None:
        with patch("chatbot.commands.serve.run_server") as mock_run:
            result = CliRunner().invoke(app, ["serve"])

        assert result.exit_code == 0
        assert mock_run.call_args.kwargs == {}

    def test_serve_failure_exits_nonzero(self) -> None:
        with patch("chatbot.commands.serve.run_server", side_effect=OSError("address in use")):
            result = CliRunner().invoke(app, ["serve"])

        assert result.exit_code == 1
