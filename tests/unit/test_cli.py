"""CLI command tests for prisma-console."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from prisma_console.cli.context import CLIContext, get_client_path, get_schema_path
from prisma_console.cli.main import app
from prisma_console.core.types import Workflow

runner = CliRunner()


class TestVersionOption:
    """Test the --version option."""

    def test_version_output(self) -> None:
        """Test that --version shows version info without loading a client."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "prisma-console v" in result.stdout


class TestHelp:
    """Test the help text."""

    def test_help_documents_workflows(self) -> None:
        """Both workflows and the credential variables are described."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "--workflow" in result.stdout
        assert "replay" in result.stdout
        assert "direct" in result.stdout
        assert "OPENROUTER_API_KEY" in result.stdout

    def test_invalid_workflow_rejected(self) -> None:
        result = runner.invoke(app, ["--workflow", "batch"])
        assert result.exit_code != 0


class TestStartupErrors:
    """Failures before the REPL starts exit with status 1."""

    def test_missing_client_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that an unresolvable --client prints an error panel."""
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["--client", "./generated/client"])
        assert result.exit_code == 1
        assert "Client path not found" in result.stdout

    def test_client_from_environment(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """PRISMA_CONSOLE_CLIENT is used when --client is omitted."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("PRISMA_CONSOLE_CLIENT", "./from/env")
        result = runner.invoke(app, [])
        assert result.exit_code == 1
        assert "env" in result.stdout


class TestOptionResolution:
    """Argument, environment and default priority."""

    def test_client_argument_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PRISMA_CONSOLE_CLIENT", "from_env")
        assert get_client_path("from_arg") == "from_arg"

    def test_client_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PRISMA_CONSOLE_CLIENT", "from_env")
        assert get_client_path(None) == "from_env"

    def test_client_default(self) -> None:
        assert get_client_path(None) == "prisma"

    def test_schema_resolution(self, monkeypatch: pytest.MonkeyPatch) -> None:
        assert get_schema_path(None) is None
        monkeypatch.setenv("PRISMA_CONSOLE_SCHEMA", "db/schema.prisma")
        assert get_schema_path(None) == "db/schema.prisma"
        assert get_schema_path("other.prisma") == "other.prisma"

    def test_context_loads_client_once(self, tmp_path: Path) -> None:
        """The client is imported lazily and cached."""
        module = tmp_path / "lazy_client.py"
        module.write_text("class Prisma:\n    pass\n")
        ctx = CLIContext(client_path=str(module), schema_path=None, workflow=Workflow.DIRECT)

        first = ctx.get_client()

        assert ctx.get_client() is first
