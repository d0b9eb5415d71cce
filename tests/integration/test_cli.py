"""Integration tests for the parse_transcript command-line script."""

import importlib.util
from pathlib import Path

import pytest

SCRIPT_PATH = Path(__file__).parent.parent.parent / "scripts" / "parse_transcript.py"


@pytest.fixture(scope="module")
def cli():
    """Load scripts/parse_transcript.py as a module."""
    loader_spec = importlib.util.spec_from_file_location("parse_transcript", SCRIPT_PATH)
    module = importlib.util.module_from_spec(loader_spec)
    loader_spec.loader.exec_module(module)
    return module


@pytest.fixture
def transcript_file(tmp_path, full_session_text):
    path = tmp_path / "session.txt"
    path.write_text(full_session_text, encoding="utf-8")
    return path


@pytest.fixture
def env_file(tmp_path):
    """An empty .env so the developer's own settings do not leak into the run."""
    path = tmp_path / ".env"
    path.write_text("", encoding="utf-8")
    return str(path)


@pytest.mark.usefixtures("clean_env")
class TestParseTranscriptCLI:
    """Tests for main()."""

    def test_full_report(self, cli, transcript_file, env_file, capsys):
        assert cli.main([str(transcript_file), "--env-file", env_file]) == 0
        out = capsys.readouterr().out
        assert "== CAS Check-In ==" in out
        assert "== 9-Line CAS Brief ==" in out
        assert "== Remarks ==\ncleared hot" in out
        assert "== Safety of Flight ==" not in out

    def test_category_filter(self, cli, transcript_file, env_file, capsys):
        assert cli.main([str(transcript_file), "--category", "9 Line", "--env-file", env_file]) == 0
        out = capsys.readouterr().out
        assert out.startswith("== 9-Line CAS Brief ==")
        assert "CAS Check-In" not in out

    def test_incremental(self, cli, transcript_file, env_file, capsys):
        assert cli.main([str(transcript_file), "--incremental", "--category", "Remarks",
                         "--env-file", env_file]) == 0
        assert capsys.readouterr().out.strip() == "== Remarks ==\ncleared hot"

    def test_unknown_category(self, cli, transcript_file, env_file):
        assert cli.main([str(transcript_file), "--category", "Weather", "--env-file", env_file]) == 2

    def test_missing_file(self, cli, tmp_path, env_file):
        assert cli.main([str(tmp_path / "nope.txt"), "--env-file", env_file]) == 1

    def test_empty_report(self, cli, tmp_path, env_file, capsys):
        path = tmp_path / "noise.txt"
        path.write_text("roger\n", encoding="utf-8")
        assert cli.main([str(path), "--env-file", env_file]) == 0
        assert capsys.readouterr().out == ""

    def test_reads_stdin(self, cli, env_file, capsys, monkeypatch):
        import io
        monkeypatch.setattr("sys.stdin", io.StringIO("remarks cleared hot\n"))
        assert cli.main(["-", "--category", "Remarks", "--env-file", env_file]) == 0
        assert "cleared hot" in capsys.readouterr().out
