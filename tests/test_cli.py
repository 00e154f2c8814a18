"""Tests for the command line interface."""

import json

import pytest
from loguru import logger

from tests.conftest import CHASE_HTML, build_email
from ynab_sync.cli import main


@pytest.fixture(autouse=True)
def drop_log_sinks():
    """main() points loguru at the captured stderr; detach it afterwards."""
    yield
    logger.remove()


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"budget_id": "b1", "accounts": {"1234": "a1"}}))
    return path


class TestProcessCommand:
    """Test the process subcommand."""

    def test_dry_run_writes_csv(self, tmp_path, config_path, capsys):
        eml = tmp_path / "alert.eml"
        eml.write_bytes(build_email(CHASE_HTML))
        output = tmp_path / "entries.csv"

        code = main(["process", str(eml), "-c", str(config_path), "--dry-run", "-o", str(output)])

        assert code == 0
        assert "Coffee Shop" in output.read_text()
        assert "parsed" in capsys.readouterr().out

    def test_missing_input(self, tmp_path, config_path):
        assert main(["process", str(tmp_path / "nope.eml"), "-c", str(config_path)]) == 1

    def test_missing_config(self, tmp_path):
        eml = tmp_path / "alert.eml"
        eml.write_bytes(build_email(CHASE_HTML))
        assert main(["process", str(eml), "-c", str(tmp_path / "nope.json"), "--dry-run"]) == 1

    def test_missing_api_key(self, tmp_path, config_path, monkeypatch):
        monkeypatch.delenv("YNAB_API_KEY", raising=False)
        monkeypatch.delenv("YNAB_KEY", raising=False)
        eml = tmp_path / "alert.eml"
        eml.write_bytes(build_email(CHASE_HTML))
        assert main(["process", str(eml), "-c", str(config_path)]) == 1

    def test_incomplete_message_fails(self, tmp_path, config_path):
        eml = tmp_path / "alert.eml"
        eml.write_bytes(build_email("<p>nothing</p>"))
        assert main(["process", str(eml), "-c", str(config_path), "--dry-run"]) == 1


class TestChunksCommand:
    """Test the chunks subcommand."""

    def test_email_uses_sender_layout(self, tmp_path, capsys):
        eml = tmp_path / "alert.eml"
        eml.write_bytes(build_email(CHASE_HTML))

        assert main(["chunks", str(eml)]) == 0

        out = capsys.readouterr().out
        assert "Layout: chase (header_value)" in out
        assert "'Amount'" in out and "'$4.50'" in out

    def test_html_requires_layout(self, tmp_path):
        html = tmp_path / "alert.html"
        html.write_text(CHASE_HTML)
        assert main(["chunks", str(html)]) == 1

    def test_html_with_layout(self, tmp_path, capsys):
        html = tmp_path / "alert.html"
        html.write_text(CHASE_HTML)

        assert main(["chunks", str(html), "--layout", "capitalone"]) == 0
        assert "Layout: capitalone (unpaired)" in capsys.readouterr().out

    def test_unknown_sender(self, tmp_path):
        eml = tmp_path / "alert.eml"
        eml.write_bytes(build_email(CHASE_HTML, sender="alerts@example-bank.com"))
        assert main(["chunks", str(eml)]) == 1
