"""Tests for the Typer CLI."""

import json

import pytest
from typer.testing import CliRunner

from corroboration_engine import __version__
from corroboration_engine.cli.main import app

runner = CliRunner()


@pytest.fixture
def payload_file(tmp_path):
    payload = {
        "verdict": "TRUE",
        "score": 88,
        "sources": [
            {
                "title": "Honey found in Egyptian tombs",
                "url": "https://www.smithsonianmag.com/science-nature/the-science-behind-honeys-eternal-shelf-life-1218690/",
                "trustTier": "high",
                "stance": "corroborating",
                "whyItMatters": "Explains why honey resists spoilage.",
            },
            {
                "title": "Why honey lasts",
                "url": "https://www.bbc.com/future/article/20150218-why-honey-never-spoils",
                "stance": "corroborating",
                "whyItMatters": "Describes the chemistry of honey preservation.",
            },
        ],
    }
    path = tmp_path / "payload.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestVersion:
    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "Corroboration Engine" in result.stdout
        assert __version__ in result.stdout


class TestStatus:
    def test_status_lists_settings(self):
        result = runner.invoke(app, ["status"])
        assert result.exit_code == 0
        assert "Live link checks" in result.stdout
        assert "Oracle retries" in result.stdout


class TestEvaluate:
    def test_json_output(self, payload_file):
        result = runner.invoke(
            app,
            [
                "evaluate",
                "Honey never spoils",
                "--payload",
                str(payload_file),
                "--today",
                "2025-06-01",
                "--no-live-check",
                "--json",
            ],
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["claim"] == "Honey never spoils"
        assert data["evaluated_on"] == "2025-06-01"
        assert data["status"] == "confirmed"
        assert len(data["best_links"]) == 2
        assert all(link["link_status"] == "unchecked" for link in data["best_links"])

    def test_rendered_output(self, payload_file):
        result = runner.invoke(
            app,
            ["evaluate", "Honey never spoils", "-p", str(payload_file), "--today", "2025-06-01", "--no-live-check"],
        )
        assert result.exit_code == 0
        assert "Verdict" in result.stdout
        assert "Best sources" in result.stdout

    def test_invalid_date(self, payload_file):
        result = runner.invoke(
            app,
            ["evaluate", "Honey never spoils", "-p", str(payload_file), "--today", "01/06/2025"],
        )
        assert result.exit_code == 2
        assert "Invalid date" in result.stdout

    def test_missing_payload(self, tmp_path):
        result = runner.invoke(
            app,
            ["evaluate", "Honey never spoils", "-p", str(tmp_path / "missing.json"), "--no-live-check"],
        )
        assert result.exit_code == 1
        assert "Cannot read payload" in result.stdout

    def test_blank_claim_rejected(self, payload_file):
        result = runner.invoke(app, ["evaluate", "  ", "-p", str(payload_file), "--no-live-check"])
        assert result.exit_code == 2
        assert "Claim text is empty" in result.stdout
