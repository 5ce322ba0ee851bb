"""Tests for the command-line interface."""

import json
import logging

import pytest

from page_analyzer import cli
from page_analyzer.exceptions import FetchError
from page_analyzer.models import DocumentVersion, LinkCheckResult, PageAnalysis


@pytest.fixture
def sample_analysis():
    return PageAnalysis(
        url="http://example.com/",
        document_version=DocumentVersion.HTML4,
        title="Example",
        internal_link_count=2,
        external_link_count=1,
        broken_links=(LinkCheckResult("http://other.com/b", 0),),
    )


@pytest.fixture
def fake_analyze(monkeypatch, sample_analysis):
    """Replace the network-bound analysis with a recorder."""
    calls = []

    def analyze_page(url, config=None, deadline=None):
        calls.append((url, config))
        return sample_analysis

    monkeypatch.setattr(cli, "analyze_page", analyze_page)
    return calls


class TestCLI:
    """Test cases for the CLI entry point."""

    def test_json_output(self, fake_analyze, capsys):
        exit_code = cli.main(["analyze", "http://example.com/", "--output", "json"])

        assert exit_code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["html_version"] == "HTML4"
        assert data["inaccessible_links"] == 1
        assert fake_analyze[0][0] == "http://example.com/"

    def test_text_output(self, fake_analyze, capsys):
        exit_code = cli.main(["analyze", "http://example.com/"])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "HTML Version: HTML4" in out
        assert "[no response] http://other.com/b" in out

    def test_json_output_file(self, fake_analyze, tmp_path):
        target = tmp_path / "report.json"

        cli.main(["analyze", "http://example.com/", "-o", "json", "-f", str(target)])

        assert json.loads(target.read_text())["title"] == "Example"

    def test_flags_override_config(self, fake_analyze):
        cli.main([
            "analyze", "http://example.com/",
            "--max-concurrent", "2",
            "--probe-timeout", "1.5",
            "--deadline", "9",
        ])

        config = fake_analyze[0][1]
        assert config.max_concurrent_probes == 2
        assert config.probe_timeout == 1.5
        assert config.analysis_deadline == 9.0

    def test_invalid_flag_value_exits_with_usage_error(self, fake_analyze):
        assert cli.main(["analyze", "http://example.com/", "--max-concurrent", "0"]) == 2
        assert fake_analyze == []

    def test_analysis_error_exits_non_zero(self, monkeypatch, capsys):
        def failing(url, config=None, deadline=None):
            raise FetchError("Connection error: refused", url=url)

        monkeypatch.setattr(cli, "analyze_page", failing)

        assert cli.main(["analyze", "http://example.com/"]) == 1
        assert "refused" in capsys.readouterr().err

    def test_no_command_prints_help(self, capsys):
        assert cli.main([]) == 0
        assert "analyze" in capsys.readouterr().out


class TestLogLevel:
    """The log level comes from --log-level, then LOG_LEVEL."""

    @pytest.fixture(autouse=True)
    def restore_root_level(self):
        root = logging.getLogger()
        level = root.level
        yield
        root.setLevel(level)

    def test_env_log_level_used_without_flag(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        cli.main([])

        assert logging.getLogger().level == logging.DEBUG

    def test_flag_overrides_env_log_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        cli.main(["--log-level", "ERROR"])

        assert logging.getLogger().level == logging.ERROR

    def test_default_is_info(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        cli.main([])

        assert logging.getLogger().level == logging.INFO

    def test_invalid_env_config_exits_with_usage_error(self, monkeypatch, fake_analyze):
        monkeypatch.setenv("MAX_CONCURRENT_PROBES", "0")

        assert cli.main(["analyze", "http://example.com/"]) == 2
        assert fake_analyze == []
