"""Tests for the python -m csp_guard CLI."""

from __future__ import annotations

import json
import logging

import pytest
import structlog

from csp_guard.__main__ import load_rules, main
from csp_guard.csp.builder import build_csp_header
from csp_guard.logging_config import PACKAGE_LOGGER

RULES_YAML = """\
- description: youtube
  frame-src: https://www.youtube.com
- description: analytics
  connect-src:
    - https://api.example.com
  upgrade-insecure-requests: true
"""


@pytest.fixture(autouse=True)
def _restore_logging():
    """main() configures logging; undo it after each test."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    handlers, level, propagate = list(package_logger.handlers), package_logger.level, package_logger.propagate
    yield
    package_logger.handlers[:] = handlers
    package_logger.setLevel(level)
    package_logger.propagate = propagate
    structlog.reset_defaults()


@pytest.fixture
def rules_file(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text(RULES_YAML)
    return path


class TestLoadRules:
    def test_list(self, rules_file):
        rules = load_rules(rules_file)
        assert len(rules) == 2
        assert rules[0].frame_src == "https://www.youtube.com"

    def test_mapping_with_rules_key(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("rules:\n  - img-src: \"data:\"\n")
        assert load_rules(path)[0].img_src == "data:"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("")
        assert load_rules(path) == []

    def test_scalar_rejected(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("just a string\n")
        with pytest.raises(ValueError):
            load_rules(path)


class TestCli:
    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out

    def test_build_baseline(self, capsys):
        assert main(["build", "--nonce", "cmFuZG9tLW5vbmNlLTEyMzQ="]) == 0
        out = capsys.readouterr().out.strip()
        assert out.startswith("default-src 'self'; ")
        assert "'nonce-cmFuZG9tLW5vbmNlLTEyMzQ='" in out

    def test_build_with_rules_dev(self, capsys, rules_file):
        assert main(["build", str(rules_file), "--dev"]) == 0
        out = capsys.readouterr().out.strip()
        assert "frame-src https://www.youtube.com" in out
        assert "ws://localhost:*" in out
        assert out.endswith("; upgrade-insecure-requests")

    def test_json_format(self, capsys):
        assert main(["build", "--format", "json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert "script-src 'self' 'unsafe-inline'" in data["Content-Security-Policy"]

    def test_all_headers_json_with_generated_nonce(self, capsys):
        assert main(["build", "--generate-nonce", "--all-headers", "--format", "json"]) == 0
        headers = json.loads(capsys.readouterr().out)
        assert f"'nonce-{headers['x-nonce']}'" in headers["Content-Security-Policy"]
        assert "Strict-Transport-Security" in headers

    def test_all_headers_as_header_lines(self, capsys):
        assert main(["build", "--nonce", "cmFuZG9tLW5vbmNlLTEyMzQ=", "--all-headers"]) == 0
        lines = capsys.readouterr().out.splitlines()
        headers = dict(line.split(": ", 1) for line in lines)
        assert lines[0].startswith("Content-Security-Policy: default-src 'self'; ")
        assert headers["x-nonce"] == "cmFuZG9tLW5vbmNlLTEyMzQ="
        assert headers["X-Content-Type-Options"] == "nosniff"

    def test_missing_file(self, capsys, tmp_path):
        assert main(["build", str(tmp_path / "nope.yaml")]) == 1
        assert "could not load rules" in capsys.readouterr().err

    def test_mistyped_rule_value_ignored(self, capsys, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("- script-src: 42\n  img-src: https://cdn.example.com\n")
        assert main(["build", str(path)]) == 0
        captured = capsys.readouterr()
        assert "42" not in captured.out
        assert "https://cdn.example.com" in captured.out
        assert "csp_rule_field_ignored" in captured.err


# ---------------------------------------------------------------------------
# Output streams
# ---------------------------------------------------------------------------


class TestCliOutputStreams:
    def test_stdout_is_only_the_header(self, capsys):
        assert main(["build"]) == 0
        assert capsys.readouterr().out == build_csp_header([], None, False) + "\n"

    def test_advisories_go_to_stderr(self, capsys, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("- img-src: \"*\"\n")
        assert main(["build", str(path)]) == 0
        captured = capsys.readouterr()
        assert "csp_wildcard_source" in captured.err
        assert "csp_wildcard_source" not in captured.out
        assert len(captured.out.splitlines()) == 1

    def test_json_stdout_parses_with_debug_logging(self, capsys, monkeypatch):
        monkeypatch.setenv("CSP_GUARD_LOG_LEVEL", "debug")
        monkeypatch.setenv("CSP_GUARD_LOG_JSON", "true")
        assert main(["build", "--format", "json"]) == 0
        captured = capsys.readouterr()
        assert json.loads(captured.out)["Content-Security-Policy"].startswith("default-src 'self'; ")
        assert "config_loaded" in captured.err
