"""Tests for JanitorLogger."""

import io
import json
import logging

from rich.console import Console

from build_janitor.utils.logging import JanitorLogger, LogLevel


def make_logger(**kwargs):
    buffer = io.StringIO()
    console = Console(file=buffer, width=200, color_system=None)
    return JanitorLogger(console=console, **kwargs), buffer


class TestJanitorLogger:
    """Tests for JanitorLogger."""

    def test_namespace_prefix(self):
        logger, buffer = make_logger(namespace="app")

        logger.info("hello")

        assert buffer.getvalue() == "app: hello\n"
        assert logger.messages() == ["app: hello"]

    def test_removed_verbs(self):
        logger, _ = make_logger()

        logger.removed("a.js", dry_run=False)
        logger.removed("b.js", dry_run=True)

        assert logger.messages() == ["build-janitor: removed a.js", "build-janitor: dry-run b.js"]
        assert logger.records[1].extra == {"path": "b.js", "mode": "dry-run"}

    def test_min_level_filters(self):
        logger, buffer = make_logger(min_level=LogLevel.WARNING)

        logger.debug("noise")
        logger.info("noise")
        logger.error("boom")

        assert logger.messages() == ["build-janitor: boom"]
        assert "noise" not in buffer.getvalue()

    def test_console_output_disabled(self):
        logger, buffer = make_logger(console_output=False)

        logger.warning("quiet")

        assert buffer.getvalue() == ""
        assert logger.messages() == ["build-janitor: quiet"]

    def test_markup_is_not_interpreted(self):
        logger, buffer = make_logger()

        logger.removed("[bold]chunk[/bold].js", dry_run=False)

        assert "[bold]chunk[/bold].js" in buffer.getvalue()

    def test_json_lines_file(self, tmp_path):
        log_file = tmp_path / "logs" / "janitor.jsonl"
        logger, _ = make_logger(log_file=log_file)

        logger.paused()
        logger.close()

        lines = log_file.read_text().splitlines()
        assert len(lines) == 1
        entry = json.loads(lines[0])
        assert entry["level"] == "WARNING"
        assert entry["message"] == "pausing due to build errors"

    def test_forwards_to_stdlib(self, caplog):
        logger, _ = make_logger()

        with caplog.at_level(logging.DEBUG, logger="build_janitor.events"):
            logger.info("hello")

        assert "build-janitor: hello" in caplog.text
