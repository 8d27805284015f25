"""Pytest fixtures for janitor tests."""

import io

import pytest
from rich.console import Console

from build_janitor.utils.logging import JanitorLogger

from tests.helpers.fakes import RecordingExecutor


@pytest.fixture
def dist(tmp_path):
    """Create an empty build output directory."""
    path = tmp_path / "dist"
    path.mkdir()
    return path


@pytest.fixture
def console_buffer():
    """In-memory text buffer for console output."""
    return io.StringIO()


@pytest.fixture
def janitor_logger(console_buffer):
    """JanitorLogger writing to an in-memory console."""
    console = Console(file=console_buffer, width=200, color_system=None)
    return JanitorLogger(console=console)


@pytest.fixture
def executor():
    """Filesystem executor that records each batch."""
    return RecordingExecutor()
