"""Shared pytest fixtures for ksfilter tests."""
import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, List

import pytest
import yaml

from ksfilter.infrastructure.logger import Logger, LogLevel


class RecordingHandler(logging.Handler):
    """Logging handler that keeps every record it receives."""

    def __init__(self):
        super().__init__()
        self.records: List[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)

    @property
    def messages(self) -> List[str]:
        return [record.getMessage() for record in self.records]


@pytest.fixture
def recording_handler() -> RecordingHandler:
    """Handler collecting log records."""
    return RecordingHandler()


@pytest.fixture
def test_logger(request, recording_handler: RecordingHandler) -> Logger:
    """Logger writing only to the recording handler."""
    return Logger(
        name=f"ksfilter.test.{request.node.name}",
        level=LogLevel.DEBUG,
        handlers=[recording_handler],
    )


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove KSFILTER_* variables so tests see only what they set."""
    for key in list(os.environ):
        if key.startswith("KSFILTER_"):
            monkeypatch.delenv(key)


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[Dict[str, Any]], Path]:
    """Factory writing a YAML config file and returning its path."""

    def _write(data: Dict[str, Any], name: str = "ksfilter.yaml") -> Path:
        path = tmp_path / name
        path.write_text(yaml.safe_dump(data))
        return path

    return _write


@pytest.fixture
def sample_config() -> Dict[str, Any]:
    """Provide a sample ksfilter configuration."""
    return {
        "metadata": {
            "schema": {
                "refreshed-keyspaces": ["ks1", "ks2", "/KS.*/", "!KS2", "!/.*2/"],
            },
        },
        "logging": {"level": "INFO"},
    }
