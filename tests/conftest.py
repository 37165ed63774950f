"""Shared pytest fixtures."""

from pathlib import Path

import pytest
from loguru import logger


@pytest.fixture
def log_messages():
    """Collect loguru output for the duration of a test."""
    messages: list[str] = []
    handler_id = logger.add(lambda msg: messages.append(str(msg)), level="DEBUG")
    yield messages
    logger.remove(handler_id)


class RecordingUploader:
    """Uploader double that remembers every call and can be told to fail."""

    def __init__(self, fail_with: Exception | None = None):
        self.calls: list[tuple[str, str, Path]] = []
        self.fail_with = fail_with

    def upload(self, context: str, name: str, path: Path) -> None:
        self.calls.append((context, name, Path(path)))
        if self.fail_with is not None:
            raise self.fail_with

    def close(self) -> None:
        pass


@pytest.fixture
def uploader_factory():
    return RecordingUploader


@pytest.fixture
def uploader() -> RecordingUploader:
    return RecordingUploader()
