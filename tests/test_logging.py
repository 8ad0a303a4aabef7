"""Tests for JSONL event logging."""

import json
import tempfile
from pathlib import Path

import pytest

from droid_tuner.logging import JSONLLogger, LogEntry


@pytest.fixture
def temp_log_dir():
    """Create a temporary directory for logs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def logger(temp_log_dir: Path) -> JSONLLogger:
    return JSONLLogger(log_dir=temp_log_dir)


def test_log_entry_to_dict():
    """Test LogEntry excludes None values."""
    entry = LogEntry(timestamp="2024-01-01T00:00:00Z", event="test")
    data = entry.to_dict()

    assert "timestamp" in data
    assert "event" in data
    assert "droid" not in data  # None excluded
    assert "extra" not in data  # Empty dict excluded


def test_log_creates_file(logger: JSONLLogger):
    """Test that logging creates the log file."""
    logger.log("test_event")

    assert logger.log_path.exists()


def test_creates_log_dir(temp_log_dir: Path):
    """Missing log directories are created."""
    logger = JSONLLogger(log_dir=temp_log_dir / "nested" / "logs")

    assert logger.log_dir.is_dir()


def test_log_writes_jsonl(logger: JSONLLogger):
    """Test that logs are written in JSONL format."""
    logger.log("reload", count=3)
    logger.log("quit", count=0)

    with open(logger.log_path) as f:
        lines = f.readlines()

    assert len(lines) == 2

    entry1 = json.loads(lines[0])
    assert entry1["event"] == "reload"
    assert entry1["count"] == 3

    entry2 = json.loads(lines[1])
    assert entry2["event"] == "quit"


def test_log_save(logger: JSONLLogger):
    """Test logging a saved droid."""
    logger.log_save("reviewer", "gpt-5.1-codex", "high")

    with open(logger.log_path) as f:
        entry = json.loads(f.readline())

    assert entry["event"] == "droid_saved"
    assert entry["droid"] == "reviewer"
    assert entry["model"] == "gpt-5.1-codex"
    assert entry["reasoning_effort"] == "high"


def test_log_save_failed(logger: JSONLLogger):
    """Test logging a failed save."""
    logger.log_save_failed("reviewer", "Permission denied")

    with open(logger.log_path) as f:
        entry = json.loads(f.readline())

    assert entry["event"] == "save_failed"
    assert entry["error"] == "Permission denied"
    assert "model" not in entry


def test_log_catalog(logger: JSONLLogger):
    """Test logging a loaded catalog."""
    logger.log_catalog(10, 2, "builtin")

    with open(logger.log_path) as f:
        entry = json.loads(f.readline())

    assert entry["event"] == "catalog_loaded"
    assert entry["count"] == 12
    assert entry["extra"] == {"factory": 10, "byok": 2, "source": "builtin"}


def test_rotation(temp_log_dir: Path):
    """Test log rotation when file exceeds max size."""
    logger = JSONLLogger(log_dir=temp_log_dir, max_size_mb=0.0001)  # ~100 bytes

    for i in range(10):
        logger.log("reload", droid=f"droid-{i}", count=i)

    log_files = list(temp_log_dir.glob("*.jsonl"))
    assert len(log_files) >= 1
    assert logger.log_path.exists()


def test_missing_log_dir_is_not_fatal(temp_log_dir: Path):
    """Writes after the directory disappears are dropped, not raised."""
    log_dir = temp_log_dir / "events"
    logger = JSONLLogger(log_dir=log_dir)
    log_dir.rmdir()

    logger.log("reload")

    assert not logger.log_path.exists()
