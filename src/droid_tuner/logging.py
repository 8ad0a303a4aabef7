"""JSONL event log for tuner sessions."""

import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class LogEntry:
    """A single log entry."""

    timestamp: str
    event: str
    droid: str | None = None
    model: str | None = None
    reasoning_effort: str | None = None
    count: int | None = None
    error: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict, excluding None values."""
        data = asdict(self)
        return {k: v for k, v in data.items() if v is not None and v != {} and v != []}


class JSONLLogger:
    """Logger that writes structured events in JSONL format."""

    def __init__(
        self,
        log_dir: str | Path,
        filename: str = "events.jsonl",
        max_size_mb: float = 5.0,
    ) -> None:
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.filename = filename
        self.max_size_bytes = int(max_size_mb * 1024 * 1024)

    @property
    def log_path(self) -> Path:
        """Current log file path."""
        return self.log_dir / self.filename

    def _rotate_if_needed(self) -> None:
        """Rotate log file if it exceeds max size."""
        if not self.log_path.exists():
            return

        if self.log_path.stat().st_size >= self.max_size_bytes:
            timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
            rotated_name = f"{self.log_path.stem}_{timestamp}.jsonl"
            self.log_path.rename(self.log_dir / rotated_name)

    def _write(self, entry: LogEntry) -> None:
        """Append an entry; a failed write is logged and dropped."""
        try:
            self._rotate_if_needed()
            with open(self.log_path, "a", encoding="utf-8") as f:
                f.write(json.dumps(entry.to_dict()) + "\n")
        except OSError as e:
            logger.warning("Cannot write event log %s: %s", self.log_path, e)

    def log(
        self,
        event: str,
        *,
        droid: str | None = None,
        model: str | None = None,
        reasoning_effort: str | None = None,
        count: int | None = None,
        error: str | None = None,
        **extra: Any,
    ) -> None:
        """Log an event."""
        entry = LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            event=event,
            droid=droid,
            model=model,
            reasoning_effort=reasoning_effort,
            count=count,
            error=error,
            extra=extra if extra else {},
        )
        self._write(entry)

    def log_save(
        self,
        droid: str,
        model: str,
        reasoning_effort: str | None = None,
    ) -> None:
        """Log a droid written to disk."""
        self.log(
            "droid_saved",
            droid=droid,
            model=model,
            reasoning_effort=reasoning_effort,
        )

    def log_save_failed(self, droid: str, error: str) -> None:
        """Log a droid that could not be written."""
        self.log("save_failed", droid=droid, error=error)

    def log_catalog(self, factory: int, byok: int, source: str) -> None:
        """Log the size and origin of a loaded model catalog."""
        self.log("catalog_loaded", count=factory + byok, factory=factory, byok=byok, source=source)
