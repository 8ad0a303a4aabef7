"""DroidRepository: discovery and persistence of droid files.

Discovery scans one directory (non-recursive) for ``*.md`` files and
builds a fresh DroidRecord per file on every call, so calling it again
is how in-memory edits are thrown away. Saving rewrites only the
model fields of a file's header and then resets the record's baseline.
"""

import logging
from pathlib import Path
from typing import Iterator

from ..logging import JSONLLogger
from .base import PERSONAL, DroidRecord
from .parser import (
    DroidParseError,
    parse_droid_content,
    parse_droid_file,
    update_droid_content,
)

logger = logging.getLogger(__name__)

DROID_SUFFIX = ".md"


class DroidRepository:
    """Finds droid files in a directory and writes edits back to them.

    Example:
        repo = DroidRepository(Path.home() / ".factory" / "droids")
        droids = repo.discover()
        droids[0].model = "gpt-5.1"
        repo.save(droids[0])
    """

    def __init__(
        self,
        droids_dir: Path,
        location: str = PERSONAL,
        event_log: JSONLLogger | None = None,
    ) -> None:
        self.droids_dir = droids_dir
        self.location = location
        self.event_log = event_log

    def _scan_droid_files(self) -> Iterator[Path]:
        """Yield visible ``.md`` files directly under droids_dir."""
        if not self.droids_dir.is_dir():
            return

        try:
            items = list(self.droids_dir.iterdir())
        except OSError as e:
            logger.warning("Cannot list %s: %s", self.droids_dir, e)
            return

        for item in items:
            if item.name.startswith("."):
                continue
            if item.suffix == DROID_SUFFIX and item.is_file():
                yield item

    def load_droid(self, path: Path) -> DroidRecord:
        """Build a clean record from one file.

        Raises:
            DroidParseError: If the file cannot be read or parsed.
        """
        model, reasoning = parse_droid_file(path)
        return DroidRecord.from_disk(
            name=path.stem,
            path=path.resolve(),
            model=model,
            reasoning_effort=reasoning,
            location=self.location,
        )

    def discover(self) -> list[DroidRecord]:
        """Load every droid in the directory, sorted by name.

        Files that fail to parse are skipped.
        """
        droids: list[DroidRecord] = []
        for path in self._scan_droid_files():
            try:
                droids.append(self.load_droid(path))
            except DroidParseError as e:
                logger.warning("Skipping droid %s: %s", path.name, e)

        return sorted(droids, key=lambda d: d.name)

    def save(self, droid: DroidRecord) -> None:
        """Write a record's model fields back to its file.

        The file is read fresh from disk. When it already holds the
        record's values nothing is written.

        Raises:
            OSError: If the file cannot be read or written.
            DroidParseError: If the file's header is no longer parseable.
        """
        try:
            with open(droid.path, "r", encoding="utf-8", newline="") as f:
                content = f.read()
        except UnicodeDecodeError as e:
            raise DroidParseError(f"Cannot read droid file {droid.path}: {e}") from e

        on_disk = parse_droid_content(content)
        if on_disk != (droid.model, droid.reasoning_effort):
            updated = update_droid_content(content, droid.model, droid.reasoning_effort)
            with open(droid.path, "w", encoding="utf-8", newline="") as f:
                f.write(updated)
            logger.debug("Saved %s (model=%s)", droid.name, droid.model)

        droid.mark_saved()
        if self.event_log is not None:
            self.event_log.log_save(droid.name, droid.model, droid.reasoning_effort)
