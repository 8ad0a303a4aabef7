"""Droid records and their dirty-state tracking."""

from dataclasses import dataclass
from pathlib import Path

PERSONAL = "personal"


@dataclass
class DroidRecord:
    """One droid file, with current and last-persisted field values.

    ``original_model`` and ``original_reasoning_effort`` mirror what is on
    disk; the record is modified while either current value differs.
    """

    name: str
    path: Path
    model: str
    original_model: str
    reasoning_effort: str | None = None
    original_reasoning_effort: str | None = None
    location: str = PERSONAL

    @classmethod
    def from_disk(
        cls,
        name: str,
        path: Path,
        model: str,
        reasoning_effort: str | None = None,
        location: str = PERSONAL,
    ) -> "DroidRecord":
        """Create a clean record whose baseline equals the given values."""
        return cls(
            name=name,
            path=path,
            model=model,
            original_model=model,
            reasoning_effort=reasoning_effort,
            original_reasoning_effort=reasoning_effort,
            location=location,
        )

    @property
    def is_modified(self) -> bool:
        return (
            self.model != self.original_model
            or self.reasoning_effort != self.original_reasoning_effort
        )

    def mark_saved(self) -> None:
        """Reset the baseline to the current values."""
        self.original_model = self.model
        self.original_reasoning_effort = self.reasoning_effort
