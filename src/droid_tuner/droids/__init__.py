"""Droid files: discovery, parsing and persistence."""

from .base import PERSONAL, DroidRecord
from .parser import (
    DroidParseError,
    parse_droid_content,
    parse_droid_file,
    update_droid_content,
)
from .repository import DroidRepository

__all__ = [
    "DroidParseError",
    "DroidRecord",
    "DroidRepository",
    "PERSONAL",
    "parse_droid_content",
    "parse_droid_file",
    "update_droid_content",
]
