"""Reader and writer for droid Markdown files with YAML frontmatter.

Reading goes through python-frontmatter. Writing only touches the
header block: the ``model`` and ``reasoningEffort`` keys are replaced,
every other key keeps its value and position, and the body after the
closing delimiter is kept byte for byte.
"""

import re
from pathlib import Path
from typing import Any

import frontmatter
from frontmatter.default_handlers import YAMLHandler

from ..catalog.models import INHERIT

MODEL_KEY = "model"
REASONING_KEY = "reasoningEffort"

_HEADER = re.compile(r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE)


class DroidParseError(Exception):
    """Raised when a droid file cannot be read or parsed."""

    pass


def _scalar(value: Any) -> str | None:
    """Coerce a frontmatter value to a non-empty string or None."""
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        raise DroidParseError(f"Expected a string, got {type(value).__name__}")
    text = str(value).strip()
    return text or None


def parse_droid_content(content: str) -> tuple[str, str | None]:
    """Extract model and reasoning effort from droid file content.

    Args:
        content: The raw text of a droid file.

    Returns:
        Tuple of (model, reasoning_effort). Model defaults to ``inherit``.

    Raises:
        DroidParseError: If the frontmatter is not valid YAML or the
            fields have the wrong shape.
    """
    try:
        post = frontmatter.loads(content)
    except Exception as e:
        raise DroidParseError(f"Failed to parse frontmatter: {e}") from e

    meta = post.metadata
    model = _scalar(meta.get(MODEL_KEY)) or INHERIT
    reasoning = _scalar(meta.get(REASONING_KEY))
    return model, reasoning


def read_droid_file(path: Path) -> str:
    """Read a droid file without newline translation."""
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise DroidParseError(f"Cannot read droid file {path}: {e}") from e


def parse_droid_file(path: Path) -> tuple[str, str | None]:
    """Parse a droid file from disk.

    Raises:
        DroidParseError: If the file cannot be read or parsed.
    """
    if not path.is_file():
        raise DroidParseError(f"Not a file: {path}")

    return parse_droid_content(read_droid_file(path))


def update_droid_content(content: str, model: str, reasoning_effort: str | None) -> str:
    """Return content with the model fields of its header replaced.

    ``reasoningEffort`` is dropped from the header when ``reasoning_effort``
    is None. Content without a header gets one prepended.

    Raises:
        DroidParseError: If the existing header is not a YAML mapping.
    """
    handler = YAMLHandler()
    match = _HEADER.match(content)

    if match:
        try:
            metadata = handler.load(match.group(1)) or {}
        except Exception as e:
            raise DroidParseError(f"Failed to parse frontmatter: {e}") from e
        if not isinstance(metadata, dict):
            raise DroidParseError("Frontmatter is not a mapping")
        body = content[match.end():]
        newline = "\r\n" if "\r\n" in match.group(0) else "\n"
    else:
        metadata = {}
        body = content
        newline = "\n"

    metadata[MODEL_KEY] = model
    if reasoning_effort is None:
        metadata.pop(REASONING_KEY, None)
    else:
        metadata[REASONING_KEY] = reasoning_effort

    header = handler.export(metadata, sort_keys=False)
    header = header.replace("\n", newline)
    return f"---{newline}{header}{newline}---{newline}{body}"
