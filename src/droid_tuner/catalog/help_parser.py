"""Parser for the companion CLI's ``exec --help`` output.

The help text is line oriented. The sections we care about look like::

    Available Models:
      claude-opus-4-5-20251101       Claude Opus 4.5 (default)
      gpt-5.1-codex                  GPT-5.1-Codex

    Model details:
      - Claude Opus 4.5: supports reasoning: Yes; supported: [off, low, medium, high]; default: off
      - GPT-5.1-Codex: supports reasoning: Yes; supported: [low, medium, high]; default: medium

A section ends at a blank line or at the next non-indented line.
"""

import re
from dataclasses import dataclass, field

from .models import ReasoningInfo

MODELS_HEADER = "available models:"
DETAILS_HEADER = "model details:"

_MODEL_LINE = re.compile(r"^\s+([A-Za-z0-9][\w.:/-]*)(?:\s{2,}(.+?))?\s*$")
_DETAIL_LINE = re.compile(r"^\s*-\s*(.+?):\s*supports reasoning:\s*(\w+)(.*)$", re.IGNORECASE)
_SUPPORTED = re.compile(r"supported:\s*\[([^\]]*)\]", re.IGNORECASE)
_DEFAULT = re.compile(r"default:\s*([\w-]+)", re.IGNORECASE)
_DEFAULT_MARKER = re.compile(r"\s*\(default\)\s*$", re.IGNORECASE)


@dataclass
class HelpModels:
    """Models recovered from help text."""

    models: list[str] = field(default_factory=list)
    reasoning: dict[str, ReasoningInfo] = field(default_factory=dict)


def _section(lines: list[str], header: str) -> list[str]:
    """Return the indented lines following a section header."""
    body: list[str] = []
    inside = False
    for line in lines:
        if not inside:
            if line.strip().lower() == header:
                inside = True
            continue
        if not line.strip() or not line[0].isspace():
            break
        body.append(line)
    return body


def _split_levels(raw: str) -> tuple[str, ...]:
    return tuple(lvl.strip().strip("'\"") for lvl in raw.split(",") if lvl.strip())


def parse_help_text(text: str) -> HelpModels:
    """Extract model ids and reasoning support from help output.

    Args:
        text: Raw stdout of the companion CLI.

    Returns:
        HelpModels; both collections are empty when no section is found.
    """
    lines = text.splitlines()
    result = HelpModels()

    display_to_id: dict[str, str] = {}
    for line in _section(lines, MODELS_HEADER):
        match = _MODEL_LINE.match(line)
        if not match:
            continue
        model_id, display = match.group(1), match.group(2)
        if model_id in result.models:
            continue
        result.models.append(model_id)
        if display:
            display_to_id[_DEFAULT_MARKER.sub("", display).strip().lower()] = model_id

    for line in _section(lines, DETAILS_HEADER):
        match = _DETAIL_LINE.match(line)
        if not match:
            continue
        label, supports, rest = match.groups()
        label = label.strip()
        model_id = display_to_id.get(label.lower(), label if label in result.models else None)
        if model_id is None or supports.lower() not in ("yes", "true"):
            continue

        supported_match = _SUPPORTED.search(rest)
        levels = _split_levels(supported_match.group(1)) if supported_match else ()
        if not levels:
            continue

        default_match = _DEFAULT.search(rest[supported_match.end():] if supported_match else rest)
        default = default_match.group(1) if default_match else None
        result.reasoning[model_id] = ReasoningInfo(supported=levels, default=default)

    return result
