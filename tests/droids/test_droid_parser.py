"""Tests for droid frontmatter reading and writing."""

from pathlib import Path

import pytest

from droid_tuner.droids import (
    DroidParseError,
    parse_droid_content,
    parse_droid_file,
    update_droid_content,
)

DROID_MD = """---
name: reviewer
description: Reviews pull requests
model: claude-opus-4-5-20251101
reasoningEffort: high
tools:
  - Read
  - Grep
---

You are a careful code reviewer.

  Keep indentation   and trailing spaces.
"""


class TestParseDroidContent:
    """Tests for parse_droid_content."""

    def test_model_and_reasoning(self):
        model, reasoning = parse_droid_content(DROID_MD)

        assert model == "claude-opus-4-5-20251101"
        assert reasoning == "high"

    def test_model_defaults_to_inherit(self):
        """Missing model means inherit."""
        model, reasoning = parse_droid_content("---\nname: x\n---\nbody\n")

        assert model == "inherit"
        assert reasoning is None

    def test_empty_model_is_inherit(self):
        model, _ = parse_droid_content("---\nmodel: ''\n---\n")

        assert model == "inherit"

    def test_no_frontmatter(self):
        """Plain Markdown has the default model."""
        assert parse_droid_content("# Just a body\n") == ("inherit", None)

    def test_numeric_values_coerced(self):
        """Scalar values are coerced to strings."""
        model, reasoning = parse_droid_content("---\nmodel: 4.6\nreasoningEffort: 3\n---\n")

        assert model == "4.6"
        assert reasoning == "3"

    def test_invalid_yaml(self):
        """Broken YAML raises DroidParseError."""
        with pytest.raises(DroidParseError, match="Failed to parse frontmatter"):
            parse_droid_content("---\nmodel: [unclosed\n---\nbody\n")

    def test_mapping_model_rejected(self):
        """A mapping where a string is expected raises DroidParseError."""
        with pytest.raises(DroidParseError, match="Expected a string"):
            parse_droid_content("---\nmodel:\n  id: x\n---\n")


class TestParseDroidFile:
    """Tests for parse_droid_file."""

    def test_reads_file(self, tmp_path: Path):
        path = tmp_path / "reviewer.md"
        path.write_text(DROID_MD)

        assert parse_droid_file(path) == ("claude-opus-4-5-20251101", "high")

    def test_not_a_file(self, tmp_path: Path):
        with pytest.raises(DroidParseError, match="Not a file"):
            parse_droid_file(tmp_path)

    def test_binary_file(self, tmp_path: Path):
        """Undecodable bytes raise DroidParseError."""
        path = tmp_path / "broken.md"
        path.write_bytes(b"\xff\xfe\x00garbage")

        with pytest.raises(DroidParseError, match="Cannot read"):
            parse_droid_file(path)


class TestUpdateDroidContent:
    """Tests for update_droid_content."""

    def test_replaces_model(self):
        updated = update_droid_content(DROID_MD, "gpt-5.1", "high")

        assert parse_droid_content(updated) == ("gpt-5.1", "high")
        assert "model: gpt-5.1\n" in updated

    def test_body_preserved_verbatim(self):
        """Everything after the closing delimiter is unchanged."""
        body = DROID_MD.split("---\n", 2)[2]
        updated = update_droid_content(DROID_MD, "gpt-5.1", None)

        assert updated.endswith(body)
        assert updated.split("---\n", 2)[2] == body

    def test_other_keys_preserved_in_order(self):
        updated = update_droid_content(DROID_MD, "gpt-5.1", "low")
        header = updated.split("---\n", 2)[1]
        keys = [
            line.split(":")[0]
            for line in header.splitlines()
            if line and not line.startswith((" ", "-"))
        ]

        assert keys == ["name", "description", "model", "reasoningEffort", "tools"]
        assert "- Read" in header

    def test_removes_reasoning_when_unset(self):
        """reasoningEffort is dropped, not written as null."""
        updated = update_droid_content(DROID_MD, "gpt-5.1", None)

        assert "reasoningEffort" not in updated
        assert "null" not in updated

    def test_adds_reasoning(self):
        content = "---\nname: x\nmodel: inherit\n---\nbody\n"
        updated = update_droid_content(content, "gpt-5.1-codex", "medium")

        assert parse_droid_content(updated) == ("gpt-5.1-codex", "medium")
        assert updated.endswith("---\nbody\n")

    def test_adds_header_when_missing(self):
        """Files without frontmatter get one, body untouched."""
        updated = update_droid_content("# Body only\n", "gpt-5.1", None)

        assert updated == "---\nmodel: gpt-5.1\n---\n# Body only\n"

    def test_crlf_line_endings(self):
        """CRLF files keep CRLF in the rewritten header."""
        content = "---\r\nname: x\r\nmodel: inherit\r\n---\r\nbody\r\n"
        updated = update_droid_content(content, "gpt-5.1", None)

        assert updated == "---\r\nname: x\r\nmodel: gpt-5.1\r\n---\r\nbody\r\n"

    def test_non_mapping_header(self):
        with pytest.raises(DroidParseError, match="not a mapping"):
            update_droid_content("---\n- a\n- b\n---\nbody\n", "gpt-5.1", None)
