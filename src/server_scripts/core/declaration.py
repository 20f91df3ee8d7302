"""Declaration block parsing.

A declaration block is a comment-prefixed YAML-like header near the top of a
script, delimited by ``# ---`` lines:

    #!/bin/bash
    # ---
    # deployment: scheduled
    # service: none
    # status: active
    # type: backup
    # requires_root: true
    # ---

Only the first MAX_SCAN_LINES lines are examined. A block that opens but never
closes inside that window is accepted as-is.
"""

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

MAX_SCAN_LINES = 30
SENTINEL = "# ---"


class FieldState(Enum):
    """Outcome of looking up a key in a declaration."""

    ABSENT = "absent"
    EMPTY = "empty"
    VALUE = "value"


@dataclass(frozen=True)
class FieldLookup:
    state: FieldState
    value: str | None = None


@dataclass(frozen=True)
class Declaration:
    """Parsed key/value pairs from a declaration block."""

    fields: dict[str, str]
    closed: bool

    def lookup(self, key: str) -> FieldLookup:
        if key not in self.fields:
            return FieldLookup(FieldState.ABSENT)
        value = self.fields[key]
        if value == "":
            return FieldLookup(FieldState.EMPTY, "")
        return FieldLookup(FieldState.VALUE, value)

    def value_or(self, key: str, default: str) -> str:
        """Return the declared value, or default when absent or empty."""
        found = self.lookup(key)
        if found.state is FieldState.VALUE and found.value is not None:
            return found.value
        return default


def _strip_comment_prefix(line: str) -> str:
    if line.startswith("# "):
        return line[2:]
    if line.startswith("#"):
        return line[1:]
    return line


def parse_declaration(content: str) -> Declaration | None:
    """Extract the declaration block from file content.

    Returns:
        Declaration with parsed fields, or None if no block opens within the
        first MAX_SCAN_LINES lines.
    """
    fields: dict[str, str] = {}
    in_block = False
    closed = False

    for line_number, raw_line in enumerate(content.splitlines()[:MAX_SCAN_LINES], start=1):
        line = raw_line.rstrip("\r")

        if line == SENTINEL:
            if in_block:
                closed = True
                break
            in_block = True
            continue

        if not in_block:
            continue

        stripped = _strip_comment_prefix(line).strip()
        if not stripped:
            continue

        key, sep, value = stripped.partition(":")
        if not sep:
            logger.debug("Ignoring declaration line %d without a key: %r", line_number, stripped)
            continue

        # Repeated keys: last value wins
        fields[key.strip()] = value.strip()

    if not in_block:
        return None

    if not closed:
        logger.debug("Declaration block not closed within %d lines", MAX_SCAN_LINES)

    return Declaration(fields=fields, closed=closed)
