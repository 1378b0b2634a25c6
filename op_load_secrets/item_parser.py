"""
Parser for `op item get --reveal` output.

The human-readable listing looks like:

    ID:          some_vault_item_id
    Title:       some_item
    Category:    SECURE_NOTE
    Fields:
      notesPlain:    a skippable note
      SECRET_1:      some secret

Only the indented lines under the `Fields:` header are fields. The first
non-indented line after the header ends the section.
"""

import re
from enum import Enum
from typing import Iterable, List, Optional

from .interface import FieldEntry

FIELDS_HEADER = "Fields:"
FIELD_INDENT = "  "

_FIELD_RE = re.compile(r"^\s+([^:]+):\s*(.*)$")


class ParserState(Enum):
    BEFORE_FIELDS = "before_fields"
    IN_FIELDS = "in_fields"
    DONE = "done"


def parse_field_line(line: str) -> Optional[FieldEntry]:
    """Parse `  name: value`; returns None if the line is not a field."""
    match = _FIELD_RE.match(line)
    if not match:
        return None
    name = match.group(1).strip()
    if not name:
        return None
    return FieldEntry(name=name, value=match.group(2).strip())


def step(state: ParserState, line: str) -> tuple[ParserState, Optional[FieldEntry]]:
    """
    Advance the parser by one line.

    Args:
        state: Current state
        line: Raw line, without the trailing newline

    Returns:
        Tuple of (next_state, field) where field is set for field lines only
    """
    if state is ParserState.DONE:
        return state, None

    if line.strip() == FIELDS_HEADER:
        return ParserState.IN_FIELDS, None

    if state is ParserState.BEFORE_FIELDS:
        return state, None

    if line.strip() == "":
        return state, None
    if line.startswith(FIELD_INDENT):
        return state, parse_field_line(line)
    return ParserState.DONE, None


def iter_fields(lines: Iterable[str]) -> Iterable[FieldEntry]:
    """Yield fields in encounter order, stopping at the end of the section."""
    state = ParserState.BEFORE_FIELDS
    for line in lines:
        state, entry = step(state, line)
        if state is ParserState.DONE:
            return
        if entry is not None:
            yield entry


def parse_item_fields(text: str) -> List[FieldEntry]:
    """Parse every field from an item listing. No `Fields:` header means no fields."""
    if not text:
        return []
    return list(iter_fields(text.split("\n")))
