"""Comma-separated line splitting.

Quoted fields keep their surrounding quotes; doubled quotes inside a field
are collapsed to one.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def _field_end(rest: str, previous_end: int) -> tuple[int, bool]:
    """Find where the field at the start of ``rest`` ends.

    Returns the end index and whether this field is the last one. A quoted
    field without a closing quote keeps ``previous_end``.
    """
    if rest.startswith('"'):
        index = 1
        while index < len(rest):
            if rest[index] == '"':
                if index + 1 == len(rest):
                    return index + 1, True
                following = rest[index + 1]
                if following == '"':
                    index += 1
                elif following == ",":
                    return index + 1, False
                else:
                    logger.error("CSV syntax error at offset %d", index)
            index += 1
        return previous_end, False
    comma = rest.find(",")
    if comma < 0:
        return len(rest), True
    return comma, False


def _unescape(field: str) -> str:
    return field.replace('""', '"')


def csv_parse(text: str) -> list[str]:
    """Split one CSV line into fields.

    Raises ValueError when an unterminated quoted field leaves nothing to
    resume from.
    """
    fields = []
    end = 0
    rest = text
    while rest:
        end, last = _field_end(rest, end)
        fields.append(_unescape(rest[:end]))
        if last:
            return fields
        if end + 1 > len(rest):
            raise ValueError("malformed CSV: unterminated quoted field")
        rest = rest[end + 1:]
    fields.append("")
    return fields


def csv_parse_rec(text: str) -> list[str]:
    """Split one CSV line into fields, restarting the scan at each field."""
    fields = []
    rest = text
    while True:
        if not rest:
            fields.append("")
            return fields
        end, last = _field_end(rest, 0)
        fields.append(_unescape(rest[:end]))
        if last:
            return fields
        rest = rest[end + 1:]