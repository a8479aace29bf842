"""
CSV Tokenizer for Telemetry CSV Ingestion

This module turns raw uploaded text into rows of string cells. It is a small
hand-rolled state machine rather than the csv module because telemetry exports
mix quoted and unquoted cells, use \\r, \\n or \\r\\n line endings, and must never
fail on a stray quote.
"""

from typing import List

Row = List[str]


def parse_csv(text: str) -> List[Row]:
    """
    Parse CSV text into a list of rows.

    Fields are comma-separated. A field may be wrapped in double quotes, inside
    which commas and line breaks are literal and a doubled quote ("") is an
    escaped quote. Every field is trimmed after unescaping.

    Blank lines produce no row. A line that held anything at all (even only
    whitespace or an empty quoted field) produces a row, possibly [""].

    An unterminated quote swallows the rest of the text as the final field.

    Args:
        text: Raw file content.

    Returns:
        List of rows; rows may have different lengths.
    """
    rows = []
    current_row = []
    field = []
    in_quotes = False
    # Set once the current line has consumed any character
    line_started = False

    i = 0
    length = len(text)
    while i < length:
        char = text[i]

        if char == '"':
            line_started = True
            if in_quotes and i + 1 < length and text[i + 1] == '"':
                field.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            line_started = True
            current_row.append("".join(field).strip())
            field = []
        elif char in "\r\n" and not in_quotes:
            if line_started:
                current_row.append("".join(field).strip())
                rows.append(current_row)
            current_row = []
            field = []
            line_started = False
            if char == "\r" and i + 1 < length and text[i + 1] == "\n":
                i += 1
        else:
            line_started = True
            field.append(char)
        i += 1

    if line_started:
        current_row.append("".join(field).strip())
        rows.append(current_row)

    return rows


def header_row(rows: List[Row]) -> Row:
    """Return the first row of a tokenized file, or an empty row."""
    return rows[0] if rows else []
