"""
Quote-aware CSV parsing for the local preview.

This is deliberately simpler than RFC 4180: the text is split into lines
before fields are split, so quoted newlines are not supported, and blank
lines are dropped.
"""
from typing import List, Optional

from dataporter.v1_0.entities.preview_DTO import PreviewCell, PreviewRow, PreviewTable

QUOTE = '"'
SEPARATOR = ","


def split_lines(text: Optional[str]) -> List[str]:
    """Normalize line endings and return the non-blank lines."""
    if not text:
        return []
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    return [line for line in normalized.split("\n") if line.strip()]


def clean_field(value: str) -> str:
    """Drop surrounding whitespace and at most one outer quote on each side."""
    value = value.strip()
    if value.startswith(QUOTE):
        value = value[1:]
    if value.endswith(QUOTE):
        value = value[:-1]
    return value.strip()


def split_line(line: str) -> List[str]:
    """
    Split one CSV line into cleaned fields.

    A quote toggles the inside-quotes state and stays in the buffer (it is
    removed later by `clean_field`). A doubled quote inside quotes yields one
    literal quote without toggling. Commas inside quotes are data.
    """
    fields: List[str] = []
    buf: List[str] = []
    in_quotes = False
    i = 0
    n = len(line)

    while i < n:
        ch = line[i]
        if ch == QUOTE:
            if in_quotes and i + 1 < n and line[i + 1] == QUOTE:
                buf.append(QUOTE)
                i += 2
                continue
            in_quotes = not in_quotes
            buf.append(ch)
        elif ch == SEPARATOR and not in_quotes:
            fields.append("".join(buf))
            buf = []
        else:
            buf.append(ch)
        i += 1

    fields.append("".join(buf))
    return [clean_field(f) for f in fields]


def pair_with_headers(headers: List[str], values: List[str]) -> List[PreviewCell]:
    """Pair values with headers by position; missing trailing values become ''."""
    return [
        PreviewCell(key=h, value=values[pos] if pos < len(values) else "")
        for pos, h in enumerate(headers)
    ]


def parse(text: Optional[str], max_rows: Optional[int] = None) -> PreviewTable:
    """
    Parse CSV text into headers and keyed rows.

    The first non-blank line is the header row. Each data row keeps its
    1-based position among data lines as `row_key`. With `max_rows`, parsing
    stops once that many data rows were produced. Never raises for malformed
    input; empty text gives an empty table.
    """
    lines = split_lines(text)
    if not lines:
        return PreviewTable(headers=[], rows=[])

    headers = split_line(lines[0])
    rows: List[PreviewRow] = []
    for row_key, line in enumerate(lines[1:], start=1):
        if max_rows is not None and len(rows) >= max_rows:
            break
        rows.append(PreviewRow(row_key=row_key, cells=pair_with_headers(headers, split_line(line))))

    return PreviewTable(headers=headers, rows=rows)
