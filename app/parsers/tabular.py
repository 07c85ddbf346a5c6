"""
app/parsers/tabular.py

Splits delimited text (CSV and close relatives) into a header and data rows.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass

CANDIDATE_DELIMITERS: tuple[str, ...] = (",", ";", "\t", "|")
_BOM = "\ufeff"


class TabularFormatError(ValueError):
    """
    Raised when the payload cannot be read as delimited text.
    """


@dataclass(frozen=True)
class TabularRow:
    """
    One data row keyed by header. ``row_index`` counts data rows from 0,
    ``line_number`` is the 1-based physical line the record starts on.
    """

    row_index: int
    line_number: int
    fields: dict[str, str]


@dataclass(frozen=True)
class TabularPayload:
    headers: tuple[str, ...]
    rows: list[TabularRow]
    delimiter: str = ","


def detect_delimiter(header_line: str) -> str:
    """
    Pick the most frequent candidate delimiter in the header line.
    """

    best = ","
    best_count = 0
    for candidate in CANDIDATE_DELIMITERS:
        count = header_line.count(candidate)
        if count > best_count:
            best, best_count = candidate, count
    return best


def _is_blank_line(record: list[str]) -> bool:
    return not record or (len(record) == 1 and not record[0].strip())


def _first_content_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line
    return ""


def parse_tabular(text: str) -> TabularPayload:
    """
    Parse delimited text with a mandatory header row.

    Blank lines are skipped. A record made only of empty cells (``,,,``) is
    still returned as a row so callers can reject it explicitly.
    """

    if text.startswith(_BOM):
        text = text[len(_BOM) :]

    header_line = _first_content_line(text)
    if not header_line:
        raise TabularFormatError("CSV content is empty; a header row is required.")

    delimiter = detect_delimiter(header_line)
    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter)

    headers: tuple[str, ...] | None = None
    rows: list[TabularRow] = []
    line_number = 1
    try:
        for record in reader:
            record_line = line_number
            line_number = reader.line_num + 1
            if _is_blank_line(record):
                continue
            if headers is None:
                headers = tuple(cell.strip() for cell in record)
                continue
            padded = record + [""] * (len(headers) - len(record))
            fields = {
                header: padded[position]
                for position, header in enumerate(headers)
                if header
            }
            rows.append(TabularRow(row_index=len(rows), line_number=record_line, fields=fields))
    except csv.Error as exc:
        raise TabularFormatError(f"Invalid CSV format near line {line_number}: {exc}") from exc

    if headers is None or not any(headers):
        raise TabularFormatError("CSV header row is missing.")

    return TabularPayload(headers=headers, rows=rows, delimiter=delimiter)
