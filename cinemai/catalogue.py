"""Parsing of the delimited catalogue text into typed records."""

from __future__ import annotations

import logging
import random
import re
from importlib import resources
from pathlib import Path
from typing import Sequence

from .models import CatalogueRecord, ContentKind

logger = logging.getLogger(__name__)

HEADER_SENTINEL = "show_id"
MIN_ROW_FIELDS = 2
FEATURED_MIN_YEAR = 2018

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def split_rows(text: str) -> list[list[str]]:
    """Split comma delimited text into rows of raw fields.

    Quoted fields may contain commas and line breaks; a doubled quote inside a
    quoted field yields one literal quote. ``\\n``, ``\\r`` and ``\\r\\n`` all end
    a row, and blank lines never produce a row.
    """

    rows: list[list[str]] = []
    row: list[str] = []
    field: list[str] = []
    in_quotes = False
    index = 0
    length = len(text)

    while index < length:
        char = text[index]
        if in_quotes:
            if char == '"':
                if index + 1 < length and text[index + 1] == '"':
                    field.append('"')
                    index += 1
                else:
                    in_quotes = False
            else:
                field.append(char)
        elif char == '"':
            in_quotes = True
        elif char == ",":
            row.append("".join(field))
            field = []
        elif char in "\r\n":
            if field or row:
                row.append("".join(field))
                rows.append(row)
                row = []
                field = []
            if char == "\r" and index + 1 < length and text[index + 1] == "\n":
                index += 1
        else:
            field.append(char)
        index += 1

    if field or row:
        row.append("".join(field))
        rows.append(row)
    return rows


def parse_release_year(value: str) -> int:
    """Return the leading integer of ``value`` or ``0`` when there is none."""

    match = _LEADING_INT_RE.match(value)
    if not match:
        return 0
    return int(match.group(1))


def record_from_row(row: Sequence[str]) -> CatalogueRecord | None:
    """Map a row positionally onto a record, or ``None`` for a malformed row."""

    if len(row) < MIN_ROW_FIELDS:
        return None

    def column(position: int) -> str:
        return row[position] if position < len(row) else ""

    return CatalogueRecord(
        show_id=column(0),
        kind=ContentKind.from_label(column(1)),
        title=column(2),
        director=column(3),
        cast=column(4),
        country=column(5),
        date_added=column(6),
        release_year=parse_release_year(column(7)),
        rating=column(8),
        duration=column(9),
        listed_in=column(10),
        description=column(11),
    )


def parse_catalogue(text: str) -> list[CatalogueRecord]:
    """Parse raw catalogue text into records, dropping malformed rows."""

    rows = split_rows(text)
    if rows and rows[0][0] == HEADER_SENTINEL:
        rows = rows[1:]

    records: list[CatalogueRecord] = []
    dropped = 0
    for row in rows:
        record = record_from_row(row)
        if record is None:
            dropped += 1
            continue
        records.append(record)

    if dropped:
        logger.debug("Dropped %d catalogue rows with fewer than %d fields", dropped, MIN_ROW_FIELDS)
    return records


def load_catalogue(path: Path | str | None = None) -> list[CatalogueRecord]:
    """Read and parse the catalogue at ``path`` or the bundled sample."""

    if path is None:
        text = (
            resources.files("cinemai")
            .joinpath("data")
            .joinpath("catalogue.csv")
            .read_text(encoding="utf-8")
        )
    else:
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            logger.warning("Catalogue file %s could not be read: %s", path, exc)
            return []

    records = parse_catalogue(text)
    logger.info("Loaded %d catalogue records", len(records))
    return records


def choose_featured(
    records: Sequence[CatalogueRecord], rng: random.Random | None = None
) -> CatalogueRecord | None:
    """Pick a recent movie to headline the catalogue."""

    candidates = [
        record
        for record in records
        if record.kind is ContentKind.MOVIE and record.release_year > FEATURED_MIN_YEAR
    ]
    if not candidates:
        return None
    return (rng or random).choice(candidates)
