"""Tests for the catalogue text parser."""

from __future__ import annotations

import random

import pytest

from cinemai.catalogue import (
    choose_featured,
    load_catalogue,
    parse_catalogue,
    parse_release_year,
    split_rows,
)
from cinemai.models import CatalogueRecord, ContentKind

HEADER = (
    "show_id,type,title,director,cast,country,date_added,release_year,"
    "rating,duration,listed_in,description\n"
)


def test_quoted_field_keeps_commas_and_line_breaks() -> None:
    rows = split_rows('s1,"a,b\nc",tail\n')

    assert rows == [["s1", "a,b\nc", "tail"]]


def test_doubled_quotes_collapse_inside_quoted_field() -> None:
    rows = split_rows('s1,"She said ""hi"", then left"\n')

    assert rows == [["s1", 'She said "hi", then left']]


@pytest.mark.parametrize("terminator", ["\n", "\r", "\r\n"])
def test_all_line_terminators_end_a_row(terminator: str) -> None:
    text = terminator.join(["s1,Movie,One", "s2,TV Show,Two"]) + terminator

    assert split_rows(text) == [["s1", "Movie", "One"], ["s2", "TV Show", "Two"]]


def test_blank_lines_do_not_produce_rows() -> None:
    assert split_rows("s1,Movie\n\n\r\n\ns2,Movie\n\n") == [["s1", "Movie"], ["s2", "Movie"]]


def test_pending_row_is_flushed_at_end_of_input() -> None:
    assert split_rows("s1,Movie,Last") == [["s1", "Movie", "Last"]]


def test_header_row_is_discarded() -> None:
    records = parse_catalogue(HEADER + "s1,Movie,Arrival\n")

    assert [record.title for record in records] == ["Arrival"]


def test_header_detection_only_checks_first_field() -> None:
    records = parse_catalogue("id,Movie,Arrival\n")

    assert len(records) == 1
    assert records[0].show_id == "id"


def test_rows_with_a_single_field_are_dropped() -> None:
    records = parse_catalogue(HEADER + "orphan\ns2,Movie,Kept\nlonely\n")

    assert [record.show_id for record in records] == ["s2"]


def test_missing_columns_default_to_empty() -> None:
    (record,) = parse_catalogue("s9,Movie")

    assert record == CatalogueRecord(show_id="s9", kind=ContentKind.MOVIE)
    assert record.title == ""
    assert record.release_year == 0


def test_kind_mapping_defaults_to_movie() -> None:
    records = parse_catalogue("s1,TV Show,A\ns2,tv show,B\ns3,,C\n")

    assert [record.kind for record in records] == [
        ContentKind.SERIES,
        ContentKind.MOVIE,
        ContentKind.MOVIE,
    ]


def test_full_row_maps_every_column() -> None:
    text = HEADER + (
        's2,TV Show,Blood & Water,,"Ama Qamata, Khosi Ngema",South Africa,'
        '"September 24, 2021",2021,TV-MA,2 Seasons,"International TV Shows, TV Dramas",'
        '"A teen sets out to prove, at last, the truth."\n'
    )

    (record,) = parse_catalogue(text)

    assert record.kind is ContentKind.SERIES
    assert record.title == "Blood & Water"
    assert record.director == ""
    assert record.cast == "Ama Qamata, Khosi Ngema"
    assert record.date_added == "September 24, 2021"
    assert record.release_year == 2021
    assert record.genres == ["International TV Shows", "TV Dramas"]
    assert record.description == "A teen sets out to prove, at last, the truth."


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("2019", 2019), (" 2001 ", 2001), ("1999abc", 1999), ("n/a", 0), ("", 0)],
)
def test_parse_release_year_degrades_to_zero(raw: str, expected: int) -> None:
    assert parse_release_year(raw) == expected


def test_parser_tolerates_unterminated_quote() -> None:
    records = parse_catalogue('s1,Movie,"Never closed, still here\ns2,Movie,Next')

    assert len(records) == 1
    assert records[0].title == "Never closed, still here\ns2,Movie,Next"


def test_output_never_exceeds_input_rows() -> None:
    text = HEADER + "s1,Movie,A\nbroken\ns3,Movie,C\n"

    assert len(parse_catalogue(text)) <= 3


def test_load_catalogue_reads_bundled_sample() -> None:
    records = load_catalogue()

    assert records
    assert all(record.title for record in records)


def test_load_catalogue_missing_file_yields_nothing(tmp_path) -> None:
    assert load_catalogue(tmp_path / "missing.csv") == []


def test_load_catalogue_reads_file(tmp_path) -> None:
    path = tmp_path / "catalogue.csv"
    path.write_text(HEADER + "s1,Movie,Arrival,,,,,2016\n", encoding="utf-8")

    (record,) = load_catalogue(path)

    assert record.release_year == 2016


def test_choose_featured_prefers_recent_movies() -> None:
    records = [
        CatalogueRecord(show_id="s1", title="Old", release_year=2001),
        CatalogueRecord(show_id="s2", kind=ContentKind.SERIES, title="Show", release_year=2021),
        CatalogueRecord(show_id="s3", title="New", release_year=2020),
    ]

    featured = choose_featured(records, random.Random(7))

    assert featured is not None
    assert featured.title == "New"


def test_choose_featured_without_candidates() -> None:
    assert choose_featured([CatalogueRecord(title="Old", release_year=2001)]) is None
