from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from cinemai.media_links import resolve_poster_fallback
from cinemai.models import CatalogueRecord, ContentKind, DiscoveryResult, Recommendation, SavedItem


def test_recommendation_accepts_ai_field_names() -> None:
    recommendation = Recommendation.model_validate(
        {
            "title": "  Heat ",
            "type": "Movie",
            "similarityScore": 88.5,
            "reason": None,
            "year": 1995,
            "genre": ["Crime", "Thriller"],
            "trailerUrl": "https://youtu.be/0xbBLJ1WGwQ",
            "posterUrl": "   ",
        }
    )

    assert recommendation.title == "Heat"
    assert recommendation.kind == "Movie"
    assert recommendation.reason == ""
    assert recommendation.year == "1995"
    assert recommendation.genre == "Crime, Thriller"
    assert recommendation.poster_url is None


@pytest.mark.parametrize("score", [math.inf, -math.inf, math.nan])
def test_recommendation_rejects_non_finite_scores(score: float) -> None:
    with pytest.raises(ValidationError):
        Recommendation(title="Heat", similarity_score=score)


def test_recommendation_requires_title() -> None:
    with pytest.raises(ValidationError):
        Recommendation.model_validate({"title": "   "})


@pytest.mark.parametrize(("score", "expected"), [(-5, 0), (42.4, 42), (180, 100)])
def test_display_score_is_clamped(score: float, expected: int) -> None:
    assert Recommendation(title="Heat", similarity_score=score).display_score == expected


def test_serialized_recommendation_carries_presentation_fields() -> None:
    dumped = Recommendation(title="Heat", similarity_score=180, poster_url=" ").model_dump()

    assert dumped["display_score"] == 100
    assert dumped["artwork_url"] == resolve_poster_fallback("Heat")
    assert SavedItem(title="Heat", poster_url="https://img/p.jpg").model_dump()["artwork_url"] == (
        "https://img/p.jpg"
    )


def test_catalogue_record_is_immutable() -> None:
    record = CatalogueRecord(title="Heat")

    with pytest.raises(ValidationError):
        record.title = "Other"  # type: ignore[misc]


def test_content_kind_from_label() -> None:
    assert ContentKind.from_label("TV Show") is ContentKind.SERIES
    assert ContentKind.from_label("Movie") is ContentKind.MOVIE
    assert ContentKind.from_label("Documentary") is ContentKind.MOVIE


def test_discovery_result_titles() -> None:
    result = DiscoveryResult(
        query="heists",
        recommendations=[Recommendation(title="Heat"), Recommendation(title="Thief")],
    )

    assert result.titles == ["Heat", "Thief"]
    assert result.sentiment is None
