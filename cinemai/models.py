"""Pydantic models describing catalogue and discovery payloads."""

from __future__ import annotations

import math
import time
from enum import Enum
from typing import Literal, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
)

from .media_links import poster_or_fallback


class ContentKind(str, Enum):
    """Kinds of title found in the source catalogue."""

    MOVIE = "Movie"
    SERIES = "TV Show"

    @classmethod
    def from_label(cls, label: str) -> "ContentKind":
        """Map a raw catalogue label, defaulting anything unknown to a movie."""

        if label == cls.SERIES.value:
            return cls.SERIES
        return cls.MOVIE


SentimentTag = Literal["Positive", "Neutral", "Negative"]


class CatalogueRecord(BaseModel):
    """One row of the source media table."""

    model_config = ConfigDict(frozen=True)

    show_id: str = ""
    kind: ContentKind = ContentKind.MOVIE
    title: str = ""
    director: str = ""
    cast: str = ""
    country: str = ""
    date_added: str = ""
    release_year: int = 0
    rating: str = ""
    duration: str = ""
    listed_in: str = ""
    description: str = ""

    @property
    def genres(self) -> list[str]:
        """Return the comma separated genre tags as a list."""

        return [genre.strip() for genre in self.listed_in.split(",") if genre.strip()]


class Recommendation(BaseModel):
    """A single AI-suggested title."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    title: str = Field(min_length=1)
    kind: str = Field(
        default="Movie",
        validation_alias=AliasChoices("kind", "type"),
    )
    similarity_score: float = Field(
        default=0.0,
        validation_alias=AliasChoices("similarity_score", "similarityScore", "score"),
    )
    reason: str = ""
    year: str = ""
    genre: str = ""
    trailer_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("trailer_url", "trailerUrl"),
    )
    poster_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("poster_url", "posterUrl"),
    )

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("similarity_score")
    @classmethod
    def _require_finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("similarity score must be a finite number")
        return value

    @field_validator("year", mode="before")
    @classmethod
    def _year_as_text(cls, value: object) -> object:
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(int(value))
        return value

    @field_validator("kind", "reason", "genre", mode="before")
    @classmethod
    def _coerce_text(cls, value: object) -> object:
        if value is None:
            return ""
        if isinstance(value, list):
            return ", ".join(str(part) for part in value)
        return value

    @field_validator("trailer_url", "poster_url", mode="before")
    @classmethod
    def _blank_url_is_missing(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @computed_field  # type: ignore[prop-decorator]
    @property
    def display_score(self) -> int:
        """Return the score clamped into the 0-100 range for display."""

        return int(round(min(max(self.similarity_score, 0.0), 100.0)))

    @computed_field  # type: ignore[prop-decorator]
    @property
    def artwork_url(self) -> str:
        """Return the poster to render, or a placeholder when none was given."""

        return poster_or_fallback(self.poster_url, self.title)


class Review(BaseModel):
    """A representative audience review."""

    author: str = "Anonymous"
    text: str = ""
    sentiment: SentimentTag = "Neutral"


class SentimentSummary(BaseModel):
    """Audience reception split for a query or title."""

    model_config = ConfigDict(populate_by_name=True)

    positive_percent: float = Field(
        default=0.0,
        validation_alias=AliasChoices("positive_percent", "positivePercent"),
    )
    neutral_percent: float = Field(
        default=0.0,
        validation_alias=AliasChoices("neutral_percent", "neutralPercent"),
    )
    negative_percent: float = Field(
        default=0.0,
        validation_alias=AliasChoices("negative_percent", "negativePercent"),
    )
    summary: str = ""
    sample_reviews: list[Review] = Field(
        default_factory=list,
        validation_alias=AliasChoices("sample_reviews", "sampleReviews"),
    )


class DiscoveryResult(BaseModel):
    """Recommendations paired with the sentiment for the same query."""

    query: str
    recommendations: list[Recommendation] = Field(default_factory=list)
    sentiment: SentimentSummary | None = None

    @property
    def titles(self) -> list[str]:
        return [recommendation.title for recommendation in self.recommendations]


class ChatMessage(BaseModel):
    """One turn in the assistant conversation."""

    role: Literal["user", "model"]
    text: str
    timestamp: float = Field(default_factory=time.time)


class SavedItem(BaseModel):
    """A title kept in the user's watch later list."""

    model_config = ConfigDict(frozen=True)

    title: str
    kind: str = ContentKind.MOVIE.value
    similarity_score: float = 100.0
    reason: str = ""
    year: str = ""
    genre: str = ""
    poster_url: str | None = None
    trailer_url: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def artwork_url(self) -> str:
        return poster_or_fallback(self.poster_url, self.title)


WatchCandidate = Union[CatalogueRecord, Recommendation, SavedItem]
