"""Configuration settings behaviour tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from cinemai.config import Settings


def test_defaults() -> None:
    settings = Settings(_env_file=None)

    assert settings.recommendation_count == 8
    assert settings.history_limit == 8
    assert settings.history_key == "netflix_search_history"
    assert str(settings.openrouter_api_url).startswith("https://openrouter.ai/api/v1")


def test_api_key_accepts_legacy_alias() -> None:
    settings = Settings(_env_file=None, API_KEY="legacy-key")

    assert settings.openrouter_api_key == "legacy-key"


def test_blank_values_are_treated_as_missing() -> None:
    settings = Settings(_env_file=None, OPENROUTER_API_KEY="  ", CATALOGUE_PATH="")

    assert settings.openrouter_api_key is None
    assert settings.catalogue_path is None


def test_catalogue_path_is_parsed() -> None:
    settings = Settings(_env_file=None, CATALOGUE_PATH="data/titles.csv")

    assert settings.catalogue_path == Path("data/titles.csv")


@pytest.mark.parametrize(
    "overrides",
    [
        {"HISTORY_LIMIT": 0},
        {"RECOMMENDATION_COUNT": 100},
        {"REQUEST_TIMEOUT": 0},
        {"ENVIRONMENT": "staging"},
    ],
)
def test_invalid_values_raise(overrides: dict[str, object]) -> None:
    with pytest.raises(ValueError):
        Settings(_env_file=None, **overrides)  # type: ignore[arg-type]
