"""Turn free-text queries into recommendations paired with audience sentiment."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Protocol, Sequence

from pydantic import BaseModel

from .exceptions import DiscoveryNotice
from .history import SearchHistoryStore
from .media_links import FALLBACK_TRAILER_URL, build_embed_url
from .models import ChatMessage, DiscoveryResult, Recommendation, SentimentSummary

logger = logging.getLogger(__name__)

MOOD_PRESETS: tuple[str, ...] = (
    "Chill & Relaxed",
    "Adventurous",
    "Dark & Gritty",
    "Mind-Bending",
    "Heart-Warming",
    "Need a Laugh",
)
DEFAULT_MATCH_CONTEXT = "General Audience"
FALLBACK_EXPLANATION = (
    "We think you'll love this based on your viewing history and genre preferences."
)


class AICompletionClient(Protocol):
    """Remote capability that produces recommendations and related text."""

    async def get_recommendations(
        self, query: str, exclude_titles: Sequence[str] = ()
    ) -> list[Recommendation]: ...

    async def get_sentiment(self, title: str) -> SentimentSummary | None: ...

    async def explain_match(self, title: str, context: str = DEFAULT_MATCH_CONTEXT) -> str: ...

    async def chat(self, history: Sequence[ChatMessage], message: str) -> str: ...


class DiscoveryState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    EMPTY = "empty"
    FAILED = "failed"


class DiscoverySnapshot(BaseModel):
    """Point-in-time view of the orchestrator for presentation."""

    state: DiscoveryState
    query: str
    result: DiscoveryResult | None = None
    notice: str | None = None
    generation: int = 0


class DiscoveryOrchestrator:
    """Coordinate discovery calls against the AI backend.

    Each ``search`` or ``regenerate`` call takes a new generation number.
    A call only publishes its outcome if no newer call has started since,
    so the last initiated call wins regardless of completion order.
    """

    def __init__(self, ai: AICompletionClient, history: SearchHistoryStore):
        self._ai = ai
        self._history = history
        self._state = DiscoveryState.IDLE
        self._query = ""
        self._result: DiscoveryResult | None = None
        self._notice: DiscoveryNotice | None = None
        self._generation = 0

    @property
    def state(self) -> DiscoveryState:
        return self._state

    @property
    def query(self) -> str:
        return self._query

    @property
    def result(self) -> DiscoveryResult | None:
        return self._result

    @property
    def notice(self) -> DiscoveryNotice | None:
        return self._notice

    @property
    def history(self) -> SearchHistoryStore:
        return self._history

    def snapshot(self) -> DiscoverySnapshot:
        return DiscoverySnapshot(
            state=self._state,
            query=self._query,
            result=self._result,
            notice=self._notice.value if self._notice else None,
            generation=self._generation,
        )

    async def search(self, query: str, *, is_regeneration: bool = False) -> DiscoverySnapshot:
        """Fetch recommendations and sentiment for ``query`` in parallel.

        Blank queries are ignored. Unless ``is_regeneration`` is set the query
        is recorded in the search history whatever the outcome.
        """

        if not query.strip():
            return self.snapshot()

        generation = self._begin(query)
        self._result = None
        try:
            if not is_regeneration:
                try:
                    await self._history.record(query)
                except Exception as exc:
                    logger.warning("Could not record %r in search history: %s", query, exc)
            recommendations, sentiment = await self._fetch_discovery(query)
        except asyncio.CancelledError:
            if self._is_current(generation):
                self._settle(DiscoveryState.FAILED, DiscoveryNotice.CONNECTION_FAILED)
            raise
        except Exception as exc:
            logger.warning("Discovery for %r failed: %s", query, exc, exc_info=True)
            if self._is_current(generation):
                self._settle(DiscoveryState.FAILED, DiscoveryNotice.CONNECTION_FAILED)
            return self.snapshot()

        if not self._is_current(generation):
            logger.debug("Discarding superseded discovery result for %r", query)
            return self.snapshot()

        if not recommendations:
            self._settle(DiscoveryState.EMPTY, DiscoveryNotice.NO_RESULTS)
        else:
            self._result = DiscoveryResult(
                query=query, recommendations=recommendations, sentiment=sentiment
            )
            self._settle(DiscoveryState.SUCCESS)
        return self.snapshot()

    async def search_mood(self, mood: str) -> DiscoverySnapshot:
        """Run a preset mood as a search without recording it."""

        return await self.search(mood, is_regeneration=True)

    async def regenerate(
        self,
        previous_query: str | None = None,
        current_titles: Sequence[str] | None = None,
    ) -> DiscoverySnapshot:
        """Ask for fresh recommendations that avoid the titles already shown.

        Sentiment is carried over from the current result. The exclusion list
        is only a hint to the backend; its response is not filtered here, so
        repeated titles can still appear.
        """

        query = previous_query if previous_query is not None else self._query
        if not query.strip():
            return self.snapshot()
        if current_titles is None:
            current_titles = self._result.titles if self._result else []
        previous = self._result

        generation = self._begin(query)
        try:
            recommendations = await self._ai.get_recommendations(query, list(current_titles))
        except asyncio.CancelledError:
            if self._is_current(generation):
                self._settle(DiscoveryState.FAILED, DiscoveryNotice.REFRESH_FAILED)
            raise
        except Exception as exc:
            logger.warning("Regeneration for %r failed: %s", query, exc, exc_info=True)
            if self._is_current(generation):
                self._settle(DiscoveryState.FAILED, DiscoveryNotice.REFRESH_FAILED)
            return self.snapshot()

        if not self._is_current(generation):
            logger.debug("Discarding superseded regeneration for %r", query)
            return self.snapshot()

        if not recommendations:
            self._settle(DiscoveryState.EMPTY, DiscoveryNotice.NO_MORE_RESULTS)
        else:
            self._result = DiscoveryResult(
                query=query,
                recommendations=recommendations,
                sentiment=previous.sentiment if previous else None,
            )
            self._settle(DiscoveryState.SUCCESS)
        return self.snapshot()

    async def explain_match(self, title: str, context: str = DEFAULT_MATCH_CONTEXT) -> str:
        try:
            explanation = await self._ai.explain_match(title, context)
        except Exception as exc:
            logger.warning("Match explanation for %r failed: %s", title, exc)
            return FALLBACK_EXPLANATION
        return explanation.strip() or FALLBACK_EXPLANATION

    def find_recommendation(self, title: str) -> Recommendation | None:
        if self._result is None:
            return None
        for recommendation in self._result.recommendations:
            if recommendation.title == title:
                return recommendation
        return None

    def trailer_for(self, title: str, url: str | None = None) -> str | None:
        """Return the embed URL to play for ``title``.

        An explicit ``url`` wins, then the displayed recommendation's trailer,
        then a fixed fallback trailer.
        """

        candidate = url
        if not candidate:
            recommendation = self.find_recommendation(title)
            if recommendation is not None:
                candidate = recommendation.trailer_url
        return build_embed_url(candidate or FALLBACK_TRAILER_URL)

    async def _fetch_discovery(
        self, query: str
    ) -> tuple[list[Recommendation], SentimentSummary | None]:
        recommendation_task = asyncio.create_task(self._ai.get_recommendations(query))
        sentiment_task = asyncio.create_task(self._ai.get_sentiment(query))
        tasks = (recommendation_task, sentiment_task)
        try:
            recommendations, sentiment = await asyncio.gather(*tasks)
        except Exception:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return list(recommendations or []), sentiment

    def _begin(self, query: str) -> int:
        self._generation += 1
        self._state = DiscoveryState.LOADING
        self._query = query
        self._notice = None
        return self._generation

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _settle(self, state: DiscoveryState, notice: DiscoveryNotice | None = None) -> None:
        self._state = state
        self._notice = notice
