"""Integration helpers for the OpenRouter API."""

from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx
from pydantic import ValidationError

from ..config import Settings
from ..exceptions import AICompletionError
from ..models import ChatMessage, Recommendation, Review, SentimentSummary
from ..utils import extract_json_payload, unwrap_items

logger = logging.getLogger(__name__)

JSON_SYSTEM_PROMPT = (
    "You are CinemAI, a movie and series discovery engine. You always respond with "
    "JSON that matches the documented schema and never include commentary outside JSON."
)

CHAT_SYSTEM_PROMPT = (
    "You are 'CinemAI', a witty, knowledgeable, and personalized movie assistant. "
    "Your goal is to help users find content they will love. Be concise, friendly, "
    "and use emojis. If asked for recommendations, list 3 titles with a 1-sentence "
    "pitch for each."
)

RECOMMENDATION_REQUEST_TEMPLATE = """
Recommend {count} movies or TV shows based on the user query: "{query}".
The query might be a specific movie title (find similar), a specific genre, a mood (e.g. 'sad', 'inspiring'), or a plot description.
Focus on content available on Netflix historically or globally.
Provide a match/relevance score (0-100) based on how well it fits the query.
Provide a short, punchy reason for the recommendation (e.g. "Perfect if you like dark humor...").

Media rules:
1. trailerUrl MUST be a real, working YouTube URL for the official trailer in the form https://www.youtube.com/watch?v=ID. Do not invent IDs.
2. posterUrl should be a publicly accessible poster URL. If you cannot guarantee a working link, use an empty string.

Respond with a JSON array using this schema:
[
  {{
    "title": "Title",
    "type": "Movie",
    "similarityScore": 87,
    "reason": "short sentence",
    "year": "2019",
    "genre": "Drama",
    "trailerUrl": "https://www.youtube.com/watch?v=ID",
    "posterUrl": ""
  }}
]
"""

EXCLUSION_TEMPLATE = (
    "Do NOT include the following titles in your response: {titles}. "
    "Find different recommendations."
)

SENTIMENT_REQUEST_TEMPLATE = """
Perform a sentiment analysis for the movie or show "{title}" based on general public reception and critics.
Generate a plausible distribution of Positive, Neutral, and Negative sentiment percentages (they must sum to 100).
Write a 1 sentence summary of the general consensus.
Generate {review_count} representative user reviews (one for each sentiment if possible) that reflect real audience opinions.

Respond with a JSON object using this schema:
{{
  "positivePercent": 70,
  "neutralPercent": 20,
  "negativePercent": 10,
  "summary": "one sentence",
  "sampleReviews": [
    {{"author": "name", "text": "review", "sentiment": "Positive"}}
  ]
}}
"""

EXPLANATION_REQUEST_TEMPLATE = (
    'Explain why the movie/show "{title}" is a good match for a viewer interested in: {context}.\n'
    'Keep it to 2 short, punchy sentences. Start with "You\'ll love this because..."'
)


class OpenRouterClient:
    """Client responsible for talking to OpenRouter."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        self._settings = settings
        self._client = http_client

    async def get_recommendations(
        self,
        query: str,
        exclude_titles: Sequence[str] = (),
        *,
        count: int | None = None,
    ) -> list[Recommendation]:
        """Ask the model for titles matching ``query``."""

        prompt = RECOMMENDATION_REQUEST_TEMPLATE.format(
            count=count or self._settings.recommendation_count,
            query=query,
        ).strip()
        excluded = [title for title in exclude_titles if title.strip()]
        if excluded:
            prompt += "\n" + EXCLUSION_TEMPLATE.format(titles=", ".join(excluded))

        content = await self._complete(
            [
                {"role": "system", "content": JSON_SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=0.9,
        )
        parsed = self._parse_json(content)

        recommendations: list[Recommendation] = []
        for entry in unwrap_items(parsed, "recommendations", "items", "results"):
            try:
                recommendations.append(Recommendation.model_validate(entry))
            except ValidationError:
                logger.debug("Skipping invalid recommendation entry: %s", entry)
                continue
        return recommendations

    async def get_sentiment(self, title: str) -> SentimentSummary | None:
        """Return the audience reception summary for ``title``."""

        prompt = SENTIMENT_REQUEST_TEMPLATE.format(
            title=title, review_count=self._settings.sample_review_count
        ).strip()
        content = await self._complete(
            [
                {"role": "system", "content": JSON_SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=0.7,
        )
        parsed = self._parse_json(content)
        if not isinstance(parsed, dict) or not parsed:
            return None

        reviews: list[Review] = []
        raw_reviews = parsed.get("sampleReviews", parsed.get("sample_reviews"))
        for entry in raw_reviews if isinstance(raw_reviews, list) else []:
            if not isinstance(entry, dict):
                continue
            try:
                reviews.append(Review.model_validate(entry))
            except ValidationError:
                logger.debug("Skipping invalid review entry: %s", entry)
                continue

        summary_fields = {
            key: value
            for key, value in parsed.items()
            if key not in ("sampleReviews", "sample_reviews")
        }
        try:
            summary = SentimentSummary.model_validate(summary_fields)
        except ValidationError as exc:
            logger.warning("Sentiment payload for %r failed validation: %s", title, exc)
            return None
        return summary.model_copy(update={"sample_reviews": reviews})

    async def explain_match(self, title: str, context: str = "General Audience") -> str:
        """Return a short pitch for why ``title`` suits ``context``."""

        prompt = EXPLANATION_REQUEST_TEMPLATE.format(title=title, context=context)
        return await self._complete(
            [{"role": "user", "content": prompt}],
            temperature=0.8,
        )

    async def chat(self, history: Sequence[ChatMessage], message: str) -> str:
        """Continue the assistant conversation with ``message``."""

        messages: list[dict[str, str]] = [{"role": "system", "content": CHAT_SYSTEM_PROMPT}]
        for turn in history:
            role = "assistant" if turn.role == "model" else "user"
            messages.append({"role": role, "content": turn.text})
        if not history or history[-1].role != "user" or history[-1].text != message:
            messages.append({"role": "user", "content": message})
        return await self._complete(messages, temperature=0.9)

    async def _complete(
        self,
        messages: list[dict[str, str]],
        *,
        temperature: float,
    ) -> str:
        api_key = self._settings.openrouter_api_key
        if not api_key:
            raise AICompletionError("OpenRouter API key is not configured")

        payload: dict[str, Any] = {
            "model": self._settings.openrouter_model,
            "temperature": temperature,
            "messages": messages,
        }
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "X-Title": self._settings.app_name,
        }

        try:
            response = await self._client.post(
                "/chat/completions", json=payload, headers=headers
            )
        except httpx.HTTPError as exc:
            logger.error("OpenRouter request failed: %s", exc)
            raise AICompletionError(f"OpenRouter request failed: {exc}") from exc

        if response.status_code >= 400:
            logger.error(
                "OpenRouter request failed (%s): %s", response.status_code, response.text
            )
            raise AICompletionError(response.text, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as exc:
            raise AICompletionError("OpenRouter returned a non-JSON body") from exc

        choices = data.get("choices") if isinstance(data, dict) else None
        if not isinstance(choices, list) or not choices:
            raise AICompletionError("Model returned no choices")
        first_choice = choices[0]
        if not isinstance(first_choice, dict):
            raise AICompletionError("Model returned a malformed choice")
        message = first_choice.get("message")
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str):
            raise AICompletionError("Model response missing content")
        return content

    @staticmethod
    def _parse_json(content: str) -> Any:
        try:
            return extract_json_payload(content)
        except ValueError as exc:
            logger.warning("Model response was not JSON: %s", content)
            raise AICompletionError(str(exc)) from exc
