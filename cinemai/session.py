"""Single-user session state shared by the HTTP handlers."""

from __future__ import annotations

import logging
import random
from typing import Sequence

from .catalogue import choose_featured
from .chat import AssistantChat
from .discovery import AICompletionClient, DiscoveryOrchestrator
from .history import SearchHistoryStore
from .models import CatalogueRecord, SavedItem, WatchCandidate
from .saved_items import SavedItemsStore
from .storage import KeyValueStore

logger = logging.getLogger(__name__)


class DiscoverySession:
    """Owns every mutable piece of user state for one running service.

    Construct it once at startup with :meth:`open`, which loads the persisted
    search history before any handler can use it.
    """

    def __init__(
        self,
        *,
        catalogue: Sequence[CatalogueRecord],
        orchestrator: DiscoveryOrchestrator,
        saved: SavedItemsStore,
        chat: AssistantChat,
        rng: random.Random | None = None,
    ):
        self.catalogue: list[CatalogueRecord] = list(catalogue)
        self.orchestrator = orchestrator
        self.saved = saved
        self.chat = chat
        self.featured = choose_featured(self.catalogue, rng)
        self._by_show_id = {record.show_id: record for record in self.catalogue}

    @classmethod
    async def open(
        cls,
        ai: AICompletionClient,
        store: KeyValueStore,
        *,
        catalogue: Sequence[CatalogueRecord] = (),
        history_key: str,
        history_limit: int,
        rng: random.Random | None = None,
    ) -> "DiscoverySession":
        history = SearchHistoryStore(store, key=history_key, limit=history_limit)
        entries = await history.load()
        logger.info("Loaded %d search history entries", len(entries))
        return cls(
            catalogue=catalogue,
            orchestrator=DiscoveryOrchestrator(ai, history),
            saved=SavedItemsStore(),
            chat=AssistantChat(ai),
            rng=rng,
        )

    @property
    def history(self) -> SearchHistoryStore:
        return self.orchestrator.history

    def find_record(self, show_id: str) -> CatalogueRecord | None:
        return self._by_show_id.get(show_id)

    def resolve_candidate(self, title: str, show_id: str | None = None) -> WatchCandidate | None:
        """Find the displayed title a save toggle refers to."""

        if show_id:
            record = self.find_record(show_id)
            if record is not None:
                return record
        recommendation = self.orchestrator.find_recommendation(title)
        if recommendation is not None:
            return recommendation
        saved: SavedItem | None = self.saved.get(title)
        if saved is not None:
            return saved
        for record in self.catalogue:
            if record.title == title:
                return record
        return None
