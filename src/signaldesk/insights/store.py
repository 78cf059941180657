"""Insight collection: load, append and persist."""

import json
import logging
from typing import Optional

from pydantic import TypeAdapter, ValidationError

from ..catalog import PillarId
from ..config import Settings
from .schema import Insight
from .storage import LocalStorage

logger = logging.getLogger(__name__)

InsightCollection = tuple[Insight, ...]

_records = TypeAdapter(list[Insight])


def append_insight(collection: InsightCollection, insight: Insight) -> InsightCollection:
    """Return a new collection with the insight first. The input is untouched."""
    return (insight, *collection)


def newsletter_candidates(collection: InsightCollection) -> InsightCollection:
    """Insights tagged for newsletter use, in collection order."""
    return tuple(i for i in collection if i.is_newsletter_candidate)


class InsightStore:
    """Owns the saved insights and their durable copy.

    The whole collection is loaded once and rewritten in full after every
    append. Volumes are a single analyst's archive.
    """

    def __init__(self, storage: LocalStorage, key: str):
        self.storage = storage
        self.key = key
        self._insights: InsightCollection = ()

    @classmethod
    def from_settings(cls, settings: Settings) -> "InsightStore":
        """Create a store backed by the configured data directory, loaded."""
        store = cls(LocalStorage(settings.data_path), settings.storage_key)
        store._insights = store.load()
        return store

    @property
    def insights(self) -> InsightCollection:
        return self._insights

    def load(self) -> InsightCollection:
        """Read persisted insights.

        Missing or malformed data yields an empty collection and is only
        logged; it never fails the caller.
        """
        raw = self.storage.read(self.key)
        if raw is None:
            logger.debug(f"[STORE] No persisted insights under '{self.key}'")
            return ()

        try:
            records = json.loads(raw)
            insights = _records.validate_python(records)
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"[STORE] Ignoring unreadable insights under '{self.key}': {e}")
            return ()

        logger.info(f"[STORE] Loaded {len(insights)} insight(s)")
        return tuple(insights)

    def persist(self, collection: InsightCollection) -> None:
        """Serialize the full collection, replacing what was stored.

        Raises:
            PersistenceError: if the write did not complete.
        """
        payload = json.dumps([i.to_record() for i in collection], ensure_ascii=False, indent=2)
        self.storage.write(self.key, payload)
        logger.info(f"[STORE] Persisted {len(collection)} insight(s)")

    def save(self, insight: Insight) -> InsightCollection:
        """Append an insight in memory, then persist the collection.

        The in-memory append stands even when persisting raises
        PersistenceError, which propagates to the caller.
        """
        self._insights = append_insight(self._insights, insight)
        logger.info(f"[STORE] Saved insight {insight.id} [{insight.pillar_id.value}]")
        self.persist(self._insights)
        return self._insights

    def get(self, insight_id: str) -> Optional[Insight]:
        for insight in self._insights:
            if insight.id == insight_id:
                return insight
        return None

    def by_pillar(self, pillar_id: PillarId | str) -> InsightCollection:
        key = PillarId(pillar_id)
        return tuple(i for i in self._insights if i.pillar_id is key)

    def newsletter_candidates(self) -> InsightCollection:
        return newsletter_candidates(self._insights)
