"""Tests for signaldesk.insights.store and storage modules."""

import json
from unittest.mock import patch

import pytest

from signaldesk.errors import PersistenceError
from signaldesk.insights import Insight, InsightStore, LocalStorage, append_insight


class TestLocalStorage:
    """Tests for LocalStorage key-value documents."""

    def test_read_missing_key_returns_none(self, storage):
        assert storage.read("nothing_here") is None

    def test_write_creates_directory(self, storage, settings):
        """Test the data directory is created on first write."""
        assert not settings.data_path.exists()

        storage.write("notes", "[]")

        assert (settings.data_path / "notes.json").read_text(encoding="utf-8") == "[]"

    def test_write_overwrites(self, storage):
        storage.write("notes", "first")
        storage.write("notes", "second")

        assert storage.read("notes") == "second"

    def test_rejects_path_like_keys(self, storage):
        """Test keys cannot escape the storage directory."""
        for key in ("../escape", "a/b", "a\\b", ""):
            with pytest.raises(ValueError):
                storage.write(key, "x")

    def test_write_failure_raises_persistence_error(self, tmp_path):
        """Test an unwritable location surfaces as PersistenceError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        storage = LocalStorage(blocker / "data")

        with pytest.raises(PersistenceError):
            storage.write("notes", "[]")


class TestAppendInsight:
    """Tests for the pure append operation."""

    def test_prepends_without_mutating(self, sample_insight, archive_insight, bitcoin):
        collection = (archive_insight, sample_insight)
        new = Insight.create(bitcoin, source="X", signal="Newest")

        result = append_insight(collection, new)

        assert result == (new, archive_insight, sample_insight)
        assert collection == (archive_insight, sample_insight)

    def test_append_to_empty(self, sample_insight):
        assert append_insight((), sample_insight) == (sample_insight,)


class TestInsightStore:
    """Tests for InsightStore load / persist / save."""

    def test_load_missing_storage_is_empty(self, store):
        assert store.load() == ()

    @pytest.mark.parametrize(
        "payload",
        [
            "not json at all",
            "{\"id\": 1}",
            "null",
            "[{\"id\": \"x\", \"pillarId\": \"not-a-pillar\"}]",
            "[{\"id\": \"x\", \"pillarId\": \"newsletter\"}]",
            "",
        ],
    )
    def test_load_malformed_storage_is_empty(self, store, storage, payload):
        """Test unreadable persisted data is treated as no data."""
        storage.write(store.key, payload)

        assert store.load() == ()

    def test_round_trip(self, store, sample_insight, archive_insight):
        """Test a persisted collection loads back field for field, in order."""
        collection = (archive_insight, sample_insight)

        store.persist(collection)

        assert store.load() == collection

    def test_persist_writes_camel_case_json(self, store, settings, sample_insight):
        store.persist((sample_insight,))

        records = json.loads(settings.storage_path.read_text(encoding="utf-8"))
        assert records[0]["pillarId"] == "bitcoin"
        assert records[0]["outputTypes"] == ["Newsletter", "Blog Post"]

    def test_persist_replaces_previous_content(self, store, sample_insight, archive_insight):
        store.persist((sample_insight, archive_insight))
        store.persist((archive_insight,))

        assert store.load() == (archive_insight,)

    def test_save_prepends_and_persists(self, store, storage, settings, sample_insight, archive_insight):
        store.save(sample_insight)
        store.save(archive_insight)

        assert store.insights == (archive_insight, sample_insight)
        reloaded = InsightStore(storage, settings.storage_key)
        assert reloaded.load() == (archive_insight, sample_insight)

    def test_save_keeps_memory_state_when_persist_fails(self, store, sample_insight):
        """Test a failed write leaves the in-memory append in place."""
        with patch.object(store.storage, "write", side_effect=PersistenceError("quota exceeded")):
            with pytest.raises(PersistenceError):
                store.save(sample_insight)

        assert store.insights == (sample_insight,)

    def test_from_settings_loads_existing(self, settings, sample_insight):
        InsightStore.from_settings(settings).save(sample_insight)

        assert InsightStore.from_settings(settings).insights == (sample_insight,)

    def test_lookup_helpers(self, store, sample_insight, archive_insight):
        store.save(sample_insight)
        store.save(archive_insight)

        assert store.get(sample_insight.id) == sample_insight
        assert store.get("missing") is None
        assert store.by_pillar("ethereum") == (archive_insight,)
        assert store.newsletter_candidates() == (sample_insight,)
