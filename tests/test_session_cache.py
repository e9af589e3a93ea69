"""
Unit tests for the saved-game cache.
"""

import json

from pokerdot.session import SessionCache, SessionRecord
from pokerdot.storage import MemoryStorage

DAY_MS = 1000 * 60 * 60 * 24


def _record(game_id="g1", player_key="p1", **payload):
    return SessionRecord(session_id=game_id, participant_key=player_key, payload=payload)


def _stored(storage, key="pokerdot-games"):
    return json.loads(storage.get_item(key))


class ReadOnlyStorage(MemoryStorage):
    """Storage whose writes fail, like a store on a read-only volume."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.writes = 0

    def set_item(self, key, value):
        self.writes += 1
        raise OSError("read-only file system")


class TestSave:
    """Test dedup-on-write and timestamping."""

    def test_save_sets_timestamp(self, cache, clock):
        cache.save(_record())
        [saved] = cache.list()
        assert saved.saved_at == clock.now

    def test_save_does_not_mutate_argument(self, cache):
        record = _record()
        cache.save(record)
        assert record.saved_at == 0

    def test_last_write_wins(self, cache, clock):
        cache.save(_record(name="first"))
        clock.advance(1000)
        cache.save(_record(name="second"))

        records = cache.list()
        assert len(records) == 1
        assert records[0].payload == {"name": "second"}
        assert records[0].saved_at == clock.now

    def test_save_supersedes_without_merging(self, cache):
        cache.save(_record(name="Alice", seat=3))
        cache.save(_record(name="Alice"))
        assert cache.list()[0].payload == {"name": "Alice"}

    def test_same_game_different_player_kept_apart(self, cache):
        cache.save(_record("g1", "p1"))
        cache.save(_record("g1", "p2"))
        keys = {r.key for r in cache.list()}
        assert keys == {("g1", "p1"), ("g1", "p2")}

    def test_newest_first(self, cache, clock):
        cache.save(_record("g1"))
        clock.advance(10)
        cache.save(_record("g2"))
        clock.advance(10)
        cache.save(_record("g1"))

        assert [r.session_id for r in cache.list()] == ["g1", "g2"]

    def test_save_purges_expired_records(self, cache, storage, clock):
        cache.save(_record("old"))
        clock.advance(8 * DAY_MS)
        cache.save(_record("new"))

        assert [r["gameId"] for r in _stored(storage)] == ["new"]

    def test_save_over_corrupt_store(self, cache, storage):
        storage.set_item("pokerdot-games", "{not json")
        cache.save(_record())
        assert [r.session_id for r in cache.list()] == ["g1"]


class TestList:
    """Test lazy expiry and self-healing reads."""

    def test_empty_store(self, cache):
        assert cache.list() == []

    def test_list_persists_filtered_set(self, cache, storage, clock):
        cache.save(_record("g1"))
        clock.advance(3 * DAY_MS)
        cache.save(_record("g2"))
        clock.advance(5 * DAY_MS)

        assert [r.session_id for r in cache.list()] == ["g2"]
        assert [r["gameId"] for r in _stored(storage)] == ["g2"]

    def test_record_exactly_at_retention_window_is_expired(self, cache, clock):
        cache.save(_record())
        clock.advance(7 * DAY_MS)
        assert cache.list() == []

    def test_record_just_inside_window_is_kept(self, cache, clock):
        cache.save(_record())
        clock.advance(7 * DAY_MS - 1)
        assert len(cache.list()) == 1

    def test_invalid_json_resets_store(self, cache, storage):
        storage.set_item("pokerdot-games", "{{{")
        assert cache.list() == []
        assert _stored(storage) == []

    def test_non_array_resets_store(self, cache, storage):
        storage.set_item("pokerdot-games", json.dumps({"gameId": "g1"}))
        assert cache.list() == []
        assert _stored(storage) == []

    def test_malformed_entry_discards_everything(self, cache, storage, clock):
        storage.set_item(
            "pokerdot-games",
            json.dumps(
                [
                    {"gameId": "g1", "playerKey": "p1", "startTime": clock.now},
                    {"gameId": "g2"},
                ]
            ),
        )
        assert cache.list() == []
        assert _stored(storage) == []

    def test_null_store_reads_as_empty(self, cache, storage):
        storage.set_item("pokerdot-games", "null")
        assert cache.list() == []

    def test_reads_web_client_layout(self, storage, clock):
        storage.set_item(
            "pokerdot-games",
            json.dumps(
                [
                    {
                        "gameId": "abc",
                        "playerKey": "xyz",
                        "playerName": "Bob",
                        "startTime": clock.now - 1000,
                    }
                ]
            ),
        )
        [record] = SessionCache(storage, clock=clock).list()
        assert record.key == ("abc", "xyz")
        assert record.payload == {"playerName": "Bob"}

    def test_custom_storage_key(self, clock):
        storage = MemoryStorage()
        cache = SessionCache(storage, storage_key="other", clock=clock)
        cache.save(_record())
        assert storage.get_item("pokerdot-games") is None
        assert len(_stored(storage, "other")) == 1

    def test_list_survives_unwritable_store_after_corruption(self, clock):
        storage = ReadOnlyStorage({"pokerdot-games": "{{{"})
        cache = SessionCache(storage, clock=clock)

        assert cache.list() == []
        assert storage.writes >= 1

    def test_list_survives_unwritable_store(self, clock):
        stored = [{"gameId": "g1", "playerKey": "p1", "startTime": clock.now}]
        storage = ReadOnlyStorage({"pokerdot-games": json.dumps(stored)})
        cache = SessionCache(storage, clock=clock)

        assert [r.key for r in cache.list()] == [("g1", "p1")]


class TestRemove:
    """Test explicit deletion."""

    def test_remove_after_repeated_saves(self, cache):
        for _ in range(3):
            cache.save(_record())
        cache.save(_record("g2"))

        remaining = cache.remove("g1", "p1")

        assert [r.session_id for r in remaining] == ["g2"]
        assert all(not r.matches("g1", "p1") for r in cache.list())

    def test_remove_missing_is_noop(self, cache):
        cache.save(_record())
        remaining = cache.remove("nope", "p1")
        assert [r.key for r in remaining] == [("g1", "p1")]

    def test_remove_needs_both_keys(self, cache):
        cache.save(_record("g1", "p1"))
        cache.save(_record("g1", "p2"))
        remaining = cache.remove("g1", "p2")
        assert [r.key for r in remaining] == [("g1", "p1")]

    def test_remove_on_corrupt_store(self, cache, storage):
        storage.set_item("pokerdot-games", "garbage")
        assert cache.remove("g1", "p1") == []
        assert _stored(storage) == []


class TestClear:
    def test_clear(self, cache, storage):
        cache.save(_record())
        cache.clear()
        assert cache.list() == []
        assert _stored(storage) == []
