"""Unit tests per DeliveryRecordCache."""

from datetime import date, timedelta

import pytest

from app.services.logistics_cache import MAX_CACHE_ENTRIES, DeliveryRecordCache


def _dates(count, start=date(2024, 6, 1)):
    return [(start + timedelta(days=i)).isoformat() for i in range(count)]


class TestCacheSetup:
    def test_default_capacity(self):
        cache = DeliveryRecordCache()
        assert cache.capacity == MAX_CACHE_ENTRIES == 10
        assert len(cache) == 0

    def test_capacity_must_be_positive(self):
        with pytest.raises(ValueError):
            DeliveryRecordCache(0)


class TestCacheReadWrite:
    @pytest.fixture
    def cache(self):
        return DeliveryRecordCache()

    def test_get_after_put_returns_records(self, cache):
        records = [{"id": 1, "notes": "a"}, {"id": 2, "notes": "b"}]
        cache.put("2024-06-01", records)
        assert cache.get("2024-06-01") == records

    def test_get_missing_returns_none(self, cache):
        assert cache.get("2024-06-01") is None

    def test_put_replaces_bucket(self, cache):
        cache.put("2024-06-01", [{"id": 1}])
        cache.put("2024-06-01", [{"id": 2}])
        assert cache.get("2024-06-01") == [{"id": 2}]
        assert len(cache) == 1

    def test_invalidate(self, cache):
        cache.put("2024-06-01", [{"id": 1}])
        assert cache.invalidate("2024-06-01") is True
        assert cache.invalidate("2024-06-01") is False
        assert "2024-06-01" not in cache

    def test_replace_and_remove_row(self, cache):
        cache.put("2024-06-01", [{"id": 1, "notes": "a"}, {"id": 2, "notes": "b"}])
        assert cache.replace_row("2024-06-01", 2, {"id": 2, "notes": "z"})
        assert cache.peek("2024-06-01")[1]["notes"] == "z"
        assert cache.remove_row("2024-06-01", 1)
        assert cache.peek("2024-06-01") == [{"id": 2, "notes": "z"}]
        assert not cache.remove_row("2024-06-01", 99)

    def test_update_rows_counts_matches(self, cache):
        cache.put("2024-06-01", [{"id": 1, "k": 0}, {"id": 2, "k": 0}, {"id": 3, "k": 1}])
        count = cache.update_rows(
            "2024-06-01", lambda r: r["k"] == 0, lambda r: {**r, "k": 5}
        )
        assert count == 2
        assert [r["k"] for r in cache.peek("2024-06-01")] == [5, 5, 1]


class TestCacheEviction:
    def test_eleventh_date_evicts_least_recently_used(self):
        cache = DeliveryRecordCache()
        keys = _dates(10)
        # Due record per il primo giorno, uno per gli altri nove
        cache.put(keys[0], [{"id": 1}, {"id": 2}])
        for offset, key in enumerate(keys[1:], start=3):
            cache.put(key, [{"id": offset}])

        # Il primo giorno viene riletto: ora il meno recente è keys[1]
        assert cache.get(keys[0]) == [{"id": 1}, {"id": 2}]

        cache.put("2024-07-01", [{"id": 99}])

        assert len(cache) == 10
        assert keys[1] not in cache
        assert keys[0] in cache
        assert "2024-07-01" in cache

    def test_without_reads_oldest_insert_is_evicted(self):
        cache = DeliveryRecordCache(capacity=3)
        for key in _dates(4):
            cache.put(key, [])
        assert cache.keys() == _dates(4)[1:]

    def test_peek_does_not_touch_order(self):
        cache = DeliveryRecordCache(capacity=2)
        first, second, third = _dates(3)
        cache.put(first, [])
        cache.put(second, [])
        cache.peek(first)
        cache.put(third, [])
        assert first not in cache
