from concurrent.futures import ThreadPoolExecutor

import pytest

from conftest import make_property
from vitrina.aggregation import SearchCache
from vitrina.models import SearchCriteria


def criteria(city: str = "Columbus", **kwargs) -> SearchCriteria:
    return SearchCriteria(city=city, state="OH", **kwargs)


class TestSearchCache:
    def test_get_before_ttl_returns_stored_list(self, clock):
        cache = SearchCache(ttl_seconds=600, clock=clock)
        props = [make_property(), make_property()]

        cache.put(criteria(), props)
        clock.advance(599)

        assert cache.get(criteria()) == props

    def test_get_after_ttl_is_a_miss(self, clock):
        cache = SearchCache(ttl_seconds=600, clock=clock)
        cache.put(criteria(), [make_property()])

        clock.advance(600)

        assert cache.get(criteria()) is None
        # Se purga al leer
        assert len(cache) == 0

    def test_logically_equal_criteria_share_entry(self, clock):
        cache = SearchCache(clock=clock)
        props = [make_property()]
        cache.put(SearchCriteria(city="Columbus", features=["Pool", "Gym"]), props)

        hit = cache.get(SearchCriteria(city="COLUMBUS", features="gym,pool"))

        assert hit == props

    def test_stores_a_copy(self, clock):
        cache = SearchCache(clock=clock)
        props = [make_property()]

        cache.put(criteria(), props)
        props.append(make_property())
        cache.get(criteria()).append(make_property())

        assert len(cache.get(criteria())) == 1

    def test_evicts_oldest_inserted(self, clock):
        cache = SearchCache(max_entries=2, clock=clock)
        cache.put(criteria("A"), [])
        cache.put(criteria("B"), [])

        # Un get no renueva la posición
        assert cache.get(criteria("A")) == []
        cache.put(criteria("C"), [])

        assert cache.get(criteria("A")) is None
        assert cache.get(criteria("B")) == []
        assert cache.get(criteria("C")) == []

    def test_put_on_existing_key_counts_as_new_insertion(self, clock):
        cache = SearchCache(max_entries=2, clock=clock)
        cache.put(criteria("A"), [])
        cache.put(criteria("B"), [])
        cache.put(criteria("A"), [make_property()])
        cache.put(criteria("C"), [])

        assert cache.get(criteria("B")) is None
        assert len(cache.get(criteria("A"))) == 1

    def test_put_refreshes_capture_time(self, clock):
        cache = SearchCache(ttl_seconds=10, clock=clock)
        cache.put(criteria(), [])
        clock.advance(8)
        cache.put(criteria(), [])
        clock.advance(8)

        assert cache.get(criteria()) == []

    def test_stats(self, clock):
        cache = SearchCache(clock=clock)
        cache.get(criteria())
        cache.put(criteria(), [])
        cache.get(criteria())

        assert cache.stats == {"entries": 1, "hits": 1, "misses": 1, "hit_rate": 0.5}

    def test_clear(self, clock):
        cache = SearchCache(clock=clock)
        cache.put(criteria(), [])
        cache.clear()
        assert len(cache) == 0

    def test_rejects_zero_capacity(self):
        with pytest.raises(ValueError):
            SearchCache(max_entries=0)

    def test_concurrent_puts_and_gets(self):
        cache = SearchCache(max_entries=50)
        props = [make_property() for _ in range(3)]

        def work(i: int):
            key = criteria(f"City{i % 60}")
            cache.put(key, props)
            return cache.get(key)

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(work, range(500)))

        assert len(cache) <= 50
        assert all(r is None or r == props for r in results)
