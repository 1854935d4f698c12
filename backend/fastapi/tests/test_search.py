"""Tests for services/search.py"""

import asyncio
import threading
import time

from conftest import FakeStore, catalog_rows, mountain_rows
from services.conditions import SearchCondition, SearchType
from services.search import (
    collect_candidates,
    fetch_mountains,
    find_name_ids,
    merge_candidates,
    search_mountain_ids,
)

PREF_YAMANASHI = SearchCondition(SearchType.PREFECTURE, "Prefecture_山梨県")
PREF_TOKYO = SearchCondition(SearchType.PREFECTURE, "Prefecture_東京都")
TAG_HYAKUMEIZAN = SearchCondition(SearchType.TAG, "Tag_百名山")


def name(value):
    return SearchCondition(SearchType.NAME, value)


class TestFindNameIds:
    """Test the name / kana union"""

    def test_union_of_name_and_kana_matches(self):
        """A match on either name variant counts"""
        rows = (
            mountain_rows(1, "Alpha", "x", 100)
            + mountain_rows(2, "y", "alphabet", 200)
            + mountain_rows(3, "Alps", "alpine", 300)
            + mountain_rows(4, "z", "w", 400)
        )
        store = FakeStore(rows)

        assert asyncio.run(find_name_ids(store, "lph")) == {1, 2}
        assert asyncio.run(find_name_ids(store, "Alp")) == {1, 3}
        assert asyncio.run(find_name_ids(store, "alp")) == {2, 3}

    def test_matching_both_variants_counts_once(self):
        """An id matched by name and kana appears once"""
        rows = mountain_rows(1, "ふじ山", "ふじやま", 100) + mountain_rows(2, "富士見", "ふじみ", 200)
        assert asyncio.run(find_name_ids(FakeStore(rows), "ふじ")) == {1, 2}

    def test_queries_both_discriminators(self, store):
        """Both Name and NameKana rows are filtered"""
        asyncio.run(find_name_ids(store, "富士"))

        filtered_types = sorted(call[4] for call in store.calls if call[0] == "query_by_index_filter")
        assert filtered_types == ["Name", "NameKana"]

    def test_one_failed_variant_keeps_the_other(self):
        """A failed kana lookup still returns name matches"""
        store = FakeStore(
            catalog_rows(),
            fail=lambda op, args: op == "query_by_index_filter" and args[3] == "NameKana",
        )
        assert asyncio.run(find_name_ids(store, "富士")) == {1, 6}


class TestMergeCandidates:
    """Test cross-category intersection"""

    def test_no_categories(self):
        assert merge_candidates({}) == set()

    def test_single_category_passes_through(self):
        assert merge_candidates({SearchType.TAG: {1, 2, 3}}) == {1, 2, 3}

    def test_intersection_is_commutative(self):
        """Category order does not change the merged set"""
        a = {SearchType.PREFECTURE: {1, 3, 4, 7}, SearchType.TAG: {1, 3, 4, 5, 7}, SearchType.NAME: {1, 6, 7}}
        b = dict(reversed(list(a.items())))

        assert merge_candidates(a) == merge_candidates(b) == {1, 7}


class TestSearchMountainIds:
    """Test the executor against the sample catalog"""

    def test_prefecture_only(self, store):
        assert asyncio.run(search_mountain_ids(store, [PREF_YAMANASHI])) == {1, 3, 4, 7}

    def test_tag_only(self, store):
        assert asyncio.run(search_mountain_ids(store, [TAG_HYAKUMEIZAN])) == {1, 3, 4, 5, 7}

    def test_name_only(self, store):
        assert asyncio.run(search_mountain_ids(store, [name("富士")])) == {1, 6}
        assert asyncio.run(search_mountain_ids(store, [name("さん")])) == {1, 2, 5}

    def test_prefecture_and_tag(self, store):
        """Categories combine by intersection"""
        assert asyncio.run(search_mountain_ids(store, [PREF_TOKYO, TAG_HYAKUMEIZAN])) == {4}

    def test_all_categories(self, store):
        ids = asyncio.run(search_mountain_ids(store, [PREF_YAMANASHI, TAG_HYAKUMEIZAN, name("山")]))
        assert ids == {1, 4}

    def test_condition_order_does_not_matter(self, store):
        conditions = [PREF_YAMANASHI, TAG_HYAKUMEIZAN, name("山")]
        forward = asyncio.run(search_mountain_ids(store, conditions))
        backward = asyncio.run(search_mountain_ids(store, list(reversed(conditions))))

        assert forward == backward

    def test_completion_order_does_not_matter(self, rows):
        """A slow lookup finishing last gives the same result"""

        class SlowPrefectureStore(FakeStore):
            def query_by_index(self, table, index, key, value):
                if value.startswith("Prefecture_"):
                    time.sleep(0.05)
                return super().query_by_index(table, index, key, value)

        ids = asyncio.run(search_mountain_ids(SlowPrefectureStore(rows), [PREF_YAMANASHI, TAG_HYAKUMEIZAN]))
        assert ids == {1, 3, 4, 7}

    def test_no_match(self, store):
        assert asyncio.run(search_mountain_ids(store, [name("エベレスト")])) == set()

    def test_failed_category_is_zero_candidates(self, rows):
        """A failed lookup makes its category empty"""
        store = FakeStore(rows, fail=lambda op, args: op == "query_by_index" and args[3] == "Tag_百名山")

        candidates = asyncio.run(collect_candidates(store, [PREF_YAMANASHI, TAG_HYAKUMEIZAN]))
        assert candidates == {SearchType.PREFECTURE: {1, 3, 4, 7}, SearchType.TAG: set()}
        assert merge_candidates(candidates) == set()

    def test_same_category_twice_intersects(self, store):
        candidates = asyncio.run(collect_candidates(store, [PREF_YAMANASHI, PREF_TOKYO]))
        assert candidates == {SearchType.PREFECTURE: {4}}


class TestFetchMountains:
    """Test per-id detail fan-out"""

    def test_fetches_each_id(self, store):
        mountains = asyncio.run(fetch_mountains(store, [3, 1, 5]))

        assert sorted(m.id for m in mountains) == [1, 3, 5]
        assert {m.name for m in mountains} == {"北岳", "富士山", "筑波山"}

    def test_missing_and_failed_ids_are_dropped(self, rows):
        store = FakeStore(rows, fail=lambda op, args: op == "query_by_key" and args[2] == 2)
        mountains = asyncio.run(fetch_mountains(store, [1, 2, 99]))

        assert [m.id for m in mountains] == [1]

    def test_concurrency_is_bounded(self, rows):
        """No more than the configured number of fetches run at once"""

        class CountingStore(FakeStore):
            def __init__(self, rows):
                super().__init__(rows)
                self.lock = threading.Lock()
                self.active = 0
                self.peak = 0

            def query_by_key(self, table, key, value):
                with self.lock:
                    self.active += 1
                    self.peak = max(self.peak, self.active)
                time.sleep(0.02)
                with self.lock:
                    self.active -= 1
                return super().query_by_key(table, key, value)

        store = CountingStore(rows)
        mountains = asyncio.run(fetch_mountains(store, range(1, 8), concurrency=2))

        assert len(mountains) == 7
        assert store.peak <= 2
