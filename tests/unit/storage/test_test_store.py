"""Tests for SyntheticTestStore."""

from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import patch

import pytest

from synthpanel.analysis.aggregator import compute_statistics
from synthpanel.exceptions import PersistenceError
from synthpanel.schemas.results import SyntheticTestRecord, TestResults
from synthpanel.storage.test_store import SyntheticTestStore
from tests.conftest import make_persona, make_response

BASE_DATE = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def _record(
    founder_id: str = "founder-1",
    product_id: str = "product-1",
    days_ago: int = 0,
) -> SyntheticTestRecord:
    persona = make_persona()
    responses = [make_response(persona=persona, concerns=["Pricing"])]
    stats = compute_statistics(responses)
    results = TestResults(
        like_rate=stats.like_rate,
        pass_rate=stats.pass_rate,
        super_like_rate=stats.super_like_rate,
        top_concerns=stats.top_concerns,
        recommendations=["Lower the price"],
        sentiment_analysis=stats.sentiment,
        persona_responses=responses,
    )
    return SyntheticTestRecord(
        product_id=product_id,
        founder_id=founder_id,
        test_date=BASE_DATE - timedelta(days=days_ago),
        persona_count=1,
        synthetic_personas=[persona],
        results=results,
        cost_usd=29.0,
    )


class TestAppendAndGet:
    def test_append_and_get(self):
        store = SyntheticTestStore()
        record = _record()
        assert store.append(record) is True
        assert store.get(record.test_id) == record
        assert store.count() == 1

    def test_duplicate_rejected(self):
        store = SyntheticTestStore()
        record = _record()
        store.append(record)
        assert store.append(record) is False
        assert store.count() == 1

    def test_missing_returns_none(self):
        assert SyntheticTestStore().get(_record().test_id) is None


class TestQuery:
    def test_newest_first(self):
        store = SyntheticTestStore()
        old, new, mid = _record(days_ago=5), _record(days_ago=0), _record(days_ago=2)
        for r in (old, new, mid):
            store.append(r)
        assert [r.test_id for r in store.query()] == [new.test_id, mid.test_id, old.test_id]

    def test_filters_by_founder_and_product(self):
        store = SyntheticTestStore()
        a = _record(founder_id="f1", product_id="p1")
        b = _record(founder_id="f1", product_id="p2")
        c = _record(founder_id="f2", product_id="p1")
        for r in (a, b, c):
            store.append(r)

        assert {r.test_id for r in store.query(founder_id="f1")} == {a.test_id, b.test_id}
        assert {r.test_id for r in store.query(product_id="p1")} == {a.test_id, c.test_id}
        assert [r.test_id for r in store.query(founder_id="f1", product_id="p1")] == [a.test_id]
        assert store.query(founder_id="nobody") == []
        assert store.count(founder_id="f1") == 2

    def test_limit(self):
        store = SyntheticTestStore()
        for i in range(4):
            store.append(_record(days_ago=i))
        assert len(store.query(limit=2)) == 2


class TestPersistence:
    def test_round_trip_through_jsonl(self, tmp_path: Path):
        path = tmp_path / "nested" / "tests.jsonl"
        store = SyntheticTestStore(persist_path=path)
        record = _record()
        store.append(record)

        reloaded = SyntheticTestStore(persist_path=path)
        loaded = reloaded.get(record.test_id)
        assert loaded == record
        assert loaded.content_hash == record.content_hash
        assert reloaded.count(founder_id="founder-1") == 1

    def test_write_failure_raises_and_leaves_store_empty(self, tmp_path: Path):
        store = SyntheticTestStore(persist_path=tmp_path / "tests.jsonl")
        record = _record()
        with patch("builtins.open", side_effect=OSError("disk full")):
            with pytest.raises(PersistenceError) as exc_info:
                store.append(record)
        assert exc_info.value.test_id == str(record.test_id)
        assert store.count() == 0
        assert store.get(record.test_id) is None
