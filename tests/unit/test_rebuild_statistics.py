"""Tests for the statistics rebuild admin script."""
import pytest

from admin.rebuild_statistics import rebuild
from tests.conftest import InMemoryDocumentStore


@pytest.mark.asyncio
async def test_rebuilds_every_business(store, settings):
    store.add_business("biz_a")
    store.add_business("biz_b")
    store.add_review("rev_1", "biz_a", 5)
    store.add_review("rev_2", "biz_a", 2)
    store.add_review("rev_3", "biz_a", 1, status="rejected")
    store.add_complaint("cmp_1", "biz_b")
    store.add_complaint("cmp_2", "biz_b", visible_to_public=False)

    results = await rebuild(settings, [], store=store)

    assert [r["business_id"] for r in results] == ["biz_a", "biz_b"]
    assert all(r["success"] for r in results)
    assert store.statistics("biz_a")["average_rating"] == 3.5
    assert store.statistics("biz_a")["total_reviews"] == 2
    assert store.statistics("biz_b")["total_complaints"] == 1


@pytest.mark.asyncio
async def test_dry_run_writes_nothing(store, settings):
    store.add_business("biz_a")
    store.add_review("rev_1", "biz_a", 5)

    results = await rebuild(settings, ["biz_a"], dry_run=True, store=store)

    assert results == []
    assert store.update_calls == []


@pytest.mark.asyncio
async def test_missing_business_reported_as_failure(store, settings):
    results = await rebuild(settings, ["biz_missing"], store=store)

    assert results[0]["success"] is False
    assert results[0]["business_id"] == "biz_missing"


@pytest.mark.asyncio
async def test_rebuild_all_is_not_limited_to_one_page(settings):
    store = InMemoryDocumentStore(max_related_documents=2)
    for i in range(5):
        store.add_business(f"biz_{i}")

    results = await rebuild(settings, [], store=store)

    assert [r["business_id"] for r in results] == [f"biz_{i}" for i in range(5)]
