"""
Unit tests for the analytics client and its document store backends.
"""

import asyncio
from unittest.mock import MagicMock

import pytest

from cinefind.analytics_store import (
	AnalyticsClient,
	MemoryDocumentStore,
	SupabaseDocumentStore,
	normalize_term,
)
from cinefind.errors import AnalyticsWriteError
from cinefind.models import SearchRecord

from fakes import IMAGE_BASE, BrokenStore, movie


def test_normalize_term():
	assert normalize_term("  Dune ") == "dune"
	assert normalize_term("") == ""
	assert normalize_term(None) == ""


def test_first_increment_creates_then_second_updates():
	store = MemoryDocumentStore()
	client = AnalyticsClient(store, IMAGE_BASE)
	dune = movie(438631, "Dune", "/d5NXSklXo0qyIYkgV94XAgMIckC.jpg")

	async def scenario():
		first = await client.increment_search("dune", dune)
		after_first = len(store)
		second = await client.increment_search("dune", dune)
		return first, after_first, second

	first, after_first, second = asyncio.run(scenario())
	assert after_first == 1
	assert first.count == 1
	assert first.movie_id == 438631
	assert first.poster_url == f"{IMAGE_BASE}/d5NXSklXo0qyIYkgV94XAgMIckC.jpg"
	assert second.count == 2
	assert second.id == first.id
	assert len(store) == 1


def test_term_variants_share_one_record():
	store = MemoryDocumentStore()
	client = AnalyticsClient(store, IMAGE_BASE)

	async def scenario():
		await client.increment_search("Dune", movie(1, "Dune"))
		await client.increment_search("  dune  ", movie(1, "Dune"))
		return await store.find_by_term("dune")

	record = asyncio.run(scenario())
	assert record.count == 2
	assert len(store) == 1


def test_increment_overwrites_top_result():
	client = AnalyticsClient(MemoryDocumentStore(), IMAGE_BASE)

	async def scenario():
		await client.increment_search("alien", movie(348, "Alien", "/a.jpg"))
		return await client.increment_search("alien", movie(679, "Aliens", None))

	record = asyncio.run(scenario())
	assert record.movie_id == 679
	assert record.poster_url is None


def test_empty_term_is_rejected():
	client = AnalyticsClient(MemoryDocumentStore(), IMAGE_BASE)
	with pytest.raises(AnalyticsWriteError):
		asyncio.run(client.increment_search("   ", movie(1, "x")))


def test_store_failure_becomes_analytics_write_error():
	client = AnalyticsClient(BrokenStore(), IMAGE_BASE)
	with pytest.raises(AnalyticsWriteError):
		asyncio.run(client.increment_search("dune", movie(1, "Dune")))
	with pytest.raises(AnalyticsWriteError):
		asyncio.run(client.get_trending())


def test_trending_returns_top_five_by_descending_count():
	store = MemoryDocumentStore()
	client = AnalyticsClient(store, IMAGE_BASE)
	counts = {"dune": 4, "alien": 9, "heat": 1, "jaws": 7, "up": 2, "her": 5, "it": 3}

	async def scenario():
		for term, count in counts.items():
			await store.create_record(SearchRecord(term=term, count=count, movie_id=count))
		return await client.get_trending()

	entries = asyncio.run(scenario())
	assert len(entries) == 5
	assert [e.term for e in entries] == ["alien", "jaws", "her", "dune", "it"]
	assert [e.rank for e in entries] == [1, 2, 3, 4, 5]
	assert all(a.count > b.count for a, b in zip(entries, entries[1:]))


def test_trending_with_few_records():
	store = MemoryDocumentStore()
	client = AnalyticsClient(store, IMAGE_BASE)

	async def scenario():
		await client.increment_search("dune", movie(1, "Dune", "/d.jpg"))
		return await client.get_trending()

	entries = asyncio.run(scenario())
	assert len(entries) == 1
	assert entries[0].title == "dune"
	assert entries[0].poster_url == f"{IMAGE_BASE}/d.jpg"


def _supabase_with(data):
	client = MagicMock()
	table = client.table.return_value
	response = MagicMock(data=data)
	table.select.return_value.eq.return_value.limit.return_value.execute.return_value = response
	table.select.return_value.order.return_value.limit.return_value.execute.return_value = response
	table.insert.return_value.execute.return_value = response
	table.update.return_value.eq.return_value.execute.return_value = response
	return client, table


def test_supabase_find_by_term_maps_row():
	client, table = _supabase_with([
		{"id": 7, "search_term": "dune", "count": 3, "poster_url": "p", "movie_id": 438631},
	])
	store = SupabaseDocumentStore(client, "search_metrics")

	record = asyncio.run(store.find_by_term("dune"))
	client.table.assert_called_with("search_metrics")
	table.select.return_value.eq.assert_called_with("search_term", "dune")
	assert record == SearchRecord(term="dune", count=3, poster_url="p", movie_id=438631, id="7")


def test_supabase_find_by_term_missing():
	client, _ = _supabase_with([])
	assert asyncio.run(SupabaseDocumentStore(client).find_by_term("nope")) is None


def test_supabase_create_and_update_payloads():
	client, table = _supabase_with([
		{"id": 1, "search_term": "dune", "count": 1, "poster_url": None, "movie_id": 5},
	])
	store = SupabaseDocumentStore(client)

	async def scenario():
		created = await store.create_record(SearchRecord(term="dune", count=1, movie_id=5))
		await store.update_record(SearchRecord(term="dune", count=2, movie_id=5, id=created.id))
		return created

	created = asyncio.run(scenario())
	assert created.id == "1"
	table.insert.assert_called_with({"search_term": "dune", "count": 1, "poster_url": None, "movie_id": 5})
	table.update.assert_called_with({"count": 2, "poster_url": None, "movie_id": 5})
	table.update.return_value.eq.assert_called_with("id", "1")


def test_supabase_list_top_orders_by_count():
	client, table = _supabase_with([
		{"id": 1, "search_term": "alien", "count": 9},
		{"id": 2, "search_term": "dune", "count": 4},
	])
	records = asyncio.run(SupabaseDocumentStore(client).list_top(5))
	table.select.return_value.order.assert_called_with("count", desc=True)
	table.select.return_value.order.return_value.limit.assert_called_with(5)
	assert [r.term for r in records] == ["alien", "dune"]
