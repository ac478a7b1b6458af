"""
Search analytics store.
Counts searches per normalized term in a small document collection and
projects the most searched terms into a trending list.

Only four store operations are consumed: find by term, update, create,
and list the top N by count. Two backends implement them: an in-process
memory store and a Supabase table.
"""

import asyncio  # run the blocking Supabase client off the event loop
import itertools  # id sequence for the memory store
from dataclasses import replace  # copy records without aliasing
from typing import Dict, List, Optional

from loguru import logger  # console logging
from supabase import create_client  # hosted document store

from .errors import AnalyticsWriteError
from .models import Movie, SearchRecord, TrendingEntry


def normalize_term(term: str) -> str:
	"""Lower-case and trim a search term so variants share one record."""
	return (term or "").strip().lower()


class MemoryDocumentStore:
	"""
	Dict-backed collection. Used when no Supabase project is configured and
	in tests. Records are copied in and out so callers never share state.
	"""

	def __init__(self):
		self._records: Dict[str, SearchRecord] = {}  # id -> record, insertion ordered
		self._ids = itertools.count(1)  # string ids, like a hosted table

	async def find_by_term(self, term: str) -> Optional[SearchRecord]:
		for record in self._records.values():  # linear scan, collections stay small
			if record.term == term:
				return replace(record)
		return None

	async def update_record(self, record: SearchRecord) -> SearchRecord:
		if record.id not in self._records:  # updates never create
			raise KeyError(f"no record with id {record.id}")
		self._records[record.id] = replace(record)
		return replace(record)

	async def create_record(self, record: SearchRecord) -> SearchRecord:
		created = replace(record, id=str(next(self._ids)))
		self._records[created.id] = created
		return replace(created)

	async def list_top(self, limit: int) -> List[SearchRecord]:
		ranked = sorted(self._records.values(), key=lambda r: r.count, reverse=True)
		return [replace(r) for r in ranked[:limit]]

	def __len__(self) -> int:
		return len(self._records)


class SupabaseDocumentStore:
	"""
	Supabase table backend. Expected columns:
	id, search_term, count, poster_url, movie_id.
	"""

	def __init__(self, client, table: str = "search_metrics"):
		self._client = client  # supabase.Client
		self.table_name = table  # collection name

	@classmethod
	def connect(cls, url: str, key: str, table: str = "search_metrics") -> "SupabaseDocumentStore":
		return cls(create_client(url, key), table)

	def _table(self):
		return self._client.table(self.table_name)

	async def find_by_term(self, term: str) -> Optional[SearchRecord]:
		resp = await asyncio.to_thread(
			lambda: self._table().select("*").eq("search_term", term).limit(1).execute()
		)
		rows = resp.data or []  # PostgREST returns a list of rows
		return _row_to_record(rows[0]) if rows else None

	async def update_record(self, record: SearchRecord) -> SearchRecord:
		values = {"count": record.count, "poster_url": record.poster_url, "movie_id": record.movie_id}
		await asyncio.to_thread(
			lambda: self._table().update(values).eq("id", record.id).execute()
		)
		return record

	async def create_record(self, record: SearchRecord) -> SearchRecord:
		values = {
			"search_term": record.term,
			"count": record.count,
			"poster_url": record.poster_url,
			"movie_id": record.movie_id,
		}
		resp = await asyncio.to_thread(lambda: self._table().insert(values).execute())
		rows = resp.data or []  # PostgREST returns a list of rows
		return _row_to_record(rows[0]) if rows else record

	async def list_top(self, limit: int) -> List[SearchRecord]:
		resp = await asyncio.to_thread(
			lambda: self._table().select("*").order("count", desc=True).limit(limit).execute()
		)
		return [_row_to_record(row) for row in resp.data or []]


def _row_to_record(row: dict) -> SearchRecord:
	return SearchRecord(
		term=row.get("search_term", ""),
		count=int(row.get("count") or 0),
		poster_url=row.get("poster_url"),
		movie_id=row.get("movie_id"),
		id=None if row.get("id") is None else str(row["id"]),
	)


class AnalyticsClient:
	"""
	Per-term search counter on top of a document store.

	increment_search is a plain read-then-write with no isolation: two
	concurrent increments for a brand-new term can both insert.
	"""

	def __init__(self, store, image_base_url: str):
		self.store = store  # Memory or Supabase backend
		self.image_base_url = image_base_url.rstrip("/")  # poster host prefix

	def poster_url(self, movie: Movie) -> Optional[str]:
		if not movie.poster_path:
			return None
		return f"{self.image_base_url}/{movie.poster_path.lstrip('/')}"

	async def increment_search(self, term: str, movie: Movie) -> SearchRecord:
		"""Bump the count for `term`, recording `movie` as its top result."""
		key = normalize_term(term)  # one record per normalized term
		if not key:
			raise AnalyticsWriteError("cannot record an empty search term")

		try:
			existing = await self.store.find_by_term(key)
			if existing is not None:  # bump and refresh the top result
				updated = replace(
					existing,
					count=existing.count + 1,
					poster_url=self.poster_url(movie),
					movie_id=movie.id,
				)
				record = await self.store.update_record(updated)
			else:  # first search for this term
				record = await self.store.create_record(
					SearchRecord(term=key, count=1, poster_url=self.poster_url(movie), movie_id=movie.id)
				)
		except Exception as e:
			raise AnalyticsWriteError(f"failed to record search '{key}': {e}") from e

		logger.debug(f"[Analytics] '{key}' count={record.count}")
		return record

	async def get_trending(self, limit: int = 5) -> List[TrendingEntry]:
		"""Top `limit` terms by descending count, ranked from 1."""
		try:
			records = await self.store.list_top(limit)
		except Exception as e:
			raise AnalyticsWriteError(f"failed to list trending searches: {e}") from e

		# Order is enforced here whatever the backend returns
		records = sorted(records, key=lambda r: r.count, reverse=True)[:limit]
		return [
			TrendingEntry(rank=i, term=r.term, poster_url=r.poster_url, movie_id=r.movie_id, count=r.count)
			for i, r in enumerate(records, start=1)
		]
