"""
Hand-written collaborators shared by the tests.
"""

import asyncio

from cinefind.errors import AnalyticsWriteError
from cinefind.models import Movie

IMAGE_BASE = "https://image.example.test/t/p/w500"


def movie(movie_id, title, poster_path=None, **extra):
	return Movie(id=movie_id, title=title, poster_path=poster_path, **extra)


class FakeCatalog:
	"""Returns canned results per term and records which mode was used."""

	def __init__(self, results=None, error=None):
		self.results = results or {}
		self.error = error
		self.calls = []

	async def fetch_movies(self, term):
		self.calls.append(("search", term) if term else ("discover", None))
		if self.error is not None:
			raise self.error
		return list(self.results.get(term, []))


class GatedCatalog:
	"""Each term's fetch blocks until the test opens its gate."""

	def __init__(self, results):
		self.results = results
		self.gates = {}

	def gate(self, term):
		return self.gates.setdefault(term, asyncio.Event())

	async def fetch_movies(self, term):
		await self.gate(term).wait()
		return list(self.results[term])


class RecordingAnalytics:
	def __init__(self, fail=False):
		self.fail = fail
		self.increments = []

	async def increment_search(self, term, top):
		self.increments.append((term, top.id))
		if self.fail:
			raise AnalyticsWriteError("store unreachable")

	async def get_trending(self, limit=5):
		if self.fail:
			raise AnalyticsWriteError("store unreachable")
		return []


class BrokenStore:
	"""Document store whose every call fails like a dropped connection."""

	async def find_by_term(self, term):
		raise ConnectionError("store down")

	async def update_record(self, record):
		raise ConnectionError("store down")

	async def create_record(self, record):
		raise ConnectionError("store down")

	async def list_top(self, limit):
		raise ConnectionError("store down")
