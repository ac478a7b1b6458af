"""
Fetch orchestrator.
Drives the catalog client for a settled term, keeps the loading/error/result
state, and records search analytics as a detached task.
"""

import asyncio  # detached analytics tasks
from dataclasses import replace  # state snapshots
from typing import Callable, Optional, Set

from loguru import logger  # console logging

from .errors import ServiceError
from .models import FetchResultState, FetchStatus, Movie

GENERIC_ERROR_MESSAGE = "Failed to fetch movies. Please try again later."


class FetchOrchestrator:
	"""
	Runs one query per settled-term change.

	Calls may overlap. Each call takes a generation token and only the call
	holding the latest token may write state; late completions of older calls
	are dropped.
	"""

	def __init__(
		self,
		catalog,  # source of movies
		analytics=None,  # search counter, optional
		on_change: Optional[Callable[[FetchResultState], None]] = None,  # state listener
	):
		self.catalog = catalog  # CatalogClient-like: fetch_movies(term)
		self.analytics = analytics  # AnalyticsClient-like, optional
		self.on_change = on_change  # notified after every transition
		self._state = FetchResultState()  # starts Idle
		self._generation = 0  # token of the most recent call
		self._tasks: Set[asyncio.Task] = set()  # detached analytics writes

	@property
	def state(self) -> FetchResultState:
		return replace(self._state, movies=list(self._state.movies))  # snapshot, not a live reference

	async def run_query(self, term: str) -> FetchResultState:
		"""Fetch movies for `term` (discover mode when empty) and return the state."""
		self._generation += 1  # newest call wins
		generation = self._generation  # this call's token
		self._set(FetchResultState(status=FetchStatus.LOADING, term=term, generation=generation))  # clears movies and error

		try:
			movies = await self.catalog.fetch_movies(term)  # search or discover
		except ServiceError as e:  # payload-level failure: its message is shown
			logger.warning(f"[Orchestrator] service reported failure for '{term}': {e.message}")
			outcome = FetchResultState(FetchStatus.ERROR, [], e.message, term, generation)
		except Exception as e:  # transport, malformed body or anything else: generic text
			logger.error(f"[Orchestrator] error fetching movies for '{term}': {e!r}")
			outcome = FetchResultState(FetchStatus.ERROR, [], GENERIC_ERROR_MESSAGE, term, generation)
		else:
			outcome = FetchResultState(FetchStatus.SUCCESS, list(movies), None, term, generation)
			if term and movies:  # searches with results feed analytics
				self._record_search(term, movies[0])

		if generation != self._generation:  # a newer call owns the state now
			logger.debug(f"[Orchestrator] dropping stale result for '{term}' (gen {generation} < {self._generation})")
			return self.state

		self._set(outcome)  # leaves Loading
		return self.state

	async def drain(self) -> None:
		"""Wait for outstanding analytics writes."""
		while self._tasks:
			await asyncio.gather(*list(self._tasks))

	def _set(self, state: FetchResultState) -> None:
		self._state = state
		if self.on_change is not None:
			self.on_change(self.state)

	def _record_search(self, term: str, top: Movie) -> None:
		if self.analytics is None:  # analytics disabled
			return
		task = asyncio.create_task(self._increment(term, top))
		self._tasks.add(task)  # keep a reference until done
		task.add_done_callback(self._tasks.discard)

	async def _increment(self, term: str, top: Movie) -> None:
		# Analytics is best effort and never reaches the fetch state
		try:
			await self.analytics.increment_search(term, top)
		except Exception as e:
			logger.warning(f"[Orchestrator] analytics update for '{term}' failed: {e!r}")
