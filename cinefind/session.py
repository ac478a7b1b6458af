"""
Search session.
Wires one query controller, one fetch orchestrator and one trending loader
together for the lifetime of a single UI connection.
"""

import asyncio  # spawn fetches from debouncer callbacks
from dataclasses import dataclass  # view snapshot
from typing import Callable, List, Optional, Set  # type hints

from loguru import logger  # console logging

from .debounce import QueryController  # keystrokes -> settled term
from .models import FetchResultState, QueryState, TrendingEntry  # state records
from .orchestrator import FetchOrchestrator  # settled term -> movies
from .trending import TrendingLoader  # analytics -> trending list


@dataclass
class SessionView:
	"""Everything the presentation layer needs to draw one frame."""
	query: QueryState  # raw and settled search term
	fetch: FetchResultState  # latest fetch outcome
	trending: List[TrendingEntry]  # ranked most-searched terms


class SearchSession:
	"""
	Created when a client connects, closed when it leaves.
	on_change is called with a fresh SessionView after every state change.
	"""

	def __init__(
		self,
		catalog,  # CatalogClient-like: fetch_movies(term)
		analytics=None,  # AnalyticsClient-like, optional
		debounce_s: float = 1.0,  # idle window before a term settles
		trending_limit: int = 5,  # size of the trending list
		on_change: Optional[Callable[[SessionView], None]] = None,  # frame sink
	):
		self.on_change = on_change  # called after every state change
		self.query = QueryController(self._on_settled, debounce_s)  # owns QueryState
		self.orchestrator = FetchOrchestrator(catalog, analytics, on_change=lambda _state: self._notify())  # owns FetchResultState
		self.trending = TrendingLoader(analytics, trending_limit)  # owns the trending list
		self._fetches: Set[asyncio.Task] = set()  # fetches started by the debouncer
		self._closed = False  # set once by close()

	async def start(self) -> SessionView:
		"""
		Load trending and run the initial (empty term) discover query.
		Both start together so a slow analytics store never holds back the movie list.
		"""
		await asyncio.gather(
			self._load_trending(),  # best effort, never raises
			self.orchestrator.run_query(self.query.state.settled_term),  # discover mode
		)
		return self.view()

	def keystroke(self, raw_term: str) -> None:
		"""Forward one keystroke."""
		if self._closed:  # no emissions after teardown
			return
		self.query.update(raw_term)  # debounced; may settle later

	def view(self) -> SessionView:
		# Copies, so frames already handed out never change underneath the caller
		return SessionView(
			query=QueryState(self.query.state.raw_term, self.query.state.settled_term),
			fetch=self.orchestrator.state,
			trending=list(self.trending.entries),
		)

	async def wait_idle(self) -> None:
		"""Wait for in-flight fetches and analytics writes."""
		while self._fetches:  # the set can change while we wait
			await asyncio.gather(*list(self._fetches))
		await self.orchestrator.drain()  # detached analytics tasks

	async def close(self) -> None:
		if self._closed:  # idempotent
			return
		self._closed = True
		self.query.close()  # drops any pending debounce emission
		await self.wait_idle()
		logger.debug("[Session] closed")

	async def _load_trending(self) -> None:
		await self.trending.load()  # failures already mapped to []
		self._notify()  # trending arrives in its own frame

	def _on_settled(self, term: str) -> None:
		if self._closed:
			return
		task = asyncio.get_running_loop().create_task(self.orchestrator.run_query(term))  # not awaited: timer callback
		self._fetches.add(task)  # keep a reference until done
		task.add_done_callback(self._fetches.discard)

	def _notify(self) -> None:
		if self.on_change is None or self._closed:
			return
		self.on_change(self.view())  # push a fresh snapshot
