"""
Debounce module.
Turns a stream of raw keystroke values into settled search terms.
"""

import asyncio  # event loop timers
from typing import Any, Callable, Optional  # type hints

from loguru import logger  # console logging

from .models import QueryState  # raw vs settled term


class Debouncer:
	"""
	Trailing-edge debounce on the running event loop.

	Each push cancels the pending timer and schedules a new one, so at most
	one timer is live. When the timer fires, the callback receives the most
	recent value exactly once. Nothing fires after cancel() or close().
	"""

	def __init__(self, callback: Callable[[Any], None], delay_s: float):
		self.callback = callback  # receives the settled value
		self.delay_s = delay_s  # idle window in seconds
		self._handle: Optional[asyncio.TimerHandle] = None  # the one live timer
		self._value: Any = None  # latest pushed value
		self._closed = False  # set by close()

	@property
	def pending(self) -> bool:
		return self._handle is not None

	def push(self, value: Any) -> None:
		if self._closed:  # torn down
			return
		self.cancel()  # reset the window
		self._value = value  # only the latest value survives
		loop = asyncio.get_running_loop()  # timers live on the running loop
		self._handle = loop.call_later(self.delay_s, self._fire)  # reschedule

	def cancel(self) -> None:
		if self._handle is not None:
			self._handle.cancel()
			self._handle = None

	def close(self) -> None:
		self.cancel()
		self._closed = True

	def _fire(self) -> None:
		self._handle = None  # nothing pending any more
		if self._closed:
			return
		self.callback(self._value)  # trailing edge


class QueryController:
	"""
	Owns the QueryState of one UI session.
	update() records the raw term immediately; on_settled is called with the
	settled term once typing has paused, and only when it actually changed.
	"""

	def __init__(self, on_settled: Callable[[str], None], delay_s: float = 1.0):
		self.state = QueryState()  # both terms start empty
		self.on_settled = on_settled  # called with each new settled term
		self._debouncer = Debouncer(self._settle, delay_s)  # single timer

	def update(self, raw_term: str) -> None:
		self.state.raw_term = raw_term  # synchronous
		self._debouncer.push(raw_term)  # settles later

	def close(self) -> None:
		self._debouncer.close()

	@property
	def pending(self) -> bool:
		return self._debouncer.pending

	def _settle(self, term: str) -> None:
		if term == self.state.settled_term:  # nothing changed, nothing to fetch
			return
		self.state.settled_term = term
		logger.debug(f"[Query] settled on '{term}'")
		self.on_settled(term)
