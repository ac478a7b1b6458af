"""
Trending loader.
Pulls the most searched terms from the analytics client for display.
"""

from typing import List  # type hints

from loguru import logger  # console logging

from .models import TrendingEntry  # ranked projection


class TrendingLoader:
	def __init__(self, analytics, limit: int = 5):
		self.analytics = analytics  # AnalyticsClient-like, may be None
		self.limit = limit  # top-N size
		self.entries: List[TrendingEntry] = []  # result of the last load

	async def load(self) -> List[TrendingEntry]:
		"""
		Recompute the trending list. Any failure means "no trending data":
		it is logged and an empty list is returned.
		"""
		if self.analytics is None:  # no store configured
			self.entries = []
			return []
		try:
			self.entries = await self.analytics.get_trending(self.limit)  # full recompute
		except Exception as e:  # treated as "no trending data"
			logger.error(f"[Trending] error fetching trending movies: {e!r}")
			self.entries = []
		else:
			logger.debug(f"[Trending] loaded {len(self.entries)} entries")
		return list(self.entries)
