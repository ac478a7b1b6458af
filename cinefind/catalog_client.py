"""
Remote catalog client.
Read-only queries against the movie metadata service: text search and
popularity-sorted discovery.
"""

from typing import Any, Dict, List, Optional  # type hints

import httpx  # async HTTP client

from loguru import logger  # console logging

from .errors import MalformedResponseError, ServiceError, TransportError  # failure classes
from .models import Movie  # parsed result entries


class CatalogClient:
	"""
	Thin async wrapper around the metadata service.
	Every call is a single GET with bearer authorization; `results` is
	returned as a list of Movie. Zero results is a success, not an error.
	"""

	DISCOVER_PATH = "/discover/movie"  # popularity browse
	SEARCH_PATH = "/search/movie"  # text search

	def __init__(
		self,
		base_url: str,  # e.g. https://api.themoviedb.org/3
		api_key: str,  # bearer token
		client: Optional[httpx.AsyncClient] = None,  # shared client, if any
		timeout: float = 10.0,  # seconds, only for an owned client
	):
		self.base_url = base_url.rstrip("/")  # paths start with a slash
		self.headers = {
			"Accept": "application/json",
			"Authorization": f"Bearer {api_key}",
		}
		# Reuse a caller-provided client (tests, shared app client) or own one
		self._owns_client = client is None
		self.client = client or httpx.AsyncClient(timeout=timeout)

	async def discover(self) -> List[Movie]:
		"""Catalog browse sorted by descending popularity."""
		return await self._get_results(self.DISCOVER_PATH, {"sort_by": "popularity.desc"})

	async def search(self, term: str) -> List[Movie]:
		"""Text search; the term is URL-encoded by httpx."""
		return await self._get_results(self.SEARCH_PATH, {"query": term})

	async def fetch_movies(self, term: str) -> List[Movie]:
		"""Search when a term is given, otherwise discover."""
		if term:  # any non-empty term is a text search
			return await self.search(term)
		return await self.discover()

	async def aclose(self) -> None:
		if self._owns_client:  # never close a shared client
			await self.client.aclose()

	async def _get_results(self, path: str, params: Dict[str, str]) -> List[Movie]:
		url = f"{self.base_url}{path}"  # absolute endpoint
		logger.debug(f"[Catalog] GET {path} params={params}")

		try:
			response = await self.client.get(url, params=params, headers=self.headers)
		except httpx.HTTPError as e:  # no response at all (DNS, connect, timeout)
			logger.warning(f"[Catalog] Request to {path} failed: {e!r}")
			raise TransportError(None, str(e)) from e

		if not response.is_success:  # non-2xx status
			logger.warning(f"[Catalog] {path} answered HTTP {response.status_code}")
			raise TransportError(response.status_code)

		try:
			payload = response.json()  # decode body
		except ValueError as e:
			raise MalformedResponseError(f"{path} returned a non-JSON body") from e
		if not isinstance(payload, dict):  # arrays and scalars are not a result page
			raise MalformedResponseError(f"{path} returned {type(payload).__name__}, expected an object")

		if _flags_failure(payload):  # 2xx but the payload says it failed
			raise ServiceError(payload.get("error"))

		results = payload.get("results") or []  # missing means zero results
		logger.debug(f"[Catalog] {path} returned {len(results)} results")
		return [Movie.from_api(item) for item in results if isinstance(item, dict)]


def _flags_failure(payload: Dict[str, Any]) -> bool:
	# Some upstreams send the flag as a string
	flag = payload.get("response")
	if flag is False:
		return True
	return isinstance(flag, str) and flag.strip().lower() == "false"
