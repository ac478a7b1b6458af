"""
Error taxonomy.
Fetch-path errors are converted to UI state by the orchestrator; analytics
errors are logged and swallowed at their own boundary.
"""

from typing import Optional


class CineFindError(Exception):
	"""Base class for every error raised by this package."""


class ConfigError(CineFindError):
	"""Required configuration is missing or invalid. Fatal at startup."""


class CatalogError(CineFindError):
	"""The movie metadata service could not deliver a result list."""


class TransportError(CatalogError):
	"""Non-success HTTP status (or no response at all) from the metadata service."""

	def __init__(self, status_code: Optional[int], detail: str = ""):
		self.status_code = status_code  # None when the request never got a response
		self.detail = detail
		super().__init__(f"HTTP error! status: {status_code} {detail}".strip())


class MalformedResponseError(CatalogError):
	"""The service answered 2xx but the body is not a JSON object."""


class ServiceError(CatalogError):
	"""HTTP success, but the payload itself flags a failure."""

	DEFAULT_MESSAGE = "Failed to fetch movies"

	def __init__(self, message: Optional[str] = None):
		self.message = message or self.DEFAULT_MESSAGE
		super().__init__(self.message)


class AnalyticsWriteError(CineFindError):
	"""Reading from or writing to the analytics store failed."""
