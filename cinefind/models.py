"""
Data models for CineFind.
Defines the state records passed between the query controller, the fetch
orchestrator, the analytics client and the presentation layer.
"""

# Import dataclass to define simple "record-like" classes without boilerplate
from dataclasses import dataclass, field  # auto-generates __init__, __repr__, etc.
# Enum for the fetch lifecycle
from enum import Enum  # closed set of states
# Import typing helpers for precise and self-documenting types
from typing import Any, Dict, List, Optional  # lists, dicts and optional values


@dataclass
class QueryState:
	"""
	What the user typed versus what is stable enough to query.
	raw_term follows every keystroke; settled_term only moves after the idle window.
	"""
	raw_term: str = ""  # latest keystroke value
	settled_term: str = ""  # last value emitted by the debouncer


@dataclass(frozen=True)
class Movie:
	"""
	A movie as returned by the catalog service. Read-only; replaced wholesale
	on every fetch.
	"""
	id: int  # catalog id
	title: str  # display title
	poster_path: Optional[str] = None  # relative poster path, e.g. "/abc.jpg"
	vote_average: Optional[float] = None  # 0-10 rating
	release_date: Optional[str] = None  # yyyy-mm-dd, may be empty
	original_language: Optional[str] = None  # ISO 639-1 code
	raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)  # untouched payload

	@classmethod
	def from_api(cls, payload: Dict[str, Any]) -> "Movie":
		"""Build a Movie from one entry of the service's `results` array."""
		return cls(
			id=payload.get("id"),
			title=payload.get("title") or payload.get("name") or "",
			poster_path=payload.get("poster_path"),
			vote_average=payload.get("vote_average"),
			release_date=payload.get("release_date"),
			original_language=payload.get("original_language"),
			raw=dict(payload),
		)

	@property
	def year(self) -> Optional[str]:
		if not self.release_date:
			return None
		return self.release_date.split("-")[0] or None


class FetchStatus(str, Enum):
	IDLE = "idle"
	LOADING = "loading"
	SUCCESS = "success"
	ERROR = "error"


@dataclass
class FetchResultState:
	"""
	Outcome of the latest fetch cycle. Only the orchestrator writes it.
	"""
	status: FetchStatus = FetchStatus.IDLE  # lifecycle position
	movies: List[Movie] = field(default_factory=list)  # never None
	error_message: Optional[str] = None  # user-facing text when status is ERROR
	term: str = ""  # settled term this state belongs to
	generation: int = 0  # token of the call that produced this state

	@property
	def is_loading(self) -> bool:
		return self.status is FetchStatus.LOADING


@dataclass
class SearchRecord:
	"""
	Analytics document: one per normalized search term.
	"""
	term: str  # normalized (lower-cased, trimmed) search term
	count: int  # number of searches that returned results
	poster_url: Optional[str] = None  # poster of the top result at last increment
	movie_id: Optional[int] = None  # id of the top result at last increment
	id: Optional[str] = None  # store-assigned document id


@dataclass(frozen=True)
class TrendingEntry:
	"""
	Ranked projection of a SearchRecord for display.
	"""
	rank: int  # 1-based position
	term: str  # the search term that trended
	poster_url: Optional[str]  # poster to display
	movie_id: Optional[int]  # top movie for that term
	count: int  # how many times it was searched

	@property
	def title(self) -> str:
		return self.term
