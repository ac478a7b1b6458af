"""
Presentation layer.
Pure functions from state to HTML (for the browser page) and to plain dicts
(for JSON consumers). No I/O and no state of their own.
"""

from html import escape  # all user and catalog text is escaped
from typing import Any, Dict, List, Optional

from .models import FetchResultState, FetchStatus, Movie, TrendingEntry
from .session import SessionView

NO_POSTER_URL = "/no-movie.png"


def poster_url(movie: Movie, image_base_url: str) -> str:
	if not movie.poster_path:
		return NO_POSTER_URL
	return f"{image_base_url.rstrip('/')}/{movie.poster_path.lstrip('/')}"


def format_rating(movie: Movie) -> str:
	if not movie.vote_average:
		return "N/A"
	return f"{float(movie.vote_average):.1f}"


def movie_to_dict(movie: Movie, image_base_url: str) -> Dict[str, Any]:
	return {
		"id": movie.id,
		"title": movie.title,
		"poster_path": movie.poster_path,
		"poster_url": poster_url(movie, image_base_url),
		"vote_average": movie.vote_average,
		"release_date": movie.release_date,
		"original_language": movie.original_language,
	}


def trending_to_dict(entry: TrendingEntry) -> Dict[str, Any]:
	return {
		"rank": entry.rank,
		"term": entry.term,
		"poster_url": entry.poster_url,
		"movie_id": entry.movie_id,
		"count": entry.count,
	}


def render_search_box(raw_term: str) -> str:
	return (
		'<div class="search">'
		'<img src="/search.svg" alt="search" />'
		f'<input id="search" type="text" placeholder="Search through thousands of movies" value="{escape(raw_term)}" />'
		"</div>"
	)


def render_trending(entries: List[TrendingEntry]) -> str:
	"""Ranked posters; nothing at all when there is no trending data."""
	if not entries:
		return ""
	items = "".join(
		f'<li><p>{entry.rank}</p><img src="{escape(entry.poster_url or NO_POSTER_URL)}" alt="{escape(entry.title)}" /></li>'
		for entry in entries
	)
	return f'<section class="trending"><h2>Trending Movies</h2><ul>{items}</ul></section>'


def render_movie_card(movie: Movie, image_base_url: str) -> str:
	language = escape(movie.original_language or "")
	return (
		'<li class="movie-card">'
		f'<img src="{escape(poster_url(movie, image_base_url))}" alt="{escape(movie.title)}" />'
		'<div class="mt-4">'
		f"<h3>{escape(movie.title)}</h3>"
		'<div class="content">'
		f'<div class="rating"><img src="/star.svg" alt="Star Icon" /><p>{format_rating(movie)}</p></div>'
		'<span>&bull;</span>'
		f'<p class="lang">{language}</p>'
		'<span>&bull;</span>'
		f'<p class="year">{escape(movie.year or "N/A")}</p>'
		"</div></div></li>"
	)


def render_results(state: FetchResultState, image_base_url: str) -> str:
	"""Spinner while loading, the error text on failure, else the card list."""
	if state.status is FetchStatus.LOADING:
		body = '<div class="spinner" role="status"><span>Loading...</span></div>'
	elif state.status is FetchStatus.ERROR:
		body = f'<p class="text-red-500">{escape(state.error_message or "")}</p>'
	else:
		body = "<ul>" + "".join(render_movie_card(m, image_base_url) for m in state.movies) + "</ul>"
	return f'<section class="all-movies"><h2>All Movies</h2>{body}</section>'


def render_view(view: SessionView, image_base_url: str) -> Dict[str, str]:
	"""The fragments the page swaps in after a state change."""
	return {
		"trending": render_trending(view.trending),
		"results": render_results(view.fetch, image_base_url),
	}


_PAGE_SCRIPT = """
const socket = new WebSocket(`${location.protocol === "https:" ? "wss" : "ws"}://${location.host}/ws`);
socket.onmessage = (event) => {
  const frame = JSON.parse(event.data);
  document.getElementById("trending").innerHTML = frame.trending;
  document.getElementById("results").innerHTML = frame.results;
};
document.getElementById("search").addEventListener("input", (event) => {
  if (socket.readyState === WebSocket.OPEN) {
    socket.send(JSON.stringify({ term: event.target.value }));
  }
});
"""


def render_page(view: Optional[SessionView], image_base_url: str) -> str:
	"""Full document; fragments are empty until the socket delivers a frame."""
	frame = render_view(view, image_base_url) if view is not None else {"trending": "", "results": ""}
	raw_term = view.query.raw_term if view is not None else ""
	return (
		"<!doctype html><html><head><meta charset=\"utf-8\" /><title>CineFind</title></head>"
		'<body><main><div class="pattern"></div><div class="wrapper">'
		'<header><img src="/hero.png" alt="Hero Banner" />'
		"<h1>Find <span class=\"text-gradient\">Movies</span> You'll Enjoy Without the Hassle</h1>"
		f"{render_search_box(raw_term)}</header>"
		f'<div id="trending">{frame["trending"]}</div>'
		f'<div id="results">{frame["results"]}</div>'
		f"</div></main><script>{_PAGE_SCRIPT}</script></body></html>"
	)
