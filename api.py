"""
FastAPI server for CineFind.
Endpoints:
- GET /: the browser page (search box, trending list, results)
- GET /health: basic health check
- GET /movies?query=...: one fetch cycle (discover when query is empty)
- GET /trending: the most searched terms
- WS /ws: live session; the client sends keystrokes, the server pushes
  rendered fragments after every state change

Startup reads settings from the environment; a missing TMDB_API_KEY
aborts startup.
"""

# Standard libraries for the websocket fan-out and timing
import asyncio  # queue between session callbacks and the socket writer
import json  # decode websocket frames ourselves to survive bad ones
import time  # measure request latencies
from typing import List, Optional  # precise typing for clarity

# HTTP client shared by every catalog call
import httpx  # async HTTP client

# Import FastAPI for building the web API and Pydantic for response models
from fastapi import FastAPI, Query, WebSocket, WebSocketDisconnect  # FastAPI primitives
from fastapi.responses import HTMLResponse  # page endpoint
from pydantic import BaseModel  # response schema definitions

# Import our internal modules
from cinefind.analytics_store import AnalyticsClient, MemoryDocumentStore, SupabaseDocumentStore
from cinefind.catalog_client import CatalogClient
from cinefind.config import Settings, load_settings
from cinefind.models import FetchResultState
from cinefind.orchestrator import FetchOrchestrator
from cinefind.presentation import movie_to_dict, render_page, render_view, trending_to_dict
from cinefind.session import SearchSession, SessionView
from cinefind.trending import TrendingLoader

# Import loguru for simple, structured console logging
from loguru import logger  # convenient console logger

# Instantiate the FastAPI application with metadata
app = FastAPI(title="CineFind API", version="1.0.0")  # web app

# Globals set up once at startup and shared by all requests
SETTINGS: Optional[Settings] = None  # parsed configuration
CATALOG: Optional[CatalogClient] = None  # metadata service client
ANALYTICS: Optional[AnalyticsClient] = None  # search counter
HTTP_CLIENT: Optional[httpx.AsyncClient] = None  # pooled connections
BACKGROUND: set = set()  # analytics writes still running after their response went out


# Pydantic model that describes the shape of a single movie in responses
class MovieOut(BaseModel):
	id: Optional[int] = None  # catalog id, missing on some entries
	title: str  # display title
	poster_path: Optional[str] = None  # relative poster path
	poster_url: str  # absolute poster URL (or placeholder)
	vote_average: Optional[float] = None  # 0-10 rating
	release_date: Optional[str] = None  # yyyy-mm-dd
	original_language: Optional[str] = None  # language code


# Pydantic model for the result of one fetch cycle
class MoviesResponse(BaseModel):
	query: str  # settled term that was queried
	status: str  # success | error
	error_message: Optional[str] = None  # user-facing error text
	elapsed_ms: float  # server-side fetch time in ms
	results: List[MovieOut]  # movies in service order


# Pydantic model for one trending entry
class TrendingOut(BaseModel):
	rank: int  # 1-based position
	term: str  # normalized search term
	poster_url: Optional[str] = None  # poster of its top result
	movie_id: Optional[int] = None  # id of its top result
	count: int  # number of recorded searches


def build_analytics(settings: Settings) -> AnalyticsClient:
	"""Pick the analytics backend from settings."""
	if settings.use_supabase:
		logger.info(f"[API] Analytics store: Supabase table '{settings.supabase_table}'")
		store = SupabaseDocumentStore.connect(settings.supabase_url, settings.supabase_key, settings.supabase_table)
	else:
		logger.warning("[API] SUPABASE_URL/SUPABASE_KEY not set; search analytics kept in memory")
		store = MemoryDocumentStore()
	return AnalyticsClient(store, settings.tmdb_image_base_url)


# FastAPI startup hook to build the shared clients once
@app.on_event("startup")
async def startup_event():
	"""Load settings and create the catalog and analytics clients."""
	global SETTINGS, CATALOG, ANALYTICS, HTTP_CLIENT  # refer to module-level globals
	SETTINGS = load_settings()  # ConfigError here is fatal
	HTTP_CLIENT = httpx.AsyncClient(timeout=SETTINGS.http_timeout_s)  # shared pool
	CATALOG = CatalogClient(SETTINGS.tmdb_api_base_url, SETTINGS.tmdb_api_key, client=HTTP_CLIENT)
	ANALYTICS = build_analytics(SETTINGS)
	logger.info(f"[API] Startup complete. Catalog at {SETTINGS.tmdb_api_base_url}")


# FastAPI shutdown hook to release pooled connections
@app.on_event("shutdown")
async def shutdown_event():
	if BACKGROUND:
		await asyncio.gather(*list(BACKGROUND))
	if HTTP_CLIENT is not None:
		await HTTP_CLIENT.aclose()


def _image_base() -> str:
	return SETTINGS.tmdb_image_base_url if SETTINGS else "https://image.tmdb.org/t/p/w500"


@app.get("/", response_class=HTMLResponse)
async def index():
	"""Serve the page; the websocket fills in trending and results."""
	return render_page(None, _image_base())


# Simple health endpoint for readiness checks
@app.get("/health")
async def health():
	"""Return minimal health info for liveness/readiness probes."""
	return {
		"status": "ok",  # constant indicator
		"catalog_ready": CATALOG is not None,  # True once startup ran
		"analytics_ready": ANALYTICS is not None,
	}


@app.get("/movies", response_model=MoviesResponse)
async def movies(query: str = Query("", description="Search term; empty browses by popularity")):
	"""Run one fetch cycle and return its final state."""
	start = time.time()  # start timer
	logger.debug(f"[API] /movies query='{query}'")  # debug log of input

	# Each request is its own cycle, so no generation juggling is needed
	orchestrator = FetchOrchestrator(CATALOG, ANALYTICS)
	state: FetchResultState = await orchestrator.run_query(query)
	pending = asyncio.create_task(orchestrator.drain())  # keep analytics alive past the response
	BACKGROUND.add(pending)
	pending.add_done_callback(BACKGROUND.discard)
	elapsed_ms = (time.time() - start) * 1000  # compute ms
	logger.info(f"[API] /movies served {len(state.movies)} results in {elapsed_ms:.2f} ms")  # summary

	return MoviesResponse(
		query=query,
		status=state.status.value,
		error_message=state.error_message,
		elapsed_ms=round(elapsed_ms, 2),
		results=[MovieOut(**movie_to_dict(m, _image_base())) for m in state.movies],
	)


@app.get("/trending", response_model=List[TrendingOut])
async def trending():
	"""Most searched terms; empty when the analytics store is unavailable."""
	limit = SETTINGS.trending_limit if SETTINGS else 5
	entries = await TrendingLoader(ANALYTICS, limit).load()
	return [TrendingOut(**trending_to_dict(e)) for e in entries]


@app.websocket("/ws")
async def live_search(websocket: WebSocket):
	"""One SearchSession per connected page."""
	await websocket.accept()
	frames: "asyncio.Queue[SessionView]" = asyncio.Queue()  # views waiting to be sent

	session = SearchSession(
		CATALOG,
		ANALYTICS,
		debounce_s=SETTINGS.debounce_s if SETTINGS else 1.0,
		trending_limit=SETTINGS.trending_limit if SETTINGS else 5,
		on_change=frames.put_nowait,
	)

	async def send_frames():
		try:
			while True:
				view = await frames.get()
				await websocket.send_json(render_view(view, _image_base()))
		except (WebSocketDisconnect, RuntimeError) as e:
			logger.debug(f"[API] stopped pushing frames: {e!r}")

	sender = asyncio.create_task(send_frames())
	starter = asyncio.create_task(session.start())
	try:
		while True:
			raw = await websocket.receive_text()  # one keystroke per frame
			try:
				message = json.loads(raw)  # {"term": "..."}
			except ValueError:
				logger.warning(f"[API] ignoring malformed websocket frame: {raw[:80]!r}")
				continue
			if isinstance(message, dict):
				session.keystroke(str(message.get("term", "")))
	except WebSocketDisconnect:
		logger.debug("[API] websocket disconnected")
	finally:
		await starter
		await session.close()
		sender.cancel()
