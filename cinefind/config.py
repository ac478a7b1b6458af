"""
Configuration module.
Reads settings from the environment (optionally seeded from a .env file).
"""

import os  # environment access
from dataclasses import dataclass  # immutable settings record
from pathlib import Path  # locate the project .env
from typing import Mapping, Optional

from dotenv import load_dotenv  # .env support for local runs

from .errors import ConfigError

# .env lives at the project root, next to api.py
PROJECT_ROOT = Path(__file__).resolve().parent.parent

DEFAULT_API_BASE_URL = "https://api.themoviedb.org/3"
DEFAULT_IMAGE_BASE_URL = "https://image.tmdb.org/t/p/w500"
DEFAULT_SUPABASE_TABLE = "search_metrics"


@dataclass(frozen=True)
class Settings:
	tmdb_api_key: str  # bearer token for the metadata service
	tmdb_api_base_url: str = DEFAULT_API_BASE_URL
	tmdb_image_base_url: str = DEFAULT_IMAGE_BASE_URL
	debounce_ms: int = 1000  # idle window before a search term settles
	trending_limit: int = 5  # size of the trending list
	http_timeout_s: float = 10.0
	supabase_url: Optional[str] = None
	supabase_key: Optional[str] = None
	supabase_table: str = DEFAULT_SUPABASE_TABLE

	@property
	def debounce_s(self) -> float:
		return self.debounce_ms / 1000.0

	@property
	def use_supabase(self) -> bool:
		return bool(self.supabase_url and self.supabase_key)


def _number(env: Mapping[str, str], name: str, default, cast):
	raw = env.get(name)
	if raw is None or raw.strip() == "":
		return default
	try:
		value = cast(raw)
	except ValueError:
		raise ConfigError(f"{name} must be a number, got {raw!r}")
	if value <= 0:
		raise ConfigError(f"{name} must be positive, got {raw!r}")
	return value


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
	"""
	Build Settings from `env` (defaults to os.environ after loading .env).
	Raises ConfigError when TMDB_API_KEY is absent.
	"""
	if env is None:
		load_dotenv(PROJECT_ROOT / ".env")
		env = os.environ

	api_key = (env.get("TMDB_API_KEY") or "").strip()
	if not api_key:
		raise ConfigError("Missing TMDB_API_KEY in environment")

	return Settings(
		tmdb_api_key=api_key,
		tmdb_api_base_url=(env.get("TMDB_API_BASE_URL") or DEFAULT_API_BASE_URL).rstrip("/"),
		tmdb_image_base_url=(env.get("TMDB_IMAGE_BASE_URL") or DEFAULT_IMAGE_BASE_URL).rstrip("/"),
		debounce_ms=_number(env, "SEARCH_DEBOUNCE_MS", 1000, int),
		trending_limit=_number(env, "TRENDING_LIMIT", 5, int),
		http_timeout_s=_number(env, "HTTP_TIMEOUT_S", 10.0, float),
		supabase_url=env.get("SUPABASE_URL") or None,
		supabase_key=env.get("SUPABASE_KEY") or None,
		supabase_table=env.get("SUPABASE_TABLE") or DEFAULT_SUPABASE_TABLE,
	)
