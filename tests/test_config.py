"""
Unit tests for settings loading.
"""

import pytest

from cinefind.config import DEFAULT_API_BASE_URL, load_settings
from cinefind.errors import ConfigError


def test_missing_token_is_fatal():
	with pytest.raises(ConfigError):
		load_settings({})
	with pytest.raises(ConfigError):
		load_settings({"TMDB_API_KEY": "   "})


def test_defaults():
	settings = load_settings({"TMDB_API_KEY": "token"})
	assert settings.tmdb_api_key == "token"
	assert settings.tmdb_api_base_url == DEFAULT_API_BASE_URL
	assert settings.debounce_ms == 1000
	assert settings.debounce_s == 1.0
	assert settings.trending_limit == 5
	assert not settings.use_supabase


def test_overrides():
	settings = load_settings({
		"TMDB_API_KEY": "token",
		"TMDB_API_BASE_URL": "https://proxy.example.test/3/",
		"SEARCH_DEBOUNCE_MS": "250",
		"TRENDING_LIMIT": "10",
		"SUPABASE_URL": "https://abc.supabase.co",
		"SUPABASE_KEY": "service-key",
	})
	assert settings.tmdb_api_base_url == "https://proxy.example.test/3"
	assert settings.debounce_s == 0.25
	assert settings.trending_limit == 10
	assert settings.use_supabase
	assert settings.supabase_table == "search_metrics"


@pytest.mark.parametrize("value", ["soon", "-5", "0"])
def test_bad_numbers_are_rejected(value):
	with pytest.raises(ConfigError):
		load_settings({"TMDB_API_KEY": "token", "SEARCH_DEBOUNCE_MS": value})
