"""
Runtime settings, read from the environment and an optional .env file.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	app_name: str = "Movie Catalog Curator API"
	# metadata provider
	tmdb_api_key: Optional[str] = None
	tmdb_base_url: str = "https://api.themoviedb.org/3"
	tmdb_timeout: float = 10.0
	tmdb_image_base_url: str = "https://image.tmdb.org/t/p"
	# catalog store
	supabase_url: Optional[str] = None
	supabase_api_key: Optional[str] = None
	movies_table: str = "movies"
	# search boundary
	search_debounce_ms: int = 300
	min_query_length: int = 2
	recent_selections_limit: int = 5
	# catalog table
	default_rows_per_page: int = 10
	# dashboard -> API
	api_url: str = "http://localhost:8000"

	model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
	return Settings()
