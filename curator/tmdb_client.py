"""
TMDB API client.
Async wrapper over the provider's search, detail and credits endpoints; every failure surfaces as ProviderError.
"""

import asyncio
from typing import Optional

import httpx
from loguru import logger

from .data_loader import CandidateLoader
from .errors import ProviderError
from .models import MovieDetails, SearchPage


class TMDBClient:
	BASE_URL = "https://api.themoviedb.org/3"

	def __init__(
		self,
		api_key: str,
		base_url: Optional[str] = None,
		timeout: float = 10.0,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	):
		self.api_key = api_key
		self.base_url = (base_url or self.BASE_URL).rstrip("/")
		self.client = httpx.AsyncClient(
			timeout=httpx.Timeout(timeout),
			headers={"Accept": "application/json"},
			transport=transport,
		)
		self.loader = CandidateLoader()

	async def get(self, path: str, **params) -> dict:
		url = f"{self.base_url}{path}"
		params = {"api_key": self.api_key, **params}
		try:
			response = await self.client.get(url, params=params)
			response.raise_for_status()
			return response.json()
		except httpx.HTTPStatusError as e:
			logger.warning(f"[TMDB] HTTP {e.response.status_code} for {path}")
			raise ProviderError(f"Search failed: {e.response.status_code}") from e
		except httpx.RequestError as e:
			logger.warning(f"[TMDB] Request error for {path}: {e}")
			raise ProviderError(f"Request error: {e}") from e
		except ValueError as e:
			logger.warning(f"[TMDB] Invalid JSON for {path}: {e}")
			raise ProviderError("Invalid JSON from provider") from e

	async def search_movies(self, query: str, page: int = 1) -> SearchPage:
		data = await self.get(
			"/search/movie", query=query, page=page, include_adult="false"
		)
		results = self.loader.parse_candidates(data.get("results"))
		logger.debug(f"[TMDB] search '{query}' page {page}: {len(results)} results")
		return SearchPage(
			results=results,
			page=int(data.get("page") or page),
			total_pages=int(data.get("total_pages") or 0),
			total_results=int(data.get("total_results") or 0),
		)

	async def fetch_movie_details(self, tmdb_id: int) -> MovieDetails:
		base = f"/movie/{tmdb_id}"
		details, credits = await asyncio.gather(
			self.get(base), self.get(f"{base}/credits")
		)
		runtime = details.get("runtime")
		vote_average = details.get("vote_average")
		return MovieDetails(
			tmdb_id=tmdb_id,
			runtime=int(runtime) if isinstance(runtime, (int, float)) else None,
			vote_average=float(vote_average) if isinstance(vote_average, (int, float)) else None,
			cast=[c for c in credits.get("cast") or [] if isinstance(c, dict)],
			crew=[c for c in credits.get("crew") or [] if isinstance(c, dict)],
		)

	async def aclose(self):
		await self.client.aclose()
