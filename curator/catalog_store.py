"""
Catalog persistence.
Builds curated movie records and stores them in the Supabase "movies" table.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence, Tuple

from anyio import to_thread
from loguru import logger
from postgrest.exceptions import APIError as PostgrestAPIError

from .errors import CatalogStoreError, DELETE_FAILED_MESSAGE, LOAD_FAILED_MESSAGE, RecordNotFound, ValidationError
from .models import CastMember, CatalogRecord, MovieDetails, SearchCandidate
from .tag_rules import CATEGORIES

TABLE = "movies"
MAX_CAST = 6
UNKNOWN_ACTOR = "Unknown Actor"
UNKNOWN_ROLE = "Unknown Role"
UNKNOWN_DIRECTOR = "Unknown"

_RE_SLUG = re.compile(r"[^\w-]+")


def slugify(title: str) -> str:
	"""Lowercase the title and replace each run of non-word characters (hyphens kept) with '-'."""
	return _RE_SLUG.sub("-", (title or "").lower())


def _cast_members(cast: Iterable[dict]) -> List[CastMember]:
	members = []
	for actor in list(cast)[:MAX_CAST]:
		members.append(CastMember(
			name=actor.get("name") or UNKNOWN_ACTOR,
			character=actor.get("character") or UNKNOWN_ROLE,
			profile_path=actor.get("profile_path") or None,
		))
	return members


def _director(crew: Iterable[dict]) -> str:
	first = next((c for c in crew if c.get("job") == "Director"), None)  # first credited director only
	return (first or {}).get("name") or UNKNOWN_DIRECTOR


def validate_category(category: Optional[str]) -> str:
	if not category or category not in CATEGORIES:
		raise ValidationError()
	return category


def build_catalog_record(
	candidate: SearchCandidate,
	details: Optional[MovieDetails],
	streaming_link: str,
	asset_id: Optional[str],
	category: Optional[str],
	tags: Sequence[str],
) -> CatalogRecord:
	"""
	Merge the selected search result, its detail enrichment and the curator's form input.
	Raises ValidationError when the category is missing or unknown.
	"""
	category = validate_category(category)
	details = details or MovieDetails(tmdb_id=candidate.id)
	asset = (asset_id or "").strip() or None

	return CatalogRecord(
		title=candidate.title,
		slug=slugify(candidate.title),
		overview=candidate.overview,
		poster_path=candidate.poster_path,
		release_date=candidate.release_date,
		m3u8_link=(streaming_link or "").strip(),
		asset_id=asset,
		tmdb_id=candidate.id,
		rating=candidate.vote_average or details.vote_average or 0,
		duration=details.runtime or 0,
		cast=_cast_members(details.cast),
		director=_director(details.crew),
		category=category,
		custom_tags=list(tags),
	)


def _map_pgrest(e: PostgrestAPIError, user_message: Optional[str] = None) -> CatalogStoreError:
	code = getattr(e, "code", None) or ""
	message = getattr(e, "message", None) or str(e)
	return CatalogStoreError(f"PostgREST error {code}: {message}", user_message=user_message)


class CatalogStore:
	def __init__(self, client, table: str = TABLE):
		self.client = client
		self.table = table

	# ---------- Async facade (runs sync work in threadpool) ----------
	async def alist_movies(self, page: int, rows_per_page: int) -> Tuple[List[dict], int]:
		return await to_thread.run_sync(self.list_movies, page, rows_per_page)

	async def ainsert_movie(self, record: CatalogRecord) -> dict:
		return await to_thread.run_sync(self.insert_movie, record)

	async def aupdate_movie(self, movie_id: int, record: CatalogRecord) -> dict:
		return await to_thread.run_sync(self.update_movie, movie_id, record)

	async def adelete_movie(self, movie_id: int) -> None:
		await to_thread.run_sync(self.delete_movie, movie_id)

	# ---------- Sync implementations ----------
	def list_movies(self, page: int, rows_per_page: int) -> Tuple[List[dict], int]:
		"""One page of the catalog, newest first, plus the total row count."""
		page = max(0, page)
		rows_per_page = max(1, rows_per_page)
		start = page * rows_per_page
		end = start + rows_per_page - 1
		try:
			res = (
				self.client.table(self.table)
				.select("*", count="exact")
				.order("created_at", desc=True)
				.range(start, end)
				.execute()
			)
		except PostgrestAPIError as e:
			logger.error(f"[Store] list failed: {e}")
			raise _map_pgrest(e, LOAD_FAILED_MESSAGE)
		rows = res.data or []
		total = res.count if res.count is not None else len(rows)
		logger.debug(f"[Store] page {page} ({rows_per_page}/page): {len(rows)} of {total}")
		return rows, total

	def insert_movie(self, record: CatalogRecord) -> dict:
		try:
			res = self.client.table(self.table).insert(record.to_row()).execute()
		except PostgrestAPIError as e:
			logger.error(f"[Store] insert '{record.title}' failed: {e}")
			raise _map_pgrest(e)
		row = res.data[0] if res.data else record.to_row()
		logger.info(f"[Store] inserted '{record.title}' (tmdb_id={record.tmdb_id})")
		return row

	def update_movie(self, movie_id: int, record: CatalogRecord) -> dict:
		try:
			res = self.client.table(self.table).update(record.to_row()).eq("id", movie_id).execute()
		except PostgrestAPIError as e:
			logger.error(f"[Store] update {movie_id} failed: {e}")
			raise _map_pgrest(e)
		if not res.data:
			raise RecordNotFound(f"movie {movie_id} not found")
		logger.info(f"[Store] updated movie {movie_id} '{record.title}'")
		return res.data[0]

	def delete_movie(self, movie_id: int) -> None:
		try:
			res = self.client.table(self.table).delete().eq("id", movie_id).execute()
		except PostgrestAPIError as e:
			logger.error(f"[Store] delete {movie_id} failed: {e}")
			raise _map_pgrest(e, DELETE_FAILED_MESSAGE)
		if not res.data:
			raise RecordNotFound(f"movie {movie_id} not found")
		logger.info(f"[Store] deleted movie {movie_id}")
