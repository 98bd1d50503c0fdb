"""
FastAPI server for the movie catalog curator.
Endpoints:
- GET /health: basic health check
- GET /search?q=...&page=1: provider search, scored and grouped into franchises
- WS /ws/search: live search; debounced, superseded searches are cancelled
- POST /tags: tag suggestions for a selected movie
- POST /tags/toggle, POST /tags/combos: selection transitions
- GET/POST /movies, PUT/DELETE /movies/{id}: catalog CRUD

Startup reads settings from the environment (.env) and connects to TMDB and Supabase.
"""

# Import standard libraries for timing and dates
import time  # measure startup and request latencies
from datetime import date  # reference year for scoring and tagging
from typing import List, Optional  # precise typing for clarity

# Import FastAPI for building the web API and Pydantic for request/response models
from fastapi import FastAPI, Query, Request, WebSocket, WebSocketDisconnect  # FastAPI primitives
from fastapi.responses import JSONResponse  # error payloads
from pydantic import BaseModel, Field  # request/response schema definitions

# Import our internal modules
from curator.catalog_store import CatalogStore, build_catalog_record, validate_category  # persistence
from curator.config import Settings, get_settings  # environment settings
from curator.data_loader import CandidateLoader  # payload normalization
from curator.errors import CatalogStoreError, CuratorError, DELETE_FAILED_MESSAGE, LOAD_FAILED_MESSAGE, ProviderError, SAVE_FAILED_MESSAGE  # boundary errors
from curator.franchise import FranchiseGrouper  # scoring + grouping
from curator.models import ScoredCandidate, SearchCandidate, SearchResultSet, SelectionState  # core types
from curator.search_session import SearchSession  # debounce/cancel boundary
from curator.tagging import TagInferenceEngine, select_combos, toggle_tag  # tag inference
from curator.tmdb_client import TMDBClient  # metadata provider

# Import loguru for simple, structured console logging
from loguru import logger  # convenient console logger

# Instantiate the FastAPI application with metadata
app = FastAPI(title="Movie Catalog Curator API", version="1.0.0")  # web app

# Globals holding shared components; I/O clients are created at startup
SETTINGS: Settings = get_settings()  # environment settings
GROUPER = FranchiseGrouper()  # pure scoring/grouping
ENGINE = TagInferenceEngine()  # pure tag inference
LOADER = CandidateLoader()  # payload normalization
TMDB: Optional[TMDBClient] = None  # provider client
STORE: Optional[CatalogStore] = None  # catalog store
STARTUP_TIME_S: float = 0.0  # measures how long startup took


# Pydantic model for a search candidate, as sent by the provider and the dashboard
class CandidateModel(BaseModel):
	id: int  # provider id
	title: str = ''  # display title
	release_date: Optional[str] = None  # raw date string
	popularity: float = 0.0  # provider popularity
	vote_average: float = 0.0  # 0..10
	vote_count: int = 0  # number of votes
	genre_ids: List[int] = Field(default_factory=list)  # genre codes
	overview: str = ''  # synopsis
	poster_path: Optional[str] = None  # poster handle


class ScoredOut(BaseModel):
	movie: CandidateModel  # movie metadata
	score: float  # relevance score


class FranchiseOut(BaseModel):
	name: str  # franchise key
	members: List[ScoredOut]  # best first


class SearchResponse(BaseModel):
	query: str  # original query string
	page: int = 1  # provider page
	total_pages: int = 0  # provider page count
	total_results: int = 0  # provider result count
	elapsed_ms: float = 0.0  # server-side time in ms
	franchises: List[FranchiseOut] = Field(default_factory=list)  # first-seen order
	standalone: List[ScoredOut] = Field(default_factory=list)  # best first


class TagOut(BaseModel):
	label: str
	source: str
	category: str
	is_compound: bool
	selected: bool


class ComboOut(BaseModel):
	label: str  # compound label
	requires: List[str]  # prerequisite labels


class TagsRequest(BaseModel):
	item: CandidateModel  # selected movie
	selected_tags: List[str] = Field(default_factory=list)  # current selection
	current_year: Optional[int] = None  # defaults to today's year


class TagsResponse(BaseModel):
	tags: List[TagOut]
	combos: List[ComboOut]


class SelectionModel(BaseModel):
	selected_tags: List[str] = Field(default_factory=list)
	selected_combos: List[str] = Field(default_factory=list)


class ToggleRequest(SelectionModel):
	label: str  # label to add or remove


class CombosRequest(SelectionModel):
	combos: List[str] = Field(default_factory=list)  # new compound subset


class MovieSaveRequest(BaseModel):
	movie: CandidateModel  # selected search result
	m3u8_link: str = ''  # streaming link
	asset_id: Optional[str] = None  # optional asset identifier
	category: Optional[str] = None  # required catalog category
	custom_tags: List[str] = Field(default_factory=list)  # selected labels


class MoviesPage(BaseModel):
	movies: List[dict]
	total_count: int
	page: int
	rows_per_page: int


# Map boundary errors to a short user-visible message
@app.exception_handler(CuratorError)
async def curator_error_handler(request: Request, exc: CuratorError):
	logger.warning(f"[API] {request.method} {request.url.path} failed: {exc}")  # internal detail stays in logs
	return JSONResponse(status_code=exc.status, content={"detail": exc.user_message})


# FastAPI startup hook to create the provider and store clients once
@app.on_event("startup")
async def startup_event():
	"""Connect to TMDB and Supabase when credentials are configured."""
	global SETTINGS, TMDB, STORE, STARTUP_TIME_S  # refer to module-level globals
	start = time.time()  # start timer for startup latency
	SETTINGS = get_settings()

	if SETTINGS.tmdb_api_key:
		TMDB = TMDBClient(SETTINGS.tmdb_api_key, base_url=SETTINGS.tmdb_base_url, timeout=SETTINGS.tmdb_timeout)
		logger.info("[API] TMDB client ready")
	else:
		logger.warning("[API] TMDB_API_KEY not set; search is disabled")

	if SETTINGS.supabase_url and SETTINGS.supabase_api_key:
		from supabase import create_client  # imported lazily, only when the store is configured

		STORE = CatalogStore(create_client(SETTINGS.supabase_url, SETTINGS.supabase_api_key), table=SETTINGS.movies_table)
		logger.info(f"[API] Catalog store ready (table={SETTINGS.movies_table})")
	else:
		logger.warning("[API] Supabase credentials not set; catalog is disabled")

	STARTUP_TIME_S = time.time() - start  # elapsed seconds
	logger.info(f"[API] Startup complete in {STARTUP_TIME_S:.2f}s")


@app.on_event("shutdown")
async def shutdown_event():
	if TMDB is not None:
		await TMDB.aclose()


def _tmdb() -> TMDBClient:
	if TMDB is None:
		raise ProviderError("TMDB client not configured")
	return TMDB


def _store(user_message: Optional[str] = None) -> CatalogStore:
	if STORE is None:
		raise CatalogStoreError("catalog store not configured", user_message=user_message)
	return STORE


def _to_candidate(model: CandidateModel) -> SearchCandidate:
	return LOADER.parse_candidate(model.model_dump())  # same normalization as provider payloads


def _scored_out(s: ScoredCandidate) -> ScoredOut:
	c = s.candidate
	return ScoredOut(
		movie=CandidateModel(
			id=c.id,
			title=c.title,
			release_date=c.release_date,
			popularity=c.popularity,
			vote_average=c.vote_average,
			vote_count=c.vote_count,
			genre_ids=list(c.genre_ids),
			overview=c.overview,
			poster_path=c.poster_path,
		),
		score=round(s.relevance_score, 4),
	)


def _search_response(query: str, result: SearchResultSet, **extra) -> SearchResponse:
	return SearchResponse(
		query=query,
		franchises=[
			FranchiseOut(name=g.name, members=[_scored_out(m) for m in g.members])
			for g in result.franchise_groups.values()
		],
		standalone=[_scored_out(s) for s in result.standalone],
		**extra,
	)


# Simple health endpoint for readiness checks
@app.get("/health")
async def health():
	"""Return minimal health info for liveness/readiness probes."""
	return {
		"status": "ok",  # constant indicator
		"search_ready": TMDB is not None,  # provider configured
		"catalog_ready": STORE is not None,  # store configured
		"startup_seconds": round(STARTUP_TIME_S, 2)  # startup latency
	}


# Search endpoint: one provider page, scored and grouped
@app.get("/search", response_model=SearchResponse)
async def search(q: str = Query("", description="Free-text movie title query"), page: int = Query(1, ge=1)):
	"""Search the provider and group the page's results into franchises."""
	if len(q.strip()) < SETTINGS.min_query_length:  # too short: clear results, no request
		return SearchResponse(query=q, page=page)

	start = time.time()  # start timer
	logger.debug(f"[API] /search q='{q}' page={page}")
	result_page = await _tmdb().search_movies(q, page=page)  # ProviderError -> 502
	result = GROUPER.group(result_page.results, q, date.today().year)
	elapsed_ms = (time.time() - start) * 1000  # compute ms
	logger.info(f"[API] /search served {len(result_page.results)} results in {elapsed_ms:.2f} ms")

	return _search_response(
		q,
		result,
		page=result_page.page,
		total_pages=result_page.total_pages,
		total_results=result_page.total_results,
		elapsed_ms=round(elapsed_ms, 2),
	)


# Live search over a websocket: {"query": "..."} in, results or error frames out
@app.websocket("/ws/search")
async def ws_search(ws: WebSocket):
	await ws.accept()

	async def search_fn(query: str):
		result_page = await _tmdb().search_movies(query)
		return result_page.results

	async def send_results(query: str, result: SearchResultSet):
		await ws.send_json({"type": "results", **_search_response(query, result).model_dump()})

	async def send_error(query: str, message: str):
		await ws.send_json({"type": "error", "query": query, "message": message})

	session = SearchSession(
		search_fn,
		send_results,
		send_error,
		grouper=GROUPER,
		debounce=SETTINGS.search_debounce_ms / 1000.0,
		min_query_length=SETTINGS.min_query_length,
	)
	try:
		while True:
			message = await ws.receive_json()
			query = message.get("query") if isinstance(message, dict) else message
			session.submit(str(query or ""))
	except WebSocketDisconnect:
		logger.info("[API] /ws/search client disconnected")
	finally:
		session.cancel()


# Tag suggestions for the selected movie
@app.post("/tags", response_model=TagsResponse)
async def tags(req: TagsRequest):
	item = _to_candidate(req.item)
	year = req.current_year or date.today().year
	inferred = ENGINE.infer_tags(item, req.selected_tags, year)
	return TagsResponse(
		tags=[TagOut(label=t.label, source=t.source, category=t.category, is_compound=t.is_compound, selected=t.selected) for t in inferred],
		combos=[ComboOut(label=label, requires=requires) for label, requires in ENGINE.combo_catalog()],
	)


def _selection(model: SelectionModel) -> SelectionState:
	return SelectionState(selected_tags=tuple(model.selected_tags), selected_combos=tuple(model.selected_combos))


def _selection_out(state: SelectionState) -> SelectionModel:
	return SelectionModel(selected_tags=list(state.selected_tags), selected_combos=list(state.selected_combos))


@app.post("/tags/toggle", response_model=SelectionModel)
async def tags_toggle(req: ToggleRequest):
	label = req.label.strip()
	if label not in req.selected_tags:  # selected labels toggle off exactly as given
		label = ENGINE.resolve_label(label) or label  # typed labels snap to known ones
	return _selection_out(toggle_tag(_selection(req), label))


@app.post("/tags/combos", response_model=SelectionModel)
async def tags_combos(req: CombosRequest):
	return _selection_out(select_combos(_selection(req), req.combos))


# Catalog CRUD
@app.get("/movies", response_model=MoviesPage)
async def list_movies(page: int = Query(0, ge=0), rows_per_page: Optional[int] = Query(None, ge=1, le=100)):
	rows_per_page = rows_per_page or SETTINGS.default_rows_per_page
	rows, total = await _store(LOAD_FAILED_MESSAGE).alist_movies(page, rows_per_page)
	return MoviesPage(movies=rows, total_count=total, page=page, rows_per_page=rows_per_page)


async def _build_record(req: MovieSaveRequest):
	validate_category(req.category)  # fail fast, before any network call
	candidate = _to_candidate(req.movie)
	try:
		details = await _tmdb().fetch_movie_details(candidate.id)
	except ProviderError as e:
		raise ProviderError(str(e), user_message=SAVE_FAILED_MESSAGE) from e
	return build_catalog_record(candidate, details, req.m3u8_link, req.asset_id, req.category, req.custom_tags)


@app.post("/movies")
async def create_movie(req: MovieSaveRequest):
	record = await _build_record(req)
	return await _store().ainsert_movie(record)


@app.put("/movies/{movie_id}")
async def update_movie(movie_id: int, req: MovieSaveRequest):
	record = await _build_record(req)
	return await _store().aupdate_movie(movie_id, record)


@app.delete("/movies/{movie_id}")
async def delete_movie(movie_id: int):
	await _store(DELETE_FAILED_MESSAGE).adelete_movie(movie_id)
	return {"deleted": movie_id}
