"""
Search session module.
Guards the boundary where provider results re-enter the core: debounces keystroke bursts,
cancels superseded searches, and reports results or a user-facing error through callbacks.
"""

import asyncio  # tasks, sleeping, cancellation
from datetime import date  # current year for scoring
from typing import Awaitable, Callable, List, Optional, Sequence  # type annotations

from loguru import logger  # console logging

from .errors import SEARCH_FAILED_MESSAGE
from .franchise import FranchiseGrouper
from .models import SearchCandidate, SearchResultSet

SearchFn = Callable[[str], Awaitable[Sequence[SearchCandidate]]]


class SearchSession:
	"""
	One curator's live search.
	Each submit() supersedes the previous one: a pending debounce is dropped and an in-flight
	request is cancelled, so a stale response can never overwrite a fresher one.
	Cancellation is silent; every other failure becomes on_error(SEARCH_FAILED_MESSAGE).
	"""

	def __init__(
		self,
		search_fn: SearchFn,
		on_results: Callable[[str, SearchResultSet], Awaitable[None]],
		on_error: Callable[[str, str], Awaitable[None]],
		grouper: Optional[FranchiseGrouper] = None,
		debounce: float = 0.3,
		min_query_length: int = 2,
		year_fn: Callable[[], int] = lambda: date.today().year,
	):
		self.search_fn = search_fn  # provider search returning candidates
		self.on_results = on_results  # receives (query, grouped results)
		self.on_error = on_error  # receives (query, user-facing message)
		self.grouper = grouper or FranchiseGrouper()
		self.debounce = debounce  # quiescence window in seconds
		self.min_query_length = min_query_length
		self.year_fn = year_fn  # injectable for tests
		self._task: Optional[asyncio.Task] = None

	def submit(self, query: str) -> asyncio.Task:
		"""Supersede any running search with one for query. Must be called from a running loop."""
		self.cancel()
		self._task = asyncio.get_running_loop().create_task(self._run(query or ''))
		return self._task

	def cancel(self) -> None:
		if self._task is not None and not self._task.done():
			logger.debug("[Session] Cancelling superseded search")
			self._task.cancel()

	async def wait(self) -> None:
		"""Wait for the latest search to settle; a cancelled search counts as settled."""
		task = self._task
		if task is None:
			return
		try:
			await task
		except asyncio.CancelledError:
			if not task.cancelled():  # the waiter itself was cancelled
				raise

	async def _run(self, query: str) -> None:
		try:
			await asyncio.sleep(self.debounce)

			if len(query.strip()) < self.min_query_length:
				logger.debug(f"[Session] Query '{query}' too short, clearing results")
				await self.on_results(query, SearchResultSet())
				return

			logger.debug(f"[Session] Searching '{query}'")
			candidates = await self.search_fn(query)
			result = self.grouper.group(candidates, query, self.year_fn())
			await self.on_results(query, result)
		except asyncio.CancelledError:
			logger.debug(f"[Session] Search '{query}' cancelled")
			raise
		except Exception:
			logger.exception(f"[Session] Search '{query}' failed")
			try:
				await self.on_error(query, SEARCH_FAILED_MESSAGE)
			except Exception:  # the socket may already be closed
				logger.exception(f"[Session] Could not report failure of '{query}'")


class RecentSelections:
	"""Most recently selected search results, newest first, unique by id."""

	def __init__(self, limit: int = 5, items: Optional[Sequence[dict]] = None):
		self.limit = limit
		self.items: List[dict] = list(items or [])[:limit]

	def remember(self, candidate: SearchCandidate) -> List[dict]:
		entry = {'id': candidate.id, 'title': candidate.title, 'poster_path': candidate.poster_path}
		self.items = [entry] + [i for i in self.items if i.get('id') != candidate.id]
		self.items = self.items[:self.limit]
		return list(self.items)
