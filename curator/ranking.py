"""
Ranking module.
Blends popularity, recency and title match into a relevance score used to order search results.
"""

import math
from typing import Iterable, List, Optional

from loguru import logger

from .models import ScoredCandidate, SearchCandidate


class RelevanceScorer:
	"""
	Computes relevance scores for search candidates from three signals:
	- popularity: provider popularity divided by 100 (unbounded)
	- recency: 1 - age_in_years / 100 (not clamped, negative for very old titles)
	- title match: 1 if the query is a case-insensitive substring of the title
	The score only orders results; it is not bounded to a fixed range.
	"""

	def __init__(
		self,
		popularity_weight: float = 0.4,
		recency_weight: float = 0.3,
		title_match_weight: float = 0.3,
	):
		self.popularity_weight = popularity_weight
		self.recency_weight = recency_weight
		self.title_match_weight = title_match_weight

	def score(self, candidate: SearchCandidate, query: Optional[str], current_year: int) -> float:
		"""
		Combine all signals into a single score.
		Defined for every candidate: a missing or malformed release date contributes 0 recency.
		"""
		popularity_score = self._popularity_score(candidate)
		recency_score = self._recency_score(candidate, current_year)
		title_score = self._title_match_score(candidate, query)

		return (
			self.popularity_weight * popularity_score +
			self.recency_weight * recency_score +
			self.title_match_weight * title_score
		)

	def score_all(self, candidates: Iterable[SearchCandidate], query: Optional[str], current_year: int) -> List[ScoredCandidate]:
		"""Score every candidate, keeping input order."""
		scored = [ScoredCandidate(candidate=c, relevance_score=self.score(c, query, current_year)) for c in candidates]
		logger.debug(f"[Scorer] Scored {len(scored)} candidates for query '{query}' (year={current_year})")
		return scored

	def _popularity_score(self, candidate: SearchCandidate) -> float:
		popularity = candidate.popularity or 0.0
		if not math.isfinite(popularity):
			return 0.0
		return popularity / 100.0

	def _recency_score(self, candidate: SearchCandidate, current_year: int) -> float:
		year = candidate.release_year
		if year is None:  # unknown release date
			return 0.0
		return 1.0 - (current_year - year) / 100.0

	def _title_match_score(self, candidate: SearchCandidate, query: Optional[str]) -> float:
		title = (candidate.title or '').lower()
		return 1.0 if (query or '').lower() in title else 0.0
