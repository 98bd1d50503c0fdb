"""
Franchise grouping module.
Splits one batch of scored search results into franchise clusters and standalone entries.
"""

import re
from typing import Dict, List, Optional, Sequence

from loguru import logger

from .models import FranchiseGroup, ScoredCandidate, SearchCandidate, SearchResultSet
from .ranking import RelevanceScorer

# Lazy leading run up to the first colon, whitespace (with an optional hyphen after it),
# or a digit run that starts or ends a word. Digits inside a word ("Se7en") do not cut.
RE_FRANCHISE_KEY = re.compile(r"^(.*?)(?:[\s:]-?|(?<!\w)\d+|\d+(?!\w))")


def franchise_key(title: Optional[str]) -> str:
	"""
	Derive the franchise key of a title by stripping subtitle and sequel-number suffixes.
	"Matrix Reloaded" -> "Matrix", "Alien: Covenant" -> "Alien", "Rocky2" -> "Rocky".
	A title without any terminator is its own key. Titles that start with a digit,
	whitespace or a colon yield an empty key.
	"""
	if not title:
		return ''
	m = RE_FRANCHISE_KEY.match(title)
	key = m.group(1) if m else title
	return key.strip()


class FranchiseGrouper:
	"""
	Scores a batch of candidates and partitions it into franchise groups and standalone results.
	Grouping is batch-relative: a title joins a group only if another title in the same
	batch starts with its franchise key.
	"""

	def __init__(self, scorer: Optional[RelevanceScorer] = None):
		self.scorer = scorer or RelevanceScorer()

	def group(self, candidates: Sequence[SearchCandidate], query: Optional[str], current_year: int) -> SearchResultSet:
		"""Run scoring and partitioning; returns an empty result set for empty input."""
		scored = self.scorer.score_all(candidates, query, current_year)
		titles = [s.title or '' for s in scored]

		grouped: Dict[str, List[ScoredCandidate]] = {}  # insertion order = first-seen franchise
		standalone: List[ScoredCandidate] = []

		for idx, item in enumerate(scored):
			key = franchise_key(item.title)
			if key and self._has_sibling(key, idx, titles):
				grouped.setdefault(key, []).append(item)
				logger.debug(f"[Grouper] '{item.title}' ({item.id}) -> franchise '{key}'")
			else:
				standalone.append(item)

		# list.sort is stable, so equal scores keep their input order
		groups = {}
		for name, members in grouped.items():
			members.sort(key=lambda s: s.relevance_score, reverse=True)
			groups[name] = FranchiseGroup(name=name, members=members)
		standalone.sort(key=lambda s: s.relevance_score, reverse=True)

		logger.info(f"[Grouper] {len(scored)} results -> {len(groups)} franchise groups, {len(standalone)} standalone")
		return SearchResultSet(franchise_groups=groups, standalone=standalone)

	@staticmethod
	def _has_sibling(key: str, idx: int, titles: List[str]) -> bool:
		return any(i != idx and t.startswith(key) for i, t in enumerate(titles))
