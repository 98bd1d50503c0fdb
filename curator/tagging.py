"""
Tag inference module.
Derives descriptive labels for a selected movie from the static rule tables, suggests
compound labels once their prerequisites are selected, and computes selection transitions.
"""

import re  # overview phrase matching
from typing import Iterable, List, Optional, Sequence, Set, Tuple, Union  # type annotations

from rapidfuzz import fuzz, process  # fuzzy label resolution

from loguru import logger  # console logging

from .models import SearchCandidate, SelectionState, TagCandidate
from . import tag_rules as rules

Selection = Union[SelectionState, Iterable[str]]


def _selection_labels(current_selection: Optional[Selection]) -> Tuple[str, ...]:
	if current_selection is None:
		return ()
	if isinstance(current_selection, SelectionState):
		return current_selection.selected_tags
	if isinstance(current_selection, str):  # a single label, not an iterable of characters
		return (current_selection,)
	return tuple(current_selection)


class TagInferenceEngine:
	"""
	Proposes tags for one movie.
	Output order is emission order: genre tags (per genre code, primaries then secondaries),
	content analysis, awards, ratings, popularity, year, then compound suggestions.
	Rules are independent, so the same label may be emitted more than once.
	"""

	RE_TRUE_STORY = re.compile(
		r"\b(?:" + "|".join(re.escape(p) for p in rules.TRUE_STORY_PHRASES) + r")\b",
		re.I,
	)

	# Fuzzy resolution threshold (rapidfuzz full-string ratio, 0..100); partial matches never resolve
	RESOLVE_MIN_SCORE = 88

	def __init__(self):
		self._labels = self._build_vocabulary()
		self._labels_lower = {label.lower(): label for label in self._labels}
		logger.debug(f"[Tags] Engine ready with {len(self._labels)} known labels")

	def infer_tags(self, item: Optional[SearchCandidate], current_selection: Optional[Selection], current_year: int) -> List[TagCandidate]:
		"""Return the ordered tag candidates for item given the labels already selected."""
		if item is None:
			return []

		selected = _selection_labels(current_selection)
		selected_set = set(selected)
		emitted: List[Tuple[str, str, str, bool]] = []  # (label, source, category, is_compound)

		# 1) Genre tags
		for genre_id in item.genre_ids or ():
			entry = rules.GENRE_MAP.get(genre_id)
			if entry is None:
				continue
			primary, secondary = entry
			emitted.extend((label, rules.SOURCE_GENRE, rules.PRIMARY, False) for label in primary)
			emitted.extend((label, rules.SOURCE_GENRE_DERIVED, rules.SECONDARY, False) for label in secondary)

		# 2) Special tags
		for label, source, category in self._special_tags(item, current_year):
			emitted.append((label, source, category, False))

		# 3) Compound suggestions, selection-dependent
		for combo, requires in rules.GENRE_COMBOS.items():
			if all(req in selected_set for req in requires):
				emitted.append((combo, rules.SOURCE_COMBO, rules.SECONDARY, True))

		tags = [
			TagCandidate(label=label, source=source, category=category, is_compound=compound, selected=label in selected_set)
			for label, source, category, compound in emitted
		]
		logger.debug(f"[Tags] {item.title} ({item.id}): {len(tags)} tags, {len(selected)} selected")
		return tags

	def _special_tags(self, item: SearchCandidate, current_year: int) -> List[Tuple[str, str, str]]:
		year = item.release_year
		rating = item.vote_average or 0.0
		votes = item.vote_count or 0
		popularity = item.popularity or 0.0
		genres = set(item.genre_ids or ())
		# Unknown year falls into the modern award period and gets no year tags
		is_classic = year is not None and year < rules.CLASSIC_CUTOFF_YEAR

		out: List[Tuple[str, str, str]] = []

		if (
			self.RE_TRUE_STORY.search(item.overview or '')
			and genres & rules.TRUE_STORY_GENRES
			and rating >= rules.TRUE_STORY_MIN_RATING
			and votes > rules.TRUE_STORY_MIN_VOTES
		):
			out.append((rules.LABEL_TRUE_STORY, rules.SOURCE_CONTENT, rules.PRIMARY))

		winner = rules.OSCAR_WINNER_CLASSIC if is_classic else rules.OSCAR_WINNER_MODERN
		if self._meets(winner, rating, votes, popularity):
			out.append((rules.LABEL_OSCAR_WINNER, rules.SOURCE_AWARDS, rules.PRIMARY))

		nominee = rules.OSCAR_NOMINEE_CLASSIC if is_classic else rules.OSCAR_NOMINEE_MODERN
		if self._meets(nominee, rating, votes, popularity):
			out.append((rules.LABEL_OSCAR_NOMINEE, rules.SOURCE_AWARDS, rules.SECONDARY))

		if rating >= rules.MUST_WATCH_MIN_RATING and votes > rules.MUST_WATCH_MIN_VOTES:
			out.append((rules.LABEL_MUST_WATCH, rules.SOURCE_RATINGS, rules.PRIMARY))

		if popularity > rules.TRENDING_MIN_POPULARITY and votes > rules.TRENDING_MIN_VOTES:
			out.append((rules.LABEL_TRENDING, rules.SOURCE_POPULARITY, rules.SECONDARY))

		if year is not None:
			if year == current_year:
				out.append((rules.LABEL_LATEST, rules.SOURCE_YEAR, rules.SECONDARY))
			if year == current_year - 1:
				out.append((rules.LABEL_RECENT, rules.SOURCE_YEAR, rules.SUGGESTED))
			if year < rules.CLASSIC_CUTOFF_YEAR:
				out.append((rules.LABEL_CLASSIC, rules.SOURCE_YEAR, rules.SECONDARY))

		return out

	@staticmethod
	def _meets(threshold, rating: float, votes: int, popularity: float) -> bool:
		min_rating, min_votes, min_popularity = threshold
		if rating < min_rating or votes <= min_votes:
			return False
		return min_popularity is None or popularity > min_popularity

	def combo_catalog(self) -> List[Tuple[str, List[str]]]:
		"""Compound labels with their prerequisites, in table order."""
		return [(combo, list(requires)) for combo, requires in rules.GENRE_COMBOS.items()]

	def known_labels(self) -> List[str]:
		"""Every label the engine can emit, deduplicated, in first-seen order."""
		return list(self._labels)

	def resolve_label(self, text: Optional[str]) -> Optional[str]:
		"""
		Map free-text input to a canonical label.
		Exact case-insensitive matches win; otherwise the best whole-label fuzzy match above the threshold,
		so "Cult Classic" stays a custom label instead of collapsing onto "Classic".
		"""
		if not text or not text.strip():
			return None
		q = text.strip().lower()
		if q in self._labels_lower:
			return self._labels_lower[q]
		best = process.extractOne(q, list(self._labels_lower.keys()), scorer=fuzz.ratio)
		if best and best[1] >= self.RESOLVE_MIN_SCORE:
			label = self._labels_lower[best[0]]
			logger.debug(f"[Tags] Fuzzy label match: '{text}' -> '{label}' (score={best[1]:.1f})")
			return label
		logger.debug(f"[Tags] No label matches '{text}'")
		return None

	@staticmethod
	def _build_vocabulary() -> List[str]:
		seen: Set[str] = set()
		labels: List[str] = []
		candidates: List[str] = []
		for primary, secondary in rules.GENRE_MAP.values():
			candidates.extend(primary)
			candidates.extend(secondary)
		candidates.extend(rules.SPECIAL_LABELS)
		candidates.extend(rules.GENRE_COMBOS.keys())
		for label in candidates:
			if label not in seen:
				seen.add(label)
				labels.append(label)
		return labels


def is_compound(label: str) -> bool:
	return label in rules.COMPOUND_LABELS


def toggle_tag(state: SelectionState, label: str) -> SelectionState:
	"""
	Add label if absent, remove it if present.
	Compound labels are mirrored into selected_combos; their prerequisites are left alone.
	"""
	tags = list(state.selected_tags)
	combos = list(state.selected_combos)
	if label in tags:
		tags = [t for t in tags if t != label]
		if is_compound(label):
			combos = [c for c in combos if c != label]
	else:
		tags.append(label)
		if is_compound(label) and label not in combos:
			combos.append(label)
	return SelectionState(selected_tags=tuple(tags), selected_combos=tuple(combos))


def select_combos(state: SelectionState, combos: Sequence[str]) -> SelectionState:
	"""
	Replace the compound subset wholesale.
	New tags = previously selected non-compound labels followed by the chosen combos.
	"""
	chosen: List[str] = []
	for combo in combos:
		if combo not in chosen:
			chosen.append(combo)
	plain = [t for t in state.selected_tags if not is_compound(t)]
	return SelectionState(selected_tags=tuple(plain + chosen), selected_combos=tuple(chosen))
