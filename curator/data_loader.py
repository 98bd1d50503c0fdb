"""
Data loading module.
Turns raw search-provider payloads (live responses or JSONL dumps) into SearchCandidate records.
"""

# Standard libs for JSON parsing, number checks, typing, and paths
import json  # read JSON lines
import math  # reject NaN/inf numbers
from typing import Any, Dict, Iterable, List, Optional, Tuple  # type hints
from pathlib import Path  # filesystem-safe paths

# Import our candidate data class used across the project
from .models import SearchCandidate  # structured search result

# Console logging
from loguru import logger  # console logger


class CandidateLoader:
	"""
	Handles loading and normalizing movie search results.
	Missing or malformed fields fall back to neutral defaults instead of failing.
	"""

	def load_candidates_from_jsonl(self, filepath: str) -> List[SearchCandidate]:
		"""
		Load candidates from a JSON Lines file where each line is one provider result object.
		Returns a list of SearchCandidate objects.
		"""
		candidates = []  # accumulator for parsed candidates
		filepath = Path(filepath)  # normalize path

		# Validate the file presence early to give clear error messages
		if not filepath.exists():
			raise FileNotFoundError(f"Candidate data file not found: {filepath}")

		logger.info(f"[DataLoader] Loading candidates from {filepath}...")  # log action

		with open(filepath, 'r', encoding='utf-8') as f:
			for line_num, line in enumerate(f, 1):  # keep track of line number for diagnostics
				if not line.strip():  # blank lines are allowed
					continue
				try:
					data = json.loads(line.strip())  # parse JSON object per line
					candidates.append(self.parse_candidate(data))  # dict -> SearchCandidate
				except json.JSONDecodeError as e:
					logger.warning(f"[DataLoader] Skipping invalid JSON at line {line_num}: {e}")  # malformed line
					continue
				except (TypeError, ValueError) as e:
					logger.warning(f"[DataLoader] Error parsing candidate at line {line_num}: {e}")  # wrong shape
					continue

		logger.info(f"[DataLoader] Successfully loaded {len(candidates)} candidates.")  # summary
		return candidates

	def parse_candidates(self, results: Optional[Iterable[Dict[str, Any]]]) -> List[SearchCandidate]:
		"""Parse a provider "results" array, skipping entries that are not objects or lack an id."""
		candidates = []
		for raw in results or []:
			try:
				candidates.append(self.parse_candidate(raw))
			except (TypeError, ValueError) as e:
				logger.warning(f"[DataLoader] Skipping malformed search result: {e}")
		return candidates

	def parse_candidate(self, data: Dict[str, Any]) -> SearchCandidate:
		"""
		Convert one raw provider object into a SearchCandidate.
		Raises ValueError when the object has no usable id.
		"""
		if not isinstance(data, dict):
			raise TypeError(f"expected an object, got {type(data).__name__}")
		raw_id = data.get('id', data.get('tmdb_id'))
		if raw_id is None or isinstance(raw_id, bool):
			raise ValueError("search result has no id")
		if isinstance(raw_id, float) and not math.isfinite(raw_id):  # 1e400 parses as inf
			raise ValueError(f"search result id is not finite: {raw_id}")
		candidate_id = int(raw_id)  # ValueError for junk ids

		return SearchCandidate(
			id=candidate_id,
			title=str(data.get('title') or data.get('original_title') or ''),  # display title
			release_date=data.get('release_date') or None,  # raw date string
			popularity=max(0.0, self._to_float(data.get('popularity'))),  # non-negative
			vote_average=min(10.0, max(0.0, self._to_float(data.get('vote_average')))),  # 0..10
			vote_count=max(0, int(self._to_float(data.get('vote_count')))),  # non-negative
			genre_ids=self._parse_genre_ids(data.get('genre_ids')),  # codes only
			overview=str(data.get('overview') or ''),  # synopsis
			poster_path=data.get('poster_path') or None,  # optional handle
		)

	def _to_float(self, value: Any) -> float:
		"""Best-effort numeric conversion; anything unusable becomes 0."""
		if value is None or isinstance(value, bool):
			return 0.0
		try:
			number = float(value)
		except (TypeError, ValueError):
			return 0.0
		return number if math.isfinite(number) else 0.0

	def _parse_genre_ids(self, value: Any) -> Tuple[int, ...]:
		"""Keep integer-like genre codes in order, dropping everything else."""
		if not isinstance(value, (list, tuple)):
			return ()
		ids = []
		for item in value:
			if isinstance(item, bool):
				continue
			try:
				ids.append(int(item))
			except (TypeError, ValueError):
				continue
		return tuple(ids)
