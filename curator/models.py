"""
Data models for the Movie Catalog Curator.
Defines the core data structures shared by scoring, grouping, tagging and persistence.
"""

# Import dataclass to define simple "record-like" classes without boilerplate
from dataclasses import dataclass, field  # auto-generates __init__, __repr__, etc.
# Import typing helpers for precise and self-documenting types
from typing import Dict, List, Optional, Tuple  # containers and optional values
import re  # release date parsing

# Leading four-digit year of a TMDB date string ("1999-03-31" -> 1999)
_RE_YEAR = re.compile(r"^\s*(\d{4})")


def parse_release_year(release_date: Optional[str]) -> Optional[int]:
	"""Return the release year of a date string, or None when absent or malformed."""
	if not release_date or not isinstance(release_date, str):
		return None
	m = _RE_YEAR.match(release_date)
	if not m:
		return None
	year = int(m.group(1))
	return year if year > 0 else None


@dataclass(frozen=True)
class SearchCandidate:
	"""
	A single movie returned by the external search provider.
	Immutable: scoring and grouping wrap it instead of changing it.
	"""
	id: int  # unique within one result set
	title: str  # display title as returned by the provider
	release_date: Optional[str] = None  # raw "YYYY-MM-DD" string, may be missing or malformed
	popularity: float = 0.0  # provider popularity (non-negative, unbounded)
	vote_average: float = 0.0  # 0..10 average rating
	vote_count: int = 0  # number of votes
	genre_ids: Tuple[int, ...] = ()  # provider genre codes
	overview: str = ''  # synopsis, may be empty
	poster_path: Optional[str] = None  # opaque poster handle

	@property
	def release_year(self) -> Optional[int]:
		return parse_release_year(self.release_date)


@dataclass(frozen=True)
class ScoredCandidate:
	candidate: SearchCandidate  # the untouched input
	relevance_score: float  # ordering-only relevance signal

	@property
	def id(self) -> int:
		return self.candidate.id

	@property
	def title(self) -> str:
		return self.candidate.title


@dataclass
class FranchiseGroup:
	"""Search results sharing a derived title prefix, best match first."""
	name: str  # derived franchise key
	members: List[ScoredCandidate] = field(default_factory=list)  # sorted by score, descending


@dataclass
class SearchResultSet:
	"""
	Partition of one batch of search results into franchise groups and standalone entries.
	Every input candidate appears exactly once across both.
	"""
	franchise_groups: Dict[str, FranchiseGroup] = field(default_factory=dict)  # first-seen order
	standalone: List[ScoredCandidate] = field(default_factory=list)  # sorted by score, descending

	def all_ids(self) -> List[int]:
		ids = [m.id for g in self.franchise_groups.values() for m in g.members]
		ids.extend(s.id for s in self.standalone)
		return ids

	def size(self) -> int:
		return len(self.all_ids())


@dataclass(frozen=True)
class TagCandidate:
	"""
	One label proposed for the selected movie.
	Recomputed from scratch on every change; carries no identity across runs.
	"""
	label: str  # text shown on the chip and stored in custom_tags
	source: str  # which rule produced it (genre, awards, suggested-combo, ...)
	category: str  # primary | secondary | suggested
	is_compound: bool = False  # True for combination labels
	selected: bool = False  # label currently in the user's selection


@dataclass(frozen=True)
class SelectionState:
	"""
	The curator's current tag selection.
	selected_combos is always the compound-label subset of selected_tags.
	"""
	selected_tags: Tuple[str, ...] = ()  # insertion order kept for display
	selected_combos: Tuple[str, ...] = ()  # compound labels only

	def has(self, label: str) -> bool:
		return label in self.selected_tags


@dataclass(frozen=True)
class SearchPage:
	"""One page of the provider's free-text search."""
	results: List[SearchCandidate]
	page: int = 1
	total_pages: int = 0
	total_results: int = 0


@dataclass(frozen=True)
class CastMember:
	name: str
	character: str
	profile_path: Optional[str] = None


@dataclass
class MovieDetails:
	"""Detail enrichment read from the provider when a movie is saved."""
	tmdb_id: int
	runtime: Optional[int] = None  # minutes
	vote_average: Optional[float] = None
	cast: List[dict] = field(default_factory=list)  # raw billed cast entries
	crew: List[dict] = field(default_factory=list)  # raw crew entries


@dataclass
class CatalogRecord:
	"""
	A curated movie as persisted in the catalog table.
	Field names follow the table's column names.
	"""
	title: str
	slug: str
	overview: str
	poster_path: Optional[str]
	release_date: Optional[str]
	m3u8_link: str  # streaming link
	tmdb_id: int
	rating: float
	duration: int  # minutes
	cast: List[CastMember]
	director: str
	category: str
	custom_tags: List[str]
	asset_id: Optional[str] = None  # optional asset identifier
	id: Optional[int] = None  # assigned by the store

	def to_row(self) -> dict:
		"""Serialize into the column mapping sent to the store (id excluded)."""
		return {
			'title': self.title,
			'slug': self.slug,
			'overview': self.overview,
			'poster_path': self.poster_path,
			'release_date': self.release_date,
			'm3u8_link': self.m3u8_link,
			'asset_id': self.asset_id,
			'tmdb_id': self.tmdb_id,
			'rating': self.rating,
			'duration': self.duration,
			'cast': [
				{'name': c.name, 'character': c.character, 'profile_path': c.profile_path}
				for c in self.cast
			],
			'director': self.director,
			'category': self.category,
			'custom_tags': list(self.custom_tags),
		}
