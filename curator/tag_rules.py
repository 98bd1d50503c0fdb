"""
Static rule tables for tag inference and catalog categories.
Plain immutable lookup data; tagging.py evaluates them.
"""

from types import MappingProxyType
from typing import Mapping, Tuple

# Tag sources
SOURCE_GENRE = 'genre'
SOURCE_GENRE_DERIVED = 'genre-derived'
SOURCE_CONTENT = 'content-analysis'
SOURCE_AWARDS = 'awards'
SOURCE_RATINGS = 'ratings'
SOURCE_POPULARITY = 'popularity'
SOURCE_YEAR = 'year'
SOURCE_COMBO = 'suggested-combo'

# Tag categories
PRIMARY = 'primary'
SECONDARY = 'secondary'
SUGGESTED = 'suggested'

# Provider genre code -> (primary labels, secondary labels)
GENRE_MAP: Mapping[int, Tuple[Tuple[str, ...], Tuple[str, ...]]] = MappingProxyType({
	28: (('Action',), ('High-Octane',)),
	12: (('Adventure',), ('Epic',)),
	16: (('Animation',), ('Family-Friendly',)),
	35: (('Comedy',), ('Feel-Good', 'Adult Humor')),
	80: (('Thriller',), ('Suspense',)),
	18: (('Drama',), ('Thought-Provoking',)),
	27: (('Horror',), ('Psychological',)),
	878: (('Sci-Fi',), ('Futuristic',)),
	10752: (('War',), ('Historical',)),
	10749: (('Romance',), ('Heartwarming',)),
	53: (('Mystery',), ('Plot-Twist',)),
	99: (('Documentary',), ('Educational',)),
	10402: (('Musical',), ('Upbeat',)),
	37: (('Western',), ('Classic',)),
})

# Compound label -> prerequisite labels, in suggestion order
GENRE_COMBOS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
	'Edge of Seat': ('Thriller', 'Suspense'),
	'Mind Bending': ('Psychological', 'Plot-Twist'),
	'Heart Racing': ('Action', 'High-Octane'),
	'Soul Stirring': ('Drama', 'Thought-Provoking'),
	'Spine Chilling': ('Horror', 'Psychological'),
	'Feel Good Vibes': ('Comedy', 'Feel-Good'),
	'Visual Spectacle': ('Epic', 'High-Octane'),
	'Time Bender': ('Sci-Fi', 'Plot-Twist'),
	'Emotional Rollercoaster': ('Drama', 'Plot-Twist'),
	'Family Fun': ('Animation', 'Family-Friendly'),
	'Dark Comedy': ('Comedy', 'Drama'),
	'Romantic Comedy': ('Romance', 'Comedy'),
	'Action Comedy': ('Action', 'Comedy'),
	'Psychological Thriller': ('Horror', 'Psychological'),
	'Sci-Fi Action': ('Sci-Fi', 'Action'),
})

COMPOUND_LABELS = frozenset(GENRE_COMBOS)

# "Based on True Story"
TRUE_STORY_PHRASES = (
	'based on', 'true story', 'real events', 'real life',
	'actual events', 'inspired by', 'true account',
)
TRUE_STORY_GENRES = frozenset({18, 99})  # Drama, Documentary
TRUE_STORY_MIN_RATING = 6.5
TRUE_STORY_MIN_VOTES = 1000  # exclusive

# Awards: releases before this year use the classic thresholds
CLASSIC_CUTOFF_YEAR = 2000

# (min rating, exclusive min votes, exclusive min popularity or None)
OSCAR_WINNER_CLASSIC = (7.5, 1000, None)
OSCAR_WINNER_MODERN = (7.8, 2000, 50.0)
OSCAR_NOMINEE_CLASSIC = (7.2, 800, None)
OSCAR_NOMINEE_MODERN = (7.5, 1500, None)

MUST_WATCH_MIN_RATING = 8.0
MUST_WATCH_MIN_VOTES = 1000  # exclusive
TRENDING_MIN_POPULARITY = 100.0  # exclusive
TRENDING_MIN_VOTES = 500  # exclusive

# Special labels
LABEL_TRUE_STORY = 'Based on True Story'
LABEL_OSCAR_WINNER = 'OSCAR® Winner'
LABEL_OSCAR_NOMINEE = 'OSCAR® Nominee'
LABEL_MUST_WATCH = 'Must Watch'
LABEL_TRENDING = 'Trending'
LABEL_LATEST = 'Latest Release'
LABEL_RECENT = 'Recent'
LABEL_CLASSIC = 'Classic'

SPECIAL_LABELS = (
	LABEL_TRUE_STORY, LABEL_OSCAR_WINNER, LABEL_OSCAR_NOMINEE, LABEL_MUST_WATCH,
	LABEL_TRENDING, LABEL_LATEST, LABEL_RECENT, LABEL_CLASSIC,
)

# Catalog categories a saved movie must belong to
CATEGORIES = ('new releases', 'trending', 'popular')
