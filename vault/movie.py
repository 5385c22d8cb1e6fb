#!/usr/bin/env python3
"""
Movie model with genre-driven display metadata

A movie's genre maps to one of a closed set of variants (Action, Comedy, Drama,
Horror, Other). The variant only decides display metadata: card class, badge
class and glyph. Everything else is shared by all movies.

The aggregate rating is an integer 0-5 recomputed from reviews whenever a
review is added. average_rating() is the one-decimal mean used for display.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple
from urllib.parse import urlencode

from vault.constants import (
    ABSENT_MARKER, DEFAULT_PLOT, DEFAULT_CREDIT, OTHER_GENRE, TRAILER_SEARCH_URL,
    FILTER_ALL, NAMED_GENRES,
)
from vault.errors import ValidationError
from vault.review import Review, star_string, utc_timestamp

logger = logging.getLogger(__name__)


class Genre(Enum):
    """Closed set of display variants"""
    ACTION = 'Action'
    COMEDY = 'Comedy'
    DRAMA = 'Drama'
    HORROR = 'Horror'
    OTHER = 'Other'


@dataclass(frozen=True)
class GenreDisplay:
    """Styling metadata for one variant"""
    css_class: str
    badge_class: str
    glyph: str


GENRE_DISPLAY: Dict[Genre, GenreDisplay] = {
    Genre.ACTION: GenreDisplay('action-card', 'action', '🔥'),
    Genre.COMEDY: GenreDisplay('comedy-card', 'comedy', '😂'),
    Genre.DRAMA: GenreDisplay('drama-card', 'drama', '🎭'),
    Genre.HORROR: GenreDisplay('horror-card', 'horror', '👻'),
    Genre.OTHER: GenreDisplay('other-card', 'other', '📽️'),
}

_NAMED_VARIANTS = {g.value: g for g in Genre if g is not Genre.OTHER}


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with .5 going up (Python's round() goes to even)"""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def classify(raw_genre: Optional[str]) -> Tuple[Genre, str]:
    """
    Pick the display variant from an OMDb genre field

    Only the first comma-separated token counts, trimmed and matched
    case-sensitively. Returns (variant, label) where label is the genre name
    stored on the movie:

        "Action, Adventure" -> (Genre.ACTION, "Action")
        "Sci-Fi, Drama"     -> (Genre.OTHER, "Sci-Fi")
        ""                  -> (Genre.OTHER, "Other")
    """
    token = (raw_genre or '').split(',')[0].strip()
    variant = _NAMED_VARIANTS.get(token)
    if variant is not None:
        return variant, variant.value
    return Genre.OTHER, token or OTHER_GENRE


class Movie:
    """A catalog entry plus the owner's reviews and aggregate rating"""

    def __init__(self, title: str, year, genre: str, poster: Optional[str], imdb_id: str,
                 plot: str, director: str, actors: str):
        self.title = title
        self.year = year
        self.genre = genre
        self.poster = poster
        self.imdb_id = imdb_id
        self.plot = plot
        self.director = director
        self.actors = actors
        self._user_rating = 0
        self.reviews: List[Review] = []
        self.date_added = utc_timestamp()

    # ------------------------------------------------------------------
    # Rating
    # ------------------------------------------------------------------

    @property
    def rating(self) -> int:
        return self._user_rating

    @rating.setter
    def rating(self, value):
        self.set_rating(value)

    def set_rating(self, value):
        """Set the aggregate rating directly (0-5, stored rounded)"""
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError('Rating must be between 0 and 5')
        # NaN fails this check as well
        if not (0 <= value <= 5):
            raise ValidationError('Rating must be between 0 and 5')
        self._user_rating = int(round_half_up(value))

    def add_review(self, review: Review):
        """Append a review and recompute the aggregate rating"""
        self.reviews.append(review)
        mean = sum(r.rating for r in self.reviews) / len(self.reviews)
        self._user_rating = int(round_half_up(mean))
        logger.debug(f"Review added to {self.imdb_id}: rating now {self._user_rating}")

    def average_rating(self) -> float:
        """Mean review rating to one decimal place, 0 with no reviews"""
        if not self.reviews:
            return 0
        mean = sum(r.rating for r in self.reviews) / len(self.reviews)
        return round_half_up(mean, 1)

    def stars(self) -> str:
        return star_string(self._user_rating)

    # ------------------------------------------------------------------
    # Display metadata
    # ------------------------------------------------------------------

    @property
    def variant(self) -> Genre:
        return classify(self.genre)[0]

    def display_metadata(self) -> GenreDisplay:
        return GENRE_DISPLAY[self.variant]

    @property
    def has_poster(self) -> bool:
        return bool(self.poster) and self.poster != ABSENT_MARKER

    def trailer_search_url(self) -> str:
        """YouTube search link for the trailer"""
        query = f"{self.title} {self.year} trailer"
        return f"{TRAILER_SEARCH_URL}?{urlencode({'search_query': query})}"

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict:
        return {
            'title': self.title,
            'year': self.year,
            'genre': self.genre,
            'poster': self.poster,
            'imdbID': self.imdb_id,
            'plot': self.plot,
            'director': self.director,
            'actors': self.actors,
            'userRating': self._user_rating,
            'reviews': [r.to_dict() for r in self.reviews],
            'dateAdded': self.date_added,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Movie':
        """
        Restore a saved movie

        Saved fields are restored as stored, empty values included; only the
        genre label goes back through classify(). The stored rating is
        restored as-is, without range checks or a recompute from the reviews.
        """
        _, label = classify(data.get('genre'))
        movie = cls(
            title=data.get('title'),
            year=data.get('year'),
            genre=label,
            poster=data.get('poster'),
            imdb_id=data.get('imdbID'),
            plot=data.get('plot'),
            director=data.get('director'),
            actors=data.get('actors'),
        )
        if data.get('dateAdded'):
            movie.date_added = data['dateAdded']
        if data.get('userRating') is not None:
            movie._user_rating = data['userRating']
        movie.reviews = [Review.from_dict(r) for r in data.get('reviews') or []]
        return movie

    def __eq__(self, other):
        if not isinstance(other, Movie):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"Movie({self.title!r}, {self.year!r}, genre={self.genre!r}, imdb_id={self.imdb_id!r})"


def _field(data: Dict, key: str):
    """Read a serialized key, falling back to OMDb's capitalized key"""
    value = data.get(key)
    if value:
        return value
    return data.get(key[0].upper() + key[1:])


def create_movie(data: Dict) -> Movie:
    """
    Build a Movie from an OMDb detail record or a serialized movie

    Accepts both OMDb keys (Title, Genre, ...) and serialized keys (title,
    genre, ...). The genre label comes from classify().
    """
    _, label = classify(_field(data, 'genre'))
    return Movie(
        title=_field(data, 'title'),
        year=_field(data, 'year'),
        genre=label,
        poster=_field(data, 'poster'),
        imdb_id=data.get('imdbID'),
        plot=_field(data, 'plot') or DEFAULT_PLOT,
        director=_field(data, 'director') or DEFAULT_CREDIT,
        actors=_field(data, 'actors') or DEFAULT_CREDIT,
    )


def filter_movies(movies: List[Movie], genre: str) -> List[Movie]:
    """
    Filter by genre label

    'all' keeps everything in order, 'Other' keeps the movies outside the four
    named genres, anything else is an exact label match.
    """
    if genre == FILTER_ALL:
        return list(movies)
    if genre == OTHER_GENRE:
        return [m for m in movies if m.genre not in NAMED_GENRES]
    return [m for m in movies if m.genre == genre]
