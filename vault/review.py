#!/usr/bin/env python3
"""
Review model - one user's star rating and text for a movie

Reviews are immutable once created. The rating is validated on construction
and exposed read-only.
"""

import uuid
from datetime import datetime, timezone
from typing import Dict, Optional

from vault.constants import STAR_FILLED, STAR_EMPTY, MAX_STARS
from vault.errors import ValidationError


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision, e.g. 2024-03-05T18:22:01.123Z"""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def star_string(count: int) -> str:
    """Fixed-width star glyphs: filled for count, empty for the rest"""
    count = max(0, min(MAX_STARS, int(count)))
    return STAR_FILLED * count + STAR_EMPTY * (MAX_STARS - count)


def _validate_rating(value) -> int:
    """Accept whole numbers 1-5 (int, integral float, or digit string)"""
    if isinstance(value, bool):
        raise ValidationError('Rating must be a number between 1 and 5')

    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise ValidationError('Rating must be a number between 1 and 5')

    if not isinstance(value, (int, float)):
        raise ValidationError('Rating must be a number between 1 and 5')

    if isinstance(value, float) and not value.is_integer():
        raise ValidationError('Rating must be a whole number between 1 and 5')

    if value < 1 or value > 5:
        raise ValidationError('Rating must be a number between 1 and 5')

    return int(value)


class Review:
    """A single review attached to a movie"""

    __slots__ = ('movie_id', 'user_name', 'text', '_rating', 'date', 'id')

    def __init__(self, movie_id: str, user_name: str, text: str, rating,
                 date: Optional[str] = None, review_id: Optional[str] = None):
        self.movie_id = movie_id
        self.user_name = user_name
        self.text = text
        self._rating = _validate_rating(rating)
        self.date = date or utc_timestamp()
        self.id = review_id or uuid.uuid4().hex

    @property
    def rating(self) -> int:
        return self._rating

    def stars(self) -> str:
        """Star display, e.g. ★★★☆☆"""
        return star_string(self._rating)

    def formatted_date(self) -> str:
        """Creation date as 'Mar 5, 2024'; the raw value if it can't be parsed"""
        try:
            parsed = datetime.fromisoformat(self.date.replace('Z', '+00:00'))
        except (AttributeError, ValueError):
            return str(self.date)
        return f"{parsed.strftime('%b')} {parsed.day}, {parsed.year}"

    def to_dict(self) -> Dict:
        return {
            'movieId': self.movie_id,
            'userName': self.user_name,
            'text': self.text,
            'rating': self._rating,
            'date': self.date,
            'id': self.id,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Review':
        """Restore a saved review. Ratings are validated again."""
        return cls(
            movie_id=data.get('movieId'),
            user_name=data.get('userName'),
            text=data.get('text', ''),
            rating=data.get('rating'),
            date=data.get('date'),
            review_id=data.get('id'),
        )

    def __eq__(self, other):
        if not isinstance(other, Review):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"Review(movie_id={self.movie_id!r}, user_name={self.user_name!r}, rating={self._rating})"
