#!/usr/bin/env python3
"""
User accounts and movie collections

A User owns an ordered collection of movies, unique by IMDb id. Every mutating
operation writes the full user record through the store straight away
(write-through, no batching).

Account and collection operations never raise on expected failures. They
return an OperationResult whose `error` names the kind of failure.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from vault.constants import (
    MSG_EMAIL_TAKEN, MSG_NO_ACCOUNT, MSG_BAD_PASSWORD,
    MSG_ALREADY_IN_COLLECTION, MSG_NOT_IN_COLLECTION, MSG_ADDED, MSG_REMOVED,
    MSG_REVIEW_ADDED,
)
from vault.errors import VaultError, ConflictError, NotFoundError, AuthError
from vault.movie import Movie, filter_movies
from vault.review import Review, utc_timestamp
from vault.storage import UserStore

logger = logging.getLogger(__name__)


@dataclass
class OperationResult:
    """Outcome of an account or collection operation"""
    success: bool
    message: str = ''
    user: Optional['User'] = None
    error: Optional[VaultError] = None

    @classmethod
    def ok(cls, message: str = '', user: Optional['User'] = None) -> 'OperationResult':
        return cls(True, message, user=user)

    @classmethod
    def fail(cls, error: VaultError) -> 'OperationResult':
        return cls(False, error.message, error=error)

    def to_dict(self) -> Dict:
        return {'success': self.success, 'message': self.message}


@dataclass
class CollectionStats:
    """Summary counts for a user's collection"""
    total_movies: int
    reviewed_movies: int
    top_genre: str
    genres: Dict[str, int] = field(default_factory=dict)


class User:
    """An account and its movie collection"""

    def __init__(self, name: str, email: str, password: str, store: Optional[UserStore] = None):
        self.name = name
        self._email = email
        self._password = password
        self.collection: List[Movie] = []
        self.join_date = utc_timestamp()
        self.store = store

    @property
    def email(self) -> str:
        return self._email

    def validate_password(self, attempt: str) -> bool:
        return attempt == self._password

    # ------------------------------------------------------------------
    # Collection
    # ------------------------------------------------------------------

    def add_movie(self, movie: Movie) -> OperationResult:
        if self.has_movie(movie.imdb_id):
            return OperationResult.fail(ConflictError(MSG_ALREADY_IN_COLLECTION))
        self.collection.append(movie)
        self.save()
        logger.info(f"{self._email}: added {movie.imdb_id} ({movie.title})")
        return OperationResult.ok(MSG_ADDED.format(title=movie.title))

    def remove_movie(self, imdb_id: str) -> OperationResult:
        for index, movie in enumerate(self.collection):
            if movie.imdb_id == imdb_id:
                removed = self.collection.pop(index)
                self.save()
                logger.info(f"{self._email}: removed {imdb_id} ({removed.title})")
                return OperationResult.ok(MSG_REMOVED.format(title=removed.title))
        return OperationResult.fail(NotFoundError(MSG_NOT_IN_COLLECTION))

    def get_movie(self, imdb_id: str) -> Optional[Movie]:
        return next((m for m in self.collection if m.imdb_id == imdb_id), None)

    def has_movie(self, imdb_id: str) -> bool:
        return self.get_movie(imdb_id) is not None

    def add_review(self, imdb_id: str, review: Review) -> OperationResult:
        """Attach a review to a movie in the collection and persist"""
        movie = self.get_movie(imdb_id)
        if movie is None:
            return OperationResult.fail(NotFoundError(MSG_NOT_IN_COLLECTION))
        movie.add_review(review)
        self.save()
        return OperationResult.ok(MSG_REVIEW_ADDED.format(title=movie.title))

    def stats(self) -> CollectionStats:
        genres: Dict[str, int] = {}
        for movie in self.collection:
            genres[movie.genre] = genres.get(movie.genre, 0) + 1

        # max() keeps the first key on ties, and dicts keep insertion order
        top_genre = max(genres, key=genres.get) if genres else 'None'

        return CollectionStats(
            total_movies=len(self.collection),
            reviewed_movies=sum(1 for m in self.collection if m.reviews),
            top_genre=top_genre,
            genres=genres,
        )

    def filter_by_genre(self, genre: str) -> List[Movie]:
        return filter_movies(self.collection, genre)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self):
        """Write the full record through the store (no-op when detached)"""
        if self.store is not None:
            self.store.save_user(self)

    def to_dict(self) -> Dict:
        return {
            'name': self.name,
            'email': self._email,
            'password': self._password,
            'collection': [m.to_dict() for m in self.collection],
            'joinDate': self.join_date,
        }

    @classmethod
    def from_dict(cls, data: Dict, store: Optional[UserStore] = None) -> 'User':
        user = cls(data.get('name'), data.get('email'), data.get('password'), store=store)
        if data.get('joinDate'):
            user.join_date = data['joinDate']
        user.collection = [Movie.from_dict(m) for m in data.get('collection') or []]
        return user

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    @classmethod
    def signup(cls, store: UserStore, name: str, email: str, password: str) -> OperationResult:
        if store.has_user(email):
            logger.info(f"Signup rejected, account exists: {email}")
            return OperationResult.fail(ConflictError(MSG_EMAIL_TAKEN))

        user = cls(name, email, password, store=store)
        user.save()
        logger.info(f"Created account: {email}")
        return OperationResult.ok(user=user)

    @classmethod
    def login(cls, store: UserStore, email: str, password: str) -> OperationResult:
        record = store.get_user_record(email)
        if not record:
            return OperationResult.fail(NotFoundError(MSG_NO_ACCOUNT))

        if record.get('password') != password:
            logger.info(f"Login failed for {email}: wrong password")
            return OperationResult.fail(AuthError(MSG_BAD_PASSWORD))

        user = cls.from_dict(record, store=store)
        store.set_active_email(email)
        logger.info(f"Logged in: {email}")
        return OperationResult.ok(user=user)

    @staticmethod
    def logout(store: UserStore):
        """Clear the active session. Account data is untouched."""
        store.clear_active_email()

    @classmethod
    def current(cls, store: UserStore) -> Optional['User']:
        """The user named by the active session key, if any"""
        email = store.get_active_email()
        if not email:
            return None
        record = store.get_user_record(email)
        if not record:
            return None
        return cls.from_dict(record, store=store)

    def __repr__(self):
        return f"User({self.name!r}, {self._email!r}, movies={len(self.collection)})"
