#!/usr/bin/env python3
"""
Session context - the application layer between the CLI and the model

Holds what the browser app kept in globals: the current user, the active
genre filter and the trending list. A Session is created with Session.start(),
which restores the active user from storage, and torn down with logout().

Handlers never raise for user mistakes; they return OperationResult.
"""

import logging
import random
import re
from typing import Dict, List, Optional

from vault.constants import (
    FILTER_ALL, MIN_NAME_LENGTH, TRENDING_SEARCHES,
    TRENDING_TERMS_PER_LOAD, TRENDING_RESULTS_PER_TERM,
    MSG_NAME_TOO_SHORT, MSG_LOGIN_REQUIRED, MSG_NO_DETAILS,
    MSG_REVIEW_TEXT_REQUIRED, MSG_REVIEW_RATING_REQUIRED,
)
from vault.errors import ValidationError, AuthError
from vault.movie import Movie, create_movie, filter_movies
from vault.omdb import OMDbClient
from vault.review import Review
from vault.storage import UserStore
from vault.user import User, OperationResult

logger = logging.getLogger(__name__)

_YEAR_RE = re.compile(r'\d{4}')


def _year_sort_key(result: Dict) -> int:
    """Leading 4-digit year, or -1 so unknown years sort last"""
    match = _YEAR_RE.match(str(result.get('year') or ''))
    return int(match.group(0)) if match else -1


class Session:
    """One active-session context"""

    def __init__(self, store: UserStore, catalog: OMDbClient, config: Optional[Dict] = None):
        config = config or {}
        self.store = store
        self.catalog = catalog
        self.current_user: Optional[User] = None
        self.current_filter = FILTER_ALL
        self.trending_movies: List[Movie] = []
        self.trending_terms_per_load = config.get('trending_terms_per_load', TRENDING_TERMS_PER_LOAD)
        self.trending_results_per_term = config.get('trending_results_per_term', TRENDING_RESULTS_PER_TERM)

    @classmethod
    def start(cls, store: UserStore, catalog: OMDbClient, config: Optional[Dict] = None) -> 'Session':
        """Create a session and restore the persisted active user, if any"""
        session = cls(store, catalog, config)
        session.current_user = User.current(store)
        if session.current_user:
            logger.info(f"Restored session for {session.current_user.email}")
        return session

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    def signup(self, name: str, email: str, password: str) -> OperationResult:
        name = (name or '').strip()
        email = (email or '').strip()
        if len(name) < MIN_NAME_LENGTH:
            return OperationResult.fail(ValidationError(MSG_NAME_TOO_SHORT))

        result = User.signup(self.store, name, email, password)
        if result.success:
            self.current_user = result.user
        return result

    def login(self, email: str, password: str) -> OperationResult:
        result = User.login(self.store, (email or '').strip(), password)
        if result.success:
            self.current_user = result.user
        return result

    def logout(self):
        User.logout(self.store)
        if self.current_user:
            logger.info(f"Logged out: {self.current_user.email}")
        self.current_user = None
        self.current_filter = FILTER_ALL
        self.trending_movies = []

    def _require_user(self) -> Optional[OperationResult]:
        if self.current_user is None:
            return OperationResult.fail(AuthError(MSG_LOGIN_REQUIRED))
        return None

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    def fetch_movie(self, imdb_id: str) -> Optional[Movie]:
        """Fresh Movie built from catalog details, or None"""
        details = self.catalog.get_by_id(imdb_id)
        if not details:
            return None
        return create_movie(details)

    def search(self, query: str) -> List[Movie]:
        """Search the catalog and load full details for each hit"""
        if not query or not query.strip():
            return []

        movies = []
        for hit in self.catalog.search(query):
            movie = self.fetch_movie(hit['imdbID'])
            if movie is not None:
                movies.append(movie)
        return movies

    def load_trending(self, rng: Optional[random.Random] = None) -> List[Movie]:
        """
        Build the trending list from a random pick of popular search terms

        Takes the first few hits per term, drops duplicate ids, sorts newest
        first and loads full details for each.
        """
        rng = rng or random.Random()
        count = min(self.trending_terms_per_load, len(TRENDING_SEARCHES))
        picks = rng.sample(TRENDING_SEARCHES, count)

        hits: List[Dict] = []
        for term in picks:
            hits.extend(self.catalog.search(term)[:self.trending_results_per_term])

        seen = set()
        unique = []
        for hit in hits:
            if hit['imdbID'] in seen:
                continue
            seen.add(hit['imdbID'])
            unique.append(hit)

        unique.sort(key=_year_sort_key, reverse=True)

        self.trending_movies = []
        for hit in unique:
            movie = self.fetch_movie(hit['imdbID'])
            if movie is not None:
                self.trending_movies.append(movie)

        logger.info(f"Loaded {len(self.trending_movies)} trending movies from terms {picks}")
        return self.trending_movies

    # ------------------------------------------------------------------
    # Collection
    # ------------------------------------------------------------------

    def is_in_collection(self, imdb_id: str) -> bool:
        return self.current_user is not None and self.current_user.has_movie(imdb_id)

    def add_movie(self, imdb_id: str) -> OperationResult:
        missing = self._require_user()
        if missing:
            return missing

        movie = self.fetch_movie(imdb_id)
        if movie is None:
            return OperationResult.fail(ValidationError(MSG_NO_DETAILS))
        return self.current_user.add_movie(movie)

    def remove_movie(self, imdb_id: str) -> OperationResult:
        missing = self._require_user()
        if missing:
            return missing
        return self.current_user.remove_movie(imdb_id)

    def submit_review(self, imdb_id: str, text: str, rating) -> OperationResult:
        missing = self._require_user()
        if missing:
            return missing

        text = (text or '').strip()
        if not text:
            return OperationResult.fail(ValidationError(MSG_REVIEW_TEXT_REQUIRED))
        if not rating:
            return OperationResult.fail(ValidationError(MSG_REVIEW_RATING_REQUIRED))

        try:
            review = Review(imdb_id, self.current_user.name, text, rating)
        except ValidationError as e:
            return OperationResult.fail(e)

        return self.current_user.add_review(imdb_id, review)

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------

    def set_filter(self, genre: str):
        self.current_filter = genre or FILTER_ALL

    def collection_view(self) -> List[Movie]:
        if self.current_user is None:
            return []
        return self.current_user.filter_by_genre(self.current_filter)

    def trending_view(self) -> List[Movie]:
        return filter_movies(self.trending_movies, self.current_filter)
