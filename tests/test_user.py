#!/usr/bin/env python3
"""
Test suite for vault/user.py - accounts, collection CRUD, stats, write-through
"""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from vault.user import User, OperationResult
from vault.movie import Movie
from vault.review import Review
from vault.storage import MemoryUserStore
from vault.errors import ConflictError, NotFoundError, AuthError


@pytest.fixture
def store():
    return MemoryUserStore()


@pytest.fixture
def user(store):
    return User.signup(store, "Ana", "a@x.com", "pw1").user


def make_movie(imdb_id, title='Film', genre='Drama'):
    return Movie(title, '2000', genre, 'N/A', imdb_id, 'Plot.', 'Director', 'Actors')


class TestSignupAndLogin:

    def test_signup_creates_and_persists(self, store):
        result = User.signup(store, "Ana", "a@x.com", "pw1")
        assert result.success is True
        assert result.user.email == "a@x.com"
        assert store.get_user_record("a@x.com")['name'] == "Ana"
        assert store.get_active_email() == "a@x.com"

    def test_signup_conflict(self, store, user):
        result = User.signup(store, "Other Ana", "a@x.com", "different")
        assert result.success is False
        assert isinstance(result.error, ConflictError)
        assert result.message == "An account with this email already exists."
        assert store.get_user_record("a@x.com")['name'] == "Ana"

    def test_wrong_password_then_right(self, store, user):
        bad = User.login(store, "a@x.com", "wrong")
        assert bad.to_dict() == {'success': False, 'message': 'Incorrect password.'}
        assert isinstance(bad.error, AuthError)

        good = User.login(store, "a@x.com", "pw1")
        assert good.success is True
        assert good.user.name == "Ana"

    def test_unknown_email(self, store):
        result = User.login(store, "nobody@x.com", "pw")
        assert result.success is False
        assert isinstance(result.error, NotFoundError)
        assert result.message == "No account found with this email."

    def test_login_marks_active_session(self, store, user):
        User.logout(store)
        User.login(store, "a@x.com", "pw1")
        assert store.get_active_email() == "a@x.com"

    def test_logout_keeps_account(self, store, user):
        User.logout(store)
        assert store.get_active_email() is None
        assert User.current(store) is None
        assert store.get_user_record("a@x.com") is not None

    def test_current_restores_user(self, store, user):
        user.add_movie(make_movie('tt1', 'Heat'))
        restored = User.current(store)
        assert restored.email == "a@x.com"
        assert [m.imdb_id for m in restored.collection] == ['tt1']

    def test_password_not_exposed(self, user):
        assert not hasattr(user, 'password')
        assert user.validate_password("pw1") is True
        assert user.validate_password("pw2") is False

    def test_email_read_only(self, user):
        with pytest.raises(AttributeError):
            user.email = "b@x.com"


class TestCollection:

    def test_add_movie(self, store, user):
        result = user.add_movie(make_movie('tt0113277', 'Heat'))
        assert result.success is True
        assert result.message == '"Heat" added to your collection!'
        saved = store.get_user_record("a@x.com")['collection']
        assert [m['imdbID'] for m in saved] == ['tt0113277']

    def test_add_same_id_twice(self, user):
        first = user.add_movie(make_movie('tt1', 'Heat'))
        second = user.add_movie(make_movie('tt1', 'Heat (again)'))
        assert first.success is True
        assert second.success is False
        assert second.message == 'Movie is already in your collection!'
        assert isinstance(second.error, ConflictError)
        assert len(user.collection) == 1
        assert user.collection[0].title == 'Heat'

    def test_remove_on_empty(self, user):
        result = user.remove_movie('tt1')
        assert result.to_dict() == {
            'success': False,
            'message': 'Movie not found in your collection.',
        }

    def test_remove_movie(self, store, user):
        user.add_movie(make_movie('tt1', 'Heat'))
        user.add_movie(make_movie('tt2', 'Alien'))
        result = user.remove_movie('tt1')
        assert result.success is True
        assert result.message == '"Heat" removed from collection.'
        assert [m.imdb_id for m in user.collection] == ['tt2']
        saved = store.get_user_record("a@x.com")['collection']
        assert [m['imdbID'] for m in saved] == ['tt2']

    def test_get_movie(self, user):
        movie = make_movie('tt1', 'Heat')
        user.add_movie(movie)
        assert user.get_movie('tt1') is movie
        assert user.get_movie('tt404') is None
        assert user.has_movie('tt1') is True

    def test_add_review_persists(self, store, user):
        user.add_movie(make_movie('tt1', 'Heat'))
        result = user.add_review('tt1', Review('tt1', 'Ana', 'Superb', 5))
        assert result.success is True
        saved = store.get_user_record("a@x.com")['collection'][0]
        assert saved['userRating'] == 5
        assert saved['reviews'][0]['text'] == 'Superb'

    def test_add_review_unknown_movie(self, user):
        result = user.add_review('tt404', Review('tt404', 'Ana', 'Hm', 3))
        assert result.success is False
        assert isinstance(result.error, NotFoundError)


class TestStats:

    def test_empty(self, user):
        stats = user.stats()
        assert stats.total_movies == 0
        assert stats.reviewed_movies == 0
        assert stats.top_genre == 'None'
        assert stats.genres == {}

    def test_counts_and_top_genre(self, user):
        for i, genre in enumerate(['Action', 'Drama', 'Drama', 'Western']):
            user.add_movie(make_movie(f'tt{i}', genre=genre))
        user.add_review('tt1', Review('tt1', 'Ana', 'Good', 4))

        stats = user.stats()
        assert stats.total_movies == 4
        assert stats.reviewed_movies == 1
        assert stats.top_genre == 'Drama'
        assert stats.genres == {'Action': 1, 'Drama': 2, 'Western': 1}

    def test_tie_goes_to_first_seen(self, user):
        for i, genre in enumerate(['Comedy', 'Horror', 'Horror', 'Comedy']):
            user.add_movie(make_movie(f'tt{i}', genre=genre))
        assert user.stats().top_genre == 'Comedy'


class TestFilterByGenre:

    def test_filters(self, user):
        for i, genre in enumerate(['Action', 'Sci-Fi', 'Comedy', 'Other', 'Action']):
            user.add_movie(make_movie(f'tt{i}', genre=genre))

        assert user.filter_by_genre('all') == user.collection
        assert [m.imdb_id for m in user.filter_by_genre('Other')] == ['tt1', 'tt3']
        assert [m.imdb_id for m in user.filter_by_genre('Action')] == ['tt0', 'tt4']
        assert user.filter_by_genre('Horror') == []


class TestSerialization:

    def test_to_dict_shape(self, user):
        assert set(user.to_dict()) == {'name', 'email', 'password', 'collection', 'joinDate'}

    def test_round_trip(self, user):
        user.add_movie(make_movie('tt1', 'Heat', 'Action'))
        user.add_movie(make_movie('tt2', 'Alien', 'Horror'))
        user.add_review('tt2', Review('tt2', 'Ana', 'Scary', 4))

        restored = User.from_dict(user.to_dict())

        assert restored.email == user.email
        assert restored.join_date == user.join_date
        assert restored.collection == user.collection
        assert restored.get_movie('tt2').rating == 4
        assert restored.validate_password("pw1")


class FailingStore(MemoryUserStore):
    """Store whose writes fail after setup"""

    fail = False

    def _write(self, document):
        if self.fail:
            raise OSError("disk full")
        super()._write(document)


class TestWriteThrough:

    def test_every_mutation_saves(self, store, user):
        user.add_movie(make_movie('tt1'))
        assert len(store.get_user_record("a@x.com")['collection']) == 1
        user.remove_movie('tt1')
        assert len(store.get_user_record("a@x.com")['collection']) == 0

    def test_write_failure_propagates_and_state_diverges(self):
        store = FailingStore()
        user = User.signup(store, "Ana", "a@x.com", "pw1").user
        store.fail = True

        with pytest.raises(OSError):
            user.add_movie(make_movie('tt1'))

        assert user.has_movie('tt1')
        assert store.get_user_record("a@x.com")['collection'] == []

    def test_detached_user_does_not_save(self):
        user = User("Ana", "a@x.com", "pw1")
        result = user.add_movie(make_movie('tt1'))
        assert isinstance(result, OperationResult)
        assert result.success is True
