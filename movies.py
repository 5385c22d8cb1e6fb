#!/usr/bin/env python3
"""
movies.py - Personal movie vault from the command line

Sign up, log in, search OMDb, keep a collection, review movies and browse
what's trending. The logged-in account persists between runs (stored in the
JSON file named by storage_path in the config).
"""

import sys
import logging
import argparse
from pathlib import Path
from typing import List

from vault.config import load_config, setup_logging, build_store, build_catalog
from vault.movie import Movie
from vault.session import Session
from vault.user import OperationResult

logger = logging.getLogger(__name__)


def format_movie_line(movie: Movie, in_collection: bool = False) -> str:
    display = movie.display_metadata()
    marker = ' [in vault]' if in_collection else ''
    return (f"{display.glyph} {movie.imdb_id}  {movie.title} ({movie.year}) · "
            f"{movie.director}  [{movie.genre}] {movie.stars()}{marker}")


def print_movies(movies: List[Movie], session: Session, empty_message: str):
    if not movies:
        print(empty_message)
        return
    for movie in movies:
        print(format_movie_line(movie, session.is_in_collection(movie.imdb_id)))


def print_movie_detail(movie: Movie):
    print("=" * 60)
    print(f"{movie.title} ({movie.year})")
    print(f"Genre:    {movie.genre}    Rating: {movie.stars()}  (avg {movie.average_rating()})")
    print(f"Director: {movie.director}")
    print(f"Cast:     {movie.actors}")
    print(f"Trailer:  {movie.trailer_search_url()}")
    print("-" * 60)
    print(movie.plot)
    print("-" * 60)
    print(f"Reviews ({len(movie.reviews)})")
    if not movie.reviews:
        print("  No reviews yet. Be the first!")
    for review in movie.reviews:
        print(f"  {review.user_name}  {review.stars()}  {review.formatted_date()}")
        print(f"    {review.text}")
    print("=" * 60)


def report(result: OperationResult) -> int:
    if result.message:
        print(result.message)
    return 0 if result.success else 1


def require_login(session: Session) -> bool:
    if session.current_user is None:
        print("Not logged in. Run: python movies.py login EMAIL PASSWORD")
        return False
    return True


def cmd_signup(session: Session, args) -> int:
    result = session.signup(args.name, args.email, args.password)
    if result.success:
        print(f"Welcome, {result.user.name}")
    return report(result)


def cmd_login(session: Session, args) -> int:
    result = session.login(args.email, args.password)
    if result.success:
        print(f"Welcome, {result.user.name}")
    return report(result)


def cmd_logout(session: Session, args) -> int:
    session.logout()
    print("Logged out.")
    return 0


def cmd_whoami(session: Session, args) -> int:
    if not require_login(session):
        return 1
    user = session.current_user
    print(f"{user.name} <{user.email}> · joined {user.join_date}")
    return 0


def cmd_search(session: Session, args) -> int:
    if not require_login(session):
        return 1
    movies = session.search(args.query)
    print_movies(movies, session, "No movies found. Try a different title.")
    return 0


def cmd_show(session: Session, args) -> int:
    movie = None
    if session.current_user is not None:
        movie = session.current_user.get_movie(args.imdb_id)
    if movie is None:
        movie = session.fetch_movie(args.imdb_id)
    if movie is None:
        print("Movie not found.")
        return 1
    print_movie_detail(movie)
    return 0


def cmd_add(session: Session, args) -> int:
    return report(session.add_movie(args.imdb_id))


def cmd_remove(session: Session, args) -> int:
    return report(session.remove_movie(args.imdb_id))


def cmd_review(session: Session, args) -> int:
    return report(session.submit_review(args.imdb_id, args.text, args.rating))


def cmd_list(session: Session, args) -> int:
    if not require_login(session):
        return 1
    session.set_filter(args.genre)
    print(f"Collection ({len(session.current_user.collection)} movies)")
    if args.genre == 'all':
        empty = "Your collection is empty. Search for movies to add!"
    else:
        empty = f"No {args.genre} movies in your collection."
    print_movies(session.collection_view(), session, empty)
    return 0


def cmd_stats(session: Session, args) -> int:
    if not require_login(session):
        return 1
    stats = session.current_user.stats()
    print(f"📚 {stats.total_movies} movies")
    print(f"⭐ {stats.reviewed_movies} reviewed")
    print(f"🎭 Top: {stats.top_genre}")
    for genre, count in stats.genres.items():
        print(f"  {genre:12s} {count:4d}")
    return 0


def cmd_trending(session: Session, args) -> int:
    if not require_login(session):
        return 1
    session.set_filter(args.genre)
    print("Loading trending movies...")
    session.load_trending()
    if not session.trending_movies:
        print("Could not load trending movies. Try searching instead!")
        return 1
    print_movies(session.trending_view(), session,
                 f"No {args.genre} movies in trending right now.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Personal movie vault: collect, rate and review movies',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python movies.py signup "Ana Lima" ana@example.com secret
  python movies.py login ana@example.com secret
  python movies.py search "John Wick"
  python movies.py add tt2911666
  python movies.py review tt2911666 4 "Tight, stylish action."
  python movies.py list --genre Action
  python movies.py stats
  python movies.py trending --genre all
  python movies.py logout
        """
    )
    parser.add_argument('--config', type=Path, default=Path('config.yaml'),
                        help='Configuration file (default: config.yaml)')
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('signup', help='Create an account and log in')
    p.add_argument('name')
    p.add_argument('email')
    p.add_argument('password')
    p.set_defaults(func=cmd_signup)

    p = sub.add_parser('login', help='Log in to an existing account')
    p.add_argument('email')
    p.add_argument('password')
    p.set_defaults(func=cmd_login)

    p = sub.add_parser('logout', help='End the active session')
    p.set_defaults(func=cmd_logout)

    p = sub.add_parser('whoami', help='Show the logged-in account')
    p.set_defaults(func=cmd_whoami)

    p = sub.add_parser('search', help='Search OMDb by title')
    p.add_argument('query')
    p.set_defaults(func=cmd_search)

    p = sub.add_parser('show', help='Show details and reviews for a movie')
    p.add_argument('imdb_id')
    p.set_defaults(func=cmd_show)

    p = sub.add_parser('add', help='Add a movie to your collection')
    p.add_argument('imdb_id')
    p.set_defaults(func=cmd_add)

    p = sub.add_parser('remove', help='Remove a movie from your collection')
    p.add_argument('imdb_id')
    p.set_defaults(func=cmd_remove)

    p = sub.add_parser('review', help='Rate (1-5) and review a movie in your collection')
    p.add_argument('imdb_id')
    p.add_argument('rating')
    p.add_argument('text')
    p.set_defaults(func=cmd_review)

    p = sub.add_parser('list', help='List your collection')
    p.add_argument('--genre', default='all',
                   help='all, Action, Comedy, Drama, Horror or Other (default: all)')
    p.set_defaults(func=cmd_list)

    p = sub.add_parser('stats', help='Collection statistics')
    p.set_defaults(func=cmd_stats)

    p = sub.add_parser('trending', help='Load trending movies')
    p.add_argument('--genre', default='all',
                   help='all, Action, Comedy, Drama, Horror or Other (default: all)')
    p.set_defaults(func=cmd_trending)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)
    setup_logging(config.get('log_level', 'INFO'))

    logger.debug(f"Loaded config from {args.config}")
    session = Session.start(build_store(config), build_catalog(config), config)
    return args.func(session, args)


if __name__ == '__main__':
    sys.exit(main())
