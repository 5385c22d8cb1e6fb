#!/usr/bin/env python3
"""
Shared constants for the movie vault

Single source of truth for genre names, storage keys and user-facing messages.
Import from here instead of repeating literals in other modules.
"""

# Named genres with their own display style. Everything else is "Other".
NAMED_GENRES = ['Action', 'Comedy', 'Drama', 'Horror']
OTHER_GENRE = 'Other'
FILTER_ALL = 'all'

# OMDb uses "N/A" for missing fields, including the poster
ABSENT_MARKER = 'N/A'

STAR_FILLED = '★'
STAR_EMPTY = '☆'
MAX_STARS = 5

# Defaults applied when OMDb leaves a field out
DEFAULT_PLOT = 'No plot available.'
DEFAULT_CREDIT = 'Unknown'

TRAILER_SEARCH_URL = 'https://www.youtube.com/results'

# Storage document keys (kept from the browser localStorage layout)
USERS_KEY = 'movieLibraryUsers'
CURRENT_USER_KEY = 'movieLibraryCurrentUser'

# Account messages
MSG_EMAIL_TAKEN = 'An account with this email already exists.'
MSG_NO_ACCOUNT = 'No account found with this email.'
MSG_BAD_PASSWORD = 'Incorrect password.'
MSG_NAME_TOO_SHORT = 'Name must be at least 2 characters.'
MSG_LOGIN_REQUIRED = 'Please log in first.'

# Collection messages
MSG_ALREADY_IN_COLLECTION = 'Movie is already in your collection!'
MSG_NOT_IN_COLLECTION = 'Movie not found in your collection.'
MSG_ADDED = '"{title}" added to your collection!'
MSG_REMOVED = '"{title}" removed from collection.'
MSG_NO_DETAILS = 'Could not load movie details.'

# Review messages
MSG_REVIEW_TEXT_REQUIRED = 'Please write your review before submitting.'
MSG_REVIEW_RATING_REQUIRED = 'Please select a star rating.'
MSG_REVIEW_ADDED = 'Review added to "{title}".'

MIN_NAME_LENGTH = 2

# Popular recent titles searched to build the trending list
TRENDING_SEARCHES = [
    'Oppenheimer', 'Barbie', 'Dune', 'Spider-Man', 'John Wick',
    'Avatar', 'Guardians', 'Black Panther', 'Top Gun', 'Batman',
    'Mission Impossible', 'Mario', 'Fast X', 'Aquaman', 'Wonka',
]
TRENDING_TERMS_PER_LOAD = 5
TRENDING_RESULTS_PER_TERM = 5
