#!/usr/bin/env python3
"""
OMDb API client with optional persistent JSON caching

Read-only gateway to the Open Movie Database. Both lookups swallow every
failure (timeouts, HTTP errors, bad JSON, "Response": "False") and report it
as "no data": an empty list for search, None for get_by_id. Callers cannot
tell "not found" apart from a transport error.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Dict, List

import requests

logger = logging.getLogger(__name__)

OMDB_URL = 'https://www.omdbapi.com/'


class OMDbClient:
    """Interface to the Open Movie Database API"""

    def __init__(self, api_key: str, cache_path: Optional[Path] = None,
                 base_url: str = OMDB_URL, timeout: float = 10):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.cache_path = Path(cache_path) if cache_path else None
        self.cache = self._load_cache()
        self.cache_hits = 0
        self.cache_misses = 0

    def _load_cache(self) -> Dict:
        """Detail records by IMDb id from the cache file; empty if absent or unreadable"""
        if not self.cache_path or not self.cache_path.exists():
            return {}
        try:
            with open(self.cache_path, 'r', encoding='utf-8') as f:
                cache = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable OMDb cache {self.cache_path}: {e}")
            return {}
        if not isinstance(cache, dict):
            logger.warning(f"Ignoring OMDb cache {self.cache_path}: not a JSON object")
            return {}
        logger.info(f"OMDb cache: {len(cache)} movie records from {self.cache_path}")
        return cache

    def _save_cache(self):
        """Persist the cache; a failed write only costs future lookups"""
        if not self.cache_path:
            return
        try:
            self.cache_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.cache_path, 'w', encoding='utf-8') as f:
                json.dump(self.cache, f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.error(f"Failed to write OMDb cache {self.cache_path}: {e}")
            return
        logger.debug(f"OMDb cache written: {len(self.cache)} movie records")

    def _query_api(self, params: Dict) -> Optional[Dict]:
        """Make the HTTP request; None on any failure or a 'Response: False' payload"""
        if not self.api_key:
            logger.debug("OMDb lookup skipped: no API key configured")
            return None

        try:
            response = requests.get(
                self.base_url,
                params={'apikey': self.api_key, **params},
                timeout=self.timeout
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.Timeout:
            logger.warning(f"OMDb timed out after {self.timeout}s for {params}")
            return None
        except requests.exceptions.RequestException as e:
            logger.warning(f"OMDb request failed for {params}: {e}")
            return None
        except ValueError as e:
            logger.warning(f"OMDb returned invalid JSON for {params}: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"Unexpected OMDb payload for {params}")
            return None

        if data.get('Response') == 'False':
            logger.debug(f"No OMDb match for {params}: {data.get('Error', 'no error message')}")
            return None

        return data

    def search(self, query: str) -> List[Dict]:
        """
        Search movies by title

        Returns a list of dicts with keys: title, year, poster, imdbID.
        Empty list on no match or any failure.
        """
        if not query or not query.strip():
            return []

        data = self._query_api({'s': query.strip(), 'type': 'movie'})
        if not data:
            return []

        hits = data.get('Search') or []
        results = []
        for hit in hits:
            if not isinstance(hit, dict) or not hit.get('imdbID'):
                continue
            results.append({
                'title': hit.get('Title'),
                'year': hit.get('Year'),
                'poster': hit.get('Poster'),
                'imdbID': hit['imdbID'],
            })

        logger.info(f"OMDb search '{query}': {len(results)} results")
        return results

    def get_by_id(self, imdb_id: str) -> Optional[Dict]:
        """
        Full OMDb record for one movie (Title, Year, Genre, Poster, Plot,
        Director, Actors, imdbID, ...), or None
        """
        if not imdb_id:
            return None

        if imdb_id in self.cache:
            self.cache_hits += 1
            logger.debug(f"OMDb cache hit: {imdb_id}")
            return dict(self.cache[imdb_id])

        self.cache_misses += 1
        logger.debug(f"OMDb cache miss: {imdb_id} - querying OMDb")

        data = self._query_api({'i': imdb_id, 'plot': 'full'})

        # Only successful lookups are cached; failures may be transient
        if data is not None and self.cache_path:
            self.cache[imdb_id] = data
            self._save_cache()

        return data

    def get_cache_stats(self) -> Dict:
        """Get cache performance statistics"""
        total = self.cache_hits + self.cache_misses
        hit_rate = (self.cache_hits / total * 100) if total > 0 else 0

        return {
            'hits': self.cache_hits,
            'misses': self.cache_misses,
            'total_queries': total,
            'hit_rate': hit_rate,
            'cache_size': len(self.cache)
        }
