#!/usr/bin/env python3
"""
Configuration loading and logging setup

Settings come from a YAML file merged over DEFAULTS. A missing file is not an
error: the defaults are used and the catalog stays offline until an
omdb_api_key is configured.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

import yaml

from vault.constants import TRENDING_TERMS_PER_LOAD, TRENDING_RESULTS_PER_TERM
from vault.omdb import OMDbClient, OMDB_URL
from vault.storage import JsonFileUserStore

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

DEFAULTS = {
    'omdb_api_key': '',
    'omdb_base_url': OMDB_URL,
    'storage_path': 'output/movie_vault.json',
    'cache_path': 'output/omdb_cache.json',
    'request_timeout': 10,
    'trending_terms_per_load': TRENDING_TERMS_PER_LOAD,
    'trending_results_per_term': TRENDING_RESULTS_PER_TERM,
    'log_level': 'INFO',
}


def load_config(config_path: Optional[Path] = None) -> Dict:
    """Load configuration from YAML file, filling in defaults"""
    config = dict(DEFAULTS)
    if config_path is None:
        return config

    config_path = Path(config_path)
    if not config_path.exists():
        logger.warning(f"Config file not found: {config_path}. Using defaults.")
        return config

    with open(config_path, 'r', encoding='utf-8') as f:
        loaded = yaml.safe_load(f) or {}

    if not isinstance(loaded, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    # null means "use the default", except cache_path where null disables the cache
    for key, value in loaded.items():
        if value is not None or key == 'cache_path':
            config[key] = value
    return config


def setup_logging(level: str = 'INFO'):
    """Configure root logging the same way for every entry point"""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT
    )


def build_store(config: Dict) -> JsonFileUserStore:
    return JsonFileUserStore(Path(config['storage_path']))


def build_catalog(config: Dict) -> OMDbClient:
    api_key = config.get('omdb_api_key') or ''
    if not api_key:
        logger.warning("OMDb catalog disabled (no omdb_api_key in config)")
    cache_path = config.get('cache_path')
    return OMDbClient(
        api_key=api_key,
        cache_path=Path(cache_path) if cache_path else None,
        base_url=config.get('omdb_base_url') or OMDB_URL,
        timeout=config.get('request_timeout', 10),
    )
