#!/usr/bin/env python3
"""
Test suite for vault/config.py - YAML settings over defaults
"""

import pytest
import sys
from pathlib import Path

import yaml

sys.path.insert(0, str(Path(__file__).parent.parent))

from vault.config import DEFAULTS, load_config, build_catalog, build_store
from vault.storage import JsonFileUserStore


def write_config(tmp_path, data):
    path = tmp_path / 'config.yaml'
    path.write_text(yaml.dump(data), encoding='utf-8')
    return path


class TestLoadConfig:

    def test_no_path_gives_defaults(self):
        assert load_config() == DEFAULTS

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(tmp_path / 'nope.yaml') == DEFAULTS

    def test_values_override_defaults(self, tmp_path):
        path = write_config(tmp_path, {'omdb_api_key': 'abc123', 'trending_terms_per_load': 2})
        config = load_config(path)
        assert config['omdb_api_key'] == 'abc123'
        assert config['trending_terms_per_load'] == 2
        assert config['storage_path'] == DEFAULTS['storage_path']

    def test_null_keeps_default(self, tmp_path):
        path = write_config(tmp_path, {'storage_path': None})
        assert load_config(path)['storage_path'] == DEFAULTS['storage_path']

    def test_null_cache_path_disables_cache(self, tmp_path):
        path = write_config(tmp_path, {'cache_path': None, 'omdb_api_key': 'abc123'})
        config = load_config(path)
        assert config['cache_path'] is None
        assert build_catalog(config).cache_path is None

    def test_empty_file(self, tmp_path):
        path = tmp_path / 'config.yaml'
        path.write_text('', encoding='utf-8')
        assert load_config(path) == DEFAULTS

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / 'config.yaml'
        path.write_text('- just\n- a list\n', encoding='utf-8')
        with pytest.raises(ValueError):
            load_config(path)


class TestBuilders:

    def test_build_catalog(self, tmp_path):
        config = dict(DEFAULTS, omdb_api_key='abc123', cache_path=str(tmp_path / 'cache.json'),
                      request_timeout=3)
        catalog = build_catalog(config)
        assert catalog.api_key == 'abc123'
        assert catalog.timeout == 3
        assert catalog.cache_path == tmp_path / 'cache.json'

    def test_build_catalog_without_key(self):
        assert build_catalog(dict(DEFAULTS)).api_key == ''

    def test_build_store(self, tmp_path):
        store = build_store(dict(DEFAULTS, storage_path=str(tmp_path / 'vault.json')))
        assert isinstance(store, JsonFileUserStore)
        assert store.load_users() == {}
