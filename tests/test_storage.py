#!/usr/bin/env python3
"""
Test suite for vault/storage.py - whole-document JSON storage
"""

import json
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from vault.storage import JsonFileUserStore, MemoryUserStore
from vault.user import User
from vault.constants import USERS_KEY, CURRENT_USER_KEY


class TestJsonFileUserStore:

    def test_missing_file_is_empty(self, tmp_path):
        store = JsonFileUserStore(tmp_path / "vault.json")
        assert store.load_users() == {}
        assert store.get_active_email() is None

    def test_save_user_writes_document(self, tmp_path):
        path = tmp_path / "nested" / "vault.json"
        store = JsonFileUserStore(path)
        user = User("Ana", "a@x.com", "pw1", store=store)
        user.save()

        document = json.loads(path.read_text(encoding='utf-8'))
        assert document[CURRENT_USER_KEY] == "a@x.com"
        assert document[USERS_KEY]["a@x.com"]["name"] == "Ana"
        assert document[USERS_KEY]["a@x.com"]["collection"] == []

    def test_multiple_accounts_keyed_by_email(self, tmp_path):
        store = JsonFileUserStore(tmp_path / "vault.json")
        User.signup(store, "Ana", "a@x.com", "pw1")
        User.signup(store, "Ben", "b@x.com", "pw2")

        assert set(store.load_users()) == {"a@x.com", "b@x.com"}
        assert store.get_active_email() == "b@x.com"

    def test_clear_active_email(self, tmp_path):
        store = JsonFileUserStore(tmp_path / "vault.json")
        User.signup(store, "Ana", "a@x.com", "pw1")
        store.clear_active_email()

        assert store.get_active_email() is None
        assert store.has_user("a@x.com")

    def test_corrupt_file_treated_as_empty(self, tmp_path):
        path = tmp_path / "vault.json"
        path.write_text("{not json", encoding='utf-8')
        store = JsonFileUserStore(path)
        assert store.load_users() == {}

    def test_non_object_document_treated_as_empty(self, tmp_path):
        path = tmp_path / "vault.json"
        path.write_text("[1, 2, 3]", encoding='utf-8')
        assert JsonFileUserStore(path).load_users() == {}

    def test_write_failure_raises(self, tmp_path):
        # The path is a directory, so opening it for writing fails
        store = JsonFileUserStore(tmp_path)
        with pytest.raises(OSError):
            store.save_users({})

    def test_last_write_wins(self, tmp_path):
        path = tmp_path / "vault.json"
        first = JsonFileUserStore(path)
        second = JsonFileUserStore(path)
        User.signup(first, "Ana", "a@x.com", "pw1")

        stale = User.from_dict(second.get_user_record("a@x.com"), store=second)
        stale.name = "Ana B."
        stale.save()

        assert first.get_user_record("a@x.com")["name"] == "Ana B."


class TestMemoryUserStore:

    def test_reads_are_copies(self):
        store = MemoryUserStore()
        store.save_users({"a@x.com": {"name": "Ana"}})
        users = store.load_users()
        users["a@x.com"]["name"] = "changed"
        assert store.get_user_record("a@x.com")["name"] == "Ana"

    def test_initial_document(self):
        store = MemoryUserStore({USERS_KEY: {"a@x.com": {"name": "Ana"}}, CURRENT_USER_KEY: "a@x.com"})
        assert store.get_active_email() == "a@x.com"
        assert store.has_user("a@x.com")

    def test_only_json_values_stored(self):
        store = MemoryUserStore()
        with pytest.raises(TypeError):
            store.save_users({"a@x.com": {"joined": object()}})
