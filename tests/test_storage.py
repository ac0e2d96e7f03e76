"""
Tests for the SQLite key/value store.
"""
from velo.storage import LocalStorage


def test_set_get_remove(storage):
    assert storage.get_item("missing") is None

    storage.set_item("theme", "dark")
    storage.set_item("theme", "light")
    assert storage.get_item("theme") == "light"
    assert storage.keys() == ["theme"]

    assert storage.remove_item("theme") is True
    assert storage.remove_item("theme") is False


def test_values_survive_reopen(tmp_path):
    path = tmp_path / "nested" / "store.db"
    LocalStorage(path).set_auth_token("abc")

    assert LocalStorage(path).get_auth_token() == "abc"


def test_auth_token_can_be_forgotten(storage):
    storage.set_auth_token("abc")
    storage.set_auth_token(None)
    assert storage.get_auth_token() is None


def test_chat_history_keeps_accents(storage):
    history = [{"role": "user", "content": "Protéines après l'effort ?"}]
    storage.save_chat_history("u1", history)

    assert storage.get_chat_history("u1") == history
    assert "ai_chat_history_u1" in storage.keys()


def test_corrupt_chat_history_reads_as_empty(storage):
    storage.set_item("ai_chat_history_u1", "{not json")
    assert storage.get_chat_history("u1") == []
