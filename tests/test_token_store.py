import stat

from token_store import TokenStore


def test_missing_file_loads_as_no_token(tmp_path):
    assert TokenStore(tmp_path / "nope" / "session.json").load() is None


def test_save_creates_parent_directories(tmp_path):
    store = TokenStore(tmp_path / "nested" / "dir" / "session.json")

    store.save("abc")

    assert store.load() == "abc"
    assert TokenStore(store.token_file).load() == "abc"


def test_clear_is_idempotent(store):
    store.save("abc")

    store.clear()
    store.clear()

    assert store.load() is None
    assert not store.token_file.exists()


def test_clear_keeps_unrelated_keys(store):
    store.token_file.write_text('{"token": "abc", "last_email": "a@x.com"}', encoding="utf-8")

    store.clear()

    assert store.load() is None
    assert "last_email" in store.token_file.read_text(encoding="utf-8")


def test_corrupt_file_loads_as_no_token(store):
    store.token_file.write_text("{not json", encoding="utf-8")

    assert store.load() is None

    store.save("fresh")
    assert store.load() == "fresh"


def test_default_path_comes_from_settings(tmp_path):
    # conftest points settings.token_file at tmp_path/session.json
    assert TokenStore().token_file == tmp_path / "session.json"


def test_token_file_is_private_to_owner(store):
    store.token_file.write_text('{"last_email": "a@x.com"}', encoding="utf-8")
    store.token_file.chmod(0o644)

    store.save("abc")

    assert stat.S_IMODE(store.token_file.stat().st_mode) == 0o600
