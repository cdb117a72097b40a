"""
M1 Acceptance Tests: Persisted config store + application state

Settings survive a restart; the store never crashes the console when the
database is unusable.
"""
import sqlite3
from unittest.mock import MagicMock

import pytest

from src.admin.models import User
from src.shared.app_state import (
    ACCORDIONS_KEY,
    IS_POLLING,
    POLLING,
    POLLING_ENDPOINT_KEY,
    POLLING_INTERVAL_KEY,
    SETTINGS,
    SETTINGS_KEY,
    USERS,
    USERS_KEY,
    AppState,
    ConnectionSettings,
    PollingConfig,
    bind_store,
)
from src.shared.config_store import ConfigStore


def test_store_initializes_schema(tmp_path):
    db_path = tmp_path / "data" / "console.sqlite"
    store = ConfigStore(db_path)

    assert store.is_persistent
    assert db_path.exists()
    with sqlite3.connect(db_path) as conn:
        row = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='settings'"
        ).fetchone()
        assert row is not None


def test_get_before_write_returns_default(tmp_path):
    store = ConfigStore(tmp_path / "console.sqlite")

    assert store.get("polling-interval", 1000) == 1000
    assert store.get("missing") is None


def test_set_replaces_whole_value(tmp_path):
    store = ConfigStore(tmp_path / "console.sqlite")

    store.set("api", {"url": "a", "publicKey": "p", "secretKey": "s"})
    store.set("api", {"url": "b"})

    assert store.get("api", {}) == {"url": "b"}


def test_settings_round_trip_across_restart(tmp_path):
    """A written value is identical after reopening the store."""
    db_path = tmp_path / "console.sqlite"
    settings = ConnectionSettings(url="https://x.test", public_key="anon", secret_key="service")

    ConfigStore(db_path).set(SETTINGS_KEY, settings.to_dict())

    reopened = ConfigStore(db_path)
    assert ConnectionSettings.from_dict(reopened.get(SETTINGS_KEY, {})) == settings


def test_get_returns_a_copy(tmp_path):
    store = ConfigStore(tmp_path / "console.sqlite")
    store.set("accordions", ["settings"])

    value = store.get("accordions")
    value.append("users")

    assert store.get("accordions") == ["settings"]


def test_keys_are_independent(tmp_path):
    store = ConfigStore(tmp_path / "console.sqlite")
    store.set("polling-interval", 500)
    store.set("polling-endpoint", "/todos")

    store.set("polling-interval", 250)

    assert store.get("polling-endpoint") == "/todos"


def test_unusable_path_degrades_to_memory(tmp_path, caplog):
    """A data root that is a file cannot hold the DB; the store keeps working in memory."""
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x")

    store = ConfigStore(blocker / "console.sqlite")

    assert not store.is_persistent
    assert "kept in memory" in caplog.text

    store.set("api", {"url": "https://x.test"})
    assert store.get("api") == {"url": "https://x.test"}


def test_write_failure_degrades_to_memory(tmp_path, monkeypatch):
    store = ConfigStore(tmp_path / "console.sqlite")

    def broken_connect(*args, **kwargs):
        raise sqlite3.OperationalError("disk I/O error")

    monkeypatch.setattr(sqlite3, "connect", broken_connect)

    store.set("polling-interval", 750)

    assert not store.is_persistent
    assert store.get("polling-interval") == 750


def test_corrupt_row_is_treated_as_missing(tmp_path):
    db_path = tmp_path / "console.sqlite"
    ConfigStore(db_path)
    with sqlite3.connect(db_path) as conn:
        conn.execute(
            "INSERT INTO settings (key, value, updated_at) VALUES (?, ?, ?)",
            ("api", "{not json", "2024-01-01"),
        )
        conn.commit()

    store = ConfigStore(db_path)
    assert store.get("api", "default") == "default"


def test_memory_only_store():
    store = ConfigStore(None)

    assert not store.is_persistent
    assert store.get("users", []) == []
    store.set("users", [{"id": "1"}])
    assert store.get("users") == [{"id": "1"}]


# ---------------------------------------------------------------- app state

def test_app_state_defaults_from_empty_store():
    state = AppState.from_store(ConfigStore(None))

    assert state.settings == ConnectionSettings()
    assert state.polling == PollingConfig(interval_ms=1000, endpoint_path="/test")
    assert state.users == []
    assert state.open_sections == ["settings"]
    assert state.is_polling is False


def test_bound_state_persists_and_reloads(tmp_path):
    db_path = tmp_path / "console.sqlite"
    store = ConfigStore(db_path)
    state = AppState.from_store(store)
    bind_store(state, store)

    state.update_settings(url="https://x.test", secret_key="service")
    state.update_polling(interval_ms=250, endpoint_path="/ping")
    state.update(USERS, [User(id="u1", email="a@example.com")])
    state.update("open_sections", ["settings", "polling"])
    state.update(IS_POLLING, True)

    reloaded = AppState.from_store(ConfigStore(db_path))
    assert reloaded.settings == ConnectionSettings(url="https://x.test", secret_key="service")
    assert reloaded.polling == PollingConfig(interval_ms=250, endpoint_path="/ping")
    assert reloaded.users == [User(id="u1", email="a@example.com")]
    assert reloaded.open_sections == ["settings", "polling"]
    # polling never resumes on its own
    assert reloaded.is_polling is False


def test_stored_keys_match_console_layout(tmp_path):
    store = ConfigStore(tmp_path / "console.sqlite")
    state = AppState.from_store(store)
    bind_store(state, store)

    state.update_settings(url="https://x.test")
    state.update_polling(interval_ms=500)

    assert store.get(SETTINGS_KEY) == {"url": "https://x.test", "publicKey": "", "secretKey": ""}
    assert store.get(POLLING_INTERVAL_KEY) == 500
    assert store.get(POLLING_ENDPOINT_KEY) == "/test"
    assert store.get(USERS_KEY) is None
    assert store.get(ACCORDIONS_KEY) is None


def test_bad_stored_interval_falls_back_to_default():
    store = ConfigStore(None)
    store.set(POLLING_INTERVAL_KEY, "soon")

    state = AppState.from_store(store)
    assert state.polling.interval_ms == 1000


@pytest.mark.parametrize("key", [USERS_KEY, ACCORDIONS_KEY])
def test_non_list_stored_rows_fall_back_to_defaults(key, caplog):
    store = ConfigStore(None)
    store.set(key, 5)

    state = AppState.from_store(store)

    assert state.users == []
    assert state.open_sections == ["settings"]
    assert "not a list" in caplog.text


def test_subscribers_called_only_on_change():
    state = AppState()
    callback = MagicMock()
    state.subscribe(SETTINGS, callback)

    state.update_settings(url="https://x.test")
    state.update_settings(url="https://x.test")

    callback.assert_called_once_with(ConnectionSettings(url="https://x.test"))


def test_unsubscribe():
    state = AppState()
    callback = MagicMock()
    unsubscribe = state.subscribe(POLLING, callback)

    unsubscribe()
    state.update_polling(interval_ms=5)

    callback.assert_not_called()


def test_unknown_topic_rejected():
    state = AppState()

    with pytest.raises(ValueError, match="Unknown state topic"):
        state.subscribe("nope", print)
    with pytest.raises(ValueError, match="Unknown state topic"):
        state.update("nope", 1)


def test_update_settings_is_read_modify_write():
    state = AppState(settings=ConnectionSettings(url="u", public_key="p", secret_key="s"))

    state.update_settings(public_key="p2")

    assert state.settings == ConnectionSettings(url="u", public_key="p2", secret_key="s")
