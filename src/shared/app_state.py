"""
Application state: shared mutable state for the running console.

Components receive the same AppState and subscribe to the topics they care
about instead of reading globals. Persisted topics are written through to a
ConfigStore by bind_store().
"""
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable

from src.admin.models import User
from src.shared.config_store import ConfigStore

log = logging.getLogger(__name__)

# Storage keys
SETTINGS_KEY = "api"
ACCORDIONS_KEY = "accordions"
USERS_KEY = "users"
POLLING_INTERVAL_KEY = "polling-interval"
POLLING_ENDPOINT_KEY = "polling-endpoint"

DEFAULT_OPEN_SECTIONS = ["settings"]
DEFAULT_INTERVAL_MS = 1000
DEFAULT_ENDPOINT = "/test"

# Topics
SETTINGS = "settings"
POLLING = "polling"
USERS = "users"
OPEN_SECTIONS = "open_sections"
IS_POLLING = "is_polling"

TOPICS = (SETTINGS, POLLING, USERS, OPEN_SECTIONS, IS_POLLING)


@dataclass(frozen=True)
class ConnectionSettings:
    """Target project connection. Nothing is validated; bad values fail at request time."""
    url: str = ""
    public_key: str = ""
    secret_key: str = ""

    @staticmethod
    def from_dict(data: dict) -> "ConnectionSettings":
        return ConnectionSettings(
            url=str(data.get("url", "")),
            public_key=str(data.get("publicKey", "")),
            secret_key=str(data.get("secretKey", "")),
        )

    def to_dict(self) -> dict:
        return {"url": self.url, "publicKey": self.public_key, "secretKey": self.secret_key}


@dataclass(frozen=True)
class PollingConfig:
    interval_ms: int = DEFAULT_INTERVAL_MS
    endpoint_path: str = DEFAULT_ENDPOINT


@dataclass
class AppState:
    """Shared console state. is_polling is never persisted."""
    settings: ConnectionSettings = field(default_factory=ConnectionSettings)
    polling: PollingConfig = field(default_factory=PollingConfig)
    users: list[User] = field(default_factory=list)
    open_sections: list[str] = field(default_factory=lambda: list(DEFAULT_OPEN_SECTIONS))
    is_polling: bool = False
    _listeners: dict[str, list[Callable]] = field(default_factory=dict, repr=False, compare=False)

    def subscribe(self, topic: str, callback: Callable[[Any], None]) -> Callable[[], None]:
        """
        Register callback(new_value) for a topic.

        Returns:
            A function that removes the subscription
        """
        if topic not in TOPICS:
            raise ValueError(f"Unknown state topic: {topic}")
        callbacks = self._listeners.setdefault(topic, [])
        callbacks.append(callback)

        def unsubscribe():
            if callback in callbacks:
                callbacks.remove(callback)

        return unsubscribe

    def update(self, topic: str, value: Any) -> None:
        """Replace the value of a topic and notify subscribers if it changed."""
        if topic not in TOPICS:
            raise ValueError(f"Unknown state topic: {topic}")
        if getattr(self, topic) == value:
            return
        setattr(self, topic, value)
        for callback in list(self._listeners.get(topic, [])):
            callback(value)

    def update_settings(self, **fields) -> ConnectionSettings:
        settings = replace(self.settings, **fields)
        self.update(SETTINGS, settings)
        return settings

    def update_polling(self, **fields) -> PollingConfig:
        polling = replace(self.polling, **fields)
        self.update(POLLING, polling)
        return polling

    @classmethod
    def from_store(cls, store: ConfigStore) -> "AppState":
        """Load persisted topics; is_polling always starts False."""
        settings = store.get(SETTINGS_KEY, ConnectionSettings().to_dict())
        users = store.get(USERS_KEY, [])
        interval = store.get(POLLING_INTERVAL_KEY, DEFAULT_INTERVAL_MS)

        try:
            interval = int(interval)
        except (TypeError, ValueError):
            log.warning("Stored polling interval %r is not a number, using default", interval)
            interval = DEFAULT_INTERVAL_MS

        if not isinstance(users, list):
            log.warning("Stored users %r is not a list, using default", users)
            users = []
        open_sections = store.get(ACCORDIONS_KEY, DEFAULT_OPEN_SECTIONS)
        if not isinstance(open_sections, list):
            log.warning("Stored open sections %r is not a list, using default", open_sections)
            open_sections = list(DEFAULT_OPEN_SECTIONS)

        return cls(
            settings=ConnectionSettings.from_dict(settings if isinstance(settings, dict) else {}),
            polling=PollingConfig(
                interval_ms=interval,
                endpoint_path=str(store.get(POLLING_ENDPOINT_KEY, DEFAULT_ENDPOINT)),
            ),
            users=[User.from_dict(u) for u in users if isinstance(u, dict)],
            open_sections=[str(s) for s in open_sections],
        )


def bind_store(state: AppState, store: ConfigStore) -> None:
    """Write persisted topics through to the store whenever they change."""
    state.subscribe(SETTINGS, lambda s: store.set(SETTINGS_KEY, s.to_dict()))
    state.subscribe(USERS, lambda users: store.set(USERS_KEY, [u.to_dict() for u in users]))
    state.subscribe(OPEN_SECTIONS, lambda ids: store.set(ACCORDIONS_KEY, list(ids)))

    def _persist_polling(polling: PollingConfig):
        store.set(POLLING_INTERVAL_KEY, polling.interval_ms)
        store.set(POLLING_ENDPOINT_KEY, polling.endpoint_path)

    state.subscribe(POLLING, _persist_polling)
