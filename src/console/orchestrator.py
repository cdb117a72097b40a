"""
Console orchestrator: owns the admin client, directory sync and polling for one AppState.

The UI calls into this class; it never talks to the admin API directly.
"""
import logging
import uuid
from concurrent.futures import Future
from typing import Iterable, Optional

import httpx

from src.admin.client import AdminClient
from src.admin.client_factory import AdminClientFactory
from src.admin.directory_sync import UserDirectorySync
from src.admin.models import User
from src.polling.controller import PollingController
from src.polling.probe import probe_endpoint
from src.shared.app_state import OPEN_SECTIONS, SETTINGS, AppState, ConnectionSettings
from src.shared.notifications import NotificationCenter, RequestNotifier
from src.shared.scheduling import Scheduler

log = logging.getLogger(__name__)

DEFAULT_PASSWORD = "TestPassword1"


def create_user_or_raise(client: AdminClient, email: str, password: str) -> User:
    """Create a user, turning an error result into AdminApiError."""
    return client.create_user(email, password).unwrap()


class Orchestrator:
    """Wires settings, admin client, notifications, directory sync and polling together."""

    def __init__(
        self,
        state: AppState,
        scheduler: Scheduler,
        runner,
        center: NotificationCenter,
        factory: Optional[AdminClientFactory] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.state = state
        self.scheduler = scheduler
        self.runner = runner
        self.center = center
        self.factory = factory or AdminClientFactory(transport=transport)
        self.notifier = RequestNotifier(center, scheduler)
        self.directory = UserDirectorySync(state, scheduler, runner, self.notifier)

        def probe(url, path, api_key=""):
            return probe_endpoint(url, path, api_key=api_key, transport=transport)

        self.polling = PollingController(state, scheduler, runner, center, probe=probe)
        self._client: Optional[AdminClient] = None

        state.subscribe(SETTINGS, self._on_settings_changed)

    def start(self) -> None:
        """Derive the first client, which also loads the user list."""
        self._derive()

    @property
    def admin_client(self) -> AdminClient:
        if self._client is None:
            self._derive()
        return self._client

    def _derive(self):
        client = self.factory.client_for(self.state.settings)
        if client is self._client:
            return
        self._client = client
        self.directory.sync(client)

    def _on_settings_changed(self, _settings: ConnectionSettings):
        self._derive()

    def update_settings(self, **fields) -> ConnectionSettings:
        """Replace connection settings; url, public_key and secret_key are accepted."""
        return self.state.update_settings(**fields)

    def update_polling(self, interval_ms: int | None = None, endpoint_path: str | None = None):
        fields = {}
        if interval_ms is not None:
            fields["interval_ms"] = int(interval_ms)
        if endpoint_path is not None:
            fields["endpoint_path"] = endpoint_path
        return self.state.update_polling(**fields)

    def set_open_sections(self, section_ids: Iterable[str]) -> None:
        self.state.update(OPEN_SECTIONS, list(section_ids))

    def create_user(self, email: str, password: str = DEFAULT_PASSWORD) -> Future:
        """Create a user with the client current at call time and report the outcome."""
        client = self.admin_client
        log.info("Creating user %s on %s", email, client.url)
        future = self.runner.submit(create_user_or_raise, client, email, password)
        self.notifier.notify(
            future,
            pending="Creating user",
            on_success="User created",
            on_failure="Error creating user",
        )
        return future

    @staticmethod
    def random_email() -> str:
        return f"test-{uuid.uuid4().hex[:10]}@example.com"

    def toggle_polling(self) -> bool:
        return self.polling.toggle()

    def shutdown(self) -> None:
        """Stop polling and drop results of requests still in flight."""
        self.polling.stop()
        self.scheduler.close()
        self.runner.shutdown(wait=False)
