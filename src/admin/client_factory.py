"""
Admin client factory: one client per (url, secret_key), rebuilt only when that pair changes.
"""
import logging
from typing import Callable, Optional

import httpx

from src.admin.client import AdminClient, make_client
from src.shared.app_state import ConnectionSettings

log = logging.getLogger(__name__)


class AdminClientFactory:
    """Single-entry memo of the admin client keyed on (url, secret_key)."""

    def __init__(
        self,
        builder: Callable[..., AdminClient] = make_client,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._builder = builder
        self._transport = transport
        self._key: Optional[tuple[str, str]] = None
        self._client: Optional[AdminClient] = None
        self.derivations = 0

    def client_for(self, settings: ConnectionSettings) -> AdminClient:
        """Return the client for these settings, building it if the key changed."""
        key = (settings.url, settings.secret_key)
        if self._client is not None and key == self._key:
            return self._client

        self._client = self._builder(settings.url, settings.secret_key, transport=self._transport)
        self._key = key
        self.derivations += 1
        log.debug("Derived admin client #%d for %r", self.derivations, settings.url)
        return self._client

    def invalidate(self) -> None:
        """Drop the cached client; the next client_for() builds a new one."""
        self._client = None
        self._key = None
