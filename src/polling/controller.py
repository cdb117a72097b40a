"""
Polling controller: a start/stop timer probing one REST endpoint per tick.

States:
- Stopped (initial): no timer pending.
- Running: exactly one timer pending between ticks.

Each tick reads the current settings and polling config, so a tick never
uses values from before an edit. Editing the interval, endpoint, URL or public
key while running restarts the timer with the new values.
"""
import logging
from concurrent.futures import Future
from typing import Any, Callable

from src.polling.probe import probe_endpoint
from src.shared.app_state import IS_POLLING, POLLING, SETTINGS, AppState, ConnectionSettings, PollingConfig
from src.shared.errors import format_http_error
from src.shared.notifications import NotificationCenter
from src.shared.scheduling import Scheduler, on_loop

log = logging.getLogger(__name__)

MIN_INTERVAL_MS = 50
# one day; Tk after() only takes a C int of milliseconds
MAX_INTERVAL_MS = 24 * 60 * 60 * 1000


class PollingController:
    """Owns the polling timer. stop() is the only way to cancel it."""

    def __init__(
        self,
        state: AppState,
        scheduler: Scheduler,
        runner,
        center: NotificationCenter,
        probe: Callable[..., int] = probe_endpoint,
    ):
        self.state = state
        self.scheduler = scheduler
        self.runner = runner
        self.center = center
        self.probe = probe

        self._running = False
        self._handle: Any = None
        # bumped on every (re)schedule so a cancelled callback can never tick
        self._generation = 0
        self._target = self._target_of(state.settings)

        state.subscribe(POLLING, self._on_polling_changed)
        state.subscribe(SETTINGS, self._on_settings_changed)

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            return
        self._schedule()
        self._running = True
        log.info("Polling started: %s every %d ms", self.state.polling.endpoint_path, self._interval())
        self.state.update(IS_POLLING, True)

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        self._cancel()
        log.info("Polling stopped")
        self.state.update(IS_POLLING, False)

    def toggle(self) -> bool:
        """Start when stopped, stop when running. Returns the new running state."""
        if self._running:
            self.stop()
        else:
            self.start()
        return self._running

    def restart(self) -> None:
        """Replace the pending timer with one built from the current config."""
        if not self._running:
            return
        self._cancel()
        self._schedule()

    def _interval(self) -> int:
        return min(max(int(self.state.polling.interval_ms), MIN_INTERVAL_MS), MAX_INTERVAL_MS)

    def _schedule(self):
        self._generation += 1
        generation = self._generation
        self._handle = self.scheduler.call_later(self._interval(), lambda: self._tick(generation))

    def _cancel(self):
        self._generation += 1
        if self._handle is not None:
            self.scheduler.cancel(self._handle)
            self._handle = None

    def _tick(self, generation: int):
        if not self._running or generation != self._generation:
            return
        self._handle = None

        settings = self.state.settings
        path = self.state.polling.endpoint_path
        future = self.runner.submit(self.probe, settings.url, path, api_key=settings.public_key)
        on_loop(self.scheduler, future, lambda fut: self._report(path, fut))

        self._schedule()

    def _report(self, path: str, future: Future):
        if future.cancelled():
            return
        error = future.exception()
        if error is None:
            self.center.info(f"GET: {path} {future.result()}")
            return
        log.error("Polling GET %s failed: %s", path, error, exc_info=error)
        self.center.error(f"GET: {path} failed: {format_http_error(error)}")

    @staticmethod
    def _target_of(settings: ConnectionSettings) -> tuple[str, str]:
        return settings.url, settings.public_key

    def _on_polling_changed(self, _polling: PollingConfig):
        self.restart()

    def _on_settings_changed(self, settings: ConnectionSettings):
        target = self._target_of(settings)
        if target == self._target:
            return
        self._target = target
        self.restart()
