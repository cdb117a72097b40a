"""
User directory sync: refresh the cached user list from the admin API.
"""
import logging
from concurrent.futures import Future
from typing import Callable

from src.admin.client import AdminClient
from src.admin.models import User
from src.shared.app_state import USERS, AppState
from src.shared.notifications import RequestNotifier
from src.shared.scheduling import Scheduler, on_loop

log = logging.getLogger(__name__)

SUPERSEDED_LABEL = "User list skipped, a newer load replaced it"


def fetch_users(client: AdminClient) -> list[User]:
    """List users, raising AdminApiError if the call failed."""
    return client.list_users().unwrap()["users"]


class UserDirectorySync:
    """Replaces AppState.users with the result of one list-users call per sync."""

    def __init__(
        self,
        state: AppState,
        scheduler: Scheduler,
        runner,
        notifier: RequestNotifier,
        fetch: Callable[[AdminClient], list[User]] = fetch_users,
    ):
        self.state = state
        self.scheduler = scheduler
        self.runner = runner
        self.notifier = notifier
        self.fetch = fetch
        self._generation = 0

    def sync(self, client: AdminClient) -> Future:
        self._generation += 1
        generation = self._generation
        log.debug("Directory sync #%d against %r", generation, client)

        future = self.runner.submit(self.fetch, client)
        # settles once _apply has run: the users applied, or None when superseded
        applied: Future = Future()
        on_loop(self.scheduler, future, lambda fut: self._apply(generation, fut, applied))
        self.notifier.notify(
            applied,
            pending="Loading users",
            on_success=lambda users: "Users loaded" if users is not None else SUPERSEDED_LABEL,
            on_failure="Error loading users",
        )
        return future

    def _apply(self, generation: int, future: Future, applied: Future):
        if future.cancelled():
            applied.cancel()
            return
        error = future.exception()
        if error is not None:
            # Cache stays as it was; the notifier reports the failure
            applied.set_exception(error)
            return
        if generation != self._generation:
            log.debug("Discarding stale directory sync #%d", generation)
            applied.set_result(None)
            return
        users = list(future.result())
        log.info("Directory sync #%d loaded %d users", generation, len(users))
        self.state.update(USERS, users)
        applied.set_result(users)
