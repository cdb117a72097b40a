"""
Notifications shown as toasts, and the wrapper that reports request outcomes.

Every wrapped request gets one notification that starts pending and moves to
exactly one terminal state: success or error.
"""
import logging
from concurrent.futures import Future
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Callable, Optional, Union

from src.shared.errors import AppErrors
from src.shared.scheduling import Scheduler, on_loop

log = logging.getLogger(__name__)


class NotificationKind(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass
class Notification:
    id: int
    kind: NotificationKind
    message: str
    created_at: str

    @property
    def is_terminal(self) -> bool:
        return self.kind != NotificationKind.PENDING


class NotificationCenter:
    """Ordered notification history with subscribers (the toast panel)."""

    HISTORY_LIMIT = 200

    def __init__(self):
        self._notifications: dict[int, Notification] = {}
        self._next_id = 1
        self._subscribers: list[Callable[[Notification], None]] = []

    def subscribe(self, callback: Callable[[Notification], None]) -> None:
        """callback(notification) runs on every push and every resolve."""
        self._subscribers.append(callback)

    def push(self, kind: NotificationKind, message: str) -> int:
        note = Notification(
            id=self._next_id,
            kind=NotificationKind(kind),
            message=message,
            created_at=datetime.now(UTC).isoformat(),
        )
        self._next_id += 1
        self._notifications[note.id] = note
        self._prune()
        self._publish(note)
        return note.id

    def resolve(self, note_id: int, kind: NotificationKind, message: str) -> Notification:
        """
        Move a pending notification to its terminal state.

        Raises:
            KeyError: If the notification is unknown
            ValueError: If it is already terminal or kind is pending
        """
        note = self._notifications[note_id]
        kind = NotificationKind(kind)
        if note.is_terminal:
            raise ValueError(f"Notification {note_id} already resolved as {note.kind.value}")
        if kind == NotificationKind.PENDING:
            raise ValueError("Cannot resolve a notification to pending")
        note.kind = kind
        note.message = message
        self._publish(note)
        return note

    def info(self, message: str) -> int:
        return self.push(NotificationKind.INFO, message)

    def error(self, message: str) -> int:
        return self.push(NotificationKind.ERROR, message)

    def get(self, note_id: int) -> Optional[Notification]:
        return self._notifications.get(note_id)

    @property
    def history(self) -> list[Notification]:
        return list(self._notifications.values())

    def _prune(self):
        excess = len(self._notifications) - self.HISTORY_LIMIT
        if excess <= 0:
            return
        # pending notifications are kept until they resolve
        for note_id in [n.id for n in self._notifications.values() if n.is_terminal][:excess]:
            del self._notifications[note_id]

    def _publish(self, note: Notification):
        for callback in list(self._subscribers):
            callback(note)


class RequestNotifier:
    """Reports the outcome of an in-flight request as a single notification."""

    def __init__(self, center: NotificationCenter, scheduler: Scheduler):
        self.center = center
        self.scheduler = scheduler

    def notify(
        self,
        operation: Future,
        pending: str = "Loading...",
        on_success: Union[str, Callable[[Any], str]] = "Success",
        on_failure: str = "Error",
    ) -> None:
        """
        Show a pending notification now and settle it when operation completes.

        Args:
            operation: Future for the request; a logical failure must already be raised
            pending: Label while the request runs
            on_success: Label when the future has a result, or a callable building
                the label from that result
            on_failure: Label when the future raised or was cancelled
        """
        note_id = self.center.push(NotificationKind.PENDING, pending)
        on_loop(
            self.scheduler,
            operation,
            lambda fut: self._settle(note_id, fut, on_success, on_failure),
        )

    def _settle(self, note_id: int, operation: Future, on_success, on_failure: str):
        if operation.cancelled():
            log.error("%s: request was cancelled", on_failure)
            self.center.resolve(note_id, NotificationKind.ERROR, on_failure + AppErrors.FAILURE_HINT)
            return

        error = operation.exception()
        if error is None:
            result = operation.result()
            label = on_success(result) if callable(on_success) else on_success
            log.info("%s: %r", label, result)
            self.center.resolve(note_id, NotificationKind.SUCCESS, label)
        else:
            log.error("%s: %s", on_failure, error, exc_info=error)
            self.center.resolve(note_id, NotificationKind.ERROR, on_failure + AppErrors.FAILURE_HINT)
