"""
Timers on the UI loop and a background runner for blocking network calls.

The UI loop is single-threaded: all state changes happen on it. Network
calls run on the BackgroundRunner and hand their results back through
Scheduler.call_soon.
"""
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Protocol

log = logging.getLogger(__name__)


class Scheduler(Protocol):
    """Timer interface of the UI loop."""

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> Any:
        ...

    def call_soon(self, callback: Callable[[], None]) -> Any:
        ...

    def cancel(self, handle: Any) -> None:
        ...

    def close(self) -> None:
        """Stop accepting callbacks; later call_later/call_soon are dropped."""
        ...


class TkScheduler:
    """Scheduler over a Tk widget's after()/after_cancel()."""

    def __init__(self, widget):
        self.widget = widget
        self.closed = False

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> str | None:
        if self.closed:
            log.debug("Scheduler closed, dropping callback %r", callback)
            return None
        return self.widget.after(int(delay_ms), callback)

    def call_soon(self, callback: Callable[[], None]) -> str | None:
        return self.call_later(0, callback)

    def cancel(self, handle: str | None) -> None:
        if handle is not None and not self.closed:
            self.widget.after_cancel(handle)

    def close(self) -> None:
        # the widget may be destroyed right after; worker threads must not touch it
        self.closed = True


class BackgroundRunner:
    """Runs blocking calls off the UI thread."""

    def __init__(self, max_workers: int = 4):
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="supamocka-io",
        )

    def submit(self, fn: Callable, *args, **kwargs) -> Future:
        return self._executor.submit(fn, *args, **kwargs)

    def shutdown(self, wait: bool = False) -> None:
        log.debug("Shutting down background runner")
        self._executor.shutdown(wait=wait, cancel_futures=True)


def on_loop(scheduler: Scheduler, future: Future, callback: Callable[[Future], None]) -> None:
    """Run callback(future) on the UI loop once the future settles."""
    future.add_done_callback(lambda f: scheduler.call_soon(lambda: callback(f)))
