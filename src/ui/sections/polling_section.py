"""
Polling section: interval, endpoint and the Start/Stop toggle.
"""
import logging
import tkinter as tk
import webbrowser

import ttkbootstrap as ttk
from ttkbootstrap.constants import *

from src.console.orchestrator import Orchestrator
from src.polling.controller import MAX_INTERVAL_MS, MIN_INTERVAL_MS
from src.shared.app_state import IS_POLLING
from src.shared.errors import AppErrors

log = logging.getLogger(__name__)

API_DOCS_URL = "https://supabase.com/dashboard/project/_/api"


class PollingSection:
    """Polling config form. Apply takes effect immediately, even while polling."""

    def __init__(self, parent: ttk.Frame, orchestrator: Orchestrator):
        self.orchestrator = orchestrator
        self.state = orchestrator.state
        self.frame = parent

        self._build_ui()
        self._on_polling_state(self.state.is_polling)
        self.state.subscribe(IS_POLLING, self._on_polling_state)

    def _build_ui(self):
        polling = self.state.polling

        ttk.Label(self.frame, text="Interval (ms)").pack(anchor=W)
        self.interval_var = tk.StringVar(value=str(polling.interval_ms))
        ttk.Entry(self.frame, textvariable=self.interval_var, width=12).pack(anchor=W, pady=(0, 6))

        ttk.Label(self.frame, text="Endpoint").pack(anchor=W)
        self.endpoint_var = tk.StringVar(value=polling.endpoint_path)
        ttk.Entry(self.frame, textvariable=self.endpoint_var, width=50).pack(fill=X, pady=(0, 6))

        self.status_var = tk.StringVar()
        ttk.Label(self.frame, textvariable=self.status_var, bootstyle="danger").pack(anchor=W)

        actions = ttk.Frame(self.frame)
        actions.pack(fill=X, pady=(4, 0))
        self.toggle_btn = ttk.Button(actions, text="Start", command=self._on_toggle, bootstyle="primary")
        self.toggle_btn.pack(side=RIGHT)
        ttk.Button(actions, text="Apply", command=self._on_apply).pack(side=RIGHT, padx=(0, 8))
        ttk.Button(
            actions,
            text="View Endpoints",
            command=lambda: webbrowser.open(API_DOCS_URL),
            bootstyle="link",
        ).pack(side=RIGHT, padx=(0, 8))

    def _on_apply(self) -> bool:
        try:
            interval = int(self.interval_var.get().strip())
            if not MIN_INTERVAL_MS <= interval <= MAX_INTERVAL_MS:
                raise ValueError(interval)
        except ValueError:
            self.status_var.set(AppErrors.INTERVAL_INVALID)
            self.interval_var.set(str(self.state.polling.interval_ms))
            return False

        self.status_var.set("")
        self.orchestrator.update_polling(
            interval_ms=interval,
            endpoint_path=self.endpoint_var.get().strip(),
        )
        return True

    def _on_toggle(self):
        if not self.state.is_polling and not self._on_apply():
            return
        self.orchestrator.toggle_polling()

    def _on_polling_state(self, is_polling: bool):
        self.toggle_btn.configure(
            text="Stop" if is_polling else "Start",
            bootstyle="danger" if is_polling else "primary",
        )
