"""
Settings section: project URL, public key and service key.
"""
import logging
import tkinter as tk
import webbrowser

import ttkbootstrap as ttk
from ttkbootstrap.constants import *

from src.console.orchestrator import Orchestrator
from src.shared.app_state import SETTINGS

log = logging.getLogger(__name__)

API_SETTINGS_URL = "https://supabase.com/dashboard/project/_/settings/api"


class SettingsSection:
    """Connection settings form. Save replaces the stored settings wholesale."""

    def __init__(self, parent: ttk.Frame, orchestrator: Orchestrator):
        self.orchestrator = orchestrator
        self.state = orchestrator.state
        self.frame = parent

        self._build_ui()
        self.state.subscribe(SETTINGS, lambda _s: self._load())

    def _build_ui(self):
        settings = self.state.settings

        ttk.Label(self.frame, text="API URL").pack(anchor=W)
        self.url_var = tk.StringVar(value=settings.url)
        ttk.Entry(self.frame, textvariable=self.url_var, width=50).pack(fill=X, pady=(0, 6))

        ttk.Label(self.frame, text="Public Key").pack(anchor=W)
        self.public_key_var = tk.StringVar(value=settings.public_key)
        ttk.Entry(self.frame, textvariable=self.public_key_var, width=50).pack(fill=X, pady=(0, 6))

        ttk.Label(self.frame, text="Service Key").pack(anchor=W)
        self.secret_key_var = tk.StringVar(value=settings.secret_key)
        ttk.Entry(self.frame, textvariable=self.secret_key_var, width=50, show="*").pack(fill=X, pady=(0, 6))

        actions = ttk.Frame(self.frame)
        actions.pack(fill=X, pady=(4, 0))
        ttk.Button(actions, text="Save", command=self._on_save, bootstyle="primary").pack(side=RIGHT)
        ttk.Button(
            actions,
            text="Get API vars",
            command=lambda: webbrowser.open(API_SETTINGS_URL),
            bootstyle="link",
        ).pack(side=RIGHT, padx=(0, 8))

    def _load(self):
        settings = self.state.settings
        self.url_var.set(settings.url)
        self.public_key_var.set(settings.public_key)
        self.secret_key_var.set(settings.secret_key)

    def _on_save(self):
        self.orchestrator.update_settings(
            url=self.url_var.get().strip(),
            public_key=self.public_key_var.get().strip(),
            secret_key=self.secret_key_var.get().strip(),
        )
