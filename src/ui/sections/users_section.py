"""
Users section: read-only list of cached user emails.
"""
import tkinter as tk

import ttkbootstrap as ttk
from ttkbootstrap.constants import *

from src.console.orchestrator import Orchestrator
from src.shared.app_state import USERS


class UsersSection:

    def __init__(self, parent: ttk.Frame, orchestrator: Orchestrator):
        self.state = orchestrator.state
        self.frame = parent

        self.listbox = tk.Listbox(self.frame, height=8, exportselection=False)
        self.listbox.pack(fill=X)

        self.count_var = tk.StringVar()
        ttk.Label(self.frame, textvariable=self.count_var).pack(anchor=W, pady=(4, 0))

        self._refresh()
        self.state.subscribe(USERS, lambda _users: self._refresh())

    def _refresh(self):
        self.listbox.delete(0, tk.END)
        for user in self.state.users:
            self.listbox.insert(tk.END, user.email or f"({user.id})")
        self.count_var.set(f"{len(self.state.users)} users")
