"""
Create user section: email entry with a random-address helper and the fixed test password.
"""
import tkinter as tk

import ttkbootstrap as ttk
from ttkbootstrap.constants import *

from src.console.orchestrator import DEFAULT_PASSWORD, Orchestrator


class CreateUserSection:

    def __init__(self, parent: ttk.Frame, orchestrator: Orchestrator):
        self.orchestrator = orchestrator
        self.frame = parent

        self._build_ui()

    def _build_ui(self):
        label_row = ttk.Frame(self.frame)
        label_row.pack(fill=X)
        ttk.Label(label_row, text="Email").pack(side=LEFT)
        ttk.Button(label_row, text="Random", command=self._on_random, bootstyle="link").pack(side=LEFT, padx=(4, 0))

        self.email_var = tk.StringVar()
        entry = ttk.Entry(self.frame, textvariable=self.email_var, width=50)
        entry.pack(fill=X, pady=(0, 6))
        entry.bind("<Return>", self._on_create)

        actions = ttk.Frame(self.frame)
        actions.pack(fill=X)
        ttk.Label(actions, text="Password", bootstyle="secondary").pack(side=LEFT)
        password = ttk.Entry(actions, width=16)
        password.insert(0, DEFAULT_PASSWORD)
        password.configure(state="readonly")
        password.pack(side=LEFT, padx=(4, 0))

        ttk.Button(actions, text="Create", command=self._on_create, bootstyle="success").pack(side=RIGHT)

    def _on_random(self):
        self.email_var.set(self.orchestrator.random_email())

    def _on_create(self, _event=None):
        self.orchestrator.create_user(self.email_var.get().strip())
