"""
Collapsible section: a header button that shows or hides a content frame.
"""
import tkinter as tk
from typing import Callable

import ttkbootstrap as ttk
from ttkbootstrap.constants import *


class CollapsibleSection:
    """One accordion item. on_toggle(section_id, is_open) fires on header clicks."""

    def __init__(
        self,
        parent,
        section_id: str,
        title: str,
        is_open: bool,
        on_toggle: Callable[[str, bool], None],
    ):
        self.section_id = section_id
        self.title = title
        self._on_toggle = on_toggle

        self.frame = ttk.Frame(parent)
        self.header_var = tk.StringVar()
        ttk.Button(
            self.frame,
            textvariable=self.header_var,
            command=self._on_header,
            bootstyle="link",
        ).pack(fill=X, anchor=W)

        self.body = ttk.Frame(self.frame, padding=(12, 4, 4, 8))
        self.is_open = False
        self.set_open(is_open)

    def set_open(self, is_open: bool):
        self.is_open = is_open
        marker = "▾" if is_open else "▸"
        self.header_var.set(f"{marker} {self.title}")
        if is_open:
            self.body.pack(fill=X)
        else:
            self.body.pack_forget()

    def _on_header(self):
        self.set_open(not self.is_open)
        self._on_toggle(self.section_id, self.is_open)
