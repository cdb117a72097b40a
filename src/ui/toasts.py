"""
Toast panel: renders NotificationCenter entries in the top-right corner.

A pending toast is updated in place when its request settles, then fades
out after DISMISS_MS like every other terminal toast.
"""
import tkinter as tk

import ttkbootstrap as ttk
from ttkbootstrap.constants import *

from src.shared.notifications import Notification, NotificationCenter, NotificationKind

DISMISS_MS = 4000
MAX_VISIBLE = 6

BOOTSTYLES = {
    NotificationKind.PENDING: "secondary",
    NotificationKind.SUCCESS: "success",
    NotificationKind.ERROR: "danger",
    NotificationKind.INFO: "info",
}


class ToastPanel:

    def __init__(self, root: tk.Misc, center: NotificationCenter):
        self.root = root
        self.frame = ttk.Frame(root)
        self.frame.place(relx=1.0, rely=0.0, x=-8, y=8, anchor=NE)
        self._labels: dict[int, ttk.Label] = {}
        center.subscribe(self._on_notification)

    def _on_notification(self, note: Notification):
        label = self._labels.get(note.id)
        if label is None:
            label = ttk.Label(self.frame, padding=(10, 6), width=44, wraplength=320)
            label.pack(fill=X, pady=(0, 4))
            self._labels[note.id] = label
            self._trim()

        prefix = "… " if note.kind == NotificationKind.PENDING else ""
        label.configure(text=prefix + note.message, bootstyle=f"inverse-{BOOTSTYLES[note.kind]}")

        if note.is_terminal:
            self.root.after(DISMISS_MS, lambda: self._dismiss(note.id))

    def _trim(self):
        while len(self._labels) > MAX_VISIBLE:
            self._dismiss(next(iter(self._labels)))

    def _dismiss(self, note_id: int):
        label = self._labels.pop(note_id, None)
        if label is not None:
            label.destroy()
