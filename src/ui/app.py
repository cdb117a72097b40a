"""
Main application entry point.

Sections (collapsible, open state remembered):
1. Settings
2. Create user
3. Users
4. Polling

Toasts for request outcomes and poll results appear top-right.
"""
import logging
import os
from pathlib import Path

import ttkbootstrap as ttk
from ttkbootstrap.constants import *

from src.console.orchestrator import Orchestrator
from src.shared.app_state import AppState, bind_store
from src.shared.config_store import ConfigStore
from src.shared.logging_config import configure_logging
from src.shared.notifications import NotificationCenter
from src.shared.scheduling import BackgroundRunner, TkScheduler
from src.ui.sections.base import CollapsibleSection
from src.ui.sections.create_user_section import CreateUserSection
from src.ui.sections.polling_section import PollingSection
from src.ui.sections.settings_section import SettingsSection
from src.ui.sections.users_section import UsersSection
from src.ui.toasts import ToastPanel

log = logging.getLogger(__name__)

DATA_ROOT = Path(os.environ.get("SUPAMOCKA_DATA_ROOT", "./data"))
DB_FILENAME = "console.sqlite"

SECTIONS = [
    ("settings", "Settings", SettingsSection),
    ("create-user", "Create user", CreateUserSection),
    ("users", "Users", UsersSection),
    ("polling", "Polling", PollingSection),
]


class ConsoleApp:
    """Main application window."""

    def __init__(self, data_root: Path | None = None):
        self.data_root = data_root or DATA_ROOT
        self.store = ConfigStore(self.data_root / DB_FILENAME)
        self.state = AppState.from_store(self.store)
        bind_store(self.state, self.store)

        self.root = ttk.Window(
            title="supamocka",
            themename="cosmo",
            size=(640, 760),
            minsize=(480, 480),
        )
        self.root.protocol("WM_DELETE_WINDOW", self._on_close)

        self.center = NotificationCenter()
        self.orchestrator = Orchestrator(
            self.state,
            TkScheduler(self.root),
            BackgroundRunner(),
            self.center,
        )

        self._build_sections()
        self.toasts = ToastPanel(self.root, self.center)
        self.orchestrator.start()

    def _build_sections(self):
        container = ttk.Frame(self.root, padding=12)
        container.pack(fill=BOTH, expand=True)
        ttk.Label(container, text="supamocka", font=("", 14, "bold")).pack(pady=(0, 8))

        self.sections = {}
        open_ids = set(self.state.open_sections)
        for section_id, title, view_cls in SECTIONS:
            section = CollapsibleSection(
                container,
                section_id,
                title,
                is_open=section_id in open_ids,
                on_toggle=self._on_section_toggled,
            )
            section.frame.pack(fill=X, pady=(0, 4))
            self.sections[section_id] = (section, view_cls(section.body, self.orchestrator))

    def _on_section_toggled(self, _section_id: str, _is_open: bool):
        open_ids = [sid for sid, (section, _view) in self.sections.items() if section.is_open]
        self.orchestrator.set_open_sections(open_ids)

    def _on_close(self):
        self.orchestrator.shutdown()
        self.root.destroy()

    def run(self):
        self.root.mainloop()


def main():
    configure_logging()
    app = ConsoleApp()
    if app.store.is_persistent:
        log.info("Console started (settings in %s)", app.store.db_path.resolve())
    else:
        log.info("Console started (settings kept in memory)")
    app.run()


if __name__ == "__main__":
    main()
