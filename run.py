"""
Launch script for supamocka.

Checks the environment, reports whether the saved project URL answers, and
opens the console window.

Usage:
    python run.py
"""
import os
import subprocess
import sys
import urllib.error
import urllib.request
from pathlib import Path

PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
DATA_ROOT = Path(os.environ.get("SUPAMOCKA_DATA_ROOT", os.path.join(PROJECT_ROOT, "data")))
REACHABILITY_TIMEOUT = 5


def _print(msg: str) -> None:
    print(f"[run] {msg}")


def check_python_deps() -> bool:
    """Check that required Python packages are installed."""
    missing = []
    for pkg in ["ttkbootstrap", "httpx"]:
        try:
            __import__(pkg)
        except ImportError:
            missing.append(pkg)

    if missing:
        _print(f"Missing Python packages: {', '.join(missing)}")
        _print("Install with: pip install -e .[dev]")
        return False
    return True


def check_display() -> bool:
    """Check that a graphical display is available (Linux only)."""
    if not sys.platform.startswith("linux"):
        return True
    if os.environ.get("DISPLAY") or os.environ.get("WAYLAND_DISPLAY"):
        return True
    _print("ERROR: No display found (DISPLAY / WAYLAND_DISPLAY unset).")
    return False


def saved_project_url() -> str:
    """Return the project URL saved by a previous session, or ''."""
    from src.shared.config_store import ConfigStore

    store = ConfigStore(DATA_ROOT / "console.sqlite")
    settings = store.get("api", {})
    if not isinstance(settings, dict):
        return ""
    return str(settings.get("url", "")).strip()


def check_project_reachable(url: str) -> bool:
    """True if the project URL answers with any HTTP response."""
    try:
        req = urllib.request.Request(url, method="GET")
        with urllib.request.urlopen(req, timeout=REACHABILITY_TIMEOUT):
            return True
    except urllib.error.HTTPError:
        # 401/404 still means the host is up
        return True
    except (urllib.error.URLError, ConnectionError, OSError, ValueError):
        return False


def launch_app() -> None:
    """Launch the console window."""
    _print("Launching supamocka console ...")
    subprocess.run(
        [sys.executable, "-m", "src.ui.app"],
        cwd=PROJECT_ROOT,
    )


def main() -> int:
    _print("=" * 50)
    _print("supamocka - Launcher")
    _print("=" * 50)

    # 1. Check Python dependencies
    _print("Checking Python dependencies...")
    if not check_python_deps():
        return 1
    _print("Python dependencies OK.")

    # 2. Check display
    if not check_display():
        return 1

    # 3. Check the saved project
    url = saved_project_url()
    if not url:
        _print("No project configured yet. Fill in Settings after the window opens.")
    elif check_project_reachable(url):
        _print(f"Project at {url} is reachable.")
    else:
        _print(f"WARNING: Project at {url} did not answer. Requests will fail until it does.")

    # 4. Launch app
    launch_app()
    return 0


if __name__ == "__main__":
    sys.exit(main())
