"""
M0 Acceptance Test: Verify basic repo setup.
"""


def test_repo_structure():
    """Verify basic repository structure exists."""
    from pathlib import Path

    repo_root = Path(__file__).parent.parent

    # Check required files
    assert (repo_root / "pyproject.toml").exists()
    assert (repo_root / ".gitignore").exists()
    assert (repo_root / "run.py").exists()

    # Check source structure
    assert (repo_root / "src").is_dir()
    assert (repo_root / "src" / "admin").is_dir()
    assert (repo_root / "src" / "console").is_dir()
    assert (repo_root / "src" / "polling").is_dir()
    assert (repo_root / "src" / "shared").is_dir()
    assert (repo_root / "src" / "ui").is_dir()

    # Check tests directory
    assert (repo_root / "tests").is_dir()


def test_background_runner_runs_off_thread():
    import threading

    from src.shared.scheduling import BackgroundRunner

    runner = BackgroundRunner(max_workers=1)
    try:
        name = runner.submit(lambda: threading.current_thread().name).result(timeout=5)
    finally:
        runner.shutdown(wait=True)

    assert name.startswith("supamocka-io")


def test_configure_logging_reads_level_from_env(monkeypatch):
    import logging

    from src.shared.logging_config import configure_logging

    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    monkeypatch.setenv("SUPAMOCKA_LOG_LEVEL", "debug")
    try:
        configure_logging()
        assert root.level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
