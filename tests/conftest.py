"""Pytest configuration and shared fixtures."""

import json
import os
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest

# Keep the developer's own settings out of the test run
for _key in [k for k in os.environ if k.upper().startswith("SIDE_LAUNCHER_")]:
    del os.environ[_key]
os.environ.setdefault("SIDE_LAUNCHER_LOG_LEVEL", "DEBUG")


# =============================================================================
# TEST DOUBLES
# =============================================================================


class FakeTerminal:
    """Terminal that records what was shown and typed."""

    def __init__(self, cwd: str, env: dict[str, str]) -> None:
        self.cwd = cwd
        self.env = env
        self.shown = 0
        self.sent: list[str] = []

    async def show(self) -> None:
        self.shown += 1

    async def send_text(self, text: str) -> None:
        self.sent.append(text)


class FakeTerminalProvider:
    """Terminal provider handing out FakeTerminals, or failing on demand."""

    def __init__(self, fail_with: Exception | None = None) -> None:
        self.fail_with = fail_with
        self.terminals: list[FakeTerminal] = []

    async def get_or_create(self, cwd: str, env: dict[str, str]) -> FakeTerminal:
        if self.fail_with is not None:
            raise self.fail_with
        terminal = FakeTerminal(cwd, env)
        self.terminals.append(terminal)
        return terminal


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def clear_settings() -> Generator[None, None, None]:
    """Drop cached settings around every test."""
    from side_launcher.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def write_json() -> Callable[[Path, Any], Path]:
    """Write ``data`` as JSON (or raw text for strings) to ``path``."""

    def _write(path: Path, data: Any) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        text = data if isinstance(data, str) else json.dumps(data, indent=2)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """An empty workspace folder."""
    folder = tmp_path / "project"
    folder.mkdir()
    return folder


@pytest.fixture
def settings(tmp_path: Path):
    """Settings with an isolated user config directory."""
    from side_launcher.core.config import Settings

    return Settings(config_dir=tmp_path / "config", _env_file=None)


@pytest.fixture
def host(workspace: Path, settings):
    """Local host with ``workspace`` as its only folder."""
    from side_launcher.core.host import LocalWorkspaceHost

    return LocalWorkspaceHost.create(folders=[workspace], settings=settings)


@pytest.fixture
def terminals() -> FakeTerminalProvider:
    """Recording terminal provider."""
    return FakeTerminalProvider()


@pytest.fixture
def failing_terminals() -> FakeTerminalProvider:
    """Terminal provider whose terminal creation always fails."""
    from side_launcher.core.errors import DispatchError

    return FakeTerminalProvider(fail_with=DispatchError("terminal unavailable"))


@pytest.fixture
def launcher(host, settings, terminals):
    """Launcher wired to the test host and fake terminals."""
    from side_launcher.launcher import Launcher

    return Launcher(host=host, settings=settings, terminals=terminals)


@pytest.fixture
def sample_tasks() -> list[dict[str, str]]:
    """Raw task records as users write them."""
    return [
        {"label": "test", "type": "shell", "command": "npm test"},
        {"label": "dev", "type": "shellOnVSCode", "command": "npm run dev"},
        {"label": "status", "command": "git status"},
    ]


# Markers
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")
