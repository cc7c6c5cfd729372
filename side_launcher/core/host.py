"""Host abstraction: where workspace folders, the active file and settings come from.

In an editor deployment the host is the editor; ``LocalWorkspaceHost`` is the
standalone stand-in built from CLI options and ``Settings``.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from side_launcher.core.config import Settings


@dataclass(frozen=True)
class WorkspaceFolder:
    """An open workspace folder."""

    name: str
    path: str

    @classmethod
    def from_path(cls, path: str | Path) -> "WorkspaceFolder":
        resolved = Path(path).expanduser().resolve()
        return cls(name=resolved.name or str(resolved), path=str(resolved))


@runtime_checkable
class WorkspaceHost(Protocol):
    """Raw data provider consulted by resolution and dispatch."""

    @property
    def workspace_file(self) -> Path | None: ...

    @property
    def workspace_folders(self) -> list[WorkspaceFolder]: ...

    @property
    def active_file(self) -> str | None: ...

    def get_settings_tasks(self, folder: WorkspaceFolder | None) -> Any:
        """Return the raw task list for ``folder`` (None = unscoped).

        Either a list of records or its JSON text; ``None`` means unset.
        """
        ...


@dataclass
class LocalWorkspaceHost:
    """Host backed by explicit paths and the settings' host-level task list.

    Example:
        >>> host = LocalWorkspaceHost.create(folders=["."])
        >>> host.workspace_folders[0].path == os.getcwd()
        True
    """

    folders: list[WorkspaceFolder] = field(default_factory=list)
    workspace_path: Path | None = None
    active_path: str | None = None
    settings_tasks: Any = None

    @classmethod
    def create(
        cls,
        folders: list[str | Path] | None = None,
        workspace_file: str | Path | None = None,
        active_file: str | Path | None = None,
        settings: Settings | None = None,
    ) -> "LocalWorkspaceHost":
        return cls(
            folders=[WorkspaceFolder.from_path(f) for f in folders or []],
            workspace_path=Path(workspace_file).expanduser() if workspace_file else None,
            active_path=os.path.abspath(os.path.expanduser(active_file)) if active_file else None,
            settings_tasks=settings.tasks if settings else None,
        )

    @property
    def workspace_file(self) -> Path | None:
        return self.workspace_path

    @property
    def workspace_folders(self) -> list[WorkspaceFolder]:
        return list(self.folders)

    @property
    def active_file(self) -> str | None:
        return self.active_path

    # The standalone host has one settings scope, shared by every folder
    def get_settings_tasks(self, folder: WorkspaceFolder | None) -> Any:  # noqa: ARG002
        if isinstance(self.settings_tasks, list):
            return list(self.settings_tasks)
        return self.settings_tasks
