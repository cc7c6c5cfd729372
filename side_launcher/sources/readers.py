"""Concrete task sources, one per configuration origin."""

from pathlib import Path
from typing import Any

from side_launcher.core.config import Settings
from side_launcher.core.errors import ParseError
from side_launcher.core.host import WorkspaceFolder, WorkspaceHost

from . import lenient
from .base import DEFAULT_SETTINGS_KEY, TaskSource, extract_tasks, parse_json, read_text


class WorkspaceFileSource(TaskSource):
    """Tasks from a ``*.code-workspace`` file.

    Reads the global ``settings`` section first, then the ``settings`` of
    each entry in ``folders``, in file order.
    """

    source_name = "workspace-file"

    def __init__(self, path: Path, settings_key: str = DEFAULT_SETTINGS_KEY) -> None:
        super().__init__(settings_key)
        self.path = Path(path)

    @property
    def name(self) -> str:
        return f"{self.source_name}:{self.path}"

    def read_records(self) -> list[Any]:
        document = parse_json(read_text(self.path, self.name))
        if not isinstance(document, dict):
            raise ParseError("workspace file must contain a JSON object")

        records = list(extract_tasks(document.get("settings"), self.settings_key))
        folders = document.get("folders")
        if isinstance(folders, list):
            for folder in folders:
                if isinstance(folder, dict):
                    records.extend(extract_tasks(folder.get("settings"), self.settings_key))
        return records


class FolderSettingsFileSource(TaskSource):
    """Tasks from ``<folder>/.vscode/settings.json``, parsed leniently."""

    source_name = "folder-settings-file"

    def __init__(self, folder: WorkspaceFolder, settings_key: str = DEFAULT_SETTINGS_KEY) -> None:
        super().__init__(settings_key)
        self.folder = folder
        self.path = Path(folder.path) / ".vscode" / "settings.json"

    @property
    def name(self) -> str:
        return f"{self.source_name}:{self.path}"

    def read_records(self) -> list[Any]:
        document = lenient.loads(read_text(self.path, self.name))
        if not isinstance(document, dict):
            raise ParseError("settings file must contain a JSON object")
        return extract_tasks(document, self.settings_key)


class HostSettingsSource(TaskSource):
    """Tasks the host already resolved for a folder (or for no folder)."""

    source_name = "host-settings"

    def __init__(
        self,
        host: WorkspaceHost,
        folder: WorkspaceFolder | None = None,
        settings_key: str = DEFAULT_SETTINGS_KEY,
    ) -> None:
        super().__init__(settings_key)
        self.host = host
        self.folder = folder

    @property
    def name(self) -> str:
        if self.folder is None:
            return self.source_name
        return f"{self.source_name}:{self.folder.name}"

    def read_records(self) -> list[Any]:
        raw = self.host.get_settings_tasks(self.folder)
        if raw is None:
            return []
        if isinstance(raw, (str, bytes)):
            if not raw.strip():
                return []
            return parse_json(raw)
        return raw


class ExternalFileSource(TaskSource):
    """Tasks from the user-level JSON file (a bare array)."""

    source_name = "external-file"

    def __init__(self, path: Path, settings_key: str = DEFAULT_SETTINGS_KEY) -> None:
        super().__init__(settings_key)
        self.path = Path(path)

    @property
    def name(self) -> str:
        return f"{self.source_name}:{self.path}"

    def read_records(self) -> list[Any]:
        return parse_json(read_text(self.path, self.name))


def build_sources(host: WorkspaceHost, settings: Settings) -> list[TaskSource]:
    """Return every source for ``host`` in precedence order.

    Order: workspace file, then for each folder its settings file followed
    by its host-resolved settings, then the unscoped host settings, then the
    external file.
    """
    key = settings.settings_key
    sources: list[TaskSource] = []

    if host.workspace_file is not None:
        sources.append(WorkspaceFileSource(host.workspace_file, key))

    for folder in host.workspace_folders:
        sources.append(FolderSettingsFileSource(folder, key))
        sources.append(HostSettingsSource(host, folder, key))

    sources.append(HostSettingsSource(host, None, key))
    sources.append(ExternalFileSource(settings.external_tasks_path, key))
    return sources
