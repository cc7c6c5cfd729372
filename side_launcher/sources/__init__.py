"""Task sources and resolution."""

from side_launcher.sources.base import TaskSource, coerce_tasks, extract_tasks
from side_launcher.sources.merger import (
    HELP_TASK_LABEL,
    TaskMerger,
    default_help_task,
    merge_reports,
    resolve,
)
from side_launcher.sources.readers import (
    ExternalFileSource,
    FolderSettingsFileSource,
    HostSettingsSource,
    WorkspaceFileSource,
    build_sources,
)

__all__ = [
    "HELP_TASK_LABEL",
    "ExternalFileSource",
    "FolderSettingsFileSource",
    "HostSettingsSource",
    "TaskMerger",
    "TaskSource",
    "WorkspaceFileSource",
    "build_sources",
    "coerce_tasks",
    "default_help_task",
    "extract_tasks",
    "merge_reports",
    "resolve",
]
