"""Execution context and environment overlay for a dispatch."""

import os
from collections.abc import Mapping, Sequence

from side_launcher.core.host import WorkspaceFolder, WorkspaceHost
from side_launcher.core.state import ExecutionContext

VSCODE_WORKSPACE_ROOT = "VSCODE_WORKSPACE_ROOT"
WORKSPACE_ROOT = "WORKSPACE_ROOT"
CURRENT_FILE_ABSOLUTE_PATH = "CURRENT_FILE_ABSOLUTE_PATH"
CURRENT_FILE_RELATIVE_PATH = "CURRENT_FILE_RELATIVE_PATH"

CONTEXT_KEYS = (
    VSCODE_WORKSPACE_ROOT,
    WORKSPACE_ROOT,
    CURRENT_FILE_ABSOLUTE_PATH,
    CURRENT_FILE_RELATIVE_PATH,
)


def relative_to_root(path: str, root: str) -> str:
    """Return ``path`` relative to ``root``, or ``path`` unchanged if outside it.

    Example:
        >>> relative_to_root("/a/b/c/d.txt", "/a/b")
        'c/d.txt'
        >>> relative_to_root("/x/y.txt", "/a/b")
        '/x/y.txt'
    """
    norm_root = os.path.normpath(root)
    norm_path = os.path.normpath(path)
    try:
        common = os.path.commonpath([norm_root, norm_path])
    except ValueError:
        # different drives, or one path relative and the other absolute
        return path
    if common != norm_root:
        return path
    return os.path.relpath(norm_path, norm_root)


def build_context(
    folders: Sequence[WorkspaceFolder],
    active_file: str | None,
    cwd: str | None = None,
) -> ExecutionContext:
    """Derive the context of one dispatch.

    Args:
        folders: Open workspace folders; the first one is the root.
        active_file: Path of the active file, if any.
        cwd: Fallback root when no folder is open (process cwd by default).
    """
    workspace_root = folders[0].path if folders else (cwd or os.getcwd())

    if not active_file:
        return ExecutionContext(workspace_root=workspace_root)

    absolute = os.path.abspath(active_file)
    return ExecutionContext(
        workspace_root=workspace_root,
        active_file_absolute_path=absolute,
        active_file_relative_path=relative_to_root(absolute, workspace_root),
    )


def build_overlay(
    context: ExecutionContext,
    base_env: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Copy ``base_env`` (default ``os.environ``) and add the context keys."""
    env = dict(os.environ if base_env is None else base_env)
    env[VSCODE_WORKSPACE_ROOT] = context.workspace_root
    env[WORKSPACE_ROOT] = context.workspace_root
    env[CURRENT_FILE_ABSOLUTE_PATH] = context.active_file_absolute_path
    env[CURRENT_FILE_RELATIVE_PATH] = context.active_file_relative_path
    return env


class EnvironmentBuilder:
    """Builds a fresh context from the host on every call."""

    def __init__(self, host: WorkspaceHost) -> None:
        self.host = host

    def build(self) -> ExecutionContext:
        return build_context(self.host.workspace_folders, self.host.active_file)
