"""
side-launcher - labeled shell commands from layered configuration.

Resolves tasks from workspace, folder, host and user-level settings and runs
them in the background or in an interactive terminal.
"""

__version__ = "0.1.0"

from side_launcher.launcher import Launcher

__all__ = ["Launcher", "__version__"]
