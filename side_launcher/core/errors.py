"""Exception hierarchy for side-launcher.

None of these escape the engine: sources turn them into empty reports and
the dispatcher turns them into populated ``CommandResult`` records.
"""


class LauncherError(Exception):
    """Base exception for side-launcher errors."""

    pass


class SourceReadError(LauncherError):
    """A configuration source is absent, unreadable or permission-denied."""

    def __init__(self, source: str, message: str, missing: bool = False) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source
        self.missing = missing


class ParseError(LauncherError):
    """A configuration source could not be parsed."""

    def __init__(self, message: str, position: int | None = None) -> None:
        if position is not None:
            message = f"{message} (at offset {position})"
        super().__init__(message)
        self.position = position


class DispatchError(LauncherError):
    """Launching a subprocess or terminal session failed."""

    pass
