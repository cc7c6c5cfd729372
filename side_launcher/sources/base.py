"""TaskSource abstract base class and record coercion helpers."""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import ValidationError

from side_launcher.core.errors import LauncherError, ParseError, SourceReadError
from side_launcher.core.state import SourceReport, TaskDefinition

DEFAULT_SETTINGS_KEY = "sideLauncher"


def read_text(path: Path, source: str) -> str:
    """Read a UTF-8 configuration file, mapping OS failures to SourceReadError."""
    try:
        return path.read_text(encoding="utf-8-sig")
    except FileNotFoundError as e:
        raise SourceReadError(source, f"{path} not found", missing=True) from e
    except PermissionError as e:
        raise SourceReadError(source, f"permission denied reading {path}") from e
    except UnicodeDecodeError as e:
        raise ParseError(f"{path} is not valid UTF-8") from e
    except OSError as e:
        raise SourceReadError(source, f"cannot read {path}: {e}") from e


def parse_json(text: str) -> Any:
    """Strict JSON parse raising ParseError."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(e.msg, e.pos) from e


def extract_tasks(settings: Any, settings_key: str = DEFAULT_SETTINGS_KEY) -> list[Any]:
    """Pull the raw task list out of a settings object.

    Recognizes the nested form ``{"sideLauncher": {"tasks": [...]}}`` and the
    flat editor form ``{"sideLauncher.tasks": [...]}``. Anything else yields
    no records.
    """
    if not isinstance(settings, dict):
        return []

    section = settings.get(settings_key)
    if isinstance(section, dict) and "tasks" in section:
        records = section["tasks"]
    elif f"{settings_key}.tasks" in settings:
        records = settings[f"{settings_key}.tasks"]
    else:
        return []

    if records is None:
        return []
    if not isinstance(records, list):
        raise ParseError(f"{settings_key}.tasks must be an array, got {type(records).__name__}")
    return records


def coerce_tasks(records: Any, source: str) -> list[TaskDefinition]:
    """Validate raw records, skipping the ones that are not task objects."""
    if not isinstance(records, list):
        raise ParseError(f"expected an array of tasks, got {type(records).__name__}")

    tasks: list[TaskDefinition] = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            logger.warning(f"[{source}] skipping task #{index}: not an object")
            continue
        try:
            tasks.append(TaskDefinition.model_validate(record))
        except ValidationError as e:
            logger.warning(
                f"[{source}] skipping task #{index}: {e.error_count()} validation error(s)"
            )
    return tasks


class TaskSource(ABC):
    """Base class for a single configuration origin.

    Subclasses implement ``read_records``, raising ``SourceReadError`` or
    ``ParseError`` when the origin cannot be used. ``read`` is the failure
    boundary: it never raises, and a failed source reports zero tasks plus
    the error message.
    """

    source_name: str = ""

    def __init__(self, settings_key: str = DEFAULT_SETTINGS_KEY) -> None:
        self.settings_key = settings_key

    @property
    def name(self) -> str:
        """Human-readable identifier used in logs and reports."""
        return self.source_name

    @abstractmethod
    def read_records(self) -> list[Any]:
        """Return the raw task records of this source."""
        ...

    def read(self) -> SourceReport:
        """Read and validate this source, isolating any failure."""
        try:
            tasks = coerce_tasks(self.read_records(), self.name)
        except SourceReadError as e:
            if e.missing:
                logger.debug(f"[{self.name}] {e}")
            else:
                logger.warning(f"[{self.name}] {e}")
            return SourceReport(source=self.name, error=str(e))
        except LauncherError as e:
            logger.warning(f"[{self.name}] failed to parse: {e}")
            return SourceReport(source=self.name, error=str(e))
        except Exception as e:
            logger.warning(f"[{self.name}] unexpected error: {e}")
            return SourceReport(source=self.name, error=f"{type(e).__name__}: {e}")

        logger.debug(f"[{self.name}] read {len(tasks)} task(s)")
        return SourceReport(source=self.name, tasks=tasks)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"
