from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SchedulerError(Exception):
    """Why a graph could not be loaded or scheduled.

    ``code`` is a stable E_* identifier, ``file`` the edge or config file when
    one is involved, and ``path`` locates the offending item inside it
    (``lines[3]``, ``edges[2]``, ``durations.Q``, ``workers``).
    """

    code: str
    message: str
    file: Optional[str] = None
    path: Optional[str] = None

    def __str__(self) -> str:
        parts: list[str] = []
        if self.file:
            parts.append(self.file)
        if self.path:
            parts.append(self.path)
        loc = ":".join(parts) if parts else "<graph>"
        return f"{loc}: {self.code}: {self.message}"


class EdgeLoadError(SchedulerError):
    pass


class MalformedEdge(SchedulerError):
    pass


class Unschedulable(SchedulerError):
    pass


class InvalidParameter(SchedulerError):
    pass
