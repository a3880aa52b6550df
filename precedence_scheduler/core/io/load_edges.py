from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from precedence_scheduler.core.errors import EdgeLoadError, InvalidParameter, MalformedEdge
from precedence_scheduler.core.model import Edge
from precedence_scheduler.core.parse.parse_edges import parse_edges


@dataclass(frozen=True)
class EdgeDocument:
    edges: list[Edge]
    tasks: list[str] = field(default_factory=list)  # declared tasks, may be isolated
    durations: dict[str, int] = field(default_factory=dict)
    file: Optional[str] = None


def load_edges(path: str) -> EdgeDocument:
    """Load an edge file.

    ``.txt`` files hold one precedence statement per line. ``.yaml``/``.yml``
    and ``.json`` files hold a mapping with ``edges`` and optional ``tasks``
    and ``durations``.
    """

    p = Path(path)
    if not p.exists():
        raise EdgeLoadError(
            code="E_FILE_NOT_FOUND",
            message="file does not exist",
            file=str(p),
        )

    suffix = p.suffix.lower()
    try:
        raw_text = p.read_text(encoding="utf-8")
    except Exception as e:  # pragma: no cover
        raise EdgeLoadError(code="E_FILE_READ", message=str(e), file=str(p)) from e

    if suffix == ".txt":
        return EdgeDocument(edges=parse_edges(raw_text.splitlines(), file=str(p)), file=str(p))

    try:
        if suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(raw_text)
        elif suffix == ".json":
            data = json.loads(raw_text)
        else:
            raise EdgeLoadError(
                code="E_UNSUPPORTED_FORMAT",
                message="supported formats are .txt, .yaml/.yml and .json",
                file=str(p),
            )
    except EdgeLoadError:
        raise
    except Exception as e:
        code = "E_YAML_PARSE" if suffix in {".yaml", ".yml"} else "E_JSON_PARSE"
        raise EdgeLoadError(code=code, message=str(e), file=str(p)) from e

    if not isinstance(data, dict):
        raise EdgeLoadError(
            code="E_INVALID_TOP_LEVEL",
            message="top-level document must be a mapping/object",
            file=str(p),
        )

    return edge_document_from_dict(data, file=str(p))


def edge_document_from_dict(data: dict[str, Any], *, file: Optional[str] = None) -> EdgeDocument:
    raw_edges = data.get("edges")
    if raw_edges is None:
        raw_edges = []
    if not isinstance(raw_edges, list):
        raise MalformedEdge(
            code="E_MALFORMED_EDGE",
            message="edges must be an array",
            file=file,
            path="edges",
        )

    edges = [_edge_from_item(item, file=file, path=f"edges[{i}]") for i, item in enumerate(raw_edges)]

    raw_tasks = data.get("tasks") or []
    if not isinstance(raw_tasks, list) or not all(_is_task_id(t) for t in raw_tasks):
        raise MalformedEdge(
            code="E_MALFORMED_EDGE",
            message="tasks must be an array of non-empty strings",
            file=file,
            path="tasks",
        )

    raw_durations = data.get("durations") or {}
    if not isinstance(raw_durations, dict):
        raise InvalidParameter(
            code="E_INVALID_DURATION",
            message="durations must be a mapping of task -> positive integer",
            file=file,
            path="durations",
        )
    durations: dict[str, int] = {}
    for task, value in raw_durations.items():
        # bool is an int subclass; reject it explicitly.
        if not _is_task_id(task) or isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise InvalidParameter(
                code="E_INVALID_DURATION",
                message=f"duration for {task!r} must be a positive integer, got {value!r}",
                file=file,
                path=f"durations.{task}",
            )
        durations[task] = value

    return EdgeDocument(edges=edges, tasks=list(raw_tasks), durations=durations, file=file)


def _edge_from_item(item: Any, *, file: Optional[str], path: str) -> Edge:
    if isinstance(item, dict):
        blocker, blocked = item.get("blocker"), item.get("blocked")
    elif isinstance(item, list) and len(item) == 2:
        blocker, blocked = item
    else:
        raise MalformedEdge(
            code="E_MALFORMED_EDGE",
            message="edge must be [blocker, blocked] or {blocker:, blocked:}",
            file=file,
            path=path,
        )

    if not _is_task_id(blocker) or not _is_task_id(blocked):
        raise MalformedEdge(
            code="E_MALFORMED_EDGE",
            message=f"edge ends must be non-empty strings, got {blocker!r} -> {blocked!r}",
            file=file,
            path=path,
        )
    if blocker == blocked:
        raise MalformedEdge(
            code="E_MALFORMED_EDGE",
            message=f"task {blocker} cannot block itself",
            file=file,
            path=path,
        )
    return Edge(blocker=blocker, blocked=blocked)


def _is_task_id(v: Any) -> bool:
    return isinstance(v, str) and bool(v.strip())
