from __future__ import annotations

import re
from typing import Iterable, Optional

from precedence_scheduler.core.errors import MalformedEdge
from precedence_scheduler.core.model import Edge


STATEMENT_RE = re.compile(
    r"^Step (?P<blocker>[A-Za-z0-9]+) must be finished before step (?P<blocked>[A-Za-z0-9]+) can begin\.$"
)


def parse_edge(line: str, *, file: Optional[str] = None, path: Optional[str] = None) -> Edge:
    m = STATEMENT_RE.match(line.strip())
    if m is None:
        raise MalformedEdge(
            code="E_MALFORMED_EDGE",
            message=f"not a precedence statement: {line.strip()!r}",
            file=file,
            path=path,
        )

    blocker, blocked = m.group("blocker"), m.group("blocked")
    if blocker == blocked:
        raise MalformedEdge(
            code="E_MALFORMED_EDGE",
            message=f"step {blocker} cannot block itself",
            file=file,
            path=path,
        )
    return Edge(blocker=blocker, blocked=blocked)


def parse_edges(lines: Iterable[str], *, file: Optional[str] = None) -> list[Edge]:
    """Parse precedence statements, one per line.

    Blank lines are skipped. Errors carry the 1-based line number as
    ``lines[N]``.
    """

    edges: list[Edge] = []
    for i, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        edges.append(parse_edge(line, file=file, path=f"lines[{i}]"))
    return edges
