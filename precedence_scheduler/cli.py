from __future__ import annotations

import json
import logging
from typing import Any, NoReturn, Optional

import typer
from rich.console import Console
from rich.table import Table

from precedence_scheduler.core.bench import bench as run_bench
from precedence_scheduler.core.config import ConfigError, SchedulerConfig, resolve_config
from precedence_scheduler.core.errors import EdgeLoadError, InvalidParameter, SchedulerError
from precedence_scheduler.core.graph.build_graph import build_graph
from precedence_scheduler.core.io.load_edges import EdgeDocument, load_edges
from precedence_scheduler.core.model import DurationFn, TaskGraph
from precedence_scheduler.core.schedule.order import format_order, single_worker_order
from precedence_scheduler.core.schedule.simulate import alphabet_duration, simulate, table_duration
from precedence_scheduler.core.schedule.sweep import sweep_worker_counts

app = typer.Typer(add_completion=False, no_args_is_help=True)
console = Console()

FORMATS = ("text", "json")


@app.callback()
def _callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log scheduling events at DEBUG"),
) -> None:
    """Precedence scheduler CLI."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@app.command("order")
def order(
    path: str = typer.Argument(..., help="Edge file (.txt/.yaml/.yml/.json)"),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
) -> None:
    """Print the canonical single-worker execution order."""
    _check_format("order", format)
    try:
        _, graph = _load_graph(path)
        result = single_worker_order(graph)
    except SchedulerError as e:
        _fail("order", format, e)

    if format == "text":
        typer.echo(format_order(result))
        return

    _emit_json(
        "order",
        ok=True,
        exit_code=0,
        errors=[],
        result={"order": [str(t) for t in result], "joined": format_order(result)},
    )


@app.command("simulate")
def simulate_cmd(
    path: str = typer.Argument(..., help="Edge file (.txt/.yaml/.yml/.json)"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Number of simulated workers"),
    base_duration: Optional[int] = typer.Option(
        None, "--base-duration", "-b", help="Seconds added to every lettered step"
    ),
    config: Optional[str] = typer.Option(None, "--config", help="Optional YAML config file"),
    trace: bool = typer.Option(False, "--trace", help="Print the start/finish timeline"),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
) -> None:
    """Simulate N workers and print the total elapsed time."""
    _check_format("simulate", format)
    try:
        cfg = _resolve_config(config, workers, base_duration)
        doc, graph = _load_graph(path)
        result = simulate(graph, cfg.workers, _duration_fn(doc, cfg, graph))
    except SchedulerError as e:
        _fail("simulate", format, e)

    if format == "text":
        if trace:
            for ev in result.events:
                typer.echo(f"t={ev.time} {ev.kind} {ev.task} worker={ev.worker}")
        typer.echo(str(result.elapsed))
        return

    payload: dict[str, Any] = {
        "workers": cfg.workers,
        "base_duration": cfg.base_duration,
        "elapsed": result.elapsed,
        "completion_order": [str(t) for t in result.order],
    }
    if trace:
        payload["events"] = [
            {"time": ev.time, "kind": ev.kind, "task": str(ev.task), "worker": ev.worker}
            for ev in result.events
        ]
    _emit_json("simulate", ok=True, exit_code=0, errors=[], result=payload)


@app.command("sweep")
def sweep(
    path: str = typer.Argument(..., help="Edge file (.txt/.yaml/.yml/.json)"),
    max_workers: int = typer.Option(..., "--max-workers", help="Simulate 1..N workers"),
    base_duration: Optional[int] = typer.Option(None, "--base-duration", "-b"),
    config: Optional[str] = typer.Option(None, "--config", help="Optional YAML config file"),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
) -> None:
    """Total time for every worker count from 1 to --max-workers."""
    _check_format("sweep", format)
    try:
        cfg = _resolve_config(config, max_workers, base_duration)
        doc, graph = _load_graph(path)
        results = sweep_worker_counts(graph, range(1, cfg.workers + 1), _duration_fn(doc, cfg, graph))
    except SchedulerError as e:
        _fail("sweep", format, e)

    if format == "json":
        _emit_json(
            "sweep",
            ok=True,
            exit_code=0,
            errors=[],
            result={
                "base_duration": cfg.base_duration,
                "elapsed_by_workers": {str(n): v for n, v in results.items()},
            },
        )

    table = Table(title=f"precedence sweep ({len(graph)} tasks)")
    table.add_column("Workers")
    table.add_column("Elapsed")
    for n, elapsed in results.items():
        table.add_row(str(n), str(elapsed))
    console.print(table)


@app.command("bench")
def bench_cmd(
    path: str = typer.Argument(..., help="Edge file (.txt/.yaml/.yml/.json)"),
    repeat: int = typer.Option(100, "--repeat", help="Runs per scheduling mode"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w"),
    base_duration: Optional[int] = typer.Option(None, "--base-duration", "-b"),
    config: Optional[str] = typer.Option(None, "--config", help="Optional YAML config file"),
) -> None:
    """Time the ordering and the simulation on an input file."""
    try:
        cfg = _resolve_config(config, workers, base_duration)
        doc, graph = _load_graph(path)
        rows = run_bench(graph, repeat=repeat, worker_count=cfg.workers, duration_fn=_duration_fn(doc, cfg, graph))
    except SchedulerError as e:
        _fail("bench", "text", e)

    table = Table(title=f"precedence bench ({len(graph)} tasks, {repeat} runs)")
    table.add_column("Mode")
    table.add_column("Runs")
    table.add_column("Best ms")
    table.add_column("Mean ms")
    for r in rows:
        table.add_row(r.name, str(r.runs), f"{r.best_seconds * 1000:.3f}", f"{r.mean_seconds * 1000:.3f}")
    console.print(table)


def _load_graph(path: str) -> tuple[EdgeDocument, TaskGraph]:
    doc = load_edges(path)
    try:
        graph = build_graph(doc.edges, extra_tasks=doc.tasks)
    except SchedulerError as e:
        raise type(e)(code=e.code, message=e.message, file=doc.file, path=e.path) from e
    return doc, graph


def _resolve_config(
    config_file: Optional[str], workers: Optional[int], base_duration: Optional[int]
) -> SchedulerConfig:
    try:
        return resolve_config(config_file, workers=workers, base_duration=base_duration)
    except FileNotFoundError:
        raise EdgeLoadError(
            code="E_CONFIG_FILE_NOT_FOUND",
            message=f"config file not found: {config_file}",
            file=config_file,
            path="config",
        )
    except ConfigError as e:
        raise InvalidParameter(code="E_INVALID_CONFIG", message=str(e), file=config_file, path="config")


def _duration_fn(doc: EdgeDocument, cfg: SchedulerConfig, graph: TaskGraph) -> DurationFn:
    for task in sorted(doc.durations):
        if task not in graph:
            raise InvalidParameter(
                code="E_INVALID_DURATION",
                message=f"duration declared for unknown task: {task}",
                file=doc.file,
                path=f"durations.{task}",
            )

    letters = alphabet_duration(cfg.base_duration)
    if doc.durations:
        return table_duration(doc.durations, fallback=letters)
    return letters


def _check_format(command: str, format: str) -> None:
    if format not in FORMATS:
        err = InvalidParameter(
            code=f"E_{command.upper()}_UNKNOWN_FORMAT",
            message=f"unknown format: {format} (choose one of: text, json)",
            file=None,
            path="format",
        )
        _print_errors([err])
        raise typer.Exit(code=2)


def _exit_code(e: SchedulerError) -> int:
    return 1 if isinstance(e, EdgeLoadError) else 2


def _fail(command: str, format: str, e: SchedulerError) -> NoReturn:
    if format == "json":
        _emit_json(command, ok=False, exit_code=_exit_code(e), errors=[e], result=None)
    _print_errors([e])
    raise typer.Exit(code=_exit_code(e))


def _to_item(e: SchedulerError) -> dict[str, Any]:
    source = "load" if isinstance(e, EdgeLoadError) else "schedule"
    return {
        "code": e.code,
        "message": e.message,
        "file": e.file,
        "path": e.path,
        "severity": "error",
        "source": source,
    }


def _emit_json(
    command: str,
    *,
    ok: bool,
    exit_code: int,
    errors: list[SchedulerError],
    result: Optional[dict[str, Any]],
) -> NoReturn:
    payload = {
        "tool": "precedence",
        "command": command,
        "ok": ok,
        "error_count": len(errors),
        "errors": [_to_item(e) for e in errors],
        "result": result,
    }
    typer.echo(json.dumps(payload, indent=2, sort_keys=True))
    raise typer.Exit(code=exit_code)


def _print_errors(errors: list[SchedulerError]) -> None:
    errors_sorted = sorted(errors, key=lambda e: (e.file or "", e.path or "", e.code))
    for e in errors_sorted:
        typer.echo(str(e), err=True)


def main() -> None:
    app(prog_name="precedence")


cli = typer.main.get_command(app)

if __name__ == "__main__":
    main()
