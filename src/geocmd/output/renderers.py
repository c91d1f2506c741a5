"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from geocmd.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from geocmd.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text.assemble(("OK", "geo.ok"), (f"  {result.op}", "geo.op")))


def _field(console: Console, key: str, value: Any) -> None:
    console.print(Text.assemble((f"  {key}: ", "geo.key"), str(value)))


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(Text(f"    {k}: {v}"))


def _layer_table(layers: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Layer", style="geo.layer", no_wrap=True)
    table.add_column("Active", style="geo.active")
    for column in ("points", "paths", "groups"):
        table.add_column(column.title(), style="geo.count", justify="right")
    for layer in layers:
        table.add_row(
            Text(str(layer.get("name", ""))),
            "*" if layer.get("active") else "",
            str(layer.get("points", 0)),
            str(layer.get("paths", 0)),
            str(layer.get("groups", 0)),
        )
    return table


# ── Renderers ─────────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    code = f" [{err.code}]" if err else ""
    console.print(
        Text.assemble(("ERROR", "geo.error"), (f"  {result.op}{code}", "geo.op"), f" — {msg}")
    )
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


def _render_script(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    if "script" in result.data:
        _field(console, "script", result.data["script"])
    layers = result.data.get("layers") or []
    if layers:
        console.print(_layer_table(layers))
    history = result.data.get("history") or {}
    if history:
        _field(console, "undo", history.get("undo", 0))
        _field(console, "redo", history.get("redo", 0))
        if history.get("last"):
            _field(console, "last", history["last"])
    if verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "run_script": _render_script,
}
