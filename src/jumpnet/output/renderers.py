"""Human-readable rendering of ServiceResults with Rich.

``render_result`` shows ``related`` as a ranked table and every other op as
an ``OK <op>`` line followed by ``key: value`` fields (plus the hub table
for ``stats``). ``render_quiet`` is what ``--quiet`` prints: file ids one
per line, or a one-line status.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from jumpnet.output.console import (
    create_console,
    file_id,
    file_path,
    format_weight,
    get_output,
    relation,
)

if TYPE_CHECKING:
    from rich.console import Console

    from jumpnet.services.result import ServiceResult

_ID_KEYS = frozenset({"id", "from", "to", "current", "source_id"})
_WEIGHT_KEYS = frozenset({"weight", "total_weight"})
_LISTING_KEYS = frozenset({"items", "relations", "count"})

# Fields listed after the status line, in order; other ops list all scalars.
_SUMMARY_FIELDS: dict[str, tuple[str, ...]] = {
    "visit": ("visited", "current"),
    "record": ("recorded", "ignored", "current"),
    "jump": ("from", "to", "weight"),
    "forget": ("id",),
    "unlink": ("from", "to"),
    "reset": ("path",),
    "check": ("path", "vertices", "edges"),
    "stats": ("vertices", "edges", "total_weight", "components", "largest_component"),
}


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Styled text for *result*; plain when stdout is not a terminal."""
    console = create_console()
    if not result.ok:
        _render_error(console, result, verbose=verbose)
    elif result.op == "related":
        _render_related(console, result.data, verbose=verbose)
    else:
        _render_summary(console, result, verbose=verbose)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    if not result.ok:
        message = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {message}"
    ids = [
        str(item["id"])
        for item in result.data.get("items") or []
        if isinstance(item, dict) and "id" in item
    ]
    return "\n".join(ids) if ids else f"OK: {result.op}"


def _field(console: Console, key: str, value: Any) -> None:
    if key in _ID_KEYS:
        shown = file_id(value)
    elif key == "path":
        shown = file_path(value)
    elif key in _WEIGHT_KEYS:
        shown = Text(format_weight(value), style="jn.weight")
    else:
        shown = Text(str(value))
    console.print(Text(f"  {key}: ", style="jn.key"), shown, sep="")


def _render_error(console: Console, result: ServiceResult, *, verbose: bool) -> None:
    err = result.error
    console.print(
        Text.assemble(
            ("ERROR", "jn.error"),
            "  ",
            (result.op, "jn.op"),
            " — ",
            err.message if err else "Unknown error",
        )
    )
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="jn.key"))
        for key, value in err.detail.items():
            console.print(Text(f"    {key}: {value}"))


def _render_summary(console: Console, result: ServiceResult, *, verbose: bool) -> None:
    data = result.data
    console.print(Text.assemble(("OK", "jn.ok"), "  ", (result.op, "jn.op")))

    keys = _SUMMARY_FIELDS.get(result.op) or [k for k in data if k not in _LISTING_KEYS]
    for key in keys:
        if data.get(key) is not None:
            _field(console, key, data[key])

    # visit lists each strengthened relation; record only counts them.
    relations = data.get("relations")
    if isinstance(relations, list):
        _field(console, "relations", len(relations))
        if verbose:
            for rel in relations:
                console.print(relation(rel["from"], rel["to"], rel["weight"]))
    elif relations is not None:
        _field(console, "relations", relations)

    if result.op == "stats" and data.get("items"):
        console.print()
        console.print(_hub_table(data["items"]))


def _hub_table(items: list[dict[str, Any]]) -> Table:
    table = Table(pad_edge=False)
    table.add_column("File", style="jn.id")
    table.add_column("Strength", style="jn.weight", justify="right")
    table.add_column("Degree", justify="right")
    for item in items:
        table.add_row(file_id(item["id"]), format_weight(item["strength"]), str(item["degree"]))
    return table


def _render_related(console: Console, data: dict[str, Any], *, verbose: bool) -> None:
    items = data.get("items", [])
    table = Table(pad_edge=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("File", style="jn.id")
    table.add_column("Weight", style="jn.weight", justify="right")
    if verbose:
        table.add_column("Path", style="jn.path")

    for rank, item in enumerate(items, start=1):
        # Files reached only through other files have no direct weight.
        weight = format_weight(item.get("weight", 0)) if item.get("direct") else "-"
        cells: list[Any] = [str(rank), Text(str(item.get("id", ""))), weight]
        if verbose:
            cells.append(Text(str(item.get("path", ""))))
        table.add_row(*cells)

    console.print(table)
    if data.get("source_id"):
        console.print()
        console.print(Text("Source: "), file_id(data["source_id"]), sep="")
    console.print(f"{data.get('count', len(items))} related files")
