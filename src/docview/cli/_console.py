"""Rich consoles and renderers for documents and views."""

import sys
from typing import Any, Dict, List

import typer
from rich.console import Console
from rich.json import JSON
from rich.panel import Panel
from rich.table import Table

from docview.store import DesignDocument

# Status and errors go to stderr so --json output on stdout stays pipeable
console = Console(stderr=True)
stdout_console = Console(file=sys.stdout)


def print_ok(msg: str) -> None:
    console.print(f"[green]✓[/green] {msg}")


def print_err(msg: str) -> None:
    console.print(f"[red]✗[/red] {msg}")


def print_warn(msg: str) -> None:
    console.print(f"[yellow]![/yellow] {msg}")


def output_json(data: Any) -> None:
    """Write machine-readable output to stdout."""
    stdout_console.print_json(data=data)


def output_document(key: str, data: Any, *, ctx: typer.Context) -> None:
    """Show one stored document, titled with its key."""
    if ctx.obj.get("json"):
        output_json(data)
        return
    console.print(Panel(JSON.from_data(data), title=key, border_style="blue"))


def output_views(documents: List[DesignDocument], *, ctx: typer.Context) -> None:
    """List the views of each design document.

    JSON output is one ``{"design_document", "view"}`` object per view.
    """
    rows = [
        {"design_document": doc.name, "view": view.name}
        for doc in documents
        for view in doc.views
    ]
    if ctx.obj.get("json"):
        output_json(rows)
        return

    if not rows:
        console.print("[dim]No views[/dim]")
        return

    table = Table(title="Views", show_lines=False)
    table.add_column("design_document", style="cyan")
    table.add_column("view")
    table.add_column("reduce", justify="center")
    for doc in documents:
        for view in doc.views:
            table.add_row(doc.name, view.name, "yes" if view.reduce else "")
    console.print(table)


def output_provisioned(result: Dict[str, Any], *, ctx: typer.Context) -> None:
    """Report the outcome of provisioning one finder view."""
    if ctx.obj.get("json"):
        output_json(result)
        return
    if ctx.obj.get("quiet"):
        return

    name = f"{result['design_document']}/{result['view']}"
    if result["created"]:
        print_ok(f"Created view {name}")
    else:
        print_ok(f"View {name} already present")
    if not result["in_sync"]:
        print_warn(f"Server map function of {name} differs from --where/--emit; it was left unchanged")
    console.print(result["map"], highlight=False)
