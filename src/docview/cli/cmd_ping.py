"""Ping command: open and close the configured store."""

import typer

from docview.cli._app import app
from docview.cli._common import open_store
from docview.cli._console import output_json, print_ok


@app.command("ping", help="Open the configured store connection and close it again.")
def ping_cmd(ctx: typer.Context):
    """Check that the store is reachable with the current configuration."""
    with open_store(ctx) as store:
        design_documents = store.list_design_documents()

    if ctx.obj["json"]:
        output_json({"ok": True, "design_documents": len(design_documents)})
    elif not ctx.obj["quiet"]:
        print_ok(f"Store reachable ({len(design_documents)} design document(s))")
