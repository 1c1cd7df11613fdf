"""Docs command: fetch a raw document by entity and id."""

import json

import typer

from docview.cli._app import docs_app
from docview.cli._common import open_store
from docview.cli._console import output_document, print_err
from docview.naming import make_key


@docs_app.command("get", help="Print the JSON stored for an entity id.")
def get_cmd(
    ctx: typer.Context,
    entity: str = typer.Argument(..., help="Entity name"),
    doc_id: str = typer.Argument(..., help="Caller-supplied document id"),
):
    try:
        key = make_key(entity, doc_id)
    except ValueError as e:
        print_err(str(e))
        raise SystemExit(1)

    with open_store(ctx) as store:
        content = store.get(key)

    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        print_err(f"Document {key} is not valid JSON")
        raise SystemExit(1)

    output_document(key, data, ctx=ctx)
