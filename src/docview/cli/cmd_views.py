"""Views commands: list and provision design document views."""

from typing import Optional

import typer

from docview.cli._app import views_app
from docview.cli._common import open_store
from docview.cli._console import output_provisioned, output_views, print_err
from docview.finders import DEFAULT_EMIT, FinderSpec
from docview.naming import design_document_name
from docview.views import ViewProvisioner


@views_app.command("list", help="List design documents and their views.")
def list_cmd(
    ctx: typer.Context,
    design_document: Optional[str] = typer.Option(
        None,
        "--design-document",
        "-d",
        help="Only show this design document",
    ),
):
    with open_store(ctx) as store:
        if design_document:
            doc = store.get_design_document(design_document)
            documents = [doc] if doc is not None else []
        else:
            documents = store.list_design_documents()

    if design_document and not documents:
        print_err(f"Design document not found: {design_document}")
        raise SystemExit(1)

    output_views(documents, ctx=ctx)


@views_app.command("provision", help="Ensure a finder view exists, creating it if absent.")
def provision_cmd(
    ctx: typer.Context,
    entity: str = typer.Argument(..., help="Entity name (design document is its uppercase form)"),
    finder: str = typer.Argument(..., help="Finder / view name"),
    where: str = typer.Option(..., "--where", help="Predicate expression, e.g. 'doc.status == \"ACTIVE\"'"),
    emit: str = typer.Option(DEFAULT_EMIT, "--emit", help="Emission statement"),
):
    try:
        spec = FinderSpec(predicate=where, emit=emit)
    except ValueError as e:
        print_err(str(e))
        raise SystemExit(1)

    ddoc_name = design_document_name(entity)
    with open_store(ctx) as store:
        existing = store.get_design_document(ddoc_name)
        already_present = existing is not None and existing.find_view(finder) is not None
        view = ViewProvisioner(store, ddoc_name).resolve(finder, spec)

    output_provisioned(
        {
            "design_document": ddoc_name,
            "view": view.name,
            "created": not already_present,
            "in_sync": view.map == spec.render_map_function(),
            "map": view.map,
        },
        ctx=ctx,
    )
