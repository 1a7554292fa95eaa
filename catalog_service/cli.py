"""
This file is the entry point for the 'rescat' command-line tool.
Run 'rescat --help' in your shell to see the commands.

Without --catalog (or RESCAT_CATALOG) the built-in demo catalog is used.
Changes made with 'add' live only for the command unless --save is given.
"""
from pathlib import Path
from typing import Optional

import typer
from box import Box
from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from catalog_service import api
from catalog_service.forms import clean_resource_form
from common.app_setup import load_settings, print_and_log, print_error, setup_logging
from resource_catalog.loader import dump_catalog, load_catalog
from resource_catalog.models import DEFAULT_KIND, BreadcrumbEntry, ResourceNode
from resource_catalog.navigator import Navigator
from resource_catalog.search import iter_matches
from resource_catalog.seed import SEED_CATEGORIES
from resource_catalog.store import CatalogStore
from resource_catalog.tree import check_forest, walk

app = typer.Typer(add_completion=False, help="Browse, search and extend a resource catalog.")

ROOT_LABEL = "All Resources"


@app.callback()
def main(
    ctx: typer.Context,
    catalog: Optional[Path] = typer.Option(None, "--catalog", "-c", help="YAML/JSON catalog file (default: demo catalog)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level"),
):
    settings = load_settings()
    if verbose:
        settings.loglevel = "DEBUG"
    setup_logging(app_name=settings.app_name, daemon=False, loglevel=settings.loglevel, logfile=settings.logfile)
    catalog = catalog or (Path(settings.catalog) if settings.catalog else None)
    try:
        store = CatalogStore(load_catalog(catalog) if catalog else SEED_CATEGORIES)
    except (OSError, ValueError) as e:
        print_error(f"Cannot load catalog: {e}")
        raise typer.Exit(1)
    ctx.obj = Box(settings=settings, store=store, catalog=catalog)


def _label(node: ResourceNode) -> str:
    label = f"{escape(node.name)} [dim]({escape(node.id)})[/dim]"
    if node.has_details:
        label += " [yellow]i[/yellow]"
    if node.has_children:
        label += " [cyan]>[/cyan]"
    return label


@app.command()
def tree(ctx: typer.Context):
    """Show the whole catalog as a tree."""
    root = Tree(ROOT_LABEL)
    for category in ctx.obj.store.get_snapshot():
        branch = root.add(f"[bold]{escape(category.name)}[/bold]")
        branches: dict[str, Tree] = {}
        for ancestors, node in walk(category.items):
            parent = branches[ancestors[-1].id] if ancestors else branch
            branches[node.id] = parent.add(_label(node))
    Console().print(root)


@app.command()
def browse(ctx: typer.Context, ids: Optional[list[str]] = typer.Argument(None, help="Breadcrumb path as resource ids")):
    """List the resources visible at a breadcrumb path (root view if no ids)."""
    def report(node: ResourceNode, path: list[BreadcrumbEntry]):
        print_and_log(f"Selected {node.name} ({node.id}) at {' > '.join(e.name for e in path)}")

    navigator = Navigator(ctx.obj.store, on_select=report)
    for node_id in ids or []:
        node = next((item for item in navigator.visible_items if item.id == node_id), None)
        if node is None:
            where = navigator.location_label() or ROOT_LABEL
            print_error(f"No resource {node_id!r} under {where}")
            raise typer.Exit(1)
        if navigator.enter(node) is not None:
            return

    console = Console()
    console.print(f"[bold]{escape(' > '.join([ROOT_LABEL] + [e.name for e in navigator.current_path]))}[/bold]")
    items = navigator.visible_items
    for item in items:
        console.print(f"  {_label(item)}")
    if not items:
        console.print("  (empty)")


@app.command()
def search(ctx: typer.Context, query: str = typer.Argument(..., help="Case-insensitive substring of a resource name")):
    """Search every resource name, showing full paths."""
    forest = ctx.obj.store.get_snapshot()
    console = Console()
    if not query.strip():
        for item in (node for category in forest for node in category.items):
            console.print(_label(item))
        return
    matches = list(iter_matches(forest, query))
    for match in matches:
        console.print(f"{escape(match.label)} [dim]({escape(match.node.id)})[/dim]")
    if not matches:
        print_and_log(f"No resources match {query!r}.")


@app.command()
def add(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the new resource"),
    at: Optional[list[str]] = typer.Option(None, "--at", help="Breadcrumb id; repeat to build the path"),
    description: Optional[str] = typer.Option(None, help="Free-text description"),
    kind: str = typer.Option(DEFAULT_KIND, help="Resource kind"),
    details: bool = typer.Option(False, "--details", help="Mark the resource as having details"),
    expandable: bool = typer.Option(False, "--expandable", help="Create the resource as an empty container"),
    save: bool = typer.Option(False, "--save", help="Write the catalog file back"),
):
    """Add a resource at the given path (or at the root of the first matching category)."""
    store: CatalogStore = ctx.obj.store
    try:
        data = clean_resource_form(name, description=description, kind=kind, has_details=details, expandable=expandable)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1)
    if save and ctx.obj.catalog is None:
        print_error("--save needs a catalog file (--catalog or RESCAT_CATALOG)")
        raise typer.Exit(1)

    path = at or []
    before = check_forest(store.get_snapshot())
    forest = store.add_resource(path, data)
    if not store.last_applied:
        print_error(f"Nothing added: {' > '.join(path) or 'no category of kind ' + kind} not found")
        raise typer.Exit(1)
    (new_id,) = check_forest(forest) - before
    print_and_log(f"Added {data.name} as {new_id}")
    if save:
        dump_catalog(forest, ctx.obj.catalog)
        print_and_log(f"Saved catalog to {ctx.obj.catalog}")


@app.command()
def serve(
    ctx: typer.Context,
    host: Optional[str] = typer.Option(None, help="Interface to bind (default from settings)"),
    port: Optional[int] = typer.Option(None, help="Port to listen on (default from settings)"),
):
    """Serve the catalog over the REST API."""
    settings = ctx.obj.settings
    host = host or settings.host
    port = port or settings.port
    print_and_log(f"Serving catalog on http://{host}:{port}")
    api.serve(ctx.obj.store, host=host, port=port)


if __name__ == "__main__":
    app()
