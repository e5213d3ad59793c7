"""Inspect commands -- examine a route manifest.

Provides the ``routeclient inspect`` sub-command group with read-only
commands: ``routes`` lists every declared route, ``tree`` shows the route
tree the generator would build from the manifest. Both honour the global
``--json`` and ``--plain`` flags.
"""

from __future__ import annotations

from typing import Optional

import typer
from rich.markup import escape
from rich.tree import Tree

from routeclient.commands import read_manifest
from routeclient.models import Branch, SegmentKind, TreeNode
from routeclient.output import OutputFormat, get_output, info


inspect_app = typer.Typer(no_args_is_help=True)

_SEGMENT_STYLES = {
    SegmentKind.STATIC: "bold",
    SegmentKind.REQUIRED: "cyan",
    SegmentKind.OPTIONAL: "magenta",
}


@inspect_app.command("routes")
def inspect_routes(
    manifest: str = typer.Argument(
        help="Route manifest: file path, http(s) URL, or '-' for stdin."
    ),
) -> None:
    """List all routes declared in a manifest.

    Displays one row per route descriptor with its declaration key, HTTP
    method, path template and return type, in manifest order.

    Example::

        routeclient inspect routes routes.json
        routeclient --json inspect routes routes.json
    """
    route_manifest = read_manifest(manifest)

    headers = ["Key", "Method", "Path", "Returns"]
    rows: list[list[str]] = []
    for key, methods in route_manifest.routes.items():
        for method, route in methods.items():
            rows.append([key, method.value, route.path, route.return_type])

    get_output().print_table(
        headers, rows, title=f"Routes ({len(rows)})"
    )


@inspect_app.command("tree")
def inspect_tree(
    manifest: str = typer.Argument(
        help="Route manifest: file path, http(s) URL, or '-' for stdin."
    ),
    routes_root: Optional[str] = typer.Option(
        None, "--routes-root", help="Directory marker stripped from declaration keys."
    ),
) -> None:
    """Show the route tree built from a manifest.

    Static segments are shown in bold, required parameters in cyan and
    optional parameters in magenta; each endpoint lists its method, path
    template and return type. With ``--json`` the frozen tree is dumped as
    a nested document instead.

    Example::

        routeclient inspect tree routes.json
        routeclient --json inspect tree routes.json
    """
    from routeclient.config import resolve_config
    from routeclient.generator import build_route_tree
    from routeclient.generator.route_tree import count_endpoints

    config = resolve_config({"routes_root": routes_root})
    route_manifest = read_manifest(manifest)
    tree = build_route_tree(route_manifest.routes, config)

    output = get_output()
    if output.format == OutputFormat.JSON:
        output.print_json(tree.model_dump(mode="json"))
        return

    root = Tree(f"[bold]{escape(route_manifest.source or 'routes')}[/bold]")
    _add_members(root, tree)
    output.print_tree(root)
    info(f"{count_endpoints(tree)} endpoints")


def _add_members(parent: Tree, node: TreeNode) -> None:
    """Recursively add the members of *node* under the Rich *parent* tree."""
    for member in node.members:
        if isinstance(member, Branch):
            style = _SEGMENT_STYLES[member.segment.kind]
            child = parent.add(f"[{style}]{escape(member.segment.raw)}[/{style}]")
            _add_members(child, member.node)
        else:
            route = member.route
            parent.add(
                f"[green]{member.method.value}[/green] {escape(route.path)} "
                f"[dim]-> {escape(route.return_type)}[/dim]"
            )

