"""Generate the client module source for a route collection.

This module ties the pipeline together:

1. :func:`~routeclient.generator.route_tree.build_route_tree` folds the flat
   collection into the route tree.
2. :func:`~routeclient.generator.emitter.emit_client` turns the tree into a
   syntax tree for the client object.
3. :class:`~routeclient.generator.printer.Printer` renders that object.
4. The ``client.j2`` Jinja2 template wraps it in the module: the banner
   comment and the ``export default`` statement.

Each call builds and discards its own tree, so the function is safe to call
repeatedly; the same input always yields byte-identical output.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from routeclient.generator.emitter import emit_client
from routeclient.generator.printer import Printer
from routeclient.generator.route_tree import build_route_tree, count_endpoints, count_nodes
from routeclient.models import GeneratorConfig, RouteCollection, TreeNode

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the Jinja2 template directory (``generator/templates/``)."""


def generate_client(
    routes: RouteCollection,
    config: Optional[GeneratorConfig] = None,
    source: Optional[str] = None,
) -> str:
    """Generate the client module for *routes*.

    Args:
        routes: Declaration keys mapped to ``{method: RouteDescriptor}``.
        config: Generator settings. Defaults to
            :class:`~routeclient.models.GeneratorConfig`.
        source: Optional description of where the routes came from,
            mentioned in the banner comment.

    Returns:
        The complete module text, ending with a newline.

    Raises:
        DuplicateRouteError: Propagated from the tree builder.
        MemberNameConflictError: Propagated from the emitter.

    Example::

        text = generate_client({
            "users/[id]/+server.ts": {
                HTTPMethod.GET: RouteDescriptor(
                    method="GET", path="/users/[id]", returnType="User",
                ),
            },
        })
    """
    config = config or GeneratorConfig()
    tree = build_route_tree(routes, config)
    logger.debug(
        "Built route tree: %d nodes, %d endpoints from %d declarations",
        count_nodes(tree),
        count_endpoints(tree),
        len(routes),
    )
    return render_client(tree, config, source=source)


def render_client(
    tree: TreeNode,
    config: Optional[GeneratorConfig] = None,
    source: Optional[str] = None,
) -> str:
    """Emit and render an already-built route *tree* as a client module."""
    config = config or GeneratorConfig()
    client = Printer(config.format).render(emit_client(tree, config))

    env = _create_jinja_env()
    template = env.get_template("client.j2")
    return template.render(client=client, banner=config.banner, source=source)


def _create_jinja_env() -> Environment:
    """Create the Jinja2 environment for the module template.

    Block trimming and lstrip keep the template readable without leaking
    blank lines into the generated module.
    """
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
