"""Client generator -- turn a route collection into a typed client module.

This sub-package is the core of routeclient. It runs in two stages, the first
completing before the second starts:

* :mod:`~routeclient.generator.route_tree` -- fold the flat
  declaration-key -> routes mapping into an immutable tree keyed by path
  segment (keys normalised by :mod:`~routeclient.generator.path_keys`).
* :mod:`~routeclient.generator.emitter` -- walk the tree and build a
  :mod:`~routeclient.generator.ts_ast` syntax tree for the client object,
  substituting parameter placeholders into each route's URL.

:mod:`~routeclient.generator.printer` renders the syntax tree and
:mod:`~routeclient.generator.client` wraps it into the final module.

Typical usage::

    from routeclient.generator import generate_client
    from routeclient.models import GeneratorConfig

    text = generate_client(manifest.routes, GeneratorConfig())
    Path("src/lib/api.ts").write_text(text)
"""

from routeclient.generator.client import generate_client, render_client
from routeclient.generator.route_tree import build_route_tree

__all__ = ["generate_client", "render_client", "build_route_tree"]
