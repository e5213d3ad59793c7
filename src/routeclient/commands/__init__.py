"""Built-in CLI sub-commands for routeclient.

This package groups the Typer command modules that form the CLI's
top-level command tree:

* :mod:`~routeclient.commands.generate` -- write the client module for a
  route manifest.
* :mod:`~routeclient.commands.inspect` -- list the routes of a manifest or
  show the route tree built from it.
* :mod:`~routeclient.commands.config` -- view and modify global settings.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``inspect`` and ``config``) or a plain callback
function registered directly on the root app (for ``generate``).
"""

from __future__ import annotations

from routeclient.manifest import extract_manifest, load_manifest
from routeclient.models import RouteManifest


def read_manifest(source: str) -> RouteManifest:
    """Load and validate the manifest at *source* (path, URL or ``-``)."""
    raw = load_manifest(source)
    return extract_manifest(raw, source="stdin" if source == "-" else source)
