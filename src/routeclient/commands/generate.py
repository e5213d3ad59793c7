"""Generate command -- write the client module for a route manifest.

``routeclient generate MANIFEST`` loads the manifest, resolves the generator
configuration (CLI flags over environment, project and global config), and
writes the resulting module atomically to ``--output`` or prints it to
stdout.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import typer

from routeclient.commands import read_manifest
from routeclient.exceptions import OutputWriteError
from routeclient.models import Dialect
from routeclient.output import OutputFormat, debug, get_output, success, suggest


def generate_command(
    manifest: str = typer.Argument(
        help="Route manifest: file path, http(s) URL, or '-' for stdin."
    ),
    output_path: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the client to this file instead of stdout."
    ),
    routes_root: Optional[str] = typer.Option(
        None, "--routes-root", help="Directory marker stripped from declaration keys."
    ),
    markers: Optional[list[str]] = typer.Option(
        None, "--marker", help="Terminal marker segment (repeatable)."
    ),
    dialect: Optional[Dialect] = typer.Option(
        None, "--dialect", case_sensitive=False, help="Target language."
    ),
    indent: Optional[int] = typer.Option(
        None, "--indent", min=1, max=16, help="Spaces per indentation level."
    ),
    double_quote: bool = typer.Option(
        False, "--double-quote", help="Quote strings with double quotes."
    ),
    lowercase_methods: bool = typer.Option(
        False, "--lowercase-methods", help="Name verb methods get/post/... instead of GET/POST/..."
    ),
    allow_duplicates: bool = typer.Option(
        False, "--allow-duplicates", help="Let later declarations replace duplicate methods."
    ),
    no_banner: bool = typer.Option(
        False, "--no-banner", help="Omit the generated-file banner comment."
    ),
) -> None:
    """Generate a typed client module from a route manifest.

    Example::

        routeclient generate routes.json -o src/lib/api.ts
        routeclient generate routes.yaml --dialect javascript --indent 2
        cat routes.json | routeclient generate - > api.ts
    """
    from routeclient.config import atomic_write, resolve_config
    from routeclient.generator import generate_client

    overrides: dict[str, Any] = {
        "routes_root": routes_root,
        "terminal_markers": markers or None,
        "duplicate_policy": "last_wins" if allow_duplicates else None,
        "method_case": "lower" if lowercase_methods else None,
        "banner": False if no_banner else None,
        "format": {
            "dialect": dialect.value if dialect is not None else None,
            "indent_width": indent,
            "single_quote": False if double_quote else None,
        },
    }
    config = resolve_config(overrides)
    debug(f"Generator config: {config.model_dump(mode='json')}")

    route_manifest = read_manifest(manifest)
    debug(f"Loaded {route_manifest.route_count} routes from {route_manifest.source}")

    text = generate_client(route_manifest.routes, config, source=route_manifest.source)

    if output_path is not None:
        try:
            atomic_write(output_path, text)
        except OSError as exc:
            raise OutputWriteError(f"Cannot write {output_path}: {exc}") from exc
        success(f"Wrote {route_manifest.route_count} routes to {output_path}")
        if output_path.suffix not in (".ts", ".js", ".mts", ".mjs"):
            suggest("Generated clients are usually saved with a .ts or .js extension")
        return

    output = get_output()
    if output.format == OutputFormat.JSON:
        output.print_json({
            "source": route_manifest.source,
            "routes": route_manifest.route_count,
            "dialect": config.format.dialect.value,
            "code": text,
        })
    else:
        output.print_source(text, language=config.format.dialect.value)
