"""routeclient -- Generate typed API clients from file-system route definitions.

This package folds a flat collection of route declarations (keys such as
``users/[id]/+server.ts`` mapped to per-method route descriptors) into a
tree keyed by path segment, then emits a TypeScript module whose default
export mirrors that tree as nested objects, parameter accessor functions and
``fetch``-backed verb methods.

Typical workflow::

    routeclient generate routes.json -o src/lib/api.ts
    routeclient inspect tree routes.json

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: XDG-aware global and project configuration.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    manifest: Route manifest loading and extraction.
    generator: Tree builder, client emitter and TypeScript printer.
"""

__version__ = "0.3.0"
