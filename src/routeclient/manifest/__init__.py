"""Route manifest -- load and validate route declarations.

This sub-package turns a manifest document (JSON or YAML, local file, remote
URL or stdin) into a :class:`~routeclient.models.RouteManifest` whose
``routes`` the generator consumes.

Typical usage::

    from routeclient.manifest import load_manifest, extract_manifest

    raw = load_manifest("routes.json")
    manifest = extract_manifest(raw, source="routes.json")

Sub-modules:

* :mod:`~routeclient.manifest.loader` -- I/O layer (URL, file, stdin) plus
  format detection.
* :mod:`~routeclient.manifest.extractor` -- shape checks and descriptor
  validation.
"""

from routeclient.manifest.extractor import extract_manifest
from routeclient.manifest.loader import load_manifest

__all__ = ["load_manifest", "extract_manifest"]
