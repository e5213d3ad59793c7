"""Fold a flat route collection into the route tree.

This is the first stage of client generation. It takes the caller's
:data:`~routeclient.models.RouteCollection` -- declaration keys mapped to
per-method route descriptors -- and produces an immutable
:class:`~routeclient.models.TreeNode` whose levels mirror the keys' path
segments.

**Algorithm summary**

1. Normalise each declaration key with
   :func:`~routeclient.generator.path_keys.normalize_key` and split it into
   segments.
2. Walk from the root, one level per segment. A segment string that already
   has a child at the current level reuses it, so keys with a common prefix
   share their ancestors.
3. A terminal marker segment (``+server.ts`` by default) does not create a
   level: it attaches every descriptor of the key to the *current* node,
   indexed by the descriptor's ``method``.
4. Freeze the mutable working tree into frozen models, keeping first-insertion
   order of every member.

Two declarations attaching the same method to one node raise
:class:`~routeclient.exceptions.DuplicateRouteError` unless the configured
:class:`~routeclient.models.DuplicatePolicy` is ``last_wins``.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Union

from routeclient.exceptions import DuplicateRouteError
from routeclient.generator.path_keys import (
    classify_segment,
    is_terminal,
    normalize_key,
    split_key,
)
from routeclient.models import (
    Branch,
    DuplicatePolicy,
    Endpoint,
    GeneratorConfig,
    HTTPMethod,
    RouteCollection,
    RouteDescriptor,
    Segment,
    TreeNode,
)

logger = logging.getLogger(__name__)


class _WorkingNode:
    """Mutable tree level used only while the builder runs.

    Members are keyed by ``("segment", raw)`` or ``("method", verb)`` in one
    insertion-ordered dict, so replacing an endpoint keeps its position.
    """

    def __init__(self) -> None:
        self._members: dict[tuple[str, str], Union[tuple[Segment, _WorkingNode], Endpoint]] = {}

    def descend(self, raw: str) -> _WorkingNode:
        """Return the child for segment *raw*, creating it on first use."""
        key = ("segment", raw)
        entry = self._members.get(key)
        if entry is None:
            child = _WorkingNode()
            self._members[key] = (classify_segment(raw), child)
            return child
        assert isinstance(entry, tuple)
        return entry[1]

    def attach(self, endpoint: Endpoint, policy: DuplicatePolicy) -> None:
        """Attach *endpoint* under its method, applying the duplicate *policy*."""
        key = ("method", endpoint.method.value)
        existing = self._members.get(key)
        if isinstance(existing, Endpoint):
            if policy is DuplicatePolicy.ERROR:
                raise DuplicateRouteError(
                    endpoint.method.value, existing.declared_at, endpoint.declared_at
                )
            logger.warning(
                "%s from '%s' replaces the one declared by '%s'",
                endpoint.method.value,
                endpoint.declared_at,
                existing.declared_at,
            )
        self._members[key] = endpoint

    def freeze(self) -> TreeNode:
        members: list[Union[Branch, Endpoint]] = []
        for entry in self._members.values():
            if isinstance(entry, Endpoint):
                members.append(entry)
            else:
                segment, child = entry
                members.append(Branch(segment=segment, node=child.freeze()))
        return TreeNode(members=tuple(members))


def build_route_tree(
    routes: RouteCollection,
    config: Optional[GeneratorConfig] = None,
) -> TreeNode:
    """Build the route tree for *routes*.

    Args:
        routes: Declaration keys mapped to ``{method: RouteDescriptor}``.
            Iteration order determines member order in the tree.
        config: Generator settings; only ``routes_root``,
            ``terminal_markers`` and ``duplicate_policy`` are consulted.
            Defaults to :class:`~routeclient.models.GeneratorConfig`.

    Returns:
        The frozen root :class:`~routeclient.models.TreeNode`.

    Raises:
        DuplicateRouteError: When two declarations attach the same method to
            one node and the duplicate policy is ``error``.

    Example::

        tree = build_route_tree({
            "users/[id]/+server.ts": {
                HTTPMethod.GET: RouteDescriptor(method="GET", path="/users/[id]"),
            },
        })
        tree.child("users").child("[id]").endpoint("GET")
    """
    config = config or GeneratorConfig()
    markers = config.terminal_markers
    root = _WorkingNode()

    for key, methods in routes.items():
        normalized = normalize_key(key, config.routes_root)
        segments = split_key(normalized)
        if not segments:
            logger.debug("Skipping declaration key with no segments: %r", key)
            continue

        current = root
        for index, segment in enumerate(segments):
            if is_terminal(segment, markers):
                _attach_all(current, methods, key, config.duplicate_policy)
                trailing = segments[index + 1:]
                if trailing:
                    logger.warning(
                        "Ignoring segments after '%s' in '%s': %s",
                        segment,
                        key,
                        "/".join(trailing),
                    )
                break
            current = current.descend(segment)
        else:
            logger.debug("No terminal marker in '%s'; nothing attached", key)

    return root.freeze()


def _attach_all(
    node: _WorkingNode,
    methods: Mapping[HTTPMethod, RouteDescriptor],
    declared_at: str,
    policy: DuplicatePolicy,
) -> None:
    """Attach every descriptor of one declaration key to *node*."""
    for descriptor in methods.values():
        node.attach(
            Endpoint(
                method=descriptor.method,
                route=descriptor,
                declared_at=declared_at,
            ),
            policy,
        )
        logger.debug("Attached %s %s at '%s'", descriptor.method.value, descriptor.path, declared_at)


def count_endpoints(tree: TreeNode) -> int:
    """Return the number of endpoints attached anywhere in *tree*."""
    return sum(1 for _ in tree.walk())


def count_nodes(tree: TreeNode) -> int:
    """Return the number of nodes in *tree*, the root included."""
    return 1 + sum(count_nodes(branch.node) for branch in tree.branches)
