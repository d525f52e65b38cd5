from __future__ import annotations

import logging
from typing import Callable, Iterable

from .types import ModuleGraph, ModuleId, ResolvedModule, ShadingCalculation

logger = logging.getLogger(__name__)


def self_and_all_children(graph: ModuleGraph, modules: Iterable[ResolvedModule]) -> set[ResolvedModule]:
    """Return ``modules`` plus every descendant reachable from them."""

    seen: set[ResolvedModule] = set()
    stack = list(modules)
    while stack:
        module = stack.pop()
        if module in seen:
            continue
        seen.add(module)
        stack.extend(graph.children_of(graph.get(module.id)))
    return seen


def all_children(graph: ModuleGraph, modules: Iterable[ResolvedModule]) -> set[ResolvedModule]:
    """Return every descendant of ``modules``; an input module is included only if another one reaches it."""

    children: list[ResolvedModule] = []
    for module in modules:
        children.extend(graph.children_of(graph.get(module.id)))
    return self_and_all_children(graph, children)


def classify(
    shaded: ModuleGraph,
    unshaded: ModuleGraph,
    direct: Iterable[ModuleId],
    is_banned: Callable[[ResolvedModule], bool],
) -> ShadingCalculation:
    """Split the shaded-only modules into accepted and rejected sets.

    Modules also reachable from ``unshaded`` are provided externally and are
    neither. A banned module is rejected at the shallowest point of its
    subtree, and the whole subtree goes with it, unless the module was
    declared directly, which overrides the ban. Direct declarations match on
    identity only; the version is not compared.
    """

    direct_ids = frozenset(direct)

    only_shaded = {module for module in shaded if module not in unshaded}
    logger.debug("%d of %d shaded modules are not provided externally", len(only_shaded), len(shaded))

    directly_rejected = {module for module in only_shaded if is_banned(module)}
    highest_level_rejected = directly_rejected - all_children(shaded, directly_rejected)

    rejected: set[ResolvedModule] = set()
    for module in highest_level_rejected:
        if module.id in direct_ids:
            logger.debug("Keeping banned module %s: it is declared directly", module.id)
            continue
        logger.debug("Rejecting banned module %s and its dependencies", module.id)
        rejected.add(module)

    transitively_rejected = self_and_all_children(shaded, rejected)
    accepted = only_shaded - transitively_rejected

    return ShadingCalculation(accepted=frozenset(accepted), rejected=frozenset(rejected))
