"""Infer which entity (generator) handles each activity.

Ownership is resolved in two explicit passes over a single mapping keyed by
activity id:

 1. *Direct claims*: every activity one non-dependency hop downstream of a
    generator is handled by that generator.
 2. *Transitive claims*: for each generator, in diagram order, every
    reachable activity that is still unclaimed is handled by that generator.

A direct claim therefore always beats a transitive one, and among transitive
claims the first generator in diagram order wins. Activities not reachable
from any generator have no entry and are reported as :data:`UNKNOWN_HANDLER`.

"""
from collections import deque
from typing import Dict, List, Set

from .graph import Graph

UNKNOWN_HANDLER = 'Unknown'


def direct_activities(graph: Graph, generator_id: str) -> List[str]:
    """Activity ids one non-dependency hop downstream of a generator."""
    result = []
    for edge in graph.outgoing(generator_id):
        if edge.is_dependency:
            continue
        target = graph.node(edge.target)
        if target is not None and target.type == 'activity':
            result.append(edge.target)
    return result


def reachable_activities(graph: Graph, generator_id: str) -> Set[str]:
    """Activity ids reachable from a generator.

    Breadth-first traversal following non-dependency edges only. Terminator
    nodes are never entered, so traversal stops there; every other node type,
    activities included, is traversed through.

    """
    visited: Set[str] = set()
    reachable: Set[str] = set()
    queue = deque([generator_id])

    while queue:
        node_id = queue.popleft()
        if node_id in visited:
            continue
        visited.add(node_id)

        node = graph.node(node_id)
        if node is not None and node.type == 'activity':
            reachable.add(node_id)

        for edge in graph.outgoing(node_id):
            if edge.is_dependency:
                continue
            target = graph.node(edge.target)
            if target is not None and target.type != 'terminator':
                queue.append(edge.target)

    return reachable


def assign_handlers(graph: Graph) -> Dict[str, str]:
    """Map activity ids to the name of their handling generator.

    :param Graph graph: Diagram to analyze.
    :returns: Dict of activity id to generator name. Unassigned activities
        are absent.

    """
    handlers: Dict[str, str] = {}
    generators = graph.generators

    for generator in generators:
        for activity_id in direct_activities(graph, generator.id):
            handlers[activity_id] = generator.name

    for generator in generators:
        for activity_id in _ordered(graph, reachable_activities(graph, generator.id)):
            handlers.setdefault(activity_id, generator.name)

    return handlers


def handler_of(handlers: Dict[str, str], activity_id: str) -> str:
    return handlers.get(activity_id, UNKNOWN_HANDLER)


def active_handler_types(handlers: Dict[str, str]) -> Dict[str, None]:
    """Names actually used as a resolved handler.

    The result is an insertion-ordered dict used as an ordered set, so that
    lookups which pick "the first match" are deterministic.

    """
    active: Dict[str, None] = {}
    for handler in handlers.values():
        if handler != UNKNOWN_HANDLER:
            active.setdefault(handler, None)
    return active


def _ordered(graph: Graph, activity_ids: Set[str]) -> List[str]:
    # Diagram order, so the mapping's insertion order is reproducible.
    return [node.id for node in graph.activities if node.id in activity_ids]
