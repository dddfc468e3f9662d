"""Infer ownership relationships between simulation entities.

An entity relationship ``{'owner': A, 'component': B}`` states that entity
``A`` manages or contains entity ``B``. Only *active* handler types, i.e.
generator names that resolve as the handler of at least one activity, take
part; this keeps plain resource labels out of the entity graph.

Relationships are contributed by three rules:

 * a dependency edge from an activity to a generator makes the activity's
   handler the owner of that generator's entity;
 * a flow edge from a generator to an activity handled by a different entity
   makes the generator the owner of that entity;
 * an activity using a resource named like an active entity makes the
   activity's handler the owner of that entity.

"""
from typing import Dict, List, Optional, Set, Tuple

from .graph import Graph
from .handlers import active_handler_types

_STRIP_CHARS = str.maketrans('', '', ' ()')


def normalize_entity_name(name: str) -> str:
    """Strip spaces and parentheses, e.g. ``'RS (BA)'`` -> ``'RSBA'``."""
    return name.translate(_STRIP_CHARS)


def match_entity(resource: str, active: Dict[str, None]) -> Optional[str]:
    """Find the active entity name a resource name refers to.

    An exact match wins; otherwise the first active name that is equal after
    :func:`normalize_entity_name` is applied to both sides. Normalizing the
    active names too is looser than a resource-only comparison: ``'RS(BA)'``
    also finds an active ``'RSBA'``.

    """
    if resource in active:
        return resource
    normalized = normalize_entity_name(resource)
    for name in active:
        if normalize_entity_name(name) == normalized:
            return name
    return None


def extract_relationships(graph: Graph, handlers: Dict[str, str]) -> List[dict]:
    """Derive the deduplicated entity relationship list.

    :param Graph graph: Diagram to analyze.
    :param dict handlers: Activity handlers from
        :func:`desflow.handlers.assign_handlers`.
    :returns: List of ``{'owner', 'component'}`` dicts.

    """
    active = active_handler_types(handlers)
    relationships: List[dict] = []
    seen: Set[Tuple[str, str]] = set()

    def add(owner: str, component: str) -> None:
        if (owner, component) not in seen:
            seen.add((owner, component))
            relationships.append({'owner': owner, 'component': component})

    for edge, source, target in graph.endpoints():
        if (
            edge.is_dependency
            and source.type == 'activity'
            and target.type == 'generator'
        ):
            handler = handlers.get(source.id)
            if (
                handler is not None
                and handler != target.name
                and handler in active
                and target.name in active
            ):
                add(handler, target.name)

        if (
            not edge.is_dependency
            and source.type == 'generator'
            and target.type == 'activity'
        ):
            handler = handlers.get(target.id)
            if (
                handler is not None
                and handler != source.name
                and source.name in active
                and handler in active
            ):
                add(source.name, handler)

    for activity in graph.activities:
        handler = handlers.get(activity.id)
        if handler is None:
            continue
        for resource in activity.resources:
            entity = match_entity(resource, active)
            if entity is not None and entity != handler:
                add(handler, entity)

    return relationships
