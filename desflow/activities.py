"""Lower activity nodes into structured activity records.

Each activity node becomes a dict::

    {'id': 'Service',              # node display name
     'handlerType': 'Arrivals',    # or 'Unknown'
     'attributes': {'initial': True},
     'conditions': [{'attribute': 'isVIP', 'value': True}],
     'requirements': [{'resourceGroups': ['Clerk'], 'quantity': 1}],
     'duration': {}}

Durations are not lowered; the ``duration`` structure is always empty and
left for the simulation loader to fill in.

"""
import re
from typing import Dict, List, Optional, Tuple, Union

from .graph import Graph, Node, TraceFunction, no_trace
from .handlers import handler_of

ConditionValue = Union[bool, str]

_condition_re = re.compile(r'(.+?)\s*=\s*(.+)')

_literals = {'True': True, 'False': False}


def parse_condition(text: str) -> Optional[Tuple[str, ConditionValue]]:
    """Parse ``'attribute = value'`` condition text.

    The first ``attribute = value`` found on a single line is used, so the
    text is split at its first ``=``. ``True``/``False`` values become
    booleans, any other value is kept as a string.

    >>> parse_condition('isVIP = True')
    ('isVIP', True)
    >>> parse_condition('s > 5') is None
    True

    """
    match = _condition_re.search(text)
    if not match:
        return None
    attribute = match.group(1).strip()
    value = match.group(2).strip()
    if not attribute or not value:
        return None
    return attribute, _literals.get(value, value)


def collect_resources(graph: Graph) -> List[dict]:
    """One resource record per distinct resource type, in first-seen order.

    Quantities are placeholders (0) filled in downstream.

    """
    types: Dict[str, None] = {}
    for activity in graph.activities:
        for resource in activity.resources:
            types.setdefault(resource, None)
    return [{'type': t, 'group': t, 'quantity': 0} for t in types]


def is_initial(graph: Graph, node: Node) -> bool:
    """An activity is initial when a generator feeds it directly."""
    return any(
        graph.node(edge.source).type == 'generator'
        for edge in graph.incoming(node.id)
    )


def extract_conditions(
    graph: Graph, node: Node, trace: TraceFunction = no_trace
) -> List[dict]:
    conditions = []
    for edge in graph.incoming(node.id):
        text = edge.condition
        if not text or text == 'True':
            continue
        parsed = parse_condition(text)
        if parsed is None:
            trace(f'{node.name}: ignoring condition {text!r} on edge {edge.id!r}')
            continue
        attribute, value = parsed
        conditions.append({'attribute': attribute, 'value': value})
    return conditions


def extract_requirements(node: Node) -> List[dict]:
    # Repeated names collapse into a single requirement of quantity 1.
    groups = dict.fromkeys(node.resources)
    return [{'resourceGroups': [group], 'quantity': 1} for group in groups]


def lower_activity(
    graph: Graph, node: Node, handlers: Dict[str, str], trace: TraceFunction = no_trace
) -> dict:
    return {
        'id': node.name,
        'handlerType': handler_of(handlers, node.id),
        'attributes': {'initial': True} if is_initial(graph, node) else {},
        'conditions': extract_conditions(graph, node, trace),
        'requirements': extract_requirements(node),
        'duration': {},
    }


def lower_activities(
    graph: Graph, handlers: Dict[str, str], trace: TraceFunction = no_trace
) -> List[dict]:
    """Lower every activity node, in diagram order."""
    return [
        lower_activity(graph, node, handlers, trace) for node in graph.activities
    ]
