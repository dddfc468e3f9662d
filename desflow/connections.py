"""Classify diagram edges into typed model connections.

Connection types:

``StartToInflow``
    An activity feeds a generator (edge of any kind), and that generator
    starts a second activity. The two activities are connected directly and
    the generator in between is elided.
``StartToStart`` / ``FinishToFinish``
    A dependency edge between two activities, attached on the left side of
    both activities (start-to-start) or on the right side of both
    (finish-to-finish). Any other attachment falls back to finish-to-finish.
``Flow``
    A plain (non-dependency) activity to activity edge.

Edges touching a terminator never become connections, and neither do direct
generator to activity edges; those are expressed by the ``initial``
attribute and the ``handlerType`` of the activity instead.

"""
from typing import List, Set, Tuple

from .graph import Edge, Graph

START_TO_INFLOW = 'StartToInflow'
START_TO_START = 'StartToStart'
FINISH_TO_FINISH = 'FinishToFinish'
FLOW = 'Flow'
UNCLASSIFIED = ''

CONNECTION_TYPES = (START_TO_INFLOW, START_TO_START, FINISH_TO_FINISH, FLOW)


def dependency_type(edge: Edge) -> str:
    """Connection type of a dependency edge from its handle sides."""
    source_side = edge.source_side
    target_side = edge.target_side
    if source_side == 'left' and target_side == 'left':
        return START_TO_START
    # right/right, and anything mixed or unattached
    return FINISH_TO_FINISH


def classify_connections(graph: Graph) -> List[dict]:
    """Derive typed connections from the diagram edges.

    :param Graph graph: Diagram to analyze.
    :returns: List of ``{'type', 'from', 'to'}`` dicts, in edge order. The
        ``from`` and ``to`` values are node display names.

    """
    connections: List[dict] = []
    inflows: Set[Tuple[str, str]] = set()

    for edge, source, target in graph.endpoints():
        if source.type == 'terminator' or target.type == 'terminator':
            continue
        if source.type == 'generator' and target.type == 'activity':
            continue

        if source.type == 'activity' and target.type == 'generator':
            for out_edge in graph.outgoing(target.id):
                if out_edge.is_dependency:
                    continue
                started = graph.node(out_edge.target)
                if started.type != 'activity':
                    continue
                key = (source.name, started.name)
                if key not in inflows:
                    inflows.add(key)
                    connections.append(_connection(START_TO_INFLOW, *key))
        elif source.type == 'activity' and target.type == 'activity':
            if edge.is_dependency:
                kind = dependency_type(edge)
            else:
                kind = FLOW
            connections.append(_connection(kind, source.name, target.name))

    return connections


def _connection(kind: str, from_name: str, to_name: str) -> dict:
    return {'type': kind, 'from': from_name, 'to': to_name}
