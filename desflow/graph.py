"""Immutable snapshot of a drawn simulation flow diagram.

The graph editor hands the compiler a serialized project of the form::

    {'json': {'nodes': [...], 'edges': [...]}}

:class:`Graph` turns that structure into :class:`Node` and :class:`Edge`
objects with lookup and adjacency indexes. Construction is best-effort:
individual nodes or edges that cannot be used (missing ids, dangling
endpoints) are skipped, while input that is not graph-shaped at all raises
:class:`GraphError`.

"""
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional

NODE_TYPES = (
    'generator',
    'activity',
    'terminator',
    'global',
    'event',
    'initialization',
    'tableau',
    'moduleFrame',
)

HANDLE_SIDES = ('top', 'right', 'bottom', 'left')

_corner_patterns = [
    ('-top-left-', 'top'),
    ('-top-right-', 'top'),
    ('-bottom-left-', 'bottom'),
    ('-bottom-right-', 'bottom'),
]

TraceFunction = Callable[..., None]


def no_trace(*value) -> None:
    pass


class GraphError(Exception):
    """Exception raised for input that is not a graph-shaped structure."""


class Node:
    """A diagram node.

    :param str id: Unique node id.
    :param str type: One of :data:`NODE_TYPES`. Other values are kept but
        ignored by every type-keyed rule.
    :param str name: Display label used as the output identifier.
    :param dict data: Type-dependent data.

    """

    def __init__(
        self, id: str, type: str, name: str, data: Optional[Dict[str, Any]] = None
    ) -> None:
        self.id = id
        self.type = type
        self.name = name
        self.data: Dict[str, Any] = data if data is not None else {}

    @property
    def resources(self) -> List[str]:
        """Resource type names declared on the node, in declared order."""
        resources = self.data.get('resources')
        if not isinstance(resources, (list, tuple)):
            return []
        return [r for r in resources if isinstance(r, str)]

    def __repr__(self) -> str:
        return f'Node({self.id!r}, {self.type!r}, {self.name!r})'


class Edge:
    """A diagram edge.

    Handles identify the side of the endpoint node the edge attaches to; see
    :func:`handle_side`.

    """

    def __init__(
        self,
        id: str,
        source: str,
        target: str,
        is_dependency: bool = False,
        condition: str = 'True',
        edge_type: Optional[str] = None,
        source_handle: Optional[str] = None,
        target_handle: Optional[str] = None,
    ) -> None:
        self.id = id
        self.source = source
        self.target = target
        self.is_dependency = is_dependency
        self.condition = condition
        self.edge_type = edge_type
        self.source_handle = source_handle
        self.target_handle = target_handle

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> 'Edge':
        data = raw.get('data')
        if not isinstance(data, Mapping):
            data = {}
        condition = data.get('condition')
        return cls(
            id=str(raw.get('id', '')),
            source=str(raw['source']),
            target=str(raw['target']),
            is_dependency=bool(data.get('isDependency', False)),
            condition='True' if condition is None else str(condition),
            edge_type=data.get('edgeType'),
            source_handle=raw.get('sourceHandle') or data.get('sourceHandle'),
            target_handle=raw.get('targetHandle') or data.get('targetHandle'),
        )

    @property
    def source_side(self) -> Optional[str]:
        return handle_side(self.source_handle)

    @property
    def target_side(self) -> Optional[str]:
        return handle_side(self.target_handle)

    def __repr__(self) -> str:
        kind = 'dependency' if self.is_dependency else 'flow'
        return f'Edge({self.source!r} -> {self.target!r}, {kind})'


def handle_side(handle_id: Optional[str]) -> Optional[str]:
    """Determine which side of its node a handle is on.

    Handle ids have the form ``<nodeId>-<side>-<index>``. Corner handles on
    activity nodes use ``<nodeId>-top-left-<index>`` (and the other three
    corners); these count as being on the top or bottom side. Node ids may
    themselves contain hyphens, so the last occurrence of a pattern wins.

    :param str handle_id: Handle id, may be `None`.
    :returns: One of ``'top'``, ``'right'``, ``'bottom'``, ``'left'``, or
        `None` when the side cannot be determined.

    """
    if not isinstance(handle_id, str) or not handle_id:
        return None

    patterns = _corner_patterns + [(f'-{side}-', side) for side in HANDLE_SIDES]
    for pattern, side in patterns:
        pos = handle_id.rfind(pattern)
        if pos != -1 and handle_id[pos + len(pattern):].isdigit():
            return side
    return None


class Graph:
    """Nodes and edges of one diagram, with lookup indexes.

    Edges whose endpoints do not name an existing node are dropped during
    construction, so every edge in :attr:`edges` resolves via :meth:`node`.

    :param list nodes: :class:`Node` instances, in diagram order.
    :param list edges: :class:`Edge` instances, in diagram order.
    :param trace: Optional trace function receiving skip diagnostics.

    """

    def __init__(
        self, nodes: List[Node], edges: List[Edge], trace: TraceFunction = no_trace
    ) -> None:
        self.nodes = list(nodes)
        self._by_id: Dict[str, Node] = {}
        for node in self.nodes:
            self._by_id.setdefault(node.id, node)

        self.edges: List[Edge] = []
        self._outgoing: Dict[str, List[Edge]] = {}
        self._incoming: Dict[str, List[Edge]] = {}
        for edge in edges:
            if edge.source not in self._by_id or edge.target not in self._by_id:
                trace(f'skipping dangling edge {edge.id!r}')
                continue
            self.edges.append(edge)
            self._outgoing.setdefault(edge.source, []).append(edge)
            self._incoming.setdefault(edge.target, []).append(edge)

    @classmethod
    def from_project(
        cls, project_data: Mapping[str, Any], trace: TraceFunction = no_trace
    ) -> 'Graph':
        """Build a graph from a serialized project ``{'json': {...}}``."""
        if not isinstance(project_data, Mapping) or 'json' not in project_data:
            raise GraphError('project data has no "json" graph')
        return cls.from_dict(project_data['json'], trace)

    @classmethod
    def from_dict(
        cls, graph_data: Mapping[str, Any], trace: TraceFunction = no_trace
    ) -> 'Graph':
        """Build a graph from a ``{'nodes': [...], 'edges': [...]}`` mapping."""
        if not isinstance(graph_data, Mapping):
            raise GraphError(
                f'graph must be a mapping, not {type(graph_data).__name__}'
            )
        raw_nodes = graph_data.get('nodes')
        raw_edges = graph_data.get('edges')
        if not isinstance(raw_nodes, list) or not isinstance(raw_edges, list):
            raise GraphError('graph requires "nodes" and "edges" lists')

        nodes = []
        for index, raw in enumerate(raw_nodes):
            if not isinstance(raw, Mapping) or raw.get('id') is None:
                trace(f'skipping node #{index} without id')
                continue
            node_id = str(raw['id'])
            data = raw.get('data')
            nodes.append(
                Node(
                    id=node_id,
                    type=raw.get('type', ''),
                    name=str(raw.get('name') or node_id),
                    data=dict(data) if isinstance(data, Mapping) else {},
                )
            )

        edges = []
        for index, raw in enumerate(raw_edges):
            if (
                not isinstance(raw, Mapping)
                or raw.get('source') is None
                or raw.get('target') is None
            ):
                trace(f'skipping edge #{index} without endpoints')
                continue
            edges.append(Edge.from_dict(raw))

        return cls(nodes, edges, trace)

    def node(self, node_id: str) -> Optional[Node]:
        return self._by_id.get(node_id)

    def nodes_of_type(self, node_type: str) -> List[Node]:
        return [node for node in self.nodes if node.type == node_type]

    @property
    def generators(self) -> List[Node]:
        return self.nodes_of_type('generator')

    @property
    def activities(self) -> List[Node]:
        return self.nodes_of_type('activity')

    def outgoing(self, node_id: str) -> List[Edge]:
        return self._outgoing.get(node_id, [])

    def incoming(self, node_id: str) -> List[Edge]:
        return self._incoming.get(node_id, [])

    def endpoints(self) -> Iterator[tuple]:
        """Iterate ``(edge, source_node, target_node)`` in edge order."""
        for edge in self.edges:
            yield edge, self._by_id[edge.source], self._by_id[edge.target]
