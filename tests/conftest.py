import os

import pytest

from desflow.graph import Graph


class Diagram:
    """Builds serialized diagrams the way the graph editor emits them."""

    def __init__(self):
        self.nodes = []
        self.edges = []

    def node(self, node_id, node_type, name=None, **data):
        self.nodes.append({
            'id': node_id,
            'type': node_type,
            'name': node_id if name is None else name,
            'data': data,
            'position': {'x': 0, 'y': 0},
        })
        return node_id

    def generator(self, node_id, name=None):
        return self.node(node_id, 'generator', name)

    def activity(self, node_id, name=None, resources=None):
        if resources is None:
            return self.node(node_id, 'activity', name)
        return self.node(node_id, 'activity', name, resources=list(resources))

    def terminator(self, node_id, name=None):
        return self.node(node_id, 'terminator', name)

    def edge(self, source, target, dependency=False, condition='True',
             source_handle=None, target_handle=None):
        edge = {
            'id': 'e{}'.format(len(self.edges)),
            'source': source,
            'target': target,
            'type': 'rcq',
            'data': {'condition': condition, 'isDependency': dependency},
        }
        if source_handle:
            edge['sourceHandle'] = source_handle
        if target_handle:
            edge['targetHandle'] = target_handle
        self.edges.append(edge)
        return edge

    def project(self):
        return {'json': {'nodes': self.nodes, 'edges': self.edges}}

    def graph(self):
        return Graph.from_project(self.project())


@pytest.fixture
def diagram():
    return Diagram()


@pytest.fixture
def depot():
    """Container depot: trucks deliver containers; reach stackers move them.

    The "RS (BA)" resource spelling deliberately differs from the "RS(BA)"
    generator name.

    """
    d = Diagram()
    d.generator('g_truck', 'Truck')
    d.generator('g_cont', 'Container')
    d.generator('g_rs', 'RS(BA)')
    d.activity('a_arrive', 'Truck Arrive')
    d.activity('a_unload', 'Unload', resources=['RS (BA)'])
    d.activity('a_depart', 'Truck Depart')
    d.activity('a_store', 'Store Container', resources=['Yard Slot'])
    d.activity('a_load', 'Load Container', resources=['RS (BA)', 'Yard Slot'])
    d.activity('a_rs_idle', 'RS Idle')
    d.activity('a_rs_move', 'RS Move')
    d.terminator('t_truck', 'Truck Exit')
    d.terminator('t_cont', 'Container Exit')
    d.terminator('t_rs', 'RS Exit')

    d.edge('g_truck', 'a_arrive')
    d.edge('a_arrive', 'a_unload')
    d.edge('a_unload', 'a_depart')
    d.edge('a_depart', 't_truck')
    d.edge('g_cont', 'a_store')
    d.edge('a_store', 'a_load', condition='slotFree = True')
    d.edge('a_load', 't_cont')
    d.edge('g_rs', 'a_rs_idle')
    d.edge('a_rs_idle', 'a_rs_move')
    d.edge('a_rs_move', 't_rs')
    d.edge('a_unload', 'g_cont', dependency=True)
    d.edge('a_load', 'a_depart', dependency=True,
           source_handle='a_load-right-0', target_handle='a_depart-right-1')
    d.edge('a_rs_move', 'a_load', dependency=True,
           source_handle='a_rs_move-left-0', target_handle='a_load-left-2')
    return d


@pytest.fixture
def cleandir(tmpdir):
    origin = os.getcwd()
    tmpdir.chdir()
    yield None
    os.chdir(origin)
