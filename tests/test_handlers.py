from desflow.handlers import (UNKNOWN_HANDLER, active_handler_types,
                              assign_handlers, direct_activities, handler_of,
                              reachable_activities)


def test_reachable_stops_at_terminator(diagram):
    diagram.generator('g')
    diagram.activity('a1')
    diagram.terminator('t')
    diagram.activity('a2')
    diagram.edge('g', 'a1')
    diagram.edge('a1', 't')
    diagram.edge('t', 'a2')
    assert reachable_activities(diagram.graph(), 'g') == {'a1'}


def test_reachable_through_other_nodes(diagram):
    diagram.generator('g')
    diagram.node('gl', 'global')
    diagram.activity('a1')
    diagram.activity('a2')
    diagram.activity('a3')
    diagram.edge('g', 'gl')
    diagram.edge('gl', 'a1')
    diagram.edge('a1', 'a2')
    diagram.edge('a2', 'a3')
    assert reachable_activities(diagram.graph(), 'g') == {'a1', 'a2', 'a3'}


def test_reachable_ignores_dependencies(diagram):
    diagram.generator('g')
    diagram.activity('a1')
    diagram.activity('a2')
    diagram.edge('g', 'a1')
    diagram.edge('a1', 'a2', dependency=True)
    assert reachable_activities(diagram.graph(), 'g') == {'a1'}


def test_reachable_cycle(diagram):
    diagram.generator('g')
    diagram.activity('a1')
    diagram.activity('a2')
    diagram.edge('g', 'a1')
    diagram.edge('a1', 'a2')
    diagram.edge('a2', 'a1')
    diagram.edge('a2', 'g')
    assert reachable_activities(diagram.graph(), 'g') == {'a1', 'a2'}


def test_reachable_unknown_start(diagram):
    diagram.activity('a1')
    assert reachable_activities(diagram.graph(), 'nope') == set()


def test_direct_activities(diagram):
    diagram.generator('g')
    diagram.activity('a1')
    diagram.activity('a2')
    diagram.activity('a3')
    diagram.node('gl', 'global')
    diagram.edge('g', 'a1')
    diagram.edge('g', 'a2', dependency=True)
    diagram.edge('g', 'gl')
    diagram.edge('gl', 'a3')
    diagram.edge('g', 'a3')
    assert direct_activities(diagram.graph(), 'g') == ['a1', 'a3']


def test_direct_edge_beats_reachability(diagram):
    diagram.generator('g1', 'G1')
    diagram.generator('g2', 'G2')
    diagram.activity('a0')
    diagram.activity('a')
    diagram.edge('g1', 'a0')
    diagram.edge('a0', 'a')
    diagram.edge('g2', 'a')
    handlers = assign_handlers(diagram.graph())
    assert handlers == {'a0': 'G1', 'a': 'G2'}


def test_first_generator_wins_transitive(diagram):
    diagram.generator('g1', 'G1')
    diagram.generator('g2', 'G2')
    diagram.activity('a1')
    diagram.activity('a2')
    diagram.activity('shared')
    diagram.edge('g2', 'a2')
    diagram.edge('g1', 'a1')
    diagram.edge('a2', 'shared')
    diagram.edge('a1', 'shared')
    handlers = assign_handlers(diagram.graph())
    assert handlers['shared'] == 'G1'
    assert handlers['a1'] == 'G1'
    assert handlers['a2'] == 'G2'


def test_unreachable_unknown(diagram):
    diagram.generator('g', 'G')
    diagram.activity('a1')
    diagram.activity('orphan')
    diagram.terminator('t')
    diagram.activity('behind')
    diagram.edge('g', 'a1')
    diagram.edge('a1', 't')
    diagram.edge('t', 'behind')
    handlers = assign_handlers(diagram.graph())
    assert handler_of(handlers, 'a1') == 'G'
    assert handler_of(handlers, 'orphan') == UNKNOWN_HANDLER
    assert handler_of(handlers, 'behind') == UNKNOWN_HANDLER


def test_no_generators(diagram):
    diagram.activity('a1')
    assert assign_handlers(diagram.graph()) == {}


def test_active_handler_types():
    handlers = {'a1': 'Truck', 'a2': 'Container', 'a3': 'Truck',
                'a4': UNKNOWN_HANDLER}
    assert list(active_handler_types(handlers)) == ['Truck', 'Container']
