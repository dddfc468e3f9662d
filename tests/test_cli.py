import json

import pytest
import yaml

from desflow.cli import main
from desflow.compiler import compile_model


pytestmark = pytest.mark.usefixtures('cleandir')


@pytest.fixture
def depot_file(depot):
    with open('depot.json', 'w') as f:
        json.dump(depot.project(), f)
    return 'depot.json'


def test_defaults(depot_file, depot, capsys):
    assert main([depot_file]) == 0
    with open('model.json') as f:
        assert json.load(f) == compile_model(depot.project())
    out = capsys.readouterr().out
    assert out == ('depot.json: 7 activities, 2 resources, 7 connections, '
                   '3 entity relationships\n')


def test_options(depot_file):
    assert main([depot_file, '-o', 'model.yaml', '--scenario', 'Peak',
                 '--description', 'Friday', '--handlers', 'handlers.json',
                 '--dot', 'depot.dot']) == 0
    with open('model.yaml') as f:
        output = yaml.safe_load(f)
    assert output['scenario'] == 'Peak'
    assert output['description'] == 'Friday'
    with open('handlers.json') as f:
        assert json.load(f)['Container'] == ['Store Container',
                                             'Load Container']
    with open('depot.dot') as f:
        assert 'strict digraph M {' in f.read()


def test_set_overrides(depot_file):
    assert main([depot_file, '--set', 'scenario', 'Night',
                 '-s', 'output.file', 'night.json']) == 0
    with open('night.json') as f:
        assert json.load(f)['scenario'] == 'Night'


def test_log(depot_file, capsys):
    assert main([depot_file, '--log', '-s', 'level', 'INFO']) == 0
    assert 'INFO    compile: 7 activities' in capsys.readouterr().err


@pytest.mark.parametrize('args', [
    ['missing.json'],
    ['depot.json', '-o', 'model.txt'],
    ['depot.json', '--set', 'nope', '1'],
])
def test_errors(depot_file, capsys, args):
    assert main(args) == 1
    assert capsys.readouterr().err.startswith('desflow: error: ')


def test_not_a_graph(capsys):
    with open('broken.json', 'w') as f:
        json.dump([1, 2, 3], f)
    assert main(['broken.json']) == 1
    assert 'desflow: error: ' in capsys.readouterr().err


def test_broken_yaml(capsys):
    with open('broken.yaml', 'w') as f:
        f.write('nodes: [unclosed\n')
    assert main(['broken.yaml']) == 1
    assert capsys.readouterr().err.startswith('desflow: error: ')
