"""Compile drawn flow diagrams into structured simulation models.

:func:`compile_model` is the whole boundary of the model-lowering compiler:
a pure function from a serialized diagram to a model description::

    {'scenario': '',
     'description': '',
     'model': {'entityRelationships': [...],
               'resources': [...],
               'activities': [...],
               'connections': [...]}}

Nothing is cached between calls and the input is never modified, so the same
diagram always compiles to the same (identically serialized) model.

:func:`export_model` wraps compilation in a configuration-driven conversion
run that loads the diagram from a file and writes the results, in the same
spirit as a simulation run writes its config and result files.

"""
from pprint import pprint
from typing import Any, Dict, List, Mapping, Optional
import json
import os

import yaml

from .activities import collect_resources, lower_activities
from .connections import classify_connections
from .dot import generate_dot
from .graph import Graph
from .handlers import assign_handlers
from .relationships import extract_relationships
from .tracer import CompileTracer, scope_tracers

_trace_levels = {
    'graph': 'WARNING',
    'activities': 'INFO',
    'compile': 'INFO',
}


def compile_model(
    project_data: Mapping[str, Any],
    scenario: str = '',
    description: str = '',
    tracer: Optional[CompileTracer] = None,
) -> Dict[str, Any]:
    """Compile a serialized diagram ``{'json': {'nodes', 'edges'}}``.

    :param dict project_data: Serialized diagram.
    :param str scenario: Text for the output ``scenario`` field.
    :param str description: Text for the output ``description`` field.
    :param tracer: Optional :class:`~desflow.tracer.CompileTracer` receiving
        diagnostics about skipped input.
    :returns: The compiled model dict.
    :raises `desflow.graph.GraphError`: If `project_data` is not a graph.

    """
    trace = scope_tracers(tracer, _trace_levels)
    graph = Graph.from_project(project_data, trace['graph'])
    return compile_graph(graph, scenario, description, tracer)


def compile_graph(
    graph: Graph,
    scenario: str = '',
    description: str = '',
    tracer: Optional[CompileTracer] = None,
) -> Dict[str, Any]:
    """Compile an already constructed :class:`~desflow.graph.Graph`."""
    trace = scope_tracers(tracer, _trace_levels)

    handlers = assign_handlers(graph)
    model = {
        'entityRelationships': extract_relationships(graph, handlers),
        'resources': collect_resources(graph),
        'activities': lower_activities(graph, handlers, trace['activities']),
        'connections': classify_connections(graph),
    }
    trace['compile'](
        '{} activities, {} handled, {} connections'.format(
            len(model['activities']), len(handlers), len(model['connections'])
        )
    )
    return {
        'scenario': scenario,
        'description': description,
        'model': model,
    }


def group_activities_by_handler(output: Mapping[str, Any]) -> Dict[str, List[str]]:
    """Group compiled activity ids by handler type.

    :param dict output: A compiled model, as returned by :func:`compile_model`.
    :returns: Dict of handler type to activity ids, both in first-seen order.

    """
    groups: Dict[str, List[str]] = {}
    for activity in output['model']['activities']:
        groups.setdefault(activity['handlerType'], []).append(activity['id'])
    return groups


def load_project(filename: str) -> Dict[str, Any]:
    """Load a serialized diagram from a JSON or YAML file.

    Both the ``{'json': {...}}`` envelope written by the editor and a bare
    ``{'nodes': [...], 'edges': [...]}`` mapping are accepted; the result is
    always in envelope form.

    """
    _, ext = os.path.splitext(filename)
    if ext not in ['.json', '.yaml', '.yml']:
        raise ValueError(f'Invalid extension: {ext}')
    with open(filename) as project_file:
        if ext == '.json':
            data = json.load(project_file)
        else:
            data = yaml.safe_load(project_file)
    if isinstance(data, dict) and 'json' not in data and 'nodes' in data:
        data = {'json': data}
    return data


def export_model(config: Dict[str, Any]) -> Dict[str, Any]:
    """Load, compile, and write a diagram according to `config`.

    The ``compile.input.file`` item names the diagram to load. The compiled
    model is written to ``compile.output.file`` and, when set, the handler
    grouping report to ``compile.handlers.file``. Output formats are chosen by
    file extension: ``.json``, ``.yaml``/``.yml``, or ``.py``. Setting an
    output file to `None` skips writing it.

    The ``compile.dot.*`` items control the DOT rendering of the model; see
    :func:`desflow.dot.generate_dot`. The ``compile.log.*`` items control the
    diagnostic log; see :class:`desflow.tracer.CompileTracer`.

    :param dict config: Configuration dictionary for the run.
    :returns: The compiled model dict.

    """
    input_file = config.setdefault('compile.input.file', None)
    output_file = config.setdefault('compile.output.file', 'model.json')
    handlers_file = config.setdefault('compile.handlers.file', None)
    scenario = config.setdefault('compile.scenario', '')
    description = config.setdefault('compile.description', '')

    if not input_file:
        raise ValueError('compile.input.file is not set')

    with CompileTracer(config) as tracer:
        project_data = load_project(input_file)
        output = compile_model(project_data, scenario, description, tracer)
        _dump_dict(output_file, output)
        if handlers_file is not None:
            _dump_dict(handlers_file, group_activities_by_handler(output))
        generate_dot(output, config)
        tracer.flush()
    return output


def _dump_dict(filename: Optional[str], dump_dict: Dict[str, Any]) -> None:
    if filename is not None:
        _, ext = os.path.splitext(filename)
        if ext not in ['.yaml', '.yml', '.json', '.py']:
            raise ValueError(f'Invalid extension: {ext}')
        with open(filename, 'w') as dump_file:
            if ext in ['.yaml', '.yml']:
                yaml.safe_dump(dump_dict, stream=dump_file, sort_keys=False)
            elif ext == '.json':
                json.dump(dump_dict, dump_file, sort_keys=True, indent=2)
            else:
                assert ext == '.py'
                pprint(dump_dict, stream=dump_file)
