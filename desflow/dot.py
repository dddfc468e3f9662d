"""Generate graphical representation of a compiled model.

A compiled model can be reviewed graphically using the `Graphviz`_ `DOT
language`_. The :func:`model_to_dot()` function produces a DOT language
string in which each handler type is a cluster holding the activities it
handles, connections are labeled edges between activities, and entity
relationships are dashed edges between entity nodes.

The ``dot`` program from `Graphviz`_ may be used to render the generated DOT
language description::

    dot -Tpng -o model.png model.dot

.. _Graphviz: http://graphviz.org/
.. _DOT language: http://graphviz.org/content/dot-language

"""
from itertools import cycle
from typing import Any, Dict, List, Mapping, Optional

_connection_colors = {
    'StartToInflow': 'darkgreen',
    'StartToStart': 'darkorchid',
    'FinishToFinish': 'deeppink4',
    'Flow': 'dodgerblue4',
}

_fallback_colors = [
    'darkslategray',
    'goldenrod4',
    'firebrick4',
]


def generate_dot(output: Mapping[str, Any], config: Dict[str, Any]) -> None:
    """Generate a dot file based on 'compile.dot' configuration.

    The ``compile.dot.enable`` configuration controls whether any dot file
    generation is performed. The remaining ``compile.dot`` configuration items
    have no effect unless ``compile.dot.enable`` is ``True``.

    The ``compile.dot.colorscheme`` configuration controls the colorscheme
    used in the generated DOT file. See :func:`model_to_dot` for more detail.

    The ``compile.dot.file`` configuration item controls the name of the
    generated DOT file. It can be set to the empty string to disable writing
    the file.

    """
    enable = config.setdefault('compile.dot.enable', False)
    colorscheme = config.setdefault('compile.dot.colorscheme', '')
    filename = config.setdefault('compile.dot.file', 'model.dot')

    if not enable or not filename:
        return

    with open(filename, 'w') as dot_file:
        dot_file.write(model_to_dot(output, colorscheme=colorscheme))


def model_to_dot(
    output: Mapping[str, Any],
    show_connections: bool = True,
    show_relationships: bool = True,
    colorscheme: str = '',
) -> str:
    """Produce a dot stream from a compiled model.

    :param dict output: Compiled model as returned by
        :func:`desflow.compiler.compile_model`.
    :param bool show_connections:
        Should the activity connections be shown in the graph.
    :param bool show_relationships:
        Should the entity relationships be shown in the graph.
    :param str colorscheme:
        One of the `Brewer color schemes`_ supported by graphviz, e.g. "blues8"
        or "set27". Handler clusters cycle through the first three colors of
        the scheme, which every Brewer scheme provides.
    :returns str:
        DOT language representation of the model.

    .. _Brewer color schemes: http://graphviz.org/content/color-names#brewer

    """
    model = output['model']
    indent = '    '
    lines = ['strict digraph M {']
    lines.extend(
        indent + line for line in _handler_clusters(model['activities'], colorscheme)
    )
    if show_relationships and model['entityRelationships']:
        lines.append('')
        lines.extend(
            indent + line for line in _relationships(model['entityRelationships'])
        )
    if show_connections and model['connections']:
        lines.append('')
        lines.extend(indent + line for line in _connections(model['connections']))
    lines.append('}')
    return '\n'.join(lines)


def _handler_clusters(activities: List[dict], colorscheme: str) -> List[str]:
    groups: Dict[str, List[dict]] = {}
    for activity in activities:
        groups.setdefault(activity['handlerType'], []).append(activity)

    lines = []
    for index, (handler, members) in enumerate(groups.items()):
        lines.append('subgraph "{}" {{'.format(_cluster_id(handler)))
        lines.append(f'    label=<<b>{_escape(handler)}</b>>')
        if colorscheme:
            lines.extend([
                '    style="filled"',
                '    fillcolor="/{}/{}"'.format(colorscheme, index % 3 + 1),
            ])
        for activity in members:
            lines.append(
                '    "{}" [shape=box,style=rounded,label=<{}>];'.format(
                    _activity_id(activity['id']), _activity_label(activity)
                )
            )
        lines.append('}')
    return lines


def _relationships(relationships: List[dict]) -> List[str]:
    lines = []
    entities: Dict[str, None] = {}
    for rel in relationships:
        entities.setdefault(rel['owner'], None)
        entities.setdefault(rel['component'], None)
    for entity in entities:
        lines.append(
            '"{}" [shape=ellipse,label=<<b>{}</b>>];'.format(
                _entity_id(entity), _escape(entity)
            )
        )
    for rel in relationships:
        lines.append(
            '"{}" -> "{}" [{}];'.format(
                _entity_id(rel['owner']),
                _entity_id(rel['component']),
                _join_attrs({'style': 'dashed', 'label': '"owns"'}),
            )
        )
    return lines


def _connections(connections: List[dict]) -> List[str]:
    fallback = cycle(_fallback_colors)
    lines = []
    for conn in connections:
        color: Optional[str] = _connection_colors.get(conn['type'])
        if color is None:
            color = next(fallback)
        attrs = {'color': color, 'fontcolor': color}
        if conn['type']:
            attrs['label'] = '"{}"'.format(conn['type'])
        lines.append(
            '"{}" -> "{}" [{}];'.format(
                _activity_id(conn['from']), _activity_id(conn['to']), _join_attrs(attrs)
            )
        )
    return lines


def _activity_label(activity: dict) -> str:
    label = '<b>{}</b>'.format(_escape(activity['id']))
    if activity['attributes'].get('initial'):
        label += '<br/><i>initial</i>'
    for req in activity['requirements']:
        label += '<br align="left"/>{}'.format(
            _escape(', '.join(req['resourceGroups']))
        )
    return label


def _activity_id(name: str) -> str:
    return 'activity.' + _quote(name)


def _entity_id(name: str) -> str:
    return 'entity.' + _quote(name)


def _cluster_id(handler: str) -> str:
    return 'cluster_' + _quote(handler)


def _quote(text: str) -> str:
    return text.replace('\\', '\\\\').replace('"', '\\"')


def _escape(text: str) -> str:
    return text.replace('&', '&amp;').replace('<', '&lt;').replace('>', '&gt;')


def _join_attrs(attrs: Dict[str, str]) -> str:
    return ','.join('{}={}'.format(k, v) for k, v in sorted(attrs.items()))
