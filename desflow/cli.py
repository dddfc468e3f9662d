"""Command line conversion of diagram files into simulation models.

Example::

    desflow Queue_Demo.json -o queue_model.yaml --handlers handlers.yaml \\
        --set compile.log.enable True --set level INFO

Every configuration item may be overridden with ``--set KEY VALUE``, where
``KEY`` may be abbreviated as long as it is unambiguous (see
:func:`desflow.config.fuzzy_lookup`).

"""
from argparse import ArgumentParser
import sys

import yaml

from .compiler import export_model
from .config import ConfigError, apply_user_overrides, default_config
from .graph import GraphError


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog='desflow',
        description='Compile a simulation flow diagram into a structured model.',
    )
    parser.add_argument('input', help='Diagram file (.json, .yaml, .yml)')
    parser.add_argument(
        '--output', '-o', default='model.json',
        help='Model output file (.json, .yaml, .yml, .py)')
    parser.add_argument('--scenario', default='', help='Scenario name')
    parser.add_argument('--description', default='', help='Scenario description')
    parser.add_argument(
        '--handlers', metavar='FILE',
        help='Also write activities grouped by handler type to FILE')
    parser.add_argument(
        '--dot', metavar='FILE', help='Also write a DOT rendering to FILE')
    parser.add_argument(
        '--log', action='store_true', help='Log skipped input to stderr')
    parser.add_argument(
        '--set', '-s', nargs=2, metavar=('KEY', 'VALUE'),
        action='append', default=[], dest='config_overrides',
        help='Override config KEY with VALUE expression')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    config = default_config()
    config['compile.input.file'] = args.input
    config['compile.output.file'] = args.output
    config['compile.scenario'] = args.scenario
    config['compile.description'] = args.description
    config['compile.handlers.file'] = args.handlers
    if args.dot:
        config['compile.dot.enable'] = True
        config['compile.dot.file'] = args.dot
    config['compile.log.enable'] = args.log

    try:
        apply_user_overrides(config, args.config_overrides)
        output = export_model(config)
    except (ConfigError, GraphError, ValueError, OSError, yaml.YAMLError) as e:
        print(f'desflow: error: {e}', file=sys.stderr)
        return 1

    model = output['model']
    print(
        '{}: {} activities, {} resources, {} connections, '
        '{} entity relationships'.format(
            config['compile.input.file'],
            len(model['activities']),
            len(model['resources']),
            len(model['connections']),
            len(model['entityRelationships']),
        )
    )
    return 0


if __name__ == '__main__':
    sys.exit(main())
