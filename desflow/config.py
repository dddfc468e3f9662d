"""Tools for managing compilation configurations.

A conversion run is described by a single flat configuration dictionary.
Keys use a dotted notation that groups related values; every key used by
`desflow` itself is prefixed with 'compile.', for example
'compile.input.file' and 'compile.log.level'. Consumers read their values
with ``config.setdefault(key, default)`` so that the effective configuration
(defaults included) is visible in the dictionary after a run.

Most functions in this module support building user interfaces, such as the
``desflow`` command line, that let a user tweak a configuration.

"""
from typing import Any, Dict, Iterable, Optional, Tuple
import builtins

DEFAULT_CONFIG: Dict[str, Any] = {
    'compile.input.file': None,
    'compile.output.file': 'model.json',
    'compile.handlers.file': None,
    'compile.scenario': '',
    'compile.description': '',
    'compile.dot.enable': False,
    'compile.dot.file': 'model.dot',
    'compile.dot.colorscheme': '',
    'compile.log.enable': False,
    'compile.log.file': '',
    'compile.log.level': 'WARNING',
    'compile.log.format': '{level:7} {scope}:',
    'compile.log.include_pat': ['.*'],
    'compile.log.exclude_pat': [],
}


class ConfigError(Exception):
    """Exception raised for a variety of configuration errors."""


def default_config() -> Dict[str, Any]:
    """A fresh copy of :data:`DEFAULT_CONFIG`."""
    return {
        key: list(value) if isinstance(value, list) else value
        for key, value in DEFAULT_CONFIG.items()
    }


def apply_user_overrides(
    config: Dict[str, Any],
    overrides: Iterable[Tuple[str, str]],
    eval_locals: Optional[Dict[str, Any]] = None,
) -> None:
    """Apply user-provided overrides to a configuration.

    Each user-provided key must already exist in `config`. The
    :func:`fuzzy_lookup()` function is used to verify that the user-provided
    key exists unambiguously in `config`.

    The user-provided value expressions are evaluated against a safe local
    environment using :func:`eval()`. The type of the resulting value must be
    type-compatible with the existing (default) value in `config`. Keys whose
    current value is `None` take the expression as a string, and the
    expression ``None`` unsets string or unset keys.

    :param dict config: Configuration dictionary to modify.
    :param list overrides:
        List of user-provided (key, value expression) tuples.
    :param dict eval_locals:
        Optional dictionary of locals to use with :func:`eval()`. A safe and
        useful set of locals is provided by default.
    :raises `desflow.config.ConfigError`: For invalid keys or expressions.

    """
    for user_key, user_expr in overrides:
        key, current_value = fuzzy_lookup(config, user_key)
        if user_expr == 'None' and (
            current_value is None or isinstance(current_value, str)
        ):
            value = None
        elif current_value is None:
            value = _safe_eval(user_expr, str, eval_locals)
        else:
            value = _safe_eval(user_expr, type(current_value), eval_locals)
        config[key] = value


def fuzzy_lookup(config: Dict[str, Any], fuzzy_key: str) -> Tuple[str, Any]:
    """Lookup a config key/value using a partially specified (fuzzy) key.

    The lookup will succeed iff the provided `fuzzy_key` unambiguously matches
    the tail of a [fully-qualified] key in the `config` dict.

    :param dict config: Configuration dict in which to lookup `fuzzy_key`.
    :param str fuzzy_key: Partially specified key to lookup in `config`.
    :returns:
        `(key, value)` tuple. The returned key is the regular, fully-qualified
        key name, not the provided `fuzzy_key`.
    :raises `desflow.config.ConfigError`: For non-matching `fuzzy_key`.

    """
    try:
        return fuzzy_key, config[fuzzy_key]
    except KeyError:
        suffix_matches = []
        split_matches = []
        for k in config:
            if k.rsplit('.', 1)[-1] == fuzzy_key:
                split_matches.append(k)
            elif k.endswith(fuzzy_key):
                suffix_matches.append(k)
        if len(split_matches) == 1:
            k = split_matches[0]
            return k, config[k]
        elif len(suffix_matches) == 1:
            k = suffix_matches[0]
            return k, config[k]
        elif not suffix_matches + split_matches:
            raise ConfigError(f'Invalid config key "{fuzzy_key}"')
        else:
            raise ConfigError(
                'Ambiguous config key "{}"; possible matches: {}'.format(
                    fuzzy_key, ', '.join(split_matches + suffix_matches)
                )
            )


_safe_builtins = [
    'abs', 'bool', 'dict', 'float', 'int', 'len', 'list', 'max', 'min',
    'range', 'round', 'str', 'tuple',
]

_default_eval_locals = {
    name: getattr(builtins, name) for name in _safe_builtins if hasattr(builtins, name)
}


def _safe_eval(expr, coerce_type=None, eval_locals=None):
    if eval_locals is None:
        eval_locals = _default_eval_locals
    try:
        value = eval(expr, {'__builtins__': None}, eval_locals)
    except Exception:
        if coerce_type and issubclass(coerce_type, str):
            value = expr
        else:
            raise ConfigError(f'Failed evaluation of expression "{expr}"')

    if coerce_type:
        if expr in eval_locals and not isinstance(value, coerce_type):
            value = expr
        if not isinstance(value, coerce_type):
            try:
                value = coerce_type(value)
            except (ValueError, TypeError):
                raise ConfigError(
                    'Failed to coerce expression {} to {}'.format(
                        _quote_expr(expr), coerce_type.__name__
                    )
                )
    return value


def _quote_expr(expr):
    quote_char = "'" if expr.startswith('"') else '"'
    return ''.join([quote_char, expr, quote_char])
