"""Opt-in diagnostic log for compilation runs.

Compilation is best-effort: dangling edges, unusable nodes and unparseable
condition text are skipped rather than reported as errors. When the
``compile.log.enable`` configuration is set, :class:`CompileTracer` records
those decisions to a log file (or stderr) so that a diagram author can find
out why something is missing from the compiled model.

Each compilation stage asks the tracer for a trace function for its *scope*
(e.g. ``'graph'`` or ``'activities'``) and level. Scopes that are disabled,
filtered out by ``compile.log.include_pat``/``compile.log.exclude_pat``, or
below ``compile.log.level`` get a no-op trace function.

"""
from typing import Dict, List, Optional
import os
import re
import sys
import traceback

from .graph import TraceFunction, no_trace


class CompileTracer:

    default_format = '{level:7} {scope}:'

    levels = {
        'ERROR': 1,
        'WARNING': 2,
        'INFO': 3,
        'DEBUG': 4,
    }

    def __init__(self, config: dict) -> None:
        self.config = config
        self.enabled: bool = config.setdefault('compile.log.enable', False)
        self.file = None
        if self.enabled:
            include_pat: List[str] = config.setdefault(
                'compile.log.include_pat', ['.*']
            )
            exclude_pat: List[str] = config.setdefault('compile.log.exclude_pat', [])
            self._include_re = [re.compile(pat) for pat in include_pat]
            self._exclude_re = [re.compile(pat) for pat in exclude_pat]
            self.open()

    def open(self) -> None:
        self.filename: str = self.config.setdefault('compile.log.file', '')
        level: str = self.config.setdefault('compile.log.level', 'WARNING')
        if level not in self.levels:
            raise ValueError(f'Invalid compile.log.level: {level}')
        self.max_level = self.levels[level]
        self.format_str: str = self.config.setdefault(
            'compile.log.format', self.default_format
        )
        if self.filename:
            self.file = open(self.filename, 'w')
            self.should_close = True
        else:
            self.file = sys.stderr
            self.should_close = False

    def flush(self) -> None:
        if self.enabled:
            self.file.flush()

    def close(self) -> None:
        if self.enabled and self.should_close and not self.file.closed:
            self.file.close()

    def remove_files(self) -> None:
        if self.enabled and self.filename and os.path.isfile(self.filename):
            os.remove(self.filename)

    def __enter__(self) -> 'CompileTracer':
        return self

    def __exit__(self, exc_type, exc_value, tb) -> None:
        if exc_type is not None:
            self.trace_exception(exc_type, exc_value, tb)
        self.close()

    def is_scope_enabled(self, scope: str, level: Optional[str] = None) -> bool:
        return (
            self.enabled
            and (level is None or self.levels[level] <= self.max_level)
            and any(r.match(scope) for r in self._include_re)
            and not any(r.match(scope) for r in self._exclude_re)
        )

    def get_trace_function(self, scope: str, level: str = 'DEBUG') -> TraceFunction:
        if not self.is_scope_enabled(scope, level):
            return no_trace
        prefix = self.format_str.format(level=level, scope=scope)

        def trace_function(*value) -> None:
            print(prefix, *value, file=self.file)

        return trace_function

    def trace_exception(self, *exc_info) -> None:
        if not self.enabled:
            return
        tb_lines = traceback.format_exception(*(exc_info or sys.exc_info()))
        print(
            self.format_str.format(level='ERROR', scope='Exception'),
            tb_lines[-1],
            '\n',
            *tb_lines,
            file=self.file,
        )


def scope_tracers(
    tracer: Optional[CompileTracer], levels: Dict[str, str]
) -> Dict[str, TraceFunction]:
    """Trace functions for several scopes at once.

    :param tracer: A :class:`CompileTracer`, or `None` for no tracing.
    :param dict levels: Mapping of scope to level.

    """
    if tracer is None:
        return {scope: no_trace for scope in levels}
    return {
        scope: tracer.get_trace_function(scope, level)
        for scope, level in levels.items()
    }
