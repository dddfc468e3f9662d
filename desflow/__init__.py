"""Compile drawn discrete event simulation flows into structured models.

A flow diagram is drawn with *generators* (entity sources), *activities*
(processing steps that hold resources for some time), *terminators* (entity
sinks) and a handful of auxiliary node types, joined by edges that are either
control flow or structural *dependencies*. The `desflow` package lowers such a
diagram into a simulation-ready model description.

Compilation
===========

The :func:`~desflow.compiler.compile_model` function is the entry point. It
is a pure function of the diagram's nodes and edges and runs these stages:

 - *Graph construction* (:mod:`desflow.graph`): nodes and edges are indexed;
   dangling edges are dropped.
 - *Handler assignment* (:mod:`desflow.handlers`): each activity is assigned
   the generator whose entities it processes.
 - *Entity relationships* (:mod:`desflow.relationships`): ownership between
   entities is inferred from dependency edges and shared resources.
 - *Activity lowering* (:mod:`desflow.activities`): resources, conditions,
   and requirements are extracted per activity.
 - *Connection classification* (:mod:`desflow.connections`): edges are
   typed as start-to-inflow, start-to-start, finish-to-finish, or flow.

Conversion runs
===============

The :func:`~desflow.compiler.export_model` function performs a complete
file-to-file conversion driven by a flat configuration dictionary (see
:mod:`desflow.config`). The ``desflow`` command (:mod:`desflow.cli`) exposes
it on the command line. The :mod:`desflow.dot` module renders compiled models
for review with Graphviz, and :mod:`desflow.tracer` provides an opt-in log of
the input that compilation skipped.

"""

__all__ = ()
