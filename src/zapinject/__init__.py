"""Reflection-driven dependency injector.

This package resolves the parameters of callables and constructors from their
type annotations, using a per-injector registry of factories and pre-built
instances.

Exports:
- `Injector`: the container; registers factories, instances and classes, and
  resolves them through `get`, `invoke` and `create`.
- `Parameter`: description of one injectable parameter, as produced by reflection.
- `type_id`: normalises a class or dotted name into a registry key.
- Errors: `InjectorError` and its subclasses `InvalidArgumentError`,
  `ResolutionError`, `UnknownDependencyError`, `RecursiveDependencyError`.
"""

from ._container import Injector
from ._errors import (
    InjectorError,
    InvalidArgumentError,
    RecursiveDependencyError,
    ResolutionError,
    UnknownDependencyError,
)
from ._reflection import Parameter, type_id


__all__ = [
    "Injector",
    "InjectorError",
    "InvalidArgumentError",
    "Parameter",
    "RecursiveDependencyError",
    "ResolutionError",
    "UnknownDependencyError",
    "type_id",
]
