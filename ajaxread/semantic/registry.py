"""
Call registry
=============
Function and constructor calls in a payload (``new Data.Dictionary(...)``)
are resolved by name through a read-only table of routines.

A routine has the signature::

    routine(args: list, is_constructor: bool) -> value | Ok | Err

``args`` are already extracted native values.  A plain return value counts
as success.  ``Err(ErrorKind.X)`` fails with kind X at the call site,
``Err(ParseError)`` is passed through, and any other ``Err`` payload or a
raised exception becomes ``ErrorInUserSuppliedFunction``.

Usage::

    registry = Registry({'Data.Point': constructor(Point)})
    reader = AjaxReader(registry=registry)
"""

from __future__ import annotations
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Callable, Iterator, Optional

from ..error import ErrorKind
from ..result import Err
from ..tree.nodes import PROTO_KEY

Routine = Callable[[list, bool], Any]


def constructor(fn: Callable[..., Any]) -> Routine:
    """Adapt ``fn(*args)`` into a routine that only accepts the `new` form."""
    def routine(args: list, is_constructor: bool):
        if not is_constructor:
            return Err(ErrorKind.INVALID_FUNCTION_NAME)
        return fn(*args)
    routine.__name__ = getattr(fn, '__name__', 'routine')
    routine.__doc__ = getattr(fn, '__doc__', None)
    return routine


def data_dictionary(type_name: str, pairs) -> dict:
    """
    ``new Data.Dictionary(typeName, [[key, value], ...])``

    The .NET type name is ignored; pairs are inserted in order, so a
    repeated key keeps its first position and its last value.
    """
    result = {}
    for key, value in pairs:
        if key == PROTO_KEY:
            continue
        result[key] = value
    return result


BUILTINS: Mapping[str, Routine] = MappingProxyType({
    'Data.Dictionary': constructor(data_dictionary),
})


class Registry(Mapping):
    """
    Immutable name -> routine table.

    Caller routines are layered over the built-ins and may shadow them.
    """

    def __init__(self, routines: Optional[Mapping[str, Routine]] = None,
                 include_builtins: bool = True):
        table = dict(BUILTINS) if include_builtins else {}
        if routines:
            table.update(routines)
        self._routines = MappingProxyType(table)

    def __getitem__(self, name: str) -> Routine:
        return self._routines[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._routines)

    def __len__(self) -> int:
        return len(self._routines)

    def __repr__(self):
        return f"Registry({sorted(self._routines)!r})"

    def resolve(self, name: str) -> Optional[Routine]:
        """The routine registered under ``name`` if it is callable, else None."""
        routine = self._routines.get(name)
        return routine if callable(routine) else None

    def extended(self, routines: Mapping[str, Routine]) -> 'Registry':
        """A new registry with ``routines`` layered on top of this one."""
        registry = Registry(include_builtins=False)
        registry._routines = MappingProxyType({**self._routines, **routines})
        return registry
