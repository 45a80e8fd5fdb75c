"""
Result container
================
Every stage of the decode pipeline returns either ``Ok(value)`` or
``Err(error)`` instead of raising.  The helpers here chain stages together
and stop at the first ``Err``.

    result = compose(tokenize, parse, interpret)(Source(text))
    if result.is_ok:
        print(result.value)
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Union

from .error import DecodeError, ParseError


@dataclass(frozen=True)
class Ok:
    """Success variant."""
    value: Any

    is_ok = True

    def unwrap(self):
        return self.value

    def map(self, fn: Callable[[Any], Any]) -> 'Result':
        return Ok(fn(self.value))

    def and_then(self, fn: Callable[[Any], 'Result']) -> 'Result':
        return fn(self.value)


@dataclass(frozen=True)
class Err:
    """Failure variant."""
    error: Any

    is_ok = False

    def unwrap(self):
        if isinstance(self.error, ParseError):
            raise DecodeError(self.error)
        raise ValueError(f"unwrap() called on {self!r}")

    def map(self, fn: Callable[[Any], Any]) -> 'Result':
        return self

    def and_then(self, fn: Callable[[Any], 'Result']) -> 'Result':
        return self


Result = Union[Ok, Err]


def ok(value) -> Ok:
    return Ok(value)


def err(error) -> Err:
    return Err(error)


def is_result(obj) -> bool:
    return isinstance(obj, (Ok, Err))


def compose(first: Callable[[Any], Any], *rest: Callable[[Any], Result]) -> Callable[[Any], Result]:
    """
    Chain stages left to right.

    ``first`` may return a plain value or a Result; every later stage
    receives the previous stage's success value and must return a Result.
    The first ``Err`` is returned unchanged.
    """
    def run(arg) -> Result:
        result = first(arg)
        if not is_result(result):
            result = Ok(result)
        for stage in rest:
            if not result.is_ok:
                return result
            result = stage(result.value)
        return result
    return run
