"""
AST nodes
=========
The parser produces a closed set of four node types:

  ObjectNode   string keys -> nodes, in source order ("__proto__" never kept)
  ArrayNode    ordered child nodes
  FunCall      dotted name + argument nodes, optionally invoked with `new`
  Primitive    number / string / bool / None / UNDEFINED

Nodes are frozen once built.  ``to_lark_tree`` renders any node as a
``lark.Tree`` for debugging (``to_lark_tree(node).pretty()``).
"""

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from lark import Token, Tree

PROTO_KEY = '__proto__'


class Undefined:
    """The `undefined` literal. A falsy singleton."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return 'undefined'

    def __bool__(self):
        return False

    def __reduce__(self):
        return (Undefined, ())


UNDEFINED = Undefined()


class Node:
    """Common base class of the four AST node types."""
    __slots__ = ()


@dataclass(frozen=True)
class ObjectNode(Node):
    entries: Mapping[str, Node] = field(default_factory=dict)

    def __post_init__(self):
        entries = {k: v for k, v in dict(self.entries).items() if k != PROTO_KEY}
        object.__setattr__(self, 'entries', MappingProxyType(entries))


@dataclass(frozen=True)
class ArrayNode(Node):
    items: Tuple[Node, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'items', tuple(self.items))


@dataclass(frozen=True)
class FunCall(Node):
    """
    ``name(args...)`` or ``new name(args...)``.

    start/end span the call from `new` (or the first name token) through the
    closing parenthesis; they are positional metadata and do not take part
    in equality.
    """
    name:           str
    args:           Tuple[Node, ...] = ()
    is_constructor: bool = False
    start:          int = field(default=0, compare=False)
    end:            Optional[int] = field(default=None, compare=False)

    def __post_init__(self):
        object.__setattr__(self, 'args', tuple(self.args))


@dataclass(frozen=True, eq=False)
class Primitive(Node):
    value: Any

    # 1 == True in Python; literals of different types must stay distinct
    def __eq__(self, other):
        if not isinstance(other, Primitive):
            return NotImplemented
        return type(self.value) is type(other.value) and self.value == other.value

    def __hash__(self):
        return hash((type(self.value), self.value))


# ─── debug rendering ──────────────────────────────────────────────────────────

def _literal(value) -> str:
    if value is UNDEFINED:
        return 'undefined'
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    return repr(value)


def to_lark_tree(node: Node) -> Tree:
    if isinstance(node, ObjectNode):
        return Tree('object', [
            Tree('entry', [Token('KEY', json.dumps(k, ensure_ascii=False)), to_lark_tree(v)])
            for k, v in node.entries.items()
        ])
    if isinstance(node, ArrayNode):
        return Tree('array', [to_lark_tree(item) for item in node.items])
    if isinstance(node, FunCall):
        rule = 'new_call' if node.is_constructor else 'call'
        return Tree(rule, [Token('NAME', node.name)] + [to_lark_tree(a) for a in node.args])
    if isinstance(node, Primitive):
        return Tree('primitive', [Token('VALUE', _literal(node.value))])
    raise TypeError(f"not an AST node: {node!r}")
