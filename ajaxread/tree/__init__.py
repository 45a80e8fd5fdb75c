from .nodes import (
    Node, ObjectNode, ArrayNode, FunCall, Primitive,
    Undefined, UNDEFINED, PROTO_KEY,
    to_lark_tree,
)

__all__ = [
    'Node', 'ObjectNode', 'ArrayNode', 'FunCall', 'Primitive',
    'Undefined', 'UNDEFINED', 'PROTO_KEY',
    'to_lark_tree',
]
