"""
ajaxread - AjaxPro payload decoder
==================================
Decodes the JavaScript-literal wire format emitted by the ASP.NET AjaxPro
serializer: ``<value>;/*`` for results and ``null; r.error = <value>;/*``
for server-side errors.

Layout:
  ajaxread/
    __init__.py          public API (this file)
    result.py            Ok / Err and stage composition
    error.py             ErrorKind, ParseError, DecodeError
    syntax/
      source.py          character cursor
      tokenizer.py       text -> lark Tokens
      parser.py          tokens -> AST
    tree/
      nodes.py           AST node types
    semantic/
      registry.py        name -> routine table (Data.Dictionary built in)
      extractor.py       AST -> native values
    pipeline.py          AjaxReader, read(), read_value()

Quick start::

    from ajaxread import read

    result = read('{"foo": 1};/*')
    if result.is_ok:
        print(result.value)          # {'foo': 1}
    elif isinstance(result.error, ParseError):
        print(result.error)          # decode failure
    else:
        print(result.error)          # server error payload
"""

from .pipeline import AjaxReader, read, read_value, decode
from .result import Ok, Err, Result, ok, err, compose
from .error import ErrorKind, ErrorCategory, ParseError, DecodeError
from .tree.nodes import (
    Node, ObjectNode, ArrayNode, FunCall, Primitive,
    UNDEFINED, Undefined, to_lark_tree,
)
from .semantic.registry import Registry, BUILTINS, constructor, data_dictionary
from .syntax.tokenizer import TokenKind

__all__ = [
    'AjaxReader', 'read', 'read_value', 'decode',
    'Ok', 'Err', 'Result', 'ok', 'err', 'compose',
    'ErrorKind', 'ErrorCategory', 'ParseError', 'DecodeError',
    'Node', 'ObjectNode', 'ArrayNode', 'FunCall', 'Primitive',
    'UNDEFINED', 'Undefined', 'to_lark_tree',
    'Registry', 'BUILTINS', 'constructor', 'data_dictionary',
    'TokenKind',
]
