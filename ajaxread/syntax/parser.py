"""
Parser
======
Recursive descent over the token list, one forward pass, no backtracking:

    document := prologue? value ';' EPILOGUE
    prologue := IDENT("null") ';' IDENT("r") '.' IDENT("error") '='
    value    := array | object | number | string
              | IDENT("undefined" | "null" | "true" | "false")
              | funcall | "new" funcall
    array    := '[' ( value (',' value)* )? ']'
    object   := '{' ( STR ':' value (',' STR ':' value)* )? '}'
    funcall  := IDENT ('.' IDENT)* '(' ( value (',' value)* )? ')'

Every production takes ``(tokens, idx)`` and returns ``Ok((node, next_idx))``
or ``Err(ParseError)``.  The error span is the offending token's span; at
end of input it is the span of the last token, so it always lies inside the
input text.
"""

from typing import List, Sequence

from lark import Token

from ..error import ErrorKind, ParseError
from ..result import Err, Ok, Result
from ..tree.nodes import PROTO_KEY, UNDEFINED, ArrayNode, FunCall, ObjectNode, Primitive
from .tokenizer import TokenKind

KEYWORD_VALUES = {
    'undefined': UNDEFINED,
    'null':      None,
    'true':      True,
    'false':     False,
}

CONSTRUCTOR_KEYWORD = 'new'

# `null; r.error =` marks a document carrying an error payload
PROLOGUE = (
    (TokenKind.IDENTIFIER, 'null'),
    (TokenKind.SEMICOLON,  None),
    (TokenKind.IDENTIFIER, 'r'),
    (TokenKind.DOT,        None),
    (TokenKind.IDENTIFIER, 'error'),
    (TokenKind.ASSIGN,     None),
)


# ─── helpers ──────────────────────────────────────────────────────────────────

def _fail(tokens: Sequence[Token], idx: int, kind: ErrorKind, detail: str = '') -> Err:
    if idx < len(tokens):
        tok = tokens[idx]
    elif tokens:
        tok = tokens[-1]
    else:
        return Err(ParseError(kind, 0, 0, detail))
    return Err(ParseError(kind, tok.start_pos, tok.end_pos, detail))


def _end_of_input(tokens: Sequence[Token]) -> Err:
    return _fail(tokens, len(tokens), ErrorKind.UNEXPECTED_END_OF_INPUT)


def _at(tokens: Sequence[Token], idx: int, kind: TokenKind) -> bool:
    return idx < len(tokens) and tokens[idx].type == kind


def _number(text: str):
    return float(text) if '.' in text else int(text)


def _has_prologue(tokens: Sequence[Token]) -> bool:
    if len(tokens) < len(PROLOGUE):
        return False
    for tok, (kind, text) in zip(tokens, PROLOGUE):
        if tok.type != kind or (text is not None and tok.value != text):
            return False
    return True


# ─── entry points ─────────────────────────────────────────────────────────────

def parse(tokens: Sequence[Token]) -> Result:
    """
    Parse a full document.

    Returns ``Ok(Ok(node))`` for a success document, ``Ok(Err(node))`` for
    an error-payload document, or ``Err(ParseError)``.
    """
    idx = 0
    is_error = False
    if _has_prologue(tokens):
        idx = len(PROLOGUE)
        is_error = True

    result = parse_value(tokens, idx)
    if not result.is_ok:
        return result
    node, idx = result.value

    if not (_at(tokens, idx, TokenKind.SEMICOLON) and _at(tokens, idx + 1, TokenKind.EPILOGUE)):
        return _fail(tokens, idx, ErrorKind.MISSING_EPILOGUE)
    if len(tokens) > idx + 2:
        return _fail(tokens, idx, ErrorKind.TRAILING_TOKENS)

    return Ok(Err(node) if is_error else Ok(node))


def parse_bare_value(tokens: Sequence[Token]) -> Result:
    """Parse a single value with no prologue/epilogue; it must use every token."""
    result = parse_value(tokens, 0)
    if not result.is_ok:
        return result
    node, idx = result.value
    if idx < len(tokens):
        return _fail(tokens, idx, ErrorKind.TRAILING_TOKENS)
    return Ok(node)


# ─── productions ──────────────────────────────────────────────────────────────

def parse_value(tokens: Sequence[Token], idx: int = 0) -> Result:
    if idx >= len(tokens):
        return _end_of_input(tokens)

    tok = tokens[idx]
    if tok.type == TokenKind.OPEN_BRACKET:
        return parse_array(tokens, idx)
    if tok.type == TokenKind.OPEN_BRACE:
        return parse_object(tokens, idx)
    if tok.type == TokenKind.NUMBER_LITERAL:
        return Ok((Primitive(_number(tok.value)), idx + 1))
    if tok.type == TokenKind.STRING_LITERAL:
        return Ok((Primitive(tok.value), idx + 1))
    if tok.type == TokenKind.IDENTIFIER:
        if tok.value in KEYWORD_VALUES:
            return Ok((Primitive(KEYWORD_VALUES[tok.value]), idx + 1))
        if tok.value == CONSTRUCTOR_KEYWORD:
            return parse_funcall(tokens, idx + 1, is_constructor=True, start=tok.start_pos)
        return parse_funcall(tokens, idx)

    return _fail(tokens, idx, ErrorKind.UNEXPECTED_TOKEN)


def parse_array(tokens: Sequence[Token], idx: int) -> Result:
    if not _at(tokens, idx, TokenKind.OPEN_BRACKET):
        return _fail(tokens, idx, ErrorKind.EXPECTED_OPEN_BRACKET)

    result = _parse_list(tokens, idx + 1, TokenKind.CLOSE_BRACKET)
    if not result.is_ok:
        return result
    items, idx = result.value
    return Ok((ArrayNode(items), idx))


def parse_object(tokens: Sequence[Token], idx: int) -> Result:
    if not _at(tokens, idx, TokenKind.OPEN_BRACE):
        return _fail(tokens, idx, ErrorKind.EXPECTED_OPEN_BRACE)
    idx += 1

    entries = {}
    if idx >= len(tokens):
        return _end_of_input(tokens)
    if tokens[idx].type == TokenKind.CLOSE_BRACE:
        return Ok((ObjectNode(entries), idx + 1))

    while True:
        if idx >= len(tokens):
            return _end_of_input(tokens)
        if tokens[idx].type != TokenKind.STRING_LITERAL:
            return _fail(tokens, idx, ErrorKind.EXPECTED_STRING_KEY)
        key = tokens[idx].value
        idx += 1

        if idx >= len(tokens):
            return _end_of_input(tokens)
        if tokens[idx].type != TokenKind.COLON:
            return _fail(tokens, idx, ErrorKind.EXPECTED_COLON)
        idx += 1

        # the value is parsed even when the key is dropped
        result = parse_value(tokens, idx)
        if not result.is_ok:
            return result
        node, idx = result.value
        if key != PROTO_KEY:
            entries[key] = node

        if idx >= len(tokens):
            return _end_of_input(tokens)
        if tokens[idx].type == TokenKind.CLOSE_BRACE:
            return Ok((ObjectNode(entries), idx + 1))
        if tokens[idx].type != TokenKind.COMMA:
            return _fail(tokens, idx, ErrorKind.EXPECTED_COMMA)
        idx += 1


def parse_funcall(tokens: Sequence[Token], idx: int,
                  is_constructor: bool = False, start: int = None) -> Result:
    if idx >= len(tokens):
        return _end_of_input(tokens)
    if tokens[idx].type != TokenKind.IDENTIFIER:
        return _fail(tokens, idx, ErrorKind.EXPECTED_FUNCTION_NAME)
    if start is None:
        start = tokens[idx].start_pos

    names = [tokens[idx].value]
    idx += 1
    while _at(tokens, idx, TokenKind.DOT):
        idx += 1
        if idx >= len(tokens):
            return _end_of_input(tokens)
        if tokens[idx].type != TokenKind.IDENTIFIER:
            return _fail(tokens, idx, ErrorKind.EXPECTED_FUNCTION_NAME)
        names.append(tokens[idx].value)
        idx += 1

    if idx >= len(tokens):
        return _end_of_input(tokens)
    if tokens[idx].type != TokenKind.OPEN_PAREN:
        return _fail(tokens, idx, ErrorKind.EXPECTED_ARGUMENTS_LIST)

    result = _parse_list(tokens, idx + 1, TokenKind.CLOSE_PAREN)
    if not result.is_ok:
        return result
    args, idx = result.value

    call = FunCall('.'.join(names), args, is_constructor,
                   start=start, end=tokens[idx - 1].end_pos)
    return Ok((call, idx))


def _parse_list(tokens: Sequence[Token], idx: int, close: TokenKind) -> Result:
    """Comma separated values up to and including ``close``."""
    items: List = []
    if idx >= len(tokens):
        return _end_of_input(tokens)
    if tokens[idx].type == close:
        return Ok((items, idx + 1))

    while True:
        result = parse_value(tokens, idx)
        if not result.is_ok:
            return result
        node, idx = result.value
        items.append(node)

        if idx >= len(tokens):
            return _end_of_input(tokens)
        if tokens[idx].type == close:
            return Ok((items, idx + 1))
        if tokens[idx].type != TokenKind.COMMA:
            return _fail(tokens, idx, ErrorKind.EXPECTED_COMMA)
        idx += 1
