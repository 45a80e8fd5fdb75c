"""
Tokenizer
=========
Turns a Source into a list of ``lark.Token`` objects, or the first lexical
error.  There is no recovery: the first bad lexeme ends tokenization.

Token fields:
  type       TokenKind name
  value      lexeme text (decoded text for string literals)
  start_pos  [start, end) span in UTF-16 code units
  end_pos
"""

import re
from enum import Enum
from typing import List, Union

from lark import Token

from ..error import ErrorKind, ParseError
from ..result import Err, Ok, Result
from .source import END, Source


class TokenKind(str, Enum):
    IDENTIFIER     = 'IDENTIFIER'
    NUMBER_LITERAL = 'NUMBER_LITERAL'
    STRING_LITERAL = 'STRING_LITERAL'
    ASSIGN         = 'ASSIGN'          # =
    OPEN_PAREN     = 'OPEN_PAREN'      # (
    CLOSE_PAREN    = 'CLOSE_PAREN'     # )
    OPEN_BRACKET   = 'OPEN_BRACKET'    # [
    CLOSE_BRACKET  = 'CLOSE_BRACKET'   # ]
    OPEN_BRACE     = 'OPEN_BRACE'      # {
    CLOSE_BRACE    = 'CLOSE_BRACE'     # }
    COLON          = 'COLON'           # :
    SEMICOLON      = 'SEMICOLON'       # ;
    DOT            = 'DOT'             # .
    COMMA          = 'COMMA'           # ,
    EPILOGUE       = 'EPILOGUE'        # /*

    def __str__(self):
        return self.value


PUNCTUATION = {
    '=': TokenKind.ASSIGN,
    '(': TokenKind.OPEN_PAREN,
    ')': TokenKind.CLOSE_PAREN,
    '[': TokenKind.OPEN_BRACKET,
    ']': TokenKind.CLOSE_BRACKET,
    '{': TokenKind.OPEN_BRACE,
    '}': TokenKind.CLOSE_BRACE,
    ';': TokenKind.SEMICOLON,
    ':': TokenKind.COLON,
    '.': TokenKind.DOT,
    ',': TokenKind.COMMA,
}

# no sign, no exponent
NUMBER_RE = re.compile(r'0(?:\.\d+)?|[1-9]\d*(?:\.\d+)?', re.ASCII)
HEX4_RE   = re.compile(r'[0-9A-Fa-f]{4}')
DIGITS    = '0123456789'
_SURROGATE_RE = re.compile(r'[\ud800-\udfff]')

ESCAPES = {
    '"':  '"',
    "'":  "'",
    '\\': '\\',
    'b':  '\b',
    'f':  '\f',
    'n':  '\n',
    'r':  '\r',
    't':  '\t',
}

# characters of context attached to an InvalidIdentifier error
IDENTIFIER_CONTEXT = 3


def make_token(kind: TokenKind, value: str, start: int, end: int) -> Token:
    return Token(kind.value, value, start_pos=start, end_pos=end)


def tokenize(src: Union[Source, str]) -> Result:
    """Tokenize the whole input. Returns ``Ok(list[Token])`` or ``Err(ParseError)``."""
    if isinstance(src, str):
        src = Source(src)

    tokens: List[Token] = []
    src.skip_whitespace()
    while True:
        ch = src.peek()
        start = src.offset

        if ch == END:
            return Ok(tokens)

        if ch in DIGITS:
            lexeme = src.match(NUMBER_RE)
            if lexeme is None:
                return Err(ParseError(ErrorKind.INVALID_NUMBER_LITERAL, start))
            tokens.append(make_token(TokenKind.NUMBER_LITERAL, lexeme, start, src.offset))

        elif ch in '"\'':
            result = _read_string(src)
            if not result.is_ok:
                return result
            tokens.append(make_token(TokenKind.STRING_LITERAL, result.value, start, src.offset))

        elif ch in PUNCTUATION:
            src.pop()
            tokens.append(make_token(PUNCTUATION[ch], ch, start, src.offset))

        elif ch == '/':
            src.pop()
            if src.pop() != '*':
                return Err(ParseError(ErrorKind.EXPECTED_ASTERISK, start))
            tokens.append(make_token(TokenKind.EPILOGUE, '/*', start, src.offset))

        else:
            name = _read_identifier(src)
            if name is None:
                return Err(ParseError(ErrorKind.INVALID_IDENTIFIER, start,
                                      detail=f"invalid identifier: {src.lookahead(IDENTIFIER_CONTEXT)!r}"))
            tokens.append(make_token(TokenKind.IDENTIFIER, name, start, src.offset))

        src.skip_whitespace()


def _is_identifier_start(ch: str) -> bool:
    return bool(ch) and (ch in '$_' or ch.isidentifier())


def _is_identifier_part(ch: str) -> bool:
    return bool(ch) and (ch in '$\u200c\u200d' or ('_' + ch).isidentifier())


def _read_identifier(src: Source):
    if not _is_identifier_start(src.peek()):
        return None
    chars = [src.pop()]
    while _is_identifier_part(src.peek()):
        chars.append(src.pop())
    return ''.join(chars)


def _read_string(src: Source) -> Result:
    """Read a '...' or "..." literal; the cursor sits on the opening quote."""
    start = src.offset
    delimiter = src.pop()
    chars: List[str] = []

    while True:
        ch = src.pop()
        if ch == END:
            return Err(ParseError(ErrorKind.INVALID_STRING_LITERAL, start, src.offset,
                                  detail="unterminated string literal"))
        if ch == delimiter:
            return Ok(_join_surrogates(''.join(chars)))
        if ch != '\\':
            chars.append(ch)
            continue

        code = src.pop()
        if code == 'u':
            digits = src.match(HEX4_RE)
            if digits is None:
                return Err(ParseError(ErrorKind.INVALID_STRING_LITERAL, start, src.offset,
                                      detail="\\u must be followed by four hex digits"))
            chars.append(chr(int(digits, 16)))
        elif code in ESCAPES:
            chars.append(ESCAPES[code])
        else:
            return Err(ParseError(ErrorKind.INVALID_STRING_LITERAL, start, src.offset,
                                  detail=f"unknown escape sequence: \\{code}"))


def _join_surrogates(text: str) -> str:
    # \uXXXX appends UTF-16 code units; pair up any escaped surrogate halves
    if not _SURROGATE_RE.search(text):
        return text
    return text.encode('utf-16-le', 'surrogatepass').decode('utf-16-le', 'surrogatepass')
