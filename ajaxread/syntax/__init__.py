from .source import Source
from .tokenizer import TokenKind, tokenize
from .parser import parse, parse_value, parse_bare_value

__all__ = [
    'Source',
    'TokenKind', 'tokenize',
    'parse', 'parse_value', 'parse_bare_value',
]
