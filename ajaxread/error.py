"""
Decode error model
==================
A decode stops at the first failure and reports exactly one ``ParseError``:
which rule was broken (``ErrorKind``) and where, as a ``[start, end)`` span
of UTF-16 code units into the original input.

Kinds are grouped the way the pipeline detects them:

  LEXICAL     raised by the tokenizer
  STRUCTURAL  raised by the parser
  SEMANTIC    raised by the extractor while resolving calls
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional


class ErrorCategory(Enum):
    LEXICAL    = auto()
    STRUCTURAL = auto()
    SEMANTIC   = auto()


class ErrorKind(Enum):
    # lexical
    INVALID_NUMBER_LITERAL         = 'InvalidNumberLiteral'
    INVALID_STRING_LITERAL         = 'InvalidStringLiteral'
    INVALID_IDENTIFIER             = 'InvalidIdentifier'
    EXPECTED_ASTERISK              = 'ExpectedAsterisk'
    # structural
    UNEXPECTED_TOKEN               = 'UnexpectedToken'
    EXPECTED_OPEN_BRACKET          = 'ExpectedOpenBracket'
    EXPECTED_OPEN_BRACE            = 'ExpectedOpenBrace'
    EXPECTED_COMMA                 = 'ExpectedComma'
    EXPECTED_COLON                 = 'ExpectedColon'
    EXPECTED_STRING_KEY            = 'ExpectedStringKey'
    EXPECTED_FUNCTION_NAME         = 'ExpectedFunctionName'
    EXPECTED_ARGUMENTS_LIST        = 'ExpectedArgumentsList'
    UNEXPECTED_END_OF_INPUT        = 'UnexpectedEndOfInput'
    MISSING_EPILOGUE               = 'MissingEpilogue'
    TRAILING_TOKENS                = 'TrailingTokens'
    # semantic
    INVALID_FUNCTION_NAME          = 'InvalidFunctionName'
    ERROR_IN_USER_SUPPLIED_FUNCTION = 'ErrorInUserSuppliedFunction'

    @property
    def category(self) -> ErrorCategory:
        return _CATEGORIES[self]

    def __str__(self):
        return self.value


_LEXICAL = {
    ErrorKind.INVALID_NUMBER_LITERAL,
    ErrorKind.INVALID_STRING_LITERAL,
    ErrorKind.INVALID_IDENTIFIER,
    ErrorKind.EXPECTED_ASTERISK,
}
_SEMANTIC = {
    ErrorKind.INVALID_FUNCTION_NAME,
    ErrorKind.ERROR_IN_USER_SUPPLIED_FUNCTION,
}
_CATEGORIES = {
    kind: (ErrorCategory.LEXICAL if kind in _LEXICAL else
           ErrorCategory.SEMANTIC if kind in _SEMANTIC else
           ErrorCategory.STRUCTURAL)
    for kind in ErrorKind
}


@dataclass(frozen=True)
class ParseError:
    """
    One decode failure.

    Attributes:
        kind:   what went wrong
        start:  offset of the offending lexeme/token
        end:    exclusive end offset, when the failure has a span
        detail: free-form diagnostic text; not part of equality
    """
    kind:   ErrorKind
    start:  int
    end:    Optional[int] = None
    detail: str = field(default='', compare=False)

    def __str__(self):
        loc = f"{self.start}:{self.end}" if self.end is not None else f"{self.start}"
        base = f"[{self.kind}] {loc}"
        if self.detail:
            base += f"  {self.detail}"
        return base


class DecodeError(Exception):
    """Raised by the exception-style entry points; wraps a ParseError."""
    def __init__(self, error: ParseError):
        super().__init__(str(error))
        self.error = error

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind
