"""
Source cursor
=============
Character-level navigation over the input text.

Two positions are tracked side by side:
  idx     index into the Python string (code points)
  offset  the same position counted in UTF-16 code units, which is the
          unit every token span and error offset is reported in
"""

import re
from typing import Optional

END = ''

# backspace is whitespace in this wire format
WHITESPACE = ' \t\n\b'


def utf16_len(ch: str) -> int:
    return 2 if ord(ch) > 0xFFFF else 1


class Source:
    def __init__(self, text: str):
        self.text   = text
        self.idx    = 0
        self.offset = 0

    def __repr__(self):
        return f"Source(idx={self.idx}, offset={self.offset})"

    @property
    def at_end(self) -> bool:
        return self.idx >= len(self.text)

    def peek(self) -> str:
        """Current character, or END past the end of input."""
        if self.idx >= len(self.text):
            return END
        return self.text[self.idx]

    def pop(self) -> str:
        """Consume and return one character (END past the end of input)."""
        ch = self.peek()
        if ch:
            self.idx += 1
            self.offset += utf16_len(ch)
        return ch

    def skip_whitespace(self):
        while self.peek() and self.peek() in WHITESPACE:
            self.pop()

    def match(self, pattern: 're.Pattern') -> Optional[str]:
        """Consume a regex match anchored at the cursor, if any."""
        m = pattern.match(self.text, self.idx)
        if m is None:
            return None
        lexeme = m.group(0)
        self.idx += len(lexeme)
        self.offset += sum(utf16_len(ch) for ch in lexeme)
        return lexeme

    def lookahead(self, n: int) -> str:
        """Up to ``n`` characters from the cursor, without consuming them."""
        return self.text[self.idx:self.idx + n]
