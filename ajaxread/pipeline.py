"""
Read pipeline
=============
Chains the three stages into one call:

    text --Source--> tokenize --> parse --> interpret --> value

Each stage returns a Result; the first Err ends the read.
"""

from __future__ import annotations
import logging
from typing import Any, Mapping, Optional

from .error import DecodeError
from .result import Err, Ok, Result, compose
from .semantic.extractor import Extractor
from .semantic.registry import Registry
from .syntax.parser import parse, parse_bare_value
from .syntax.source import Source
from .syntax.tokenizer import tokenize

logger = logging.getLogger(__name__)


class AjaxReader:
    """
    Decoder for AjaxPro-style ``<value>;/*`` payloads.

    Usage::

        reader = AjaxReader(registry={'Data.Point': constructor(Point)})
        result = reader.read('{"at": new Data.Point(1, 2)};/*')
        if result.is_ok:
            print(result.value)
    """

    def __init__(self, registry: Optional[Mapping] = None,
                 include_builtins: bool = True,
                 legacy_call_offsets: bool = True):
        """
        Args:
            registry:            extra routines by fully-qualified name
            include_builtins:    register Data.Dictionary
            legacy_call_offsets: report call errors at offset 0 (see Extractor)
        """
        if not isinstance(registry, Registry):
            registry = Registry(registry, include_builtins=include_builtins)
        self.registry = registry
        self._extractor = Extractor(registry, legacy_call_offsets=legacy_call_offsets)

    # ── entry points ───────────────────────────────────────────────────────

    def read(self, text: str) -> Result:
        """
        Decode a full document.

        Returns ``Ok(value)``, ``Err(value)`` when the document carries an
        error payload (``null; r.error = ...``), or ``Err(ParseError)``.
        """
        run = compose(Source, tokenize, parse, self._extractor.interpret)
        result = run(text)
        if not result.is_ok:
            logger.debug("read failed: %s", result.error)
            return result
        return result.value

    def read_value(self, text: str) -> Result:
        """Decode a bare value (no prologue, no `;/*`). ``Ok(value)`` or ``Err(ParseError)``."""
        run = compose(Source, tokenize, parse_bare_value, self._extractor.extract)
        result = run(text)
        if not result.is_ok:
            logger.debug("read_value failed: %s", result.error)
        return result

    def decode(self, text: str) -> Any:
        """
        Like read() but raises DecodeError on failure.  An error-payload
        document is not a failure; its value is returned as is.
        """
        result = compose(Source, tokenize, parse, self._extractor.interpret)(text)
        if not result.is_ok:
            raise DecodeError(result.error)
        document = result.value
        return document.value if document.is_ok else document.error

    # ── debugging ──────────────────────────────────────────────────────────

    def tokenize_only(self, text: str) -> Result:
        return tokenize(Source(text))

    def parse_only(self, text: str) -> Result:
        """Tokenize + parse; returns the document result without extracting."""
        return compose(Source, tokenize, parse)(text)


_default_reader = AjaxReader()


def _reader_for(registry: Optional[Mapping]) -> AjaxReader:
    return _default_reader if registry is None else AjaxReader(registry)


def read(text: str, registry: Optional[Mapping] = None) -> Result:
    return _reader_for(registry).read(text)


def read_value(text: str, registry: Optional[Mapping] = None) -> Result:
    return _reader_for(registry).read_value(text)


def decode(text: str, registry: Optional[Mapping] = None) -> Any:
    return _reader_for(registry).decode(text)
