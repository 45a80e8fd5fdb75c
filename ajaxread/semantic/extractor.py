"""
Extractor
=========
Walks an AST into native Python values:

  ObjectNode -> dict        ArrayNode -> list
  Primitive  -> its value   FunCall   -> whatever the registry routine returns

Extraction is depth first and stops at the first failing child.  A routine
that raises is the only place an exception is caught; it becomes an
``ErrorInUserSuppliedFunction`` error.
"""

import logging
from typing import Mapping, Optional

from ..error import ErrorKind, ParseError
from ..result import Err, Ok, Result, is_result
from ..tree.nodes import PROTO_KEY, ArrayNode, FunCall, Node, ObjectNode, Primitive
from .registry import Registry

logger = logging.getLogger(__name__)


class Extractor:
    """
    Args:
        registry:            call table; plain mappings are layered over the
                             built-ins, a Registry is used as is
        legacy_call_offsets: report call errors at offset 0 with no end, as
                             older decoders did, instead of the call's span
    """

    def __init__(self, registry: Optional[Mapping] = None, legacy_call_offsets: bool = True):
        self.registry = registry if isinstance(registry, Registry) else Registry(registry)
        self.legacy_call_offsets = legacy_call_offsets

    def interpret(self, document: Result) -> Result:
        """
        Extract a parsed document, keeping its success/error-payload flag:
        ``Ok(Ok(value))``, ``Ok(Err(value))`` or ``Err(ParseError)``.
        """
        node = document.value if document.is_ok else document.error
        result = self.extract(node)
        if not result.is_ok:
            return result
        return Ok(Ok(result.value) if document.is_ok else Err(result.value))

    def extract(self, node: Node) -> Result:
        if isinstance(node, Primitive):
            return Ok(node.value)

        if isinstance(node, ArrayNode):
            values = []
            for item in node.items:
                result = self.extract(item)
                if not result.is_ok:
                    return result
                values.append(result.value)
            return Ok(values)

        if isinstance(node, ObjectNode):
            values = {}
            for key, child in node.entries.items():
                if key == PROTO_KEY:
                    continue
                result = self.extract(child)
                if not result.is_ok:
                    return result
                values[key] = result.value
            return Ok(values)

        if isinstance(node, FunCall):
            return self._call(node)

        raise TypeError(f"not an AST node: {node!r}")

    # ── calls ──────────────────────────────────────────────────────────────

    def _call(self, node: FunCall) -> Result:
        routine = self.registry.resolve(node.name)
        if routine is None:
            return Err(self._call_error(ErrorKind.INVALID_FUNCTION_NAME, node,
                                        f"no routine registered for {node.name!r}"))

        args = []
        for arg in node.args:
            result = self.extract(arg)
            if not result.is_ok:
                return result
            args.append(result.value)

        try:
            returned = routine(args, node.is_constructor)
        except Exception as e:
            logger.debug("routine %s raised %s: %s", node.name, type(e).__name__, e)
            return Err(self._call_error(ErrorKind.ERROR_IN_USER_SUPPLIED_FUNCTION, node,
                                        f"{node.name}: {type(e).__name__}: {e}"))

        if not is_result(returned):
            return Ok(returned)
        if returned.is_ok:
            return returned

        error = returned.error
        if isinstance(error, ParseError):
            return returned
        if isinstance(error, ErrorKind):
            return Err(self._call_error(error, node, f"rejected by routine {node.name}"))
        return Err(self._call_error(ErrorKind.ERROR_IN_USER_SUPPLIED_FUNCTION, node,
                                    f"{node.name}: {error!r}"))

    def _call_error(self, kind: ErrorKind, node: FunCall, detail: str) -> ParseError:
        if self.legacy_call_offsets:
            return ParseError(kind, 0, None, detail)
        return ParseError(kind, node.start, node.end, detail)


def extract(node: Node, registry: Optional[Mapping] = None, legacy_call_offsets: bool = True) -> Result:
    return Extractor(registry, legacy_call_offsets).extract(node)


def interpret(document: Result, registry: Optional[Mapping] = None, legacy_call_offsets: bool = True) -> Result:
    return Extractor(registry, legacy_call_offsets).interpret(document)
