import pytest

from ajaxread import (
    UNDEFINED, ArrayNode, Err, ErrorKind, FunCall, ObjectNode, Ok, ParseError, Primitive,
    Registry, constructor, data_dictionary,
)
from ajaxread.semantic import Extractor, extract, interpret


def test_primitives_pass_through():
    for value in (1, 2.5, "s", True, False, None, UNDEFINED):
        assert extract(Primitive(value)) == Ok(value)


def test_nested_collections():
    node = ObjectNode({"a": ArrayNode([Primitive(1), ObjectNode({"b": Primitive(None)})])})
    assert extract(node) == Ok({"a": [1, {"b": None}]})


def test_object_keeps_key_order():
    node = ObjectNode({"z": Primitive(1), "a": Primitive(2), "m": Primitive(3)})
    assert list(extract(node).value) == ["z", "a", "m"]


def test_proto_key_is_never_extracted():
    node = ObjectNode({"__proto__": Primitive(1), "a": Primitive(2)})
    assert extract(node) == Ok({"a": 2})


def test_data_dictionary():
    call = FunCall("Data.Dictionary", [
        Primitive(""),
        ArrayNode([ArrayNode([Primitive("a"), Primitive(1)]), ArrayNode([Primitive("b"), Primitive(2)])]),
    ], is_constructor=True)
    result = extract(call)
    assert result == Ok({"a": 1, "b": 2})
    assert list(result.value) == ["a", "b"]


def test_data_dictionary_function():
    assert data_dictionary("", [["a", 1], ["__proto__", 2], ["a", 3]]) == {"a": 3}


def test_data_dictionary_requires_new():
    call = FunCall("Data.Dictionary", [Primitive(""), ArrayNode()], is_constructor=False)
    assert extract(call) == Err(ParseError(ErrorKind.INVALID_FUNCTION_NAME, 0))


def test_data_dictionary_with_malformed_pairs():
    call = FunCall("Data.Dictionary", [Primitive(""), ArrayNode([Primitive(1)])], is_constructor=True)
    result = extract(call)
    assert result.error.kind is ErrorKind.ERROR_IN_USER_SUPPLIED_FUNCTION
    assert result.error.start == 0


@pytest.mark.parametrize("node", [
    FunCall("Data.Oops", is_constructor=True),
    ArrayNode([Primitive(1), FunCall("Data.Oops")]),
    ObjectNode({"foo": FunCall("Data.Oops", is_constructor=True)}),
])
def test_unregistered_functions(node):
    assert extract(node) == Err(ParseError(ErrorKind.INVALID_FUNCTION_NAME, 0))


def test_registered_non_callable_is_an_invalid_name():
    assert extract(FunCall("Data.X"), {"Data.X": 42}).error.kind is ErrorKind.INVALID_FUNCTION_NAME


def test_routine_receives_extracted_args_and_constructor_flag():
    seen = []

    def routine(args, is_constructor):
        seen.append((args, is_constructor))
        return sum(args)

    registry = {"Math.sum": routine}
    assert extract(FunCall("Math.sum", [Primitive(1), Primitive(2)]), registry) == Ok(3)
    assert extract(FunCall("Math.sum", [Primitive(4)], is_constructor=True), registry) == Ok(4)
    assert seen == [([1, 2], False), ([4], True)]


def test_argument_failure_stops_before_the_routine_runs():
    calls = []
    registry = {"F": lambda args, ctor: calls.append(args)}
    result = extract(FunCall("F", [FunCall("Nope")]), registry)
    assert result.error.kind is ErrorKind.INVALID_FUNCTION_NAME
    assert "Nope" in result.error.detail
    assert calls == []


def test_name_is_resolved_before_arguments():
    result = extract(FunCall("Outer", [FunCall("Inner")]))
    assert "Outer" in result.error.detail


def test_raising_routine_is_converted():
    def boom(args, ctor):
        raise RuntimeError("kaboom")

    result = extract(FunCall("Boom"), {"Boom": boom})
    assert result == Err(ParseError(ErrorKind.ERROR_IN_USER_SUPPLIED_FUNCTION, 0))
    assert "kaboom" in result.error.detail


def test_routine_results():
    registry = {
        "Ok": lambda args, ctor: Ok("fine"),
        "Kind": lambda args, ctor: Err(ErrorKind.INVALID_FUNCTION_NAME),
        "Parse": lambda args, ctor: Err(ParseError(ErrorKind.UNEXPECTED_TOKEN, 7, 8)),
        "Other": lambda args, ctor: Err("nope"),
    }
    assert extract(FunCall("Ok"), registry) == Ok("fine")
    assert extract(FunCall("Kind"), registry) == Err(ParseError(ErrorKind.INVALID_FUNCTION_NAME, 0))
    assert extract(FunCall("Parse"), registry) == Err(ParseError(ErrorKind.UNEXPECTED_TOKEN, 7, 8))
    assert extract(FunCall("Other"), registry).error.kind is ErrorKind.ERROR_IN_USER_SUPPLIED_FUNCTION


def test_call_site_offsets():
    extractor = Extractor(legacy_call_offsets=False)
    call = FunCall("Data.Oops", is_constructor=True, start=3, end=18)
    assert extractor.extract(call) == Err(ParseError(ErrorKind.INVALID_FUNCTION_NAME, 3, 18))


def test_constructor_helper():
    registry = Registry({"Data.Pair": constructor(lambda a, b: (a, b))})
    assert extract(FunCall("Data.Pair", [Primitive(1), Primitive(2)], is_constructor=True), registry) == Ok((1, 2))
    assert extract(FunCall("Data.Pair", [Primitive(1), Primitive(2)]), registry).error.kind \
        is ErrorKind.INVALID_FUNCTION_NAME
    # wrong arity raises inside the routine
    assert extract(FunCall("Data.Pair", [Primitive(1)], is_constructor=True), registry).error.kind \
        is ErrorKind.ERROR_IN_USER_SUPPLIED_FUNCTION


def test_registry_is_read_only_and_layered():
    custom = lambda args, ctor: "custom"
    registry = Registry({"Data.Dictionary": custom, "X": custom})
    assert registry["Data.Dictionary"] is custom
    assert set(registry) == {"Data.Dictionary", "X"}
    with pytest.raises(TypeError):
        registry["Y"] = custom
    assert "Data.Dictionary" not in Registry(include_builtins=False)
    extended = Registry().extended({"Y": custom})
    assert set(extended) == {"Data.Dictionary", "Y"}


def test_caller_mapping_is_not_mutated():
    routines = {"X": lambda args, ctor: 1}
    snapshot = dict(routines)
    extract(FunCall("X"), routines)
    assert routines == snapshot


def test_interpret_keeps_document_flag():
    assert interpret(Ok(Primitive(1))) == Ok(Ok(1))
    assert interpret(Err(ObjectNode({"m": Primitive("x")}))) == Ok(Err({"m": "x"}))
    assert interpret(Err(FunCall("Nope"))) == Err(ParseError(ErrorKind.INVALID_FUNCTION_NAME, 0))


def test_unknown_node_type():
    with pytest.raises(TypeError):
        extract("not a node")
