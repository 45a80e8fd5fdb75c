import dataclasses

import pytest

from ajaxread import (
    UNDEFINED, ArrayNode, Err, ErrorKind, FunCall, ObjectNode, Ok, ParseError, Primitive,
    to_lark_tree,
)
from ajaxread.syntax import parse, parse_bare_value, parse_value, tokenize


def doc(text):
    return parse(tokenize(text).value)


def bare(text):
    return parse_bare_value(tokenize(text).value)


def test_object_document():
    assert doc('{"foo": 1};/*') == Ok(Ok(ObjectNode({"foo": Primitive(1)})))


def test_primitives_document():
    assert doc("[undefined, null, true, false, 0];/*") == Ok(Ok(ArrayNode([
        Primitive(UNDEFINED), Primitive(None), Primitive(True), Primitive(False), Primitive(0),
    ])))


def test_error_document():
    assert doc('null; r.error = {"foo": "bar"};/*') == Ok(Err(ObjectNode({"foo": Primitive("bar")})))


def test_null_without_full_prologue_is_a_plain_value():
    assert doc("null;/*") == Ok(Ok(Primitive(None)))
    assert doc("null; r.error;/*").error.kind is ErrorKind.MISSING_EPILOGUE


def test_prologue_without_value():
    assert doc("null; r.error =") == Err(ParseError(ErrorKind.UNEXPECTED_END_OF_INPUT, 14, 15))


def test_numbers_resolve_at_parse_time():
    assert bare("1.5") == Ok(Primitive(1.5))
    assert bare("7") == Ok(Primitive(7))
    assert isinstance(bare("7").value.value, int)


def test_primitives_compare_by_type():
    assert Primitive(1) != Primitive(True)
    assert Primitive(0) != Primitive(False)
    assert Primitive(1.0) != Primitive(1)


def test_empty_collections():
    assert bare("[]") == Ok(ArrayNode())
    assert bare("{}") == Ok(ObjectNode())
    assert bare("f()") == Ok(FunCall("f"))


def test_constructor_call():
    result = bare('new Data.Dictionary("", [["a", 1]])')
    assert result == Ok(FunCall(
        "Data.Dictionary",
        [Primitive(""), ArrayNode([ArrayNode([Primitive("a"), Primitive(1)])])],
        is_constructor=True,
    ))
    call = result.value
    assert (call.start, call.end) == (0, 35)


def test_plain_call_with_dotted_name():
    result = bare("[Foo.bar.baz(1, 'x')]")
    call = result.value.items[0]
    assert call == FunCall("Foo.bar.baz", [Primitive(1), Primitive("x")], is_constructor=False)
    assert (call.start, call.end) == (1, 20)


def test_proto_key_is_dropped_wherever_it_appears():
    for text in ('{"__proto__": 1, "a": 2, "b": 3}',
                 '{"a": 2, "__proto__": 1, "b": 3}',
                 '{"a": 2, "b": 3, "__proto__": 1}'):
        node = bare(text).value
        assert list(node.entries) == ["a", "b"]


def test_proto_value_is_still_parsed():
    assert bare('{"__proto__": [}').error == ParseError(ErrorKind.UNEXPECTED_TOKEN, 15, 16)


def test_duplicate_keys_keep_first_position_and_last_value():
    node = bare('{"a": 1, "b": 2, "a": 3}').value
    assert list(node.entries.items()) == [("a", Primitive(3)), ("b", Primitive(2))]


def test_parse_value_returns_next_index():
    tokens = tokenize("[1] x").value
    assert parse_value(tokens, 0) == Ok((ArrayNode([Primitive(1)]), 3))


def test_bare_value_must_consume_all_tokens():
    assert bare("1 2") == Err(ParseError(ErrorKind.TRAILING_TOKENS, 2, 3))
    assert bare("1;/*") == Err(ParseError(ErrorKind.TRAILING_TOKENS, 1, 2))


def test_empty_token_list():
    assert bare("") == Err(ParseError(ErrorKind.UNEXPECTED_END_OF_INPUT, 0, 0))


def test_trailing_comma_is_rejected():
    assert bare("[1,]") == Err(ParseError(ErrorKind.UNEXPECTED_TOKEN, 3, 4))


def test_nodes_are_immutable():
    node = bare('{"a": [1]}').value
    with pytest.raises(dataclasses.FrozenInstanceError):
        node.entries = {}
    with pytest.raises(TypeError):
        node.entries["b"] = Primitive(2)
    assert isinstance(node.entries["a"].items, tuple)


def test_to_lark_tree():
    tree = to_lark_tree(bare('{"a": [undefined, new X(1)]}').value)
    assert tree.data == "object"
    text = tree.pretty()
    assert "new_call" in text
    assert "undefined" in text
    with pytest.raises(TypeError):
        to_lark_tree("not a node")


def test_productions_check_their_opening_token():
    from ajaxread.syntax.parser import parse_array, parse_object

    tokens = tokenize("1").value
    assert parse_array(tokens, 0) == Err(ParseError(ErrorKind.EXPECTED_OPEN_BRACKET, 0, 1))
    assert parse_object(tokens, 0) == Err(ParseError(ErrorKind.EXPECTED_OPEN_BRACE, 0, 1))
