"""Unit tests for the Dart lexical helpers and type parsing."""

import pytest

pytestmark = pytest.mark.fast

from modelfactory.parser import parse_type
from modelfactory.parser.dart_lexer import (
    build_views,
    find_matching,
    find_top_level_assign,
    parse_string_literal,
    read_annotations,
    split_top_level,
)
from modelfactory.parser.type_parser import normalize_type
from modelfactory.schemas import EnumType, ListType, NamedType, PrimitiveType


def test_views_preserve_offsets():
    content = "final a = '{x}'; // trailing {\n/* block { */ final b = 1;"
    views = build_views(content)

    assert len(views.code) == len(content)
    assert len(views.skeleton) == len(content)
    assert "'{x}'" in views.code
    assert "{" not in views.skeleton
    assert "trailing" not in views.code
    assert views.code.count("\n") == content.count("\n")


def test_nested_block_comments_are_masked():
    views = build_views("/* outer /* inner */ still comment */ class A {}")
    assert "still" not in views.code
    assert "class A {}" in views.code


def test_comment_markers_inside_strings_are_kept():
    views = build_views("final url = 'http://example.com'; // gone")
    assert "'http://example.com'" in views.code
    assert "gone" not in views.code


def test_find_matching_brackets():
    text = "f(a, {b: [c]}) + 1"
    assert find_matching(text, 1) == 13
    assert find_matching(text, 5) == 12
    assert find_matching("f(a", 1) == -1


def test_split_top_level_respects_nesting():
    text = "Map<String, int> a, b"
    pieces = [text[s:e] for s, e in split_top_level(text, angle=True)]
    assert pieces == ["Map<String, int> a", " b"]

    pieces = [text[s:e] for s, e in split_top_level("f(a, b), c")]
    assert pieces == ["f(a, b)", " c"]


@pytest.mark.parametrize(
    "text, expected",
    [
        ("int a = 1", 6),
        ("bool get x => a == b", -1),
        ("int a", -1),
        ("f(b = 1) = 2", 9),
    ],
)
def test_find_top_level_assign(text, expected):
    assert find_top_level_assign(text) == expected


@pytest.mark.parametrize(
    "literal, expected",
    [
        ("'John'", "John"),
        ('"\'John\'"', "'John'"),
        ("''", ""),
        ('"\'\'"', "''"),
        ("r'$5'", "$5"),
        ("'a' 'b'", "ab"),
        ("'''multi'''", "multi"),
        ("'tab\\there'", "tab\there"),
        ("'\\u0041'", "A"),
        ("42", None),
        ("null", None),
        ("'$name'", None),
        ("'a' + 'b'", None),
        ("", None),
    ],
)
def test_parse_string_literal(literal, expected):
    assert parse_string_literal(literal) == expected


def test_read_annotations_collects_arguments():
    views = build_views("@JsonKey(name: 'x') @FactoryDefault(\"'y'\") final String s;")
    annotations, pos = read_annotations(views, 0)

    assert [a.name for a in annotations] == ["JsonKey", "FactoryDefault"]
    assert annotations[0].arguments == "name: 'x'"
    assert annotations[1].arguments == "\"'y'\""
    assert views.code[pos:].startswith("final String s;")


def test_normalize_type():
    assert normalize_type("Map< String ,int >?") == "Map<String, int>?"
    assert normalize_type(" List<String> ") == "List<String>"


def test_parse_type_variants():
    registry = {"Color": ["red", "green"]}

    assert parse_type("String", registry) == (PrimitiveType(primitive="string"), False)
    assert parse_type("DateTime?", registry) == (PrimitiveType(primitive="datetime"), True)
    assert parse_type("Color", registry) == (EnumType(name="Color", constants=["red", "green"]), False)
    assert parse_type("Address?", registry) == (NamedType(name="Address"), True)
    assert parse_type("List<Color?>", registry) == (
        ListType(element_type=EnumType(name="Color", constants=["red", "green"]), element_nullable=True),
        False,
    )


def test_non_list_generics_are_named_types():
    type_ref, nullable = parse_type("Map<String,List<int>>")
    assert type_ref == NamedType(name="Map<String, List<int>>")
    assert not nullable
