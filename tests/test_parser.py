"""Unit tests for the Dart discovery front-end."""

import pytest
from pydantic import ValidationError
from pathlib import Path

pytestmark = pytest.mark.fast

from modelfactory.exceptions import ConfigError, ParserError
from modelfactory.parser import collect_enums, discover_models, parse_file
from modelfactory.parser.dart_parser import parse_dart_source
from modelfactory.schemas import ClassDescriptor, EnumType, ListType, NamedType, PrimitiveType

TEST_FILES_DIR = Path(__file__).parent / "test_files"
USER_DART = TEST_FILES_DIR / "user.dart"
PERSON_DART = TEST_FILES_DIR / "person.dart"
ROLE_DART = TEST_FILES_DIR / "role.dart"
ADDRESS_DART = TEST_FILES_DIR / "address.dart"


def test_parse_user_model_fields_in_declaration_order():
    """
    Public instance fields are extracted in order; static, private and
    getter members are skipped.
    """
    library = parse_file(USER_DART)

    assert len(library.models) == 1
    user = library.models[0]
    assert user.name == "User"
    assert user.element_kind == "class"
    assert user.line == 11

    assert [f.name for f in user.fields] == [
        "id", "name", "email", "score", "balance", "isAdmin",
        "createdAt", "tags", "luckyNumbers", "status", "role", "address",
    ]


def test_parse_user_model_field_types():
    user = parse_file(USER_DART).models[0]
    fields = {f.name: f for f in user.fields}

    assert fields["id"].declared_type == PrimitiveType(primitive="integer")
    assert fields["score"].declared_type == PrimitiveType(primitive="float")
    assert fields["balance"].declared_type == PrimitiveType(primitive="number")
    assert fields["isAdmin"].declared_type == PrimitiveType(primitive="boolean")
    assert fields["createdAt"].declared_type == PrimitiveType(primitive="datetime")

    assert fields["email"].is_nullable
    assert fields["email"].declared_type == PrimitiveType(primitive="string")

    assert fields["tags"].declared_type == ListType(element_type=PrimitiveType(primitive="string"))
    assert fields["luckyNumbers"].is_nullable

    assert fields["status"].declared_type == EnumType(
        name="Status", constants=["active", "suspended", "deleted"]
    )
    assert fields["address"].declared_type == NamedType(name="Address")


def test_enum_from_other_file_is_named_without_registry():
    user = parse_file(USER_DART).models[0]
    role = next(f for f in user.fields if f.name == "role")
    assert role.declared_type == NamedType(name="UserRole")


def test_discover_models_shares_enum_registry():
    libraries = discover_models([USER_DART, ROLE_DART])
    user = libraries[0].models[0]
    role = next(f for f in user.fields if f.name == "role")
    assert role.declared_type == EnumType(name="UserRole", constants=["admin", "editor", "viewer"])


def test_collect_enums_handles_enhanced_enums():
    enums = collect_enums([ROLE_DART, USER_DART])
    assert enums["UserRole"] == ["admin", "editor", "viewer"]
    assert enums["Status"] == ["active", "suspended", "deleted"]


def test_part_directives_are_recorded():
    library = parse_file(USER_DART)
    assert library.part_directives == ["user.factory.g.dart"]


def test_class_and_field_level_defaults():
    library = parse_file(PERSON_DART)
    person = next(m for m in library.models if m.name == "Person")

    # 'nickname': 30 is not a string and is dropped
    assert person.class_defaults == {"name": "'John'", "age": "20"}
    assert person.field_defaults == {
        "email": "'john@example.com'",
        "address": "Address(street: 'Main St', city: 'Springfield')",
    }
    assert [f.name for f in person.fields] == ["email", "name", "age", "nickname", "address"]


def test_non_class_targets_are_reported_with_their_kind():
    library = parse_file(PERSON_DART)
    kinds = {m.name: m.element_kind for m in library.models}
    assert kinds == {"Person": "class", "notAClass": "function", "Empty": "class"}

    empty = next(m for m in library.models if m.name == "Empty")
    assert empty.fields == []


def test_block_comments_are_ignored():
    library = parse_file(ADDRESS_DART)
    address = library.models[0]
    assert address.name == "Address"
    assert address.line == 7
    assert [f.name for f in address.fields] == ["street", "city", "zipCode"]


@pytest.mark.parametrize(
    "declaration, expected_kind, expected_name",
    [
        ("enum Color { red }", "enum", "Color"),
        ("mixin Greeter {}", "mixin", "Greeter"),
        ("extension StringX on String {}", "extension", "StringX"),
        ("typedef Json = Map<String, dynamic>;", "typedef", "Json"),
        ("final answer = 42;", "variable", "answer"),
        ("abstract class Shape {}", "class", "Shape"),
    ],
)
def test_declaration_kinds(declaration, expected_kind, expected_name):
    library = parse_dart_source(Path("inline.dart"), f"@ModelFactory()\n{declaration}\n")
    model = library.models[0]
    assert model.element_kind == expected_kind
    assert model.name == expected_name


def test_inline_source_edge_cases():
    source = '''
@ModelFactory()
class Inventory {
  final Map<String, int> counts = {'a': 1};
  final int first, second;
  late final List<List<String>> grid;
  var untyped;
  final void Function(int) callback;
  @FactoryDefault(42)
  final int notAString;
  @FactoryDefault(r'$5')
  final String price;
}
'''
    library = parse_dart_source(Path("inventory.dart"), source)
    inventory = library.models[0]
    fields = {f.name: f for f in inventory.fields}

    assert list(fields) == ["counts", "first", "second", "grid", "notAString", "price"]
    assert fields["counts"].declared_type == NamedType(name="Map<String, int>")
    assert fields["grid"].declared_type == ListType(
        element_type=ListType(element_type=PrimitiveType(primitive="string"))
    )
    assert inventory.field_defaults == {"price": "$5"}


def test_prefixed_annotation_is_recognized():
    source = "@mf.ModelFactory()\nclass Tag {\n  final String label;\n}\n"
    library = parse_dart_source(Path("tag.dart"), source)
    assert [m.name for m in library.models] == ["Tag"]


def test_annotation_inside_string_is_ignored():
    source = "const doc = '@ModelFactory() class Fake {}';\n"
    library = parse_dart_source(Path("doc.dart"), source)
    assert library.models == []


def test_parse_unsupported_extension_raises():
    with pytest.raises(ConfigError):
        parse_file(TEST_FILES_DIR / "notes.txt")


def test_parse_missing_file_raises_parser_error(tmp_path):
    with pytest.raises(ParserError):
        parse_file(tmp_path / "missing.dart")


def test_discover_models_uses_external_enum_registry():
    libraries = discover_models([USER_DART], {"UserRole": ["viewer", "admin"]})
    role = next(f for f in libraries[0].models[0].fields if f.name == "role")
    assert role.declared_type == EnumType(name="UserRole", constants=["viewer", "admin"])


def test_discover_models_collects_unreadable_files(tmp_path):
    broken = tmp_path / "broken.dart"
    broken.write_bytes(b"\xff\xfe\x00")

    with pytest.raises(ParserError):
        discover_models([broken, ADDRESS_DART])

    failures = []
    libraries = discover_models([broken, ADDRESS_DART], failures=failures)
    assert [lib.models[0].name for lib in libraries] == ["Address"]
    assert [e.file_path for e in failures] == [str(broken)]


def test_collect_enums_skips_unreadable_files(tmp_path):
    broken = tmp_path / "broken.dart"
    broken.write_bytes(b"\xff\xfe\x00")
    assert collect_enums([broken, ROLE_DART]) == {"UserRole": ["admin", "editor", "viewer"]}


def test_element_kind_is_restricted_to_known_declarations():
    assert ClassDescriptor(name="helper", element_kind="function").element_kind == "function"
    with pytest.raises(ValidationError):
        ClassDescriptor(name="Thing", element_kind="struct")
