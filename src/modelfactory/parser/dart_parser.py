"""
Discovery of @ModelFactory-annotated declarations in Dart sources.

Regex-driven, like the rest of the front-end: it recognizes the declaration
shapes the generator needs (annotated classes, their public instance fields,
enums) and skips everything else.
"""

from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from modelfactory.logging_config import logger
from modelfactory.schemas import ClassDescriptor, FieldDescriptor, ParsedLibrary
from .config import (
    CLASS_DEFAULTS_ARGUMENT,
    DECLARATION_QUERIES,
    DECLARATOR,
    ENUM_QUERY,
    FIELD_ANNOTATION,
    FIELD_DECLARATION,
    FIELD_MODIFIERS,
    MODEL_ANNOTATION,
    MODEL_ANNOTATION_QUERY,
    PART_DIRECTIVE_QUERY,
    TYPE_SHAPE,
)
from .dart_lexer import (
    Annotation,
    SourceViews,
    build_views,
    find_matching,
    find_top_level_assign,
    line_of,
    parse_string_literal,
    read_annotations,
    skip_whitespace,
    split_top_level,
)
from .type_parser import parse_type


def extract_enums(views: SourceViews) -> Dict[str, List[str]]:
    """
    Find enum declarations and their constants in declaration order.

    Handles enhanced enums: constants end at the first top-level `;`.
    """
    enums: Dict[str, List[str]] = {}
    skeleton = views.skeleton

    for match in ENUM_QUERY.finditer(skeleton):
        name = match.group(1)
        open_brace = match.end() - 1
        close_brace = find_matching(skeleton, open_brace)
        if close_brace == -1:
            logger.warning(f"Unterminated enum body for '{name}'")
            continue

        body = skeleton[open_brace + 1:close_brace]
        _, constants_end = split_top_level(body, sep=";")[0]
        constants_section = body[:constants_end]

        constants = []
        for start, end in split_top_level(constants_section):
            offset = open_brace + 1 + start
            _, pos = read_annotations(views, offset)
            piece = skeleton[pos:open_brace + 1 + end]
            constant = piece.strip().split("(")[0].split("<")[0].strip()
            if constant:
                constants.append(constant)

        enums[name] = constants
        logger.debug(f"Found enum: {name} with {len(constants)} constant(s)")

    return enums


def _detect_declaration(skeleton: str, pos: int) -> Tuple[str, str, int]:
    """
    Classify the declaration starting at `pos`.

    Returns:
        (element kind, element name, offset just past the matched header)
    """
    for kind, query in DECLARATION_QUERIES:
        match = query.match(skeleton, pos)
        if match:
            return kind, match.group(1) or "<unnamed>", match.end()
    return "unknown", "<unknown>", pos


def _iter_members(skeleton: str, body_start: int, body_end: int) -> Iterator[Tuple[int, int, bool]]:
    """
    Yield (start, end, is_statement) for each top-level member of a class body.

    Statement members end with `;`; block members (methods, constructors with
    bodies) end with the `}` closing their body.
    """
    depth = 0
    member_start = body_start
    block_is_initializer = False
    i = body_start

    while i < body_end:
        ch = skeleton[i]
        if ch in "([{":
            if depth == 0 and ch == "{":
                prefix = skeleton[member_start:i]
                assign = find_top_level_assign(prefix)
                # `= {...}` is a field initializer, not a body
                block_is_initializer = assign != -1 and "(" not in _strip_annotations(prefix[:assign])
            depth += 1
        elif ch in ")]}":
            depth -= 1
            if depth == 0 and ch == "}" and not block_is_initializer:
                yield member_start, i + 1, False
                member_start = i + 1
        elif ch == ";" and depth == 0:
            yield member_start, i + 1, True
            member_start = i + 1
            block_is_initializer = False
        i += 1


def _strip_annotations(text: str) -> str:
    views = SourceViews(text, text)
    _, pos = read_annotations(views, 0)
    return text[pos:]


def _declarator_names(skeleton: str, decl_start: int, rest_end: int, assign: int) -> Tuple[str, List[str]]:
    """
    Split `Type a, b` (and `Type a = x, b = y`) into the declaration head and
    extra declarator names.
    """
    head_end = assign if assign != -1 else rest_end
    head = skeleton[decl_start:head_end]
    spans = split_top_level(head, angle=True)
    first = head[spans[0][0]:spans[0][1]].strip()
    extra = [head[s:e] for s, e in spans[1:]]

    if assign != -1:
        # Declarators after the first initializer: `= 1, b = 2`
        tail = skeleton[assign + 1:rest_end]
        for s, e in split_top_level(tail)[1:]:
            piece = tail[s:e]
            inner_assign = find_top_level_assign(piece)
            extra.append(piece[:inner_assign] if inner_assign != -1 else piece)

    names = []
    for candidate in extra:
        match = DECLARATOR.match(candidate)
        if match:
            names.append(match.group(1))
    return first, names


def _parse_member(
    views: SourceViews,
    start: int,
    end: int,
    enum_registry: Dict[str, List[str]],
    field_defaults: Dict[str, str],
) -> List[FieldDescriptor]:
    skeleton = views.skeleton
    annotations, pos = read_annotations(views, start)

    # Drop the trailing `;`
    rest_end = end - 1
    rest = skeleton[pos:rest_end]
    if not rest.strip():
        return []

    assign = find_top_level_assign(rest)
    head = rest[:assign] if assign != -1 else rest
    if "(" in head or "=>" in rest:
        # Methods, getters, constructors, function-typed fields
        return []

    first, extra_names = _declarator_names(
        skeleton, pos, rest_end, pos + assign if assign != -1 else -1
    )
    match = FIELD_DECLARATION.match(first)
    if not match:
        logger.debug(f"Skipping member without declared type: {first!r}")
        return []

    modifiers = match.group("modifiers").split()
    type_str = match.group("type").strip()
    if type_str in FIELD_MODIFIERS or type_str == "var" or not TYPE_SHAPE.match(type_str):
        logger.debug(f"Skipping untyped member: {first!r}")
        return []
    if "static" in modifiers:
        return []

    declared_type, is_nullable = parse_type(type_str, enum_registry)
    override = _field_default(annotations)

    fields = []
    for name in [match.group("name")] + extra_names:
        if name.startswith("_"):
            continue
        fields.append(FieldDescriptor(name=name, declared_type=declared_type, is_nullable=is_nullable))
        if override is not None:
            field_defaults[name] = override
    return fields


def _field_default(annotations: List[Annotation]) -> Optional[str]:
    for annotation in annotations:
        if annotation.name != FIELD_ANNOTATION or annotation.arguments is None:
            continue
        code = parse_string_literal(annotation.arguments)
        if code is None:
            logger.warning(f"Ignoring @{FIELD_ANNOTATION} with non-string argument: {annotation.arguments.strip()!r}")
            continue
        return code
    return None


def _class_defaults(views: SourceViews, annotation: Annotation) -> Dict[str, str]:
    """
    Read `defaults: {'field': "code", ...}` from a @ModelFactory annotation.
    """
    if not annotation.arguments:
        return {}

    # Arguments start right after the opening parenthesis
    arg_start = annotation.end - 1 - len(annotation.arguments)
    arg_skeleton = views.skeleton[arg_start:annotation.end - 1]

    for s, e in split_top_level(arg_skeleton):
        piece = arg_skeleton[s:e]
        colon = piece.find(":")
        if colon == -1 or piece[:colon].strip() != CLASS_DEFAULTS_ARGUMENT:
            continue

        value_start = arg_start + s + colon + 1
        value_skeleton = views.skeleton[value_start:arg_start + e]
        open_brace = value_skeleton.find("{")
        if open_brace == -1:
            # `defaults: null` or a non-literal reference
            if value_skeleton.strip() not in ("", "null"):
                logger.warning(f"Ignoring non-literal {CLASS_DEFAULTS_ARGUMENT}: {value_skeleton.strip()!r}")
            return {}

        map_start = value_start + open_brace
        map_end = find_matching(views.skeleton, map_start)
        if map_end == -1:
            return {}
        return _parse_map_literal(views, map_start + 1, map_end)

    return {}


def _parse_map_literal(views: SourceViews, start: int, end: int) -> Dict[str, str]:
    result: Dict[str, str] = {}
    body = views.skeleton[start:end]

    for s, e in split_top_level(body):
        entry = body[s:e]
        if not entry.strip():
            continue
        colon_spans = split_top_level(entry, sep=":")
        if len(colon_spans) < 2:
            continue
        key_end = colon_spans[0][1]
        key = parse_string_literal(views.code[start + s:start + s + key_end])
        value = parse_string_literal(views.code[start + s + key_end + 1:start + e])
        if key is None or value is None:
            logger.warning(
                f"Ignoring malformed class default: {views.code[start + s:start + e].strip()!r}"
            )
            continue
        result[key] = value

    return result


def _parse_class_body(
    views: SourceViews,
    header_end: int,
    enum_registry: Dict[str, List[str]],
) -> Tuple[List[FieldDescriptor], Dict[str, str]]:
    skeleton = views.skeleton
    open_brace = skeleton.find("{", header_end)
    if open_brace == -1:
        return [], {}
    close_brace = find_matching(skeleton, open_brace)
    if close_brace == -1:
        logger.warning("Unterminated class body")
        return [], {}

    fields: List[FieldDescriptor] = []
    field_defaults: Dict[str, str] = {}
    for start, end, is_statement in _iter_members(skeleton, open_brace + 1, close_brace):
        if is_statement:
            fields.extend(_parse_member(views, start, end, enum_registry, field_defaults))
    return fields, field_defaults


def parse_dart_source(
    file_path: Path,
    content: str,
    enum_registry: Optional[Dict[str, List[str]]] = None,
) -> ParsedLibrary:
    """
    Parse one Dart library.

    Args:
        file_path: Path of the library (used for reporting only).
        content: File content.
        enum_registry: Enums declared elsewhere in the project. Enums declared
            in this file take precedence.

    Returns:
        ParsedLibrary with every @ModelFactory-annotated element.
    """
    logger.debug(f"Parsing Dart file: {file_path}")
    views = build_views(content)

    local_enums = extract_enums(views)
    registry = {**(enum_registry or {}), **local_enums}

    models: List[ClassDescriptor] = []
    for match in MODEL_ANNOTATION_QUERY.finditer(views.skeleton):
        annotations, pos = read_annotations(views, match.start())
        if not annotations or annotations[0].name != MODEL_ANNOTATION:
            continue

        kind, name, header_end = _detect_declaration(views.skeleton, skip_whitespace(views.skeleton, pos))
        line_number = line_of(content, match.start())
        descriptor = ClassDescriptor(
            name=name,
            element_kind=kind,
            class_defaults=_class_defaults(views, annotations[0]),
            file_path=str(file_path),
            line=line_number,
        )

        if kind == "class":
            fields, field_defaults = _parse_class_body(views, header_end, registry)
            descriptor.fields = fields
            descriptor.field_defaults = field_defaults

        models.append(descriptor)
        logger.debug(f"Found @{MODEL_ANNOTATION} {kind}: {name} on line {line_number} ({len(descriptor.fields)} field(s))")

    part_directives = [m.group(2) for m in PART_DIRECTIVE_QUERY.finditer(views.code)]

    return ParsedLibrary(
        file_path=str(file_path),
        models=models,
        enums=local_enums,
        part_directives=part_directives,
    )
