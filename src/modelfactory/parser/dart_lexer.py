"""
Lexical helpers for the Dart front-end.

The parser never tokenizes Dart fully. Instead it works on two views of a
file that share character offsets with the original:

- code:     comments blanked out, string literals intact
- skeleton: comments and string contents blanked out

Structure (brackets, separators, keywords) is located on the skeleton, and
values (annotation arguments) are sliced from the code at the same offsets.
"""

import re
from typing import List, NamedTuple, Optional, Tuple

IDENTIFIER = r"[A-Za-z_$][A-Za-z0-9_$]*"

_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = {")", "]", "}"}
_ANNOTATION_NAME = re.compile(rf"@\s*((?:{IDENTIFIER}\.)*{IDENTIFIER})")
_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
}


class Annotation(NamedTuple):
    name: str                  # Last segment, e.g. "ModelFactory" for "@mf.ModelFactory"
    arguments: Optional[str]   # Text between the parentheses (from the code view), or None
    start: int
    end: int


class SourceViews(NamedTuple):
    code: str
    skeleton: str


def _is_identifier_char(ch: str) -> bool:
    return ch.isalnum() or ch in "_$"


def _skip_block_comment(text: str, start: int) -> int:
    # Dart block comments nest
    depth = 0
    i, n = start, len(text)
    while i < n:
        if text.startswith("/*", i):
            depth += 1
            i += 2
        elif text.startswith("*/", i):
            depth -= 1
            i += 2
            if depth == 0:
                return i
        else:
            i += 1
    return n


def _skip_interpolation(text: str, brace: int) -> int:
    depth = 0
    i, n = brace, len(text)
    while i < n:
        ch = text[i]
        if ch in "'\"":
            i = _skip_string(text, i)
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return n


def _skip_string(text: str, start: int) -> int:
    """Return the offset just past the string literal opening at `start`."""
    quote = text[start]
    raw = start > 0 and text[start - 1] in "rR" and (start == 1 or not _is_identifier_char(text[start - 2]))
    delim = quote * 3 if text.startswith(quote * 3, start) else quote
    i, n = start + len(delim), len(text)

    while i < n:
        ch = text[i]
        if not raw and ch == "\\":
            i += 2
            continue
        if not raw and text.startswith("${", i):
            i = _skip_interpolation(text, i + 1)
            continue
        if text.startswith(delim, i):
            return i + len(delim)
        if len(delim) == 1 and ch == "\n":
            # Unterminated single-line string
            return i
        i += 1
    return n


def _literal_spans(text: str) -> List[Tuple[str, int, int]]:
    spans = []
    i, n = 0, len(text)
    while i < n:
        if text.startswith("//", i):
            end = text.find("\n", i)
            end = n if end == -1 else end
            spans.append(("comment", i, end))
            i = end
        elif text.startswith("/*", i):
            end = _skip_block_comment(text, i)
            spans.append(("comment", i, end))
            i = end
        elif text[i] in "'\"":
            end = _skip_string(text, i)
            spans.append(("string", i, end))
            i = end
        else:
            i += 1
    return spans


def _blank(chars: List[str], start: int, end: int) -> None:
    for i in range(start, end):
        if chars[i] != "\n":
            chars[i] = " "


def build_views(content: str) -> SourceViews:
    """
    Build the code and skeleton views of a Dart source file.
    """
    code = list(content)
    skeleton = list(content)

    for kind, start, end in _literal_spans(content):
        if kind == "comment":
            _blank(code, start, end)
            _blank(skeleton, start, end)
        else:
            # Keep the quote characters so literals remain visible as tokens
            _blank(skeleton, start + 1, max(start + 1, end - 1))

    return SourceViews("".join(code), "".join(skeleton))


def find_matching(skeleton: str, open_index: int) -> int:
    """
    Index of the bracket closing the one at `open_index`, or -1.
    """
    stack = []
    for i in range(open_index, len(skeleton)):
        ch = skeleton[i]
        if ch in _OPENERS:
            stack.append(_OPENERS[ch])
        elif ch in _CLOSERS:
            if not stack or stack.pop() != ch:
                return -1
            if not stack:
                return i
    return -1


def split_top_level(text: str, sep: str = ",", angle: bool = False) -> List[Tuple[int, int]]:
    """
    Split `text` at separators outside of brackets.

    Args:
        text: Skeleton text (no string contents, no comments).
        sep: Single-character separator.
        angle: Also treat `<`/`>` as brackets (for type argument lists).

    Returns:
        (start, end) spans relative to `text`, including empty ones.
    """
    spans = []
    depth = 0
    start = 0
    for i, ch in enumerate(text):
        if ch in _OPENERS or (angle and ch == "<"):
            depth += 1
        elif ch in _CLOSERS or (angle and ch == ">"):
            depth -= 1
        elif ch == sep and depth == 0:
            spans.append((start, i))
            start = i + 1
    spans.append((start, len(text)))
    return spans


def find_top_level_assign(text: str) -> int:
    """
    Index of the first top-level `=` that is an assignment, or -1.

    Ignores `==`, `=>`, `<=`, `>=` and `!=`.
    """
    depth = 0
    for i, ch in enumerate(text):
        if ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS:
            depth -= 1
        elif ch == "=" and depth == 0:
            prev = text[i - 1] if i > 0 else ""
            nxt = text[i + 1] if i + 1 < len(text) else ""
            if nxt in "=>" or prev in "=<>!":
                continue
            return i
    return -1


def skip_whitespace(text: str, pos: int) -> int:
    while pos < len(text) and text[pos].isspace():
        pos += 1
    return pos


def read_annotations(views: SourceViews, pos: int) -> Tuple[List[Annotation], int]:
    """
    Read consecutive annotations starting at `pos`.

    Returns:
        The annotations found and the offset of the first non-annotation token.
    """
    annotations: List[Annotation] = []
    skeleton = views.skeleton
    pos = skip_whitespace(skeleton, pos)

    while pos < len(skeleton) and skeleton[pos] == "@":
        match = _ANNOTATION_NAME.match(skeleton, pos)
        if not match:
            break
        name = match.group(1).split(".")[-1]
        end = match.end()
        arguments = None

        paren = skip_whitespace(skeleton, end)
        if paren < len(skeleton) and skeleton[paren] == "(":
            close = find_matching(skeleton, paren)
            if close == -1:
                break
            arguments = views.code[paren + 1:close]
            end = close + 1

        annotations.append(Annotation(name, arguments, pos, end))
        pos = skip_whitespace(skeleton, end)

    return annotations, pos


def _decode_escape(body: str, i: int) -> Tuple[str, int]:
    ch = body[i + 1] if i + 1 < len(body) else ""
    if ch in _ESCAPES:
        return _ESCAPES[ch], i + 2
    if ch == "x":
        return chr(int(body[i + 2:i + 4], 16)), i + 4
    if ch == "u":
        if body.startswith("{", i + 2):
            close = body.index("}", i + 2)
            return chr(int(body[i + 3:close], 16)), close + 1
        return chr(int(body[i + 2:i + 6], 16)), i + 6
    return ch, i + 2


def _decode_literal(literal: str) -> Optional[str]:
    raw = literal[0] in "rR"
    if raw:
        literal = literal[1:]
    quote = literal[0]
    delim = quote * 3 if literal.startswith(quote * 3) and len(literal) >= 6 else quote
    if len(literal) < 2 * len(delim) or not literal.endswith(delim):
        return None
    body = literal[len(delim):-len(delim)]

    if raw:
        return body

    out = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\":
            try:
                decoded, i = _decode_escape(body, i)
            except ValueError:
                return None
            out.append(decoded)
        elif ch == "$":
            # Interpolation cannot be evaluated statically
            return None
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def parse_string_literal(text: str) -> Optional[str]:
    """
    Decode a Dart string literal expression, or return None if `text` is
    anything else. Adjacent literals are concatenated, as in Dart.

    Examples:
        "'John'"        -> John
        '"\'x\'"'       -> 'x'
        "r'$5'"         -> $5
        "42"            -> None
    """
    text = text.strip()
    if not text:
        return None

    parts = []
    for kind, start, end in _literal_spans(text):
        if kind != "string":
            return None
        parts.append((start, end))

    pieces = []
    cursor = 0
    for start, end in parts:
        # Allow an `r` prefix directly before the quote
        if start > 0 and text[start - 1] in "rR":
            start -= 1
        if text[cursor:start].strip():
            return None
        decoded = _decode_literal(text[start:end])
        if decoded is None:
            return None
        pieces.append(decoded)
        cursor = end

    if not pieces or text[cursor:].strip():
        return None
    return "".join(pieces)


def line_of(content: str, index: int) -> int:
    return content.count("\n", 0, index) + 1
