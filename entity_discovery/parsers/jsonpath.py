"""
JSONPath extraction.

A small JSONPath dialect compiled once into a typed AST and evaluated against
plain JSON values (dicts, lists, scalars) as produced by the stream reader.

Supported syntax:
    $                 root (optional: "id" is the same as "$.id")
    .name ['name']    object member
    [0] [-1]          array element (negative counts from the end)
    [0,2] ['a','b']   union
    [1:5:2]           array slice
    * [*]             every member/element
    ..name ..*        recursive descent

Results are returned in document order. Recursive descent is pre-order: a
node's own matches come before those of its descendants.
"""

import re
from dataclasses import dataclass
from typing import Any, Iterator, Union

from entity_discovery import EntityDiscoveryError


class PathSyntaxError(EntityDiscoveryError):
    """Raised when a JSONPath expression cannot be compiled."""

    def __init__(self, message: str, expression: str, position: int | None = None):
        if position is not None:
            message = f"{message} at position {position} in {expression!r}"
        else:
            message = f"{message} in {expression!r}"
        super().__init__(message)
        self.expression = expression
        self.position = position


# =============================================================================
# AST
# =============================================================================

@dataclass(frozen=True)
class Name:
    """Object member by key."""
    key: str


@dataclass(frozen=True)
class Index:
    """Array element by position."""
    index: int


@dataclass(frozen=True)
class Slice:
    """Array elements by [start:stop:step]."""
    start: int | None = None
    stop: int | None = None
    step: int | None = None


@dataclass(frozen=True)
class Wildcard:
    """Every member of an object or element of an array."""
    pass


Selector = Union[Name, Index, Slice, Wildcard]


@dataclass(frozen=True)
class Segment:
    """One step of a path: a union of selectors, optionally applied to all descendants."""
    selectors: tuple[Selector, ...]
    descendant: bool = False


# =============================================================================
# Parser
# =============================================================================

_NAME_RE = re.compile(r"[^.\[\]\s'\"]+")
_INT_RE = re.compile(r"-?\d+")
_SLICE_RE = re.compile(r"\s*(-?\d+)?\s*:\s*(-?\d+)?\s*(?::\s*(-?\d+)?\s*)?")


class _Parser:
    def __init__(self, expression: str):
        self.expr = expression
        self.pos = 0

    def error(self, message: str) -> PathSyntaxError:
        return PathSyntaxError(message, self.expr, self.pos)

    def peek(self, text: str) -> bool:
        return self.expr.startswith(text, self.pos)

    def at_end(self) -> bool:
        return self.pos >= len(self.expr)

    def parse(self) -> tuple[Segment, ...]:
        expr = self.expr
        if not expr.strip():
            raise PathSyntaxError("Empty path expression", expr)

        segments: list[Segment] = []

        if self.peek("$"):
            self.pos += 1
        elif not (self.peek(".") or self.peek("[")):
            # Bare member name: implicit root
            segments.append(Segment((self.parse_name(),)))

        while not self.at_end():
            if self.peek(".."):
                self.pos += 2
                if self.peek("["):
                    segments.append(Segment(self.parse_bracket(), descendant=True))
                else:
                    segments.append(Segment((self.parse_dot_selector(),), descendant=True))
            elif self.peek("."):
                self.pos += 1
                segments.append(Segment((self.parse_dot_selector(),)))
            elif self.peek("["):
                segments.append(Segment(self.parse_bracket()))
            else:
                raise self.error("Unexpected character")

        return tuple(segments)

    def parse_dot_selector(self) -> Selector:
        if self.peek("*"):
            self.pos += 1
            return Wildcard()
        return self.parse_name()

    def parse_name(self) -> Name:
        match = _NAME_RE.match(self.expr, self.pos)
        if not match:
            raise self.error("Expected member name")
        self.pos = match.end()
        return Name(match.group())

    def parse_bracket(self) -> tuple[Selector, ...]:
        self.pos += 1  # "["
        selectors: list[Selector] = []
        while True:
            self.skip_spaces()
            selectors.append(self.parse_bracket_selector())
            self.skip_spaces()
            if self.peek(","):
                self.pos += 1
                continue
            if self.peek("]"):
                self.pos += 1
                return tuple(selectors)
            raise self.error("Expected ',' or ']'")

    def parse_bracket_selector(self) -> Selector:
        if self.peek("?") or self.peek("("):
            raise self.error("Filter and script expressions are not supported")
        if self.peek("*"):
            self.pos += 1
            return Wildcard()
        if self.peek("'") or self.peek('"'):
            return Name(self.parse_quoted())

        match = _SLICE_RE.match(self.expr, self.pos)
        if match and ":" in match.group():
            self.pos = match.end()
            start, stop, step = (int(g) if g is not None else None for g in match.groups())
            if step == 0:
                raise self.error("Slice step cannot be zero")
            return Slice(start, stop, step)

        match = _INT_RE.match(self.expr, self.pos)
        if match:
            self.pos = match.end()
            return Index(int(match.group()))

        raise self.error("Invalid bracket selector")

    def parse_quoted(self) -> str:
        quote = self.expr[self.pos]
        self.pos += 1
        chars: list[str] = []
        while not self.at_end():
            ch = self.expr[self.pos]
            if ch == "\\" and self.pos + 1 < len(self.expr):
                chars.append(self.expr[self.pos + 1])
                self.pos += 2
                continue
            if ch == quote:
                self.pos += 1
                return "".join(chars)
            chars.append(ch)
            self.pos += 1
        raise self.error("Unterminated string")

    def skip_spaces(self) -> None:
        while not self.at_end() and self.expr[self.pos].isspace():
            self.pos += 1


# =============================================================================
# Evaluation
# =============================================================================

def _children(value: Any) -> Iterator[Any]:
    if isinstance(value, dict):
        yield from value.values()
    elif isinstance(value, list):
        yield from value


def _descendants(value: Any) -> Iterator[Any]:
    """The value itself followed by every nested value, pre-order."""
    stack = [value]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(list(_children(node))))


def _select(selector: Selector, value: Any) -> Iterator[Any]:
    if isinstance(selector, Wildcard):
        yield from _children(value)

    elif isinstance(selector, Name):
        if isinstance(value, dict):
            if selector.key in value:
                yield value[selector.key]
        elif isinstance(value, list) and _INT_RE.fullmatch(selector.key):
            yield from _select(Index(int(selector.key)), value)

    elif isinstance(selector, Index):
        if isinstance(value, list):
            i = selector.index
            if -len(value) <= i < len(value):
                yield value[i]
        elif isinstance(value, dict):
            key = str(selector.index)
            if key in value:
                yield value[key]

    elif isinstance(selector, Slice):
        if isinstance(value, list):
            yield from value[selector.start:selector.stop:selector.step]


@dataclass(frozen=True)
class JSONPath:
    """A compiled JSONPath expression."""
    expression: str
    segments: tuple[Segment, ...]

    def find(self, value: Any) -> list[Any]:
        """
        Evaluate the path against a JSON value.

        Returns:
            Every match in document order; empty when nothing matches.
        """
        nodes = [value]
        for segment in self.segments:
            matched: list[Any] = []
            for node in nodes:
                targets = _descendants(node) if segment.descendant else (node,)
                for target in targets:
                    for selector in segment.selectors:
                        matched.extend(_select(selector, target))
            if not matched:
                return []
            nodes = matched
        return nodes


def compile_path(expression: str) -> JSONPath:
    """
    Compile a JSONPath expression.

    Raises:
        PathSyntaxError: If the expression is malformed or uses unsupported syntax
    """
    return JSONPath(expression, _Parser(expression).parse())


def extract(path: JSONPath | str, value: Any) -> list[Any]:
    """Evaluate a path (compiled or not) against a JSON value."""
    if isinstance(path, str):
        path = compile_path(path)
    return path.find(value)
