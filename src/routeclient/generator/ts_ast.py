"""A small TypeScript syntax tree for the generated client.

The emitter builds these nodes; :mod:`routeclient.generator.printer` renders
them. Only the constructs the client actually uses are modelled: object
literals with properties, methods and spreads, ``return`` and ``if``
statements, calls, member access, arrow functions, string and template
literals, conditionals, and JSDoc blocks.

Nodes are frozen dataclasses holding tuples, so a syntax tree is as
immutable as the route tree it came from.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


# --- Expressions ---


@dataclass(frozen=True)
class Identifier:
    name: str


@dataclass(frozen=True)
class StringLiteral:
    value: str


@dataclass(frozen=True)
class TemplateLiteral:
    """A backtick string; ``parts`` mixes literal text and interpolations."""

    parts: tuple[Union[str, Expression], ...]


@dataclass(frozen=True)
class ConditionalExpression:
    test: Expression
    consequent: Expression
    alternate: Expression


@dataclass(frozen=True)
class MemberExpression:
    object: Expression
    property: str


@dataclass(frozen=True)
class CallExpression:
    callee: Expression
    arguments: tuple[Expression, ...] = ()


@dataclass(frozen=True)
class ArrowFunction:
    """``(params) => body`` with an expression body."""

    params: tuple[str, ...]
    body: Expression


@dataclass(frozen=True)
class SpreadElement:
    argument: Expression


@dataclass(frozen=True)
class ObjectLiteral:
    members: tuple[ObjectMember, ...] = ()


# --- Object members ---


@dataclass(frozen=True)
class DocComment:
    """A ``/** ... */`` block, stored as its content lines."""

    lines: tuple[str, ...]

    @classmethod
    def from_text(cls, text: str) -> DocComment:
        """Build a comment from free text or an existing ``/** */`` block.

        Delimiters and the leading ``*`` of each line are removed so the
        printer can re-indent the block wherever it is placed. A ``*/`` left
        inside the text is written as ``*\\/`` so it cannot close the block.
        """
        body = text.strip()
        if body.startswith("/**"):
            body = body[3:]
        elif body.startswith("/*"):
            body = body[2:]
        if body.endswith("*/"):
            body = body[:-2]

        lines = []
        for line in body.splitlines():
            line = line.strip()
            if line.startswith("*"):
                line = line[1:]
                if line.startswith(" "):
                    line = line[1:]
            lines.append(line.rstrip().replace("*/", "*\\/"))

        while lines and not lines[0]:
            lines.pop(0)
        while lines and not lines[-1]:
            lines.pop()
        return cls(lines=tuple(lines))


@dataclass(frozen=True)
class Parameter:
    name: str
    type_annotation: Optional[str] = None
    optional: bool = False


@dataclass(frozen=True)
class Property:
    """``key: value``; the printer quotes keys that are not identifiers."""

    key: str
    value: Expression


@dataclass(frozen=True)
class Method:
    """Method shorthand: ``[async] name(params): returnType { body }``."""

    name: str
    params: tuple[Parameter, ...]
    body: tuple[Statement, ...]
    is_async: bool = False
    return_type: Optional[str] = None
    doc: Optional[DocComment] = None


# --- Statements ---


@dataclass(frozen=True)
class ReturnStatement:
    argument: Expression


@dataclass(frozen=True)
class IfStatement:
    test: Expression
    consequent: tuple[Statement, ...]
    alternate: tuple[Statement, ...] = ()


Expression = Union[
    Identifier,
    StringLiteral,
    TemplateLiteral,
    ConditionalExpression,
    MemberExpression,
    CallExpression,
    ArrowFunction,
    ObjectLiteral,
]
ObjectMember = Union[Property, Method, SpreadElement]
Statement = Union[ReturnStatement, IfStatement]
