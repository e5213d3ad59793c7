"""Render a :mod:`~routeclient.generator.ts_ast` tree as source text.

All formatting decisions live here and nowhere else: indentation width,
string quote style, trailing commas, and the target dialect. In the
``javascript`` dialect type annotations, optional-parameter markers and
return types are dropped, leaving plain ES module syntax.

Rendering is deterministic -- the same tree and options always produce the
same text -- which keeps generated clients diff-stable.

Example::

    from routeclient.models import FormatOptions

    printer = Printer(FormatOptions(indent_width=2, single_quote=False))
    text = printer.render(ObjectLiteral(members=(...)))
"""

from __future__ import annotations

import re
from typing import Optional

from routeclient.generator.ts_ast import (
    ArrowFunction,
    CallExpression,
    ConditionalExpression,
    DocComment,
    Expression,
    Identifier,
    IfStatement,
    MemberExpression,
    Method,
    ObjectLiteral,
    ObjectMember,
    Parameter,
    Property,
    ReturnStatement,
    SpreadElement,
    Statement,
    StringLiteral,
    TemplateLiteral,
)
from routeclient.models import Dialect, FormatOptions

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


class Printer:
    """Stateless renderer for client syntax trees.

    Args:
        options: Formatting options. Defaults to
            :class:`~routeclient.models.FormatOptions`.
    """

    def __init__(self, options: Optional[FormatOptions] = None) -> None:
        self.options = options or FormatOptions()
        self._unit = " " * self.options.indent_width
        self._typed = self.options.dialect == Dialect.TYPESCRIPT

    def render(self, node: Expression, level: int = 0) -> str:
        """Render an expression whose first line starts at indent *level*."""
        return self._expression(node, level)

    # ------------------------------------------------------------------ #
    # Expressions
    # ------------------------------------------------------------------ #

    def _expression(self, node: Expression, level: int) -> str:
        if isinstance(node, Identifier):
            return node.name
        if isinstance(node, StringLiteral):
            return self.quote(node.value)
        if isinstance(node, TemplateLiteral):
            return self._template(node, level)
        if isinstance(node, ConditionalExpression):
            return (
                f"{self._expression(node.test, level)} ? "
                f"{self._expression(node.consequent, level)} : "
                f"{self._expression(node.alternate, level)}"
            )
        if isinstance(node, MemberExpression):
            return f"{self._expression(node.object, level)}.{node.property}"
        if isinstance(node, CallExpression):
            args = ", ".join(self._expression(a, level) for a in node.arguments)
            return f"{self._expression(node.callee, level)}({args})"
        if isinstance(node, ArrowFunction):
            params = ", ".join(node.params)
            return f"({params}) => {self._expression(node.body, level)}"
        if isinstance(node, ObjectLiteral):
            return self._object(node, level)
        raise TypeError(f"Cannot render expression node {type(node).__name__}")

    def _template(self, node: TemplateLiteral, level: int) -> str:
        chunks: list[str] = []
        for part in node.parts:
            if isinstance(part, str):
                chunks.append(escape_template_text(part))
            else:
                chunks.append("${" + self._expression(part, level) + "}")
        return "`" + "".join(chunks) + "`"

    def _object(self, node: ObjectLiteral, level: int) -> str:
        if not node.members:
            return "{}"
        inner = level + 1
        lines = ["{"]
        last = len(node.members) - 1
        for index, member in enumerate(node.members):
            text = self._member(member, inner)
            if index < last or self.options.trailing_commas:
                text += ","
            lines.append(text)
        lines.append(self._indent(level) + "}")
        return "\n".join(lines)

    # ------------------------------------------------------------------ #
    # Object members
    # ------------------------------------------------------------------ #

    def _member(self, member: ObjectMember, level: int) -> str:
        pad = self._indent(level)
        if isinstance(member, Property):
            return f"{pad}{self.property_key(member.key)}: {self._expression(member.value, level)}"
        if isinstance(member, SpreadElement):
            return f"{pad}...{self._expression(member.argument, level)}"
        if isinstance(member, Method):
            return self._method(member, level)
        raise TypeError(f"Cannot render object member {type(member).__name__}")

    def _method(self, method: Method, level: int) -> str:
        pad = self._indent(level)
        lines: list[str] = []
        if method.doc is not None:
            lines.append(self._doc(method.doc, level))

        params = ", ".join(self._parameter(p) for p in method.params)
        head = f"{pad}{'async ' if method.is_async else ''}{method.name}({params})"
        if self._typed and method.return_type:
            head += f": {method.return_type}"
        lines.append(head + " {")
        lines.extend(self._statement(s, level + 1) for s in method.body)
        lines.append(pad + "}")
        return "\n".join(lines)

    def _parameter(self, param: Parameter) -> str:
        if not self._typed:
            return param.name
        text = param.name + ("?" if param.optional else "")
        if param.type_annotation:
            text += f": {param.type_annotation}"
        return text

    def _doc(self, doc: DocComment, level: int) -> str:
        pad = self._indent(level)
        lines = [pad + "/**"]
        for line in doc.lines:
            lines.append(f"{pad} * {line}" if line else f"{pad} *")
        lines.append(pad + " */")
        return "\n".join(lines)

    # ------------------------------------------------------------------ #
    # Statements
    # ------------------------------------------------------------------ #

    def _statement(self, stmt: Statement, level: int) -> str:
        pad = self._indent(level)
        if isinstance(stmt, ReturnStatement):
            return f"{pad}return {self._expression(stmt.argument, level)};"
        if isinstance(stmt, IfStatement):
            lines = [f"{pad}if ({self._expression(stmt.test, level)}) {{"]
            lines.extend(self._statement(s, level + 1) for s in stmt.consequent)
            if stmt.alternate:
                lines.append(f"{pad}}} else {{")
                lines.extend(self._statement(s, level + 1) for s in stmt.alternate)
            lines.append(pad + "}")
            return "\n".join(lines)
        raise TypeError(f"Cannot render statement {type(stmt).__name__}")

    # ------------------------------------------------------------------ #
    # Lexical helpers
    # ------------------------------------------------------------------ #

    def quote(self, value: str) -> str:
        """Quote *value* as a string literal.

        The preferred quote character is used unless the value contains it
        and not the alternative, in which case the alternative saves escapes.
        """
        preferred, alternate = ("'", '"') if self.options.single_quote else ('"', "'")
        quote = preferred
        if preferred in value and alternate not in value:
            quote = alternate
        escaped = (
            value.replace("\\", "\\\\")
            .replace(quote, "\\" + quote)
            .replace("\n", "\\n")
            .replace("\r", "\\r")
            .replace("\t", "\\t")
        )
        return f"{quote}{escaped}{quote}"

    def property_key(self, key: str) -> str:
        """Render an object key, quoting it only when it is not an identifier."""
        if is_identifier(key):
            return key
        return self.quote(key)

    def _indent(self, level: int) -> str:
        return self._unit * level


def is_identifier(name: str) -> bool:
    """Return ``True`` if *name* can be written as a bare property key."""
    return bool(_IDENTIFIER_RE.match(name))


def escape_template_text(text: str) -> str:
    """Escape literal text for use inside a template literal."""
    return text.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")
