"""Message templates: literal text with ``{expression}`` references.

A template is how message text is written in source, in Python ``t()``
calls and in markup alike::

    "Hello {name}, your total is {order.total}"

``{identifier}`` refers to a variable and keeps its name; any other
``{expression}`` is embedded and named positionally by the extractor.

Templates are read the same way at extraction time and at runtime, so the
ICU identifier computed from a call site matches the one the runtime looks
up for it.

Python 3.12+. Zero external dependencies.
"""

import re
from collections.abc import Mapping

from .nodes import Argument, Content, Expression, Node, Text, VariableRef

__all__ = ["EMBEDDED_RE", "expression_value", "substitute", "text_content"]

EMBEDDED_RE = re.compile(r"\{([^{}]+)\}")
_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def expression_value(source: str) -> VariableRef | Expression:
    """Value shape of an embedded expression.

    Example:
        >>> expression_value(" name ")
        VariableRef(name='name')
        >>> expression_value("order.total")
        Expression(source='order.total')
    """
    source = source.strip()
    if _IDENTIFIER_RE.fullmatch(source):
        return VariableRef(source)
    return Expression(source)


def text_content(text: str) -> Content:
    """Split text with ``{expression}`` references into content nodes.

    Example:
        >>> text_content("Hi {name}!")
        (Text(value='Hi '), Argument(expression=VariableRef(name='name')), Text(value='!'))
    """
    nodes: list[Node] = []
    position = 0
    for match in EMBEDDED_RE.finditer(text):
        if match.start() > position:
            nodes.append(Text(text[position : match.start()]))
        nodes.append(Argument(expression_value(match.group(1))))
        position = match.end()
    if position < len(text):
        nodes.append(Text(text[position:]))
    return tuple(nodes)


def substitute(content: Content, nodes: Mapping[str, Node]) -> Content:
    """Replace ``{name}`` references with the node given for that name.

    Used for choice and format calls passed as keyword arguments: the
    reference to the keyword becomes the choice or format itself.

    Example:
        >>> substitute(text_content("{a} and {b}"), {"b": Text("B")})
        (Argument(expression=VariableRef(name='a')), Text(value=' and '), Text(value='B'))
    """
    if not nodes:
        return content
    return tuple(
        nodes.get(node.expression.name, node)
        if isinstance(node, Argument) and isinstance(node.expression, VariableRef)
        else node
        for node in content
    )
