# Copyright 2025 CrownOps Engineering
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Raw value node parser.

Turns one raw configuration string into a `ValueNode` tree. Leaves hold
literal substrings; bracketed lists become nodes whose children mirror the
nesting, which is what the array and matrix accessors walk.

Grammar::

    raw      := ws* ( list | items ) ws*
    items    := element ( "," element )*
    list     := "[" ws* [ element ( "," element )* ] ws* "]"
    element  := ws* ( list | quoted | bare ) ws*
    quoted   := '"' ( <char other than '"' or '\\'> | '\\' <char> )* '"'
    bare     := <chars other than , [ ] ">+

A raw value with a single element and no brackets is a scalar leaf. The
empty string is a scalar leaf with an empty value.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import ClassVar, Final, Protocol

from confaccess._internal.exceptions import ConfaccessValidationError
from confaccess._internal.logging_utils import structured_extra
from confaccess.core.model_types import FailureReason, LogComponent

logger: logging.Logger = logging.getLogger("confaccess.nodes")

LIST_OPEN: Final[str] = "["
LIST_CLOSE: Final[str] = "]"
SEPARATOR: Final[str] = ","
QUOTE: Final[str] = '"'
ESCAPE: Final[str] = "\\"
_RESERVED: Final[frozenset[str]] = frozenset((LIST_OPEN, LIST_CLOSE, SEPARATOR, QUOTE))


class NodeSyntaxError(ConfaccessValidationError):
    """Raised when a raw value has malformed list or quoting syntax."""

    reason: ClassVar[FailureReason] = FailureReason.SYNTAX

    def __init__(self, text: str, position: int, problem: str) -> None:
        """Initialize the exception with the offending text and location.

        Args:
            text: The complete raw value being parsed.
            position: Zero-based offset where parsing failed.
            problem: Short description of what was wrong.
        """
        self.text = text
        self.position = position
        self.problem = problem
        super().__init__(f"{problem} at position {position}")


@dataclass(slots=True, frozen=True)
class ValueNode:
    """One node of a parsed raw value.

    Attributes:
        value: Literal text of a leaf, or the source text of a list.
        children: Elements of a list, in source order.
        bracketed: Whether the node came from an explicit ``[...]`` list.
    """

    value: str
    children: tuple[ValueNode, ...] = ()
    bracketed: bool = False

    @property
    def is_scalar(self) -> bool:
        """Whether the node is a plain literal rather than a list."""
        return not self.children and not self.bracketed


class NodeParser(Protocol):
    """Callable turning a raw value into a node tree."""

    def __call__(self, raw: str, /) -> ValueNode: ...


class _Reader:
    __slots__ = ("pos", "text")

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        return "" if self.at_end() else self.text[self.pos]

    def skip_whitespace(self) -> None:
        while not self.at_end() and self.text[self.pos].isspace():
            self.pos += 1

    def error(self, problem: str) -> NodeSyntaxError:
        return NodeSyntaxError(self.text, self.pos, problem)


def parse_value(raw: str) -> ValueNode:
    """Parse a raw configuration value into a node tree.

    Args:
        raw: The stored string.

    Returns:
        A scalar leaf, an unbracketed list for ``a, b, c``, or a bracketed
        list node for ``[...]`` input.

    Raises:
        NodeSyntaxError: If brackets or quotes are malformed.
    """
    try:
        return _parse_root(_Reader(raw))
    except NodeSyntaxError as exc:
        logger.debug(
            "Rejected raw value %r: %s",
            raw,
            exc,
            extra=structured_extra(component=LogComponent.NODES, reason=FailureReason.SYNTAX),
        )
        raise


def _parse_root(reader: _Reader) -> ValueNode:
    reader.skip_whitespace()
    if reader.at_end():
        return ValueNode("")
    first = _read_element(reader)
    reader.skip_whitespace()
    if reader.at_end():
        return first
    items = [first]
    while reader.peek() == SEPARATOR:
        reader.pos += 1
        items.append(_read_element(reader))
        reader.skip_whitespace()
    if not reader.at_end():
        raise reader.error(f"unexpected {reader.peek()!r}")
    return ValueNode(reader.text.strip(), tuple(items))


def _read_element(reader: _Reader) -> ValueNode:
    reader.skip_whitespace()
    match reader.peek():
        case "[":
            return _read_list(reader)
        case '"':
            return _read_quoted(reader)
        case _:
            return _read_bare(reader)


def _read_list(reader: _Reader) -> ValueNode:
    start = reader.pos
    reader.pos += 1
    reader.skip_whitespace()
    children: list[ValueNode] = []
    if reader.peek() == LIST_CLOSE:
        reader.pos += 1
        return ValueNode(reader.text[start : reader.pos], (), bracketed=True)
    while True:
        children.append(_read_element(reader))
        reader.skip_whitespace()
        current = reader.peek()
        if current == SEPARATOR:
            reader.pos += 1
            continue
        if current == LIST_CLOSE:
            reader.pos += 1
            break
        if reader.at_end():
            raise reader.error("unterminated list")
        raise reader.error(f"expected ',' or ']' but found {current!r}")
    return ValueNode(reader.text[start : reader.pos], tuple(children), bracketed=True)


def _read_quoted(reader: _Reader) -> ValueNode:
    reader.pos += 1
    chars: list[str] = []
    while True:
        if reader.at_end():
            raise reader.error("unterminated quoted literal")
        current = reader.text[reader.pos]
        reader.pos += 1
        if current == ESCAPE:
            if reader.at_end():
                raise reader.error("unterminated quoted literal")
            chars.append(reader.text[reader.pos])
            reader.pos += 1
        elif current == QUOTE:
            return ValueNode("".join(chars))
        else:
            chars.append(current)


def _read_bare(reader: _Reader) -> ValueNode:
    start = reader.pos
    while not reader.at_end() and reader.peek() not in (SEPARATOR, LIST_CLOSE):
        if reader.peek() in (LIST_OPEN, QUOTE):
            raise reader.error(f"unexpected {reader.peek()!r} inside literal")
        reader.pos += 1
    text = reader.text[start : reader.pos].strip()
    if not text:
        raise reader.error("unexpected end of input" if reader.at_end() else "empty element")
    return ValueNode(text)


def quote_literal(text: str) -> str:
    """Return ``text`` in a form that parses back to a leaf with the same value.

    Args:
        text: Formatted literal.

    Returns:
        ``text`` unchanged when it is a valid bare literal, otherwise a
        double-quoted, backslash-escaped copy.
    """
    if text and text == text.strip() and _RESERVED.isdisjoint(text):
        return text
    escaped = text.replace(ESCAPE, ESCAPE * 2).replace(QUOTE, ESCAPE + QUOTE)
    return f"{QUOTE}{escaped}{QUOTE}"


def render_list(items: Iterable[str]) -> str:
    """Join already-quoted items into a bracketed list literal."""
    return LIST_OPEN + SEPARATOR.join(items) + LIST_CLOSE


__all__ = [
    "NodeParser",
    "NodeSyntaxError",
    "ValueNode",
    "parse_value",
    "quote_literal",
    "render_list",
]
