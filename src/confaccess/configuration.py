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

"""Typed accessor API over a string-keyed configuration store.

Every value is stored as a raw string. Reads parse the raw string into a
`ValueNode` tree and convert the leaves to the requested type; writes format
values back into raw strings. Nothing typed is cached: the raw string is the
only source of truth, so a read always reflects the latest write.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from enum import Enum
from typing import TYPE_CHECKING, Any, Final, TypeVar, cast, overload

from confaccess._internal.exceptions import ConfaccessTypeError
from confaccess._internal.logging_utils import structured_extra
from confaccess.converters import (
    ConversionError,
    Converter,
    ConverterRegistry,
    conversion_error_from,
    default_registry,
    type_name_of,
)
from confaccess.core.model_types import LogComponent
from confaccess.errors import InvalidValueError, MatrixShapeError, MissingKeyError
from confaccess.nodes import (
    LIST_OPEN,
    QUOTE,
    NodeParser,
    NodeSyntaxError,
    ValueNode,
    parse_value,
    quote_literal,
    render_list,
)

if TYPE_CHECKING:
    from confaccess.compat import Self
    from confaccess.json import JSONValue

logger: logging.Logger = logging.getLogger("confaccess.configuration")

T = TypeVar("T")

DEFAULT_NAME: Final[str] = "config"


class _Missing(Enum):
    TOKEN = "missing"


_MISSING: Final = _Missing.TOKEN


class Configuration:
    """A named configuration store with typed scalar, array and matrix access.

    Keys map to raw strings. Reads take the target type explicitly:

        >>> cfg = Configuration("app", {"pixel_size": "5", "offsets": "[1,2,3]"})
        >>> cfg.get("pixel_size", int)
        5
        >>> cfg.get_array("offsets", int)
        [1, 2, 3]

    Absent keys raise `MissingKeyError` unless a default is supplied. Present
    values that fail to convert always raise `InvalidValueError`, defaults
    notwithstanding.

    The store is a plain dict with no locking; callers sharing an instance
    across threads must synchronize externally.
    """

    __slots__ = ("_converters", "_name", "_parser", "_values")

    def __init__(
        self,
        name: str = DEFAULT_NAME,
        values: Mapping[str, str] | None = None,
        *,
        parser: NodeParser = parse_value,
        converters: ConverterRegistry | None = None,
    ) -> None:
        """Create a configuration.

        Args:
            name: Identifying name reported in error messages.
            values: Initial raw key/value pairs, as produced by a loader.
            parser: Node parser used for every read.
            converters: Converter registry; defaults to the shared registry.

        Raises:
            ConfaccessTypeError: If an initial value is not a string.
        """
        self._name = name
        self._parser = parser
        self._converters = converters or default_registry()
        self._values: dict[str, str] = {}
        for key, raw in (values or {}).items():
            self.set_raw(key, raw)

    @classmethod
    def from_mapping(
        cls,
        name: str,
        mapping: Mapping[str, JSONValue],
        *,
        parser: NodeParser = parse_value,
        converters: ConverterRegistry | None = None,
    ) -> Self:
        """Build a configuration from JSON-like loader output.

        Strings are stored verbatim. Other scalars are written with `set`,
        flat sequences with `set_array` and sequences of sequences with
        `set_matrix`.

        Args:
            name: Identifying name reported in error messages.
            mapping: Flat mapping of keys to JSON-compatible values.
            parser: Node parser used for every read.
            converters: Converter registry; defaults to the shared registry.

        Returns:
            The populated configuration.

        Raises:
            ConfaccessTypeError: If a value is ``null`` or a nested mapping.
        """
        config = cls(name, parser=parser, converters=converters)
        for key, item in mapping.items():
            if isinstance(item, str):
                config.set_raw(key, item)
            elif item is None or isinstance(item, dict):
                message = f"Value for '{key}' must be a string, number, boolean or list (got {type(item).__name__})"
                raise ConfaccessTypeError(message)
            elif isinstance(item, list):
                if item and all(isinstance(row, list) for row in item):
                    config.set_matrix(key, cast("list[list[object]]", item))
                else:
                    config.set_array(key, cast("list[object]", item))
            else:
                config.set(key, item)
        return config

    @property
    def name(self) -> str:
        """Identifying name of this configuration."""
        return self._name

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, keys={len(self._values)})"

    def __contains__(self, key: object) -> bool:
        return self.has(key)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._values))

    def __len__(self) -> int:
        return len(self._values)

    def keys(self) -> list[str]:
        """Return the stored keys in insertion order."""
        return list(self._values)

    def as_dict(self) -> dict[str, str]:
        """Return a snapshot copy of the raw store."""
        return dict(self._values)

    def has(self, key: object) -> bool:
        """Return whether ``key`` is present. Never raises."""
        try:
            return key in self._values
        except TypeError:
            # unhashable keys cannot be stored
            return False

    def raw(self, key: str) -> str:
        """Return the raw string stored for ``key``.

        Raises:
            MissingKeyError: If ``key`` is absent.
        """
        try:
            return self._values[key]
        except KeyError:
            raise MissingKeyError(key, self._name) from None

    def set_raw(self, key: str, raw: str) -> None:
        """Store ``raw`` verbatim under ``key``.

        Raises:
            ConfaccessTypeError: If ``raw`` is not a string.
        """
        if not isinstance(raw, str):
            message = f"Raw value for '{key}' must be a string (got {type(raw).__name__})"
            raise ConfaccessTypeError(message)
        self._values[key] = raw

    # reads

    @overload
    def get(self, key: str, tp: type[T]) -> T: ...

    @overload
    def get(self, key: str, tp: type[T], default: T) -> T: ...

    def get(self, key: str, tp: type[T], default: T | _Missing = _MISSING) -> T:
        """Read ``key`` as a single value of type ``tp``.

        Unquoted text that fails list parsing but does not start with ``[``
        or ``"`` is read as one literal, e.g. ``Run [draft]``.

        Args:
            key: Key to read.
            tp: Target type.
            default: Returned when ``key`` is absent.

        Returns:
            The converted value, or ``default``.

        Raises:
            MissingKeyError: If ``key`` is absent and no default was given.
            InvalidValueError: If the stored value cannot be converted.
        """
        if not isinstance(default, _Missing) and not self.has(key):
            return default
        raw = self.raw(key)
        converter = self._converters.converter_for(tp)
        node = self._parse(key, raw, converter.type_name, scalar=True)
        return cast("T", self._convert(key, node, converter))

    @overload
    def get_array(self, key: str, tp: type[T]) -> list[T]: ...

    @overload
    def get_array(self, key: str, tp: type[T], default: list[T]) -> list[T]: ...

    def get_array(self, key: str, tp: type[T], default: list[T] | _Missing = _MISSING) -> list[T]:
        """Read ``key`` as an ordered sequence of ``tp``.

        Each top-level element converts independently; a scalar value reads
        as a one-element array and a blank value as an empty one.

        Raises:
            MissingKeyError: If ``key`` is absent and no default was given.
            InvalidValueError: If any element fails to convert.
        """
        if not isinstance(default, _Missing) and not self.has(key):
            return default
        raw = self.raw(key)
        converter = self._converters.converter_for(tp)
        if not raw.strip():
            return []
        node = self._parse(key, raw, converter.type_name)
        elements = (node,) if node.is_scalar else node.children
        return [cast("T", self._convert(key, element, converter)) for element in elements]

    @overload
    def get_matrix(self, key: str, tp: type[T]) -> list[list[T]]: ...

    @overload
    def get_matrix(self, key: str, tp: type[T], default: list[list[T]]) -> list[list[T]]: ...

    def get_matrix(
        self,
        key: str,
        tp: type[T],
        default: list[list[T]] | _Missing = _MISSING,
    ) -> list[list[T]]:
        """Read ``key`` as rows of ``tp``.

        Every top-level element must itself be a list.

        Raises:
            MissingKeyError: If ``key`` is absent and no default was given.
            InvalidValueError: If a row lacks sub-elements or any element
                fails to convert.
        """
        if not isinstance(default, _Missing) and not self.has(key):
            return default
        raw = self.raw(key)
        converter = self._converters.converter_for(tp)
        if not raw.strip():
            return []
        node = self._parse(key, raw, converter.type_name)
        rows = (node,) if node.is_scalar else node.children
        matrix: list[list[T]] = []
        for row in rows:
            if not row.children:
                exc = MatrixShapeError(row.value)
                raise self._invalid(key, row.value, converter.type_name, exc) from exc
            matrix.append([cast("T", self._convert(key, element, converter)) for element in row.children])
        return matrix

    # writes

    def set(self, key: str, value: T, tp: type[T] | None = None) -> None:
        """Format ``value`` and store it under ``key``, overwriting.

        Args:
            key: Key to write.
            value: Value to store.
            tp: Type whose converter formats ``value``; defaults to
                ``type(value)``.

        Raises:
            InvalidValueError: If ``value`` cannot be formatted as ``tp``.
        """
        self._values[key] = quote_literal(self._format(key, value, tp))
        self._log_write("Set", key, tp)

    def set_array(self, key: str, values: Sequence[T], tp: type[T] | None = None) -> None:
        """Format each element of ``values`` and store them as one list literal.

        Raises:
            InvalidValueError: If any element cannot be formatted.
        """
        self._values[key] = self._render_row(key, values, tp)
        self._log_write("Set array", key, tp, count=len(values))

    def set_matrix(self, key: str, rows: Sequence[Sequence[T]], tp: type[T] | None = None) -> None:
        """Format ``rows`` and store them as a nested list literal.

        Raises:
            InvalidValueError: If a row is empty or any element cannot be
                formatted.
        """
        rendered: list[str] = []
        for row in rows:
            if not row:
                exc = MatrixShapeError("[]")
                raise self._invalid(key, "[]", "object" if tp is None else type_name_of(tp), exc) from exc
            rendered.append(self._render_row(key, row, tp))
        self._values[key] = render_list(rendered)
        self._log_write("Set matrix", key, tp, count=len(rows))

    def set_default(self, key: str, value: T, tp: type[T] | None = None) -> None:
        """Like `set`, but only when ``key`` is absent."""
        if not self.has(key):
            self.set(key, value, tp)

    def set_default_array(self, key: str, values: Sequence[T], tp: type[T] | None = None) -> None:
        """Like `set_array`, but only when ``key`` is absent."""
        if not self.has(key):
            self.set_array(key, values, tp)

    def set_default_matrix(self, key: str, rows: Sequence[Sequence[T]], tp: type[T] | None = None) -> None:
        """Like `set_matrix`, but only when ``key`` is absent."""
        if not self.has(key):
            self.set_matrix(key, rows, tp)

    # helpers

    def _parse(self, key: str, raw: str, type_name: str, *, scalar: bool = False) -> ValueNode:
        try:
            return self._parser(raw)
        except NodeSyntaxError as exc:
            literal = raw.strip()
            # scalar reads accept unquoted text that merely contains list or quote characters
            if scalar and not literal.startswith((LIST_OPEN, QUOTE)):
                return ValueNode(literal)
            raise self._invalid(key, raw, type_name, exc) from exc

    def _convert(self, key: str, node: ValueNode, converter: Converter[Any]) -> object:
        try:
            return converter.parse(node.value)
        except (ValueError, TypeError, ArithmeticError) as exc:
            failure = conversion_error_from(exc, node.value, converter.type_name)
            raise self._invalid(key, node.value, converter.type_name, failure, failure.message) from failure

    def _format(self, key: str, value: object, tp: object | None) -> str:
        converter = self._converters.converter_for(type(value) if tp is None else tp)
        try:
            return converter.format(value)
        except (ValueError, TypeError, ArithmeticError) as exc:
            failure = conversion_error_from(exc, repr(value), converter.type_name)
            raise self._invalid(key, failure.text, converter.type_name, failure, failure.message) from failure

    def _render_row(self, key: str, values: Sequence[object], tp: object | None) -> str:
        return render_list(quote_literal(self._format(key, item, tp)) for item in values)

    def _invalid(
        self,
        key: str,
        value: str,
        type_name: str,
        exc: NodeSyntaxError | ConversionError | MatrixShapeError,
        message: str | None = None,
    ) -> InvalidValueError:
        logger.debug(
            "Rejected value %r for key %s (%s)",
            value,
            key,
            exc.reason,
            extra=structured_extra(
                component=LogComponent.STORE,
                key=key,
                config=self._name,
                type_name=type_name,
                reason=exc.reason,
                details={"message": message if message is not None else str(exc)},
            ),
        )
        return InvalidValueError(key, self._name, value, type_name, exc.reason, exc, message)

    def _log_write(self, action: str, key: str, tp: object | None, count: int | None = None) -> None:
        logger.debug(
            "%s %s in %s",
            action,
            key,
            self._name,
            extra=structured_extra(
                component=LogComponent.STORE,
                key=key,
                config=self._name,
                type_name=None if tp is None else type_name_of(tp),
                count=count,
            ),
        )


__all__ = ["DEFAULT_NAME", "Configuration"]
