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

"""Bidirectional conversion between literal strings and typed values.

A converter parses one literal into a value of its target type and formats a
value back into a literal. Failures are split into two conditions that callers
can tell apart:

- `ConversionFormatError`: the literal does not match the type's grammar.
- `ConversionOverflowError`: the literal is well formed but the value lies
  outside the type's representable range.

Converters are looked up per target type through a `ConverterRegistry`.
Built-in converters handle ``str``, ``int``, ``float``, ``bool``, bounded
integers (see `IntegerRange`) and `Enum` subclasses. Every other type goes
through a pydantic ``TypeAdapter``.
"""

from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, ClassVar, Final, Generic, Protocol, TypeVar, cast, get_args, get_origin

from pydantic import PydanticSchemaGenerationError, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from confaccess._internal.exceptions import ConfaccessTypeError, ConfaccessValidationError
from confaccess._internal.logging_utils import structured_extra
from confaccess.core.model_types import FailureReason, LogComponent

logger: logging.Logger = logging.getLogger("confaccess.converters")

T = TypeVar("T")

_INT_LITERAL: Final = re.compile(r"[+-]?[0-9]+")
_INFINITY_LITERALS: Final[frozenset[str]] = frozenset(("inf", "infinity"))
_TRUE_LITERALS: Final[frozenset[str]] = frozenset(("true", "yes", "on", "1"))
_FALSE_LITERALS: Final[frozenset[str]] = frozenset(("false", "no", "off", "0"))
# pydantic error types raised by ge/gt/le/lt constraints
_BOUND_ERROR_TYPES: Final[frozenset[str]] = frozenset(
    ("greater_than", "greater_than_equal", "less_than", "less_than_equal"),
)


class ConversionError(ConfaccessValidationError):
    """Raised when a literal cannot be converted to or from a target type."""

    reason: ClassVar[FailureReason] = FailureReason.FORMAT

    def __init__(self, text: str, type_name: str, message: str) -> None:
        """Initialize the exception with the literal and target type.

        Args:
            text: The literal (or rendered value) that failed.
            type_name: Descriptive name of the target type.
            message: Human-readable cause.
        """
        self.text = text
        self.type_name = type_name
        self.message = message
        super().__init__(message)


class ConversionFormatError(ConversionError):
    """Raised when a literal does not match the target type's grammar."""

    reason: ClassVar[FailureReason] = FailureReason.FORMAT


class ConversionOverflowError(ConversionError):
    """Raised when a well-formed literal exceeds the target type's range."""

    reason: ClassVar[FailureReason] = FailureReason.OVERFLOW


class UnsupportedTypeError(ConfaccessTypeError):
    """Raised when no converter can be built for a requested type."""

    def __init__(self, type_name: str, error: Exception) -> None:
        """Initialize the exception with the type name and underlying error.

        Args:
            type_name: Descriptive name of the unsupported type.
            error: The exception raised while building a converter.
        """
        self.type_name = type_name
        self.error = error
        super().__init__(f"No converter available for {type_name}: {error}")


def conversion_error_from(exc: Exception, text: str, type_name: str) -> ConversionError:
    """Translate a failure raised inside a converter into a `ConversionError`.

    Args:
        exc: Exception raised by `Converter.parse` or `Converter.format`.
        text: The literal (or rendered value) being converted.
        type_name: Descriptive name of the target type.

    Returns:
        ``exc`` itself when it already is a `ConversionError`; otherwise a
        `ConversionOverflowError` for ``OverflowError`` and a
        `ConversionFormatError` for anything else, chained to ``exc``.
    """
    if isinstance(exc, ConversionError):
        return exc
    error: ConversionError
    if isinstance(exc, OverflowError):
        error = ConversionOverflowError(text, type_name, str(exc))
    else:
        error = ConversionFormatError(text, type_name, str(exc) or type(exc).__name__)
    error.__cause__ = exc
    return error


class Converter(Protocol[T]):
    """Literal parse/format capability for one target type.

    Implementations should raise `ConversionFormatError` or
    `ConversionOverflowError`. A plain ``ValueError``, ``TypeError`` or
    ``ArithmeticError`` escaping `parse` or `format` is translated by
    `conversion_error_from` (``OverflowError`` counts as overflow).
    """

    @property
    def type_name(self) -> str:
        """Descriptive name used in diagnostics."""
        ...

    def parse(self, text: str) -> T:
        """Parse ``text`` into a value."""
        ...

    def format(self, value: T) -> str:
        """Render ``value`` as a literal."""
        ...


@dataclass(slots=True, frozen=True)
class IntegerRange:
    """Inclusive bounds attached to ``Annotated[int, ...]`` aliases.

    Attributes:
        name: Descriptive type name reported in errors (e.g. ``int32``).
        minimum: Smallest representable value.
        maximum: Largest representable value.
    """

    name: str
    minimum: int
    maximum: int


Int8 = Annotated[int, IntegerRange("int8", -(2**7), 2**7 - 1)]
Int16 = Annotated[int, IntegerRange("int16", -(2**15), 2**15 - 1)]
Int32 = Annotated[int, IntegerRange("int32", -(2**31), 2**31 - 1)]
Int64 = Annotated[int, IntegerRange("int64", -(2**63), 2**63 - 1)]
UInt8 = Annotated[int, IntegerRange("uint8", 0, 2**8 - 1)]
UInt16 = Annotated[int, IntegerRange("uint16", 0, 2**16 - 1)]
UInt32 = Annotated[int, IntegerRange("uint32", 0, 2**32 - 1)]
UInt64 = Annotated[int, IntegerRange("uint64", 0, 2**64 - 1)]


def type_name_of(tp: object) -> str:
    """Return a descriptive name for ``tp``, for error messages only.

    Args:
        tp: A class, typing construct or ``Annotated`` alias.

    Returns:
        The `IntegerRange` name for bounded integers, ``__name__`` for plain
        classes and ``repr`` for everything else.
    """
    if get_origin(tp) is Annotated:
        base, *metadata = get_args(tp)
        for item in metadata:
            if isinstance(item, IntegerRange):
                return item.name
        return type_name_of(base)
    name = getattr(tp, "__name__", None)
    if isinstance(name, str) and get_origin(tp) is None:
        return name
    return repr(tp)


@dataclass(slots=True, frozen=True)
class StrConverter:
    """Identity conversion for ``str``."""

    type_name: str = "str"

    def parse(self, text: str) -> str:
        return text

    def format(self, value: str) -> str:
        return str(value)


@dataclass(slots=True, frozen=True)
class IntConverter:
    """Decimal integers, optionally bounded."""

    type_name: str = "int"
    minimum: int | None = None
    maximum: int | None = None

    @classmethod
    def for_range(cls, bounds: IntegerRange) -> IntConverter:
        """Build a converter enforcing ``bounds``."""
        return cls(type_name=bounds.name, minimum=bounds.minimum, maximum=bounds.maximum)

    def parse(self, text: str) -> int:
        literal = text.strip()
        if not _INT_LITERAL.fullmatch(literal):
            raise ConversionFormatError(text, self.type_name, f"invalid literal for {self.type_name}: {text!r}")
        try:
            value = int(literal)
        except ValueError as exc:
            # int() refuses literals past sys.get_int_max_str_digits()
            raise ConversionOverflowError(text, self.type_name, str(exc)) from exc
        return self._checked(value, text)

    def format(self, value: int) -> str:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConversionFormatError(repr(value), self.type_name, f"expected {self.type_name}, got {type(value).__name__}")
        return str(self._checked(value, str(value)))

    def _checked(self, value: int, text: str) -> int:
        too_small = self.minimum is not None and value < self.minimum
        too_large = self.maximum is not None and value > self.maximum
        if too_small or too_large:
            message = f"{value} is out of range for {self.type_name} [{self.minimum}, {self.maximum}]"
            raise ConversionOverflowError(text, self.type_name, message)
        return value


@dataclass(slots=True, frozen=True)
class FloatConverter:
    """Floating point literals; finite literals that round to infinity overflow."""

    type_name: str = "float"

    def parse(self, text: str) -> float:
        literal = text.strip()
        if "_" in literal:
            raise ConversionFormatError(text, self.type_name, f"invalid literal for float: {text!r}")
        try:
            value = float(literal)
        except ValueError as exc:
            raise ConversionFormatError(text, self.type_name, f"invalid literal for float: {text!r}") from exc
        if math.isinf(value) and literal.lstrip("+-").lower() not in _INFINITY_LITERALS:
            raise ConversionOverflowError(text, self.type_name, f"{literal} is out of range for float")
        return value

    def format(self, value: float) -> str:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConversionFormatError(repr(value), self.type_name, f"expected float, got {type(value).__name__}")
        try:
            return repr(float(value))
        except OverflowError as exc:
            raise ConversionOverflowError(repr(value), self.type_name, "integer is out of range for float") from exc


@dataclass(slots=True, frozen=True)
class BoolConverter:
    """Boolean literals: true/false, yes/no, on/off, 1/0."""

    type_name: str = "bool"

    def parse(self, text: str) -> bool:
        literal = text.strip().lower()
        if literal in _TRUE_LITERALS:
            return True
        if literal in _FALSE_LITERALS:
            return False
        raise ConversionFormatError(text, self.type_name, f"invalid literal for bool: {text!r}")

    def format(self, value: bool) -> str:
        if not isinstance(value, bool):
            raise ConversionFormatError(repr(value), self.type_name, f"expected bool, got {type(value).__name__}")
        return "true" if value else "false"


class EnumConverter(Generic[T]):
    """Enum members matched by value first, then by name (case-insensitive)."""

    __slots__ = ("enum_type", "type_name")

    def __init__(self, enum_type: type[T]) -> None:
        self.enum_type = enum_type
        self.type_name = enum_type.__name__

    def _members(self) -> list[Enum]:
        return list(cast("type[Enum]", self.enum_type))

    def parse(self, text: str) -> T:
        literal = text.strip()
        members = self._members()
        for member in members:
            if _enum_literal(member) == literal:
                return cast("T", member)
        folded = literal.casefold()
        for member in members:
            if member.name.casefold() == folded:
                return cast("T", member)
        allowed = ", ".join(_enum_literal(member) for member in members)
        raise ConversionFormatError(text, self.type_name, f"{text!r} is not a valid {self.type_name}; expected one of: {allowed}")

    def format(self, value: T) -> str:
        if not isinstance(value, self.enum_type):
            raise ConversionFormatError(repr(value), self.type_name, f"expected {self.type_name}, got {type(value).__name__}")
        return _enum_literal(cast("Enum", value))


def _enum_literal(member: Enum) -> str:
    value = member.value
    if isinstance(value, (str, int)) and not isinstance(value, bool):
        return str(value)
    return member.name


class PydanticConverter(Generic[T]):
    """Fallback converter backed by ``pydantic.TypeAdapter``."""

    __slots__ = ("_adapter", "type_name")

    def __init__(self, tp: object) -> None:
        self.type_name = type_name_of(tp)
        try:
            self._adapter: TypeAdapter[T] = TypeAdapter(cast("type[T]", tp))
        except PydanticSchemaGenerationError as exc:
            raise UnsupportedTypeError(self.type_name, exc) from exc

    def parse(self, text: str) -> T:
        try:
            return self._adapter.validate_strings(text)
        except ValidationError as exc:
            errors = exc.errors(include_url=False)
            message = "; ".join(str(error["msg"]) for error in errors) or str(exc)
            if any(error["type"] in _BOUND_ERROR_TYPES for error in errors):
                raise ConversionOverflowError(text, self.type_name, message) from exc
            raise ConversionFormatError(text, self.type_name, message) from exc

    def format(self, value: T) -> str:
        try:
            dumped: object = self._adapter.dump_python(value, mode="json")
        except PydanticSerializationError as exc:
            raise ConversionFormatError(repr(value), self.type_name, str(exc)) from exc
        return dumped if isinstance(dumped, str) else json.dumps(dumped)


class ConverterRegistry:
    """Maps target types to converters, building and caching on demand."""

    def __init__(self, converters: dict[object, Converter[Any]] | None = None) -> None:
        self._registered: dict[object, Converter[Any]] = dict(converters or {})
        self._cache: dict[object, Converter[Any]] = {}

    @classmethod
    def with_builtins(cls) -> ConverterRegistry:
        """Return a registry preloaded with the ``str``/``int``/``float``/``bool`` converters."""
        return cls(
            {
                str: StrConverter(),
                int: IntConverter(),
                float: FloatConverter(),
                bool: BoolConverter(),
            },
        )

    def register(self, tp: object, converter: Converter[Any]) -> None:
        """Use ``converter`` for ``tp``, replacing any earlier choice.

        Args:
            tp: Target type (class, ``Annotated`` alias or typing construct).
            converter: Object implementing the `Converter` protocol.
        """
        self._registered[tp] = converter
        self._cache.clear()
        logger.debug(
            "Registered converter for %s",
            converter.type_name,
            extra=structured_extra(component=LogComponent.CONVERT, type_name=converter.type_name),
        )

    def converter_for(self, tp: object) -> Converter[Any]:
        """Return the converter for ``tp``.

        Args:
            tp: Target type.

        Returns:
            A registered converter, or a built-in one derived from ``tp``.

        Raises:
            UnsupportedTypeError: If no converter can be built.
        """
        try:
            cached = self._cache.get(tp)
        except TypeError:
            # unhashable Annotated metadata; build without caching
            return self._build(tp)
        if cached is not None:
            return cached
        converter = self._build(tp)
        self._cache[tp] = converter
        logger.debug(
            "Resolved converter %s for %s",
            type(converter).__name__,
            converter.type_name,
            extra=structured_extra(component=LogComponent.CONVERT, type_name=converter.type_name),
        )
        return converter

    def _build(self, tp: object) -> Converter[Any]:
        try:
            registered = self._registered.get(tp)
        except TypeError:
            registered = None
        if registered is not None:
            return registered
        if get_origin(tp) is Annotated:
            for item in get_args(tp)[1:]:
                if isinstance(item, IntegerRange):
                    return IntConverter.for_range(item)
        if isinstance(tp, type) and issubclass(tp, Enum):
            return EnumConverter(tp)
        return PydanticConverter(tp)


_DEFAULT_REGISTRY: Final[ConverterRegistry] = ConverterRegistry.with_builtins()


def default_registry() -> ConverterRegistry:
    """Return the registry shared by configurations that do not supply one."""
    return _DEFAULT_REGISTRY


def parse_as(tp: type[T], text: str, *, registry: ConverterRegistry | None = None) -> T:
    """Parse ``text`` as ``tp`` using ``registry`` (default: shared registry)."""
    converter = (registry or _DEFAULT_REGISTRY).converter_for(tp)
    return cast("T", converter.parse(text))


def format_as(tp: type[T], value: T, *, registry: ConverterRegistry | None = None) -> str:
    """Format ``value`` as a ``tp`` literal using ``registry`` (default: shared registry)."""
    return (registry or _DEFAULT_REGISTRY).converter_for(tp).format(value)


__all__ = [
    "BoolConverter",
    "ConversionError",
    "ConversionFormatError",
    "ConversionOverflowError",
    "Converter",
    "ConverterRegistry",
    "EnumConverter",
    "FloatConverter",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "IntConverter",
    "IntegerRange",
    "PydanticConverter",
    "StrConverter",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "UnsupportedTypeError",
    "conversion_error_from",
    "default_registry",
    "format_as",
    "parse_as",
    "type_name_of",
]
