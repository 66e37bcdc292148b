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

"""Stable error code registry used across confaccess."""

from __future__ import annotations

from typing import TYPE_CHECKING, NewType

from confaccess.converters import (
    ConversionError,
    ConversionFormatError,
    ConversionOverflowError,
    UnsupportedTypeError,
)
from confaccess.errors import InvalidValueError, MatrixShapeError, MissingKeyError
from confaccess.nodes import NodeSyntaxError

from .exceptions import ConfaccessError, ConfaccessLookupError, ConfaccessTypeError, ConfaccessValidationError

if TYPE_CHECKING:
    from collections.abc import Mapping

ErrorCode = NewType("ErrorCode", str)

_ERROR_CODES: dict[type[BaseException], ErrorCode] = {
    ConfaccessError: ErrorCode("CA000"),
    ConfaccessValidationError: ErrorCode("CA100"),
    ConfaccessTypeError: ErrorCode("CA101"),
    ConfaccessLookupError: ErrorCode("CA102"),
    MissingKeyError: ErrorCode("CA110"),
    InvalidValueError: ErrorCode("CA111"),
    MatrixShapeError: ErrorCode("CA112"),
    NodeSyntaxError: ErrorCode("CA200"),
    ConversionError: ErrorCode("CA300"),
    ConversionFormatError: ErrorCode("CA301"),
    ConversionOverflowError: ErrorCode("CA302"),
    UnsupportedTypeError: ErrorCode("CA303"),
}


def error_code_for(exc: BaseException) -> ErrorCode:
    """Return a stable error code for a structured confaccess exception.

    Args:
        exc: Exception instance raised by confaccess code paths.

    Returns:
        Code of the nearest registered class in the exception's MRO, or
        ``CA000`` for foreign exceptions.
    """
    for cls in type(exc).__mro__:
        code = _ERROR_CODES.get(cls)
        if code:
            return code
    return ErrorCode("CA000")


def error_code_catalog() -> Mapping[str, ErrorCode]:
    """Return a mapping of fully-qualified exception names to error codes.

    Returns:
        Mapping of ``<module>.<ExceptionName>`` strings to error codes.
    """
    return {f"{exc_type.__module__}.{exc_type.__name__}": code for exc_type, code in _ERROR_CODES.items()}


__all__ = ["ErrorCode", "error_code_catalog", "error_code_for"]
