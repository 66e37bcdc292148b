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

"""Errors raised by the typed accessor API.

Only two kinds reach callers:

- `MissingKeyError`: the key is absent from the store.
- `InvalidValueError`: the key is present but its value could not be turned
  into the requested scalar, array or matrix.

Both expose a `kind` attribute so callers can branch without parsing
messages. `InvalidValueError.reason` further separates format, overflow,
syntax and structural failures.
"""

from __future__ import annotations

from typing import ClassVar, Final

from confaccess._internal.exceptions import ConfaccessLookupError, ConfaccessValidationError
from confaccess.core.model_types import ErrorKind, FailureReason

MATRIX_DIMENSION_MESSAGE: Final[str] = "matrix has less than two dimensions"

__all__ = ["MATRIX_DIMENSION_MESSAGE", "InvalidValueError", "MatrixShapeError", "MissingKeyError"]


class MissingKeyError(ConfaccessLookupError):
    """Raised when a requested key is not present in the configuration."""

    kind: ClassVar[ErrorKind] = ErrorKind.MISSING

    def __init__(self, key: str, config_name: str) -> None:
        """Initialize the exception with the key and owning configuration.

        Args:
            key: The key that was looked up.
            config_name: Identifying name of the configuration.
        """
        self.key = key
        self.config_name = config_name
        super().__init__(f"Missing key '{key}' in configuration '{config_name}'")


class InvalidValueError(ConfaccessValidationError):
    """Raised when a present value fails to convert to the requested type."""

    kind: ClassVar[ErrorKind] = ErrorKind.INVALID

    # ignore JUSTIFIED: diagnostic context is a flat set of named fields
    def __init__(  # noqa: PLR0913
        self,
        key: str,
        config_name: str,
        value: str,
        type_name: str,
        reason: FailureReason,
        cause: Exception,
        message: str | None = None,
    ) -> None:
        """Initialize the exception with full diagnostic context.

        Args:
            key: The key whose value was being read.
            config_name: Identifying name of the configuration.
            value: The offending literal (a leaf, a row, or the whole raw value).
            type_name: Descriptive name of the requested element type.
            reason: Why the value was rejected.
            cause: The lower-level exception that was raised.
            message: Cause text; defaults to ``str(cause)``.
        """
        self.key = key
        self.config_name = config_name
        self.value = value
        self.type_name = type_name
        self.reason = reason
        self.cause = cause
        self.message = message if message is not None else str(cause)
        super().__init__(
            f"Invalid value '{value}' for key '{key}' in configuration '{config_name}' "
            f"(expected {type_name}): {self.message}",
        )

    @property
    def is_overflow(self) -> bool:
        """Whether the value was well formed but outside the type's range."""
        return self.reason is FailureReason.OVERFLOW


class MatrixShapeError(ConfaccessValidationError):
    """Raised when a value read or written as a matrix has a row without elements."""

    reason: ClassVar[FailureReason] = FailureReason.STRUCTURE

    def __init__(self, row: str) -> None:
        """Initialize the exception with the offending row.

        Args:
            row: Literal text of the row (or scalar) lacking sub-elements.
        """
        self.row = row
        super().__init__(MATRIX_DIMENSION_MESSAGE)
