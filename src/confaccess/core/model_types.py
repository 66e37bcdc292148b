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

"""Model enumerations for confaccess.

This module defines the small closed vocabularies shared by the accessor,
converter and logging layers:

- Error kinds reported by the accessor API
- Failure reasons explaining why a present value was rejected
- Logging components and output formats
"""

from __future__ import annotations

from confaccess.compat import StrEnum


class ErrorKind(StrEnum):
    """Top-level classification of accessor failures.

    Attributes:
        MISSING: The requested key is not present in the store.
        INVALID: The key is present but its value could not be converted.
    """

    MISSING = "missing"
    INVALID = "invalid"

    @classmethod
    def from_str(cls, raw: str) -> ErrorKind:
        """Create an ErrorKind enum from a string value.

        Args:
            raw: String representation of the error kind.

        Returns:
            ErrorKind enum value.

        Raises:
            ValueError: If the string does not match any ErrorKind value.
        """
        value = raw.strip().lower()
        try:
            return cls(value)
        except ValueError as exc:
            msg = f"Unknown error kind '{raw}'"
            raise ValueError(msg) from exc


class FailureReason(StrEnum):
    """Why a present value was rejected.

    Attributes:
        FORMAT: The literal does not match the target type's grammar.
        OVERFLOW: The literal is well formed but outside the type's range.
        SYNTAX: The raw string has malformed list or quoting syntax.
        STRUCTURE: The parsed tree does not have the requested shape.
    """

    FORMAT = "format"
    OVERFLOW = "overflow"
    SYNTAX = "syntax"
    STRUCTURE = "structure"

    @classmethod
    def from_str(cls, raw: str) -> FailureReason:
        """Create a FailureReason enum from a string value.

        Args:
            raw: String representation of the failure reason.

        Returns:
            FailureReason enum value.

        Raises:
            ValueError: If the string does not match any FailureReason value.
        """
        value = raw.strip().lower()
        try:
            return cls(value)
        except ValueError as exc:
            msg = f"Unknown failure reason '{raw}'"
            raise ValueError(msg) from exc


class LogComponent(StrEnum):
    """Enumeration of loggable components.

    Attributes:
        STORE: The typed accessor and its backing store.
        CONVERT: Type converters and the converter registry.
        NODES: The raw value node parser.
    """

    STORE = "store"
    CONVERT = "convert"
    NODES = "nodes"

    @classmethod
    def from_str(cls, raw: str) -> LogComponent:
        """Create a LogComponent enum from a string value.

        Args:
            raw: String representation of the log component.

        Returns:
            LogComponent enum value.

        Raises:
            ValueError: If the string does not match any LogComponent value.
        """
        value = raw.strip().lower()
        try:
            return cls(value)
        except ValueError as exc:
            msg = f"Unknown log component '{raw}'"
            raise ValueError(msg) from exc


class LogFormat(StrEnum):
    """Enumeration of log output formats.

    Attributes:
        TEXT: Single-line human readable records.
        JSON: One JSON object per record.
    """

    TEXT = "text"
    JSON = "json"

    @classmethod
    def from_str(cls, raw: str) -> LogFormat:
        """Create a LogFormat enum from a string value.

        Args:
            raw: String representation of the log format.

        Returns:
            LogFormat enum value.

        Raises:
            ValueError: If the string does not match any LogFormat value.
        """
        value = raw.strip().lower()
        try:
            return cls(value)
        except ValueError as exc:
            msg = f"Unknown log format '{raw}'"
            raise ValueError(msg) from exc


__all__ = ["ErrorKind", "FailureReason", "LogComponent", "LogFormat"]
