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

"""confaccess - typed access to string-keyed configuration stores.

Values live in the store as raw strings. The accessor API converts them on
demand into scalars, arrays and matrices of a caller-chosen type, and reports
absent keys and unconvertible values as distinct, fully contextual errors.
"""

from __future__ import annotations

from confaccess._internal.error_codes import error_code_catalog, error_code_for
from confaccess._internal.logging_utils import configure_logging
from confaccess.exceptions import (
    ConfaccessError,
    ConfaccessLookupError,
    ConfaccessTypeError,
    ConfaccessValidationError,
    ConversionError,
    ConversionFormatError,
    ConversionOverflowError,
    InvalidValueError,
    MatrixShapeError,
    MissingKeyError,
    NodeSyntaxError,
    UnsupportedTypeError,
)

from .configuration import Configuration
from .converters import (
    Converter,
    ConverterRegistry,
    Int8,
    Int16,
    Int32,
    Int64,
    IntegerRange,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
    conversion_error_from,
    default_registry,
    format_as,
    parse_as,
)
from .core.model_types import ErrorKind, FailureReason
from .nodes import NodeParser, ValueNode, parse_value

__all__ = [
    "ConfaccessError",
    "ConfaccessLookupError",
    "ConfaccessTypeError",
    "ConfaccessValidationError",
    "Configuration",
    "ConversionError",
    "ConversionFormatError",
    "ConversionOverflowError",
    "Converter",
    "ConverterRegistry",
    "ErrorKind",
    "FailureReason",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "IntegerRange",
    "InvalidValueError",
    "MatrixShapeError",
    "MissingKeyError",
    "NodeParser",
    "NodeSyntaxError",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "UnsupportedTypeError",
    "ValueNode",
    "__version__",
    "configure_logging",
    "conversion_error_from",
    "default_registry",
    "error_code_catalog",
    "error_code_for",
    "format_as",
    "parse_as",
    "parse_value",
]

__version__ = "0.1.0"
