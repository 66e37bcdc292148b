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

"""Public exception types re-exported from the internal package."""

from __future__ import annotations

from confaccess._internal.exceptions import (
    ConfaccessError,
    ConfaccessLookupError,
    ConfaccessTypeError,
    ConfaccessValidationError,
)
from confaccess.converters import (
    ConversionError,
    ConversionFormatError,
    ConversionOverflowError,
    UnsupportedTypeError,
)
from confaccess.errors import InvalidValueError, MatrixShapeError, MissingKeyError
from confaccess.nodes import NodeSyntaxError

__all__ = [
    "ConfaccessError",
    "ConfaccessLookupError",
    "ConfaccessTypeError",
    "ConfaccessValidationError",
    "ConversionError",
    "ConversionFormatError",
    "ConversionOverflowError",
    "InvalidValueError",
    "MatrixShapeError",
    "MissingKeyError",
    "NodeSyntaxError",
    "UnsupportedTypeError",
]
