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

"""Common exception hierarchy for confaccess."""

from __future__ import annotations

__all__ = [
    "ConfaccessError",
    "ConfaccessLookupError",
    "ConfaccessTypeError",
    "ConfaccessValidationError",
]


class ConfaccessError(Exception):
    """Base error for all confaccess exceptions."""


class ConfaccessValidationError(ConfaccessError, ValueError):
    """Raised when a stored value cannot be turned into the requested shape."""


class ConfaccessTypeError(ConfaccessError, TypeError):
    """Raised when a requested target type cannot be handled."""


class ConfaccessLookupError(ConfaccessError, LookupError):
    """Raised when a requested entry does not exist."""
