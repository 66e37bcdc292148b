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

"""JSON value shapes used by confaccess.

Only two consumers exist: `Configuration.from_mapping`, which accepts
loader output shaped like parsed JSON/TOML, and the JSON log formatter.
The module has no dependencies on the accessor or logging layers.
"""

from __future__ import annotations

from enum import Enum
from typing import TypeAlias, cast

from pydantic import JsonValue

__all__ = ["JSONValue", "normalize_enums_for_json"]

JSONValue: TypeAlias = JsonValue


def normalize_enums_for_json(value: object) -> JSONValue:
    """Replace enum keys and values with their payloads, recursively.

    Args:
        value: Object hierarchy built from mappings, sequences, primitives
            and `Enum` members.

    Returns:
        A JSON-compatible structure. Unknown objects are rendered with
        ``str()``.
    """
    if isinstance(value, Enum):
        return cast("JSONValue", value.value)
    if isinstance(value, dict):
        result: dict[str, JSONValue] = {}
        for key, item in cast("dict[object, object]", value).items():
            norm_key = str(key.value) if isinstance(key, Enum) else str(key)
            result[norm_key] = normalize_enums_for_json(item)
        return result
    if isinstance(value, (list, tuple)):
        return [normalize_enums_for_json(item) for item in cast("list[object]", value)]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)
