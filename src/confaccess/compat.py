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

"""Version shims used by confaccess.

Python 3.10 lacks `enum.StrEnum` and `datetime.UTC`, and `typing.override`
only arrived in 3.12. Everything version dependent is resolved here once so
the rest of the package can import plain names.

Re-exported symbols:

- StrEnum: stdlib class on 3.11+, a `str`/`Enum` backport otherwise.
- UTC: timezone instance for timestamps in log records.
- Typing helpers: Self, TypedDict, Unpack, override.
"""

from __future__ import annotations

import datetime as _dt
import enum as _enum
from typing import TYPE_CHECKING, cast

if TYPE_CHECKING:
    from typing_extensions import Self, TypedDict, Unpack, override
else:
    try:
        from typing import TypedDict, override  # py>=3.12
    except ImportError:
        from typing_extensions import TypedDict, override

    try:
        from typing import Self, Unpack  # py>=3.11
    except ImportError:
        from typing_extensions import Self, Unpack

UTC = getattr(_dt, "UTC", _dt.timezone.utc)


class _StrEnumBase(str, _enum.Enum):
    """Shared base so both branches expose the same type."""


if TYPE_CHECKING:

    class StrEnum(_StrEnumBase):
        """Type-checker view of StrEnum."""

        @override
        def __str__(self) -> str: ...

else:
    _STDLIB_STR_ENUM = getattr(_enum, "StrEnum", None)

    if _STDLIB_STR_ENUM is None:

        class StrEnum(_StrEnumBase):
            """String enum whose ``str()`` is the member value (3.10 backport)."""

            def __str__(self) -> str:
                return str(self.value)

    else:
        StrEnum = cast("type[_StrEnumBase]", _STDLIB_STR_ENUM)

__all__ = ["UTC", "Self", "StrEnum", "TypedDict", "Unpack", "override"]
