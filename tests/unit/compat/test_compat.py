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

"""Unit tests for the version compatibility shims."""

from __future__ import annotations

import datetime as dt

import pytest

from confaccess import compat

pytestmark = pytest.mark.unit


def test_utc_is_the_utc_timezone() -> None:
    assert dt.datetime(2024, 1, 1, tzinfo=compat.UTC).utcoffset() == dt.timedelta(0)


def test_str_enum_behaves_like_str() -> None:
    class Colour(compat.StrEnum):
        RED = "red"

    assert isinstance(Colour.RED, str)
    assert str(Colour.RED) == "red"
    assert Colour("red") is Colour.RED


def test_typing_helpers_are_exported() -> None:
    for name in compat.__all__:
        assert getattr(compat, name) is not None
