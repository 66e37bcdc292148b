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

"""Unit tests for writes, defaults and store management on a Configuration."""

from __future__ import annotations

import pytest

from confaccess import (
    Configuration,
    ConfaccessTypeError,
    ConverterRegistry,
    FailureReason,
    InvalidValueError,
    MissingKeyError,
    UInt8,
    ValueNode,
)
from confaccess.converters import ConversionFormatError
from confaccess.errors import MatrixShapeError

pytestmark = pytest.mark.unit


def test_set_scalar_then_read_back() -> None:
    config = Configuration()
    config.set("count", 5)
    assert config.raw("count") == "5"
    assert config.get("count", int) == 5


def test_set_overwrites(config: Configuration) -> None:
    config.set("pixel_size", 8)
    assert config.get("pixel_size", int) == 8
    config.set("x", 12)
    assert config.get("x", int) == 12


def test_set_formats_builtin_types() -> None:
    config = Configuration()
    config.set("flag", True)
    config.set("ratio", 0.5)
    config.set("reason", FailureReason.SYNTAX)
    assert config.as_dict() == {"flag": "true", "ratio": "0.5", "reason": "syntax"}
    assert config.get("flag", bool) is True
    assert config.get("reason", FailureReason) is FailureReason.SYNTAX


def test_set_quotes_reserved_text() -> None:
    config = Configuration()
    config.set("csv", "a,b")
    config.set("blank", "")
    config.set("padded", "  x ")
    assert config.raw("csv") == '"a,b"'
    assert config.get("csv", str) == "a,b"
    assert config.get("blank", str) == ""
    assert config.get("padded", str) == "  x "


def test_set_with_explicit_type_checks_range() -> None:
    config = Configuration("limits")
    config.set("byte", 200, UInt8)
    assert config.get("byte", UInt8) == 200
    with pytest.raises(InvalidValueError) as excinfo:
        config.set("byte", 300, UInt8)
    error = excinfo.value
    assert error.is_overflow
    assert error.value == "300"
    assert config.get("byte", int) == 200


def test_set_rejects_value_of_wrong_type() -> None:
    config = Configuration()
    with pytest.raises(InvalidValueError) as excinfo:
        config.set("flag", 1, bool)
    assert excinfo.value.reason is FailureReason.FORMAT
    assert isinstance(excinfo.value.cause, ConversionFormatError)
    assert not config.has("flag")


def test_set_array() -> None:
    config = Configuration()
    config.set_array("offsets", [1, 2, 3])
    assert config.raw("offsets") == "[1,2,3]"
    assert config.get_array("offsets", int) == [1, 2, 3]


def test_set_array_formats_every_element() -> None:
    config = Configuration()
    config.set_array("names", ["x, y", "z", ""])
    assert config.get_array("names", str) == ["x, y", "z", ""]
    config.set_array("empty", [])
    assert config.raw("empty") == "[]"
    assert config.get_array("empty", int) == []


def test_set_array_failure_leaves_previous_value(config: Configuration) -> None:
    with pytest.raises(InvalidValueError):
        config.set_array("offsets", [1, 256], UInt8)
    assert config.get_array("offsets", int) == [1, 2, 3]


def test_set_matrix() -> None:
    config = Configuration()
    config.set_matrix("grid", [[1, 2], [3, 4]])
    assert config.raw("grid") == "[[1,2],[3,4]]"
    assert config.get_matrix("grid", int) == [[1, 2], [3, 4]]


def test_set_matrix_rejects_empty_row() -> None:
    config = Configuration()
    with pytest.raises(InvalidValueError) as excinfo:
        config.set_matrix("grid", [[1], []])
    error = excinfo.value
    assert error.reason is FailureReason.STRUCTURE
    assert isinstance(error.cause, MatrixShapeError)
    assert not config.has("grid")


def test_set_default_never_overwrites(config: Configuration) -> None:
    config.set_default("pixel_size", 99)
    config.set_default("x", 1)
    config.set_default("fresh", 3)
    assert config.get("pixel_size", int) == 5
    assert config.raw("x") == "abc"
    assert config.get("fresh", int) == 3


def test_set_default_array_and_matrix(config: Configuration) -> None:
    config.set_default_array("offsets", [7])
    config.set_default_array("more", [7, 8])
    config.set_default_matrix("matrix", [[0]])
    config.set_default_matrix("identity", [[1, 0], [0, 1]])
    assert config.get_array("offsets", int) == [1, 2, 3]
    assert config.get_array("more", int) == [7, 8]
    assert config.get_matrix("matrix", int) == [[1, 2], [3, 4]]
    assert config.get_matrix("identity", int) == [[1, 0], [0, 1]]


def test_raw_round_trip_and_missing() -> None:
    config = Configuration("raw")
    config.set_raw("k", " [1, 2] ")
    assert config.raw("k") == " [1, 2] "
    assert config.get_array("k", int) == [1, 2]
    with pytest.raises(MissingKeyError):
        _ = config.raw("nope")


def test_raw_values_must_be_strings() -> None:
    with pytest.raises(ConfaccessTypeError):
        _ = Configuration("bad", {"a": 1})  # type: ignore[dict-item]
    config = Configuration()
    with pytest.raises(TypeError):
        config.set_raw("a", None)  # type: ignore[arg-type]


def test_store_protocol(config: Configuration) -> None:
    assert config.name == "app"
    assert len(config) == 5
    assert "offsets" in config
    assert "missing" not in config
    assert list(config) == ["pixel_size", "offsets", "matrix", "flat_matrix", "x"]
    assert config.keys() == list(config)
    assert repr(config) == "Configuration(name='app', keys=5)"
    snapshot = config.as_dict()
    snapshot["pixel_size"] = "0"
    assert config.raw("pixel_size") == "5"


def test_default_name() -> None:
    config = Configuration()
    assert config.name == "config"
    assert len(config) == 0


def test_from_mapping_converts_loader_values() -> None:
    config = Configuration.from_mapping(
        "loaded",
        {"s": "text", "i": 3, "f": 1.5, "b": False, "arr": [1, "two"], "grid": [[1, 2], [3]], "none": []},
    )
    assert config.as_dict() == {
        "s": "text",
        "i": "3",
        "f": "1.5",
        "b": "false",
        "arr": "[1,two]",
        "grid": "[[1,2],[3]]",
        "none": "[]",
    }
    assert config.get_matrix("grid", int) == [[1, 2], [3]]


@pytest.mark.parametrize("value", [None, {"nested": "x"}])
def test_from_mapping_rejects_unsupported_values(value: object) -> None:
    with pytest.raises(ConfaccessTypeError):
        _ = Configuration.from_mapping("loaded", {"key": value})  # type: ignore[dict-item]


def _semicolon_parser(raw: str) -> ValueNode:
    parts = raw.split(";")
    if len(parts) == 1:
        return ValueNode(raw.strip())
    return ValueNode(raw, tuple(ValueNode(part.strip()) for part in parts))


def test_custom_parser_is_used_for_reads() -> None:
    config = Configuration("semi", {"values": "1; 2; 3", "one": "4"}, parser=_semicolon_parser)
    assert config.get_array("values", int) == [1, 2, 3]
    assert config.get("one", int) == 4


class _Celsius(float):
    pass


class _CelsiusConverter:
    type_name = "celsius"

    def parse(self, text: str) -> _Celsius:
        return _Celsius(float(text.strip().removesuffix("C")))

    def format(self, value: _Celsius) -> str:
        if value < -273.15:
            message = f"{float(value)} is below absolute zero"
            raise ValueError(message)
        return f"{float(value)}C"


def test_custom_registry_is_used_for_reads_and_writes() -> None:
    registry = ConverterRegistry.with_builtins()
    registry.register(_Celsius, _CelsiusConverter())
    config = Configuration("temps", converters=registry)
    config.set("room", _Celsius(21.5))
    assert config.raw("room") == "21.5C"
    assert config.get("room", _Celsius) == 21.5


def test_plain_errors_from_registered_converter_become_invalid() -> None:
    registry = ConverterRegistry.with_builtins()
    registry.register(_Celsius, _CelsiusConverter())
    config = Configuration("temps", {"outside": "warm"}, converters=registry)
    with pytest.raises(InvalidValueError) as excinfo:
        _ = config.get("outside", _Celsius)
    assert excinfo.value.reason is FailureReason.FORMAT
    assert excinfo.value.value == "warm"
    with pytest.raises(InvalidValueError) as excinfo:
        config.set("room", _Celsius(-300.0))
    error = excinfo.value
    assert error.reason is FailureReason.FORMAT
    assert error.type_name == "celsius"
    assert "below absolute zero" in error.message
    assert isinstance(error.cause, ConversionFormatError)
    assert isinstance(error.cause.__cause__, ValueError)
    assert not config.has("room")


def test_set_float_reports_overflow_for_huge_integers() -> None:
    config = Configuration("limits")
    with pytest.raises(InvalidValueError) as excinfo:
        config.set("big", 10**400, float)
    assert excinfo.value.is_overflow
    assert not config.has("big")
