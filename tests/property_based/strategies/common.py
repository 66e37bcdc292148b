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

"""Shared Hypothesis strategies for property-based tests."""

from __future__ import annotations

from hypothesis import strategies as st

__all__ = [
    "config_keys",
    "int_matrices",
    "literal_texts",
    "raw_values",
]


def config_keys() -> st.SearchStrategy[str]:
    """Return a strategy that yields dotted configuration keys."""
    return st.from_regex(r"[a-z_][a-z0-9_]{0,10}(\.[a-z_][a-z0-9_]{0,10}){0,2}", fullmatch=True)


def literal_texts(max_size: int = 30) -> st.SearchStrategy[str]:
    """Return a strategy emitting arbitrary text, reserved characters included.

    Args:
        max_size: Maximum length of the emitted strings.

    Returns:
        Hypothesis strategy biased towards list and quoting syntax.
    """
    reserved = st.sampled_from(['"', "\\", ",", "[", "]", " ", "\t"])
    return st.lists(st.one_of(reserved, st.characters()), max_size=max_size).map("".join)


def raw_values(max_size: int = 40) -> st.SearchStrategy[str]:
    """Return a strategy emitting raw strings that may or may not parse."""
    return literal_texts(max_size=max_size)


def int_matrices(max_rows: int = 5, max_cols: int = 5) -> st.SearchStrategy[list[list[int]]]:
    """Return a strategy emitting ragged integer matrices with non-empty rows."""
    row = st.lists(st.integers(), min_size=1, max_size=max_cols)
    return st.lists(row, max_size=max_rows)
