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

"""Fixtures shared across all unit tests."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from confaccess import Configuration

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def config() -> Configuration:
    """Return a configuration preloaded with the canonical sample values."""
    return Configuration(
        "app",
        {
            "pixel_size": "5",
            "offsets": "[1,2,3]",
            "matrix": "[[1,2],[3,4]]",
            "flat_matrix": "[1,2]",
            "x": "abc",
        },
    )


@pytest.fixture
def reset_confaccess_logging() -> Generator[None, None, None]:
    """Restore the ``confaccess`` logger tree after a test configures it."""
    yield
    for name in ("confaccess", "confaccess.configuration", "confaccess.converters", "confaccess.nodes"):
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)
        logger.propagate = True
