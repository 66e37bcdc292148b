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

"""Opt-in structured logging for the ``confaccess`` logger tree.

Library modules only emit debug records carrying `structured_extra`
payloads. Applications decide how (and whether) to render them by calling
`configure_logging`, which installs one handler on the ``confaccess`` logger
with either a single-line text format or one JSON object per record.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Final, Literal, cast

from confaccess.compat import UTC, TypedDict, Unpack, override
from confaccess.core.model_types import FailureReason, LogComponent, LogFormat
from confaccess.json import normalize_enums_for_json

ROOT_LOGGER_NAME: Final[str] = "confaccess"
LOG_FORMAT_ENV: Final[str] = "CONFACCESS_LOG_FORMAT"
LOG_LEVEL_ENV: Final[str] = "CONFACCESS_LOG_LEVEL"
TEXT_FORMAT: Final[str] = "[%(levelname)s] %(name)s: %(message)s"

LOG_LEVELS: Final[tuple[Literal["debug", "info", "warning", "error"], ...]] = (
    "debug",
    "info",
    "warning",
    "error",
)
_LEVEL_VALUES: Final[Mapping[str, int]] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}
# record attributes copied into JSON payloads when present
STRUCTURED_FIELDS: Final[tuple[str, ...]] = ("component", "key", "config", "type_name", "reason", "count", "details")
MODULE_LOGGERS: Final[tuple[str, ...]] = (
    "confaccess.configuration",
    "confaccess.converters",
    "confaccess.nodes",
)


@dataclass(slots=True, frozen=True)
class LogConfig:
    """Outcome of `configure_logging`.

    Attributes:
        format: Output format actually installed.
        level: Numeric threshold applied to the logger tree.
        level_name: Lower-case name of ``level``.
    """

    format: LogFormat
    level: int
    level_name: str

    @classmethod
    def resolve(cls, log_format: LogFormat | str | None, log_level: str | int | None) -> LogConfig:
        """Combine explicit arguments with environment fallbacks.

        Args:
            log_format: Explicit format, or ``None`` to consult the environment.
            log_level: Explicit level, or ``None`` to consult the environment.

        Returns:
            The resolved configuration.

        Raises:
            ValueError: If the format name is unknown.
        """
        format_source = log_format if log_format is not None else os.getenv(LOG_FORMAT_ENV) or LogFormat.TEXT
        resolved_format = format_source if isinstance(format_source, LogFormat) else LogFormat.from_str(format_source)

        level_source = log_level if log_level is not None else os.getenv(LOG_LEVEL_ENV) or "info"
        if isinstance(level_source, int):
            return cls(resolved_format, level_source, logging.getLevelName(level_source).lower())
        name = level_source.strip().lower()
        if name not in LOG_LEVELS:
            name = "info"
        return cls(resolved_format, _LEVEL_VALUES[name], name)


class JSONLogFormatter(logging.Formatter):
    """One JSON object per record, including any structured extras."""

    @override
    def format(self, record: logging.LogRecord) -> str:
        fields = record.__dict__
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update({name: fields[name] for name in STRUCTURED_FIELDS if name in fields})
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(normalize_enums_for_json(payload), ensure_ascii=False)


def configure_logging(
    log_format: LogFormat | str | None = None,
    *,
    log_level: str | int | None = None,
) -> LogConfig:
    """Attach a single handler to the ``confaccess`` logger tree.

    The library never calls this itself; records stay silent until an
    application opts in.

    Args:
        log_format: ``text`` or ``json``. ``None`` falls back to
            ``CONFACCESS_LOG_FORMAT``, then ``text``.
        log_level: Level name or number. ``None`` falls back to
            ``CONFACCESS_LOG_LEVEL``, then ``info``. Unknown names mean
            ``info``.

    Returns:
        The resolved ``LogConfig``.

    Raises:
        ValueError: If the format name is unknown.
    """
    config = LogConfig.resolve(log_format, log_level)
    handler = logging.StreamHandler()
    if config.format is LogFormat.JSON:
        handler.setFormatter(JSONLogFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(config.level)
    package_logger.propagate = False
    for name in MODULE_LOGGERS:
        logging.getLogger(name).setLevel(config.level)
    return config


class _StructuredLogBase(TypedDict):
    component: LogComponent


class StructuredLogExtra(_StructuredLogBase, total=False):
    """Shape of the ``extra=`` mapping passed with confaccess log records."""

    key: str
    config: str
    type_name: str
    reason: FailureReason
    count: int
    details: Mapping[str, object]


class _StructuredLogKwargs(TypedDict, total=False):
    key: str | None
    config: str | None
    type_name: str | None
    reason: FailureReason | str | None
    count: int | None
    details: Mapping[str, object]


def structured_extra(
    component: LogComponent,
    **kwargs: Unpack[_StructuredLogKwargs],
) -> StructuredLogExtra:
    """Build the ``extra=`` mapping for a log record.

    Fields passed as ``None`` (and empty ``details``) are left out, so a
    record only carries what the caller knew.

    Args:
        component: Subsystem emitting the record.
        **kwargs: Optional structured fields.

    Returns:
        A `StructuredLogExtra` mapping.
    """
    payload: dict[str, object] = {"component": component}
    for name, value in cast("dict[str, object]", kwargs).items():
        if value is None:
            continue
        if name == "reason":
            payload[name] = value if isinstance(value, FailureReason) else FailureReason.from_str(str(value))
        elif name == "count":
            payload[name] = int(cast("int", value))
        elif name == "details":
            if isinstance(value, Mapping) and value:
                payload[name] = dict(cast("Mapping[str, object]", value))
        else:
            payload[name] = str(value)
    return cast("StructuredLogExtra", payload)


__all__ = [
    "LOG_LEVELS",
    "JSONLogFormatter",
    "LogConfig",
    "StructuredLogExtra",
    "configure_logging",
    "structured_extra",
]
