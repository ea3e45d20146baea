# Copyright 2026 Firefly Software Solutions Inc.
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
"""Opt-in output for flymap's own diagnostics.

Library modules log through ``structlog.get_logger("flymap.<module>")`` and
follow whatever structlog configuration the host application set up.
Setting ``flymap.logging.enabled`` makes :func:`configure_logging` (called by
``MapperConfiguration.build_mapper``) route them to stderr:

.. code-block:: yaml

    flymap:
      logging:
        enabled: true
        format: json            # or console
        level:
          default: INFO         # the "flymap" logger
          mapping.engine: DEBUG # skipped members and dropped elements

On the stdlib side only the ``flymap`` logger tree is touched. The structlog
processor chain is process-wide.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field

import structlog

from flymap.core.config import Config, config_properties

LOGGER_NAMESPACE = "flymap"

_HANDLER_NAME = "flymap-console"


@config_properties(prefix="flymap.logging")
@dataclass
class LoggingProperties:
    enabled: bool = False
    format: str = "console"
    level: dict[str, str] = field(default_factory=dict)


def configure_logging(config: Config) -> bool:
    """Apply ``flymap.logging`` settings; returns ``False`` when disabled."""
    properties = config.bind(LoggingProperties)
    if not properties.enabled:
        return False

    levels = {name: str(level).upper() for name, level in properties.level.items()}
    default_level = levels.pop("default", "INFO")

    structlog.configure(
        processors=_processors(properties.format.lower()),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    namespace = logging.getLogger(LOGGER_NAMESPACE)
    _install_handler(namespace)
    namespace.setLevel(_level(default_level))
    for name, level in levels.items():
        logging.getLogger(logger_name(name)).setLevel(_level(level))
    return True


def logger_name(name: str) -> str:
    """``mapping.engine`` and ``flymap.mapping.engine`` name the same logger."""
    if name == LOGGER_NAMESPACE or name.startswith(LOGGER_NAMESPACE + "."):
        return name
    return f"{LOGGER_NAMESPACE}.{name}"


def _processors(fmt: str) -> list[structlog.types.Processor]:
    processors: list[structlog.types.Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if fmt == "json":
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    return processors


def _install_handler(namespace: logging.Logger) -> None:
    # Replaced on every call so the handler follows the current sys.stderr.
    for handler in list(namespace.handlers):
        if handler.get_name() == _HANDLER_NAME:
            namespace.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(message)s"))
    namespace.addHandler(handler)
    namespace.propagate = False


def _level(name: str) -> int:
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO
