"""
Content Emitter
---------------
Resolves a content template per request and records it to a file and/or a
named logger. The request is never blocked or failed by this handler: an
empty result is a warning, and file errors are logged and dropped.
"""

from __future__ import annotations

import os
import threading
from typing import Optional

from placeholder_dump.config import EmitterConfig
from placeholder_dump.logging import StructuredLogger
from placeholder_dump.replacer import Replacer

BASE_LOGGER_NAME = "http.handlers.placeholder_dump"


class ContentEmitter:
    """Writes resolved content to the configured sinks.

    Each instance owns one lock around the open/write/close sequence, so
    concurrent requests on the same instance append whole lines in order.
    Two instances pointed at the same resolved path are not coordinated.
    """

    def __init__(self, config: EmitterConfig):
        self.config = config
        self.logger: Optional[StructuredLogger] = None
        self._lock = threading.Lock()
        self._mode: Optional[int] = None

    @classmethod
    def from_config(cls, config: EmitterConfig, base_logger_name: str = BASE_LOGGER_NAME) -> "ContentEmitter":
        emitter = cls(config)
        emitter.validate()
        emitter.provision(base_logger_name)
        return emitter

    def validate(self) -> None:
        self.config.validate()

    def provision(self, base_logger_name: str = BASE_LOGGER_NAME) -> None:
        """Parse the file mode and attach the logger.

        A bad ``file_permissions`` raises ValueError here, at startup,
        rather than on a request.
        """
        self._mode = self.config.mode
        self.logger = StructuredLogger(base_logger_name)

    def cleanup(self) -> None:
        self.logger = None

    @property
    def provisioned(self) -> bool:
        return self.logger is not None

    def matches(self, method: str, path: str) -> bool:
        return self.config.match.matches(method, path)

    def handle(self, repl: Replacer) -> bool:
        """Emit the resolved content for one request.

        Always returns True, meaning the pipeline should continue. An
        emitter that is not provisioned, or was cleaned up, does nothing.
        """
        logger = self.logger
        if logger is None:
            return True

        content = repl.replace_all(self.config.content, "").strip()
        if not content:
            logger.warning("Resolved content is empty; skipping processing")
            return True

        if self.config.logger_suffix:
            logger.named(self.config.logger_suffix).info(
                "Logging resolved content", content=content
            )

        if self.config.file:
            path = repl.replace_all(self.config.file, "")
            if path:
                self._append(logger, path, content)

        return True

    def _opener(self, path: str, flags: int) -> int:
        return os.open(path, os.O_APPEND | os.O_WRONLY | os.O_CREAT, self._mode)

    def _append(self, logger: StructuredLogger, path: str, content: str) -> None:
        with self._lock:
            # ValueError covers paths with an embedded NUL byte
            try:
                f = open(path, "a", encoding="utf-8", errors="replace", opener=self._opener)
            except (OSError, ValueError) as e:
                logger.error("Failed to open file", error=e, file=path)
                return

            try:
                with f:
                    f.write(content + "\n")
            except (OSError, ValueError) as e:
                logger.error("Failed to write to file", error=e, file=path)
                return

            logger.debug("Wrote content to file", file=path, content=content)
