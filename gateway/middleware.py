"""
Flask extension that runs the configured emitters before every request.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from flask import Flask, request

from placeholder_dump.config import EmitterConfig, load_config, load_emitter_configs
from placeholder_dump.emitter import BASE_LOGGER_NAME, ContentEmitter
from placeholder_dump.replacer import Replacer
from placeholder_dump.utils.log_utils import get_logger

logger = logging.getLogger(__name__)


class PlaceholderDump:
    """Registers a ``before_request`` hook that feeds every matching emitter.

    Emitters come from the ``emitters`` argument, the ``PLACEHOLDER_DUMP``
    config list and the YAML file named by ``PLACEHOLDER_DUMP_CONFIG``, in
    that order.
    """

    def __init__(self, app: Optional[Flask] = None, emitters: Optional[Iterable[Any]] = None):
        self.emitters: List[ContentEmitter] = []
        self.enabled = False
        self._pending = list(emitters or [])
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        configs = self._collect_configs(app)
        base = app.config.get("PLACEHOLDER_DUMP_LOGGER", BASE_LOGGER_NAME)
        # the logger sink emits at INFO; make sure something receives it
        get_logger(base, app.config.get("LOG_LEVEL"))
        self.emitters = [ContentEmitter.from_config(cfg, base) for cfg in configs]
        self.enabled = True
        logger.info("Provisioned %d placeholder emitter(s)", len(self.emitters))

        app.extensions["placeholder_dump"] = self
        app.before_request(self._before_request)

    def _collect_configs(self, app: Flask) -> List[EmitterConfig]:
        configs: List[EmitterConfig] = []
        for item in self._pending:
            configs.append(item if isinstance(item, EmitterConfig) else EmitterConfig.from_dict(item))

        configs.extend(load_emitter_configs(app.config.get("PLACEHOLDER_DUMP") or []))

        path = app.config.get("PLACEHOLDER_DUMP_CONFIG")
        if path:
            if Path(path).exists():
                configs.extend(load_config(path))
            else:
                logger.warning("Emitter config %s not found; skipping", path)
        return configs

    def run(self, repl: Replacer, method: str, path: str) -> None:
        for emitter in self.emitters:
            if emitter.provisioned and emitter.matches(method, path):
                emitter.handle(repl)

    def _before_request(self) -> None:
        if not self.enabled or not self.emitters:
            return None
        self.run(Replacer.for_request(request), request.method, request.path)
        # None lets Flask continue to the view
        return None

    def shutdown(self) -> None:
        """Stop emitting and release every emitter; requests keep flowing."""
        self.enabled = False
        for emitter in self.emitters:
            emitter.cleanup()

    def describe(self) -> List[Dict[str, Any]]:
        return [
            {
                "file": e.config.file,
                "logger_suffix": e.config.logger_suffix,
                "provisioned": e.provisioned,
            }
            for e in self.emitters
        ]
