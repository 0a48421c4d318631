"""
placeholder_dump
- Resolves request placeholders into a line of text and records it to a
  file and/or a named logger, without ever failing the request.
"""

from placeholder_dump.config import EmitterConfig, RequestMatch, load_config, load_emitter_configs
from placeholder_dump.emitter import BASE_LOGGER_NAME, ContentEmitter
from placeholder_dump.replacer import Replacer
from placeholder_dump.utils.config_validator import ConfigError

__all__ = [
    "BASE_LOGGER_NAME",
    "ConfigError",
    "ContentEmitter",
    "EmitterConfig",
    "Replacer",
    "RequestMatch",
    "load_config",
    "load_emitter_configs",
]
