from __future__ import annotations

import fnmatch
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from placeholder_dump.utils.config_validator import ConfigError, ConfigValidator

DEFAULT_FILE_PERMISSIONS = "644"

EMITTER_KEYS = ("content", "file", "file_permissions", "logger_suffix", "match")
MATCH_KEYS = ("path", "method")


def parse_permissions(value: Union[str, int]) -> int:
    """Parse an octal permission string such as ``"644"`` or ``"0o600"``.

    Integers are read by their decimal digits, so an unquoted YAML ``644``
    means the same as ``"644"``.
    """
    text = str(value).strip().lower()
    if text.startswith("0o"):
        text = text[2:]
    mode = int(text, 8)
    if not 0 <= mode <= 0o777:
        raise ValueError(f"permission bits out of range: {value!r}")
    return mode


def _as_tuple(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


@dataclass(frozen=True)
class RequestMatch:
    """Optional per-emitter request filter; empty fields match anything."""
    paths: Tuple[str, ...] = ()
    methods: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, raw: Optional[Dict[str, Any]]) -> "RequestMatch":
        raw = raw or {}
        unknown = [k for k in raw if k not in MATCH_KEYS]
        if unknown:
            raise ConfigError([f"unknown match option: {k}" for k in unknown])
        return cls(
            paths=_as_tuple(raw.get("path")),
            methods=tuple(m.upper() for m in _as_tuple(raw.get("method"))),
        )

    def matches(self, method: str, path: str) -> bool:
        if self.methods and method.upper() not in self.methods:
            return False
        if self.paths and not any(fnmatch.fnmatchcase(path, p) for p in self.paths):
            return False
        return True


@dataclass(frozen=True)
class EmitterConfig:
    """One configured emitter.

    ``content`` is required; at least one of ``file`` or ``logger_suffix``
    must be set. Both ``content`` and ``file`` are templates resolved per
    request.
    """
    content: str
    file: str = ""
    file_permissions: str = DEFAULT_FILE_PERMISSIONS
    logger_suffix: str = ""
    match: RequestMatch = field(default_factory=RequestMatch)

    @property
    def mode(self) -> int:
        return parse_permissions(self.file_permissions)

    def validate(self) -> None:
        raw = {
            "content": self.content,
            "file": self.file,
            "file_permissions": self.file_permissions,
            "logger_suffix": self.logger_suffix,
        }
        is_valid, errors = emitter_validator().validate(raw)
        if not is_valid:
            raise ConfigError(errors)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any], where: Optional[str] = None) -> "EmitterConfig":
        if not isinstance(raw, dict):
            raise ConfigError([f"expected a mapping, got {type(raw).__name__}"], where)
        data = dict(raw)
        is_valid, errors = emitter_validator().validate(data)
        if not is_valid:
            raise ConfigError(errors, where)
        try:
            match = RequestMatch.from_dict(data.get("match"))
        except ConfigError as e:
            raise ConfigError(e.errors, where) from None
        return cls(
            content=str(data["content"]),
            file=str(data.get("file") or ""),
            file_permissions=str(data["file_permissions"]),
            logger_suffix=str(data.get("logger_suffix") or ""),
            match=match,
        )


def emitter_validator() -> ConfigValidator:
    validator = ConfigValidator(allowed_keys=EMITTER_KEYS)
    validator.add_rule("content", required=True, error_message="content must be set")
    validator.add_rule("file", required=False)
    validator.add_rule(
        "file_permissions",
        required=False,
        default=DEFAULT_FILE_PERMISSIONS,
        validator=lambda v: parse_permissions(v) >= 0,
        error_message="file_permissions must be an octal mode between 000 and 777",
    )
    validator.add_rule("logger_suffix", required=False)
    validator.add_check(
        lambda c: bool(c.get("file")) or bool(c.get("logger_suffix")),
        "either file or logger_suffix must be set",
    )
    return validator


def load_emitter_configs(data: Any) -> List[EmitterConfig]:
    """Build emitter configs from parsed config data.

    Accepts a list of mappings, a single mapping, or a mapping with an
    ``emitters`` list.
    """
    if data is None:
        return []
    if isinstance(data, dict) and "emitters" in data:
        data = data["emitters"] or []
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, (list, tuple)):
        raise ConfigError([f"expected a list of emitters, got {type(data).__name__}"])
    return [EmitterConfig.from_dict(raw, where=f"emitters[{i}]") for i, raw in enumerate(data)]


def load_config(path: Union[str, Path]) -> List[EmitterConfig]:
    """Load emitter configs from a YAML file."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return load_emitter_configs(data)
