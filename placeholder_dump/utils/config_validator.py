"""
Configuration Validator
-----------------------
Validates emitter configuration once, when it is loaded.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when a configuration block is rejected at load time."""

    def __init__(self, errors: List[str], where: Optional[str] = None):
        self.errors = list(errors)
        self.where = where
        prefix = f"{where}: " if where else ""
        super().__init__(prefix + "; ".join(self.errors))


@dataclass
class ConfigRule:
    """Rule for validating a single configuration value."""
    key: str
    required: bool = True
    default: Any = None
    validator: Optional[Callable[[Any], bool]] = None
    error_message: Optional[str] = None


@dataclass
class ConfigCheck:
    """Rule spanning several keys, evaluated against the whole mapping."""
    predicate: Callable[[Dict[str, Any]], bool]
    error_message: str


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


class ConfigValidator:
    """
    Validates a configuration mapping against a set of rules.

    Usage:
        validator = ConfigValidator(allowed_keys={"content", "file"})
        validator.add_rule("content", required=True)
        validator.add_check(lambda c: c.get("file"), "file must be set")
        is_valid, errors = validator.validate(config)

    Empty strings count as missing, so a ``content: ""`` entry fails a
    required rule the same way an absent key does.
    """

    def __init__(self, allowed_keys: Optional[Iterable[str]] = None):
        self.rules: List[ConfigRule] = []
        self.checks: List[ConfigCheck] = []
        self.allowed_keys = set(allowed_keys) if allowed_keys is not None else None
        self.logger = logging.getLogger("ConfigValidator")

    def add_rule(
        self,
        key: str,
        required: bool = True,
        default: Any = None,
        validator: Optional[Callable[[Any], bool]] = None,
        error_message: Optional[str] = None,
    ) -> None:
        """Add a validation rule."""
        self.rules.append(
            ConfigRule(
                key=key,
                required=required,
                default=default,
                validator=validator,
                error_message=error_message,
            )
        )

    def add_check(self, predicate: Callable[[Dict[str, Any]], bool], error_message: str) -> None:
        """Add a rule that looks at more than one key."""
        self.checks.append(ConfigCheck(predicate=predicate, error_message=error_message))

    def validate(self, config: Dict[str, Any]) -> Tuple[bool, List[str]]:
        """
        Validate all rules against ``config``.

        Defaults are written back into ``config`` for optional keys that are
        missing.

        Returns:
            Tuple of (is_valid: bool, errors: list[str])
        """
        errors: List[str] = []

        if self.allowed_keys is not None:
            for key in config:
                if key not in self.allowed_keys:
                    errors.append(f"unknown option: {key}")

        for rule in self.rules:
            value = config.get(rule.key)

            if rule.required and _is_blank(value):
                errors.append(rule.error_message or f"{rule.key} must be set")
                continue

            if _is_blank(value) and rule.default is not None:
                value = rule.default
                config[rule.key] = value
                self.logger.debug("Using default for %s: %s", rule.key, rule.default)

            if not _is_blank(value) and rule.validator is not None:
                try:
                    ok = rule.validator(value)
                except (TypeError, ValueError) as e:
                    errors.append(rule.error_message or f"invalid value for {rule.key}: {e}")
                    continue
                if not ok:
                    errors.append(rule.error_message or f"invalid value for {rule.key}: {value!r}")

        for check in self.checks:
            if not check.predicate(config):
                errors.append(check.error_message)

        for error_msg in errors:
            self.logger.error("%s", error_msg)

        return len(errors) == 0, errors
