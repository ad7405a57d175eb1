"""Base class for normalization processors."""

import logging
from typing import Any, Iterable, Optional

from iflow_parser.domain.errors import ValidationWarning

logger = logging.getLogger(__name__)

_TRUE_STRINGS = frozenset({'true', '1', 'yes', 'y', 'on'})
_FALSE_STRINGS = frozenset({'false', '0', 'no', 'n', 'off', '', 'none', 'null'})


class BaseProcessor:
    """
    Shared helpers for processors.

    Processors turn raw extractor candidates into canonical records. They
    never raise on bad input: a record missing an identifying field is
    dropped and reported as a ``ValidationWarning``; an oversized string is
    truncated and logged.
    """

    #: Short name used in warnings and log records
    name = 'base'

    def sanitize_string(self, value: Any, max_length: Optional[int] = None, field_name: str = '') -> str:
        """
        Trim a string and truncate it to max_length.

        Args:
            value: Value to sanitize; non-strings yield ''
            max_length: Maximum length, or None for no limit
            field_name: Field name used in the truncation log record

        Returns:
            Sanitized string
        """
        if not isinstance(value, str) or not value:
            return ''
        sanitized = value.strip()
        if max_length is not None and len(sanitized) > max_length:
            logger.warning(
                "Truncating %s from %d to %d characters", field_name or 'value', len(sanitized), max_length,
                extra={'processor': self.name, 'field': field_name},
            )
            sanitized = sanitized[:max_length]
        return sanitized

    @staticmethod
    def ensure_boolean(value: Any) -> bool:
        """Coerce a boolean-like value into a strict bool."""
        if isinstance(value, bool):
            return value
        if value is None:
            return False
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
        return bool(value)

    @staticmethod
    def coerce_boolean_string(value: Any) -> Any:
        """Turn 'true'/'false' strings into booleans; leave anything else alone."""
        if isinstance(value, str):
            lowered = value.lower()
            if lowered == 'true':
                return True
            if lowered == 'false':
                return False
        return value

    def missing_fields(self, record: Any, required: Iterable[str]) -> list[str]:
        """Return the names of required attributes that are empty on record."""
        return [name for name in required if not getattr(record, name, None)]

    def drop(self, record_name: str, reason: str, artifact_id: str = '') -> ValidationWarning:
        """Log and describe a record rejected during validation."""
        logger.warning(
            "Dropping %s record %r for %s: %s", self.name, record_name, artifact_id, reason,
            extra={'artifact_id': artifact_id, 'processor': self.name},
        )
        return ValidationWarning(processor=self.name, record_name=record_name, reason=reason)
