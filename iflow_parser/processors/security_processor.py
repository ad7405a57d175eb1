"""
Security mechanism normalization.

Resolves free-form mechanism types into the closed ``SecurityMechanismType``
set, fills in missing directions, and exposes the deduplication and
bucketing steps used for reporting.
"""

import logging
from typing import Any, Dict, Iterable, List

from iflow_parser.domain.classification import (
    SECURITY_BUCKET_RULES,
    SECURITY_DIRECTION_RULES,
    SECURITY_TYPE_MAPPING,
    SECURITY_TYPE_RULES,
    classify,
)
from iflow_parser.domain.constants import (
    KEY_AUTHENTICATION_METHOD,
    KEY_PRIVATE_KEY_ALIASES,
    KEY_SENDER_AUTH_TYPE,
    MAX_DIRECTION_LENGTH,
    MAX_NAME_LENGTH,
    MAX_TYPE_LENGTH,
)
from iflow_parser.domain.enums import AdapterDirection, SecurityBucket, SecurityDirection, SecurityMechanismType
from iflow_parser.domain.errors import ValidationWarning
from iflow_parser.domain.models import (
    ExtractedSecurityMechanism,
    ProcessingResult,
    SecurityMechanism,
    ValidationReport,
)
from iflow_parser.processors.base_processor import BaseProcessor

logger = logging.getLogger(__name__)


class SecurityProcessor(BaseProcessor):
    """Normalizes raw security mechanism candidates."""

    name = 'security'

    def process(
        self, mechanisms: Iterable[ExtractedSecurityMechanism], artifact_id: str = ''
    ) -> ProcessingResult[tuple[SecurityMechanism, ...]]:
        """
        Normalize security mechanism candidates.

        Args:
            mechanisms: Raw candidates, in extraction order
            artifact_id: Artifact identifier for logging

        Returns:
            ProcessingResult with the canonical mechanisms, in input order
        """
        processed: List[SecurityMechanism] = []
        warnings: List[ValidationWarning] = []
        for raw in mechanisms:
            missing = self.missing_fields(raw, ('name', 'mechanism_type'))
            if missing:
                warnings.append(self.drop(raw.name or raw.adapter_name, f"missing {', '.join(missing)}", artifact_id))
                continue
            mechanism = self.process_mechanism(raw)
            logger.debug(
                "Processed security mechanism %s (%s, %s) for %s",
                mechanism.name, mechanism.mechanism_type.value, mechanism.direction.value, artifact_id,
            )
            processed.append(mechanism)

        if not processed:
            logger.info("No security mechanisms to store for %s", artifact_id)
        else:
            logger.info("Processed %d security mechanisms for %s", len(processed), artifact_id)
        return ProcessingResult(value=tuple(processed), warnings=tuple(warnings))

    def process_mechanism(self, raw: ExtractedSecurityMechanism) -> SecurityMechanism:
        """Build the canonical record for one candidate."""
        mechanism_type = self.normalize_type(raw.mechanism_type)
        return SecurityMechanism(
            name=self.sanitize_string(raw.name, MAX_NAME_LENGTH, 'name'),
            mechanism_type=mechanism_type,
            direction=self.determine_direction(raw, mechanism_type),
            configuration=self.process_configuration(raw.configuration),
        )

    def normalize_type(self, mechanism_type: str | None) -> SecurityMechanismType:
        """
        Resolve a mechanism type into the canonical set.

        The exact mapping is tried first, then ordered substring rules. Anything
        left over is ``Unknown``.
        """
        if not mechanism_type:
            return SecurityMechanismType.UNKNOWN
        sanitized = self.sanitize_string(mechanism_type, MAX_TYPE_LENGTH, 'mechanism_type')
        if sanitized in SECURITY_TYPE_MAPPING:
            return SECURITY_TYPE_MAPPING[sanitized]
        for member in SecurityMechanismType:
            if member.value == sanitized:
                return member
        resolved = classify(sanitized, SECURITY_TYPE_RULES, default=SecurityMechanismType.UNKNOWN)
        if resolved is SecurityMechanismType.UNKNOWN:
            logger.debug("Unmapped security mechanism type %r", sanitized)
        return resolved

    def determine_direction(
        self, raw: ExtractedSecurityMechanism, mechanism_type: SecurityMechanismType | None = None
    ) -> SecurityDirection:
        """Explicit direction, then adapter direction, then type hints, then configuration hints, else Inbound."""
        direction = SecurityDirection.parse(self.sanitize_string(raw.direction, MAX_DIRECTION_LENGTH, 'direction'))
        if direction is not None:
            return direction

        direction = SecurityDirection.for_adapter(AdapterDirection.parse(raw.adapter_direction))
        if direction is not None:
            return direction

        direction = classify(raw.mechanism_type, SECURITY_DIRECTION_RULES)
        if direction is not None:
            return direction

        if mechanism_type is None:
            mechanism_type = self.normalize_type(raw.mechanism_type)
        if mechanism_type is SecurityMechanismType.CLIENT_CERTIFICATE:
            configuration = raw.configuration or {}
            if KEY_AUTHENTICATION_METHOD in configuration or any(k in configuration for k in KEY_PRIVATE_KEY_ALIASES):
                return SecurityDirection.OUTBOUND
            if KEY_SENDER_AUTH_TYPE in configuration:
                return SecurityDirection.INBOUND

        return SecurityDirection.INBOUND

    def process_configuration(self, configuration: Dict[str, Any] | None) -> Dict[str, Any]:
        """Copy a configuration dict with 'true'/'false' strings turned into booleans."""
        if not isinstance(configuration, dict):
            return {}
        return {key: self.coerce_boolean_string(value) for key, value in configuration.items()}

    @staticmethod
    def deduplicate(mechanisms: Iterable[SecurityMechanism]) -> List[SecurityMechanism]:
        """Keep the first mechanism for every (name, direction) pair."""
        seen = set()
        deduplicated: List[SecurityMechanism] = []
        for mechanism in mechanisms:
            key = (mechanism.name, mechanism.direction)
            if key in seen:
                logger.debug("Dropping duplicate security mechanism %s (%s)", mechanism.name, mechanism.direction.value)
                continue
            seen.add(key)
            deduplicated.append(mechanism)
        return deduplicated

    @staticmethod
    def classify_buckets(mechanisms: Iterable[SecurityMechanism]) -> Dict[SecurityBucket, List[SecurityMechanism]]:
        """Group mechanisms into reporting buckets; every bucket is present."""
        buckets: Dict[SecurityBucket, List[SecurityMechanism]] = {bucket: [] for bucket in SecurityBucket}
        for mechanism in mechanisms:
            bucket = classify(mechanism.mechanism_type.value, SECURITY_BUCKET_RULES, default=SecurityBucket.OTHER)
            buckets[bucket].append(mechanism)
        return buckets

    def validate(self, mechanism: SecurityMechanism) -> ValidationReport:
        """Check a canonical mechanism for missing fields and suspicious values."""
        errors: List[str] = []
        warnings: List[str] = []
        if not mechanism.name:
            errors.append('Missing name')
        if not mechanism.mechanism_type:
            errors.append('Missing mechanism_type')
        if len(mechanism.name) > MAX_NAME_LENGTH:
            warnings.append(f'name exceeds {MAX_NAME_LENGTH} characters')
        if mechanism.mechanism_type is SecurityMechanismType.UNKNOWN:
            warnings.append('mechanism_type could not be mapped')
        if not isinstance(mechanism.direction, SecurityDirection):
            warnings.append(f'Invalid direction: {mechanism.direction}')
        if not isinstance(mechanism.configuration, dict):
            warnings.append('Invalid configuration format')
        return ValidationReport(is_valid=not errors, errors=tuple(errors), warnings=tuple(warnings))
