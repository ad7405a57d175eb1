"""
Adapter normalization.

Turns ``ExtractedAdapter`` candidates into canonical ``Adapter`` records:
required fields checked, strings bounded, direction and category resolved
into the closed ``AdapterDirection`` set.
"""

import json
import logging
from typing import Any, Dict, Iterable, List

from iflow_parser.domain.classification import (
    ADAPTER_CATEGORY_HINT_RULES,
    ADAPTER_DIRECTION_RULES,
    ADAPTER_TYPE_DISPLAY_NAMES,
    classify,
)
from iflow_parser.domain.constants import (
    MAX_DIRECTION_LENGTH,
    MAX_NAME_LENGTH,
    MAX_TYPE_LENGTH,
    UNKNOWN,
)
from iflow_parser.domain.enums import AdapterDirection
from iflow_parser.domain.errors import ValidationWarning
from iflow_parser.domain.models import Adapter, ExtractedAdapter, ProcessingResult, ValidationReport
from iflow_parser.processors.base_processor import BaseProcessor

logger = logging.getLogger(__name__)


def _known_direction(value: str | None) -> AdapterDirection | None:
    direction = AdapterDirection.parse(value)
    return direction if direction not in (None, AdapterDirection.UNKNOWN) else None


class AdapterProcessor(BaseProcessor):
    """Normalizes raw adapter candidates."""

    name = 'adapter'

    def process(self, adapters: Iterable[ExtractedAdapter], artifact_id: str = '') -> ProcessingResult[tuple[Adapter, ...]]:
        """
        Normalize adapter candidates.

        Args:
            adapters: Raw candidates, in extraction order
            artifact_id: Artifact identifier for logging

        Returns:
            ProcessingResult with the canonical adapters, in input order
        """
        processed: List[Adapter] = []
        warnings: List[ValidationWarning] = []
        for raw in adapters:
            missing = self.missing_fields(raw, ('name', 'component_type'))
            if missing:
                warnings.append(self.drop(raw.name or raw.fragment_id, f"missing {', '.join(missing)}", artifact_id))
                continue
            adapter = self.process_adapter(raw)
            logger.debug(
                "Processed adapter %s (%s, %s) for %s",
                adapter.name, adapter.adapter_type, adapter.direction.value, artifact_id,
            )
            processed.append(adapter)

        if not processed:
            logger.info("No adapters to store for %s", artifact_id)
        else:
            logger.info("Processed %d adapters for %s", len(processed), artifact_id)
        return ProcessingResult(value=tuple(processed), warnings=tuple(warnings))

    def process_adapter(self, raw: ExtractedAdapter) -> Adapter:
        """Build the canonical record for one candidate."""
        return Adapter(
            name=self.sanitize_string(raw.name, MAX_NAME_LENGTH, 'name'),
            adapter_type=self.sanitize_string(raw.component_type, MAX_TYPE_LENGTH, 'adapter_type'),
            display_type=self.normalize_adapter_type(raw.component_type),
            category=self.infer_category(raw),
            direction=self.determine_direction(raw),
            configuration=self.build_configuration(raw),
        )

    def determine_direction(self, raw: ExtractedAdapter) -> AdapterDirection:
        """Explicit direction, then category, then type-string hints, else Unknown."""
        for candidate in (raw.direction, raw.category):
            direction = _known_direction(self.sanitize_string(candidate, MAX_DIRECTION_LENGTH, 'direction'))
            if direction is not None:
                return direction
        return classify(raw.component_type, ADAPTER_DIRECTION_RULES, default=AdapterDirection.UNKNOWN)

    def infer_category(self, raw: ExtractedAdapter) -> AdapterDirection:
        """Explicit direction, then category, then component-type hints, else Unknown."""
        for candidate in (raw.direction, raw.category):
            direction = _known_direction(candidate)
            if direction is not None:
                return direction
        return classify(raw.component_type, ADAPTER_CATEGORY_HINT_RULES, default=AdapterDirection.UNKNOWN)

    @staticmethod
    def normalize_adapter_type(component_type: str | None) -> str:
        """Map a vendor component type to its display name; unmapped types pass through."""
        if not component_type:
            return UNKNOWN
        return ADAPTER_TYPE_DISPLAY_NAMES.get(component_type, component_type)

    @staticmethod
    def build_configuration(raw: ExtractedAdapter) -> Dict[str, Any]:
        return {
            'content': json.dumps(raw.raw_properties),
            'resource_metadata': {
                'name': raw.name,
                'cmd_variant_uri': raw.cmd_variant_uri,
                'component_type': raw.component_type,
            },
        }

    def validate(self, adapter: Adapter) -> ValidationReport:
        """Check a canonical adapter for missing fields and suspicious values."""
        errors: List[str] = []
        warnings: List[str] = []
        if not adapter.name:
            errors.append('Missing name')
        if not adapter.adapter_type:
            errors.append('Missing adapter_type')
        if len(adapter.name) > MAX_NAME_LENGTH:
            warnings.append(f'name exceeds {MAX_NAME_LENGTH} characters')
        if len(adapter.adapter_type) > MAX_TYPE_LENGTH:
            warnings.append(f'adapter_type exceeds {MAX_TYPE_LENGTH} characters')
        if not isinstance(adapter.direction, AdapterDirection):
            warnings.append(f'Invalid direction: {adapter.direction}')
        return ValidationReport(is_valid=not errors, errors=tuple(errors), warnings=tuple(warnings))
