"""
Adapter extraction from integration-flow definitions.

Every message-flow fragment of the collaboration is a connectivity
endpoint. A fragment carrying neither a component type nor a direction is
not enough evidence for an adapter and is skipped with a warning listing the
property keys it did carry.
"""

import logging

from iflow_parser.document_parser import ParsedDocument
from iflow_parser.domain.constants import KEY_CMD_VARIANT_URI, KEY_DIRECTION, UNKNOWN
from iflow_parser.domain.errors import ExtractionWarning
from iflow_parser.domain.models import ExtractedAdapter, ExtractionResult, MessageFlowFragment
from iflow_parser.domain.properties import get_property, message_flows, property_map
from iflow_parser.extractors.base_extractor import BaseExtractor

logger = logging.getLogger(__name__)


class AdapterExtractor(BaseExtractor):
    """Extracts one raw adapter candidate per message-flow fragment."""

    name = 'adapter'

    def empty_result(self) -> tuple[ExtractedAdapter, ...]:
        return ()

    def extract(self, document: ParsedDocument, artifact_id: str) -> ExtractionResult[tuple[ExtractedAdapter, ...]]:
        """
        Extract adapter candidates.

        Args:
            document: Parsed definition document
            artifact_id: Artifact identifier for logging

        Returns:
            ExtractionResult whose value is a tuple of ExtractedAdapter, in
            fragment order, plus one warning per skipped fragment
        """
        fragments = message_flows(document)
        logger.debug(
            "Extracted %d message flows for %s: %s",
            len(fragments), artifact_id, [f.label for f in fragments],
        )
        if not fragments:
            logger.info("No message flows found for %s", artifact_id)
            return ExtractionResult(value=())

        adapters: list[ExtractedAdapter] = []
        warnings: list[ExtractionWarning] = []
        for index, fragment in enumerate(fragments):
            outcome = self._extract_fragment(fragment, index, artifact_id)
            if isinstance(outcome, ExtractionWarning):
                warnings.append(outcome)
            else:
                adapters.append(outcome)

        logger.info(
            "Adapter extraction completed for %s: %d adapters, %d skipped",
            artifact_id, len(adapters), len(warnings),
        )
        return ExtractionResult(value=tuple(adapters), warnings=tuple(warnings))

    def _extract_fragment(
        self, fragment: MessageFlowFragment, index: int, artifact_id: str
    ) -> ExtractedAdapter | ExtractionWarning:
        properties = fragment.properties
        adapter_name = self._adapter_name(fragment, index)
        component_type = self._component_type(fragment)
        direction = get_property(properties, KEY_DIRECTION) or UNKNOWN

        if component_type == UNKNOWN and direction == UNKNOWN:
            keys = fragment.property_keys
            logger.warning(
                "Skipping adapter %s in %s: missing ComponentType and direction (available keys: %s)",
                adapter_name, artifact_id, list(keys),
                extra={'artifact_id': artifact_id, 'fragment_id': fragment.label, 'available_keys': list(keys)},
            )
            return self._skip(fragment.label, 'missing ComponentType and direction', keys)

        raw_properties = property_map(properties)
        if fragment.id:
            raw_properties['id'] = fragment.id
        raw_properties['name'] = adapter_name

        adapter = ExtractedAdapter(
            name=adapter_name,
            component_type=component_type,
            category=direction,
            direction=direction,
            raw_properties=raw_properties,
            fragment_id=fragment.id or adapter_name,
            cmd_variant_uri=get_property(properties, KEY_CMD_VARIANT_URI) or None,
        )
        logger.debug(
            "Extracted adapter %s (%s, %s) for %s", adapter_name, component_type, direction, artifact_id,
        )
        return adapter
