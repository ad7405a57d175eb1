"""Persistence normalization, pattern summary, footprint and advisories."""

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional

from iflow_parser.domain.constants import (
    MAX_ID_LENGTH,
    MAX_NAME_LENGTH,
    MAX_TYPE_LENGTH,
    MAX_VALUE_LENGTH,
    NONE_VALUE,
    ROLLBACK_HANDLING,
)
from iflow_parser.domain.enums import RecommendationPriority
from iflow_parser.domain.models import (
    DataStoreActivity,
    DataStoreOperationConfig,
    JmsAdapterConfig,
    MessagePersistenceConfig,
    PersistenceConfig,
    PersistenceFootprint,
    PersistencePatterns,
    ProcessingResult,
    PropertyPair,
    Recommendation,
    ValidationReport,
    VariableOperation,
)
from iflow_parser.processors.base_processor import BaseProcessor

logger = logging.getLogger(__name__)

_BOOLEAN_FIELDS = ('jms_enabled', 'data_store_enabled', 'variables_enabled', 'message_persistence_enabled')
_COMPLEXITY = ('None', 'Low', 'Medium', 'High')

# Footprint weights
_JMS_WEIGHT = 3
_DATA_STORE_WEIGHT = 2
_VARIABLES_WEIGHT = 1
_MESSAGE_PERSISTENCE_WEIGHT = 3
_TRANSACTIONAL_WEIGHT = 2


def _level(score: int) -> str:
    if score <= 2:
        return 'Low'
    if score <= 5:
        return 'Medium'
    return 'High'


class PersistenceProcessor(BaseProcessor):
    """Normalizes the persistence aggregate of one artifact."""

    name = 'persistence'

    def process(self, config: Optional[PersistenceConfig], artifact_id: str = '') -> ProcessingResult[PersistenceConfig]:
        """Coerce flags to strict booleans and bound every string field."""
        if config is None:
            logger.info("No persistence data for %s, using defaults", artifact_id)
            return ProcessingResult(value=PersistenceConfig())

        d = config.details
        processed = replace(
            config,
            jms_enabled=self.ensure_boolean(config.jms_enabled),
            data_store_enabled=self.ensure_boolean(config.data_store_enabled),
            variables_enabled=self.ensure_boolean(config.variables_enabled),
            message_persistence_enabled=self.ensure_boolean(config.message_persistence_enabled),
            details=replace(
                d,
                jms_adapters=tuple(
                    JmsAdapterConfig(
                        name=self.sanitize_string(a.name, MAX_NAME_LENGTH, 'name'),
                        type=self.sanitize_string(a.type, MAX_TYPE_LENGTH, 'type'),
                        properties=self._values(a.properties),
                    )
                    for a in d.jms_adapters
                ),
                message_persistence=tuple(
                    MessagePersistenceConfig(
                        adapter_name=self.sanitize_string(m.adapter_name, MAX_NAME_LENGTH, 'adapter_name'),
                        component_type=self.sanitize_string(m.component_type, MAX_TYPE_LENGTH, 'component_type'),
                        enabled=self.ensure_boolean(m.enabled),
                        configuration=self._values(m.configuration),
                    )
                    for m in d.message_persistence
                ),
                data_store_operations=tuple(
                    DataStoreOperationConfig(
                        adapter_name=self.sanitize_string(o.adapter_name, MAX_NAME_LENGTH, 'adapter_name'),
                        component_type=self.sanitize_string(o.component_type, MAX_TYPE_LENGTH, 'component_type'),
                        operation=o.operation,
                        enabled=self.ensure_boolean(o.enabled),
                        configuration=self._values(o.configuration),
                    )
                    for o in d.data_store_operations
                ),
                data_store_activities=tuple(
                    DataStoreActivity(
                        id=self.sanitize_string(a.id, MAX_ID_LENGTH, 'id'),
                        name=self.sanitize_string(a.name, MAX_NAME_LENGTH, 'name'),
                        task_type=self.sanitize_string(a.task_type, MAX_TYPE_LENGTH, 'task_type'),
                        activity_type=a.activity_type,
                        properties=tuple(
                            PropertyPair(
                                key=self.sanitize_string(p.key, MAX_TYPE_LENGTH, 'key'),
                                value=self.sanitize_string(p.value, MAX_VALUE_LENGTH, 'value'),
                            )
                            for p in a.properties
                        ),
                    )
                    for a in d.data_store_activities
                ),
                variable_operations=tuple(
                    VariableOperation(
                        id=self.sanitize_string(v.id, MAX_ID_LENGTH, 'id'),
                        name=self.sanitize_string(v.name, MAX_NAME_LENGTH, 'name'),
                        task_type=self.sanitize_string(v.task_type, MAX_TYPE_LENGTH, 'task_type'),
                        operation=self.sanitize_string(v.operation, MAX_NAME_LENGTH, 'operation'),
                    )
                    for v in d.variable_operations
                ),
                external_calls=tuple(
                    replace(
                        c,
                        id=self.sanitize_string(c.id, MAX_ID_LENGTH, 'id'),
                        name=self.sanitize_string(c.name, MAX_NAME_LENGTH, 'name'),
                    )
                    for c in d.external_calls
                ),
                transactional_handling=self.sanitize_string(d.transactional_handling, MAX_TYPE_LENGTH, 'transactional_handling') or NONE_VALUE,
                process_type=self.sanitize_string(d.process_type, MAX_TYPE_LENGTH, 'process_type'),
                direct_call=self.ensure_boolean(d.direct_call),
            ),
        )
        logger.info(
            "Processed persistence for %s: jms=%s data_store=%s variables=%s message_persistence=%s",
            artifact_id, processed.jms_enabled, processed.data_store_enabled,
            processed.variables_enabled, processed.message_persistence_enabled,
        )
        return ProcessingResult(value=processed)

    def _values(self, values: Dict[str, str]) -> Dict[str, str]:
        return {
            self.sanitize_string(k, MAX_TYPE_LENGTH, 'key'): self.sanitize_string(v, MAX_VALUE_LENGTH, 'value')
            for k, v in (values or {}).items()
        }

    # ── Reporting ────────────────────────────────────────────────────────

    @staticmethod
    def summarize_patterns(config: PersistenceConfig) -> PersistencePatterns:
        """Summarize the persistence types used and the resulting data-flow pattern."""
        types: List[str] = []
        permanent = temporary = False
        if config.jms_enabled:
            types.append('JMS')
            permanent = True
        if config.data_store_enabled:
            types.append('Data Store')
            temporary = True
        if config.variables_enabled:
            types.append('Variables')
            temporary = True
        if config.message_persistence_enabled:
            types.append('Message Persistence')
            permanent = True
        transactional = config.details.transactional_handling not in ('', NONE_VALUE)
        if transactional:
            types.append('Transactional')

        count = len(types)
        if count == 0:
            flow_pattern = 'Stateless'
        elif count == 1:
            flow_pattern = 'Simple Stateful'
        elif count == 2:
            flow_pattern = 'Stateful'
        else:
            flow_pattern = 'Complex Stateful'
        if permanent and temporary:
            flow_pattern = 'Hybrid Persistence'
        elif permanent:
            flow_pattern = 'Persistent Storage'
        elif temporary:
            flow_pattern = 'Temporary Storage'

        return PersistencePatterns(
            persistence_types=tuple(types),
            complexity=_COMPLEXITY[min(count, 3)],
            transactional=transactional,
            has_temporary_storage=temporary,
            has_permanent_storage=permanent,
            data_flow_pattern=flow_pattern,
        )

    @staticmethod
    def footprint(config: PersistenceConfig) -> PersistenceFootprint:
        """Weighted estimate of the storage resources an artifact relies on."""
        storage_types: List[str] = []
        score = 0
        if config.jms_enabled:
            storage_types.append('JMS Queues')
            score += _JMS_WEIGHT
        if config.data_store_enabled:
            storage_types.append('Data Store')
            score += _DATA_STORE_WEIGHT
        if config.variables_enabled:
            storage_types.append('Process Variables')
            score += _VARIABLES_WEIGHT
        if config.message_persistence_enabled:
            storage_types.append('Message Persistence')
            score += _MESSAGE_PERSISTENCE_WEIGHT

        details = config.details
        if len(details.jms_adapters) > 1:
            score += 1
        if len(details.data_store_operations) > 3:
            score += 1
        if details.transactional_handling == ROLLBACK_HANDLING:
            score += _TRANSACTIONAL_WEIGHT

        return PersistenceFootprint(
            storage_types=tuple(storage_types),
            estimated_complexity=score,
            resource_usage=_level(score),
            maintenance_level=_level(score),
        )

    @staticmethod
    def recommendations(config: PersistenceConfig) -> List[Recommendation]:
        """Advisory findings; these never change the extracted configuration."""
        found: List[Recommendation] = []
        details = config.details
        no_transactions = details.transactional_handling in ('', NONE_VALUE)

        if config.jms_enabled and config.data_store_enabled:
            found.append(Recommendation(
                'performance', 'Multiple persistence mechanisms may impact performance',
                RecommendationPriority.MEDIUM,
            ))
        if details.direct_call and config.message_persistence_enabled:
            found.append(Recommendation(
                'design', 'Direct call processes typically do not need message persistence',
                RecommendationPriority.LOW,
            ))
        if (config.jms_enabled or config.message_persistence_enabled) and no_transactions:
            found.append(Recommendation(
                'reliability', 'Consider enabling transactional handling for persistent operations',
                RecommendationPriority.HIGH,
            ))
        if details.data_store_operations and not config.data_store_enabled:
            found.append(Recommendation(
                'configuration', 'Data store operations found but data store not enabled',
                RecommendationPriority.HIGH,
            ))
        if config.jms_enabled or config.data_store_enabled or config.message_persistence_enabled:
            found.append(Recommendation(
                'security', 'Ensure sensitive data is encrypted when using persistence mechanisms',
                RecommendationPriority.HIGH,
            ))
        return found

    def validate(self, config: Any) -> ValidationReport:
        """Check flag types and flag/evidence consistency."""
        warnings: List[str] = []
        if not isinstance(config, PersistenceConfig):
            return ValidationReport(is_valid=False, errors=('persistence config missing',))
        for field_name in _BOOLEAN_FIELDS:
            value = getattr(config, field_name)
            if not isinstance(value, bool):
                warnings.append(f'{field_name} should be boolean, got {type(value).__name__}')
        details = config.details
        if config.jms_enabled and not details.jms_adapters:
            warnings.append('JMS enabled but no JMS adapters found')
        if config.data_store_enabled and not details.data_store_operations and not details.data_store_activities:
            warnings.append('Data store enabled but no data store operations found')
        return ValidationReport(is_valid=True, warnings=tuple(warnings))
