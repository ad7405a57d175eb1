"""
Persistence extraction from integration-flow definitions.

Evidence is gathered from the collaboration settings, from the tasks of
every process, and from every message-flow adapter. All three sources add to
one accumulator; none overrides another and flags are only switched on.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from iflow_parser.document_parser import DocumentNode, ParsedDocument
from iflow_parser.domain.classification import DATA_STORE_OPERATION_RULES, classify, contains_any
from iflow_parser.domain.constants import (
    CALL_ACTIVITY,
    DATA_STORE_ACTIVITY_KEYWORDS,
    DATA_STORE_COMPONENT_KEYWORDS,
    DATA_STORE_KEYWORDS,
    DIRECT_CALL_PROCESS_TYPE,
    EXTERNAL_CALL_ACTIVITY_KEYWORDS,
    JMS_COMPONENT_KEYWORDS,
    JMS_PROPERTY_KEYWORDS,
    KEY_MESSAGE_PERSISTENCE,
    KEY_PROCESS_TYPE,
    KEY_TRANSACTIONAL_HANDLING,
    NONE_VALUE,
    OPERATION_KEYWORDS,
    PERSISTENCE_PROPERTY_KEYWORDS,
    RELIABLE_COMPONENT_KEYWORDS,
    SCRIPT,
    SCRIPT_TASK,
    SERVICE_TASK,
    VARIABLE_ACTIVITY_KEYWORDS,
    VARIABLE_KEYWORDS,
    VARIABLE_SCRIPT_CALLS,
)
from iflow_parser.domain.enums import DataStoreOperation
from iflow_parser.domain.models import (
    DataStoreActivity,
    DataStoreOperationConfig,
    ExternalCall,
    ExtractionResult,
    JmsAdapterConfig,
    MessageFlowFragment,
    MessagePersistenceConfig,
    PersistenceConfig,
    PersistenceDetails,
    PropertyPair,
    VariableOperation,
)
from iflow_parser.domain.properties import (
    collaboration_properties,
    key_contains,
    matching_properties,
    message_flows,
    property_map,
)
from iflow_parser.extractors.base_extractor import BaseExtractor

logger = logging.getLogger(__name__)

_is_jms_component = contains_any(*JMS_COMPONENT_KEYWORDS)
_is_reliable_component = contains_any(*RELIABLE_COMPONENT_KEYWORDS)
_is_data_store_component = contains_any(*DATA_STORE_COMPONENT_KEYWORDS)
_is_external_activity = contains_any(*EXTERNAL_CALL_ACTIVITY_KEYWORDS)


def infer_variable_operation(properties: List[PropertyPair], script: str) -> str:
    """Best-effort name for what a script task does with variables."""
    for prop in properties:
        if key_contains(prop.key, OPERATION_KEYWORDS) and prop.value:
            return prop.value
    if script:
        if 'setProperty' in script or 'setHeader' in script:
            return 'Set Variable'
        if 'getProperty' in script or 'getHeader' in script:
            return 'Get Variable'
        if 'removeProperty' in script or 'removeHeader' in script:
            return 'Remove Variable'
    return 'Variable Operation'


def infer_data_store_operation(keys: List[str]) -> DataStoreOperation:
    """Classify data store keys as Get/Put/Delete; the first conclusive key wins."""
    for key in keys:
        operation = classify(key, DATA_STORE_OPERATION_RULES)
        if operation is not None:
            return operation
    return DataStoreOperation.UNKNOWN


@dataclass
class _PersistenceAccumulator:
    """Mutable working state, frozen into a PersistenceConfig at the end."""

    jms_enabled: bool = False
    data_store_enabled: bool = False
    variables_enabled: bool = False
    message_persistence_enabled: bool = False
    jms_adapters: List[JmsAdapterConfig] = field(default_factory=list)
    message_persistence: List[MessagePersistenceConfig] = field(default_factory=list)
    data_store_operations: List[DataStoreOperationConfig] = field(default_factory=list)
    data_store_activities: List[DataStoreActivity] = field(default_factory=list)
    variable_operations: List[VariableOperation] = field(default_factory=list)
    external_calls: List[ExternalCall] = field(default_factory=list)
    transactional_handling: str = NONE_VALUE
    process_type: str = 'undefined'
    direct_call: bool = False

    def freeze(self) -> PersistenceConfig:
        return PersistenceConfig(
            jms_enabled=self.jms_enabled or bool(self.jms_adapters),
            data_store_enabled=(
                self.data_store_enabled or bool(self.data_store_operations) or bool(self.data_store_activities)
            ),
            variables_enabled=self.variables_enabled or bool(self.variable_operations),
            message_persistence_enabled=self.message_persistence_enabled or bool(self.message_persistence),
            details=PersistenceDetails(
                jms_adapters=tuple(self.jms_adapters),
                message_persistence=tuple(self.message_persistence),
                data_store_operations=tuple(self.data_store_operations),
                data_store_activities=tuple(self.data_store_activities),
                variable_operations=tuple(self.variable_operations),
                external_calls=tuple(self.external_calls),
                transactional_handling=self.transactional_handling,
                process_type=self.process_type,
                direct_call=self.direct_call,
            ),
        )


class PersistenceExtractor(BaseExtractor):
    """Extracts the persistence and durability usage of one artifact."""

    name = 'persistence'

    def empty_result(self) -> PersistenceConfig:
        return PersistenceConfig()

    def extract(self, document: ParsedDocument, artifact_id: str) -> ExtractionResult[PersistenceConfig]:
        """
        Extract the persistence configuration.

        Args:
            document: Parsed definition document
            artifact_id: Artifact identifier for logging

        Returns:
            ExtractionResult wrapping a single PersistenceConfig
        """
        acc = _PersistenceAccumulator()
        self._extract_collaboration(document, acc)
        for index, process in enumerate(document.processes):
            self._extract_process(process, index, acc, artifact_id)
        for index, fragment in enumerate(message_flows(document)):
            self._extract_adapter(fragment, index, acc)

        config = acc.freeze()
        details = config.details
        logger.info(
            "Persistence extraction completed for %s: jms=%s data_store=%s variables=%s "
            "message_persistence=%s (jms adapters=%d, data store ops=%d, activities=%d, "
            "variable ops=%d, external calls=%d)",
            artifact_id, config.jms_enabled, config.data_store_enabled, config.variables_enabled,
            config.message_persistence_enabled, len(details.jms_adapters), len(details.data_store_operations),
            len(details.data_store_activities), len(details.variable_operations), len(details.external_calls),
        )
        return ExtractionResult(value=config)

    # ── Collaboration ────────────────────────────────────────────────────

    @staticmethod
    def _extract_collaboration(document: ParsedDocument, acc: _PersistenceAccumulator) -> None:
        for prop in collaboration_properties(document):
            if prop.key == KEY_TRANSACTIONAL_HANDLING:
                acc.transactional_handling = prop.value or NONE_VALUE
                if prop.value and prop.value != NONE_VALUE:
                    acc.message_persistence_enabled = True
            elif prop.key == KEY_PROCESS_TYPE:
                acc.process_type = prop.value
                acc.direct_call = prop.value == DIRECT_CALL_PROCESS_TYPE
            elif prop.key in KEY_MESSAGE_PERSISTENCE and prop.value == 'true':
                acc.message_persistence_enabled = True

    # ── Processes ────────────────────────────────────────────────────────

    def _extract_process(
        self, process: DocumentNode, index: int, acc: _PersistenceAccumulator, artifact_id: str
    ) -> None:
        logger.debug(
            "Processing %s for persistence in %s", process.id or f"Process_{index}", artifact_id,
        )

        for task, properties in self._tasks(process, SCRIPT_TASK):
            script = task.child_text(SCRIPT)
            task_id = task.id or 'UnknownTask'

            if matching_properties(properties, DATA_STORE_KEYWORDS) or 'datastore' in script.lower():
                acc.data_store_activities.append(DataStoreActivity(
                    id=task_id,
                    name=task.name or 'Data Store Activity',
                    task_type='ScriptTask',
                    properties=tuple(properties),
                ))

            uses_variables = bool(matching_properties(properties, VARIABLE_KEYWORDS)) or any(
                call in script for call in VARIABLE_SCRIPT_CALLS
            )
            if uses_variables:
                acc.variable_operations.append(VariableOperation(
                    id=task_id,
                    name=task.name or 'Variable Operation',
                    task_type='ScriptTask',
                    operation=infer_variable_operation(properties, script),
                ))

        for task, properties in self._tasks(process, SERVICE_TASK):
            activity_type = self._activity_type(properties)
            if not activity_type:
                continue
            task_id = task.id or 'UnknownTask'

            if any(keyword in activity_type for keyword in DATA_STORE_ACTIVITY_KEYWORDS):
                acc.data_store_activities.append(DataStoreActivity(
                    id=task_id,
                    name=task.name or 'Data Store Operation',
                    task_type='ServiceTask',
                    activity_type=activity_type,
                    properties=tuple(properties),
                ))
            if any(keyword in activity_type for keyword in VARIABLE_ACTIVITY_KEYWORDS):
                acc.variable_operations.append(VariableOperation(
                    id=task_id,
                    name=task.name or 'Content Modifier',
                    task_type='ServiceTask',
                    operation=activity_type,
                ))
            if _is_external_activity(activity_type):
                acc.external_calls.append(ExternalCall(
                    id=task_id,
                    name=task.name or 'External Call',
                    activity_type=activity_type,
                ))

        for activity in process.find_all(CALL_ACTIVITY):
            called_element = activity.get('calledElement') or None
            acc.external_calls.append(ExternalCall(
                id=activity.id or 'UnknownCall',
                name=activity.name or called_element or 'Call Activity',
                called_element=called_element,
            ))

    # ── Adapters ─────────────────────────────────────────────────────────

    def _extract_adapter(self, fragment: MessageFlowFragment, index: int, acc: _PersistenceAccumulator) -> None:
        properties = list(fragment.properties)
        adapter_name = self._adapter_name(fragment, index)
        component_type = self._component_type(fragment)

        if _is_jms_component(component_type):
            acc.jms_adapters.append(JmsAdapterConfig(
                name=adapter_name,
                properties=property_map(matching_properties(properties, JMS_PROPERTY_KEYWORDS)),
            ))
            logger.debug("Found JMS adapter %s (%s)", adapter_name, component_type)

        persistence_properties = matching_properties(properties, PERSISTENCE_PROPERTY_KEYWORDS)
        if persistence_properties or _is_reliable_component(component_type):
            acc.message_persistence.append(MessagePersistenceConfig(
                adapter_name=adapter_name,
                component_type=component_type,
                configuration=property_map(persistence_properties),
            ))

        store_properties = matching_properties(properties, DATA_STORE_KEYWORDS)
        if store_properties or _is_data_store_component(component_type):
            acc.data_store_operations.append(DataStoreOperationConfig(
                adapter_name=adapter_name,
                component_type=component_type,
                operation=infer_data_store_operation([prop.key for prop in store_properties]),
                configuration=property_map(store_properties),
            ))
