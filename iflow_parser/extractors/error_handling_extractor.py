"""
Error-handling extraction from integration-flow definitions.

Evidence comes from two levels: global collaboration settings (exception
return policy, log level, server trace) and each process node (error event
subprocesses, service tasks configured for error/retry handling, and
transaction settings). Flags are only ever switched on by evidence.
"""

import logging
from typing import List, Optional

from iflow_parser.document_parser import DocumentNode, ParsedDocument
from iflow_parser.domain.constants import (
    END_EVENT,
    ERROR_EVENT_DEFINITION,
    ESCALATION_EVENT_DEFINITION,
    KEY_ISOLATION_LEVEL,
    KEY_LOG_LEVEL,
    KEY_RETURN_EXCEPTION,
    KEY_SERVER_TRACE,
    KEY_TRANSACTION_TIMEOUT,
    KEY_TRANSACTIONAL_HANDLING,
    MESSAGE_EVENT_DEFINITION,
    NONE_VALUE,
    ROLLBACK_HANDLING,
    SERVICE_TASK,
    START_EVENT,
    SUB_PROCESS,
    TRY_CATCH_KEYWORDS,
)
from iflow_parser.domain.enums import ErrorClassification
from iflow_parser.domain.models import (
    ErrorHandlingConfig,
    ErrorHandlingDetails,
    ErrorStartEvent,
    ErrorSubprocess,
    ExtractionResult,
    ProcessErrorHandling,
    TransactionHandling,
    TryCatchPattern,
)
from iflow_parser.domain.properties import (
    collaboration_properties,
    get_property,
    matching_properties,
    properties_of,
)
from iflow_parser.extractors.base_extractor import BaseExtractor

logger = logging.getLogger(__name__)

NOT_SPECIFIED = 'Not specified'


def classify_error_subprocess(subprocess: DocumentNode) -> ErrorClassification:
    """Classify an error subprocess by the shape of its end events."""
    end_events = subprocess.find_all(END_EVENT)
    if not end_events:
        return ErrorClassification.BASIC
    if any(event.has(MESSAGE_EVENT_DEFINITION) for event in end_events):
        return ErrorClassification.RESPONSE_BASED
    if any(event.has(ESCALATION_EVENT_DEFINITION) for event in end_events):
        return ErrorClassification.ESCALATION_BASED
    return ErrorClassification.STANDARD


class ErrorHandlingExtractor(BaseExtractor):
    """Extracts the error handling posture of one artifact."""

    name = 'error_handling'

    def empty_result(self) -> ErrorHandlingConfig:
        return ErrorHandlingConfig()

    def extract(self, document: ParsedDocument, artifact_id: str) -> ExtractionResult[ErrorHandlingConfig]:
        """
        Extract the error handling configuration.

        Args:
            document: Parsed definition document
            artifact_id: Artifact identifier for logging

        Returns:
            ExtractionResult wrapping a single ErrorHandlingConfig
        """
        detection = logging_enabled = classification = reporting = False
        return_exception: Optional[bool] = None
        log_level: Optional[str] = None
        server_trace: Optional[bool] = None

        for prop in collaboration_properties(document):
            if prop.key == KEY_RETURN_EXCEPTION:
                return_exception = prop.value == 'true'
                reporting = reporting or return_exception
            elif prop.key == KEY_LOG_LEVEL:
                log_level = prop.value
                logging_enabled = logging_enabled or prop.value not in (NONE_VALUE, '')
            elif prop.key == KEY_SERVER_TRACE:
                server_trace = prop.value == 'true'
                detection = detection or server_trace

        processes: List[ProcessErrorHandling] = []
        for index, process in enumerate(document.processes):
            process_details = self._extract_process(process, index, artifact_id)
            if process_details is None:
                continue
            processes.append(process_details)
            if process_details.error_subprocesses:
                detection = classification = True
            if process_details.try_catch_patterns:
                logging_enabled = True

        config = ErrorHandlingConfig(
            detection_enabled=detection,
            logging_enabled=logging_enabled,
            classification_enabled=classification,
            reporting_enabled=reporting,
            details=ErrorHandlingDetails(
                return_exception_to_sender=return_exception,
                log_level=log_level,
                server_trace=server_trace,
                processes=tuple(processes),
            ),
        )
        logger.info(
            "Error handling extraction completed for %s: detection=%s logging=%s classification=%s "
            "reporting=%s processes=%d",
            artifact_id, detection, logging_enabled, classification, reporting, len(processes),
        )
        return ExtractionResult(value=config)

    def _extract_process(self, process: DocumentNode, index: int, artifact_id: str) -> Optional[ProcessErrorHandling]:
        process_id = process.id or f"Process_{index}"
        process_name = process.name or process_id
        logger.debug("Processing %s (%s) for error handling in %s", process_id, process_name, artifact_id)

        subprocesses = self._find_error_subprocesses(process, artifact_id)
        patterns = self._find_try_catch_patterns(process)
        transaction = self._extract_transaction(process)
        if not subprocesses and not patterns and transaction is None:
            return None

        return ProcessErrorHandling(
            process_id=process_id,
            process_name=process_name,
            has_error_handling=bool(subprocesses or patterns),
            error_subprocesses=tuple(subprocesses),
            try_catch_patterns=tuple(patterns),
            transaction_handling=transaction,
        )

    def _find_error_subprocesses(self, process: DocumentNode, artifact_id: str) -> List[ErrorSubprocess]:
        found = []
        for subprocess, properties in self._tasks(process, SUB_PROCESS):
            activity_type = self._activity_type(properties)
            if 'Error' not in activity_type:
                continue
            subprocess_id = subprocess.id or 'UnknownSubProcess'
            found.append(ErrorSubprocess(
                id=subprocess_id,
                name=subprocess.name or subprocess_id,
                activity_type=activity_type,
                classification=classify_error_subprocess(subprocess),
                error_start_events=tuple(self._find_error_start_events(subprocess)),
            ))
            logger.debug("Found error subprocess %s (%s) in %s", subprocess_id, activity_type, artifact_id)
        return found

    @staticmethod
    def _find_error_start_events(subprocess: DocumentNode) -> List[ErrorStartEvent]:
        events = []
        for start_event in subprocess.find_all(START_EVENT):
            definition = start_event.find(ERROR_EVENT_DEFINITION)
            if definition is None:
                continue
            events.append(ErrorStartEvent(
                id=start_event.id or 'UnknownErrorEvent',
                name=start_event.name or 'Error Start Event',
                error_ref=definition.get('errorRef') or 'UnknownError',
            ))
        return events

    def _find_try_catch_patterns(self, process: DocumentNode) -> List[TryCatchPattern]:
        patterns = []
        for task, properties in self._tasks(process, SERVICE_TASK):
            error_properties = matching_properties(properties, TRY_CATCH_KEYWORDS)
            if error_properties:
                patterns.append(TryCatchPattern(
                    id=task.id or 'UnknownTask',
                    name=task.name or 'Service Task',
                    task_type='ServiceTask',
                    error_handling_properties=tuple(error_properties),
                ))
        return patterns

    @staticmethod
    def _extract_transaction(process: DocumentNode) -> Optional[TransactionHandling]:
        properties = properties_of(process)
        timeout = get_property(properties, KEY_TRANSACTION_TIMEOUT)
        handling = get_property(properties, KEY_TRANSACTIONAL_HANDLING)
        if not timeout and not handling:
            return None
        return TransactionHandling(
            timeout=timeout or NOT_SPECIFIED,
            handling=handling or NOT_SPECIFIED,
            supports_rollback=handling == ROLLBACK_HANDLING,
            isolation_level=get_property(properties, KEY_ISOLATION_LEVEL),
        )
