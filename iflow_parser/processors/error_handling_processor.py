"""Error-handling normalization, pattern summary and advisories."""

import logging
from dataclasses import replace
from typing import Any, List, Optional

from iflow_parser.domain.constants import (
    MAX_ID_LENGTH,
    MAX_NAME_LENGTH,
    MAX_SETTING_LENGTH,
    MAX_TYPE_LENGTH,
    MAX_VALUE_LENGTH,
)
from iflow_parser.domain.enums import RecommendationPriority
from iflow_parser.domain.models import (
    ErrorHandlingConfig,
    ErrorHandlingPatterns,
    ErrorStartEvent,
    ErrorSubprocess,
    ProcessErrorHandling,
    ProcessingResult,
    PropertyPair,
    Recommendation,
    TransactionHandling,
    TryCatchPattern,
    ValidationReport,
)
from iflow_parser.processors.base_processor import BaseProcessor

logger = logging.getLogger(__name__)

_BOOLEAN_FIELDS = ('detection_enabled', 'logging_enabled', 'classification_enabled', 'reporting_enabled')
_COMPLEXITY = ('None', 'Low', 'Medium', 'High')


class ErrorHandlingProcessor(BaseProcessor):
    """Normalizes the error handling aggregate of one artifact."""

    name = 'error_handling'

    def process(self, config: Optional[ErrorHandlingConfig], artifact_id: str = '') -> ProcessingResult[ErrorHandlingConfig]:
        """Coerce flags to strict booleans and bound every string field."""
        if config is None:
            logger.info("No error handling data for %s, using defaults", artifact_id)
            return ProcessingResult(value=ErrorHandlingConfig())

        details = config.details
        processed = replace(
            config,
            detection_enabled=self.ensure_boolean(config.detection_enabled),
            logging_enabled=self.ensure_boolean(config.logging_enabled),
            classification_enabled=self.ensure_boolean(config.classification_enabled),
            reporting_enabled=self.ensure_boolean(config.reporting_enabled),
            details=replace(
                details,
                log_level=(
                    self.sanitize_string(details.log_level, MAX_TYPE_LENGTH, 'log_level')
                    if details.log_level is not None else None
                ),
                processes=tuple(self._process_details(p) for p in details.processes),
            ),
        )
        logger.info(
            "Processed error handling for %s: detection=%s logging=%s classification=%s reporting=%s",
            artifact_id, processed.detection_enabled, processed.logging_enabled,
            processed.classification_enabled, processed.reporting_enabled,
        )
        return ProcessingResult(value=processed)

    def _process_details(self, process: ProcessErrorHandling) -> ProcessErrorHandling:
        return replace(
            process,
            process_id=self.sanitize_string(process.process_id, MAX_ID_LENGTH, 'process_id'),
            process_name=self.sanitize_string(process.process_name, MAX_NAME_LENGTH, 'process_name'),
            error_subprocesses=tuple(self._subprocess(s) for s in process.error_subprocesses),
            try_catch_patterns=tuple(self._pattern(p) for p in process.try_catch_patterns),
            transaction_handling=(
                self._transaction(process.transaction_handling)
                if process.transaction_handling is not None else None
            ),
        )

    def _subprocess(self, subprocess: ErrorSubprocess) -> ErrorSubprocess:
        return replace(
            subprocess,
            id=self.sanitize_string(subprocess.id, MAX_ID_LENGTH, 'id'),
            name=self.sanitize_string(subprocess.name, MAX_NAME_LENGTH, 'name'),
            activity_type=self.sanitize_string(subprocess.activity_type, MAX_TYPE_LENGTH, 'activity_type'),
            error_start_events=tuple(
                ErrorStartEvent(
                    id=self.sanitize_string(event.id, MAX_ID_LENGTH, 'id'),
                    name=self.sanitize_string(event.name, MAX_NAME_LENGTH, 'name'),
                    error_ref=self.sanitize_string(event.error_ref, MAX_NAME_LENGTH, 'error_ref'),
                )
                for event in subprocess.error_start_events
            ),
        )

    def _pattern(self, pattern: TryCatchPattern) -> TryCatchPattern:
        return replace(
            pattern,
            id=self.sanitize_string(pattern.id, MAX_ID_LENGTH, 'id'),
            name=self.sanitize_string(pattern.name, MAX_NAME_LENGTH, 'name'),
            error_handling_properties=tuple(
                PropertyPair(
                    key=self.sanitize_string(prop.key, MAX_TYPE_LENGTH, 'key'),
                    value=self.sanitize_string(prop.value, MAX_VALUE_LENGTH, 'value'),
                )
                for prop in pattern.error_handling_properties
            ),
        )

    def _transaction(self, transaction: TransactionHandling) -> TransactionHandling:
        return TransactionHandling(
            timeout=self.sanitize_string(transaction.timeout, MAX_SETTING_LENGTH, 'timeout'),
            handling=self.sanitize_string(transaction.handling, MAX_TYPE_LENGTH, 'handling'),
            supports_rollback=self.ensure_boolean(transaction.supports_rollback),
            isolation_level=self.sanitize_string(transaction.isolation_level, MAX_SETTING_LENGTH, 'isolation_level'),
        )

    # ── Reporting ────────────────────────────────────────────────────────

    @staticmethod
    def summarize_patterns(config: ErrorHandlingConfig) -> ErrorHandlingPatterns:
        """Summarize which error handling patterns an artifact uses."""
        processes = config.details.processes
        has_subprocess = any(p.error_subprocesses for p in processes)
        has_try_catch = any(p.try_catch_patterns for p in processes)
        has_transaction = any(p.transaction_handling is not None for p in processes)

        pattern_types = []
        if has_subprocess:
            pattern_types.append('Error Subprocess')
        if has_try_catch:
            pattern_types.append('Try-Catch')
        if has_transaction:
            pattern_types.append('Transaction Handling')

        return ErrorHandlingPatterns(
            has_error_subprocess=has_subprocess,
            has_try_catch=has_try_catch,
            has_transaction_handling=has_transaction,
            pattern_types=tuple(pattern_types),
            complexity=_COMPLEXITY[len(pattern_types)],
        )

    @staticmethod
    def recommendations(config: ErrorHandlingConfig) -> List[Recommendation]:
        """Advisory findings; these never change the extracted configuration."""
        found: List[Recommendation] = []
        if not config.detection_enabled:
            found.append(Recommendation(
                'improvement', 'Consider enabling error detection for better error monitoring',
                RecommendationPriority.MEDIUM,
            ))
        if not config.logging_enabled:
            found.append(Recommendation(
                'improvement', 'Enable error logging for better troubleshooting capabilities',
                RecommendationPriority.HIGH,
            ))
        if config.detection_enabled and not config.classification_enabled:
            found.append(Recommendation(
                'improvement', 'Enable error classification to categorize different error types',
                RecommendationPriority.MEDIUM,
            ))
        if not config.reporting_enabled:
            found.append(Recommendation(
                'improvement', 'Consider enabling error reporting for better visibility',
                RecommendationPriority.LOW,
            ))
        if config.details.return_exception_to_sender is True:
            found.append(Recommendation(
                'security', 'Returning exceptions to sender may expose sensitive information',
                RecommendationPriority.HIGH,
            ))
        if config.details.server_trace is True:
            found.append(Recommendation(
                'security', 'Server trace is enabled which may expose sensitive data in traces',
                RecommendationPriority.MEDIUM,
            ))
        return found

    def validate(self, config: Any) -> ValidationReport:
        """Check flag types and flag/evidence consistency."""
        errors: List[str] = []
        warnings: List[str] = []
        if not isinstance(config, ErrorHandlingConfig):
            return ValidationReport(is_valid=False, errors=('error handling config missing',))
        for field_name in _BOOLEAN_FIELDS:
            value = getattr(config, field_name)
            if not isinstance(value, bool):
                warnings.append(f'{field_name} should be boolean, got {type(value).__name__}')
        if config.detection_enabled and not config.details.processes and config.details.server_trace is not True:
            warnings.append('Detection enabled but no error handling mechanisms found')
        return ValidationReport(is_valid=not errors, errors=tuple(errors), warnings=tuple(warnings))
