"""Tests for ErrorHandlingProcessor."""

from iflow_parser.domain.constants import MAX_SETTING_LENGTH
from iflow_parser.domain.enums import ErrorClassification, RecommendationPriority
from iflow_parser.domain.models import (
    ErrorHandlingConfig,
    ErrorHandlingDetails,
    ErrorSubprocess,
    ProcessErrorHandling,
    TransactionHandling,
    TryCatchPattern,
)
from iflow_parser.processors import ErrorHandlingProcessor


def _process(subprocesses=(), patterns=(), transaction=None):
    return ProcessErrorHandling(
        process_id='  Process_1 ',
        process_name='Main',
        has_error_handling=bool(subprocesses or patterns),
        error_subprocesses=tuple(subprocesses),
        try_catch_patterns=tuple(patterns),
        transaction_handling=transaction,
    )


SUBPROCESS = ErrorSubprocess(
    id='SubProcess_1', name='Exception', activity_type='ErrorEventSubProcessTemplate',
    classification=ErrorClassification.STANDARD,
)
PATTERN = TryCatchPattern(id='Task_1', name='Call', task_type='ServiceTask')
TRANSACTION = TransactionHandling(timeout='30', handling='Required', supports_rollback=True)


class TestErrorHandlingProcessor:
    """Tests for error handling normalization."""

    def setup_method(self):
        self.processor = ErrorHandlingProcessor()

    def test_none_gives_defaults(self):
        assert self.processor.process(None, 'Flow').value == ErrorHandlingConfig()

    def test_flags_coerced_to_bool(self):
        config = ErrorHandlingConfig(detection_enabled='true', logging_enabled=0)
        processed = self.processor.process(config).value
        assert processed.detection_enabled is True
        assert processed.logging_enabled is False

    def test_strings_bounded(self):
        config = ErrorHandlingConfig(details=ErrorHandlingDetails(
            log_level='  All events  ',
            processes=(_process(subprocesses=[SUBPROCESS]),),
        ))
        processed = self.processor.process(config).value
        assert processed.details.log_level == 'All events'
        assert processed.details.processes[0].process_id == 'Process_1'
        assert processed.details.processes[0].error_subprocesses[0].classification is ErrorClassification.STANDARD

    def test_transaction_settings_bounded(self):
        transaction = TransactionHandling(
            timeout='9' * 80, handling='Required', supports_rollback=1, isolation_level=' Serializable ',
        )
        config = ErrorHandlingConfig(details=ErrorHandlingDetails(processes=(_process(transaction=transaction),)))
        processed = self.processor.process(config).value.details.processes[0].transaction_handling
        assert processed.timeout == '9' * MAX_SETTING_LENGTH
        assert processed.isolation_level == 'Serializable'
        assert processed.supports_rollback is True

    def test_absent_settings_stay_absent(self):
        processed = self.processor.process(ErrorHandlingConfig()).value
        assert processed.details.log_level is None
        assert processed.details.return_exception_to_sender is None


class TestSummarizePatterns:

    def test_no_patterns(self):
        patterns = ErrorHandlingProcessor.summarize_patterns(ErrorHandlingConfig())
        assert patterns.pattern_types == ()
        assert patterns.complexity == 'None'

    def test_all_patterns(self):
        config = ErrorHandlingConfig(details=ErrorHandlingDetails(processes=(
            _process(subprocesses=[SUBPROCESS], patterns=[PATTERN], transaction=TRANSACTION),
        )))
        patterns = ErrorHandlingProcessor.summarize_patterns(config)
        assert patterns.pattern_types == ('Error Subprocess', 'Try-Catch', 'Transaction Handling')
        assert patterns.complexity == 'High'

    def test_patterns_counted_once_across_processes(self):
        config = ErrorHandlingConfig(details=ErrorHandlingDetails(processes=(
            _process(patterns=[PATTERN]),
            _process(patterns=[PATTERN]),
        )))
        patterns = ErrorHandlingProcessor.summarize_patterns(config)
        assert patterns.pattern_types == ('Try-Catch',)
        assert patterns.complexity == 'Low'


class TestRecommendations:

    def test_nothing_enabled(self):
        found = ErrorHandlingProcessor.recommendations(ErrorHandlingConfig())
        assert [(r.type, r.priority) for r in found] == [
            ('improvement', RecommendationPriority.MEDIUM),
            ('improvement', RecommendationPriority.HIGH),
            ('improvement', RecommendationPriority.LOW),
        ]

    def test_detection_without_classification(self):
        config = ErrorHandlingConfig(detection_enabled=True, logging_enabled=True, reporting_enabled=True)
        found = ErrorHandlingProcessor.recommendations(config)
        assert len(found) == 1
        assert 'classification' in found[0].message

    def test_security_findings(self):
        config = ErrorHandlingConfig(
            detection_enabled=True, logging_enabled=True, classification_enabled=True, reporting_enabled=True,
            details=ErrorHandlingDetails(return_exception_to_sender=True, server_trace=True),
        )
        found = ErrorHandlingProcessor.recommendations(config)
        assert [(r.type, r.priority) for r in found] == [
            ('security', RecommendationPriority.HIGH),
            ('security', RecommendationPriority.MEDIUM),
        ]

    def test_recommendation_to_dict(self):
        found = ErrorHandlingProcessor.recommendations(ErrorHandlingConfig())
        assert found[0].to_dict()['priority'] == 'medium'


class TestValidate:

    def setup_method(self):
        self.processor = ErrorHandlingProcessor()

    def test_missing_config(self):
        assert not self.processor.validate(None).is_valid

    def test_detection_without_evidence_warns(self):
        report = self.processor.validate(ErrorHandlingConfig(detection_enabled=True))
        assert report.is_valid
        assert report.warnings == ('Detection enabled but no error handling mechanisms found',)

    def test_non_bool_flag_warns(self):
        report = self.processor.validate(ErrorHandlingConfig(logging_enabled='yes'))
        assert any('logging_enabled' in w for w in report.warnings)
