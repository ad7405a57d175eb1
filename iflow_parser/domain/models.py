"""Shared data models used across extractor and processor modules."""

import os
from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from iflow_parser.domain.enums import (
    AdapterDirection,
    DataStoreOperation,
    ErrorClassification,
    RecommendationPriority,
    SecurityDirection,
    SecurityMechanismType,
)
from iflow_parser.domain.errors import ExtractionWarning, ValidationWarning

T = TypeVar('T')


def to_json_data(value: Any) -> Any:
    """Convert models, enums and containers into JSON-serializable data."""
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_json_data(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, dict):
        return {str(k): to_json_data(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_data(v) for v in value]
    return value


# ── Configuration ───────────────────────────────────────────────────────

@dataclass
class ExtractionOptions:
    """Options controlling a pipeline run."""

    debug_dir: str | None = None
    pretty: bool = True
    deduplicate_security: bool = True
    include_recommendations: bool = True
    max_workers: int = 4

    @classmethod
    def from_env(cls) -> 'ExtractionOptions':
        """Build options from IFLOW_* environment variables."""
        options = cls(debug_dir=os.getenv('IFLOW_DEBUG_DIR') or None)
        workers = os.getenv('IFLOW_MAX_WORKERS')
        if workers and workers.isdigit() and int(workers) > 0:
            options.max_workers = int(workers)
        return options


# ── Document Fragments ──────────────────────────────────────────────────

@dataclass(frozen=True)
class PropertyPair:
    """A vendor key/value property."""

    key: str
    value: str


@dataclass(frozen=True)
class MessageFlowFragment:
    """One inter-component connection inside the collaboration."""

    id: str
    name: str
    properties: tuple[PropertyPair, ...] = ()
    source_ref: str = ''
    target_ref: str = ''

    @property
    def label(self) -> str:
        return self.id or self.name or 'Unnamed'

    @property
    def property_keys(self) -> tuple[str, ...]:
        return tuple(p.key for p in self.properties)


# ── Extraction Results ──────────────────────────────────────────────────

@dataclass(frozen=True)
class ExtractionResult(Generic[T]):
    """Best-effort extractor output plus skip diagnostics."""

    value: T
    warnings: tuple[ExtractionWarning, ...] = ()


@dataclass(frozen=True)
class ProcessingResult(Generic[T]):
    """Processor output plus validation diagnostics."""

    value: T
    warnings: tuple[ValidationWarning, ...] = ()


@dataclass(frozen=True)
class ValidationReport:
    """Result of validating one canonical record."""

    is_valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class Recommendation:
    """An advisory finding about an artifact's configuration."""

    type: str
    message: str
    priority: RecommendationPriority

    def to_dict(self) -> dict[str, Any]:
        return to_json_data(self)


# ── Adapters ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ExtractedAdapter:
    """Raw adapter candidate harvested from one message-flow fragment."""

    name: str
    component_type: str
    category: str
    direction: str = ''
    raw_properties: dict[str, str] = field(default_factory=dict)
    fragment_id: str = ''
    cmd_variant_uri: str | None = None


@dataclass(frozen=True)
class Adapter:
    """Canonical adapter record."""

    name: str
    adapter_type: str
    display_type: str
    category: AdapterDirection
    direction: AdapterDirection
    configuration: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return to_json_data(self)


# ── Security ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ExtractedSecurityMechanism:
    """Raw security mechanism candidate.

    ``mechanism_type`` is free-form or canonical; ``adapter_direction`` keeps
    the raw Sender/Receiver value of the fragment it came from, if any.
    """

    name: str
    mechanism_type: str
    direction: str
    configuration: dict[str, Any] = field(default_factory=dict)
    adapter_name: str = ''
    adapter_direction: str = ''


@dataclass(frozen=True)
class SecurityMechanism:
    """Canonical security mechanism record."""

    name: str
    mechanism_type: SecurityMechanismType
    direction: SecurityDirection
    configuration: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return to_json_data(self)


# ── Error Handling ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class ErrorStartEvent:
    id: str
    name: str
    error_ref: str


@dataclass(frozen=True)
class ErrorSubprocess:
    id: str
    name: str
    activity_type: str
    classification: ErrorClassification
    error_start_events: tuple[ErrorStartEvent, ...] = ()


@dataclass(frozen=True)
class TryCatchPattern:
    id: str
    name: str
    task_type: str
    error_handling_properties: tuple[PropertyPair, ...] = ()


@dataclass(frozen=True)
class TransactionHandling:
    timeout: str
    handling: str
    supports_rollback: bool
    isolation_level: str = ''


@dataclass(frozen=True)
class ProcessErrorHandling:
    """Error handling evidence found in one process node."""

    process_id: str
    process_name: str
    has_error_handling: bool
    error_subprocesses: tuple[ErrorSubprocess, ...] = ()
    try_catch_patterns: tuple[TryCatchPattern, ...] = ()
    transaction_handling: TransactionHandling | None = None


@dataclass(frozen=True)
class ErrorHandlingDetails:
    """Collaboration-level settings plus per-process evidence."""

    return_exception_to_sender: bool | None = None
    log_level: str | None = None
    server_trace: bool | None = None
    processes: tuple[ProcessErrorHandling, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.return_exception_to_sender is not None:
            data['return_exception_to_sender'] = self.return_exception_to_sender
        if self.log_level is not None:
            data['log_level'] = self.log_level
        if self.server_trace is not None:
            data['server_trace'] = self.server_trace
        if self.processes:
            data['process_details'] = {
                p.process_id: {k: v for k, v in to_json_data(p).items() if k != 'process_id'}
                for p in self.processes
            }
        return data


@dataclass(frozen=True)
class ErrorHandlingConfig:
    """Error handling posture of one artifact."""

    detection_enabled: bool = False
    logging_enabled: bool = False
    classification_enabled: bool = False
    reporting_enabled: bool = False
    details: ErrorHandlingDetails = field(default_factory=ErrorHandlingDetails)

    def to_dict(self) -> dict[str, Any]:
        return {
            'detection_enabled': self.detection_enabled,
            'logging_enabled': self.logging_enabled,
            'classification_enabled': self.classification_enabled,
            'reporting_enabled': self.reporting_enabled,
            'error_handling_details': self.details.to_dict(),
        }


# ── Persistence ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class JmsAdapterConfig:
    name: str
    type: str = 'JMS'
    properties: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class MessagePersistenceConfig:
    adapter_name: str
    component_type: str
    enabled: bool = True
    configuration: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class DataStoreOperationConfig:
    adapter_name: str
    component_type: str
    operation: DataStoreOperation = DataStoreOperation.UNKNOWN
    enabled: bool = True
    configuration: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class DataStoreActivity:
    id: str
    name: str
    task_type: str
    activity_type: str | None = None
    properties: tuple[PropertyPair, ...] = ()


@dataclass(frozen=True)
class VariableOperation:
    id: str
    name: str
    task_type: str
    operation: str


@dataclass(frozen=True)
class ExternalCall:
    id: str
    name: str
    called_element: str | None = None
    activity_type: str | None = None


@dataclass(frozen=True)
class PersistenceDetails:
    jms_adapters: tuple[JmsAdapterConfig, ...] = ()
    message_persistence: tuple[MessagePersistenceConfig, ...] = ()
    data_store_operations: tuple[DataStoreOperationConfig, ...] = ()
    data_store_activities: tuple[DataStoreActivity, ...] = ()
    variable_operations: tuple[VariableOperation, ...] = ()
    external_calls: tuple[ExternalCall, ...] = ()
    transactional_handling: str = 'None'
    process_type: str = 'undefined'
    direct_call: bool = False


@dataclass(frozen=True)
class PersistenceConfig:
    """Persistence and durability usage of one artifact."""

    jms_enabled: bool = False
    data_store_enabled: bool = False
    variables_enabled: bool = False
    message_persistence_enabled: bool = False
    details: PersistenceDetails = field(default_factory=PersistenceDetails)

    def to_dict(self) -> dict[str, Any]:
        return {
            'jms_enabled': self.jms_enabled,
            'data_store_enabled': self.data_store_enabled,
            'variables_enabled': self.variables_enabled,
            'message_persistence_enabled': self.message_persistence_enabled,
            'persistence_details': to_json_data(self.details),
        }


# ── Reporting Summaries ─────────────────────────────────────────────────

@dataclass(frozen=True)
class ErrorHandlingPatterns:
    has_error_subprocess: bool = False
    has_try_catch: bool = False
    has_transaction_handling: bool = False
    pattern_types: tuple[str, ...] = ()
    complexity: str = 'None'

    def to_dict(self) -> dict[str, Any]:
        return to_json_data(self)


@dataclass(frozen=True)
class PersistencePatterns:
    persistence_types: tuple[str, ...] = ()
    complexity: str = 'None'
    transactional: bool = False
    has_temporary_storage: bool = False
    has_permanent_storage: bool = False
    data_flow_pattern: str = 'Stateless'

    def to_dict(self) -> dict[str, Any]:
        return to_json_data(self)


@dataclass(frozen=True)
class PersistenceFootprint:
    storage_types: tuple[str, ...] = ()
    estimated_complexity: int = 0
    resource_usage: str = 'Low'
    maintenance_level: str = 'Low'

    def to_dict(self) -> dict[str, Any]:
        return to_json_data(self)
