"""Processors normalizing raw candidates into canonical records."""

from iflow_parser.processors.base_processor import BaseProcessor
from iflow_parser.processors.adapter_processor import AdapterProcessor
from iflow_parser.processors.security_processor import SecurityProcessor
from iflow_parser.processors.error_handling_processor import ErrorHandlingProcessor
from iflow_parser.processors.persistence_processor import PersistenceProcessor

__all__ = [
    'BaseProcessor', 'AdapterProcessor', 'SecurityProcessor',
    'ErrorHandlingProcessor', 'PersistenceProcessor',
]
