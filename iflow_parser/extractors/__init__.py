"""Extractors harvesting raw candidate records from parsed definitions."""

from iflow_parser.extractors.base_extractor import BaseExtractor
from iflow_parser.extractors.adapter_extractor import AdapterExtractor
from iflow_parser.extractors.security_extractor import SecurityExtractor
from iflow_parser.extractors.error_handling_extractor import ErrorHandlingExtractor
from iflow_parser.extractors.persistence_extractor import PersistenceExtractor

__all__ = [
    'BaseExtractor',
    'AdapterExtractor',
    'SecurityExtractor',
    'ErrorHandlingExtractor',
    'PersistenceExtractor',
]
