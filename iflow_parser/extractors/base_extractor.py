"""Base class for definition-document extractors."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable

from iflow_parser.document_parser import DocumentNode, ParsedDocument
from iflow_parser.domain.constants import KEY_ACTIVITY_TYPE, KEY_COMPONENT_TYPE, KEY_NAME, UNKNOWN
from iflow_parser.domain.errors import ExtractionWarning
from iflow_parser.domain.models import ExtractionResult, MessageFlowFragment, PropertyPair
from iflow_parser.domain.properties import get_property, properties_of

logger = logging.getLogger(__name__)


class BaseExtractor(ABC):
    """
    Base class for extractors.

    An extractor walks a ``ParsedDocument`` and harvests raw candidate
    records. It never raises for malformed or missing substructures; such
    fragments are skipped and reported as ``ExtractionWarning`` values.
    """

    #: Short name used in warnings and log records
    name = 'base'

    @abstractmethod
    def extract(self, document: ParsedDocument, artifact_id: str) -> ExtractionResult[Any]:
        """Extract raw candidates from a parsed document."""

    @abstractmethod
    def empty_result(self) -> Any:
        """Result value used for an empty or failed extraction."""

    def _skip(self, fragment_id: str, reason: str, available_keys: Iterable[str] = ()) -> ExtractionWarning:
        return ExtractionWarning(
            extractor=self.name,
            fragment_id=fragment_id,
            reason=reason,
            available_keys=tuple(available_keys),
        )

    @staticmethod
    def _adapter_name(fragment: MessageFlowFragment, index: int) -> str:
        return get_property(fragment.properties, KEY_NAME) or fragment.id or f"Adapter_{index}"

    @staticmethod
    def _component_type(fragment: MessageFlowFragment) -> str:
        return get_property(fragment.properties, KEY_COMPONENT_TYPE) or UNKNOWN

    @staticmethod
    def _activity_type(properties: list[PropertyPair]) -> str:
        return get_property(properties, KEY_ACTIVITY_TYPE)

    @staticmethod
    def _tasks(process: DocumentNode, element: str) -> list[tuple[DocumentNode, list[PropertyPair]]]:
        """Return (node, properties) pairs for every child element of one kind."""
        return [(node, properties_of(node)) for node in process.find_all(element)]
