"""Shared accessors for vendor property bags and collaboration fragments.

Absence is the common case in these documents: every accessor returns an
empty string or empty list instead of raising.
"""

from typing import Iterable

from iflow_parser.document_parser import DocumentNode, ParsedDocument
from iflow_parser.domain.constants import (
    EXTENSION_ELEMENTS,
    MESSAGE_FLOW,
    PROPERTY,
    PROPERTY_KEY,
    PROPERTY_VALUE,
)
from iflow_parser.domain.models import MessageFlowFragment, PropertyPair


def properties_of(node: DocumentNode | None) -> list[PropertyPair]:
    """Read the extension property pairs attached to a node."""
    if node is None:
        return []
    pairs: list[PropertyPair] = []
    for extension in node.find_all(EXTENSION_ELEMENTS):
        for prop in extension.find_all(PROPERTY):
            key = prop.child_text(PROPERTY_KEY)
            if not key:
                continue
            pairs.append(PropertyPair(key=key, value=prop.child_text(PROPERTY_VALUE)))
    return pairs


def get_property(properties: Iterable[PropertyPair], key: str) -> str:
    """Return the value of the first property whose key matches exactly, or ''."""
    for prop in properties:
        if prop.key == key:
            return prop.value or ''
    return ''


def get_first_property(properties: Iterable[PropertyPair], keys: Iterable[str]) -> str:
    """Return the first non-empty value among several candidate keys."""
    props = list(properties)
    for key in keys:
        value = get_property(props, key)
        if value:
            return value
    return ''


def property_map(properties: Iterable[PropertyPair]) -> dict[str, str]:
    """Collapse property pairs into a dict; later keys win."""
    return {prop.key: prop.value for prop in properties}


def key_contains(key: str, keywords: Iterable[str]) -> bool:
    """Case-insensitive substring test of a key against keywords."""
    lowered = key.lower()
    return any(keyword.lower() in lowered for keyword in keywords)


def matching_properties(properties: Iterable[PropertyPair], keywords: Iterable[str]) -> list[PropertyPair]:
    """Return the properties whose key mentions any of the keywords."""
    keywords = tuple(keywords)
    return [prop for prop in properties if key_contains(prop.key, keywords)]


def collaboration_properties(document: ParsedDocument | None) -> list[PropertyPair]:
    """Top-level collaboration properties, or [] for a missing collaboration."""
    if document is None:
        return []
    return properties_of(document.collaboration)


def message_flows(document: ParsedDocument | None) -> list[MessageFlowFragment]:
    """Message-flow fragments of the collaboration, or [] if there are none."""
    if document is None or document.collaboration is None:
        return []
    return [
        MessageFlowFragment(
            id=flow.id,
            name=flow.name,
            properties=tuple(properties_of(flow)),
            source_ref=flow.get('sourceRef'),
            target_ref=flow.get('targetRef'),
        )
        for flow in document.collaboration.find_all(MESSAGE_FLOW)
    ]
