"""Namespace-aware parser for integration-flow definition documents.

Converts the raw ``.iflw`` text into a generic tree of ``DocumentNode``
objects. Every child collection is a list, whether the source serialized one
occurrence or many, so callers never check for the single-element shape.
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from iflow_parser.domain.constants import COLLABORATION, DEFINITIONS, PROCESS
from iflow_parser.domain.errors import DocumentParseError

logger = logging.getLogger(__name__)


def split_tag(tag: str) -> tuple[str, str]:
    """Split an ElementTree ``{uri}local`` tag into (namespace, local name)."""
    if tag.startswith('{') and '}' in tag:
        uri, local = tag[1:].split('}', 1)
        return uri, local
    return '', tag


@dataclass
class DocumentNode:
    """One element of the parsed definition tree.

    Attributes are merged onto the node under their local names; children are
    grouped by local name, always as lists, in document order.
    """

    tag: str
    namespace: str = ''
    attributes: dict[str, str] = field(default_factory=dict)
    text: str = ''
    children: dict[str, list['DocumentNode']] = field(default_factory=dict)

    def find_all(self, name: str) -> list['DocumentNode']:
        return list(self.children.get(name, ()))

    def find(self, name: str) -> 'DocumentNode | None':
        nodes = self.children.get(name)
        return nodes[0] if nodes else None

    def has(self, name: str) -> bool:
        return bool(self.children.get(name))

    def get(self, attribute: str, default: str = '') -> str:
        return self.attributes.get(attribute, default)

    def child_text(self, name: str) -> str:
        node = self.find(name)
        return node.text if node is not None else ''

    @property
    def id(self) -> str:
        return self.get('id')

    @property
    def name(self) -> str:
        return self.get('name')


@dataclass
class ParsedDocument:
    """Root of the parsed tree for one artifact.

    A document without a ``definitions`` root or without a collaboration is
    treated as empty rather than invalid.
    """

    root: DocumentNode | None
    prefixes: dict[str, str] = field(default_factory=dict)

    @property
    def definitions(self) -> DocumentNode | None:
        if self.root is not None and self.root.tag == DEFINITIONS:
            return self.root
        return None

    @property
    def collaboration(self) -> DocumentNode | None:
        definitions = self.definitions
        return definitions.find(COLLABORATION) if definitions is not None else None

    @property
    def processes(self) -> list[DocumentNode]:
        definitions = self.definitions
        return definitions.find_all(PROCESS) if definitions is not None else []

    @property
    def is_empty(self) -> bool:
        return self.collaboration is None and not self.processes

    def qualified_name(self, node: DocumentNode) -> str:
        """Render a node name with the prefix declared in the source, e.g. ``bpmn2:process``."""
        prefix = self.prefixes.get(node.namespace)
        return f"{prefix}:{node.tag}" if prefix else node.tag


class DocumentParser:
    """Parses definition text into a ``ParsedDocument``."""

    def parse(self, text: str, artifact_id: str = '') -> ParsedDocument:
        """
        Parse definition text.

        Args:
            text: Raw XML text of the definition file
            artifact_id: Artifact identifier, used for diagnostics only

        Returns:
            ParsedDocument wrapping the normalized tree

        Raises:
            DocumentParseError: If the text is not well-formed XML
        """
        parser = ET.XMLPullParser(events=('start-ns', 'end'))
        prefixes: dict[str, str] = {}
        root_elem = None
        try:
            parser.feed(text)
            parser.close()
            for event, item in parser.read_events():
                if event == 'start-ns':
                    prefix, uri = item
                    prefixes.setdefault(uri, prefix)
                else:
                    root_elem = item
        except ET.ParseError as e:
            logger.error("XML parsing error for %s: %s", artifact_id, e, extra={'artifact_id': artifact_id})
            raise DocumentParseError(artifact_id, str(e)) from e

        if root_elem is None:
            raise DocumentParseError(artifact_id, 'no root element')

        root = self._build_node(root_elem)
        document = ParsedDocument(root=root, prefixes=prefixes)
        logger.debug(
            "Parsed definition for %s: root=%s collaboration=%s processes=%d",
            artifact_id, document.qualified_name(root),
            document.collaboration is not None, len(document.processes),
        )
        return document

    def _build_node(self, elem: ET.Element) -> DocumentNode:
        namespace, tag = split_tag(elem.tag)
        attributes = {split_tag(k)[1]: v for k, v in elem.attrib.items()}
        node = DocumentNode(
            tag=tag,
            namespace=namespace,
            attributes=attributes,
            text=(elem.text or '').strip(),
        )
        for child in elem:
            # Comments and processing instructions have non-string tags
            if not isinstance(child.tag, str):
                continue
            child_node = self._build_node(child)
            node.children.setdefault(child_node.tag, []).append(child_node)
        return node
