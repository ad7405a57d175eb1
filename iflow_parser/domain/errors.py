"""Pipeline errors and diagnostic warnings.

Only ``ArchiveError`` and ``DocumentParseError`` are raised out of the
pipeline. The warning types are plain values collected alongside partial
results.
"""
from dataclasses import dataclass
from enum import Enum


class ArchiveErrorKind(str, Enum):
    """Failure kinds of the archive reader."""
    NO_DEFINITION_FILE_FOUND = "NoDefinitionFileFound"
    ARCHIVE_CORRUPT = "ArchiveCorrupt"
    READ_FAILURE = "ReadFailure"


class ArchiveError(Exception):
    """Error reading an artifact archive."""

    def __init__(self, kind: ArchiveErrorKind, artifact_id: str, message: str = ''):
        self.kind = kind
        self.artifact_id = artifact_id
        super().__init__(f"{kind.value} for artifact {artifact_id}" + (f": {message}" if message else ''))


class DocumentParseError(Exception):
    """Error parsing the process-definition document text."""

    def __init__(self, artifact_id: str, message: str):
        self.artifact_id = artifact_id
        super().__init__(f"Failed to parse definition for artifact {artifact_id}: {message}")


@dataclass(frozen=True)
class ExtractionWarning:
    """A fragment skipped for insufficient evidence, or a failed extractor."""

    extractor: str
    fragment_id: str
    reason: str
    available_keys: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            'kind': 'extraction',
            'source': self.extractor,
            'fragment_id': self.fragment_id,
            'reason': self.reason,
            'available_keys': list(self.available_keys),
        }


@dataclass(frozen=True)
class ValidationWarning:
    """A normalized record dropped or altered during validation."""

    processor: str
    record_name: str
    reason: str

    def to_dict(self) -> dict:
        return {
            'kind': 'validation',
            'source': self.processor,
            'record_name': self.record_name,
            'reason': self.reason,
        }
