"""
Extraction pipeline: archive bytes in, canonical records out.

Each call is scoped to one artifact and holds no state across calls, so
independent artifacts can be processed from a thread pool.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from iflow_parser.diff_hash import DiffHashService
from iflow_parser.document_parser import DocumentParser, ParsedDocument
from iflow_parser.domain.errors import ArchiveError, DocumentParseError, ExtractionWarning, ValidationWarning
from iflow_parser.domain.models import (
    Adapter,
    ErrorHandlingConfig,
    ErrorHandlingPatterns,
    ExtractionOptions,
    ExtractionResult,
    PersistenceConfig,
    PersistenceFootprint,
    PersistencePatterns,
    Recommendation,
    SecurityMechanism,
)
from iflow_parser.extractors import (
    AdapterExtractor,
    BaseExtractor,
    ErrorHandlingExtractor,
    PersistenceExtractor,
    SecurityExtractor,
)
from iflow_parser.package_reader import PackageReader
from iflow_parser.processors import (
    AdapterProcessor,
    ErrorHandlingProcessor,
    PersistenceProcessor,
    SecurityProcessor,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    """Canonical records and diagnostics for one artifact."""

    artifact_id: str
    version: str
    adapters: Tuple[Adapter, ...] = ()
    security_mechanisms: Tuple[SecurityMechanism, ...] = ()
    security_buckets: Dict[str, List[str]] = field(default_factory=dict)
    error_handling: ErrorHandlingConfig = field(default_factory=ErrorHandlingConfig)
    persistence: PersistenceConfig = field(default_factory=PersistenceConfig)
    error_handling_patterns: ErrorHandlingPatterns = field(default_factory=ErrorHandlingPatterns)
    persistence_patterns: PersistencePatterns = field(default_factory=PersistencePatterns)
    persistence_footprint: PersistenceFootprint = field(default_factory=PersistenceFootprint)
    recommendations: Tuple[Recommendation, ...] = ()
    warnings: Tuple[ExtractionWarning | ValidationWarning, ...] = ()
    content_hashes: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'artifact_id': self.artifact_id,
            'version': self.version,
            'adapters': [a.to_dict() for a in self.adapters],
            'security_mechanisms': [m.to_dict() for m in self.security_mechanisms],
            'security_buckets': self.security_buckets,
            'error_handling': self.error_handling.to_dict(),
            'persistence': self.persistence.to_dict(),
            'error_handling_patterns': self.error_handling_patterns.to_dict(),
            'persistence_patterns': self.persistence_patterns.to_dict(),
            'persistence_footprint': self.persistence_footprint.to_dict(),
            'recommendations': [r.to_dict() for r in self.recommendations],
            'warnings': [w.to_dict() for w in self.warnings],
            'content_hashes': self.content_hashes,
        }


@dataclass(frozen=True)
class ArtifactFailure:
    """An artifact whose archive or document could not be read."""

    artifact_id: str
    kind: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {'artifact_id': self.artifact_id, 'kind': self.kind, 'message': self.message}


@dataclass
class BatchResult:
    """Outcome of a batch run; results keep input order."""

    results: List[PipelineResult] = field(default_factory=list)
    failures: List[ArtifactFailure] = field(default_factory=list)


class ExtractionPipeline:
    """Runs unpacking, parsing, the four extractors and their processors.

    Args:
        options: Run options; defaults to ``ExtractionOptions()``.
    """

    def __init__(self, options: Optional[ExtractionOptions] = None):
        self.options = options or ExtractionOptions()
        self.reader = PackageReader(debug_dir=self.options.debug_dir)
        self.parser = DocumentParser()
        self.adapter_extractor = AdapterExtractor()
        self.security_extractor = SecurityExtractor()
        self.error_handling_extractor = ErrorHandlingExtractor()
        self.persistence_extractor = PersistenceExtractor()
        self.adapter_processor = AdapterProcessor()
        self.security_processor = SecurityProcessor()
        self.error_handling_processor = ErrorHandlingProcessor()
        self.persistence_processor = PersistenceProcessor()

    def run(self, artifact_id: str, version: str, archive_bytes: bytes) -> PipelineResult:
        """
        Extract canonical records from an artifact archive.

        Args:
            artifact_id: Artifact identifier
            version: Artifact version, carried through to the result
            archive_bytes: Raw archive content

        Returns:
            PipelineResult for the artifact

        Raises:
            ArchiveError: If the archive is unreadable or has no definition file
            DocumentParseError: If the definition text is malformed
        """
        contents = self.reader.read(archive_bytes, artifact_id)
        return self.run_document(artifact_id, version, contents.document_text)

    def run_document(self, artifact_id: str, version: str, text: str) -> PipelineResult:
        """Extract canonical records from already-unpacked definition text."""
        document = self.parser.parse(text, artifact_id)
        if document.is_empty:
            logger.info("Definition for %s has no collaboration or processes", artifact_id)

        adapters_raw = self._extract(self.adapter_extractor, document, artifact_id)
        security_raw = self._extract(self.security_extractor, document, artifact_id)
        error_raw = self._extract(self.error_handling_extractor, document, artifact_id)
        persistence_raw = self._extract(self.persistence_extractor, document, artifact_id)

        adapters = self.adapter_processor.process(adapters_raw.value, artifact_id)
        security = self.security_processor.process(security_raw.value, artifact_id)
        error_handling = self.error_handling_processor.process(error_raw.value, artifact_id)
        persistence = self.persistence_processor.process(persistence_raw.value, artifact_id)

        mechanisms = list(security.value)
        if self.options.deduplicate_security:
            mechanisms = self.security_processor.deduplicate(mechanisms)
        buckets = {
            bucket.value: [m.name for m in members]
            for bucket, members in self.security_processor.classify_buckets(mechanisms).items()
        }

        recommendations: List[Recommendation] = []
        if self.options.include_recommendations:
            recommendations.extend(self.error_handling_processor.recommendations(error_handling.value))
            recommendations.extend(self.persistence_processor.recommendations(persistence.value))

        warnings = (
            adapters_raw.warnings + security_raw.warnings + error_raw.warnings + persistence_raw.warnings
            + adapters.warnings + security.warnings + error_handling.warnings + persistence.warnings
        )

        result = PipelineResult(
            artifact_id=artifact_id,
            version=version,
            adapters=adapters.value,
            security_mechanisms=tuple(mechanisms),
            security_buckets=buckets,
            error_handling=error_handling.value,
            persistence=persistence.value,
            error_handling_patterns=self.error_handling_processor.summarize_patterns(error_handling.value),
            persistence_patterns=self.persistence_processor.summarize_patterns(persistence.value),
            persistence_footprint=self.persistence_processor.footprint(persistence.value),
            recommendations=tuple(recommendations),
            warnings=warnings,
            content_hashes={
                'adapters': DiffHashService.hash_records(a.to_dict() for a in adapters.value),
                'security_mechanisms': DiffHashService.hash_records(m.to_dict() for m in mechanisms),
                'error_handling': DiffHashService.generate_hash(error_handling.value.to_dict()),
                'persistence': DiffHashService.generate_hash(persistence.value.to_dict()),
            },
        )
        logger.info(
            "Extraction completed for %s (version %s): %d adapters, %d security mechanisms, %d warnings",
            artifact_id, version, len(result.adapters), len(result.security_mechanisms), len(warnings),
        )
        return result

    def run_batch(self, artifacts: Iterable[Tuple[str, str, bytes]]) -> BatchResult:
        """
        Run the pipeline over several artifacts in a thread pool.

        A failed artifact is recorded and skipped; the others still run.

        Args:
            artifacts: (artifact_id, version, archive_bytes) triples

        Returns:
            BatchResult with results and failures, each in input order
        """
        artifacts = list(artifacts)
        batch = BatchResult()
        with ThreadPoolExecutor(max_workers=max(1, self.options.max_workers)) as executor:
            futures = [executor.submit(self.run, *artifact) for artifact in artifacts]
            for (artifact_id, _, _), future in zip(artifacts, futures):
                try:
                    batch.results.append(future.result())
                except ArchiveError as e:
                    logger.warning("Skipping artifact %s: %s", artifact_id, e)
                    batch.failures.append(ArtifactFailure(artifact_id, e.kind.value, str(e)))
                except DocumentParseError as e:
                    logger.warning("Skipping artifact %s: %s", artifact_id, e)
                    batch.failures.append(ArtifactFailure(artifact_id, 'ParseError', str(e)))
                except Exception as e:
                    logger.error("Unexpected failure for artifact %s", artifact_id, exc_info=True)
                    batch.failures.append(ArtifactFailure(artifact_id, 'UnexpectedError', str(e)))

        logger.info(
            "Batch completed: %d artifacts extracted, %d failed", len(batch.results), len(batch.failures),
        )
        return batch

    def _extract(self, extractor: BaseExtractor, document: ParsedDocument, artifact_id: str) -> ExtractionResult:
        """Run one extractor; a failure degrades to its empty result."""
        try:
            return extractor.extract(document, artifact_id)
        except Exception as e:
            logger.error(
                "%s extractor failed for %s: %s", extractor.name, artifact_id, e,
                exc_info=True, extra={'artifact_id': artifact_id},
            )
            warning = ExtractionWarning(
                extractor=extractor.name,
                fragment_id=artifact_id,
                reason=f'extractor failed: {e}',
            )
            return ExtractionResult(value=extractor.empty_result(), warnings=(warning,))
