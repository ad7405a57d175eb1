"""Archive reader for exported integration-flow artifacts."""
import hashlib
import io
import logging
import os
import re
import zipfile
import zlib
from dataclasses import dataclass
from typing import List

from iflow_parser.domain.constants import DEFINITION_FILE_EXTENSION, MAX_FILENAME_LENGTH
from iflow_parser.domain.errors import ArchiveError, ArchiveErrorKind

logger = logging.getLogger(__name__)


@dataclass
class ArchiveContents:
    """Archive contents."""
    artifact_id: str
    definition_file: str
    document_text: str
    entry_names: List[str]
    total_files: int


def safe_artifact_filename(artifact_id: str) -> str:
    """Create a filesystem-safe name from an artifact identifier.

    A name that had to be altered gets a short digest of the original id, so
    distinct ids such as ``a/b`` and ``a_b`` never share a file.
    """
    name = artifact_id or 'unknown'
    safe = re.sub(r'[^\w\-.]', '_', name)[:MAX_FILENAME_LENGTH]
    if safe != name or not safe.strip('.'):
        digest = hashlib.sha1(name.encode('utf-8')).hexdigest()[:8]
        safe = f"{safe}-{digest}"
    return safe


def read_archive_bytes(archive_path: str, artifact_id: str) -> bytes:
    """Read an archive from disk.

    Raises:
        ArchiveError: ``ReadFailure`` when the file cannot be opened or read.
    """
    try:
        with open(archive_path, 'rb') as f:
            return f.read()
    except OSError as e:
        logger.error("Failed to read archive %s for %s: %s", archive_path, artifact_id, e)
        raise ArchiveError(ArchiveErrorKind.READ_FAILURE, artifact_id, str(e)) from e


class PackageReader:
    """Locates and reads the process-definition file inside an artifact archive.

    Args:
        debug_dir: Optional directory receiving a copy of each archive and its
            definition text, named by artifact id. ``None`` disables the sink.
    """

    def __init__(self, debug_dir: str | None = None):
        self.debug_dir = debug_dir

    def read(self, archive_bytes: bytes, artifact_id: str) -> ArchiveContents:
        """Read the definition document from an in-memory archive.

        Raises:
            ArchiveError: ``ArchiveCorrupt`` for an unreadable archive,
                ``NoDefinitionFileFound`` when no entry has the definition
                extension, ``ReadFailure`` when the entry cannot be read.
        """
        logger.debug("Starting archive processing for %s (%d bytes)", artifact_id, len(archive_bytes or b''))
        self._write_debug(artifact_id, '.zip', archive_bytes)

        try:
            zip_file = zipfile.ZipFile(io.BytesIO(archive_bytes), 'r')
        except (zipfile.BadZipFile, TypeError, ValueError) as e:
            logger.error("Failed to open archive for %s: %s", artifact_id, e)
            raise ArchiveError(ArchiveErrorKind.ARCHIVE_CORRUPT, artifact_id, str(e)) from e

        with zip_file:
            entry_names = [info.filename for info in zip_file.infolist() if not info.is_dir()]
            logger.debug("Archive contents for %s: %s", artifact_id, entry_names)

            candidates = [name for name in entry_names if name.endswith(DEFINITION_FILE_EXTENSION)]
            if not candidates:
                logger.warning("No %s file found in archive for %s", DEFINITION_FILE_EXTENSION, artifact_id)
                raise ArchiveError(ArchiveErrorKind.NO_DEFINITION_FILE_FOUND, artifact_id)
            if len(candidates) > 1:
                logger.warning(
                    "Multiple definition files in archive for %s, using %s (ignored: %s)",
                    artifact_id, candidates[0], candidates[1:],
                )

            definition_file = candidates[0]
            try:
                raw = zip_file.read(definition_file)
                text = raw.decode('utf-8-sig')
            except (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError, OSError, RuntimeError,
                    UnicodeDecodeError) as e:
                logger.error("Failed to read %s for %s: %s", definition_file, artifact_id, e)
                raise ArchiveError(ArchiveErrorKind.READ_FAILURE, artifact_id, str(e)) from e

        self._write_debug(artifact_id, DEFINITION_FILE_EXTENSION, raw)
        logger.debug("Found definition file %s for %s (%d chars)", definition_file, artifact_id, len(text))

        return ArchiveContents(
            artifact_id=artifact_id,
            definition_file=definition_file,
            document_text=text,
            entry_names=entry_names,
            total_files=len(entry_names),
        )

    def read_file(self, archive_path: str, artifact_id: str | None = None) -> ArchiveContents:
        """Read an archive from disk; the artifact id defaults to the file stem."""
        if artifact_id is None:
            artifact_id = os.path.splitext(os.path.basename(archive_path))[0]
        return self.read(read_archive_bytes(archive_path, artifact_id), artifact_id)

    def _write_debug(self, artifact_id: str, suffix: str, data: bytes) -> None:
        """Write a diagnostic copy to the debug directory, if configured."""
        if not self.debug_dir or data is None:
            return
        try:
            os.makedirs(self.debug_dir, exist_ok=True)
            path = os.path.join(self.debug_dir, safe_artifact_filename(artifact_id) + suffix)
            with open(path, 'wb') as f:
                f.write(data)
            logger.debug("Saved debug copy for %s to %s", artifact_id, path)
        except OSError as e:
            logger.warning("Could not write debug copy for %s: %s", artifact_id, e)
