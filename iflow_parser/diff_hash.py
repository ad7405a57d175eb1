"""Content hashes for change detection of canonical records."""
import hashlib
import json
from typing import Any, Dict, Iterable, List


class DiffHashService:
    """Fingerprints canonical records so a storage layer can detect changes.

    Volatile fields (artifact version, timestamps) are dropped from the top
    level of a record, so two extractions of unchanged content hash alike
    across versions. Nested keys are hashed as-is: a configuration entry
    that happens to be called ``version`` is content.
    """

    EXCLUDED_FIELDS = frozenset({
        'version', 'artifact_version', 'created_at', 'updated_at', 'synced_at', 'extracted_at',
    })

    @classmethod
    def generate_hash(cls, record: Dict[str, Any]) -> str:
        """SHA-512 hex digest of a record's canonical JSON form."""
        stable = {key: value for key, value in record.items() if key not in cls.EXCLUDED_FIELDS}
        payload = json.dumps(stable, sort_keys=True, separators=(',', ':'), default=str)
        return hashlib.sha512(payload.encode('utf-8')).hexdigest()

    @classmethod
    def hash_records(cls, records: Iterable[Dict[str, Any]]) -> List[str]:
        """Hash each record of a list, preserving order."""
        return [cls.generate_hash(record) for record in records]
