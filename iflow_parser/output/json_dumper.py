"""JSON output generation.

Writes the canonical records of each extracted artifact, a per-artifact
summary, and batch failures to a structured JSON directory.
"""

import json
import os
from typing import Any

from iflow_parser.package_reader import safe_artifact_filename
from iflow_parser.pipeline import ArtifactFailure, PipelineResult

OUTPUT_VERSION = '1.0.0'


class JSONDumper:
    """Writes pipeline results to a structured JSON directory.

    Output structure:
        output_dir/
        ├── errors.json (only if failures)
        └── {artifact_id}/
            ├── adapters.json
            ├── security.json
            ├── error_handling.json
            ├── persistence.json
            └── summary.json

    Args:
        output_dir: Root directory for output files.
        pretty: Whether to pretty-print JSON (default True).
    """

    def __init__(self, output_dir: str, pretty: bool = True) -> None:
        self._output_dir = output_dir
        self._indent = 2 if pretty else None

    def write_result(self, result: PipelineResult) -> str:
        """Write all files for one artifact and return its directory."""
        data = result.to_dict()
        dir_path = os.path.join(self._output_dir, safe_artifact_filename(result.artifact_id))
        os.makedirs(dir_path, exist_ok=True)

        hashes = data['content_hashes']
        self._write_json(os.path.join(dir_path, 'adapters.json'), {
            'artifact_id': result.artifact_id,
            'adapters': [
                {**adapter, '_diff_hash': diff_hash}
                for adapter, diff_hash in zip(data['adapters'], hashes['adapters'])
            ],
        })
        self._write_json(os.path.join(dir_path, 'security.json'), {
            'artifact_id': result.artifact_id,
            'security_mechanisms': [
                {**mechanism, '_diff_hash': diff_hash}
                for mechanism, diff_hash in zip(data['security_mechanisms'], hashes['security_mechanisms'])
            ],
            'buckets': data['security_buckets'],
        })
        self._write_json(os.path.join(dir_path, 'error_handling.json'), {
            'artifact_id': result.artifact_id,
            'error_handling': data['error_handling'],
            'patterns': data['error_handling_patterns'],
            '_diff_hash': hashes['error_handling'],
        })
        self._write_json(os.path.join(dir_path, 'persistence.json'), {
            'artifact_id': result.artifact_id,
            'persistence': data['persistence'],
            'patterns': data['persistence_patterns'],
            'footprint': data['persistence_footprint'],
            '_diff_hash': hashes['persistence'],
        })
        self._write_json(os.path.join(dir_path, 'summary.json'), {
            '_metadata': {'output_version': OUTPUT_VERSION},
            'artifact_id': result.artifact_id,
            'version': result.version,
            'counts': {
                'adapters': len(result.adapters),
                'security_mechanisms': len(result.security_mechanisms),
                'warnings': len(result.warnings),
                'recommendations': len(result.recommendations),
            },
            'recommendations': data['recommendations'],
            'warnings': data['warnings'],
        })
        return dir_path

    def write_errors(self, failures: list[ArtifactFailure]) -> None:
        """Write batch failures (only if any exist)."""
        if not failures:
            return
        os.makedirs(self._output_dir, exist_ok=True)
        self._write_json(os.path.join(self._output_dir, 'errors.json'), [f.to_dict() for f in failures])

    def _write_json(self, path: str, data: Any) -> None:
        """Write data as JSON to a file."""
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=self._indent, ensure_ascii=False, default=str)
