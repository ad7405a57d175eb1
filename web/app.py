"""Simple Flask inspector for integration flow archives."""

import io
import logging
import os
import zipfile

from flask import Flask, jsonify, request

from iflow_parser.domain.enums import SecurityMechanismType
from iflow_parser.domain.errors import ArchiveError, DocumentParseError
from iflow_parser.domain.models import ExtractionOptions
from iflow_parser.pipeline import ExtractionPipeline

logger = logging.getLogger(__name__)

app = Flask(__name__)

# Configuration
app.config['MAX_CONTENT_LENGTH'] = 50 * 1024 * 1024


@app.route('/api/extract', methods=['POST'])
def extract_archive():
    """Upload an archive and return its extracted records."""
    if 'file' not in request.files:
        return jsonify({'error': 'No file provided'}), 400

    file = request.files['file']
    data = file.read()
    if not file.filename or not zipfile.is_zipfile(io.BytesIO(data)):
        return jsonify({'error': 'Please upload a ZIP archive'}), 400

    artifact_id = request.form.get('artifact_id') or os.path.splitext(os.path.basename(file.filename))[0]
    version = request.form.get('version', '')

    pipeline = ExtractionPipeline(ExtractionOptions.from_env())
    try:
        result = pipeline.run(artifact_id, version, data)
    except ArchiveError as e:
        return jsonify({'error': str(e), 'kind': e.kind.value, 'artifact_id': artifact_id}), 422
    except DocumentParseError as e:
        return jsonify({'error': str(e), 'kind': 'ParseError', 'artifact_id': artifact_id}), 422

    logger.info("Extracted %s via web inspector", artifact_id)
    return jsonify(result.to_dict())


@app.route('/api/types')
def list_types():
    """List canonical security mechanism types."""
    return jsonify({'security_mechanism_types': [t.value for t in SecurityMechanismType]})


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    app.run(debug=True, port=5000)
