"""
Flask web UI and JSON API for the resume enhancer.
"""

from typing import Optional

from flask import Flask, jsonify, render_template_string, request
from pydantic import ValidationError

from cvenhancer.config.settings import Settings, get_settings
from cvenhancer.exceptions import (
    CVEnhancerError,
    ConfigurationError,
    ExtractionError,
    FileValidationError,
    InvalidTransitionError,
    PipelineBusyError,
    ProviderError,
    ResponseFormatError,
)
from cvenhancer.models.ai_config import AIProviderConfig
from cvenhancer.models.document import UploadedFile
from cvenhancer.models.resume_config import ResumeRenderConfig
from cvenhancer.services.ai_service import OllamaModelService
from cvenhancer.services.config_repository import ConfigRepository
from cvenhancer.services.resume_pipeline import ResumePipeline
from cvenhancer.services.snapshot_service import SnapshotService
from cvenhancer.utils.logger import get_logger

logger = get_logger(__name__)


ERROR_STATUS = {
    FileValidationError: 400,
    ConfigurationError: 400,
    ExtractionError: 422,
    ProviderError: 502,
    ResponseFormatError: 502,
    PipelineBusyError: 409,
    InvalidTransitionError: 409,
}


HTML_TEMPLATE = '''
<!DOCTYPE html>
<html>
<head>
    <title>CV Enhancer</title>
    <meta charset="utf-8">
    <style>
        body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
               background: #0a0a0a; color: #e0e0e0; padding: 20px; }
        .card { background: #1a1a1a; border: 1px solid #2a2a2a; border-radius: 12px;
                padding: 25px; max-width: 720px; margin: 0 auto 20px; }
        input, button { width: 100%; padding: 12px; margin-top: 10px; border-radius: 8px;
                        background: #0a0a0a; color: #e0e0e0; border: 1px solid #2a2a2a; }
        pre { white-space: pre-wrap; font-size: 12px; }
        .error { color: #f87171; }
    </style>
</head>
<body>
    <div class="card">
        <h1>CV Enhancer</h1>
        <p>Upload a PDF, DOCX, JPEG or PNG resume (max 10MB).</p>
        <form id="upload">
            <input type="file" name="file" required>
            <input type="text" name="job_title" placeholder="Target job title (optional)" value="{{ job_title }}">
            <button type="submit">Enhance</button>
        </form>
        <p id="status">Status: idle</p>
    </div>
    <div class="card"><pre id="result"></pre></div>
    <script>
        document.getElementById('upload').addEventListener('submit', async (e) => {
            e.preventDefault();
            const status = document.getElementById('status');
            const result = document.getElementById('result');
            status.textContent = 'Status: processing...';
            status.className = '';
            const response = await fetch('/api/enhance', { method: 'POST', body: new FormData(e.target) });
            const data = await response.json();
            if (!response.ok) {
                status.textContent = 'Error: ' + data.error;
                status.className = 'error';
                return;
            }
            status.textContent = 'Status: completed';
            result.textContent = JSON.stringify(data, null, 2);
        });
    </script>
</body>
</html>
'''


def _error_response(exc: CVEnhancerError):
    status = next(
        (code for exc_type, code in ERROR_STATUS.items() if isinstance(exc, exc_type)), 500
    )
    return jsonify({'error': str(exc), 'kind': exc.kind}), status


def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[ConfigRepository] = None,
    pipeline: Optional[ResumePipeline] = None,
    snapshots: Optional[SnapshotService] = None,
    ollama_models: Optional[OllamaModelService] = None
) -> Flask:
    """
    Build the Flask application.

    Args:
        settings: Application settings (defaults to the cached instance)
        repository: Persisted configuration store
        pipeline: Resume pipeline
        snapshots: Snapshot file service
        ollama_models: Ollama model lister

    Returns:
        Configured Flask app
    """
    settings = settings or get_settings()
    repository = repository or ConfigRepository.from_settings(settings)
    pipeline = pipeline or ResumePipeline(settings, repository)
    snapshots = snapshots or SnapshotService(settings.snapshots_dir)
    ollama_models = ollama_models or OllamaModelService(settings)

    app = Flask(__name__)
    app.config['DEBUG'] = settings.debug

    @app.route('/')
    def index():
        """Render the upload page."""
        return render_template_string(HTML_TEMPLATE, job_title=repository.load_app_state().job_title)

    @app.route('/api/status', methods=['GET'])
    def status():
        return jsonify(pipeline.snapshot())

    @app.route('/api/enhance', methods=['POST'])
    def enhance():
        """Run an uploaded resume through the pipeline."""
        upload = request.files.get('file')
        if upload is None:
            return jsonify({'error': 'File is required', 'kind': FileValidationError.kind}), 400

        uploaded = UploadedFile(
            content=upload.read(),
            filename=upload.filename or '',
            content_type=upload.mimetype or '',
        )
        job_title = request.form.get('job_title')

        try:
            resume = pipeline.process_upload(uploaded, job_title=job_title)
        except CVEnhancerError as e:
            return _error_response(e)

        return jsonify(resume.to_json_dict())

    @app.route('/api/resume/view', methods=['GET'])
    def resume_view():
        view = pipeline.current_view()
        if view is None:
            return jsonify({'error': 'No resume loaded'}), 404
        return jsonify(view.to_json_dict())

    @app.route('/api/config/ai', methods=['GET'])
    def get_ai_config():
        try:
            config = repository.load_ai_config()
        except CVEnhancerError as e:
            return _error_response(e)
        if config is None:
            return jsonify({'configured': False})
        # Never echo secrets back; report which providers have one
        data = config.to_public()
        data['configured'] = True
        return jsonify(data)

    @app.route('/api/config/ai', methods=['POST'])
    def save_ai_config():
        try:
            config = AIProviderConfig.model_validate(request.get_json(silent=True) or {})
        except ValidationError as e:
            return jsonify({'error': f'Invalid AI configuration: {e}', 'kind': ConfigurationError.kind}), 400
        # Keys left out of the submission (or sent back as has-key flags) keep their stored value
        try:
            stored = repository.load_ai_config()
        except ConfigurationError as e:
            logger.warning(f"⚠️ Replacing unreadable AI provider settings: {e}")
            stored = None
        config = config.with_stored_keys(stored)
        repository.save_ai_config(config)
        return jsonify({'success': True, 'provider': config.provider.value})

    @app.route('/api/config/resume', methods=['GET'])
    def get_resume_config():
        return jsonify(repository.load_resume_config().to_storage())

    @app.route('/api/config/resume', methods=['POST'])
    def save_resume_config():
        try:
            config = ResumeRenderConfig.model_validate(request.get_json(silent=True) or {})
        except ValidationError as e:
            return jsonify({'error': f'Invalid resume configuration: {e}', 'kind': ConfigurationError.kind}), 400
        repository.save_resume_config(config)
        return jsonify(config.to_storage())

    @app.route('/api/config/resume/reset', methods=['POST'])
    def reset_resume_config():
        return jsonify(repository.reset_resume_config().to_storage())

    @app.route('/api/ollama/models', methods=['GET'])
    def list_ollama_models():
        try:
            config = repository.load_ai_config()
            endpoint = request.args.get('endpoint') or (config.ollama_endpoint if config else None)
            models = ollama_models.list_models(endpoint)
        except CVEnhancerError as e:
            return _error_response(e)
        return jsonify({'models': models})

    @app.route('/api/json-files', methods=['GET'])
    def list_json_files():
        try:
            return jsonify(snapshots.get_file_list())
        except OSError as e:
            logger.error(f"Error reading JSON files: {e}")
            return jsonify({'error': 'Failed to read JSON files'}), 500

    @app.route('/api/json-files/<name>', methods=['GET'])
    def get_json_file(name):
        try:
            return jsonify(snapshots.get_file_content(name))
        except FileNotFoundError:
            return jsonify({'error': f'JSON file not found: {name}'}), 404
        except (OSError, ValueError) as e:
            logger.error(f"Error reading JSON file {name}: {e}")
            return jsonify({'error': 'Failed to read JSON file'}), 500

    @app.route('/api/json-files', methods=['POST'])
    def save_json_file():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({'error': 'Request body must be a JSON object'}), 400
        filename = data.get('filename')
        payload = data.get('data')

        if not filename:
            return jsonify({'error': 'Filename is required'}), 400
        if not isinstance(filename, str):
            return jsonify({'error': 'Filename must be a string'}), 400
        if not payload:
            return jsonify({'error': 'Data is required'}), 400

        try:
            saved = snapshots.save_file(filename, payload)
        except (OSError, ValueError, TypeError) as e:
            logger.error(f"Error saving JSON file: {e}")
            return jsonify({'error': 'Failed to save JSON file'}), 500

        return jsonify({
            'success': True,
            'filename': saved,
            'message': 'File saved successfully',
        })

    @app.route('/api/json-files/<name>/load', methods=['POST'])
    def load_json_file(name):
        """Make a saved snapshot the current resume."""
        try:
            data = snapshots.get_file_content(name)
        except FileNotFoundError:
            return jsonify({'error': f'JSON file not found: {name}'}), 404
        except (OSError, ValueError) as e:
            logger.error(f"Error reading JSON file {name}: {e}")
            return jsonify({'error': 'Failed to read JSON file'}), 500

        try:
            resume = pipeline.load_snapshot(data, filename=name)
        except CVEnhancerError as e:
            return _error_response(e)
        return jsonify(resume.to_json_dict())

    return app
