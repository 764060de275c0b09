#!/usr/bin/env python3
"""
Resik Bahasa - Flask Application
================================
HTTP surface for the Indonesian text checker.

Endpoints:
    GET  /api/health          - service and dictionary status
    POST /api/check           - check JSON {text, margins?}
    POST /api/upload          - check an uploaded .txt/.docx file
    POST /api/export/<fmt>    - check and export (html, docx, pdf, xlsx, csv, json)
"""

import time
from functools import wraps
from io import BytesIO

from flask import Flask, request, jsonify, send_file, g
from werkzeug.exceptions import RequestEntityTooLarge
from werkzeug.utils import secure_filename

from config_logging import (
    get_config, get_logger, StructuredLogger, VERSION, APP_NAME,
    ResikError, ValidationError, FileError, handle_errors,
    sanitize_filename, validate_file_extension
)
from core import GrammarCheckEngine
from export_module import EXPORT_MIMETYPES, canonical_format, export_filename, export_report
from file_parsers import parse_document
from lexicon import LexiconProvider

logger = get_logger('app')

SECURITY_HEADERS = {
    'X-Content-Type-Options': 'nosniff',
    'X-Frame-Options': 'DENY',
    'X-XSS-Protection': '1; mode=block',
    'Referrer-Policy': 'strict-origin-when-cross-origin',
}


def _error_response(code: str, message: str, status: int, details=None):
    body = {
        'success': False,
        'error': {
            'code': code,
            'message': message,
            'correlation_id': getattr(g, 'correlation_id', 'unknown')
        }
    }
    if details:
        body['error']['details'] = details
    return jsonify(body), status


def handle_api_errors(f):
    """
    Decorator for standardized API error handling.
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        start_time = time.time()
        try:
            result = f(*args, **kwargs)

            elapsed = time.time() - start_time
            if elapsed > 5.0:
                logger.warning(f"Slow API call: {f.__name__} took {elapsed:.1f}s")

            return result

        except RequestEntityTooLarge:
            return _error_response('FILE_TOO_LARGE', 'Uploaded file is too large', 413)
        except ResikError as e:
            if e.status_code >= 500:
                logger.error(f"{e.code} in {f.__name__}: {e.message}")
            else:
                logger.warning(f"{e.code} in {f.__name__}: {e.message}")
            details = {k: v for k, v in e.details.items() if v is not None}
            return _error_response(e.code, e.message, e.status_code, details)
        except Exception as e:
            logger.exception(f"Unexpected error in {f.__name__}: {e}")
            return _error_response('INTERNAL_ERROR', 'An unexpected error occurred', 500)

    return decorated


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _text_field(data: dict) -> str:
    text = data.get('text')
    if not isinstance(text, str):
        raise ValidationError("'text' must be a string", field='text')
    return text


def _margins_field(data: dict):
    margins = data.get('margins')
    if margins is not None and not isinstance(margins, dict):
        raise ValidationError("'margins' must be an object with top, bottom, left, right", field='margins')
    return margins


@handle_errors(logger)
def _read_upload(upload, allowed: tuple):
    """Validate an uploaded file and parse it into DocumentContent."""
    if upload is None:
        raise ValidationError("No file part in request", field='file')
    if not upload.filename:
        raise ValidationError("No file selected", field='file')

    filename = secure_filename(sanitize_filename(upload.filename)) or 'dokumen.txt'
    if not validate_file_extension(filename, allowed):
        raise FileError(
            f"File type not allowed. Supported: {', '.join(allowed)}",
            filename=filename
        )
    return parse_document(upload.read(), filename)


def create_app(config=None, lexicon_provider: LexiconProvider = None) -> Flask:
    """
    Build the Flask application.

    The lexicon provider is started here; requests that arrive before the
    dictionary finishes loading are checked without dictionary lookup.
    """
    config = config or get_config()
    provider = lexicon_provider or LexiconProvider.from_config(config)
    provider.start()

    app = Flask(__name__)
    app.config['MAX_CONTENT_LENGTH'] = config.max_content_length
    app.json.ensure_ascii = False
    app.extensions['lexicon_provider'] = provider

    def run_check(text, margins=None):
        # Checkers collect per-run state, so each request gets its own engine.
        return GrammarCheckEngine().review(text, margins, provider.snapshot())

    @app.before_request
    def assign_correlation_id():
        g.correlation_id = StructuredLogger.new_correlation_id()

    @app.after_request
    def add_security_headers(response):
        for header, value in SECURITY_HEADERS.items():
            response.headers[header] = value
        response.headers['X-Correlation-ID'] = getattr(g, 'correlation_id', '')
        return response

    @app.errorhandler(RequestEntityTooLarge)
    def file_too_large(e):
        return _error_response('FILE_TOO_LARGE', 'Uploaded file is too large', 413)

    @app.route('/api/health', methods=['GET'])
    def health():
        """Service status, including whether the dictionary is loaded."""
        lexicon = provider.snapshot()
        return jsonify({
            'status': 'ok',
            'app': APP_NAME,
            'version': VERSION,
            'lexicon': {
                'status': lexicon.status.value,
                'size': len(lexicon),
                'ready': provider.is_ready,
            }
        })

    @app.route('/api/check', methods=['POST'])
    @handle_api_errors
    def check_text():
        """Check a text body: {"text": "...", "margins": {...}}"""
        data = _json_body()
        report = run_check(_text_field(data), _margins_field(data))
        return jsonify({'success': True, **report.to_dict()})

    @app.route('/api/upload', methods=['POST'])
    @handle_api_errors
    def upload_file():
        """Check an uploaded .txt or .docx file (margins come from the document)."""
        document = _read_upload(request.files.get('file'), config.allowed_extensions)
        report = run_check(document.text, document.margins)
        return jsonify({
            'success': True,
            'document': document.to_dict(),
            **report.to_dict()
        })

    @app.route('/api/export/<fmt>', methods=['POST'])
    @handle_api_errors
    def export(fmt):
        """Check a text body and return the annotated report as a download."""
        extension = canonical_format(fmt)
        if extension not in EXPORT_MIMETYPES:
            raise ValidationError(
                f"Unsupported export format: {fmt}. Supported: {', '.join(EXPORT_MIMETYPES)}",
                field='format'
            )
        data = _json_body()
        text = _text_field(data)
        source = sanitize_filename(str(data.get('filename') or 'dokumen'))
        report = run_check(text, _margins_field(data))

        content = export_report(extension, text, report.errors, source)
        logger.info("Export generated", format=extension, size=len(content),
                    error_count=len(report.errors))
        return send_file(
            BytesIO(content),
            mimetype=EXPORT_MIMETYPES[extension],
            as_attachment=True,
            download_name=export_filename(source, extension)
        )

    logger.info(f"{APP_NAME} v{VERSION} application created",
                max_upload=config.max_content_length)
    return app


def main():
    config = get_config()
    is_valid, errors = config.validate()
    if not is_valid:
        for error in errors:
            logger.error(f"Configuration error: {error}")
        raise SystemExit(1)

    app = create_app(config)
    logger.info(f"Starting {APP_NAME}", host=config.host, port=config.port)
    app.run(host=config.host, port=config.port, debug=config.debug)


if __name__ == '__main__':
    main()
