#!/usr/bin/env python3
"""
Resik Bahasa Configuration & Logging Module
===========================================
Settings, structured logs and the application exception types shared by the
checker, the ingestion layer and the web API.

Settings come from RB_* environment variables. Log records are JSON lines by
default; RB_LOG_FORMAT=text switches to plain lines for local runs.
"""

import os
import re
import sys
import json
import logging
import uuid
import time
import functools
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Dict, Any, Callable, Tuple, List

__version__ = "1.2.0"
VERSION = __version__
APP_NAME = "ResikBahasa"

BASE_DIR = Path(__file__).parent

# -----------------------------------------------------------------------------
# Limits
# -----------------------------------------------------------------------------
MB = 1024 * 1024
DEFAULT_MAX_UPLOAD_BYTES = 20 * MB
MAX_SAFE_UPLOAD_BYTES = 200 * MB
DEFAULT_LEXICON_TIMEOUT = 15        # seconds for a remote word-list fetch
LOG_ROTATE_BYTES = 5 * MB
LOG_ROTATE_KEEP = 5

LOG_FORMATS = ('json', 'text')
TEXT_LOG_LAYOUT = '%(asctime)s %(levelname)-8s %(name)s: %(message)s'


def _env_flag(name: str, default: str = 'false') -> bool:
    return os.environ.get(name, default).lower() in ('1', 'true', 'yes', 'on')


def _is_production() -> bool:
    return os.environ.get('RB_ENV', 'development').lower() == 'production'


# -----------------------------------------------------------------------------
# Settings
# -----------------------------------------------------------------------------

@dataclass
class AppConfig:
    """Runtime settings for the checker service."""

    host: str = "127.0.0.1"
    port: int = 5060
    debug: bool = False

    max_content_length: int = DEFAULT_MAX_UPLOAD_BYTES
    allowed_extensions: tuple = ('.txt', '.docx')

    # KBBI word list; when lexicon_url is set it is used instead of the file
    lexicon_path: Path = field(default_factory=lambda: BASE_DIR / 'data' / 'kbbi_baku.txt')
    lexicon_url: str = ""
    lexicon_timeout: int = DEFAULT_LEXICON_TIMEOUT

    log_dir: Path = field(default_factory=lambda: BASE_DIR / 'logs')
    log_level: str = "INFO"
    log_format: str = "json"
    log_to_file: bool = False
    log_to_console: bool = True

    def __post_init__(self):
        self.lexicon_path = Path(self.lexicon_path)
        self.log_dir = Path(self.log_dir)
        if self.log_to_file:
            self.log_dir.mkdir(parents=True, exist_ok=True)
        if _is_production():
            self.debug = False

    @classmethod
    def from_env(cls) -> 'AppConfig':
        """Build settings from RB_* variables, falling back to defaults."""
        env = os.environ.get
        lexicon_path = env('RB_LEXICON_PATH')
        return cls(
            host=env('RB_HOST', '127.0.0.1'),
            port=int(env('RB_PORT', '5060')),
            debug=_env_flag('RB_DEBUG'),
            max_content_length=int(env('RB_MAX_UPLOAD', str(DEFAULT_MAX_UPLOAD_BYTES))),
            lexicon_path=Path(lexicon_path) if lexicon_path else BASE_DIR / 'data' / 'kbbi_baku.txt',
            lexicon_url=env('RB_LEXICON_URL', ''),
            lexicon_timeout=int(env('RB_LEXICON_TIMEOUT', str(DEFAULT_LEXICON_TIMEOUT))),
            log_level=env('RB_LOG_LEVEL', 'INFO'),
            log_format=env('RB_LOG_FORMAT', 'json'),
            log_to_file=_env_flag('RB_LOG_TO_FILE'),
        )

    def validate(self) -> Tuple[bool, List[str]]:
        """Return (ok, problems) for settings that would break start-up."""
        problems = []
        if self.debug and _is_production():
            problems.append("RB_DEBUG must be off when RB_ENV=production")
        if self.max_content_length > MAX_SAFE_UPLOAD_BYTES:
            problems.append(f"RB_MAX_UPLOAD is above {MAX_SAFE_UPLOAD_BYTES // MB}MB")
        if self.log_format not in LOG_FORMATS:
            problems.append(f"RB_LOG_FORMAT must be one of {', '.join(LOG_FORMATS)}, got {self.log_format!r}")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            problems.append(f"RB_LOG_LEVEL {self.log_level!r} is not a logging level")
        if self.lexicon_timeout <= 0:
            problems.append("RB_LEXICON_TIMEOUT must be positive")
        return (not problems, problems)


_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Process-wide settings, read from the environment on first use."""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def reset_config():
    """Forget cached settings and loggers so the next call re-reads RB_* (tests)."""
    global _config
    _config = None
    _loggers.clear()


# -----------------------------------------------------------------------------
# Structured logging
# -----------------------------------------------------------------------------

def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


class JsonFormatter(logging.Formatter):
    """
    One JSON object per line.

    StructuredLogger already hands over serialized JSON, which is emitted
    as-is; records from other libraries (werkzeug, requests) are wrapped.
    """

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if message.startswith('{') and message.endswith('}'):
            return message

        payload = {
            'timestamp': _utc_timestamp(),
            'level': record.levelname,
            'logger': record.name,
            'message': message,
        }
        if record.exc_info:
            payload['traceback'] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class StructuredLogger:
    """
    Logger that attaches keyword fields and a per-thread correlation id to
    every record.

        log = get_logger('lexicon')
        log.info("Lexicon loaded", size=91234)
    """

    _local = threading.local()

    def __init__(self, name: str, config: Optional[AppConfig] = None):
        self.name = name
        self.config = config or get_config()
        self.logger = logging.getLogger(name)
        self._configure()

    def _configure(self):
        config = self.config
        level = logging.getLevelName(config.log_level.upper())
        self.logger.setLevel(level if isinstance(level, int) else logging.INFO)
        self.logger.handlers.clear()
        self.logger.propagate = False

        formatter = JsonFormatter() if config.log_format == 'json' else logging.Formatter(TEXT_LOG_LAYOUT)
        handlers: List[logging.Handler] = []
        if config.log_to_console:
            handlers.append(logging.StreamHandler(sys.stderr))
        if config.log_to_file:
            handlers.append(RotatingFileHandler(
                config.log_dir / f"{self.name.lower()}.log",
                maxBytes=LOG_ROTATE_BYTES,
                backupCount=LOG_ROTATE_KEEP,
                encoding='utf-8'
            ))
        for handler in handlers:
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    # Correlation ids tie together the records of one HTTP request

    @classmethod
    def set_correlation_id(cls, correlation_id: str):
        cls._local.correlation_id = correlation_id

    @classmethod
    def get_correlation_id(cls) -> str:
        return getattr(cls._local, 'correlation_id', None) or uuid.uuid4().hex[:8]

    @classmethod
    def new_correlation_id(cls) -> str:
        correlation_id = uuid.uuid4().hex[:12]
        cls.set_correlation_id(correlation_id)
        return correlation_id

    def _emit(self, level: int, message: str, exc_info: bool = False, **fields):
        if not self.logger.isEnabledFor(level):
            return
        if self.config.log_format != 'json':
            self.logger.log(level, message, exc_info=exc_info)
            return

        record = {
            'timestamp': _utc_timestamp(),
            'level': logging.getLevelName(level),
            'logger': self.name,
            'correlation_id': self.get_correlation_id(),
            'message': message,
            **fields
        }
        if exc_info:
            import traceback
            record['traceback'] = traceback.format_exc()
        self.logger.log(level, json.dumps(record, default=str, ensure_ascii=False))

    def debug(self, message: str, **fields):
        self._emit(logging.DEBUG, message, **fields)

    def info(self, message: str, **fields):
        self._emit(logging.INFO, message, **fields)

    def warning(self, message: str, **fields):
        self._emit(logging.WARNING, message, **fields)

    def error(self, message: str, exc_info: bool = False, **fields):
        self._emit(logging.ERROR, message, exc_info=exc_info, **fields)

    def exception(self, message: str, **fields):
        """Error record with the active traceback."""
        self._emit(logging.ERROR, message, exc_info=True, **fields)

    def critical(self, message: str, **fields):
        self._emit(logging.CRITICAL, message, **fields)

    @contextmanager
    def log_operation(self, operation: str, **context):
        """
        Time a block: debug record on entry, info on success, error (with
        traceback) on failure. Exceptions propagate.
        """
        started = time.perf_counter()
        self.debug(f"{operation} started", operation=operation, status='started', **context)
        try:
            yield
        except Exception as e:
            elapsed = round((time.perf_counter() - started) * 1000, 2)
            self.error(f"{operation} failed: {e}", exc_info=True, operation=operation,
                       status='failed', duration_ms=elapsed, **context)
            raise
        elapsed = round((time.perf_counter() - started) * 1000, 2)
        self.info(f"{operation} completed", operation=operation, status='completed',
                  duration_ms=elapsed, **context)


_loggers: Dict[str, StructuredLogger] = {}


def get_logger(name: str) -> StructuredLogger:
    """Shared StructuredLogger for a module name."""
    logger = _loggers.get(name)
    if logger is None:
        logger = _loggers[name] = StructuredLogger(name, get_config())
    return logger


# -----------------------------------------------------------------------------
# Application errors
# -----------------------------------------------------------------------------

class ResikError(Exception):
    """
    Base application error. Subclasses fix the error code and HTTP status;
    `details` carries extra context for the JSON error envelope.
    """

    code = "UNKNOWN_ERROR"
    status_code = 500

    def __init__(self, message: str, code: Optional[str] = None,
                 status_code: Optional[int] = None, details: Optional[Dict] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': False,
            'error': {
                'code': self.code,
                'message': self.message,
                'details': self.details
            }
        }


class ValidationError(ResikError):
    """Bad request input (missing text, malformed margins, unknown format)."""
    code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None, **extra):
        super().__init__(message, details={'field': field, **extra})


class FileError(ResikError):
    """Upload that cannot be read as a supported document."""
    code = "FILE_ERROR"
    status_code = 400

    def __init__(self, message: str, filename: Optional[str] = None, **extra):
        super().__init__(message, details={'filename': filename, **extra})


class ProcessingError(ResikError):
    """Failure inside checking or exporting."""
    code = "PROCESSING_ERROR"
    status_code = 500

    def __init__(self, message: str, stage: Optional[str] = None, **extra):
        super().__init__(message, details={'stage': stage, **extra})


def handle_errors(logger: Optional[StructuredLogger] = None):
    """
    Translate unexpected exceptions into ResikError subclasses.

    ResikError passes through unchanged; OS and decoding problems become
    FileError, ValueError becomes ValidationError, anything else is logged
    with its traceback and re-raised as ProcessingError.
    """
    def decorator(func: Callable):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            log = logger or get_logger(func.__module__)
            try:
                return func(*args, **kwargs)
            except ResikError:
                raise
            except (OSError, UnicodeDecodeError) as e:
                log.warning(f"{func.__name__}: unreadable input: {e}")
                raise FileError(f"Cannot read file: {e}")
            except ValueError as e:
                log.warning(f"{func.__name__}: invalid value: {e}")
                raise ValidationError(str(e))
            except Exception as e:
                log.exception(f"Unexpected error in {func.__name__}: {e}")
                raise ProcessingError(f"An unexpected error occurred: {type(e).__name__}",
                                      stage=func.__name__)
        return wrapper
    return decorator


# -----------------------------------------------------------------------------
# Upload file names
# -----------------------------------------------------------------------------

_UNSAFE_NAME_CHARS = re.compile(r'[^\w\-. ]')
MAX_FILENAME_LENGTH = 255


def sanitize_filename(filename: str) -> str:
    """Strip path separators, NULs and leading dots from an uploaded name."""
    cleaned = re.sub(r'[/\\\x00]', '', filename or '').lstrip('.')
    cleaned = _UNSAFE_NAME_CHARS.sub('_', cleaned)
    if len(cleaned) > MAX_FILENAME_LENGTH:
        stem, ext = os.path.splitext(cleaned)
        cleaned = stem[:MAX_FILENAME_LENGTH - len(ext)] + ext
    return cleaned or 'unnamed'


def validate_file_extension(filename: str, allowed: tuple = ('.txt', '.docx')) -> bool:
    """Case-insensitive extension check against `allowed`."""
    return filename.lower().endswith(tuple(ext.lower() for ext in allowed))
