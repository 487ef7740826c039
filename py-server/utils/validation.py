"""
Document Validation and Resource Management Utilities
Upload validation, readable-path checks, resource monitoring, and the
error taxonomy shared by the engine and the HTTP layer.
"""

import os
import tempfile
import time
import psutil
from typing import Optional, Tuple, Dict, Any
import logging

logger = logging.getLogger(__name__)

# Validation constants
VALIDATION_CONSTANTS = {
    'PDF_SIGNATURE': b'%PDF',
    'MAX_FILE_SIZE_MB': 100,
    'MAX_PROCESSING_TIME_SECONDS': 300,  # 5 minutes
    'SUPPORTED_EXTENSIONS': {'.pdf': 'pdf', '.txt': 'txt', '.docx': 'docx'},
    'DEFAULT_DOCUMENT_TYPE': 'txt',  # any other extension is read as plain text
    'MIN_AVAILABLE_MEMORY_MB': 100,
    'MIN_FREE_DISK_MB': 100,
}

class DocumentReadError(Exception):
    """Raised when a document's bytes cannot be read (missing or unreadable path)"""

    def __init__(self, file_path: str, reason: str):
        super().__init__(f"Cannot read document {file_path}: {reason}")
        self.file_path = file_path
        self.reason = reason

class PdfValidationError(Exception):
    """Custom exception for upload validation errors"""
    pass

class ProcessingTimeoutError(Exception):
    """Custom exception for processing timeouts"""
    pass

def ensure_readable(file_path: str) -> None:
    """
    Check that a document path points to a readable regular file.

    Raises:
        DocumentReadError: If the path is missing, a directory, or unreadable
    """
    if not os.path.exists(file_path):
        raise DocumentReadError(file_path, "file not found")

    if os.path.isdir(file_path):
        raise DocumentReadError(file_path, "path is a directory")

    if not os.access(file_path, os.R_OK):
        raise DocumentReadError(file_path, "permission denied")

def read_document_bytes(file_path: str) -> bytes:
    """
    Read a document's raw bytes, translating OS errors into DocumentReadError.
    """
    try:
        with open(file_path, 'rb') as f:
            return f.read()
    except FileNotFoundError:
        raise DocumentReadError(file_path, "file not found")
    except IsADirectoryError:
        raise DocumentReadError(file_path, "path is a directory")
    except PermissionError:
        raise DocumentReadError(file_path, "permission denied")
    except OSError as e:
        raise DocumentReadError(file_path, str(e))

def has_pdf_signature(content: bytes) -> bool:
    """Check for the %PDF magic bytes at the start of the content"""
    return content.startswith(VALIDATION_CONSTANTS['PDF_SIGNATURE'])

def detect_extension_type(filename: str) -> Optional[str]:
    """Map a filename's extension to a document type, or None if unsupported"""
    _, ext = os.path.splitext(filename or "")
    return VALIDATION_CONSTANTS['SUPPORTED_EXTENSIONS'].get(ext.lower())

def validate_file_content(content: bytes, file_type: str, max_size_mb: Optional[int] = None) -> Tuple[bool, Optional[str]]:
    """
    Validate uploaded file content before saving to disk

    A PDF without the %PDF signature is accepted with a warning: the fallback
    chain may still recover text from it.

    Args:
        content: Raw file content bytes
        file_type: Document type derived from the filename
        max_size_mb: Maximum file size in MB

    Returns:
        Tuple of (is_valid, error_message)
    """
    if max_size_mb is None:
        max_size_mb = VALIDATION_CONSTANTS['MAX_FILE_SIZE_MB']

    size_mb = len(content) / (1024 * 1024)
    if size_mb > max_size_mb:
        return False, f"File too large: {size_mb:.1f}MB (max: {max_size_mb}MB)"

    if not content:
        return False, "Uploaded file is empty"

    if file_type == 'pdf' and not has_pdf_signature(content):
        logger.warning("Uploaded PDF has no %PDF signature, relying on fallback extraction")

    return True, None

def validate_processing_environment() -> Tuple[bool, Optional[str]]:
    """
    Validate that the system has sufficient resources for document processing

    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        memory = psutil.virtual_memory()
        available_mb = memory.available / (1024 * 1024)

        if available_mb < VALIDATION_CONSTANTS['MIN_AVAILABLE_MEMORY_MB']:
            return False, f"Insufficient memory available: {available_mb:.1f}MB"

        temp_dir = tempfile.gettempdir()
        disk_usage = psutil.disk_usage(temp_dir)
        free_mb = disk_usage.free / (1024 * 1024)

        if free_mb < VALIDATION_CONSTANTS['MIN_FREE_DISK_MB']:
            return False, f"Insufficient disk space in {temp_dir}: {free_mb:.1f}MB"

        logger.debug(f"Environment validation passed: {available_mb:.1f}MB memory, {free_mb:.1f}MB disk")
        return True, None

    except Exception as e:
        return False, f"Error checking system resources: {str(e)}"

class ResourceMonitor:
    """
    Context manager logging wall time and memory delta of one extraction call
    """

    def __init__(self, label: str):
        self.label = label
        self.start_time: Optional[float] = None
        self.start_memory: Optional[float] = None

    def __enter__(self):
        self.start_time = time.time()
        self.start_memory = psutil.Process().memory_info().rss / (1024 * 1024)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is not None:
            elapsed = time.time() - self.start_time
            current_memory = psutil.Process().memory_info().rss / (1024 * 1024)
            memory_delta = current_memory - self.start_memory if self.start_memory else 0

            logger.debug(f"{self.label}: completed in {elapsed:.2f}s, memory usage: {memory_delta:+.1f}MB")
        return False

def describe_environment() -> Dict[str, Any]:
    """Summarize resource availability for the health endpoint"""
    is_valid, error = validate_processing_environment()
    return {
        'resources_ok': is_valid,
        'resource_error': error,
        'cpu_count': psutil.cpu_count(),
    }

__all__ = [
    'ensure_readable',
    'read_document_bytes',
    'has_pdf_signature',
    'detect_extension_type',
    'validate_file_content',
    'validate_processing_environment',
    'describe_environment',
    'ResourceMonitor',
    'DocumentReadError',
    'PdfValidationError',
    'ProcessingTimeoutError',
    'VALIDATION_CONSTANTS'
]
