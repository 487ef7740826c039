"""
Decorators for FastAPI endpoint error handling and resource management.

This module provides decorators to handle common patterns in document upload
endpoints, such as file validation, temporary file management, and error handling.
"""

import os
import tempfile
import logging
import asyncio
from functools import wraps
from typing import Callable, Optional
from fastapi import UploadFile, HTTPException, Request

from utils.validation import (
    detect_extension_type,
    validate_file_content,
    DocumentReadError,
    PdfValidationError,
    ProcessingTimeoutError,
    VALIDATION_CONSTANTS
)

logger = logging.getLogger(__name__)


def handle_document_upload(func: Callable) -> Callable:
    """
    Decorator to handle common document upload patterns:
    - File type detection (unknown extensions are read as plain text)
    - File content reading and validation
    - Temporary file creation and cleanup
    - Processing timeout management
    - Standardized error handling

    The decorated function must accept `request: Request` as a keyword argument.
    The decorator will store data in `request.state`:
    - `request.state.temp_file_path`: Path to the temporary document
    - `request.state.file_type`: Document type derived from the filename
    """
    @wraps(func)
    async def wrapper(*args, **kwargs):
        request: Request = kwargs.get('request')
        if not request:
            raise HTTPException(
                status_code=500,
                detail="Endpoint decorated with handle_document_upload must accept 'request: Request'"
            )

        file: UploadFile = kwargs.get('file')
        if not file:
            raise HTTPException(
                status_code=400,
                detail="File parameter is required"
            )

        processing_timeout: Optional[int] = kwargs.get('processing_timeout')
        timeout_seconds = processing_timeout or VALIDATION_CONSTANTS['MAX_PROCESSING_TIME_SECONDS']

        # Step 1: Detect file type
        file_type = detect_extension_type(file.filename) or VALIDATION_CONSTANTS['DEFAULT_DOCUMENT_TYPE']

        # Step 2: Read and validate file content
        try:
            content = await file.read()
        except Exception as e:
            logger.error(f"Error reading uploaded file: {e}")
            raise HTTPException(
                status_code=400,
                detail=f"Error reading uploaded file: {str(e)}"
            )

        max_size_mb = getattr(request.app.state, 'max_file_size_mb', VALIDATION_CONSTANTS['MAX_FILE_SIZE_MB'])
        is_valid_content, content_error = validate_file_content(content, file_type, max_size_mb=max_size_mb)

        if not is_valid_content:
            logger.warning(f"File content validation failed for {file.filename}: {content_error}")
            raise HTTPException(
                status_code=400,
                detail=content_error
            )

        # Step 3: Create temporary file for processing
        temp_file = None
        try:
            temp_file = tempfile.NamedTemporaryFile(delete=False, suffix=f'.{file_type}')
            temp_file.write(content)
            temp_file.flush()
            temp_file.close()  # Close handle to allow processing on Windows

            request.state.temp_file_path = temp_file.name
            request.state.file_type = file_type

            try:
                return await asyncio.wait_for(
                    func(*args, **kwargs),
                    timeout=timeout_seconds
                )

            except asyncio.TimeoutError:
                logger.error(f"Processing timed out after {timeout_seconds}s for {file.filename}")
                raise HTTPException(
                    status_code=408,
                    detail=f"Document processing timed out after {timeout_seconds} seconds."
                )
            except PdfValidationError as e:
                logger.warning(f"Validation failed for {file.filename}: {e}")
                raise HTTPException(
                    status_code=400,
                    detail=f"Validation failed: {str(e)}"
                )
            except DocumentReadError as e:
                logger.error(f"Uploaded document unreadable: {e}")
                raise HTTPException(
                    status_code=404,
                    detail=str(e)
                )
            except ProcessingTimeoutError as e:
                logger.error(f"Processing timeout for {file.filename}: {e}")
                raise HTTPException(
                    status_code=408,
                    detail=f"Processing timeout: {str(e)}"
                )
            except HTTPException:
                raise
            except Exception as e:
                logger.error(f"Unexpected error processing {file.filename}: {e}")
                logger.exception("Full exception details:")
                raise HTTPException(
                    status_code=500,
                    detail=f"Internal server error during document processing: {str(e)}"
                )

        finally:
            if temp_file and os.path.exists(temp_file.name):
                try:
                    os.unlink(temp_file.name)
                    logger.debug(f"Cleaned up temporary file: {temp_file.name}")
                except OSError as e:
                    logger.warning(f"Failed to clean up temporary file {temp_file.name}: {e}")

    return wrapper
