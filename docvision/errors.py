"""
Error taxonomy for docvision.

Every failure surfaces to the caller as exactly one of the codes below,
carrying a human readable message. Errors are terminal: nothing is retried and
no partial result is returned alongside an error.
"""

from enum import Enum
from typing import Dict


class ErrorCode(str, Enum):
    """Closed set of error codes reported to callers."""

    INVALID_OPTIONS = "INVALID_OPTIONS"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    UNSUPPORTED_FILE_TYPE = "UNSUPPORTED_FILE_TYPE"
    DOCUMENT_LOAD_FAILED = "DOCUMENT_LOAD_FAILED"
    OCR_FAILED = "OCR_FAILED"


class DocVisionError(Exception):
    """Base exception for document extraction errors."""

    code: ErrorCode = ErrorCode.DOCUMENT_LOAD_FAILED

    def __init__(self, message: str, code: ErrorCode = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = ErrorCode(code)

    def to_dict(self) -> Dict[str, str]:
        return {'code': self.code.value, 'message': self.message}

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InvalidOptionsError(DocVisionError):
    """Missing or unparseable URI or option."""
    code = ErrorCode.INVALID_OPTIONS


class DocumentNotFoundError(DocVisionError):
    """The resolved path does not exist."""
    code = ErrorCode.FILE_NOT_FOUND


class UnsupportedFileTypeError(DocVisionError):
    """The document kind is legacy .doc or unknown."""
    code = ErrorCode.UNSUPPORTED_FILE_TYPE


class DocumentLoadError(DocVisionError):
    """Container or markup could not be opened, or a required entry is missing."""
    code = ErrorCode.DOCUMENT_LOAD_FAILED


class DecodeFailure(DocumentLoadError):
    """No encoding in the decode ladder produced valid text."""


class OcrFailedError(DocVisionError):
    """The OCR capability reported an error."""
    code = ErrorCode.OCR_FAILED
