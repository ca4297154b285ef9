"""
docvision: plain text extraction from images, PDFs, DOCX, EPUB and text files.

Every request resolves to exactly one ExtractionResult or raises exactly one
DocVisionError.
"""

from .errors import (
    DecodeFailure, DocVisionError, DocumentLoadError, DocumentNotFoundError,
    ErrorCode, InvalidOptionsError, OcrFailedError, UnsupportedFileTypeError,
)
from .ingest.document_processor import extract_path, process_document, recognize
from .models import (
    DocumentKind, ExtractionResult, ExtractionSettings, ExtractionSource,
    PageText, RecognitionMode, RecognitionOptions, RecognizeOptions,
)

__version__ = "0.1.0"

__all__ = [
    'recognize',
    'process_document',
    'extract_path',
    'DocumentKind',
    'ExtractionResult',
    'ExtractionSettings',
    'ExtractionSource',
    'PageText',
    'RecognitionMode',
    'RecognitionOptions',
    'RecognizeOptions',
    'ErrorCode',
    'DocVisionError',
    'InvalidOptionsError',
    'DocumentNotFoundError',
    'UnsupportedFileTypeError',
    'DocumentLoadError',
    'DecodeFailure',
    'OcrFailedError',
]
