"""
Document processing module for docvision.

This module is the top-level extraction dispatcher: it validates a request,
resolves the document kind, runs the matching extractor and normalizes its
output into an ExtractionResult. Failures surface as exactly one
DocVisionError code; nothing is retried and no partial result is returned.
"""

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, Optional
from urllib.parse import unquote, urlparse

from loguru import logger
from pydantic import ValidationError

from ..errors import (
    DocVisionError, DocumentLoadError, DocumentNotFoundError, ErrorCode,
    InvalidOptionsError, UnsupportedFileTypeError,
)
from ..extractors.docx_extractor import extract_docx_text
from ..extractors.epub_extractor import extract_epub_text, read_epub_title
from ..extractors.image_extractor import TesseractOcrEngine, recognize_image_file
from ..extractors.pdf_extractor import PdfiumBackend, recognize_pdf
from ..extractors.txt_extractor import decode_plain_text
from ..models import (
    DocumentKind, ExtractionResult, ExtractionSettings, ExtractionSource,
    RecognizeOptions, parse_recognize_options,
)
from ..types import OcrEngine, PathLike, PdfBackend
from .document_types import resolve_document_kind_for


def resolve_uri(uri: Optional[str]) -> Path:
    """
    Resolve a request URI to a local file path.

    Accepts file:// URIs (percent-decoded) and plain absolute or relative
    paths. Any other scheme is rejected; nothing is fetched over the network.

    Raises:
        InvalidOptionsError: If the URI is missing or cannot be resolved
    """
    if not uri or not uri.strip():
        raise InvalidOptionsError("URI is required")

    uri = uri.strip()
    if uri.lower().startswith('file:'):
        parsed = urlparse(uri)
        if parsed.netloc not in ('', 'localhost'):
            raise InvalidOptionsError(f"Invalid URI: {uri}")
        path = unquote(parsed.path)
        if not path:
            raise InvalidOptionsError(f"Invalid URI: {uri}")
        return Path(path)

    scheme = urlparse(uri).scheme
    # A single letter is a Windows drive, not a scheme
    if len(scheme) > 1:
        raise InvalidOptionsError(f"Invalid URI: {uri} (unsupported scheme '{scheme}')")
    return Path(uri).expanduser()


def _read_document_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise DocumentLoadError(f"Failed to read file {path}: {e}") from e


def _guard(kind: DocumentKind, extract: Callable[[], ExtractionResult]) -> ExtractionResult:
    """Run an extractor, mapping unexpected exceptions onto the taxonomy."""
    try:
        return extract()
    except DocVisionError:
        raise
    except Exception as e:
        code = ErrorCode.OCR_FAILED if kind in (DocumentKind.IMAGE, DocumentKind.PDF) else ErrorCode.DOCUMENT_LOAD_FAILED
        logger.error(f"Unexpected {type(e).__name__} while extracting {kind.value}: {e}")
        raise DocVisionError(str(e) or type(e).__name__, code=code) from e


def _provenance(path: Path, kind: DocumentKind, method: str, **extra: Any) -> Dict[str, Any]:
    metadata = {
        'file_name': path.name,
        'file_path': str(path),
        'document_kind': kind.value,
        'extraction_method': method,
    }
    metadata.update({k: v for k, v in extra.items() if v is not None})
    return metadata


def _process_pdf(path: Path, request: RecognizeOptions, engine: OcrEngine,
                 backend: PdfBackend, settings: ExtractionSettings) -> ExtractionResult:
    result = recognize_pdf(
        path,
        request.to_recognition_options(),
        engine,
        backend,
        min_text_length=settings.pdf_min_text_length,
        render_scale=settings.pdf_render_scale,
    )
    method = 'pdf_text_layer' if result.source == ExtractionSource.PDF_TEXT else 'pdf_ocr'
    metadata = _provenance(path, DocumentKind.PDF, method, page_count=len(result.pages or ()))
    return result.model_copy(update={'metadata': metadata})


def _process_image(path: Path, request: RecognizeOptions, engine: OcrEngine) -> ExtractionResult:
    text = recognize_image_file(path, request.to_recognition_options(), engine)
    return ExtractionResult(
        text=text,
        source=ExtractionSource.VISION,
        metadata=_provenance(path, DocumentKind.IMAGE, 'image_ocr'),
    )


def _process_docx(path: Path) -> ExtractionResult:
    text = extract_docx_text(_read_document_bytes(path))
    return ExtractionResult(
        text=text,
        source=ExtractionSource.DOCX_XML,
        metadata=_provenance(path, DocumentKind.DOCX, 'docx_xml'),
    )


def _process_epub(path: Path) -> ExtractionResult:
    data = _read_document_bytes(path)
    text = extract_epub_text(data)
    return ExtractionResult(
        text=text,
        source=ExtractionSource.EPUB_HTML,
        metadata=_provenance(path, DocumentKind.EPUB, 'epub_spine', title=read_epub_title(data)),
    )


def _process_text_file(path: Path) -> ExtractionResult:
    decoded = decode_plain_text(_read_document_bytes(path))
    if decoded is None:
        logger.info(f"Text file is empty: {path}")
        text, encoding = '', None
    else:
        text, encoding = decoded
    return ExtractionResult(
        text=text,
        source=ExtractionSource.TXT,
        metadata=_provenance(path, DocumentKind.PLAIN_TEXT, 'direct_text_read', encoding=encoding),
    )


def process_document(options: Any, *, ocr_engine: Optional[OcrEngine] = None,
                     pdf_backend: Optional[PdfBackend] = None,
                     settings: Optional[ExtractionSettings] = None) -> ExtractionResult:
    """
    Run one extraction request to completion.

    Args:
        options: RecognizeOptions or a mapping with host keys (uri, type,
            language, mode, automaticallyDetectsLanguage, usesLanguageCorrection)
        ocr_engine: OCR capability for images and scanned PDFs
        pdf_backend: PDF loader/rasterizer
        settings: Process-level settings

    Returns:
        ExtractionResult

    Raises:
        DocVisionError: One of the taxonomy codes
    """
    try:
        request = parse_recognize_options(options)
    except (ValidationError, TypeError) as e:
        raise InvalidOptionsError(f"Invalid options: {e}") from e

    settings = settings or ExtractionSettings()
    path = resolve_uri(request.uri)

    try:
        is_file = path.is_file()
    except OSError as e:
        # ENAMETOOLONG and friends
        raise DocumentNotFoundError(f"File not found at: {path} ({e.strerror or e})") from e
    if not is_file:
        raise DocumentNotFoundError(f"File not found at: {path}")

    kind = resolve_document_kind_for(path, request.type)
    logger.info(f"Processing {path} as {kind.value}")

    if kind in (DocumentKind.LEGACY_DOC, DocumentKind.UNKNOWN):
        raise UnsupportedFileTypeError(f"Unsupported file type: {path.suffix.lstrip('.') or path.name}")

    if kind in (DocumentKind.PDF, DocumentKind.IMAGE) and ocr_engine is None:
        ocr_engine = TesseractOcrEngine(settings.tesseract_cmd, settings.ocr_timeout)

    if kind == DocumentKind.PDF:
        backend = pdf_backend or PdfiumBackend()
        result = _guard(kind, lambda: _process_pdf(path, request, ocr_engine, backend, settings))
    elif kind == DocumentKind.IMAGE:
        result = _guard(kind, lambda: _process_image(path, request, ocr_engine))
    elif kind == DocumentKind.DOCX:
        result = _guard(kind, lambda: _process_docx(path))
    elif kind == DocumentKind.EPUB:
        result = _guard(kind, lambda: _process_epub(path))
    else:
        result = _guard(kind, lambda: _process_text_file(path))

    logger.info(f"Extracted {len(result.text)} characters from {path.name} ({result.source.value})")
    return result


async def recognize(options: Any, *, ocr_engine: Optional[OcrEngine] = None,
                    pdf_backend: Optional[PdfBackend] = None,
                    settings: Optional[ExtractionSettings] = None) -> ExtractionResult:
    """
    Asynchronous entry point: run process_document on a worker thread.

    Resolves with the result or raises a DocVisionError, exactly once.
    """
    return await asyncio.to_thread(
        process_document,
        options,
        ocr_engine=ocr_engine,
        pdf_backend=pdf_backend,
        settings=settings,
    )


def extract_path(path: PathLike, **option_fields: Any) -> ExtractionResult:
    """Convenience wrapper: extract a local file with optional request fields."""
    return process_document({'uri': str(path), **option_fields})
