"""
PDF extraction: direct text layer for text-based PDFs, OCR for scanned ones.

A document whose text layer is longer than ``min_text_length`` characters is
treated as text-based and never OCR'd. Otherwise every page is rasterized at
``render_scale`` and handed to the OCR engine.
"""

import logging
from pathlib import Path
from typing import List, Tuple

import pypdfium2 as pdfium
from PIL import Image

from ..constants import PDF_MIN_TEXT_LENGTH, PDF_RENDER_SCALE
from ..errors import DocumentLoadError
from ..models import ExtractionResult, ExtractionSource, PageText, RecognitionOptions
from ..types import OcrEngine, PdfBackend, PdfHandle

logger = logging.getLogger(__name__)


class PdfiumDocument:
    """PdfHandle over a pypdfium2 document."""

    def __init__(self, document):
        self._document = document

    @property
    def page_count(self) -> int:
        return len(self._document)

    def page_text(self, index: int) -> str:
        page = self._document[index]
        try:
            textpage = page.get_textpage()
            try:
                return textpage.get_text_range()
            finally:
                textpage.close()
        finally:
            page.close()

    def render_page(self, index: int, scale: float) -> Image.Image:
        page = self._document[index]
        try:
            bitmap = page.render(scale=scale, fill_color=(255, 255, 255, 255))
            return bitmap.to_pil().convert("RGB")
        except pdfium.PdfiumError as e:
            raise DocumentLoadError(f"Failed to render PDF page {index + 1}: {e}") from e
        finally:
            page.close()

    def close(self) -> None:
        self._document.close()


class PdfiumBackend:
    """PdfBackend using pypdfium2."""

    def open(self, path: Path) -> PdfHandle:
        try:
            document = pdfium.PdfDocument(str(path))
        except pdfium.PdfiumError as e:
            raise DocumentLoadError(f"Failed to load PDF from {path}: {e}") from e
        return PdfiumDocument(document)


def join_page_texts(texts: List[str]) -> str:
    """Join page texts with a blank line, only between non-empty pages."""
    combined = ''
    for text in texts:
        if combined and text:
            combined += '\n\n'
        combined += text
    return combined


def _text_layer(document: PdfHandle) -> List[str]:
    return [document.page_text(index) for index in range(document.page_count)]


def _ocr_pages(document: PdfHandle, options: RecognitionOptions, engine: OcrEngine,
               render_scale: float) -> List[str]:
    texts = []
    for index in range(document.page_count):
        image = document.render_page(index, render_scale)
        try:
            texts.append(engine.recognize_image(image, options))
        finally:
            image.close()
        logger.debug(f"OCR'd page {index + 1}/{document.page_count}")
    return texts


def _result(texts: List[str]) -> Tuple[str, Tuple[PageText, ...]]:
    pages = tuple(PageText(page_number=i + 1, text=t) for i, t in enumerate(texts))
    return join_page_texts(texts), pages


def recognize_pdf(path: Path, options: RecognitionOptions, engine: OcrEngine,
                  backend: PdfBackend, min_text_length: int = PDF_MIN_TEXT_LENGTH,
                  render_scale: float = PDF_RENDER_SCALE) -> ExtractionResult:
    """
    Extract per-page text from a PDF.

    Args:
        path: PDF file
        options: Recognition options for the OCR fallback
        engine: OCR capability used for scanned PDFs
        backend: PDF loader/rasterizer
        min_text_length: Text layers longer than this skip OCR
        render_scale: Rasterization scale for OCR

    Returns:
        ExtractionResult with source pdf-text or vision and every page listed

    Raises:
        DocumentLoadError: If the PDF cannot be loaded or rendered
        OcrFailedError: If OCR of a page fails
    """
    document = backend.open(path)
    try:
        texts = _text_layer(document)
        if len('\n'.join(texts)) > min_text_length:
            logger.info(f"Using text layer of {path.name} ({document.page_count} pages)")
            source = ExtractionSource.PDF_TEXT
        else:
            logger.info(f"{path.name} has no usable text layer, running OCR on {document.page_count} pages")
            texts = _ocr_pages(document, options, engine, render_scale)
            source = ExtractionSource.VISION
        text, pages = _result(texts)
    finally:
        document.close()

    return ExtractionResult(text=text, pages=pages, source=source)
