"""DOCX file extraction module."""

import logging
import re
from typing import List

from ..constants import DOCX_DOCUMENT_PART
from ..errors import DocumentLoadError
from .container import open_container
from .encoding import decode_bytes

logger = logging.getLogger(__name__)

_PARAGRAPH_RE = re.compile(r'<w:p(?:\s[^>]*)?>.*?</w:p>', re.DOTALL)
_TEXT_RUN_RE = re.compile(r'<w:t(?:\s[^>]*)?>([^<]*)</w:t>')

XML_ENTITIES = (
    ('&amp;', '&'),
    ('&lt;', '<'),
    ('&gt;', '>'),
    ('&apos;', "'"),
    ('&quot;', '"'),
)


def decode_xml_entities(text: str) -> str:
    """Decode the five predefined XML entities."""
    for entity, replacement in XML_ENTITIES:
        text = text.replace(entity, replacement)
    return text


def _text_runs(xml: str) -> List[str]:
    runs = (decode_xml_entities(m.group(1)) for m in _TEXT_RUN_RE.finditer(xml))
    return [run for run in runs if run]


def extract_text_from_document_xml(xml: str) -> str:
    """
    Extract text from the WordprocessingML main document part.

    Runs inside a paragraph are word fragments and are concatenated as-is;
    paragraphs are joined with a newline. If no paragraph yields text, every
    <w:t> node in the document is concatenated instead.
    """
    paragraphs = []
    for match in _PARAGRAPH_RE.finditer(xml):
        runs = _text_runs(match.group(0))
        if runs:
            paragraphs.append(''.join(runs))

    if paragraphs:
        return '\n'.join(paragraphs)

    logger.debug("No paragraphs with text found, falling back to all <w:t> nodes")
    return ''.join(_text_runs(xml))


def extract_docx_text(data: bytes) -> str:
    """
    Extract text from DOCX bytes.

    Raises:
        DocumentLoadError: If the data is not a ZIP archive or has no
            word/document.xml part
    """
    with open_container(data) as archive:
        xml_bytes = archive.get(DOCX_DOCUMENT_PART)
    if xml_bytes is None:
        raise DocumentLoadError(f"DOCX file does not contain {DOCX_DOCUMENT_PART}")

    # OOXML parts are always UTF-8 or UTF-16; no validation needed
    xml = decode_bytes(xml_bytes, validate_initial=False, validate_legacy=False)
    content = extract_text_from_document_xml(xml)
    logger.info(f"Extracted {len(content)} characters from DOCX")
    return content
