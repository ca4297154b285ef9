"""Plain text extraction with encoding detection."""

import logging
from typing import Optional

from .encoding import DecodedText, detect_encoding

logger = logging.getLogger(__name__)


def decode_plain_text(data: bytes) -> Optional[DecodedText]:
    """
    Decode a plain text buffer strictly.

    Plain text has no structure to absorb a bad decode, so both the UTF-8 and
    the legacy attempts are validated. Returns None for an empty buffer.

    Raises:
        DecodeFailure: If no encoding produced valid text
    """
    if not data:
        return None
    decoded = detect_encoding(data, validate_initial=True, validate_legacy=True)
    logger.info(f"Decoded {len(data)} bytes of plain text as {decoded.encoding}")
    return decoded


def extract_plain_text(data: bytes) -> str:
    """Extract text from plain text bytes; an empty buffer gives ''."""
    decoded = decode_plain_text(data)
    return decoded.text if decoded is not None else ''
