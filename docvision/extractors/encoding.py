"""
Character encoding detection for arbitrary byte buffers.

Decoding runs a fixed ladder and the first success wins:

1. byte order mark sniffing (no validation, a BOM is a strong signal)
2. strict UTF-8 (validated when ``validate_initial`` is set)
3. UTF-16 without BOM, byte order inferred from zero-byte positions
4. the legacy ladder in LEGACY_ENCODINGS (validated when ``validate_legacy``)

No external detection library is used; the validator is a cheap heuristic
that rejects decodes with too many replacement or NUL characters.
"""

import logging
from typing import NamedTuple, Optional

from ..constants import BYTE_ORDER_MARKS, LEGACY_ENCODINGS, VALIDATION_RATIO
from ..errors import DecodeFailure

logger = logging.getLogger(__name__)

REPLACEMENT_CHAR = '\ufffd'
NUL_CHAR = '\x00'


class DecodedText(NamedTuple):
    text: str
    encoding: str


def is_valid_text(text: str) -> bool:
    """
    Check that decoded text looks plausible.

    Empty text is valid. Otherwise both the replacement character count and the
    NUL count must stay at or below max(1, len(text) // 10). Counting characters
    rather than bytes keeps the threshold stable across multi-byte encodings.
    """
    if not text:
        return True

    threshold = max(1, len(text) // VALIDATION_RATIO)
    if text.count(REPLACEMENT_CHAR) > threshold:
        return False
    if text.count(NUL_CHAR) > threshold:
        return False
    return True


def decode_with_bom(data: bytes) -> Optional[DecodedText]:
    """Decode using the byte order mark, if the buffer starts with one."""
    for bom, encoding in BYTE_ORDER_MARKS:
        if data.startswith(bom):
            try:
                return DecodedText(data[len(bom):].decode(encoding), encoding)
            except UnicodeDecodeError as e:
                logger.debug(f"{encoding} BOM present but payload does not decode: {e}")
                return None
    return None


def infer_utf16_byte_order(data: bytes) -> str:
    """
    Guess UTF-16 byte order for BOM-less data.

    Text dominated by Latin characters has its zero bytes on the high-order
    side of each code unit: even offsets for big-endian, odd for little-endian.
    """
    even_zeros = data[0::2].count(0)
    odd_zeros = data[1::2].count(0)
    return 'utf-16-be' if even_zeros > odd_zeros else 'utf-16-le'


def decode_utf16(data: bytes) -> Optional[DecodedText]:
    if not data or len(data) % 2:
        return None
    encoding = infer_utf16_byte_order(data)
    try:
        return DecodedText(data.decode(encoding), encoding)
    except UnicodeDecodeError:
        return None


def decode_with_legacy_encodings(data: bytes, validate: bool = False) -> Optional[DecodedText]:
    """Try each legacy encoding in priority order."""
    for encoding in LEGACY_ENCODINGS:
        try:
            text = data.decode(encoding)
        except UnicodeDecodeError:
            continue
        if validate and not is_valid_text(text):
            logger.debug(f"{encoding} decoded but failed validation")
            continue
        return DecodedText(text, encoding)
    return None


def detect_encoding(data: bytes, validate_initial: bool = False,
                    validate_legacy: bool = False) -> DecodedText:
    """
    Decode a byte buffer and report which encoding won.

    Args:
        data: Raw bytes
        validate_initial: Validate the BOM-less UTF-8 attempt
        validate_legacy: Validate each legacy ladder attempt

    Returns:
        DecodedText(text, encoding)

    Raises:
        DecodeFailure: If no encoding produced acceptable text
    """
    decoded = decode_with_bom(data)
    if decoded is not None:
        return decoded

    try:
        text = data.decode('utf-8')
    except UnicodeDecodeError:
        pass
    else:
        if not validate_initial or is_valid_text(text):
            return DecodedText(text, 'utf-8')
        logger.debug("UTF-8 decoded but failed validation")

    decoded = decode_utf16(data)
    if decoded is not None:
        return decoded

    decoded = decode_with_legacy_encodings(data, validate=validate_legacy)
    if decoded is not None:
        logger.debug(f"Decoded {len(data)} bytes with legacy encoding {decoded.encoding}")
        return decoded

    raise DecodeFailure(f"Unable to decode {len(data)} bytes with any supported encoding")


def decode_bytes(data: bytes, validate_initial: bool = False,
                 validate_legacy: bool = False) -> str:
    """Decode a byte buffer to text. See detect_encoding."""
    return detect_encoding(
        data, validate_initial=validate_initial, validate_legacy=validate_legacy
    ).text
