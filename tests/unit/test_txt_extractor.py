"""Unit tests for plain text extraction."""

import pytest

from docvision.errors import DecodeFailure
from docvision.extractors.txt_extractor import decode_plain_text, extract_plain_text


def test_empty_buffer_gives_empty_text():
    assert extract_plain_text(b'') == ''
    assert decode_plain_text(b'') is None


def test_utf8_text():
    text = 'Line one\nLine two \u2014 caf\u00e9\n'
    assert extract_plain_text(text.encode('utf-8')) == text


def test_utf8_bom_is_removed():
    assert extract_plain_text(b'\xef\xbb\xbfhello') == 'hello'


def test_reports_winning_encoding():
    decoded = decode_plain_text('Hello'.encode('utf-16-le'))
    assert decoded.encoding == 'utf-16-le'
    assert decoded.text == 'Hello'


def test_undecodable_buffer_raises():
    with pytest.raises(DecodeFailure):
        extract_plain_text(b'\x00\x00\x00')
