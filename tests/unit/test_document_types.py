"""Unit tests for document kind resolution."""

import pytest

from docvision.ingest.document_types import (
    get_supported_file_types, is_file_type_supported, resolve_document_kind,
    resolve_document_kind_for,
)
from docvision.models import DocumentKind


@pytest.mark.parametrize("extension,kind", [
    ('pdf', DocumentKind.PDF),
    ('.PDF', DocumentKind.PDF),
    ('jpg', DocumentKind.IMAGE),
    ('JPEG', DocumentKind.IMAGE),
    ('png', DocumentKind.IMAGE),
    ('heic', DocumentKind.IMAGE),
    ('heif', DocumentKind.IMAGE),
    ('docx', DocumentKind.DOCX),
    ('epub', DocumentKind.EPUB),
    ('txt', DocumentKind.PLAIN_TEXT),
    ('doc', DocumentKind.LEGACY_DOC),
    ('rtf', DocumentKind.UNKNOWN),
    ('', DocumentKind.UNKNOWN),
])
def test_resolve_document_kind(extension, kind):
    assert resolve_document_kind(extension) == kind


class TestTypeOverride:

    def test_auto_uses_extension(self):
        assert resolve_document_kind_for('/tmp/book.epub', 'auto') == DocumentKind.EPUB

    def test_pdf_override_wins(self):
        assert resolve_document_kind_for('/tmp/scan.bin', 'pdf') == DocumentKind.PDF

    def test_image_override_wins(self):
        assert resolve_document_kind_for('/tmp/notes.txt', 'IMAGE') == DocumentKind.IMAGE

    def test_other_override_falls_through(self):
        assert resolve_document_kind_for('/tmp/report.docx', 'epub') == DocumentKind.DOCX

    def test_missing_extension(self):
        assert resolve_document_kind_for('/tmp/README') == DocumentKind.UNKNOWN


class TestSupportedTypes:

    def test_legacy_doc_not_listed(self):
        supported = get_supported_file_types()
        assert '.doc' not in supported
        assert {'.pdf', '.png', '.docx', '.epub', '.txt'} <= set(supported)

    def test_is_file_type_supported(self):
        assert is_file_type_supported('a/b/c.TXT') is True
        assert is_file_type_supported('old.doc') is False
        assert is_file_type_supported('archive.zip') is False
