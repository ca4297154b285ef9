"""Unit tests for DOCX extraction."""

import pytest

from docvision.errors import DocumentLoadError
from docvision.extractors.docx_extractor import (
    decode_xml_entities, extract_docx_text, extract_text_from_document_xml,
)


class TestDocumentXml:
    """Test paragraph and run extraction from document.xml."""

    def test_runs_concatenate_and_paragraphs_join_with_newline(self):
        xml = (
            '<w:body>'
            '<w:p><w:r><w:t>Hel</w:t></w:r><w:r><w:t>lo</w:t></w:r></w:p>'
            '<w:p w:rsidR="00AB"><w:r><w:t xml:space="preserve">second line </w:t></w:r></w:p>'
            '</w:body>'
        )
        assert extract_text_from_document_xml(xml) == 'Hello\nsecond line '

    def test_empty_paragraphs_are_skipped(self):
        xml = '<w:p><w:r><w:t>one</w:t></w:r></w:p><w:p></w:p><w:p/><w:p><w:r><w:t>two</w:t></w:r></w:p>'
        assert extract_text_from_document_xml(xml) == 'one\ntwo'

    def test_paragraph_properties_and_tabs_are_not_text(self):
        xml = (
            '<w:p><w:pPr><w:pStyle w:val="Heading1"/></w:pPr>'
            '<w:r><w:tab/><w:t>Indented</w:t></w:r></w:p>'
        )
        assert extract_text_from_document_xml(xml) == 'Indented'

    def test_entities_decoded(self):
        xml = '<w:p><w:r><w:t>Fish &amp; chips &lt;3 &quot;yum&quot;</w:t></w:r></w:p>'
        assert extract_text_from_document_xml(xml) == 'Fish & chips <3 "yum"'

    def test_falls_back_to_all_text_nodes(self):
        xml = '<w:body><w:sdt><w:t>loose</w:t><w:t> text</w:t></w:sdt></w:body>'
        assert extract_text_from_document_xml(xml) == 'loose text'

    def test_no_text_at_all(self):
        assert extract_text_from_document_xml('<w:body/>') == ''

    def test_extraction_is_idempotent(self):
        xml = '<w:p><w:r><w:t>a</w:t></w:r></w:p><w:p><w:r><w:t>b</w:t></w:r></w:p>'
        assert extract_text_from_document_xml(xml) == extract_text_from_document_xml(xml)


def test_decode_xml_entities_amp_first():
    assert decode_xml_entities('&amp;lt;') == '<'
    assert decode_xml_entities('&apos;x&apos;') == "'x'"


class TestExtractDocxText:

    def test_sample_document(self, sample_docx):
        assert extract_docx_text(sample_docx) == 'Hello world\nSecond & last'

    def test_missing_document_part(self, make_docx):
        data = make_docx('', include_document=False, extra_entries={'word/styles.xml': '<w:styles/>'})
        with pytest.raises(DocumentLoadError) as exc_info:
            extract_docx_text(data)
        assert 'word/document.xml' in exc_info.value.message

    def test_document_part_lookup_is_case_sensitive(self, make_docx):
        data = make_docx('', include_document=False, extra_entries={'Word/Document.xml': '<w:p/>'})
        with pytest.raises(DocumentLoadError):
            extract_docx_text(data)

    def test_not_a_zip(self):
        with pytest.raises(DocumentLoadError):
            extract_docx_text(b'PK-but-not-really')

    def test_utf16_document_part(self, make_zip):
        xml = '<w:p><w:r><w:t>wide</w:t></w:r></w:p>'
        data = make_zip({'word/document.xml': b'\xff\xfe' + xml.encode('utf-16-le')})
        assert extract_docx_text(data) == 'wide'
