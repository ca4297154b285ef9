"""Shared fixtures: in-memory DOCX/EPUB archives and fake OCR/PDF collaborators."""

import io
import zipfile

import pytest
from PIL import Image

CONTAINER_XML = """<?xml version="1.0" encoding="UTF-8"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="{opf_path}" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>
"""

OPF_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<package xmlns="http://www.idpf.org/2007/opf" version="3.0" unique-identifier="uid">
  <metadata xmlns:dc="http://purl.org/dc/elements/1.1/">
    <dc:title>{title}</dc:title>
  </metadata>
  <manifest>
{items}
  </manifest>
  <spine>
{itemrefs}
  </spine>
</package>
"""

DOCX_TEMPLATE = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">
  <w:body>{body}</w:body>
</w:document>
"""


def build_zip(entries):
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w', zipfile.ZIP_DEFLATED) as zf:
        for name, content in entries.items():
            zf.writestr(name, content)
    return buffer.getvalue()


def build_opf(manifest, spine, title="Test Book"):
    items = '\n'.join(
        f'    <item id="{item_id}" href="{href}" media-type="{media_type}"/>'
        for item_id, href, media_type in manifest
    )
    itemrefs = '\n'.join(f'    <itemref idref="{idref}"/>' for idref in spine)
    return OPF_TEMPLATE.format(title=title, items=items, itemrefs=itemrefs)


def chapter_html(title, body):
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<html xmlns="http://www.w3.org/1999/xhtml"><head>'
        '<style>p { color: red; }</style></head>'
        f'<body><h1>{title}</h1><p>{body}</p></body></html>'
    )


class FakeOcrEngine:
    """Records every call and returns canned text (or raises)."""

    def __init__(self, text="recognized text", error=None):
        self.text = text
        self.error = error
        self.calls = []

    def recognize_image(self, image, options):
        self.calls.append((image, options))
        if self.error is not None:
            raise self.error
        return self.text


class FakePdfDocument:
    def __init__(self, texts):
        self.texts = list(texts)
        self.rendered = []
        self.closed = False

    @property
    def page_count(self):
        return len(self.texts)

    def page_text(self, index):
        return self.texts[index]

    def render_page(self, index, scale):
        self.rendered.append((index, scale))
        return Image.new('RGB', (8, 8), 'white')

    def close(self):
        self.closed = True


class FakePdfBackend:
    """Serves a fixed text layer for any path."""

    def __init__(self, texts=(), error=None):
        self.texts = texts
        self.error = error
        self.opened = []
        self.document = None

    def open(self, path):
        self.opened.append(path)
        if self.error is not None:
            raise self.error
        self.document = FakePdfDocument(self.texts)
        return self.document


@pytest.fixture
def make_zip():
    """Build a ZIP archive in memory from {entry path: content}."""
    return build_zip


@pytest.fixture
def make_docx():
    """Build DOCX bytes from a WordprocessingML body fragment."""
    def build(body, include_document=True, extra_entries=None):
        entries = {'[Content_Types].xml': '<Types/>'}
        if include_document:
            entries['word/document.xml'] = DOCX_TEMPLATE.format(body=body)
        entries.update(extra_entries or {})
        return build_zip(entries)
    return build


@pytest.fixture
def make_epub():
    """
    Build EPUB bytes.

    chapters is a list of (id, href, html); the spine defaults to chapter order.
    """
    def build(chapters, spine=None, opf_path='OEBPS/content.opf', title="Test Book",
              media_type='application/xhtml+xml', extra_manifest=(), extra_entries=None,
              include_container=True, write_chapters=True):
        opf_dir = opf_path.rsplit('/', 1)[0] + '/' if '/' in opf_path else ''
        manifest = [(item_id, href, media_type) for item_id, href, _ in chapters]
        manifest.extend(extra_manifest)
        if spine is None:
            spine = [item_id for item_id, _, _ in chapters]

        entries = {'mimetype': 'application/epub+zip'}
        if include_container:
            entries['META-INF/container.xml'] = CONTAINER_XML.format(opf_path=opf_path)
        entries[opf_path] = build_opf(manifest, spine, title=title)
        if write_chapters:
            for _, href, html in chapters:
                entries[opf_dir + href] = html
        entries.update(extra_entries or {})
        return build_zip(entries)
    return build


@pytest.fixture
def sample_epub(make_epub):
    return make_epub([
        ('ch1', 'chapter1.xhtml', chapter_html("Chapter One", "It was a dark night.")),
        ('ch2', 'chapter2.xhtml', chapter_html("Chapter Two", "Morning came.")),
    ])


@pytest.fixture
def sample_docx(make_docx):
    return make_docx(
        '<w:p><w:r><w:t>Hello </w:t></w:r><w:r><w:t>world</w:t></w:r></w:p>'
        '<w:p><w:pPr><w:jc w:val="center"/></w:pPr><w:r><w:t xml:space="preserve">Second &amp; last</w:t></w:r></w:p>'
    )


@pytest.fixture
def fake_ocr():
    return FakeOcrEngine()


@pytest.fixture
def ocr_engine_factory():
    return FakeOcrEngine


@pytest.fixture
def pdf_backend_factory():
    return FakePdfBackend


@pytest.fixture
def png_file(tmp_path):
    path = tmp_path / "scan.png"
    Image.new('RGB', (32, 16), 'white').save(path)
    return path


@pytest.fixture
def container_xml():
    """container.xml template with an {opf_path} placeholder."""
    return CONTAINER_XML


@pytest.fixture
def opf_builder():
    return build_opf


@pytest.fixture
def chapter():
    return chapter_html


@pytest.fixture
def cmyk_jpeg(tmp_path):
    """A JPEG in CMYK mode, as produced by many scanners and print workflows."""
    path = tmp_path / "print.jpg"
    Image.new('CMYK', (20, 20), (0, 0, 0, 0)).save(path, format='JPEG')
    return path
