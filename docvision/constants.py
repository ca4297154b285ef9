"""Central constants for docvision."""

from typing import Dict, Tuple

# Legacy encodings tried in order once Unicode decoding fails or is implausible.
# Simplified Chinese, Traditional Chinese, Japanese, Korean, Western, ASCII.
LEGACY_ENCODINGS: Tuple[str, ...] = (
    'gb18030',
    'gbk',
    'gb2312',
    'big5',
    'shift_jis',
    'euc_jp',
    'euc_kr',
    'cp1252',
    'latin-1',
    'ascii',
)

# Byte order marks, longest first so UTF-32LE wins over UTF-16LE
BYTE_ORDER_MARKS: Tuple[Tuple[bytes, str], ...] = (
    (b'\x00\x00\xfe\xff', 'utf-32-be'),
    (b'\xff\xfe\x00\x00', 'utf-32-le'),
    (b'\xfe\xff', 'utf-16-be'),
    (b'\xff\xfe', 'utf-16-le'),
    (b'\xef\xbb\xbf', 'utf-8'),
)

# Up to 10% replacement or NUL characters are tolerated in a decode
VALIDATION_RATIO = 10

# Extension (lowercase, no dot) -> document kind value
EXTENSION_KINDS: Dict[str, str] = {
    'pdf': 'pdf',
    'jpg': 'image',
    'jpeg': 'image',
    'png': 'image',
    'heic': 'image',
    'heif': 'image',
    'docx': 'docx',
    'epub': 'epub',
    'doc': 'legacy_doc',
    'txt': 'plain_text',
}

# Human readable extraction method per extension, used by `docvision formats`
EXTRACTION_METHODS: Dict[str, str] = {
    'pdf': 'pypdfium2 text layer, tesseract OCR for scanned pages',
    'jpg': 'tesseract OCR',
    'jpeg': 'tesseract OCR',
    'png': 'tesseract OCR',
    'heic': 'tesseract OCR',
    'heif': 'tesseract OCR',
    'docx': 'word/document.xml paragraph runs',
    'epub': 'OPF spine + XHTML to text',
    'txt': 'encoding detection',
    'doc': 'not supported (legacy binary Word)',
}

# DOCX
DOCX_DOCUMENT_PART = 'word/document.xml'

# EPUB
EPUB_CONTAINER_PATH = 'META-INF/container.xml'
EPUB_READABLE_MEDIA_TYPES = frozenset({
    'application/xhtml+xml',
    'application/x-dtbook+xml',
    'text/html',
})
EPUB_HTML_SUFFIXES = ('.xhtml', '.html', '.htm')

# PDF
PDF_MIN_TEXT_LENGTH = 20  # text layers longer than this skip OCR
PDF_RENDER_SCALE = 2.0

# OCR
DEFAULT_TESSERACT_CMD = 'tesseract'
DEFAULT_OCR_TIMEOUT = 120  # seconds per image

# Pillow modes written to PNG as-is; anything else (CMYK, P, I;16...) becomes RGB
OCR_IMAGE_MODES = frozenset({'RGB', 'RGBA', 'L'})

# BCP 47 language tag (or its primary subtag) -> tesseract traineddata name
TESSERACT_LANGUAGES: Dict[str, str] = {
    'en': 'eng',
    'zh-hans': 'chi_sim',
    'zh-cn': 'chi_sim',
    'zh-hant': 'chi_tra',
    'zh-tw': 'chi_tra',
    'zh-hk': 'chi_tra',
    'zh': 'chi_sim',
    'ja': 'jpn',
    'ko': 'kor',
    'fr': 'fra',
    'de': 'deu',
    'es': 'spa',
    'it': 'ita',
    'pt': 'por',
    'ru': 'rus',
    'uk': 'ukr',
    'nl': 'nld',
    'pl': 'pol',
    'sv': 'swe',
    'tr': 'tur',
    'vi': 'vie',
    'th': 'tha',
    'ar': 'ara',
}

# Batch processing
DEFAULT_CONCURRENCY = 4

# Skip patterns for batch collection
SKIP_PATTERNS = frozenset({'.DS_Store', 'Thumbs.db', 'desktop.ini'})

# Logging
LOG_FILE_PATH = "/tmp/docvision.log"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_ROTATION = "100 MB"

# Progress display
PROGRESS_BAR_FORMAT = '{desc}: {percentage:3.0f}%|{bar}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}]'

# Success messages
SUCCESS_BATCH = "✅ Extraction complete: {processed} documents processed, {failed} failed"
