"""
Data model for docvision requests and results.

All models are frozen: options are immutable inputs and results are handed to
the caller as immutable values.
"""

from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import (
    DEFAULT_CONCURRENCY, DEFAULT_OCR_TIMEOUT, DEFAULT_TESSERACT_CMD,
    PDF_MIN_TEXT_LENGTH, PDF_RENDER_SCALE,
)


class DocumentKind(str, Enum):
    """Document kinds, derived from the file extension only."""

    IMAGE = "image"
    PDF = "pdf"
    DOCX = "docx"
    EPUB = "epub"
    PLAIN_TEXT = "plain_text"
    LEGACY_DOC = "legacy_doc"
    UNKNOWN = "unknown"


class RecognitionMode(str, Enum):
    FAST = "fast"
    ACCURATE = "accurate"


class ExtractionSource(str, Enum):
    """Where the text of a result came from."""

    VISION = "vision"
    PDF_TEXT = "pdf-text"
    DOCX_XML = "docx-xml"
    TXT = "txt"
    EPUB_HTML = "epub-html"


class RecognitionOptions(BaseModel):
    """Options handed through to the OCR capability."""

    model_config = ConfigDict(frozen=True)

    languages: Tuple[str, ...] = ()
    mode: RecognitionMode = RecognitionMode.ACCURATE
    auto_detect_language: Optional[bool] = None
    use_language_correction: Optional[bool] = None

    @property
    def effective_auto_detect(self) -> Optional[bool]:
        """Auto detection defaults to on when no languages are given.

        None means the engine keeps its own default.
        """
        if self.auto_detect_language is not None:
            return self.auto_detect_language
        return True if not self.languages else None

    @property
    def effective_language_correction(self) -> bool:
        if self.use_language_correction is None:
            return True
        return self.use_language_correction


class RecognizeOptions(BaseModel):
    """A single recognition request as sent by a host application.

    Host key names (``language``, ``automaticallyDetectsLanguage``,
    ``usesLanguageCorrection``) are accepted as aliases of the field names.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra='ignore')

    uri: Optional[str] = None
    type: str = "auto"
    languages: Tuple[str, ...] = Field(default=(), alias="language")
    mode: RecognitionMode = RecognitionMode.ACCURATE
    auto_detect_language: Optional[bool] = Field(default=None, alias="automaticallyDetectsLanguage")
    use_language_correction: Optional[bool] = Field(default=None, alias="usesLanguageCorrection")

    @field_validator('languages', mode='before')
    @classmethod
    def _single_language(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, str):
            return (value,)
        return value

    @field_validator('type', mode='before')
    @classmethod
    def _normalize_type(cls, value: Any) -> Any:
        if value is None:
            return "auto"
        if isinstance(value, str):
            return value.strip().lower()
        return value

    def to_recognition_options(self) -> RecognitionOptions:
        return RecognitionOptions(
            languages=self.languages,
            mode=self.mode,
            auto_detect_language=self.auto_detect_language,
            use_language_correction=self.use_language_correction,
        )


class ManifestItem(BaseModel):
    """One <item> of an EPUB package manifest."""

    model_config = ConfigDict(frozen=True)

    id: str
    href: str
    media_type: str


class PageText(BaseModel):
    """Text of one page, 1-indexed."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    page_number: int = Field(ge=1, alias="page")
    text: str


class ExtractionResult(BaseModel):
    """Final result of one extraction request."""

    model_config = ConfigDict(frozen=True)

    text: str
    pages: Optional[Tuple[PageText, ...]] = None
    source: ExtractionSource
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @field_validator('pages')
    @classmethod
    def _pages_strictly_increasing(cls, pages):
        if pages is None:
            return pages
        previous = 0
        for page in pages:
            if page.page_number <= previous:
                raise ValueError(
                    f"page numbers must be strictly increasing, got {page.page_number} after {previous}"
                )
            previous = page.page_number
        return pages

    def to_host_dict(self, include_metadata: bool = False) -> Dict[str, Any]:
        """Serialize with the host's key names (``page`` per page)."""
        payload: Dict[str, Any] = {'text': self.text, 'source': self.source.value}
        if self.pages is not None:
            payload['pages'] = [p.model_dump(by_alias=True) for p in self.pages]
        if include_metadata:
            payload['metadata'] = dict(self.metadata)
        return payload


def parse_recognize_options(options: Any) -> RecognizeOptions:
    """Coerce a mapping or RecognizeOptions into RecognizeOptions.

    Raises pydantic.ValidationError or TypeError for unusable input.
    """
    if isinstance(options, RecognizeOptions):
        return options
    if isinstance(options, Mapping):
        return RecognizeOptions.model_validate(dict(options))
    raise TypeError(f"Options must be a mapping, got {type(options).__name__}")


class ExtractionSettings(BaseModel):
    """Process-level settings, usually loaded by ConfigManager."""

    model_config = ConfigDict(frozen=True)

    recognition: RecognitionOptions = Field(default_factory=RecognitionOptions)
    tesseract_cmd: str = DEFAULT_TESSERACT_CMD
    ocr_timeout: float = Field(default=DEFAULT_OCR_TIMEOUT, gt=0)
    pdf_min_text_length: int = Field(default=PDF_MIN_TEXT_LENGTH, ge=0)
    pdf_render_scale: float = Field(default=PDF_RENDER_SCALE, gt=0)
    concurrency: int = Field(default=DEFAULT_CONCURRENCY, ge=1)
