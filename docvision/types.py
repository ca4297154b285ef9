"""Type definitions and collaborator protocols for docvision."""

from pathlib import Path
from typing import Protocol, Union

from PIL import Image

from .models import RecognitionOptions

# Basic type aliases
PathLike = Union[str, Path]
ImageInput = Union[PathLike, Image.Image]


class OcrEngine(Protocol):
    """Opaque OCR capability.

    Implementations must treat empty ``options.languages`` as "auto-detect all
    supported languages" and may ignore options they cannot honor.
    """

    def recognize_image(self, image: ImageInput, options: RecognitionOptions) -> str:
        """Return recognized text, raising OcrFailedError on engine failure."""
        ...


class PdfHandle(Protocol):
    """An open PDF document."""

    @property
    def page_count(self) -> int:
        ...

    def page_text(self, index: int) -> str:
        """Text layer of the zero-based page ``index`` (may be empty)."""
        ...

    def render_page(self, index: int, scale: float) -> Image.Image:
        """Rasterize the zero-based page ``index`` on a white background."""
        ...

    def close(self) -> None:
        ...


class PdfBackend(Protocol):
    """Opens PDF files for text-layer extraction and rasterization."""

    def open(self, path: Path) -> PdfHandle:
        """Raise DocumentLoadError when the file is not a readable PDF."""
        ...
