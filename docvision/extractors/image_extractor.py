"""
Image OCR via the tesseract CLI.

The OCR engine is an external capability: the pipeline only depends on the
OcrEngine protocol in docvision.types. TesseractOcrEngine is the default
adapter and shells out to `tesseract <image> stdout`.
"""

import logging
import os
import subprocess
import tempfile
from pathlib import Path
from typing import List, Optional

import pillow_heif
from PIL import Image, UnidentifiedImageError

from ..constants import (
    DEFAULT_OCR_TIMEOUT, DEFAULT_TESSERACT_CMD, OCR_IMAGE_MODES, TESSERACT_LANGUAGES,
)
from ..errors import DocumentLoadError, OcrFailedError
from ..models import RecognitionMode, RecognitionOptions
from ..types import ImageInput, OcrEngine

logger = logging.getLogger(__name__)

# Lets Image.open read .heic/.heif photos
pillow_heif.register_heif_opener()


def load_image(path: Path) -> Image.Image:
    """
    Load the first frame of an image file.

    Raises:
        DocumentLoadError: If the file is not a decodable image
    """
    try:
        with Image.open(path) as img:
            img.load()
            if img.mode not in OCR_IMAGE_MODES:
                return img.convert("RGB")
            return img.copy()
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise DocumentLoadError(f"Failed to load image from {path}: {e}") from e


def tesseract_language(tag: str) -> str:
    """Map a BCP 47 tag (e.g. "en-US", "zh-Hans") to a tesseract language."""
    normalized = tag.strip().replace('_', '-').lower()
    if normalized in TESSERACT_LANGUAGES:
        return TESSERACT_LANGUAGES[normalized]
    primary = normalized.split('-', 1)[0]
    # Unknown tags are passed through; tesseract names like "eng" work as-is
    return TESSERACT_LANGUAGES.get(primary, normalized)


class TesseractOcrEngine:
    """OcrEngine backed by the tesseract command line tool."""

    def __init__(self, tesseract_cmd: str = DEFAULT_TESSERACT_CMD,
                 timeout: float = DEFAULT_OCR_TIMEOUT):
        self.tesseract_cmd = tesseract_cmd
        self.timeout = timeout
        self._installed_languages: Optional[List[str]] = None

    def _run(self, args: List[str]) -> subprocess.CompletedProcess:
        cmd = [self.tesseract_cmd, *args]
        logger.debug(f"Running tesseract command: {' '.join(cmd)}")
        try:
            return subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise OcrFailedError(f"{self.tesseract_cmd} binary not found on PATH") from e
        except subprocess.TimeoutExpired as e:
            raise OcrFailedError(f"OCR timed out after {self.timeout} seconds") from e

    def installed_languages(self) -> List[str]:
        """Languages reported by `tesseract --list-langs`, minus the osd model.

        Queried once per engine and cached.
        """
        if self._installed_languages is not None:
            return list(self._installed_languages)
        result = self._run(['--list-langs'])
        if result.returncode != 0:
            raise OcrFailedError(f"Could not list tesseract languages: {result.stderr.strip()}")
        # First line is a header: List of available languages in "..." (N):
        lines = result.stdout.strip().splitlines()[1:]
        self._installed_languages = [line.strip() for line in lines if line.strip() and line.strip() != 'osd']
        return list(self._installed_languages)

    def build_arguments(self, options: RecognitionOptions) -> List[str]:
        """Translate recognition options into tesseract arguments."""
        if options.languages:
            languages = [tesseract_language(tag) for tag in options.languages]
        elif options.effective_auto_detect:
            languages = self.installed_languages()
        else:
            languages = []

        args: List[str] = []
        if languages:
            # Preserve preference order, drop duplicates
            args.extend(['-l', '+'.join(dict.fromkeys(languages))])
        if options.mode == RecognitionMode.FAST:
            args.extend(['-c', 'tessedit_do_invert=0'])
        if not options.effective_language_correction:
            args.extend(['-c', 'load_system_dawg=0', '-c', 'load_freq_dawg=0'])
        return args

    def recognize_image(self, image: ImageInput, options: RecognitionOptions) -> str:
        """
        Run OCR on an image file or an in-memory Pillow image.

        Returns:
            Recognized text, lines joined with newlines

        Raises:
            OcrFailedError: If tesseract is missing, times out or fails
        """
        temp_path: Optional[str] = None
        try:
            if isinstance(image, Image.Image):
                with tempfile.NamedTemporaryFile(suffix='.png', delete=False) as tmp:
                    temp_path = tmp.name
                if image.mode not in OCR_IMAGE_MODES:
                    image = image.convert("RGB")
                image.save(temp_path, format='PNG')
                image_path = temp_path
            else:
                image_path = str(image)

            result = self._run([image_path, 'stdout', *self.build_arguments(options)])
        finally:
            if temp_path and os.path.exists(temp_path):
                os.unlink(temp_path)

        if result.returncode != 0:
            logger.error(f"tesseract failed with return code {result.returncode}")
            raise OcrFailedError(f"OCR processing failed: {result.stderr.strip()[-500:]}")

        lines = [line.rstrip() for line in result.stdout.splitlines()]
        text = '\n'.join(line for line in lines if line)
        logger.info(f"Recognized {len(text)} characters with tesseract")
        return text


def recognize_image_file(path: Path, options: RecognitionOptions, engine: OcrEngine) -> str:
    """
    Load an image file and run OCR on it.

    Raises:
        DocumentLoadError: If the image cannot be decoded
        OcrFailedError: If the OCR engine fails
    """
    image = load_image(path)
    return engine.recognize_image(image, options)
