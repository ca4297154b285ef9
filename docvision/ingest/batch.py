"""
Batch extraction over many files.

Each file is an independent request; requests run concurrently on worker
threads, bounded by a semaphore. One failure never aborts the others.
"""

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from loguru import logger
from tqdm import tqdm

from ..constants import SKIP_PATTERNS
from ..errors import DocVisionError
from ..models import ExtractionResult, ExtractionSettings, RecognitionOptions
from ..types import OcrEngine, PathLike, PdfBackend
from ..utils.progress import update_progress
from .document_processor import recognize
from .document_types import is_file_type_supported


@dataclass(frozen=True)
class BatchOutcome:
    """Result or error for one file of a batch."""

    path: Path
    result: Optional[ExtractionResult] = None
    error: Optional[DocVisionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def should_skip_file(path: Path) -> bool:
    """Hidden and operating system files are never extracted."""
    if path.name.startswith('.') or path.name in SKIP_PATTERNS:
        logger.debug(f"Skipping hidden or system file: {path}")
        return True
    return False


def collect_documents(input_dir: PathLike) -> List[Path]:
    """
    List supported files under input_dir, recursively, sorted by path.

    Raises:
        NotADirectoryError: If input_dir is not a directory
    """
    root = Path(input_dir)
    if not root.is_dir():
        raise NotADirectoryError(f"Input directory does not exist: {root}")

    files = [
        path for path in sorted(root.rglob('*'))
        if path.is_file() and not should_skip_file(path) and is_file_type_supported(path)
    ]
    logger.info(f"Found {len(files)} supported files in {root}")
    return files


async def process_batch(paths: List[PathLike], *, recognition: Optional[RecognitionOptions] = None,
                        concurrency: Optional[int] = None,
                        ocr_engine: Optional[OcrEngine] = None,
                        pdf_backend: Optional[PdfBackend] = None,
                        settings: Optional[ExtractionSettings] = None,
                        progress: Optional[tqdm] = None) -> List[BatchOutcome]:
    """
    Extract every path concurrently.

    Args:
        paths: Files to extract
        recognition: Options applied to every request (defaults from settings)
        concurrency: Maximum simultaneous requests (defaults from settings)
        ocr_engine: OCR capability shared by all requests
        pdf_backend: PDF backend shared by all requests
        settings: Process-level settings
        progress: Optional progress bar, advanced once per finished file

    Returns:
        One BatchOutcome per path, in input order
    """
    settings = settings or ExtractionSettings()
    recognition = recognition or settings.recognition
    semaphore = asyncio.Semaphore(concurrency or settings.concurrency)

    async def run_one(path: Path) -> BatchOutcome:
        request = {
            'uri': str(path),
            'languages': recognition.languages,
            'mode': recognition.mode,
            'auto_detect_language': recognition.auto_detect_language,
            'use_language_correction': recognition.use_language_correction,
        }
        async with semaphore:
            try:
                result = await recognize(
                    request, ocr_engine=ocr_engine, pdf_backend=pdf_backend, settings=settings
                )
                outcome = BatchOutcome(path=path, result=result)
            except DocVisionError as e:
                logger.warning(f"Failed to extract {path}: {e}")
                outcome = BatchOutcome(path=path, error=e)
        if progress is not None:
            update_progress(progress, postfix=None if outcome.ok else {"last_error": outcome.error.code.value})
        return outcome

    return list(await asyncio.gather(*(run_one(Path(p)) for p in paths)))


def write_outcomes(outcomes: List[BatchOutcome], output_dir: PathLike, input_dir: Optional[PathLike] = None) -> int:
    """
    Write each successful result to <output_dir>/<relative path>.txt.

    Returns:
        Number of files written
    """
    out_root = Path(output_dir)
    written = 0
    for outcome in outcomes:
        if not outcome.ok:
            continue
        if input_dir is not None:
            relative = outcome.path.relative_to(input_dir)
        else:
            relative = Path(outcome.path.name)
        target = out_root / relative.with_name(relative.name + '.txt')
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(outcome.result.text, encoding='utf-8')
        written += 1
    logger.info(f"Wrote {written} text files to {out_root}")
    return written
