"""Progress bar utilities for docvision."""

from typing import Any, Dict, Optional

from tqdm import tqdm

from ..constants import PROGRESS_BAR_FORMAT


def create_progress_bar(total: int, desc: str, disable: bool = False,
                        leave: bool = True) -> tqdm:
    """Create a standardized progress bar for batch extraction.

    Args:
        total: Total number of files to process
        desc: Description for the progress bar
        disable: Hide the bar (e.g. when stderr is not a terminal)
        leave: Whether to leave the progress bar on screen after completion

    Returns:
        Configured tqdm progress bar instance
    """
    return tqdm(
        total=total,
        desc=desc,
        unit='file',
        leave=leave,
        disable=disable,
        bar_format=PROGRESS_BAR_FORMAT,
    )


def update_progress(pbar: tqdm, increment: int = 1,
                    postfix: Optional[Dict[str, Any]] = None) -> None:
    """Update progress bar with optional postfix information."""
    if postfix:
        pbar.set_postfix(postfix)
    pbar.update(increment)
