"""
Document kind resolution.

The kind is computed once per request from the lowercase file extension and is
never inferred from file content.
"""

from pathlib import Path
from typing import Dict

from ..constants import EXTENSION_KINDS, EXTRACTION_METHODS
from ..models import DocumentKind
from ..types import PathLike

_OVERRIDE_KINDS = {
    'pdf': DocumentKind.PDF,
    'image': DocumentKind.IMAGE,
}


def resolve_document_kind(extension: str) -> DocumentKind:
    """Map a file extension (with or without the leading dot) to a DocumentKind."""
    ext = extension.lower().lstrip('.')
    return DocumentKind(EXTENSION_KINDS.get(ext, DocumentKind.UNKNOWN.value))


def resolve_document_kind_for(path: PathLike, type_override: str = 'auto') -> DocumentKind:
    """
    Resolve the kind of a file, honoring an explicit type override.

    Only the "pdf" and "image" overrides short-circuit the extension lookup;
    "auto" and any other value fall through to it.
    """
    override = _OVERRIDE_KINDS.get((type_override or 'auto').lower())
    if override is not None:
        return override
    return resolve_document_kind(Path(path).suffix)


def get_supported_file_types() -> Dict[str, str]:
    """Return supported extensions and how each one is extracted."""
    return {
        f'.{ext}': EXTRACTION_METHODS[ext]
        for ext, kind in EXTENSION_KINDS.items()
        if kind != DocumentKind.LEGACY_DOC.value
    }


def is_file_type_supported(path: PathLike) -> bool:
    kind = resolve_document_kind(Path(path).suffix)
    return kind not in (DocumentKind.UNKNOWN, DocumentKind.LEGACY_DOC)
