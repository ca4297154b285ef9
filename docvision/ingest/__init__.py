"""
Docvision Ingestion Module

This module resolves document kinds, dispatches single extraction requests and
runs batches of them concurrently.
"""

from .batch import BatchOutcome, collect_documents, process_batch, write_outcomes
from .document_processor import extract_path, process_document, recognize, resolve_uri
from .document_types import (
    get_supported_file_types, is_file_type_supported, resolve_document_kind,
    resolve_document_kind_for,
)

__all__ = [
    'process_document',
    'recognize',
    'extract_path',
    'resolve_uri',
    'resolve_document_kind',
    'resolve_document_kind_for',
    'get_supported_file_types',
    'is_file_type_supported',
    'BatchOutcome',
    'collect_documents',
    'process_batch',
    'write_outcomes',
]
