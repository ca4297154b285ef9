"""EPUB file extraction module."""

import logging
import posixpath
import warnings
from typing import Dict, List, Optional
from urllib.parse import unquote

from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning

from ..constants import (
    EPUB_CONTAINER_PATH, EPUB_HTML_SUFFIXES, EPUB_READABLE_MEDIA_TYPES
)
from ..errors import DocumentLoadError
from ..models import ManifestItem
from .container import ContainerArchive, open_container
from .encoding import decode_bytes
from .markup import html_to_text

logger = logging.getLogger(__name__)

warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)


def _parse(xml: str) -> BeautifulSoup:
    # html.parser keeps prefixed names such as "opf:item" distinct from "item"
    return BeautifulSoup(xml, 'html.parser')


def _attribute(tag, name: str) -> Optional[str]:
    value = tag.get(name)
    if isinstance(value, list):
        value = ' '.join(value)
    return value or None


def _read_xml(archive: ContainerArchive, path: str) -> str:
    return decode_bytes(archive.read(path), validate_initial=False, validate_legacy=False)


def parse_rootfile_path(container_xml: str) -> Optional[str]:
    """Return the full-path of the first <rootfile> that has one."""
    for rootfile in _parse(container_xml).find_all('rootfile'):
        full_path = _attribute(rootfile, 'full-path')
        if full_path:
            return full_path
    return None


def parse_manifest(opf_xml: str) -> Dict[str, ManifestItem]:
    """
    Map manifest item ids to ManifestItem.

    Items lacking an id, href or media-type are ignored. A repeated id keeps
    the last item.
    """
    items: Dict[str, ManifestItem] = {}
    for item in _parse(opf_xml).find_all('item'):
        item_id = _attribute(item, 'id')
        href = _attribute(item, 'href')
        media_type = _attribute(item, 'media-type')
        if not (item_id and href and media_type):
            continue
        items[item_id] = ManifestItem(id=item_id, href=href, media_type=media_type)
    return items


def parse_spine(opf_xml: str) -> List[str]:
    """Return spine idrefs in reading order."""
    spine = []
    for itemref in _parse(opf_xml).find_all('itemref'):
        idref = _attribute(itemref, 'idref')
        if idref:
            spine.append(idref)
    return spine


def is_readable_media_type(media_type: str) -> bool:
    normalized = media_type.lower().split(';', 1)[0].strip()
    return normalized in EPUB_READABLE_MEDIA_TYPES


def resolve_href(href: str, opf_path: str) -> str:
    """
    Resolve a manifest href against the package document's directory.

    The fragment is dropped and percent-escapes decoded; the result is a
    normalized archive-relative path.
    """
    cleaned = unquote(href.split('#', 1)[0])
    opf_dir = posixpath.dirname(opf_path)
    resolved = posixpath.normpath(posixpath.join('/', opf_dir, cleaned))
    return resolved.lstrip('/')


def resolve_spine(spine: List[str], manifest: Dict[str, ManifestItem], opf_path: str) -> List[str]:
    paths = []
    for idref in spine:
        item = manifest.get(idref)
        if item is None:
            logger.debug(f"Spine references unknown manifest id '{idref}'")
            continue
        if is_readable_media_type(item.media_type):
            paths.append(resolve_href(item.href, opf_path))
    return paths


def fallback_content_paths(manifest: Dict[str, ManifestItem], archive: ContainerArchive,
                           opf_path: str) -> List[str]:
    """
    Content paths when the spine yields nothing.

    First every readable manifest item, regardless of spine membership; if
    there are none, every HTML-like archive entry in lexicographic order.
    """
    readable = [
        resolve_href(item.href, opf_path)
        for item in manifest.values()
        if is_readable_media_type(item.media_type)
    ]
    if readable:
        logger.info("EPUB spine is empty, using readable manifest items")
        return readable

    logger.info("EPUB manifest has no readable items, scanning archive for HTML entries")
    return sorted(
        path for path in archive.list_entries()
        if path.lower().endswith(EPUB_HTML_SUFFIXES)
    )


def _locate_package_document(archive: ContainerArchive) -> str:
    if EPUB_CONTAINER_PATH not in archive:
        raise DocumentLoadError(f"EPUB file does not contain {EPUB_CONTAINER_PATH}")

    opf_path = parse_rootfile_path(_read_xml(archive, EPUB_CONTAINER_PATH))
    if not opf_path:
        raise DocumentLoadError("Failed to locate EPUB package document")
    if opf_path not in archive:
        raise DocumentLoadError(f"EPUB package document not found at {opf_path}")
    return opf_path


def extract_epub_text(data: bytes) -> str:
    """
    Extract readable text from EPUB bytes in spine order.

    Raises:
        DocumentLoadError: If the archive, container or package document is
            unusable, or no readable content documents exist
    """
    with open_container(data) as archive:
        opf_path = _locate_package_document(archive)
        opf_xml = _read_xml(archive, opf_path)

        manifest = parse_manifest(opf_xml)
        spine = parse_spine(opf_xml)
        content_paths = resolve_spine(spine, manifest, opf_path)

        if not content_paths:
            content_paths = fallback_content_paths(manifest, archive, opf_path)

        if not content_paths:
            raise DocumentLoadError("No readable content found in EPUB")

        parts = []
        for path in content_paths:
            if path not in archive:
                logger.warning(f"EPUB content document missing from archive: {path}")
                continue
            text = html_to_text(_read_xml(archive, path))
            if text:
                parts.append(text)

    content = '\n\n'.join(parts).strip()
    logger.info(f"Extracted {len(content)} characters from {len(parts)} EPUB content documents")
    return content


def read_epub_title(data: bytes) -> Optional[str]:
    """
    Return the package document's dc:title, if any.

    Best effort: None for archives without a usable package document.
    """
    try:
        with open_container(data) as archive:
            opf_xml = _read_xml(archive, _locate_package_document(archive))
    except DocumentLoadError as e:
        logger.debug(f"No EPUB title available: {e}")
        return None

    title = _parse(opf_xml).find('dc:title')
    if title is None:
        return None
    return title.get_text(strip=True) or None
