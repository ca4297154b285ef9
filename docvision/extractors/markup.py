"""
Markup (XHTML/HTML/XML) to plain text conversion.

The transform is a fixed sequence of regex passes. Entities are decoded only
after tags are stripped, so an escaped ``&lt;`` in text is never mistaken for
a tag, and whitespace is collapsed only after entities are decoded, so decoded
no-break spaces collapse too.
"""

import re
from typing import Dict

_SCRIPT_STYLE_RE = re.compile(r'<(script|style)\b[^>]*>.*?</\1\s*>', re.IGNORECASE | re.DOTALL)
_BR_RE = re.compile(r'<br\s*/?>', re.IGNORECASE)
_BLOCK_CLOSE_RE = re.compile(r'</(?:p|div|h[1-6]|li|section|article|header|footer)\s*>', re.IGNORECASE)
_TABLE_CLOSE_RE = re.compile(r'</(?:tr|table)\s*>', re.IGNORECASE)
_CELL_CLOSE_RE = re.compile(r'</(?:td|th)\s*>', re.IGNORECASE)
_TAG_RE = re.compile(r'<[^>]+>')
_NUMERIC_ENTITY_RE = re.compile(r'&#([xX][0-9A-Fa-f]+|[0-9]+);')
_HORIZONTAL_SPACE_RE = re.compile(r'[ \t\u00a0]+')
_EXCESS_NEWLINES_RE = re.compile(r'\n{3,}')

# Applied in order; &amp; is decoded first
NAMED_ENTITIES: Dict[str, str] = {
    '&amp;': '&',
    '&lt;': '<',
    '&gt;': '>',
    '&apos;': "'",
    '&quot;': '"',
    '&nbsp;': '\u00a0',
    '&ldquo;': '\u201c',
    '&rdquo;': '\u201d',
    '&lsquo;': '\u2018',
    '&rsquo;': '\u2019',
    '&mdash;': '\u2014',
    '&ndash;': '\u2013',
    '&hellip;': '\u2026',
    '&copy;': '\u00a9',
    '&reg;': '\u00ae',
    '&trade;': '\u2122',
    '&bull;': '\u2022',
    '&middot;': '\u00b7',
}


def _numeric_entity(match: re.Match) -> str:
    value = match.group(1)
    if value[0] in 'xX':
        code_point = int(value[1:], 16)
    else:
        code_point = int(value)
    # Out of range and surrogate code points are dropped, not substituted
    if code_point > 0x10FFFF or 0xD800 <= code_point <= 0xDFFF:
        return ''
    return chr(code_point)


def decode_entities(text: str) -> str:
    """Decode the supported named entities and all numeric entities."""
    for entity, replacement in NAMED_ENTITIES.items():
        text = text.replace(entity, replacement)
    return _NUMERIC_ENTITY_RE.sub(_numeric_entity, text)


def html_to_text(markup: str) -> str:
    """
    Convert an XML/HTML fragment into normalized plain text.

    Block-level closing tags become paragraph breaks, table cells become tabs,
    every other tag is dropped.

    Args:
        markup: XHTML/HTML source

    Returns:
        Plain text, stripped, with at most one blank line between paragraphs
    """
    text = _SCRIPT_STYLE_RE.sub('', markup)
    text = _BR_RE.sub('\n', text)
    text = _BLOCK_CLOSE_RE.sub('\n\n', text)
    text = _TABLE_CLOSE_RE.sub('\n\n', text)
    text = _CELL_CLOSE_RE.sub('\t', text)
    text = _TAG_RE.sub('', text)
    text = decode_entities(text)
    text = text.replace('\r\n', '\n')
    text = _HORIZONTAL_SPACE_RE.sub(' ', text)
    text = _EXCESS_NEWLINES_RE.sub('\n\n', text)
    return text.strip()
