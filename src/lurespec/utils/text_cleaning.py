"""
Text cleaning and normalization utilities.

Vendor pages mix full-width and half-width characters, entity-encoded glyphs
and multi-line cells. Everything downstream matches patterns against the
output of ``normalize``.
"""
import re
from html import unescape
from typing import List


# Full-width ASCII block U+FF01..U+FF5E maps onto U+0021..U+007E
_WIDTH_TABLE = {code: code - 0xFEE0 for code in range(0xFF01, 0xFF5F)}
_WIDTH_TABLE.update({
    0x3000: " ",   # ideographic space
    0xFFE5: "¥",   # fullwidth yen
    0xFFE0: "¢",
    0xFFE1: "£",
    0x339C: "mm",  # ㎜
    0x339D: "cm",  # ㎝
    0x338F: "kg",  # ㎏
    0x338E: "mg",  # ㎎
    0x301C: "~",   # wave dash
    0x2215: "/",   # division slash
    0x00A0: " ",   # nbsp left behind by &nbsp;
})
_WIDTH_TRANSLATION = str.maketrans(_WIDTH_TABLE)

# Katakana long-vowel mark used as a dash next to ASCII ("SE75ー2")
_LONG_VOWEL_AS_DASH = re.compile(r"(?<=[A-Za-z0-9])ー|ー(?=[A-Za-z0-9])")

_SCRIPT_STYLE = re.compile(r"<(script|style)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_COMMENT = re.compile(r"<!--.*?-->", re.DOTALL)
_LINE_BREAK_TAG = re.compile(
    r"<br\s*/?>|</(?:p|div|li|tr|dt|dd|h[1-6]|table|ul|ol|dl|section)\s*>",
    re.IGNORECASE,
)
_CELL_END_TAG = re.compile(r"</t[dh]\s*>", re.IGNORECASE)
_TAG = re.compile(r"<[^>]+>")


def normalize_whitespace(text: str) -> str:
    """
    Normalize whitespace in text.

    Args:
        text: Text to normalize

    Returns:
        Text with normalized whitespace

    Examples:
        >>> normalize_whitespace("hello    world\\n\\ntest")
        'hello world test'
    """
    if not text:
        return ""

    text = re.sub(r'\s+', ' ', text)

    return text.strip()


def strip_html_tags(text: str) -> str:
    """
    Remove HTML tags from text, keeping line breaks.

    ``<br>`` and closing block tags become newlines so that multi-line cell
    content survives as separate lines.

    Examples:
        >>> strip_html_tags("<p>Hello <strong>world</strong></p>")
        'Hello world\\n'
    """
    if not text:
        return ""

    text = _COMMENT.sub('', text)
    text = _SCRIPT_STYLE.sub('', text)
    text = _LINE_BREAK_TAG.sub('\n', text)
    text = _CELL_END_TAG.sub(' ', text)

    return _TAG.sub('', text)


def fold_width(text: str) -> str:
    """
    Fold full-width Latin letters, digits and punctuation to half-width.

    Examples:
        >>> fold_width("１２０ｍｍ／１５ｇ")
        '120mm/15g'
    """
    if not text:
        return ""

    text = text.translate(_WIDTH_TRANSLATION)

    return _LONG_VOWEL_AS_DASH.sub('-', text)


def _collapse_lines(text: str) -> str:
    lines = [re.sub(r'[ \t\r\f\v]+', ' ', line).strip() for line in text.split('\n')]

    collapsed: List[str] = []
    for line in lines:
        if not line and (not collapsed or not collapsed[-1]):
            continue
        collapsed.append(line)

    while collapsed and not collapsed[-1]:
        collapsed.pop()

    return '\n'.join(collapsed)


def normalize(raw: str) -> str:
    """
    Canonicalize a markup fragment into plain text for pattern matching.

    Steps, in order: entity decoding, tag stripping (line-break tags become
    newlines), full-width to half-width folding, then per-line whitespace
    cleanup. Never raises.

    Examples:
        >>> normalize("●ＳＥ７５／１９５ｍｍ<br>約７５ｇ")
        '●SE75/195mm\\n約75g'
    """
    if not raw:
        return ""

    text = unescape(raw)
    if _TAG.search(text):
        # In markup, source newlines are formatting; tags decide the lines
        text = re.sub(r'[ \t]*[\r\n]+[ \t]*', ' ', text)
    text = strip_html_tags(text)
    text = fold_width(text)

    return _collapse_lines(text)


def split_lines(text: str, keep_blank: bool = False) -> List[str]:
    """
    Split normalized text into lines.

    Args:
        text: Normalized text
        keep_blank: Keep empty lines (block boundaries)

    Returns:
        List of stripped lines
    """
    if not text:
        return []

    lines = [line.strip() for line in text.split('\n')]
    if keep_blank:
        return lines

    return [line for line in lines if line]
