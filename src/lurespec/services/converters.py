"""
Unit and format converters.

Each converter takes one raw (normalized) text fragment and returns a typed
value in a fixed target unit, or None when nothing usable is found:

- weights in grams (g, oz)
- lengths in millimeters (mm, cm, inch)
- prices in yen, tax included
- color names cleaned for display

Converters never raise and never return a partially parsed value.
"""
from __future__ import annotations

import re
from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP, InvalidOperation
from typing import List, Optional

from ..config import Config
from ..models import TaxConvention
from ..utils.text_cleaning import fold_width, normalize_whitespace

OZ_TO_GRAMS = Decimal("28.3495")
INCH_TO_MM = Decimal("25.4")

_NUM = r'\d+(?:\.\d+)?'
# A number start, not the fractional tail of a decimal; "approx.95g" is fine
_START = r'(?<!\d)(?<!\d\.)'

# "12g", "約7.5g", "12 グラム"; not "12gr" ... "kg" never matches (the "k" breaks the pattern)
GRAM_PATTERN = re.compile(rf'{_START}({_NUM})\s*(?:g|グラム)(?![a-zA-Z])', re.I)

# Ounces: mixed "1-1/2oz", fraction "3/8oz", decimal "2.5oz" / ".5oz"
OUNCE_PATTERN = re.compile(
    r'(?<![A-Za-z\d/])(?<!\d\.)'
    r'(?:(?P<whole>\d+)[\s-]+(?P<mnum>\d+)\s*/\s*(?P<mden>\d+)'
    r'|(?P<num>\d+)\s*/\s*(?P<den>\d+)'
    r'|(?P<dec>\d*\.?\d+))'
    r'\s*oz\b\.?',
    re.I,
)

MM_PATTERN = re.compile(rf'{_START}({_NUM})\s*(?:mm|ミリ)(?![a-zA-Z])', re.I)
CM_PATTERN = re.compile(rf'{_START}({_NUM})\s*(?:cm|センチ)(?![a-zA-Z])', re.I)
INCH_PATTERN = re.compile(rf'{_START}({_NUM})(?:\s*(?:inch(?:es)?|インチ)|in\b|\s*")', re.I)

# Amount candidates: "1,950", "12800"
AMOUNT_PATTERN = re.compile(r'(?<![\d.])\d{1,3}(?:,\d{3})+(?![\d])|(?<![\d.,])\d+(?![\d,])')
# Currency-anchored amounts: "¥1,950", "1,950円", "\1950", "1950yen"
ANCHORED_AMOUNT_PATTERN = re.compile(
    r'[¥\\]\s*(\d[\d,]*)|(\d[\d,]*)\s*(?:円|yen\b|JPY\b)',
    re.I,
)

TAX_INCLUSIVE_MARKER = re.compile(r'税込み?|tax[\s-]*inc(?:l(?:uded|usive|\.)?|\.)?', re.I)
TAX_EXCLUSIVE_MARKER = re.compile(
    r'税別|税抜き?|本体価格|\+\s*税|tax[\s-]*exc(?:l(?:uded|usive|\.)?|\.)?|excl\.?\s*tax',
    re.I,
)

# Leading ordinal / code prefixes: "#01 ", "No.3 ", "C12:", "01.", "SP-05 "
COLOR_PREFIX_PATTERN = re.compile(
    r'^\s*(?:#\s*|No\.?\s*)?[A-Za-z]{0,3}-?\d{1,4}[A-Za-z]{0,2}\s*(?:[.:)_/-]\s*|\s+)',
    re.I,
)
COLOR_PREFIX_HASH_PATTERN = re.compile(r'^\s*#\s*')
# Trailing annotation markers: "NEW", "新色", "(限定)", "★", "※数量限定"
COLOR_ANNOTATION_PATTERN = re.compile(
    r'\s*(?:[(\[【<]\s*(?:new|新色|新カラー|限定|limited|数量限定|web限定)\s*[)\]】>]'
    r'|(?<![A-Za-z])(?:new!?|limited)'
    r'|新色|新カラー|限定(?:カラー)?'
    r'|[★☆◎●◆*]+'
    r'|※.*)\s*$',
    re.I,
)
NATIVE_SCRIPT = re.compile(r'[぀-ヿ㐀-鿿豈-﫿]')
LATIN_SCRIPT = re.compile(r'[A-Za-z]')


def _round(value: Decimal, places: str) -> Decimal:
    return value.quantize(Decimal(places), rounding=ROUND_HALF_UP)


def _ounces(match: re.Match) -> Optional[Decimal]:
    try:
        if match.group('whole') is not None:
            den = Decimal(match.group('mden'))
            if den == 0:
                return None
            return Decimal(match.group('whole')) + Decimal(match.group('mnum')) / den
        if match.group('num') is not None:
            den = Decimal(match.group('den'))
            if den == 0:
                return None
            return Decimal(match.group('num')) / den
        return Decimal(match.group('dec'))
    except InvalidOperation:
        return None


def _ounces_to_grams(ounces: Decimal) -> float:
    return float(_round(ounces * OZ_TO_GRAMS, '0.1'))


def to_grams(text: Optional[str]) -> Optional[float]:
    """
    Convert a weight fragment to grams.

    A stated gram value always wins over an ounce value in the same text.

    Examples:
        >>> to_grams("10g")
        10.0
        >>> to_grams("3/8oz")
        10.6
    """
    if not text:
        return None

    text = fold_width(text)

    match = GRAM_PATTERN.search(text)
    if match:
        grams = float(match.group(1))
        return grams if grams > 0 else None

    for match in OUNCE_PATTERN.finditer(text):
        ounces = _ounces(match)
        if ounces is not None and ounces > 0:
            return _ounces_to_grams(ounces)

    return None


def find_grams(text: Optional[str]) -> List[float]:
    """
    All weights stated in a fragment, in text order.

    Gram values are used when present; ounce values otherwise.

    Examples:
        >>> find_grams("7g / 10g / 14g")
        [7.0, 10.0, 14.0]
    """
    if not text:
        return []

    text = fold_width(text)

    grams = [float(m.group(1)) for m in GRAM_PATTERN.finditer(text)]
    grams = [g for g in grams if g > 0]
    if grams:
        return grams

    weights = []
    for match in OUNCE_PATTERN.finditer(text):
        ounces = _ounces(match)
        if ounces is not None and ounces > 0:
            weights.append(_ounces_to_grams(ounces))
    return weights


def to_millimeters(text: Optional[str]) -> Optional[int]:
    """
    Convert a length fragment to whole millimeters.

    Precedence: mm, then cm (x10), then inch (x25.4).

    Examples:
        >>> to_millimeters("15.0cm")
        150
        >>> to_millimeters("6 inch")
        152
    """
    if not text:
        return None

    text = fold_width(text)

    for pattern, factor in (
        (MM_PATTERN, Decimal(1)),
        (CM_PATTERN, Decimal(10)),
        (INCH_PATTERN, INCH_TO_MM),
    ):
        match = pattern.search(text)
        if match:
            mm = int(_round(Decimal(match.group(1)) * factor, '1'))
            return mm if mm > 0 else None

    return None


def _plausible(amounts: List[int], price_min: int, price_max: int) -> List[int]:
    return [a for a in amounts if price_min <= a <= price_max]


def _amounts(text: str) -> List[int]:
    """Candidate amounts, currency-anchored ones first."""
    anchored = []
    for match in ANCHORED_AMOUNT_PATTERN.finditer(text):
        raw = (match.group(1) or match.group(2) or '').replace(',', '')
        if raw.isdigit():
            anchored.append(int(raw))
    if anchored:
        return anchored

    return [int(m.group(0).replace(',', '')) for m in AMOUNT_PATTERN.finditer(text)]


def to_minor_currency_unit(
    text: Optional[str],
    tax_convention: TaxConvention = TaxConvention.INCLUSIVE,
    tax_rate: Optional[float] = None,
    price_min: Optional[int] = None,
    price_max: Optional[int] = None,
) -> Optional[int]:
    """
    Convert a price fragment to a tax-included integer amount.

    An explicit tax-included marker ("税込") wins: the amount it labels is
    returned as-is. Otherwise a tax-excluded marker ("税別", "税抜") or the
    EXCLUSIVE convention applies the tax multiplier, floored.

    Args:
        text: Price fragment
        tax_convention: Convention for prices without a tax marker
        tax_rate: Multiplier for tax-exclusive prices (Config.TAX_RATE)
        price_min: Smallest plausible amount (Config.PRICE_MIN)
        price_max: Largest plausible amount (Config.PRICE_MAX)

    Returns:
        Amount in yen, or None

    Examples:
        >>> to_minor_currency_unit("850円", TaxConvention.EXCLUSIVE)
        935
        >>> to_minor_currency_unit("税込¥770", TaxConvention.EXCLUSIVE)
        770
    """
    if not text:
        return None

    tax_rate = tax_rate if tax_rate is not None else (Config.TAX_RATE or 1.10)
    price_min = price_min if price_min is not None else (Config.PRICE_MIN or 0)
    price_max = price_max if price_max is not None else (Config.PRICE_MAX or 1_000_000)

    text = fold_width(text)

    inclusive = TAX_INCLUSIVE_MARKER.search(text)
    if inclusive:
        after = _plausible(_amounts(text[inclusive.end():]), price_min, price_max)
        if after:
            return after[0]
        before = _plausible(_amounts(text[:inclusive.start()]), price_min, price_max)
        if before:
            return before[-1]

    candidates = _plausible(_amounts(text), price_min, price_max)
    if not candidates:
        return None
    amount = candidates[0]

    if TAX_EXCLUSIVE_MARKER.search(text) or TaxConvention(tax_convention) is TaxConvention.EXCLUSIVE:
        taxed = (Decimal(amount) * Decimal(str(tax_rate))).to_integral_value(rounding=ROUND_FLOOR)
        return int(taxed)

    return amount


def tax_convention_of(text: Optional[str]) -> Optional[TaxConvention]:
    """
    Tax convention stated by a fragment such as a "価格(税別)" header.

    Returns:
        The stated convention, or None when the fragment has no marker
    """
    if not text:
        return None
    text = fold_width(text)
    if TAX_INCLUSIVE_MARKER.search(text):
        return TaxConvention.INCLUSIVE
    if TAX_EXCLUSIVE_MARKER.search(text):
        return TaxConvention.EXCLUSIVE
    return None


def _prefer_native(name: str) -> str:
    """Pick the native-script rendering out of "Latin / 日本語" style names."""
    parts = [p.strip() for p in re.split(r'\s*[/(){}\[\]]\s*', name) if p.strip()]
    if len(parts) < 2:
        return name

    native = [p for p in parts if NATIVE_SCRIPT.search(p)]
    latin = [p for p in parts if LATIN_SCRIPT.search(p) and not NATIVE_SCRIPT.search(p)]
    if native and latin:
        return native[0]
    # "Gold/Black" is a two-tone name, not two renderings
    return name


def clean_color_name(text: Optional[str]) -> Optional[str]:
    """
    Clean a color name for display.

    Strips ordinal/code prefixes and trailing "new"/"limited" markers, and
    prefers the native-script rendering when both are given.

    Examples:
        >>> clean_color_name("#01 Pearl Ayu / パールアユ NEW")
        'パールアユ'
        >>> clean_color_name("No.3 チャート")
        'チャート'
    """
    if not text:
        return None

    # Multi-line cells carry one rendering per line
    name = normalize_whitespace(fold_width(text).replace('\n', ' / '))

    # Annotations may stack: "パールアユ 新色 ★"
    previous = None
    while previous != name:
        previous = name
        name = COLOR_ANNOTATION_PATTERN.sub('', name).strip()

    stripped = COLOR_PREFIX_PATTERN.sub('', name, count=1).strip()
    if stripped and not stripped.isdigit():
        name = stripped

    name = _prefer_native(name)
    name = COLOR_PREFIX_HASH_PATTERN.sub('', name)
    name = name.strip(' .:-_/')

    return name or None
