"""
Variant extraction strategies.

Each strategy reads one parsed product page and returns the variants it can
find in one document shape:

- spec tables with a header row (``extract_from_tables``)
- label/value pairs in <dl>, two-column tables or "重量：10g" lines
  (``extract_from_label_values``)
- inline bullet prose such as "● 150g / 170mm ¥2,100(税抜)"
  (``extract_from_prose``)
- bare weight lists as a last resort (``extract_from_numbered_lines``)

Strategies are not merged: the extractor runs them in order and keeps the
first one that yields.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup

from ..extractors.table_grid import iter_tables, resolve_grid, transpose
from ..logger import get_logger
from ..models import ColumnRole, ExtractionConfig, Grid, TaxConvention, Variant
from ..utils.text_cleaning import normalize, normalize_whitespace, split_lines
from .column_roles import classify, classify_label, columns_for, roles_of
from .converters import (
    ANCHORED_AMOUNT_PATTERN,
    clean_color_name,
    find_grams,
    tax_convention_of,
    to_grams,
    to_millimeters,
    to_minor_currency_unit,
)

logger = get_logger(__name__)


@dataclass
class Document:
    """Read-only view of one product page shared by all strategies."""

    raw: str
    soup: BeautifulSoup
    text: str
    lines: List[str] = field(default_factory=list)

    @classmethod
    def parse(cls, raw: str) -> Document:
        text = normalize(raw)
        return cls(
            raw=raw,
            soup=BeautifulSoup(raw, "html.parser"),
            text=text,
            lines=split_lines(text, keep_blank=True),
        )


Strategy = Callable[[Document, ExtractionConfig], List[Variant]]


def _price(text: str, config: ExtractionConfig, convention: Optional[TaxConvention] = None) -> Optional[int]:
    return to_minor_currency_unit(
        text,
        convention or config.tax_convention,
        tax_rate=config.tax_rate,
        price_min=config.price_min,
        price_max=config.price_max,
    )


# =============================================================================
# Structured tables
# =============================================================================

HEADER_SCAN_ROWS = 3
# A header must name at least this many known roles
MIN_HEADER_ROLES = 2


def _looks_like_value(text: str) -> bool:
    """Data cells carry measurements or amounts; header labels do not."""
    return to_grams(text) is not None or bool(ANCHORED_AMOUNT_PATTERN.search(text))


def find_header(grid: Grid, max_rows: int = HEADER_SCAN_ROWS) -> Tuple[Optional[int], Dict[int, ColumnRole]]:
    """
    Locate the header row of a resolved grid.

    Returns:
        (row index, role mapping), or (None, {}) when no row qualifies
    """
    for r in range(min(max_rows, len(grid))):
        roles = classify(grid[r])
        found = roles_of(roles)
        if ColumnRole.WEIGHT not in found and ColumnRole.PRICE not in found:
            continue
        if len(found) < MIN_HEADER_ROLES:
            continue
        keyed = columns_for(roles, ColumnRole.WEIGHT) + columns_for(roles, ColumnRole.PRICE)
        if any(_looks_like_value(grid[r][c]) for c in keyed):
            continue
        return r, roles

    return None, {}


def _first(row: Sequence[str], roles: Dict[int, ColumnRole], role: ColumnRole) -> str:
    columns = columns_for(roles, role)
    return row[columns[0]] if columns else ""


def _color(row: Sequence[str], roles: Dict[int, ColumnRole]) -> Optional[str]:
    parts: List[str] = []
    for c in columns_for(roles, ColumnRole.COLOR):
        text = row[c].strip()
        # A colspan over number + name columns replicates the same text
        if text and (not parts or parts[-1] != text):
            parts.append(text)
    return clean_color_name(" ".join(parts)) if parts else None


def variant_from_row(
    row: Sequence[str],
    header: Sequence[str],
    roles: Dict[int, ColumnRole],
    config: ExtractionConfig,
) -> Variant:
    """Build one variant from a data row using the classified columns."""
    weight_text = _first(row, roles, ColumnRole.WEIGHT)
    length_text = _first(row, roles, ColumnRole.LENGTH)
    model_text = _first(row, roles, ColumnRole.MODEL)
    price_text = _first(row, roles, ColumnRole.PRICE)

    weight = to_grams(weight_text)
    if weight is None and length_text:
        # "サイズ" columns of jigs hold the weight ("40g")
        weight = to_grams(length_text)
    if weight is None and model_text:
        # Product labels such as "オーシャンフラッシュ30g"
        weight = to_grams(model_text)

    length = to_millimeters(length_text)
    if length is None and weight_text:
        length = to_millimeters(weight_text)

    price = None
    if price_text:
        price_header = _first(header, roles, ColumnRole.PRICE)
        price = _price(price_text, config, tax_convention_of(price_header))

    return Variant(
        weight=weight,
        length=length,
        price=price,
        color_name=_color(row, roles),
        model_label=normalize_whitespace(model_text) or None,
    )


def _is_banner_row(row: Sequence[str]) -> bool:
    """Section titles spanning the whole table repeat one text in every column."""
    filled = {cell for cell in row if cell.strip()}
    return len(row) > 1 and len(filled) <= 1


def variants_from_grid(
    grid: Grid,
    config: ExtractionConfig,
    header_rows: int = HEADER_SCAN_ROWS,
) -> List[Variant]:
    """
    Variants from a resolved grid with a header row.

    Args:
        grid: Rectangular grid from resolve_grid
        config: Extraction configuration
        header_rows: How many leading rows may hold the header

    Returns:
        Meaningful variants, one per data row
    """
    header_idx, roles = find_header(grid, max_rows=header_rows)
    if header_idx is None:
        return []

    header = grid[header_idx]
    logger.debug("TABLE Header row %d: %s", header_idx, {c: r.value for c, r in roles.items()})

    variants = []
    for row in grid[header_idx + 1:]:
        if list(row) == list(header) or _is_banner_row(row):
            continue
        variant = variant_from_row(row, header, roles, config)
        if variant.is_meaningful():
            variants.append(variant)

    return variants


def extract_from_tables(document: Document, config: ExtractionConfig) -> List[Variant]:
    """
    Extract variants from spec tables.

    Each table is resolved into a grid. Tables without a horizontal header
    are retried transposed, for vertical specs where the first column holds
    the labels and each further column is one variant.
    """
    variants: List[Variant] = []

    for table in iter_tables(document.soup):
        grid = resolve_grid(table, max_columns=config.max_columns)
        if not grid:
            continue

        found = variants_from_grid(grid, config)
        if not found and len(grid[0]) >= 3:
            found = variants_from_grid(transpose(grid), config, header_rows=1)

        variants.extend(found)

    return variants


# =============================================================================
# Label / value pairs
# =============================================================================

MAX_LABEL_LENGTH = 20

LABEL_VOCABULARY = (
    r'自重|重量|重さ|ウ[エェ]イト|weight'
    r'|全長|長さ|length|サイズ|size'
    r'|希望小売価格|小売価格|販売価格|本体価格|税込価格|価格|定価|price'
    r'|カラー|colou?r'
    r'|品番|品名|モデル|model'
)

# A label at a line or segment start; colon optional before a number
LINE_LABEL_PATTERN = re.compile(
    rf'(?<![^\s/|,、])(?P<label>{LABEL_VOCABULARY})\s*(?:(?P<colon>[:：=])\s*|(?=約|approx|\d|¥))',
    re.I,
)
BULLET_PATTERN = re.compile(r'^[■□●○◆◇・•*\-]+\s*')

# Roles that need an explicit colon in free text
COLON_ONLY_ROLES = {ColumnRole.COLOR, ColumnRole.MODEL}


@dataclass
class _Group:
    """Facts accumulated since the last flush."""

    weights: List[float] = field(default_factory=list)
    length: Optional[int] = None
    price: Optional[int] = None
    color_name: Optional[str] = None
    model_label: Optional[str] = None

    def is_empty(self) -> bool:
        return not self.weights and self.length is None and self.price is None \
            and self.color_name is None and self.model_label is None

    def variants(self) -> List[Variant]:
        weights = self.weights or [None]
        return [
            Variant(
                weight=w,
                length=self.length,
                price=self.price,
                color_name=self.color_name,
                model_label=self.model_label,
            )
            for w in weights
        ]


class _LabelValueAccumulator:
    """Groups label/value pairs into variants."""

    def __init__(self, config: ExtractionConfig):
        self.config = config
        self.group = _Group()
        self.variants: List[Variant] = []

    def flush(self) -> None:
        if not self.group.is_empty():
            self.variants.extend(v for v in self.group.variants() if v.is_meaningful())
        self.group = _Group()

    def add(self, role: ColumnRole, value: str, convention: Optional[TaxConvention] = None) -> None:
        value = value.strip()
        if not value:
            return

        if role is ColumnRole.COLOR:
            color = clean_color_name(value)
            if color is None:
                return
            if not self.group.is_empty():
                self.flush()
            self.group.color_name = color

        elif role is ColumnRole.MODEL:
            if self.group.model_label is not None:
                self.flush()
            self.group.model_label = normalize_whitespace(value)

        elif role is ColumnRole.WEIGHT:
            weights = find_grams(value)
            if not weights:
                return
            if self.group.weights:
                self.flush()
            self.group.weights = weights
            if self.group.length is None:
                self.group.length = to_millimeters(value)

        elif role is ColumnRole.LENGTH:
            length = to_millimeters(value)
            weights = [] if self.group.weights else find_grams(value)
            if length is None and not weights:
                return
            if length is not None and self.group.length is not None:
                self.flush()
            if length is not None:
                self.group.length = length
            if weights:
                self.group.weights = weights

        elif role is ColumnRole.PRICE:
            price = _price(value, self.config, convention)
            if price is None:
                return
            if self.group.price is not None:
                self.flush()
            self.group.price = price

        else:
            return

        if self.group.weights and self.group.price is not None:
            self.flush()


def _element_pairs(document: Document, config: ExtractionConfig) -> List[Tuple[str, str]]:
    """Label/value pairs from <dl> lists and two- or four-column tables."""
    pairs: List[Tuple[str, str]] = []

    for dt in document.soup.find_all('dt'):
        dd = dt.find_next_sibling('dd')
        if dd is not None:
            pairs.append((normalize(dt.decode_contents()), normalize(dd.decode_contents())))

    for table in iter_tables(document.soup):
        grid = resolve_grid(table, max_columns=config.max_columns)
        if not grid or len(grid[0]) not in (2, 4):
            continue
        for row in grid:
            for c in range(0, len(row) - 1, 2):
                pairs.append((row[c], row[c + 1]))

    return pairs


def _line_pairs(lines: Sequence[str]) -> List[Tuple[str, str]]:
    """Label/value pairs from lines such as "■Weight:12g / Price:¥1,800"."""
    pairs: List[Tuple[str, str]] = []

    for line in lines:
        line = BULLET_PATTERN.sub('', line)
        matches = list(LINE_LABEL_PATTERN.finditer(line))
        for i, match in enumerate(matches):
            role = classify_label(match.group('label'))
            if role in COLON_ONLY_ROLES and not match.group('colon'):
                continue
            end = matches[i + 1].start() if i + 1 < len(matches) else len(line)
            value = line[match.end():end].strip(' /|,、')
            pairs.append((match.group('label'), value))

    return pairs


def _variants_from_pairs(pairs: Sequence[Tuple[str, str]], config: ExtractionConfig) -> List[Variant]:
    accumulator = _LabelValueAccumulator(config)

    for label, value in pairs:
        if len(label) > MAX_LABEL_LENGTH:
            continue
        role = classify_label(label)
        if role in (ColumnRole.CODE, ColumnRole.UNKNOWN):
            continue
        accumulator.add(role, value, tax_convention_of(label))

    accumulator.flush()
    return accumulator.variants


def extract_from_label_values(document: Document, config: ExtractionConfig) -> List[Variant]:
    """
    Extract variants from label/value pairs.

    Markup pairs (<dt>/<dd>, two-column table rows) are used first; text
    lines of the form "label：value" only when the markup yields nothing.
    """
    variants = _variants_from_pairs(_element_pairs(document, config), config)
    if variants:
        return variants

    return _variants_from_pairs(_line_pairs(document.lines), config)


# =============================================================================
# Inline prose
# =============================================================================

APPROX = r'(?:約|approx\.?\s*|ca\.?\s*)?'
WEIGHT_TOKEN = r'(?<![\dA-Za-z])(?<!\d\.)(?P<weight>(?:\d+-\d+\s*/\s*\d+|\d+\s*/\s*\d+|\d+(?:\.\d+)?)\s*(?:g|oz)(?![a-zA-Z]))'
LENGTH_TOKEN = r'(?<![\dA-Za-z])(?<!\d\.)(?P<length>\d+(?:\.\d+)?\s*(?:mm|cm|inch|インチ)(?![a-zA-Z]))'
SEPARATOR = r'\s*(?:[/・·|,、]\s*)?'

# Token orderings, most specific first
PROSE_PATTERNS: List[Tuple[str, re.Pattern]] = [
    ("length_weight", re.compile(rf'{LENGTH_TOKEN}{SEPARATOR}{APPROX}{WEIGHT_TOKEN}', re.I)),
    ("weight_length", re.compile(rf'{APPROX}{WEIGHT_TOKEN}{SEPARATOR}{APPROX}{LENGTH_TOKEN}', re.I)),
    ("weight", re.compile(rf'{APPROX}{WEIGHT_TOKEN}', re.I)),
]

PRICE_FRAGMENT_PATTERN = re.compile(
    r'(?:(?:税込み?|税抜き?|税別|本体価格|価格)\s*[:：]?\s*)?'
    r'(?:¥\s*\d[\d,]*|\d[\d,]*\s*円)'
    # Trailing tax note: "(税別)", "+税", "tax excl."
    r'(?:\s*(?:\([^)]*\)|\+\s*税|tax[\s-]*(?:incl?|excl?)(?:uded|usive)?\.?))?',
    re.I,
)
MODEL_PREFIX_PATTERN = re.compile(r'^[●•◆■□◇・○]?\s*(?P<model>[^/・|\s][^/・|]*?)\s*[/・|]')
HEADING_PATTERN = re.compile(r'^(?P<bullet>[■□●◆◇])\s*(?P<label>[^/]{1,30}?)(?:\s*(?:仕様|spec))?\s*$', re.I)
HEADING_STOPWORDS = re.compile(r'colou?r|カラー|spec|スペック|仕様|価格|price|size|サイズ', re.I)
SEGMENT_SPLIT = re.compile(r'(?=[●•◆■])')

# Lines a weight may travel forward looking for its price
PROSE_CARRY_LINES = 2


@dataclass
class _ProseSpec:
    weight: float
    length: Optional[int]
    model_label: Optional[str]

    def variant(self, price: Optional[int] = None) -> Variant:
        return Variant(weight=self.weight, length=self.length, price=price, model_label=self.model_label)


def _match_spec(segment: str) -> Optional[Tuple[List[float], Optional[int], int]]:
    """(weights, length, match start) for the first prose pattern that fits."""
    for name, pattern in PROSE_PATTERNS:
        match = pattern.search(segment)
        if not match:
            continue
        weight = to_grams(match.group('weight'))
        if weight is None:
            continue
        if name == "weight":
            # "7g / 10g / 14g" lists one variant per weight
            return find_grams(segment[match.start():]) or [weight], None, match.start()
        length = to_millimeters(match.group('length'))
        return [weight], length, match.start()
    return None


def _inline_model(segment: str, spec_start: int) -> Optional[str]:
    match = MODEL_PREFIX_PATTERN.match(segment)
    if not match or match.end() > spec_start + 1:
        return None
    model = match.group('model').strip()
    if not model or len(model) > 40:
        return None
    if to_grams(model) is not None or to_millimeters(model) is not None:
        return None
    if PRICE_FRAGMENT_PATTERN.search(model):
        return None
    return model


class _ProseScanner:
    """Line scanner carrying pending weights forward until their price shows up."""

    def __init__(self, config: ExtractionConfig):
        self.config = config
        self.pending: List[_ProseSpec] = []
        self.pending_age = 0
        self.base_model: Optional[str] = None
        self.sub_model: Optional[str] = None
        self.variants: List[Variant] = []

    @property
    def current_model(self) -> Optional[str]:
        parts = [p for p in (self.base_model, self.sub_model) if p]
        return " ".join(parts) or None

    def flush(self, price: Optional[int] = None) -> None:
        self.variants.extend(spec.variant(price) for spec in self.pending)
        self.pending = []
        self.pending_age = 0

    def age(self) -> None:
        if not self.pending:
            return
        self.pending_age += 1
        if self.pending_age > PROSE_CARRY_LINES:
            self.flush()

    def heading(self, segment: str) -> bool:
        match = HEADING_PATTERN.match(segment)
        if not match:
            return False
        label = match.group('label').strip()
        if not label or HEADING_STOPWORDS.search(label) or PRICE_FRAGMENT_PATTERN.search(label):
            return False
        if find_grams(label) or to_millimeters(label) is not None:
            return False

        self.flush()
        if match.group('bullet') in '■□':
            self.base_model = label
            self.sub_model = None
        else:
            self.sub_model = label
        return True

    def segment(self, segment: str) -> None:
        if self.heading(segment):
            return

        price_match = PRICE_FRAGMENT_PATTERN.search(segment)
        price = _price(price_match.group(0), self.config) if price_match else None

        spec = _match_spec(segment)
        if spec is not None:
            weights, length, start = spec
            model = _inline_model(segment, start) or self.current_model
            # A new weight supersedes the pending one
            self.flush()
            found = [_ProseSpec(weight=w, length=length, model_label=model) for w in weights]
            if price is not None:
                self.variants.extend(s.variant(price) for s in found)
            else:
                self.pending = found
        elif price is not None and self.pending:
            self.flush(price)

    def scan(self, lines: Sequence[str]) -> List[Variant]:
        for line in lines:
            if not line:
                # A blank line ends the block
                self.flush()
                continue
            self.age()
            for segment in SEGMENT_SPLIT.split(line):
                segment = segment.strip()
                if segment:
                    self.segment(segment)
        self.flush()
        return self.variants


def extract_from_prose(document: Document, config: ExtractionConfig) -> List[Variant]:
    """
    Extract variants from inline bullet prose.

    Accepts "length / weight", "weight / length" and weight-only orderings
    with slash, middle-dot or whitespace separators, e.g.
    "●SE75/195mm/約75g" or "● 115mm 約38g" followed by "¥1,400(税別)".
    """
    return _ProseScanner(config).scan(document.lines)


# =============================================================================
# Bare weight lists
# =============================================================================

ENUMERATOR_PATTERN = re.compile(r'^(?:[●•◆■□◇・○*\-]|\(?\d{1,2}[.)]\s+)\s*')
WEIGHT_ONLY_PATTERN = re.compile(rf'{APPROX}(?:\d+\s*/\s*\d+|\d+(?:\.\d+)?)\s*(?:g|oz)(?![a-zA-Z])\.?', re.I)
FILLER_PATTERN = re.compile(r'[\s/・·|,、●•◆■□◇○*]+')


def extract_from_numbered_lines(document: Document, config: ExtractionConfig) -> List[Variant]:
    """
    Last resort: lines that hold nothing but weights ("● 30g", "7g / 10g").

    Such lists carry no price or length.
    """
    variants: List[Variant] = []

    for line in document.lines:
        body = ENUMERATOR_PATTERN.sub('', line)
        if not WEIGHT_ONLY_PATTERN.search(body):
            continue
        remainder = FILLER_PATTERN.sub('', WEIGHT_ONLY_PATTERN.sub('', body))
        if remainder:
            continue
        variants.extend(Variant(weight=w) for w in find_grams(body))

    return variants
