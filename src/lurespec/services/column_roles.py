"""
Column role classification for spec tables.

Header labels vary by vendor ("自重", "ウエイト", "WEIGHT", "重さ(g)") but map
onto a handful of roles. Rules are tried in order; the first rule whose
pattern matches a header cell decides that column's role, so more specific
labels sit above generic ones.
"""
from __future__ import annotations

import re
from typing import Dict, List, Pattern, Sequence, Set, Tuple

from ..models import ColumnRole
from ..utils.text_cleaning import normalize


# (role, pattern) in precedence order
ROLE_RULES: List[Tuple[ColumnRole, Pattern]] = [
    # Product identifiers: JAN/UPC barcodes, catalogue codes
    (ColumnRole.CODE, re.compile(r'JAN|UPC|EAN|SKU|製品コード|商品コード|品番コード|\bcode\b', re.I)),
    # Color number columns ("色番", "カラーNo.") share the COLOR role
    (ColumnRole.COLOR, re.compile(r'色番|カラー\s*(?:no\.?|番号|ナンバー)|colou?r\s*(?:no\.?|number|#)', re.I)),
    (ColumnRole.WEIGHT, re.compile(r'自重|重量|重さ|ウ[エェ]イト|weight|\bwt\.?\b', re.I)),
    (ColumnRole.PRICE, re.compile(r'価格|定価|売価|price|円', re.I)),
    (ColumnRole.COLOR, re.compile(r'カラー|色|colou?r', re.I)),
    (ColumnRole.LENGTH, re.compile(r'全長|長さ|ボディ[ー-]?(?:サイズ|長|寸法)?|length|サイズ|size', re.I)),
    (ColumnRole.MODEL, re.compile(r'品名|商品名|製品名|品番|モデル|アイテム|タイプ|model|name|item|type', re.I)),
]

# Roles where only the left-most matching column is used
SINGLE_COLUMN_ROLES = {ColumnRole.MODEL, ColumnRole.WEIGHT, ColumnRole.LENGTH, ColumnRole.PRICE}


def classify_label(label: str) -> ColumnRole:
    """
    Classify a single header label.

    Args:
        label: Header cell text

    Returns:
        Matching ColumnRole, UNKNOWN when nothing matches
    """
    text = normalize(label or "")
    if not text:
        return ColumnRole.UNKNOWN

    for role, pattern in ROLE_RULES:
        if pattern.search(text):
            return role

    return ColumnRole.UNKNOWN


def classify(header_row: Sequence[str]) -> Dict[int, ColumnRole]:
    """
    Assign a role to every column of a header row.

    Several columns may share COLOR (number + name) or CODE. For the other
    roles only the left-most column keeps the role; later duplicates are
    tagged UNKNOWN.

    Args:
        header_row: Header cell texts

    Returns:
        Mapping column index -> ColumnRole
    """
    roles: Dict[int, ColumnRole] = {}
    taken: Set[ColumnRole] = set()

    for idx, label in enumerate(header_row):
        role = classify_label(label)
        if role in SINGLE_COLUMN_ROLES:
            if role in taken:
                role = ColumnRole.UNKNOWN
            else:
                taken.add(role)
        roles[idx] = role

    return roles


def roles_of(mapping: Dict[int, ColumnRole]) -> Set[ColumnRole]:
    """Distinct known roles in a mapping."""
    return {role for role in mapping.values() if role is not ColumnRole.UNKNOWN}


def columns_for(mapping: Dict[int, ColumnRole], role: ColumnRole) -> List[int]:
    """Column indices carrying a role, left to right."""
    return sorted(idx for idx, r in mapping.items() if r is role)


def looks_like_header(mapping: Dict[int, ColumnRole]) -> bool:
    """A usable spec header names at least a weight or a price column."""
    found = roles_of(mapping)
    return ColumnRole.WEIGHT in found or ColumnRole.PRICE in found
