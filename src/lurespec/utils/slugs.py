"""
URL slug helpers.
"""
import re
from urllib.parse import quote

_ASCII_NAME = re.compile(r'^[a-zA-Z0-9\s\-_.]+$')


def slugify(name: str) -> str:
    """
    Build a URL slug from a product name.

    ASCII names are lowercased and hyphenated; anything else is
    percent-encoded as-is.

    Examples:
        >>> slugify("Salt Skimmer 125F")
        'salt-skimmer-125f'
        >>> slugify("ノーマル")
        '%E3%83%8E%E3%83%BC%E3%83%9E%E3%83%AB'
    """
    if not name:
        return ""

    if _ASCII_NAME.match(name):
        slug = re.sub(r'[\s_.]+', '-', name.strip().lower())
        slug = re.sub(r'-+', '-', slug)
        return slug.strip('-')

    return quote(name, safe="!~*'()")
