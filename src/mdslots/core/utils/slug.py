"""Slug generation for document identifiers"""

import re
import unicodedata


def slugify(text: str, default: str = "untitled") -> str:
    """Convert text to a lowercase, hyphen-separated slug; `default` when nothing survives."""
    text = unicodedata.normalize("NFKC", str(text)).lower()
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text).strip('-') or default
