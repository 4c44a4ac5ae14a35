import re
from typing import Optional

import bleach

# Characters allowed in generated download/upload file names
_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9]")


def clean_text(value: Optional[str], max_length: int = 2000) -> Optional[str]:
    """
    Strip all HTML from free text entered by farmers and truncate it.
    Returns None if input is None.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    cleaned = bleach.clean(value, tags=[], attributes={}, strip=True).strip()
    return cleaned[:max_length]


def clean_optional(value: Optional[str], max_length: int = 255) -> Optional[str]:
    """clean_text that also maps empty strings to None"""
    cleaned = clean_text(value, max_length)
    return cleaned or None


def safe_filename_stem(title: str) -> str:
    """Replace every non-alphanumeric character with an underscore"""
    return _UNSAFE_FILENAME_CHARS.sub("_", title or "")
