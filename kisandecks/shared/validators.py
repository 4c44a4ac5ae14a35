"""Shared validation utilities"""

import re
from datetime import datetime, timezone
from typing import Optional

INDIAN_MOBILE_PATTERN = re.compile(r"^[6-9]\d{9}$")

SUPPORTED_LANGUAGES = ("hindi", "english", "marathi")


def is_indian_mobile(phone: Optional[str]) -> bool:
    """True for a bare 10-digit Indian mobile number starting with 6-9"""
    return bool(phone) and isinstance(phone, str) and INDIAN_MOBILE_PATTERN.fullmatch(phone) is not None


def validate_indian_phone(phone: Optional[str]) -> str:
    """
    Validate a farmer's mobile number.

    The number must be exactly 10 digits starting with 6, 7, 8 or 9; no
    country code, spaces or separators are accepted so the stored value
    doubles as the unique login identifier.

    Raises:
        ValueError: If phone number is invalid
    """
    if not is_indian_mobile(phone):
        raise ValueError("Invalid phone number")
    return phone


def validate_language(language: Optional[str]) -> Optional[str]:
    """Validate preferred language, returning it lowercased"""
    if language is None:
        return None
    normalized = language.strip().lower()
    if normalized not in SUPPORTED_LANGUAGES:
        raise ValueError(f"Language must be one of: {', '.join(SUPPORTED_LANGUAGES)}")
    return normalized


def validate_choice(value: Optional[str], choices: tuple[str, ...], field: str) -> Optional[str]:
    """Validate that value is one of the allowed choices"""
    if value is None:
        return None
    if value not in choices:
        raise ValueError(f"{field} must be one of: {', '.join(choices)}")
    return value


def parse_iso_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO date or datetime string, returning None for empty input"""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise ValueError(f"Invalid date: {value}") from e
    if parsed.tzinfo is not None:
        # Stored timestamps are naive UTC
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed
