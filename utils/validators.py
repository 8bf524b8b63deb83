"""
Input validation helper functions.
Provides validation for common input types.
"""

import re
from datetime import datetime


def validate_phone(phone: str) -> bool:
    """
    Validate Korean phone number format.
    Accepts: 010-1234-5678, 01012345678, +82 10 1234 5678, 02-123-4567

    Args:
        phone: Phone number to validate

    Returns:
        True if valid phone format
    """
    if not phone:
        return False

    # Remove spaces and common separators
    cleaned = re.sub(r'[\s\-\(\)]', '', phone)

    patterns = [
        r'^01[016789][0-9]{7,8}$',     # Mobile
        r'^\+8210[0-9]{8}$',          # Mobile, international
        r'^0[2-6][0-9]{7,9}$'         # Landline
    ]

    return any(bool(re.match(pattern, cleaned)) for pattern in patterns)


def validate_date_format(date_str: str) -> bool:
    """
    Validate date is in YYYY-MM-DD format.

    Args:
        date_str: Date string to validate

    Returns:
        True if valid format
    """
    try:
        datetime.strptime(date_str, '%Y-%m-%d')
        return True
    except (ValueError, TypeError):
        return False


def validate_non_negative_int(value, minimum: int = 0) -> bool:
    """
    Validate value is an int (not bool) at or above minimum.

    Args:
        value: Value to check
        minimum: Lowest accepted value

    Returns:
        True if valid
    """
    return isinstance(value, int) and not isinstance(value, bool) and value >= minimum


def sanitize_input(text: str, max_length: int = None) -> str:
    """
    Sanitize text input by trimming and limiting length.

    Args:
        text: Text to sanitize
        max_length: Maximum length (optional)

    Returns:
        Sanitized text
    """
    if not text:
        return ''

    # Strip whitespace
    sanitized = str(text).strip()

    # Limit length if specified
    if max_length and len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized
