"""
Security utilities - never log or return secrets.
"""

import re
import secrets
from typing import Any, Dict, Optional


SENSITIVE_KEYS = (
    'apikey',
    'authorization',
    'supabase_key',
    'admin_api_key',
    'x-admin-key',
    'password',
    'secret',
    'token',
    'api_key',
)


def sanitize_dict_for_logging(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Remove sensitive fields from dict for logging.

    Args:
        data: Dictionary that may contain secrets.

    Returns:
        Sanitized dictionary with secrets replaced.
    """
    result = dict(data)
    for k, v in result.items():
        if str(k).lower() in SENSITIVE_KEYS:
            result[k] = '***REDACTED***'
        elif isinstance(v, dict):
            result[k] = sanitize_dict_for_logging(v)
        elif isinstance(v, list):
            result[k] = [
                sanitize_dict_for_logging(item) if isinstance(item, dict) else item
                for item in v
            ]

    return result


def sanitize_string_for_logging(text: str) -> str:
    """
    Remove bearer tokens and Supabase JWTs from a string.

    Args:
        text: String that may contain secrets.

    Returns:
        Sanitized string.
    """
    if not text:
        return text

    patterns = [
        (r'Bearer\s+[A-Za-z0-9._\-]+', 'Bearer ***'),
        (r'eyJ[A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]+', 'eyJ***'),
    ]

    result = text
    for pattern, replacement in patterns:
        result = re.sub(pattern, replacement, result)

    return result


def verify_admin_key(provided: Optional[str], expected: Optional[str]) -> bool:
    """Constant-time comparison of an admin key; False when either is missing."""
    if not provided or not expected:
        return False
    return secrets.compare_digest(provided, expected)
