"""Escaping for user-supplied text that ends up inside email HTML"""

import html
from typing import Any, Optional


def sanitize_string(value: Optional[str]) -> Optional[str]:
    """HTML-escape a string; None and non-strings pass through untouched"""
    if not isinstance(value, str):
        return value
    return html.escape(value, quote=True)


def sanitize_dict(data: Optional[dict[str, Any]]) -> dict[str, Any]:
    """Escape every top-level string value of a form section (owner, pet, preferences)"""
    return {key: sanitize_string(value) for key, value in (data or {}).items()}
