"""
Input sanitisation for user-supplied text.

Free-text fields are HTML-escaped on the way in so stored values can be
rendered by any client without script injection.
"""

import html


def clean_text(value: str, field: str, max_length: int, min_length: int = 1) -> str:
    """
    Strip and HTML-escape a text field.

    Length limits apply to the escaped value, since that is what gets stored.

    Raises:
        ValueError: If the cleaned value is too short or too long
    """
    value = html.escape(value.strip(), quote=True)
    if len(value) < min_length:
        raise ValueError(f"{field} must be at least {min_length} characters long")
    if len(value) > max_length:
        raise ValueError(f"{field} cannot exceed {max_length} characters")
    return value
