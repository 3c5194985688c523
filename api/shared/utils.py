"""Common utility functions."""
from typing import Optional, Tuple


def truncate_text(text: str, max_length: int, suffix: str = "...") -> str:
    """Truncate text to specified length."""
    if len(text) <= max_length:
        return text
    return text[: max_length - len(suffix)] + suffix


def ordered_pair(first_id: str, second_id: str) -> Tuple[str, str]:
    """Return two identifiers in canonical (sorted) order."""
    return (first_id, second_id) if first_id <= second_id else (second_id, first_id)


def clean_str(value: Optional[str]) -> Optional[str]:
    """Strip a string, turning blank input into ``None``."""
    if value is None:
        return None
    value = value.strip()
    return value or None
