import re
from typing import Iterable, Optional


def page_offset(page: int, page_size: int) -> int:
    """Number of records to skip for a 1-based page."""
    return (page - 1) * page_size


def text_search_clause(fields: Iterable[str], text: Optional[str], prefix: str = "") -> dict:
    """
    Case-insensitive substring match over `fields`.
    Returns an empty clause when there is nothing to search for.
    """
    text = (text or "").strip()
    if not text:
        return {}

    pattern = re.escape(text)
    return {
        "$or": [
            {f"{prefix}{field}": {"$regex": pattern, "$options": "i"}}
            for field in fields
        ]
    }
