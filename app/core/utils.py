from datetime import datetime, timezone
from typing import List, Optional, Union


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def split_csv(value: Union[str, List[str], None]) -> Optional[List[str]]:
    """Normalize a comma-separated form value (or a list) into trimmed items; None when empty."""
    if value is None:
        return None
    items = value.split(",") if isinstance(value, str) else value
    cleaned = [str(item).strip() for item in items if str(item).strip()]
    return cleaned or None


def sanitize_filter_term(term: str) -> str:
    """Drop characters that carry meaning inside a PostgREST or=(...) expression."""
    return "".join(ch for ch in term if ch not in ",()*%\\").strip()
