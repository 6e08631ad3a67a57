from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_datetime


def optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def optional_timestamp(value: Any, field_name: str) -> Optional[datetime]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, datetime):
        return parse_iso_datetime(value.isoformat())
    if not isinstance(value, str):
        raise ValidationError(f"invalid timestamp: {field_name}")
    try:
        return parse_iso_datetime(value)
    except ValueError:
        raise ValidationError(f"invalid timestamp: {field_name}")
