"""Sanitization and validation of submitted book copy fields.

Every field is checked and all errors are collected before returning, so the
form can be re-displayed with one message per bad field. Nothing here touches
the database.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Mapping, Optional, List

from catalog.models import CopyStatus
from catalog.schemas import CopyDraft, FieldError

REQUIRED_FIELD_MISSING = "RequiredFieldMissing"
INVALID_DATE_FORMAT = "InvalidDateFormat"

_ESCAPES = str.maketrans({
    "&": "&amp;",
    '"': "&quot;",
    "'": "&#x27;",
    "<": "&lt;",
    ">": "&gt;",
    "/": "&#x2F;",
    "\\": "&#x5C;",
    "`": "&#96;",
})

def escape(value: str) -> str:
    return value.translate(_ESCAPES)

def parse_iso_date(value: str) -> Optional[date]:
    """Return the calendar date of an ISO-8601 date or date-time string, or None."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        return None

@dataclass
class ValidationResult:
    draft: CopyDraft
    errors: List[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

def _required_text(raw: Mapping[str, Optional[str]], name: str, msg: str, errors: List[FieldError]) -> str:
    value = (raw.get(name) or "").strip()
    if not value:
        errors.append(FieldError(field=name, code=REQUIRED_FIELD_MISSING, msg=msg, value=value))
    return escape(value)

def validate_copy_fields(raw: Mapping[str, Optional[str]], *, copy_id: Optional[str] = None) -> ValidationResult:
    errors: List[FieldError] = []
    book = _required_text(raw, "book", "Book must be specified", errors)
    imprint = _required_text(raw, "imprint", "Imprint must be specified", errors)
    status = escape(raw.get("status") or "")

    due_back = None
    due_raw = raw.get("due_back") or ""
    if due_raw:
        due_back = parse_iso_date(due_raw)
        if due_back is None:
            errors.append(FieldError(field="due_back", code=INVALID_DATE_FORMAT, msg="Invalid date", value=escape(due_raw)))

    draft = CopyDraft(
        id=copy_id,
        book_id=book,
        imprint=imprint,
        status=status or CopyStatus.MAINTENANCE.value,
        due_back=due_back,
    )
    return ValidationResult(draft=draft, errors=errors)
