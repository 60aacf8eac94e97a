from typing import Iterable, List, Optional

from catalog.models import Book, CopyStatus
from catalog.schemas import BookOption, CopyDraft, CopyFormView, FieldError

CREATE_TITLE = "Create BookInstance"
UPDATE_TITLE = "Update BookInstance"

def build_copy_form(
    title: str,
    books: Iterable[Book],
    draft: Optional[CopyDraft] = None,
    errors: Optional[List[FieldError]] = None,
) -> CopyFormView:
    """Form view-model; on failed validation it echoes the sanitized draft and its errors."""
    return CopyFormView(
        title=title,
        book_list=[BookOption.model_validate(b) for b in books],
        selected_book=(draft.book_id or None) if draft else None,
        bookinstance=draft,
        errors=errors or None,
        status_options=[s.value for s in CopyStatus],
    )
