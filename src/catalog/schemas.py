from datetime import date
from typing import Literal
from pydantic import BaseModel, ConfigDict, computed_field
from catalog.models import copy_url, format_due_back

class BookIn(BaseModel):
    title: str
    author: str | None = None

class BookOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    title: str
    author: str | None = None

class BookOption(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    title: str

class FieldError(BaseModel):
    field: str
    code: Literal["RequiredFieldMissing", "InvalidDateFormat"]
    msg: str
    value: str | None = None

class CopyDraft(BaseModel):
    """Copy values echoed back to a form. Never written to storage."""
    id: str | None = None
    book_id: str
    imprint: str
    status: str
    due_back: date | None = None

class CopyOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    book_id: str
    book: BookOut | None = None
    imprint: str
    status: str
    due_back: date | None = None

    @computed_field
    @property
    def url(self) -> str:
        return copy_url(self.id)

    @computed_field
    @property
    def due_back_formatted(self) -> str:
        return format_due_back(self.due_back)

class CopyListView(BaseModel):
    title: str
    bookinstance_list: list[CopyOut]

class CopyDetailView(BaseModel):
    title: str
    bookinstance: CopyOut

class CopyFormView(BaseModel):
    title: str
    book_list: list[BookOption]
    selected_book: str | None = None
    bookinstance: CopyDraft | None = None
    errors: list[FieldError] | None = None
    status_options: list[str]

class CopyDeleteView(BaseModel):
    title: str
    bookinstance: CopyOut
