import enum, uuid
from datetime import date, datetime
from sqlalchemy import String, Date, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from catalog.db import Base

COPY_URL_PREFIX = "/catalog/bookinstance"
COPY_LIST_URL = "/catalog/bookinstances"

class CopyStatus(str, enum.Enum):
    AVAILABLE   = "Available"
    MAINTENANCE = "Maintenance"
    LOANED      = "Loaned"
    RESERVED    = "Reserved"

def copy_url(copy_id: str) -> str:
    return f"{COPY_URL_PREFIX}/{copy_id}"

def format_due_back(value: date | None) -> str:
    if value is None:
        return ""
    return f"{value:%b} {value.day}, {value.year}"

class Book(Base):
    __tablename__ = "book"
    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    title: Mapped[str] = mapped_column(String, nullable=False, index=True)
    author: Mapped[str | None] = mapped_column(String)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    copies = relationship(
        "BookCopy",
        primaryjoin="Book.id == foreign(BookCopy.book_id)",
        back_populates="book",
        viewonly=True,
    )

class BookCopy(Base):
    __tablename__ = "book_copy"
    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    # no FOREIGN KEY: a copy may point at a catalog entry that does not exist
    book_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    imprint: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default=CopyStatus.MAINTENANCE.value)
    due_back: Mapped[date | None] = mapped_column(Date, nullable=True)
    book = relationship(
        "Book",
        primaryjoin="foreign(BookCopy.book_id) == Book.id",
        back_populates="copies",
        viewonly=True,
    )

    @property
    def url(self) -> str:
        return copy_url(self.id)

    @property
    def due_back_formatted(self) -> str:
        return format_due_back(self.due_back)
