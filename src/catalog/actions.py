from __future__ import annotations
import logging
from typing import Optional, Dict, Any, List, Mapping

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete
from sqlalchemy.orm import selectinload

from catalog.forms import build_copy_form, CREATE_TITLE, UPDATE_TITLE
from catalog.models import Book, BookCopy, COPY_LIST_URL, copy_url
from catalog.schemas import CopyDraft, CopyOut, CopyListView, CopyDetailView, CopyDeleteView
from catalog.validation import validate_copy_fields

logger = logging.getLogger(__name__)

def _ok(msg: str, **data):    return {"ok": True,  "message": msg, **({"data": data} if data else {})}
def _err(msg: str, code="", **data): return {"ok": False, "message": msg, "code": code, **({"data": data} if data else {})}

# Catalog entries

async def list_catalog_entries(session: AsyncSession) -> List[Book]:
    res = await session.execute(select(Book).order_by(Book.title.asc()))
    return list(res.scalars().all())

async def find_catalog_entry(session: AsyncSession, book_id: str) -> Optional[Book]:
    res = await session.execute(select(Book).where(Book.id == book_id))
    return res.scalar_one_or_none()

async def register_book(session: AsyncSession, *, title: str, author: Optional[str]) -> Dict[str, Any]:
    if not title or not title.strip():
        return _err("Missing book title.", code="MISSING_TITLE")
    b = Book(title=title.strip(), author=(author or "").strip() or None)
    session.add(b)
    await session.commit()
    await session.refresh(b)
    return _ok("Book registered.", book_id=b.id, title=b.title, author=b.author)

# Book copies

async def _find_copy(session: AsyncSession, copy_id: str, *, with_book: bool = True) -> Optional[BookCopy]:
    q = select(BookCopy).where(BookCopy.id == copy_id).execution_options(populate_existing=True)
    if with_book:
        q = q.options(selectinload(BookCopy.book))
    res = await session.execute(q)
    return res.scalar_one_or_none()

def _not_found(copy_id: str) -> Dict[str, Any]:
    logger.info("Book copy %s not found", copy_id)
    return _err("Book copy not found.", code="COPY_NOT_FOUND", copy_id=copy_id)

async def list_copies(session: AsyncSession) -> Dict[str, Any]:
    res = await session.execute(
        select(BookCopy).options(selectinload(BookCopy.book)).execution_options(populate_existing=True)
    )
    copies = res.scalars().all()
    view = CopyListView(
        title="Book Instance List",
        bookinstance_list=[CopyOut.model_validate(c) for c in copies],
    )
    return _ok("Book copy list.", view=view)

async def get_copy_detail(session: AsyncSession, *, copy_id: str) -> Dict[str, Any]:
    copy = await _find_copy(session, copy_id)
    if copy is None:
        return _not_found(copy_id)
    view = CopyDetailView(title="Book", bookinstance=CopyOut.model_validate(copy))
    return _ok("Book copy detail.", view=view)

async def create_copy_form(session: AsyncSession) -> Dict[str, Any]:
    books = await list_catalog_entries(session)
    return _ok("Create form.", view=build_copy_form(CREATE_TITLE, books))

async def create_copy(session: AsyncSession, *, fields: Mapping[str, Optional[str]]) -> Dict[str, Any]:
    result = validate_copy_fields(fields)
    draft = result.draft
    if not result.ok:
        logger.debug("Copy create rejected: %s", [e.field for e in result.errors])
        books = await list_catalog_entries(session)
        form = build_copy_form(CREATE_TITLE, books, draft=draft, errors=result.errors)
        return _err("Invalid book copy data.", code="VALIDATION_FAILED", view=form)
    c = BookCopy(book_id=draft.book_id, imprint=draft.imprint, status=draft.status, due_back=draft.due_back)
    session.add(c)
    await session.commit()
    await session.refresh(c)
    logger.info("Created book copy %s (book %s)", c.id, c.book_id)
    return _ok("Book copy created.", copy_id=c.id, redirect=c.url)

async def update_copy_form(session: AsyncSession, *, copy_id: str) -> Dict[str, Any]:
    copy = await _find_copy(session, copy_id, with_book=False)
    if copy is None:
        return _not_found(copy_id)
    books = await list_catalog_entries(session)
    draft = CopyDraft.model_validate(copy, from_attributes=True)
    return _ok("Update form.", view=build_copy_form(UPDATE_TITLE, books, draft=draft))

async def update_copy(session: AsyncSession, *, copy_id: str, fields: Mapping[str, Optional[str]]) -> Dict[str, Any]:
    # the route id is authoritative; any id inside fields is ignored
    result = validate_copy_fields(fields, copy_id=copy_id)
    draft = result.draft
    if not result.ok:
        logger.debug("Copy %s update rejected: %s", copy_id, [e.field for e in result.errors])
        books = await list_catalog_entries(session)
        form = build_copy_form(UPDATE_TITLE, books, draft=draft, errors=result.errors)
        return _err("Invalid book copy data.", code="VALIDATION_FAILED", view=form)
    res = await session.execute(
        update(BookCopy)
        .where(BookCopy.id == copy_id)
        .values(book_id=draft.book_id, imprint=draft.imprint, status=draft.status, due_back=draft.due_back)
    )
    await session.commit()
    if res.rowcount == 0:
        return _not_found(copy_id)
    logger.info("Updated book copy %s", copy_id)
    return _ok("Book copy updated.", copy_id=copy_id, redirect=copy_url(copy_id))

async def delete_copy_form(session: AsyncSession, *, copy_id: str) -> Dict[str, Any]:
    copy = await _find_copy(session, copy_id)
    if copy is None:
        return _ok("Book copy already gone.", redirect=COPY_LIST_URL)
    view = CopyDeleteView(title="Delete BookInstance", bookinstance=CopyOut.model_validate(copy))
    return _ok("Delete confirmation.", view=view)

async def delete_copy(session: AsyncSession, *, copy_id: str, target_id: Optional[str] = None) -> Dict[str, Any]:
    # target_id is the copyid posted by the confirmation form; it must name the routed copy
    if target_id is not None and target_id != copy_id:
        return _err("Copy id in form does not match the route.", code="COPY_ID_MISMATCH", copy_id=copy_id)
    res = await session.execute(delete(BookCopy).where(BookCopy.id == copy_id))
    await session.commit()
    if res.rowcount:
        logger.info("Deleted book copy %s", copy_id)
    else:
        logger.info("Book copy %s already deleted", copy_id)
    return _ok("Book copy deleted.", copy_id=copy_id, removed=res.rowcount, redirect=COPY_LIST_URL)
