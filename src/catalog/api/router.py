from typing import Optional
from fastapi import APIRouter, Depends, Form, HTTPException
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession
from catalog.deps import get_session

from catalog.schemas import (
    BookIn, BookOut,
    CopyListView, CopyDetailView, CopyFormView, CopyDeleteView,
)

from catalog.actions import (
    register_book,
    list_copies, get_copy_detail,
    create_copy_form, create_copy,
    update_copy_form, update_copy,
    delete_copy_form, delete_copy,
)

router = APIRouter(prefix="/catalog")

def _status_for(code: Optional[str]) -> int:
    return 404 if code == "COPY_NOT_FOUND" else 400

def _respond(r: dict):
    """Turn an action result into a redirect, a view-model, or an HTTP error."""
    d = r.get("data") or {}
    if d.get("redirect"):
        return RedirectResponse(d["redirect"], status_code=303)
    if "view" in d:
        return d["view"]
    raise HTTPException(status_code=_status_for(r.get("code")), detail=r["message"])

def _copy_fields(
    book: Optional[str] = Form(None),
    imprint: Optional[str] = Form(None),
    status: Optional[str] = Form(None),
    due_back: Optional[str] = Form(None),
) -> dict:
    return {"book": book, "imprint": imprint, "status": status, "due_back": due_back}

@router.post("/book", response_model=BookOut)
async def http_create_book(payload: BookIn, session: AsyncSession = Depends(get_session)):
    r = await register_book(session, title=payload.title, author=payload.author)
    if not r["ok"]:
        raise HTTPException(status_code=400, detail=r["message"])
    d = r["data"]
    return BookOut(id=d["book_id"], title=d["title"], author=d.get("author"))

@router.get("/bookinstances", response_model=CopyListView)
async def http_list_copies(session: AsyncSession = Depends(get_session)):
    return _respond(await list_copies(session))

@router.get("/bookinstance/create", response_model=CopyFormView)
async def http_create_copy_form(session: AsyncSession = Depends(get_session)):
    return _respond(await create_copy_form(session))

@router.post("/bookinstance/create", response_model=CopyFormView)
async def http_create_copy(fields: dict = Depends(_copy_fields), session: AsyncSession = Depends(get_session)):
    return _respond(await create_copy(session, fields=fields))

@router.get("/bookinstance/{copy_id}", response_model=CopyDetailView)
async def http_copy_detail(copy_id: str, session: AsyncSession = Depends(get_session)):
    return _respond(await get_copy_detail(session, copy_id=copy_id))

@router.get("/bookinstance/{copy_id}/update", response_model=CopyFormView)
async def http_update_copy_form(copy_id: str, session: AsyncSession = Depends(get_session)):
    return _respond(await update_copy_form(session, copy_id=copy_id))

@router.post("/bookinstance/{copy_id}/update", response_model=CopyFormView)
async def http_update_copy(copy_id: str, fields: dict = Depends(_copy_fields), session: AsyncSession = Depends(get_session)):
    return _respond(await update_copy(session, copy_id=copy_id, fields=fields))

@router.get("/bookinstance/{copy_id}/delete", response_model=CopyDeleteView)
async def http_delete_copy_form(copy_id: str, session: AsyncSession = Depends(get_session)):
    return _respond(await delete_copy_form(session, copy_id=copy_id))

@router.post("/bookinstance/{copy_id}/delete")
async def http_delete_copy(copy_id: str, copyid: Optional[str] = Form(None), session: AsyncSession = Depends(get_session)):
    return _respond(await delete_copy(session, copy_id=copy_id, target_id=copyid))
