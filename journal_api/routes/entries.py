"""
Journal API: Entry Routes
=========================

What:  Principal-scoped CRUD over journal entries under /entries.
Who:   Every route requires a bearer token (`get_principal`).

Status codes:
    GET    /entries        200 index
    POST   /entries        201 created entry
    GET    /entries/{id}   200 entry
    PUT    /entries/{id}   200 replaced entry
    DELETE /entries/{id}   204 empty body
"""

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from journal_api.dependencies import Principal, get_db_session, get_principal
from journal_api.schemas.entry import EntryCreate, EntryIndex, EntryReplace, EntryResponse
from journal_api.schemas.errors import ErrorResponse
from journal_api.services.entry_service import entry_service

router = APIRouter(prefix="/entries", tags=["Entries"])

_AUTH_ERRORS = {
    400: {"description": "Malformed request or account no longer exists", "model": ErrorResponse},
    401: {"description": "Invalid token", "model": ErrorResponse},
}

_ENTRY_ERRORS = {
    **_AUTH_ERRORS,
    403: {"description": "Entry belongs to another user", "model": ErrorResponse},
    404: {"description": "Entry does not exist", "model": ErrorResponse},
}


@router.get("", response_model=EntryIndex, responses=_AUTH_ERRORS, summary="List your entries")
async def list_entries(
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db_session),
) -> EntryIndex:
    return await entry_service.list_entries(db, principal.username)


@router.post(
    "",
    response_model=EntryResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_AUTH_ERRORS,
    summary="Create an entry",
)
async def create_entry(
    body: EntryCreate,
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db_session),
) -> EntryResponse:
    return await entry_service.create_entry(db, principal.username, body.title, body.content)


@router.get(
    "/{entry_id}",
    response_model=EntryResponse,
    responses=_ENTRY_ERRORS,
    summary="Fetch one of your entries",
)
async def get_entry(
    entry_id: int = Path(description="Entry id"),
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db_session),
) -> EntryResponse:
    return await entry_service.get_entry(db, principal.username, entry_id)


@router.put(
    "/{entry_id}",
    response_model=EntryResponse,
    responses=_ENTRY_ERRORS,
    summary="Replace the title and content of one of your entries",
)
async def replace_entry(
    body: EntryReplace,
    entry_id: int = Path(description="Entry id"),
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db_session),
) -> EntryResponse:
    return await entry_service.replace_entry(
        db, principal.username, entry_id, body.new_title, body.new_content
    )


@router.delete(
    "/{entry_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=_ENTRY_ERRORS,
    summary="Delete one of your entries",
)
async def delete_entry(
    entry_id: int = Path(description="Entry id"),
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await entry_service.delete_entry(db, principal.username, entry_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
