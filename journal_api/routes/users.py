"""
Journal API: Account Routes
===========================

What:  Signup, signin, account listing and self-deletion under /users.

Signup and signin answer with the bare token as text/plain, which is what
existing clients read into their Authorization header.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from journal_api.dependencies import Principal, get_credentials, get_db_session, get_principal
from journal_api.schemas.account import Credentials
from journal_api.schemas.errors import ErrorResponse
from journal_api.services.account_service import account_service
from journal_api.services.credential_service import CredentialService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.post(
    "/signup",
    status_code=status.HTTP_201_CREATED,
    response_class=PlainTextResponse,
    responses={
        201: {"description": "Session token", "content": {"text/plain": {}}},
        400: {"description": "Malformed request", "model": ErrorResponse},
        409: {"description": "Username already exists", "model": ErrorResponse},
    },
    summary="Create an account",
)
async def signup(
    body: Credentials,
    db: AsyncSession = Depends(get_db_session),
    credentials: CredentialService = Depends(get_credentials),
) -> PlainTextResponse:
    token = await account_service.signup(db, credentials, body.username, body.password)
    return PlainTextResponse(token, status_code=status.HTTP_201_CREATED)


@router.post(
    "/signin",
    response_class=PlainTextResponse,
    responses={
        200: {"description": "Session token", "content": {"text/plain": {}}},
        400: {"description": "Malformed request", "model": ErrorResponse},
        403: {"description": "Incorrect password", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
    },
    summary="Exchange username and password for a token",
)
async def signin(
    body: Credentials,
    db: AsyncSession = Depends(get_db_session),
    credentials: CredentialService = Depends(get_credentials),
) -> PlainTextResponse:
    token = await account_service.signin(db, credentials, body.username, body.password)
    return PlainTextResponse(token)


@router.get(
    "",
    response_model=List[str],
    summary="List every registered username",
)
async def list_users(db: AsyncSession = Depends(get_db_session)) -> List[str]:
    return await account_service.list_usernames(db)


@router.delete(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        400: {"description": "Malformed request or account already gone", "model": ErrorResponse},
        401: {"description": "Invalid token", "model": ErrorResponse},
        403: {"description": "Cannot delete a different user", "model": ErrorResponse},
    },
    summary="Delete your own account and all of its entries",
)
async def delete_user(
    principal: Principal = Depends(get_principal),
    username: str = Query(min_length=1, description="Must equal the authenticated username"),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await account_service.delete_account(db, principal.username, username)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
