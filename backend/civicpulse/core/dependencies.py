"""Reusable dependencies for FastAPI routes."""
from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from civicpulse.core.errors import CivicPulseError, ErrorKind
from civicpulse.core.security import PasswordHasher, TokenSigner
from civicpulse.db.session import Database
from civicpulse.models.user import User
from civicpulse.services.users import get_user_by_id

_bearer = HTTPBearer(auto_error=False)


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_token_signer(request: Request) -> TokenSigner:
    return request.app.state.token_signer


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    session: AsyncSession = Depends(get_db),
    signer: TokenSigner = Depends(get_token_signer),
) -> User:
    if credentials is None or not credentials.credentials:
        raise CivicPulseError(ErrorKind.UNAUTHORIZED, "You are not logged in! Please log in to get access.")

    try:
        payload = signer.loads(credentials.credentials)
    except ValueError as exc:
        raise CivicPulseError(ErrorKind.UNAUTHORIZED, str(exc)) from exc

    user_id = payload.get("id")
    if not isinstance(user_id, int):
        raise CivicPulseError(ErrorKind.UNAUTHORIZED, "Invalid session token")

    user = await get_user_by_id(session, user_id)
    if user is None:
        raise CivicPulseError(ErrorKind.UNAUTHORIZED, "The user belonging to this token no longer exists.")

    request.state.user = user
    return user


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        raise CivicPulseError(ErrorKind.FORBIDDEN, "You do not have permission to perform this action")
    return current_user
