"""Registration, login, profile and leaderboard endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from civicpulse.core.dependencies import get_current_user, get_db, get_password_hasher, get_token_signer
from civicpulse.core.security import PasswordHasher, TokenSigner
from civicpulse.models.user import User
from civicpulse.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserEnvelope
from civicpulse.schemas.user import LeaderboardResponse, ProfileData, ProfileResponse, UserRead
from civicpulse.services import users as user_service

router = APIRouter(tags=["users"])


def _auth_response(user: User, signer: TokenSigner) -> AuthResponse:
    return AuthResponse(token=signer.issue(user.id), data=UserEnvelope(user=UserRead.model_validate(user)))


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    session: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    signer: TokenSigner = Depends(get_token_signer),
) -> AuthResponse:
    user = await user_service.register_user(session, payload, hasher)
    return _auth_response(user, signer)


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    session: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    signer: TokenSigner = Depends(get_token_signer),
) -> AuthResponse:
    user = await user_service.authenticate_user(session, payload.email, payload.password, hasher)
    return _auth_response(user, signer)


@router.get("/profile", response_model=ProfileResponse)
async def profile(
    session: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ProfileResponse:
    user = await user_service.get_profile(session, current_user.id)
    return ProfileResponse(data=ProfileData(user=user))


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def leaderboard(session: AsyncSession = Depends(get_db)) -> LeaderboardResponse:
    return LeaderboardResponse(data=await user_service.leaderboard(session))
