"""User service functions for registration, authentication and rankings."""
from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import defer

from civicpulse.core.config import Settings
from civicpulse.core.errors import CivicPulseError, ErrorKind
from civicpulse.core.security import PasswordHasher
from civicpulse.models.issue import Issue
from civicpulse.models.user import User, UserRole
from civicpulse.schemas.auth import RegisterRequest
from civicpulse.schemas.user import LeaderboardEntry, ProfileRead
from civicpulse.services.gamification import REGISTRATION_POINTS, badge_for_points

logger = logging.getLogger(__name__)

LEADERBOARD_SIZE = 20
LOGIN_FAILED_MESSAGE = "Incorrect email or password"
EMAIL_IN_USE_MESSAGE = "Email already in use"


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(select(User).where(User.email == normalize_email(email)))
    return result.scalar_one_or_none()


async def get_user_by_id(session: AsyncSession, user_id: int) -> User | None:
    """Load a user without its password hash."""
    result = await session.execute(
        select(User).options(defer(User.password_hash)).where(User.id == user_id)
    )
    return result.scalar_one_or_none()


async def register_user(session: AsyncSession, data: RegisterRequest, hasher: PasswordHasher) -> User:
    """Create and commit a citizen account.

    The unique index on ``email`` is the final word: a concurrent registration
    that slips past the lookup surfaces as a conflict, not a server error.
    """
    email = normalize_email(data.email)
    if await get_user_by_email(session, email):
        raise CivicPulseError(ErrorKind.CONFLICT, EMAIL_IN_USE_MESSAGE)

    user = User(
        name=data.name.strip(),
        email=email,
        phone=data.phone or None,
        password_hash=hasher.hash(data.password),
        role=UserRole.CITIZEN.value,
        points=REGISTRATION_POINTS,
    )
    session.add(user)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise CivicPulseError(ErrorKind.CONFLICT, EMAIL_IN_USE_MESSAGE) from exc
    logger.info("Registered user %s", user.id)
    return user


async def authenticate_user(session: AsyncSession, email: str, password: str, hasher: PasswordHasher) -> User:
    """Return the user for valid credentials.

    Unknown emails and wrong passwords fail identically so callers cannot
    tell which addresses are registered.
    """
    user = await get_user_by_email(session, email)
    if user is None:
        hasher.dummy_verify()
        verified = False
    else:
        verified = hasher.verify(password, user.password_hash)
    if not verified:
        logger.info("Rejected login attempt")
        raise CivicPulseError(ErrorKind.UNAUTHORIZED, LOGIN_FAILED_MESSAGE)
    return user


async def count_reports(session: AsyncSession, user_id: int) -> int:
    result = await session.execute(select(func.count(Issue.id)).where(Issue.user_id == user_id))
    return int(result.scalar_one() or 0)


async def get_profile(session: AsyncSession, user_id: int) -> ProfileRead:
    user = await get_user_by_id(session, user_id)
    if user is None:
        raise CivicPulseError(ErrorKind.NOT_FOUND, "User not found")
    return ProfileRead(
        id=user.id,
        name=user.name,
        email=user.email,
        phone=user.phone,
        role=user.role,
        points=user.points,
        created_at=user.created_at,
        total_reports=await count_reports(session, user.id),
        badge=badge_for_points(user.points),
    )


async def leaderboard(session: AsyncSession, limit: int = LEADERBOARD_SIZE) -> list[LeaderboardEntry]:
    """Top citizens by points. Equal points keep whatever order the database returns."""
    result = await session.execute(
        select(User.id, User.name, User.points, func.count(Issue.id).label("reports"))
        .select_from(User)
        .outerjoin(Issue, Issue.user_id == User.id)
        .where(User.role == UserRole.CITIZEN.value)
        .group_by(User.id, User.name, User.points)
        .order_by(User.points.desc())
        .limit(limit)
    )
    return [
        LeaderboardEntry(
            id=str(row.id),
            name=row.name,
            points=row.points or 0,
            reports=int(row.reports or 0),
            badge=badge_for_points(row.points or 0),
        )
        for row in result.all()
    ]


async def ensure_admin(session: AsyncSession, settings: Settings, hasher: PasswordHasher) -> User | None:
    """Create or promote the configured administrator account."""
    if not settings.admin_email or not settings.admin_password:
        return None

    email = normalize_email(settings.admin_email)
    admin = await get_user_by_email(session, email)
    if admin is None:
        admin = User(
            name=settings.admin_name,
            email=email,
            password_hash=hasher.hash(settings.admin_password),
            role=UserRole.ADMIN.value,
        )
        session.add(admin)
        logger.info("Created administrator account %s", email)
    elif not admin.is_admin:
        admin.role = UserRole.ADMIN.value
        logger.info("Promoted %s to administrator", email)
    await session.flush()
    return admin
