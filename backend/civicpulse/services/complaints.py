"""Complaint submission workflow and issue listings."""
from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, timezone

from sqlalchemy import case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from civicpulse.core.errors import CivicPulseError, ErrorKind
from civicpulse.models.category import Category
from civicpulse.models.issue import Issue, IssueStatus
from civicpulse.models.user import User, utcnow
from civicpulse.schemas.complaint import ComplaintCreate, ComplaintRead, ComplaintStats, StatusUpdate
from civicpulse.services import categories as category_service
from civicpulse.services.gamification import REPORT_POINTS, award_points

logger = logging.getLogger(__name__)

DAILY_COMPLAINT_LIMIT = 10
TITLE_FROM_DESCRIPTION_CHARS = 80
UNTITLED = "Untitled Report"


def local_day_bounds(now: datetime) -> tuple[datetime, datetime]:
    """Return the UTC instants of local midnight on ``now``'s local date and the next one."""
    local_date: date = now.astimezone().date()
    start = datetime.combine(local_date, time.min).astimezone(timezone.utc)
    end = datetime.combine(local_date + timedelta(days=1), time.min).astimezone(timezone.utc)
    return start, end


def derive_title(title: str | None, description: str | None) -> str:
    if title:
        return title
    if description:
        return description[:TITLE_FROM_DESCRIPTION_CHARS]
    return UNTITLED


async def count_daily_complaints(session: AsyncSession, user_id: int, now: datetime) -> int:
    start, end = local_day_bounds(now)
    result = await session.execute(
        select(func.count(Issue.id)).where(
            Issue.user_id == user_id,
            Issue.created_at >= start,
            Issue.created_at < end,
        )
    )
    return int(result.scalar_one() or 0)


async def _resolve_category_id(session: AsyncSession, data: ComplaintCreate) -> int | None:
    if data.category_id is not None:
        if await category_service.get_category(session, data.category_id) is None:
            raise CivicPulseError(ErrorKind.VALIDATION, f"Unknown category id {data.category_id}")
        return data.category_id
    if data.category:
        return await category_service.find_category_id(session, data.category)
    return None


async def submit_complaint(
    session: AsyncSession,
    user: User,
    data: ComplaintCreate,
    now: datetime | None = None,
) -> Issue:
    """Validate, rate-limit and persist a complaint, then award the reporter.

    The insert and the point award are committed separately: if the award
    fails the issue stays persisted without its points.
    """
    if not data.title and not data.description:
        raise CivicPulseError(ErrorKind.VALIDATION, "Please provide a title or description for the complaint")

    category_id = await _resolve_category_id(session, data)

    now = (now or utcnow()).astimezone(timezone.utc)
    if await count_daily_complaints(session, user.id, now) >= DAILY_COMPLAINT_LIMIT:
        logger.info("User %s hit the daily complaint limit", user.id)
        raise CivicPulseError(
            ErrorKind.RATE_LIMITED,
            f"You have reached the daily limit of {DAILY_COMPLAINT_LIMIT} complaints.",
        )

    issue = Issue(
        user_id=user.id,
        category_id=category_id,
        title=derive_title(data.title, data.description),
        description=data.description or "",
        latitude=data.latitude,
        longitude=data.longitude,
        address=data.address or "",
        photo_url=data.photo_url or None,
        created_at=now,
        updated_at=now,
    )
    session.add(issue)
    await session.commit()
    logger.info("User %s submitted complaint %s", user.id, issue.id)

    await award_points(session, user.id, REPORT_POINTS)
    await session.commit()
    return issue


def _listing_query(include_reporter: bool):
    columns = [
        Issue.id,
        Issue.title,
        Issue.description,
        Issue.status,
        Issue.is_escalated,
        Issue.priority,
        Issue.priority_score,
        Issue.address,
        Issue.photo_url,
        Issue.latitude,
        Issue.longitude,
        Issue.upvotes,
        Issue.created_at,
        Issue.updated_at,
        Category.name.label("category"),
    ]
    stmt = select(*columns, User.name.label("reporter_name")) if include_reporter else select(*columns)
    stmt = stmt.select_from(Issue).outerjoin(Category, Category.id == Issue.category_id)
    if include_reporter:
        stmt = stmt.outerjoin(User, User.id == Issue.user_id)
    return stmt.order_by(Issue.created_at.desc(), Issue.id.desc())


async def list_complaints(session: AsyncSession) -> list[ComplaintRead]:
    result = await session.execute(_listing_query(include_reporter=True))
    return [ComplaintRead.model_validate(dict(row)) for row in result.mappings().all()]


async def list_user_complaints(session: AsyncSession, user_id: int) -> list[ComplaintRead]:
    result = await session.execute(_listing_query(include_reporter=False).where(Issue.user_id == user_id))
    return [ComplaintRead.model_validate(dict(row)) for row in result.mappings().all()]


def _count_where(condition):
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


async def get_stats(session: AsyncSession) -> ComplaintStats:
    result = await session.execute(
        select(
            func.count(Issue.id).label("total"),
            _count_where(Issue.status == IssueStatus.SUBMITTED.value).label("submitted"),
            _count_where(Issue.status == IssueStatus.IN_PROGRESS.value).label("in_progress"),
            _count_where(Issue.status == IssueStatus.RESOLVED.value).label("resolved"),
            _count_where(Issue.status == IssueStatus.CLOSED.value).label("closed"),
            _count_where(Issue.is_escalated.is_(True)).label("escalated"),
        )
    )
    row = result.mappings().one()
    return ComplaintStats(**{key: int(value or 0) for key, value in row.items()})


async def get_issue(session: AsyncSession, issue_id: int) -> Issue:
    issue = await session.get(Issue, issue_id)
    if issue is None:
        raise CivicPulseError(ErrorKind.NOT_FOUND, "Complaint not found")
    return issue


async def update_status(session: AsyncSession, issue_id: int, data: StatusUpdate) -> Issue:
    issue = await get_issue(session, issue_id)
    issue.status = data.status.value
    if data.is_escalated is not None:
        issue.is_escalated = data.is_escalated
    issue.updated_at = utcnow()
    await session.commit()
    logger.info("Complaint %s moved to %s", issue.id, issue.status)
    return issue


async def upvote(session: AsyncSession, issue_id: int) -> int:
    result = await session.execute(
        update(Issue).where(Issue.id == issue_id).values(upvotes=Issue.upvotes + 1)
    )
    if result.rowcount == 0:
        raise CivicPulseError(ErrorKind.NOT_FOUND, "Complaint not found")
    await session.commit()
    upvotes = await session.scalar(select(Issue.upvotes).where(Issue.id == issue_id))
    return int(upvotes or 0)
