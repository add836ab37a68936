from datetime import date, datetime, time, timedelta, timezone

import pytest
from sqlalchemy import select

from civicpulse.core.errors import CivicPulseError, ErrorKind
from civicpulse.models.issue import Issue, IssueStatus
from civicpulse.models.user import User
from civicpulse.schemas.complaint import ComplaintCreate, StatusUpdate
from civicpulse.services import complaints as complaint_service
from civicpulse.services.categories import find_category_id
from civicpulse.services.complaints import DAILY_COMPLAINT_LIMIT, local_day_bounds


def local(day: date, at: time) -> datetime:
    return datetime.combine(day, at).astimezone()


async def add_issue(session, user_id: int, created_at: datetime) -> None:
    at = created_at.astimezone(timezone.utc)
    session.add(Issue(user_id=user_id, title="Existing", created_at=at, updated_at=at))
    await session.commit()


def test_day_bounds_cover_one_local_calendar_date():
    start, end = local_day_bounds(local(date(2026, 3, 10), time(15, 30)))
    assert start.astimezone().replace(tzinfo=None) == datetime(2026, 3, 10)
    assert end.astimezone().replace(tzinfo=None) == datetime(2026, 3, 11)
    assert start.tzinfo is not None and start.utcoffset() == timedelta(0)


def test_title_is_derived_from_description():
    description = "x" * 40 + "y" * 50
    assert complaint_service.derive_title(None, description) == description[:80]
    assert complaint_service.derive_title("", "") == "Untitled Report"
    assert complaint_service.derive_title("Pothole", description) == "Pothole"


async def test_submit_persists_issue_and_awards_points(session, citizen):
    issue = await complaint_service.submit_complaint(
        session, citizen, ComplaintCreate(title="Broken streetlight", category="Streetlights", address="MG Road")
    )

    assert issue.id is not None
    assert issue.status == IssueStatus.SUBMITTED.value
    assert issue.priority == "Medium"
    assert issue.category_id == await find_category_id(session, "Streetlights")
    assert await session.scalar(select(User.points).where(User.id == citizen.id)) == 20


async def test_empty_title_takes_first_80_characters(session, citizen):
    description = "Overflowing drain near the school gate " + "z" * 51
    assert len(description) == 90

    issue = await complaint_service.submit_complaint(session, citizen, ComplaintCreate(title="", description=description))

    stored = await session.get(Issue, issue.id)
    assert stored.title == description[:80]
    assert stored.description == description


async def test_title_or_description_required(session, citizen):
    with pytest.raises(CivicPulseError) as excinfo:
        await complaint_service.submit_complaint(session, citizen, ComplaintCreate(address="Somewhere"))
    assert excinfo.value.kind is ErrorKind.VALIDATION
    assert excinfo.value.status_code == 400


async def test_unknown_category_name_is_stored_as_null(session, citizen):
    issue = await complaint_service.submit_complaint(
        session, citizen, ComplaintCreate(title="Odd smell", category="Haunted Houses")
    )
    assert issue.category_id is None


async def test_category_id_must_exist(session, citizen):
    with pytest.raises(CivicPulseError) as excinfo:
        await complaint_service.submit_complaint(session, citizen, ComplaintCreate(title="x", category_id=999))
    assert excinfo.value.kind is ErrorKind.VALIDATION


async def test_category_id_wins_over_name(session, citizen):
    parks = await find_category_id(session, "Parks")
    issue = await complaint_service.submit_complaint(
        session, citizen, ComplaintCreate(title="Swing broken", category_id=parks, category="Traffic")
    )
    assert issue.category_id == parks


async def test_tenth_submission_succeeds_and_eleventh_is_rate_limited(session, citizen):
    now = local(date(2026, 5, 4), time(12, 0))
    for index in range(DAILY_COMPLAINT_LIMIT):
        await complaint_service.submit_complaint(session, citizen, ComplaintCreate(title=f"Report {index}"), now=now)

    with pytest.raises(CivicPulseError) as excinfo:
        await complaint_service.submit_complaint(session, citizen, ComplaintCreate(title="One too many"), now=now)

    assert excinfo.value.kind is ErrorKind.RATE_LIMITED
    assert excinfo.value.status_code == 429
    assert await session.scalar(select(User.points).where(User.id == citizen.id)) == 10 + 10 * DAILY_COMPLAINT_LIMIT


async def test_quota_resets_at_local_midnight(session, citizen):
    day = date(2026, 5, 4)
    for _ in range(DAILY_COMPLAINT_LIMIT):
        await add_issue(session, citizen.id, local(day, time(23, 59, 59)))

    issue = await complaint_service.submit_complaint(
        session, citizen, ComplaintCreate(title="New day"), now=local(day + timedelta(days=1), time(0, 0, 1))
    )
    assert issue.id is not None

    with pytest.raises(CivicPulseError):
        await complaint_service.submit_complaint(
            session, citizen, ComplaintCreate(title="Same day"), now=local(day, time(23, 59, 59))
        )


async def test_quota_is_per_user(session, citizen, hasher):
    other = User(name="Ravi", email="ravi@civicpulse.io", password_hash=hasher.hash("pw-ravi-123"))
    session.add(other)
    await session.commit()
    now = local(date(2026, 5, 4), time(9, 0))
    for _ in range(DAILY_COMPLAINT_LIMIT):
        await add_issue(session, other.id, now)

    issue = await complaint_service.submit_complaint(session, citizen, ComplaintCreate(title="Mine"), now=now)
    assert issue.user_id == citizen.id


async def test_listing_is_newest_first_with_joined_names(session, citizen):
    base = local(date(2026, 5, 4), time(8, 0))
    for offset in (3, 1, 5, 2):
        await complaint_service.submit_complaint(
            session,
            citizen,
            ComplaintCreate(title=f"At +{offset}h", category="Sanitation"),
            now=base + timedelta(hours=offset),
        )

    complaints = await complaint_service.list_complaints(session)

    created = [complaint.created_at for complaint in complaints]
    assert created == sorted(created, reverse=True)
    assert [complaint.title for complaint in complaints] == ["At +5h", "At +3h", "At +2h", "At +1h"]
    assert all(complaint.category == "Sanitation" for complaint in complaints)
    assert all(complaint.reporter_name == "Asha" for complaint in complaints)


async def test_stored_timestamps_come_back_as_utc(database, citizen):
    submitted_at = local(date(2026, 5, 4), time(23, 30))
    async with database.session() as writer:
        await complaint_service.submit_complaint(writer, citizen, ComplaintCreate(title="Late"), now=submitted_at)

    async with database.session() as reader:
        issue = (await reader.execute(select(Issue))).scalar_one()
        listed = (await complaint_service.list_complaints(reader))[0]

    assert issue.created_at.utcoffset() == timedelta(0)
    assert issue.created_at == submitted_at
    assert listed.created_at == listed.updated_at == submitted_at


async def test_list_user_complaints_is_scoped_to_owner(session, citizen, hasher):
    other = User(name="Ravi", email="ravi@civicpulse.io", password_hash=hasher.hash("pw-ravi-123"))
    session.add(other)
    await session.commit()
    await complaint_service.submit_complaint(session, citizen, ComplaintCreate(title="Asha's"))
    await complaint_service.submit_complaint(session, other, ComplaintCreate(title="Ravi's"))

    mine = await complaint_service.list_user_complaints(session, citizen.id)

    assert [complaint.title for complaint in mine] == ["Asha's"]
    assert mine[0].reporter_name is None


async def test_stats_count_each_status(session, citizen):
    for title in ("a", "b", "c", "d", "e"):
        await complaint_service.submit_complaint(session, citizen, ComplaintCreate(title=title))
    issues = (await session.execute(select(Issue).order_by(Issue.id))).scalars().all()
    issues[0].status = IssueStatus.IN_PROGRESS.value
    issues[1].status = IssueStatus.RESOLVED.value
    issues[2].status = IssueStatus.CLOSED.value
    issues[2].is_escalated = True
    issues[3].is_escalated = True
    await session.commit()

    stats = await complaint_service.get_stats(session)

    assert stats.model_dump() == {
        "total": 5,
        "submitted": 2,
        "in_progress": 1,
        "resolved": 1,
        "closed": 1,
        "escalated": 2,
    }


async def test_stats_on_empty_table_are_zero(session):
    stats = await complaint_service.get_stats(session)
    assert stats.total == 0 and stats.escalated == 0


async def test_update_status_and_escalation(session, citizen):
    issue = await complaint_service.submit_complaint(session, citizen, ComplaintCreate(title="Leak"))

    updated = await complaint_service.update_status(
        session, issue.id, StatusUpdate(status=IssueStatus.IN_PROGRESS, is_escalated=True)
    )

    assert updated.status == "In Progress"
    assert updated.is_escalated is True


async def test_update_status_of_missing_issue(session):
    with pytest.raises(CivicPulseError) as excinfo:
        await complaint_service.update_status(session, 404, StatusUpdate(status=IssueStatus.CLOSED))
    assert excinfo.value.kind is ErrorKind.NOT_FOUND


async def test_upvote_increments(session, citizen):
    issue = await complaint_service.submit_complaint(session, citizen, ComplaintCreate(title="Tree down"))
    assert await complaint_service.upvote(session, issue.id) == 1
    assert await complaint_service.upvote(session, issue.id) == 2

    with pytest.raises(CivicPulseError) as excinfo:
        await complaint_service.upvote(session, issue.id + 100)
    assert excinfo.value.kind is ErrorKind.NOT_FOUND
