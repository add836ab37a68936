"""Complaint submission, listing and moderation endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from civicpulse.core.dependencies import get_current_user, get_db, require_admin
from civicpulse.models.user import User
from civicpulse.schemas.complaint import (
    ComplaintCreate,
    ComplaintCreatedResponse,
    ComplaintData,
    ComplaintListData,
    ComplaintListResponse,
    ComplaintRead,
    ComplaintStatsResponse,
    ComplaintStatusData,
    ComplaintStatusRead,
    ComplaintStatusResponse,
    ComplaintSummary,
    StatusUpdate,
    UpvoteRead,
    UpvoteResponse,
)
from civicpulse.services import complaints as complaint_service

router = APIRouter(prefix="/complaints", tags=["complaints"])


def _listing(complaints: list[ComplaintRead]) -> ComplaintListResponse:
    return ComplaintListResponse(results=len(complaints), data=ComplaintListData(complaints=complaints))


@router.get("", response_model=ComplaintListResponse)
async def list_complaints(session: AsyncSession = Depends(get_db)) -> ComplaintListResponse:
    return _listing(await complaint_service.list_complaints(session))


@router.post("", response_model=ComplaintCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_complaint(
    payload: ComplaintCreate,
    session: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ComplaintCreatedResponse:
    issue = await complaint_service.submit_complaint(session, current_user, payload)
    return ComplaintCreatedResponse(data=ComplaintData(complaint=ComplaintSummary.model_validate(issue)))


@router.get("/mine", response_model=ComplaintListResponse)
async def list_my_complaints(
    session: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ComplaintListResponse:
    return _listing(await complaint_service.list_user_complaints(session, current_user.id))


@router.get("/stats", response_model=ComplaintStatsResponse)
async def complaint_stats(session: AsyncSession = Depends(get_db)) -> ComplaintStatsResponse:
    return ComplaintStatsResponse(data=await complaint_service.get_stats(session))


@router.patch("/{complaint_id}/status", response_model=ComplaintStatusResponse)
async def update_complaint_status(
    complaint_id: int,
    payload: StatusUpdate,
    session: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
) -> ComplaintStatusResponse:
    issue = await complaint_service.update_status(session, complaint_id, payload)
    return ComplaintStatusResponse(data=ComplaintStatusData(complaint=ComplaintStatusRead.model_validate(issue)))


@router.post("/{complaint_id}/upvote", response_model=UpvoteResponse)
async def upvote_complaint(
    complaint_id: int,
    session: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
) -> UpvoteResponse:
    upvotes = await complaint_service.upvote(session, complaint_id)
    return UpvoteResponse(data=UpvoteRead(id=complaint_id, upvotes=upvotes))
