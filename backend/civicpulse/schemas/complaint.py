"""Pydantic schemas for complaints and their aggregates."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from civicpulse.models.issue import IssueStatus


class ComplaintCreate(BaseModel):
    title: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=10_000)
    category: str | None = Field(default=None, max_length=64)
    category_id: int | None = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    photo_url: str | None = Field(default=None, max_length=1024)
    address: str | None = Field(default=None, max_length=512)


class ComplaintSummary(BaseModel):
    id: int
    title: str
    status: str
    priority: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ComplaintRead(BaseModel):
    id: int
    title: str
    description: str
    status: str
    is_escalated: bool
    priority: str
    priority_score: int
    address: str
    photo_url: str | None
    latitude: float | None
    longitude: float | None
    upvotes: int
    created_at: datetime
    updated_at: datetime | None
    category: str | None
    reporter_name: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ComplaintData(BaseModel):
    complaint: ComplaintSummary


class ComplaintCreatedResponse(BaseModel):
    status: str = "success"
    data: ComplaintData


class ComplaintListData(BaseModel):
    complaints: list[ComplaintRead]


class ComplaintListResponse(BaseModel):
    status: str = "success"
    results: int
    data: ComplaintListData


class ComplaintStats(BaseModel):
    total: int = 0
    submitted: int = 0
    in_progress: int = 0
    resolved: int = 0
    closed: int = 0
    escalated: int = 0


class ComplaintStatsResponse(BaseModel):
    status: str = "success"
    data: ComplaintStats


class StatusUpdate(BaseModel):
    status: IssueStatus
    is_escalated: bool | None = None


class ComplaintStatusRead(BaseModel):
    id: int
    status: str
    is_escalated: bool
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ComplaintStatusData(BaseModel):
    complaint: ComplaintStatusRead


class ComplaintStatusResponse(BaseModel):
    status: str = "success"
    data: ComplaintStatusData


class UpvoteRead(BaseModel):
    id: int
    upvotes: int


class UpvoteResponse(BaseModel):
    status: str = "success"
    data: UpvoteRead
