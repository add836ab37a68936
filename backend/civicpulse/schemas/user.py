"""Pydantic schemas for user profiles and the leaderboard."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class UserRead(BaseModel):
    id: int
    name: str
    email: str
    phone: str | None = None
    role: str
    points: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProfileRead(UserRead):
    total_reports: int
    badge: str


class ProfileData(BaseModel):
    user: ProfileRead


class ProfileResponse(BaseModel):
    status: str = "success"
    data: ProfileData


class LeaderboardEntry(BaseModel):
    id: str
    name: str
    points: int
    reports: int
    badge: str


class LeaderboardResponse(BaseModel):
    status: str = "success"
    data: list[LeaderboardEntry]
