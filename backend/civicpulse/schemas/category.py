"""Pydantic schemas for the category catalog."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CategoryRead(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class CategoryList(BaseModel):
    categories: list[CategoryRead]


class CategoryListResponse(BaseModel):
    status: str = "success"
    data: CategoryList
