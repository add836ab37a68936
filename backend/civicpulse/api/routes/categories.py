"""Category catalog endpoint."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from civicpulse.core.dependencies import get_db
from civicpulse.schemas.category import CategoryList, CategoryListResponse, CategoryRead
from civicpulse.services import categories as category_service

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=CategoryListResponse)
async def list_categories(session: AsyncSession = Depends(get_db)) -> CategoryListResponse:
    categories = await category_service.list_categories(session)
    return CategoryListResponse(
        data=CategoryList(categories=[CategoryRead.model_validate(category) for category in categories])
    )
