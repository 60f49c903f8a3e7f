"""GET /api/v1/variants: the game catalogue with default configuration."""

from __future__ import annotations

from fastapi import APIRouter

from arcade_engine.api.schemas import VariantSchema
from arcade_engine.variants import VARIANTS

router = APIRouter()


@router.get("/variants", response_model=list[VariantSchema])
def list_variants() -> list[VariantSchema]:
    return [VariantSchema(**cls().describe()) for cls in VARIANTS.values()]
