import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from budget_categorizer.api.dependencies import get_pipeline
from budget_categorizer.api.schemas import (
    BatchCategorizeRequest,
    BatchCategorizeResponse,
    CategorizeRequest,
)
from budget_categorizer.logger import get_logger
from budget_categorizer.models import BUDGET_CATEGORIES, CategorizationResult
from budget_categorizer.overrides import OverrideLookupError
from budget_categorizer.services.categorization import CategorizationPipeline

logger = get_logger(__name__)

router = APIRouter()


@router.post("/categorize", response_model=CategorizationResult)
async def categorize_transaction(
    req: CategorizeRequest,
    pipeline: Annotated[CategorizationPipeline, Depends(get_pipeline)],
) -> CategorizationResult:
    try:
        return await pipeline.predict(req.transaction, req.user_id)
    except OverrideLookupError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except asyncio.TimeoutError as exc:
        raise HTTPException(status_code=504, detail="Categorization timed out") from exc


@router.post("/categorize/batch", response_model=BatchCategorizeResponse)
async def categorize_batch(
    req: BatchCategorizeRequest,
    pipeline: Annotated[CategorizationPipeline, Depends(get_pipeline)],
) -> BatchCategorizeResponse:
    try:
        results = await pipeline.categorize_batch(req.transactions, req.user_id)
    except OverrideLookupError as exc:
        logger.warning("[BATCH] Aborted for user '%s': %s", req.user_id, exc)
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except asyncio.TimeoutError as exc:
        logger.warning("[BATCH] Timed out for user '%s'", req.user_id)
        raise HTTPException(status_code=504, detail="Categorization timed out") from exc
    return BatchCategorizeResponse(results=results)


@router.get("/categories")
async def get_categories() -> list[str]:
    return list(BUDGET_CATEGORIES)
