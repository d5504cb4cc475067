from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from budget_categorizer.api.dependencies import get_service
from budget_categorizer.api.schemas import LearnRequest
from budget_categorizer.logger import get_logger
from budget_categorizer.manager import CategorizerService
from budget_categorizer.overrides import OverrideLookupError

logger = get_logger(__name__)

router = APIRouter()


@router.post("/learn")
async def learn_transaction(
    req: LearnRequest,
    service: Annotated[CategorizerService, Depends(get_service)],
) -> dict[str, str]:
    logger.info(
        "[LEARN] User %s: '%s' -> Category: '%s'",
        req.user_id,
        req.transaction.display_name or "N/A",
        req.category,
    )

    try:
        await service.learn(req.transaction, req.user_id, req.category)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except OverrideLookupError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc

    return {
        "status": "success",
        "message": "Override saved",
    }
