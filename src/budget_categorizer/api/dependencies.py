from fastapi import HTTPException, Request

from budget_categorizer.manager import CategorizerService
from budget_categorizer.services.categorization import CategorizationPipeline


def get_service(request: Request) -> CategorizerService:
    service = getattr(request.app.state, "service", None)
    if not service:
        raise HTTPException(status_code=500, detail="Service not initialized")
    return service


def get_pipeline(request: Request) -> CategorizationPipeline:
    pipeline = getattr(request.app.state, "pipeline", None)
    if not pipeline:
        raise HTTPException(status_code=500, detail="Service not initialized")
    return pipeline
