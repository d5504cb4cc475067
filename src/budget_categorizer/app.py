import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from budget_categorizer.api.routes import categorize, learn
from budget_categorizer.core import settings
from budget_categorizer.domain.keyword_table import load_keyword_table
from budget_categorizer.logger import get_logger, setup_logging
from budget_categorizer.manager import CategorizerService
from budget_categorizer.overrides import InMemoryOverrideStore, JsonOverrideStore, OverrideStore
from budget_categorizer.services.categorization import CategorizationPipeline

logger = get_logger(__name__)


def build_override_store() -> OverrideStore:
    if settings.OVERRIDE_STORE == "memory":
        logger.warning("OVERRIDE_STORE=memory: user overrides are lost on restart.")
        return InMemoryOverrideStore()
    return JsonOverrideStore(data_path=os.path.join(settings.DATA_DIR, "overrides.json"))


def build_service() -> CategorizerService:
    table = load_keyword_table(settings.KEYWORD_RULES_FILE)
    logger.info(f"Loaded keyword rules for {len(table)} categories.")
    return CategorizerService(override_store=build_override_store(), keyword_table=table)


def create_app() -> FastAPI:
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Initializing services...")
        settings.log_environment()

        service = build_service()
        app.state.service = service
        app.state.pipeline = CategorizationPipeline(
            service=service,
            concurrency=settings.BATCH_CONCURRENCY,
            timeout=settings.BATCH_TIMEOUT if settings.BATCH_TIMEOUT > 0 else None,
        )

        logger.info("Services initialized.")
        yield
        logger.info("Service shutting down.")

    app = FastAPI(title="Budget Categorizer", lifespan=lifespan)

    app.include_router(categorize.router)
    app.include_router(learn.router)

    return app
