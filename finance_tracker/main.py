from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from finance_tracker.advice.generator import LLMTextGenerator, TextGenerator
from finance_tracker.api.router import create_graphql_router
from finance_tracker.config import Settings
from finance_tracker.database import Database
from finance_tracker.exception_handlers import register_exception_handlers
from finance_tracker.logging_config import setup_logging

logger = structlog.get_logger()


def create_app(
    settings: Settings | None = None,
    text_generator: TextGenerator | None = None,
) -> FastAPI:
    settings = settings or Settings()
    database = Database(settings.db_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level, settings.log_json)
        await database.connect()
        if not settings.enforce_transaction_ownership:
            logger.warning(
                "transaction_ownership_not_enforced",
                detail="by-id transaction operations do not check the caller",
            )
        yield
        await database.close()

    app = FastAPI(
        title="Finance Tracker",
        description="Personal finance tracker with AI-generated advice",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database
    app.state.text_generator = text_generator or LLMTextGenerator(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(create_graphql_router(), prefix="/graphql", tags=["graphql"])

    @app.get("/api/v1/health")
    async def health(request: Request):
        await request.app.state.database.check_health()
        return {"status": "healthy"}

    return app
