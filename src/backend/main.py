"""FastAPI backend for the customer-service insights dashboard.

This module is a thin **presentation layer**.  Business logic lives in the
``application`` package so it can be tested and reused independently of any
HTTP framework.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

import config
from application.exceptions import DatasetsUnavailableError, LoadError
from application.prompt import STOP_SEQUENCES
from application.use_cases.chat import ChatUseCase
from application.use_cases.conversation import ConversationState
from domain.infrastructure.dataset_loader import DatasetLoader
from domain.infrastructure.generation_client import OllamaGenerationClient
from logging_config import setup_logging
from presentation.routes import chat, dashboard

# Configure loguru before anything else
setup_logging()


# ---------------------------------------------------------------------------
# Lifespan: load datasets and wire services once at startup
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the datasets and set up the chat session around the application lifetime.

    A failed load does not stop the server: the app stays up in the
    unavailable state and the data routes answer 503.
    """
    settings = config.get_settings()
    settings.validate_runtime()
    setup_logging(
        level=settings.log_level,
        json=settings.log_json,
        log_http_requests=settings.log_http_requests,
    )

    app.state.settings = settings
    app.state.datasets = None
    app.state.conversation = None
    app.state.load_error = None

    loader = DatasetLoader(timeout=settings.dataset_fetch_timeout_seconds)
    try:
        datasets = await loader.load(
            settings.analysis_source,
            settings.sentiment_source,
            settings.interactions_source,
        )
    except LoadError as exc:
        logger.error("Dashboard unavailable | source={} | {}", exc.source, exc.reason)
        app.state.load_error = exc
        yield
        logger.info("Application shutdown complete")
        return

    generation = OllamaGenerationClient(
        base_url=settings.ollama_base_url,
        model=settings.ollama_model,
        temperature=settings.generation_temperature,
        max_tokens=settings.generation_max_tokens,
        stop=STOP_SEQUENCES,
        timeout=settings.generation_timeout_seconds,
    )

    app.state.datasets = datasets
    app.state.conversation = ConversationState(
        ChatUseCase(
            datasets,
            generation,
            interaction_limit=settings.interaction_example_limit,
            trend_periods=settings.sentiment_trend_periods,
        )
    )

    logger.info("Application startup complete | model={}", settings.ollama_model)
    yield

    await generation.aclose()
    logger.info("Application shutdown complete")


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Customer Service Insights",
    description="Sentiment trends, key issues and grounded chat over support data.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.get_settings().cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DatasetsUnavailableError)
async def datasets_unavailable_handler(_request: Request, exc: DatasetsUnavailableError):
    return JSONResponse(status_code=503, content={"detail": f"Dashboard unavailable: {exc}"})


app.include_router(chat.router)
app.include_router(dashboard.router)


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
