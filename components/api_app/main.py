# ruff: noqa: B008

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from components.assistant import AssistantAgent
from components.park_service import IngestValidationError, ParkService
from components.streaming import SSE_HEADERS, SSE_MEDIA_TYPE, sse_stream
from components.tool_bridge import ToolBridge
from components.vector_store import ParkVectorStore
from fastapi import Body, Depends, FastAPI
from fastapi.responses import JSONResponse, StreamingResponse
from shared.outcome import Cancelled, Failed, guard

from .models import (
    AskRequest,
    AskResponse,
    ErrorResponse,
    HealthResponse,
    IngestRequest,
    IngestResponse,
    ModuleHealth,
)

logger = logging.getLogger(__name__)

QUESTION_REQUIRED_MESSAGE = "Question is required."
ASK_ERROR_MESSAGE = "An error occurred while processing your question."
INGEST_ERROR_MESSAGE = "An error occurred during ingestion."

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content=ErrorResponse(error=message).model_dump()
    )


def _question_of(body: Optional[AskRequest]) -> Optional[str]:
    if body is None or body.question is None or not body.question.strip():
        return None
    return body.question


def create_app(
    service: ParkService,
    agent: AssistantAgent,
    bridge: ToolBridge,
) -> FastAPI:
    """
    Creates and configures the FastAPI application, registering all routes.
    This function returns the app object but does not run it.

    The tool bridge is started when the app starts up and stopped when it
    shuts down, so both happen in the same task.

    Args:
        service: The fully initialized ParkService instance.
        agent: The assistant answering questions.
        bridge: The tool bridge the assistant calls tools through.

    Returns:
        The configured FastAPI app instance.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await bridge.start()
        try:
            yield
        finally:
            await bridge.stop()

    app = FastAPI(title="Park Knowledge API", lifespan=lifespan)

    # Dependency providers to make the collaborators available to endpoints
    def get_service() -> ParkService:
        return service

    def get_agent() -> AssistantAgent:
        return agent

    @app.post(
        "/ask",
        response_model=AskResponse,
        responses=ERROR_RESPONSES,
        tags=["assistant"],
        operation_id="ask",
    )
    async def ask(
        body: Optional[AskRequest] = Body(default=None),
        assistant: AssistantAgent = Depends(get_agent),
    ):
        question = _question_of(body)
        if question is None:
            return error_response(400, QUESTION_REQUIRED_MESSAGE)

        outcome = await guard(assistant.ask(question))
        if isinstance(outcome, Cancelled):
            logger.info("Question cancelled by the client")
            outcome.reraise()
        if isinstance(outcome, Failed):
            logger.error(
                f"Error processing question: {outcome.error}", exc_info=outcome.error
            )
            return error_response(500, ASK_ERROR_MESSAGE)
        return AskResponse(answer=outcome.value)

    @app.post(
        "/ask/stream",
        responses={
            200: {"content": {"text/event-stream": {}}},
            400: {"model": ErrorResponse},
        },
        tags=["assistant"],
        operation_id="ask_stream",
    )
    async def ask_stream(
        body: Optional[AskRequest] = Body(default=None),
        assistant: AssistantAgent = Depends(get_agent),
    ):
        question = _question_of(body)
        if question is None:
            return error_response(400, QUESTION_REQUIRED_MESSAGE)

        return StreamingResponse(
            sse_stream(assistant.ask_streaming(question)),
            media_type=SSE_MEDIA_TYPE,
            headers=SSE_HEADERS,
        )

    @app.post(
        "/ingest",
        response_model=IngestResponse,
        responses=ERROR_RESPONSES,
        tags=["admin"],
        operation_id="ingest_parks",
    )
    async def ingest(
        body: Optional[IngestRequest] = Body(default=None),
        svc: ParkService = Depends(get_service),
    ):
        documents = body.documents if body is not None else None

        outcome = await guard(svc.ingest(documents))
        if isinstance(outcome, Cancelled):
            logger.info("Ingestion cancelled by the client")
            outcome.reraise()
        if isinstance(outcome, Failed):
            if isinstance(outcome.error, IngestValidationError):
                logger.warning(f"Rejected ingestion: {outcome.error}")
                return error_response(400, str(outcome.error))
            logger.error(
                f"Error during ingestion: {outcome.error}", exc_info=outcome.error
            )
            return error_response(500, INGEST_ERROR_MESSAGE)
        return IngestResponse(message=outcome.value.message, count=outcome.value.count)

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["admin"],
        operation_id="health",
    )
    async def health(svc: ParkService = Depends(get_service)) -> HealthResponse:
        modules = {
            "vector_store": await _vector_store_health(svc),
            "tool_bridge": _tool_bridge_health(bridge),
            "generation_model": _generation_model_health(svc),
        }
        all_healthy = all(module.status == "healthy" for module in modules.values())
        return HealthResponse(
            status="healthy" if all_healthy else "degraded", modules=modules
        )

    return app


async def _vector_store_summary(store: ParkVectorStore) -> str:
    # Listing collections is a lightweight ping of the database. The park
    # collection is only counted once it exists, so health never creates it.
    names = await store.list_collection_names()
    parks = await store.count() if store.collection_name in names else 0
    return f"{len(names)} collection(s), {parks} park(s) indexed"


async def _vector_store_health(svc: ParkService) -> ModuleHealth:
    outcome = await guard(_vector_store_summary(svc.vector_store))
    if isinstance(outcome, Cancelled):
        outcome.reraise()
    if isinstance(outcome, Failed):
        logger.warning(f"Vector store health check failed: {outcome.error}")
        return ModuleHealth(status="unhealthy", details=str(outcome.error))
    return ModuleHealth(status="healthy", details=outcome.value)


def _tool_bridge_health(bridge: ToolBridge) -> ModuleHealth:
    if not bridge.is_running:
        return ModuleHealth(status="unhealthy", details="Bridge not started")
    names = ", ".join(tool.name for tool in bridge.tools)
    return ModuleHealth(status="healthy", details=f"tools={names}")


def _generation_model_health(svc: ParkService) -> ModuleHealth:
    # Config-only check; the model provider is not called.
    generation = svc.config.generation_model
    if not generation.api_key and not generation.api_base:
        return ModuleHealth(status="unhealthy", details="API key not configured")
    endpoint = generation.api_base or "provider default"
    return ModuleHealth(
        status="healthy", details=f"model={generation.model_name}, endpoint={endpoint}"
    )
