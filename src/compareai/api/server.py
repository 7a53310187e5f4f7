"""
FastAPI server for CompareAI.

Provides the REST endpoints behind the comparison UI: fan-out generation,
the model catalogue, and the bounded prompt history.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import structlog
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from compareai import __version__
from compareai.core.config import get_settings
from compareai.core.errors import InvalidRequest
from compareai.core.models import GenerationRequest
from compareai.core.orchestrator import Orchestrator
from compareai.history.manager import PromptHistory
from compareai.history.store import create_store
from compareai.utils.logging import RequestLogger, setup_logging
from compareai.utils.metrics import metrics

logger = structlog.get_logger()

# Global instances
orchestrator: Orchestrator | None = None
prompt_history: PromptHistory | None = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler."""
    global orchestrator, prompt_history

    setup_logging()
    logger.info("Starting CompareAI API server", version=__version__)

    settings = get_settings()
    orchestrator = Orchestrator()
    prompt_history = PromptHistory(
        create_store(settings.redis, path=settings.compare.history_file),
        key=settings.compare.history_key,
        max_items=settings.compare.history_max_items,
    )

    logger.info(
        "Services initialized",
        available_models=orchestrator.available_models,
    )

    yield

    await orchestrator.aclose()
    logger.info("Shutting down CompareAI API server")


async def validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Report malformed bodies as 400 with the error envelope."""
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="CompareAI API",
        description="Compare responses from multiple AI models side by side",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    return app


app = create_app()


# Request Models

class GenerateRequest(BaseModel):
    """Prompt and the models to compare."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    prompt: str = Field(default="", description="The prompt to send")
    model_ids: list[str] | None = Field(
        default=None,
        alias="modelIds",
        description="Registry ids of the models to query",
    )

    def to_generation_request(self) -> GenerationRequest:
        return GenerationRequest(prompt=self.prompt, model_ids=self.model_ids or [])


class HistoryCreate(BaseModel):
    """A prompt to add to the history."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    prompt: str = Field(..., min_length=1)
    model_ids: list[str] = Field(default_factory=list, alias="modelIds")


# Dependencies

def get_orchestrator() -> Orchestrator:
    """Get the orchestrator instance."""
    if orchestrator is None:
        raise HTTPException(status_code=503, detail="Orchestrator not initialized")
    return orchestrator


def get_prompt_history() -> PromptHistory:
    """Get the prompt history instance."""
    if prompt_history is None:
        raise HTTPException(status_code=503, detail="Prompt history not initialized")
    return prompt_history


# Routes

@app.get("/")
async def root() -> dict[str, str]:
    """API information endpoint."""
    return {
        "name": "CompareAI API",
        "version": __version__,
        "description": "Compare responses from multiple AI models side by side",
    }


@app.get("/health")
async def health(orch: Orchestrator = Depends(get_orchestrator)) -> dict[str, Any]:
    """Report configured providers."""
    return {
        "status": "healthy",
        "providers": [p.value for p in orch.providers.available_providers],
    }


@app.get("/metrics")
async def get_metrics() -> dict[str, Any]:
    """Live and fallback counters."""
    return metrics.get_summary()


@app.get("/api/models")
async def list_models(orch: Orchestrator = Depends(get_orchestrator)) -> list[dict[str, Any]]:
    """List every registered model and whether it can be queried."""
    return orch.list_models()


@app.post("/api/generate")
async def generate(
    request: GenerateRequest,
    orch: Orchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    """Send the prompt to every requested model and return all responses."""
    generation = request.to_generation_request()
    try:
        with RequestLogger(logger, "generate", model_ids=generation.model_ids):
            aggregate = await orch.run(generation)
            body = aggregate.to_wire()
    except InvalidRequest as e:
        return JSONResponse(status_code=400, content={"error": e.message})
    except Exception as e:
        logger.exception("API route error")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Failed to generate response",
                "details": str(e) or type(e).__name__,
            },
        )

    return JSONResponse(status_code=200, content=body)


@app.get("/api/history")
async def get_history(history: PromptHistory = Depends(get_prompt_history)) -> dict[str, Any]:
    """Return the stored prompts, newest first."""
    return {"history": [item.to_dict() for item in history.list()]}


@app.post("/api/history", status_code=201)
async def save_history(
    request: HistoryCreate,
    history: PromptHistory = Depends(get_prompt_history),
) -> dict[str, Any]:
    """Add a prompt to the history."""
    return history.save(request.prompt, request.model_ids).to_dict()


@app.delete("/api/history/{item_id}")
async def delete_history_item(
    item_id: str,
    history: PromptHistory = Depends(get_prompt_history),
) -> JSONResponse:
    """Remove one history entry."""
    if not history.delete(item_id):
        return JSONResponse(status_code=404, content={"error": "History item not found"})
    return JSONResponse(status_code=200, content={"status": "deleted", "id": item_id})


@app.delete("/api/history")
async def clear_history(history: PromptHistory = Depends(get_prompt_history)) -> dict[str, str]:
    """Remove every history entry."""
    history.clear()
    return {"status": "cleared"}


def run_server(
    host: str = "0.0.0.0",
    port: int = 8000,
    reload: bool = False,
) -> None:
    """Run the API server."""
    import uvicorn
    uvicorn.run(
        "compareai.api.server:app",
        host=host,
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    run_server()
