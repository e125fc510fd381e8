"""FastAPI application exposing the slash-command webhook."""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from fastapi import BackgroundTasks, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ValidationError

from ..bootstrap import build_orchestrator
from ..config import ChangeBotConfig
from ..logging import get_logger
from ..orchestrator import CommandOrchestrator

logger = get_logger("service")


class SlashCommandPayload(BaseModel):
    text: str = ""
    response_url: Optional[str] = None
    user_name: Optional[str] = None


def create_app(
    orchestrator_factory: Callable[[], CommandOrchestrator] = build_orchestrator,
) -> FastAPI:
    """Create the FastAPI application; the orchestrator is built once, at start-up."""

    orchestrator = orchestrator_factory()
    app = FastAPI(title="changebot", version="1.0.0")
    app.state.orchestrator = orchestrator

    @app.get("/liveness_check", response_class=PlainTextResponse)
    async def liveness_check() -> str:
        return "OK"

    @app.get("/readiness_check", response_class=PlainTextResponse)
    async def readiness_check() -> str:
        return "OK"

    @app.post("/slack/command", response_class=PlainTextResponse)
    async def slash_command(request: Request, background_tasks: BackgroundTasks) -> str:
        payload = SlashCommandPayload.model_validate(await _read_payload(request))
        ack = orchestrator.acknowledge(payload.text, payload.response_url)
        if ack.command is None:
            logger.info("Rejected command from %s: %s", payload.user_name or "unknown", ack.message)
            return ack.message

        logger.info(
            "Accepted command from %s for %s", payload.user_name or "unknown", ack.command.repo_ref
        )
        background_tasks.add_task(orchestrator.handle, ack.command)
        return ack.message

    @app.exception_handler(ValidationError)
    async def validation_error_handler(
        _: Any, exc: ValidationError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=422, content={"detail": exc.errors()})

    return app


async def _read_payload(request: Request) -> Dict[str, Any]:
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            logger.warning("Ignoring malformed JSON command payload")
            return {}
        return body if isinstance(body, dict) else {}
    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}


def run_service(
    config: ChangeBotConfig | None = None, *, host: str = "0.0.0.0", port: int = 8080
) -> None:
    """Build the application for ``config`` and serve it with uvicorn."""
    import uvicorn

    app = create_app(lambda: build_orchestrator(config))
    uvicorn.run(app, host=host, port=port)


__all__ = ["SlashCommandPayload", "create_app", "run_service"]
