"\"\"\"HTTP surface for batch analysis.\"\"\""

from __future__ import annotations

import json
from typing import Any

import structlog
from fastapi import APIRouter, FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from . import __version__
from .container import create_container
from .pipeline import AnalysisPipeline, InvalidRequestError
from .schemas import AnalyzeRequest

logger = structlog.get_logger(__name__)

router = APIRouter()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def _validation_message(exc: ValidationError) -> str:
    first = exc.errors()[0]
    message = str(first.get("msg", "Invalid request"))
    if message.startswith("Value error, "):
        return message[len("Value error, "):]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {message}" if location else message


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": __version__}


@router.post("/analyze")
async def analyze(request: Request) -> Any:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _error(status.HTTP_400_BAD_REQUEST, "Request body must be valid JSON")
    if not isinstance(body, dict):
        return _error(status.HTTP_400_BAD_REQUEST, "Request body must be a JSON object")

    pipeline: AnalysisPipeline = request.app.state.pipeline
    try:
        payload = AnalyzeRequest.model_validate(body)
        response = await pipeline.analyze_request(payload)
    except ValidationError as exc:
        return _error(status.HTTP_400_BAD_REQUEST, _validation_message(exc))
    except InvalidRequestError as exc:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))
    except Exception:  # noqa: BLE001
        logger.exception("analyze.failed")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to analyze candidates")

    content = response.to_wire()
    if content.get("errors") is None:
        content.pop("errors", None)
    return JSONResponse(status_code=status.HTTP_200_OK, content=content)


def create_app(pipeline: AnalysisPipeline | None = None, *, settings: dict | None = None) -> FastAPI:
    """Build the FastAPI application around a configured pipeline."""
    if pipeline is None:
        pipeline = create_container(settings=settings).pipeline()

    app = FastAPI(title="forgerank", version=__version__)
    app.state.pipeline = pipeline
    app.include_router(router)
    return app
