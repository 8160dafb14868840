"""FastAPI application exposing quiz generation and export."""

import json
import logging
import os
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any
from urllib.parse import quote

from fastapi import Body, Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from src.config.settings import get_settings
from src.errors import CLIENT_ERRORS, InvalidInputError, QuizGenerationError
from src.export.docx_generator import (
    DOCX_MEDIA_TYPE,
    build_export_filename,
    export_quiz_to_docx,
)
from src.graph.workflow import generate_quiz
from src.models.quiz import ExportRequest, GenerationOptions
from src.pipeline.service import GenerationService, OpenAIAssistantsService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    yield


openapi_tags = [
    {"name": "System", "description": "System and service endpoints"},
    {"name": "Quizzes", "description": "Quiz generation and export endpoints"},
]

app = FastAPI(
    title="Document Quiz Generator",
    description="Generates quizzes with answer keys from uploaded PDF documents.",
    version="0.1.0",
    openapi_tags=openapi_tags,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ALLOW_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(status_code: int, message: str) -> JSONResponse:
    """Uniform error payload."""
    return JSONResponse(
        status_code=status_code, content={"success": False, "error": message}
    )


@app.exception_handler(QuizGenerationError)
async def quiz_generation_error_handler(request: Request, exc: QuizGenerationError):
    if isinstance(exc, CLIENT_ERRORS):
        return error_response(400, str(exc))
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return error_response(500, str(exc))


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0]["msg"] if errors else "Invalid request"
    return error_response(400, f"Invalid request: {message}")


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unexpected error on %s %s", request.method, request.url.path)
    return error_response(500, str(exc) or "An unknown error occurred")


# PUBLIC_INTERFACE
def get_generation_service() -> GenerationService:
    """Return the shared remote generation service."""
    return _get_service_singleton()


@lru_cache(maxsize=1)
def _get_service_singleton() -> GenerationService:
    return OpenAIAssistantsService(settings=get_settings())


def parse_options(raw_options: str) -> GenerationOptions:
    """
    Parse the JSON-encoded options form field.

    Raises:
        InvalidInputError: If the field is not valid JSON or not valid options
    """
    try:
        return GenerationOptions.model_validate(json.loads(raw_options))
    except json.JSONDecodeError as e:
        raise InvalidInputError(f"Options are not valid JSON: {e}") from e
    except ValidationError as e:
        raise InvalidInputError(f"Invalid options: {e.errors()[0]['msg']}") from e


@app.get("/health", summary="Health Check", tags=["System"])
def health_check():
    """Report that the service is up."""
    return {"status": "ok"}


@app.post(
    "/api/generate",
    summary="Generate quiz from a document",
    description="Accepts a PDF upload, JSON-encoded generation options and an optional focus area, and returns the generated items.",
    tags=["Quizzes"],
)
def generate(
    file: UploadFile | None = File(default=None),
    options: str | None = Form(default=None),
    focusArea: str | None = Form(default=None),
    service: GenerationService = Depends(get_generation_service),
) -> dict[str, Any]:
    """
    Generate quiz items from an uploaded document.

    Returns:
        {"questions": [...]} in generator order

    Raises:
        InvalidInputError: Missing file or options (400)
        QuizGenerationError: Any downstream failure (500)
    """
    if file is None or not options:
        raise InvalidInputError("Missing file or options")

    generation_options = parse_options(options)
    document = file.file.read()
    source_label = file.filename or "document"

    logger.info(
        "Generating %d questions from %s (%d bytes)",
        generation_options.num_questions,
        source_label,
        len(document),
    )
    items = generate_quiz(
        document,
        generation_options,
        focus_hint=focusArea or "",
        source_label=source_label,
        service=service,
    )
    return items.model_dump(mode="json", exclude_none=True)


@app.post(
    "/api/download",
    summary="Export quiz as a document",
    description="Renders questions and an answer key to a .docx file named after the title.",
    tags=["Quizzes"],
    response_class=Response,
)
def download(payload: dict[str, Any] | None = Body(default=None)) -> Response:
    """
    Render a quiz to a downloadable .docx document.

    Raises:
        InvalidInputError: Missing questions or title (400)
    """
    payload = payload or {}
    if not payload.get("questions") or not payload.get("title"):
        raise InvalidInputError("Missing questions or title")
    try:
        request = ExportRequest.model_validate(payload)
    except ValidationError as e:
        raise InvalidInputError(f"Invalid questions or title: {e.errors()[0]['msg']}") from e

    data = export_quiz_to_docx(request.questions, request.title)
    filename = build_export_filename(request.title)
    ascii_name = filename.encode("ascii", "ignore").decode().replace('"', "") or "quiz.docx"
    headers = {
        "Content-Disposition": (
            f'attachment; filename="{ascii_name}"; filename*=UTF-8\'\'{quote(filename)}'
        )
    }
    return Response(content=data, media_type=DOCX_MEDIA_TYPE, headers=headers)
