"""Global exception handlers mapping domain exceptions to HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from clarity_canvas.exceptions import (
    ChunkValidationError,
    ClarityError,
    CollaboratorNotConfigured,
    ConcurrentModification,
    InvalidTransition,
    JSONParseError,
    LLMClientError,
    PersistenceFailure,
    ProfileNotFound,
    SynthesisError,
    UnknownField,
    UnknownRecommendation,
    UnknownSection,
    UnknownSession,
    UnknownSource,
)

log = logging.getLogger(__name__)

# Handlers resolve along the exception MRO, so the not-found types need their
# own entries ahead of the ClarityError catch-all.
_NOT_FOUND = (
    ProfileNotFound,
    UnknownSession,
    UnknownRecommendation,
    UnknownSource,
    UnknownField,
    UnknownSection,
)


def _error(status_code: int, exc: Exception, kind: str) -> JSONResponse:
    message = exc.args[0] if isinstance(exc, KeyError) and exc.args else str(exc)
    return JSONResponse(status_code=status_code, content={"error": message, "type": kind})


def register_error_handlers(app: FastAPI) -> None:
    """Register exception-to-HTTP-status mappings."""

    @app.exception_handler(ChunkValidationError)
    async def handle_chunk_error(request: Request, exc: ChunkValidationError) -> JSONResponse:
        return _error(422, exc, "chunk_validation_error")

    @app.exception_handler(InvalidTransition)
    async def handle_transition(request: Request, exc: InvalidTransition) -> JSONResponse:
        return _error(409, exc, "invalid_transition")

    @app.exception_handler(ConcurrentModification)
    async def handle_concurrent(request: Request, exc: ConcurrentModification) -> JSONResponse:
        return _error(409, exc, "concurrent_modification")

    @app.exception_handler(CollaboratorNotConfigured)
    async def handle_missing_collaborator(request: Request, exc: CollaboratorNotConfigured) -> JSONResponse:
        return _error(400, exc, "collaborator_not_configured")

    @app.exception_handler(PersistenceFailure)
    async def handle_persistence(request: Request, exc: PersistenceFailure) -> JSONResponse:
        log.error("Persistence failure on %s: %s", request.url.path, exc)
        return _error(503, exc, "persistence_failure")

    @app.exception_handler(SynthesisError)
    async def handle_synthesis(request: Request, exc: SynthesisError) -> JSONResponse:
        log.error("Synthesis failure on %s: %s", request.url.path, exc)
        return _error(502, exc, "synthesis_error")

    @app.exception_handler(LLMClientError)
    async def handle_llm(request: Request, exc: LLMClientError) -> JSONResponse:
        return _error(502, exc, "llm_error")

    @app.exception_handler(JSONParseError)
    async def handle_json_parse(request: Request, exc: JSONParseError) -> JSONResponse:
        return _error(502, exc, "llm_parse_error")

    async def handle_not_found(request: Request, exc: Exception) -> JSONResponse:
        return _error(404, exc, "not_found")

    for exc_class in _NOT_FOUND:
        app.add_exception_handler(exc_class, handle_not_found)

    @app.exception_handler(ClarityError)
    async def handle_generic_error(request: Request, exc: ClarityError) -> JSONResponse:
        log.error("Unhandled clarity error on %s: %s", request.url.path, exc)
        return _error(500, exc, "clarity_error")

    @app.exception_handler(ValueError)
    async def handle_value_error(request: Request, exc: ValueError) -> JSONResponse:
        return _error(422, exc, "invalid_request")
