"""Review session endpoints: triage recommendations, bulk approval, commit."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request, Response

from clarity_canvas.api.schemas import (
    BulkApprovalResponse,
    CommitResponse,
    RecommendationResponse,
    RefineRequest,
    SessionResponse,
)
from clarity_canvas.exceptions import CollaboratorNotConfigured
from clarity_canvas.services import Services

log = logging.getLogger(__name__)

router = APIRouter(tags=["review"])


@router.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str, req: Request) -> SessionResponse:
    services: Services = req.app.state.services
    return SessionResponse.from_session(services.sessions.get(session_id))


@router.delete("/sessions/{session_id}", status_code=204)
async def abandon_session(session_id: str, req: Request) -> Response:
    """Drop a session without committing anything."""
    services: Services = req.app.state.services
    services.sessions.get(session_id)
    services.sessions.discard(session_id)
    return Response(status_code=204)


@router.post(
    "/sessions/{session_id}/recommendations/{recommendation_id}/approve",
    response_model=RecommendationResponse,
)
async def approve(session_id: str, recommendation_id: str, req: Request) -> RecommendationResponse:
    services: Services = req.app.state.services
    rec = services.sessions.get(session_id).approve(recommendation_id)
    return RecommendationResponse.from_recommendation(rec)


@router.post(
    "/sessions/{session_id}/recommendations/{recommendation_id}/reject",
    response_model=RecommendationResponse,
)
async def reject(session_id: str, recommendation_id: str, req: Request) -> RecommendationResponse:
    services: Services = req.app.state.services
    rec = services.sessions.get(session_id).reject(recommendation_id)
    return RecommendationResponse.from_recommendation(rec)


@router.post(
    "/sessions/{session_id}/recommendations/{recommendation_id}/undo",
    response_model=RecommendationResponse,
)
async def undo(session_id: str, recommendation_id: str, req: Request) -> RecommendationResponse:
    """Return a reviewed item to pending and clear any refinement."""
    services: Services = req.app.state.services
    rec = services.sessions.get(session_id).undo(recommendation_id)
    return RecommendationResponse.from_recommendation(rec)


@router.post(
    "/sessions/{session_id}/recommendations/{recommendation_id}/refine",
    response_model=RecommendationResponse,
)
async def refine(
    session_id: str,
    recommendation_id: str,
    request: RefineRequest,
    req: Request,
) -> RecommendationResponse:
    """Apply explicit content, or ask the refiner to rewrite per ``instruction``."""
    services: Services = req.app.state.services
    session = services.sessions.get(session_id)

    if request.content is not None:
        rec = session.refine(recommendation_id, request.content, request.summary)
    elif request.instruction:
        if services.refiner is None:
            raise CollaboratorNotConfigured("No refiner configured")
        rec = await session.refine_with(recommendation_id, services.refiner, request.instruction)
    else:
        raise HTTPException(status_code=422, detail="Provide content or instruction")
    return RecommendationResponse.from_recommendation(rec)


@router.post("/sessions/{session_id}/approve-all", response_model=BulkApprovalResponse)
async def approve_all(session_id: str, req: Request, override: bool = False) -> BulkApprovalResponse:
    services: Services = req.app.state.services
    result = services.sessions.get(session_id).approve_all(override=override)
    return BulkApprovalResponse.from_result(result)


@router.post("/sessions/{session_id}/sections/{section}/approve", response_model=BulkApprovalResponse)
async def approve_section(
    session_id: str,
    section: str,
    req: Request,
    override: bool = False,
) -> BulkApprovalResponse:
    services: Services = req.app.state.services
    result = services.sessions.get(session_id).approve_section(section, override=override)
    return BulkApprovalResponse.from_result(result)


@router.post("/sessions/{session_id}/commit", response_model=CommitResponse)
async def commit(session_id: str, req: Request) -> CommitResponse:
    """Apply approved and refined items to the profile; the session closes on success."""
    services: Services = req.app.state.services
    result = await services.reviews.commit_session(session_id)
    return CommitResponse.from_result(result)
