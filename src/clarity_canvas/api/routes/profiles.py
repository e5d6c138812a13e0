"""Profile endpoints: create, list, view, delete, extract into a review session, edit fields."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request, Response

from clarity_canvas.api.schemas import (
    CreateProfileRequest,
    CreateProfileResponse,
    ExtractRequest,
    FieldRefinementResponse,
    FieldRefineRequest,
    FieldUpdateRequest,
    OpenSessionRequest,
    ProfileListResponse,
    SessionResponse,
)
from clarity_canvas.exceptions import UnknownField
from clarity_canvas.models import FieldPath, Profile
from clarity_canvas.schema import get_schema
from clarity_canvas.services import ProfileView, Services, SourceView

log = logging.getLogger(__name__)

router = APIRouter(tags=["profiles"])


@router.get("/profiles", response_model=ProfileListResponse)
async def list_profiles(req: Request) -> ProfileListResponse:
    services: Services = req.app.state.services
    return ProfileListResponse(profile_ids=services.profiles.list_profiles())


@router.post("/profiles/{profile_id}", response_model=CreateProfileResponse)
async def create_profile(
    profile_id: str,
    request: CreateProfileRequest,
    req: Request,
    response: Response,
) -> CreateProfileResponse:
    """Create an empty profile. Idempotent: an existing profile is returned as-is."""
    services: Services = req.app.state.services
    profile, created = services.profiles.init_profile(profile_id, name=request.name)
    response.status_code = 201 if created else 200
    return CreateProfileResponse(profile=profile, created=created)


@router.get("/profiles/{profile_id}", response_model=ProfileView)
async def get_profile(profile_id: str, req: Request) -> ProfileView:
    """Profile with scores, buckets, completion and weak fields."""
    services: Services = req.app.state.services
    return services.profiles.view(profile_id)


@router.delete("/profiles/{profile_id}", status_code=204)
async def delete_profile(profile_id: str, req: Request) -> Response:
    services: Services = req.app.state.services
    await services.profiles.delete_profile(profile_id)
    return Response(status_code=204)


@router.post("/profiles/{profile_id}/extract", response_model=SessionResponse, status_code=201)
async def extract(profile_id: str, request: ExtractRequest, req: Request) -> SessionResponse:
    """Run the extractor over captured text and open a review session."""
    services: Services = req.app.state.services
    session = await services.reviews.extract_session(
        profile_id, request.text, scope=request.scope, input_type=request.input_type
    )
    return SessionResponse.from_session(session)


@router.post("/profiles/{profile_id}/sessions", response_model=SessionResponse, status_code=201)
async def open_session(profile_id: str, request: OpenSessionRequest, req: Request) -> SessionResponse:
    """Open a review session from caller-supplied chunks."""
    services: Services = req.app.state.services
    session = services.reviews.open_session(profile_id, request.chunks, input_type=request.input_type)
    return SessionResponse.from_session(session)


# ── Field edits ─────────────────────────────────────────────────────

_FIELD = "/profiles/{profile_id}/fields/{section}/{subsection}/{field}"


def _field_path(section: str, subsection: str, field: str) -> FieldPath:
    path = get_schema().resolve(section, subsection, field)
    if path is None:
        raise UnknownField(f"Unknown field {section}.{subsection}.{field}")
    return path


@router.get(_FIELD + "/sources", response_model=list[SourceView])
async def list_sources(
    profile_id: str,
    section: str,
    subsection: str,
    field: str,
    req: Request,
) -> list[SourceView]:
    """Sources behind a field, most recent first."""
    services: Services = req.app.state.services
    return services.profiles.list_sources(profile_id, _field_path(section, subsection, field))


@router.delete(_FIELD + "/sources/{source_id}", response_model=Profile)
async def remove_source(
    profile_id: str,
    section: str,
    subsection: str,
    field: str,
    source_id: str,
    req: Request,
) -> Profile:
    """Remove one source from a field and re-synthesize the rest."""
    services: Services = req.app.state.services
    path = _field_path(section, subsection, field)
    return await services.profiles.remove_source(profile_id, path, source_id)


@router.post(_FIELD + "/refresh", response_model=Profile)
async def refresh_field(
    profile_id: str,
    section: str,
    subsection: str,
    field: str,
    req: Request,
) -> Profile:
    """Re-synthesize a field from the sources it already has."""
    services: Services = req.app.state.services
    path = _field_path(section, subsection, field)
    return await services.profiles.refresh_field(profile_id, path)


@router.post(_FIELD + "/refine", response_model=FieldRefinementResponse)
async def preview_refinement(
    profile_id: str,
    section: str,
    subsection: str,
    field: str,
    request: FieldRefineRequest,
    req: Request,
) -> FieldRefinementResponse:
    """Ask the refiner for a rewrite of the field. The profile is not changed."""
    services: Services = req.app.state.services
    path = _field_path(section, subsection, field)
    refinement = await services.profiles.preview_refinement(profile_id, path, request.instruction)
    return FieldRefinementResponse.from_refinement(refinement)


@router.patch(_FIELD, response_model=Profile)
async def update_field(
    profile_id: str,
    section: str,
    subsection: str,
    field: str,
    request: FieldUpdateRequest,
    req: Request,
) -> Profile:
    """Save an accepted refinement as a new synthesis of the field."""
    services: Services = req.app.state.services
    path = _field_path(section, subsection, field)
    return await services.profiles.apply_refinement(
        profile_id, path, full_context=request.full_context, summary=request.summary
    )
