"""Application services shared by the HTTP API and the CLI."""

from __future__ import annotations

from clarity_canvas.services.container import Services, build_services
from clarity_canvas.services.profile_service import (
    FieldView,
    ProfileService,
    ProfileView,
    SectionView,
    SourceView,
    WeakFieldView,
)
from clarity_canvas.services.review_service import ReviewService

__all__ = [
    "FieldView",
    "ProfileService",
    "ProfileView",
    "ReviewService",
    "SectionView",
    "Services",
    "SourceView",
    "WeakFieldView",
    "build_services",
]
