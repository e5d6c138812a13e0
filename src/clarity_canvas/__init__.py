"""clarity-canvas: review extracted facts, synthesize them into a profile, score its completeness.

Typical flow::

    from clarity_canvas import (
        AppSettings, build_services,
        accept_chunks, ReviewSession,
        CommitPipeline, calculate_all_scores,
    )
"""

from __future__ import annotations

from clarity_canvas.commit import CommitPipeline, CommitResult, ProfileLocks
from clarity_canvas.core.config import AppSettings
from clarity_canvas.exceptions import (
    ChunkValidationError,
    ClarityError,
    ConcurrentModification,
    InvalidTransition,
    PersistenceFailure,
    ProfileNotFound,
    SynthesisError,
    UnknownField,
    UnknownRecommendation,
    UnknownSession,
    UnknownSource,
)
from clarity_canvas.models import (
    ExtractionChunk,
    FieldPath,
    InputType,
    Profile,
    ProfileField,
    ProfileScores,
    Section,
    Source,
    Subsection,
)
from clarity_canvas.persistence import ProfileStore
from clarity_canvas.review import (
    BulkApproval,
    LowConfidenceGate,
    Recommendation,
    RecommendationStatus,
    ReviewSession,
    SessionRegistry,
    accept_chunks,
)
from clarity_canvas.schema import ProfileSchema, build_profile, get_schema
from clarity_canvas.scoring import ScoreBucket, bucket, calculate_all_scores, field_score
from clarity_canvas.services import Services, build_services
from clarity_canvas.synthesis import ExtractiveSynthesizer, SourceDraft, SynthesisEngine

__all__ = [
    "AppSettings",
    "BulkApproval",
    "ChunkValidationError",
    "ClarityError",
    "CommitPipeline",
    "CommitResult",
    "ConcurrentModification",
    "ExtractionChunk",
    "ExtractiveSynthesizer",
    "FieldPath",
    "InputType",
    "InvalidTransition",
    "LowConfidenceGate",
    "PersistenceFailure",
    "Profile",
    "ProfileField",
    "ProfileLocks",
    "ProfileNotFound",
    "ProfileSchema",
    "ProfileScores",
    "ProfileStore",
    "Recommendation",
    "RecommendationStatus",
    "ReviewSession",
    "ScoreBucket",
    "Section",
    "Services",
    "SessionRegistry",
    "Source",
    "SourceDraft",
    "Subsection",
    "SynthesisEngine",
    "SynthesisError",
    "UnknownField",
    "UnknownRecommendation",
    "UnknownSession",
    "UnknownSource",
    "accept_chunks",
    "bucket",
    "build_profile",
    "build_services",
    "calculate_all_scores",
    "field_score",
    "get_schema",
]
