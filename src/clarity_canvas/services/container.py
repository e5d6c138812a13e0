"""Wires the core components together from :class:`AppSettings`."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

from clarity_canvas.commit import CommitPipeline, ProfileLocks
from clarity_canvas.core.config import AppSettings
from clarity_canvas.interfaces import IExtractor, IRefiner, ISynthesisGenerator
from clarity_canvas.persistence import IPersistenceBackend, ProfileStore, create_backend
from clarity_canvas.review import SessionRegistry
from clarity_canvas.schema import get_schema
from clarity_canvas.scoring import ScoringPolicy
from clarity_canvas.services.profile_service import ProfileService
from clarity_canvas.services.review_service import ReviewService
from clarity_canvas.synthesis import ExtractiveSynthesizer, SynthesisEngine

log = logging.getLogger(__name__)


@dataclass
class Services:
    settings: AppSettings
    store: ProfileStore
    engine: SynthesisEngine
    pipeline: CommitPipeline
    sessions: SessionRegistry
    profiles: ProfileService
    reviews: ReviewService
    refiner: IRefiner | None = None


def _default_generator(settings: AppSettings) -> ISynthesisGenerator:
    if settings.synthesis.generator == "llm":
        from clarity_canvas.providers.llm import LLMClient, LLMSynthesizer

        return LLMSynthesizer(LLMClient(settings.llm))
    return ExtractiveSynthesizer()


def build_services(
    settings: AppSettings,
    *,
    backend: IPersistenceBackend | None = None,
    generator: ISynthesisGenerator | None = None,
    extractor: IExtractor | None = None,
    refiner: IRefiner | None = None,
    use_llm_collaborators: bool = True,
) -> Services:
    """Build every component; explicit collaborators override the configured ones."""
    schema = get_schema()
    policy = ScoringPolicy.from_config(settings.scoring)
    store = ProfileStore(backend or create_backend(settings.persistence))

    engine = SynthesisEngine(
        generator or _default_generator(settings),
        summary_max_chars=settings.synthesis.summary_max_chars,
        context_max_chars=settings.synthesis.context_max_chars,
        conflict_confidence_threshold=settings.synthesis.conflict_confidence_threshold,
    )

    if use_llm_collaborators and (extractor is None or refiner is None):
        from clarity_canvas.providers.llm import LLMClient, LLMExtractor, LLMRefiner

        client = LLMClient(settings.llm)
        extractor = extractor or LLMExtractor(
            client, schema=schema, summary_max_chars=settings.synthesis.summary_max_chars
        )
        refiner = refiner or LLMRefiner(client, summary_max_chars=settings.synthesis.summary_max_chars)

    locks = ProfileLocks()
    pipeline = CommitPipeline(store, engine, locks=locks, policy=policy, schema=schema)
    sessions = SessionRegistry()

    log.debug(
        "Services built: generator=%s, backend=%s",
        type(generator).__name__ if generator else settings.synthesis.generator,
        type(store.backend).__name__,
    )
    return Services(
        settings=settings,
        store=store,
        engine=engine,
        pipeline=pipeline,
        sessions=sessions,
        profiles=ProfileService(
            store,
            engine,
            locks=locks,
            policy=policy,
            schema=schema,
            freshness_window=timedelta(seconds=settings.synthesis.freshness_window_seconds),
            refiner=refiner,
            summary_max_chars=settings.synthesis.summary_max_chars,
            context_max_chars=settings.synthesis.context_max_chars,
        ),
        reviews=ReviewService(
            store,
            pipeline,
            sessions,
            extractor=extractor,
            low_confidence_threshold=settings.review.low_confidence_threshold,
            schema=schema,
        ),
        refiner=refiner,
    )
