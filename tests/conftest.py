"""Shared fixtures for clarity-canvas tests."""

from __future__ import annotations

import pytest

from clarity_canvas.models import Profile, ProfileField, Section, Subsection
from clarity_canvas.persistence import MemoryPersistenceBackend, ProfileStore
from clarity_canvas.schema import build_profile
from clarity_canvas.synthesis import ExtractiveSynthesizer, SynthesisEngine
from tests.fakes.fake_clock import TickingClock


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def engine(clock: TickingClock) -> SynthesisEngine:
    """Synthesis engine with the deterministic extractive generator."""
    return SynthesisEngine(ExtractiveSynthesizer(), clock=clock)


@pytest.fixture
def store() -> ProfileStore:
    return ProfileStore(MemoryPersistenceBackend())


@pytest.fixture
def profile() -> Profile:
    """Full-schema empty profile."""
    return build_profile("user-1", name="Ada")


@pytest.fixture
def tiny_profile() -> Profile:
    """One section → one subsection → one field, for exact score arithmetic."""
    return Profile(
        id="tiny",
        sections=[
            Section(
                key="individual",
                name="Individual",
                order=1,
                subsections=[
                    Subsection(
                        key="background",
                        name="Background & Identity",
                        order=1,
                        fields=[ProfileField(key="career", name="Career")],
                    )
                ],
            )
        ],
    )
