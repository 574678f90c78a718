"""Test helper utilities for talent bank tests."""

from .builders import (
    AUTH_CTX,
    ANON_CTX,
    make_candidate,
    make_job,
    seed_candidates,
    seed_jobs,
    seed_talent_bank,
)
from .fake_catalog import FakeJobCatalog

__all__ = [
    "AUTH_CTX",
    "ANON_CTX",
    "FakeJobCatalog",
    "make_candidate",
    "make_job",
    "seed_candidates",
    "seed_jobs",
    "seed_talent_bank",
]
