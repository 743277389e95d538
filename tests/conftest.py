"""
Test fixtures and utilities for the opportunity matching engine tests
"""

from datetime import datetime, timedelta, timezone

import pytest

from engine_config import EngineConfig
from models import OpportunityPosting
from opportunity_ranker import OpportunityRanker
from opportunity_store import InMemoryOpportunityStore
from text_normalizer import parse_skills

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_posting():
    """Factory for postings; skills are given as the raw comma string."""

    def _make(
        id,
        skills="",
        hours=10,
        days_old=0,
        location=None,
        title="Voluntariado",
        description="",
        active=True,
        organization_ref=None,
    ):
        return OpportunityPosting(
            id=id,
            title=title,
            description=description,
            skills_required=frozenset(parse_skills(skills)),
            estimated_hours=float(hours),
            location=location,
            created_at=NOW - timedelta(days=days_old),
            active=active,
            organization_ref=organization_ref,
        )

    return _make


@pytest.fixture
def config():
    return EngineConfig()


@pytest.fixture
def memory_store():
    return InMemoryOpportunityStore()


@pytest.fixture
def ranker(memory_store, config):
    return OpportunityRanker(memory_store, config)


class FailingStore:
    def __init__(self, error=None):
        self.error = error or ConnectionError("store unavailable")
        self.fetch_calls = 0

    async def fetch_active_opportunities(self, predicates, limit):
        self.fetch_calls += 1
        raise self.error


@pytest.fixture
def failing_store():
    return FailingStore()
