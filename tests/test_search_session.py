"""
Tests for search_session.py: debounce and stale-result discarding
"""

import asyncio

from models import SearchFilter
from opportunity_ranker import OpportunityRanker
from search_session import SearchSession


class SlowStore:
    """Responde más tarde a las consultas con texto 'slow'."""

    def __init__(self, postings):
        self.postings = postings
        self.fetch_calls = 0

    async def fetch_active_opportunities(self, predicates, limit):
        self.fetch_calls += 1
        await asyncio.sleep(0.05 if predicates.text == "slow" else 0.0)
        return list(self.postings)


def test_debounce_coalesces_rapid_edits(make_posting, config, now):
    store = SlowStore([make_posting("opp-1", skills="Design")])
    session = SearchSession(OpportunityRanker(store, config), debounce_ms=20)

    async def scenario():
        return await asyncio.gather(
            session.submit(SearchFilter(query="de"), now=now),
            session.submit(SearchFilter(query="des"), now=now),
            session.submit(SearchFilter(query="design"), now=now),
        )

    first, second, last = asyncio.run(scenario())

    assert first is None and second is None
    assert [r.posting.id for r in last] == ["opp-1"]
    assert store.fetch_calls == 1
    assert session.latest_key == SearchFilter(query="design").cache_key()


def test_stale_response_does_not_overwrite_fresh_results(make_posting, config, now):
    store = SlowStore([make_posting("opp-1", skills="Design")])
    session = SearchSession(OpportunityRanker(store, config), debounce_ms=0)

    async def scenario():
        slow = asyncio.create_task(session.submit(SearchFilter(query="slow"), now=now))
        await asyncio.sleep(0.01)
        fast = await session.submit(SearchFilter(query="fast"), now=now)
        return await slow, fast

    slow_result, fast_result = asyncio.run(scenario())

    assert slow_result is None
    assert fast_result is not None
    assert session.discarded == 1
    assert session.latest_key == SearchFilter(query="fast").cache_key()
    assert store.fetch_calls == 2
