"""
Tests for opportunity_store.py (SQLAlchemy and in-memory stores)
"""

import asyncio

import pytest

from opportunity_store import InMemoryOpportunityStore, SearchPredicates, SqlOpportunityStore
from sample_data import build_sample_postings


@pytest.fixture
def sql_store(tmp_path):
    return SqlOpportunityStore(f"sqlite:///{tmp_path / 'opportunities.db'}")


def _fetch(store, predicates=None, limit=200):
    return asyncio.run(store.fetch_active_opportunities(predicates or SearchPredicates(), limit))


def test_sql_store_round_trips_postings(sql_store, make_posting):
    posting = make_posting("opp-1", skills="Ensino, Comunicação", hours=12, location="Aracaju", organization_ref="ajosse")
    assert sql_store.save_postings([posting]) == 1

    [loaded] = _fetch(sql_store)

    assert loaded == posting


def test_sql_store_save_is_upsert(sql_store, make_posting):
    sql_store.save_postings([make_posting("opp-1", title="Antigo")])
    sql_store.save_postings([make_posting("opp-1", title="Novo")])

    assert [p.title for p in _fetch(sql_store)] == ["Novo"]


def test_sql_store_filters_and_orders(sql_store, make_posting):
    sql_store.save_postings([
        make_posting("old", hours=10, location="Aracaju", days_old=5),
        make_posting("new", hours=10, location="aracaju", days_old=1),
        make_posting("long", hours=50, location="Aracaju"),
        make_posting("away", hours=10, location="Lagarto"),
        make_posting("inactive", hours=10, location="Aracaju", active=False),
    ])

    rows = _fetch(sql_store, SearchPredicates(min_hours=0, max_hours=40, locations=("Aracaju",)))

    assert [p.id for p in rows] == ["new", "old"]


def test_sql_store_text_predicate_and_limit(sql_store, make_posting):
    sql_store.save_postings([
        make_posting("a", title="Social Media", days_old=1),
        make_posting("b", description="Gerenciar redes sociais", days_old=2),
        make_posting("c", skills="Marketing, Redes Sociais", days_old=3),
        make_posting("d", title="Contador"),
    ])

    rows = _fetch(sql_store, SearchPredicates(text="socia"))
    assert [p.id for p in rows] == ["a", "b", "c"]

    assert len(_fetch(sql_store, SearchPredicates(text="socia"), limit=2)) == 2


def test_sql_store_escapes_like_wildcards(sql_store, make_posting):
    sql_store.save_postings([make_posting("a", title="Desconto 100%"), make_posting("b", title="Outro")])

    assert [p.id for p in _fetch(sql_store, SearchPredicates(text="%"))] == ["a"]


def test_in_memory_store_matches_sql_semantics(make_posting):
    postings = build_sample_postings()
    store = InMemoryOpportunityStore(postings + [make_posting("off", active=False)])

    rows = _fetch(store, SearchPredicates(min_hours=10, max_hours=15))

    assert rows
    assert all(10 <= p.estimated_hours <= 15 for p in rows)
    assert [p.created_at for p in rows] == sorted((p.created_at for p in rows), reverse=True)
    assert "off" not in {p.id for p in rows}


def test_predicates_cache_key_ignores_location_order():
    a = SearchPredicates(locations=("Aracaju", "Lagarto"))
    b = SearchPredicates(locations=("Lagarto", "Aracaju"))
    assert a.cache_key() == b.cache_key()


def test_sql_store_serves_concurrent_fetches(sql_store, make_posting):
    sql_store.save_postings([make_posting("a", location="Aracaju"), make_posting("b", location="Lagarto")])

    async def scenario():
        return await asyncio.gather(
            sql_store.fetch_active_opportunities(SearchPredicates(locations=("Aracaju",)), 10),
            sql_store.fetch_active_opportunities(SearchPredicates(locations=("Lagarto",)), 10),
        )

    here, away = asyncio.run(scenario())

    assert [p.id for p in here] == ["a"]
    assert [p.id for p in away] == ["b"]
