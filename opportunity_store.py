#!/usr/bin/env python3
import asyncio
import json
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import Boolean, DateTime, Float, String, Text, create_engine, func, or_
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker

from models import OpportunityPosting
from text_normalizer import parse_skills


@dataclass(frozen=True)
class SearchPredicates:
    """Filtros que el almacén sabe evaluar (siempre en conjunción con active=True)."""

    min_hours: Optional[float] = None
    max_hours: Optional[float] = None
    locations: Tuple[str, ...] = ()
    text: Optional[str] = None

    def cache_key(self) -> str:
        payload = {
            "min_hours": self.min_hours,
            "max_hours": self.max_hours,
            "locations": sorted(self.locations),
            "text": self.text,
        }
        return json.dumps(payload, sort_keys=True, ensure_ascii=False)


class InMemoryOpportunityStore:
    def __init__(self, postings: Optional[Iterable[OpportunityPosting]] = None):
        self._postings: List[OpportunityPosting] = list(postings or [])
        self.fetch_calls = 0

    def save_postings(self, postings: Iterable[OpportunityPosting]) -> int:
        incoming = list(postings)
        ids = {p.id for p in incoming}
        self._postings = [p for p in self._postings if p.id not in ids] + incoming
        return len(incoming)

    async def fetch_active_opportunities(self, predicates: SearchPredicates, limit: int) -> List[OpportunityPosting]:
        self.fetch_calls += 1
        wanted_locations = {loc.strip().lower() for loc in predicates.locations}
        needle = (predicates.text or "").lower()
        rows = []
        for p in self._postings:
            if not p.active:
                continue
            if predicates.min_hours is not None and p.estimated_hours < predicates.min_hours:
                continue
            if predicates.max_hours is not None and p.estimated_hours > predicates.max_hours:
                continue
            if wanted_locations and (p.location or "").strip().lower() not in wanted_locations:
                continue
            if needle:
                haystack = " ".join([p.title, p.description, ", ".join(sorted(p.skills_required))]).lower()
                if needle not in haystack:
                    continue
            rows.append(p)
        rows.sort(key=lambda p: p.created_at, reverse=True)
        return rows[: max(0, limit)]


def _build_engine_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    return "sqlite:///data/opportunities.db"


class Base(DeclarativeBase):
    pass


class OpportunityRow(Base):
    __tablename__ = "opportunities"
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String(256), index=True)
    description: Mapped[str] = mapped_column(Text, default="")
    # CSV como en el producto original: "Ensino, Comunicação"
    skills_required: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    estimated_hours: Mapped[float] = mapped_column(Float, default=0.0)
    location: Mapped[Optional[str]] = mapped_column(String(128), nullable=True, index=True)
    organization_ref: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _row_to_posting(row: OpportunityRow) -> OpportunityPosting:
    created = row.created_at
    # se guardan en UTC sin zona
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return OpportunityPosting(
        id=row.id,
        title=row.title,
        description=row.description or "",
        skills_required=frozenset(parse_skills(row.skills_required)),
        estimated_hours=float(row.estimated_hours or 0.0),
        location=row.location,
        created_at=created,
        active=bool(row.active),
        organization_ref=row.organization_ref,
    )


class SqlOpportunityStore:
    def __init__(self, url: Optional[str] = None):
        self.url = url or _build_engine_url()
        self.engine = create_engine(self.url, echo=False, future=True)
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, autocommit=False, expire_on_commit=False)
        self._initialized = False

    def init_db(self) -> None:
        if self._initialized:
            return
        if self.url.startswith("sqlite:///data/"):
            os.makedirs("data", exist_ok=True)
        Base.metadata.create_all(self.engine)
        self._initialized = True

    def save_postings(self, postings: Iterable[OpportunityPosting]) -> int:
        self.init_db()
        saved = 0
        with self.SessionLocal() as session:
            for p in postings:
                raw_skills = ", ".join(sorted(p.skills_required))
                session.merge(OpportunityRow(
                    id=p.id,
                    title=p.title,
                    description=p.description,
                    skills_required=raw_skills or None,
                    estimated_hours=p.estimated_hours,
                    location=p.location,
                    organization_ref=p.organization_ref,
                    active=p.active,
                    created_at=p.created_at.astimezone(timezone.utc).replace(tzinfo=None),
                ))
                saved += 1
            session.commit()
        return saved

    async def fetch_active_opportunities(self, predicates: SearchPredicates, limit: int) -> List[OpportunityPosting]:
        # la sesión es bloqueante: fuera del event loop
        return await asyncio.to_thread(self._query_active, predicates, limit)

    def _query_active(self, predicates: SearchPredicates, limit: int) -> List[OpportunityPosting]:
        self.init_db()
        with self.SessionLocal() as session:
            query = session.query(OpportunityRow).filter(OpportunityRow.active.is_(True))
            if predicates.min_hours is not None:
                query = query.filter(OpportunityRow.estimated_hours >= predicates.min_hours)
            if predicates.max_hours is not None:
                query = query.filter(OpportunityRow.estimated_hours <= predicates.max_hours)
            if predicates.locations:
                wanted = [loc.strip().lower() for loc in predicates.locations]
                query = query.filter(func.lower(OpportunityRow.location).in_(wanted))
            if predicates.text:
                like = f"%{_escape_like(predicates.text)}%"
                query = query.filter(or_(
                    OpportunityRow.title.ilike(like, escape="\\"),
                    OpportunityRow.description.ilike(like, escape="\\"),
                    OpportunityRow.skills_required.ilike(like, escape="\\"),
                ))
            rows = query.order_by(OpportunityRow.created_at.desc()).limit(max(0, limit)).all()
            return [_row_to_posting(r) for r in rows]

