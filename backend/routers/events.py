"""
Backend Router — Events
=========================

GET /events?since=N — Ledger transitions in application order
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel

from backend.config import get_ledger

router = APIRouter(tags=["Events"])


class EventResponse(BaseModel):
    sequence: int
    kind: str
    actor: str
    subject: Optional[str] = None
    detail: dict = {}


class EventsResponse(BaseModel):
    since: int
    events: list[EventResponse]


@router.get("/events", response_model=EventsResponse)
async def get_events(since: int = Query(default=0, ge=0)):
    """Return journal entries with ``sequence >= since``."""
    ledger, _ = get_ledger()
    return EventsResponse(
        since=since,
        events=[
            EventResponse(
                sequence=e.sequence,
                kind=e.kind.value,
                actor=e.actor,
                subject=e.subject,
                detail=e.detail,
            )
            for e in ledger.events(since)
        ],
    )
