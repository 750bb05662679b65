"""
Ledger Engine — Data Models
============================

Pydantic models for the ledger's records, its transition journal and
the full persisted state. ``LedgerState`` is exactly what gets written
to disk by ``ledger_engine.store``.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


# ─────────────────────────────────────────────────────────────────────────────
# Enums
# ─────────────────────────────────────────────────────────────────────────────
class EventKind(str, Enum):
    PROFILE_CREATED = "profile-created"
    PROFILE_UPDATED = "profile-updated"
    REPUTATION_INCREASED = "reputation-increased"
    COURSE_CREATED = "course-created"
    ENROLLED = "enrolled"
    POST_CREATED = "post-created"
    POST_LIKED = "post-liked"
    CONNECTION_ADDED = "connection-added"


# ─────────────────────────────────────────────────────────────────────────────
# Records
# ─────────────────────────────────────────────────────────────────────────────
class Profile(BaseModel):
    """Learner profile, one per identity."""
    owner: str
    username: str = ""
    bio: str = ""
    skills: list[str] = Field(default_factory=list)
    reputation: int = Field(default=0, ge=0)
    exists: bool = False


class Course(BaseModel):
    """A course; title and description never change after creation."""
    id: int
    title: str = ""
    description: str = ""
    creator: str = ""
    enrollment_count: int = Field(default=0, ge=0)
    exists: bool = False


class Post(BaseModel):
    """A feed post with its like counter."""
    id: int
    author: str = ""
    content: str = ""
    likes: int = Field(default=0, ge=0)
    exists: bool = False


class LedgerEvent(BaseModel):
    """One successful transition, in application order."""
    sequence: int = Field(ge=0)
    kind: EventKind
    actor: str
    subject: Optional[str] = None
    detail: dict = Field(default_factory=dict)


# ─────────────────────────────────────────────────────────────────────────────
# State
# ─────────────────────────────────────────────────────────────────────────────
class LedgerState(BaseModel):
    """Everything the ledger owns.

    Courses and posts are dense lists, so a record's id is its index.
    Profiles, enrollments and connections are keyed by identity.
    """
    administrator: str
    profiles: dict[str, Profile] = Field(default_factory=dict)
    courses: list[Course] = Field(default_factory=list)
    posts: list[Post] = Field(default_factory=list)
    enrollments: dict[str, list[int]] = Field(default_factory=dict)
    connections: dict[str, list[str]] = Field(default_factory=dict)
    events: list[LedgerEvent] = Field(default_factory=list)
