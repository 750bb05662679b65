"""
Ledger Engine — State Machine
===============================

The Learnopoly ledger: profiles, courses, enrollments, posts, likes and
connections, mutated one operation at a time.

Rules:
    • Every operation takes the caller identity explicitly.
    • Preconditions are checked before any write, so an operation either
      applies completely or raises and leaves state untouched.
    • Course and post ids are dense and sequential from 0.
    • Nothing is ever deleted; ``exists`` never goes back to False.
    • Only the administrator recorded at creation may raise reputation.
"""

from __future__ import annotations

import logging
from typing import NoReturn, Optional

from ledger_engine.errors import (
    AuthorizationViolation,
    PreconditionViolation,
    RecordNotFound,
)
from ledger_engine.models import (
    Course,
    EventKind,
    LedgerEvent,
    LedgerState,
    Post,
    Profile,
)

logger = logging.getLogger("ledger_engine")


class Ledger:
    """Deterministic single-writer ledger over a ``LedgerState``."""

    def __init__(self, state: LedgerState) -> None:
        self._state = state

    @classmethod
    def create(cls, administrator: str) -> "Ledger":
        """Start an empty ledger administered by ``administrator``."""
        if not administrator:
            raise ValueError("A ledger needs an administrator identity")
        return cls(LedgerState(administrator=administrator))

    @property
    def state(self) -> LedgerState:
        return self._state

    @property
    def administrator(self) -> str:
        return self._state.administrator

    # ── Profiles ──────────────────────────────────────────────────────
    def create_profile(
        self,
        caller: str,
        username: str,
        bio: str,
        skills: list[str],
    ) -> None:
        """Create the caller's profile with zero reputation."""
        existing = self._state.profiles.get(caller)
        if existing is not None and existing.exists:
            self._reject("create_profile", caller, "Profile already exists")

        self._state.profiles[caller] = Profile(
            owner=caller,
            username=username,
            bio=bio,
            skills=list(skills),
            reputation=0,
            exists=True,
        )
        self._record(EventKind.PROFILE_CREATED, caller, caller, {"username": username})
        logger.info("Profile created for %s (%s)", _short(caller), username)

    def update_profile(
        self,
        caller: str,
        username: str,
        bio: str,
        skills: list[str],
    ) -> None:
        """Overwrite username, bio and skills of the caller's own profile."""
        profile = self._state.profiles.get(caller)
        if profile is None or not profile.exists:
            self._reject("update_profile", caller, "Profile does not exist")

        profile.username = username
        profile.bio = bio
        profile.skills = list(skills)
        self._record(EventKind.PROFILE_UPDATED, caller, caller, {"username": username})
        logger.info("Profile updated for %s", _short(caller))

    def increase_reputation(self, caller: str, target: str, amount: int) -> None:
        """Add ``amount`` to ``target``'s reputation. Administrator only.

        A target without a profile keeps the points on a placeholder
        record; creating the profile later starts again from zero.
        """
        if caller != self._state.administrator:
            self._reject(
                "increase_reputation",
                caller,
                "Only the administrator can increase reputation",
                authorization=True,
            )
        if amount < 0:
            self._reject("increase_reputation", caller, "Amount must be non-negative")

        profile = self._state.profiles.get(target)
        if profile is None:
            profile = Profile(owner=target)
            self._state.profiles[target] = profile
        profile.reputation += amount

        self._record(
            EventKind.REPUTATION_INCREASED,
            caller,
            target,
            {"amount": amount, "reputation": profile.reputation},
        )
        logger.info(
            "Reputation of %s +%d → %d", _short(target), amount, profile.reputation
        )

    # ── Courses ───────────────────────────────────────────────────────
    def create_course(self, caller: str, title: str, description: str) -> int:
        """Create a course and return its id."""
        course_id = len(self._state.courses)
        self._state.courses.append(
            Course(
                id=course_id,
                title=title,
                description=description,
                creator=caller,
                enrollment_count=0,
                exists=True,
            )
        )
        self._record(EventKind.COURSE_CREATED, caller, str(course_id), {"title": title})
        logger.info("Course #%d created by %s: %s", course_id, _short(caller), title)
        return course_id

    def enroll_in_course(self, caller: str, course_id: int) -> None:
        """Append ``course_id`` to the caller's enrollments and count it.

        Repeat enrollments are not filtered; each one counts.
        """
        if not 0 <= course_id < len(self._state.courses):
            self._reject("enroll_in_course", caller, "Course does not exist", missing=True)

        course = self._state.courses[course_id]
        self._state.enrollments.setdefault(caller, []).append(course_id)
        course.enrollment_count += 1
        self._record(
            EventKind.ENROLLED,
            caller,
            str(course_id),
            {"enrollment_count": course.enrollment_count},
        )
        logger.info("%s enrolled in course #%d", _short(caller), course_id)

    # ── Social feed ───────────────────────────────────────────────────
    def create_post(self, caller: str, content: str) -> int:
        """Publish a post and return its id."""
        post_id = len(self._state.posts)
        self._state.posts.append(
            Post(id=post_id, author=caller, content=content, likes=0, exists=True)
        )
        self._record(EventKind.POST_CREATED, caller, str(post_id))
        logger.info("Post #%d created by %s", post_id, _short(caller))
        return post_id

    def like_post(self, caller: str, post_id: int) -> None:
        """Increment a post's likes. Every call counts, even from the same caller."""
        if not 0 <= post_id < len(self._state.posts):
            self._reject("like_post", caller, "Post does not exist", missing=True)

        post = self._state.posts[post_id]
        post.likes += 1
        self._record(EventKind.POST_LIKED, caller, str(post_id), {"likes": post.likes})
        logger.info("%s liked post #%d (%d likes)", _short(caller), post_id, post.likes)

    def add_connection(self, caller: str, other: str) -> None:
        """Connect caller and ``other`` in both directions."""
        if caller == other:
            self._reject("add_connection", caller, "Cannot connect with yourself")

        self._state.connections.setdefault(caller, []).append(other)
        self._state.connections.setdefault(other, []).append(caller)
        self._record(EventKind.CONNECTION_ADDED, caller, other)
        logger.info("Connected %s ↔ %s", _short(caller), _short(other))

    # ── Reads ─────────────────────────────────────────────────────────
    def profile(self, identity: str) -> Profile:
        """Return the profile for ``identity``; unknown identities read as ``exists=False``."""
        profile = self._state.profiles.get(identity)
        if profile is None:
            return Profile(owner=identity)
        return profile.model_copy(deep=True)

    def course(self, course_id: int) -> Course:
        """Course ``course_id``, or a default carrying the requested id with ``exists=False``."""
        if 0 <= course_id < len(self._state.courses):
            return self._state.courses[course_id].model_copy(deep=True)
        return Course(id=course_id)

    def post(self, post_id: int) -> Post:
        if 0 <= post_id < len(self._state.posts):
            return self._state.posts[post_id].model_copy(deep=True)
        return Post(id=post_id)

    def courses(self) -> list[Course]:
        return [c.model_copy(deep=True) for c in self._state.courses]

    def posts(self) -> list[Post]:
        return [p.model_copy(deep=True) for p in self._state.posts]

    def get_user_enrollments(self, identity: str) -> list[int]:
        return list(self._state.enrollments.get(identity, []))

    def get_user_connections(self, identity: str) -> list[str]:
        return list(self._state.connections.get(identity, []))

    def get_post_count(self) -> int:
        return len(self._state.posts)

    def get_course_count(self) -> int:
        return len(self._state.courses)

    def events(self, since: int = 0) -> list[LedgerEvent]:
        """Journal entries with ``sequence >= since``."""
        return [e.model_copy(deep=True) for e in self._state.events[max(since, 0):]]

    # ── Internals ─────────────────────────────────────────────────────
    def _record(
        self,
        kind: EventKind,
        actor: str,
        subject: Optional[str] = None,
        detail: Optional[dict] = None,
    ) -> None:
        self._state.events.append(
            LedgerEvent(
                sequence=len(self._state.events),
                kind=kind,
                actor=actor,
                subject=subject,
                detail=detail or {},
            )
        )

    @staticmethod
    def _reject(
        operation: str,
        caller: str,
        reason: str,
        *,
        authorization: bool = False,
        missing: bool = False,
    ) -> NoReturn:
        logger.warning("%s rejected for %s: %s", operation, _short(caller), reason)
        if authorization:
            raise AuthorizationViolation(reason)
        if missing:
            raise RecordNotFound(reason)
        raise PreconditionViolation(reason)


def _short(identity: str) -> str:
    return identity[:12] + "…" if len(identity) > 12 else identity
