"""
Learnopoly — FastAPI Backend
==============================

REST API over the Learnopoly ledger: profiles, courses, enrollments,
posts, likes and connections.

Every mutating request names its caller in the ``X-Caller-Address``
header and is persisted to the ledger snapshot before the response
is sent.

Run:
    poetry run uvicorn backend.main:app --reload --port 8000
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.config import get_ledger
from backend.routers import courses, events, profiles, social

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("backend")

# ─────────────────────────────────────────────────────────────────────────────
# FastAPI App
# ─────────────────────────────────────────────────────────────────────────────
app = FastAPI(
    title="Learnopoly API",
    description="REST API for the Learnopoly social learning ledger",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(profiles.router)
app.include_router(courses.router)
app.include_router(social.router)
app.include_router(events.router)


@app.get("/")
async def root():
    ledger, store = get_ledger()
    return {
        "name": "Learnopoly API",
        "version": "1.0.0",
        "administrator": ledger.administrator,
        "state_path": str(store.path),
        "course_count": ledger.get_course_count(),
        "post_count": ledger.get_post_count(),
    }
