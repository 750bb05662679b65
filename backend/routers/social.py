"""
Backend Router — Social Feed
==============================

POST /posts                 — Publish a post
GET  /posts                 — List posts in id order
GET  /posts/count           — Number of posts
GET  /posts/{id}            — Read a post
POST /posts/{id}/like       — Like a post
POST /connections           — Connect the caller with another address
GET  /connections/{address} — Connections of an address
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from backend.config import caller_address, commit, get_ledger, http_error, require_address
from ledger_engine import LedgerError, Post

router = APIRouter(tags=["Social"])


class PostRequest(BaseModel):
    content: str = Field(..., min_length=1)


class PostResponse(BaseModel):
    id: int
    author: str
    content: str
    likes: int


class CountResponse(BaseModel):
    count: int


class ConnectionRequest(BaseModel):
    other: str = Field(..., description="Address to connect with")


class ConnectionsResponse(BaseModel):
    address: str
    connections: list[str]


def _to_response(post: Post) -> PostResponse:
    return PostResponse(id=post.id, author=post.author, content=post.content, likes=post.likes)


@router.post("/posts", response_model=PostResponse, status_code=201)
async def create_post(req: PostRequest, caller: str = Depends(caller_address)):
    ledger, _ = get_ledger()
    post_id = ledger.create_post(caller, req.content)
    commit()
    return _to_response(ledger.post(post_id))


@router.get("/posts", response_model=list[PostResponse])
async def list_posts():
    ledger, _ = get_ledger()
    return [_to_response(p) for p in ledger.posts()]


@router.get("/posts/count", response_model=CountResponse)
async def post_count():
    ledger, _ = get_ledger()
    return CountResponse(count=ledger.get_post_count())


@router.get("/posts/{post_id}", response_model=PostResponse)
async def get_post(post_id: int):
    ledger, _ = get_ledger()
    post = ledger.post(post_id)
    if not post.exists:
        raise HTTPException(status_code=404, detail="Post does not exist")
    return _to_response(post)


@router.post("/posts/{post_id}/like", response_model=PostResponse)
async def like_post(post_id: int, caller: str = Depends(caller_address)):
    """Like a post. Repeated likes from one address all count."""
    ledger, _ = get_ledger()
    try:
        ledger.like_post(caller, post_id)
    except LedgerError as exc:
        raise http_error(exc)
    commit()
    return _to_response(ledger.post(post_id))


@router.post("/connections", response_model=ConnectionsResponse, status_code=201)
async def add_connection(req: ConnectionRequest, caller: str = Depends(caller_address)):
    """Connect the caller and ``other`` in both directions."""
    require_address(req.other, "other")
    ledger, _ = get_ledger()
    try:
        ledger.add_connection(caller, req.other)
    except LedgerError as exc:
        raise http_error(exc)
    commit()
    return ConnectionsResponse(address=caller, connections=ledger.get_user_connections(caller))


@router.get("/connections/{address}", response_model=ConnectionsResponse)
async def get_connections(address: str):
    require_address(address)
    ledger, _ = get_ledger()
    return ConnectionsResponse(address=address, connections=ledger.get_user_connections(address))
