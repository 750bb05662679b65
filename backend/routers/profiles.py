"""
Backend Router — Profiles
===========================

POST /profiles                       — Create the caller's profile
PUT  /profiles                       — Update the caller's profile
GET  /profiles/{address}             — Read a profile
POST /profiles/{address}/reputation  — Raise reputation (administrator only)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from backend.config import caller_address, commit, get_ledger, http_error, require_address
from ledger_engine import LedgerError, Profile

router = APIRouter(prefix="/profiles", tags=["Profiles"])


class ProfileRequest(BaseModel):
    username: str = Field(..., min_length=1, description="Display name")
    bio: str = Field(default="", description="Free-form bio")
    skills: list[str] = Field(default_factory=list, description="Ordered skill list")


class ReputationRequest(BaseModel):
    amount: int = Field(..., ge=0, description="Points to add")


class ProfileResponse(BaseModel):
    owner: str
    username: str
    bio: str
    skills: list[str]
    reputation: int
    exists: bool


def _to_response(profile: Profile) -> ProfileResponse:
    return ProfileResponse(**profile.model_dump())


@router.post("", response_model=ProfileResponse, status_code=201)
async def create_profile(req: ProfileRequest, caller: str = Depends(caller_address)):
    """Create a profile for the calling address."""
    ledger, _ = get_ledger()
    try:
        ledger.create_profile(caller, req.username, req.bio, req.skills)
    except LedgerError as exc:
        raise http_error(exc)
    commit()
    return _to_response(ledger.profile(caller))


@router.put("", response_model=ProfileResponse)
async def update_profile(req: ProfileRequest, caller: str = Depends(caller_address)):
    """Overwrite username, bio and skills of the caller's own profile."""
    ledger, _ = get_ledger()
    try:
        ledger.update_profile(caller, req.username, req.bio, req.skills)
    except LedgerError as exc:
        raise http_error(exc)
    commit()
    return _to_response(ledger.profile(caller))


@router.get("/{address}", response_model=ProfileResponse)
async def get_profile(address: str):
    """Read one profile."""
    require_address(address)
    ledger, _ = get_ledger()
    profile = ledger.profile(address)
    if not profile.exists:
        raise HTTPException(status_code=404, detail="Profile does not exist")
    return _to_response(profile)


@router.post("/{address}/reputation", response_model=ProfileResponse)
async def increase_reputation(
    address: str,
    req: ReputationRequest,
    caller: str = Depends(caller_address),
):
    """Add reputation to ``address``. Only the ledger administrator may call this."""
    require_address(address)
    ledger, _ = get_ledger()
    try:
        ledger.increase_reputation(caller, address, req.amount)
    except LedgerError as exc:
        raise http_error(exc)
    commit()
    return _to_response(ledger.profile(address))
