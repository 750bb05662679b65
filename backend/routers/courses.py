"""
Backend Router — Courses
==========================

POST /courses               — Create a course
GET  /courses               — List courses in id order
GET  /courses/count         — Number of courses
GET  /courses/{id}          — Read a course
POST /courses/{id}/enroll   — Enroll the caller
GET  /enrollments/{address} — Course ids an address enrolled in
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from backend.config import caller_address, commit, get_ledger, http_error, require_address
from ledger_engine import Course, LedgerError

router = APIRouter(tags=["Courses"])


class CourseRequest(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = Field(default="")


class CourseResponse(BaseModel):
    id: int
    title: str
    description: str
    creator: str
    enrollment_count: int
    exists: bool


class CountResponse(BaseModel):
    count: int


class EnrollmentsResponse(BaseModel):
    address: str
    course_ids: list[int]


def _to_response(course: Course) -> CourseResponse:
    return CourseResponse(**course.model_dump())


@router.post("/courses", response_model=CourseResponse, status_code=201)
async def create_course(req: CourseRequest, caller: str = Depends(caller_address)):
    """Create a course; the caller becomes its creator."""
    ledger, _ = get_ledger()
    course_id = ledger.create_course(caller, req.title, req.description)
    commit()
    return _to_response(ledger.course(course_id))


@router.get("/courses", response_model=list[CourseResponse])
async def list_courses():
    ledger, _ = get_ledger()
    return [_to_response(c) for c in ledger.courses()]


@router.get("/courses/count", response_model=CountResponse)
async def course_count():
    ledger, _ = get_ledger()
    return CountResponse(count=ledger.get_course_count())


@router.get("/courses/{course_id}", response_model=CourseResponse)
async def get_course(course_id: int):
    ledger, _ = get_ledger()
    course = ledger.course(course_id)
    if not course.exists:
        raise HTTPException(status_code=404, detail="Course does not exist")
    return _to_response(course)


@router.post("/courses/{course_id}/enroll", response_model=CourseResponse)
async def enroll(course_id: int, caller: str = Depends(caller_address)):
    """Enroll the caller in a course."""
    ledger, _ = get_ledger()
    try:
        ledger.enroll_in_course(caller, course_id)
    except LedgerError as exc:
        raise http_error(exc)
    commit()
    return _to_response(ledger.course(course_id))


@router.get("/enrollments/{address}", response_model=EnrollmentsResponse)
async def get_enrollments(address: str):
    require_address(address)
    ledger, _ = get_ledger()
    return EnrollmentsResponse(address=address, course_ids=ledger.get_user_enrollments(address))
