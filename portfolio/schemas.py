"""
Pydantic schemas for the portfolio API.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    username: str
    password: str


class TokenResponse(BaseModel):
    token: str


class EventRequest(BaseModel):
    eventType: str
    page: str
    metadata: Optional[Dict[str, Any]] = None


class ContactRequest(BaseModel):
    name: str = Field(..., min_length=2)
    email: EmailStr
    message: str = Field(..., min_length=10)


class StatusResponse(BaseModel):
    status: Literal["ok"] = "ok"


class HealthResponse(BaseModel):
    status: Literal["ok"]
    env: str
    db: bool
    adapter: str


class ProfileResponse(BaseModel):
    id: int
    name: Optional[str] = None
    title: Optional[str] = None
    subtitle: Optional[str] = None
    pitch: Optional[str] = None
    email: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None
    status: Optional[str] = None


class ProjectResponse(BaseModel):
    id: int
    title: Optional[str] = None
    type: Optional[str] = None
    summary: Optional[str] = None
    problem: Optional[str] = None
    solution: Optional[str] = None
    stack: List[Any] = Field(default_factory=list)
    highlights: List[Any] = Field(default_factory=list)
    challenges: List[Any] = Field(default_factory=list)
    architecture_diagram: Optional[str] = None
    links: Dict[str, Any] = Field(default_factory=dict)
    order_index: int = 0


class EventStatResponse(BaseModel):
    event_type: str
    day: str
    count: int


class CvResponse(BaseModel):
    url: str
    message: str


class ErrorBody(BaseModel):
    code: int
    message: str
    details: Optional[List[Any]] = None


class ErrorResponse(BaseModel):
    error: ErrorBody
