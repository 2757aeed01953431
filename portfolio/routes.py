"""
HTTP routes for the portfolio API.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.responses import PlainTextResponse

from portfolio.auth import AdminIdentity, require_admin
from portfolio.config import Settings
from portfolio.db import DbClient
from portfolio.dependencies import (
    CONTACT_LIMITER,
    EVENTS_LIMITER,
    get_app_settings,
    get_db_client,
)
from portfolio.ratelimit import rate_limit
from portfolio.schemas import (
    ContactRequest,
    CvResponse,
    EventRequest,
    ErrorResponse,
    EventStatResponse,
    HealthResponse,
    LoginRequest,
    ProfileResponse,
    ProjectResponse,
    StatusResponse,
    TokenResponse,
)
from portfolio.security import authenticate, create_access_token

logger = logging.getLogger(__name__)

router = APIRouter()

INVALID_BODY = {400: {"model": ErrorResponse, "description": "Invalid request body"}}
RATE_LIMITED = {429: {"model": ErrorResponse, "description": "Too many requests"}}
ADMIN_ONLY = {
    401: {"model": ErrorResponse, "description": "Missing bearer token"},
    403: {"model": ErrorResponse, "description": "Invalid or expired token"},
}


@router.get("/health", response_model=HealthResponse)
def health(
    db: DbClient = Depends(get_db_client),
    settings: Settings = Depends(get_app_settings),
):
    return HealthResponse(
        status="ok",
        env=settings.environment,
        db=db.is_ready(),
        adapter=type(db).__name__,
    )


@router.get("/ping", response_class=PlainTextResponse)
def ping():
    return "pong"


@router.get(
    "/profile",
    response_model=ProfileResponse,
    responses={404: {"model": ErrorResponse, "description": "Profile not found"}},
)
def get_profile(db: DbClient = Depends(get_db_client)):
    profile = db.get_profile()
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return ProfileResponse(**profile.as_dict())


@router.get("/projects", response_model=List[ProjectResponse])
def list_projects(db: DbClient = Depends(get_db_client)):
    return [ProjectResponse(**project.as_dict()) for project in db.get_projects()]


@router.post(
    "/admin/login",
    response_model=TokenResponse,
    responses={
        **INVALID_BODY,
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
def login(
    payload: LoginRequest,
    db: DbClient = Depends(get_db_client),
    settings: Settings = Depends(get_app_settings),
):
    user = authenticate(db, payload.username, payload.password)
    if user is None:
        logger.warning("Failed admin login for %r", payload.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials"
        )
    logger.info("Admin login for %r", user.username)
    return TokenResponse(token=create_access_token(user.username, settings))


@router.post(
    "/events",
    response_model=StatusResponse,
    status_code=201,
    responses={**INVALID_BODY, **RATE_LIMITED},
    dependencies=[Depends(rate_limit(EVENTS_LIMITER))],
)
def log_event(payload: EventRequest, db: DbClient = Depends(get_db_client)):
    db.log_event(payload.eventType, payload.page, payload.metadata or {})
    return StatusResponse()


@router.get(
    "/events/stats", response_model=List[EventStatResponse], responses=ADMIN_ONLY
)
def event_stats(
    db: DbClient = Depends(get_db_client),
    admin: AdminIdentity = Depends(require_admin),
):
    return [EventStatResponse(**stat.as_dict()) for stat in db.get_event_stats()]


@router.post(
    "/contact",
    response_model=StatusResponse,
    status_code=201,
    responses={**INVALID_BODY, **RATE_LIMITED},
    dependencies=[Depends(rate_limit(CONTACT_LIMITER))],
)
def save_contact(payload: ContactRequest, db: DbClient = Depends(get_db_client)):
    db.save_contact(payload.name, payload.email, payload.message)
    return StatusResponse()


@router.get("/cv", response_model=CvResponse)
def get_cv(settings: Settings = Depends(get_app_settings)):
    return CvResponse(url=settings.cv_url, message="CV placeholder.")


@router.put(
    "/profile",
    response_model=StatusResponse,
    responses={**INVALID_BODY, **ADMIN_ONLY},
)
def update_profile(
    payload: Dict[str, Any] = Body(...),
    db: DbClient = Depends(get_db_client),
    admin: AdminIdentity = Depends(require_admin),
):
    db.update_profile(payload)
    logger.info("Profile updated by %s: %s", admin.username, sorted(payload))
    return StatusResponse()


@router.post(
    "/projects",
    response_model=StatusResponse,
    status_code=201,
    responses={**INVALID_BODY, **ADMIN_ONLY},
)
def create_project(
    payload: Dict[str, Any] = Body(...),
    db: DbClient = Depends(get_db_client),
    admin: AdminIdentity = Depends(require_admin),
):
    project = db.create_project(payload)
    logger.info("Project %d created by %s", project.id, admin.username)
    return StatusResponse()


@router.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"],
    include_in_schema=False,
)
def api_not_found(path: str):
    raise HTTPException(status_code=404, detail="API endpoint not found")
