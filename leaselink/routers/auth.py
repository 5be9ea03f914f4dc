# leaselink/routers/auth.py
from __future__ import annotations

import logging
from typing import Optional

from email_validator import EmailNotValidError, validate_email
from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import BaseModel, Field, field_validator

from leaselink.core.config import Settings
from leaselink.deps import get_auth_service, get_optional_identity, get_settings
from leaselink.services.auth_service import AuthService
from leaselink.services.session_cookie import (
    build_session_cookie_options,
    clear_session_cookie,
    set_session_cookie,
)
from leaselink.services.session_tokens import Identity

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger(__name__)


class LoginPayload(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RegisterPayload(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6)
    role: Optional[str] = None

    @field_validator("email")
    @classmethod
    def _valid_email(cls, value: str) -> str:
        # stored exactly as submitted; login matches on the same string
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError as exc:
            raise ValueError(str(exc)) from exc
        return value


class UserRead(BaseModel):
    id: int
    email: str
    role: str


class SessionRead(BaseModel):
    user: Optional[UserRead] = None


def _log_cookie(action: str, settings: Settings, request: Request) -> None:
    cookie_options = build_session_cookie_options(settings, request)
    logger.info(
        "[AUTH_COOKIE] %s token samesite=%s secure=%s",
        action,
        cookie_options["samesite"],
        cookie_options["secure"],
    )


@router.post("/login", response_model=SessionRead)
def login(
    payload: LoginPayload,
    request: Request,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    identity, token = auth.login(payload.email, payload.password)

    _log_cookie("setting", settings, request)
    set_session_cookie(response, token, settings, request)
    return {"user": identity.as_dict()}


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterPayload,
    request: Request,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    identity, token = auth.register(payload.email, payload.password, payload.role)

    _log_cookie("setting", settings, request)
    set_session_cookie(response, token, settings, request)
    return identity.as_dict()


@router.post("/logout")
def logout(
    request: Request,
    response: Response,
    settings: Settings = Depends(get_settings),
):
    _log_cookie("clearing", settings, request)
    clear_session_cookie(response, settings, request)
    return {"message": "Logged out"}


@router.get("/me", response_model=SessionRead)
def me(identity: Optional[Identity] = Depends(get_optional_identity)):
    if identity is None:
        return {"user": None}
    return {"user": identity.as_dict()}
