# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, FastAPI, Header, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from gigauth.auth.admins import seed_admins
from gigauth.auth.passwords import PasswordHasher
from gigauth.auth.session import SessionManager
from gigauth.config import Settings, load_settings
from gigauth.core.kinds import role_for_platform, sanitize
from gigauth.core.principals import Role, SessionUser
from gigauth.errors import AuthError, InvalidCredentials, NotFound, TooManyAttempts
from gigauth.infra.db import init_db, make_engine, make_session_factory
from gigauth.infra.principal_repo import CredentialStore
from gigauth.permissions import cookie_settings, load_user_from_request, require_user
from gigauth.services.login_attempts import LoginAttemptManager
from gigauth.services.registration import RegistrationService
from gigauth.services.verification import CredentialVerifier, normalize_email

logger = logging.getLogger(__name__)

router = APIRouter()


# ============== Request bodies ==============
# Fields are optional on purpose: presence is a business rule checked by
# RegistrationService so that a missing field answers 400 MissingField.


class _Body(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class WorkerSignup(_Body):
    email: Optional[str] = None
    password: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    highest_education: Optional[str] = None
    school_name: Optional[str] = None
    major: Optional[str] = None
    study_status: Optional[str] = None
    certificates: Optional[List[Any]] = None


class EmployerSignup(_Body):
    email: Optional[str] = None
    password: Optional[str] = None
    employer_name: Optional[str] = None
    branch_name: Optional[str] = None
    industry_type: Optional[str] = None
    address: Optional[str] = None
    phone_number: Optional[str] = None
    identification_type: Optional[str] = None
    identification_number: Optional[str] = None
    # References to documents already stored by the upload component.
    verification_documents: Optional[List[Any]] = None
    employer_photo: Optional[Any] = None
    contact_info: Optional[Any] = None


class LoginRequest(BaseModel):
    email: str
    password: str


# ============== Routes ==============


@router.post("/register/worker", status_code=status.HTTP_201_CREATED)
def register_worker(request: Request, body: WorkerSignup, platform: Optional[str] = Header(None)):
    user = request.app.state.registration.register(Role.WORKER, body.payload(), platform=platform)
    return {"message": "User registered successfully", "user": user}


@router.post("/register/employer", status_code=status.HTTP_201_CREATED)
def register_employer(request: Request, body: EmployerSignup, platform: Optional[str] = Header(None)):
    user = request.app.state.registration.register(Role.EMPLOYER, body.payload(), platform=platform)
    return {"message": "User registered successfully", "user": user}


@router.post("/login")
def login(request: Request, response: Response, body: LoginRequest, platform: Optional[str] = Header(None)):
    st = request.app.state
    roles = [role_for_platform(platform)] if platform is not None else None

    # Keyed by the resolved kind, not the raw header text.
    scope = roles[0].value if roles else ""
    client_ip = request.client.host if request.client else ""
    key = (scope, normalize_email(body.email), client_ip)
    attempts = st.login_attempts.status(key)
    if attempts.locked:
        logger.info("Login refused: %s is locked out", key[1])
        raise TooManyAttempts(attempts.remaining_lock_seconds)

    try:
        principal = st.verifier.verify(body.email, body.password, roles=roles)
    except InvalidCredentials:
        st.login_attempts.record_failure(key)
        raise
    st.login_attempts.clear(key)

    # A fresh login never reuses the session the client arrived with.
    st.sessions.destroy(request.cookies.get(st.settings.cookie_name))
    _, cookie_value = st.sessions.create(principal.session_user)
    response.set_cookie(st.settings.cookie_name, cookie_value, **cookie_settings(st.settings))
    return {"id": principal.id, "role": principal.role.value}


@router.api_route("/logout", methods=["GET", "POST"])
def logout(request: Request, response: Response):
    st = request.app.state
    st.sessions.destroy(request.cookies.get(st.settings.cookie_name))
    opts = cookie_settings(st.settings)
    response.delete_cookie(
        st.settings.cookie_name, httponly=opts["httponly"], samesite=opts["samesite"], secure=opts["secure"]
    )
    return {"message": "Logged out"}


@router.get("/profile")
def profile(request: Request, user: SessionUser = Depends(require_user)):
    principal = request.app.state.store.find_by_id(user.role, user.id)
    if principal is None:
        raise NotFound("User not found")
    return {**sanitize(principal), "role": user.role.value}


# ============== Application ==============


async def _sweep_sessions(sessions: SessionManager, period: int) -> None:
    while True:
        await asyncio.sleep(period)
        try:
            sessions.sweep()
        except Exception:
            logger.exception("Session sweep failed")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run the periodic purge of expired sessions while the app is up."""
    task = asyncio.create_task(_sweep_sessions(app.state.sessions, app.state.settings.session_check_period))
    try:
        yield
    finally:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task


async def _auth_error(request: Request, exc: AuthError) -> JSONResponse:
    headers = {}
    if isinstance(exc, TooManyAttempts):
        headers["Retry-After"] = str(exc.retry_after)
    return JSONResponse({"detail": exc.detail}, status_code=exc.status_code, headers=headers)


async def _invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        {
            "detail": "Invalid request body",
            "errors": [{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors()],
        },
        status_code=status.HTTP_400_BAD_REQUEST,
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Wire secrets, stores and services into a FastAPI app.

    Raises ConfigurationError when the secrets are missing, so the server
    never starts half-configured.
    """
    settings = settings or load_settings()

    hasher = PasswordHasher(
        settings.hashing_secret,
        time_cost=settings.argon2_time_cost,
        parallelism=settings.argon2_parallelism,
        memory_cost=settings.argon2_memory_cost,
    )
    sessions = SessionManager(settings.session_secret, max_age=settings.session_max_age)

    engine = make_engine(settings.database_url)
    init_db(engine)
    store = CredentialStore(make_session_factory(engine))
    seed_admins(store, settings.admins_path)

    app = FastAPI(title="gigauth", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.hasher = hasher
    app.state.sessions = sessions
    app.state.store = store
    app.state.verifier = CredentialVerifier(store, hasher)
    app.state.registration = RegistrationService(store, hasher)
    app.state.login_attempts = LoginAttemptManager(
        max_attempts=settings.login_max_attempts,
        lockout_seconds=settings.login_lockout_seconds,
    )

    app.add_exception_handler(AuthError, _auth_error)
    app.add_exception_handler(RequestValidationError, _invalid_body)

    @app.middleware("http")
    async def _auth_middleware(request: Request, call_next):
        request.state.user = load_user_from_request(request)
        return await call_next(request)

    @app.get("/", tags=["Root"])
    async def root():
        return {"message": "Hello World!"}

    app.include_router(router, prefix="/user", tags=["User"])
    return app
