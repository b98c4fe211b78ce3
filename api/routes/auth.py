"""
api/routes/auth.py -- Registration and login endpoints.

Routes:
  POST /register  -- create a user; 201 {message, user}
  POST /login     -- exchange username/password for a bearer token; 200 {message, token}

Both routes are public. Login outcomes are deliberately distinct:
  unknown username -> 404 (no password comparison is attempted)
  wrong password   -> 400
The password hash is never included in any response.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.errors import error_response
from api.models import Credentials, LoginResponse, RegisterResponse, UserResponse
from auth.models import User
from auth.store import UserStore
from auth.tokens import create_access_token, hash_password, verify_password
from core.config import Settings
from core.errors import Err, ErrorKind

logger = logging.getLogger("clientdesk.api.auth")

router = APIRouter()


@router.post("/register", response_model=RegisterResponse, status_code=201)
def register(request: Request, body: Credentials) -> RegisterResponse | JSONResponse:
    """Hash the password and store a new user.

    A taken username is a unique-constraint conflict and, like every other
    store failure here, is reported as the generic registration failure.
    """
    settings: Settings = request.app.state.settings
    user_store: UserStore = request.app.state.user_store

    hashed = hash_password(body.password, rounds=settings.bcrypt_rounds)
    result = user_store.create_user(User(username=body.username, password=hashed))
    if isinstance(result, Err):
        return error_response(result, failure="Failed to register user.")

    logger.info("Registered user id=%s", result.value.id)
    return RegisterResponse(message="User registered", user=UserResponse.from_user(result.value))


@router.post("/login", response_model=LoginResponse)
def login(request: Request, body: Credentials) -> LoginResponse | JSONResponse:
    """Verify username/password and issue a signed, time-limited token."""
    settings: Settings = request.app.state.settings
    user_store: UserStore = request.app.state.user_store

    result = user_store.get_by_username(body.username)
    if isinstance(result, Err):
        return error_response(result, failure="Login failed.", not_found="User not found.")

    user = result.value
    if not verify_password(body.password, user.password):
        return error_response(Err(ErrorKind.bad_credential), failure="Login failed.")

    token = create_access_token(user.id, settings.secret_key, expire_seconds=settings.token_expire_seconds)
    return LoginResponse(message="Login successful", token=token)
