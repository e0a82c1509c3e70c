"""
API endpoints for account registration and login.

Both endpoints return a signed bearer token together with the user's public
profile. The token must be sent as ``Authorization: Bearer <token>`` on
protected endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from musichub.core.models.io.auth import LoginRequest, LoginResponse, RegisterRequest
from musichub.server.services.deps import AuthServiceDep

router = APIRouter(tags=["auth"])


@router.post(
    "/register",
    response_model=LoginResponse,
    summary="Register",
    description="Create a new account. New accounts get the Host role.",
    response_description="Bearer token and the created user.",
    responses={
        200: {"description": "Account created"},
        400: {"description": "Missing fields, password mismatch or username taken"},
    },
)
async def register(body: RegisterRequest, service: AuthServiceDep) -> LoginResponse:
    """
    Register a new account.

    - **username**: Desired login name (surrounding whitespace is ignored).
    - **password**: Password.
    - **confirmPassword**: Must match the password.
    """
    ok, error, response = await service.register(body.username, body.password, body.confirm_password)
    if not ok:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)
    return response


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Login",
    description="Exchange username and password for a bearer token.",
    response_description="Bearer token and the authenticated user.",
    responses={
        200: {"description": "Logged in"},
        401: {"description": "Missing fields or invalid credentials"},
    },
)
async def login(body: LoginRequest, service: AuthServiceDep) -> LoginResponse:
    """
    Log in.

    - **username**: Login name.
    - **password**: Password.
    """
    ok, error, response = await service.login(body.username, body.password)
    if not ok:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=error)
    return response
