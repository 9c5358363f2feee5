"""
Happy Thoughts API — User Route Handlers
==========================================

    POST /users         register  → {id, accessToken}
    POST /users/login   log in    → {id, userName, accessToken}

Both bodies are `{userName, password}`. User names are matched
case-insensitively (stored lowercase).
"""

from fastapi import APIRouter, Depends

from happy_thoughts.dependencies import get_user_service
from happy_thoughts.schemas.common import Envelope, ErrorResponse
from happy_thoughts.schemas.user import Credentials, LoggedInUser, RegisteredUser
from happy_thoughts.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.post(
    "",
    response_model=Envelope[RegisteredUser],
    responses={
        400: {"description": "Missing fields or store failure", "model": ErrorResponse},
        409: {"description": "User name already exists", "model": ErrorResponse},
    },
    summary="Register a new user",
)
async def register_user(
    body: Credentials,
    service: UserService = Depends(get_user_service),
) -> Envelope[RegisteredUser]:
    result = await service.register(body.user_name, body.password)
    return Envelope[RegisteredUser](response=result, message="User created successfully!")


@router.post(
    "/login",
    response_model=Envelope[LoggedInUser],
    responses={
        400: {"description": "Missing fields", "model": ErrorResponse},
        401: {"description": "Invalid password", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
    },
    summary="Log in and receive the access token",
)
async def login_user(
    body: Credentials,
    service: UserService = Depends(get_user_service),
) -> Envelope[LoggedInUser]:
    result = await service.login(body.user_name, body.password)
    return Envelope[LoggedInUser](response=result, message="Log in successful!")
