"""
Happy Thoughts API — Thought Route Handlers
=============================================

What:  All /thoughts endpoints.
How:   Handlers validate path ids (400 before any store access), pick the
       caller through the auth dependencies, delegate to ThoughtService and
       wrap the result in the response envelope.

Route order matters: the fixed paths (/popular, /recent, /user/{id}) are
registered before /{thought_id} so they are not captured as ids.

    GET    /thoughts                  list, filter (tag, likes), sort_by, paginate
    GET    /thoughts/popular          most hearts first
    GET    /thoughts/recent           newest first
    GET    /thoughts/user/{user_id}   one author's thoughts        (auth)
    GET    /thoughts/{id}             one thought
    POST   /thoughts                  create                       (auth)
    PATCH  /thoughts/{id}             edit message                 (auth)
    PATCH  /thoughts/{id}/like        add a heart
    DELETE /thoughts/{id}             delete                       (auth)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from happy_thoughts.config import settings
from happy_thoughts.dependencies import (
    get_current_user,
    get_optional_user,
    get_thought_service,
)
from happy_thoughts.models.user import User
from happy_thoughts.repositories.thought_repository import parse_sort
from happy_thoughts.schemas.common import AuthErrorResponse, Envelope, ErrorResponse
from happy_thoughts.schemas.thought import (
    ThoughtCreate,
    ThoughtOut,
    ThoughtPage,
    ThoughtUpdate,
)
from happy_thoughts.services.thought_service import ThoughtService, parse_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/thoughts", tags=["Thoughts"])

LIST_RESPONSES = {
    400: {"description": "Invalid query parameter", "model": ErrorResponse},
    404: {"description": "No thought matches the query", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}
ID_RESPONSES = {
    400: {"description": "Invalid ID format or body", "model": ErrorResponse},
    404: {"description": "Thought not found", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}
AUTH_RESPONSES = {
    401: {"description": "Authentication missing or invalid", "model": AuthErrorResponse},
}

# Keeps (page - 1) * limit well inside a 64-bit OFFSET
MAX_PAGE = 1_000_000


class PageParams:
    """Query parameters shared by every listing endpoint."""

    def __init__(
        self,
        page: int = Query(default=1, ge=1, le=MAX_PAGE, description="1-based page number"),
        limit: int = Query(
            default=settings.default_page_size,
            ge=1,
            le=settings.max_page_size,
            description="Thoughts per page",
        ),
        tag: Optional[str] = Query(
            default=None,
            description="Only thoughts carrying this tag (case-insensitive)",
        ),
    ):
        self.page = page
        self.limit = limit
        # Stored tags are lowercase
        self.tag = (tag or "").strip().lower() or None


@router.get(
    "",
    response_model=Envelope[ThoughtPage],
    responses=LIST_RESPONSES,
    summary="List thoughts with filters, sorting and pagination",
)
async def list_thoughts(
    params: PageParams = Depends(),
    likes: Optional[int] = Query(
        default=None, ge=0, description="Only thoughts with at least this many hearts"
    ),
    sort_by: Optional[str] = Query(
        default=None,
        description=(
            "Sort keys separated by spaces or commas; prefix '-' for descending. "
            "Fields: createdAt, hearts, message. Default: -createdAt"
        ),
    ),
    service: ThoughtService = Depends(get_thought_service),
) -> Envelope[ThoughtPage]:
    """
    Examples:
        GET /thoughts?tag=travel
        GET /thoughts?likes=5&sort_by=-hearts
        GET /thoughts?page=2&limit=10
    """
    sort = parse_sort(sort_by)
    result = await service.list_thoughts(
        page=params.page,
        limit=params.limit,
        tag=params.tag,
        min_hearts=likes,
        sort=sort,
    )
    return Envelope[ThoughtPage](response=result)


@router.get(
    "/popular",
    response_model=Envelope[ThoughtPage],
    responses=LIST_RESPONSES,
    summary="List thoughts with the most hearts first",
)
async def list_popular_thoughts(
    params: PageParams = Depends(),
    service: ThoughtService = Depends(get_thought_service),
) -> Envelope[ThoughtPage]:
    result = await service.list_popular(page=params.page, limit=params.limit, tag=params.tag)
    return Envelope[ThoughtPage](response=result)


@router.get(
    "/recent",
    response_model=Envelope[ThoughtPage],
    responses=LIST_RESPONSES,
    summary="List the newest thoughts first",
)
async def list_recent_thoughts(
    params: PageParams = Depends(),
    service: ThoughtService = Depends(get_thought_service),
) -> Envelope[ThoughtPage]:
    result = await service.list_recent(page=params.page, limit=params.limit, tag=params.tag)
    return Envelope[ThoughtPage](response=result)


@router.get(
    "/user/{user_id}",
    response_model=Envelope[ThoughtPage],
    responses={**LIST_RESPONSES, **AUTH_RESPONSES},
    summary="List one user's thoughts, newest first",
)
async def list_user_thoughts(
    user_id: str,
    params: PageParams = Depends(),
    current_user: User = Depends(get_current_user),
    service: ThoughtService = Depends(get_thought_service),
) -> Envelope[ThoughtPage]:
    author_id = parse_id(user_id, field="user_id")
    result = await service.list_by_author(
        author_id=author_id, page=params.page, limit=params.limit, tag=params.tag
    )
    return Envelope[ThoughtPage](response=result)


@router.get(
    "/{thought_id}",
    response_model=Envelope[ThoughtOut],
    responses=ID_RESPONSES,
    summary="Get a single thought by ID",
)
async def get_thought(
    thought_id: str,
    service: ThoughtService = Depends(get_thought_service),
) -> Envelope[ThoughtOut]:
    result = await service.get_thought(parse_id(thought_id))
    return Envelope[ThoughtOut](response=result)


@router.post(
    "",
    status_code=201,
    response_model=Envelope[ThoughtOut],
    responses={
        400: {"description": "Invalid message or tags", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
        **AUTH_RESPONSES,
    },
    summary="Post a new thought",
)
async def create_thought(
    body: ThoughtCreate,
    current_user: User = Depends(get_current_user),
    service: ThoughtService = Depends(get_thought_service),
) -> Envelope[ThoughtOut]:
    result = await service.create_thought(
        message=body.message,
        tags=body.tag_values(),
        author=current_user,
    )
    return Envelope[ThoughtOut](response=result, message="Thought successfully posted!")


@router.patch(
    "/{thought_id}/like",
    response_model=Envelope[ThoughtOut],
    responses={
        **ID_RESPONSES,
        **AUTH_RESPONSES,
        409: {"description": "Already liked by this user", "model": ErrorResponse},
    },
    summary="Add a heart to a thought",
)
async def like_thought(
    thought_id: str,
    current_user: Optional[User] = Depends(get_optional_user),
    service: ThoughtService = Depends(get_thought_service),
) -> Envelope[ThoughtOut]:
    """
    Public by default. With UNIQUE_LIKES enabled, a valid token is required
    and each user can like a given thought once.
    """
    result = await service.like_thought(parse_id(thought_id), caller=current_user)
    return Envelope[ThoughtOut](response=result, message="Thought successfully liked!")


@router.patch(
    "/{thought_id}",
    response_model=Envelope[ThoughtOut],
    responses={**ID_RESPONSES, **AUTH_RESPONSES},
    summary="Edit the message of a thought",
)
async def edit_thought(
    thought_id: str,
    body: ThoughtUpdate,
    current_user: User = Depends(get_current_user),
    service: ThoughtService = Depends(get_thought_service),
) -> Envelope[ThoughtOut]:
    result = await service.edit_thought(parse_id(thought_id), body.message, caller=current_user)
    return Envelope[ThoughtOut](response=result, message="Thought successfully edited!")


@router.delete(
    "/{thought_id}",
    response_model=Envelope[ThoughtOut],
    responses={**ID_RESPONSES, **AUTH_RESPONSES},
    summary="Delete a thought",
)
async def delete_thought(
    thought_id: str,
    current_user: User = Depends(get_current_user),
    service: ThoughtService = Depends(get_thought_service),
) -> Envelope[ThoughtOut]:
    result = await service.delete_thought(parse_id(thought_id), caller=current_user)
    return Envelope[ThoughtOut](response=result, message="Thought successfully deleted!")
