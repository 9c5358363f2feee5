"""
Happy Thoughts API — Discovery Routes
=======================================

    GET /       welcome message and the list of registered endpoints
    GET /tags   the tag enumeration thoughts can be filed under
"""

from typing import List

from fastapi import APIRouter, Request

from happy_thoughts.models.thought import TAG_VALUES
from happy_thoughts.schemas.common import EndpointInfo, Envelope, IndexResponse

router = APIRouter(tags=["Meta"])

HTTP_METHODS = {"get", "put", "post", "delete", "options", "head", "patch", "trace"}


@router.get("/", response_model=IndexResponse, summary="List available endpoints")
async def index(request: Request) -> IndexResponse:
    # The OpenAPI document lists every mounted route, however routers are nested
    endpoints = [
        EndpointInfo(
            path=path,
            methods=sorted(method.upper() for method in operations if method in HTTP_METHODS),
        )
        for path, operations in request.app.openapi().get("paths", {}).items()
    ]
    return IndexResponse(message="Welcome to the Happy Thoughts API", endpoints=endpoints)


@router.get("/tags", response_model=Envelope[List[str]], summary="List thought tags")
async def list_tags() -> Envelope[List[str]]:
    return Envelope[List[str]](response=list(TAG_VALUES))
