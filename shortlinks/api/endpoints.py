"""
FastAPI Endpoints for the shortlinks service

This module defines all REST API endpoints with minimal logic.
Endpoints only handle:
- Request validation (Pydantic models)
- Error handling and HTTP responses
- Delegating to service layer
- Composing shortUrl from the configured base address

Store failures are logged with their traceback and answered with a generic
500 message; internal details never reach the client.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shortlinks.api.schemas import LinkResponse, ShortenRequest
from shortlinks.core.exceptions import NotFoundError, StoreError, ValidationError
from shortlinks.core.setting import Settings
from shortlinks.db.session import get_session
from shortlinks.services.listing_service import LinkListingService
from shortlinks.services.redirect_service import RedirectService
from shortlinks.services.url_service import URLShorteningService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was built with."""
    return request.app.state.settings


@router.post(
    "/shorten",
    response_model=LinkResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a short URL",
    description=(
        "Stores a URL under a new random short code. If the URL was already "
        "shortened, the existing link is returned with status 200."
    ),
)
async def create_short_url(
    body: ShortenRequest,
    response: Response,
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
) -> LinkResponse:
    url_service = URLShorteningService(
        session,
        code_length=settings.SHORT_CODE_LENGTH,
        max_attempts=settings.SHORT_CODE_MAX_ATTEMPTS,
    )

    try:
        result = await url_service.create_short_url(body.original_url, title=body.title)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StoreError:
        logger.error("POST /shorten failed", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error while shortening URL."
        )

    if not result.created:
        response.status_code = status.HTTP_200_OK

    return LinkResponse.from_link(result.link, settings.BASE_URL)


@router.get(
    "/admin/urls",
    response_model=list[LinkResponse],
    summary="List all links",
    description="Returns every stored link, newest first",
)
async def list_all_links(
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
) -> list[LinkResponse]:
    try:
        links = await LinkListingService(session).list_all()
    except StoreError:
        logger.error("GET /admin/urls failed", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch all links."
        )

    return [LinkResponse.from_link(link, settings.BASE_URL) for link in links]


@router.get(
    "/recent",
    response_model=list[LinkResponse],
    summary="List recent links",
    description="Returns the most recently created links, newest first",
)
async def list_recent_links(
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
) -> list[LinkResponse]:
    try:
        links = await LinkListingService(session).list_recent(settings.RECENT_LINKS_LIMIT)
    except StoreError:
        logger.error("GET /recent failed", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch recent links."
        )

    return [LinkResponse.from_link(link, settings.BASE_URL) for link in links]


@router.get(
    "/stats/{short_code}",
    response_model=LinkResponse,
    summary="Get link statistics",
    description="Returns a single link with its click data without recording a visit",
)
async def get_link_stats(
    short_code: str,
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
) -> LinkResponse:
    try:
        link = await LinkListingService(session).get_link(short_code)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StoreError:
        logger.error("GET /stats/%s failed", short_code, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error"
        )

    return LinkResponse.from_link(link, settings.BASE_URL)


# Catch-all: must stay the last route registered on the application
@router.get(
    "/{short_code}",
    status_code=status.HTTP_302_FOUND,
    summary="Redirect to original URL",
    description="Records a click and redirects to the original URL",
)
async def redirect_to_url(
    short_code: str,
    session: AsyncSession = Depends(get_session),
) -> RedirectResponse:
    """
    Redirect to the original URL for a given short code.

    Raises:
        HTTPException 404: If short code not found
        HTTPException 500: If the click could not be stored
    """
    try:
        original_url = await RedirectService(session).resolve(short_code)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Short URL not found"
        )
    except StoreError:
        logger.error("GET /%s failed", short_code, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error"
        )

    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)
