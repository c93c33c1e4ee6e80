"""
FastAPI Endpoints for URL Shortener Service

This module defines the REST API endpoints with minimal logic.
Endpoints only handle:
- Reading and validating request input
- Error handling and HTTP responses
- Delegating to the service layer

Every handled failure is answered with an {"error": message} body.
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from shorturl.api.schemas import ErrorResponse, ShortenRequest, ShortenResponse
from shorturl.core.exceptions import (
    CodeNotFoundError,
    DuplicateCodeError,
    InvalidCodeError,
    InvalidURLError,
    StorageUnavailableError,
)
from shorturl.core.setting import settings
from shorturl.core.validators import validate_url
from shorturl.db.session import get_session
from shorturl.services.url_service import URLShorteningService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

STORAGE_UNAVAILABLE_MESSAGE = "storage temporarily unavailable; please retry later"


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build an {"error": message} JSON response."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump()
    )


async def read_shorten_request(request: Request) -> ShortenRequest:
    """
    Extract the url field from a JSON or urlencoded form body.

    Malformed bodies yield a request without a URL; validation
    reports that to the client.
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("application/json"):
        try:
            payload = await request.json()
        except ValueError:
            payload = {}
    else:
        payload = dict(await request.form())

    try:
        return ShortenRequest.model_validate(payload)
    except ValidationError as e:
        logger.info(f"Unreadable shorten request body: {e.error_count()} error(s)")
        return ShortenRequest()


@router.get("/hello", summary="API smoke test")
async def hello():
    return {"greeting": "hello API"}


@router.post(
    "/shorturl/new",
    response_model=ShortenResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
    summary="Create a short URL",
    description="Takes a long URL and returns the numeric code it was registered under"
)
async def create_short_url(
    request: Request,
    session: AsyncSession = Depends(get_session)
):
    """
    Create a new short URL from a long URL.

    Returns:
        ShortenResponse with original_url and short_url (the code)
    """
    body = await read_shorten_request(request)

    try:
        original_url = await validate_url(
            body.url,
            max_length=settings.MAX_URL_LENGTH,
            verify_domain=settings.VERIFY_DOMAIN
        )
    except InvalidURLError as e:
        logger.info(f"Rejected URL {body.url!r}: {e.reason}")
        return error_response(status.HTTP_400_BAD_REQUEST, e.reason)

    url_service = URLShorteningService(session)

    try:
        entry = await url_service.shorten(original_url)
    except DuplicateCodeError as e:
        logger.error(f"Integrity violation while shortening {original_url}: {e}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))
    except StorageUnavailableError as e:
        logger.error(f"Could not shorten {original_url}: {e}")
        return error_response(status.HTTP_503_SERVICE_UNAVAILABLE, STORAGE_UNAVAILABLE_MESSAGE)

    return ShortenResponse(original_url=entry.original_url, short_url=entry.code)


@router.get(
    "/shorturl/{code}",
    status_code=status.HTTP_302_FOUND,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
    summary="Redirect to original URL",
    description="Takes a numeric code and redirects to the original long URL"
)
async def redirect_to_url(
    code: str,
    session: AsyncSession = Depends(get_session)
):
    """
    Redirect to the original URL for a given code.

    Raises nothing; failures are returned as:
        400: code is not a positive integer
        404: code not found
        503: database unavailable
    """
    url_service = URLShorteningService(session)

    try:
        entry = await url_service.resolve(code)
    except InvalidCodeError:
        return error_response(status.HTTP_400_BAD_REQUEST, "invalid short url")
    except CodeNotFoundError:
        return error_response(status.HTTP_404_NOT_FOUND, "No short URL found for the given input")
    except StorageUnavailableError as e:
        logger.error(f"Could not resolve code {code!r}: {e}")
        return error_response(status.HTTP_503_SERVICE_UNAVAILABLE, STORAGE_UNAVAILABLE_MESSAGE)

    logger.debug(f"Found short URL {entry.code} -> {entry.original_url}")
    return RedirectResponse(
        url=entry.original_url,
        status_code=status.HTTP_302_FOUND
    )
