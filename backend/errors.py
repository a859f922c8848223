"""Custom exceptions and centralized FastAPI error handlers."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ParliamentWatchError(Exception):
    """Base exception with HTTP status code."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class UpstreamError(ParliamentWatchError):
    """Any failure talking to the OpenParliament API."""


class UpstreamUnavailable(UpstreamError):
    def __init__(self, cause: Exception):
        super().__init__(f"OpenParliament API unreachable: {cause}")
        self.cause = cause


class UpstreamBadStatus(UpstreamError):
    def __init__(self, status: int, body: str):
        super().__init__(f"OpenParliament API responded with status {status}")
        self.status = status
        self.body = body


class UpstreamParseError(UpstreamError):
    def __init__(self, cause: Exception):
        super().__init__(f"OpenParliament API returned an unreadable body: {cause}")
        self.cause = cause


class NoRecordsFound(ParliamentWatchError):
    def __init__(self, message: str = "No voting history found for this member"):
        super().__init__(message, status_code=404)


class PartialEnrichmentFailure(ParliamentWatchError):
    """A single vote could not be enriched. Recorded inline, never raised to callers."""

    def __init__(self, vote_url: str, cause: Exception):
        super().__init__(f"Could not enrich {vote_url}: {cause}")
        self.vote_url = vote_url
        self.cause = cause


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(ParliamentWatchError)
    async def handle_parliament_watch_error(_request: Request, exc: ParliamentWatchError):
        return JSONResponse({"error": str(exc)}, status_code=exc.status_code)

    @app.exception_handler(ValueError)
    async def handle_value_error(_request: Request, exc: ValueError):
        return JSONResponse({"error": str(exc)}, status_code=400)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return JSONResponse(
            {"error": "Internal server error"},
            status_code=500,
        )
