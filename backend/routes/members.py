"""Member routes — pass-through resources and voting history.

GET /members                     → paged member list (durable cache)
GET /members/{id}                → member detail (durable cache)
GET /members/{id}/votes          → raw member votes, never an error status
GET /members/{id}/ballots        → ballot page with vote details folded in
GET /members/{id}/real-votes     → merged, human-readable vote summaries
"""

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from config import settings
from dependencies import get_resources, get_voting_history
from errors import UpstreamError
from services.resources import ResourceCache
from services.voting_history import VotingHistoryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/members", tags=["members"])


def _matches(member: dict, needle: str) -> bool:
    name = (member.get("name") or "").lower()
    constituency = (member.get("constituency") or "").lower()
    return needle in name or needle in constituency


@router.get("")
async def list_members(
    limit: int = Query(20, ge=1, le=500),
    offset: int = Query(0, ge=0),
    province: str | None = Query(None),
    party: str | None = Query(None),
    search: str | None = Query(None),
    resources: ResourceCache = Depends(get_resources),
) -> dict:
    """Member list. A search skips the cache and filters the fetched page locally."""
    # Search terms are left out of the key; they are never cached
    cache_key = f"members-{province or 'all'}-{party or 'all'}-{limit}-{offset}"
    data = await resources.get_or_fetch(
        cache_key,
        "/politicians/",
        {"limit": limit, "offset": offset, "province": province, "party": party},
        bypass_cache=bool(search),
    )

    if search and isinstance(data, dict) and isinstance(data.get("objects"), list):
        needle = search.lower()
        data["objects"] = [m for m in data["objects"] if _matches(m, needle)]

    return data


@router.get("/{member_id}")
async def get_member(
    member_id: str,
    resources: ResourceCache = Depends(get_resources),
) -> dict:
    path = f"/politicians/{member_id}/"
    return await resources.get_or_fetch(path, path)


def _empty_votes_page(limit: int, offset: int, message: str, exc: Exception) -> dict:
    body = {
        "objects": [],
        "pagination": {
            "count": 0,
            "next_url": None,
            "previous_url": None,
            "limit": limit,
            "offset": offset,
        },
        "message": message,
    }
    if settings.is_development:
        body["error_details"] = str(exc)
    return body


@router.get("/{member_id}/votes")
async def get_member_votes(
    member_id: str,
    limit: int = Query(20, ge=1, le=500),
    offset: int = Query(0, ge=0),
    resources: ResourceCache = Depends(get_resources),
) -> dict:
    """Raw member votes. Any failure degrades to an empty page, not an error."""
    path = f"/politicians/{member_id}/votes/"
    try:
        return await resources.get_or_fetch(f"{path}-{limit}-{offset}", path, {"limit": limit, "offset": offset})
    except UpstreamError as e:
        logger.error("Error fetching votes from OpenParliament for %s: %s", member_id, e)
        message = f"No votes available for {member_id} or API error occurred"
        return _empty_votes_page(limit, offset, message, e)
    except Exception as e:
        logger.exception("Error in member votes endpoint for %s", member_id)
        return _empty_votes_page(limit, offset, "Error retrieving votes data", e)


def _voting_history_failure(member_id: str, exc: UpstreamError) -> JSONResponse:
    logger.error("Error fetching voting history for %s: %s", member_id, exc)
    return JSONResponse(
        {"error": "Error fetching voting history", "details": str(exc)},
        status_code=500,
    )


@router.get("/{member_id}/ballots")
async def get_member_ballots(
    member_id: str,
    voting_history: VotingHistoryService = Depends(get_voting_history),
):
    try:
        return await voting_history.get_ballots(member_id)
    except UpstreamError as e:
        return _voting_history_failure(member_id, e)


@router.get("/{member_id}/real-votes")
async def get_member_real_votes(
    member_id: str,
    voting_history: VotingHistoryService = Depends(get_voting_history),
):
    try:
        return await voting_history.get_real_votes(member_id)
    except UpstreamError as e:
        return _voting_history_failure(member_id, e)
