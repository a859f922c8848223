"""Voting history for a member: ballots joined with the votes they were cast on.

Pipeline per request (on cache miss):
    fetch ballot page → reject empty → enrich the first N ballots concurrently
    → append the rest unenriched → cache both renderings of the result.

A failed ballot-list fetch is fatal for the request. A failed vote-detail
fetch only degrades that one item to a placeholder.
"""

import asyncio
import logging
from typing import Any, NamedTuple, Optional
from urllib.parse import urlsplit

from config import settings
from errors import NoRecordsFound, PartialEnrichmentFailure, UpstreamError, UpstreamParseError
from models.votes import (
    MOTION,
    UNKNOWN,
    AggregateMeta,
    AggregateResult,
    Ballot,
    EnrichedVote,
    Pagination,
    VoteDetail,
)
from services.cache import TTLCache
from services.openparliament import OpenParliamentClient

logger = logging.getLogger(__name__)

BALLOTS_PATH = "/votes/ballots/"

# Upper bound on vote-detail fetches per run, whatever the configuration says
MAX_ENRICHED = 10


class VoteRef(NamedTuple):
    session: str
    number: str

    @property
    def path(self) -> str:
        return f"/votes/{self.session}/{self.number}/"

    @property
    def id(self) -> str:
        return f"{self.session}-{self.number}"


def parse_vote_reference(vote_url: str) -> Optional[VoteRef]:
    """Extract (session, number) from a vote URL like /votes/44-1/928/.

    Returns None when the URL has fewer than three path segments.
    """
    parts = [p for p in urlsplit(vote_url or "").path.split("/") if p]
    if len(parts) < 3:
        return None
    return VoteRef(session=parts[-2], number=parts[-1])


class _Outcome(NamedTuple):
    ballot: Ballot
    ref: Optional[VoteRef]
    detail: Optional[VoteDetail] = None
    error: Optional[str] = None


class VotingHistoryService:
    def __init__(
        self,
        client: OpenParliamentClient,
        cache: TTLCache,
        enrichment_cap: int | None = None,
        page_size: int | None = None,
        ttl_seconds: int | None = None,
    ):
        self._client = client
        self._cache = cache
        cap = settings.enrichment_cap if enrichment_cap is None else enrichment_cap
        self.enrichment_cap = max(0, min(MAX_ENRICHED, cap))
        self.page_size = page_size or settings.ballots_page_size
        self.ttl_seconds = ttl_seconds or settings.voting_history_ttl

    async def get_real_votes(self, member_id: str) -> dict:
        """Translated, merged vote summaries for a member."""
        return await self._get_view(member_id, "real_votes")

    async def get_ballots(self, member_id: str) -> dict:
        """The raw ballot page, with vote details folded into enriched ballots."""
        return await self._get_view(member_id, "ballots")

    async def _get_view(self, member_id: str, kind: str) -> dict:
        cached = self._cache.get(_cache_key(member_id, kind))
        if cached is not None:
            logger.info("Returning cached %s for %s", kind, member_id)
            return cached

        views = await self._run(member_id)
        return views[kind]

    async def _run(self, member_id: str) -> dict[str, dict]:
        """Fetch and enrich once, then cache both renderings together."""
        page, ballots = await self._fetch_ballots(member_id)
        cap = min(self.enrichment_cap, len(ballots))
        outcomes = await self._enrich(member_id, ballots[:cap])
        rest = ballots[cap:]

        views = {
            "real_votes": _render_real_votes(member_id, page, ballots, outcomes, rest),
            "ballots": _render_ballots(page, outcomes, rest),
        }
        for kind, view in views.items():
            self._cache.set(_cache_key(member_id, kind), view, ttl_seconds=self.ttl_seconds)
        return views

    async def _fetch_ballots(self, member_id: str) -> tuple[dict, list[Ballot]]:
        logger.info("Fetching ballots for %s from OpenParliament API", member_id)
        page = await self._client.fetch(
            BALLOTS_PATH,
            {"politician": member_id, "limit": self.page_size},
            timeout=settings.ballots_timeout,
        )
        if not isinstance(page, dict):
            raise UpstreamParseError(TypeError(f"expected an object, got {type(page).__name__}"))

        ballots = [Ballot.from_api(obj) for obj in page.get("objects") or [] if isinstance(obj, dict)]
        if not ballots:
            logger.info("No ballots found for %s", member_id)
            raise NoRecordsFound()

        return page, ballots

    async def _enrich(self, member_id: str, ballots: list[Ballot]) -> list[_Outcome]:
        # gather preserves argument order, so outcome i belongs to ballot i
        return await asyncio.gather(*[self._fetch_detail(member_id, ballot) for ballot in ballots])

    async def _fetch_detail(self, member_id: str, ballot: Ballot) -> _Outcome:
        ref = parse_vote_reference(ballot.vote_url)
        if ref is None:
            return _Outcome(ballot, None)

        try:
            data = await self._client.fetch(ref.path, timeout=settings.vote_detail_timeout)
            if not isinstance(data, dict):
                raise UpstreamParseError(TypeError(f"expected an object, got {type(data).__name__}"))
            detail = VoteDetail.from_api(data)
        except Exception as e:
            # Any per-vote failure becomes a placeholder
            failure = PartialEnrichmentFailure(ballot.vote_url, e)
            if isinstance(e, UpstreamError):
                logger.warning("Error enriching ballot for %s: %s", member_id, failure)
            else:
                logger.exception("Unexpected error enriching ballot for %s", member_id)
            return _Outcome(ballot, ref, error=str(failure))

        return _Outcome(ballot, ref, detail=detail)


def _cache_key(member_id: str, kind: str) -> str:
    return f"member_{kind}_{member_id}"


def _pagination(page: dict, total: int) -> Pagination:
    upstream = page.get("pagination")
    if not isinstance(upstream, dict):
        upstream = {}
    count = upstream.get("count")
    if not isinstance(count, int) or isinstance(count, bool):
        count = total
    return Pagination(
        count=count,
        next=_optional_str(upstream.get("next_url")),
        previous=_optional_str(upstream.get("previous_url")),
    )


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _render_real_votes(
    member_id: str,
    page: dict,
    ballots: list[Ballot],
    outcomes: list[_Outcome],
    rest: list[Ballot],
) -> dict:
    cap = len(outcomes)
    items = [_merge(i, outcome) for i, outcome in enumerate(outcomes)]
    items.extend(_unenriched(i, ballot) for i, ballot in enumerate(rest, start=cap))
    return AggregateResult(
        items=items,
        pagination=_pagination(page, len(ballots)),
        meta=AggregateMeta(subject_id=member_id, enriched_count=cap, total_count=len(ballots)),
    ).model_dump()


def _render_ballots(page: dict, outcomes: list[_Outcome], rest: list[Ballot]) -> dict:
    objects = [_augment(outcome) for outcome in outcomes]
    objects.extend(ballot.raw for ballot in rest)
    return {**page, "objects": objects}


def _vote_id(position: int, ref: Optional[VoteRef]) -> str:
    return ref.id if ref else f"ballot-{position}"


def _merge(position: int, outcome: _Outcome) -> EnrichedVote:
    ballot, ref, detail, error = outcome
    if detail is None:
        return EnrichedVote(
            id=_vote_id(position, ref),
            vote_url=ballot.vote_url,
            bill=UNKNOWN,
            choice=ballot.ballot_choice,
            enrichment_error=error,
        )

    return EnrichedVote(
        id=_vote_id(position, ref),
        vote_url=ballot.vote_url,
        bill=detail.bill_label,
        bill_number=detail.bill_number,
        description=detail.description,
        date=detail.date,
        choice=ballot.choice_label,
        result=detail.result,
    )


def _unenriched(position: int, ballot: Ballot) -> EnrichedVote:
    return EnrichedVote(
        id=_vote_id(position, parse_vote_reference(ballot.vote_url)),
        vote_url=ballot.vote_url,
        bill=MOTION,
        choice=ballot.ballot_choice,
    )


def _augment(outcome: _Outcome) -> dict[str, Any]:
    ballot, _ref, detail, error = outcome
    if detail is None:
        if error:
            return {**ballot.raw, "enrichment_error": error}
        return ballot.raw

    vote = detail.raw
    return {
        **ballot.raw,
        "vote_details": vote,
        "date": vote.get("date"),
        "description": vote.get("description"),
        "result": vote.get("result"),
        "bill_number": detail.bill_number,
    }
