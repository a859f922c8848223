"""Typed views over OpenParliament ballot and vote payloads.

Upstream fields may be missing or null; both become UNKNOWN here, at the
parsing boundary, so the merge logic never has to check for None.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

UNKNOWN = "Unknown"
MOTION = "Motion"

# Upstream ballot vocabulary → displayed choice. Anything else passes through.
CHOICE_LABELS = {"Yes": "Yea", "No": "Nay"}


def _text(value: Any) -> str:
    if value is None or value == "":
        return UNKNOWN
    return str(value)


class Ballot(BaseModel):
    """One member's recorded choice on one vote."""

    model_config = ConfigDict(frozen=True)

    vote_url: str
    ballot_choice: str
    raw: dict[str, Any] = {}

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Ballot":
        return cls(
            vote_url=data.get("vote_url") or "",
            ballot_choice=_text(data.get("ballot")),
            raw=data,
        )

    @property
    def choice_label(self) -> str:
        return CHOICE_LABELS.get(self.ballot_choice, self.ballot_choice)


class VoteDetail(BaseModel):
    """The canonical record of a single vote."""

    model_config = ConfigDict(frozen=True)

    session: str
    number: str
    bill_number: Optional[str] = None
    description: str
    date: str
    result: str
    raw: dict[str, Any] = {}

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "VoteDetail":
        bill = data.get("bill")
        bill_number = bill.get("number") if isinstance(bill, dict) else None

        description = data.get("description")
        if isinstance(description, dict):
            description = description.get("en")

        result = data.get("result")
        if not result and isinstance(data.get("passed"), bool):
            result = "Passed" if data["passed"] else "Failed"

        return cls(
            session=_text(data.get("session")),
            number=_text(data.get("number")),
            bill_number=str(bill_number) if bill_number else None,
            description=_text(description),
            date=_text(data.get("date")),
            result=_text(result),
            raw=data,
        )

    @property
    def bill_label(self) -> str:
        return f"Bill {self.bill_number}" if self.bill_number else MOTION


class EnrichedVote(BaseModel):
    """A ballot merged with (at most) its vote detail."""

    id: str
    vote_url: str
    bill: str
    bill_number: Optional[str] = None
    description: str = UNKNOWN
    date: str = UNKNOWN
    choice: str
    result: str = UNKNOWN
    enrichment_error: Optional[str] = None


class Pagination(BaseModel):
    count: int
    next: Optional[str] = None
    previous: Optional[str] = None


class AggregateMeta(BaseModel):
    subject_id: str
    enriched_count: int
    total_count: int


class AggregateResult(BaseModel):
    items: list[EnrichedVote]
    pagination: Pagination
    meta: AggregateMeta
