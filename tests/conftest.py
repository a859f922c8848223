"""Shared fixtures: a controllable clock and canned OpenParliament payloads."""

from __future__ import annotations

from dataclasses import dataclass

import pytest


@dataclass
class FakeClock:
    now: float = 1_700_000_000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def make_ballot(session: str = "44-1", number: int = 1, choice: str = "Yes") -> dict:
    return {
        "vote_url": f"/votes/{session}/{number}/",
        "politician_url": "/politicians/jane-doe/",
        "ballot": choice,
    }


def make_vote(session: str = "44-1", number: int = 1, bill: str | None = "C-69", **extra) -> dict:
    vote = {
        "session": session,
        "number": number,
        "date": "2024-06-12",
        "description": {"en": f"Motion number {number}", "fr": f"Motion numéro {number}"},
        "result": "Passed",
        "bill_url": f"/bills/{session}/{bill}/" if bill else None,
    }
    if bill:
        vote["bill"] = {"number": bill}
    vote.update(extra)
    return vote


def ballot_page(ballots: list[dict]) -> dict:
    return {
        "objects": ballots,
        "pagination": {"offset": 0, "limit": 50, "next_url": None, "previous_url": None},
    }
