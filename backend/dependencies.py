"""FastAPI dependencies for the service objects built at startup."""

from fastapi import Request

from services.durable_cache import DurableCache
from services.resources import ResourceCache
from services.voting_history import VotingHistoryService


def get_resources(request: Request) -> ResourceCache:
    return request.app.state.resources


def get_voting_history(request: Request) -> VotingHistoryService:
    return request.app.state.voting_history


def get_durable_cache(request: Request) -> DurableCache:
    return request.app.state.durable_cache
