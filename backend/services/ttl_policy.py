"""Cache lifetime tiers for OpenParliament resources.

The tier is derived from the shape of the upstream path alone. Anything
that does not look like a detail or a member's votes is treated as a list.
"""

from enum import Enum


class TTLTier(Enum):
    LIST = 5 * 60
    DETAIL = 30 * 60
    MEMBER_VOTES = 10 * 60

    @property
    def seconds(self) -> int:
        return self.value


def _is_detail(path: str, segment: str) -> bool:
    return segment in path and not path.endswith(segment)


def classify(path: str) -> TTLTier:
    """Map an upstream path to its TTL tier. First matching rule wins."""
    if _is_detail(path, "/votes/"):
        return TTLTier.DETAIL
    if _is_detail(path, "/bills/"):
        return TTLTier.DETAIL
    if "/politicians/" in path and "/votes/" in path:
        return TTLTier.MEMBER_VOTES
    if _is_detail(path, "/politicians/"):
        return TTLTier.DETAIL
    return TTLTier.LIST


def expiry_for(path: str, now: float) -> float:
    """Absolute expiry (unix seconds) for a resource fetched at `now`."""
    return now + classify(path).seconds
