"""Cache-then-fetch-then-store access to pass-through OpenParliament resources."""

import logging
import time
from typing import Any, Callable

from models.cache import CacheEntry
from services.durable_cache import DurableCache
from services.openparliament import OpenParliamentClient
from services.ttl_policy import expiry_for

logger = logging.getLogger(__name__)


class ResourceCache:
    def __init__(
        self,
        client: OpenParliamentClient,
        store: DurableCache,
        clock: Callable[[], float] = time.time,
    ):
        self._client = client
        self._store = store
        self._clock = clock

    async def get_or_fetch(
        self,
        key: str,
        path: str,
        params: dict[str, Any] | None = None,
        bypass_cache: bool = False,
    ) -> Any:
        """Return the cached payload for `key`, fetching `path` on a miss.

        The TTL comes from the shape of `path`. With bypass_cache the store
        is neither read nor written.
        """
        if bypass_cache:
            return await self._client.fetch(path, params)

        entry = await self._store.find_by_key(key)
        if entry is not None:
            logger.debug("Durable cache hit: %s", key)
            return entry.payload

        logger.debug("Durable cache miss: %s", key)
        payload = await self._client.fetch(path, params)
        await self._store.save(CacheEntry.build(key, payload, expiry_for(path, self._clock())))
        return payload
