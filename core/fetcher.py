"""Single-GET client for the Microsoft 365 roadmap API, backed by ResultCache."""
import asyncio
import logging
from typing import List, Optional
from urllib.parse import quote

import httpx
import pydantic

from core.cache import NO_FILTER_KEY, ResultCache
from core.config import DEFAULT_USER_AGENT
from core.errors import UpstreamError, UpstreamTimeoutError
from core.models import RoadmapItem
from utils.response_utils import extract_collection, robust_parse_text

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 30.0
MAX_ERROR_BODY_CHARS = 500


class RoadmapFetcher:
    """Fetches roadmap items, consulting the cache before every network call.

    `filter_expr` must already be sanitized or built from escaped literals;
    it is used verbatim as both the `$filter` parameter and the cache key.
    """

    def __init__(
        self,
        base_url: str,
        cache: ResultCache,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.cache = cache
        self.timeout = timeout
        self.headers = {"Accept": "application/json", "User-Agent": user_agent}
        self._transport = transport

    def build_url(self, filter_expr: Optional[str] = None) -> str:
        if not filter_expr:
            return self.base_url
        return f"{self.base_url}?$filter={quote(filter_expr, safe='')}"

    async def fetch(self, filter_expr: Optional[str] = None) -> List[RoadmapItem]:
        key = filter_expr or NO_FILTER_KEY
        cached = self.cache.lookup(key)
        if cached is not None:
            logger.info("Cache hit for %r (%d items)", key, len(cached))
            return list(cached)

        logger.info("Cache miss for %r", key)
        items = await self._request(filter_expr)
        self.cache.store(key, items)
        return items

    async def _request(self, filter_expr: Optional[str]) -> List[RoadmapItem]:
        url = self.build_url(filter_expr)
        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
            try:
                resp = await asyncio.wait_for(client.get(url, headers=self.headers), self.timeout)
            except (asyncio.TimeoutError, httpx.TimeoutException) as e:
                logger.warning(f"Request to {url} timed out after {self.timeout}s")
                raise UpstreamTimeoutError(
                    f"Roadmap API did not respond within {self.timeout:g} seconds"
                ) from e
            except httpx.HTTPError as e:
                logger.warning(f"Request to {url} failed: {e}")
                raise UpstreamError(f"Roadmap API request failed: {e}") from e

            logger.info("GET %s -> %s", url, resp.status_code)
            if not resp.is_success:
                try:
                    body = resp.text[:MAX_ERROR_BODY_CHARS]
                except Exception:
                    body = ""
                raise UpstreamError(
                    f"API request failed: {resp.status_code} {resp.reason_phrase}",
                    status=resp.status_code,
                    body=body,
                )

            try:
                data = resp.json()
            except ValueError as e:
                data = robust_parse_text(resp.text)
                logger.warning(
                    f"Failed to decode JSON from {url}: {e}; falling back to the leading JSON object"
                )

        return _to_items(extract_collection(data))


def _to_items(raw_items: list) -> List[RoadmapItem]:
    items = []
    for raw in raw_items:
        if not isinstance(raw, dict):
            logger.warning("Skipping non-object roadmap entry: %r", raw)
            continue
        try:
            items.append(RoadmapItem.model_validate(raw))
        except pydantic.ValidationError as e:
            logger.warning("Skipping malformed roadmap entry %r: %s", raw.get("id"), e)
    return items
