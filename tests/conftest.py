"""
Shared fixtures for the roadmap server tests.

The roadmap API is replaced by `FakeRoadmapAPI`, plugged into the fetcher
through `httpx.MockTransport`; the cache runs on a manually advanced clock.
"""

from __future__ import annotations

from typing import Any

import httpx
import pytest

from core.cache import ResultCache
from core.fetcher import RoadmapFetcher

BASE_URL = "https://roadmap.example.test/api/v2/m365"


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRoadmapAPI:
    """Answers every GET with `{"value": items}` and records the requests."""

    def __init__(self, items: list[dict[str, Any]] | None = None, status: int = 200) -> None:
        self.items = items if items is not None else []
        self.status = status
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status >= 400:
            return httpx.Response(self.status, text="upstream says no")
        return httpx.Response(self.status, json={"value": self.items})

    @property
    def filters(self) -> list[str | None]:
        return [r.url.params.get("$filter") for r in self.requests]


def make_item(index: int, **fields: Any) -> dict[str, Any]:
    item: dict[str, Any] = {
        "id": index,
        "title": f"Feature {index}",
        "description": f"Description of feature {index}",
        "status": "Launched",
        "products": ["Microsoft Teams"],
        "releaseRings": ["General Availability"],
        "generalAvailabilityDate": "2025-10",
        "moreInfoLink": f"https://example.test/roadmap/{index}",
    }
    item.update(fields)
    return item


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> ResultCache:
    return ResultCache(clock=clock)


@pytest.fixture
def api() -> FakeRoadmapAPI:
    return FakeRoadmapAPI(items=[make_item(i) for i in range(23)])


@pytest.fixture
def fetcher(api: FakeRoadmapAPI, cache: ResultCache) -> RoadmapFetcher:
    return RoadmapFetcher(BASE_URL, cache, transport=httpx.MockTransport(api))
