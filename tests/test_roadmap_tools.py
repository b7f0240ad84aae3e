"""Tests for get_roadmap_items, search_roadmap and get_roadmap_item."""

import httpx
import pytest

from core.cache import ResultCache
from core.fetcher import RoadmapFetcher
from tools.roadmap import get_roadmap_item, get_roadmap_items, get_tools, search_roadmap
from tests.conftest import BASE_URL, FakeRoadmapAPI, make_item


class TestGetRoadmapItems:
    """Test paging and the optional custom filter."""

    @pytest.mark.asyncio
    async def test_page_in_the_middle(self, fetcher: RoadmapFetcher) -> None:
        result = await get_roadmap_items(fetcher, limit=10, offset=5)
        assert result["total"] == 23
        assert result["returned"] == 10
        assert result["offset"] == 5
        assert result["limit"] == 10
        assert result["hasMore"] is True
        assert result["items"][0]["id"] == 5

    @pytest.mark.asyncio
    async def test_last_page(self, fetcher: RoadmapFetcher) -> None:
        result = await get_roadmap_items(fetcher, limit=10, offset=20)
        assert result["returned"] == 3
        assert result["hasMore"] is False

    @pytest.mark.asyncio
    async def test_defaults(self, fetcher: RoadmapFetcher, api: FakeRoadmapAPI) -> None:
        result = await get_roadmap_items(fetcher)
        assert result["limit"] == 100
        assert result["offset"] == 0
        assert result["returned"] == 23
        assert result["filter"] is None
        assert api.filters == [None]

    @pytest.mark.asyncio
    async def test_items_round_trip_unknown_fields(self, fetcher: RoadmapFetcher) -> None:
        result = await get_roadmap_items(fetcher, limit=1)
        assert result["items"][0] == make_item(0)

    @pytest.mark.asyncio
    async def test_filter_is_sanitized_and_sent(self, fetcher: RoadmapFetcher, api: FakeRoadmapAPI) -> None:
        result = await get_roadmap_items(fetcher, filter="  status eq 'Launched';  ")
        assert api.filters == ["status eq 'Launched'"]
        assert result["filter"] == "status eq 'Launched'"

    @pytest.mark.asyncio
    async def test_blank_filter_means_no_filter(self, fetcher: RoadmapFetcher, api: FakeRoadmapAPI) -> None:
        await get_roadmap_items(fetcher, filter="   ")
        assert api.filters == [None]

    @pytest.mark.asyncio
    async def test_rejected_filter(self, fetcher: RoadmapFetcher, api: FakeRoadmapAPI) -> None:
        result = await get_roadmap_items(fetcher, filter="status eq 'x'; DROP")
        assert result["isError"] is True
        assert result["error"] == "InvalidFilterError"
        assert result["context"]["filter"] == "status eq 'x'; DROP"
        assert api.requests == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "kwargs",
        [{"limit": 0}, {"limit": 1001}, {"offset": -1}, {"filter": "x" * 1001}],
    )
    async def test_out_of_bounds_arguments(
        self, fetcher: RoadmapFetcher, api: FakeRoadmapAPI, kwargs
    ) -> None:
        result = await get_roadmap_items(fetcher, **kwargs)
        assert result["isError"] is True
        assert result["error"] == "ValidationError"
        assert next(iter(kwargs)) in result["message"]
        assert result["context"] == kwargs
        assert api.requests == []

    @pytest.mark.asyncio
    async def test_upstream_failure_is_reported(self, cache: ResultCache) -> None:
        fetcher = RoadmapFetcher(BASE_URL, cache, transport=httpx.MockTransport(FakeRoadmapAPI(status=500)))
        result = await get_roadmap_items(fetcher, limit=5)
        assert result["isError"] is True
        assert result["error"] == "UpstreamError"
        assert result["status"] == 500
        assert result["context"] == {"limit": 5}


class TestSearchRoadmap:
    """Test local keyword search."""

    @pytest.fixture
    def api(self) -> FakeRoadmapAPI:
        return FakeRoadmapAPI(
            items=[
                make_item(1, title="Microsoft Copilot Update"),
                make_item(2, title="Teams meeting recap", description="Powered by copilot"),
                make_item(3, title="SharePoint pages", description=None),
                make_item(4, title="Copilot in Excel"),
            ]
        )

    @pytest.mark.asyncio
    async def test_case_insensitive_match(self, fetcher: RoadmapFetcher, api: FakeRoadmapAPI) -> None:
        result = await search_roadmap(fetcher, keyword="copilot")
        assert [item["id"] for item in result["items"]] == [1, 2, 4]
        assert result["total"] == 3
        assert result["keyword"] == "copilot"
        assert api.filters == [None]

    @pytest.mark.asyncio
    async def test_limit(self, fetcher: RoadmapFetcher) -> None:
        result = await search_roadmap(fetcher, keyword="COPILOT", limit=2)
        assert result["returned"] == 2
        assert result["total"] == 3
        assert result["hasMore"] is True

    @pytest.mark.asyncio
    async def test_no_match(self, fetcher: RoadmapFetcher) -> None:
        result = await search_roadmap(fetcher, keyword="viva")
        assert result["total"] == 0
        assert result["items"] == []

    @pytest.mark.asyncio
    async def test_searches_share_the_unfiltered_cache(
        self, fetcher: RoadmapFetcher, api: FakeRoadmapAPI
    ) -> None:
        await search_roadmap(fetcher, keyword="copilot")
        await search_roadmap(fetcher, keyword="teams")
        await get_roadmap_items(fetcher)
        assert len(api.requests) == 1

    @pytest.mark.asyncio
    async def test_empty_keyword_is_rejected(self, fetcher: RoadmapFetcher) -> None:
        result = await search_roadmap(fetcher, keyword="")
        assert result["error"] == "ValidationError"


class TestGetRoadmapItem:
    """Test lookup by ID."""

    @pytest.mark.asyncio
    async def test_found(self, fetcher: RoadmapFetcher, api: FakeRoadmapAPI) -> None:
        api.items = [make_item(412345)]
        result = await get_roadmap_item(fetcher, id="412345")
        assert api.filters == ["id eq 412345"]
        assert result["id"] == "412345"
        assert result["returned"] == 1
        assert result["items"][0]["id"] == 412345

    @pytest.mark.asyncio
    async def test_not_found_is_an_envelope(self, fetcher: RoadmapFetcher, api: FakeRoadmapAPI) -> None:
        api.items = []
        result = await get_roadmap_item(fetcher, id="999999999")
        assert result["isError"] is True
        assert result["error"] == "NotFoundError"
        assert "999999999" in result["message"]
        assert result["context"] == {"id": "999999999"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_id", ["", "12a", "1 or 1 eq 1", "1" * 21])
    async def test_non_numeric_id_is_rejected(
        self, fetcher: RoadmapFetcher, api: FakeRoadmapAPI, bad_id: str
    ) -> None:
        result = await get_roadmap_item(fetcher, id=bad_id)
        assert result["error"] == "ValidationError"
        assert api.requests == []


def test_get_tools_registers_handlers() -> None:
    tools = get_tools()
    assert set(tools) == {"get_roadmap_items", "search_roadmap", "get_roadmap_item"}
    assert all(callable(meta["func"]) and meta["title"] for meta in tools.values())
