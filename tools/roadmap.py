from typing import Any, Optional

from core.envelope import items_envelope, page_envelope, tool_handler, validated
from core.errors import NotFoundError
from core.fetcher import RoadmapFetcher
from core.filters import tool_filter
from core.models import FilterExpression, ItemId, Label, Limit, Offset
from core.sanitizer import sanitize


@tool_handler
@validated
async def get_roadmap_items(
    fetcher: RoadmapFetcher,
    limit: Limit = 100,
    offset: Offset = 0,
    filter: Optional[FilterExpression] = None,
) -> dict[str, Any]:
    """Fetch roadmap items, optionally narrowed by a custom OData filter, one page at a time."""
    filter_expr = sanitize(filter) if filter and filter.strip() else None
    items = await fetcher.fetch(filter_expr)
    return page_envelope(items, limit=limit, offset=offset, with_offset=True, filter=filter_expr)


@tool_handler
@validated
async def search_roadmap(
    fetcher: RoadmapFetcher,
    keyword: Label,
    limit: Limit = 20,
) -> dict[str, Any]:
    """Case-insensitive keyword search over item titles and descriptions.

    The API has no full-text search, so the whole unfiltered collection is
    fetched (usually from cache) and matched locally.
    """
    items = await fetcher.fetch()
    matches = [item for item in items if item.matches_keyword(keyword)]
    return page_envelope(matches, limit=limit, keyword=keyword)


@tool_handler
@validated
async def get_roadmap_item(fetcher: RoadmapFetcher, id: ItemId) -> dict[str, Any]:
    items = await fetcher.fetch(tool_filter("get_roadmap_item", id))
    if not items:
        raise NotFoundError(f"No roadmap item found with ID: {id}")
    return items_envelope(items[:1], total=len(items), id=id)


def get_tools() -> dict[str, Any]:
    return {
        "get_roadmap_items": {
            "func": get_roadmap_items,
            "title": "Get Microsoft 365 Roadmap Items",
            "description": "Fetches Microsoft 365 roadmap items from the official API (v2) with offset/limit paging and an optional OData filter, e.g. \"status eq 'Launched'\"",
        },
        "search_roadmap": {
            "func": search_roadmap,
            "title": "Search Microsoft 365 Roadmap",
            "description": "Search for roadmap items by keyword in title or description (case-insensitive)",
        },
        "get_roadmap_item": {
            "func": get_roadmap_item,
            "title": "Get Roadmap Item by ID",
            "description": "Fetches a specific Microsoft 365 roadmap item by its numeric ID",
        },
    }
