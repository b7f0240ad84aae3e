from typing import Any

from core.envelope import page_envelope, tool_handler, validated
from core.fetcher import RoadmapFetcher
from core.filters import date_filter, tool_filter
from core.models import DateType, FilterExpression, Label, Limit, MonthDate, ReleasePhase, Status
from core.sanitizer import sanitize


@tool_handler
@validated
async def filter_by_product(fetcher: RoadmapFetcher, product: Label, limit: Limit = 100) -> dict[str, Any]:
    """Items tagged with `product`, e.g. "Microsoft Teams"."""
    items = await fetcher.fetch(tool_filter("filter_by_product", product))
    return page_envelope(items, limit=limit, product=product)


@tool_handler
@validated
async def filter_by_platform(fetcher: RoadmapFetcher, platform: Label, limit: Limit = 100) -> dict[str, Any]:
    items = await fetcher.fetch(tool_filter("filter_by_platform", platform))
    return page_envelope(items, limit=limit, platform=platform)


@tool_handler
@validated
async def filter_by_cloud_instance(
    fetcher: RoadmapFetcher, cloudInstance: Label, limit: Limit = 100
) -> dict[str, Any]:
    items = await fetcher.fetch(tool_filter("filter_by_cloud_instance", cloudInstance))
    return page_envelope(items, limit=limit, cloudInstance=cloudInstance)


@tool_handler
@validated
async def filter_by_release_phase(
    fetcher: RoadmapFetcher, phase: ReleasePhase, limit: Limit = 100
) -> dict[str, Any]:
    items = await fetcher.fetch(tool_filter("filter_by_release_phase", phase))
    return page_envelope(items, limit=limit, phase=phase)


@tool_handler
@validated
async def filter_by_status(fetcher: RoadmapFetcher, status: Status, limit: Limit = 100) -> dict[str, Any]:
    items = await fetcher.fetch(tool_filter("filter_by_status", status))
    return page_envelope(items, limit=limit, status=status)


@tool_handler
@validated
async def filter_by_date(
    fetcher: RoadmapFetcher,
    date: MonthDate,
    dateType: DateType = "generalAvailability",
    limit: Limit = 100,
) -> dict[str, Any]:
    """Items whose GA or preview month equals `date` (YYYY-MM)."""
    items = await fetcher.fetch(date_filter(dateType, date))
    return page_envelope(items, limit=limit, date=date, dateType=dateType)


@tool_handler
@validated
async def filter_roadmap(fetcher: RoadmapFetcher, filter: FilterExpression, limit: Limit = 100) -> dict[str, Any]:
    """Run a caller-written OData expression after sanitizing it."""
    filter_expr = sanitize(filter)
    items = await fetcher.fetch(filter_expr)
    return page_envelope(items, limit=limit, filter=filter_expr)


def get_tools() -> dict[str, Any]:
    return {
        "filter_by_product": {
            "func": filter_by_product,
            "title": "Filter by Product",
            "description": 'Get roadmap items for a specific Microsoft product (e.g., "Microsoft Copilot (Microsoft 365)", "Microsoft Teams", "SharePoint")',
        },
        "filter_by_platform": {
            "func": filter_by_platform,
            "title": "Filter by Platform",
            "description": 'Get roadmap items available on a platform (e.g., "Web", "Desktop", "iOS", "Android", "Mac")',
        },
        "filter_by_cloud_instance": {
            "func": filter_by_cloud_instance,
            "title": "Filter by Cloud Instance",
            "description": 'Get roadmap items for a cloud instance (e.g., "Worldwide (Standard Multi-Tenant)", "GCC", "GCC High", "DoD")',
        },
        "filter_by_release_phase": {
            "func": filter_by_release_phase,
            "title": "Filter by Release Phase",
            "description": 'Get roadmap items filtered by release ring/phase ("General Availability", "Public Preview", "In Development", "Rolling Out")',
        },
        "filter_by_status": {
            "func": filter_by_status,
            "title": "Filter by Status",
            "description": 'Get roadmap items by their current status ("In development", "Rolling out", "Launched")',
        },
        "filter_by_date": {
            "func": filter_by_date,
            "title": "Filter by Release Date",
            "description": 'Get roadmap items by GA or preview date (format: YYYY-MM, e.g. "2025-10" for October 2025)',
        },
        "filter_roadmap": {
            "func": filter_roadmap,
            "title": "Advanced Filter",
            "description": "Use custom OData filter expressions. Examples: \"products/any(p:p eq 'Microsoft Teams') and status eq 'Launched'\", \"generalAvailabilityDate ge '2025-10'\"",
        },
    }
