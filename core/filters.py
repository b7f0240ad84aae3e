"""Builds OData filter clauses for the typed filter tools.

Each tool that filters on a single field is described by a `FilterSpec` row in
`TOOL_FILTERS`; `build_filter` turns a row and a value into the expression.
Literal values always go through `escape_literal`.
"""
from dataclasses import dataclass
from typing import Dict, Optional

from core.sanitizer import escape_literal

EQ = "eq"
ANY_EQ = "any_eq"
NUMBER_EQ = "number_eq"


@dataclass(frozen=True)
class FilterSpec:
    field: str
    operator: str = EQ
    # lambda variable used by any() clauses, e.g. products/any(p:p eq '...')
    var: Optional[str] = None


def build_filter(spec: FilterSpec, value: str) -> str:
    if spec.operator == EQ:
        return f"{spec.field} eq '{escape_literal(value)}'"
    if spec.operator == ANY_EQ:
        var = spec.var or spec.field[0]
        return f"{spec.field}/any({var}:{var} eq '{escape_literal(value)}')"
    if spec.operator == NUMBER_EQ:
        if not value.isdigit():
            raise ValueError(f"{spec.field} must be numeric, got {value!r}")
        return f"{spec.field} eq {value}"
    raise ValueError(f"Unknown filter operator: {spec.operator}")


TOOL_FILTERS: Dict[str, FilterSpec] = {
    "get_roadmap_item": FilterSpec("id", NUMBER_EQ),
    "filter_by_product": FilterSpec("products", ANY_EQ, "p"),
    "filter_by_platform": FilterSpec("platforms", ANY_EQ, "p"),
    "filter_by_cloud_instance": FilterSpec("cloudInstances", ANY_EQ, "c"),
    "filter_by_release_phase": FilterSpec("releaseRings", ANY_EQ, "r"),
    "filter_by_status": FilterSpec("status", EQ),
}

DATE_FIELDS: Dict[str, str] = {
    "generalAvailability": "generalAvailabilityDate",
    "preview": "previewAvailabilityDate",
}


def tool_filter(tool_name: str, value: str) -> str:
    return build_filter(TOOL_FILTERS[tool_name], value)


def date_filter(date_type: str, date: str) -> str:
    return build_filter(FilterSpec(DATE_FIELDS[date_type]), date)
