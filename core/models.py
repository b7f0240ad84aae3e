"""Pydantic models for roadmap data and the shared tool argument types."""
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

MAX_LIMIT = 1000
MAX_FILTER_LENGTH = 1000
MAX_LABEL_LENGTH = 200


class RoadmapItem(BaseModel):
    """One roadmap entry as returned by the API.

    Only the fields below are interpreted; any other key the API sends is kept
    in the model's extra fields and written back out by `to_api_dict`. Named
    fields are loosely typed so an odd value passes through instead of
    dropping the item.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        frozen=True,
    )

    id: Union[int, str]
    title: Any = None
    description: Any = None
    status: Any = None
    products: Optional[List[Any]] = None
    platforms: Optional[List[Any]] = None
    release_rings: Optional[List[Any]] = None
    cloud_instances: Optional[List[Any]] = None
    general_availability_date: Any = None
    preview_availability_date: Any = None

    def matches_keyword(self, keyword: str) -> bool:
        needle = keyword.lower()
        return any(
            needle in text.lower() for text in (self.title, self.description) if isinstance(text, str)
        )

    def to_api_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)


Limit = Annotated[
    int, Field(ge=1, le=MAX_LIMIT, description=f"Maximum number of items to return (1-{MAX_LIMIT})")
]
Offset = Annotated[int, Field(ge=0, description="Number of items to skip")]
Label = Annotated[str, Field(min_length=1, max_length=MAX_LABEL_LENGTH)]
FilterExpression = Annotated[
    str,
    Field(
        max_length=MAX_FILTER_LENGTH,
        description="OData filter expression, e.g. \"status eq 'Launched'\"",
    ),
]
ItemId = Annotated[
    str, Field(min_length=1, max_length=20, pattern=r"^[0-9]+$", description="Numeric roadmap item ID")
]
MonthDate = Annotated[
    str,
    Field(pattern=r"^\d{4}-(0[1-9]|1[0-2])$", description='Date in format YYYY-MM, e.g. "2025-10"'),
]

ReleasePhase = Literal["General Availability", "Public Preview", "In Development", "Rolling Out"]
Status = Literal["In development", "Rolling out", "Launched"]
DateType = Literal["generalAvailability", "preview"]
