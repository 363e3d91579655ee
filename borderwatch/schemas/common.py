"""
Shared API schema building blocks for BorderWatch.

Every API model serialises with camelCase keys and can be built straight
from an ORM row.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class GeoLocation(APIModel):
    """A point on the map with an optional street address."""
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    address: Optional[str] = None


class TargetArea(GeoLocation):
    """Area an alert applies to: a centre point and a radius in kilometers."""
    radius: Optional[float] = Field(None, gt=0)
