from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

Category = Literal["hotel", "restaurant", "activity"]


def normalize_tags(tags) -> frozenset[str]:
    """Lower-case, strip and de-duplicate tags; drops empty entries.

    Raises ValueError for anything but a collection of strings, so pydantic
    reports it as a validation error.
    """
    if isinstance(tags, (str, bytes)) or not isinstance(tags, (list, tuple, set, frozenset)):
        raise ValueError("tags must be a list of strings")
    bad = [t for t in tags if not isinstance(t, str)]
    if bad:
        raise ValueError(f"tags must be strings (got {bad[0]!r})")
    return frozenset(t.strip().lower() for t in tags if t.strip())


class Coordinates(BaseModel):
    lat: float = Field(ge=-90, le=90, allow_inf_nan=False)
    lng: float = Field(ge=-180, le=180, allow_inf_nan=False)

    model_config = {"frozen": True}


class DateRange(BaseModel):
    start: date
    end: date

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_order(self):
        if self.start >= self.end:
            raise ValueError("start must be before end")
        return self


class TripParams(BaseModel):
    total_budget: Decimal = Field(ge=0)
    group_size: int = Field(default=1, ge=1)
    days: int = Field(ge=1)
    date_range: DateRange
    preference_tags: frozenset[str] = frozenset()
    anchor: Coordinates

    model_config = {"frozen": True}

    @field_validator("preference_tags", mode="before")
    @classmethod
    def _normalize_preferences(cls, v):
        return normalize_tags(() if v is None else v)


class Candidate(BaseModel):
    id: str = Field(min_length=1)
    name: str | None = None
    category: Category
    coords: Coordinates
    estimated_cost: Decimal = Field(ge=0)
    tags: frozenset[str] = frozenset()
    popularity_rating: float = Field(default=0.0, ge=0, le=5)
    weather_sensitive: bool | None = None

    model_config = {"frozen": True}

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, v):
        return normalize_tags(() if v is None else v)


class RankingRequest(BaseModel):
    params: TripParams
    category: Category
    current_spend: Decimal = Field(default=Decimal("0"), ge=0)
    city_id: str | None = None
    limit: int | None = Field(default=None, ge=1)
