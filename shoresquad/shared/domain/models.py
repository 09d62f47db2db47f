"""Domain models for crews, cleanups and the durable snapshot.

All models are frozen: a Cleanup or Crew is replaced, never edited. The
serialized form (``by_alias=True``) uses the camelCase keys of the browser
storage format so existing saved data loads unchanged. Coordinates also
accept the ``latitude``/``longitude`` names the browser geolocation API uses.
"""

from __future__ import annotations

from typing import Literal, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Severity = Literal["info", "success", "error"]
SEVERITIES: Tuple[str, ...] = ("info", "success", "error")


class _Model(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


class Coordinate(_Model):
    """A WGS84 point in decimal degrees."""

    lat: float = Field(ge=-90.0, le=90.0, validation_alias=AliasChoices("lat", "latitude"))
    lng: float = Field(ge=-180.0, le=180.0, validation_alias=AliasChoices("lng", "longitude"))

    def as_pair(self) -> Tuple[float, float]:
        return (self.lat, self.lng)


class Cleanup(_Model):
    """A scheduled beach-cleanup event at a fixed coordinate."""

    id: str
    name: str
    location: Coordinate
    date: str
    crew_size: int = Field(default=0, ge=0)
    weather: str = ""
    plastic_target: float = Field(default=0, ge=0, allow_inf_nan=False)


class Crew(_Model):
    """A volunteer team.

    ``next_cleanup`` is a display label, not a reference into the cleanup
    collection; nothing checks that it matches a cleanup name.
    """

    id: str
    name: str
    members: int = Field(default=0, ge=0)
    completed_cleanups: int = Field(default=0, ge=0, alias="cleanups")
    next_cleanup: str = ""
    color: str = "#0077BE"


class Stats(_Model):
    total_cleanups: int = 0
    total_crew: int = 0
    plastic_collected: float = 0
    beaches_clean: int = 0


class ForecastDay(_Model):
    """A row of the weather strip shown next to the cleanup list."""

    day: str
    temp_c: float
    condition: str
    icon: str = ""
    uv: str = ""


class AppSnapshot(_Model):
    """The durable subset of AppState.

    Every field is optional so a partial snapshot still loads; absent fields
    fall back to seed data. ``stats`` is written for readers of the stored
    blob but never trusted on load.
    """

    crews: Optional[Tuple[Crew, ...]] = None
    cleanups: Optional[Tuple[Cleanup, ...]] = None
    stats: Optional[Stats] = None
    user_location: Optional[Coordinate] = None

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)
