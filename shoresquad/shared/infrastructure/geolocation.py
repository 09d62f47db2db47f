"""Geolocation providers.

A provider resolves the user's position asynchronously or raises
:class:`GeolocationError`. Permission refusal is reported as
:class:`GeolocationDenied`. Providers never retry on their own.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Protocol

from pydantic import ValidationError

from shoresquad.shared.core.errors import GeolocationDenied, GeolocationError
from shoresquad.shared.domain.models import Coordinate

logger = logging.getLogger(__name__)

# W3C GeolocationPositionError.PERMISSION_DENIED
PERMISSION_DENIED = 1


class GeolocationProvider(Protocol):
    async def get_current_position(self) -> Coordinate: ...


class StaticGeolocationProvider:
    """Returns a fixed position, or fails when none is configured."""

    def __init__(self, position: Optional[Coordinate] = None, denied: bool = False) -> None:
        self.position = position
        self.denied = denied

    async def get_current_position(self) -> Coordinate:
        if self.denied:
            raise GeolocationDenied("User denied Geolocation")
        if self.position is None:
            raise GeolocationError("Position unavailable")
        return self.position


class BrowserGeolocationProvider:
    """Wraps the result object of ``navigator.geolocation.getCurrentPosition``.

    The page fetches the browser result (``streamlit_js_eval.get_geolocation``
    in the sandbox) and hands it over; this class only interprets it. A result
    of ``None`` means the browser has not answered yet.
    """

    def __init__(self, result: Optional[Mapping[str, Any]]) -> None:
        self.result = result

    async def get_current_position(self) -> Coordinate:
        if not self.result:
            raise GeolocationError("Position unavailable")

        error = self.result.get("error")
        if error:
            code = error.get("code") if isinstance(error, Mapping) else None
            message = error.get("message", "") if isinstance(error, Mapping) else str(error)
            if code == PERMISSION_DENIED:
                raise GeolocationDenied(message or "User denied Geolocation")
            raise GeolocationError(message or "Position unavailable")

        coords = self.result.get("coords") or {}
        try:
            return Coordinate(lat=coords.get("latitude"), lng=coords.get("longitude"))
        except ValidationError as e:
            raise GeolocationError(f"Browser returned an invalid position: {e.error_count()} error(s)") from e
