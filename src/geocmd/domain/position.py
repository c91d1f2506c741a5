"""Geographic positions and coordinate validity rules."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, field_validator
from pydantic import ValidationError as PydanticValidationError

from geocmd.errors import ValidationError
from geocmd.util import is_number

MAX_LAT = 90.0
MAX_LON = 180.0


def _in_range(value: Any, bound: float) -> bool:
    # Compare before converting: huge ints overflow float(), NaN fails both sides.
    return is_number(value) and -bound <= value <= bound


def is_valid_lat(value: Any) -> bool:
    """True if *value* is a finite number within [-90, 90]."""
    return _in_range(value, MAX_LAT)


def is_valid_lon(value: Any) -> bool:
    """True if *value* is a finite number within [-180, 180]."""
    return _in_range(value, MAX_LON)


class LatLon(BaseModel):
    """An immutable, always-valid geographic position."""

    model_config = {"frozen": True, "strict": True}

    lat: float
    lon: float

    @field_validator("lat", mode="before")
    @classmethod
    def _check_lat(cls, value: Any) -> Any:
        if not is_valid_lat(value):
            raise ValueError(f"expected a valid lat, got {value!r}")
        return float(value)

    @field_validator("lon", mode="before")
    @classmethod
    def _check_lon(cls, value: Any) -> Any:
        if not is_valid_lon(value):
            raise ValueError(f"expected a valid lon, got {value!r}")
        return float(value)

    @classmethod
    def make(cls, obj: Any) -> LatLon:
        """Build a position from a ``{"lat": ..., "lon": ...}`` mapping or an
        object with ``lat`` and ``lon`` attributes.

        Raises :class:`geocmd.errors.ValidationError` if either coordinate is
        missing or invalid.
        """
        if isinstance(obj, LatLon):
            return obj
        if isinstance(obj, Mapping):
            lat, lon = obj.get("lat"), obj.get("lon")
        else:
            lat, lon = getattr(obj, "lat", None), getattr(obj, "lon", None)
        if lat is None or lon is None:
            raise ValidationError("pos: expected fields 'lat' and 'lon', got {0}", obj)
        try:
            return cls(lat=lat, lon=lon)
        except PydanticValidationError as exc:
            raise ValidationError("pos: invalid position {0}", obj) from exc

    def with_lat(self, lat: float) -> LatLon:
        """Copy of this position with a different latitude."""
        return LatLon(lat=lat, lon=self.lon)

    def with_lon(self, lon: float) -> LatLon:
        """Copy of this position with a different longitude."""
        return LatLon(lat=self.lat, lon=lon)

    def __str__(self) -> str:
        return f"({self.lat}, {self.lon})"
