"""Build a :class:`ChangeSpec` from named change options.

Recognized options, checked independently and scheduled in this order:

``lat``
    New latitude of the target points. Must be a number and a valid latitude.
``lon``
    New longitude of the target points. Must be a number and a valid longitude.
``pos``
    New position of the target points: a :class:`LatLon`, a mapping with
    ``lat`` and ``lon``, or any object with ``lat`` and ``lon`` attributes.
``tags``
    Tags merged into every target. Keys are trimmed; a None value removes
    the tag.
``nodes``
    New point list of the target paths. Checked by the engine.
``members``
    New member list of the target groups. Checked by the engine.

An option that is not given is skipped. ``lat``, ``lon`` and ``pos`` may be
combined; they are applied in the order above, so the last one wins.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from geocmd.domain.changes import (
    ChangeSpec,
    FieldChange,
    LatChange,
    LonChange,
    MembersChange,
    NodesChange,
    PosChange,
    TagsChange,
)
from geocmd.domain.position import LatLon, is_valid_lat, is_valid_lon
from geocmd.errors import InvalidArgumentError, ValidationError
from geocmd.util import assert_that, is_collection, is_number, trim

logger = logging.getLogger(__name__)

OPTION_NAMES: tuple[str, ...] = ("lat", "lon", "pos", "tags", "nodes", "members")


class ChangeOptions(BaseModel):
    """Named change options. Only the fields actually given are applied."""

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    lat: Any = None
    lon: Any = None
    pos: Any = None
    tags: Any = None
    nodes: Any = None
    members: Any = None

    @classmethod
    def from_mapping(cls, options: Mapping[Any, Any]) -> ChangeOptions:
        """Build options from a plain mapping. Unknown keys are ignored."""
        unknown = [k for k in options if k not in OPTION_NAMES]
        if unknown:
            logger.debug("Ignoring unknown change options: %s", unknown)
        return cls(**{k: options[k] for k in OPTION_NAMES if k in options})

    def given(self, name: str) -> bool:
        """True if option *name* was explicitly given."""
        return name in self.model_fields_set


def _lat_change(value: Any) -> FieldChange:
    assert_that(is_number(value), "lat: lat must be a number, got {0}", value, error_cls=ValidationError)
    assert_that(is_valid_lat(value), "lat: expected a valid lat, got {0}", value, error_cls=ValidationError)
    return LatChange(float(value))


def _lon_change(value: Any) -> FieldChange:
    assert_that(is_number(value), "lon: lon must be a number, got {0}", value, error_cls=ValidationError)
    assert_that(is_valid_lon(value), "lon: expected a valid lon, got {0}", value, error_cls=ValidationError)
    return LonChange(float(value))


def _pos_change(value: Any) -> FieldChange:
    assert_that(value is not None, "pos: must not be None", error_cls=ValidationError)
    if isinstance(value, LatLon):
        return PosChange(value)
    if isinstance(value, Mapping) or (hasattr(value, "lat") and hasattr(value, "lon")):
        return PosChange(LatLon.make(value))
    raise ValidationError("pos: unexpected value, expected LatLon or mapping, got {0}", value)


def _tags_change(value: Any) -> FieldChange:
    assert_that(value is not None, "tags: must not be None", error_cls=ValidationError)
    assert_that(
        isinstance(value, Mapping),
        "tags: unexpected value, expected a mapping, got {0}",
        value,
        error_cls=ValidationError,
    )
    tags: dict[str, str | None] = {}
    for raw_key, tag_value in value.items():
        key = trim(raw_key)
        assert_that(key, "tags: empty tag key in {0}", value, error_cls=ValidationError)
        assert_that(
            tag_value is None or isinstance(tag_value, str),
            "tags: value of {0} must be a string or None, got {1}",
            key,
            tag_value,
            error_cls=ValidationError,
        )
        tags[key] = tag_value
    return TagsChange(tags)


def _frozen(value: Any) -> Any:
    return tuple(value) if is_collection(value) else value


_SCHEDULERS = {
    "lat": _lat_change,
    "lon": _lon_change,
    "pos": _pos_change,
    "tags": _tags_change,
    "nodes": lambda value: NodesChange(_frozen(value)),
    "members": lambda value: MembersChange(_frozen(value)),
}


def build_change_spec(options: ChangeOptions | Mapping[Any, Any]) -> ChangeSpec:
    """Translate *options* into an ordered, immutable :class:`ChangeSpec`.

    Raises :class:`ValidationError` for the first invalid option and
    :class:`InvalidArgumentError` if *options* is neither a
    :class:`ChangeOptions` nor a mapping.
    """
    if isinstance(options, Mapping):
        options = ChangeOptions.from_mapping(options)
    if not isinstance(options, ChangeOptions):
        raise InvalidArgumentError("options: expected named change options, got {0}", options)

    changes = [
        _SCHEDULERS[name](getattr(options, name)) for name in OPTION_NAMES if options.given(name)
    ]
    return ChangeSpec(tuple(changes))
