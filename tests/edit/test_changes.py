"""Tests for build_change_spec and ChangeOptions."""

from __future__ import annotations

from fractions import Fraction
from types import SimpleNamespace

import pytest

from geocmd.domain.changes import (
    LatChange,
    LonChange,
    MembersChange,
    NodesChange,
    PosChange,
    TagsChange,
)
from geocmd.domain.position import LatLon
from geocmd.domain.primitives import Point
from geocmd.edit.changes import ChangeOptions, build_change_spec
from geocmd.errors import InvalidArgumentError, ValidationError


class TestChangeOptions:
    def test_given_tracks_explicit_fields(self) -> None:
        opts = ChangeOptions(lat=1.0, tags=None)
        assert opts.given("lat")
        assert opts.given("tags")
        assert not opts.given("lon")

    def test_from_mapping_ignores_unknown_keys(self) -> None:
        opts = ChangeOptions.from_mapping({"lat": 1.0, "color": "red"})
        assert opts.given("lat")
        assert not hasattr(opts, "color")


class TestBuildChangeSpec:
    def test_empty_options(self) -> None:
        assert len(build_change_spec({})) == 0

    def test_unknown_options_only(self) -> None:
        assert len(build_change_spec({"foo": 1})) == 0

    def test_order_is_fixed(self) -> None:
        spec = build_change_spec({"tags": {"a": "b"}, "pos": {"lat": 1, "lon": 2}, "lat": 3})
        assert spec.field_names == ["lat", "pos", "tags"]

    def test_pos_scheduled_after_lat_and_lon(self) -> None:
        spec = build_change_spec({"pos": {"lat": 20, "lon": 30}, "lon": 5, "lat": 10})
        assert spec.field_names == ["lat", "lon", "pos"]
        assert spec.changes[-1] == PosChange(LatLon(lat=20.0, lon=30.0))

    def test_accepts_change_options(self) -> None:
        spec = build_change_spec(ChangeOptions(lon=8.5))
        assert spec.changes == (LonChange(8.5),)

    def test_rejects_non_mapping(self) -> None:
        with pytest.raises(InvalidArgumentError):
            build_change_spec([("lat", 1.0)])  # type: ignore[arg-type]


class TestLatLon:
    def test_lat(self) -> None:
        assert build_change_spec({"lat": 47}).changes == (LatChange(47.0),)

    @pytest.mark.parametrize("value", [91, -90.5, 10**400, -(10**400), float("inf"), float("nan")])
    def test_lat_out_of_range(self, value: float) -> None:
        with pytest.raises(ValidationError, match="lat: expected a valid lat"):
            build_change_spec({"lat": value})

    @pytest.mark.parametrize("value", ["47", None, True])
    def test_lat_not_a_number(self, value: object) -> None:
        with pytest.raises(ValidationError, match="lat: lat must be a number"):
            build_change_spec({"lat": value})

    def test_lon_out_of_range(self) -> None:
        with pytest.raises(ValidationError, match="lon: expected a valid lon"):
            build_change_spec({"lon": 181})

    def test_lon_huge_int(self) -> None:
        with pytest.raises(ValidationError, match="lon: expected a valid lon"):
            build_change_spec({"lon": 10**400})

    def test_other_real_numbers_accepted(self) -> None:
        spec = build_change_spec({"lat": Fraction(45), "lon": Fraction(-15, 2)})
        assert spec.changes == (LatChange(45.0), LonChange(-7.5))

    def test_error_message_carries_value(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            build_change_spec({"lat": 91})
        assert exc_info.value.message == "lat: expected a valid lat, got 91"


class TestPos:
    def test_latlon(self) -> None:
        pos = LatLon(lat=1.0, lon=2.0)
        assert build_change_spec({"pos": pos}).changes == (PosChange(pos),)

    def test_mapping(self) -> None:
        (change,) = build_change_spec({"pos": {"lat": 1, "lon": 2}})
        assert isinstance(change, PosChange)
        assert change.pos == LatLon(lat=1.0, lon=2.0)

    def test_object_with_coordinates(self) -> None:
        (change,) = build_change_spec({"pos": SimpleNamespace(lat=3.0, lon=4.0)})
        assert change.pos == LatLon(lat=3.0, lon=4.0)

    def test_none(self) -> None:
        with pytest.raises(ValidationError, match="pos: must not be None"):
            build_change_spec({"pos": None})

    def test_unexpected_value(self) -> None:
        with pytest.raises(ValidationError, match="pos: unexpected value"):
            build_change_spec({"pos": 12})

    def test_invalid_coordinates(self) -> None:
        with pytest.raises(ValidationError):
            build_change_spec({"pos": {"lat": 100, "lon": 0}})


class TestTags:
    def test_keys_are_trimmed(self) -> None:
        (change,) = build_change_spec({"tags": {" Name ": "Bridge"}})
        assert dict(change.tags) == {"Name": "Bridge"}

    def test_none_value_kept_for_removal(self) -> None:
        (change,) = build_change_spec({"tags": {"name": None}})
        assert isinstance(change, TagsChange)
        assert dict(change.tags) == {"name": None}

    def test_empty_key(self) -> None:
        with pytest.raises(ValidationError, match="tags: empty tag key"):
            build_change_spec({"tags": {"  ": "x"}})

    def test_non_string_value(self) -> None:
        with pytest.raises(ValidationError, match="must be a string or None"):
            build_change_spec({"tags": {"lanes": 2}})

    def test_not_a_mapping(self) -> None:
        with pytest.raises(ValidationError, match="expected a mapping"):
            build_change_spec({"tags": ["a"]})

    def test_none(self) -> None:
        with pytest.raises(ValidationError, match="tags: must not be None"):
            build_change_spec({"tags": None})


class TestNodesAndMembers:
    def test_nodes_frozen_to_tuple(self) -> None:
        a, b = Point(), Point()
        (change,) = build_change_spec({"nodes": [a, b]})
        assert isinstance(change, NodesChange)
        assert change.nodes == (a, b)

    def test_members_passed_through(self) -> None:
        (change,) = build_change_spec({"members": "not checked here"})
        assert isinstance(change, MembersChange)
        assert change.members == "not checked here"
