"""Tests for response decoding and schedule classification."""

import json

import pytest

from huereminders.api import request_builder
from huereminders.models.color import WHITE, from_mirek
from huereminders.models.light import Light
from huereminders.models.reminder import AlertStyle
from huereminders.models.responses import (
    HueSchedule,
    parse_config,
    parse_discovery,
    parse_groups,
    parse_lights,
    parse_pairing,
    parse_schedule_results,
    parse_schedules,
)

LIGHTS = {
    "1": {
        "state": {"on": True, "bri": 200, "hue": 32767, "sat": 254, "colormode": "hs", "reachable": True},
        "type": "Extended color light",
        "name": "Desk",
        "modelid": "LCT015",
    },
    "2": {"state": {"on": False, "bri": 10, "ct": 366}, "name": "Hall"},
    "3": {"state": {"on": True, "ct": 600}, "name": "Attic"},
    "4": {"state": {"on": True}, "name": "Basement"},
    "5": {"name": "No state"},
    "6": "garbage",
    "7": None,
}


class TestLights:
    """Tests for /lights decoding."""

    def test_parse_sorted_by_name(self):
        lights = parse_lights(LIGHTS)
        assert [light.name for light in lights] == ["Attic", "Basement", "Desk", "Hall"]

    def test_hue_sat_color_at_full_brightness(self):
        desk = next(light for light in parse_lights(LIGHTS) if light.id == "1")
        assert desk.on is True
        assert desk.brightness == 200
        assert desk.type == "Extended color light"
        assert desk.color.hue == pytest.approx(32767 / 65535)
        assert desk.color.saturation == 1.0
        assert desk.color.brightness == 1.0

    def test_ct_color(self):
        hall = next(light for light in parse_lights(LIGHTS) if light.id == "2")
        assert hall.color == from_mirek(366)
        assert hall.on is False

    def test_fallback_white(self):
        lights = {light.id: light for light in parse_lights(LIGHTS)}
        assert lights["3"].color == WHITE
        assert lights["4"].color == WHITE

    def test_missing_name(self):
        [light] = parse_lights({"9": {"state": {"on": True}}})
        assert light.name == "Unknown name"

    def test_not_an_object(self):
        assert parse_lights([{"error": {"type": 1}}]) == []


class TestGroups:
    """Tests for /groups decoding."""

    def test_parse(self):
        groups = parse_groups({
            "2": {"name": "Office", "lights": ["3"], "type": "Room", "class": "Office"},
            "1": {"name": "Living", "lights": ["1", "2"], "type": "Room", "class": "Living room"},
            "3": {"name": 5, "lights": ["4"]},
        })
        assert [g.id for g in groups] == ["3", "1", "2"]
        assert groups[0].name == ""
        assert groups[0].lights == ["4"]
        groups = groups[1:]
        assert groups[0].lights == ["1", "2"]
        assert groups[0].class_ == "Living room"
        assert groups[0].modelid == ""


def _schedule_for(reminder, style):
    request = request_builder.create_schedule(reminder, Light(light_id="1"), style=style)
    return HueSchedule.model_validate({**json.loads(request.data), "status": "enabled", "created": "2026-10-01T10:00:00"})


class TestScheduleClassification:
    """Tests for telling reminder schedules apart."""

    @pytest.mark.parametrize(
        "style,is_color",
        [
            (AlertStyle.COLOR, True),
            (AlertStyle.COLORLOOP, True),
            (AlertStyle.SELECT, False),
            (AlertStyle.LSELECT, False),
        ],
    )
    def test_is_color_reminder(self, reminder, style, is_color):
        assert _schedule_for(reminder, style).is_color_reminder() is is_color

    def test_own_schedule(self, reminder):
        schedule = _schedule_for(reminder, AlertStyle.COLOR)
        assert schedule.is_from_this_application()
        assert schedule.get_author() == "Alice Lon"
        assert schedule.get_encoded_color() == (32767.0, 254.0)
        assert schedule.light_id() == "1"

    def test_recovered_color(self, reminder, teal):
        color = _schedule_for(reminder, AlertStyle.COLOR).get_light_color()
        assert abs(color.hue - teal.hue) <= 1 / 65535
        assert color.saturation == 1.0
        assert color.brightness == 1.0

    def test_other_application(self):
        schedule = HueSchedule(description='{"t":"other-app"}')
        assert not schedule.is_from_this_application()
        assert schedule.get_author() is None
        assert schedule.get_encoded_color() == (0.0, 0.0)
        assert schedule.get_light_color() is None

    def test_plain_text_description(self):
        schedule = HueSchedule(name="Sunrise", description="Wake-up routine")
        assert not schedule.is_from_this_application()
        assert schedule.get_author() is None

    def test_no_command(self):
        schedule = HueSchedule()
        assert schedule.is_color_reminder()
        assert schedule.light_id() is None

    def test_group_address(self):
        schedule = HueSchedule.model_validate({"command": {"address": "/api/u/groups/0/action", "body": {}}})
        assert schedule.light_id() is None


class TestScheduleCollections:
    """Tests for /schedules decoding."""

    def test_malformed_entry_does_not_abort(self):
        schedules = parse_schedules({
            "1": {"name": "Ours", "description": '{"t":"LF1.0","a":"Bob"}'},
            "2": {"name": "Broken", "description": 5},
            "3": {"name": "Junk description", "description": "{not json"},
        })
        assert sorted(schedules) == ["1", "2", "3"]
        assert schedules["1"].is_from_this_application()
        assert schedules["2"].name == "Broken"
        assert schedules["2"].description is None
        assert not schedules["3"].is_from_this_application()

    def test_wrong_typed_field_keeps_record(self):
        schedules = parse_schedules({
            "1": {"name": "Wake", "description": '{"t":"LF1.0","a":"Alice"}', "created": 1760000000},
            "2": {"name": "Other", "description": "Sunrise"},
        })
        assert sorted(schedules) == ["1", "2"]
        assert schedules["1"].created is None
        assert schedules["1"].is_from_this_application()
        assert schedules["1"].get_author() == "Alice"

    def test_nested_wrong_field_keeps_command(self):
        [schedule] = parse_schedules({
            "1": {"command": {"address": "/api/u/lights/3/state", "body": {"alert": "select", "bri": "max"}}},
        }).values()
        assert schedule.light_id() == "3"
        assert not schedule.is_color_reminder()
        assert schedule.command.body.bri is None

    def test_results(self):
        results = parse_schedule_results([
            {"success": {"id": "7"}},
            {"error": {"type": 7, "address": "/schedules/localtime", "description": "invalid value"}},
            {"success": "/schedules/3 deleted"},
        ])
        assert results[0].schedule_id() == "7"
        assert results[1].error.type == 7
        assert results[2].schedule_id() is None


class TestBridgeDocuments:
    """Tests for config, discovery and pairing payloads."""

    def test_config(self):
        config = parse_config({"name": "Philips hue", "apiversion": "1.65.0", "whitelist": {}})
        assert config.name == "Philips hue"
        assert parse_config({"apiversion": "1.65.0"}) is None

    def test_discovery(self):
        payload = [{"id": "001788fffe6b1f2a", "internalipaddress": "192.168.1.20", "port": 443}, {"id": "x"}]
        assert parse_discovery(payload) == ["192.168.1.20"]
        assert parse_discovery({"oops": 1}) == []

    def test_pairing(self):
        assert parse_pairing([{"success": {"username": "abc123"}}]) == "abc123"
        assert parse_pairing([{"error": {"type": 101, "address": "", "description": "link button not pressed"}}]) is None

    def test_pairing_error_without_address(self):
        assert parse_pairing([{"error": {"type": 101, "description": "link button not pressed"}}]) is None


class TestFieldRecovery:
    """Tests for records with unreadable fields."""

    def test_light_keeps_name_with_fractional_ct(self):
        [light] = parse_lights({"1": {"name": "Hall", "state": {"on": True, "ct": 366.5}}})
        assert light.name == "Hall"
        assert light.on is True
        assert light.color == WHITE

    def test_light_with_broken_xy(self):
        [light] = parse_lights({"1": {"name": "Desk", "state": {"on": True, "xy": "red", "hue": 100, "sat": 254}}})
        assert light.color.saturation == 1.0

    def test_group_class_alias(self):
        [group] = parse_groups({"1": {"name": "Living", "class": 7, "lights": ["1"]}})
        assert group.class_ == ""
        assert group.lights == ["1"]

    def test_config_keeps_name(self):
        assert parse_config({"name": "Philips hue", "apiversion": 165}).name == "Philips hue"

    def test_missing_required_field_is_skipped(self):
        assert parse_discovery([{"id": "a", "internalipaddress": 5}, {"internalipaddress": "10.0.0.2"}]) == ["10.0.0.2"]

    def test_null_schedule_id(self):
        [result] = parse_schedule_results([{"success": {"id": None}}])
        assert result.schedule_id() is None

    def test_numeric_schedule_id(self):
        [result] = parse_schedule_results([{"success": {"id": 12}}])
        assert result.schedule_id() == "12"
