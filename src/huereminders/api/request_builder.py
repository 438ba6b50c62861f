"""Builders for every request this library sends to a bridge.

Each function is pure: it checks its inputs, then returns a ``BridgeRequest``
describing method, URL and JSON body. Nothing here touches the network;
``HttpClient.send`` does that.

Preconditions (missing address, username, light id, schedule id, time or
color) raise ``PreconditionError`` and values that cannot form a URL raise
``MalformedInputError``, in both cases before any request exists.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional
from urllib.parse import quote

import requests
from urllib3.exceptions import LocationParseError
from urllib3.util import parse_url

from huereminders.codec import descriptor
from huereminders.commands.base import (
    AlertCommand,
    ColorStateCommand,
    EffectCommand,
    LightStateCommand,
    OnCommand,
    PairingCommand,
    ScheduleCommand,
    ScheduleEnvelope,
    ScheduleStatusCommand,
)
from huereminders.errors import MalformedInputError, PreconditionError
from huereminders.models.color import LightColor, to_bridge_units
from huereminders.models.light import Bridge, Light
from huereminders.models.reminder import AlertStyle, Reminder

logger = logging.getLogger(__name__)

DISCOVERY_URL = "https://discovery.meethue.com"
DEVICE_TYPE = "huereminders"
UNKNOWN_NAME = "UNKNOWN"
LOCALTIME_FORMAT = "%Y-%m-%dT%H:%M:%S"


@dataclass(frozen=True)
class BridgeRequest:
    method: str
    url: str
    body: Optional[dict[str, Any]] = None

    @property
    def data(self) -> Optional[str]:
        """The body as compact JSON, exactly as it goes over the wire."""
        if self.body is None:
            return None
        return json.dumps(self.body, separators=(",", ":"), ensure_ascii=False)

    def prepare(self) -> requests.PreparedRequest:
        headers = {"Content-Type": "application/json"} if self.body is not None else {}
        data = self.data.encode("utf-8") if self.body is not None else None
        return requests.Request(self.method, self.url, data=data, headers=headers).prepare()


# =====================
# Helper Functions
def _check_address(address: str) -> str:
    if any(c.isspace() for c in address) or "/" in address:
        raise MalformedInputError("address", address, "expected a bare host or ip")
    try:
        parsed = parse_url(f"http://{address}")
    except LocationParseError as e:
        raise MalformedInputError("address", address, str(e)) from e
    if not parsed.host or parsed.auth or parsed.query or parsed.fragment:
        raise MalformedInputError("address", address, "expected a bare host or ip")
    return address


def _check_path_segment(field: str, value: str) -> str:
    if quote(value, safe="") != value:
        raise MalformedInputError(field, value, "not usable as a URL path segment")
    return value


def _resolve_bridge(bridge: Optional[Bridge], reminder: Optional[Reminder] = None) -> Bridge:
    if bridge is None and reminder is not None:
        bridge = reminder.bridge
    if bridge is None:
        raise PreconditionError("Missing bridge", ["bridge"])

    missing = [f for f in ("address", "username") if not getattr(bridge, f)]
    if missing:
        raise PreconditionError(f"Missing {' and '.join(missing)} on bridge", missing)
    return bridge


def _api_path(bridge: Bridge) -> str:
    username = _check_path_segment("username", bridge.username)
    return f"/api/{username}"


def _base_url(bridge: Bridge) -> str:
    bridge = _resolve_bridge(bridge)
    return f"http://{_check_address(bridge.address)}{_api_path(bridge)}"


def _light_id(light: Light) -> str:
    if not light.light_id:
        raise PreconditionError("Missing light id", ["light_id"])
    return _check_path_segment("light_id", light.light_id)


def _schedule_id(light: Light) -> str:
    if not light.schedule_id:
        raise PreconditionError(f"Missing schedule id on light {light.light_id}", ["schedule_id"])
    return _check_path_segment("schedule_id", light.schedule_id)


def format_localtime(time: datetime) -> str:
    """Bridge-local wall clock time without offset. Aware datetimes are moved to local time first."""
    if time.tzinfo is not None:
        time = time.astimezone().replace(tzinfo=None)
    return time.strftime(LOCALTIME_FORMAT)


def light_state_command(style: AlertStyle, color: LightColor) -> LightStateCommand:
    if style == AlertStyle.COLOR:
        hue, sat, bri = to_bridge_units(color)
        return ColorStateCommand(hue=hue, sat=sat, bri=bri)
    if style == AlertStyle.COLORLOOP:
        return EffectCommand(effect="colorloop")
    return AlertCommand(alert=style.value)


# =====================
# Discovery & pairing
def find_bridges() -> BridgeRequest:
    """Fallback discovery through the vendor's cloud endpoint."""
    return BridgeRequest("GET", DISCOVERY_URL)


def connect(address: str, devicetype: str = DEVICE_TYPE) -> BridgeRequest:
    if not address:
        raise PreconditionError("Missing address", ["address"])
    url = f"http://{_check_address(address)}/api"
    return BridgeRequest("POST", url, PairingCommand(devicetype=devicetype).model_dump())


# =====================
# Lights, groups, config
def get_lights(bridge: Bridge) -> BridgeRequest:
    return BridgeRequest("GET", f"{_base_url(bridge)}/lights")


def get_groups(bridge: Bridge) -> BridgeRequest:
    return BridgeRequest("GET", f"{_base_url(bridge)}/groups")


def get_configuration(bridge: Bridge) -> BridgeRequest:
    return BridgeRequest("GET", f"{_base_url(bridge)}/config")


def _light_state_url(bridge: Bridge, light: Light) -> str:
    return f"{_base_url(bridge)}/lights/{_light_id(light)}/state"


def set_light(bridge: Bridge, light_id: str, color: Optional[LightColor]) -> BridgeRequest:
    if color is None:
        raise PreconditionError("Missing color", ["color"])
    url = _light_state_url(bridge, Light(light_id=light_id))
    return BridgeRequest("PUT", url, light_state_command(AlertStyle.COLOR, color).model_dump())


def toggle_on_state(bridge: Bridge, light_id: str, currently_on: bool) -> BridgeRequest:
    url = _light_state_url(bridge, Light(light_id=light_id))
    return BridgeRequest("PUT", url, OnCommand(on=not currently_on).model_dump())


def alert(bridge: Bridge, light: Light) -> BridgeRequest:
    """A one-off long blink on a light, independent of any schedule."""
    return BridgeRequest("PUT", _light_state_url(bridge, light), AlertCommand(alert="lselect").model_dump())


# =====================
# Schedules
def find_schedules(bridge: Bridge) -> BridgeRequest:
    return BridgeRequest("GET", f"{_base_url(bridge)}/schedules")


def _schedule_envelope(bridge: Bridge, reminder: Reminder, light: Light,
                       style: Optional[AlertStyle]) -> dict[str, Any]:
    missing = [f for f in ("color", "time") if getattr(reminder, f) is None]
    if missing:
        raise PreconditionError(f"Missing {' and '.join(missing)} on reminder {reminder.name!r}", missing)
    light_id = _light_id(light)

    style = style or reminder.resolved_alert_style()
    hue, sat, _ = to_bridge_units(reminder.color)

    envelope = ScheduleEnvelope(
        name=reminder.name or UNKNOWN_NAME,
        description=descriptor.encode(reminder.author, hue, sat),
        command=ScheduleCommand(
            address=f"{_api_path(bridge)}/lights/{light_id}/state",
            method="PUT",
            body=light_state_command(style, reminder.color),
        ),
        autodelete=True,
        localtime=format_localtime(reminder.time),
    )
    return envelope.model_dump()


def create_schedule(reminder: Reminder, light: Light, bridge: Optional[Bridge] = None,
                    style: Optional[AlertStyle] = None) -> BridgeRequest:
    bridge = _resolve_bridge(bridge, reminder)
    body = _schedule_envelope(bridge, reminder, light, style)
    return BridgeRequest("POST", f"{_base_url(bridge)}/schedules", body)


def update_schedule(reminder: Reminder, light: Light, bridge: Optional[Bridge] = None,
                    style: Optional[AlertStyle] = None) -> BridgeRequest:
    bridge = _resolve_bridge(bridge, reminder)
    schedule_id = _schedule_id(light)
    body = _schedule_envelope(bridge, reminder, light, style)
    return BridgeRequest("PUT", f"{_base_url(bridge)}/schedules/{schedule_id}", body)


def create_schedules(reminder: Reminder, bridge: Optional[Bridge] = None) -> list[tuple[Light, BridgeRequest]]:
    """One create request per light on the reminder, ordered by light id."""
    return [(light, create_schedule(reminder, light, bridge)) for light in reminder.sorted_lights()]


def update_schedules(reminder: Reminder, bridge: Optional[Bridge] = None) -> list[tuple[Light, BridgeRequest]]:
    return [(light, update_schedule(reminder, light, bridge)) for light in reminder.sorted_lights()]


def delete_schedule(reminder: Reminder, bridge: Optional[Bridge] = None) -> list[BridgeRequest]:
    """DELETE for every light bound to a schedule. Lights without one have nothing to delete."""
    base_url = _base_url(_resolve_bridge(bridge, reminder))

    requests_ = []
    for light in reminder.sorted_lights():
        if not light.schedule_id:
            logger.debug("Light %s has no schedule, nothing to delete", light.light_id)
            continue
        requests_.append(BridgeRequest("DELETE", f"{base_url}/schedules/{_schedule_id(light)}"))
    return requests_


def toggle_active(reminder: Reminder, bridge: Optional[Bridge] = None) -> list[BridgeRequest]:
    """Enable or disable every schedule of the reminder to match ``reminder.active``."""
    base_url = _base_url(_resolve_bridge(bridge, reminder))

    unbound = [light.light_id for light in reminder.sorted_lights() if not light.schedule_id]
    if unbound:
        raise PreconditionError(
            f"Missing schedule id on lights {', '.join(str(i) for i in unbound)}",
            ["schedule_id"],
        )

    body = ScheduleStatusCommand(status="enabled" if reminder.active else "disabled").model_dump()
    return [
        BridgeRequest("PUT", f"{base_url}/schedules/{_schedule_id(light)}", body)
        for light in reminder.sorted_lights()
    ]
