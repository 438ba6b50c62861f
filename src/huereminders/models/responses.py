"""Decoded bridge responses and the schedule classifier.

Everything the bridge sends is decoded leniently: unknown fields are ignored,
every field may be missing, and a field of the wrong type is dropped (with a
debug log line) so the record around it still comes through. Only entries
that are not objects at all, or lack a required field, are skipped.
"""

import copy
import logging
from functools import total_ordering
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from huereminders.codec import descriptor
from huereminders.models.color import WHITE, LightColor, from_bridge_units, from_mirek

logger = logging.getLogger(__name__)


class _Response(BaseModel):
    model_config = ConfigDict(extra="ignore")


class HueLightState(_Response):
    on: Optional[bool] = None
    bri: Optional[int] = None
    hue: Optional[int] = None
    sat: Optional[int] = None
    effect: Optional[str] = None
    xy: Optional[list[float]] = None
    ct: Optional[int] = None
    alert: Optional[str] = None
    colormode: Optional[str] = None
    mode: Optional[str] = None
    reachable: Optional[bool] = None

    def color(self) -> LightColor:
        if self.hue is not None and self.sat is not None:
            # always shown at full brightness
            return from_bridge_units(self.hue, self.sat)
        if self.ct is not None:
            return from_mirek(self.ct)
        return WHITE


class HueLightResponse(_Response):
    state: Optional[HueLightState] = None
    type: Optional[str] = None
    name: Optional[str] = None
    modelid: Optional[str] = None
    manufacturername: Optional[str] = None
    productname: Optional[str] = None
    uniqueid: Optional[str] = None
    swversion: Optional[str] = None


class HueGroupResponse(_Response):
    name: Optional[str] = None
    lights: Optional[list[str]] = None
    type: Optional[str] = None
    class_: Optional[str] = Field(None, alias="class")
    modelid: Optional[str] = None
    uniqueid: Optional[str] = None


@total_ordering
class HueLightInfo(BaseModel):
    id: str
    name: str
    type: Optional[str] = None
    on: bool = False
    color: LightColor = WHITE
    brightness: int = 0

    @classmethod
    def from_response(cls, key: str, value: Optional[HueLightResponse]) -> Optional["HueLightInfo"]:
        if value is None or value.state is None:
            return None

        return cls(
            id=key,
            name=value.name or "Unknown name",
            type=value.type,
            on=value.state.on or False,
            color=value.state.color(),
            brightness=value.state.bri or 0,
        )

    def __lt__(self, other: "HueLightInfo") -> bool:
        return self.name < other.name


@total_ordering
class HueGroupInfo(BaseModel):
    id: str
    lights: list[str] = Field(default_factory=list)
    name: str = ""
    type: str = ""
    modelid: str = ""
    uniqueid: str = ""
    class_: str = ""

    @classmethod
    def from_response(cls, key: str, value: Optional[HueGroupResponse]) -> Optional["HueGroupInfo"]:
        if value is None:
            return None

        return cls(
            id=key,
            lights=value.lights or [],
            name=value.name or "",
            type=value.type or "",
            modelid=value.modelid or "",
            uniqueid=value.uniqueid or "",
            class_=value.class_ or "",
        )

    def __lt__(self, other: "HueGroupInfo") -> bool:
        return self.name < other.name


class HueCommandBody(_Response):
    # color style
    bri: Optional[int] = None
    on: Optional[bool] = None
    sat: Optional[int] = None
    hue: Optional[int] = None
    effect: Optional[str] = None
    # alert style, never set together with the color fields
    alert: Optional[str] = None


class HueCommand(_Response):
    address: Optional[str] = None
    body: Optional[HueCommandBody] = None
    method: Optional[str] = None


class HueSchedule(_Response):
    name: Optional[str] = None
    description: Optional[str] = None
    command: Optional[HueCommand] = None
    localtime: Optional[str] = None
    created: Optional[str] = None
    status: Optional[str] = None
    autodelete: Optional[bool] = None
    recycle: Optional[bool] = None

    def decoded_description(self) -> Optional[descriptor.Descriptor]:
        return descriptor.decode(self.description)

    def is_from_this_application(self) -> bool:
        return descriptor.is_owned_by_this_application(self.decoded_description())

    def is_color_reminder(self) -> bool:
        body = self.command.body if self.command else None
        return body is None or body.alert is None

    def get_author(self) -> Optional[str]:
        decoded = self.decoded_description()
        return decoded.author if decoded else None

    def get_encoded_color(self) -> tuple[float, float]:
        """Hue and saturation in bridge units as written by us, ``(0, 0)`` when absent."""
        decoded = self.decoded_description()
        if decoded is None or decoded.hue is None or decoded.sat is None:
            return 0.0, 0.0
        return float(decoded.hue), float(decoded.sat)

    def get_light_color(self) -> Optional[LightColor]:
        decoded = self.decoded_description()
        if decoded is None or decoded.hue is None or decoded.sat is None:
            return None
        body = self.command.body if self.command else None
        if body is None or body.bri is None:
            return from_bridge_units(decoded.hue, decoded.sat)
        return from_bridge_units(decoded.hue, decoded.sat, body.bri)

    def light_id(self) -> Optional[str]:
        """The light addressed by ``/api/<user>/lights/<id>/state``."""
        if not self.command or not self.command.address:
            return None
        parts = self.command.address.strip("/").split("/")
        if len(parts) >= 4 and parts[2] == "lights":
            return parts[3]
        return None


class HueConfig(_Response):
    name: str
    # Lots of more fields available
    bridgeid: Optional[str] = None
    apiversion: Optional[str] = None
    swversion: Optional[str] = None


class HueScheduleSuccess(_Response):
    id: Union[str, int]


class HueResultError(_Response):
    type: int
    address: str
    description: str


class HueResult(_Response):
    """One entry of the ``[{"success": ...}, {"error": ...}]`` list the bridge answers writes with."""
    success: Optional[Any] = None
    error: Optional[HueResultError] = None


class HueScheduleResult(HueResult):
    # success is {"id": ...} on create, a message string on delete

    def schedule_id(self) -> Optional[str]:
        if not isinstance(self.success, dict) or "id" not in self.success:
            return None
        try:
            return str(HueScheduleSuccess.model_validate(self.success).id)
        except ValidationError as e:
            logger.debug("Unreadable schedule id in %r: %s", self.success, e)
            return None


class DiscoveredBridge(_Response):
    id: Optional[str] = None
    internalipaddress: str
    port: Optional[int] = None


# =====================
# Collection parsers
def _drop_field(data: dict, loc: tuple) -> None:
    # remove the deepest dict key on the error path, or the top-level key
    # when the path runs through a list or a non-object value
    node = data
    for key in loc[:-1]:
        child = node.get(key)
        if not isinstance(child, dict):
            node.pop(key, None)
            return
        node = child
    node.pop(loc[-1], None)


def _validate_lenient(model: type[BaseModel], value: Any) -> Any:
    """Validate ``value``, dropping fields of the wrong type instead of the whole record.

    Raises ValidationError when the record is not an object or a required
    field is missing.
    """
    data = value
    while True:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            if not isinstance(data, dict):
                raise
            stripped = copy.deepcopy(data)
            for error in e.errors():
                if error["loc"]:
                    _drop_field(stripped, error["loc"])
            if stripped == data:
                raise
            logger.debug("Dropped unreadable fields of %s: %s",
                         model.__name__, [".".join(map(str, err["loc"])) for err in e.errors()])
            data = stripped


def _parse_entries(payload: Any, model: type[BaseModel]) -> dict[str, Any]:
    if not isinstance(payload, dict):
        logger.debug("Expected an object keyed by id, got %s", type(payload).__name__)
        return {}

    entries = {}
    for key, value in payload.items():
        try:
            entries[key] = _validate_lenient(model, value) if value is not None else None
        except ValidationError as e:
            logger.debug("Skipping %s %s: %s", model.__name__, key, e)
    return entries


def parse_lights(payload: Any) -> list[HueLightInfo]:
    lights = (HueLightInfo.from_response(k, v) for k, v in _parse_entries(payload, HueLightResponse).items())
    return sorted(light for light in lights if light is not None)


def parse_groups(payload: Any) -> list[HueGroupInfo]:
    groups = (HueGroupInfo.from_response(k, v) for k, v in _parse_entries(payload, HueGroupResponse).items())
    return sorted(group for group in groups if group is not None)


def parse_schedules(payload: Any) -> dict[str, HueSchedule]:
    return {k: v for k, v in _parse_entries(payload, HueSchedule).items() if v is not None}


def parse_config(payload: Any) -> Optional[HueConfig]:
    try:
        return _validate_lenient(HueConfig, payload)
    except ValidationError as e:
        logger.debug("Unreadable bridge config: %s", e)
        return None


def _parse_list(payload: Any, model: type[BaseModel]) -> list[Any]:
    if not isinstance(payload, list):
        logger.debug("Expected a list, got %s", type(payload).__name__)
        return []

    items = []
    for item in payload:
        try:
            items.append(_validate_lenient(model, item))
        except ValidationError as e:
            logger.debug("Skipping %s entry: %s", model.__name__, e)
    return items


def parse_schedule_results(payload: Any) -> list[HueScheduleResult]:
    return _parse_list(payload, HueScheduleResult)


def parse_discovery(payload: Any) -> list[str]:
    return [bridge.internalipaddress for bridge in _parse_list(payload, DiscoveredBridge)]


def parse_pairing(payload: Any) -> Optional[str]:
    """The username from ``[{"success": {"username": ...}}]``, None if the link button was not pressed."""
    for result in _parse_list(payload, HueResult):
        if isinstance(result.success, dict) and result.success.get("username"):
            return str(result.success["username"])
        if result.error:
            logger.info("Pairing refused: %s", result.error.description)
    return None
