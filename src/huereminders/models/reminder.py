import logging
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from huereminders.models.color import LightColor
from huereminders.models.light import Bridge, Light

logger = logging.getLogger(__name__)


class AlertStyle(str, Enum):
    COLOR = "color"
    SELECT = "select"
    LSELECT = "lselect"
    COLORLOOP = "colorloop"

    @property
    def alert_title(self) -> str:
        return _ALERT_TITLES[self]

    @property
    def is_persistent(self) -> bool:
        """color and colorloop change the light state, select/lselect only blink."""
        return self in (AlertStyle.COLOR, AlertStyle.COLORLOOP)


_ALERT_TITLES = {
    AlertStyle.COLOR: "ALERT-COLOR",
    AlertStyle.SELECT: "ALERT-BLINK-ONCE",
    AlertStyle.LSELECT: "ALERT-BLINK",
    AlertStyle.COLORLOOP: "ALERT-COLORSWEEP",
}


class Reminder(BaseModel):
    """A scheduled lighting action on one or more lights.

    The bridge holds one schedule per light, so every schedule operation on a
    reminder fans out per light.
    """
    name: Optional[str] = None
    lights: set[Light] = Field(default_factory=set)
    active: bool = True
    alert: AlertStyle = AlertStyle.COLOR
    author: Optional[str] = None
    time: Optional[datetime] = None
    bridge: Optional[Bridge] = None
    alert_style: Optional[str] = None  # raw style string as stored by the caller
    color: Optional[LightColor] = None

    @field_validator("lights", mode="before")
    @classmethod
    def _unique_lights(cls, value):
        # a list with repeated light ids collapses to one entry per id
        if isinstance(value, (list, tuple)):
            unique: dict = {}
            for light in value:
                key = light.light_id if isinstance(light, Light) else light.get("light_id")
                unique.setdefault(key, light)
            return set(
                light if isinstance(light, Light) else Light(**light)
                for light in unique.values()
            )
        return value

    def get_alert_style(self) -> Optional[AlertStyle]:
        if self.alert_style is None:
            return None
        try:
            return AlertStyle(self.alert_style)
        except ValueError:
            logger.debug("Unknown alert style %r on reminder %r", self.alert_style, self.name)
            return None

    def resolved_alert_style(self) -> AlertStyle:
        return self.get_alert_style() or self.alert

    def sorted_lights(self) -> list[Light]:
        return sorted(self.lights, key=lambda light: light.light_id or "")
