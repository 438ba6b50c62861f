import logging
from typing import Optional

from huereminders.api import request_builder
from huereminders.api.http_client import HttpClient
from huereminders.models.light import Bridge
from huereminders.models.responses import (
    HueConfig,
    HueGroupInfo,
    HueLightInfo,
    HueSchedule,
    parse_config,
    parse_discovery,
    parse_groups,
    parse_lights,
    parse_pairing,
    parse_schedules,
)

logger = logging.getLogger(__name__)


class HueRepository:
    """Read side of the bridge: fetches collections and decodes them."""

    def __init__(self, client: HttpClient, bridge: Optional[Bridge] = None):
        self.client = client
        self.bridge = bridge

    def discover(self) -> list[str]:
        return parse_discovery(self.client.send(request_builder.find_bridges()))

    def pair(self, address: str, devicetype: str = request_builder.DEVICE_TYPE) -> Optional[str]:
        """Ask the bridge for a username. The link button must have been pressed."""
        username = parse_pairing(self.client.send(request_builder.connect(address, devicetype)))
        if username:
            self.bridge = Bridge(address=address, username=username)
        return username

    def lights(self) -> list[HueLightInfo]:
        return parse_lights(self.client.send(request_builder.get_lights(self.bridge)))

    def groups(self) -> list[HueGroupInfo]:
        return parse_groups(self.client.send(request_builder.get_groups(self.bridge)))

    def config(self) -> Optional[HueConfig]:
        return parse_config(self.client.send(request_builder.get_configuration(self.bridge)))

    def schedules(self) -> dict[str, HueSchedule]:
        return parse_schedules(self.client.send(request_builder.find_schedules(self.bridge)))

    def reminder_schedules(self) -> dict[str, HueSchedule]:
        """Only the schedules this application wrote."""
        schedules = self.schedules()
        owned = {sid: s for sid, s in schedules.items() if s.is_from_this_application()}
        logger.debug("%d of %d schedules belong to this application", len(owned), len(schedules))
        return owned
