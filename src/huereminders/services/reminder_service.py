import logging
from typing import Any, Optional

from huereminders.api import request_builder
from huereminders.api.http_client import HttpClient
from huereminders.errors import BridgeResponseError
from huereminders.models.color import LightColor
from huereminders.models.light import Bridge, Light
from huereminders.models.reminder import Reminder
from huereminders.models.responses import HueLightInfo, parse_schedule_results

logger = logging.getLogger(__name__)


class ReminderService:
    """Write side of the bridge for reminders.

    Every call fans out one request per light and sends them in light-id
    order. The bridge has no transactions: if one light fails, the lights
    before it stay changed.
    """

    def __init__(self, client: HttpClient, bridge: Optional[Bridge] = None):
        self.client = client
        self.bridge = bridge

    def _send(self, request: request_builder.BridgeRequest) -> Any:
        payload = self.client.send(request)
        for result in parse_schedule_results(payload):
            if result.error:
                logger.warning("Bridge refused %s %s: %s", request.method, request.url, result.error.description)
                raise BridgeResponseError(result.error.type, result.error.address, result.error.description)
        return payload

    def save(self, reminder: Reminder) -> list[Light]:
        """Create or update the schedule of every light on the reminder.

        A light already bound to a schedule is updated in place so the bridge
        never holds two schedules for the same reminder and light.
        """
        bridge = self.bridge or reminder.bridge
        saved = []
        for light in reminder.sorted_lights():
            if light.schedule_id:
                self._send(request_builder.update_schedule(reminder, light, bridge))
                logger.info("Updated schedule %s for light %s", light.schedule_id, light.light_id)
            else:
                payload = self._send(request_builder.create_schedule(reminder, light, bridge))
                ids = [r.schedule_id() for r in parse_schedule_results(payload) if r.schedule_id()]
                if ids:
                    light.schedule_id = ids[0]
                    logger.info("Created schedule %s for light %s", light.schedule_id, light.light_id)
                else:
                    logger.warning("Bridge returned no schedule id for light %s", light.light_id)
            saved.append(light)
        return saved

    def delete(self, reminder: Reminder) -> int:
        requests_ = request_builder.delete_schedule(reminder, self.bridge or reminder.bridge)
        bound = [light for light in reminder.sorted_lights() if light.schedule_id]
        for light, request in zip(bound, requests_):
            self._send(request)
            logger.info("Deleted schedule %s for light %s", light.schedule_id, light.light_id)
            light.schedule_id = None
        return len(requests_)

    def set_active(self, reminder: Reminder, active: bool) -> None:
        requests_ = request_builder.toggle_active(
            reminder.model_copy(update={"active": active}), self.bridge or reminder.bridge
        )
        for request in requests_:
            self._send(request)
        reminder.active = active

    def alert(self, light: Light) -> None:
        self._send(request_builder.alert(self.bridge, light))

    def set_light(self, light_id: str, color: LightColor) -> None:
        self._send(request_builder.set_light(self.bridge, light_id, color))

    def toggle(self, light: HueLightInfo) -> bool:
        """Flip a light on or off and return the state it was asked to take."""
        self._send(request_builder.toggle_on_state(self.bridge, light.id, light.on))
        return not light.on
