from typing import Optional

from pydantic import BaseModel


class Bridge(BaseModel):
    address: Optional[str] = None  # host or ip, e.g. "192.168.1.20"
    username: Optional[str] = None  # issued by the bridge on pairing


class Light(BaseModel):
    """A bridge light, optionally bound to the schedule that drives it.

    Two lights are the same light when their ``light_id`` matches, whatever
    schedule they carry.
    """
    light_id: Optional[str] = None
    schedule_id: Optional[str] = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Light):
            return NotImplemented
        return self.light_id == other.light_id

    def __hash__(self) -> int:
        return hash(self.light_id)
