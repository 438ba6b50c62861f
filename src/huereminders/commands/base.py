from pydantic import BaseModel, Field
from typing import Literal, Union

# Request bodies of the v1 bridge API. Field order is wire order.

class PairingCommand(BaseModel):
    devicetype: str

class OnCommand(BaseModel):
    on: bool

class ColorStateCommand(BaseModel):
    on: bool = True
    hue: int = Field(..., ge=0, le=65535)
    sat: int = Field(..., ge=0, le=254)
    bri: int = Field(..., ge=0, le=254)

class EffectCommand(BaseModel):
    on: bool = True
    effect: Literal["colorloop", "none"] = "colorloop"

class AlertCommand(BaseModel):
    alert: Literal["select", "lselect", "none"] = "lselect"

LightStateCommand = Union[ColorStateCommand, EffectCommand, AlertCommand]

# Das innere Kommando, das die Bridge zur localtime ausführt
class ScheduleCommand(BaseModel):
    address: str
    method: Literal["PUT", "POST", "DELETE"] = "PUT"
    body: LightStateCommand

# Das äußere Päckchen für POST/PUT /schedules
class ScheduleEnvelope(BaseModel):
    name: str
    description: str
    command: ScheduleCommand
    autodelete: bool = True
    localtime: str

class ScheduleStatusCommand(BaseModel):
    status: Literal["enabled", "disabled"]
