"""Bridge settings from the environment or a ``.env`` file.

    HUE_BRIDGE_IP=192.168.1.20
    HUE_APP_KEY=<username issued on pairing>   (APP_KEY is read as a fallback)
    HUE_TIMEOUT=5
    HUE_VERIFY_TLS=false
"""

import os
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

from huereminders.models.light import Bridge

_TRUE = {"1", "true", "yes", "on"}


class BridgeSettings(BaseModel):
    bridge_ip: Optional[str] = None
    app_key: Optional[str] = None
    timeout: float = Field(5.0, gt=0)
    verify_tls: bool = False

    def bridge(self) -> Bridge:
        return Bridge(address=self.bridge_ip, username=self.app_key)


def load_settings(dotenv_path: Optional[str] = None) -> BridgeSettings:
    load_dotenv(dotenv_path or find_dotenv(usecwd=True))

    return BridgeSettings(
        bridge_ip=os.getenv("HUE_BRIDGE_IP") or None,
        app_key=os.getenv("HUE_APP_KEY") or os.getenv("APP_KEY") or None,
        timeout=float(os.getenv("HUE_TIMEOUT", "5")),
        verify_tls=os.getenv("HUE_VERIFY_TLS", "false").strip().lower() in _TRUE,
    )
