import logging
from typing import Any, Optional

import requests
import urllib3

from huereminders.api.request_builder import BridgeRequest

logger = logging.getLogger(__name__)


class HttpClient:
    """Sends built requests to the bridge over a persistent ``requests.Session``.

    Transport failures (timeouts, refused connections, HTTP error status) are
    raised as the ``requests`` exceptions they are.
    """

    def __init__(self, session: Optional[requests.Session] = None, *, timeout: float = 5, verify: bool = False):
        self.session = session or requests.Session()
        self.timeout = timeout
        self.verify = verify

        if not verify:
            # Bridge und Discovery im LAN, self-signed Zertifikat
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def send(self, request: BridgeRequest) -> Any:
        logger.debug("%s %s %s", request.method, request.url, request.data or "")
        r = self.session.send(request.prepare(), timeout=self.timeout, verify=self.verify)

        try:
            r.raise_for_status()
        except requests.HTTPError:
            logger.warning("%s %s failed with %s: %s", request.method, request.url, r.status_code, r.text)
            raise

        if not r.content:
            return None
        return r.json()

    def close(self) -> None:
        self.session.close()
