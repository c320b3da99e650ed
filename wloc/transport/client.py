# wloc/transport/client.py
"""
HTTP transport to the upstream location service.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence

import requests

from wloc.analysis.types import AccessPointQuery, DecodedDevice
from wloc.errors import UpstreamUnavailableError
from wloc.protocol.envelope import build_envelope, encode_request
from wloc.protocol.response import decode_response
from wloc.transport.config import ServiceConfig
from wloc.utils.log import get_logger

logger = get_logger(__name__)


class WlocClient:
    """
    Sends encoded lookups and returns decoded devices.

    No retries: a failed call surfaces immediately as an
    UpstreamUnavailableError and the caller decides what to do.
    """

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        post: Optional[Callable[..., requests.Response]] = None,
    ) -> None:
        self.config = config or ServiceConfig()
        # plain requests.post: nothing persists between calls
        self.post = post or requests.post

    def exchange(self, payload: bytes) -> bytes:
        """
        POST one envelope and return the raw response body.
        """
        try:
            response = self.post(
                self.config.endpoint,
                data=payload,
                headers={"User-Agent": self.config.user_agent},
                timeout=self.config.timeout_s,
            )
        except requests.RequestException as exc:
            logger.warning("Location service request failed: %s", exc)
            raise UpstreamUnavailableError(
                "Location service could not be reached."
            ) from exc

        if not response.ok:
            logger.warning(
                "Location service returned HTTP %d", response.status_code,
                extra={"upstream_status": response.status_code},
            )
            raise UpstreamUnavailableError(
                "Location service returned a non-success status.",
                upstream_status=response.status_code,
            )
        return response.content

    def fetch_devices(
        self, queries: Sequence[AccessPointQuery], include_all: bool
    ) -> list[DecodedDevice]:
        """
        Look up `queries` in a single upstream call.
        """
        cfg = self.config
        payload = build_envelope(
            encode_request(queries, include_all),
            locale=cfg.locale,
            client_id=cfg.client_id,
            client_version=cfg.client_version,
        )
        body = self.exchange(payload)
        devices = decode_response(body)
        logger.debug("Decoded %d devices from %d-byte response", len(devices), len(body))
        return devices
