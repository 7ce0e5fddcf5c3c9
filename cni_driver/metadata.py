"""Metadata service client.

Talks to the per-host metadata service over plain HTTP. Only the three
endpoints the driver needs are implemented:

    GET /version     readiness probe
    GET /networks    every network visible to this environment
    GET /self/host   the host this request originates from
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx
from pydantic import ValidationError

from cni_driver.errors import MetadataUnavailable
from cni_driver.schemas import Host, Network

logger = logging.getLogger(__name__)

METADATA_URL_TEMPLATE = "http://{address}/2016-07-29"


def metadata_url(address: str) -> str:
    """Build the versioned metadata base URL for an address (host or host:port)."""
    return METADATA_URL_TEMPLATE.format(address=address)


class MetadataClient:
    """Synchronous metadata service client."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        try:
            self._client = httpx.Client(
                base_url=self.base_url,
                headers={"Accept": "application/json"},
                timeout=timeout,
                transport=transport,
            )
        except httpx.InvalidURL as e:
            raise MetadataUnavailable(f"invalid metadata URL {self.base_url!r}: {e}") from e

    @classmethod
    def connect(
        cls,
        address: str,
        timeout: float = 5.0,
        interval: float = 1.0,
        max_attempts: int | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> MetadataClient:
        """Create a client for address and block until the service answers."""
        client = cls(metadata_url(address), timeout=timeout, transport=transport)
        try:
            client.wait_until_ready(interval=interval, max_attempts=max_attempts)
        except MetadataUnavailable:
            client.close()
            raise
        return client

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> MetadataClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def wait_until_ready(self, interval: float = 1.0, max_attempts: int | None = None) -> None:
        """Poll the service until it responds.

        Args:
            interval: Seconds to sleep between attempts
            max_attempts: Give up after this many failures, None waits forever

        Raises:
            MetadataUnavailable: max_attempts was reached
        """
        logger.info("Waiting for metadata")
        attempt = 0
        while True:
            attempt += 1
            try:
                response = self._client.get("/version")
                if response.status_code == 200:
                    logger.debug(f"Metadata ready after {attempt} attempt(s): {response.text.strip()}")
                    return
                logger.debug(f"Metadata not ready: HTTP {response.status_code}")
            except httpx.HTTPError as e:
                logger.debug(f"Metadata not ready: {e}")

            if max_attempts is not None and attempt >= max_attempts:
                raise MetadataUnavailable(
                    f"metadata service at {self.base_url} not available after {attempt} attempts"
                )
            time.sleep(interval)

    def get_networks(self) -> list[Network]:
        data = self._get_json("/networks")
        if not isinstance(data, list):
            raise MetadataUnavailable(f"unexpected /networks payload: {type(data).__name__}")
        try:
            return [Network.model_validate(item) for item in data]
        except ValidationError as e:
            raise MetadataUnavailable(f"invalid network record from metadata: {e}") from e

    def get_self_host(self) -> Host:
        data = self._get_json("/self/host")
        try:
            return Host.model_validate(data)
        except ValidationError as e:
            raise MetadataUnavailable(f"invalid host record from metadata: {e}") from e

    def _get_json(self, path: str) -> Any:
        try:
            response = self._client.get(path)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            raise MetadataUnavailable(f"metadata request {path} failed: {e}") from e
        except ValueError as e:
            raise MetadataUnavailable(f"metadata response for {path} is not JSON: {e}") from e
