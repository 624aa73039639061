"""
Walrus blob store over the publisher / aggregator HTTP API.

- write: PUT {publisher}/v1/blobs?epochs=N[&deletable=true] with the raw content.
  The locator is newlyCreated.blobObject.blobId or alreadyCertified.blobId.
- read: GET {aggregator}/v1/blobs/{blob_id}; 404 -> None.

The publisher holds the on-chain signing key. A string signer is forwarded
as a bearer token for publishers that require authentication.
"""

from __future__ import annotations

from typing import Any

import httpx

from swap_insights.config.settings import Settings
from swap_insights.core.exceptions import StorageError
from swap_insights.insights_logging import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SEC = 30.0


def _extract_blob_id(body: dict[str, Any]) -> str | None:
    created = body.get("newlyCreated") or {}
    blob_object = created.get("blobObject") or {}
    if blob_object.get("blobId"):
        return str(blob_object["blobId"])
    certified = body.get("alreadyCertified") or {}
    if certified.get("blobId"):
        return str(certified["blobId"])
    return None


class WalrusHttpStore:
    """AnalysisStore backed by a Walrus publisher and aggregator."""

    def __init__(
        self,
        publisher_url: str,
        aggregator_url: str,
        client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT_SEC,
    ) -> None:
        self.publisher_url = publisher_url.rstrip("/")
        self.aggregator_url = aggregator_url.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings, client: httpx.Client | None = None) -> WalrusHttpStore:
        return cls(settings.publisher_url, settings.aggregator_url, client=client)

    def close(self) -> None:
        self._client.close()

    def write(
        self,
        content: bytes,
        *,
        identifier: str,
        epochs: int,
        deletable: bool,
        signer: Any = None,
    ) -> str:
        params: dict[str, Any] = {"epochs": epochs}
        if deletable:
            params["deletable"] = "true"
        headers = {"Content-Type": "application/octet-stream"}
        if isinstance(signer, str) and signer:
            headers["Authorization"] = f"Bearer {signer}"

        try:
            resp = self._client.put(
                f"{self.publisher_url}/v1/blobs",
                params=params,
                content=content,
                headers=headers,
            )
            resp.raise_for_status()
            body = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("walrus_write_failed", identifier=identifier, error=str(e))
            raise StorageError(f"Walrus write failed for {identifier}: {e}") from e

        blob_id = _extract_blob_id(body if isinstance(body, dict) else {})
        if not blob_id:
            raise StorageError(f"Walrus publisher returned no blob id for {identifier}")
        logger.info("walrus_blob_written", identifier=identifier, blob_id=blob_id, epochs=epochs)
        return blob_id

    def read(self, blob_id: str) -> bytes | None:
        try:
            resp = self._client.get(f"{self.aggregator_url}/v1/blobs/{blob_id}")
        except httpx.HTTPError as e:
            raise StorageError(f"Walrus read failed for {blob_id}: {e}") from e
        if resp.status_code == 404:
            return None
        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise StorageError(f"Walrus read failed for {blob_id}: {e}") from e
        return resp.content
