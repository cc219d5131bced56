"""Pinata/IPFS client for pinning notarization documents and files."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from app.core.config import AppSettings, get_settings
from app.services.errors import StoreUnavailableError

logger = logging.getLogger("app.services.content_store")


class ContentStoreClient:
    """
    Thin client over the Pinata pinning API.

    Each call is a single round trip: no retries and no local caching. Any
    non-success response, malformed body or transport failure surfaces as
    ``StoreUnavailableError``.
    """

    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        *,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        settings = settings or get_settings()
        self._api_url = settings.pinata_api_url.rstrip("/")
        self._gateway_url = settings.ipfs_gateway_url.rstrip("/")
        self._timeout = settings.content_store_timeout
        self._transport = transport
        self._auth_headers = self._build_auth_headers(settings)

        if not self._auth_headers:
            logger.warning("content_store_credentials_missing")

    @staticmethod
    def _build_auth_headers(settings: AppSettings) -> Dict[str, str]:
        if settings.pinata_jwt:
            return {"Authorization": f"Bearer {settings.pinata_jwt}"}
        if settings.pinata_api_key and settings.pinata_secret_key:
            return {
                "pinata_api_key": settings.pinata_api_key,
                "pinata_secret_api_key": settings.pinata_secret_key,
            }
        return {}

    def _client(self, base_url: str) -> httpx.Client:
        return httpx.Client(base_url=base_url, timeout=self._timeout, transport=self._transport)

    def gateway_url(self, content_id: str) -> str:
        return f"{self._gateway_url}/{content_id}"

    def pin_document(self, document: Mapping[str, Any], name: str = "metadata") -> str:
        """
        Pin a JSON document and return its content identifier.

        Args:
            document: JSON-serializable mapping; key order is preserved
            name: Human-readable pin name shown in the Pinata dashboard

        Raises:
            StoreUnavailableError: If the pinning backend does not accept the document
        """
        body = {"pinataMetadata": {"name": name}, "pinataContent": document}
        return self._pin(
            "/pinning/pinJSONToIPFS",
            operation="pin_document",
            name=name,
            json=body,
        )

    def pin_blob(self, data: bytes, name: str, mime_type: str = "application/octet-stream") -> str:
        """Pin raw bytes as a file and return its content identifier."""

        return self._pin(
            "/pinning/pinFileToIPFS",
            operation="pin_blob",
            name=name,
            files={"file": (name, data, mime_type)},
            data={"pinataMetadata": json.dumps({"name": name})},
        )

    def fetch_document(self, content_id: str) -> bytes:
        """Download pinned content through the configured gateway."""

        try:
            with self._client(self._gateway_url) as client:
                response = client.get(f"/{content_id}")
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "content_store_fetch_http_error",
                extra={"content_id": content_id, "status_code": exc.response.status_code},
            )
            raise StoreUnavailableError(
                f"Gateway fetch of {content_id} failed: {exc.response.status_code}"
            ) from exc
        except httpx.RequestError as exc:
            logger.error("content_store_fetch_request_error", extra={"content_id": content_id, "error": str(exc)})
            raise StoreUnavailableError(f"Failed to reach IPFS gateway: {exc}") from exc
        return response.content

    def _pin(self, path: str, *, operation: str, name: str, **request_kwargs: Any) -> str:
        try:
            with self._client(self._api_url) as client:
                response = client.post(path, headers=self._auth_headers, **request_kwargs)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "content_store_http_error",
                extra={
                    "operation": operation,
                    "pin_name": name,
                    "status_code": exc.response.status_code,
                    "detail": exc.response.text,
                },
            )
            raise StoreUnavailableError(
                f"Pinata {operation} failed: {exc.response.status_code} {exc.response.text}"
            ) from exc
        except httpx.RequestError as exc:
            logger.error(
                "content_store_request_error",
                extra={"operation": operation, "pin_name": name, "error": str(exc)},
            )
            raise StoreUnavailableError(f"Failed to connect to Pinata: {exc}") from exc
        except ValueError as exc:
            raise StoreUnavailableError(f"Pinata {operation} returned a non-JSON body") from exc

        content_id = payload.get("IpfsHash") if isinstance(payload, dict) else None
        if not content_id:
            raise StoreUnavailableError(f"Pinata {operation} response carried no IpfsHash")

        logger.info(
            "content_store_pinned",
            extra={"operation": operation, "pin_name": name, "content_id": content_id},
        )
        return str(content_id)


_content_store_client: Optional[ContentStoreClient] = None


def get_content_store_client() -> ContentStoreClient:
    """Get or create the content store client singleton."""
    global _content_store_client
    if _content_store_client is None:
        _content_store_client = ContentStoreClient()
    return _content_store_client
