"""GoHighLevel API client.

Handles all HTTP communication with the GHL REST API. Every call is one
bearer-authenticated JSON request; non-2xx responses raise ``GHLApiError``
carrying the status code, reason phrase and raw body.
"""

import logging
from typing import Any

import httpx

from core.exceptions import GHLApiError
from utils.response_utils import robust_parse_text

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://services.leadconnectorhq.com"
DEFAULT_API_VERSION = "2021-07-28"


def _drop_none(data: dict[str, Any] | None) -> dict[str, Any] | None:
    if data is None:
        return None
    return {k: v for k, v in data.items() if v is not None}


class GHLClient:
    def __init__(
        self,
        api_key: str,
        location_id: str,
        base_url: str = DEFAULT_BASE_URL,
        api_version: str = DEFAULT_API_VERSION,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.location_id = location_id
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version
        self.timeout = timeout
        self._transport = transport

    def _headers(self, version: str | None = None) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if version:
            headers["Version"] = version
        return headers

    def _loc(self, location_id: str | None) -> str:
        return location_id or self.location_id

    async def request(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
        query: dict[str, Any] | None = None,
        version: str | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON body.

        ``None`` values are dropped from both ``body`` and ``query``.

        Raises:
            GHLApiError: On any non-2xx response.
            httpx.HTTPError: On transport failures (connection, timeout).
        """
        url = f"{self.base_url}{path}"
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.request(
                method,
                url,
                headers=self._headers(version),
                params=_drop_none(query),
                json=_drop_none(body),
            )
        logger.info("%s %s -> %s", method, path, resp.status_code)

        if not resp.is_success:
            raise GHLApiError(resp.status_code, resp.reason_phrase, resp.text)

        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as e:
            logger.warning(f"Failed to decode JSON from {url}: {e}; returning parsed fallback (raw/ndjson/first-chunk)")
            return robust_parse_text(resp.text)

    # ============================================================
    # Custom fields V2 (custom objects + company)
    # ============================================================

    async def get_custom_fields_by_object_key(self, object_key: str, location_id: str | None = None) -> dict[str, Any]:
        """Fields and folders of a custom object or company, e.g. ``custom_objects.pet``."""
        return await self.request(
            "GET",
            f"/custom-fields/object-key/{object_key}",
            query={"locationId": self._loc(location_id)},
            version=self.api_version,
        )

    async def get_custom_field_by_id(self, field_id: str) -> dict[str, Any]:
        """A single custom field or folder."""
        return await self.request("GET", f"/custom-fields/{field_id}", version=self.api_version)

    async def create_custom_field(self, data: dict[str, Any]) -> dict[str, Any]:
        body = {**data, "locationId": self._loc(data.get("locationId"))}
        return await self.request("POST", "/custom-fields/", body=body, version=self.api_version)

    async def update_custom_field(self, field_id: str, data: dict[str, Any]) -> dict[str, Any]:
        body = {**data, "locationId": self._loc(data.get("locationId"))}
        return await self.request("PUT", f"/custom-fields/{field_id}", body=body, version=self.api_version)

    async def delete_custom_field(self, field_id: str) -> dict[str, Any]:
        return await self.request("DELETE", f"/custom-fields/{field_id}", version=self.api_version)

    async def create_custom_field_folder(self, data: dict[str, Any]) -> dict[str, Any]:
        body = {**data, "locationId": self._loc(data.get("locationId"))}
        return await self.request("POST", "/custom-fields/folder", body=body, version=self.api_version)

    async def update_custom_field_folder(self, folder_id: str, data: dict[str, Any]) -> dict[str, Any]:
        body = {**data, "locationId": self._loc(data.get("locationId"))}
        return await self.request("PUT", f"/custom-fields/folder/{folder_id}", body=body, version=self.api_version)

    async def delete_custom_field_folder(self, folder_id: str, location_id: str | None = None) -> dict[str, Any]:
        return await self.request(
            "DELETE",
            f"/custom-fields/folder/{folder_id}",
            query={"locationId": self._loc(location_id)},
            version=self.api_version,
        )

    # ============================================================
    # Location-level custom fields (contacts, standard objects)
    # ============================================================

    async def get_location_custom_fields(self, location_id: str | None = None) -> dict[str, Any]:
        return await self.request("GET", f"/locations/{self._loc(location_id)}/customFields", version=self.api_version)

    async def get_location_custom_field(self, field_id: str, location_id: str | None = None) -> dict[str, Any]:
        return await self.request(
            "GET", f"/locations/{self._loc(location_id)}/customFields/{field_id}", version=self.api_version
        )

    async def create_location_custom_field(self, data: dict[str, Any], location_id: str | None = None) -> dict[str, Any]:
        return await self.request(
            "POST", f"/locations/{self._loc(location_id)}/customFields", body=data, version=self.api_version
        )

    async def update_location_custom_field(
        self, field_id: str, data: dict[str, Any], location_id: str | None = None
    ) -> dict[str, Any]:
        return await self.request(
            "PUT", f"/locations/{self._loc(location_id)}/customFields/{field_id}", body=data, version=self.api_version
        )

    async def delete_location_custom_field(self, field_id: str, location_id: str | None = None) -> dict[str, Any]:
        return await self.request(
            "DELETE", f"/locations/{self._loc(location_id)}/customFields/{field_id}", version=self.api_version
        )

    # ============================================================
    # Custom values (location-wide reusable values)
    # ============================================================

    async def get_custom_values(self, location_id: str | None = None) -> dict[str, Any]:
        return await self.request("GET", f"/locations/{self._loc(location_id)}/customValues", version=self.api_version)

    async def get_custom_value(self, value_id: str, location_id: str | None = None) -> dict[str, Any]:
        return await self.request(
            "GET", f"/locations/{self._loc(location_id)}/customValues/{value_id}", version=self.api_version
        )

    async def create_custom_value(self, data: dict[str, Any], location_id: str | None = None) -> dict[str, Any]:
        return await self.request(
            "POST", f"/locations/{self._loc(location_id)}/customValues", body=data, version=self.api_version
        )

    async def update_custom_value(
        self, value_id: str, data: dict[str, Any], location_id: str | None = None
    ) -> dict[str, Any]:
        return await self.request(
            "PUT", f"/locations/{self._loc(location_id)}/customValues/{value_id}", body=data, version=self.api_version
        )

    async def delete_custom_value(self, value_id: str, location_id: str | None = None) -> dict[str, Any]:
        return await self.request(
            "DELETE", f"/locations/{self._loc(location_id)}/customValues/{value_id}", version=self.api_version
        )
