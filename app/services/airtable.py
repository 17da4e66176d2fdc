"""Airtable API client for the product catalog.

This service lists records from the Airtable base that backs the storefront
catalog. Only the read path is used; the catalog is maintained in Airtable.

Reference: https://airtable.com/developers/web/api/list-records
"""

import logging
from typing import Any

import httpx

from app.config import Settings, get_settings
from app.core.upstream import (
    ProviderNotConfiguredError,
    UpstreamError,
    request_with_retry,
)

logger = logging.getLogger(__name__)


class AirtableError(UpstreamError):
    """Base exception for Airtable API errors."""
    pass


class AirtableClient:
    """Client for the Airtable REST API."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the API client."""
        self._settings = settings or get_settings()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            if not self._settings.airtable_api_key:
                raise ProviderNotConfiguredError("AIRTABLE_API_KEY not configured")
            if not self._settings.airtable_base_id:
                raise ProviderNotConfiguredError("AIRTABLE_BASE_ID not configured")

            self._client = httpx.AsyncClient(
                base_url=f"{self._settings.airtable_base_url.rstrip('/')}/{self._settings.airtable_base_id}",
                timeout=self._settings.provider_timeout_seconds,
                transport=self._transport,
                headers={"Authorization": f"Bearer {self._settings.airtable_api_key}"},
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def list_records(
        self,
        table: str,
        filter_by_formula: str | None = None,
        max_records: int | None = None,
        sort: list[tuple[str, str]] | None = None,
    ) -> list[dict[str, Any]]:
        """List every record of a table that matches the given options.

        Follows Airtable's `offset` pagination until the last page, so the
        result is complete up to max_records.

        Response (per page):
        {
            "records": [
                {"id": "rec...", "createdTime": "...", "fields": {...}}
            ],
            "offset": "itr.../rec..."
        }

        Args:
            table: Table name or id
            filter_by_formula: Airtable formula records must satisfy
            max_records: Cap on the total number of records returned
            sort: (field, direction) pairs, direction "asc" or "desc"

        Returns:
            Raw record dicts in the order Airtable returned them
        """
        client = await self._get_client()

        params: dict[str, Any] = {}
        if filter_by_formula:
            params["filterByFormula"] = filter_by_formula
        if max_records is not None:
            params["maxRecords"] = max_records
        for index, (field, direction) in enumerate(sort or []):
            params[f"sort[{index}][field]"] = field
            params[f"sort[{index}][direction]"] = direction

        records: list[dict[str, Any]] = []
        offset: str | None = None

        while True:
            page_params = dict(params)
            if offset:
                page_params["offset"] = offset

            data = await self._get_page(client, table, page_params)
            records.extend(data.get("records", []))

            offset = data.get("offset")
            if not offset or (max_records is not None and len(records) >= max_records):
                break

        if max_records is not None:
            records = records[:max_records]

        logger.info(f"Airtable list {table}: formula={filter_by_formula!r}, results={len(records)}")
        return records

    async def _get_page(
        self,
        client: httpx.AsyncClient,
        table: str,
        params: dict[str, Any],
    ) -> dict[str, Any]:
        """Fetch one page of records."""
        try:
            response = await request_with_retry(
                client,
                "GET",
                f"/{table}",
                params=params,
                max_attempts=self._settings.provider_max_attempts,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Airtable API error: {e.response.status_code} - {e.response.text}")
            raise AirtableError(f"Failed to list records: {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.error(f"Airtable API request error: {e}")
            raise AirtableError(f"Failed to connect to Airtable API: {e}") from e
        except ValueError as e:
            raise AirtableError(f"Airtable returned a non-JSON body: {e}") from e

        if not isinstance(data, dict):
            raise AirtableError("Airtable returned an unexpected payload")
        return data


# Singleton instance
_client_instance: AirtableClient | None = None


def get_airtable_client() -> AirtableClient:
    """Get or create the global Airtable client."""
    global _client_instance
    if _client_instance is None:
        _client_instance = AirtableClient()
    return _client_instance


async def shutdown_airtable_client() -> None:
    """Shutdown the global Airtable client."""
    global _client_instance
    if _client_instance is not None:
        await _client_instance.close()
        _client_instance = None
