"""HTTP client for the remote record store."""

import asyncio
from typing import Any

import requests
import structlog
from pydantic import ValidationError as PydanticValidationError
from requests.exceptions import RequestException

from src.errors import NetworkError
from src.models.record import NewRecord, Record

log = structlog.stdlib.get_logger()


class RecordStoreClient:
    """Wrapper around a JSON list/create endpoint.

    One attempt per call: no retries and no caching. Blocking requests run in
    a worker thread via asyncio.to_thread.
    """

    def __init__(
        self,
        base_url: str,
        resource: str = "users",
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ):
        """
        Initialize record store client.

        Args:
            base_url: Base URL of the API (e.g. https://jsonplaceholder.typicode.com)
            resource: Collection path serving both list (GET) and create (POST)
            timeout: Per-request timeout in seconds
            session: Optional preconfigured requests session
        """
        self._url = f"{base_url.rstrip('/')}/{resource.strip('/')}"
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.setdefault("Accept", "application/json")
        log.info("record_store_client_initialized", url=self._url, timeout=timeout)

    @property
    def url(self) -> str:
        return self._url

    async def list_records(self) -> list[Record]:
        """
        Fetch the full record list.

        Returns:
            Records in the order the server returned them

        Raises:
            NetworkError: If the request fails or the body is not a JSON array
        """
        return await asyncio.to_thread(self._list_records)

    async def create_record(self, new_record: NewRecord) -> Record:
        """
        Create a record on the server.

        Args:
            new_record: Fields to send

        Returns:
            The created record including its server-assigned id

        Raises:
            NetworkError: If the request fails or the response is not a record
        """
        return await asyncio.to_thread(self._create_record, new_record)

    def _list_records(self) -> list[Record]:
        log.info("fetching_records", url=self._url)

        payload = self._request("GET", json=None)
        if not isinstance(payload, list):
            log.error("unexpected_list_payload", url=self._url, type=type(payload).__name__)
            raise NetworkError(
                f"Expected a JSON array from {self._url}, got {type(payload).__name__}"
            )

        records: list[Record] = []
        for item in payload:
            try:
                records.append(Record.model_validate(item))
            except PydanticValidationError as e:
                log.warning(
                    "failed_to_convert_record",
                    record_id=item.get("id") if isinstance(item, dict) else None,
                    error=str(e),
                )
                continue

        log.info("records_fetched", url=self._url, record_count=len(records))
        return records

    def _create_record(self, new_record: NewRecord) -> Record:
        log.info("creating_record", url=self._url, username=new_record.username)

        payload = self._request("POST", json=new_record.model_dump())
        try:
            record = Record.model_validate(payload)
        except PydanticValidationError as e:
            log.error("invalid_created_record", url=self._url, error=str(e))
            raise NetworkError(f"Server returned an invalid record: {e}") from e

        log.info("record_created", record_id=record.id, name=record.name)
        return record

    def _request(self, method: str, json: dict[str, Any] | None) -> Any:
        try:
            response = self._session.request(method, self._url, json=json, timeout=self._timeout)
            response.raise_for_status()
            return response.json()
        except RequestException as e:
            # requests' JSONDecodeError also derives from RequestException
            log.error("record_store_request_failed", method=method, url=self._url, error=str(e))
            raise NetworkError(f"{method} {self._url} failed: {e}") from e
