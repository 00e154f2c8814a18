"""YNAB API client for creating transactions."""

from typing import Any

import httpx
from loguru import logger

from ynab_sync.models import Entry

DEFAULT_BASE_URL = "https://api.ynab.com/v1"


class YNABError(Exception):
    """Error communicating with YNAB."""

    pass


class YNABClient:
    """Client for the YNAB REST API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = httpx.Client(
            timeout=timeout,
            headers={"Authorization": f"Bearer {api_key}"},
            transport=transport,
        )

    def create_transaction(
        self,
        budget_id: str,
        account_id: str,
        entry: Entry,
        memo: str | None = None,
    ) -> dict[str, Any]:
        """Create an uncleared, unapproved transaction for an entry.

        Args:
            budget_id: YNAB budget id
            account_id: YNAB account id the transaction is booked to
            entry: Parsed alert entry
            memo: Optional memo text

        Returns:
            The "data" object of the YNAB response
        """
        payload = {
            "transaction": {
                "account_id": account_id,
                "date": entry.posted_date.isoformat(),
                "amount": entry.amount,
                "payee_name": entry.description,
                "memo": memo,
                "cleared": "uncleared",
                "approved": False,
                "import_id": entry.import_id(),
            }
        }

        logger.info(f"Creating YNAB transaction: import_id={entry.import_id()}")

        try:
            response = self._client.post(
                f"{self.base_url}/budgets/{budget_id}/transactions",
                json=payload,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            detail = e.response.text[:200]
            logger.error(f"YNAB HTTP error: {e.response.status_code} {detail}")
            raise YNABError(f"YNAB HTTP error: {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.error(f"YNAB connection error: {e}")
            raise YNABError(f"Failed to connect to YNAB: {e}") from e

        data = response.json().get("data", {})
        logger.debug(f"Response from YNAB: {data}")
        return data

    def check_connection(self) -> bool:
        """Check if YNAB is reachable with the configured key."""
        try:
            response = self._client.get(f"{self.base_url}/user")
            return response.status_code == 200
        except httpx.RequestError:
            return False

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "YNABClient":
        return self

    def __exit__(self, *_) -> None:
        self.close()
