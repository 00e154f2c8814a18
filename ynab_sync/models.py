"""Pydantic data models for alert parsing and transaction sync."""

import hashlib
from datetime import date

from pydantic import BaseModel, ConfigDict, Field

# YNAB rejects import ids longer than this
IMPORT_ID_MAX_LENGTH = 36

REQUIRED_FIELDS = ("amount", "account", "posted_date", "description")


class TextFragment(BaseModel):
    """One piece of a markup node's text, as delivered by the tokenizer."""

    model_config = ConfigDict(frozen=True)

    content: str
    last_in_node: bool = False


class Chunk(BaseModel):
    """Reassembled, normalized text of one markup node."""

    model_config = ConfigDict(frozen=True)

    text: str

    @property
    def is_empty(self) -> bool:
        return not self.text


class ChunkPair(BaseModel):
    """A chunk together with the non-empty chunk that preceded it."""

    model_config = ConfigDict(frozen=True)

    preceding: Chunk | None = None
    current: Chunk


class PartialRecord(BaseModel):
    """Field values collected so far for one document.

    Records are immutable; rules return an updated copy.
    """

    model_config = ConfigDict(frozen=True)

    amount: int | None = None
    account: str | None = None
    posted_date: date | None = None
    description: str | None = None

    def missing_fields(self) -> list[str]:
        """Names of required fields that are unset (a zero amount counts as unset)."""
        return [name for name in REQUIRED_FIELDS if not getattr(self, name)]


class Entry(BaseModel):
    """A complete transaction extracted from an alert."""

    model_config = ConfigDict(frozen=True)

    amount: int = Field(description="Amount in milliunits, charges negative")
    account: str = Field(description="Last four digits of the card or account")
    posted_date: date
    description: str

    def import_id(self) -> str:
        """Stable YNAB import id, used to de-duplicate repeated alerts.

        Format: ``es1:<description digest>:<account>:<YYYYMMDD>:<amount>``. The
        fixed-width parts come first so only an implausibly large amount can
        be cut by the length limit.
        """
        digest = hashlib.sha1(self.description.encode("utf-8")).hexdigest()[:8]
        posted = self.posted_date.strftime("%Y%m%d")
        return f"es1:{digest}:{self.account}:{posted}:{self.amount}"[:IMPORT_ID_MAX_LENGTH]

    def to_csv_row(self) -> dict[str, str]:
        """Convert to CSV row dict."""
        return {
            "date": self.posted_date.isoformat(),
            "description": self.description,
            "amount": f"{self.amount / 1000:.2f}",
            "account": self.account,
        }


class Incomplete(BaseModel):
    """Parse outcome for a document that did not yield every required field."""

    model_config = ConfigDict(frozen=True)

    missing: list[str]

    @property
    def reason(self) -> str:
        return f"missing fields: {', '.join(self.missing)}"


ParseResult = Entry | Incomplete


class EmailAddress(BaseModel):
    """An email address split as user+tag@domain."""

    username: str
    tag: str = ""
    domain: str


class SyncConfig(BaseModel):
    """YNAB budget settings and account mapping."""

    budget_id: str
    default_account_id: str | None = None
    accounts: dict[str, str] = Field(
        default_factory=dict,
        description="Maps account suffix (last four digits) to YNAB account id",
    )
    ingest_username: str = "ingest"
    memo: str = "Auto import through email alert via ynab-sync."
    api_base_url: str = "https://api.ynab.com/v1"

    def resolve_account(self, suffix: str) -> str | None:
        """Get the YNAB account id for an account suffix."""
        return self.accounts.get(suffix, self.default_account_id)
