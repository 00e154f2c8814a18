"""Field extraction rules applied to sequenced chunks."""

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from loguru import logger

from ynab_sync.models import ChunkPair, PartialRecord
from ynab_sync.parser.sequencer import PairingMode

# $23.45, 5.72, $1,234.56 (first occurrence). Same matches as a plain
# digits.two-digits pattern except for inputs with thousands separators,
# which are read whole instead of from the last group (234.56).
AMOUNT_PATTERN = re.compile(r"\$?(\d{1,3}(?:,\d{3})+|\d+)\.(\d{2})")

# (...1234)
PAREN_ACCOUNT_PATTERN = re.compile(r"\(\.\.\.(\d{4})\)")

# "... card ending in 5678 ..."
ENDING_IN_ACCOUNT_PATTERN = re.compile(r"\bending in (\d{4})\b", re.IGNORECASE)

# Jul 15, 2024 at 7:02 PM ET
COMPOUND_DATE_PATTERN = re.compile(
    r"\b([A-Za-z]{3}) (\d{1,2}), (\d{4}) at (\d{1,2}):(\d{2}) (AM|PM) ([A-Za-z]{2,4})\b"
)

BARE_DATE_FORMATS = ["%b %d, %Y", "%B %d, %Y", "%m/%d/%Y", "%m/%d/%y", "%Y-%m-%d"]

Matcher = Callable[[str], Any]


def to_milliunits(amount: Decimal, sign: int = -1) -> int:
    """Convert a currency amount to integer milliunits, rounding half away from zero."""
    return int((amount * 1000 * sign).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def match_amount(text: str, sign: int = -1) -> int | None:
    """Extract the first currency amount as milliunits.

    Charges are debits, so the default sign stores them negative.
    """
    match = AMOUNT_PATTERN.search(text)
    if not match:
        return None
    whole, cents = match.groups()
    return to_milliunits(Decimal(f"{whole.replace(',', '')}.{cents}"), sign=sign)


def match_paren_account(text: str) -> str | None:
    """Extract the account suffix from "(...1234)"."""
    match = PAREN_ACCOUNT_PATTERN.search(text)
    return match.group(1) if match else None


def match_ending_in_account(text: str) -> str | None:
    """Extract the account suffix from free text like "ending in 5678"."""
    match = ENDING_IN_ACCOUNT_PATTERN.search(text)
    return match.group(1) if match else None


def match_compound_date(text: str) -> date | None:
    """Extract the calendar date from "Mon D, YYYY at H:MM AM|PM ZZZ".

    The time of day and zone are discarded.
    """
    match = COMPOUND_DATE_PATTERN.search(text)
    if not match:
        return None
    date_part = match.group(0).split(" at ", 1)[0]
    try:
        return datetime.strptime(date_part.strip(), "%b %d, %Y").date()
    except ValueError:
        logger.debug(f"Could not parse date: {date_part!r}")
        return None


def match_bare_date(text: str) -> date | None:
    """Parse a chunk that is nothing but a calendar date."""
    for fmt in BARE_DATE_FORMATS:
        try:
            return datetime.strptime(text.strip(), fmt).date()
        except ValueError:
            continue
    return None


def match_text(text: str) -> str | None:
    """Take the chunk text verbatim."""
    return text or None


@dataclass(frozen=True)
class Rule:
    """Populates one record field from chunk text.

    Attributes:
        field: PartialRecord field the rule writes
        matcher: Returns the field value, or None when the text does not match
        label: Exact label text the preceding chunk must have (header/value layouts)
        overwrite: Whether a later match replaces an already-set value
    """

    field: str
    matcher: Matcher
    label: str | None = None
    overwrite: bool = True

    def selects(self, pair: ChunkPair) -> bool:
        """Check whether the rule fires for this pair."""
        if self.label is None:
            return True
        return pair.preceding is not None and pair.preceding.text == self.label


def set_field(record: PartialRecord, field: str, value: Any, overwrite: bool = True) -> PartialRecord:
    """Return a copy of the record with one field set."""
    if not overwrite and getattr(record, field):
        return record
    return record.model_copy(update={field: value})


def apply_rules(
    rules: Sequence[Rule],
    pair: ChunkPair,
    record: PartialRecord,
    mode: PairingMode,
) -> PartialRecord:
    """Apply a layout's rules to one chunk pair.

    Args:
        rules: Ordered rule table
        pair: Chunk to extract from, with its preceding chunk
        record: Fields collected so far
        mode: Pairing mode of the layout

    Returns:
        The updated record (the input record is never modified)
    """
    text = pair.current.text

    if mode is PairingMode.HEADER_VALUE:
        for rule in rules:
            if not rule.selects(pair):
                continue
            logger.debug(f"Processing {rule.field}: {text!r}")
            value = rule.matcher(text)
            if value is not None:
                record = set_field(record, rule.field, value, rule.overwrite)
        return record

    # Unpaired: the first matching rule claims the chunk
    for rule in rules:
        if not rule.selects(pair):
            continue
        value = rule.matcher(text)
        if value is None:
            continue
        logger.debug(f"Processing {rule.field}: {text!r}")
        return set_field(record, rule.field, value, rule.overwrite)
    return record
