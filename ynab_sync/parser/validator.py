"""Final validation of collected fields into an entry."""

from loguru import logger

from ynab_sync.models import Entry, Incomplete, ParseResult, PartialRecord


def finalize(record: PartialRecord) -> ParseResult:
    """Turn collected fields into an Entry, or report what is missing.

    A missing field is an expected outcome for unrecognized or changed
    alert layouts, so this never raises.
    """
    missing = record.missing_fields()
    if missing:
        logger.warning(f"Incomplete document, missing fields: {', '.join(missing)}")
        return Incomplete(missing=missing)

    return Entry(
        amount=record.amount,
        account=record.account,
        posted_date=record.posted_date,
        description=record.description,
    )
