"""Vendor alert layouts and sender-domain selection."""

from dataclasses import dataclass

from ynab_sync.parser.rules import (
    Rule,
    match_amount,
    match_bare_date,
    match_compound_date,
    match_ending_in_account,
    match_paren_account,
    match_text,
)
from ynab_sync.parser.sequencer import PairingMode


@dataclass(frozen=True)
class Layout:
    """How one vendor lays out its transaction alerts."""

    name: str
    domains: tuple[str, ...]
    tag_names: tuple[str, ...]
    pairing_mode: PairingMode
    rules: tuple[Rule, ...]

    def matches_domain(self, domain: str) -> bool:
        """Check a sender domain against this layout, subdomains included."""
        domain = domain.lower().rstrip(".")
        return any(domain == d or domain.endswith(f".{d}") for d in self.domains)


# Table cells alternate label and value:
#   Account ending in | (...1234)
#   Made on           | Jul 15, 2024 at 7:02 PM ET
#   Description       | Coffee Shop
#   Amount            | $4.50
CHASE = Layout(
    name="chase",
    domains=("chase.com",),
    tag_names=("td",),
    pairing_mode=PairingMode.HEADER_VALUE,
    rules=(
        Rule("account", match_paren_account, label="Account ending in"),
        Rule("posted_date", match_compound_date, label="Made on"),
        Rule("description", match_text, label="Description"),
        Rule("amount", match_amount, label="Amount"),
    ),
)

# Each cell stands on its own; the amount is checked first so prose that
# mentions a dollar amount is not taken as the description.
CAPITAL_ONE = Layout(
    name="capitalone",
    domains=("capitalone.com",),
    tag_names=("td",),
    pairing_mode=PairingMode.UNPAIRED,
    rules=(
        Rule("amount", match_amount),
        Rule("account", match_ending_in_account),
        Rule("posted_date", match_bare_date),
        Rule("description", match_text, overwrite=False),
    ),
)

LAYOUTS: dict[str, Layout] = {layout.name: layout for layout in (CHASE, CAPITAL_ONE)}


def select_layout(domain: str) -> Layout | None:
    """Choose the layout for a sender domain.

    Args:
        domain: Sender domain, e.g. "chase.com" or "alerts.chase.com"

    Returns:
        Matching layout, or None for an unrecognized sender
    """
    for layout in LAYOUTS.values():
        if layout.matches_domain(domain):
            return layout
    return None
