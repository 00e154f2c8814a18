"""Shared fixtures for alert parsing tests."""

from email.message import EmailMessage

import pytest

from ynab_sync.models import SyncConfig, TextFragment

CHASE_HTML = """\
<html><body>
<table>
  <tr><td>
    <table>
      <tr><td>Chase</td></tr>
      <tr><td>You made a $4.50 transaction with Coffee Shop</td></tr>
      <tr><td>Account ending in</td><td>(...1234)</td></tr>
      <tr><td>Made on</td><td>Jul 15, 2024 at 7:02 PM ET</td></tr>
      <tr><td>Description</td><td>Coffee Shop</td></tr>
      <tr><td>Amount</td><td>$4.50</td></tr>
    </table>
  </td></tr>
</table>
<p>You are receiving this alert because you chose to.</p>
</body></html>
"""

CAPITAL_ONE_HTML = """\
<html><body>
<table>
  <tr><td>Your Venture card ending in 5678 was used for a purchase.</td></tr>
  <tr><td>Jul 15, 2024</td></tr>
  <tr><td>COFFEE SHOP</td></tr>
  <tr><td>$4.50</td></tr>
  <tr><td>Questions? Visit us online.</td></tr>
</table>
</body></html>
"""


def fragments_for(texts: list[str]) -> list[TextFragment]:
    """Split each text into two fragments followed by an end-of-node marker."""
    fragments = []
    for text in texts:
        middle = len(text) // 2
        fragments.append(TextFragment(content=text[:middle]))
        fragments.append(TextFragment(content=text[middle:]))
        fragments.append(TextFragment(content="", last_in_node=True))
    return fragments


def build_email(
    html: str | None,
    sender: str = "Chase <no.reply.alerts@chase.com>",
    recipient: str = "ingest@example.com",
    plain: str | None = None,
) -> bytes:
    """Build a raw alert email with a quoted-printable HTML body."""
    message = EmailMessage()
    message["From"] = sender
    message["To"] = recipient
    message["Subject"] = "Your transaction alert"
    if plain is not None:
        message.set_content(plain)
        if html is not None:
            message.add_alternative(html, subtype="html", cte="quoted-printable")
    elif html is not None:
        message.set_content(html, subtype="html", cte="quoted-printable")
    return bytes(message)


@pytest.fixture
def chase_html() -> str:
    return CHASE_HTML


@pytest.fixture
def capital_one_html() -> str:
    return CAPITAL_ONE_HTML


@pytest.fixture
def chase_email() -> bytes:
    return build_email(CHASE_HTML)


@pytest.fixture
def sync_config() -> SyncConfig:
    return SyncConfig(
        budget_id="budget-1",
        accounts={"1234": "account-chase", "5678": "account-c1"},
    )
