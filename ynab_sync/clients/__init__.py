"""API clients."""

from ynab_sync.clients.ynab import YNABClient, YNABError

__all__ = ["YNABClient", "YNABError"]
