"""Create YNAB transactions from bank alert emails."""

__version__ = "0.1.0"
