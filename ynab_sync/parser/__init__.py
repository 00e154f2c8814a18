"""Alert parsing modules."""

from ynab_sync.parser.engine import ExtractionEngine, collect_chunks, extract_entry, extract_entry_async
from ynab_sync.parser.layouts import CAPITAL_ONE, CHASE, LAYOUTS, Layout, select_layout
from ynab_sync.parser.tokenizer import tokenize

__all__ = [
    "CAPITAL_ONE",
    "CHASE",
    "LAYOUTS",
    "ExtractionEngine",
    "Layout",
    "collect_chunks",
    "extract_entry",
    "extract_entry_async",
    "select_layout",
    "tokenize",
]
