"""Extraction engine: fragments in, one entry (or incomplete result) out.

The engine relies on the tokenizer delivering fragments in document order,
one at a time, without re-entering ``accept``. Each engine parses exactly
one document; use a fresh instance per document.
"""

from collections.abc import AsyncIterable, Iterable

from loguru import logger

from ynab_sync.models import Chunk, ParseResult, PartialRecord, TextFragment
from ynab_sync.parser.accumulator import ChunkAccumulator
from ynab_sync.parser.layouts import Layout
from ynab_sync.parser.rules import apply_rules
from ynab_sync.parser.sequencer import ChunkSequencer
from ynab_sync.parser.validator import finalize


class ExtractionEngine:
    """Extracts a transaction entry from one document's fragment stream."""

    def __init__(self, layout: Layout):
        self.layout = layout
        self._accumulator = ChunkAccumulator()
        self._sequencer = ChunkSequencer(layout.pairing_mode)
        self._record = PartialRecord()
        self._chunk_count = 0
        self._finished = False

    def accept(self, fragment: TextFragment) -> None:
        """Consume one text fragment."""
        if self._finished:
            raise RuntimeError("Engine already finished; use a new engine per document")

        chunk = self._accumulator.accept(fragment)
        if chunk is None:
            return

        pair = self._sequencer.push(chunk)
        if pair is None:
            return

        self._chunk_count += 1
        self._record = apply_rules(
            self.layout.rules, pair, self._record, self.layout.pairing_mode
        )

    def finish(self) -> ParseResult:
        """Signal end of stream and validate the collected fields."""
        if self._finished:
            raise RuntimeError("Engine already finished; use a new engine per document")
        self._finished = True

        if self._accumulator.pending:
            logger.debug("Discarding text of an unterminated node at end of stream")
        logger.debug(f"Layout {self.layout.name}: processed {self._chunk_count} chunks")
        return finalize(self._record)


def extract_entry(layout: Layout, fragments: Iterable[TextFragment]) -> ParseResult:
    """Run a complete fragment stream through a fresh engine."""
    engine = ExtractionEngine(layout)
    for fragment in fragments:
        engine.accept(fragment)
    return engine.finish()


async def extract_entry_async(
    layout: Layout,
    fragments: AsyncIterable[TextFragment],
) -> ParseResult:
    """Like extract_entry, for a tokenizer that delivers fragments asynchronously."""
    engine = ExtractionEngine(layout)
    async for fragment in fragments:
        engine.accept(fragment)
    return engine.finish()


def collect_chunks(fragments: Iterable[TextFragment]) -> list[Chunk]:
    """Reassemble a fragment stream into its non-empty chunks."""
    accumulator = ChunkAccumulator()
    chunks: list[Chunk] = []
    for fragment in fragments:
        chunk = accumulator.accept(fragment)
        if chunk is not None and not chunk.is_empty:
            chunks.append(chunk)
    return chunks
