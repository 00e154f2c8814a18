"""Chunk sequencing for self-describing and label/value layouts."""

from enum import Enum

from ynab_sync.models import Chunk, ChunkPair


class PairingMode(Enum):
    """How a layout gives meaning to consecutive chunks."""

    UNPAIRED = "unpaired"
    HEADER_VALUE = "header_value"


class ChunkSequencer:
    """Turns completed chunks into the pairs dispatched to a rule set.

    In header/value mode every non-empty chunk becomes the ``preceding``
    chunk of the next one, a sliding window of width two.
    """

    def __init__(self, mode: PairingMode):
        self.mode = mode
        self._preceding: Chunk | None = None

    def push(self, chunk: Chunk) -> ChunkPair | None:
        """Sequence a chunk.

        Args:
            chunk: Completed chunk from the accumulator

        Returns:
            Pair to dispatch, or None for an empty chunk
        """
        # Whitespace-only nodes are decoration, not content
        if chunk.is_empty:
            return None

        if self.mode is PairingMode.UNPAIRED:
            return ChunkPair(current=chunk)

        preceding = self._preceding
        self._preceding = chunk
        return ChunkPair(preceding=preceding, current=chunk)

    @property
    def preceding(self) -> Chunk | None:
        return self._preceding

    def reset(self) -> None:
        self._preceding = None
