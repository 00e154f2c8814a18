"""Reassembly of tokenizer text fragments into normalized chunks."""

import re

from ynab_sync.models import Chunk, TextFragment

# Quoted-printable soft line break left over from transport re-encoding
SOFT_LINE_BREAK = re.compile(r"=\r?\n")

# Complete tags, plus an unterminated tag at the end of the text
TAG_REMNANT = re.compile(r"<[^<>]*>|<[^<>]*$")


def normalize_chunk(text: str) -> str:
    """Strip transport and markup artifacts from node text.

    Idempotent: normalizing normalized text returns it unchanged.
    """
    # Removing one artifact can join the halves of another, so repeat until stable
    while True:
        stripped = TAG_REMNANT.sub("", SOFT_LINE_BREAK.sub("", text))
        if stripped == text:
            break
        text = stripped
    return text.strip()


class ChunkAccumulator:
    """Concatenates the fragments of one markup node into a chunk."""

    def __init__(self):
        self._parts: list[str] = []

    def accept(self, fragment: TextFragment) -> Chunk | None:
        """Buffer a fragment, returning the completed chunk on the node's last fragment."""
        self._parts.append(fragment.content)
        if not fragment.last_in_node:
            return None

        text = normalize_chunk("".join(self._parts))
        self._parts.clear()
        return Chunk(text=text)

    @property
    def pending(self) -> bool:
        """True while fragments of an unfinished node are buffered."""
        return bool(self._parts)

    def reset(self) -> None:
        self._parts.clear()
