"""Logging configuration using loguru."""

import json
import sys
from pathlib import Path

from loguru import logger

from ynab_sync.models import Chunk, Entry, ParseResult


def configure_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbose: Enable info-level logging
        debug: Enable debug-level logging (overrides verbose)
    """
    # Remove default handler
    logger.remove()

    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    else:
        level = "WARNING"

    logger.add(
        sys.stderr,
        level=level,
        format="<level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        colorize=True,
    )


class DebugArtifacts:
    """Saves what the parser saw for each message, for diagnosing layout changes.

    Files are named after the message file: ``<stem>_body.html``,
    ``<stem>_chunks.json`` and ``<stem>_result.json``.
    """

    def __init__(self, output_dir: Path | None = None):
        self.output_dir = output_dir
        if output_dir is not None:
            output_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"Debug artifacts will be saved to: {output_dir}")

    @property
    def enabled(self) -> bool:
        return self.output_dir is not None

    def _write(self, filename: str, content: str) -> Path | None:
        if self.output_dir is None:
            return None
        path = self.output_dir / filename
        path.write_text(content)
        logger.debug(f"Saved debug artifact: {path}")
        return path

    def save_body(self, stem: str, html: str) -> Path | None:
        """Save the HTML body handed to the tokenizer."""
        return self._write(f"{stem}_body.html", html)

    def save_chunks(self, stem: str, chunks: list[Chunk]) -> Path | None:
        """Save the non-empty chunks in document order."""
        return self._write(f"{stem}_chunks.json", json.dumps([c.text for c in chunks], indent=2))

    def save_result(self, stem: str, result: ParseResult) -> Path | None:
        """Save the parsed entry, or the list of missing fields."""
        data = {"complete": isinstance(result, Entry), **result.model_dump(mode="json")}
        return self._write(f"{stem}_result.json", json.dumps(data, indent=2))
