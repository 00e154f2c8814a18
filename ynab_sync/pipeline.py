"""Pipeline orchestrator for turning alert emails into YNAB transactions."""

import csv
import time
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from ynab_sync.clients.ynab import YNABClient, YNABError
from ynab_sync.logging_config import DebugArtifacts
from ynab_sync.models import Entry, Incomplete, SyncConfig
from ynab_sync.parser.engine import collect_chunks, extract_entry
from ynab_sync.parser.tokenizer import tokenize
from ynab_sync.routing import MessageRejected, load_message, route


@dataclass
class SyncResult:
    """Outcome of processing one alert message."""

    source: str
    entry: Entry | None = None
    layout: str | None = None
    status: str = "pending"
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.status in ("created", "parsed")


class SyncPipeline:
    """Orchestrates routing, parsing and transaction creation."""

    def __init__(
        self,
        config: SyncConfig,
        client: YNABClient | None = None,
        debug_artifacts: DebugArtifacts | None = None,
    ):
        """Initialize the pipeline.

        Args:
            config: Budget and account configuration
            client: YNAB client; required unless every run is a dry run
            debug_artifacts: Optional debug artifact manager
        """
        self.config = config
        self.debug_artifacts = debug_artifacts or DebugArtifacts()
        self._client = client

    def process_message(self, raw: bytes, source: str = "<message>", dry_run: bool = False) -> SyncResult:
        """Parse one raw alert email and create its transaction.

        Args:
            raw: Raw message bytes
            source: Name used in logs and debug artifacts
            dry_run: If True, parse only (no YNAB call)

        Returns:
            Result describing what happened to the message
        """
        result = SyncResult(source=source)
        message = load_message(raw)

        try:
            layout = route(message, self.config)
        except MessageRejected as e:
            logger.warning(f"Cannot process email from {message.sender} to {message.recipient}: {e}")
            result.status, result.reason = "rejected", str(e)
            return result
        result.layout = layout.name

        stem = Path(source).stem
        self.debug_artifacts.save_body(stem, message.html)
        if self.debug_artifacts.enabled:
            self.debug_artifacts.save_chunks(stem, collect_chunks(tokenize(message.html, layout.tag_names)))

        parsed = extract_entry(layout, tokenize(message.html, layout.tag_names))
        self.debug_artifacts.save_result(stem, parsed)

        if isinstance(parsed, Incomplete):
            logger.warning(f"Cannot parse email from {message.sender}: {parsed.reason}")
            result.status, result.reason = "incomplete", parsed.reason
            return result

        result.entry = parsed
        logger.debug(f"Parsed object: {parsed}")

        if dry_run:
            result.status = "parsed"
            return result

        return self._create_transaction(result)

    def _create_transaction(self, result: SyncResult) -> SyncResult:
        entry = result.entry
        account_id = self.config.resolve_account(entry.account)
        if account_id is None:
            logger.warning(f"No YNAB account configured for account ending in {entry.account}")
            result.status, result.reason = "skipped", f"no account mapping for {entry.account}"
            return result

        if self._client is None:
            raise RuntimeError("YNAB client required to create transactions")

        try:
            self._client.create_transaction(
                budget_id=self.config.budget_id,
                account_id=account_id,
                entry=entry,
                memo=self.config.memo,
            )
        except YNABError as e:
            logger.warning(f"Failed to create transaction for {result.source}: {e}")
            result.status, result.reason = "failed", str(e)
            return result

        result.status = "created"
        return result

    def process(self, paths: list[Path], dry_run: bool = False) -> list[SyncResult]:
        """Process alert email files.

        Args:
            paths: Paths to raw .eml files
            dry_run: If True, only parse (skip transaction creation)

        Returns:
            One result per file
        """
        start = time.perf_counter()
        logger.info(f"Processing {len(paths)} message(s)")

        results: list[SyncResult] = []
        for i, path in enumerate(paths):
            logger.info(f"[{i + 1}/{len(paths)}] {path.name}")
            try:
                raw = path.read_bytes()
            except OSError as e:
                logger.error(f"Failed to read {path.name}: {e}")
                results.append(SyncResult(source=str(path), status="failed", reason=str(e)))
                continue
            try:
                results.append(self.process_message(raw, source=str(path), dry_run=dry_run))
            except Exception as e:
                logger.error(f"Failed to process {path.name}: {e}")
                results.append(SyncResult(source=str(path), status="failed", reason=str(e)))

        elapsed = time.perf_counter() - start
        parsed = sum(1 for r in results if r.entry is not None)
        logger.info(f"[TIMING] Processed {len(paths)} message(s) in {elapsed:.2f}s ({parsed} parsed)")
        return results

    def write_csv(self, entries: list[Entry], output_path: Path) -> None:
        """Write parsed entries to CSV.

        Args:
            entries: Entries to write
            output_path: Path for output CSV file
        """
        if not entries:
            logger.warning("No entries to write")
            return

        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", newline="") as f:
            writer = csv.DictWriter(
                f,
                fieldnames=["date", "description", "amount", "account"],
            )
            writer.writeheader()
            for entry in entries:
                writer.writerow(entry.to_csv_row())

        logger.info(f"Wrote {len(entries)} entries to {output_path}")

    def print_summary(self, results: list[SyncResult]) -> None:
        """Print a per-message summary."""
        if not results:
            print("No messages processed.")
            return

        print("\n" + "=" * 50)
        print("SUMMARY")
        print("=" * 50)
        for r in results:
            name = Path(r.source).name
            if r.entry is not None:
                amount = r.entry.amount / 1000
                print(f"  {name:30s} {r.status:10s} {r.entry.description[:20]:20s} ${amount:>10,.2f}")
            else:
                print(f"  {name:30s} {r.status:10s} {r.reason}")
        print("=" * 50)

    def close(self) -> None:
        """Clean up resources."""
        if self._client is not None:
            self._client.close()

    def __enter__(self) -> "SyncPipeline":
        return self

    def __exit__(self, *_) -> None:
        self.close()
