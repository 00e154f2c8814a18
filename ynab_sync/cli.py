"""CLI entry point for the alert email to YNAB sync."""

import argparse
import sys
from pathlib import Path

from loguru import logger

from ynab_sync.clients.ynab import YNABClient
from ynab_sync.config import DEFAULT_CONFIG_PATH, ConfigError, get_api_key, load_config
from ynab_sync.logging_config import DebugArtifacts, configure_logging
from ynab_sync.models import ChunkPair
from ynab_sync.parser.engine import collect_chunks
from ynab_sync.parser.layouts import LAYOUTS, select_layout
from ynab_sync.parser.sequencer import ChunkSequencer, PairingMode
from ynab_sync.parser.tokenizer import tokenize
from ynab_sync.pipeline import SyncPipeline
from ynab_sync.routing import load_message, parse_email_address


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="ynab-sync",
        description="Create YNAB transactions from bank alert emails",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    process_parser = subparsers.add_parser(
        "process",
        help="Parse alert emails and create YNAB transactions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s alert.eml
  %(prog)s alerts/*.eml -o parsed.csv --dry-run
  %(prog)s alert.eml -c my_config.json -v
        """,
    )
    process_parser.add_argument(
        "inputs",
        nargs="+",
        type=Path,
        help="Raw email (.eml) file(s) to process",
    )
    process_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Also write parsed entries to this CSV file",
    )
    process_parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help=f"Config JSON file (default: {DEFAULT_CONFIG_PATH})",
    )
    process_parser.add_argument(
        "--api-key",
        default=None,
        help="YNAB personal access token (default: $YNAB_API_KEY)",
    )
    process_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse emails only, do not create transactions",
    )
    process_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    process_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output and save artifacts",
    )

    chunks_parser = subparsers.add_parser(
        "chunks",
        help="Print the text chunks a layout sees in an email or HTML file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s alert.eml
  %(prog)s alert.html --layout chase
        """,
    )
    chunks_parser.add_argument(
        "input",
        type=Path,
        help="Raw email (.eml) or HTML file",
    )
    chunks_parser.add_argument(
        "--layout",
        choices=sorted(LAYOUTS),
        default=None,
        help="Layout to use (default: chosen from the sender domain)",
    )
    chunks_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        sys.exit(1)
    return args


def run_process(args: argparse.Namespace) -> int:
    """Run the process command."""
    for input_path in args.inputs:
        if not input_path.exists():
            logger.error(f"File not found: {input_path}")
            return 1

    try:
        config = load_config(args.config)
        client = None if args.dry_run else YNABClient(
            api_key=get_api_key(args.api_key),
            base_url=config.api_base_url,
        )
    except ConfigError as e:
        logger.error(str(e))
        return 1

    debug_artifacts = None
    if args.debug:
        debug_dir = (args.output.parent if args.output else Path.cwd()) / "debug"
        debug_artifacts = DebugArtifacts(debug_dir)

    try:
        with SyncPipeline(config, client=client, debug_artifacts=debug_artifacts) as pipeline:
            results = pipeline.process(args.inputs, dry_run=args.dry_run)

            entries = [r.entry for r in results if r.entry is not None]
            if args.output and entries:
                pipeline.write_csv(entries, args.output)
                print(f"\nOutput written to: {args.output}")

            if args.verbose or args.debug or args.dry_run:
                pipeline.print_summary(results)
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 130
    except Exception as e:
        logger.exception(f"Sync failed: {e}")
        return 1

    return 0 if all(r.ok for r in results) else 1


def run_chunks(args: argparse.Namespace) -> int:
    """Run the chunks command."""
    if not args.input.exists():
        logger.error(f"File not found: {args.input}")
        return 1

    raw = args.input.read_bytes()
    if args.input.suffix.lower() in (".html", ".htm"):
        html, sender_domain = raw.decode("utf-8", errors="replace"), None
    else:
        message = load_message(raw)
        html, sender_domain = message.html, parse_email_address(message.sender).domain

    if args.layout:
        layout = LAYOUTS[args.layout]
    elif sender_domain:
        layout = select_layout(sender_domain)
        if layout is None:
            logger.error(f"Unrecognized sender domain: {sender_domain}. Use --layout.")
            return 1
    else:
        logger.error("Cannot choose a layout for an HTML file. Use --layout.")
        return 1

    print(f"Layout: {layout.name} ({layout.pairing_mode.value})")
    sequencer = ChunkSequencer(layout.pairing_mode)
    for chunk in collect_chunks(tokenize(html, layout.tag_names)):
        pair: ChunkPair = sequencer.push(chunk)
        if layout.pairing_mode is PairingMode.HEADER_VALUE and pair.preceding is not None:
            print(f"  {pair.preceding.text!r:40s} -> {pair.current.text!r}")
        else:
            print(f"  {pair.current.text!r}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    verbose = getattr(args, "verbose", False)
    debug = getattr(args, "debug", False)
    configure_logging(verbose=verbose, debug=debug)

    if args.command == "process":
        return run_process(args)
    elif args.command == "chunks":
        return run_chunks(args)
    else:
        logger.error(f"Unknown command: {args.command}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
