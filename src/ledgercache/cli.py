#!/usr/bin/env python3

import argparse
import logging
import sys
import json

from .cache import create_cache
from .transaction import is_hash


def setup_logging(debug: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if debug else logging.INFO

    filename = "ledgercache_debug.log" if debug else None

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        filename=filename,
        filemode='w'
    )

    if debug:
        print(f"Debug logging enabled. Writing to {filename}...")


def _open_cache(args):
    return create_cache(
        config_path=args.config,
        db_path=args.db,
        node_url=args.node,
    )


def _check_hashes(hashes) -> bool:
    bad = [h for h in hashes if not is_hash(h)]
    for h in bad:
        print(f"Error: '{h}' is not an 81-tryte hash")
    return not bad


# ---------------------------------------------------------------------------

def cmd_track(args) -> int:
    """Handle track command."""
    if not _check_hashes(args.hashes):
        return 1
    try:
        cache = _open_cache(args)
        try:
            added = cache.track(args.hashes, confirmed=args.confirmed)
        finally:
            cache.close()
        print(f"Tracking {len(added)} new hash(es)")
        return 0
    except Exception as e:
        print(f"Error: {e}")
        return 1


def cmd_confirm(args) -> int:
    """Handle confirm command."""
    if not _check_hashes(args.hashes):
        return 1
    try:
        cache = _open_cache(args)
        try:
            changed = cache.confirm(args.hashes)
        finally:
            cache.close()
        print(f"Confirmed {changed} hash(es)")
        return 0
    except Exception as e:
        print(f"Error: {e}")
        return 1


def cmd_update(args) -> int:
    """Handle update command."""
    try:
        cache = _open_cache(args)
        try:
            stored = cache.update_transactions()
        finally:
            cache.close()
        print(f"Stored {len(stored)} transaction(s)")
        for h in stored:
            print(f"  {h}")
        return 0
    except Exception as e:
        print(f"Error: {e}")
        return 1


def cmd_bundle(args) -> int:
    """Handle bundle command."""
    if not _check_hashes([args.bundle]):
        return 1
    try:
        cache = _open_cache(args)
        try:
            records, states = cache.find_transactions_by_bundle(args.bundle)
        finally:
            cache.close()

        rows = [
            {
                "hash": r.hash,
                "current_index": r.current_index,
                "last_index": r.last_index,
                "address": r.address,
                "value": r.value,
                "confirmed": s.confirmed,
            }
            for r, s in zip(records, states)
        ]

        if args.json:
            print(json.dumps(rows, indent=2))
            return 0

        if not rows:
            print(f"No transactions found for bundle {args.bundle}")
            return 0

        print(f"Found {len(rows)} transaction(s) in bundle {args.bundle[:16]}...:\n")
        for row in rows:
            print(f"Hash: {row['hash']}")
            print(f"  Index: {row['current_index']}/{row['last_index']}")
            print(f"  Address: {row['address']}")
            print(f"  Value: {row['value']}")
            print(f"  Confirmed: {row['confirmed']}")
        return 0

    except Exception as e:
        print(f"Error: {e}")
        return 1


def cmd_status(args) -> int:
    """Handle status command."""
    try:
        cache = _open_cache(args)
        try:
            status = cache.status()
        finally:
            cache.close()

        if args.json:
            print(json.dumps(status, indent=2))
            return 0

        print(f"Database: {status['db_path']}")
        print(f"Node: {status['node_url']}")
        print(f"Tracked hashes: {status['tracked']}")
        print(f"Confirmed: {status['confirmed']}")
        print(f"Stored transactions: {status['stored']}")
        print(f"Missing bodies: {status['missing']}")
        return 0

    except Exception as e:
        print(f"Error: {e}")
        return 1


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="ledgercache: local transaction cache for a remote ledger node",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Track a transaction hash
  ledgercache track <HASH>

  # Fetch every tracked transaction that is not stored yet
  ledgercache --node http://localhost:14266 update

  # List the stored transactions of a bundle
  ledgercache bundle <BUNDLE> --json
""",
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Configuration file path",
    )
    parser.add_argument(
        "--db",
        type=str,
        help="SQLite database path (overrides config)",
    )
    parser.add_argument(
        "--node",
        type=str,
        help="Remote node URL (overrides config)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    track_parser = subparsers.add_parser("track", help="Track transaction hashes")
    track_parser.add_argument("hashes", nargs="+", help="Transaction hashes")
    track_parser.add_argument(
        "--confirmed",
        action="store_true",
        help="Mark the new hashes as confirmed",
    )

    confirm_parser = subparsers.add_parser("confirm", help="Mark tracked hashes confirmed")
    confirm_parser.add_argument("hashes", nargs="+", help="Transaction hashes")

    subparsers.add_parser("update", help="Fetch missing transaction bodies")

    bundle_parser = subparsers.add_parser("bundle", help="Show stored transactions of a bundle")
    bundle_parser.add_argument("bundle", help="Bundle hash")
    bundle_parser.add_argument(
        "--json",
        action="store_true",
        help="Output in JSON format",
    )

    status_parser = subparsers.add_parser("status", help="Show cache status")
    status_parser.add_argument(
        "--json",
        action="store_true",
        help="Output status in JSON format",
    )

    args = parser.parse_args(argv)
    setup_logging(args.debug)

    if args.command == "track":
        return cmd_track(args)
    elif args.command == "confirm":
        return cmd_confirm(args)
    elif args.command == "update":
        return cmd_update(args)
    elif args.command == "bundle":
        return cmd_bundle(args)
    elif args.command == "status":
        return cmd_status(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
