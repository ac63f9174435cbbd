#!/usr/bin/env python3
"""
Delete expired tool usage counters.

Counters are reset lazily when a requester comes back, so rows for requesters
who never return stay behind. Run this periodically (e.g. a daily cron job)
to keep the tool_rate_limits table small.

Usage:
    python scripts/cleanup_rate_limits.py [options]

Options:
    --before ISO_TIMESTAMP   Delete counters that expired before this instant
                             (default: now, UTC)
    --dry-run                Count expired counters without deleting them

Examples:
    # Sweep everything that has expired
    python scripts/cleanup_rate_limits.py

    # Preview the sweep
    python scripts/cleanup_rate_limits.py --dry-run
"""
import argparse
import os
import sys
from datetime import datetime, timezone
from typing import Optional

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from supabase import create_client

from application.errors import StorageError
from application.use_cases.cleanup_rate_limits import CleanupRateLimitsUseCase
from backend.services.rate_windows import utc_now
from backend.settings import get_settings
from infrastructure.db.rate_counter_repository import SupabaseRateCounterRepository


def get_supabase_client():
    """Create Supabase client with service role key."""
    settings = get_settings()

    if not settings.supabase_url or not settings.supabase_key:
        print("ERROR: SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")
        sys.exit(1)

    return create_client(settings.supabase_url, settings.supabase_key)


def parse_timestamp(value: str) -> datetime:
    """argparse type for ISO-8601 timestamps; naive values are taken as UTC."""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid ISO timestamp: {value}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def count_expired(client, before: datetime) -> int:
    result = (
        client.table(SupabaseRateCounterRepository.TABLE)
        .select("id", count="exact")
        .lt("reset_at", before.isoformat())
        .execute()
    )
    return result.count or 0


def cleanup(before: Optional[datetime] = None, dry_run: bool = False) -> int:
    """
    Delete (or, with dry_run, count) counters that expired before `before`.

    Returns:
        Number of counters deleted, or that would be deleted.
    """
    before = before or utc_now()
    client = get_supabase_client()

    if dry_run:
        expired = count_expired(client, before)
        print(f"\n[DRY RUN] Would delete {expired} counters expired before {before.isoformat()}")
        return expired

    use_case = CleanupRateLimitsUseCase(SupabaseRateCounterRepository(client))
    deleted = use_case.execute(now=before)
    print(f"\nDeleted {deleted} counters expired before {before.isoformat()}")
    return deleted


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Delete expired tool usage counters",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s                                   # Sweep now
    %(prog)s --dry-run                         # Preview without changes
    %(prog)s --before 2024-01-01T00:00:00Z     # Only counters expired before a date
""",
    )
    parser.add_argument(
        "--before",
        type=parse_timestamp,
        default=None,
        help="Delete counters whose window closed before this ISO timestamp (default: now)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Count expired counters without deleting them",
    )

    args = parser.parse_args(argv)

    print("=" * 50)
    print("Tool usage counter cleanup")
    print("=" * 50)

    try:
        cleanup(before=args.before, dry_run=args.dry_run)
    except StorageError as e:
        print(f"ERROR: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
