"""Run the agency deletion sweep: delete agencies whose grace period has elapsed.

Usage:
    uv run python -m scripts.run_agency_deletion_sweep [--dry-run] [batch_size]
With --dry-run, only lists the agencies that would be deleted.
Requires Postgres (DATABASE_URL). Schedule from cron, e.g. hourly.
"""

import asyncio
import sys

from app.core.config import get_settings
from app.domain.exceptions import SqlNotConfiguredException
from app.infrastructure.persistence.database import get_session_factory
from app.infrastructure.services import find_expired_agency_ids, run_deletion_sweep
from app.shared.telemetry.logging import setup_logging
from app.shared.utils.datetime import utc_now


def _parse_args(argv: list[str]) -> tuple[bool, int]:
    dry_run = "--dry-run" in argv
    positional = [a for a in argv if not a.startswith("--")]
    batch_size = get_settings().deletion_sweep_batch_size
    if positional:
        try:
            batch_size = int(positional[0])
        except ValueError:
            print(f"batch_size must be an integer, got {positional[0]!r}", file=sys.stderr)
            sys.exit(2)
        if batch_size < 1:
            print("batch_size must be at least 1", file=sys.stderr)
            sys.exit(2)
    return dry_run, batch_size


async def main() -> None:
    setup_logging()
    dry_run, batch_size = _parse_args(sys.argv[1:])
    try:
        session_factory = get_session_factory()
    except SqlNotConfiguredException:
        print("DATABASE_URL not configured", file=sys.stderr)
        sys.exit(1)

    if dry_run:
        agency_ids = await find_expired_agency_ids(session_factory, utc_now(), batch_size)
        for agency_id in agency_ids:
            print(f"Would delete agency {agency_id}")
        print(f"Done (dry run). {len(agency_ids)} agency(ies) past their grace period")
        return

    result = await run_deletion_sweep(session_factory, batch_size=batch_size)
    for agency_id in result.failed_agency_ids:
        print(f"Failed: {agency_id}", file=sys.stderr)
    print(
        f"Done. Processed {result.processed}, deleted {result.deleted}, failed {result.failed}"
    )
    if result.failed:
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
