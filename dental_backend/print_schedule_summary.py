"""Print a branch's weekly schedule summary as JSON to stdout.

Usage:
    python -m dental_backend.print_schedule_summary <branch> [YYYY-MM-DD]
"""
import json
import sys
from datetime import date

from dental_backend.scheduling.availability_resolver import AvailabilityResolver
from dental_backend.scheduling.booking_store import SqlAlchemyBookingStore


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print("Usage: python -m dental_backend.print_schedule_summary <branch> [YYYY-MM-DD]", file=sys.stderr)
        return 1

    branch = args[0]
    start_date = args[1] if len(args) > 1 else date.today().isoformat()

    resolver = AvailabilityResolver(SqlAlchemyBookingStore())
    summary = resolver.get_weekly_schedule_summary(branch, start_date)
    if not summary:
        print(f"Invalid start date: {start_date}", file=sys.stderr)
        return 1

    print(json.dumps([day.model_dump(mode="json") for day in summary], indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
