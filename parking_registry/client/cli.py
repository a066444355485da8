# parking_registry/client/cli.py
"""
Command-line client for the registry API.

Usage:
  parking-registry list [--status inside] [--search abc]
  parking-registry enter ABC123 Car "Ana Gómez"
  parking-registry exit 7
  parking-registry edit 7 --owner "Ana María Gómez"
  parking-registry delete 7
  parking-registry history ABC123
  parking-registry stats
"""

import argparse
import sys

from parking_registry.client import views
from parking_registry.client.api import DEFAULT_BASE_URL, ApiError, ParkingApiClient
from parking_registry.models.vehicle_record import KNOWN_KINDS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="parking-registry", description="Parking lot registry client")
    parser.add_argument("--url", default=DEFAULT_BASE_URL, help="API base URL")
    parser.add_argument("--timeout", type=float, default=10)
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("list", help="List vehicle records")
    p.add_argument("--status", default="all", choices=views.STATUS_FILTERS)
    p.add_argument("--search", default="", help="Match plate, owner or kind")

    p = sub.add_parser("enter", help="Register an entry")
    p.add_argument("plate")
    p.add_argument("kind", help=f"One of {', '.join(KNOWN_KINDS)} (others accepted)")
    p.add_argument("owner")

    p = sub.add_parser("exit", help="Register an exit")
    p.add_argument("id", type=int)

    p = sub.add_parser("edit", help="Edit plate, kind or owner")
    p.add_argument("id", type=int)
    p.add_argument("--plate")
    p.add_argument("--kind")
    p.add_argument("--owner")

    p = sub.add_parser("delete", help="Permanently delete a record")
    p.add_argument("id", type=int)

    p = sub.add_parser("history", help="Visit history of a plate")
    p.add_argument("plate")

    sub.add_parser("stats", help="Occupancy statistics")
    return parser


def run_command(client: ParkingApiClient, args) -> str:
    if args.command == "list":
        records = client.list_vehicles()
        counts = views.status_counts(records)
        shown = views.filter_records(records, text=args.search, status=args.status)
        return (f"{views.render_records(shown)}\n\n"
                f"All: {counts['all']}  Inside: {counts['inside']}  Outside: {counts['outside']}")
    if args.command == "enter":
        record = client.register_entry(args.plate, args.kind, args.owner)
        return f"✅ Entry registered: #{record['id']} {record['plate']}"
    if args.command == "exit":
        record = client.register_exit(args.id)
        return f"✅ Exit registered: #{record['id']} {record['plate']} at {views.format_time(record['exitTime'])}"
    if args.command == "edit":
        record = client.update_vehicle(args.id, plate=args.plate, kind=args.kind, owner=args.owner)
        return views.render_records([record])
    if args.command == "delete":
        record = client.delete_vehicle(args.id)
        return f"🗑️  Deleted #{record['id']} {record['plate']}"
    if args.command == "history":
        return views.render_history(client.history(args.plate))
    if args.command == "stats":
        return views.render_statistics(client.statistics())
    raise ValueError(f"Unknown command {args.command}")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    client = ParkingApiClient(args.url, timeout=args.timeout)

    while True:
        try:
            print(run_command(client, args))
            return 0
        except ApiError as e:
            print(f"❌ {e.message}", file=sys.stderr)
            if not sys.stdin.isatty():
                return 1
            if input("Retry? [y/N] ").strip().lower() != "y":
                return 1


if __name__ == "__main__":
    sys.exit(main())
