"""Command line interface for light rail arrivals."""

import asyncio
import json
import sys
from datetime import datetime

import aiohttp

from lightrail_arrivals.adapters.config import AppConfig
from lightrail_arrivals.domain.errors import AggregationError
from lightrail_arrivals.domain.models import FormattedRoute
from lightrail_arrivals.main import configure_logging, create_aggregator, main as serve_main


def format_next_arrival(next_arrival: int | None, now: datetime | None = None) -> str:
    """Render an epoch-millisecond arrival as 'HH:MM (in N min)'."""
    if next_arrival is None:
        return "-"
    arrival = datetime.fromtimestamp(next_arrival / 1000).astimezone()
    reference = now or datetime.now().astimezone()
    minutes = max(0, int((arrival - reference).total_seconds() // 60))
    return f"{arrival:%H:%M} (in {minutes} min)"


def format_routes_text(routes: dict[str, FormattedRoute], now: datetime | None = None) -> str:
    """Render the routes tree as indented plain text."""
    if not routes:
        return "No light rail routes found."

    lines: list[str] = []
    for route_id, route in routes.items():
        lines.append(f"{route.route_name} ({route_id})")
        if not route.destinations:
            lines.append("  (no destinations)")
        for destination in route.destinations:
            lines.append(f"  -> {destination.destination}")
            for stop in destination.stops:
                lines.append(f"       {stop.name}: {format_next_arrival(stop.next_arrival, now)}")
    return "\n".join(lines)


async def fetch_routes(config: AppConfig) -> dict[str, FormattedRoute]:
    """Run one aggregation, bypassing any cache."""
    timeout = aiohttp.ClientTimeout(total=config.upstream_timeout_seconds)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        return await create_aggregator(config, session).aggregate(config.agency_id)


async def main() -> None:
    """Main CLI entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Light rail next-arrival aggregator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print every light rail route with its next arrivals
  lightrail-arrivals fetch

  # Same, as JSON (the payload served on GET /routes)
  lightrail-arrivals fetch --json

  # Start the HTTP server
  lightrail-arrivals serve
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    fetch_parser = subparsers.add_parser("fetch", help="Aggregate routes once and print them")
    fetch_parser.add_argument("--json", action="store_true", help="Output as JSON")
    fetch_parser.add_argument("--agency", help="Override the configured agency id")
    fetch_parser.add_argument(
        "--verbose", action="store_true", help="Log upstream activity to stderr"
    )

    subparsers.add_parser("serve", help="Start the HTTP server")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "serve":
        await serve_main()
        return

    config = AppConfig()
    if args.agency:
        config.agency_id = args.agency
    configure_logging("INFO" if args.verbose else "WARNING")

    try:
        routes = await fetch_routes(config)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(1)
    except AggregationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.json:
        payload = {
            route_id: route.model_dump(mode="json", by_alias=True)
            for route_id, route in routes.items()
        }
        print(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        print(format_routes_text(routes))


def cli_main() -> None:
    """Synchronous entry point for the CLI command."""
    asyncio.run(main())


if __name__ == "__main__":
    cli_main()
