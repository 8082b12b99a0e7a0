"""Command line interface for querying bus departures."""

import asyncio
import json
import sys

import aiohttp

from mbus_departures.adapters.config import AppConfig
from mbus_departures.composition import create_engine
from mbus_departures.domain.errors import InvalidQueryError
from mbus_departures.domain.models import RefreshResult, ScheduleQuery, ScheduleResolution
from mbus_departures.domain.models.schedule_query import normalize_query_date
from mbus_departures.main import configure_logging, load_groups
from mbus_departures.main import main as serve_main


def format_resolution(resolution: ScheduleResolution) -> str:
    """Human-readable rendering of one resolution."""
    lines = [f"Stop {resolution.stop_id}, route {resolution.route} ({resolution.date})"]
    if resolution.note:
        lines.append(f"  Note: {resolution.note}")
    if not resolution.schedules:
        lines.append("  No more buses today or couldn't fetch schedule")
    for schedule in resolution.schedules:
        line = f"  {schedule.display_time}"
        if schedule.destination:
            line += f"  → {schedule.destination}"
        if schedule.delay_seconds:
            line += f"  (+{schedule.delay_seconds // 60} min)"
        lines.append(line)
    lines.append(f"  Source: {resolution.source_url}")
    return "\n".join(lines)


def format_refresh(result: RefreshResult, group_names: dict[str, str]) -> str:
    """Human-readable rendering of a refresh of all groups."""
    lines = []
    for group_id, departures in result.departures_by_group.items():
        lines.append(group_names.get(group_id, group_id))
        if not departures:
            lines.append("  No buses")
        for departure in departures:
            lines.append(
                f"  {departure.schedule.display_time}  {departure.route} "
                f"from stop {departure.stop_id}"
            )
    lines.append(f"Last updated: {result.last_updated:%H:%M}")
    return "\n".join(lines)


async def run_query(config: AppConfig, query: ScheduleQuery, as_json: bool = False) -> None:
    """Resolve one query and print it."""
    async with aiohttp.ClientSession() as session:
        engine = create_engine(config, session)
        resolution = await engine.resolver.resolve_query(query)
    if as_json:
        print(json.dumps(resolution.to_response(), indent=2, ensure_ascii=False))
    else:
        print(format_resolution(resolution))


async def run_refresh(config: AppConfig, date: str | None = None, as_json: bool = False) -> None:
    """Refresh every configured journey group and print the merged departures."""
    groups = load_groups(config)
    if not groups:
        print("No journey groups configured.", file=sys.stderr)
        sys.exit(1)
    async with aiohttp.ClientSession() as session:
        engine = create_engine(config, session)
        result = await engine.aggregator.refresh_all(groups, date)
    if as_json:
        print(json.dumps(result.to_response(), indent=2, ensure_ascii=False))
    else:
        print(format_refresh(result, {group.id: group.name for group in groups}))


async def main() -> None:
    """Run the CLI."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Next bus departures for pinned stop/route combinations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mbus-departures query --stop 255 --route G6
  mbus-departures query --stop 255 --route G6 --date 2025-01-31 --json
  mbus-departures refresh --config config.toml
  mbus-departures serve --config config.toml
        """,
    )
    parser.add_argument("--config", help="TOML file with [[groups]] (overrides CONFIG_FILE)")
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    query_parser = subparsers.add_parser("query", help="Next departures of a route at a stop")
    query_parser.add_argument("--stop", required=True, help="Stop ID")
    query_parser.add_argument("--route", required=True, help="Route designator (e.g., G6)")
    query_parser.add_argument("--date", help="Date as YYYY-MM-DD (default: today)")
    query_parser.add_argument("--json", action="store_true", help="Output as JSON")

    refresh_parser = subparsers.add_parser("refresh", help="Refresh all configured groups")
    refresh_parser.add_argument("--date", help="Date as YYYY-MM-DD (default: today)")
    refresh_parser.add_argument("--json", action="store_true", help="Output as JSON")

    subparsers.add_parser("serve", help="Run the HTTP API server")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "serve":
        # The server reads its config from the environment
        if args.config:
            import os

            os.environ["CONFIG_FILE"] = args.config
        await serve_main()
        return

    try:
        config = AppConfig(config_file=args.config) if args.config else AppConfig()
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(2)
    configure_logging(config.log_level)

    try:
        if args.command == "query":
            query = ScheduleQuery.from_params(args.stop, args.route, args.date)
            await run_query(config, query, as_json=args.json)
        elif args.command == "refresh":
            await run_refresh(config, normalize_query_date(args.date), as_json=args.json)
    except (InvalidQueryError, ValueError) as e:
        print(f"Invalid input: {e}", file=sys.stderr)
        sys.exit(2)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def cli_main() -> None:
    """Synchronous entry point for the CLI command."""
    asyncio.run(main())


if __name__ == "__main__":
    cli_main()
