#!/usr/bin/env python3
"""
CLI tool for querying the fleet inventory service.

Usage:
    fleet-inventory metadata site-0000000a
    fleet-inventory profiles --instance-id inst-00000001 --show-inherited
    fleet-inventory maintenance host-00000001 --at 1767225600
    fleet-inventory serve
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

import httpx
from colorama import Fore, Style, init as colorama_init

_LOCATION_PATHS = {"region": "regions", "ou": "ous", "site": "sites"}


def colorize(text: str, color: str) -> str:
    return f"{color}{text}{Style.RESET_ALL}"


def print_json(data: Any, indent: int = 2) -> None:
    print(json.dumps(data, indent=indent, default=str))


def print_metadata(title: str, items: list[dict], indent: str = "  ") -> None:
    """Pretty print a metadata list."""
    print(f"{indent}{colorize(title, Fore.CYAN)}")
    if not items:
        print(f"{indent}  {colorize('(none)', Style.DIM)}")
    for item in items:
        print(f"{indent}  {item['key']} = {item['value']}")


async def _get(args, path: str, params: dict | None = None) -> dict | None:
    async with httpx.AsyncClient(base_url=args.base_url) as client:
        response = await client.get(path, params={k: v for k, v in (params or {}).items() if v is not None})

    if response.status_code != 200:
        print(colorize(f"Error: {response.status_code}", Fore.RED), file=sys.stderr)
        print(response.text, file=sys.stderr)
        return None
    return response.json()


async def cmd_metadata(args):
    """Show own and inherited metadata of a region, OU or site."""
    prefix = args.resource_id.split("-", 1)[0]
    collection = _LOCATION_PATHS.get(prefix)
    if collection is None:
        print(colorize(f"Metadata is only available for regions, OUs and sites: {args.resource_id}", Fore.RED),
              file=sys.stderr)
        return 1

    data = await _get(args, f"/{collection}/{args.resource_id}")
    if data is None:
        return 1
    if args.json:
        print_json(data)
        return 0

    print(colorize(f"\n{data['resource_id']}", Style.BRIGHT), data.get("name", ""))
    print_metadata("Metadata:", data.get("metadata", []))
    inherited = data.get("inherited_metadata", [])
    if isinstance(inherited, dict):
        print_metadata("Inherited (location):", inherited.get("location", []))
        print_metadata("Inherited (ou):", inherited.get("ou", []))
    else:
        print_metadata("Inherited:", inherited)
    return 0


async def cmd_profiles(args):
    """List telemetry profiles applying to a target."""
    params = {
        "instance_id": args.instance_id,
        "site_id": args.site_id,
        "region_id": args.region_id,
        "kind": args.kind,
        "show_inherited": str(args.show_inherited).lower(),
        "page_size": args.page_size,
    }
    data = await _get(args, "/telemetry/profiles", params)
    if data is None:
        return 1
    if args.json:
        print_json(data)
        return 0

    print(colorize(f"\nProfiles ({data['total_elements']}):", Style.BRIGHT))
    for profile in data["profiles"]:
        target = profile.get("instance_id") or profile.get("site_id") or profile.get("region_id") or "-"
        detail = profile.get("log_level") or f"every {profile.get('metrics_interval')}s"
        print(f"  {colorize(profile['resource_id'], Fore.YELLOW)} {profile['kind']:<8} "
              f"{colorize(target, Fore.GREEN)} {detail}")
    if data["has_next"]:
        print(colorize("  ... more available", Style.DIM))
    return 0


async def cmd_maintenance(args):
    """Show whether a host, site or region is in maintenance."""
    data = await _get(args, f"/schedules/maintenance/{args.resource_id}", {"unix_epoch": args.at})
    if data is None:
        return 1
    if args.json:
        print_json(data)
        return 0

    state = colorize("IN MAINTENANCE", Fore.RED) if data["active"] else colorize("available", Fore.GREEN)
    print(f"\n{colorize(data['resource_id'], Style.BRIGHT)} at {data['unix_epoch']}: {state}")
    for schedule in data["single_schedules"]:
        end = schedule.get("end_seconds") or "open-ended"
        print(f"  single   {schedule['resource_id']} {schedule['start_seconds']} -> {end}")
    for schedule in data["repeated_schedules"]:
        cron = " ".join(schedule[f] for f in (
            "cron_minutes", "cron_hours", "cron_day_month", "cron_month", "cron_day_week"))
        print(f"  repeated {schedule['resource_id']} '{cron}' for {schedule['duration_seconds']}s")
    return 0


def main():
    colorama_init()

    parser = argparse.ArgumentParser(
        description="CLI tool for the Fleet Inventory Service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--base-url",
        default="http://localhost:8060",
        help="Base URL of the fleet inventory service",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print raw JSON responses",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # metadata command
    meta_parser = subparsers.add_parser("metadata", help="Show own and inherited metadata")
    meta_parser.add_argument("resource_id", help="Region, OU or site id")

    # profiles command
    prof_parser = subparsers.add_parser("profiles", help="List applicable telemetry profiles")
    target = prof_parser.add_mutually_exclusive_group()
    target.add_argument("--instance-id")
    target.add_argument("--site-id")
    target.add_argument("--region-id")
    prof_parser.add_argument("--kind", choices=["logs", "metrics"])
    prof_parser.add_argument("--show-inherited", action="store_true", help="Include ancestor profiles")
    prof_parser.add_argument("--page-size", type=int)

    # maintenance command
    maint_parser = subparsers.add_parser("maintenance", help="Check maintenance state")
    maint_parser.add_argument("resource_id", help="Host, site or region id")
    maint_parser.add_argument("--at", type=int, help="Unix epoch seconds (default: now)")

    # serve command
    subparsers.add_parser("serve", help="Run the service")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "metadata":
        return asyncio.run(cmd_metadata(args))
    elif args.command == "profiles":
        return asyncio.run(cmd_profiles(args))
    elif args.command == "maintenance":
        return asyncio.run(cmd_maintenance(args))
    elif args.command == "serve":
        from .main import run
        run()
        return 0
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
