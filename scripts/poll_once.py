#!/usr/bin/env python3
"""Run one Tessie update against an in-memory object tree and print it.

Usage
-----
Set environment variables and run::

    export TESSIE_API_TOKEN="..."
    export TESSIE_VIN="5YJ3..."
    python scripts/poll_once.py

Options::

    --vin 5YJ3...        Override TESSIE_VIN
    --list               Only list the vehicles of the account
    --frame FILE         Also feed a captured telemetry frame from FILE
    --dry-run            Report overview cleanup without deleting
    --verbose, -v        Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pytessie import MemoryObjectStore, TessieConfig, TessieVehicle  # noqa: E402
from pytessie.configurator import discover_vehicles  # noqa: E402
from pytessie.reconcile import ReconcileReport  # noqa: E402


def _print_report(title: str, report: ReconcileReport) -> None:
    print(f"── {title}")
    print(f"  created      : {report.created}")
    print(f"  updated      : {report.updated}")
    print(f"  deleted      : {len(report.deleted)}")
    if report.would_delete:
        print(f"  would delete : {', '.join(report.would_delete)}")
    if report.type_mismatches:
        print(f"  type changes : {', '.join(report.type_mismatches)}")
    for error in report.errors:
        print(f"  error        : [{error.kind}] {error.key}: {error.message}")


async def main() -> None:
    parser = argparse.ArgumentParser(description="Poll a Tessie vehicle once into an in-memory tree.")
    parser.add_argument("--vin", help="Vehicle VIN (default: TESSIE_VIN)")
    parser.add_argument("--list", action="store_true", dest="list_only", help="Only list account vehicles")
    parser.add_argument("--frame", type=Path, help="Telemetry frame file to feed after the poll")
    parser.add_argument("--dry-run", action="store_true", help="Do not delete stale overview objects")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    overrides: dict[str, object] = {"dry_run": args.dry_run}
    if args.vin:
        overrides["vin"] = args.vin
    if args.frame:
        overrides["telemetry_enabled"] = True
    config = TessieConfig.from_env(**overrides)
    if not config.token:
        print("TESSIE_API_TOKEN is not set", file=sys.stderr)
        sys.exit(2)

    store = MemoryObjectStore()
    instance_id = store.create_instance(config.normalized_vin or "Tessie", identifier=config.normalized_vin)

    async with TessieVehicle(config, store, instance_id) as vehicle:
        if args.list_only:
            setups = await discover_vehicles(vehicle._require_transport(), config, store=store)
            for setup in setups:
                print(f"{setup.vin}  {setup.name}")
            return

        if not config.normalized_vin:
            print("TESSIE_VIN is not set", file=sys.stderr)
            sys.exit(2)

        _print_report("apply_changes", vehicle.apply_changes())
        _print_report("update", await vehicle.update())
        if args.frame:
            _print_report("frame", await vehicle.receive_frame(args.frame.read_bytes()))

    print(store.render())


if __name__ == "__main__":
    asyncio.run(main())
