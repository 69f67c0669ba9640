from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from tracker.catalog import load_catalog
from tracker.errors import ConfigurationError
from tracker.evaluator import report_to_dict
from tracker.session import TrackerSession
from tracker.settings import load_settings
from tracker.types import CompletionReport, Necessity

# Where Steam keeps the cloud copies of the save files.
STEAM_REMOTE_STORAGE_URL = "https://store.steampowered.com/account/remotestorageapp/?appid=1030300"


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="silk-tracker",
        description="Decrypt a Silksong save file and report collectable completion.",
    )
    parser.add_argument("save", nargs="?", type=Path, help="save file (userN.dat)")
    parser.add_argument("--act", type=int, choices=(1, 2, 3), default=None,
                        help="only list items available up to this act")
    parser.add_argument("--catalog", type=Path, default=None, help="alternate catalog JSON")
    parser.add_argument("--settings", type=Path, default=None, help="settings JSON")
    parser.add_argument("--summary", action="store_true",
                        help="print one line per category instead of JSON")
    parser.add_argument("--storage-url", action="store_true",
                        help="print the Steam cloud-save download page and exit")
    return parser.parse_args(argv)


def _print_summary(report: CompletionReport) -> None:
    for cat in report.categories:
        unit = "%" if cat.necessity is Necessity.PRIMARY else ""
        mark = " *" if cat.completed else ""
        print(f"{cat.name} [{cat.unlocked_score}/{cat.max_score}{unit}]{mark}")
    print(f"Expected completion: {report.total_score}")
    print(f"Reported completion: {report.reported_completion}")


async def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    if args.storage_url:
        print(STEAM_REMOTE_STORAGE_URL)
        return 0
    if args.save is None:
        print("[main] No save file given (see --help)")
        return 1

    settings = load_settings(args.settings)
    catalog_path = args.catalog or (Path(settings.catalog_path) if settings.catalog_path else None)
    act_filter = args.act if args.act is not None else settings.act_filter

    try:
        catalog = load_catalog(catalog_path)
    except ConfigurationError as e:
        print(f"[main] {e}")
        return 1

    session = TrackerSession(catalog)
    try:
        ok = await session.upload(lambda: asyncio.to_thread(args.save.read_bytes))
    except OSError as e:
        print(f"[main] Error reading save file: {e}")
        return 1
    if not ok:
        print(f"[main] {args.save} could not be read as a save file")
        return 1

    report = session.report(act_filter)
    if args.summary or settings.summary:
        _print_summary(report)
    else:
        print(json.dumps(report_to_dict(report), indent=settings.json_indent))

    return 0


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
