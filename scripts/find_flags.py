#!/usr/bin/env python3
"""Search a decrypted save for flags when authoring catalog entries.

Prints (stdout only, nothing decrypted is written to disk):
  playerData keys matching the pattern, with their values
  scene flags whose scene name or ID matches
  quest / tool / crest / collectable entries whose name matches

Usage:
  python scripts/find_flags.py user1.dat heart
  python scripts/find_flags.py user1.dat spool --section scene
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "implementation" / "src"))

from tracker.errors import DecodeError
from tracker.save import load_save

NAMED_LISTS = ("QuestCompletionData", "Tools", "ToolEquips", "Collectables")
SECTIONS = ("player", "scene", "lists")


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("save", type=Path)
    parser.add_argument("pattern", help="case-insensitive substring")
    parser.add_argument("--section", choices=SECTIONS, action="append",
                        help="limit the search (repeatable); default searches everything")
    args = parser.parse_args()

    try:
        state = load_save(args.save)
    except (OSError, DecodeError) as e:
        print(f"[find_flags] {e}")
        return 1

    needle = args.pattern.lower()
    sections = args.section or SECTIONS
    hits = 0

    if "player" in sections:
        for key, value in state.player_data.items():
            if needle in key.lower() and not isinstance(value, (dict, list)):
                print(f"flag        {key} = {value!r}")
                hits += 1

    if "scene" in sections:
        for flag in state.scene_flags:
            if not isinstance(flag, dict):
                continue
            scene, flag_id = str(flag.get("SceneName", "")), str(flag.get("ID", ""))
            if needle in scene.lower() or needle in flag_id.lower():
                print(f"sceneData   [{scene!r}, {flag_id!r}] = {flag.get('Value')!r}")
                hits += 1

    if "lists" in sections:
        for section in NAMED_LISTS:
            for entry in state.named_list(section):
                if isinstance(entry, dict) and needle in str(entry.get("Name", "")).lower():
                    print(f"{section:<12}{entry.get('Name')!r} {entry.get('Data')!r}")
                    hits += 1

    print(f"{hits} match(es)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
