from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path


def _repo_root() -> Path:
    here = Path(__file__).resolve()
    return here.parents[3]


def default_settings_path() -> Path:
    return _repo_root() / "implementation" / "settings.json"


@dataclass
class Settings:
    catalog_path: str = ""  # empty = bundled catalog (or SILK_TRACKER_CATALOG)
    act_filter: int | None = None  # None = show all acts
    json_indent: int = 2
    summary: bool = False


def _validate(settings: Settings) -> str | None:
    if not isinstance(settings.catalog_path, str):
        return f"catalog_path must be a string, got {settings.catalog_path!r}"
    if settings.act_filter not in (None, 1, 2, 3) or isinstance(settings.act_filter, bool):
        return f"act_filter must be 1, 2, 3 or null, got {settings.act_filter!r}"
    if isinstance(settings.json_indent, bool) or not isinstance(settings.json_indent, int):
        return f"json_indent must be an integer, got {settings.json_indent!r}"
    if not isinstance(settings.summary, bool):
        return f"summary must be true or false, got {settings.summary!r}"
    return None


def load_settings(path: Path | None = None) -> Settings:
    if path is None:
        path = default_settings_path()
    if not path.exists():
        return Settings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        print(f"[settings] Ignoring unreadable settings file {path}: {e}")
        return Settings()
    try:
        settings = Settings(**data)
    except TypeError as e:
        print(f"[settings] Ignoring invalid settings file {path}: {e}")
        return Settings()
    problem = _validate(settings)
    if problem:
        print(f"[settings] Ignoring invalid settings file {path}: {problem}")
        return Settings()
    return settings
