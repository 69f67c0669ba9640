"""Unlock predicates: does a SaveState satisfy one catalog item's condition?

Named lists in the save are small (tens of entries), so lookups are plain
linear scans by exact name.
"""
from __future__ import annotations

from typing import Any, Mapping

from tracker.catalog import parsing_info_from_dict
from tracker.errors import ConfigurationError
from tracker.save import SaveState
from tracker.types import (
    CollectableInfo,
    CrestInfo,
    FlagInfo,
    ParsingInfo,
    QuestInfo,
    SceneDataInfo,
    TempIntFlagInfo,
    ToolInfo,
    UpgradableToolInfo,
)


def _find_entry(entries: list, name: str) -> dict:
    """Return the `Data` dict of the entry called `name`, or {} if absent."""
    for entry in entries:
        if isinstance(entry, dict) and entry.get("Name") == name:
            data = entry.get("Data")
            return data if isinstance(data, dict) else {}
    return {}


def _tool_unlocked(save: SaveState, name: str) -> bool:
    data = _find_entry(save.named_list("Tools"), name)
    return data.get("IsUnlocked") is True and not data.get("IsHidden", False)


def _scene_flag(save: SaveState, scene_name: str, flag_id: str) -> bool:
    for flag in save.scene_flags:
        if (
            isinstance(flag, dict)
            and flag.get("SceneName") == scene_name
            and flag.get("ID") == flag_id
        ):
            return flag.get("Value") is True
    return False


def _int_flag(save: SaveState, name: str, threshold: int) -> bool:
    value = save.player_data.get(name)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return value >= threshold


def is_unlocked(info: ParsingInfo | Mapping[str, Any], save: SaveState | Mapping[str, Any]) -> bool:
    """Evaluate one unlock predicate against a save.

    `info` may also be the catalog dict form ({"type": ..., "internalId": ...}).
    Missing save data is never an error; an unknown predicate type raises
    ConfigurationError.
    """
    if isinstance(info, Mapping):
        info = parsing_info_from_dict(info)
    if not isinstance(save, SaveState):
        save = SaveState(dict(save))

    if isinstance(info, FlagInfo):
        return bool(save.player_data.get(info.name))
    if isinstance(info, TempIntFlagInfo):
        return _int_flag(save, info.name, info.threshold)
    if isinstance(info, QuestInfo):
        data = _find_entry(save.named_list("QuestCompletionData"), info.name)
        return data.get("IsCompleted") is True
    if isinstance(info, SceneDataInfo):
        return _scene_flag(save, info.scene_name, info.flag_id)
    if isinstance(info, ToolInfo):
        return _tool_unlocked(save, info.name)
    if isinstance(info, UpgradableToolInfo):
        return any(_tool_unlocked(save, name) for name in info.names)
    if isinstance(info, CrestInfo):
        data = _find_entry(save.named_list("ToolEquips"), info.name)
        return data.get("IsUnlocked") is True
    if isinstance(info, CollectableInfo):
        amount = _find_entry(save.named_list("Collectables"), info.name).get("Amount")
        if isinstance(amount, bool) or not isinstance(amount, (int, float)):
            return False
        return amount > 0

    raise ConfigurationError(f"Unknown parsing info: {info!r}")
