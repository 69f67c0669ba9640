"""
Shared pytest fixtures for the save tracker test suite.

Provides:
- Encrypted save-file builders (same envelope and key as the game)
- Save-state documents in the game's JSON shape
- Small in-memory catalogs
"""

import base64
import json

import pytest
from Crypto.Cipher import AES
from Crypto.Util.Padding import pad

from tracker.catalog import CATALOG_ENV_VAR
from tracker.types import (
    Catalog,
    CategoryItem,
    CollectableCategory,
    FlagInfo,
    Necessity,
    ScoringRule,
)

GAME_KEY = b"UKu52ePUBwetZ9wNX88o54dnfKRu0T1l"
HEADER = bytes([0, 1, 0, 0, 0, 255, 255, 255, 255, 1, 0, 0, 0, 0, 0, 0, 0, 6, 1, 0, 0, 0, 0x9C, 0xE8, 0x02])
FOOTER = b"\x0b"


def encrypt_plaintext(plaintext: bytes, header: bytes = HEADER, footer: bytes = FOOTER) -> bytes:
    """Wrap plaintext the way the game writes a save file."""
    cipher = AES.new(GAME_KEY, AES.MODE_ECB)
    body = base64.b64encode(cipher.encrypt(pad(plaintext, AES.block_size)))
    return header + body + footer


def encrypt_document(document, header: bytes = HEADER, footer: bytes = FOOTER) -> bytes:
    return encrypt_plaintext(json.dumps(document).encode("utf-8"), header, footer)


# =============================================================================
# Environment
# =============================================================================


@pytest.fixture(autouse=True)
def _no_catalog_override(monkeypatch):
    """Tests always start from the bundled catalog."""
    monkeypatch.delenv(CATALOG_ENV_VAR, raising=False)


# =============================================================================
# Save documents
# =============================================================================


@pytest.fixture
def full_save_document():
    """Save JSON touching every section the predicates read."""
    return {
        "playerData": {
            "completionPercentage": 37,
            "PurchasedBonebottomHeartPiece": True,
            "MerchantEnclaveShellFragment": False,
            "nailUpgrades": 2,
            "QuestCompletionData": {
                "savedData": [
                    {"Name": "Beastfly Hunt", "Data": {"IsCompleted": True, "WasEverCompleted": True}},
                    {"Name": "Ant Trapper", "Data": {"IsCompleted": False}},
                ]
            },
            "Tools": {
                "savedData": [
                    {"Name": "Silk Spear", "Data": {"IsUnlocked": True, "IsHidden": False}},
                    {"Name": "Mosscreep Tool 2", "Data": {"IsUnlocked": True, "IsHidden": False}},
                    {"Name": "Rosary Magnet", "Data": {"IsUnlocked": True, "IsHidden": True}},
                ]
            },
            "ToolEquips": {
                "savedData": [
                    {"Name": "Hunter", "Data": {"IsUnlocked": True}},
                    {"Name": "Reaper", "Data": {"IsUnlocked": True}},
                    {"Name": "Witch", "Data": {"IsUnlocked": False}},
                ]
            },
            "Collectables": {
                "savedData": [
                    {"Name": "Simple Key", "Data": {"Amount": 1}},
                    {"Name": "Slab Key", "Data": {"Amount": 0}},
                ]
            },
        },
        "sceneData": {
            "persistentBools": {
                "serializedList": [
                    {"SceneName": "Crawl_02", "ID": "Heart Piece", "Value": True},
                    {"SceneName": "Bone_East_20", "ID": "Heart Piece", "Value": False},
                    {"SceneName": "Bone_11b", "ID": "Silk Spool", "Value": True},
                ]
            }
        },
    }


@pytest.fixture
def save_bytes(full_save_document):
    return encrypt_document(full_save_document)


# =============================================================================
# Catalogs
# =============================================================================


def flag_items(count, act=1, prefix="flag"):
    return tuple(
        CategoryItem(
            name=f"{prefix} {i}",
            act=act,
            prerequisites=(),
            location="",
            parsing_info=FlagInfo(f"{prefix}{i}"),
        )
        for i in range(count)
    )


@pytest.fixture
def shard_category():
    """20 flag items, every 4 worth one point."""
    return CollectableCategory(
        name="Shards",
        necessity=Necessity.PRIMARY,
        tooltip="Each 4 shards count as 1%",
        items=flag_items(20, prefix="shard"),
        scoring_function=ScoringRule(divisor=4),
    )


@pytest.fixture
def key_category():
    return CollectableCategory(
        name="Keys",
        necessity=Necessity.SUPPORTING,
        tooltip="Not counted",
        items=flag_items(3, prefix="key"),
    )


@pytest.fixture
def small_catalog(shard_category, key_category):
    return Catalog((shard_category, key_category))
