"""Save file decoding: raw userN.dat bytes -> SaveState.

File layout: fixed 25-byte .NET BinaryFormatter header, base64 text of an
AES-256-ECB/PKCS7 ciphertext, one trailing 0x0B byte. The plaintext is the
game's JSON player state.

Read-only: nothing here re-encrypts or writes a save.
"""
from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from Crypto.Cipher import AES
from Crypto.Util.Padding import unpad

from tracker.errors import DecodeError

# ── Save envelope / encryption parameters (from the game binaries) ──
HEADER_SIZE = 25
FOOTER_SIZE = 1
ENVELOPE_SIZE = HEADER_SIZE + FOOTER_SIZE
_AES_KEY = "UKu52ePUBwetZ9wNX88o54dnfKRu0T1l".encode("utf-8")  # 32 bytes -> AES-256


@dataclass(frozen=True)
class SaveState:
    """Parsed save JSON with null-safe accessors.

    Every accessor returns an empty value when a section is missing or has
    an unexpected type; absence always means "not unlocked".
    """
    data: dict = field(default_factory=dict)

    @property
    def player_data(self) -> dict:
        player_data = self.data.get("playerData")
        return player_data if isinstance(player_data, dict) else {}

    @property
    def scene_flags(self) -> list:
        scene_data = self.data.get("sceneData")
        if not isinstance(scene_data, dict):
            return []
        persistent = scene_data.get("persistentBools")
        if not isinstance(persistent, dict):
            return []
        flags = persistent.get("serializedList")
        return flags if isinstance(flags, list) else []

    def named_list(self, section: str) -> list:
        """`playerData[section].savedData` (quests, tools, crests, collectables)."""
        container = self.player_data.get(section)
        if not isinstance(container, dict):
            return []
        saved = container.get("savedData")
        return saved if isinstance(saved, list) else []

    @property
    def completion_percentage(self) -> float | None:
        value = self.player_data.get("completionPercentage")
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        return value


def _strip_envelope(raw: bytes) -> str:
    """Drop header + trailing byte; map bytes 1:1 to characters (latin-1)."""
    if len(raw) < ENVELOPE_SIZE:
        raise DecodeError(
            f"save file too short: {len(raw)} bytes, need at least {ENVELOPE_SIZE}"
        )
    return bytes(raw[HEADER_SIZE:len(raw) - FOOTER_SIZE]).decode("latin-1")


def _decrypt(ciphertext: bytes) -> bytes:
    """AES-256-ECB decrypt and strip PKCS7 padding."""
    if not ciphertext:
        raise DecodeError("empty ciphertext")
    cipher = AES.new(_AES_KEY, AES.MODE_ECB)
    try:
        decrypted = cipher.decrypt(ciphertext)
        return unpad(decrypted, AES.block_size)
    except ValueError as e:
        raise DecodeError(f"AES decryption failed: {e}") from e


def decode_save(raw: bytes) -> SaveState:
    """Decode a raw save file into a SaveState. Raises DecodeError on any failure."""
    payload = _strip_envelope(raw)

    try:
        ciphertext = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"invalid base64 payload: {e}") from e

    plaintext = _decrypt(ciphertext)

    try:
        data: Any = json.loads(plaintext.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise DecodeError(f"decrypted save is not UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise DecodeError(f"decrypted save is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise DecodeError(f"expected a JSON object, got {type(data).__name__}")

    return SaveState(data)


def load_save(path: Path) -> SaveState:
    """Read and decode a save file. OSError propagates to the caller."""
    return decode_save(Path(path).read_bytes())
