"""
Save Decoder Tests

Envelope stripping, base64, AES-256-ECB/PKCS7 and JSON parsing of
save files, plus the null-safe SaveState accessors.
"""

import base64
import json
import os

import pytest
from Crypto.Cipher import AES

from conftest import GAME_KEY, HEADER, encrypt_document, encrypt_plaintext
from tracker.errors import DecodeError
from tracker.save import ENVELOPE_SIZE, HEADER_SIZE, SaveState, decode_save, load_save


class TestDecodeRoundTrip:
    """Documents encrypted like the game decode back unchanged."""

    def test_recovers_document(self, full_save_document, save_bytes):
        assert decode_save(save_bytes).data == full_save_document

    def test_arbitrary_header_bytes(self):
        document = {"playerData": {"geo": 120}}
        header = os.urandom(HEADER_SIZE)
        assert decode_save(encrypt_document(document, header=header, footer=b"\xff")).data == document

    def test_non_ascii_text(self):
        """Plaintext is UTF-8, not latin-1."""
        document = {"playerData": {"playerName": "Hornet ✂ Pharloom"}}
        assert decode_save(encrypt_document(document)).data == document

    def test_accepts_bytearray(self, full_save_document, save_bytes):
        assert decode_save(bytearray(save_bytes)).data == full_save_document

    def test_load_save_reads_file(self, tmp_path, full_save_document, save_bytes):
        path = tmp_path / "user1.dat"
        path.write_bytes(save_bytes)
        assert load_save(path).data == full_save_document

    def test_load_save_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_save(tmp_path / "missing.dat")


class TestDecodeFailures:
    """Every failing step surfaces as DecodeError."""

    def test_too_short(self):
        with pytest.raises(DecodeError, match="too short"):
            decode_save(b"\x00" * (ENVELOPE_SIZE - 1))

    def test_empty_payload(self):
        with pytest.raises(DecodeError):
            decode_save(HEADER + b"\x0b")

    def test_invalid_base64_characters(self):
        with pytest.raises(DecodeError, match="base64"):
            decode_save(HEADER + b"!!!not*base64!!" + b"\x0b")

    def test_high_bytes_in_payload(self):
        with pytest.raises(DecodeError):
            decode_save(HEADER + b"\xc3\xa9\xc3\xa9" + b"\x0b")

    def test_ciphertext_not_block_aligned(self):
        payload = base64.b64encode(b"0123456789")
        with pytest.raises(DecodeError, match="AES"):
            decode_save(HEADER + payload + b"\x0b")

    def test_bad_padding(self):
        cipher = AES.new(GAME_KEY, AES.MODE_ECB)
        payload = base64.b64encode(cipher.encrypt(b"A" * 15 + b"\x00"))
        with pytest.raises(DecodeError, match="AES"):
            decode_save(HEADER + payload + b"\x0b")

    def test_wrong_key(self):
        cipher = AES.new(b"0" * 32, AES.MODE_ECB)
        payload = base64.b64encode(cipher.encrypt(b"{}" + b"\x0e" * 14))
        # Garbage after decrypting with the real key: padding, UTF-8 or JSON fails.
        with pytest.raises(DecodeError):
            decode_save(HEADER + payload + b"\x0b")

    def test_not_utf8(self):
        with pytest.raises(DecodeError, match="UTF-8"):
            decode_save(encrypt_plaintext(b"\xff\xfe\xfd"))

    def test_not_json(self):
        with pytest.raises(DecodeError, match="JSON"):
            decode_save(encrypt_plaintext(b"playerData: yes"))

    def test_json_not_an_object(self):
        with pytest.raises(DecodeError, match="JSON object"):
            decode_save(encrypt_plaintext(json.dumps([1, 2, 3]).encode("utf-8")))

    def test_error_is_chained(self):
        with pytest.raises(DecodeError) as excinfo:
            decode_save(encrypt_plaintext(b"{broken"))
        assert isinstance(excinfo.value.__cause__, json.JSONDecodeError)


class TestSaveStateAccessors:
    """Missing or wrongly typed sections read as empty."""

    def test_empty_state(self):
        state = SaveState()
        assert state.player_data == {}
        assert state.scene_flags == []
        assert state.named_list("Tools") == []
        assert state.completion_percentage is None

    def test_wrong_types(self):
        state = SaveState({
            "playerData": {"Tools": {"savedData": "nope"}, "completionPercentage": "37"},
            "sceneData": {"persistentBools": []},
        })
        assert state.named_list("Tools") == []
        assert state.scene_flags == []
        assert state.completion_percentage is None

    def test_player_data_not_a_dict(self):
        assert SaveState({"playerData": [1, 2]}).player_data == {}

    def test_populated(self, full_save_document):
        state = SaveState(full_save_document)
        assert state.completion_percentage == 37
        assert len(state.scene_flags) == 3
        assert [e["Name"] for e in state.named_list("ToolEquips")] == ["Hunter", "Reaper", "Witch"]
