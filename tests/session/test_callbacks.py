"""Tests for callback tokens."""

import pytest

from hypercast.errors import DecodeError
from hypercast.session import CastAction, CastCallback, UnknownCallback, decode_callback
from hypercast.session.callbacks import (
    CALLBACK_DATA_LIMIT,
    encode_callback,
    parse_callback,
    truncate_hash_hex,
)

HASH = "0x" + "ab" * 20


class TestEncode:
    def test_format(self):
        assert encode_callback(CastAction.LIKE, 3, HASH) == "like:3:" + "ab" * 20

    def test_accepts_action_string(self):
        assert encode_callback("thread", 3, "ABCD") == "thread:3:abcd"

    def test_truncates_long_hash(self):
        assert truncate_hash_hex("0x" + "cd" * 32) == "cd" * 20

    def test_fits_telegram_limit_for_14_digit_fid(self):
        token = encode_callback(CastAction.UNRECAST, 10**14 - 1, HASH)
        assert len(token.encode()) <= CALLBACK_DATA_LIMIT

    def test_over_limit_raises(self):
        with pytest.raises(ValueError, match="exceeds"):
            encode_callback(CastAction.UNRECAST, 10**14, HASH)

    def test_negative_fid_raises(self):
        with pytest.raises(ValueError, match="non-negative"):
            encode_callback(CastAction.LIKE, -1, HASH)

    @pytest.mark.parametrize("bad_hash", ["0xabc", "zz" * 20, "", "0x"])
    def test_bad_hash_raises(self, bad_hash):
        with pytest.raises(ValueError, match="Not a hex hash"):
            encode_callback(CastAction.LIKE, 3, bad_hash)


class TestDecode:
    @pytest.mark.parametrize("action", list(CastAction))
    def test_round_trip(self, action):
        decoded = decode_callback(encode_callback(action, 977233, HASH))
        assert decoded == CastCallback(action=action, fid=977233, hash_hex=HASH)

    def test_like_token(self):
        decoded = decode_callback("like:3:" + "0a" * 20)
        assert decoded == CastCallback(CastAction.LIKE, 3, "0x" + "0a" * 20)

    def test_uppercase_hash_is_normalized(self):
        assert parse_callback("reply:3:ABCD").hash_hex == "0xabcd"

    @pytest.mark.parametrize(
        "data",
        [
            "",
            "garbage",
            "like:3",
            "like:3:ab:cd",
            "boost:3:abcd",
            "like:-3:abcd",
            "like:x:abcd",
            "like:３:abcd",
            "like:3:xyz0",
            "like:3:abc",
            "like:3:" + "ab" * 21,
        ],
    )
    def test_bogus_is_unknown(self, data):
        decoded = decode_callback(data)
        assert isinstance(decoded, UnknownCallback)
        assert decoded.data == data
        assert decoded.reason

    def test_parse_raises_decode_error(self):
        with pytest.raises(DecodeError, match="unknown action"):
            parse_callback("boost:3:abcd")


class TestLikeScenario:
    def test_like_42(self):
        hex40 = "1122334455667788990011223344556677889900"
        decoded = decode_callback(f"like:42:{hex40}")
        assert decoded == CastCallback(CastAction.LIKE, 42, "0x" + hex40)

    def test_bogus(self):
        assert isinstance(decode_callback("bogus"), UnknownCallback)
