import hashlib
import io

import pytest

from backuptool.checksum import (
    OUTPUT_SIZE_SHORT,
    HashAlgo,
    HashResult,
    Hasher,
    new_hasher,
)

ABC_SHA256 = "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def test_known_vector_abc():
    hasher = new_hasher(HashAlgo.SHA256)
    hasher.update(b"abc")
    assert hasher.finalize().hex() == ABC_SHA256


def test_empty_input_digest():
    assert new_hasher(HashAlgo.SHA256).finalize().hex() == EMPTY_SHA256


def test_finalize_resets_state():
    hasher = Hasher()
    hasher.update(b"abc")
    first = hasher.finalize()
    hasher.update(b"abc")
    second = hasher.finalize()
    assert first == second


def test_incremental_updates_match_single_update():
    split = Hasher()
    split.update(b"ab")
    split.update(b"c")
    whole = Hasher()
    whole.update(b"abc")
    assert split.finalize() == whole.finalize()


def test_hex_round_trip():
    result = HashResult.from_data(bytes(range(32)))
    assert HashResult.from_hex_string(result.hex()) == result
    assert str(result) == result.hex()


def test_from_hex_string_rejects_invalid():
    with pytest.raises(ValueError):
        HashResult.from_hex_string("zz")
    with pytest.raises(ValueError):
        HashResult.from_hex_string("abc")


def test_short_uses_leading_bytes():
    result = HashResult.from_data(bytes(range(32)))
    assert result.short() == result.hex()[: OUTPUT_SIZE_SHORT * 2] + "..."


def test_short_with_small_digest():
    result = HashResult.from_data(b"\x01\x02")
    assert result.short() == result.hex() + "..."


def test_stream_matches_reference_for_large_input():
    data = bytes(range(256)) * 20
    result = Hasher().stream(io.BytesIO(data))
    assert result.digest == hashlib.sha256(data).digest()


def test_file_hash(tmp_path):
    path = tmp_path / "data.bin"
    path.write_bytes(b"abc")
    assert new_hasher(HashAlgo.SHA256).file(path).hex() == ABC_SHA256


def test_file_missing_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        Hasher().file(tmp_path / "missing")


def test_algo_from_settings_name():
    assert HashAlgo("Sha256") is HashAlgo.SHA256