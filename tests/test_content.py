import io

import pytest

from backuptool.archive.content import (
    CompressionKind,
    ContentCompression,
    ContentReader,
    ContentSettings,
    ContentWriter,
)
from backuptool.checksum import HashAlgo, Hasher

BZIP = ContentSettings(ContentCompression(CompressionKind.BZIP2, 1), HashAlgo.SHA256)
PLAIN = ContentSettings(ContentCompression(CompressionKind.NONE), HashAlgo.SHA256)
DATA = b"some content that is stored in the archive\n" * 50


def test_compression_json_none():
    assert ContentCompression(CompressionKind.NONE).to_json() == "None"


def test_compression_json_bzip2():
    assert ContentCompression(CompressionKind.BZIP2, 1).to_json() == {"Bzip2": {"level": 1}}


def test_settings_json():
    assert BZIP.to_json() == {"compression": {"Bzip2": {"level": 1}}, "hash_algo": "Sha256"}


@pytest.mark.parametrize("settings", [BZIP, PLAIN])
def test_settings_round_trip(settings):
    assert ContentSettings.from_json(settings.to_json()) == settings


@pytest.mark.parametrize("data", ["Gzip", {"Bzip2": {}}, {"Bzip2": {"level": 1}, "x": 1}, 3])
def test_compression_from_invalid_json(data):
    with pytest.raises(ValueError):
        ContentCompression.from_json(data)


def test_settings_missing_key():
    with pytest.raises(ValueError):
        ContentSettings.from_json({"compression": "None"})


def test_settings_unknown_hash():
    with pytest.raises(ValueError):
        ContentSettings.from_json({"compression": "None", "hash_algo": "Md5"})


@pytest.mark.parametrize("level", [0, 10, None])
def test_bzip2_level_range(level):
    with pytest.raises(ValueError):
        ContentCompression(CompressionKind.BZIP2, level)


@pytest.mark.parametrize("settings", [BZIP, PLAIN])
def test_writer_reader_round_trip(settings):
    buffer = io.BytesIO()
    with ContentWriter(buffer, settings) as writer:
        writer.write(DATA[:100])
        writer.write(DATA[100:])
    assert writer.bytes_written() == len(DATA)
    buffer.seek(0)
    with ContentReader(buffer, settings) as reader:
        assert reader.read() == DATA


def test_bzip2_output_is_bzip2_stream():
    buffer = io.BytesIO()
    with ContentWriter(buffer, BZIP) as writer:
        writer.write(DATA)
    raw = buffer.getvalue()
    assert raw.startswith(b"BZh")
    assert len(raw) < len(DATA)


def test_plain_output_is_unchanged():
    buffer = io.BytesIO()
    with ContentWriter(buffer, PLAIN) as writer:
        writer.write(DATA)
    assert buffer.getvalue() == DATA


def test_reader_hash_matches_content():
    buffer = io.BytesIO()
    with ContentWriter(buffer, BZIP) as writer:
        writer.write(DATA)
    buffer.seek(0)
    reader = ContentReader(buffer, BZIP, with_hash=True)
    chunks = list(iter(lambda: reader.read(64), b""))
    assert b"".join(chunks) == DATA
    hasher = Hasher(HashAlgo.SHA256)
    hasher.update(DATA)
    assert reader.digest == hasher.finalize()


def test_reader_without_hash_has_no_digest():
    reader = ContentReader(io.BytesIO(DATA), PLAIN)
    assert reader.read() == DATA
    assert reader.digest is None


def test_writer_owns_stream_closes_it():
    buffer = io.BytesIO()
    writer = ContentWriter(buffer, PLAIN, owns_stream=True)
    writer.write(b"abc")
    writer.close()
    assert buffer.closed