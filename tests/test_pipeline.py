import pytest

from tmj_tiles.codecs import compress, decode_base64, encode_base64
from tmj_tiles.byteorder import i32_to_le_bytes
from tmj_tiles.data_source import CompressionKind, EncodedText, RawIndices
from tmj_tiles.errors import (
    ByteAlignmentError,
    DecodeError,
    DecompressionError,
    InvalidBase64Error,
    InvalidSourceShapeError,
    TileIndexRangeError,
    UnsupportedShapeForOperationError,
)
from tmj_tiles.pipeline import (
    decode,
    decode_and_decompress,
    encode_tiles,
    extract_tiles,
    raw_indices,
)


# --- Known vectors exported by Tiled ---

def test_uncompressed_base64():
    assert extract_tiles(EncodedText("AgAAAAIAAAA=")) == [2, 2]


def test_zlib_vector():
    data = EncodedText("eJxjYmBgAAAADAAD")
    assert decode_and_decompress(data, CompressionKind.ZLIB) == [2]


def test_zstd_vector():
    data = EncodedText("KLUv/SAEIQAAAgAAAA==")
    assert decode_and_decompress(data, CompressionKind.ZSTD) == [2]


def test_gzip_vector():
    data = EncodedText("H4sIAAAAAAAACmNiYGAAAJcXTYsEAAAA")
    assert decode_and_decompress(data, CompressionKind.GZIP) == [2]


def test_decode_returns_raw_bytes():
    assert decode(EncodedText("eJxjYmBgAAAADAAD")) == bytes.fromhex("789c636260600000000c0003")


# --- Shape handling ---

def test_raw_shape_ignores_compression_tag():
    assert extract_tiles(RawIndices((2,)), CompressionKind.ZLIB) == [2]


@pytest.mark.parametrize("tag", [None, CompressionKind.GZIP, CompressionKind.ZSTD, "bogus"])
def test_raw_shape_never_consults_tag(tag):
    tiles = [0, 1, -2147483647, 2147483647]
    assert extract_tiles(RawIndices(tiles), tag) == tiles


def test_encoded_only_operations_reject_raw_shape():
    with pytest.raises(InvalidSourceShapeError):
        decode(RawIndices((1, 2)))
    with pytest.raises(InvalidSourceShapeError, match="expected encoded text"):
        decode_and_decompress(RawIndices((1, 2)), CompressionKind.ZLIB)


def test_strict_raw_accessor():
    assert raw_indices(RawIndices((3, 0, 3))) == [3, 0, 3]
    with pytest.raises(UnsupportedShapeForOperationError):
        raw_indices(EncodedText("AgAAAA=="))


# --- Base64 failures ---

def test_invalid_character():
    with pytest.raises(InvalidBase64Error):
        extract_tiles(EncodedText("AgAAAAIAAA!="))


@pytest.mark.parametrize("text", ["AgAAAAIAAAA", "AgAA AAIAAAA=", "AgAAAAIAAAä=", "-_AAAA=="])
def test_malformed_base64(text):
    with pytest.raises(DecodeError):
        decode_base64(text)


def test_surrounding_whitespace_is_ignored():
    assert decode_base64("\n   AgAAAA==\n") == b"\x02\x00\x00\x00"


# --- Byte alignment ---

def test_misaligned_buffer_is_rejected():
    with pytest.raises(ByteAlignmentError) as excinfo:
        extract_tiles(EncodedText(encode_base64(b"\x01\x02\x03\x04\x05")))
    assert excinfo.value.length == 5
    assert excinfo.value.element_size == 4


def test_misaligned_decompressed_buffer_is_rejected():
    payload = encode_base64(compress(b"\x01\x02\x03", CompressionKind.ZLIB))
    with pytest.raises(ByteAlignmentError):
        decode_and_decompress(EncodedText(payload), CompressionKind.ZLIB)


def test_empty_buffer_is_empty_layer():
    assert extract_tiles(EncodedText("")) == []


# --- Decompression failures ---

@pytest.mark.parametrize("kind", [CompressionKind.ZLIB, CompressionKind.GZIP, CompressionKind.ZSTD])
def test_truncated_stream(kind):
    buf = compress(i32_to_le_bytes(range(256)), kind)
    truncated = EncodedText(encode_base64(buf[:len(buf) // 2]))
    with pytest.raises(DecompressionError) as excinfo:
        decode_and_decompress(truncated, kind)
    assert excinfo.value.codec == kind.token


@pytest.mark.parametrize("kind", [CompressionKind.ZLIB, CompressionKind.GZIP, CompressionKind.ZSTD])
def test_bad_magic(kind):
    data = EncodedText(encode_base64(b"this is not compressed at all"))
    with pytest.raises(DecompressionError) as excinfo:
        decode_and_decompress(data, kind)
    assert excinfo.value.codec == kind.token
    assert excinfo.value.detail


def test_wrong_codec_for_payload():
    # zlib data labelled as gzip
    with pytest.raises(DecompressionError, match="gzip"):
        decode_and_decompress(EncodedText("eJxjYmBgAAAADAAD"), CompressionKind.GZIP)


def test_small_read_chunks():
    tiles = list(range(-500, 500))
    data = encode_tiles(tiles, CompressionKind.ZSTD)
    assert decode_and_decompress(data, CompressionKind.ZSTD, chunk_size=7) == tiles


# --- Writer path ---

@pytest.mark.parametrize("kind", list(CompressionKind))
def test_encode_then_extract(kind):
    tiles = [0, 1, 2, 0, 2147483647, -2147483648, -2147483646]
    data = encode_tiles(tiles, kind)
    assert isinstance(data, EncodedText)
    assert extract_tiles(data, kind) == tiles


@pytest.mark.parametrize("kind", list(CompressionKind))
def test_unsigned_flagged_index_is_written_as_signed(kind):
    # 2 | FLIPPED_HORIZONTALLY_FLAG, as Tiled shows it in csv data
    data = encode_tiles([0x80000002, 0xFFFFFFFF, 5], kind)
    assert extract_tiles(data, kind) == [-2147483646, -1, 5]


@pytest.mark.parametrize("index", [2 ** 32, -2 ** 31 - 1])
def test_index_outside_32_bits_is_rejected(index):
    with pytest.raises(TileIndexRangeError) as excinfo:
        encode_tiles([1, index])
    assert excinfo.value.index == index
