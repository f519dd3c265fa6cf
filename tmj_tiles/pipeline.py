"""
Public decode operations for layer tile data.

Two families of accessors exist and behave differently on purpose:

- decode() / decode_and_decompress() only make sense for encoded text.
  Handing them a RawIndices value is a programming error and raises
  InvalidSourceShapeError.

- extract_tiles() accepts either shape. RawIndices are already final and
  are returned as-is, whatever compression tag came with them.

raw_indices() is the strict counterpart for callers that only ever expect
CSV-style layers.
"""

from typing import Iterable, List, Optional

from .byteorder import i32_to_le_bytes, le_bytes_to_i32
from .codecs import DEFAULT_CHUNK_SIZE, compress, decode_base64, decompress, encode_base64
from .data_source import CompressionKind, EncodedText, ShapeTag, TileDataValue, resolve
from .errors import InvalidSourceShapeError, UnsupportedShapeForOperationError


def _encoded_text(value: TileDataValue) -> str:
    shape, payload = resolve(value)
    if shape is ShapeTag.RAW:
        raise InvalidSourceShapeError()
    return payload


def decode(value: TileDataValue) -> bytes:
    """Base64-decode an encoded value without decompressing it."""
    return decode_base64(_encoded_text(value))


def decode_and_decompress(value: TileDataValue, kind: CompressionKind,
                          chunk_size: int = DEFAULT_CHUNK_SIZE) -> List[int]:
    """
    Run the full pipeline on an encoded value.

    base64 -> decompress(kind) -> little-endian int32 tile indices.
    Each stage raises on failure, so no partial result is ever returned.
    """
    buf = decode_base64(_encoded_text(value))
    buf = decompress(buf, kind, chunk_size)
    return le_bytes_to_i32(buf)


def extract_tiles(value: TileDataValue, kind: Optional[CompressionKind] = None,
                  chunk_size: int = DEFAULT_CHUNK_SIZE) -> List[int]:
    """
    Tile indices for either shape.

    Parameters:
    -----------
    value : TileDataValue
        Layer or chunk data
    kind : CompressionKind, optional
        Compression tag of the enclosing layer. Ignored for RawIndices;
        None means uncompressed for EncodedText.
    """
    shape, payload = resolve(value)
    if shape is ShapeTag.RAW:
        return list(payload)
    if kind is None:
        kind = CompressionKind.NONE
    return decode_and_decompress(value, kind, chunk_size)


def raw_indices(value: TileDataValue) -> List[int]:
    """Tile indices of a RawIndices value; encoded text is rejected."""
    shape, payload = resolve(value)
    if shape is ShapeTag.ENCODED:
        raise UnsupportedShapeForOperationError()
    return list(payload)


def encode_tiles(indices: Iterable[int],
                 kind: CompressionKind = CompressionKind.NONE) -> EncodedText:
    """Inverse of decode_and_decompress(), for writing documents."""
    buf = compress(i32_to_le_bytes(indices), kind)
    return EncodedText(encode_base64(buf))
