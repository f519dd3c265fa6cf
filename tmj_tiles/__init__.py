"""
tmj_tiles - tile data recovery for Tiled JSON maps

Requirements:
    pip install numpy zstandard
"""

from .data_source import (
    CompressionKind, Encoding, ShapeTag,
    TileDataValue, RawIndices, EncodedText, resolve
)
from .errors import (
    TileDataError, DecodeError, InvalidBase64Error, DecompressionError,
    ByteAlignmentError, InvalidSourceShapeError,
    UnsupportedShapeForOperationError, CompressionParseError,
    EncodingParseError, DataSourceParseError, TileIndexRangeError
)
from .pipeline import (
    decode, decode_and_decompress, extract_tiles, raw_indices, encode_tiles
)
from .layer import Chunk, TileLayer, split_gid
from .loader import TiledMap
from .config import LoaderConfig

__version__ = "0.1.0"
__all__ = [
    "CompressionKind",
    "Encoding",
    "ShapeTag",
    "TileDataValue",
    "RawIndices",
    "EncodedText",
    "resolve",
    "decode",
    "decode_and_decompress",
    "extract_tiles",
    "raw_indices",
    "encode_tiles",
    "Chunk",
    "TileLayer",
    "split_gid",
    "TiledMap",
    "LoaderConfig",
    "TileDataError",
    "DecodeError",
    "InvalidBase64Error",
    "DecompressionError",
    "ByteAlignmentError",
    "InvalidSourceShapeError",
    "UnsupportedShapeForOperationError",
    "CompressionParseError",
    "EncodingParseError",
    "DataSourceParseError",
    "TileIndexRangeError",
]
