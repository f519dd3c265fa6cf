"""
Exceptions raised while recovering tile data from Tiled JSON documents.

Every failure the decoder can report is a TileDataError, so callers that
only care about "did this layer decode" can catch the base class. The
subclasses carry the details needed for diagnostics (codec name, buffer
lengths) as attributes.
"""

from typing import Optional


class TileDataError(Exception):
    """Base class for all tile-data recovery failures."""


# =============================================================================
# DECODE STAGE
# =============================================================================

class DecodeError(TileDataError):
    """The encoded text could not be turned into bytes."""


class InvalidBase64Error(DecodeError):
    """Text is not valid padded base64 (bad character, padding or length)."""

    def __init__(self, detail: str):
        super().__init__(f"Invalid base64 tile data: {detail}")
        self.detail = detail


class DecompressionError(TileDataError):
    """
    A codec rejected the stream.

    Raised for corrupt data, truncated frames and bad magic headers. The
    codec name ('zlib', 'gzip', 'zstd') and the codec's own message are
    kept so a loader can report which layer failed and why.
    """

    def __init__(self, codec: str, detail: str):
        super().__init__(f"Unable to decompress {codec} tile data: {detail}")
        self.codec = codec
        self.detail = detail


class ByteAlignmentError(TileDataError):
    """Buffer length is not a multiple of the element size."""

    def __init__(self, length: int, element_size: int, type_name: Optional[str] = None):
        type_name = type_name or f"{element_size}-byte element"
        super().__init__(
            f"Unable to convert bytes to {type_name}: "
            f"length not a multiple of element size "
            f"(length={length}, element_size={element_size})"
        )
        self.length = length
        self.element_size = element_size


# =============================================================================
# SHAPE GUARDS
# =============================================================================

class InvalidSourceShapeError(TileDataError):
    """A raw index sequence was passed to an operation that needs encoded text."""

    def __init__(self, message: str = "expected encoded text, found raw index sequence"):
        super().__init__(f"Invalid data source format: {message}")


class UnsupportedShapeForOperationError(TileDataError):
    """Encoded text was passed to an operation that only accepts raw indices."""

    def __init__(self, message: str = "expected raw index sequence, found encoded text"):
        super().__init__(f"Unsupported data shape for operation: {message}")


# =============================================================================
# DOCUMENT TOKENS
# =============================================================================

class CompressionParseError(TileDataError, ValueError):
    def __init__(self, token: str):
        super().__init__(f"Unable to parse compression from string: {token!r}")
        self.token = token


class EncodingParseError(TileDataError, ValueError):
    def __init__(self, token: str):
        super().__init__(f"Unable to parse encoding from string: {token!r}")
        self.token = token


class DataSourceParseError(TileDataError, ValueError):
    def __init__(self, found: str):
        super().__init__(
            f"Unable to parse tile data: expected array or string, found {found}"
        )
        self.found = found


class TileIndexRangeError(TileDataError, ValueError):
    """A tile index does not fit in 32 bits (signed or unsigned)."""

    def __init__(self, index: int):
        super().__init__(
            f"Tile index {index} out of range [-2147483648, 4294967295]"
        )
        self.index = index
