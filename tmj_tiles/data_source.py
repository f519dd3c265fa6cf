"""
Tile data sources - the two shapes a layer's "data" field can take.

=============================================================================
WHY TWO SHAPES?
=============================================================================

In a Tiled JSON map the tile data of a layer (or of a chunk, for infinite
maps) is stored in a single field whose type depends on the export options:

    "encoding": "csv"     ->  "data": [1, 2, 0, 0, 5, ...]
    "encoding": "base64"  ->  "data": "AQAAAAIAAAAAAAAA..."

There is no tag telling which one you got, other than the JSON shape
itself. We resolve that ambiguity exactly once, when the document is read:

    JSON array   ->  RawIndices   (already the final tile indices)
    JSON string  ->  EncodedText  (base64, maybe compressed)

After that, code branches on the Python type and never looks at the
content to guess.

=============================================================================
COMPRESSION TAG
=============================================================================

The sibling "compression" field names the codec applied before base64:

    ""  / absent  ->  CompressionKind.NONE
    "zlib"        ->  CompressionKind.ZLIB
    "gzip"        ->  CompressionKind.GZIP
    "zstd"        ->  CompressionKind.ZSTD

The tag is meaningless for RawIndices and is ignored there.

=============================================================================
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence, Tuple, Union

from .errors import CompressionParseError, DataSourceParseError, EncodingParseError


# =============================================================================
# DOCUMENT ENUMS
# =============================================================================

class CompressionKind(Enum):
    """Codec applied to a tile-data buffer before base64 encoding."""
    NONE = ""
    ZLIB = "zlib"
    GZIP = "gzip"
    ZSTD = "zstd"

    @classmethod
    def parse(cls, token: Optional[str]) -> 'CompressionKind':
        """
        Parse the document's "compression" token.

        None and the empty string both mean "not compressed", which is how
        Tiled writes uncompressed base64 layers.
        """
        if token is None:
            return cls.NONE
        try:
            return cls(token)
        except ValueError:
            raise CompressionParseError(token) from None

    @property
    def token(self) -> str:
        return self.value


class Encoding(Enum):
    """Value of a layer's "encoding" field."""
    CSV = "csv"
    BASE64 = "base64"

    @classmethod
    def parse(cls, token: Optional[str]) -> 'Encoding':
        # Absent means csv (plain JSON array)
        if token is None:
            return cls.CSV
        try:
            return cls(token)
        except ValueError:
            raise EncodingParseError(token) from None


class ShapeTag(Enum):
    RAW = "raw"
    ENCODED = "encoded"


# =============================================================================
# TILE DATA VALUE
# =============================================================================

class TileDataValue:
    """
    Base class of the two tile-data shapes.

    Use TileDataValue.from_json() to build one from a document field; use
    resolve() to branch on the shape.
    """

    __slots__ = ()

    @staticmethod
    def from_json(value: Any) -> 'TileDataValue':
        """
        Classify a JSON "data" field by its structural shape.

        Parameters:
        -----------
        value : list or str
            The field exactly as json.load() produced it

        Returns:
        --------
        RawIndices for a list, EncodedText for a string

        Raises:
        -------
        DataSourceParseError : for any other JSON type, or a list holding
            something other than integers
        """
        if isinstance(value, str):
            return EncodedText(value)

        if isinstance(value, list):
            # bool is an int subclass, but true/false are not tile indices
            for item in value:
                if not isinstance(item, int) or isinstance(item, bool):
                    raise DataSourceParseError(
                        f"array item of type {type(item).__name__}"
                    )
            return RawIndices(tuple(value))

        raise DataSourceParseError(type(value).__name__)

    def to_json(self) -> Union[list, str]:
        raise NotImplementedError


@dataclass(frozen=True)
class RawIndices(TileDataValue):
    """Tile indices that were stored as a plain JSON array."""
    indices: Tuple[int, ...]

    def __post_init__(self):
        # Accept any sequence, store an immutable tuple
        if not isinstance(self.indices, tuple):
            object.__setattr__(self, 'indices', tuple(self.indices))

    def to_json(self) -> list:
        return list(self.indices)


@dataclass(frozen=True)
class EncodedText(TileDataValue):
    """Tile data stored as a base64 string, possibly compressed."""
    text: str

    def to_json(self) -> str:
        return self.text


def resolve(value: TileDataValue) -> Tuple[ShapeTag, Union[Sequence[int], str]]:
    """
    Split a tile-data value into its shape tag and payload.

    Total over both shapes: nothing is rejected here.
    """
    if isinstance(value, RawIndices):
        return ShapeTag.RAW, value.indices
    if isinstance(value, EncodedText):
        return ShapeTag.ENCODED, value.text
    raise TypeError(f"Not a tile data value: {type(value).__name__}")
