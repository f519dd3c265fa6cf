"""
Tile layers and chunks of a Tiled JSON map.

Only the fields needed to recover tile data are modelled here; everything
else in a layer object (opacity, tint, properties, ...) is left to the
caller's own schema.

=============================================================================
FINITE VS INFINITE LAYERS
=============================================================================

Finite maps store one data block per layer:

    {"type": "tilelayer", "name": "Ground", "width": 4, "height": 2,
     "encoding": "base64", "compression": "zlib", "data": "eJxj..."}

Infinite maps split the layer into chunks, each with its own position and
data block. Encoding and compression are still set on the layer:

    {"type": "tilelayer", "name": "Ground", "encoding": "csv",
     "chunks": [{"x": -16, "y": 0, "width": 16, "height": 16,
                 "data": [0, 0, 1, ...]}, ...]}

=============================================================================
GID FLAG BITS
=============================================================================

The highest four bits of each 32-bit tile index are flip/rotation flags:

    bit 31  horizontal flip
    bit 30  vertical flip
    bit 29  diagonal flip (anti-diagonal for hexagonal maps)
    bit 28  120 degree rotation (hexagonal maps only)

Because indices are decoded as signed integers, a horizontally flipped
tile comes out negative. split_gid() masks the flags off.

=============================================================================
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from .byteorder import to_i32_array
from .codecs import DEFAULT_CHUNK_SIZE
from .data_source import CompressionKind, Encoding, RawIndices, TileDataValue
from .errors import DataSourceParseError
from .pipeline import extract_tiles

FLIPPED_HORIZONTALLY_FLAG = 0x80000000
FLIPPED_VERTICALLY_FLAG = 0x40000000
FLIPPED_DIAGONALLY_FLAG = 0x20000000
ROTATED_HEXAGONAL_120_FLAG = 0x10000000

ALL_FLAGS = (FLIPPED_HORIZONTALLY_FLAG | FLIPPED_VERTICALLY_FLAG
             | FLIPPED_DIAGONALLY_FLAG | ROTATED_HEXAGONAL_120_FLAG)


def split_gid(index: int) -> Tuple[int, int]:
    """
    Separate a tile index into (gid, flags).

    Works on the signed value produced by the decoder as well as on the
    unsigned value Tiled shows in its editor.
    """
    value = index & 0xFFFFFFFF
    return value & ~ALL_FLAGS, value & ALL_FLAGS


# =============================================================================
# CHUNK
# =============================================================================

@dataclass
class Chunk:
    """Rectangular piece of an infinite tile layer."""
    x: int                  # Position in tiles
    y: int
    width: int              # Size in tiles
    height: int
    data: TileDataValue

    @classmethod
    def from_json(cls, obj: Dict[str, Any]) -> 'Chunk':
        # A chunk only exists to carry data, unlike a layer
        if 'data' not in obj:
            raise DataSourceParseError("missing chunk data")
        return cls(
            x=int(obj.get('x', 0)),
            y=int(obj.get('y', 0)),
            width=int(obj.get('width', 0)),
            height=int(obj.get('height', 0)),
            data=TileDataValue.from_json(obj['data']),
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            'data': self.data.to_json(),
            'height': self.height,
            'width': self.width,
            'x': self.x,
            'y': self.y,
        }

    def get_tiles(self, compression: Optional[CompressionKind] = None,
                  chunk_size: int = DEFAULT_CHUNK_SIZE) -> List[int]:
        return extract_tiles(self.data, compression, chunk_size)


# =============================================================================
# TILE LAYER
# =============================================================================

@dataclass
class TileLayer:
    """
    Tile layer - a grid of tile indices.

    Exactly one of `data` (finite maps) or `chunks` (infinite maps) is set
    when the layer comes from a document.
    """
    name: str                                        # Layer name
    width: int = 0                                   # Width in tiles
    height: int = 0                                  # Height in tiles
    id: int = 0                                      # Unique layer ID
    x: int = 0                                       # Origin in tiles
    y: int = 0
    encoding: Encoding = Encoding.CSV
    compression: CompressionKind = CompressionKind.NONE
    data: Optional[TileDataValue] = None
    chunks: Optional[List[Chunk]] = None

    @classmethod
    def from_json(cls, obj: Dict[str, Any]) -> 'TileLayer':
        """Parse a {"type": "tilelayer"} object."""
        layer = cls(
            name=obj.get('name', ''),
            width=int(obj.get('width', 0)),
            height=int(obj.get('height', 0)),
            id=int(obj.get('id', 0)),
            x=int(obj.get('x', 0)),
            y=int(obj.get('y', 0)),
            encoding=Encoding.parse(obj.get('encoding')),
            compression=CompressionKind.parse(obj.get('compression')),
        )

        if 'chunks' in obj:
            layer.chunks = [Chunk.from_json(c) for c in obj['chunks']]
        elif 'data' in obj:
            layer.data = TileDataValue.from_json(obj['data'])

        return layer

    def to_json(self) -> Dict[str, Any]:
        obj = {
            'type': 'tilelayer',
            'id': self.id,
            'name': self.name,
            'width': self.width,
            'height': self.height,
            'x': self.x,
            'y': self.y,
        }
        if self.encoding is not Encoding.CSV:
            obj['encoding'] = self.encoding.value
        if self.compression is not CompressionKind.NONE:
            obj['compression'] = self.compression.token
        if self.chunks is not None:
            obj['chunks'] = [c.to_json() for c in self.chunks]
        elif self.data is not None:
            obj['data'] = self.data.to_json()
        return obj

    @property
    def infinite(self) -> bool:
        return self.chunks is not None

    def get_tiles(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> List[int]:
        """
        Tile indices of a finite layer, row-major.

        A layer without data is treated as empty (all zeros).
        """
        if self.infinite:
            raise ValueError(f"Layer '{self.name}' is chunked; use get_chunk_tiles()")
        if self.data is None:
            return [0] * (self.width * self.height)
        return extract_tiles(self.data, self.compression, chunk_size)

    def get_chunk_tiles(self, chunk_size: int = DEFAULT_CHUNK_SIZE
                        ) -> Dict[Tuple[int, int], List[int]]:
        """Tile indices of each chunk of an infinite layer, keyed by (x, y)."""
        if not self.infinite:
            raise ValueError(f"Layer '{self.name}' is not chunked; use get_tiles()")
        return {
            (chunk.x, chunk.y): chunk.get_tiles(self.compression, chunk_size)
            for chunk in self.chunks
        }

    def grid(self) -> np.ndarray:
        """
        Tile indices as a (height, width) int32 array.

        grid[y, x] is the tile at column x, row y.
        """
        tiles = to_i32_array(self.get_tiles())
        if tiles.size != self.width * self.height:
            raise ValueError(
                f"Layer '{self.name}' has {tiles.size} tiles, "
                f"expected {self.width}x{self.height}"
            )
        return tiles.reshape(self.height, self.width)

    def set_tiles(self, tiles: List[int]):
        """Replace the layer data with plain (csv) tile indices."""
        self.data = RawIndices(tuple(tiles))
        self.chunks = None
        self.encoding = Encoding.CSV
        self.compression = CompressionKind.NONE
