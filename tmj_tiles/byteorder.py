"""
Conversion between byte buffers and fixed-width integer arrays.

Tiled stores decoded tile data as a flat array of little-endian 32-bit
integers:

    bytes:   02 00 00 00 | 00 00 00 80 | ...
    tiles:   2           | -2147483648 | ...

numpy dtypes describe both the width and the byte order ('<i4' is
little-endian signed 32-bit, '>u2' big-endian unsigned 16-bit), so one
function covers every layout and the length check lives in one place.
"""

from typing import Iterable, List, Union

import numpy as np

from .errors import ByteAlignmentError, TileIndexRangeError

# Wire layout of a tile index
TILE_DTYPE = np.dtype('<i4')

BytesLike = Union[bytes, bytearray, memoryview]


def bytes_to_array(buf: BytesLike, dtype) -> np.ndarray:
    """
    Reinterpret a byte buffer as an array of fixed-width integers.

    Parameters:
    -----------
    buf : bytes-like
        Source buffer
    dtype : numpy dtype or dtype string
        Element type including byte order, e.g. '<i4'

    Returns:
    --------
    np.ndarray : Owned copy, one element per dtype.itemsize bytes

    Raises:
    -------
    ByteAlignmentError : If len(buf) is not a multiple of the element size
    """
    dtype = np.dtype(dtype)
    length = len(buf)
    element_size = dtype.itemsize

    if length % element_size != 0:
        raise ByteAlignmentError(length, element_size, dtype.name)

    if length == 0:
        return np.empty(0, dtype=dtype)

    # frombuffer returns a read-only view; copy so the result owns its data
    return np.frombuffer(buf, dtype=dtype).copy()


def le_bytes_to_i32(buf: BytesLike) -> List[int]:
    """Decode a tile-data buffer into signed tile indices, in document order."""
    return bytes_to_array(buf, TILE_DTYPE).tolist()


# Accepted input range: signed int32 as decoded, or unsigned uint32 as
# Tiled writes csv data with flag bits set
_MIN_INDEX = -2 ** 31
_MAX_INDEX = 2 ** 32 - 1


def to_i32_array(indices: Iterable[int]) -> np.ndarray:
    """
    Tile indices as a signed int32 array.

    Unsigned values with flag bits set (e.g. 2 | FLIPPED_HORIZONTALLY_FLAG)
    wrap to the same 32-bit pattern the decoder produces.

    Raises:
    -------
    TileIndexRangeError : If an index does not fit in 32 bits
    """
    values = []
    for index in indices:
        if not _MIN_INDEX <= index <= _MAX_INDEX:
            raise TileIndexRangeError(index)
        values.append(index & 0xFFFFFFFF)
    return np.asarray(values, dtype='<u4').view(TILE_DTYPE)


def i32_to_le_bytes(indices: Iterable[int]) -> bytes:
    """Pack tile indices into the little-endian 32-bit wire layout."""
    return to_i32_array(indices).tobytes()
