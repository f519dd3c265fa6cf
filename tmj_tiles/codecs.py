"""
Base64 and compression codecs for Tiled tile data.

=============================================================================
PIPELINE
=============================================================================

Encoded tile data goes through three fixed stages:

    "eJxjYmBgAAAADAAD"           base64 text
          |  decode_base64()
          v
    78 9c 63 62 60 60 00 ...     compressed bytes
          |  decompress(buf, CompressionKind.ZLIB)
          v
    02 00 00 00                  raw little-endian int32 buffer
          |  byteorder.le_bytes_to_i32()
          v
    [2]                          tile indices

=============================================================================
CODECS
=============================================================================

- zlib: RFC 1950 stream (2 byte header, deflate data, adler32)
- gzip: RFC 1952 member (10 byte header, deflate data, crc32 + size)
- zstd: Zstandard frame; window size is taken from the frame header

zlib and gzip are both served by zlib.decompressobj() with different window
bits. zstd uses the zstandard package, which exposes the same
decompress()/eof interface, so a single streaming helper drives all three
and can tell a complete stream from a truncated one.

=============================================================================
"""

import base64
import binascii
import zlib

import zstandard

from .data_source import CompressionKind
from .errors import DecompressionError, InvalidBase64Error

# Size of the slices fed to a decompressor per step
DEFAULT_CHUNK_SIZE = 64 * 1024

# zlib.decompressobj() window bits for each framing
ZLIB_WBITS = zlib.MAX_WBITS          # RFC 1950 header expected
GZIP_WBITS = 16 + zlib.MAX_WBITS     # RFC 1952 header expected


# =============================================================================
# BASE64
# =============================================================================

def decode_base64(text: str) -> bytes:
    """
    Decode standard, padded base64.

    Leading and trailing whitespace is ignored (Tiled pretty-prints data
    blocks); anything else outside the RFC 4648 alphabet is an error.

    Raises:
    -------
    InvalidBase64Error : Bad character, bad padding or bad length
    """
    try:
        return base64.b64decode(text.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        # ValueError covers non-ASCII characters in a str argument
        raise InvalidBase64Error(str(e)) from e


def encode_base64(buf: bytes) -> str:
    return base64.b64encode(buf).decode('ascii')


# =============================================================================
# DECOMPRESSION
# =============================================================================

def _zlib_decoder():
    return zlib.decompressobj(ZLIB_WBITS)


def _gzip_decoder():
    return zlib.decompressobj(GZIP_WBITS)


def _zstd_decoder():
    return zstandard.ZstdDecompressor().decompressobj()


# Codec name, decoder factory and the exceptions the codec raises on bad data
_DECODERS = {
    CompressionKind.ZLIB: ('zlib', _zlib_decoder, (zlib.error,)),
    CompressionKind.GZIP: ('gzip', _gzip_decoder, (zlib.error,)),
    CompressionKind.ZSTD: ('zstd', _zstd_decoder, (zstandard.ZstdError,)),
}


def read_to_end(decoder, buf: bytes, codec: str,
                chunk_size: int = DEFAULT_CHUNK_SIZE) -> bytes:
    """
    Stream `buf` through a decompression object until end of stream.

    The decoder must provide decompress(data), flush() and an `eof`
    attribute (zlib.decompressobj and zstandard's decompressobj both do).
    Bytes after the end of the first stream/member are ignored.

    Raises:
    -------
    DecompressionError : If the input runs out before the codec reaches
        end of stream
    """
    view = memoryview(buf)
    out = bytearray()

    for offset in range(0, len(view), chunk_size):
        out += decoder.decompress(view[offset:offset + chunk_size])
        if decoder.eof:
            break

    if not decoder.eof:
        raise DecompressionError(
            codec, f"truncated stream ({len(buf)} input bytes, "
                   f"{len(out)} bytes decoded before end of input)"
        )

    out += decoder.flush()
    return bytes(out)


def decompress(buf: bytes, kind: CompressionKind,
               chunk_size: int = DEFAULT_CHUNK_SIZE) -> bytes:
    """
    Undo the compression named by `kind`.

    CompressionKind.NONE returns the buffer unchanged.

    Raises:
    -------
    DecompressionError : Corrupt, truncated or unrecognised stream
    """
    if kind is CompressionKind.NONE:
        return bytes(buf)

    try:
        codec, factory, codec_errors = _DECODERS[kind]
    except KeyError:
        raise AssertionError(f"No decoder registered for {kind!r}") from None

    decoder = factory()
    try:
        return read_to_end(decoder, buf, codec, chunk_size)
    except codec_errors as e:
        raise DecompressionError(codec, str(e)) from e


# =============================================================================
# COMPRESSION (writer side)
# =============================================================================

def compress(buf: bytes, kind: CompressionKind, level: int = -1) -> bytes:
    """
    Compress a raw tile buffer for writing.

    Parameters:
    -----------
    level : int
        Codec compression level; -1 picks the codec default
    """
    if kind is CompressionKind.NONE:
        return bytes(buf)

    if kind is CompressionKind.ZLIB:
        compressor = zlib.compressobj(level, zlib.DEFLATED, ZLIB_WBITS)
        return compressor.compress(buf) + compressor.flush()

    if kind is CompressionKind.GZIP:
        compressor = zlib.compressobj(level, zlib.DEFLATED, GZIP_WBITS)
        return compressor.compress(buf) + compressor.flush()

    if kind is CompressionKind.ZSTD:
        # zstandard uses 3 as its default level
        zstd_level = 3 if level < 0 else level
        return zstandard.ZstdCompressor(level=zstd_level).compress(buf)

    raise AssertionError(f"No encoder registered for {kind!r}")
