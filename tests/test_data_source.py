import json

import pytest

from tmj_tiles.data_source import (
    CompressionKind,
    EncodedText,
    Encoding,
    RawIndices,
    ShapeTag,
    TileDataValue,
    resolve,
)
from tmj_tiles.errors import CompressionParseError, DataSourceParseError, EncodingParseError


def test_shape_is_taken_from_json_structure():
    doc = json.loads('[{"data": "qweasdzxcQWEASDZXC"}, {"data": [0, 0, 1, 0, 1]}]')
    values = [TileDataValue.from_json(item["data"]) for item in doc]
    assert values == [
        EncodedText("qweasdzxcQWEASDZXC"),
        RawIndices((0, 0, 1, 0, 1)),
    ]


def test_to_json_restores_document_shape():
    assert EncodedText("qweasdzxcQWEASDZXC").to_json() == "qweasdzxcQWEASDZXC"
    assert RawIndices((0, 0, 1, 0, 1)).to_json() == [0, 0, 1, 0, 1]


def test_string_of_digits_is_still_encoded():
    # no content sniffing: a string is always encoded text
    assert isinstance(TileDataValue.from_json("1,2,3"), EncodedText)


@pytest.mark.parametrize("value", [None, 3, {"a": 1}, [1, "2"], [1.5], [True, 0]])
def test_unsupported_data_field(value):
    with pytest.raises(DataSourceParseError):
        TileDataValue.from_json(value)


def test_resolve():
    assert resolve(RawIndices([4, 5])) == (ShapeTag.RAW, (4, 5))
    assert resolve(EncodedText("BAAAAA==")) == (ShapeTag.ENCODED, "BAAAAA==")


def test_values_are_immutable():
    value = RawIndices((1, 2))
    with pytest.raises(AttributeError):
        value.indices = (3,)
    assert hash(value) == hash(RawIndices([1, 2]))


@pytest.mark.parametrize("token, kind", [
    (None, CompressionKind.NONE),
    ("", CompressionKind.NONE),
    ("zlib", CompressionKind.ZLIB),
    ("gzip", CompressionKind.GZIP),
    ("zstd", CompressionKind.ZSTD),
])
def test_parse_compression(token, kind):
    assert CompressionKind.parse(token) is kind


def test_unknown_compression_token():
    with pytest.raises(CompressionParseError) as excinfo:
        CompressionKind.parse("lz4")
    assert excinfo.value.token == "lz4"
    assert isinstance(excinfo.value, ValueError)


def test_parse_encoding():
    assert Encoding.parse(None) is Encoding.CSV
    assert Encoding.parse("csv") is Encoding.CSV
    assert Encoding.parse("base64") is Encoding.BASE64
    with pytest.raises(EncodingParseError):
        Encoding.parse("xml")
