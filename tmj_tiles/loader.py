"""
Loading Tiled JSON maps (.tmj / .json) and decoding their tile layers.

=============================================================================
USAGE
=============================================================================

    tiled_map = TiledMap.load("level1.tmj")
    for name, tiles in tiled_map.decode_layers().items():
        print(name, len(tiles))

    ground = tiled_map.get_layer_by_name("Ground")
    gid = ground.grid()[10, 5]          # row 10, column 5

=============================================================================
ERROR POLICY
=============================================================================

A broken layer (bad base64, corrupt stream, misaligned buffer) either
aborts decode_layers() with the TileDataError (strict, the default) or is
logged and recorded in TiledMap.errors so the rest of the map still loads
(LoaderConfig(strict=False)).

=============================================================================
"""

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from .config import LoaderConfig
from .errors import TileDataError
from .layer import TileLayer

logger = logging.getLogger(__name__)

ChunkTiles = Dict[Tuple[int, int], List[int]]
LayerTiles = Union[List[int], ChunkTiles]


@dataclass
class TiledMap:
    """
    Tile-data view of a Tiled JSON map.

    `layers` holds every tile layer in document order, with group layers
    flattened away. Object and image layers carry no tile data and are
    skipped.
    """
    width: int = 0                                   # Map width in tiles
    height: int = 0                                  # Map height in tiles
    infinite: bool = False                           # Chunked layers?
    layers: List[TileLayer] = field(default_factory=list)
    config: LoaderConfig = field(default_factory=LoaderConfig)
    errors: Dict[str, TileDataError] = field(default_factory=dict)

    @classmethod
    def load(cls, filepath: Union[str, Path],
             config: Optional[LoaderConfig] = None) -> 'TiledMap':
        """
        Load a map document from disk.

        Raises:
        -------
        FileNotFoundError : If the file doesn't exist
        json.JSONDecodeError : If the document is not valid JSON
        TileDataError : If a layer has an unknown encoding/compression token
            or a data field that is neither an array nor a string
        """
        filepath = Path(filepath)
        logger.debug("Loading map %s", filepath)
        with filepath.open('r', encoding='utf-8') as f:
            doc = json.load(f)
        return cls.from_json(doc, config)

    @classmethod
    def from_json(cls, doc: Dict[str, Any],
                  config: Optional[LoaderConfig] = None) -> 'TiledMap':
        tiled_map = cls(
            width=int(doc.get('width', 0)),
            height=int(doc.get('height', 0)),
            infinite=bool(doc.get('infinite', False)),
            config=config or LoaderConfig(),
        )
        tiled_map.layers = list(_iter_tile_layers(doc.get('layers', [])))
        logger.debug("Found %d tile layers", len(tiled_map.layers))
        return tiled_map

    def get_layer_by_name(self, name: str) -> Optional[TileLayer]:
        for layer in self.layers:
            if layer.name == name:
                return layer
        return None

    def decode_layers(self) -> Dict[str, LayerTiles]:
        """
        Decode every tile layer.

        Returns:
        --------
        dict : layer name -> list of tile indices for finite layers, or
            layer name -> {(chunk x, chunk y): tile indices} for chunked ones.
            Layers that failed in lenient mode are missing from the result
            and present in self.errors.
        """
        self.errors = {}
        chunk_size = self.config.chunk_size

        def decode_one(layer: TileLayer) -> LayerTiles:
            if layer.infinite:
                return layer.get_chunk_tiles(chunk_size)
            return layer.get_tiles(chunk_size)

        if self.config.workers > 1:
            with ThreadPoolExecutor(max_workers=self.config.workers) as pool:
                futures = [pool.submit(decode_one, layer) for layer in self.layers]
                outcomes = [_outcome(future.result) for future in futures]
        else:
            outcomes = [_outcome(lambda layer=layer: decode_one(layer))
                        for layer in self.layers]

        result = {}
        for layer, (tiles, error) in zip(self.layers, outcomes):
            if error is not None:
                if self.config.strict:
                    raise error
                logger.warning("Skipping layer '%s': %s", layer.name, error)
                self.errors[layer.name] = error
                continue
            if layer.name in result:
                logger.warning("Duplicate layer name '%s'; keeping the last one", layer.name)
            result[layer.name] = tiles
        return result


def _outcome(call):
    try:
        return call(), None
    except TileDataError as e:
        return None, e


def _iter_tile_layers(layers: List[Dict[str, Any]]):
    for obj in layers:
        layer_type = obj.get('type')
        if layer_type == 'tilelayer':
            yield TileLayer.from_json(obj)
        elif layer_type == 'group':
            yield from _iter_tile_layers(obj.get('layers', []))
