#!/usr/bin/env python3

"""
tmj_tiles - decode the tile layers of a Tiled JSON map

Usage:
    python -m tmj_tiles <map.tmj> [--lenient]

Prints one line per tile layer with its tile count and the number of
non-empty cells.

Options:
    --lenient   Report broken layers and keep going instead of stopping
                at the first one (same as TMJ_TILES_STRICT=0)
"""

import sys
from pathlib import Path

from .config import LoaderConfig
from .errors import TileDataError
from .loader import TiledMap
from .logging_utils import configure_logging


def _summary(name, tiles) -> str:
    if isinstance(tiles, dict):
        total = sum(len(t) for t in tiles.values())
        used = sum(1 for t in tiles.values() for gid in t if gid)
        return f"{name}: {total} tiles in {len(tiles)} chunks, {used} non-empty"
    used = sum(1 for gid in tiles if gid)
    return f"{name}: {len(tiles)} tiles, {used} non-empty"


def main(argv=None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)

    overrides = {}
    if "--lenient" in args:
        args.remove("--lenient")
        overrides["strict"] = False

    if len(args) != 1:
        print(__doc__)
        return 1

    source_path = args[0]
    if not Path(source_path).exists():
        print(f"Error: File '{source_path}' not found")
        return 1

    try:
        config = LoaderConfig.from_env(**overrides)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    configure_logging(config.log_level)

    try:
        tiled_map = TiledMap.load(source_path, config)
        decoded = tiled_map.decode_layers()
    except (TileDataError, ValueError, OSError) as e:
        # json.JSONDecodeError is a ValueError; a directory path is an OSError
        print(f"Error: {e}")
        return 1

    for name, tiles in decoded.items():
        print(_summary(name, tiles))
    for name, error in tiled_map.errors.items():
        print(f"{name}: FAILED ({error})")

    return 2 if tiled_map.errors else 0


if __name__ == "__main__":
    sys.exit(main())
