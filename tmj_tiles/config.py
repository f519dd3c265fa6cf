"""
Loader configuration.

Defaults suit interactive use: fail on the first broken layer and decode
sequentially. Every field can be overridden from the environment with
LoaderConfig.from_env():

    TMJ_TILES_STRICT=0        report broken layers instead of aborting
    TMJ_TILES_WORKERS=4       decode layers on a thread pool
    TMJ_TILES_LOG_LEVEL=DEBUG logging level for the CLI
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .codecs import DEFAULT_CHUNK_SIZE

ENV_PREFIX = "TMJ_TILES_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


@dataclass
class LoaderConfig:
    strict: bool = True                      # Abort the load on the first bad layer
    workers: int = 1                         # Threads used by decode_layers()
    chunk_size: int = DEFAULT_CHUNK_SIZE     # Bytes fed to a decompressor per step
    log_level: int = logging.WARNING         # Used by the CLI's configure_logging()

    def __post_init__(self):
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {self.chunk_size}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None,
                 **overrides) -> 'LoaderConfig':
        """
        Build a config from TMJ_TILES_* environment variables.

        Keyword overrides win over the environment, which wins over the
        dataclass defaults.
        """
        environ = os.environ if environ is None else environ
        values = {}

        raw = environ.get(ENV_PREFIX + "STRICT")
        if raw is not None:
            values["strict"] = _parse_bool(ENV_PREFIX + "STRICT", raw)

        raw = environ.get(ENV_PREFIX + "WORKERS")
        if raw is not None:
            values["workers"] = int(raw)

        raw = environ.get(ENV_PREFIX + "CHUNK_SIZE")
        if raw is not None:
            values["chunk_size"] = int(raw)

        raw = environ.get(ENV_PREFIX + "LOG_LEVEL")
        if raw is not None:
            level = logging.getLevelName(raw.strip().upper())
            if not isinstance(level, int):
                raise ValueError(f"Unknown log level {raw!r}")
            values["log_level"] = level

        values.update(overrides)
        return cls(**values)
