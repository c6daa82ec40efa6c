"""Value codec implementations for CacheX-Core."""

from .base import BaseCodec
from .compact import COMPACT_HEADER
from .compact import COMPACT_NULL
from .compact import CompactBinaryCodec
from .plain import PLAIN_FALSE
from .plain import PLAIN_HEADER
from .plain import PLAIN_NULL
from .plain import PlainCodec

CODECS: dict[str, type[BaseCodec]] = {
    PlainCodec.name: PlainCodec,
    CompactBinaryCodec.name: CompactBinaryCodec,
}


def get_codec(name: str) -> BaseCodec:
    """Instantiate a codec by name ("plain" or "compact")."""
    try:
        codec_class = CODECS[name]
    except KeyError:
        msg = f"Unknown codec '{name}'. Available: {', '.join(CODECS)}"
        raise ValueError(msg) from None
    return codec_class()


__all__ = [
    "COMPACT_HEADER",
    "COMPACT_NULL",
    "PLAIN_FALSE",
    "PLAIN_HEADER",
    "PLAIN_NULL",
    "BaseCodec",
    "CompactBinaryCodec",
    "PlainCodec",
    "get_codec",
]
