"""Codec proxy for managing the default codec instance."""

from logging import getLogger
from typing import Optional

from .codecs import BaseCodec
from .codecs import PlainCodec

_default_codec: BaseCodec | None = None
logger = getLogger(__name__)


class CodecProxy:
    """CacheX-Core proxy for default codec management."""

    @staticmethod
    def get_codec() -> BaseCodec:
        """Get the current default codec, a PlainCodec unless one was set.

        Returns:
            The current default codec
        """
        global _default_codec
        if _default_codec is None:
            _default_codec = PlainCodec()

        return _default_codec

    @staticmethod
    def set_codec(codec: Optional[BaseCodec]) -> None:
        """Set the default codec.

        Args:
            codec: The codec to use by default, or None to restore PlainCodec
        """
        global _default_codec
        logger.info(
            "Setting default codec to: <%s>",
            codec.__class__.__name__ if codec else "None",
        )
        _default_codec = codec
