from collections.abc import Iterator

import pytest

from cachex_core.codecs import BaseCodec
from cachex_core.codecs import CompactBinaryCodec
from cachex_core.codecs import PlainCodec
from cachex_core.expiration import ExpirationConverter
from cachex_core.proxy import CodecProxy

FROZEN_NOW = 1_000_000.0


@pytest.fixture(autouse=True)
def reset_default_codec() -> Iterator[None]:
    yield
    CodecProxy.set_codec(None)


@pytest.fixture
def frozen_converter() -> ExpirationConverter:
    """Converter whose clock always reads FROZEN_NOW."""
    return ExpirationConverter(clock=lambda: FROZEN_NOW)


@pytest.fixture(params=["plain", "compact"])
def codec(request: pytest.FixtureRequest) -> BaseCodec:
    if request.param == "compact":
        pytest.importorskip("msgpack")
        return CompactBinaryCodec()
    return PlainCodec()
