"""Cache configuration settings."""

import re
from typing import Literal

from pydantic import BaseModel
from pydantic import Field
from pydantic import field_validator

from cachex_core.types import ALLOWED_CHARACTERS
from cachex_core.types import MAX_KEY_LENGTH
from cachex_core.types import RESERVED_CHARACTERS
from cachex_core.types import ErrorContext


class CacheConfig(BaseModel):
    """Cache configuration settings."""

    # Key rules
    allowed_characters: str = Field(
        default=ALLOWED_CHARACTERS,
        min_length=1,
        description="Body of the regex character class a whole key must match",
    )
    reserved_characters: str = Field(
        default=RESERVED_CHARACTERS,
        description="Characters a key must never contain",
    )
    max_key_length: int = Field(
        default=MAX_KEY_LENGTH,
        ge=1,
        description="Maximum number of characters in a key (prefix excluded)",
    )

    # Storage settings
    key_prefix: str = Field(
        default="cachex_pool_",
        description="Prefix for item keys in backend storage",
    )
    codec: Literal["plain", "compact"] = Field(
        default="plain",
        description="Codec used for item values and wire records",
    )

    # Error reporting
    error_context: ErrorContext = Field(
        default=ErrorContext.POOL,
        description="Convention attached to invalid argument errors",
    )

    @field_validator("allowed_characters")
    @classmethod
    def check_character_class(cls, value: str) -> str:
        try:
            re.compile(f"[{value}]+")
        except re.error as e:
            msg = f"allowed_characters is not a valid character class: {e}"
            raise ValueError(msg) from e
        return value
