"""Tests for cache key validation."""

import pytest

from cachex_core.config import CacheConfig
from cachex_core.exceptions import InvalidKeyError
from cachex_core.keys import KeyValidator
from cachex_core.keys import validate_key
from cachex_core.keys import validate_keys
from cachex_core.types import MAX_KEY_LENGTH
from cachex_core.types import ErrorContext


@pytest.mark.parametrize("key", ["foo", "Foo_Bar.9", "a", "x" * MAX_KEY_LENGTH])
def test_valid_key_is_returned_prefixed(key: str) -> None:
    assert validate_key(key) == key
    assert validate_key(key, prefix="pool_") == f"pool_{key}"


@pytest.mark.parametrize(
    ("key", "reason"),
    [
        pytest.param("", "invalid", id="empty"),
        pytest.param("foo bar", "invalid", id="space"),
        pytest.param("café", "invalid", id="non-ascii"),
        pytest.param("foo-bar", "invalid", id="dash"),
        pytest.param("foo{bar}", "reserved", id="braces"),
        pytest.param("foo:bar", "reserved", id="colon"),
        pytest.param("foo/bar", "reserved", id="slash"),
        pytest.param("foo@bar", "reserved", id="at"),
        pytest.param("foo\\bar", "invalid", id="backslash"),
        pytest.param("x" * (MAX_KEY_LENGTH + 1), "Max characters", id="too-long"),
    ],
)
def test_invalid_key_is_rejected(key: str, reason: str) -> None:
    with pytest.raises(InvalidKeyError, match=reason):
        validate_key(key, prefix="pool_")


@pytest.mark.parametrize("key", [None, 42, b"foo", ["foo"]])
def test_non_string_key_raises_type_error(key: object) -> None:
    with pytest.raises(TypeError, match="MUST be a string"):
        validate_key(key)


def test_invalid_key_error_carries_context() -> None:
    with pytest.raises(InvalidKeyError) as exc_info:
        validate_key("foo bar", context=ErrorContext.SIMPLE)
    assert exc_info.value.context is ErrorContext.SIMPLE

    with pytest.raises(InvalidKeyError) as exc_info:
        validate_key("foo bar")
    assert exc_info.value.context is ErrorContext.POOL


def test_invalid_key_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        validate_key("foo bar")


def test_custom_rules() -> None:
    assert validate_key("abc", allowed="a-z", reserved="", max_length=3) == "abc"

    with pytest.raises(InvalidKeyError):
        validate_key("ABC", allowed="a-z")
    with pytest.raises(InvalidKeyError):
        validate_key("abcd", allowed="a-z", max_length=3)
    with pytest.raises(InvalidKeyError, match="reserved"):
        validate_key("abc", allowed="a-z", reserved="b")


def test_validate_keys() -> None:
    assert validate_keys(["foo", "bar"], prefix="p_") == ["p_foo", "p_bar"]
    assert validate_keys(key for key in ("foo",)) == ["foo"]
    assert validate_keys([]) == []


@pytest.mark.parametrize("keys", ["foo", b"foo", 42, None])
def test_validate_keys_requires_iterable_of_keys(keys: object) -> None:
    with pytest.raises(TypeError, match="iterable of strings"):
        validate_keys(keys)


def test_validate_keys_rejects_bad_member() -> None:
    with pytest.raises(TypeError):
        validate_keys(["foo", 1])
    with pytest.raises(InvalidKeyError):
        validate_keys(["foo", "b a r"])


def test_key_validator_uses_config() -> None:
    config = CacheConfig(
        key_prefix="app_",
        max_key_length=5,
        error_context=ErrorContext.SIMPLE,
    )
    validator = KeyValidator(config)

    assert validator.validate("hello") == "app_hello"
    assert validator.validate_many(["a", "b"]) == ["app_a", "app_b"]
    assert validator.strip_prefix("app_hello") == "hello"
    assert validator.strip_prefix("other") == "other"

    with pytest.raises(InvalidKeyError) as exc_info:
        validator.validate("toolong")
    assert exc_info.value.context is ErrorContext.SIMPLE


def test_key_validator_context_override() -> None:
    validator = KeyValidator(context=ErrorContext.SIMPLE)

    assert validator.validate("foo") == "cachex_pool_foo"
    with pytest.raises(InvalidKeyError) as exc_info:
        validator.validate("f o o")
    assert exc_info.value.context is ErrorContext.SIMPLE
