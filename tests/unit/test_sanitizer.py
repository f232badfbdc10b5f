"""
Unit tests for preview sanitization.
"""

from services.preview.engine.sanitizer import sanitize_execution_value
from shared.constants import REDACTED_PLACEHOLDER, TRUNCATED_PLACEHOLDER


def test_plain_values_untouched():
    value = {"a": 1, "b": [True, None, 1.5], "c": "text"}

    result = sanitize_execution_value(value)

    assert result.value == value
    assert result.truncated is False


def test_api_key_redacted_at_any_depth():
    value = {"data": {"items": [{"apiKey": "k-1", "name": "x"}]}, "API_KEY": "k-2"}

    result = sanitize_execution_value(value)

    assert result.value["data"]["items"][0] == {"apiKey": REDACTED_PLACEHOLDER, "name": "x"}
    assert result.value["API_KEY"] == REDACTED_PLACEHOLDER
    assert result.truncated is True


def test_sensitive_key_variants():
    value = {"Authorization": "Bearer x", "access_token": "t", "clientSecret": "s", "password": 1,
             "signature": "0x", "api-key": "k", "username": "u"}

    result = sanitize_execution_value(value)

    assert result.value["username"] == "u"
    assert all(v == REDACTED_PLACEHOLDER for k, v in result.value.items() if k != "username")


def test_depth_ceiling():
    value = {"l1": {"l2": {"l3": {"l4": {"l5": {"l6": {"l7": 1}}}}}}}

    result = sanitize_execution_value(value)

    assert result.value["l1"]["l2"]["l3"]["l4"]["l5"]["l6"] == TRUNCATED_PLACEHOLDER
    assert result.truncated is True


def test_array_and_object_ceilings():
    result = sanitize_execution_value({"items": list(range(25)), "wide": {f"k{i}": i for i in range(60)}})

    assert result.value["items"] == list(range(20))
    assert len(result.value["wide"]) == 50
    assert result.truncated is True


def test_long_string_truncated():
    result = sanitize_execution_value("x" * 2500)

    assert result.value == "x" * 2000 + "..."
    assert result.truncated is True


def test_chain_values_made_json_safe():
    result = sanitize_execution_value({
        "big": 2 ** 200,
        "negative": -(2 ** 60),
        "small": 2 ** 53 - 1,
        "raw": b"\x01\x02",
        "pair": (1, 2),
    })

    assert result.value == {
        "big": str(2 ** 200),
        "negative": str(-(2 ** 60)),
        "small": 2 ** 53 - 1,
        "raw": "0x0102",
        "pair": [1, 2],
    }
    assert result.truncated is False
