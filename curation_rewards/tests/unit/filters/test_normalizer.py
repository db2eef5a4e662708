"""Tests for filter normalization and transport codec."""

import json
from urllib.parse import quote

import pytest

from curation_rewards.filters import (
    AccrualWindow,
    DecodeError,
    Filter,
    decode_filter,
    decode_filter_or_default,
    encode_filter,
    is_valid_filter_payload,
    normalize_filter,
)


def encode(payload) -> str:
    """Percent-encode a payload the way the web client does."""
    return quote(json.dumps(payload), safe="")


VALID_PAYLOAD = {
    "timePeriod": 7,
    "minimumHP": 100,
    "excludedUsers": ["bob", "carol"],
    "applied": True,
    "curationPeriod": "7d",
    "curationValue": 12.5,
}


class TestNormalizeFilter:
    """Tests for normalize_filter."""

    def test_valid_payload_preserved(self):
        """All valid fields are kept as given."""
        result = normalize_filter(VALID_PAYLOAD)

        assert result.time_period_days == 7
        assert result.minimum_stake == 100.0
        assert result.excluded_accounts == frozenset({"bob", "carol"})
        assert result.applied is True
        assert result.accrual_window is AccrualWindow.WEEK
        assert result.accrual_value == 12.5

    def test_empty_payload_gets_all_defaults(self):
        """Missing fields take their documented defaults."""
        assert normalize_filter({}) == Filter(
            time_period_days=30,
            minimum_stake=50.0,
            excluded_accounts=frozenset(),
            applied=True,
            accrual_window=AccrualWindow.MONTH,
            accrual_value=0.0,
        )

    @pytest.mark.parametrize("payload", [None, "string", 42, ["timePeriod", 7]])
    def test_non_mapping_payload_gets_defaults(self, payload):
        """Anything that is not an object normalizes to defaults."""
        assert normalize_filter(payload) == Filter()

    @pytest.mark.parametrize(
        "missing",
        ["timePeriod", "minimumHP", "excludedUsers", "applied", "curationPeriod", "curationValue"],
    )
    def test_missing_field_defaults_others_preserved(self, missing):
        """Only the missing field is defaulted."""
        payload = {k: v for k, v in VALID_PAYLOAD.items() if k != missing}
        result = normalize_filter(payload).to_transport()
        expected = Filter().to_transport()

        assert result[missing] == expected[missing]
        for key, value in VALID_PAYLOAD.items():
            if key != missing:
                assert result[key] == (sorted(value) if key == "excludedUsers" else value)

    def test_negative_stake_defaults_only_that_field(self):
        """Negative minimum stake falls back to 50, others kept."""
        result = normalize_filter({**VALID_PAYLOAD, "minimumHP": -5})

        assert result.minimum_stake == 50.0
        assert result.time_period_days == 7

    @pytest.mark.parametrize("value", [366, 400, 1000])
    def test_time_period_above_max_defaults(self, value):
        """Periods over 365 days are out of range and fall back to 30."""
        result = normalize_filter({**VALID_PAYLOAD, "timePeriod": value})

        assert result.time_period_days == 30
        assert result.minimum_stake == 100.0

    def test_time_period_at_max_kept(self):
        assert normalize_filter({"timePeriod": 365}).time_period_days == 365

    @pytest.mark.parametrize("value", [0, -3, "7", True, None, float("nan"), 0.5])
    def test_invalid_time_period_defaults(self, value):
        """Non-positive, non-numeric or sub-day periods default to 30."""
        assert normalize_filter({"timePeriod": value}).time_period_days == 30

    def test_invalid_accrual_window_defaults(self):
        """Unknown window literal falls back to 30d."""
        assert normalize_filter({"curationPeriod": "1y"}).accrual_window is AccrualWindow.MONTH

    def test_negative_accrual_value_defaults(self):
        """Negative accrual value falls back to 0."""
        assert normalize_filter({"curationValue": -1}).accrual_value == 0.0

    def test_excluded_accounts_trimmed_and_blank_dropped(self):
        """Only non-empty trimmed strings survive."""
        result = normalize_filter({"excludedUsers": ["  bob ", "", "   ", 7, None, "carol"]})

        assert result.excluded_accounts == frozenset({"bob", "carol"})

    def test_excluded_accounts_wrong_type_defaults(self):
        """A non-list exclusion value becomes empty."""
        assert normalize_filter({"excludedUsers": "bob"}).excluded_accounts == frozenset()

    def test_applied_wrong_type_defaults_true(self):
        """Non-boolean applied becomes True."""
        assert normalize_filter({"applied": "no"}).applied is True

    def test_internal_field_names_accepted(self):
        """Snake_case names are accepted as well as transport names."""
        result = normalize_filter({"time_period_days": 3, "minimum_stake": 10})

        assert result.time_period_days == 3
        assert result.minimum_stake == 10.0


class TestIsValidFilterPayload:
    """Tests for is_valid_filter_payload."""

    def test_complete_payload_is_valid(self):
        assert is_valid_filter_payload(VALID_PAYLOAD)

    def test_missing_required_key_is_invalid(self):
        payload = {k: v for k, v in VALID_PAYLOAD.items() if k != "applied"}
        assert not is_valid_filter_payload(payload)

    def test_out_of_range_period_is_invalid(self):
        assert not is_valid_filter_payload({**VALID_PAYLOAD, "timePeriod": 400})

    def test_unknown_window_is_invalid(self):
        assert not is_valid_filter_payload({**VALID_PAYLOAD, "curationPeriod": "90d"})

    @pytest.mark.parametrize("period", [["7d"], {"window": "7d"}, 7])
    def test_non_string_window_is_invalid(self, period):
        assert not is_valid_filter_payload({**VALID_PAYLOAD, "curationPeriod": period})


class TestTransport:
    """Tests for decode/encode of the URL transport."""

    def test_decode_valid_payload(self):
        """Encoded JSON decodes to the normalized filter."""
        assert decode_filter(encode(VALID_PAYLOAD)) == normalize_filter(VALID_PAYLOAD)

    def test_decode_repairs_invalid_fields(self):
        """Decodable but invalid payloads are normalized, not rejected."""
        result = decode_filter(encode({"timePeriod": -1, "minimumHP": 10}))

    @pytest.mark.parametrize("period", [["7d"], {"window": "7d"}])
    def test_decode_repairs_non_string_window(self, period):
        """Unhashable window values are repaired, not raised."""
        result = decode_filter(encode({**VALID_PAYLOAD, "curationPeriod": period}))

        assert result.accrual_window is AccrualWindow.MONTH
        assert result.time_period_days == 7

    def test_decode_or_default_repairs_non_string_window(self):
        result = decode_filter_or_default(encode({**VALID_PAYLOAD, "curationPeriod": ["7d"]}))

        assert result.applied is True
        assert result.accrual_window is AccrualWindow.MONTH

        assert result.time_period_days == 30
        assert result.minimum_stake == 10.0

    @pytest.mark.parametrize("encoded", ["%7Bnot-json", "%E0%A4%A", "", "{'a': 1}"])
    def test_malformed_transport_raises_decode_error(self, encoded):
        """Malformed encoding or JSON raises DecodeError."""
        with pytest.raises(DecodeError):
            decode_filter(encoded)

    def test_decode_or_default_falls_back_not_applied(self):
        """Decode failures fall back to defaults with applied=False."""
        result = decode_filter_or_default("%7Bbroken")

        assert result == Filter(applied=False)

    def test_encode_then_decode_returns_same_filter(self):
        """Encoding a normalized filter is lossless."""
        filter_ = normalize_filter(VALID_PAYLOAD)

        assert decode_filter(encode_filter(filter_)) == filter_
