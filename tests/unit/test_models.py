"""
Unit tests for record types and threshold rule resolution.
"""

import pytest
from dataclasses import FrozenInstanceError

from yield_monitor.core.models import (
    Alert,
    AlertType,
    Delta,
    InputValidationError,
    Severity,
    ThresholdRules,
    make_pool_key,
    resolve_threshold_rules,
)


class TestPoolKey:
    """Tests for the pool grouping key."""

    @pytest.mark.unit
    @pytest.mark.smoke
    def test_key_format(self):
        assert make_pool_key("aave_v3", "base", "USDC") == "aave_v3:base:USDC"

    @pytest.mark.unit
    def test_metric_key_matches_helper(self, metric_factory):
        metric = metric_factory(protocol="compound_v3", chain="ethereum", pool="USDC")
        assert metric.key == "compound_v3:ethereum:USDC"

    @pytest.mark.unit
    def test_same_key_regardless_of_address(self, metric_factory):
        """Observations from different sources group together by key alone."""
        a = metric_factory(address="0x" + "a" * 40)
        b = metric_factory(address="some-llama-uuid")
        assert a.key == b.key


class TestPoolMetric:
    """Tests for PoolMetric immutability and serialization."""

    @pytest.mark.unit
    def test_metric_is_frozen(self, metric_factory):
        metric = metric_factory()
        with pytest.raises(FrozenInstanceError):
            metric.apy = 99.0

    @pytest.mark.unit
    def test_to_dict_is_json_ready(self, metric_factory):
        data = metric_factory(apy=4.2, tvl=10.0).to_dict()
        assert data["apy"] == 4.2
        assert data["tvl"] == 10.0
        assert data["timestamp"] == "2024-01-01T00:00:00+00:00"
        assert set(data) == {"protocol", "chain", "pool", "address", "apy", "tvl", "timestamp"}


class TestThresholdRules:
    """Tests for threshold rule defaults and merging."""

    @pytest.mark.unit
    @pytest.mark.smoke
    def test_defaults(self):
        rules = ThresholdRules()
        assert rules.apy_change_threshold == 5.0
        assert rules.tvl_change_threshold == 20.0
        assert rules.apy_drop_threshold == 3.0
        assert rules.tvl_drain_threshold == 15.0

    @pytest.mark.unit
    def test_none_resolves_to_defaults(self):
        assert resolve_threshold_rules(None) == ThresholdRules()

    @pytest.mark.unit
    def test_partial_mapping_keeps_other_defaults(self):
        rules = resolve_threshold_rules({"apy_change_threshold": 2})
        assert rules.apy_change_threshold == 2.0
        assert rules.tvl_change_threshold == 20.0

    @pytest.mark.unit
    def test_none_values_take_defaults(self):
        rules = resolve_threshold_rules({"tvl_change_threshold": None})
        assert rules.tvl_change_threshold == 20.0

    @pytest.mark.unit
    def test_unknown_keys_ignored(self):
        rules = resolve_threshold_rules({"something_else": "x", "tvl_change_threshold": 30})
        assert rules.tvl_change_threshold == 30.0

    @pytest.mark.unit
    def test_rules_instance_passes_through(self):
        rules = ThresholdRules(apy_change_threshold=1.0)
        assert resolve_threshold_rules(rules) is rules

    @pytest.mark.unit
    @pytest.mark.parametrize("bad_rules", [
        [5, 20],
        "strict",
        42,
    ])
    def test_non_mapping_rejected(self, bad_rules):
        with pytest.raises(InputValidationError):
            resolve_threshold_rules(bad_rules)

    @pytest.mark.unit
    @pytest.mark.parametrize("bad_value", ["5", True, float("nan"), float("inf"), [5]])
    def test_non_numeric_value_rejected(self, bad_value):
        with pytest.raises(InputValidationError):
            resolve_threshold_rules({"apy_change_threshold": bad_value})

    @pytest.mark.unit
    def test_validation_error_is_value_error(self):
        assert issubclass(InputValidationError, ValueError)

    @pytest.mark.unit
    def test_to_dict_lists_all_fields(self):
        assert ThresholdRules().to_dict() == {
            "apy_change_threshold": 5.0,
            "tvl_change_threshold": 20.0,
            "apy_drop_threshold": 3.0,
            "tvl_drain_threshold": 15.0,
        }


class TestSerialization:
    """Tests for Delta and Alert output dicts."""

    @pytest.mark.unit
    def test_delta_to_dict(self):
        delta = Delta(
            pool="aave_v3:base:USDC",
            apy_change_percent=10.0,
            tvl_change_percent=-5.0,
            previous_apy=5.0,
            current_apy=5.5,
            previous_tvl=100.0,
            current_tvl=95.0,
        )
        data = delta.to_dict()
        assert data["time_window"] == "1_block"
        assert data["tvl_change_percent"] == -5.0
        with pytest.raises(FrozenInstanceError):
            delta.current_apy = 9.9

    @pytest.mark.unit
    def test_alert_to_dict_uses_enum_values(self):
        alert = Alert(
            type=AlertType.TVL_DRAIN,
            pool="aave_v3:base:USDC",
            change=-50.0,
            threshold=20.0,
            severity=Severity.HIGH,
            message="TVL decreased",
        )
        data = alert.to_dict()
        assert data["type"] == "tvl_drain"
        assert data["severity"] == "high"
        assert isinstance(data["timestamp"], str)
