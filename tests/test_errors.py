"""Tests for error types and deployment type parsing."""

import pytest

from azure_ptu_calculator.deployment import DeploymentPtuRule, DeploymentType, PtuRates
from azure_ptu_calculator.errors import (
    ConfigFileNotFoundError,
    ConfigurationError,
    FallbackModelError,
    HistoryError,
    InvalidConfigFormatError,
    InvalidDeploymentTypeError,
    PtuCalculatorError,
)


def test_configuration_errors_carry_path() -> None:
    error = InvalidConfigFormatError("bad table", path="/tmp/pricing.yaml", expected_type="list")

    assert isinstance(error, ConfigurationError)
    assert isinstance(error, PtuCalculatorError)
    assert error.path == "/tmp/pricing.yaml"
    assert error.expected_type == "list"
    assert str(error) == "bad table"


def test_hierarchy() -> None:
    assert issubclass(ConfigFileNotFoundError, ConfigurationError)
    assert issubclass(FallbackModelError, ConfigurationError)
    assert issubclass(HistoryError, PtuCalculatorError)
    assert issubclass(InvalidDeploymentTypeError, ValueError)


def test_fallback_model_error() -> None:
    error = FallbackModelError("no pricing", model="gpt-5", path="/tmp/pricing.yaml")
    assert error.model == "gpt-5"
    assert error.message == "no pricing"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("global", DeploymentType.GLOBAL),
        ("GLOBAL", DeploymentType.GLOBAL),
        ("dataZone", DeploymentType.DATA_ZONE),
        ("data_zone", DeploymentType.DATA_ZONE),
        ("Data-Zone", DeploymentType.DATA_ZONE),
        (" regional ", DeploymentType.REGIONAL),
        (DeploymentType.REGIONAL, DeploymentType.REGIONAL),
    ],
)
def test_deployment_type_parse(raw, expected) -> None:
    assert DeploymentType.parse(raw) is expected


def test_invalid_deployment_type() -> None:
    with pytest.raises(InvalidDeploymentTypeError) as exc_info:
        DeploymentType.parse("edge")

    error = exc_info.value
    assert error.value == "edge"
    assert error.valid_values == ["global", "dataZone", "regional"]
    assert "Must be one of" in str(error)


@pytest.mark.parametrize("field", ["minimum_ptu", "increment_ptu", "throughput_per_ptu"])
def test_rule_rejects_non_positive_values(field) -> None:
    values = {"minimum_ptu": 15, "increment_ptu": 5, "throughput_per_ptu": 2500}
    values[field] = 0
    with pytest.raises(ValueError, match=field):
        DeploymentPtuRule(model="gpt-4o", deployment_type=DeploymentType.GLOBAL, **values)


def test_round_to_increment() -> None:
    rule = DeploymentPtuRule("gpt-4o", DeploymentType.REGIONAL, 50, 50, 2500)
    assert rule.round_to_increment(10) == 50
    assert rule.round_to_increment(50) == 50
    assert rule.round_to_increment(51) == 100
    assert rule.round_to_increment(100) == 100


def test_rates_reject_negative_and_apply_overrides() -> None:
    with pytest.raises(ValueError):
        PtuRates(hourly=-1, monthly=260, yearly=2652)

    rates = PtuRates(hourly=1, monthly=260, yearly=2652).with_overrides(monthly=730, yearly=None)
    assert (rates.hourly, rates.monthly, rates.yearly) == (1, 730, 2652)
