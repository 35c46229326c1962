"""Tests for PAYGO pricing and cost breakdowns."""

import logging

import pytest

from azure_ptu_calculator import calculate_paygo_cost, get_token_pricing
from azure_ptu_calculator.logging import PACKAGE_LOGGER_NAME
from azure_ptu_calculator.pricing import ModelPricing


def test_model_pricing_rejects_negative_rates() -> None:
    with pytest.raises(ValueError, match="Input rate"):
        ModelPricing("bad", -1, 1)
    with pytest.raises(ValueError, match="Output rate"):
        ModelPricing("bad", 1, -1)


def test_zero_output_rate_is_allowed() -> None:
    pricing = ModelPricing("text-embedding-3-small", 0.02, 0.0)
    cost = calculate_paygo_cost(pricing, 50, 50)

    assert cost.output_cost == 0
    assert cost.total_cost == pytest.approx(1.0)


def test_paygo_breakdown(mini_pricing) -> None:
    cost = calculate_paygo_cost(mini_pricing, 10, 2)

    assert cost.input_cost == pytest.approx(1.5)
    assert cost.output_cost == pytest.approx(1.2)
    assert cost.total_cost == pytest.approx(2.7)
    assert cost.total_tokens_millions == 12
    assert cost.effective_cost_per_million == pytest.approx(2.7 / 12)
    assert cost.input_rate == 0.15
    assert cost.output_rate == 0.60


def test_zero_tokens_has_zero_effective_rate(mini_pricing) -> None:
    cost = calculate_paygo_cost(mini_pricing, 0, 0)

    assert cost.total_cost == 0
    assert cost.effective_cost_per_million == 0


def test_negative_tokens_are_clamped(mini_pricing) -> None:
    cost = calculate_paygo_cost(mini_pricing, -5, "abc")

    assert cost.input_tokens_millions == 0
    assert cost.output_tokens_millions == 0
    assert cost.total_cost == 0


def test_cost_by_model_identifier() -> None:
    cost = calculate_paygo_cost("gpt-4o", 1, 1)

    assert cost.model == "gpt-4o"
    assert cost.total_cost == pytest.approx(12.5)


def test_unknown_model_pricing_falls_back(caplog) -> None:
    caplog.set_level(logging.WARNING, logger=PACKAGE_LOGGER_NAME)
    pricing = get_token_pricing("gpt-9-ultra")

    assert pricing.model == "gpt-4o-mini"
    assert pricing.is_fallback
    assert (pricing.input_rate_per_million, pricing.output_rate_per_million) == (0.15, 0.60)
    assert "Token pricing not found for model: gpt-9-ultra, using gpt-4o-mini as fallback" in caplog.text


def test_known_model_lookup_does_not_warn(caplog) -> None:
    caplog.set_level(logging.WARNING, logger=PACKAGE_LOGGER_NAME)
    pricing = get_token_pricing("gpt-4o-mini")

    assert not pricing.is_fallback
    assert caplog.records == []
