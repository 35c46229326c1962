"""Cost analysis built on a calculation result.

Burst profile, PTU utilization, on-demand versus reservation savings, the
hybrid (base PTU + PAYGO spillover) plan and a side-by-side plan comparison.
"""

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from .calculator import (
    TOKENS_PER_MILLION,
    CalculationResult,
    UsageInput,
    calculate_paygo_cost,
    estimate_token_split,
)
from .deployment import DeploymentPtuRule, PtuRates
from .pricing import ModelPricing

BURSTY_RATIO = 2.0
SPIKY_RATIO = 3.0

# Base-cost factors for hybrid plans backed by one- and three-year terms.
HYBRID_ONE_YEAR_FACTOR = 0.75
HYBRID_THREE_YEAR_FACTOR = 0.6


@dataclass(frozen=True)
class UsageProfile:
    """Shape of the traffic relative to its average."""

    burst_ratio: float
    peak_ratio: float
    ptu_variance: float
    usage_pattern: str


@dataclass(frozen=True)
class ReservationSavings:
    """Monthly PTU cost under each purchase option and the savings between them."""

    on_demand_monthly: float
    monthly_reservation: float
    yearly_reservation_monthly: float
    one_year_savings: float
    three_year_savings: float
    one_year_savings_percent: float
    three_year_savings_percent: float


@dataclass(frozen=True)
class HybridPlan:
    """Reserved base PTUs with overflow traffic billed as PAYGO."""

    base_ptu: float
    base_capacity_tpm: float
    overflow_tpm: float
    overflow_tokens_millions: float
    base_cost: float
    overflow_cost: float
    total_cost: float
    one_year_total_cost: float
    three_year_total_cost: float


@dataclass(frozen=True)
class PlanCost:
    name: str
    monthly_cost: float


@dataclass(frozen=True)
class CostAnalysis:
    """Everything derived from a valid calculation beyond the recommendation."""

    profile: UsageProfile
    utilization_rate: float
    cost_per_million_tokens: float
    ptu_cost_effectiveness: float
    split_monthly_paygo_cost: float
    savings: ReservationSavings
    hybrid: HybridPlan
    plan_costs: List[PlanCost]

    def cheapest_plan(self) -> PlanCost:
        return min(self.plan_costs, key=lambda plan: plan.monthly_cost)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _ratio(value: float, base: float) -> float:
    return value / base if value and base else 1.0


def profile_usage(usage: UsageInput) -> UsageProfile:
    """Classify traffic as Steady, Bursty or Spiky.

    Bursty when p99/average exceeds 2; Spiky when max/average exceeds 3,
    which takes precedence.
    """
    burst_ratio = _ratio(usage.p99_tokens_per_minute, usage.average_tokens_per_minute)
    peak_ratio = _ratio(usage.max_tokens_per_minute, usage.average_tokens_per_minute)
    ptu_variance = abs(usage.p99_ptu - usage.average_ptu) if usage.p99_ptu and usage.average_ptu else 0.0

    pattern = "Steady"
    if burst_ratio > BURSTY_RATIO:
        pattern = "Bursty"
    if peak_ratio > SPIKY_RATIO:
        pattern = "Spiky"

    return UsageProfile(
        burst_ratio=burst_ratio,
        peak_ratio=peak_ratio,
        ptu_variance=ptu_variance,
        usage_pattern=pattern,
    )


def reservation_savings(actual_ptu: float, rates: PtuRates) -> ReservationSavings:
    """Compare on-demand PTU billing against monthly and yearly reservations."""
    on_demand = actual_ptu * rates.on_demand_monthly
    monthly_reservation = actual_ptu * rates.monthly
    yearly_monthly = actual_ptu * rates.yearly / 12

    one_year_percent = (on_demand - monthly_reservation) / on_demand * 100 if on_demand > 0 else 0.0
    three_year_percent = (on_demand - yearly_monthly) / on_demand * 100 if on_demand > 0 else 0.0

    return ReservationSavings(
        on_demand_monthly=on_demand,
        monthly_reservation=monthly_reservation,
        yearly_reservation_monthly=yearly_monthly,
        one_year_savings=(on_demand - monthly_reservation) * 12,
        three_year_savings=(on_demand - yearly_monthly) * 36,
        one_year_savings_percent=one_year_percent,
        three_year_savings_percent=three_year_percent,
    )


def hybrid_base_ptu(usage: UsageInput) -> float:
    """Base PTUs for the hybrid plan: explicit base, else average PTU, else 1."""
    if usage.base_ptus > 0:
        return usage.base_ptus
    if usage.average_ptu > 0:
        return math.ceil(usage.average_ptu)
    return 1


def plan_hybrid(
    usage: UsageInput,
    pricing: ModelPricing,
    ptu_rule: DeploymentPtuRule,
    rates: PtuRates,
) -> HybridPlan:
    """Price a reserved base with p99 overflow spilling over to PAYGO."""
    base_ptu = hybrid_base_ptu(usage)
    base_capacity = base_ptu * ptu_rule.throughput_per_ptu
    overflow_tpm = max(0.0, usage.p99_tokens_per_minute - base_capacity)

    split = estimate_token_split(overflow_tpm, usage.monthly_active_minutes, usage.input_output_ratio)
    overflow_cost = calculate_paygo_cost(
        pricing, split.input_tokens_millions, split.output_tokens_millions
    ).total_cost
    base_cost = base_ptu * rates.monthly

    return HybridPlan(
        base_ptu=base_ptu,
        base_capacity_tpm=base_capacity,
        overflow_tpm=overflow_tpm,
        overflow_tokens_millions=split.total_tokens_millions,
        base_cost=base_cost,
        overflow_cost=overflow_cost,
        total_cost=base_cost + overflow_cost,
        one_year_total_cost=base_cost * HYBRID_ONE_YEAR_FACTOR + overflow_cost,
        three_year_total_cost=base_cost * HYBRID_THREE_YEAR_FACTOR + overflow_cost,
    )


def analyze_costs(
    usage: UsageInput,
    pricing: ModelPricing,
    ptu_rule: DeploymentPtuRule,
    rates: PtuRates,
    result: CalculationResult,
) -> Optional[CostAnalysis]:
    """Build the full cost analysis for a valid calculation.

    Returns:
        CostAnalysis, or None when ``result.has_valid_data`` is False
    """
    if not result.has_valid_data or result.actual_ptu is None:
        return None

    monthly_paygo = result.monthly_paygo_cost or 0.0
    monthly_ptu = result.monthly_ptu_cost or 0.0
    monthly_tokens = usage.average_tokens_per_minute * usage.monthly_active_minutes / TOKENS_PER_MILLION

    capacity = result.actual_ptu * ptu_rule.throughput_per_ptu
    utilization = usage.average_tokens_per_minute / capacity if capacity > 0 else 0.0

    split = estimate_token_split(
        usage.average_tokens_per_minute, usage.monthly_active_minutes, usage.input_output_ratio
    )
    split_paygo = calculate_paygo_cost(pricing, split.input_tokens_millions, split.output_tokens_millions).total_cost

    savings = reservation_savings(result.actual_ptu, rates)
    hybrid = plan_hybrid(usage, pricing, ptu_rule, rates)

    plan_costs = [
        PlanCost("PAYGO", monthly_paygo),
        PlanCost("PTU (On-Demand)", savings.on_demand_monthly),
        PlanCost("PTU (Monthly Reservation)", savings.monthly_reservation),
        PlanCost("PTU (Yearly Reservation)", savings.yearly_reservation_monthly),
        PlanCost("Hybrid", hybrid.total_cost),
        PlanCost("Hybrid (1Y)", hybrid.one_year_total_cost),
        PlanCost("Hybrid (3Y)", hybrid.three_year_total_cost),
    ]

    return CostAnalysis(
        profile=profile_usage(usage),
        utilization_rate=utilization,
        cost_per_million_tokens=monthly_paygo / monthly_tokens if monthly_tokens > 0 else 0.0,
        ptu_cost_effectiveness=monthly_ptu / monthly_paygo if monthly_paygo > 0 else 0.0,
        split_monthly_paygo_cost=split_paygo,
        savings=savings,
        hybrid=hybrid,
        plan_costs=plan_costs,
    )
