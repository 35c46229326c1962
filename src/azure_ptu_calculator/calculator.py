"""PAYGO cost, token split and PTU recommendation arithmetic.

Every function here is pure: the same inputs always produce the same result
and nothing raises for malformed numbers. Raw input is coerced with
:func:`coerce_number`, which turns anything invalid, negative or non-finite
into ``0``; zero doubles as the "no input" sentinel for the validity gate.
"""

import math
from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from .deployment import DeploymentPtuRule, PtuRates
from .logging import LogEvent, log_debug
from .pricing import ModelPricing, PaygoCostBreakdown

DEFAULT_MONTHLY_ACTIVE_MINUTES = 43800
DEFAULT_INPUT_OUTPUT_RATIO = 0.5
TOKENS_PER_MILLION = 1_000_000

FULL_PTU_THRESHOLD = 0.8
HYBRID_THRESHOLD = 0.9

PAYGO_BASELINE_BLENDED = "blended"
PAYGO_BASELINE_SPLIT = "split"


def coerce_number(value: Any) -> float:
    """Coerce raw user input to a non-negative finite number.

    ``None``, empty or non-numeric strings, NaN, infinities and negative
    values all become ``0.0``.

    Examples:
        >>> coerce_number("25.5")
        25.5
        >>> coerce_number("abc")
        0.0
        >>> coerce_number(-10)
        0.0
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


class Recommendation(str, Enum):
    """Deployment strategy recommended by the decision rule."""

    PAYGO = "PAYGO"
    HYBRID = "Hybrid"
    FULL_PTU_RESERVATION = "FullPtuReservation"

    @property
    def label(self) -> str:
        return _RECOMMENDATION_LABELS[self]

    @property
    def reason(self) -> str:
        return _RECOMMENDATION_REASONS[self]


_RECOMMENDATION_LABELS = {
    Recommendation.PAYGO: "PAYGO",
    Recommendation.HYBRID: "Consider Hybrid Model",
    Recommendation.FULL_PTU_RESERVATION: "Full PTU Reservation",
}

_RECOMMENDATION_REASONS = {
    Recommendation.PAYGO: "PTU cost is close to or above pay-as-you-go. Stick with PAYGO for flexibility.",
    Recommendation.HYBRID: "PTU is moderately cheaper. Reserve a base and let bursts spill over to PAYGO.",
    Recommendation.FULL_PTU_RESERVATION: "PTU is well below pay-as-you-go. A full reservation offers significant savings.",
}


# Accepted spellings for raw input keys, including the form field names.
_FIELD_ALIASES = {
    "average_tokens_per_minute": ("avgTPM", "averageTokensPerMinute", "avg_tpm"),
    "p99_tokens_per_minute": ("p99TPM", "p99TokensPerMinute", "p99_tpm"),
    "max_tokens_per_minute": ("maxTPM", "maxTokensPerMinute", "max_tpm"),
    "recommended_ptu": ("recommendedPTU", "recommendedPtu"),
    "monthly_active_minutes": ("monthlyMinutes", "monthlyActiveMinutes"),
    "input_output_ratio": ("inputOutputRatio", "inputRatio", "input_ratio"),
    "average_ptu": ("avgPTU", "averagePtu", "avg_ptu"),
    "p99_ptu": ("p99PTU", "p99Ptu"),
    "max_ptu": ("maxPTU", "maxPtu"),
    "base_ptus": ("basePTUs", "basePtus"),
}


@dataclass(frozen=True)
class UsageInput:
    """User-supplied usage figures.

    All fields are coerced on construction, so a UsageInput never holds a
    negative, NaN or non-numeric value. ``recommended_ptu`` of 0 means "not
    set".
    """

    average_tokens_per_minute: float = 0.0
    p99_tokens_per_minute: float = 0.0
    max_tokens_per_minute: float = 0.0
    recommended_ptu: float = 0.0
    monthly_active_minutes: float = DEFAULT_MONTHLY_ACTIVE_MINUTES
    input_output_ratio: float = DEFAULT_INPUT_OUTPUT_RATIO
    average_ptu: float = 0.0
    p99_ptu: float = 0.0
    max_ptu: float = 0.0
    base_ptus: float = 0.0

    def __post_init__(self) -> None:
        for f in fields(self):
            object.__setattr__(self, f.name, coerce_number(getattr(self, f.name)))

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "UsageInput":
        """Build a UsageInput from raw form or history data.

        Keys may be snake_case field names or the form names (``avgTPM``,
        ``recommendedPTU``, ``monthlyMinutes`` ...). Missing keys take the
        field defaults; present keys are coerced, so an invalid
        ``monthlyMinutes`` becomes 0 rather than the default.
        """
        values: Dict[str, Any] = {}
        for name, aliases in _FIELD_ALIASES.items():
            for key in (name,) + aliases:
                if key in raw:
                    values[name] = raw[key]
                    break
        return cls(**values)

    @property
    def has_valid_data(self) -> bool:
        """True when there is enough input to size a deployment."""
        return self.average_tokens_per_minute > 0 or self.p99_tokens_per_minute > 0 or self.recommended_ptu > 0

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class TokenSplit:
    """Monthly token volume split into input and output, in millions."""

    input_tokens_millions: float
    output_tokens_millions: float
    total_tokens_millions: float


@dataclass(frozen=True)
class RecommendationPolicy:
    """Fixed policy constants for the decision rule.

    - full_ptu_threshold / hybrid_threshold: PTU-to-PAYGO cost ratios below
      which a full reservation or a hybrid plan is recommended (strict ``<``)
    - paygo_baseline: ``"blended"`` assumes a fixed 50/50 input/output split
      of the monthly volume; ``"split"`` uses the token split estimator with
      the usage input ratio
    - enforce_increment: round the PTU count up to a purchasable quantity
    """

    full_ptu_threshold: float = FULL_PTU_THRESHOLD
    hybrid_threshold: float = HYBRID_THRESHOLD
    paygo_baseline: str = PAYGO_BASELINE_BLENDED
    enforce_increment: bool = False

    def __post_init__(self) -> None:
        if self.paygo_baseline not in (PAYGO_BASELINE_BLENDED, PAYGO_BASELINE_SPLIT):
            raise ValueError(
                f"paygo_baseline must be '{PAYGO_BASELINE_BLENDED}' or '{PAYGO_BASELINE_SPLIT}', "
                f"got '{self.paygo_baseline}'"
            )
        if not 0 < self.full_ptu_threshold <= self.hybrid_threshold:
            raise ValueError("Thresholds must satisfy 0 < full_ptu_threshold <= hybrid_threshold")


DEFAULT_POLICY = RecommendationPolicy()


@dataclass(frozen=True)
class CalculationResult:
    """Snapshot of one calculation.

    When ``has_valid_data`` is False every other field is None; callers must
    check the flag before trusting any number.
    """

    has_valid_data: bool
    calculated_ptu: Optional[float] = None
    actual_ptu: Optional[float] = None
    is_using_minimum: Optional[bool] = None
    monthly_ptu_cost: Optional[float] = None
    yearly_ptu_cost: Optional[float] = None
    monthly_paygo_cost: Optional[float] = None
    recommendation: Optional[Recommendation] = None
    monthly_tokens_millions: Optional[float] = None
    minimum_ptu: Optional[int] = None
    increment_ptu: Optional[int] = None
    is_increment_rounded: Optional[bool] = None

    @classmethod
    def no_data(cls) -> "CalculationResult":
        return cls(has_valid_data=False)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["recommendation"] = self.recommendation.value if self.recommendation else None
        return data


def _resolve_pricing(pricing: Union[ModelPricing, str], tables: Any = None) -> ModelPricing:
    if isinstance(pricing, ModelPricing):
        return pricing
    if tables is None:
        from .tables import get_tables

        tables = get_tables()
    return tables.get_token_pricing(pricing)


def calculate_paygo_cost(
    pricing: Union[ModelPricing, str],
    input_tokens_millions: Any,
    output_tokens_millions: Any,
    tables: Any = None,
) -> PaygoCostBreakdown:
    """Calculate the PAYGO cost breakdown for a token volume.

    Negative or non-numeric token counts are clamped to zero.

    Args:
        pricing: ModelPricing, or a model identifier resolved through the tables
        input_tokens_millions: Input tokens in millions
        output_tokens_millions: Output tokens in millions
        tables: PricingTables used for identifier lookups (default tables if None)

    Returns:
        Cost breakdown with the rates used
    """
    rates = _resolve_pricing(pricing, tables)
    input_tokens = coerce_number(input_tokens_millions)
    output_tokens = coerce_number(output_tokens_millions)

    input_cost = input_tokens * rates.input_rate_per_million
    output_cost = output_tokens * rates.output_rate_per_million
    total_cost = input_cost + output_cost
    total_tokens = input_tokens + output_tokens
    effective = total_cost / total_tokens if total_tokens > 0 else 0.0

    return PaygoCostBreakdown(
        model=rates.model,
        input_tokens_millions=input_tokens,
        output_tokens_millions=output_tokens,
        total_tokens_millions=total_tokens,
        input_cost=input_cost,
        output_cost=output_cost,
        total_cost=total_cost,
        effective_cost_per_million=effective,
        input_rate=rates.input_rate_per_million,
        output_rate=rates.output_rate_per_million,
    )


def estimate_token_split(
    average_tokens_per_minute: Any,
    monthly_active_minutes: Any,
    input_ratio: Any = DEFAULT_INPUT_OUTPUT_RATIO,
) -> TokenSplit:
    """Derive monthly input/output token volumes from average throughput.

    ``input_ratio`` is the fraction of tokens that are input. Values above 1
    are clamped to 1; negative or invalid values coerce to 0.

    Returns:
        TokenSplit in millions of tokens
    """
    ratio = coerce_number(input_ratio)
    if ratio > 1:
        log_debug(LogEvent.CALCULATION, "Clamping input ratio into [0, 1]", input_ratio=ratio)
        ratio = 1.0

    total = coerce_number(average_tokens_per_minute) * coerce_number(monthly_active_minutes) / TOKENS_PER_MILLION
    return TokenSplit(
        input_tokens_millions=total * ratio,
        output_tokens_millions=total * (1 - ratio),
        total_tokens_millions=total,
    )


def derive_required_ptu(usage: UsageInput, ptu_rule: DeploymentPtuRule) -> float:
    """PTUs needed before any minimum is applied.

    An explicit ``recommended_ptu`` always wins over the throughput estimate.
    """
    if usage.recommended_ptu > 0:
        return usage.recommended_ptu
    return math.ceil(usage.average_tokens_per_minute / ptu_rule.throughput_per_ptu)


def decide(
    monthly_ptu_cost: float,
    monthly_paygo_cost: float,
    policy: RecommendationPolicy = DEFAULT_POLICY,
) -> Recommendation:
    """Apply the threshold rule. Ties at a threshold fall to the next branch."""
    if monthly_ptu_cost < monthly_paygo_cost * policy.full_ptu_threshold:
        return Recommendation.FULL_PTU_RESERVATION
    if monthly_ptu_cost < monthly_paygo_cost * policy.hybrid_threshold:
        return Recommendation.HYBRID
    return Recommendation.PAYGO


def monthly_paygo_baseline(
    usage: UsageInput,
    pricing: ModelPricing,
    policy: RecommendationPolicy = DEFAULT_POLICY,
) -> float:
    """Monthly PAYGO cost used as the comparison baseline.

    The blended baseline prices half the monthly volume as input and half as
    output. Pass ``paygo_baseline="split"`` to price the caller's own input
    ratio instead; the two agree when that ratio is 0.5.
    """
    if policy.paygo_baseline == PAYGO_BASELINE_SPLIT:
        split = estimate_token_split(
            usage.average_tokens_per_minute,
            usage.monthly_active_minutes,
            usage.input_output_ratio,
        )
        return calculate_paygo_cost(pricing, split.input_tokens_millions, split.output_tokens_millions).total_cost

    monthly_tokens = usage.average_tokens_per_minute * usage.monthly_active_minutes / TOKENS_PER_MILLION
    half = monthly_tokens * 0.5
    return calculate_paygo_cost(pricing, half, half).total_cost


def calculate_recommendation(
    usage: Union[UsageInput, Mapping[str, Any]],
    pricing: ModelPricing,
    ptu_rule: DeploymentPtuRule,
    rates: PtuRates,
    policy: Optional[RecommendationPolicy] = None,
) -> CalculationResult:
    """Size a PTU deployment and recommend PAYGO, Hybrid or full reservation.

    Args:
        usage: UsageInput, or a raw mapping coerced with UsageInput.from_raw
        pricing: PAYGO pricing for the model
        ptu_rule: Minimum, increment and throughput for the deployment
        rates: Per-PTU monthly and yearly prices
        policy: Decision thresholds and options (defaults if None)

    Returns:
        CalculationResult; ``has_valid_data`` is False when no usage was given
    """
    policy = policy or DEFAULT_POLICY
    if not isinstance(usage, UsageInput):
        usage = UsageInput.from_raw(usage)

    if not usage.has_valid_data:
        return CalculationResult.no_data()

    calculated_ptu = derive_required_ptu(usage, ptu_rule)
    clamped_ptu = max(calculated_ptu, ptu_rule.minimum_ptu)
    is_using_minimum = clamped_ptu > calculated_ptu

    actual_ptu = clamped_ptu
    if policy.enforce_increment:
        actual_ptu = ptu_rule.round_to_increment(clamped_ptu)

    monthly_ptu_cost = actual_ptu * rates.monthly
    yearly_ptu_cost = actual_ptu * rates.yearly

    monthly_tokens = usage.average_tokens_per_minute * usage.monthly_active_minutes / TOKENS_PER_MILLION
    monthly_paygo_cost = monthly_paygo_baseline(usage, pricing, policy)
    recommendation = decide(monthly_ptu_cost, monthly_paygo_cost, policy)

    log_debug(
        LogEvent.CALCULATION,
        "Calculated recommendation",
        model=pricing.model,
        deployment=ptu_rule.deployment_type.value,
        calculated_ptu=calculated_ptu,
        actual_ptu=actual_ptu,
        recommendation=recommendation.value,
    )

    return CalculationResult(
        has_valid_data=True,
        calculated_ptu=calculated_ptu,
        actual_ptu=actual_ptu,
        is_using_minimum=is_using_minimum,
        monthly_ptu_cost=monthly_ptu_cost,
        yearly_ptu_cost=yearly_ptu_cost,
        monthly_paygo_cost=monthly_paygo_cost,
        recommendation=recommendation,
        monthly_tokens_millions=monthly_tokens,
        minimum_ptu=ptu_rule.minimum_ptu,
        increment_ptu=ptu_rule.increment_ptu,
        is_increment_rounded=actual_ptu != clamped_ptu,
    )
