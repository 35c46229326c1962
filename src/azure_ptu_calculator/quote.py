"""Quotes: resolve tables, run the calculation and the cost analysis."""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from .analysis import CostAnalysis, analyze_costs
from .calculator import (
    CalculationResult,
    RecommendationPolicy,
    UsageInput,
    calculate_recommendation,
)
from .deployment import DeploymentPtuRule, DeploymentType, PtuRates
from .pricing import ModelPricing
from .tables import PricingTables


@dataclass(frozen=True)
class Quote:
    """Inputs resolved for one model and deployment, with the results."""

    model: str
    deployment_type: DeploymentType
    usage: UsageInput
    pricing: ModelPricing
    ptu_rule: DeploymentPtuRule
    rates: PtuRates
    result: CalculationResult
    analysis: Optional[CostAnalysis]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "model": self.model,
            "deployment_type": self.deployment_type.value,
            "usage": self.usage.to_dict(),
            "pricing": self.pricing.to_dict(),
            "ptu_rule": self.ptu_rule.to_dict(),
            "rates": self.rates.to_dict(),
            "result": self.result.to_dict(),
            "analysis": self.analysis.to_dict() if self.analysis else None,
        }


class PtuCalculator:
    """Quote PTU deployments against a set of pricing tables.

    Examples:
        >>> calculator = PtuCalculator()
        >>> quote = calculator.quote("gpt-4o", "global", {"avgTPM": 100000})
        >>> quote.result.recommendation
    """

    def __init__(
        self,
        tables: Optional[PricingTables] = None,
        policy: Optional[RecommendationPolicy] = None,
    ):
        self.tables = tables or PricingTables.get_default()
        self.policy = policy or RecommendationPolicy()

    def quote(
        self,
        model: str,
        deployment_type: Union[str, DeploymentType],
        usage: Union[UsageInput, Mapping[str, Any]],
        rates: Optional[PtuRates] = None,
    ) -> Quote:
        """Calculate a recommendation and cost analysis.

        Args:
            model: Model identifier; unknown models use the fallback model
            deployment_type: Deployment type value or DeploymentType
            usage: UsageInput or raw form data
            rates: Custom per-PTU rates; table rates for the deployment if None

        Raises:
            InvalidDeploymentTypeError: If ``deployment_type`` is not recognized
        """
        deployment = DeploymentType.parse(deployment_type)
        if not isinstance(usage, UsageInput):
            usage = UsageInput.from_raw(usage)

        pricing = self.tables.get_token_pricing(model)
        ptu_rule = self.tables.get_ptu_rule(model, deployment)
        rates = rates or self.tables.get_ptu_rates(deployment)

        result = calculate_recommendation(usage, pricing, ptu_rule, rates, self.policy)
        return Quote(
            model=model,
            deployment_type=deployment,
            usage=usage,
            pricing=pricing,
            ptu_rule=ptu_rule,
            rates=rates,
            result=result,
            analysis=analyze_costs(usage, pricing, ptu_rule, rates, result),
        )
