"""Pricing data structures for pay-as-you-go token billing."""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ModelPricing:
    """PAYGO token pricing for a model.

    - input_rate_per_million / output_rate_per_million: non-negative cost per
      million tokens; output may be zero for embedding and audio models
    - currency: ISO currency code (default: USD)
    - is_fallback: True when this entry was returned in place of an unknown model
    """

    model: str
    input_rate_per_million: float
    output_rate_per_million: float
    currency: str = "USD"
    description: Optional[str] = None
    is_fallback: bool = False

    def __post_init__(self) -> None:  # noqa: D401
        """Basic validation ensuring non-negative rates."""
        if self.input_rate_per_million < 0:
            raise ValueError(f"Input rate must be non-negative for model '{self.model}'")
        if self.output_rate_per_million < 0:
            raise ValueError(f"Output rate must be non-negative for model '{self.model}'")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PaygoCostBreakdown:
    """PAYGO cost for a token volume, with the rates used."""

    model: str
    input_tokens_millions: float
    output_tokens_millions: float
    total_tokens_millions: float
    input_cost: float
    output_cost: float
    total_cost: float
    effective_cost_per_million: float
    input_rate: float
    output_rate: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
