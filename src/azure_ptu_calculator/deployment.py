"""Deployment types, PTU purchase rules and PTU rates."""

import math
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Union

from .errors import InvalidDeploymentTypeError

# On-demand PTU billing assumes a 30-day month.
HOURS_PER_MONTH = 24 * 30


class DeploymentType(str, Enum):
    """Azure OpenAI provisioned deployment types."""

    GLOBAL = "global"
    DATA_ZONE = "dataZone"
    REGIONAL = "regional"

    @classmethod
    def parse(cls, value: Union[str, "DeploymentType"]) -> "DeploymentType":
        """Parse a deployment type from its value or member name.

        Accepts ``"global"``, ``"dataZone"``, ``"data_zone"``, ``"data-zone"``,
        ``"regional"`` and the member names, case-insensitively.

        Raises:
            InvalidDeploymentTypeError: If the value is not recognized
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("-", "").replace("_", "")
        for member in cls:
            if key in (member.value.lower(), member.name.lower().replace("_", "")):
                return member
        valid = [m.value for m in cls]
        raise InvalidDeploymentTypeError(
            f"Invalid deployment type '{value}'. Must be one of: {', '.join(valid)}",
            value=str(value),
            valid_values=valid,
        )


@dataclass(frozen=True)
class DeploymentPtuRule:
    """PTU purchase rule for a model on a deployment type.

    Purchases start at ``minimum_ptu`` and grow in steps of ``increment_ptu``.
    ``throughput_per_ptu`` is the tokens-per-minute capacity of one PTU.
    """

    model: str
    deployment_type: DeploymentType
    minimum_ptu: int
    increment_ptu: int
    throughput_per_ptu: float

    def __post_init__(self) -> None:
        if self.minimum_ptu <= 0:
            raise ValueError(f"minimum_ptu must be positive for {self.model}/{self.deployment_type.value}")
        if self.increment_ptu <= 0:
            raise ValueError(f"increment_ptu must be positive for {self.model}/{self.deployment_type.value}")
        if self.throughput_per_ptu <= 0:
            raise ValueError(f"throughput_per_ptu must be positive for {self.model}/{self.deployment_type.value}")

    def round_to_increment(self, ptu: float) -> float:
        """Round a PTU count up to the next purchasable quantity.

        Purchasable quantities are ``minimum_ptu + k * increment_ptu``.
        """
        if ptu <= self.minimum_ptu:
            return self.minimum_ptu
        steps = math.ceil((ptu - self.minimum_ptu) / self.increment_ptu)
        return self.minimum_ptu + steps * self.increment_ptu

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["deployment_type"] = self.deployment_type.value
        return data


@dataclass(frozen=True)
class PtuRates:
    """Per-PTU prices for one deployment type.

    - hourly: on-demand price per PTU per hour
    - monthly: monthly reservation price per PTU
    - yearly: yearly reservation price per PTU
    """

    hourly: float
    monthly: float
    yearly: float
    currency: str = "USD"

    def __post_init__(self) -> None:
        for name in ("hourly", "monthly", "yearly"):
            if getattr(self, name) < 0:
                raise ValueError(f"PTU {name} rate must be non-negative")

    @property
    def on_demand_monthly(self) -> float:
        """On-demand cost of one PTU for a month."""
        return self.hourly * HOURS_PER_MONTH

    def with_overrides(self, **overrides: Any) -> "PtuRates":
        """Return a copy with the non-None overrides applied."""
        values = asdict(self)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return PtuRates(**values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
