"""Cost calculator for Azure OpenAI pay-as-you-go versus provisioned throughput.

This package compares PAYGO token billing with PTU (provisioned throughput
unit) reservations: it sizes a PTU deployment from throughput figures,
enforces per-deployment PTU minimums, prices both models and recommends
PAYGO, a hybrid plan or a full PTU reservation.
"""

# Version of the package
try:
    from importlib.metadata import PackageNotFoundError
    from importlib.metadata import version as _version

    __version__ = _version("azure-ptu-calculator")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Import main components for easier access
from .analysis import CostAnalysis, HybridPlan, UsageProfile, analyze_costs
from .calculator import (
    CalculationResult,
    Recommendation,
    RecommendationPolicy,
    TokenSplit,
    UsageInput,
    calculate_paygo_cost,
    calculate_recommendation,
    coerce_number,
    estimate_token_split,
)
from .deployment import DeploymentPtuRule, DeploymentType, PtuRates
from .errors import (
    ConfigFileNotFoundError,
    ConfigurationError,
    FallbackModelError,
    HistoryError,
    InvalidConfigFormatError,
    InvalidDeploymentTypeError,
    PtuCalculatorError,
)
from .history import HistoryEntry, HistoryStore
from .pricing import ModelPricing, PaygoCostBreakdown
from .quote import PtuCalculator, Quote
from .tables import PricingTables, TablesConfig, get_tables, get_token_pricing
from .validation import ValidationReport, validate_ptu_rules

# Define public API
__all__ = [
    # Tables
    "PricingTables",
    "TablesConfig",
    "get_tables",
    "get_token_pricing",
    # Data model
    "ModelPricing",
    "PaygoCostBreakdown",
    "DeploymentType",
    "DeploymentPtuRule",
    "PtuRates",
    "UsageInput",
    "TokenSplit",
    "CalculationResult",
    "Recommendation",
    "RecommendationPolicy",
    # Calculations
    "coerce_number",
    "calculate_paygo_cost",
    "estimate_token_split",
    "calculate_recommendation",
    "analyze_costs",
    "CostAnalysis",
    "HybridPlan",
    "UsageProfile",
    "PtuCalculator",
    "Quote",
    # Validation and history
    "validate_ptu_rules",
    "ValidationReport",
    "HistoryStore",
    "HistoryEntry",
    # Errors
    "PtuCalculatorError",
    "ConfigurationError",
    "ConfigFileNotFoundError",
    "InvalidConfigFormatError",
    "FallbackModelError",
    "InvalidDeploymentTypeError",
    "HistoryError",
]
