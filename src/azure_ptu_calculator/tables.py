"""Pricing and PTU rule tables.

This module provides the PricingTables class, which loads the PAYGO pricing
table and the PTU rule/rate table once and answers total lookups against
them: an unknown model resolves to the configured fallback model with a
warning, never to an error.

Typical usage:

    from azure_ptu_calculator import get_tables

    tables = get_tables()  # process-wide default
    pricing = tables.get_token_pricing("gpt-4o")
    rule = tables.get_ptu_rule("gpt-4o", "global")
"""

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from .config_paths import (
    ENV_PRICING_PATH,
    ENV_PTU_RULES_PATH,
    describe_path_source,
    get_fallback_model,
    get_pricing_path,
    get_ptu_rules_path,
)
from .deployment import DeploymentPtuRule, DeploymentType, PtuRates
from .errors import (
    ConfigFileNotFoundError,
    ConfigurationError,
    FallbackModelError,
    InvalidConfigFormatError,
)
from .logging import LogEvent, log_debug, log_error, log_info, log_warning
from .pricing import ModelPricing


@dataclass
class ConfigResult:
    """Result of loading one table file.

    Attributes:
        success: Whether the file was read and parsed into a mapping
        data: Parsed mapping (if successful)
        error: Error message (if unsuccessful)
        exception: Error to raise for the failure (if unsuccessful)
        path: Path to the configuration file
    """

    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    exception: Optional[ConfigurationError] = None
    path: Optional[str] = None


class TablesConfig:
    """Configuration for the pricing tables."""

    def __init__(
        self,
        pricing_path: Optional[str] = None,
        ptu_rules_path: Optional[str] = None,
        fallback_model: Optional[str] = None,
    ):
        """Initialize tables configuration.

        Args:
            pricing_path: Custom path to the pricing YAML file. If None, the
                          resolved default location is used.
            ptu_rules_path: Custom path to the PTU rules YAML file. If None,
                            the resolved default location is used.
            fallback_model: Model used for unknown identifiers. If None,
                            ``APC_FALLBACK_MODEL`` or ``gpt-4o-mini``.
        """
        self.pricing_path = pricing_path or get_pricing_path()
        self.ptu_rules_path = ptu_rules_path or get_ptu_rules_path()
        self.fallback_model = fallback_model or get_fallback_model()


def _load_yaml(path: str, label: str) -> ConfigResult:
    """Read a YAML table and check that it is a mapping."""
    file_path = Path(path)
    if not file_path.is_file():
        error_msg = f"{label} table not found: {path}"
        return ConfigResult(
            success=False,
            error=error_msg,
            exception=ConfigFileNotFoundError(error_msg, path=path),
            path=path,
        )

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as e:
        error_msg = f"Could not read {label} table: {e}"
        return ConfigResult(
            success=False,
            error=error_msg,
            exception=ConfigurationError(error_msg, path=path),
            path=path,
        )

    if not content.strip():
        error_msg = f"{label} table is empty"
        return ConfigResult(
            success=False,
            error=error_msg,
            exception=InvalidConfigFormatError(error_msg, path=path),
            path=path,
        )

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        error_msg = f"YAML parsing error in {label} table: {e}"
        return ConfigResult(
            success=False,
            error=error_msg,
            exception=InvalidConfigFormatError(error_msg, path=path),
            path=path,
        )

    if not isinstance(data, dict):
        error_msg = f"Invalid {label} table format: expected dictionary, got {type(data).__name__}"
        return ConfigResult(
            success=False,
            error=error_msg,
            exception=InvalidConfigFormatError(error_msg, path=path),
            path=path,
        )

    return ConfigResult(success=True, data=data, path=path)


def load_table(path: str, label: str) -> ConfigResult:
    """Load a YAML table, raising on failure.

    Raises:
        ConfigurationError: If the file is missing, unreadable or not a mapping
    """
    result = _load_yaml(path, label)
    if not result.success:
        log_error(LogEvent.TABLE_LOAD, result.error or f"Failed to load {label} table", path=path)
        raise result.exception or ConfigurationError(result.error or f"Failed to load {label} table", path=path)
    return result


def _require_mapping(node: Any, what: str, path: str) -> Dict[str, Any]:
    if not isinstance(node, dict):
        raise InvalidConfigFormatError(
            f"Invalid {what}: expected dictionary, got {type(node).__name__}",
            path=path,
        )
    return node


class PricingTables:
    """Immutable pricing, PTU rule and PTU rate tables."""

    _default_instance: Optional["PricingTables"] = None
    _instance_lock = threading.RLock()

    @classmethod
    def get_default(cls) -> "PricingTables":
        """Get the default tables instance with standard configuration.

        Returns:
            The process-wide PricingTables instance
        """
        with cls._instance_lock:
            if cls._default_instance is None:
                cls._default_instance = cls()
            return cls._default_instance

    @classmethod
    def reset_default(cls) -> None:
        """Drop the default instance so the next call reloads the tables."""
        with cls._instance_lock:
            cls._default_instance = None

    def __init__(self, config: Optional[TablesConfig] = None):
        """Load the tables.

        Args:
            config: Configuration for this instance. If None, default
                    configuration is used.

        Raises:
            ConfigurationError: If a table is missing or malformed, or the
                fallback model cannot back every lookup
        """
        self.config = config or TablesConfig()
        self.fallback_model = self.config.fallback_model

        self._pricing: Dict[str, ModelPricing] = {}
        self._throughput: Dict[str, float] = {}
        self._rules: Dict[Tuple[str, DeploymentType], DeploymentPtuRule] = {}
        self._rates: Dict[DeploymentType, PtuRates] = {}
        self.pricing_version: Optional[str] = None
        self.ptu_rules_version: Optional[str] = None

        self._load_pricing(load_table(self.config.pricing_path, "pricing"))
        self._load_ptu_rules(load_table(self.config.ptu_rules_path, "PTU rules"))
        self._check_fallback()

        log_info(
            LogEvent.TABLE_LOAD,
            "Pricing tables loaded",
            models=len(self._pricing),
            rules=len(self._rules),
            fallback=self.fallback_model,
        )

    def _load_pricing(self, result: ConfigResult) -> None:
        data = result.data or {}
        path = str(result.path)
        self.pricing_version = data.get("version")
        currency = str(data.get("currency", "USD"))
        models = _require_mapping(data.get("models"), "'models' section in pricing table", path)

        for name, entry in models.items():
            entry = _require_mapping(entry, f"pricing entry for '{name}'", path)
            try:
                self._pricing[str(name)] = ModelPricing(
                    model=str(name),
                    input_rate_per_million=float(entry.get("input", 0.0)),
                    output_rate_per_million=float(entry.get("output", 0.0)),
                    currency=str(entry.get("currency", currency)),
                    description=entry.get("description"),
                )
            except (TypeError, ValueError) as e:
                raise InvalidConfigFormatError(f"Invalid pricing entry for '{name}': {e}", path=path) from e

    def _load_ptu_rules(self, result: ConfigResult) -> None:
        data = result.data or {}
        path = str(result.path)
        self.ptu_rules_version = data.get("version")
        currency = str(data.get("currency", "USD"))

        rates = _require_mapping(data.get("rates"), "'rates' section in PTU rules table", path)
        for key, entry in rates.items():
            deployment_type = self._parse_deployment(key, path)
            entry = _require_mapping(entry, f"rates for '{key}'", path)
            try:
                self._rates[deployment_type] = PtuRates(
                    hourly=float(entry["hourly"]),
                    monthly=float(entry["monthly"]),
                    yearly=float(entry["yearly"]),
                    currency=currency,
                )
            except (KeyError, TypeError, ValueError) as e:
                raise InvalidConfigFormatError(f"Invalid rates for '{key}': {e}", path=path) from e

        missing_rates = [d.value for d in DeploymentType if d not in self._rates]
        if missing_rates:
            raise InvalidConfigFormatError(
                f"PTU rules table is missing rates for: {', '.join(missing_rates)}",
                path=path,
            )

        models = _require_mapping(data.get("models"), "'models' section in PTU rules table", path)
        for name, entry in models.items():
            name = str(name)
            entry = _require_mapping(entry, f"PTU rules for '{name}'", path)
            deployments = _require_mapping(entry.get("deployments"), f"deployments for '{name}'", path)
            try:
                throughput = float(entry["throughput_per_ptu"])
                self._throughput[name] = throughput
                for key, rule in deployments.items():
                    deployment_type = self._parse_deployment(key, path)
                    rule = _require_mapping(rule, f"rule for '{name}/{key}'", path)
                    self._rules[(name, deployment_type)] = DeploymentPtuRule(
                        model=name,
                        deployment_type=deployment_type,
                        minimum_ptu=int(rule["min_ptu"]),
                        increment_ptu=int(rule["increment"]),
                        throughput_per_ptu=throughput,
                    )
            except (KeyError, TypeError, ValueError) as e:
                raise InvalidConfigFormatError(f"Invalid PTU rules for '{name}': {e}", path=path) from e

    @staticmethod
    def _parse_deployment(key: Any, path: str) -> DeploymentType:
        try:
            return DeploymentType.parse(str(key))
        except ValueError as e:
            raise InvalidConfigFormatError(str(e), path=path) from e

    def _check_fallback(self) -> None:
        model = self.fallback_model
        if model not in self._pricing:
            raise FallbackModelError(
                f"Fallback model '{model}' has no pricing entry",
                model=model,
                path=self.config.pricing_path,
            )
        missing = [d.value for d in DeploymentType if (model, d) not in self._rules]
        if missing:
            raise FallbackModelError(
                f"Fallback model '{model}' has no PTU rule for: {', '.join(missing)}",
                model=model,
                path=self.config.ptu_rules_path,
            )

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def has_pricing(self, model: str) -> bool:
        return model in self._pricing

    def get_token_pricing(self, model: str) -> ModelPricing:
        """Get PAYGO pricing for a model.

        Unknown identifiers resolve to the fallback model's pricing, marked
        with ``is_fallback=True``, and a warning is logged.

        Args:
            model: Model identifier, e.g. ``gpt-4o-mini``

        Returns:
            ModelPricing for the model or the fallback model
        """
        pricing = self._pricing.get(model)
        if pricing is not None:
            return pricing

        log_warning(
            LogEvent.PRICING_LOOKUP,
            f"Token pricing not found for model: {model}, using {self.fallback_model} as fallback",
            model=model,
            fallback=self.fallback_model,
        )
        fallback = self._pricing[self.fallback_model]
        return ModelPricing(
            model=fallback.model,
            input_rate_per_million=fallback.input_rate_per_million,
            output_rate_per_million=fallback.output_rate_per_million,
            currency=fallback.currency,
            description=fallback.description,
            is_fallback=True,
        )

    def get_ptu_rule(self, model: str, deployment_type: Union[str, DeploymentType]) -> DeploymentPtuRule:
        """Get the PTU purchase rule for a model and deployment type.

        A model without rules resolves to the fallback model's rule. A model
        that has a throughput figure but no rule for this deployment type
        keeps its throughput and takes the fallback model's minimum and
        increment. Both cases log a warning.

        Raises:
            InvalidDeploymentTypeError: If ``deployment_type`` is not recognized
        """
        deployment = DeploymentType.parse(deployment_type)
        rule = self._rules.get((model, deployment))
        if rule is not None:
            return rule

        fallback_rule = self._rules[(self.fallback_model, deployment)]
        if model in self._throughput:
            log_warning(
                LogEvent.PRICING_LOOKUP,
                f"No {deployment.value} PTU rule for model: {model}, using {self.fallback_model} minimums",
                model=model,
                deployment=deployment.value,
            )
            return DeploymentPtuRule(
                model=model,
                deployment_type=deployment,
                minimum_ptu=fallback_rule.minimum_ptu,
                increment_ptu=fallback_rule.increment_ptu,
                throughput_per_ptu=self._throughput[model],
            )

        log_warning(
            LogEvent.PRICING_LOOKUP,
            f"PTU rules not found for model: {model}, using {self.fallback_model} as fallback",
            model=model,
            deployment=deployment.value,
        )
        return fallback_rule

    def find_ptu_rule(
        self, model: str, deployment_type: Union[str, DeploymentType]
    ) -> Optional[DeploymentPtuRule]:
        """Exact rule lookup without fallback, for validation and listings."""
        return self._rules.get((model, DeploymentType.parse(deployment_type)))

    def get_ptu_rates(self, deployment_type: Union[str, DeploymentType]) -> PtuRates:
        """Get per-PTU prices for a deployment type."""
        return self._rates[DeploymentType.parse(deployment_type)]

    def list_models(self) -> List[str]:
        """List every model that has pricing or PTU rules."""
        return sorted(set(self._pricing) | set(self._throughput))

    def list_deployments(self, model: str) -> List[DeploymentType]:
        """List deployment types with an explicit rule for a model."""
        return [d for d in DeploymentType if (model, d) in self._rules]

    def describe_model(self, model: str) -> Dict[str, Any]:
        """Describe a model's pricing and rules without fallback substitution."""
        pricing = self._pricing.get(model)
        deployments = {
            d.value: {
                "min_ptu": self._rules[(model, d)].minimum_ptu,
                "increment": self._rules[(model, d)].increment_ptu,
            }
            for d in self.list_deployments(model)
        }
        return {
            "pricing": (
                {
                    "input_rate_per_million": pricing.input_rate_per_million,
                    "output_rate_per_million": pricing.output_rate_per_million,
                    "currency": pricing.currency,
                    "description": pricing.description,
                }
                if pricing
                else None
            ),
            "throughput_per_ptu": self._throughput.get(model),
            "deployments": deployments,
        }

    def dump(self) -> Dict[str, Any]:
        """Dump all tables as plain data."""
        log_debug(LogEvent.TABLE_LOAD, "Dumping pricing tables", models=len(self.list_models()))
        return {
            "fallback_model": self.fallback_model,
            "rates": {d.value: self._rates[d].to_dict() for d in DeploymentType},
            "models": {name: self.describe_model(name) for name in self.list_models()},
        }

    def get_data_info(self) -> Dict[str, Any]:
        """Describe the table files in use."""
        info: Dict[str, Any] = {}
        for label, path, env_var, version in (
            ("pricing", self.config.pricing_path, ENV_PRICING_PATH, self.pricing_version),
            ("ptu_rules", self.config.ptu_rules_path, ENV_PTU_RULES_PATH, self.ptu_rules_version),
        ):
            info[label] = {
                "path": path,
                "source": describe_path_source(path, env_var),
                "exists": Path(path).is_file(),
                "version": version,
            }
        return info


def get_tables() -> PricingTables:
    """Get the default PricingTables instance.

    Returns:
        The process-wide PricingTables instance
    """
    return PricingTables.get_default()


def get_token_pricing(model: str) -> ModelPricing:
    """Get PAYGO pricing for a model from the default tables."""
    return get_tables().get_token_pricing(model)
