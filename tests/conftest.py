"""Shared fixtures for the PTU calculator tests."""

from pathlib import Path
from typing import Any, Callable, Dict, Generator

import pytest
import yaml

from azure_ptu_calculator.calculator import UsageInput
from azure_ptu_calculator.deployment import DeploymentPtuRule, DeploymentType, PtuRates
from azure_ptu_calculator.pricing import ModelPricing
from azure_ptu_calculator.tables import PricingTables

APC_ENV_VARS = (
    "APC_PRICING_PATH",
    "APC_PTU_RULES_PATH",
    "APC_PTU_REFERENCE_PATH",
    "APC_FALLBACK_MODEL",
    "APC_DATA_DIR",
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[Path, None, None]:
    """Keep every test away from the real user config and data directories."""
    for var in APC_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    data_dir = tmp_path / "data"
    monkeypatch.setenv("APC_DATA_DIR", str(data_dir))
    monkeypatch.setattr("platformdirs.user_config_dir", lambda *args, **kwargs: str(tmp_path / "user-config"))

    PricingTables.reset_default()
    yield data_dir
    PricingTables.reset_default()


@pytest.fixture
def write_yaml(tmp_path: Path) -> Callable[[str, Any], str]:
    """Write data as YAML under tmp_path and return the path."""

    def _write(name: str, data: Any) -> str:
        path = tmp_path / name
        with open(path, "w", encoding="utf-8") as f:
            if isinstance(data, str):
                f.write(data)
            else:
                yaml.safe_dump(data, f)
        return str(path)

    return _write


@pytest.fixture
def minimal_pricing() -> Dict[str, Any]:
    return {
        "version": "test",
        "models": {
            "gpt-4o-mini": {"input": 0.15, "output": 0.60},
            "gpt-4o": {"input": 2.50, "output": 10.00},
        },
    }


@pytest.fixture
def minimal_rules() -> Dict[str, Any]:
    return {
        "version": "test",
        "rates": {
            "global": {"hourly": 1.0, "monthly": 260, "yearly": 2652},
            "dataZone": {"hourly": 1.1, "monthly": 286, "yearly": 2916},
            "regional": {"hourly": 2.0, "monthly": 286, "yearly": 2916},
        },
        "models": {
            "gpt-4o-mini": {
                "throughput_per_ptu": 37000,
                "deployments": {
                    "global": {"min_ptu": 15, "increment": 5},
                    "dataZone": {"min_ptu": 15, "increment": 5},
                    "regional": {"min_ptu": 25, "increment": 25},
                },
            },
            "gpt-4o": {
                "throughput_per_ptu": 2500,
                "deployments": {"global": {"min_ptu": 15, "increment": 5}},
            },
        },
    }


@pytest.fixture
def tables() -> PricingTables:
    """Tables loaded from the bundled configuration."""
    return PricingTables()


@pytest.fixture
def mini_pricing() -> ModelPricing:
    return ModelPricing(model="gpt-4o-mini", input_rate_per_million=0.15, output_rate_per_million=0.60)


@pytest.fixture
def scenario_rule() -> DeploymentPtuRule:
    """Rule used by the reference scenarios: minimum 15, 50k TPM per PTU."""
    return DeploymentPtuRule(
        model="gpt-4o-mini",
        deployment_type=DeploymentType.GLOBAL,
        minimum_ptu=15,
        increment_ptu=5,
        throughput_per_ptu=50000,
    )


@pytest.fixture
def scenario_rates() -> PtuRates:
    return PtuRates(hourly=1.0, monthly=730, yearly=6132)


@pytest.fixture
def empty_usage() -> UsageInput:
    return UsageInput()
