"""Tests for loading the pricing and PTU rule tables."""

import logging
import threading
from typing import List

import pytest

from azure_ptu_calculator.deployment import DeploymentType
from azure_ptu_calculator.errors import (
    ConfigFileNotFoundError,
    FallbackModelError,
    InvalidConfigFormatError,
    InvalidDeploymentTypeError,
)
from azure_ptu_calculator.logging import PACKAGE_LOGGER_NAME
from azure_ptu_calculator.tables import PricingTables, TablesConfig, get_tables


@pytest.fixture
def custom_tables(write_yaml, minimal_pricing, minimal_rules) -> PricingTables:
    config = TablesConfig(
        pricing_path=write_yaml("pricing.yaml", minimal_pricing),
        ptu_rules_path=write_yaml("ptu_rules.yaml", minimal_rules),
    )
    return PricingTables(config)


class TestBundledTables:
    def test_loads(self, tables) -> None:
        assert "gpt-4o" in tables.list_models()
        assert "gpt-4o-mini" in tables.list_models()
        assert tables.fallback_model == "gpt-4o-mini"
        assert tables.pricing_version is not None

    def test_fallback_has_every_deployment(self, tables) -> None:
        assert tables.list_deployments("gpt-4o-mini") == list(DeploymentType)

    def test_rates(self, tables) -> None:
        rates = tables.get_ptu_rates("global")
        assert (rates.monthly, rates.yearly) == (260, 2652)
        assert rates.on_demand_monthly == pytest.approx(720)

    def test_rule_lookup_accepts_spellings(self, tables) -> None:
        rule = tables.get_ptu_rule("gpt-4o", "data-zone")
        assert rule.deployment_type == DeploymentType.DATA_ZONE
        assert rule.minimum_ptu == 15

    def test_invalid_deployment_type(self, tables) -> None:
        with pytest.raises(InvalidDeploymentTypeError):
            tables.get_ptu_rule("gpt-4o", "edge")

    def test_data_info(self, tables) -> None:
        info = tables.get_data_info()
        assert info["pricing"]["source"] == "Bundled"
        assert info["ptu_rules"]["exists"]

    def test_dump(self, tables) -> None:
        dump = tables.dump()
        assert dump["fallback_model"] == "gpt-4o-mini"
        assert dump["models"]["gpt-4o"]["deployments"]["regional"] == {"min_ptu": 50, "increment": 50}


class TestFallbackLookups:
    def test_unknown_model_rule(self, custom_tables, caplog) -> None:
        caplog.set_level(logging.WARNING, logger=PACKAGE_LOGGER_NAME)
        rule = custom_tables.get_ptu_rule("gpt-9-ultra", "regional")

        assert rule.model == "gpt-4o-mini"
        assert rule.minimum_ptu == 25
        assert "PTU rules not found for model: gpt-9-ultra" in caplog.text

    def test_known_model_missing_deployment_keeps_throughput(self, custom_tables, caplog) -> None:
        caplog.set_level(logging.WARNING, logger=PACKAGE_LOGGER_NAME)
        rule = custom_tables.get_ptu_rule("gpt-4o", "regional")

        assert rule.model == "gpt-4o"
        assert rule.throughput_per_ptu == 2500
        assert rule.minimum_ptu == 25
        assert "No regional PTU rule for model: gpt-4o" in caplog.text

    def test_find_rule_has_no_fallback(self, custom_tables) -> None:
        assert custom_tables.find_ptu_rule("gpt-4o", "regional") is None
        assert custom_tables.find_ptu_rule("gpt-4o", "global") is not None

    def test_describe_unknown_model(self, custom_tables) -> None:
        assert custom_tables.describe_model("nope") == {"pricing": None, "throughput_per_ptu": None, "deployments": {}}


class TestLoadErrors:
    def test_missing_file(self, tmp_path, write_yaml, minimal_rules) -> None:
        config = TablesConfig(
            pricing_path=str(tmp_path / "missing.yaml"),
            ptu_rules_path=write_yaml("ptu_rules.yaml", minimal_rules),
        )
        with pytest.raises(ConfigFileNotFoundError) as exc_info:
            PricingTables(config)
        assert exc_info.value.path == str(tmp_path / "missing.yaml")

    @pytest.mark.parametrize("content", ["", "models: [unclosed", "- just\n- a list\n"])
    def test_invalid_pricing_file(self, write_yaml, minimal_rules, content) -> None:
        config = TablesConfig(
            pricing_path=write_yaml("pricing.yaml", content),
            ptu_rules_path=write_yaml("ptu_rules.yaml", minimal_rules),
        )
        with pytest.raises(InvalidConfigFormatError):
            PricingTables(config)

    def test_negative_rate(self, write_yaml, minimal_pricing, minimal_rules) -> None:
        minimal_pricing["models"]["gpt-4o"]["input"] = -1
        config = TablesConfig(
            pricing_path=write_yaml("pricing.yaml", minimal_pricing),
            ptu_rules_path=write_yaml("ptu_rules.yaml", minimal_rules),
        )
        with pytest.raises(InvalidConfigFormatError, match="gpt-4o"):
            PricingTables(config)

    def test_missing_rates(self, write_yaml, minimal_pricing, minimal_rules) -> None:
        del minimal_rules["rates"]["regional"]
        config = TablesConfig(
            pricing_path=write_yaml("pricing.yaml", minimal_pricing),
            ptu_rules_path=write_yaml("ptu_rules.yaml", minimal_rules),
        )
        with pytest.raises(InvalidConfigFormatError, match="regional"):
            PricingTables(config)

    def test_unknown_deployment_key(self, write_yaml, minimal_pricing, minimal_rules) -> None:
        minimal_rules["models"]["gpt-4o"]["deployments"]["edge"] = {"min_ptu": 1, "increment": 1}
        config = TablesConfig(
            pricing_path=write_yaml("pricing.yaml", minimal_pricing),
            ptu_rules_path=write_yaml("ptu_rules.yaml", minimal_rules),
        )
        with pytest.raises(InvalidConfigFormatError):
            PricingTables(config)

    def test_fallback_without_pricing(self, write_yaml, minimal_pricing, minimal_rules) -> None:
        config = TablesConfig(
            pricing_path=write_yaml("pricing.yaml", minimal_pricing),
            ptu_rules_path=write_yaml("ptu_rules.yaml", minimal_rules),
            fallback_model="gpt-5",
        )
        with pytest.raises(FallbackModelError) as exc_info:
            PricingTables(config)
        assert exc_info.value.model == "gpt-5"

    def test_fallback_without_every_rule(self, write_yaml, minimal_pricing, minimal_rules) -> None:
        config = TablesConfig(
            pricing_path=write_yaml("pricing.yaml", minimal_pricing),
            ptu_rules_path=write_yaml("ptu_rules.yaml", minimal_rules),
            fallback_model="gpt-4o",
        )
        with pytest.raises(FallbackModelError, match="dataZone, regional"):
            PricingTables(config)

    def test_load_error_is_logged(self, tmp_path, write_yaml, minimal_rules, caplog) -> None:
        caplog.set_level(logging.ERROR, logger=PACKAGE_LOGGER_NAME)
        config = TablesConfig(
            pricing_path=str(tmp_path / "missing.yaml"),
            ptu_rules_path=write_yaml("ptu_rules.yaml", minimal_rules),
        )
        with pytest.raises(ConfigFileNotFoundError):
            PricingTables(config)
        assert "pricing table not found" in caplog.text


class TestDefaultInstance:
    def test_env_var_paths(self, monkeypatch, write_yaml, minimal_pricing, minimal_rules) -> None:
        minimal_pricing["models"]["gpt-4o"]["input"] = 99.0
        monkeypatch.setenv("APC_PRICING_PATH", write_yaml("pricing.yaml", minimal_pricing))
        monkeypatch.setenv("APC_PTU_RULES_PATH", write_yaml("ptu_rules.yaml", minimal_rules))

        tables = get_tables()
        assert tables.get_token_pricing("gpt-4o").input_rate_per_million == 99.0
        assert tables.get_data_info()["pricing"]["source"] == "Environment variable (APC_PRICING_PATH)"

    def test_fallback_model_env_var(self, monkeypatch) -> None:
        monkeypatch.setenv("APC_FALLBACK_MODEL", "gpt-4o")
        assert PricingTables().fallback_model == "gpt-4o"

    def test_singleton(self) -> None:
        first = PricingTables.get_default()
        assert PricingTables.get_default() is first
        PricingTables.reset_default()
        assert PricingTables.get_default() is not first

    def test_singleton_across_threads(self) -> None:
        instances: List[PricingTables] = []

        def worker() -> None:
            instances.append(PricingTables.get_default())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(instances) == 8
        assert all(instance is instances[0] for instance in instances)
