"""Tests for the config_paths module."""

from pathlib import Path

from azure_ptu_calculator import config_paths
from azure_ptu_calculator.config_paths import (
    APP_NAME,
    PRICING_FILENAME,
    describe_path_source,
    get_fallback_model,
    get_history_path,
    get_package_config_dir,
    get_pricing_path,
    get_ptu_reference_path,
    get_ptu_rules_path,
    get_user_config_dir,
    get_user_data_dir,
)


def test_bundled_files_exist() -> None:
    for path in (get_pricing_path(), get_ptu_rules_path(), get_ptu_reference_path()):
        assert Path(path).is_file()
        assert Path(path).parent == get_package_config_dir()


def test_env_var_takes_precedence(monkeypatch, tmp_path) -> None:
    custom = tmp_path / "custom-pricing.yaml"
    custom.write_text("models: {}\n", encoding="utf-8")
    monkeypatch.setenv("APC_PRICING_PATH", str(custom))

    assert get_pricing_path() == str(custom)
    assert describe_path_source(str(custom), "APC_PRICING_PATH") == "Environment variable (APC_PRICING_PATH)"


def test_env_var_pointing_nowhere_is_ignored(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("APC_PRICING_PATH", str(tmp_path / "missing.yaml"))
    assert get_pricing_path() == str(get_package_config_dir() / PRICING_FILENAME)


def test_user_config_dir_overrides_bundled() -> None:
    user_dir = get_user_config_dir()
    user_dir.mkdir(parents=True)
    (user_dir / PRICING_FILENAME).write_text("models: {}\n", encoding="utf-8")

    path = get_pricing_path()
    assert path == str(user_dir / PRICING_FILENAME)
    assert describe_path_source(path, "APC_PRICING_PATH") == "User config"


def test_user_config_dir_contains_app_name(monkeypatch) -> None:
    monkeypatch.setattr(
        config_paths.platformdirs, "user_config_dir", lambda name, *args, **kwargs: f"/home/test/.config/{name}"
    )
    assert APP_NAME in str(get_user_config_dir())


def test_data_dir_override(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("APC_DATA_DIR", str(tmp_path / "custom"))

    assert get_user_data_dir() == tmp_path / "custom"
    assert get_history_path() == tmp_path / "custom" / "history.json"


def test_data_dir_default(monkeypatch) -> None:
    monkeypatch.delenv("APC_DATA_DIR")
    assert APP_NAME in str(get_user_data_dir())


def test_fallback_model(monkeypatch) -> None:
    assert get_fallback_model() == "gpt-4o-mini"
    monkeypatch.setenv("APC_FALLBACK_MODEL", "gpt-4o")
    assert get_fallback_model() == "gpt-4o"


def test_bundled_source() -> None:
    assert describe_path_source(get_ptu_rules_path(), "APC_PTU_RULES_PATH") == "Bundled"
