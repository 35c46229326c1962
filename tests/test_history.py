"""Tests for the calculation history store."""

import json

import pytest

from azure_ptu_calculator import history
from azure_ptu_calculator.calculator import CalculationResult, UsageInput
from azure_ptu_calculator.errors import HistoryError
from azure_ptu_calculator.history import HistoryEntry, HistoryStore
from azure_ptu_calculator.quote import PtuCalculator


@pytest.fixture
def store(tmp_path) -> HistoryStore:
    return HistoryStore(tmp_path / "history.json")


def _entry(model: str) -> HistoryEntry:
    return HistoryEntry(
        timestamp="2025-01-01T00:00:00+00:00",
        model=model,
        deployment_type="global",
        usage={"average_tokens_per_minute": 1000.0},
        result={"has_valid_data": True},
    )


def test_empty_store(store) -> None:
    assert store.entries() == []
    assert store.clear() == 0


def test_default_path_uses_data_dir(isolated_environment) -> None:
    assert HistoryStore().path == isolated_environment / "history.json"


def test_newest_first_and_capped(tmp_path) -> None:
    store = HistoryStore(tmp_path / "history.json", max_entries=3)
    for i in range(5):
        store.add(_entry(f"model-{i}"))

    assert [e.model for e in store.entries()] == ["model-4", "model-3", "model-2"]


def test_default_cap_is_ten(store) -> None:
    for i in range(12):
        store.add(_entry(f"model-{i}"))
    assert len(store.entries()) == 10


def test_record_replays_identically(store, tables) -> None:
    usage = UsageInput.from_raw({"avgTPM": "250000", "p99TPM": "400000", "recommendedPTU": "25.5"})
    quote = PtuCalculator(tables).quote("gpt-4o", "dataZone", usage)

    entry = store.record("gpt-4o", "data_zone", usage, quote.result)
    saved = store.entries()[0]

    assert saved == entry
    assert saved.deployment_type == "dataZone"
    assert saved.usage_input == usage
    replay = PtuCalculator(tables).quote(saved.model, saved.deployment_type, saved.usage_input)
    assert replay.result.to_dict() == saved.result


def test_record_no_data_result(store) -> None:
    store.record("gpt-4o", "global", UsageInput(), CalculationResult.no_data())
    assert store.entries()[0].result["has_valid_data"] is False


def test_clear(store) -> None:
    store.add(_entry("a"))
    store.add(_entry("b"))

    assert store.clear() == 2
    assert not store.path.exists()
    assert store.entries() == []


def test_written_file_is_json_list(store) -> None:
    store.add(_entry("a"))
    data = json.loads(store.path.read_text(encoding="utf-8"))
    assert isinstance(data, list)
    assert data[0]["model"] == "a"


@pytest.mark.parametrize("content", ["not json", '{"a": 1}', '[{"model": "x"}]'])
def test_corrupt_file(store, content) -> None:
    store.path.write_text(content, encoding="utf-8")
    with pytest.raises(HistoryError) as exc_info:
        store.entries()
    assert exc_info.value.path == str(store.path)


def test_invalid_max_entries(tmp_path) -> None:
    with pytest.raises(ValueError):
        HistoryStore(tmp_path / "history.json", max_entries=0)


def test_failed_write_leaves_no_temp_file(store, monkeypatch) -> None:
    def fail_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(history.os, "replace", fail_replace)

    with pytest.raises(HistoryError, match="disk full"):
        store.add(_entry("a"))

    assert list(store.path.parent.glob(".history-*")) == []
    assert not store.path.exists()
