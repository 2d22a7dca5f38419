from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
import yaml

from wsn_verify.io import ConfigError, ConfigLoader
from wsn_verify.model import CompletionPolicy, ModelSpec


EXAMPLES = Path(__file__).resolve().parents[1] / "examples"


def _base_payload() -> dict[str, Any]:
    return {
        "version": "0.1",
        "nodes": ["A", "B", "C"],
        "flows": [
            {"id": "F0", "path": ["A", "B", "C"], "period": 10, "deadline": 10, "attempts": [1, 2]},
        ],
        "schedule": {
            "decoder": "push_pull",
            "cells": [{"time": 0, "node": "A", "content": "push(F0: A->B, #0)"}],
        },
        "analysis": {"completion_policy": "final_link"},
    }


def _write_yaml(path: Path, payload: dict[str, Any]) -> None:
    path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")


def test_load_raises_when_file_not_found(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="config file not found"):
        ConfigLoader().load(str(tmp_path / "missing.yaml"))


def test_load_raises_on_invalid_yaml_syntax(tmp_path: Path) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("version: [", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid config syntax"):
        ConfigLoader().load(str(path))


def test_load_raises_on_invalid_json_syntax(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text('{"version": "0.1",}', encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid config syntax"):
        ConfigLoader().load(str(path))


def test_load_raises_when_root_is_not_object(tmp_path: Path) -> None:
    path = tmp_path / "list_root.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="config root must be object"):
        ConfigLoader().load(str(path))


def test_load_rejects_unsupported_version() -> None:
    payload = _base_payload()
    payload["version"] = "9.9"
    with pytest.raises(ConfigError, match="unsupported config version"):
        ConfigLoader().load_data(payload)


def test_schema_errors_are_reported_with_path() -> None:
    payload = _base_payload()
    payload["flows"][0]["period"] = "ten"
    with pytest.raises(ConfigError, match=r"schema validation failed: flows\.0\.period"):
        ConfigLoader().load_data(payload)


def test_unknown_fields_are_rejected() -> None:
    payload = _base_payload()
    payload["flows"][0]["jitter"] = 1
    with pytest.raises(ConfigError, match="schema validation failed"):
        ConfigLoader().load_data(payload)


def test_load_data_fills_defaults() -> None:
    spec = ConfigLoader().load_data(_base_payload())
    assert spec.flows[0].phase == 0
    assert spec.flows[0].priority == 0
    assert spec.schedule.slots is None
    assert spec.analysis.completion_policy == CompletionPolicy.FINAL_LINK


@pytest.mark.parametrize("name", ["single_hop.yaml", "multi_hop.yaml", "compact_rows.json"])
def test_examples_load(name: str) -> None:
    spec = ConfigLoader().load(str(EXAMPLES / name))
    assert spec.flows


@pytest.mark.parametrize("suffix", [".yaml", ".yml", ".json"])
def test_save_supports_yaml_yml_json(tmp_path: Path, suffix: str) -> None:
    loader = ConfigLoader()
    spec = loader.load_data(_base_payload())
    output = tmp_path / f"out{suffix}"
    loader.save(spec, str(output))

    text = output.read_text(encoding="utf-8")
    parsed = yaml.safe_load(text) if suffix in {".yaml", ".yml"} else json.loads(text)
    assert parsed["version"] == "0.1"
    assert parsed["flows"][0]["attempts"] == [1, 2]
    assert loader.load(str(output)) == spec


def test_validate_returns_empty_for_modelspec_instance() -> None:
    loader = ConfigLoader()
    spec: ModelSpec = loader.load_data(_base_payload())
    assert loader.validate(spec) == []


def test_validate_reports_issue_for_invalid_path(tmp_path: Path) -> None:
    payload = _base_payload()
    payload["flows"][0]["deadline"] = 11
    path = tmp_path / "bad.yaml"
    _write_yaml(path, payload)
    issues = ConfigLoader().validate(str(path))
    assert len(issues) == 1
    assert "exceeds period" in issues[0].message
