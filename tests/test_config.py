"""
Tests for configuration loading — path.yml parsing and validation.
"""

import textwrap
from pathlib import Path

import pytest
from conftest import RECORD_ID, write_path_config

from pathassist.core.config.loader import (
    ConfigError,
    find_config_file,
    load_config,
    resolve_data_file,
)
from pathassist.core.use_cases.config_check import check_config


class TestLoadConfig:
    def test_load_flat(self, path_config: Path):
        config = load_config(path_config)
        assert config.object_name == "Opportunity"
        assert config.record_id == RECORD_ID
        assert config.closed_ok == "Closed Won"
        assert config.closed_ko == "Closed Lost"

    def test_load_wrapped(self, tmp_path: Path):
        path = tmp_path / "path.yml"
        path.write_text(textwrap.dedent("""\
            path:
              object_name: Case
              record_id: 500A0000001
              picklist_field: Status
              closed_ok: Solved
              closed_ko: Rejected
              hide_update_button: true
              labels:
                change_closed:
                  modal_header: "Reopen {0}"
                  update_button_text: "Change {0}"
        """))
        config = load_config(path)
        assert config.object_name == "Case"
        assert config.hide_update_button is True
        assert config.labels.change_closed.modal_header == "Reopen {0}"

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "path.yml"
        path.write_text("object_name: [broken")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "path.yml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_missing_required(self, tmp_path: Path):
        path = tmp_path / "path.yml"
        path.write_text("object_name: Opportunity\n")
        with pytest.raises(ConfigError, match="Invalid path configuration"):
            load_config(path)

    def test_same_closed_values(self, tmp_path: Path):
        path = write_path_config(tmp_path, closed_ko="Closed Won")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_search_upward(self, path_config: Path):
        nested = path_config.parent / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == path_config.resolve()

    def test_none_found(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(ConfigError, match="No path.yml"):
            load_config()


class TestResolveDataFile:
    def test_relative_to_config(self, path_config: Path):
        config = load_config(path_config)
        assert resolve_data_file(config, path_config) == (path_config.parent / "org.yml").resolve()

    def test_absolute(self, tmp_path: Path):
        target = tmp_path / "elsewhere" / "data.yml"
        path = write_path_config(tmp_path, data_file=str(target))
        config = load_config(path)
        assert resolve_data_file(config, path) == target


class TestConfigCheck:
    def test_valid(self, path_config: Path):
        result = check_config(path_config)
        assert result.valid
        assert result.errors == []
        assert result.to_dict()["object_name"] == "Opportunity"

    def test_unknown_field(self, tmp_path: Path, org_file: Path):
        path = write_path_config(tmp_path, picklist_field="Status")
        result = check_config(path)
        assert not result.valid
        assert any("Status" in e for e in result.errors)

    def test_unknown_record(self, tmp_path: Path, org_file: Path):
        path = write_path_config(tmp_path, record_id="006XXX")
        result = check_config(path)
        assert not result.valid
        assert any("006XXX" in e for e in result.errors)

    def test_missing_data_file_is_a_warning(self, tmp_path: Path):
        path = write_path_config(tmp_path)
        result = check_config(path)
        assert result.valid
        assert any("org.yml" in w for w in result.warnings)

    def test_label_without_token(self, tmp_path: Path, org_file: Path):
        path = tmp_path / "path.yml"
        path.write_text(textwrap.dedent(f"""\
            object_name: Opportunity
            record_id: "{RECORD_ID}"
            picklist_field: StageName
            closed_ok: Closed Won
            closed_ko: Closed Lost
            labels:
              mark_as_current:
                update_button_text: Jump here
        """))
        result = check_config(path)
        assert result.valid
        assert any("mark_as_current" in w for w in result.warnings)

    def test_invalid_config(self, tmp_path: Path):
        path = tmp_path / "path.yml"
        path.write_text("record_id: x\n")
        result = check_config(path)
        assert not result.valid
        assert result.to_dict()["object_name"] is None
