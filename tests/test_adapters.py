"""
Tests for provider adapters — mock org and YAML file org.
"""

from pathlib import Path

import pytest
import yaml
from conftest import MASTER_RT, RECORD_ID, write_org_file

from pathassist.adapters.base import ProviderError
from pathassist.adapters.file_store import FileOrg
from pathassist.adapters.mock import MockOrg
from pathassist.core.models import RecordUpdate


def stage_update(value: str, record_id: str = RECORD_ID, field: str = "StageName") -> RecordUpdate:
    return RecordUpdate(record_id=record_id, field_name=field, new_value=value)


# ── Mock Org Tests ───────────────────────────────────────────────────


class TestMockOrg:
    def test_update_applies_value(self, mock_org):
        receipt = mock_org.update_record(stage_update("Proposal"))
        assert receipt.ok
        assert mock_org.record(RECORD_ID).fields["StageName"] == "Proposal"
        assert mock_org.call_count == 1

    def test_injected_failure(self, mock_org):
        mock_org.set_update_failure(RECORD_ID, "locked")
        receipt = mock_org.update_record(stage_update("Proposal"))
        assert receipt.failed
        assert receipt.error == "locked"
        assert mock_org.record(RECORD_ID).fields["StageName"] == "Prospecting"

    def test_unknown_record_fails(self, mock_org):
        receipt = mock_org.update_record(stage_update("Proposal", record_id="nope"))
        assert receipt.failed

    def test_provider_errors(self, mock_org):
        with pytest.raises(ProviderError):
            mock_org.get_object_info("Lead")
        mock_org.set_record_error("down")
        with pytest.raises(ProviderError, match="down"):
            mock_org.get_record(RECORD_ID)

    def test_picklists_for_unknown_record_type(self, mock_org):
        assert mock_org.get_picklist_values("Opportunity", "012XXX") == {}

    def test_reset(self, mock_org):
        mock_org.set_update_failure(RECORD_ID)
        mock_org.update_record(stage_update("Proposal"))
        mock_org.reset()
        assert mock_org.call_count == 0
        assert mock_org.update_record(stage_update("Proposal")).ok


# ── File Org Tests ───────────────────────────────────────────────────


class TestFileOrg:
    def test_object_info(self, org_file: Path):
        info = FileOrg(org_file).get_object_info("Opportunity")
        assert info.field_label("StageName") == "Stage"
        assert info.master_record_type_id() == MASTER_RT

    def test_picklist_values(self, org_file: Path):
        picklists = FileOrg(org_file).get_picklist_values("Opportunity", MASTER_RT)
        values = [e.value for e in picklists["StageName"]]
        assert values == ["Prospecting", "Qualification", "Proposal", "Closed Won", "Closed Lost"]

    def test_unknown_record_type(self, org_file: Path):
        with pytest.raises(ProviderError, match="012XXX"):
            FileOrg(org_file).get_picklist_values("Opportunity", "012XXX")

    def test_unknown_object(self, org_file: Path):
        with pytest.raises(ProviderError, match="Lead"):
            FileOrg(org_file).get_object_info("Lead")

    def test_get_record(self, org_file: Path):
        record = FileOrg(org_file).get_record(RECORD_ID)
        assert record.object_name == "Opportunity"
        assert record.record_type_id is None
        assert record.fields["StageName"] == "Prospecting"

    def test_update_is_persisted(self, org_file: Path):
        org = FileOrg(org_file)
        receipt = org.update_record(stage_update("Closed Won"))
        assert receipt.ok

        assert FileOrg(org_file).get_record(RECORD_ID).fields["StageName"] == "Closed Won"
        data = yaml.safe_load(org_file.read_text())
        assert data["records"][RECORD_ID]["fields"]["Name"] == "Big Deal"
        assert not list(org_file.parent.glob(".org_*.tmp"))

    def test_update_unknown_record(self, org_file: Path):
        receipt = FileOrg(org_file).update_record(stage_update("Proposal", record_id="006XXX"))
        assert receipt.failed
        assert "006XXX" in receipt.error

    def test_update_unknown_field(self, org_file: Path):
        receipt = FileOrg(org_file).update_record(stage_update("x", field="Amount"))
        assert receipt.failed
        assert "Amount" in receipt.error

    def test_missing_file(self, tmp_path: Path):
        org = FileOrg(tmp_path / "missing.yml")
        with pytest.raises(ProviderError, match="not found"):
            org.get_record(RECORD_ID)
        assert org.update_record(stage_update("Proposal")).failed

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "org.yml"
        path.write_text("objects: [unclosed")
        with pytest.raises(ProviderError, match="Cannot read"):
            FileOrg(path).load()

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "org.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ProviderError, match="mapping"):
            FileOrg(path).load()

    def test_numeric_record_id_must_be_quoted(self, tmp_path: Path):
        record = "    object: Opportunity\n    fields: {StageName: Prospecting}\n"

        path = tmp_path / "org.yml"
        path.write_text("records:\n  006000000000001:\n" + record)
        with pytest.raises(ProviderError, match="Invalid org data"):
            FileOrg(path).load()

        path.write_text('records:\n  "006000000000001":\n' + record)
        snapshot = FileOrg(path).get_record("006000000000001")
        assert snapshot.field_value("StageName") == "Prospecting"

    def test_roundtrip_keeps_structure(self, tmp_path: Path):
        path = write_org_file(tmp_path / "org.yml", stage="Proposal")
        org = FileOrg(path)
        org.save(org.load())
        assert FileOrg(path).get_record(RECORD_ID).fields["StageName"] == "Proposal"
        assert FileOrg(path).get_picklist_values("Opportunity", MASTER_RT)["StageName"]

    def test_repr(self, org_file: Path):
        assert "org.yml" in repr(FileOrg(org_file))

