"""
Shared test fixtures: an Opportunity with a five-value stage picklist.
"""

import textwrap
from pathlib import Path

import pytest

from pathassist.adapters.mock import MockOrg
from pathassist.core.engine.controller import PathController
from pathassist.core.models import (
    FieldInfo,
    ObjectInfo,
    PicklistEntry,
    RecordSnapshot,
    RecordTypeInfo,
)

MASTER_RT = "012000000000000AAA"
RECORD_ID = "006A00000000001"
STAGES = ["Prospecting", "Qualification", "Proposal", "Closed Won", "Closed Lost"]


def entries(*values: str) -> list[PicklistEntry]:
    """Picklist entries whose label is the value."""
    return [PicklistEntry(value=v, label=v) for v in values]


@pytest.fixture
def stage_entries() -> list[PicklistEntry]:
    return entries(*STAGES)


@pytest.fixture
def opportunity_info() -> ObjectInfo:
    return ObjectInfo(
        api_name="Opportunity",
        label="Opportunity",
        fields={
            "Name": FieldInfo(api_name="Name", label="Opportunity Name"),
            "StageName": FieldInfo(api_name="StageName", label="Stage"),
        },
        record_type_infos={
            MASTER_RT: RecordTypeInfo(record_type_id=MASTER_RT, name="Master", master=True),
        },
    )


@pytest.fixture
def mock_org(opportunity_info, stage_entries) -> MockOrg:
    org = MockOrg()
    org.add_object(opportunity_info)
    org.set_picklist("Opportunity", MASTER_RT, "StageName", stage_entries)
    org.add_record(
        RecordSnapshot(
            record_id=RECORD_ID,
            object_name="Opportunity",
            fields={"StageName": "Prospecting"},
        )
    )
    return org


@pytest.fixture
def make_controller(mock_org, opportunity_info, stage_entries):
    """Build a loaded controller for a record at the given stage."""

    def _make(stage: str | None = "Prospecting", picklist=None, sink=None) -> PathController:
        controller = PathController(
            record_id=RECORD_ID,
            picklist_field="StageName",
            closed_ok="Closed Won",
            closed_ko="Closed Lost",
            sink=sink or mock_org,
            last_stage_label="Closed",
        )
        record = RecordSnapshot(
            record_id=RECORD_ID,
            object_name="Opportunity",
            fields={"StageName": stage},
        )
        controller.on_record_loaded(record, opportunity_info)
        controller.on_metadata_loaded(
            {"StageName": picklist if picklist is not None else stage_entries}
        )
        return controller

    return _make


def write_org_file(path: Path, stage: str = "Prospecting") -> Path:
    """Write an org data file with one Opportunity record."""
    content = textwrap.dedent(f"""\
        objects:
          Opportunity:
            label: Opportunity
            fields:
              Name: {{label: Opportunity Name}}
              StageName: {{label: Stage}}
            record_types:
              - {{id: "{MASTER_RT}", name: Master, master: true}}
            picklists:
              "{MASTER_RT}":
                StageName:
                  - {{value: Prospecting, label: Prospecting}}
                  - {{value: Qualification, label: Qualification}}
                  - {{value: Proposal, label: Proposal}}
                  - {{value: Closed Won, label: Closed Won}}
                  - {{value: Closed Lost, label: Closed Lost}}
        records:
          "{RECORD_ID}":
            object: Opportunity
            record_type_id: null
            fields:
              Name: Big Deal
              StageName: {stage}
    """)
    path.write_text(content)
    return path


def write_path_config(directory: Path, **overrides: str) -> Path:
    """Write a path.yml next to an org.yml."""
    values = {
        "object_name": "Opportunity",
        "record_id": RECORD_ID,
        "picklist_field": "StageName",
        "closed_ok": "Closed Won",
        "closed_ko": "Closed Lost",
        "last_stage_label": "Closed",
        "data_file": "org.yml",
    }
    values.update(overrides)
    lines = [f'{key}: "{value}"' for key, value in values.items()]
    path = directory / "path.yml"
    path.write_text("\n".join(lines) + "\n")
    return path


@pytest.fixture
def org_file(tmp_path: Path) -> Path:
    return write_org_file(tmp_path / "org.yml")


@pytest.fixture
def path_config(tmp_path: Path, org_file: Path) -> Path:
    return write_path_config(tmp_path)
