"""
Config check use case — validate path.yml against its org data file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from pathassist.adapters.base import ProviderError
from pathassist.adapters.file_store import FileOrg
from pathassist.core.config.loader import (
    ConfigError,
    find_config_file,
    load_config,
    resolve_data_file,
)
from pathassist.core.models.config import PathConfig


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    config: PathConfig | None = None
    config_path: Path | None = None
    data_file: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "data_file": str(self.data_file) if self.data_file else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "object_name": self.config.object_name if self.config else None,
            "picklist_field": self.config.picklist_field if self.config else None,
            "record_id": self.config.record_id if self.config else None,
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate path configuration and report issues.

    Args:
        config_path: Optional explicit path to path.yml.

    Returns:
        ConfigCheckResult with validation status and any issues.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_config_file()
    if config_path is None:
        result.errors.append("No path.yml found.")
        return result
    result.config_path = config_path

    try:
        config = load_config(config_path)
    except ConfigError as e:
        result.errors.append(str(e))
        return result
    result.config = config

    # Custom copy without the placeholder never shows the field label
    labels = config.labels
    for name, layout in labels.layouts().items():
        if layout.update_button_text and labels.token not in layout.update_button_text:
            result.warnings.append(
                f"Button text for '{name}' does not contain {labels.token!r}"
            )

    if not config.last_stage_label:
        result.warnings.append("last_stage_label is empty: the closed step will have no label.")

    # Cross-check against the org data
    data_file = resolve_data_file(config, config_path)
    result.data_file = data_file
    if not data_file.is_file():
        result.warnings.append(f"Data file does not exist: {config.data_file}")
    else:
        org = FileOrg(data_file)
        try:
            object_info = org.get_object_info(config.object_name)
            if object_info.field_label(config.picklist_field) is None:
                result.errors.append(
                    f"Field {config.picklist_field} is not available on {config.object_name}"
                )
            org.get_record(config.record_id)
        except ProviderError as e:
            result.errors.append(str(e))

    result.valid = len(result.errors) == 0
    return result
