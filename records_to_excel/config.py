"""
Export configuration: the export mode, the output destination and the
header mappings used by the By-Headers strategy.

Configuration can be built in code or loaded from a YAML file::

    mode: headers
    output_path: out/records.xlsx
    headers: [Name, Score]
    header_to_field: {Name: name, Score: score}
    sub_slice_field_name: items
    sub_header_to_field: {Item: title}
"""

import logging
import os
from dataclasses import dataclass, field
from enum import IntEnum
from typing import IO, Any, Optional

import yaml

from .errors import ExportModeNotExistError

logger = logging.getLogger(__name__)


class ExportMode(IntEnum):
    TAGGED_FIELD = 0   # only fields carrying an ``xlsx`` tag
    ALL_FIELD = 1      # every field
    BY_HEADERS = 2     # fields named by ExportConfig.headers

    @classmethod
    def parse(cls, value):
        """Convert a config value (enum, int or name) to an :class:`ExportMode`."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                raise ExportModeNotExistError(
                    f"export mode not exist: {value!r}") from None
        if isinstance(value, str):
            key = value.strip().lower().replace("-", "_")
            if key in _MODE_ALIASES:
                return _MODE_ALIASES[key]
        raise ExportModeNotExistError(f"export mode not exist: {value!r}")


_MODE_ALIASES = {
    "tagged": ExportMode.TAGGED_FIELD,
    "tagged_field": ExportMode.TAGGED_FIELD,
    "all": ExportMode.ALL_FIELD,
    "all_field": ExportMode.ALL_FIELD,
    "headers": ExportMode.BY_HEADERS,
    "by_headers": ExportMode.BY_HEADERS,
}


@dataclass
class ExportConfig:
    """Options for one export call."""
    mode: Any = ExportMode.TAGGED_FIELD
    output_path: str = ""                   # takes precedence over output_writer
    output_writer: Optional[IO[bytes]] = None
    headers: list = field(default_factory=list)
    header_to_field: dict = field(default_factory=dict)
    sub_slice_field_name: str = ""          # nested sequence to flatten, if any
    sub_header_to_field: dict = field(default_factory=dict)

    def has_destination(self) -> bool:
        return bool(self.output_path) or self.output_writer is not None


def load_config(config_path: Optional[str]) -> dict:
    """Load raw settings from a YAML file; a missing file yields ``{}``."""
    if config_path and os.path.exists(config_path):
        with open(config_path, "r") as f:
            return yaml.safe_load(f) or {}
    if config_path:
        logger.warning(f"Config file not found, using defaults: {config_path}")
    return {}


def export_config_from_dict(settings: dict) -> ExportConfig:
    """Build an :class:`ExportConfig` from loaded YAML settings."""
    mode = settings.get("mode", ExportMode.TAGGED_FIELD)
    return ExportConfig(
        mode=ExportMode.parse(mode),
        output_path=settings.get("output_path") or "",
        headers=list(settings.get("headers") or []),
        header_to_field=dict(settings.get("header_to_field") or {}),
        sub_slice_field_name=settings.get("sub_slice_field_name") or "",
        sub_header_to_field=dict(settings.get("sub_header_to_field") or {}),
    )


def load_export_config(config_path: Optional[str]) -> ExportConfig:
    """Load a YAML file straight into an :class:`ExportConfig`."""
    return export_config_from_dict(load_config(config_path))
