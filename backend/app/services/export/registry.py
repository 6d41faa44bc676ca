from __future__ import annotations

from app.services.export.base import ExporterBase
from app.services.export.csv_exporter import CSVExporter
from app.services.export.json_exporter import JSONExporter

_EXPORTERS: dict[str, type[ExporterBase]] = {}


def register_exporter(cls: type[ExporterBase]) -> type[ExporterBase]:
    instance = cls()
    _EXPORTERS[instance.format_name] = cls
    return cls


def get_exporter(format_name: str) -> ExporterBase:
    cls = _EXPORTERS.get(format_name)
    if cls is None:
        raise ValueError(
            f"Unknown export format: {format_name}. Available: {list(_EXPORTERS.keys())}"
        )
    return cls()


def list_formats() -> list[str]:
    return list(_EXPORTERS.keys())


# Register default exporters
register_exporter(CSVExporter)
register_exporter(JSONExporter)
