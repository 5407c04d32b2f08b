"""Exporter selection by template mode."""

import logging

from remittance.export.base import Exporter
from remittance.export.standard import StandardTemplateExporter
from remittance.export.upload import UploadTemplateExporter
from remittance.shared.errors import ExportPrecondition

logger = logging.getLogger(__name__)


class ExporterRegistry:
    """Registry of schedule templates keyed by mode."""

    _exporters: dict[str, type[Exporter]] = {
        "upload": UploadTemplateExporter,
        "standard": StandardTemplateExporter,
    }

    @classmethod
    def register(cls, mode: str, exporter_class: type[Exporter]) -> None:
        cls._exporters[mode] = exporter_class
        logger.info(f"Registered schedule exporter: {mode}")

    @classmethod
    def get_exporter_class(cls, mode: str) -> type[Exporter]:
        """Get exporter class by mode.

        Raises:
            ExportPrecondition: If no exporter handles the mode
        """
        if mode not in cls._exporters:
            available = ", ".join(cls._exporters.keys())
            raise ExportPrecondition(
                f"Unknown schedule mode: '{mode}'. Available modes: {available}",
                details={"mode": mode},
            )
        return cls._exporters[mode]

    @classmethod
    def list_modes(cls) -> list[str]:
        return list(cls._exporters.keys())


def create_exporter(mode: str) -> Exporter:
    """Instantiate the exporter for a template mode ('upload' or 'standard')."""
    return ExporterRegistry.get_exporter_class(mode)()
