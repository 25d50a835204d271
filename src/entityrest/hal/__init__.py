"""HAL response shaping."""

from entityrest.hal.shaper import HALExporter, export_hal

__all__ = ["HALExporter", "export_hal"]
