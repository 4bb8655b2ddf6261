from frontdesk.services.export.export_service import ExportFile, ExportService

__all__ = ["ExportService", "ExportFile"]
