"""Export orchestration and workflow coordination"""

from supernote_export_pipeline.orchestration.exporter import ExportContext, NoteExporter

__all__ = ["ExportContext", "NoteExporter"]
