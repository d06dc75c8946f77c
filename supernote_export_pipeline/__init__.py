"""
Supernote Export Pipeline

Export Supernote ``.note`` files into a notes vault as Markdown transcripts,
page images and searchable PDFs.
"""

__version__ = "0.1.0"
