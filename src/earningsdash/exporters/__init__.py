"""Exporters package — convert earnings data to output formats."""
from earningsdash.exporters.csv_export import CSVExportGenerator, write_export
from earningsdash.exporters.markdown import render_month_markdown

__all__ = ["CSVExportGenerator", "render_month_markdown", "write_export"]
