"""Exporters for the rows of a list view (CSV and Excel)."""

from .csv_export import export_csv, row_values
from .excel_export import ExcelExporter

__all__ = ["ExcelExporter", "export_csv", "row_values"]
