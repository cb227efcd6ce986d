"""Report writers."""

from .csv_report import CSV_HEADER, format_timestamp, rows_to_table, write_csv, write_summary

__all__ = ["CSV_HEADER", "format_timestamp", "rows_to_table", "write_csv", "write_summary"]
