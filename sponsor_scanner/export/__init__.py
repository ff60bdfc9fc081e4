"""Flat-file (CSV) export of job records."""

from .csv_writer import FIELDNAMES, append_records, record_to_row, write_records

__all__ = ["FIELDNAMES", "append_records", "write_records", "record_to_row"]
