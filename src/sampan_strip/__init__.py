"""sampan strip - Remove the SEF trailer from Samsung panorama JPEGs."""
from .extract import convert_file, convert_files
from .trailer import read_entries_count, read_entry_offset, resolve_payload_length

__all__ = [
    "convert_file",
    "convert_files",
    "read_entries_count",
    "read_entry_offset",
    "resolve_payload_length",
]
