"""I/O utilities: CSV import/export, export envelopes, local key-value store."""

from .export_csv import export_assignments_csv, export_schedule_csv, working_days_summary
from .export_json import export_filename, read_envelope, write_envelope
from .import_csv import import_schedule_csv, import_team_csv
from .local_store import LocalStore

__all__ = [
    "export_assignments_csv",
    "export_schedule_csv",
    "working_days_summary",
    "export_filename",
    "read_envelope",
    "write_envelope",
    "import_schedule_csv",
    "import_team_csv",
    "LocalStore",
]
