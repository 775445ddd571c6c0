"""Smart Roster: scheduling assistant for retail teams.

Modules:
- config: load and validate configuration (JSON or YAML)
- exceptions: error types raised across the package
- domain: roster/task/event types, record-store tables and repositories
- services: recurrence rules, name matching, roster edits, storage gateway,
  calendar events, local schedule templates
- engine: task-assignment resolver
- ai: Gemini-backed OCR, workplace analysis and huddle text
- io: CSV/JSON import-export and the local key-value store
- cli: command-line interface entrypoints
"""

__all__ = [
    "config",
    "exceptions",
    "domain",
    "services",
    "engine",
    "ai",
    "io",
    "cli",
]

__version__ = "0.1.0"
