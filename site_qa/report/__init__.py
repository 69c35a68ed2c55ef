"""Report rendering (Markdown) and structured exports (JSON/CSV)."""

from .render import render_report, write_report
