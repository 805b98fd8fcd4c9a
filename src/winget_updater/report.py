"""
Run summaries.

Human-readable text is rendered from a Jinja2 template; the machine-readable
form is the report's dict written as JSON.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, TemplateNotFound

from utils.atomic_write import atomic_write_json

from .models import RunReport

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
SUMMARY_TEMPLATE = "summary.txt.j2"

STATUS_LABELS = {
    "updated": "UPDATED",
    "reinstalled": "REINSTALLED",
    "failed": "FAILED",
    "broken": "BROKEN",
}


class ReportRenderer:
    """Renders run reports from templates."""

    def __init__(self, template_dir: Optional[Path] = None):
        self._env = Environment(
            loader=FileSystemLoader(str(template_dir or TEMPLATE_DIR)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
        )

    def render(self, report: RunReport, template: str = SUMMARY_TEMPLATE) -> str:
        try:
            tmpl = self._env.get_template(template)
        except TemplateNotFound:
            logger.error(f"Summary template not found: {template}")
            raise
        return tmpl.render(report=report, labels=STATUS_LABELS).rstrip()


def render_summary(report: RunReport) -> str:
    """Render the end-of-run summary as plain text."""
    return ReportRenderer().render(report)


def write_json_report(report: RunReport, path: Path) -> Path:
    """Write the report as JSON, atomically."""
    path = atomic_write_json(path, report.to_dict())
    logger.info(f"JSON summary written to {path}")
    return path
