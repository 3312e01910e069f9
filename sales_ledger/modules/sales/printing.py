"""
Print sheets for the entry form.

A print payload (see EntrySession.print_payload) names a template id and
carries a flat row list; the template is `<template_id>.html` under the
print template directory, rendered with Jinja2. PDF output goes through
WeasyPrint.
"""
from __future__ import annotations

import logging
import os
import re
import tempfile
import uuid
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape

from ...utils.helpers import fmt_money, today_str

_log = logging.getLogger(__name__)

# CSS for PDF generation - shared between print and export
_SHEET_PDF_CSS = '''
    @page {
        margin: 10mm;
        size: A4;
    }
    body {
        margin: 0 !important;
        padding: 0 !important;
        width: 100% !important;
    }
'''


class PrintError(Exception):
    """Rendering or PDF output failed; the entry session is left untouched."""
    pass


def _default_template_dir() -> Path:
    from ...config import TEMPLATE_DIR
    return TEMPLATE_DIR


def _environment(template_dir: Path | str | None) -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(template_dir or _default_template_dir())),
        autoescape=select_autoescape(["html"]),
    )
    env.filters["money"] = fmt_money
    return env


def render_print_html(payload: dict, template_dir: Path | str | None = None) -> str:
    template_id = payload.get("template_id") or ""
    if not re.fullmatch(r"[A-Za-z0-9_-]+", template_id):
        raise PrintError(f"Invalid print template id: {template_id!r}")
    try:
        template = _environment(template_dir).get_template(f"{template_id}.html")
    except TemplateNotFound as e:
        raise PrintError(f"Print template not found: {template_id}") from e
    return template.render(date=today_str(), **payload)


def sanitize_filename(filename: str, max_length: int = 100) -> str:
    """
    Sanitize a string for safe use as a filename.
    Removes unsafe characters, truncates to max_length, and provides UUID fallback for empty results.
    """
    sanitized = re.sub(r"[^A-Za-z0-9._-]", "_", filename or "")[:max_length]
    if not sanitized.strip("_"):
        sanitized = f"sheet_{uuid.uuid4().hex[:8]}"
    return sanitized


def write_pdf(html_content: str, target: Path | str | None = None, *, name: str = "") -> Path:
    """Write `html_content` to a PDF file and return its path."""
    try:
        from weasyprint import HTML, CSS
    except ImportError as e:
        raise PrintError("WeasyPrint is not available. Install it with: pip install weasyprint") from e

    if target is None:
        pdf_dir = Path(tempfile.gettempdir()) / "sales_ledger_sheets"
        os.makedirs(pdf_dir, exist_ok=True)
        target = pdf_dir / f"{sanitize_filename(name or today_str())}.pdf"

    try:
        HTML(string=html_content).write_pdf(str(target), stylesheets=[CSS(string=_SHEET_PDF_CSS)])
    except Exception as e:
        raise PrintError(f"Could not write PDF: {e}") from e
    _log.info("Print sheet written to %s", target)
    return Path(target)
