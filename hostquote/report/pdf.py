"""PDF quote rendering with ReportLab (US Letter, Helvetica, one paragraph per line item)."""
import io
import logging
from datetime import datetime
from pathlib import Path
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import Image, KeepTogether, Paragraph, SimpleDocTemplate, Spacer

from hostquote.models import CalculationResult, PricingConfig
from hostquote.report.constants import (
    QUOTE_ACCENT,
    QUOTE_ACCENT_DARK,
    QUOTE_DARK,
    QUOTE_MUTED,
    get_logo_path,
)
from hostquote.report.templates import quote_sections, report_metadata, total_line

_LOG = logging.getLogger(__name__)

MARGIN = 0.8 * inch
SECTION_SPACER = 0.2 * inch


def _styles():
    """Paragraph styles. Plain dict to avoid ReportLab stylesheet name clashes."""
    styles = {}
    styles["Quote_Title"] = ParagraphStyle(
        name="Quote_Title",
        fontName="Helvetica-Bold",
        fontSize=18,
        leading=22,
        alignment=TA_CENTER,
        textColor=colors.HexColor(QUOTE_DARK),
        spaceAfter=4,
    )
    styles["Quote_Stamp"] = ParagraphStyle(
        name="Quote_Stamp",
        fontName="Helvetica",
        fontSize=10,
        alignment=TA_CENTER,
        textColor=colors.HexColor(QUOTE_MUTED),
        spaceAfter=12,
    )
    styles["Quote_H1"] = ParagraphStyle(
        name="Quote_H1",
        fontName="Helvetica-Bold",
        fontSize=14,
        leading=17,
        textColor=colors.HexColor(QUOTE_ACCENT_DARK),
        spaceBefore=6,
        spaceAfter=6,
    )
    styles["Quote_Line"] = ParagraphStyle(
        name="Quote_Line",
        fontName="Helvetica",
        fontSize=11,
        leading=15,
        leftIndent=14,
        textColor=colors.HexColor(QUOTE_DARK),
    )
    styles["Quote_Subtotal"] = ParagraphStyle(
        name="Quote_Subtotal",
        parent=styles["Quote_Line"],
        fontName="Helvetica-Bold",
        spaceBefore=2,
    )
    styles["Quote_Total"] = ParagraphStyle(
        name="Quote_Total",
        fontName="Helvetica-Bold",
        fontSize=16,
        leading=20,
        alignment=TA_CENTER,
        textColor=colors.HexColor(QUOTE_ACCENT),
        spaceBefore=12,
    )
    return styles


def _line(text: str, style) -> Paragraph:
    # Leading spaces are significant for nested items
    stripped = text.lstrip(" ")
    indent = "&nbsp;" * (len(text) - len(stripped))
    return Paragraph(indent + escape(stripped), style)


def _make_footer(meta: dict):
    def _add_footer(canvas, doc):
        canvas.saveState()
        canvas.setFont("Helvetica", 8)
        canvas.setFillColor(colors.HexColor(QUOTE_MUTED))
        canvas.drawString(MARGIN, MARGIN / 2, f"{meta['doc_name_short']} v{meta['report_version']} - {meta['date']}")
        canvas.drawRightString(letter[0] - MARGIN, MARGIN / 2, f"Page {doc.page}")
        canvas.restoreState()
    return _add_footer


def generate_quote_pdf(
    result: CalculationResult,
    config: PricingConfig,
    static_dir: Path | None = None,
    now: datetime | None = None,
) -> bytes:
    """Render the quote; returns PDF bytes."""
    buffer = io.BytesIO()
    meta = report_metadata(now)
    doc = SimpleDocTemplate(
        buffer,
        pagesize=letter,
        leftMargin=MARGIN,
        rightMargin=MARGIN,
        topMargin=MARGIN,
        bottomMargin=MARGIN,
        title=meta["title"],
    )
    styles = _styles()
    story = []

    logo_path = get_logo_path(static_dir)
    if logo_path:
        try:
            story.append(Image(str(logo_path), width=1.6 * inch, height=0.5 * inch))
            story.append(Spacer(1, 0.1 * inch))
        except OSError as e:
            _LOG.warning("Logo %s not usable: %s", logo_path, e)

    story.append(Paragraph(escape(meta["title"]), styles["Quote_Title"]))
    story.append(Paragraph(escape(f"Date et heure d'exportation: {meta['date_time']}"), styles["Quote_Stamp"]))

    for section in quote_sections(result, config):
        block = [Paragraph(escape(section["title"]), styles["Quote_H1"])]
        block.extend(_line(text, styles["Quote_Line"]) for text in section["lines"])
        if section["subtotal"]:
            block.append(_line(section["subtotal"], styles["Quote_Subtotal"]))
        block.append(Spacer(1, SECTION_SPACER))
        story.append(KeepTogether(block))

    story.append(Paragraph(escape(total_line(result)), styles["Quote_Total"]))

    footer_cb = _make_footer(meta)
    doc.build(story, onFirstPage=footer_cb, onLaterPages=footer_cb)
    return buffer.getvalue()
