"""Printable HTML quote (same sections as the PDF, with a print button)."""
from datetime import datetime
from html import escape

from hostquote.models import CalculationResult, PricingConfig
from hostquote.report.constants import (
    QUOTE_ACCENT,
    QUOTE_ACCENT_DARK,
    QUOTE_DARK,
    QUOTE_GRID,
    QUOTE_LIGHT_BG,
    QUOTE_MUTED,
    QUOTE_WHITE,
)
from hostquote.report.templates import quote_sections, report_metadata, total_line


def _section_html(section: dict) -> str:
    items = "".join(f"<li>{escape(line.strip())}</li>" for line in section["lines"])
    subtotal = f'<p class="subtotal">{escape(section["subtotal"])}</p>' if section["subtotal"] else ""
    return f"<section><h2>{escape(section['title'])}</h2><ul>{items}</ul>{subtotal}</section>"


def generate_quote_html(
    result: CalculationResult,
    config: PricingConfig,
    *,
    pdf_download_url: str | None = None,
    now: datetime | None = None,
) -> str:
    """
    Generate the quote as a standalone HTML page. The print button and the optional
    PDF link are hidden when printing.
    """
    meta = report_metadata(now)

    css = f"""
    * {{ box-sizing: border-box; }}
    body {{ font-family: Helvetica, Arial, sans-serif; color: {QUOTE_DARK}; background: {QUOTE_LIGHT_BG}; margin: 0; padding: 24px; line-height: 1.5; }}
    .quote {{ max-width: 800px; margin: 0 auto; background: {QUOTE_WHITE}; padding: 40px; border-radius: 12px; box-shadow: 0 1px 3px rgba(0,0,0,.08); }}
    h1 {{ font-size: 1.5rem; text-align: center; margin: 0 0 4px 0; }}
    .stamp {{ text-align: center; font-size: 0.85rem; color: {QUOTE_MUTED}; margin-bottom: 24px; }}
    h2 {{ font-size: 1.1rem; color: {QUOTE_ACCENT_DARK}; margin: 20px 0 8px 0; border-bottom: 1px solid {QUOTE_GRID}; }}
    ul {{ list-style: none; margin: 0; padding-left: 16px; }}
    li {{ margin: 2px 0; }}
    .subtotal {{ font-weight: 700; padding-left: 16px; margin: 6px 0 0 0; }}
    .total {{ font-size: 1.4rem; font-weight: 700; text-align: center; color: {QUOTE_ACCENT}; margin-top: 28px; }}
    .actions {{ text-align: center; margin-bottom: 16px; }}
    .btn {{ display: inline-block; background: {QUOTE_ACCENT}; color: white; padding: 8px 18px; border-radius: 8px; text-decoration: none; font-weight: 600; border: none; cursor: pointer; font-size: 1rem; margin: 0 4px; }}
    .footer {{ margin-top: 32px; padding-top: 12px; border-top: 1px solid {QUOTE_GRID}; font-size: 0.8rem; color: {QUOTE_MUTED}; }}
    @media print {{ body {{ background: white; padding: 0; }} .quote {{ box-shadow: none; }} .actions {{ display: none; }} }}
    """

    pdf_block = ""
    if pdf_download_url:
        pdf_block = f'<a href="{escape(pdf_download_url)}" class="btn">Télécharger le PDF</a>'

    body = "\n".join(_section_html(s) for s in quote_sections(result, config))

    return f"""<!DOCTYPE html>
<html lang="fr-CA">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{escape(meta["doc_name_short"])} - {result.number_of_users} usagers</title>
<style>{css}</style>
</head>
<body>
<div class="quote">
<div class="actions"><button type="button" class="btn" onclick="window.print()">Imprimer</button>{pdf_block}</div>
<h1>{escape(meta["title"])}</h1>
<p class="stamp">Date et heure d'exportation: {escape(meta["date_time"])}</p>
{body}
<p class="total">{escape(total_line(result))}</p>
<div class="footer">{escape(meta["doc_name_short"])} v{meta["report_version"]}</div>
</div>
</body>
</html>"""
