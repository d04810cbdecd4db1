"""Registration exports: flat CSV rows and a paginated PDF report."""
import csv
import io
import logging
from datetime import datetime
from typing import Dict, List, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from src.models.registration import Registration
from src.utils.config import get_event_name
from src.utils.date_utils import format_display_time, format_generated_at

logger = logging.getLogger(__name__)

CSV_FILENAME = "registrations.csv"
PDF_FILENAME = "registrations.pdf"

CSV_HEADERS = [
    "Nom Complet",
    "Email",
    "Entreprise",
    "Poste",
    "Téléphone",
    "Pays",
    "Solutions d'intérêt",
    "Autre intérêt",
    "Date d'inscription",
    "Inscrit par",
]

REPORT_HEADERS = [
    "Nom Complet",
    "Email",
    "Entreprise",
    "Pays",
    "Solutions d'intérêt",
    "Date d'inscription",
    "Inscrit par",
]

BRAND_GREEN = colors.HexColor("#bcd630")
ROW_ALTERNATE = colors.HexColor("#f5f5f5")
FOOTER_TEMPLATE = "Page {page} sur {total}"


def csv_rows(registrations: List[Registration]) -> List[Dict[str, str]]:
    """One flat row per registration, keyed by CSV header."""
    return [
        {
            "Nom Complet": reg.full_name,
            "Email": reg.email,
            "Entreprise": reg.company,
            "Poste": reg.position,
            "Téléphone": reg.phone,
            "Pays": reg.country,
            "Solutions d'intérêt": ", ".join(reg.interests),
            "Autre intérêt": reg.other_interest or "",
            "Date d'inscription": format_display_time(reg.timestamp),
            "Inscrit par": reg.submitter_label,
        }
        for reg in registrations
    ]


def render_csv(registrations: List[Registration]) -> bytes:
    """
    Spreadsheet-ready CSV.

    Returns:
        UTF-8 bytes with a BOM so spreadsheet tools detect the encoding
    """
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=CSV_HEADERS)
    writer.writeheader()
    writer.writerows(csv_rows(registrations))
    return output.getvalue().encode("utf-8-sig")


def report_rows(registrations: List[Registration]) -> List[List[str]]:
    """Table body of the printable report, in REPORT_HEADERS order."""
    return [
        [
            reg.full_name,
            reg.email,
            reg.company,
            reg.country,
            ", ".join(reg.all_interests()),
            format_display_time(reg.timestamp),
            reg.submitter_label,
        ]
        for reg in registrations
    ]


class _NumberedCanvas(canvas.Canvas):
    """Canvas that defers page output until the page total is known."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._saved_page_states = []

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self._draw_footer(total)
            super().showPage()
        super().save()

    def _draw_footer(self, total: int) -> None:
        width, _ = self._pagesize
        self.setFont("Helvetica", 8)
        self.drawRightString(
            width - 10 * mm,
            8 * mm,
            FOOTER_TEMPLATE.format(page=self._pageNumber, total=total)
        )


def _cell_style() -> ParagraphStyle:
    return ParagraphStyle(
        name="ReportCell",
        parent=getSampleStyleSheet()["BodyText"],
        fontSize=8,
        leading=10,
    )


def render_pdf(
    registrations: List[Registration],
    generated_at: Optional[datetime] = None,
    title: Optional[str] = None
) -> bytes:
    """
    Printable registration report.

    Layout: title, "Généré le" line, grid table with a repeated header row
    and alternating row shading, "Page X sur Y" footer on every page.

    Returns:
        PDF document bytes
    """
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=landscape(A4),
        leftMargin=14 * mm,
        rightMargin=14 * mm,
        topMargin=15 * mm,
        bottomMargin=18 * mm,
        title=PDF_FILENAME,
    )

    styles = getSampleStyleSheet()
    cell_style = _cell_style()
    title = title or f"Liste des inscriptions {get_event_name()}"

    story = [
        Paragraph(escape(title), styles["Title"]),
        Paragraph(escape(f"Généré le: {format_generated_at(generated_at)}"), styles["Normal"]),
        Spacer(1, 6 * mm),
    ]

    header = [Paragraph(f"<b>{escape(label)}</b>", cell_style) for label in REPORT_HEADERS]
    body = [
        [Paragraph(escape(value), cell_style) for value in row]
        for row in report_rows(registrations)
    ]

    table = Table([header] + body, repeatRows=1, colWidths=[
        35 * mm, 50 * mm, 35 * mm, 25 * mm, 55 * mm, 32 * mm, 37 * mm
    ])
    style_commands = [
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("BACKGROUND", (0, 0), (-1, 0), BRAND_GREEN),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("TOPPADDING", (0, 0), (-1, -1), 2),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 2),
    ]
    if body:
        style_commands.append(("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, ROW_ALTERNATE]))
    table.setStyle(TableStyle(style_commands))
    story.append(table)

    doc.build(story, canvasmaker=_NumberedCanvas)
    logger.info(f"Rendered PDF report with {len(registrations)} registrations")
    return buffer.getvalue()
