# app/services/export_service.py
import io
import logging
from pathlib import Path
from typing import List, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import Paragraph, SimpleDocTemplate, Table, TableStyle

from ..config import settings
from ..exceptions import ExportError

logger = logging.getLogger(__name__)

PDF_FONT_NAME = "JournalSans"
HEADER_FILL = colors.Color(75 / 255, 85 / 255, 99 / 255)
PAGE_MARGIN = 14 * mm


class ExportService:
    """CSV and PDF serialization of rendered table data"""

    CSV_DELIMITER = ","

    @staticmethod
    def to_csv(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
        """
        Comma-join the header line and each row, newline-separated.

        Values are written as-is: a cell containing a comma or a newline
        shifts or splits the row in the output.
        """
        lines = [ExportService.CSV_DELIMITER.join(headers)]
        lines.extend(ExportService.CSV_DELIMITER.join(row) for row in rows)
        return "\n".join(lines)

    @staticmethod
    def load_font(font_path: Path) -> TTFont:
        if not font_path.exists():
            logger.error(f"PDF font {font_path} not found")
            raise ExportError(f"PDF font {font_path} not found")
        return TTFont(PDF_FONT_NAME, str(font_path))

    @staticmethod
    def register_font() -> str:
        """Register the fixed PDF font once and return its name"""
        if PDF_FONT_NAME not in pdfmetrics.getRegisteredFontNames():
            pdfmetrics.registerFont(ExportService.load_font(settings.PDF_FONT_PATH))
        return PDF_FONT_NAME

    @staticmethod
    def _cell(text: str, style: ParagraphStyle) -> Paragraph:
        # Paragraph text is markup: escape it and keep explicit line breaks
        return Paragraph(escape(text).replace("\n", "<br/>"), style)

    @staticmethod
    def build_table(headers: Sequence[str], rows: Sequence[Sequence[str]], width: float) -> Table:
        """Table split evenly across `width`; cell text wraps inside its column"""
        font_name = ExportService.register_font()
        font_size = settings.PDF_FONT_SIZE

        body_style = ParagraphStyle(
            'JournalCell',
            fontName=font_name,
            fontSize=font_size,
            leading=font_size * 1.2,
            textColor=colors.black,
        )
        header_style = ParagraphStyle('JournalHeader', parent=body_style, textColor=colors.white)

        data: List[List[Paragraph]] = [[ExportService._cell(h, header_style) for h in headers]]
        data.extend([ExportService._cell(value, body_style) for value in row] for row in rows)

        column_width = width / max(len(headers), 1)
        table = Table(data, colWidths=[column_width] * len(headers), repeatRows=1)
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), HEADER_FILL),
            ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#f5f5f5')]),
            ('GRID', (0, 0), (-1, -1), 0.25, colors.HexColor('#d1d5db')),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('TOPPADDING', (0, 0), (-1, -1), 4),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
        ]))
        return table

    @staticmethod
    def to_pdf(headers: Sequence[str], rows: Sequence[Sequence[str]], title: str = "") -> bytes:
        """Render headers and rows as a paginated table; the header repeats on every page"""
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=PAGE_MARGIN,
            leftMargin=PAGE_MARGIN,
            topMargin=PAGE_MARGIN,
            bottomMargin=PAGE_MARGIN,
            title=title,
        )

        doc.build([ExportService.build_table(headers, rows, doc.width)])
        logger.info(f"Rendered PDF '{title}' with {len(rows)} rows")
        return buffer.getvalue()
