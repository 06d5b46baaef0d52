"""
Tabular Exports

Renders a list of backend records as a downloadable CSV, Excel or PDF file.
Each exporter returns an ExportFile; the export views turn it into an
attachment response.

All three formats open with the same provenance banner (subtitle/branding,
title, "Generated on", "Total Records") and print missing values as "N/A".
CSV and Excel share the 14-column farmer layout by default, PDF uses a
narrower 8-column layout; pass custom_headers/custom_mapping for any other
entity.
"""

import csv
import io
import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Sequence
from xml.sax.saxutils import escape

import requests
from django.conf import settings
from django.utils import timezone

from .services.dashboard_stats import parse_backend_datetime

logger = logging.getLogger(__name__)

DEFAULT_TITLE = 'Data Export'
MISSING_VALUE = 'N/A'

DEFAULT_HEADERS = [
    '#', 'Name', 'Email', 'Phone', 'County', 'Sub County', 'Village',
    'Farming Type', 'Total Land Size (Acres)', 'Organic Experience',
    'Education Level', 'Certification Status', 'Registration Date', 'Status',
]
DEFAULT_PDF_HEADERS = ['#', 'Name', 'Email', 'Phone', 'County', 'Type', 'Status', 'Date']

EXCEL_COLUMN_WIDTHS = [8, 20, 25, 15, 15, 15, 15, 18, 20, 18, 15, 18, 15, 12]
EXCEL_DEFAULT_WIDTH = 18
PDF_COLUMN_WIDTHS_MM = [10, 25, 35, 25, 20, 20, 20, 25]

EXCEL_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

RowMapping = Callable[[Dict[str, Any], int], Sequence[Any]]


@dataclass
class ExportFile:
    filename: str
    content_type: str
    content: bytes


class ExportError(Exception):
    """Export library missing or the document could not be rendered."""
    def __init__(self, message: str, code: str = None):
        super().__init__(message)
        self.message = message
        self.code = code or 'EXPORT_FAILED'


# =============================================================================
# ROW MAPPING
# =============================================================================

def display_value(value: Any) -> Any:
    """Cell value with None/empty rendered as N/A and lists joined."""
    if value is None:
        return MISSING_VALUE
    if isinstance(value, str):
        return value if value.strip() else MISSING_VALUE
    if isinstance(value, (list, tuple)):
        joined = ', '.join(str(v) for v in value if v not in (None, ''))
        return joined or MISSING_VALUE
    return value


def format_date(value: Any) -> str:
    if not value:
        return MISSING_VALUE
    parsed = parse_backend_datetime(value)
    if parsed is None:
        return str(value)
    return parsed.date().isoformat()


def default_row(item: Dict[str, Any], index: int) -> List[Any]:
    """The 14-column farmer row used by CSV and Excel."""
    return [
        index + 1,
        item.get('name'),
        item.get('email'),
        item.get('phone'),
        item.get('county'),
        item.get('subCounty'),
        item.get('village'),
        item.get('farmingType'),
        item.get('totalLandSize'),
        item.get('organicExperience'),
        item.get('educationLevel'),
        item.get('certificationStatus'),
        format_date(item.get('registrationDate')),
        item.get('status'),
    ]


def default_pdf_row(item: Dict[str, Any], index: int) -> List[Any]:
    """The 8-column farmer row used by PDF."""
    return [
        index + 1,
        item.get('name'),
        item.get('email'),
        item.get('phone'),
        item.get('county'),
        item.get('farmingType'),
        item.get('certificationStatus') or item.get('status'),
        format_date(item.get('registrationDate')),
    ]


def build_rows(data: Sequence[Dict[str, Any]], headers: Sequence[str],
               mapping: RowMapping) -> List[List[Any]]:
    rows = []
    for index, item in enumerate(data):
        row = [display_value(value) for value in mapping(item, index)]
        # Short custom rows still line up with the header
        if len(row) < len(headers):
            row.extend([MISSING_VALUE] * (len(headers) - len(row)))
        rows.append(row)
    return rows


def _resolve_layout(custom_headers, custom_mapping, default_headers, default_mapping):
    headers = list(custom_headers) if custom_headers else list(default_headers)
    mapping = custom_mapping or default_mapping
    return headers, mapping


def default_export_filename(title: str, extension: str, today=None) -> str:
    """'Farmers Report' -> 'Farmers_Report_2024-03-01.csv'"""
    today = today or timezone.localdate()
    stem = '_'.join((title or DEFAULT_TITLE).split())
    return f"{stem}_{today.isoformat()}.{extension}"


def _banner_lines(title, subtitle, total, generated_at):
    generated_at = timezone.localtime(generated_at or timezone.now())
    return {
        'subtitle': subtitle or settings.EXPORT_SUBTITLE,
        'title': title or DEFAULT_TITLE,
        'generated': f"Generated on: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}",
        'total': f"Total Records: {total}",
    }


# =============================================================================
# CSV EXPORT
# =============================================================================

def export_to_csv(data, filename=None, title=DEFAULT_TITLE, subtitle=None,
                  custom_headers=None, custom_mapping=None, generated_at=None) -> ExportFile:
    """
    Banner lines, a blank line, the header line, then one fully quoted line
    per record.
    """
    headers, mapping = _resolve_layout(custom_headers, custom_mapping, DEFAULT_HEADERS, default_row)
    banner = _banner_lines(title, subtitle, len(data), generated_at)

    output = io.StringIO()
    for line in (banner['subtitle'], banner['title'], banner['generated'], banner['total'], ''):
        output.write(f"{line}\n")

    csv.writer(output, lineterminator='\n').writerow(headers)
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator='\n')
    writer.writerows(build_rows(data, headers, mapping))

    return ExportFile(
        filename=filename or default_export_filename(title, 'csv'),
        content_type='text/csv; charset=utf-8',
        content=output.getvalue().encode('utf-8'),
    )


# =============================================================================
# EXCEL EXPORT
# =============================================================================

def _excel_cell(value):
    if isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def export_to_excel(data, filename=None, title=DEFAULT_TITLE, subtitle=None,
                    custom_headers=None, custom_mapping=None, sheet_name='Data',
                    column_widths=None, generated_at=None) -> ExportFile:
    """
    Single-sheet workbook: title, subtitle and metadata on rows 1-3, the
    header on row 5 and records from row 6.
    """
    try:
        import openpyxl
        from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
        from openpyxl.utils import get_column_letter
    except ImportError:
        raise ExportError('Excel export not available. openpyxl not installed.', code='EXCEL_UNAVAILABLE')

    headers, mapping = _resolve_layout(custom_headers, custom_mapping, DEFAULT_HEADERS, default_row)
    if column_widths is None and not custom_headers:
        column_widths = EXCEL_COLUMN_WIDTHS
    banner = _banner_lines(title, subtitle, len(data), generated_at)

    try:
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = sheet_name

        # Styles
        header_font = Font(bold=True, color="1F2937")
        header_fill = PatternFill(start_color="CBDDE9", end_color="CBDDE9", fill_type="solid")
        thin_border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )

        ws['A1'] = banner['title']
        ws['A1'].font = Font(bold=True, size=14)
        ws['A2'] = banner['subtitle']
        ws['A2'].font = Font(italic=True, color="3C3C3C")
        ws['A3'] = banner['generated']
        ws['C3'] = banner['total']

        header_row = 5
        for col, header in enumerate(headers, 1):
            cell = ws.cell(row=header_row, column=col, value=header)
            cell.font = header_font
            cell.fill = header_fill
            cell.border = thin_border
            cell.alignment = Alignment(horizontal='center', vertical='center', wrap_text=True)

        for row_num, row in enumerate(build_rows(data, headers, mapping), header_row + 1):
            for col, value in enumerate(row, 1):
                cell = ws.cell(row=row_num, column=col, value=_excel_cell(value))
                cell.border = thin_border

        for col in range(1, len(headers) + 1):
            widths = column_widths or []
            width = widths[col - 1] if col <= len(widths) else EXCEL_DEFAULT_WIDTH
            ws.column_dimensions[get_column_letter(col)].width = width

        output = io.BytesIO()
        wb.save(output)
    except Exception as e:
        logger.error(f"Excel export failed for '{title}': {e}")
        raise ExportError(f'Excel export failed: {e}', code='EXCEL_RENDER_FAILED') from e

    return ExportFile(
        filename=filename or default_export_filename(title, 'xlsx'),
        content_type=EXCEL_CONTENT_TYPE,
        content=output.getvalue(),
    )


# =============================================================================
# PDF EXPORT
# =============================================================================

def load_logo(source):
    """
    Logo image for the PDF header, or None.

    source may be a filesystem path or an http(s) URL. The logo is
    decoration only, so any failure just leaves it out.
    """
    if not source:
        return None

    from reportlab.lib.utils import ImageReader

    try:
        source = str(source)
        if source.startswith(('http://', 'https://')):
            response = requests.get(source, timeout=5)
            response.raise_for_status()
            image = ImageReader(io.BytesIO(response.content))
        elif os.path.exists(source):
            image = ImageReader(source)
        else:
            return None
        image.getSize()
        return image
    except Exception as e:
        logger.warning(f"Export logo could not be loaded from {source}: {e}")
        return None


def export_to_pdf(data, filename=None, title=DEFAULT_TITLE, subtitle=None,
                  custom_headers=None, custom_mapping=None, logo=None,
                  column_widths_mm=None, generated_at=None) -> ExportFile:
    """
    A4 report with a branded header band on the first page, a striped table
    that repeats its header row on every page, and a footer with the page
    number on each page.
    """
    try:
        from reportlab.lib import colors
        from reportlab.lib.pagesizes import A4
        from reportlab.lib.styles import ParagraphStyle
        from reportlab.lib.units import mm
        from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
    except ImportError:
        raise ExportError('PDF export not available. reportlab not installed.', code='PDF_UNAVAILABLE')

    headers, mapping = _resolve_layout(custom_headers, custom_mapping, DEFAULT_PDF_HEADERS, default_pdf_row)
    if column_widths_mm is None and not custom_headers:
        column_widths_mm = PDF_COLUMN_WIDTHS_MM
    banner = _banner_lines(title, subtitle, len(data), generated_at)
    brand_name = settings.EXPORT_BRAND_NAME
    footer_text = settings.EXPORT_FOOTER_TEXT
    logo_image = load_logo(logo if logo is not None else settings.EXPORT_LOGO_PATH)

    page_width, page_height = A4
    side_margin = 20 * mm
    header_height = 60 * mm
    table_top = header_height + 45 * mm

    band_color = colors.HexColor('#CBDDE9')
    muted = colors.HexColor('#646464')

    def draw_footer(canvas, doc):
        canvas.saveState()
        canvas.setFont('Helvetica', 8)
        canvas.setFillColor(muted)
        canvas.drawCentredString(page_width / 2, 10 * mm, footer_text)
        canvas.drawRightString(page_width - side_margin, 10 * mm, f"Page {canvas.getPageNumber()}")
        canvas.restoreState()

    def draw_first_page(canvas, doc):
        canvas.saveState()

        # Header band
        canvas.setFillColor(band_color)
        canvas.rect(0, page_height - header_height, page_width, header_height, stroke=0, fill=1)

        if logo_image is not None:
            canvas.drawImage(logo_image, 20 * mm, page_height - 40 * mm,
                             width=28 * mm, height=28 * mm, mask='auto', preserveAspectRatio=True)

        canvas.setFont('Helvetica-Bold', 24)
        canvas.setFillColor(colors.HexColor('#1F3408'))
        canvas.drawString(55 * mm, page_height - 28 * mm, brand_name)

        canvas.setFont('Helvetica', 11)
        canvas.setFillColor(colors.HexColor('#3C3C3C'))
        canvas.drawString(55 * mm, page_height - 38 * mm, banner['subtitle'])

        canvas.setFont('Helvetica-Bold', 16)
        canvas.setFillColor(colors.black)
        canvas.drawString(side_margin, page_height - (header_height + 18 * mm), banner['title'])

        canvas.setFont('Helvetica', 10)
        canvas.setFillColor(muted)
        canvas.drawString(side_margin, page_height - (header_height + 28 * mm), banner['generated'])
        canvas.drawString(side_margin, page_height - (header_height + 34 * mm), banner['total'])

        # Divider
        canvas.setStrokeColor(colors.HexColor('#DCDCDC'))
        canvas.line(side_margin, page_height - (header_height + 38 * mm),
                    page_width - side_margin, page_height - (header_height + 38 * mm))

        canvas.restoreState()
        draw_footer(canvas, doc)

    head_style = ParagraphStyle(
        name='ExportHead', fontName='Helvetica-Bold', fontSize=9, leading=11,
        textColor=colors.HexColor('#1F2937'),
    )
    body_style = ParagraphStyle(name='ExportBody', fontName='Helvetica', fontSize=8, leading=10)

    frame_width = page_width - 2 * side_margin
    if column_widths_mm:
        widths = [w * mm for w in column_widths_mm[:len(headers)]]
        widths += [frame_width / len(headers)] * (len(headers) - len(widths))
    else:
        widths = [frame_width / len(headers)] * len(headers)
    scale = min(1.0, frame_width / sum(widths))
    widths = [w * scale for w in widths]

    # A table row cannot be split across pages, so no cell may outgrow a page
    max_cell_height = (page_height - 2 * side_margin) / 2

    def paragraph(text, style):
        return Paragraph(escape(text).replace('\n', '<br/>'), style)

    def cell(value, style, width):
        text = str(value)
        available = width - 6
        para = paragraph(text, style)
        if para.wrap(available, page_height)[1] <= max_cell_height:
            return para

        low, high = 0, len(text)
        while low < high:
            middle = (low + high + 1) // 2
            candidate = paragraph(text[:middle].rstrip() + '...', style)
            if candidate.wrap(available, page_height)[1] <= max_cell_height:
                low = middle
            else:
                high = middle - 1
        return paragraph(text[:low].rstrip() + '...', style)

    rows = build_rows(data, headers, mapping)
    table_data = [[cell(h, head_style, w) for h, w in zip(headers, widths)]]
    table_data += [[cell(v, body_style, w) for v, w in zip(row, widths)] for row in rows]

    try:
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=side_margin,
            rightMargin=side_margin,
            topMargin=side_margin,
            bottomMargin=side_margin,
            title=banner['title'],
            author=brand_name,
        )

        table = Table(table_data, colWidths=widths, repeatRows=1)
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), band_color),
            ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#F8FAFC')]),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('TOPPADDING', (0, 0), (-1, -1), 3),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 3),
            ('LEFTPADDING', (0, 0), (-1, -1), 3),
            ('RIGHTPADDING', (0, 0), (-1, -1), 3),
            ('LINEBELOW', (0, 0), (-1, 0), 0.5, colors.HexColor('#9CA3AF')),
        ]))

        # The first page's banner is drawn on the canvas above the table
        elements = [Spacer(1, table_top - side_margin), table]
        doc.build(elements, onFirstPage=draw_first_page, onLaterPages=draw_footer)
    except Exception as e:
        logger.error(f"PDF export failed for '{title}': {e}")
        raise ExportError(f'PDF export failed: {e}', code='PDF_RENDER_FAILED') from e

    return ExportFile(
        filename=filename or default_export_filename(title, 'pdf'),
        content_type='application/pdf',
        content=buffer.getvalue(),
    )


EXPORTERS = {
    'csv': export_to_csv,
    'excel': export_to_excel,
    'pdf': export_to_pdf,
}
